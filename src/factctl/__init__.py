"""factctl: scheduled command invocation for random facts."""

__version__ = "0.1.0"
