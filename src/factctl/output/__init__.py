"""Output layer: Rich rendering, JSON formatting, and report sinks."""
