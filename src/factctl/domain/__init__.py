"""Domain layer — lifecycle states and error types.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
