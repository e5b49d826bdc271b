"""Service layer — commands, the invoker, and the result contract.

Services may import from domain and infrastructure layers.
They must never import from commands, output, or config.
"""
