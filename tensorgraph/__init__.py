"""Four-dimensional tensors, computation-graph nodes, a network that evaluates them, and a demo command."""

__version__ = "0.1.0"
__all__ = ["tensor", "nodes", "network", "cli"]