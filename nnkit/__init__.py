"""Neural network graph IR, shape inference and memory scheduling."""

__version__ = "0.1.0"