"""Vector search relay: text query -> embedding -> MongoDB Atlas k-NN search."""

__version__ = "0.1.0"
