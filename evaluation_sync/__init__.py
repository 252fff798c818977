"""Evaluation Sync: keeps a local evaluation data set in step with its remote copy."""

__version__ = "0.1.0"
