"""Periodic host resource sampler writing to a document store."""

__version__ = "0.1.0"
