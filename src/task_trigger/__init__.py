"""Group workspace tasks into a source/folder tree and trigger them."""

__version__ = "0.1.0"
