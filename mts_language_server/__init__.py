"""Language server for MapTool macro scripts."""

__version__ = "0.1.0"
