from .parser import MTSParser, MTSSyntaxError
from .transformer import MTSTransformer

"""Parsing module for MapTool macro scripts."""


__all__ = ["MTSParser", "MTSSyntaxError", "MTSTransformer"]
