"""Syntax trees, symbol tables, type checks and assembly generators for SPL and ExpL on the XSM machine."""

__version__ = "0.1.0"