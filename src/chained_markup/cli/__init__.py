"""Command-line interface module for chained markup building.

This module provides the ``chained-markup`` tool for rendering the example
page and element trees stored as JSON.
"""

from .main import main

__all__ = ["main"]
