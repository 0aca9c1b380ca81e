"""Chained tree building for markup documents.

Key Components:
    TagNode: Root-capable element with chained same-level and descent operations
    ChildTagNode: Element that remembers its parent and returns it from ``up``
    TextNode: Immutable text leaf
    Document: ``<html>`` root with ``head`` and ``body`` accessors
"""

from .node import (
    ChildTagNode,
    Node,
    NoParentError,
    TagNode,
    TextNode,
    Writer,
)
from .document import Document

__all__ = [
    "ChildTagNode",
    "Document",
    "Node",
    "NoParentError",
    "TagNode",
    "TextNode",
    "Writer",
]
