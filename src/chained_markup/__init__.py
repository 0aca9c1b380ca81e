"""Chained Markup.

Build markup trees with chained method calls: same-level calls return the
current element, descent calls return the new child, and ``up`` returns to
the parent with its original type.

Progressive API Disclosure:
- Level 1: Document and TagNode chaining, render()
- Level 2: BuilderConfig for validation and rendering options
- Level 3: Integration adapters for lxml, ElementTree and BeautifulSoup
"""

__version__ = "0.1.0"
__author__ = "Chained Markup Team"

from .shared.config import BuilderConfig, RenderConfig, TreeConfig
from .tree import ChildTagNode, Document, NoParentError, TagNode, TextNode

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Tree building
    "ChildTagNode",
    "Document",
    "NoParentError",
    "TagNode",
    "TextNode",

    # Configuration classes for advanced usage
    "BuilderConfig",
    "RenderConfig",
    "TreeConfig",
]
