"""Result objects and diagnostic types for chained markup building.

This module defines the diagnostic entries reported by adapters and the
statistics summarising a built tree.
"""

import time
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from chained_markup.tree.node import TagNode


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class TreeStatistics:
    """Size and shape of a built element subtree."""

    element_count: int = 0
    text_count: int = 0
    attribute_count: int = 0
    max_depth: int = 0
    text_length: int = 0

    @classmethod
    def from_node(cls, node: "TagNode") -> "TreeStatistics":
        """Collect statistics for ``node`` and everything below it.

        Depths are relative to ``node``, so a lone element has ``max_depth`` 0.
        """
        from chained_markup.tree.node import TextNode

        stats = cls()
        base_depth = node.depth
        for element in node.iter():
            stats.element_count += 1
            stats.attribute_count += len(element.attributes)
            stats.max_depth = max(stats.max_depth, element.depth - base_depth)
            for child in element.children:
                if isinstance(child, TextNode):
                    stats.text_count += 1
                    stats.text_length += len(child.value)
        return stats

    @property
    def average_attributes(self) -> float:
        """Average number of attributes per element."""
        if self.element_count == 0:
            return 0.0
        return self.attribute_count / self.element_count

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to a JSON-friendly dictionary."""
        return asdict(self)
