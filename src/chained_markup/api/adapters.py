"""Integration adapters for exchanging trees with popular XML/HTML libraries.

This module provides bidirectional conversion between ``TagNode`` trees and
lxml, the standard library ElementTree and BeautifulSoup. Conversions never
raise: failures are reported in the returned ``ConversionResult``.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Type

from chained_markup.shared import (
    BuilderConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    get_logger,
)
from chained_markup.tree.node import TagNode, TextNode


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # ElementTree-style APIs (lxml, xml.etree)
    HTML_LIBRARY = auto()    # HTML document models (BeautifulSoup)


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()      # TagNode to library object
    FROM_TARGET = auto()    # Library object to TagNode


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    direction: ConversionDirection
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses implement the two conversions; the base class times them and
    turns any exception into a failed ``ConversionResult``.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[BuilderConfig] = None,
    ) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Configuration given to trees built by ``from_target``
        """
        self.correlation_id = correlation_id
        self.config = config or BuilderConfig()
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _convert_to(self, node: TagNode) -> Any:
        """Convert an element tree to the target library's representation."""

    @abstractmethod
    def _convert_from(self, target_data: Any) -> TagNode:
        """Convert the target library's representation to a detached element tree."""

    def to_target(self, node: TagNode) -> ConversionResult:
        """Convert an element tree to the target format.

        Args:
            node: Root of the subtree to convert

        Returns:
            ConversionResult containing the library object
        """
        if not isinstance(node, TagNode):
            return self._create_error_result(
                "Source data is not a TagNode", node, ConversionDirection.TO_TARGET
            )
        return self._run(self._convert_to, node, ConversionDirection.TO_TARGET)

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert the target format to a detached element tree.

        Args:
            target_data: Object from the target library

        Returns:
            ConversionResult containing the root TagNode
        """
        return self._run(self._convert_from, target_data, ConversionDirection.FROM_TARGET)

    def _run(
        self,
        convert: Callable[[Any], Any],
        data: Any,
        direction: ConversionDirection,
    ) -> ConversionResult:
        start_time = time.perf_counter()
        try:
            converted = convert(data)
        except Exception as e:
            self._logger.warning(
                f"Conversion failed: {e}",
                extra={"direction": direction.name, "adapter": self.metadata.name},
            )
            return self._create_error_result(
                f"Failed to convert with {self.metadata.name}: {e}",
                data,
                direction,
                (time.perf_counter() - start_time) * 1000,
            )

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        metadata: Dict[str, Any] = {"adapter": self.metadata.name}
        if isinstance(converted, TagNode):
            metadata["element_count"] = converted.statistics().element_count
        elif isinstance(data, TagNode):
            metadata["element_count"] = data.statistics().element_count
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=data,
            direction=direction,
            conversion_time_ms=elapsed_ms,
            metadata=metadata,
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        direction: ConversionDirection,
        conversion_time_ms: float = 0.0,
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            direction=direction,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


def _to_etree(node: TagNode, etree: Any) -> Any:
    """Build an ElementTree-API element, folding text leaves into text/tail."""
    element = etree.Element(node.name, dict(node.attributes))
    last = None
    for child in node.children:
        if isinstance(child, TextNode):
            if last is None:
                element.text = (element.text or "") + child.value
            else:
                last.tail = (last.tail or "") + child.value
        else:
            last = _to_etree(child, etree)
            element.append(last)
    return element


def _fill_from_etree(source: Any, target: TagNode) -> None:
    for key, value in source.attrib.items():
        target.attr(key, value)
    if source.text:
        target.text(source.text)
    for sub in source:
        # lxml comments and processing instructions have a callable tag
        if isinstance(sub.tag, str):
            _fill_from_etree(sub, target.child(sub.tag))
        if sub.tail:
            target.text(sub.tail)


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Bidirectional conversion between TagNode and lxml.etree",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _convert_to(self, node: TagNode) -> Any:
        import lxml.etree

        return _to_etree(node, lxml.etree)

    def _convert_from(self, target_data: Any) -> TagNode:
        if hasattr(target_data, "getroot"):
            target_data = target_data.getroot()
        if not isinstance(getattr(target_data, "tag", None), str):
            raise TypeError("Target data is not an lxml element")
        root = TagNode.detached(target_data.tag, self.config)
        _fill_from_etree(target_data, root)
        return root


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between TagNode and ElementTree",
        )

    def is_available(self) -> bool:
        return True

    def _convert_to(self, node: TagNode) -> Any:
        import xml.etree.ElementTree as ET

        return _to_etree(node, ET)

    def _convert_from(self, target_data: Any) -> TagNode:
        import xml.etree.ElementTree as ET

        if isinstance(target_data, ET.ElementTree):
            target_data = target_data.getroot()
        if not isinstance(target_data, ET.Element):
            raise TypeError("Target data is not an ElementTree element")
        root = TagNode.detached(target_data.tag, self.config)
        _fill_from_etree(target_data, root)
        return root


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with BeautifulSoup."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            version="1.0.0",
            adapter_type=AdapterType.HTML_LIBRARY,
            target_library="beautifulsoup4",
            description="Bidirectional conversion between TagNode and BeautifulSoup",
        )

    def is_available(self) -> bool:
        try:
            import bs4  # noqa: F401
            return True
        except ImportError:
            return False

    def _convert_to(self, node: TagNode) -> Any:
        from bs4 import BeautifulSoup

        soup = BeautifulSoup("", "html.parser")
        return self._build_tag(soup, node)

    def _build_tag(self, soup: Any, node: TagNode) -> Any:
        tag = soup.new_tag(node.name, attrs=dict(node.attributes))
        for child in node.children:
            if isinstance(child, TextNode):
                tag.append(soup.new_string(child.value))
            else:
                tag.append(self._build_tag(soup, child))
        return tag

    def _convert_from(self, target_data: Any) -> TagNode:
        from bs4 import BeautifulSoup, Tag

        if isinstance(target_data, BeautifulSoup):
            target_data = target_data.find(True)
        if not isinstance(target_data, Tag):
            raise TypeError("Target data is not a BeautifulSoup tag")
        root = TagNode.detached(target_data.name, self.config)
        self._fill_from_tag(target_data, root)
        return root

    def _fill_from_tag(self, source: Any, target: TagNode) -> None:
        from bs4 import NavigableString, Tag
        from bs4.element import PreformattedString

        for key, value in source.attrs.items():
            # Multi-valued attributes such as class come back as lists
            if isinstance(value, list):
                value = " ".join(value)
            target.attr(key, value)
        for item in source.children:
            if isinstance(item, Tag):
                self._fill_from_tag(item, target.child(item.name))
            elif isinstance(item, NavigableString) and not isinstance(
                item, PreformattedString
            ):
                target.text(str(item))


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        """Initialize the adapter registry."""
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            metadata = adapter_class().metadata
            self._adapters[metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None,
        config: Optional[BuilderConfig] = None,
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Returns:
            Adapter instance if registered and its library is available,
            None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id, config)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata for all registered adapters whose library is available."""
        with self._lock:
            classes = list(self._adapters.values())
        available = []
        for adapter_class in classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None,
    config: Optional[BuilderConfig] = None,
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id, config)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


for _adapter_class in (LxmlAdapter, ElementTreeAdapter, BeautifulSoupAdapter):
    register_adapter(_adapter_class)
