"""HTML document root for chained markup building."""

import uuid
from typing import Any, Dict, Optional, TypeVar

from chained_markup.shared import BuilderConfig, get_logger
from chained_markup.tree.node import ChildTagNode, TagNode

D = TypeVar("D", bound="Document")


class Document(TagNode):
    """Root ``<html>`` element with ``head`` and ``body`` accessors.

    The sections are created on first access and the same element is returned
    afterwards, so chains can start from ``doc.head`` or ``doc.body`` any
    number of times. Sections appear in the order they were first accessed.
    A document is a root and has no ``up``.

    Example:
        >>> doc = Document()
        >>> doc.body.div().attr("style", "bold").text("hi").up.up is doc
        True
        >>> doc.body.render()
        '<body><div style="bold">hi</div></body>'
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__("html", config=config or BuilderConfig())
        self._sections: Dict[str, ChildTagNode[Any]] = {}

        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = uuid.uuid4().hex[:12]
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, "document")
        self._logger.debug("Created document")

    def _section(self: D, name: str) -> ChildTagNode[D]:
        section = self._sections.get(name)
        if section is None:
            section = ChildTagNode.of_parent(self, name)
            self._sections[name] = section
            self._logger.debug("Created document section", extra={"section": name})
        return section

    @property
    def head(self: D) -> ChildTagNode[D]:
        """The ``<head>`` element, created on first access."""
        return self._section("head")

    @property
    def body(self: D) -> ChildTagNode[D]:
        """The ``<body>`` element, created on first access."""
        return self._section("body")

    def title(self: D, value: str) -> D:
        """Add a ``<title>`` to the head and return the document."""
        self.head.child("title").text(value)
        return self
