"""Element and text nodes for chained markup building.

Every operation on an element returns a handle so calls can be chained:

    page = TagNode.detached("body")
    page.div().attr("class", "note").text("hello").up.img().attr("src", "a.png")

Same-level operations (``attr``, ``text``, ``apply``) return the element
itself. Descent operations (``child`` and the tag helpers) return a
``ChildTagNode`` whose type parameter is the type of the element it was
created from, and ``up`` on that child gives the parent back with exactly
that type. A type checker therefore follows a chain through any number of
descents and ascents, and rejects ``up`` on a root element, which has none.
"""

import io
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    Union,
)

from chained_markup.shared import (
    BuilderConfig,
    RenderConfig,
    TreeStatistics,
    get_logger,
)

N = TypeVar("N", bound="TagNode")
P = TypeVar("P")

_logger = get_logger(__name__, component="tree")


class NoParentError(AttributeError):
    """Raised when ascending from an element that was created without a parent."""


class Writer(Protocol):
    """Anything text can be written to, such as an open file or ``io.StringIO``."""

    def write(self, s: str) -> Any:
        ...


@dataclass(frozen=True)
class TextNode:
    """Literal text inside an element. Immutable and never extended."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Text value must be a string")

    def write(self, out: Writer, config: Optional[RenderConfig] = None) -> None:
        """Write the text verbatim."""
        self._write(out, config or RenderConfig(), 0)

    def render(self, config: Optional[RenderConfig] = None) -> str:
        """Return the text verbatim."""
        buffer = io.StringIO()
        self.write(buffer, config)
        return buffer.getvalue()

    def _write(self, out: Writer, config: RenderConfig, level: int) -> None:
        if config.is_pretty:
            out.write(" " * (config.indent or 0) * level)
        out.write(self.value)

    def __str__(self) -> str:
        return self.value


Node = Union["TagNode", TextNode]


@dataclass(eq=False, repr=False)
class TagNode:
    """A named element with attributes and an ordered list of children.

    A plain ``TagNode`` is a root: it was created without a parent and has no
    ``up``. Children created from it are ``ChildTagNode`` instances that
    remember it. Elements compare by identity.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    config: BuilderConfig = field(default_factory=BuilderConfig)

    def __post_init__(self) -> None:
        """Validate the element name."""
        if not isinstance(self.name, str):
            raise TypeError("Element name must be a string")
        if self.config.tree.validate_names and not self.name:
            raise ValueError("Element name cannot be empty")

    @staticmethod
    def detached(name: str, config: Optional[BuilderConfig] = None) -> "TagNode":
        """Create an element with no parent, to start a tree or to use on its own."""
        return TagNode(name, config=config or BuilderConfig())

    if not TYPE_CHECKING:
        # Only reached for attributes missing on the instance and class, so a
        # ChildTagNode's ``up`` property never gets here.
        def __getattr__(self, attribute):
            if attribute == "up":
                name = self.__dict__.get("name", "?")
                raise NoParentError(
                    f"<{name}> was created without a parent and has no parent to "
                    "return to"
                )
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {attribute!r}"
            )

    @property
    def depth(self) -> int:
        """Number of ancestors above this element (0 for a root)."""
        return 0

    # Same-level operations

    def attr(self: N, key: str, value: str) -> N:
        """Set an attribute, replacing any earlier value for the same key."""
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[key] = value
        return self

    def text(self: N, value: str) -> N:
        """Append a text leaf after the existing children."""
        self.children.append(TextNode(value))
        return self

    def apply(self: N, handler: Callable[[N], Any]) -> N:
        """Call ``handler`` with this element and return the element.

        Lets reusable building steps, such as adding a table row, be written
        as plain functions and dropped into a chain. Whatever the handler
        returns is ignored.
        """
        handler(self)
        return self

    # Descent operations

    def child(self: N, name: str) -> "ChildTagNode[N]":
        """Append a new child element and return it."""
        return ChildTagNode.of_parent(self, name)

    def div(self: N) -> "ChildTagNode[N]":
        return self.child("div")

    def span(self: N) -> "ChildTagNode[N]":
        return self.child("span")

    def p(self: N) -> "ChildTagNode[N]":
        return self.child("p")

    def a(self: N) -> "ChildTagNode[N]":
        return self.child("a")

    def img(self: N) -> "ChildTagNode[N]":
        return self.child("img")

    def ul(self: N) -> "ChildTagNode[N]":
        return self.child("ul")

    def li(self: N) -> "ChildTagNode[N]":
        return self.child("li")

    def table(self: N) -> "ChildTagNode[N]":
        return self.child("table")

    def tr(self: N) -> "ChildTagNode[N]":
        return self.child("tr")

    def th(self: N) -> "ChildTagNode[N]":
        return self.child("th")

    def td(self: N) -> "ChildTagNode[N]":
        return self.child("td")

    # Inspection

    def iter(self) -> Iterator["TagNode"]:
        """Iterate over this element and its descendant elements in document order."""
        stack: List[TagNode] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(
                reversed([c for c in element.children if isinstance(c, TagNode)])
            )

    def find(self, name: str) -> Optional["TagNode"]:
        """Find the first descendant element with a matching name."""
        for element in self.iter():
            if element is not self and element.name == name:
                return element
        return None

    def find_all(self, name: str) -> List["TagNode"]:
        """Find all descendant elements with a matching name."""
        return [e for e in self.iter() if e is not self and e.name == name]

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(key, default)

    def has_attribute(self, key: str) -> bool:
        """Check if element has specific attribute."""
        return key in self.attributes

    @property
    def text_content(self) -> str:
        """All text in this subtree, concatenated in document order."""
        parts = []
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, TextNode):
                parts.append(node.value)
            else:
                stack.extend(reversed(node.children))
        return "".join(parts)

    def statistics(self) -> TreeStatistics:
        """Count the elements, text leaves and attributes in this subtree."""
        return TreeStatistics.from_node(self)

    # Serialization

    def write(self, out: Writer, config: Optional[RenderConfig] = None) -> None:
        """Write the markup for this subtree to ``out``.

        Args:
            out: Destination with a ``write(str)`` method
            config: Render settings; defaults to the element's own configuration
        """
        self._write(out, config or self.config.render, 0)

    def render(self, config: Optional[RenderConfig] = None) -> str:
        """Return the markup for this subtree as a string."""
        buffer = io.StringIO()
        self.write(buffer, config)
        result = buffer.getvalue()
        _logger.debug(
            "Rendered element",
            extra={"element": self.name, "output_length": len(result)},
        )
        return result

    def _write(self, out: Writer, config: RenderConfig, level: int) -> None:
        # Iterative so depth is not limited by the recursion limit. Plain
        # strings on the stack are pending closing tags and newlines.
        stack: List[Tuple[Union[Node, str], int]] = [(self, level)]
        while stack:
            item, depth = stack.pop()
            if isinstance(item, str):
                out.write(item)
                continue
            if isinstance(item, TextNode):
                item._write(out, config, depth)
                continue

            pad = " " * config.indent * depth if config.indent is not None else ""
            out.write(f"{pad}<{item.name}")
            items = item.attributes.items()
            if config.sort_attributes:
                items = sorted(items)  # type: ignore[assignment]
            for key, value in items:
                out.write(f' {key}="{value}"')

            if not item.children:
                out.write("/>" if config.self_closing else f"></{item.name}>")
                continue

            out.write(">")
            if config.is_pretty:
                out.write(config.newline)
            stack.append((f"{pad}</{item.name}>", depth))
            for child in reversed(item.children):
                if config.is_pretty:
                    stack.append((config.newline, depth))
                stack.append((child, depth + 1))

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"attributes={self.attributes!r}, children={len(self.children)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation.

        Text leaves become plain strings in ``children``.
        """
        result = _element_dict(self)
        stack: List[Tuple[TagNode, Dict[str, Any]]] = [(self, result)]
        while stack:
            element, data = stack.pop()
            if not element.children:
                continue
            children: List[Any] = []
            for child in element.children:
                if isinstance(child, TextNode):
                    children.append(child.value)
                else:
                    child_data = _element_dict(child)
                    children.append(child_data)
                    stack.append((child, child_data))
            data["children"] = children
        return result

    @staticmethod
    def from_dict(
        data: Dict[str, Any], config: Optional[BuilderConfig] = None
    ) -> "TagNode":
        """Build a detached tree from the output of ``to_dict``."""
        if not isinstance(data, dict) or "name" not in data:
            raise ValueError("Element data must be an object with a 'name' key")
        root = TagNode.detached(data["name"], config)
        _populate(root, data)
        return root


def _element_dict(element: TagNode) -> Dict[str, Any]:
    return {"name": element.name, "attributes": dict(element.attributes)}


def _populate(root: TagNode, data: Dict[str, Any]) -> None:
    stack: List[Tuple[TagNode, Dict[str, Any]]] = [(root, data)]
    while stack:
        element, element_data = stack.pop()
        attributes = element_data.get("attributes", {})
        if not isinstance(attributes, dict):
            raise ValueError(f"Attributes of <{element.name}> must be an object")
        for key, value in attributes.items():
            element.attr(key, value)

        children = element_data.get("children", [])
        if not isinstance(children, list):
            raise ValueError(f"Children of <{element.name}> must be a list")
        for item in children:
            if isinstance(item, str):
                element.text(item)
            elif isinstance(item, dict) and "name" in item:
                # Created now so siblings keep their order; filled in later.
                stack.append((element.child(item["name"]), item))
            else:
                raise ValueError(
                    f"Children of <{element.name}> must be strings or element objects"
                )


class ChildTagNode(TagNode, Generic[P]):
    """An element created under a parent of type ``P``.

    ``up`` returns that parent with its original type so a chain can carry on
    where it was before descending.
    """

    def __init__(self, parent: P, name: str, config: BuilderConfig) -> None:
        super().__init__(name, config=config)
        self._parent = parent
        self._depth = getattr(parent, "depth", 0) + 1

    @staticmethod
    def of_parent(parent: N, name: str) -> "ChildTagNode[N]":
        """Create an element, append it to ``parent``'s children and return it.

        Raises:
            TypeError: If ``parent`` is not an element
            ValueError: If the name is empty or the configured depth limit
                would be exceeded
        """
        if not isinstance(parent, TagNode):
            raise TypeError("Parent must be a TagNode instance")

        max_depth = parent.config.tree.max_depth
        if max_depth is not None and parent.depth + 1 > max_depth:
            raise ValueError(
                f"Cannot add <{name}> under <{parent.name}>: "
                f"maximum tree depth is {max_depth}"
            )

        node: ChildTagNode[N] = ChildTagNode(parent, name, parent.config)
        parent.children.append(node)
        if _logger.is_debug_enabled():
            _logger.debug(
                "Created child element",
                extra={
                    "element": name,
                    "parent_element": parent.name,
                    "depth": node.depth,
                },
            )
        return node

    @property
    def up(self) -> P:
        """The element this one was created under."""
        return self._parent

    @property
    def depth(self) -> int:
        return self._depth
