"""Tests for integration adapters."""

import xml.etree.ElementTree as ET

import lxml.etree
import pytest
from bs4 import BeautifulSoup

from chained_markup.api import (
    AdapterType,
    BeautifulSoupAdapter,
    ConversionDirection,
    ElementTreeAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
)
from chained_markup.shared import BuilderConfig, DiagnosticSeverity
from chained_markup.tree import TagNode


@pytest.fixture
def mixed_tree() -> TagNode:
    """A paragraph mixing text and child elements."""
    return (TagNode.detached("p").attr("class", "note")
        .text("a")
        .child("b").text("bold").up
        .text("c")
        .child("i").text("it").up)


class TestLxmlAdapter:
    """Test conversion with lxml."""

    def test_metadata(self) -> None:
        """Test adapter metadata."""
        adapter = LxmlAdapter()

        assert adapter.metadata.name == "lxml"
        assert adapter.metadata.adapter_type is AdapterType.XML_LIBRARY
        assert adapter.is_available()

    def test_to_target_serializes_like_render(self, mixed_tree: TagNode) -> None:
        """Test the lxml tree serializes to the same markup."""
        result = LxmlAdapter().to_target(mixed_tree)

        assert result.success
        assert result.direction is ConversionDirection.TO_TARGET
        assert result.metadata["element_count"] == 3
        element = result.converted_data
        assert element.text == "a"
        assert element[0].tail == "c"
        assert lxml.etree.tostring(element, encoding="unicode") == mixed_tree.render()

    def test_to_target_invalid_tag_fails_gracefully(self) -> None:
        """Test names lxml rejects produce a failed result instead of raising."""
        result = LxmlAdapter(correlation_id="req-1").to_target(TagNode.detached("bad name"))

        assert not result.success
        assert result.converted_data is None
        assert "Failed to convert with lxml" in result.errors[0]
        assert result.diagnostics[0].severity is DiagnosticSeverity.ERROR
        assert result.diagnostics[0].correlation_id == "req-1"

    def test_to_target_rejects_non_element(self) -> None:
        """Test only TagNode trees can be converted."""
        result = LxmlAdapter().to_target("<p/>")  # type: ignore[arg-type]

        assert not result.success
        assert result.errors == ["Source data is not a TagNode"]

    def test_from_target_builds_detached_tree(self) -> None:
        """Test an lxml element becomes an equivalent detached TagNode tree."""
        source = lxml.etree.fromstring('<p class="x">a<b>bold</b>c<!--note--></p>')

        result = LxmlAdapter().from_target(source)

        assert result.success
        node = result.converted_data
        assert isinstance(node, TagNode)
        assert not hasattr(node, "up")
        assert node.render() == '<p class="x">a<b>bold</b>c</p>'
        assert node.find("b").up is node  # type: ignore[union-attr]

    def test_from_target_accepts_element_tree(self) -> None:
        """Test whole lxml documents are converted from their root."""
        source = lxml.etree.ElementTree(lxml.etree.fromstring("<root><leaf/></root>"))

        result = LxmlAdapter().from_target(source)

        assert result.success
        assert result.converted_data.render() == "<root><leaf/></root>"

    def test_from_target_uses_adapter_config(self) -> None:
        """Test converted trees carry the adapter configuration."""
        config = BuilderConfig.pretty()

        result = LxmlAdapter(config=config).from_target(lxml.etree.fromstring("<a/>"))

        assert result.converted_data.config is config

    def test_from_target_rejects_other_data(self) -> None:
        """Test non-elements produce a failed result."""
        result = LxmlAdapter().from_target(42)

        assert not result.success
        assert result.direction is ConversionDirection.FROM_TARGET
        assert "not an lxml element" in result.errors[0]


class TestElementTreeAdapter:
    """Test conversion with the standard library ElementTree."""

    def test_to_target_maps_text_and_tail(self, mixed_tree: TagNode) -> None:
        """Test text leaves become text and tail values."""
        result = ElementTreeAdapter().to_target(mixed_tree)

        assert result.success
        element = result.converted_data
        assert element.tag == "p"
        assert element.get("class") == "note"
        assert element.text == "a"
        assert [child.tag for child in element] == ["b", "i"]
        assert element[0].text == "bold"
        assert element[0].tail == "c"
        assert element[1].tail is None
        assert ET.tostring(element, encoding="unicode") == mixed_tree.render()

    def test_roundtrip_preserves_markup(self, mixed_tree: TagNode) -> None:
        """Test converting to ElementTree and back keeps the markup."""
        adapter = ElementTreeAdapter()

        element = adapter.to_target(mixed_tree).converted_data
        restored = adapter.from_target(element).converted_data

        assert restored.render() == mixed_tree.render()

    def test_from_target_rejects_other_data(self) -> None:
        """Test non-elements produce a failed result."""
        result = ElementTreeAdapter().from_target({"tag": "p"})

        assert not result.success


class TestBeautifulSoupAdapter:
    """Test conversion with BeautifulSoup."""

    def test_to_target_builds_tag(self, mixed_tree: TagNode) -> None:
        """Test the soup tag renders the same markup."""
        result = BeautifulSoupAdapter().to_target(mixed_tree)

        assert result.success
        assert result.metadata["adapter"] == "beautifulsoup"
        assert str(result.converted_data) == mixed_tree.render()

    def test_from_target_joins_multi_valued_attributes(self) -> None:
        """Test list-valued attributes such as class become one string."""
        soup = BeautifulSoup(
            '<div class="a b"><span>hi</span> there<!-- skip --></div>', "html.parser"
        )

        result = BeautifulSoupAdapter().from_target(soup)

        assert result.success
        node = result.converted_data
        assert node.get_attribute("class") == "a b"
        assert node.render() == '<div class="a b"><span>hi</span> there</div>'

    def test_from_target_rejects_other_data(self) -> None:
        """Test non-tags produce a failed result."""
        result = BeautifulSoupAdapter().from_target("<div/>")

        assert not result.success
        assert "not a BeautifulSoup tag" in result.errors[0]


class TestAdapterRegistry:
    """Test the global adapter registry."""

    def test_get_registered_adapter(self) -> None:
        """Test adapters are looked up by name."""
        adapter = get_adapter("lxml", correlation_id="abc")

        assert isinstance(adapter, LxmlAdapter)
        assert adapter.correlation_id == "abc"

    def test_get_unknown_adapter(self) -> None:
        """Test unknown names return None."""
        assert get_adapter("pandas") is None

    def test_list_available_adapters(self) -> None:
        """Test all bundled adapters are available."""
        names = {metadata.name for metadata in list_available_adapters()}

        assert names == {"lxml", "elementtree", "beautifulsoup"}
