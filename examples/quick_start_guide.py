#!/usr/bin/env python3
"""
Quick Start Guide for Chained Markup.

Shows chained building with typed ascent, reusable row handlers, rendering
options and conversion to lxml.
"""

import lxml.etree

from chained_markup import BuilderConfig, Document, TagNode
from chained_markup.api import get_adapter


def add_row(*cells: str):
    """Return a handler that appends a table row with the given cells."""
    def handler(table: TagNode) -> None:
        row = table.tr()
        for cell in cells:
            row.td().text(cell)
    return handler


def quick_start_example() -> None:
    """Quick start example showing basic usage."""

    print("QUICK START - Chained Markup")
    print("=" * 45)

    # Step 1: Build a page with one chain
    print("\nStep 1: Building a page")
    print("-" * 30)

    doc = Document().title("Inventory")
    (doc.body
        .div().attr("class", "banner").text("Stock levels").up
        .table().attr("border", "1")
            .apply(add_row("apples", "12"))
            .apply(add_row("pears", "7"))
        .up
        .p().text("Updated daily").up)

    print(doc.render())

    # Step 2: Pretty printing
    print("\nStep 2: Indented output")
    print("-" * 30)

    print(doc.body.render(BuilderConfig.pretty().render))

    # Step 3: Inspecting the tree
    print("\nStep 3: Statistics")
    print("-" * 30)

    stats = doc.statistics()
    print(f"Elements: {stats.element_count}, depth: {stats.max_depth}")
    print(f"Cells: {[td.text_content for td in doc.find_all('td')]}")

    # Step 4: Handing the tree to lxml
    print("\nStep 4: lxml conversion")
    print("-" * 30)

    adapter = get_adapter("lxml", correlation_id=doc.correlation_id)
    if adapter is not None:
        result = adapter.to_target(doc.body)
        if result.success:
            print(lxml.etree.tostring(result.converted_data, pretty_print=True, encoding="unicode"))
        else:
            print(f"Conversion failed: {result.errors}")


if __name__ == "__main__":
    quick_start_example()
