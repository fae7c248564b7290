# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from quill_loro.model.document import Document, HeadingBlock, ImageNode, ParagraphBlock, TextNode
from quill_loro.model.html import document_to_html


def test_formatting_tags_are_nested():
    document = Document([ParagraphBlock([TextNode("a<b", bold=True, italic=True)])])

    assert document_to_html(document) == "<p><strong><em>a&lt;b</em></strong></p>"


def test_all_flags():
    node = TextNode("x", bold=True, italic=True, underline=True, strikethrough=True, code=True)

    assert document_to_html(Document([ParagraphBlock([node])])) == (
        "<p><strong><em><u><s><code>x</code></s></u></em></strong></p>"
    )


def test_heading_and_empty_paragraph():
    document = Document([HeadingBlock([TextNode("T")], level=2), ParagraphBlock([])])

    assert document_to_html(document) == "<h2>T</h2><p><br></p>"


def test_image_attributes_are_escaped():
    document = [{"type": "paragraph", "children": [
        {"type": "image", "src": "http://x/y.png?a=1&b=2", "alt": 'say "hi"'},
    ]}]

    assert document_to_html(document) == (
        '<p><img src="http://x/y.png?a=1&amp;b=2" alt="say &quot;hi&quot;"></p>'
    )
