# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""Render a Document as editor-style HTML"""

from html import escape
from typing import Any, Dict, List, Union

from .document import Document, HeadingBlock, ImageNode, TextNode

# Applied innermost first
FLAG_TAGS = (
    ("code", "code"),
    ("strikethrough", "s"),
    ("underline", "u"),
    ("italic", "em"),
    ("bold", "strong"),
)


def _render_text(node: TextNode) -> str:
    html = escape(node.text, quote=False)
    for flag, tag in FLAG_TAGS:
        if getattr(node, flag):
            html = f"<{tag}>{html}</{tag}>"
    return html


def _render_image(node: ImageNode) -> str:
    return f'<img src="{escape(node.src)}" alt="{escape(node.alt)}">'


def document_to_html(document: Union[Document, List[Dict[str, Any]]]) -> str:
    """
    Render a Document to HTML

    Paragraphs become <p>, headings <h1>..<h6>. An empty block renders as a
    line break so it keeps its height, the way the editor shows it.
    """
    document = Document.from_json(document)
    parts = []
    for block in document.blocks:
        tag = f"h{block.level}" if isinstance(block, HeadingBlock) else "p"
        inner = "".join(
            _render_text(child) if isinstance(child, TextNode) else _render_image(child)
            for child in block.children
        )
        parts.append(f"<{tag}>{inner or '<br>'}</{tag}>")
    return "".join(parts)
