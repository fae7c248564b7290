# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Bidirectional conversion between native Delta ops and Document

CONVERSION ARCHITECTURE:
=======================

Native Delta (editor runtime format):
[
  {"insert": "Hi "},
  {"insert": "there", "attributes": {"bold": true}},
  {"insert": "\\n"},
  {"insert": {"image": "http://x/y.png"}}
]

Document (persistence format):
[
  {"type": "paragraph", "children": [
    {"type": "text", "text": "Hi "},
    {"type": "text", "text": "there", "bold": true}]},
  {"type": "paragraph", "children": [
    {"type": "image", "src": "http://x/y.png", "alt": ""}]}
]

- delta_to_document(): native → Document (total, never raises)
- document_to_delta(): Document → native (validates at the boundary)

Attribute names map 1:1 except strike ↔ strikethrough. Headings travel as a
"header" attribute, either on the text ops or on the newline closing the line.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .document import (
    Block,
    Document,
    DocumentValidationError,
    HeadingBlock,
    ImageNode,
    ParagraphBlock,
    TextNode,
    UnsupportedBlockError,
    MAX_HEADING_LEVEL,
)

logger = logging.getLogger(__name__)

NEWLINE = "\n"

# Delta attribute name -> TextNode flag name
ATTRIBUTE_TO_FLAG = {
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "strike": "strikethrough",
    "code": "code",
}

FLAG_TO_ATTRIBUTE = {flag: attribute for attribute, flag in ATTRIBUTE_TO_FLAG.items()}


def _header_level(attributes: Dict[str, Any]) -> Optional[int]:
    level = attributes.get("header")
    if isinstance(level, bool) or not isinstance(level, int):
        return None
    if not 1 <= level <= MAX_HEADING_LEVEL:
        return None
    return level


def _as_heading(block: Block, level: int) -> Block:
    if isinstance(block, HeadingBlock):
        block.level = level
        return block
    if all(isinstance(child, TextNode) for child in block.children):
        return HeadingBlock(list(block.children), level=level)
    return block


def delta_to_document(delta: Union[List[Dict[str, Any]], Dict[str, Any], None]) -> Document:
    """
    Fold native Delta ops into a Document

    Args:
        delta: List of insert ops, or a mapping holding them under "ops"

    Returns:
        Document built from the ops. Empty blocks are never emitted.
    """
    if isinstance(delta, dict):
        delta = delta.get("ops")
    if not isinstance(delta, list):
        return Document([])

    blocks: List[Block] = []
    current: Optional[Block] = None

    def close_line(attributes: Dict[str, Any]) -> None:
        nonlocal current
        if current is None:
            return
        level = _header_level(attributes)
        if level is not None:
            current = _as_heading(current, level)
        blocks.append(current)
        current = None

    for op in delta:
        if not isinstance(op, dict) or "insert" not in op:
            continue

        content = op["insert"]
        attributes = op.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}

        if isinstance(content, str):
            # Multi-line strings are split; each newline closes the line
            lines = content.split(NEWLINE)
            for index, line in enumerate(lines):
                if index > 0:
                    close_line(attributes)
                if not line:
                    continue
                if current is None:
                    current = ParagraphBlock()
                flags = {
                    flag: True
                    for attribute, flag in ATTRIBUTE_TO_FLAG.items()
                    if attributes.get(attribute)
                }
                current.children.append(TextNode(line, **flags))
                level = _header_level(attributes)
                if level is not None:
                    current = _as_heading(current, level)
        elif isinstance(content, dict):
            source = content.get("image")
            if source and isinstance(source, str):
                blocks.append(ParagraphBlock([ImageNode(source, "")]))
            else:
                logger.debug(f"Skipping unsupported embed: {sorted(content)}")

    if current is not None:
        blocks.append(current)

    return Document(blocks)


def document_to_delta(document: Union[Document, List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Expand a Document into native Delta ops

    A bare newline separates blocks; none follows the last one.

    Raises:
        DocumentValidationError: If a heading holds anything but text, or a
            text node holds a newline
        UnsupportedBlockError: If a block is neither paragraph nor heading
    """
    document = Document.from_json(document)
    ops: List[Dict[str, Any]] = []

    for index, block in enumerate(document.blocks):
        if index > 0:
            ops.append({"insert": NEWLINE})

        for child in getattr(block, "children", []):
            if isinstance(child, TextNode) and NEWLINE in child.text:
                raise DocumentValidationError(
                    f"Text node in block {index} holds a newline; split it into blocks"
                )

        if isinstance(block, ParagraphBlock):
            for child in block.children:
                if isinstance(child, TextNode):
                    op: Dict[str, Any] = {"insert": child.text}
                    attributes = {
                        FLAG_TO_ATTRIBUTE[flag]: True for flag in child.flags()
                    }
                    if attributes:
                        op["attributes"] = attributes
                    ops.append(op)
                elif isinstance(child, ImageNode):
                    # alt has no native form and does not survive a round trip
                    ops.append({"insert": {"image": child.src}})
                else:
                    raise DocumentValidationError(
                        f"Paragraph {index} holds unsupported node {type(child).__name__}"
                    )
        elif isinstance(block, HeadingBlock):
            level = block.level or 1
            for child in block.children:
                if not isinstance(child, TextNode):
                    raise DocumentValidationError(
                        f"Heading {index} may only contain text nodes"
                    )
                attributes = {FLAG_TO_ATTRIBUTE[flag]: True for flag in child.flags()}
                attributes["header"] = level
                ops.append({"insert": child.text, "attributes": attributes})
        else:
            raise UnsupportedBlockError(
                f"Block {index} has unsupported type {type(block).__name__}"
            )

    return ops
