# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Document: structured storage format for rich text

This module defines the persisted representation of post content. The editor
never works on it directly: an editing session keeps the native Delta state
and folds it into a Document whenever the content is read.

PERSISTED SHAPE:
===============

[
  {
    "type": "paragraph",
    "children": [
      {"type": "text", "text": "Hello ", "bold": true},
      {"type": "text", "text": "World"}
    ]
  },
  {
    "type": "heading",
    "level": 2,
    "children": [{"type": "text", "text": "Title"}]
  },
  {
    "type": "paragraph",
    "children": [{"type": "image", "src": "http://x/y.png", "alt": ""}]
  }
]

Formatting flags are only written when true. A missing or null flag reads
back as false. Text nodes never hold a newline: text read with one is split
and each line continues in a block of its own.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Union

TEXT_FLAGS = ("bold", "italic", "underline", "strikethrough", "code")

MAX_HEADING_LEVEL = 6

NEWLINE = "\n"


class DocumentValidationError(ValueError):
    """Raised when persisted content does not describe a valid Document"""


class UnsupportedBlockError(DocumentValidationError):
    """Raised for block types the content model does not handle yet"""


@dataclass
class TextNode:
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False

    def flags(self) -> Dict[str, bool]:
        """Return only the flags that are set"""
        return {name: True for name in TEXT_FLAGS if getattr(self, name)}

    def to_json(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text, **self.flags()}


@dataclass
class ImageNode:
    src: str
    alt: str = ""

    def to_json(self) -> Dict[str, Any]:
        return {"type": "image", "src": self.src, "alt": self.alt}


InlineNode = Union[TextNode, ImageNode]


@dataclass
class ParagraphBlock:
    children: List[InlineNode] = field(default_factory=list)

    type = "paragraph"

    def to_json(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "children": [child.to_json() for child in self.children],
        }


@dataclass
class HeadingBlock:
    children: List[TextNode] = field(default_factory=list)
    level: int = 1

    type = "heading"

    def to_json(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "level": self.level,
            "children": [child.to_json() for child in self.children],
        }


Block = Union[ParagraphBlock, HeadingBlock]


@dataclass
class Document:
    """Ordered blocks of inline nodes"""

    blocks: List[Block] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Document":
        """A document holding a single empty paragraph"""
        return cls([ParagraphBlock()])

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def to_json(self) -> List[Dict[str, Any]]:
        return [block.to_json() for block in self.blocks]

    @classmethod
    def from_json(cls, data: Any) -> "Document":
        """
        Build a Document from its persisted JSON form

        Args:
            data: List of block dictionaries (already parsed)

        Returns:
            Document instance

        Raises:
            DocumentValidationError: If a block or inline node is malformed
            UnsupportedBlockError: If a block type is not paragraph or heading
        """
        if isinstance(data, Document):
            return data
        if not isinstance(data, list):
            raise DocumentValidationError(
                f"Document must be a list of blocks, got {type(data).__name__}"
            )
        blocks: List[Block] = []
        for index, block in enumerate(data):
            blocks.extend(split_block_lines(_parse_block(block, index)))
        return cls(blocks)

    def plain_text(self) -> str:
        lines = []
        for block in self.blocks:
            lines.append("".join(
                child.text for child in block.children if isinstance(child, TextNode)
            ))
        return "\n".join(lines)


def _parse_block(data: Any, index: int) -> Block:
    if not isinstance(data, dict):
        raise DocumentValidationError(f"Block {index} must be an object")

    block_type = data.get("type")
    children = data.get("children") or []
    if not isinstance(children, list):
        raise DocumentValidationError(f"Block {index} children must be a list")

    if block_type == "paragraph":
        return ParagraphBlock([_parse_inline(child, index) for child in children])

    if block_type == "heading":
        level = parse_heading_level(data.get("level"))
        nodes = []
        for child in children:
            node = _parse_inline(child, index)
            if not isinstance(node, TextNode):
                raise DocumentValidationError(
                    f"Heading block {index} may only contain text nodes"
                )
            nodes.append(node)
        return HeadingBlock(nodes, level=level)

    raise UnsupportedBlockError(f"Block {index} has unsupported type {block_type!r}")


def _parse_inline(data: Any, block_index: int) -> InlineNode:
    if not isinstance(data, dict):
        raise DocumentValidationError(f"Inline node in block {block_index} must be an object")

    node_type = data.get("type")
    if node_type == "text":
        text = data.get("text")
        if not isinstance(text, str):
            raise DocumentValidationError(f"Text node in block {block_index} has no text")
        return TextNode(text, **{name: bool(data.get(name)) for name in TEXT_FLAGS})

    if node_type == "image":
        src = data.get("src")
        if not isinstance(src, str) or not src:
            raise DocumentValidationError(f"Image node in block {block_index} has no src")
        alt = data.get("alt")
        return ImageNode(src, alt if isinstance(alt, str) else "")

    raise DocumentValidationError(
        f"Inline node in block {block_index} has unsupported type {node_type!r}"
    )


def parse_heading_level(value: Any) -> int:
    """Heading level, defaulting to 1 when unspecified"""
    if value is None:
        return 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentValidationError(f"Heading level must be an integer, got {value!r}")
    if not 1 <= value <= MAX_HEADING_LEVEL:
        raise DocumentValidationError(f"Heading level {value} out of range")
    return value


def split_block_lines(block: Block) -> List[Block]:
    """
    Split a block wherever one of its text nodes holds a newline

    Each line keeps the block type, level and the node's flags. Lines left
    empty by the split are dropped.
    """
    lines: List[List[InlineNode]] = [[]]
    for child in block.children:
        if isinstance(child, TextNode) and NEWLINE in child.text:
            for number, line in enumerate(child.text.split(NEWLINE)):
                if number > 0:
                    lines.append([])
                if line:
                    lines[-1].append(replace(child, text=line))
        else:
            lines[-1].append(child)

    if len(lines) == 1:
        return [block]
    kept = [children for children in lines if children]
    if not kept:
        return [replace(block, children=[])]
    return [replace(block, children=children) for children in kept]
