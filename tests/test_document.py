# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

import pytest

from quill_loro.model.document import (
    Document,
    DocumentValidationError,
    HeadingBlock,
    ImageNode,
    ParagraphBlock,
    TextNode,
    UnsupportedBlockError,
)


class TestDocumentJson:

    def test_only_true_flags_are_written(self):
        node = TextNode("x", bold=True, code=True)

        assert node.to_json() == {"type": "text", "text": "x", "bold": True, "code": True}
        assert TextNode("plain").to_json() == {"type": "text", "text": "plain"}

    def test_missing_and_null_flags_read_as_false(self):
        document = Document.from_json([{"type": "paragraph", "children": [
            {"type": "text", "text": "x", "bold": None, "italic": True},
        ]}])

        node = document.blocks[0].children[0]
        assert node.bold is False
        assert node.italic is True
        assert node.code is False

    def test_from_json_to_json(self):
        data = [
            {"type": "heading", "level": 2, "children": [{"type": "text", "text": "Title"}]},
            {"type": "paragraph", "children": [{"type": "text", "text": "Body", "underline": True}]},
            {"type": "paragraph", "children": [{"type": "image", "src": "a.png", "alt": "A"}]},
        ]

        document = Document.from_json(data)

        assert document.blocks == [
            HeadingBlock([TextNode("Title")], level=2),
            ParagraphBlock([TextNode("Body", underline=True)]),
            ParagraphBlock([ImageNode("a.png", "A")]),
        ]
        assert document.to_json() == data

    def test_heading_level_defaults_to_one(self):
        document = Document.from_json([{"type": "heading", "children": []}])

        assert document.blocks[0].level == 1

    def test_empty_document(self):
        assert Document.empty().to_json() == [{"type": "paragraph", "children": []}]

    def test_plain_text(self):
        document = Document([
            HeadingBlock([TextNode("Title")]),
            ParagraphBlock([TextNode("a"), ImageNode("x.png"), TextNode("b")]),
        ])

        assert document.plain_text() == "Title\nab"

    def test_paragraph_and_heading_are_different(self):
        assert ParagraphBlock([TextNode("x")]) != HeadingBlock([TextNode("x")])


class TestDocumentValidation:

    @pytest.mark.parametrize("data", [
        "not a list",
        [["nested"]],
        [{"type": "paragraph", "children": "text"}],
        [{"type": "paragraph", "children": [{"type": "text"}]}],
        [{"type": "paragraph", "children": [{"type": "image", "alt": "no src"}]}],
        [{"type": "paragraph", "children": [{"type": "video", "src": "a.mp4"}]}],
        [{"type": "heading", "level": 9, "children": []}],
        [{"type": "heading", "level": "2", "children": []}],
    ])
    def test_invalid_documents(self, data):
        with pytest.raises(DocumentValidationError):
            Document.from_json(data)

    def test_image_in_heading(self):
        with pytest.raises(DocumentValidationError):
            Document.from_json([{"type": "heading", "children": [
                {"type": "image", "src": "a.png", "alt": ""},
            ]}])

    def test_unsupported_block_type(self):
        with pytest.raises(UnsupportedBlockError) as excinfo:
            Document.from_json([{"type": "bullet-list", "children": []}])

        assert "bullet-list" in str(excinfo.value)


class TestDocumentLines:

    def test_text_with_newlines_is_split_into_blocks(self):
        document = Document.from_json([{"type": "heading", "level": 2, "children": [
            {"type": "text", "text": "one\ntwo", "bold": True},
            {"type": "text", "text": " more"},
        ]}])

        assert document == Document([
            HeadingBlock([TextNode("one", bold=True)], level=2),
            HeadingBlock([TextNode("two", bold=True), TextNode(" more")], level=2),
        ])

    def test_blank_lines_are_dropped(self):
        document = Document.from_json([{"type": "paragraph", "children": [
            {"type": "text", "text": "a\n\nb\n"},
        ]}])

        assert document == Document([
            ParagraphBlock([TextNode("a")]),
            ParagraphBlock([TextNode("b")]),
        ])
