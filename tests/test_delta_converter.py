# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Unit tests for delta_converter.py

Tests the conversion between native Delta ops and the Document format in
both directions, and the round trip between them.
"""

import unittest

from quill_loro.model.delta_converter import delta_to_document, document_to_delta
from quill_loro.model.document import (
    Document,
    DocumentValidationError,
    HeadingBlock,
    ImageNode,
    ParagraphBlock,
    TextNode,
    UnsupportedBlockError,
)


class TestDeltaToDocument(unittest.TestCase):
    """Test cases for native Delta to Document conversion"""

    def test_text_and_image_scenario(self):
        """Test the mixed text/bold/image example"""
        ops = [
            {"insert": "Hi "},
            {"insert": "there", "attributes": {"bold": True}},
            {"insert": "\n"},
            {"insert": {"image": "http://x/y.png"}},
        ]

        document = delta_to_document(ops)

        self.assertEqual(document.to_json(), [
            {"type": "paragraph", "children": [
                {"type": "text", "text": "Hi "},
                {"type": "text", "text": "there", "bold": True},
            ]},
            {"type": "paragraph", "children": [
                {"type": "image", "src": "http://x/y.png", "alt": ""},
            ]},
        ])

    def test_empty_terminators_produce_no_blocks(self):
        """Test that leading and repeated newlines are no-ops"""
        ops = [{"insert": "\n"}, {"insert": "\n"}, {"insert": "hello"}, {"insert": "\n"}]

        document = delta_to_document(ops)

        self.assertEqual(document.to_json(), [
            {"type": "paragraph", "children": [{"type": "text", "text": "hello"}]},
        ])

    def test_trailing_content_without_terminator(self):
        document = delta_to_document([{"insert": "a"}, {"insert": "\n"}, {"insert": "b"}])

        self.assertEqual(len(document), 2)
        self.assertEqual(document.blocks[1], ParagraphBlock([TextNode("b")]))

    def test_attribute_mapping(self):
        """Test that strike maps to strikethrough and the others map 1:1"""
        ops = [{"insert": "x", "attributes": {
            "bold": True, "italic": True, "underline": True, "strike": True, "code": True,
        }}]

        node = delta_to_document(ops).blocks[0].children[0]

        self.assertEqual(node, TextNode(
            "x", bold=True, italic=True, underline=True, strikethrough=True, code=True,
        ))

    def test_only_embeds(self):
        ops = [{"insert": {"image": "a.png"}}, {"insert": {"image": "b.png"}}]

        document = delta_to_document(ops)

        self.assertEqual(document.blocks, [
            ParagraphBlock([ImageNode("a.png", "")]),
            ParagraphBlock([ImageNode("b.png", "")]),
        ])

    def test_image_does_not_touch_current_block(self):
        """Test that text before and after an image stays in one block"""
        ops = [{"insert": "before"}, {"insert": {"image": "a.png"}}, {"insert": "after"}]

        document = delta_to_document(ops)

        self.assertEqual(document.blocks, [
            ParagraphBlock([ImageNode("a.png", "")]),
            ParagraphBlock([TextNode("before"), TextNode("after")]),
        ])

    def test_malformed_ops_are_skipped(self):
        ops = [
            {"retain": 3},
            "junk",
            {"insert": "a", "attributes": "not-a-map"},
            {"insert": {"video": "clip.mp4"}},
            {"insert": "b", "attributes": {"bold": None, "color": "red"}},
        ]

        document = delta_to_document(ops)

        self.assertEqual(document.blocks, [ParagraphBlock([TextNode("a"), TextNode("b")])])

    def test_multiline_string_is_split(self):
        document = delta_to_document([{"insert": "first\nsecond\n"}])

        self.assertEqual(document.blocks, [
            ParagraphBlock([TextNode("first")]),
            ParagraphBlock([TextNode("second")]),
        ])

    def test_header_on_terminator(self):
        """Test the editor's native heading form (header on the newline)"""
        ops = [
            {"insert": "Title"},
            {"insert": "\n", "attributes": {"header": 2}},
            {"insert": "Body\n"},
        ]

        document = delta_to_document(ops)

        self.assertEqual(document.blocks, [
            HeadingBlock([TextNode("Title")], level=2),
            ParagraphBlock([TextNode("Body")]),
        ])

    def test_delta_mapping_and_empty_input(self):
        self.assertEqual(len(delta_to_document({"ops": [{"insert": "x"}]})), 1)
        self.assertEqual(delta_to_document(None), Document([]))
        self.assertEqual(delta_to_document([]), Document([]))


class TestDocumentToDelta(unittest.TestCase):
    """Test cases for Document to native Delta conversion"""

    def test_newline_between_blocks_only(self):
        document = Document([
            ParagraphBlock([TextNode("one")]),
            ParagraphBlock([TextNode("two")]),
        ])

        self.assertEqual(document_to_delta(document), [
            {"insert": "one"},
            {"insert": "\n"},
            {"insert": "two"},
        ])

    def test_attributes_omitted_without_flags(self):
        ops = document_to_delta(Document([ParagraphBlock([TextNode("plain")])]))

        self.assertEqual(ops, [{"insert": "plain"}])
        self.assertNotIn("attributes", ops[0])

    def test_strikethrough_maps_to_strike(self):
        ops = document_to_delta([{"type": "paragraph", "children": [
            {"type": "text", "text": "gone", "strikethrough": True},
        ]}])

        self.assertEqual(ops, [{"insert": "gone", "attributes": {"strike": True}}])

    def test_image_becomes_embed(self):
        ops = document_to_delta(Document([ParagraphBlock([ImageNode("http://x/y.png")])]))

        self.assertEqual(ops, [{"insert": {"image": "http://x/y.png"}}])

    def test_heading_level(self):
        ops = document_to_delta([
            {"type": "heading", "children": [{"type": "text", "text": "Default"}]},
            {"type": "heading", "level": 3, "children": [{"type": "text", "text": "Third"}]},
        ])

        self.assertEqual(ops, [
            {"insert": "Default", "attributes": {"header": 1}},
            {"insert": "\n"},
            {"insert": "Third", "attributes": {"header": 3}},
        ])

    def test_image_in_heading_is_rejected(self):
        document = Document([HeadingBlock([ImageNode("a.png")])])

        with self.assertRaises(DocumentValidationError):
            document_to_delta(document)

    def test_unsupported_block_is_rejected(self):
        with self.assertRaises(UnsupportedBlockError):
            document_to_delta([{"type": "list", "children": []}])

    def test_text_node_with_newline_is_rejected(self):
        document = Document([ParagraphBlock([TextNode("line1\nline2")])])

        with self.assertRaises(DocumentValidationError):
            document_to_delta(document)

    def test_image_alt_is_not_carried(self):
        document = Document([ParagraphBlock([ImageNode("a.png", "A cat")])])

        self.assertEqual(document_to_delta(document), [{"insert": {"image": "a.png"}}])


class TestRoundTrip(unittest.TestCase):
    """Encode(Decode(D)) == D"""

    def assertRoundTrip(self, document):
        self.assertEqual(delta_to_document(document_to_delta(document)), document)

    def test_mixed_document(self):
        self.assertRoundTrip(Document([
            HeadingBlock([TextNode("Release notes", bold=True)], level=2),
            ParagraphBlock([TextNode("Plain "), TextNode("styled", italic=True, underline=True)]),
            ParagraphBlock([ImageNode("http://x/y.png", "")]),
            ParagraphBlock([TextNode("after image")]),
            ParagraphBlock([ImageNode("http://x/z.png", "")]),
        ]))

    def test_flag_independence(self):
        document = Document([ParagraphBlock([TextNode("x", bold=True, code=True)])])

        result = delta_to_document(document_to_delta(document))

        node = result.blocks[0].children[0]
        self.assertEqual(node.flags(), {"bold": True, "code": True})
        self.assertFalse(node.italic or node.underline or node.strikethrough)

    def test_image_isolation(self):
        document = Document([ParagraphBlock([TextNode("caption"), ImageNode("a.png")])])

        result = delta_to_document(document_to_delta(document))

        for block in result.blocks:
            if any(isinstance(child, ImageNode) for child in block.children):
                self.assertEqual(len(block.children), 1)

    def test_empty_blocks_are_dropped(self):
        document = Document([
            ParagraphBlock([]),
            ParagraphBlock([TextNode("kept")]),
            HeadingBlock([], level=2),
        ])

        result = delta_to_document(document_to_delta(document))

        self.assertEqual(result, Document([ParagraphBlock([TextNode("kept")])]))


if __name__ == '__main__':
    unittest.main()

    def test_persisted_multiline_text(self):
        document = Document.from_json([{"type": "paragraph", "children": [
            {"type": "text", "text": "line1\nline2"},
        ]}])

        self.assertEqual(len(document), 2)
        self.assertRoundTrip(document)
