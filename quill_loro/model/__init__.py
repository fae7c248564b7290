# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from .document import (
    Document,
    DocumentValidationError,
    HeadingBlock,
    ImageNode,
    ParagraphBlock,
    TextNode,
    UnsupportedBlockError,
)
from .delta_converter import delta_to_document, document_to_delta
from .editor_session import EditorSession, Selection, SessionState
from .html import document_to_html

__all__ = [
    'Document', 'DocumentValidationError', 'HeadingBlock', 'ImageNode',
    'ParagraphBlock', 'TextNode', 'UnsupportedBlockError',
    'delta_to_document', 'document_to_delta',
    'EditorSession', 'Selection', 'SessionState', 'document_to_html',
]
