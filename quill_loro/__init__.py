# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Quill Loro - Python package for rich-text post content backed by Loro
"""

from .model.document import Document
from .model.delta_converter import delta_to_document, document_to_delta
from .model.editor_session import EditorSession

__all__ = ["Document", "EditorSession", "delta_to_document", "document_to_delta"]
