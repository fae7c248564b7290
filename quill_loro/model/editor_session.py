# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
EditorSession: one live editing session bound to one Document

ARCHITECTURE OVERVIEW:
=====================

The session owns the editor's native Delta state. The state lives in a Loro
document as serialized JSON inside the "content" text container, and is
never handed to the host. The host only ever sees Documents:

    host ── start(initial_content) ──► decode ──► native state (LoroDoc)
    user ── edit(change) ───────────► native state ──► encode ──► on_content_change
    host ── set_content(document) ──► compare ──► decode ──► native state
    form ── get_content() ──────────► encode (synchronous flush read)

STATE MACHINE:
=============

    UNINITIALIZED ──start()──► READY ──destroy()──► DESTROYED
                               │  ▲
                               └──┘  edit() / set_content()

EXTERNAL UPDATES:
================

Content supplied by the host is applied with the one-shot external update
guard armed, so the change it causes is not reported back to the host. The
guard is always disarmed once the update has been applied.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import loro
from loro import ExportMode

from .delta import apply_change, delta_length, normalize_ops
from .delta_converter import delta_to_document, document_to_delta
from .document import Document
from .html import document_to_html

logger = logging.getLogger(__name__)

CONTENT_CONTAINER = "content"

ContentCallback = Callable[[Document], None]


class SessionState(Enum):
    """Lifecycle states of an editing session"""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DESTROYED = "destroyed"


@dataclass
class Selection:
    index: int
    length: int = 0


class EditorSession:
    """
    Owns the native editing state for one Document at a time

    Args:
        on_content_change: Called with the new Document after each user edit
        session_id: Identifier used in log messages
    """

    def __init__(self, on_content_change: Optional[ContentCallback] = None, session_id: str = "editor"):
        self.session_id = session_id
        self._on_content_change = on_content_change
        self._doc: Optional[loro.LoroDoc] = None
        self._state = SessionState.UNINITIALIZED
        self._selection: Optional[Selection] = None

        # One-shot guard: the next change was applied by the host, not the user
        self._external_update = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SessionState.READY

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    def start(self, initial_content: Union[Document, List[Dict[str, Any]], None] = None) -> None:
        """
        Start the session, optionally seeded with existing content

        Args:
            initial_content: Document (or its JSON form) to load; a single
                empty paragraph is used when omitted

        Raises:
            RuntimeError: If the session was already started or destroyed
            DocumentValidationError: If initial_content is not a valid Document
        """
        if self._state is not SessionState.UNINITIALIZED:
            raise RuntimeError(f"Session {self.session_id} cannot start from state {self._state.value}")

        document = Document.from_json(initial_content) if initial_content is not None else Document.empty()
        ops = document_to_delta(document)

        self._doc = loro.LoroDoc()
        self._external_update = True
        try:
            self._write_native(ops)
        finally:
            self._external_update = False

        self._state = SessionState.READY
        logger.info(f"Started editor session {self.session_id} with {len(document)} blocks")

    def destroy(self) -> None:
        """Release the native editing instance and drop the change callback"""
        if self._state is SessionState.DESTROYED:
            return
        self._doc = None
        self._on_content_change = None
        self._selection = None
        self._state = SessionState.DESTROYED
        logger.info(f"Destroyed editor session {self.session_id}")

    def get_content(self) -> Optional[Document]:
        """
        Read the current content without waiting for the next change event

        Returns:
            Document for the current native state, or None when the session
            is not ready (nothing to submit yet)
        """
        if not self.is_ready or self._doc is None:
            return None
        return self._current_document()

    def get_html(self) -> str:
        document = self.get_content()
        if document is None:
            return ""
        return document_to_html(document)

    def native_ops(self) -> List[Dict[str, Any]]:
        self._require_ready()
        return self._read_native()

    def get_snapshot(self) -> bytes:
        """Export the native state as a Loro snapshot, e.g. to keep a draft"""
        self._require_ready()
        return self._doc.export(ExportMode.Snapshot())

    def restore_snapshot(self, snapshot: bytes) -> bool:
        """
        Load the content of a snapshot taken with get_snapshot()

        The snapshot is applied like host supplied content.

        Returns:
            True if the content changed
        """
        self._require_ready()
        draft = loro.LoroDoc()
        draft.import_(snapshot)
        content = draft.get_text(CONTENT_CONTAINER).to_string()
        ops = json.loads(content) if content else []
        return self.set_content(delta_to_document(ops))

    def set_selection(self, index: int, length: int = 0) -> None:
        self._require_ready()
        self._selection = self._clamp_selection(Selection(index, length))

    def edit(self, change: List[Dict[str, Any]]) -> Optional[Document]:
        """
        Apply a user edit expressed as a change delta

        Args:
            change: retain/insert/delete operations against the current state

        Returns:
            The new Document if the edit changed the content, None otherwise

        Raises:
            RuntimeError: If the session is not ready
        """
        self._require_ready()
        current = self._read_native()
        updated = apply_change(current, change)
        if updated == current:
            logger.debug(f"Edit left session {self.session_id} unchanged")
            return None
        self._write_native(updated)
        if self._selection is not None:
            self._selection = self._clamp_selection(self._selection)
        return self._handle_text_change()

    def set_content(self, content: Union[Document, List[Dict[str, Any]]]) -> bool:
        """
        Replace the content with a Document supplied by the host

        Identical content is ignored. The change caused by applying new content
        is not reported through on_content_change.

        Returns:
            True if the content was replaced

        Raises:
            RuntimeError: If the session is not ready
            DocumentValidationError: If content is not a valid Document
        """
        self._require_ready()
        incoming = Document.from_json(content)
        if not incoming.blocks:
            incoming = Document.empty()

        # Image alt text is not kept in the native state, so content carrying
        # alt text never compares equal and is applied again
        if self._current_document() == incoming:
            logger.debug(f"Session {self.session_id} already holds the supplied content")
            return False

        ops = document_to_delta(incoming)
        selection = self._selection
        self._external_update = True
        try:
            self._write_native(ops)
            self._handle_text_change()
        finally:
            self._external_update = False

        if selection is not None:
            self._selection = self._clamp_selection(selection)

        logger.info(f"Applied external content to session {self.session_id} ({len(incoming)} blocks)")
        return True

    def _handle_text_change(self) -> Optional[Document]:
        if self._external_update:
            return None

        document = self._current_document()
        if self._on_content_change is not None:
            try:
                self._on_content_change(document)
            except Exception as e:
                logger.warning(f"Content change callback failed in session {self.session_id}: {e}")
        return document

    def _current_document(self) -> Document:
        document = delta_to_document(self._read_native())
        if not document.blocks:
            return Document.empty()
        return document

    def _read_native(self) -> List[Dict[str, Any]]:
        content = self._doc.get_text(CONTENT_CONTAINER).to_string()
        if not content:
            return normalize_ops([])
        return json.loads(content)

    def _write_native(self, ops: List[Dict[str, Any]]) -> None:
        text_container = self._doc.get_text(CONTENT_CONTAINER)
        current_length = text_container.len_unicode
        if current_length > 0:
            text_container.delete(0, current_length)
        text_container.insert(0, json.dumps(normalize_ops(ops)))
        self._doc.commit()

    def _clamp_selection(self, selection: Selection) -> Selection:
        # The trailing newline cannot be selected
        limit = max(delta_length(self._read_native()) - 1, 0)
        index = min(max(selection.index, 0), limit)
        length = min(max(selection.length, 0), limit - index)
        return Selection(index, length)

    def _require_ready(self) -> None:
        if not self.is_ready or self._doc is None:
            raise RuntimeError(f"Session {self.session_id} is not ready ({self._state.value})")
