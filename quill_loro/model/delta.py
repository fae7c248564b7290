# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Helpers for the editor's native Delta state

The native state is a list of insert operations:

    [{"insert": "Hi "}, {"insert": "there", "attributes": {"bold": True}},
     {"insert": "\\n"}, {"insert": {"image": "http://x/y.png"}}, {"insert": "\\n"}]

Edits arrive as change deltas made of retain/insert/delete operations that
are positioned against the current state:

    [{"retain": 3}, {"delete": 5}, {"insert": "you"}]
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

NEWLINE = "\n"

# A piece is one unit of document length: a single character or an embed
Piece = Tuple[Any, Optional[Dict[str, Any]]]


def op_length(op: Dict[str, Any]) -> int:
    """Length an insert operation occupies in the document"""
    content = op.get("insert")
    if isinstance(content, str):
        return len(content)
    if isinstance(content, dict):
        return 1
    return 0


def delta_length(ops: List[Dict[str, Any]]) -> int:
    return sum(op_length(op) for op in ops if isinstance(op, dict))


def _clean_attributes(attributes: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(attributes, dict):
        return None
    cleaned = {key: value for key, value in attributes.items() if value is not None}
    return cleaned or None


def _make_op(content: Any, attributes: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    op = {"insert": content}
    if attributes:
        op["attributes"] = dict(attributes)
    return op


def _to_pieces(ops: List[Dict[str, Any]]) -> List[Piece]:
    pieces: List[Piece] = []
    for op in ops:
        if not isinstance(op, dict):
            continue
        content = op.get("insert")
        attributes = _clean_attributes(op.get("attributes"))
        if isinstance(content, str):
            pieces.extend((char, attributes) for char in content)
        elif isinstance(content, dict) and content:
            pieces.append((copy.deepcopy(content), attributes))
    return pieces


def _from_pieces(pieces: List[Piece]) -> List[Dict[str, Any]]:
    ops: List[Dict[str, Any]] = []
    for content, attributes in pieces:
        previous = ops[-1] if ops else None
        mergeable = (
            previous is not None
            and isinstance(content, str)
            and content != NEWLINE
            and isinstance(previous["insert"], str)
            and previous["insert"] != NEWLINE
            and previous.get("attributes") == (attributes or None)
        )
        if mergeable:
            previous["insert"] += content
        else:
            ops.append(_make_op(content, attributes))
    return ops


def normalize_ops(ops: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Bring a native op list into canonical form

    - malformed and empty inserts are dropped
    - every newline is its own operation
    - neighbouring strings with equal attributes are merged
    - the list always ends with a newline
    """
    pieces = _to_pieces(ops)
    if not pieces or pieces[-1][0] != NEWLINE:
        pieces.append((NEWLINE, None))
    return _from_pieces(pieces)


def _op_count(op: Dict[str, Any], key: str) -> Optional[int]:
    value = op[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning(f"Ignoring change operation with non-numeric {key}: {op!r}")
        return None
    return max(int(value), 0)


def apply_change(ops: List[Dict[str, Any]], change: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Apply a change delta to a native op list

    Args:
        ops: Current native state
        change: retain/insert/delete operations; a retain carrying attributes
            formats the retained range and a None attribute value removes it

    Returns:
        New normalized native state
    """
    if isinstance(change, dict):
        change = change.get("ops") or []
    pieces = _to_pieces(ops)
    cursor = 0

    for op in change:
        if not isinstance(op, dict):
            logger.warning(f"Ignoring malformed change operation: {op!r}")
            continue

        if "insert" in op:
            inserted = _to_pieces([op])
            pieces[cursor:cursor] = inserted
            cursor += len(inserted)
        elif "delete" in op:
            count = _op_count(op, "delete")
            if count is None:
                continue
            del pieces[cursor:cursor + count]
        elif "retain" in op:
            count = _op_count(op, "retain")
            if count is None:
                continue
            end = min(cursor + count, len(pieces))
            formats = op.get("attributes")
            if isinstance(formats, dict) and formats:
                for position in range(cursor, end):
                    content, attributes = pieces[position]
                    merged = dict(attributes or {})
                    merged.update(formats)
                    pieces[position] = (content, _clean_attributes(merged))
            cursor = end
        else:
            logger.warning(f"Ignoring change operation without retain/insert/delete: {op!r}")

    if not pieces or pieces[-1][0] != NEWLINE:
        pieces.append((NEWLINE, None))
    return _from_pieces(pieces)
