# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Blog post payloads

Post content crosses the network as the Document JSON array inside the
generic {"data": {...}} envelope. Older records may hold the content as a
JSON-encoded string, or as plain text that is not JSON at all; both are read
back without failing.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from ..model.document import (
    Document,
    DocumentValidationError,
    ParagraphBlock,
    TextNode,
    split_block_lines,
)
from .client import CmsClient

logger = logging.getLogger(__name__)


class PostStatus(Enum):
    PUBLISH = "publish"
    SAVE = "save"
    DRAFT = "draft"


class PostValidationError(ValueError):
    """Raised when a post form has invalid fields"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        details = ", ".join(f"{name}: {message}" for name, message in errors.items())
        super().__init__(f"Invalid post form ({details})")


@dataclass
class PostForm:
    title: str = ""
    description: str = ""
    image_url: str = ""
    status: Union[PostStatus, str] = PostStatus.SAVE

    def validate(self) -> None:
        errors = {}
        if not self.title.strip():
            errors["blog_post_title"] = "Post title is required"
        if not self.description.strip():
            errors["blog_post_description"] = "Post description is required"
        if self.image_url and not _is_url(self.image_url):
            errors["blog_post_image_url"] = "Please enter a valid URL"
        try:
            PostStatus(self.status)
        except ValueError:
            errors["blog_post_status"] = f"Unknown status {self.status!r}"
        if errors:
            raise PostValidationError(errors)


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass
class BlogPost:
    id: Optional[int]
    document_id: str
    title: str
    description: str
    content: Optional[Document]
    image_url: str
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    published_at: Optional[str] = None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "BlogPost":
        return cls(
            id=record.get("id"),
            document_id=record.get("documentId", ""),
            title=record.get("blog_post_title") or "",
            description=record.get("blog_post_description") or "",
            content=load_post_content(record.get("blog_post_content")),
            image_url=record.get("blog_post_image_url") or "",
            status=record.get("blog_post_status") or PostStatus.SAVE.value,
            created_at=record.get("createdAt"),
            updated_at=record.get("updatedAt"),
            published_at=record.get("publishedAt"),
        )


def load_post_content(raw: Any) -> Optional[Document]:
    """
    Read persisted post content back into a Document

    Args:
        raw: Block list, JSON string holding a block list, or plain text

    Returns:
        Document, or None when there is no content. Text that cannot be read
        as a block list, including block lists that fail validation, becomes
        paragraphs holding the raw string, one per line.
    """
    if raw is None or raw == "" or raw == []:
        return None

    if isinstance(raw, list):
        return _read_blocks(raw, json.dumps(raw))

    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug(f"Post content is not JSON ({e}), using it as plain text")
            return _text_fallback(raw)
        if isinstance(parsed, list):
            return _read_blocks(parsed, raw)
        logger.debug(f"Post content parsed to {type(parsed).__name__}, using it as plain text")
        return _text_fallback(raw)

    logger.warning(f"Ignoring post content of type {type(raw).__name__}")
    return None


def _read_blocks(blocks: List[Any], raw: str) -> Document:
    try:
        return Document.from_json(blocks)
    except DocumentValidationError as e:
        logger.warning(f"Stored post content is not a valid document ({e}), using it as plain text")
        return _text_fallback(raw)


def _text_fallback(raw: str) -> Document:
    return Document(split_block_lines(ParagraphBlock([TextNode(raw)])))


def build_post_payload(
    form: PostForm,
    content: Union[Document, List[Dict[str, Any]], None],
) -> Dict[str, Any]:
    """
    Build the create/update request body

    Raises:
        PostValidationError: If the form fields are invalid
    """
    form.validate()
    if content is not None:
        content = Document.from_json(content).to_json()

    return {
        "data": {
            "blog_post_title": form.title,
            "blog_post_description": form.description,
            "blog_post_content": content,
            "blog_post_image_url": form.image_url,
            "blog_post_status": PostStatus(form.status).value,
        }
    }


def _unwrap(response: Any) -> Any:
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return response


class PostService:
    """Blog post calls on top of the CMS client"""

    def __init__(self, client: CmsClient):
        self.client = client

    async def list_posts(self) -> List[BlogPost]:
        records = _unwrap(await self.client.posts.list()) or []
        return [BlogPost.from_api(record) for record in records]

    async def get_post(self, document_id: str) -> BlogPost:
        return BlogPost.from_api(_unwrap(await self.client.posts.get(document_id)))

    async def create_post(self, form: PostForm, content: Union[Document, List[Dict[str, Any]], None]) -> Any:
        payload = build_post_payload(form, content)
        logger.info(f"Creating post {form.title!r}")
        return await self.client.posts.create(payload)

    async def update_post(
        self,
        document_id: str,
        form: PostForm,
        content: Union[Document, List[Dict[str, Any]], None],
    ) -> Any:
        payload = build_post_payload(form, content)
        logger.info(f"Updating post {document_id}")
        return await self.client.posts.update(document_id, payload)

    async def delete_post(self, document_id: str) -> None:
        logger.info(f"Deleting post {document_id}")
        await self.client.posts.delete(document_id)
