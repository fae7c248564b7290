# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from .client import ClientConfig, CmsClient, Resource
from .posts import (
    BlogPost,
    PostForm,
    PostService,
    PostStatus,
    PostValidationError,
    build_post_payload,
    load_post_content,
)

__all__ = [
    'ClientConfig', 'CmsClient', 'Resource',
    'BlogPost', 'PostForm', 'PostService', 'PostStatus', 'PostValidationError',
    'build_post_payload', 'load_post_content',
]
