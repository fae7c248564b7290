# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Command line interface

    quill-loro encode ops.json        native Delta ops -> Document JSON
    quill-loro decode document.json   Document JSON -> native Delta ops
    quill-loro html document.json     Document JSON -> HTML
    quill-loro post <document-id>     fetch a blog post and print its content
"""

import asyncio
import json
import logging

import aiohttp
import click

from .cms.client import ClientConfig, CmsClient
from .cms.posts import PostService
from .model.delta_converter import delta_to_document, document_to_delta
from .model.document import DocumentValidationError
from .model.html import document_to_html

logger = logging.getLogger(__name__)


def _read_json(stream):
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON input: {e}")


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level")
def main(log_level: str):
    """Convert and inspect rich-text post content"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@main.command()
@click.argument("source", type=click.File("r"), default="-")
def encode(source):
    """Convert native Delta ops to Document JSON"""
    _echo_json(delta_to_document(_read_json(source)).to_json())


@main.command()
@click.argument("source", type=click.File("r"), default="-")
def decode(source):
    """Convert Document JSON to native Delta ops"""
    try:
        ops = document_to_delta(_read_json(source))
    except DocumentValidationError as e:
        raise click.ClickException(str(e))
    _echo_json({"ops": ops})


@main.command()
@click.argument("source", type=click.File("r"), default="-")
def html(source):
    """Render Document JSON as HTML"""
    try:
        click.echo(document_to_html(_read_json(source)))
    except DocumentValidationError as e:
        raise click.ClickException(str(e))


async def _fetch_post(config: ClientConfig, document_id: str):
    async with CmsClient(config) as client:
        return await PostService(client).get_post(document_id)


@main.command()
@click.argument("document_id")
@click.option("--base-url", envvar="QUILL_LORO_BASE_URL", required=True, help="CMS API root URL")
@click.option("--token", envvar="QUILL_LORO_TOKEN", default=None, help="Bearer token for the CMS API")
@click.option("--format", "output_format", type=click.Choice(["json", "html", "text"]), default="json")
def post(document_id: str, base_url: str, token: str, output_format: str):
    """Fetch a blog post and print its content"""
    config = ClientConfig(base_url, token_provider=lambda: token)
    try:
        blog_post = asyncio.run(_fetch_post(config, document_id))
    except aiohttp.ClientResponseError as e:
        raise click.ClickException(f"Request failed with status {e.status}: {e.message}")
    except aiohttp.ClientError as e:
        raise click.ClickException(f"Request failed: {e}")

    logger.info(f"Fetched post {document_id}: {blog_post.title!r}")
    if blog_post.content is None:
        click.echo("")
    elif output_format == "html":
        click.echo(document_to_html(blog_post.content))
    elif output_format == "text":
        click.echo(blog_post.content.plain_text())
    else:
        _echo_json(blog_post.content.to_json())


if __name__ == "__main__":
    main()
