from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from .models import EPOCH, Post, PostProps, PostPropsAttachment

logger = logging.getLogger(__name__)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _parse_timestamp(value: Any) -> datetime:
    """Convert Mattermost epoch milliseconds to a UTC datetime."""
    try:
        return EPOCH + timedelta(milliseconds=int(value))
    except (TypeError, ValueError, OverflowError):
        return EPOCH


def _parse_attachment(raw: dict) -> PostPropsAttachment:
    return PostPropsAttachment(
        text=_str(raw.get("text")),
        fallback=_str(raw.get("fallback")),
        title=_str(raw.get("title")),
        title_link=_str(raw.get("title_link")),
        file_id=_str(raw.get("file_id")),
    )


def _parse_props(raw: Any) -> PostProps:
    if not isinstance(raw, dict):
        return PostProps()

    attachments = None
    raw_attachments = raw.get("attachments")
    if isinstance(raw_attachments, list):
        attachments = [
            _parse_attachment(a) for a in raw_attachments if isinstance(a, dict)
        ]
    elif raw_attachments is not None:
        logger.warning("Ignoring malformed attachments: %r", raw_attachments)

    return PostProps(
        override_username=_optional_str(raw.get("override_username")),
        override_icon_url=_optional_str(raw.get("override_icon_url")),
        attachments=attachments,
    )


def parse_post(raw: dict) -> Post:
    """Parse a raw Mattermost post object into a Post."""
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a post object, got {type(raw).__name__}")
    file_ids = raw.get("file_ids")
    return Post(
        id=raw["id"],
        channel_id=raw["channel_id"],
        message=_str(raw.get("message")),
        create_at=_parse_timestamp(raw.get("create_at")),
        user_id=_optional_str(raw.get("user_id")) or None,
        type=_str(raw.get("type")),
        props=_parse_props(raw.get("props")),
        parent_id=_str(raw.get("parent_id")),
        root_id=_str(raw.get("root_id")),
        file_ids=[f for f in file_ids if isinstance(f, str)]
        if isinstance(file_ids, list)
        else [],
        pending_post_id=_str(raw.get("pending_post_id")),
    )


def load_post_list(data: dict) -> list[Post]:
    """Load a Mattermost PostList, oldest post first.

    The server lists ``order`` newest first.
    """
    posts_by_id = data.get("posts")
    order = data.get("order")
    if not isinstance(posts_by_id, dict) or not isinstance(order, list):
        raise ValueError("PostList needs an 'order' list and a 'posts' object")
    posts: list[Post] = []
    for post_id in reversed(order):
        raw = posts_by_id.get(post_id)
        if raw is None:
            logger.warning("Post %s is listed in order but missing from posts", post_id)
            continue
        posts.append(parse_post(raw))
    return posts


def load_posts_file(path: Path) -> list[Post]:
    """Load posts from a JSON dump holding a PostList, a list or a single post."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return [parse_post(raw) for raw in data]
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object or list, got {type(data).__name__}")
    if "order" in data and "posts" in data:
        return load_post_list(data)
    return [parse_post(data)]
