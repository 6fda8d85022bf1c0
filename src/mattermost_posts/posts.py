from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable

from .markdown import DocumentParser, block_quote, parse_markdown
from .models import Block, ClientPost, ClientPostType, Post, PostType

logger = logging.getLogger(__name__)


def _is_starred(text: str) -> bool:
    return len(text) >= 2 and text.startswith("*") and text.endswith("*")


def post_is_emote(post: Post) -> bool:
    """Find out whether a post was generated by a ``/me`` command."""
    return post.props.override_icon_url == "" and _is_starred(post.message)


def post_is_join(post: Post) -> bool:
    return post.type == PostType.JOIN_CHANNEL


def post_is_leave(post: Post) -> bool:
    return post.type == PostType.LEAVE_CHANNEL


def post_is_topic_change(post: Post) -> bool:
    return post.type == PostType.HEADER_CHANGE


# First match wins. Emote is decided from the message text and must stay ahead
# of the rules that look at the transport type tag.
CLASSIFICATION_RULES: list[tuple[ClientPostType, Callable[[Post], bool]]] = [
    (ClientPostType.EMOTE, post_is_emote),
    (ClientPostType.JOIN, post_is_join),
    (ClientPostType.LEAVE, post_is_leave),
    (ClientPostType.TOPIC_CHANGE, post_is_topic_change),
]


def classify(post: Post) -> ClientPostType:
    """Determine the ClientPostType of a raw post."""
    for kind, matches in CLASSIFICATION_RULES:
        if matches(post):
            return kind
    return ClientPostType.NORMAL_POST


def normalize(kind: ClientPostType, text: str) -> str:
    """Undo the formatting the server applies to posts of the given kind.

    Only emotes are touched: the ``*...*`` wrapping added by ``/me`` is
    removed. A lone ``"*"`` is left as is.
    """
    if kind is ClientPostType.EMOTE and _is_starred(text):
        return text[1:-1]
    return text


def render_attachments(
    post: Post, parse: DocumentParser = parse_markdown
) -> list[Block]:
    """Render attachment records as one quoted block each.

    Attachments are not modelled as rich objects yet; their text and
    fallback are rolled directly into the message body.
    """
    attachments = post.props.attachments
    if not attachments:
        return []
    return [block_quote(parse(a.text) + parse(a.fallback)) for a in attachments]


def convert(
    post: Post,
    reply_to: str | None = None,
    parse: DocumentParser = parse_markdown,
) -> ClientPost:
    """Convert a raw post to a ClientPost, linking it to a known parent."""
    if not post.id:
        raise ValueError("post has no id")
    if not post.channel_id:
        raise ValueError(f"post {post.id} has no channel id")

    kind = classify(post)
    body = parse(normalize(kind, post.message)) + render_attachments(post, parse)
    logger.debug("Converted post %s as %s (%d blocks)", post.id, kind.name, len(body))

    return ClientPost(
        body=body,
        user_id=post.user_id,
        user_override=post.props.override_username,
        date=post.create_at,
        type=kind,
        post_id=post.id,
        channel_id=post.channel_id,
        original_post=copy.deepcopy(post),
        pending=False,
        deleted=False,
        attachments=[],
        reply_to=reply_to,
        reactions={},
    )


def convert_posts(
    posts: Iterable[Post], parse: DocumentParser = parse_markdown
) -> list[ClientPost]:
    """Convert posts in order, taking each reply target from its ``parent_id``."""
    return [convert(p, reply_to=p.parent_id or None, parse=parse) for p in posts]
