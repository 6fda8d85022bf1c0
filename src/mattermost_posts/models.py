from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

Block = dict[str, Any]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PostType:
    """Transport-level ``type`` tags sent by the Mattermost server."""

    NORMAL = ""
    JOIN_CHANNEL = "system_join_channel"
    LEAVE_CHANNEL = "system_leave_channel"
    HEADER_CHANGE = "system_header_change"


@dataclass
class PostPropsAttachment:
    text: str = ""
    fallback: str = ""
    title: str = ""
    title_link: str = ""
    file_id: str = ""


@dataclass
class PostProps:
    override_username: str | None = None
    # None means the property was not sent; "" is the /me convention.
    override_icon_url: str | None = None
    attachments: list[PostPropsAttachment] | None = None


@dataclass
class Post:
    id: str
    channel_id: str
    message: str = ""
    create_at: datetime = EPOCH
    user_id: str | None = None
    type: str = PostType.NORMAL
    props: PostProps = field(default_factory=PostProps)
    parent_id: str = ""
    root_id: str = ""
    file_ids: list[str] = field(default_factory=list)
    pending_post_id: str = ""


class ClientMessageType(Enum):
    INFORMATIVE = "informative"
    ERROR = "error"
    DATE_TRANSITION = "date_transition"
    NEW_MESSAGES_TRANSITION = "new_messages_transition"


@dataclass(frozen=True)
class ClientMessage:
    """A message produced by the client itself, like help text or an error."""

    text: str
    date: datetime
    type: ClientMessageType

    @classmethod
    def now(cls, text: str, kind: ClientMessageType) -> ClientMessage:
        return cls(text=text, date=datetime.now(tz=timezone.utc), type=kind)


@dataclass
class Attachment:
    name: str
    url: str
    file_id: str


class ClientPostType(Enum):
    NORMAL_POST = "normal_post"
    EMOTE = "emote"
    JOIN = "join"
    LEAVE = "leave"
    TOPIC_CHANGE = "topic_change"


@dataclass
class ClientPost:
    """Internal representation of a server ``Post``.

    ``body`` is the parsed message with attachment text appended as quoted
    blocks. ``original_post`` is a private copy of the raw post.
    """

    body: list[Block]
    user_id: str | None
    user_override: str | None
    date: datetime
    type: ClientPostType
    post_id: str
    channel_id: str
    original_post: Post
    pending: bool = False
    deleted: bool = False
    attachments: list[Attachment] = field(default_factory=list)
    reply_to: str | None = None
    reactions: dict[str, int] = field(default_factory=dict)
