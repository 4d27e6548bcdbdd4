"""
Message types for fetched Discord history.

This module defines the immutable record built from one raw REST message
payload, together with the per-channel collection the fetch loop fills.

Key Features:
- `ChatMessage`: the fields the dataset tooling reads, plus the raw payload so
  snapshots keep every field Discord returned.
- `ChannelMessageSet`: channel id -> messages, oldest first.
- `timestamp_sort_key`: the ordering key used when sorting a page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from cordscribe.datatypes.discord_datatypes import UserID


def timestamp_sort_key(timestamp: Union[str, int, float]) -> float:
    """Return a comparable number for a message timestamp.

    Numeric timestamps (``"1700000000"``, ``200``) are used as-is. Anything
    else is parsed as the ISO-8601 string Discord's REST API returns.

    Raises:
        ValueError: If the timestamp is neither numeric nor ISO-8601, or is
            not finite (``"nan"``, ``"inf"``).
    """
    try:
        key = float(timestamp)
    except ValueError:
        return datetime.fromisoformat(str(timestamp)).timestamp()

    if not math.isfinite(key):
        raise ValueError(f"Timestamp {timestamp!r} is not a finite number")
    return key


@dataclass(frozen=True, slots=True)
class MessageAuthor:
    """Author of a message.

    Attributes:
        user_id (str): Opaque author identifier.
        username (str): Display name used when building persona prompts.
    """

    user_id: str
    username: str


@dataclass(frozen=True, slots=True)
class ReferencedMessage:
    """The message a reply points at. Only its content is needed downstream."""

    content: str
    message_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One message from a channel's history.

    Attributes:
        message_id (str): Opaque message identifier, used as the pagination cursor.
        author (MessageAuthor): Who sent the message.
        timestamp (str): Creation time as sent by the API.
        content (str): Text content, empty for attachment-only messages.
        attachments (Tuple): Attachment payloads, in API order.
        embeds (Tuple): Embed payloads, in API order.
        mentions (Tuple): Mentioned user payloads, in API order.
        referenced_message (ReferencedMessage | None): Replied-to message, if any.
        raw (Dict[str, Any]): The payload this message was parsed from.
    """

    message_id: str
    author: MessageAuthor
    timestamp: str
    content: str = ""
    attachments: Tuple[Any, ...] = ()
    embeds: Tuple[Any, ...] = ()
    mentions: Tuple[Any, ...] = ()
    referenced_message: Optional[ReferencedMessage] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def sort_key(self) -> float:
        return timestamp_sort_key(self.timestamp)

    @property
    def reply_content(self) -> str:
        """Content of the replied-to message, or an empty string."""
        if self.referenced_message is None:
            return ""
        return self.referenced_message.content

    def is_authored_by(self, user_id: Union[str, int, UserID]) -> bool:
        return UserID(user_id) == self.author.user_id

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ChatMessage":
        """Build a message from a raw Discord REST message object.

        Raises:
            ValueError: If the id, author or timestamp is missing, or the
                timestamp cannot be ordered.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Message payload must be an object, got {type(payload).__name__}")

        try:
            author = payload["author"]
            message = cls(
                message_id=str(payload["id"]),
                author=MessageAuthor(
                    user_id=str(author["id"]),
                    username=str(author.get("username") or ""),
                ),
                timestamp=str(payload["timestamp"]),
                content=str(payload.get("content") or ""),
                attachments=tuple(payload.get("attachments") or ()),
                embeds=tuple(payload.get("embeds") or ()),
                mentions=tuple(payload.get("mentions") or ()),
                referenced_message=_parse_reference(payload.get("referenced_message")),
                raw=dict(payload),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed message payload: {exc!r}") from exc

        # Fail here rather than halfway through a sort
        timestamp_sort_key(message.timestamp)
        return message

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON object written to snapshots."""
        if self.raw:
            return dict(self.raw)

        payload: Dict[str, Any] = {
            "id": self.message_id,
            "author": {"id": self.author.user_id, "username": self.author.username},
            "timestamp": self.timestamp,
            "content": self.content,
            "attachments": list(self.attachments),
            "embeds": list(self.embeds),
            "mentions": list(self.mentions),
        }
        if self.referenced_message is not None:
            payload["referenced_message"] = {
                "id": self.referenced_message.message_id,
                "content": self.referenced_message.content,
            }
        return payload


def _parse_reference(reference: Any) -> Optional[ReferencedMessage]:
    # Discord sends null when the replied-to message was deleted
    if not isinstance(reference, Mapping):
        return None
    message_id = reference.get("id")
    return ReferencedMessage(
        content=str(reference.get("content") or ""),
        message_id=str(message_id) if message_id is not None else None,
    )


ChannelMessageSet = Dict[str, List[ChatMessage]]
"""Channel id -> messages in chronological order. Insertion order is fetch order."""

MessageCollection = Union[ChannelMessageSet, Sequence[ChatMessage]]


def flatten_messages(data: MessageCollection) -> List[ChatMessage]:
    """Flatten a per-channel mapping into one list (channel order, then stored order).

    A flat sequence is returned as a new list unchanged.
    """
    if isinstance(data, Mapping):
        return [message for messages in data.values() for message in messages]
    return list(data)
