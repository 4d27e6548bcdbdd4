"""
Conversion of stored messages into a fine-tuning JSONL dataset.

Each eligible message becomes one three-turn record. When the message replies
to another message with text, that text is the user turn; otherwise the user
turn is empty. The persona in the system turn is taken from the author of the
first message, so the input is expected to come from a single author (usually
the output of the ``filter`` command).
"""

from __future__ import annotations

import json
import warnings
from typing import List

from cordscribe.datatypes.dataset_datatypes import ConversationRecord, build_conversation_record
from cordscribe.datatypes.errors import EmptyDatasetWarning
from cordscribe.datatypes.message_datatypes import ChatMessage, MessageCollection, flatten_messages
from cordscribe.util.logger import get_logger

logger = get_logger("jsonl_compiler")

SYSTEM_PROMPT_TEMPLATE = (
    "You are a discord bot representing a person named {name} with the discord handle @{name}. "
    "Your mission is to draft messages in {name} style."
)

LINK_MARKER = "http"


def build_system_prompt(name: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(name=name)


def is_eligible(message: ChatMessage) -> bool:
    """Return False for messages with attachments, embeds, mentions or links."""
    return (
        not message.attachments
        and not message.embeds
        and not message.mentions
        and LINK_MARKER not in message.content
    )


def build_conversation_records(data: MessageCollection) -> List[ConversationRecord]:
    """Build one record per eligible message, in flattened input order.

    An empty input returns an empty list and emits :class:`EmptyDatasetWarning`.
    """
    messages = flatten_messages(data)

    if not messages:
        logger.warning("[JSONL] No messages found; cannot create JSONL.")
        warnings.warn("No messages found; cannot create JSONL.", EmptyDatasetWarning, stacklevel=2)
        return []

    # Single-author input: the first author names the persona for every record
    system_prompt = build_system_prompt(messages[0].author.username)

    records = [
        build_conversation_record(system_prompt, message.reply_content, message.content)
        for message in messages
        if is_eligible(message)
    ]

    if not records:
        logger.warning("[JSONL] All %d messages were filtered out; the dataset is empty.", len(messages))
        warnings.warn("All messages were filtered out of the dataset.", EmptyDatasetWarning, stacklevel=2)
    else:
        logger.debug("[JSONL] Kept %d of %d messages", len(records), len(messages))

    return records


def create_jsonl(data: MessageCollection) -> str:
    """Return the dataset as JSON lines joined by ``\\n``, without a trailing newline."""
    return "\n".join(json.dumps(record, ensure_ascii=False) for record in build_conversation_records(data))
