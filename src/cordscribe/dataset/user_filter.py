"""
Projection of a message collection onto a single author.

Author ids are compared exactly as stored; no trimming or case folding.
"""

from __future__ import annotations

from typing import List, Union

from cordscribe.datatypes.discord_datatypes import UserID
from cordscribe.datatypes.message_datatypes import ChatMessage, MessageCollection, flatten_messages


def filter_messages_by_user(data: MessageCollection, user_id: Union[str, int, UserID]) -> List[ChatMessage]:
    """Return every message written by ``user_id``.

    Order is channel order, then the stored order within each channel.
    """
    target = UserID(user_id)
    return [message for message in flatten_messages(data) if message.is_authored_by(target)]
