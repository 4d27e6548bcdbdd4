"""
Single-page reads of a channel's message history.

Uses the raw REST route behind ``channel.history()`` so the payloads keep
every field Discord sends and can be written to snapshots unchanged.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Protocol, Union

import aiohttp
import discord

from cordscribe.configuration.fetch_settings import MAX_PAGE_SIZE
from cordscribe.datatypes.discord_datatypes import ChannelID, MessageID
from cordscribe.datatypes.errors import FetchError
from cordscribe.datatypes.message_datatypes import ChatMessage
from cordscribe.util.logger import get_logger

logger = get_logger("page_fetcher")


class MessageLogsHTTP(Protocol):
    """The part of ``discord.http.HTTPClient`` the fetcher needs."""

    def logs_from(self, channel_id: Any, limit: int, before: Any = None) -> Any: ...


class PageFetcher:
    """
    Fetches one page of a channel's history older than a cursor.

    Args:
        http (MessageLogsHTTP): Usually ``client.http`` of a logged-in Discord client.
        page_size (int): Messages per request, at most 100.
    """

    def __init__(self, http: MessageLogsHTTP, page_size: int = MAX_PAGE_SIZE) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
        self._http = http
        self.page_size = page_size

    async def fetch_page(
        self,
        channel_id: Union[str, int, ChannelID],
        before: Optional[Union[str, MessageID]] = None,
    ) -> List[ChatMessage]:
        """
        Request up to ``page_size`` messages older than ``before``.

        Without a cursor the newest page is returned. Messages come back in
        whatever order the API used.

        Args:
            channel_id: Channel to read. Must not be empty.
            before: Id of the oldest message fetched so far, if any.

        Returns:
            List[ChatMessage]: Between 0 and ``page_size`` messages.

        Raises:
            ValueError: If ``channel_id`` is empty.
            FetchError: On any HTTP, connection or payload error.
        """
        channel = ChannelID(channel_id)
        cursor = str(MessageID(before)) if before is not None else None

        logger.debug(
            "[PAGE FETCHER] Requesting %d messages before %s in channel %s",
            self.page_size, cursor or "<newest>", channel,
        )

        try:
            payloads = await self._http.logs_from(str(channel), self.page_size, before=cursor)
        except (discord.HTTPException, aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
            raise FetchError(str(channel), exc) from exc

        if not isinstance(payloads, list):
            raise FetchError(str(channel), TypeError(f"expected a message array, got {type(payloads).__name__}"))

        try:
            return [ChatMessage.from_payload(payload) for payload in payloads]
        except ValueError as exc:
            raise FetchError(str(channel), exc) from exc
