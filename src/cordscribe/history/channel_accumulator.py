"""
Drains one channel's history into the shared message set, oldest first.

Pages are requested backward from the newest message. After every page the
whole message set is written to ``<output_dir>/<channel_id>-messages.json`` so
the snapshot on disk never lags by more than one page.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from cordscribe.configuration.fetch_settings import DEFAULT_DELAY_SECONDS
from cordscribe.datatypes.discord_datatypes import ChannelID
from cordscribe.datatypes.errors import FetchError, SnapshotError
from cordscribe.datatypes.message_datatypes import ChannelMessageSet, ChatMessage
from cordscribe.history.page_fetcher import PageFetcher
from cordscribe.storage import snapshot_store
from cordscribe.util.logger import get_logger

logger = get_logger("channel_accumulator")


def sort_page(page: Sequence[ChatMessage]) -> List[ChatMessage]:
    """Return the page ordered by timestamp, ties kept in API order."""
    return sorted(page, key=lambda message: message.sort_key)


class ChannelHistoryAccumulator:
    """
    Runs the fetch/sort/checkpoint/sleep loop for a single channel.

    Args:
        fetcher (PageFetcher): Source of message pages.
        output_dir (Path): Directory receiving the per-channel snapshots.
        delay_seconds (float): Fixed pause after every non-empty page.
        max_pages (int | None): Optional cap on pages per channel.
        sleep: Coroutine used for the pause; ``asyncio.sleep`` by default.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        output_dir: Path,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        max_pages: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.output_dir = output_dir
        self.delay_seconds = delay_seconds
        self.max_pages = max_pages
        self._sleep = sleep

    async def accumulate(
        self,
        channel_id: Union[str, int, ChannelID],
        message_set: ChannelMessageSet,
    ) -> List[ChatMessage]:
        """
        Fetch the full history of ``channel_id`` into ``message_set``.

        The channel's list in ``message_set`` stays sorted by timestamp: each
        new page is older than everything accumulated so far and is inserted
        in front. A fetch or snapshot failure ends the loop for this channel;
        whatever was already written stays on disk.

        Returns:
            List[ChatMessage]: The channel's messages, oldest first.
        """
        channel = str(ChannelID(channel_id))
        accumulated: List[ChatMessage] = []
        message_set[channel] = accumulated

        cursor: Optional[str] = None
        pages = 0

        while True:
            if self.max_pages is not None and pages >= self.max_pages:
                logger.info("[ACCUMULATOR] Reached the %d page limit for channel %s, stopping.", self.max_pages, channel)
                break

            try:
                page = await self.fetcher.fetch_page(channel, before=cursor)
            except FetchError as exc:
                logger.error(
                    "[ACCUMULATOR] Error fetching messages before %s in channel %s: %s",
                    cursor or "<newest>", channel, exc.cause,
                )
                break

            if not page:
                logger.info("[ACCUMULATOR] No more messages found in channel %s, stopping.", channel)
                break

            page = sort_page(page)
            oldest_id = page[0].message_id
            if oldest_id == cursor:
                logger.warning("[ACCUMULATOR] Channel %s returned the same page twice, stopping.", channel)
                break

            cursor = oldest_id
            accumulated[:0] = page
            pages += 1

            try:
                snapshot_store.write_channel_snapshot(self.output_dir, channel, message_set)
            except SnapshotError as exc:
                logger.error("[ACCUMULATOR] Error writing snapshot %s for channel %s: %s", exc.path, channel, exc.cause)
                break

            logger.info("[ACCUMULATOR] Wrote %d messages so far for channel %s", len(accumulated), channel)

            await self._sleep(self.delay_seconds)

        return accumulated
