"""
Sequential fetch of every text channel visible to the client.

Channels are processed one at a time so the fixed delay between pages is the
only throttle. A failing channel is logged and the run moves on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import discord

from cordscribe.configuration.fetch_settings import FetchSettings
from cordscribe.datatypes.message_datatypes import ChannelMessageSet
from cordscribe.history.channel_accumulator import ChannelHistoryAccumulator
from cordscribe.history.page_fetcher import PageFetcher
from cordscribe.storage import snapshot_store
from cordscribe.util.logger import get_logger

logger = get_logger("orchestrator")


def is_text_channel(channel: Any) -> bool:
    """Return True for channels that carry a message history."""
    return isinstance(channel, (discord.TextChannel, discord.Thread))


def parse_skip_channels(raw: Optional[str]) -> set[str]:
    """Split a comma-separated id list, ignoring blanks."""
    if not raw:
        return set()
    return {part.strip() for part in raw.split(",") if part.strip()}


class MultiChannelOrchestrator:
    """
    Runs a :class:`ChannelHistoryAccumulator` over a channel list.

    Args:
        accumulator: Per-channel fetch loop.
        output_dir: Directory receiving the combined snapshot.
        text_channel_check: Predicate deciding whether a channel has a history.
    """

    def __init__(
        self,
        accumulator: ChannelHistoryAccumulator,
        output_dir: Path,
        text_channel_check: Callable[[Any], bool] = is_text_channel,
    ) -> None:
        self.accumulator = accumulator
        self.output_dir = output_dir
        self._is_text_channel = text_channel_check

    async def run(self, channels: Iterable[Any], skip_channels: Iterable[str] = ()) -> ChannelMessageSet:
        """
        Fetch every eligible channel and write the combined snapshot.

        Returns:
            ChannelMessageSet: Messages of every processed channel, in processing order.

        Raises:
            SnapshotError: If the combined snapshot cannot be written.
        """
        channels = list(channels)
        skip = {str(channel_id) for channel_id in skip_channels}
        logger.info("[ORCHESTRATOR] Found %d channels", len(channels))

        message_set: ChannelMessageSet = {}

        for channel in channels:
            channel_id = str(channel.id)

            if channel_id in skip:
                logger.info("[ORCHESTRATOR] Skipping channel %s", channel_id)
                continue

            if not self._is_text_channel(channel):
                logger.info("[ORCHESTRATOR] Skipping channel %s (not a text channel)", channel_id)
                continue

            logger.info("[ORCHESTRATOR] Fetching messages from channel %s...", channel_id)
            try:
                await self.accumulator.accumulate(channel_id, message_set)
            except Exception:
                logger.exception("[ORCHESTRATOR] Unexpected error while fetching channel %s; moving on", channel_id)

        combined = snapshot_store.write_combined_snapshot(self.output_dir, message_set)
        logger.info("[ORCHESTRATOR] Wrote combined JSON to: %s", combined)
        return message_set


async def fetch_all_channel_messages(
    client: discord.Client,
    skip_channels: Iterable[str],
    output_dir: Path,
    settings: FetchSettings | None = None,
) -> ChannelMessageSet:
    """Fetch the history of every text channel the connected client can see.

    ``skip_channels`` is merged with the skip-list from ``settings``.
    """
    settings = settings or FetchSettings()
    fetcher = PageFetcher(client.http, page_size=settings.page_size)
    accumulator = ChannelHistoryAccumulator(
        fetcher,
        output_dir,
        delay_seconds=settings.delay_seconds,
        max_pages=settings.max_pages,
    )
    orchestrator = MultiChannelOrchestrator(accumulator, output_dir)
    skip = set(skip_channels) | set(settings.skip_channels)
    return await orchestrator.run(client.get_all_channels(), skip)
