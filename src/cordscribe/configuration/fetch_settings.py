"""
Typed accessors for the ``fetch`` section of the application config.

Values are coerced on access so a hand-edited YAML file with quoted numbers
still works. Values that cannot be used are logged and replaced by defaults.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from cordscribe.util.logger import get_logger

logger = get_logger("fetch_settings")

# Discord's REST API refuses larger pages
MAX_PAGE_SIZE = 100
DEFAULT_DELAY_SECONDS = 1.0


class FetchSettings:
    """Helper exposing the fetch loop knobs.

    Out-of-range page sizes are clamped to 1..100; a negative delay becomes 0.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    def _coerce(self, key: str, cast: Any, default: Any) -> Any:
        value = self.data.get(key, default)
        if value is None:
            return default
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.error("[FETCH SETTINGS] Invalid fetch.%s value %r; using %r.", key, value, default)
            return default

    @property
    def page_size(self) -> int:
        value = self._coerce("page_size", int, MAX_PAGE_SIZE)
        return max(1, min(value, MAX_PAGE_SIZE))

    @property
    def delay_seconds(self) -> float:
        return max(0.0, self._coerce("delay_seconds", float, DEFAULT_DELAY_SECONDS))

    @property
    def max_pages(self) -> Optional[int]:
        value = self._coerce("max_pages", int, None)
        if value is None or value == 0:
            return None
        if value < 0:
            logger.error("[FETCH SETTINGS] fetch.max_pages must be positive, got %d; not limiting pages.", value)
            return None
        return value

    @property
    def skip_channels(self) -> List[str]:
        channels = self.data.get("skip_channels", [])
        if not isinstance(channels, list):
            logger.error("[FETCH SETTINGS] fetch.skip_channels must be a list, got %r; ignoring it.", channels)
            return []
        return [str(ch).strip() for ch in channels if str(ch).strip()]
