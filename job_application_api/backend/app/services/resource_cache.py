"""
Process-wide cache for render-time resources (font files).

Entries are loaded lazily on first use and never invalidated: the bytes are
immutable, small, and identical for every caller. There is no lock; two
requests racing on a cold key both load it and the second write simply
replaces identical bytes.
"""

import logging
from typing import Awaitable, Callable, Dict

from app.core.errors import ResourceAcquisitionError

logger = logging.getLogger(__name__)

Loader = Callable[[str], Awaitable[bytes]]


class ResourceCache:
    def __init__(self, loader: Loader):
        self._loader = loader
        self._entries: Dict[str, bytes] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def acquire(self, key: str) -> bytes:
        """Return the bytes for `key`, loading them on first use."""
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        logger.info(f"Resource '{key}' not cached, loading...")
        try:
            data = await self._loader(key)
        except ResourceAcquisitionError:
            raise
        except Exception as e:
            logger.error(f"Loading resource '{key}' failed: {e}")
            raise ResourceAcquisitionError(key, str(e)) from e

        if not data:
            raise ResourceAcquisitionError(key, "loader returned no data")

        self._entries[key] = data
        logger.info(f"Resource '{key}' cached ({len(data)} bytes)")
        return data
