"""Bounded record of permission requests that were already answered."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_MAX_SIZE = 1000


class RespondedCache:
    """
    応答済みパーミッションIDの記録.

    挿入順（最終応答時刻順）に保持し、TTLを過ぎたものと
    上限件数を超えた古いものを順に破棄する.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize RespondedCache.

        Args:
            ttl_seconds: エントリの保持秒数
            max_size: 保持する最大件数
            clock: 現在時刻（秒）を返す関数
        """
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[str, float] = OrderedDict()

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def mark(self, request_id: str) -> bool:
        """
        IDを応答済みとして記録する.

        Args:
            request_id: パーミッションID

        Returns:
            既に記録済みだった場合True
        """
        now = self._clock()
        hit = self._entries.pop(request_id, None) is not None
        self._entries[request_id] = now
        self._prune(now)
        return hit

    def discard(self, request_id: str) -> None:
        """IDの記録を削除する（再送可能にする）."""
        self._entries.pop(request_id, None)

    def _prune(self, now: float) -> None:
        while self._entries:
            oldest_id, ts = next(iter(self._entries.items()))
            if now - ts < self._ttl:
                break
            del self._entries[oldest_id]

        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)
