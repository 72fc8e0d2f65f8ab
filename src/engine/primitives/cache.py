"""
どこで: `engine.primitives.cache`。
何を: (radius, sides) をキーに円の頂点列を保持する `CircleCache`。
なぜ: 三角関数による頂点生成を同一パラメータで繰り返さないため。

設計メモ:
- キーは `(float(radius), int(sides))` の数値タプル。文字列連結は使わない。
- 追い出し/無効化は行わない（生成済みの頂点列は不変で、プロセス寿命の間再利用できる）。
- 保持する配列は読み取り専用。共有インスタンスを呼び出し側が書き換えないことを型ではなくフラグで担保する。
- get-or-create はロック内で完結させ、並行アクセスでも 1 キー 1 インスタンスを保つ。
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

import numpy as np

CacheKey = tuple[float, int]

logger = logging.getLogger(__name__)


class CircleCache:
    """円の頂点列キャッシュ（LRU なし・無期限）。"""

    def __init__(self, *, debug: bool | None = None) -> None:
        self._entries: dict[CacheKey, np.ndarray] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        if debug is None:
            from common.settings import get as _get_settings

            debug = bool(_get_settings().CIRCLE_CACHE_DEBUG)
        self._debug = debug

    @staticmethod
    def make_key(radius: float, sides: int) -> CacheKey:
        return (float(radius), int(sides))

    def get_or_create(
        self,
        radius: float,
        sides: int,
        factory: Callable[[float, int], np.ndarray],
    ) -> np.ndarray:
        """キーに対応する頂点列を返す。未登録なら `factory(radius, sides)` で生成して登録する。

        返り値は全呼び出し元で共有される同一インスタンス（読み取り専用）。
        """
        key = self.make_key(radius, sides)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._hits += 1
                if self._debug:
                    logger.debug("circle cache hit: r=%s sides=%d", key[0], key[1])
                return cached
            points = factory(key[0], key[1])
            points.flags.writeable = False
            self._entries[key] = points
            self._misses += 1
            if self._debug:
                logger.debug(
                    "circle cache miss: r=%s sides=%d (size=%d)", key[0], key[1], len(self._entries)
                )
            return points

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, int]:
        """HIT/MISS 累計と現在のエントリ数を返す。"""
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._entries)}

    def clear(self) -> None:
        """全エントリと統計を破棄する（テスト/ツール用）。"""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0


__all__ = ["CircleCache", "CacheKey"]
