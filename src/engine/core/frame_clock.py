"""
どこで: `engine.core` のフレームドライバ。
何を: 更新対象（`Tickable`）を登録順に呼び出し、dt の上限処理と FPS の平滑値を管理する。
なぜ: ウィンドウのドラッグ等で止まった直後に巨大な dt が流れ、デモの角度が飛ぶのを防ぐため。
"""

from __future__ import annotations

import time
from typing import Protocol, Sequence


class Tickable(Protocol):
    def tick(self, dt: float) -> None:
        """内部状態を `dt` 秒ぶん進める。"""


class FrameClock:
    """pyglet の `schedule_interval` から呼ばれる極小クロック。

    - `dt` 省略時は `perf_counter` の差分で測る
    - `max_dt` を超える dt は切り詰める
    - `fps` は指数移動平均（HUD/ログ用）
    """

    def __init__(self, tickables: Sequence[Tickable], *, max_dt: float = 0.25):
        if max_dt <= 0.0:
            raise ValueError(f"max_dt must be > 0, got {max_dt}")
        self._tickables = tuple(tickables)
        self._max_dt = float(max_dt)
        self._last_time = time.perf_counter()
        self.total_time: float = 0.0
        self.frame_count: int = 0
        self.fps: float = 0.0

    def tick(self, dt: float | None = None) -> None:
        if dt is None:
            now = time.perf_counter()
            dt = now - self._last_time
            self._last_time = now
        dt = min(max(float(dt), 0.0), self._max_dt)

        if dt > 0.0:
            inst = 1.0 / dt
            self.fps = inst if self.frame_count == 0 else self.fps * 0.9 + inst * 0.1
        self.total_time += dt
        self.frame_count += 1
        for t in self._tickables:
            t.tick(dt)


__all__ = ["FrameClock", "Tickable"]
