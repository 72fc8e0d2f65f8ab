"""
どこで: `engine.render` 型定義。
何を: スプライト 1 件分の描画要求 `SpriteDraw` と反転フラグ `SpriteEffects`。
なぜ: バッチへの投入内容を不変値として保持し、フラッシュ時にまとめて GPU 用配列へ詰めるため。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Any

from common.types import RGBA, Rect, Vec2


class SpriteEffects(IntFlag):
    """テクスチャ座標の反転指定。"""

    NONE = 0
    FLIP_HORIZONTALLY = 1
    FLIP_VERTICALLY = 2


@dataclass(frozen=True)
class SpriteDraw:
    """バッチに積まれた 1 枚のスプライト。

    position/origin/scale は画面座標 [px]。origin はソース矩形内の回転・配置基準点。
    """

    texture: Any
    position: Vec2
    source_rect: Rect | None
    color: RGBA
    rotation: float
    origin: Vec2
    scale: Vec2
    effects: SpriteEffects = SpriteEffects.NONE
    depth: float = 0.0


__all__ = ["SpriteDraw", "SpriteEffects"]
