"""
どこで: `engine.render.texture`。
何を: 1×1 不透明白テクスチャ（線分描画用のピクセル）を生成する。
なぜ: 任意の線分を「単位ピクセルの拡大・回転」で描くための唯一の素材を一箇所で作るため。
"""

from __future__ import annotations

from typing import Any

import moderngl as mgl

PIXEL_RGBA = bytes((255, 255, 255, 255))


def create_pixel_texture(ctx: Any) -> Any:
    """`ctx`（ModernGL コンテキスト）上に 1×1 RGBA 白テクスチャを作成して返す。

    最近傍フィルタにして拡大時のにじみを避ける。解放は呼び出し側が `release()` で行う。
    """
    texture = ctx.texture((1, 1), 4, PIXEL_RGBA)
    texture.filter = (mgl.NEAREST, mgl.NEAREST)
    return texture


__all__ = ["create_pixel_texture", "PIXEL_RGBA"]
