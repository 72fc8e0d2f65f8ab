"""
どこで: `engine.render.sprite_batch`。
何を: フレーム内のスプライト描画要求を溜め、`end()` でテクスチャごとにまとめてインスタンス描画する。
なぜ: 線分 1 本 = スプライト 1 枚という粒度のまま、GPU へのドローコール数をテクスチャ切替回数に抑えるため。

使用例:
    batch = SpriteBatch(ctx, build_projection(1280, 720))
    batch.begin()
    batch.draw(pixel, (10.0, 10.0), scale=(100.0, 2.0))
    batch.end()

並び順:
- 投入順を保つ（深度ソートはしない）。連続する同一テクスチャの要求を 1 回の描画にまとめる。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import numpy as np

from common.types import RGBA, Rect, Vec2

from .quad_mesh import INSTANCE_FLOATS, QuadMesh
from .types import SpriteDraw, SpriteEffects

logger = logging.getLogger(__name__)

WHITE: RGBA = (1.0, 1.0, 1.0, 1.0)


def build_projection(width: float, height: float) -> np.ndarray:
    """画面ピクセル座標（左上原点・Y 下向き）の正射影行列（ModernGL 用の転置済み）を返す。"""
    if width <= 0 or height <= 0:
        raise ValueError(f"viewport must be positive, got {(width, height)}")
    proj = np.array(
        [
            [2 / width, 0, 0, -1],
            [0, -2 / height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj


def _texture_size(texture: Any) -> tuple[int, int]:
    size = getattr(texture, "size", (1, 1))
    return int(size[0]), int(size[1])


def pack_instances(items: Sequence[SpriteDraw]) -> np.ndarray:
    """描画要求列をインスタンス配列 `(N, 16)` float32 に詰める。

    列: pos(2) size(2) origin(2) rot/depth(2) color(4) uv(4)
    """
    out = np.empty((len(items), INSTANCE_FLOATS), dtype=np.float32)
    for i, it in enumerate(items):
        tw, th = _texture_size(it.texture)
        if it.source_rect is None:
            sx, sy, sw, sh = 0, 0, tw, th
        else:
            sx, sy, sw, sh = it.source_rect
        kx, ky = it.scale
        u0, v0 = sx / tw, sy / th
        u1, v1 = (sx + sw) / tw, (sy + sh) / th
        if it.effects & SpriteEffects.FLIP_HORIZONTALLY:
            u0, u1 = u1, u0
        if it.effects & SpriteEffects.FLIP_VERTICALLY:
            v0, v1 = v1, v0
        out[i] = (
            it.position[0],
            it.position[1],
            sw * kx,
            sh * ky,
            it.origin[0] * kx,
            it.origin[1] * ky,
            it.rotation,
            it.depth,
            *it.color,
            u0,
            v0,
            u1,
            v1,
        )
    return out


def group_by_texture(items: Sequence[SpriteDraw]) -> list[tuple[Any, list[SpriteDraw]]]:
    """連続する同一テクスチャ（同一性で比較）の要求をまとめる。"""
    groups: list[tuple[Any, list[SpriteDraw]]] = []
    for it in items:
        if groups and groups[-1][0] is it.texture:
            groups[-1][1].append(it)
        else:
            groups.append((it.texture, [it]))
    return groups


class SpriteBatch:
    """ModernGL によるスプライトバッチ。

    `ctx` は描画デバイス（ModernGL コンテキスト）。テクスチャ生成など、
    バッチ利用者がデバイスを必要とする場合はこの属性を参照する。
    """

    def __init__(self, ctx: Any, projection_matrix: np.ndarray):
        self.ctx = ctx
        self._logger = logging.getLogger(__name__)

        from .shader import Shader  # local import

        self.program = Shader.create_shader(ctx)
        self.program["projection"].write(np.asarray(projection_matrix, dtype="f4").tobytes())
        self.mesh = QuadMesh(ctx=ctx, program=self.program)

        self._items: list[SpriteDraw] = []
        self._active = False
        self._released = False
        # HUD/テスト用: 直近 end() の GPU 描画回数とスプライト数
        self.draw_calls: int = 0
        self.sprite_count: int = 0

    @property
    def pending(self) -> int:
        """begin() 以降に積まれた要求数。"""
        return len(self._items)

    @property
    def is_active(self) -> bool:
        return self._active

    def set_projection(self, projection_matrix: np.ndarray) -> None:
        """ウィンドウサイズ変更時などに投影行列を差し替える。"""
        self.program["projection"].write(np.asarray(projection_matrix, dtype="f4").tobytes())

    def begin(self) -> None:
        if self._released:
            raise RuntimeError("SpriteBatch has been released")
        if self._active:
            raise RuntimeError("begin() called twice without end()")
        self._items.clear()
        self._active = True

    def draw(
        self,
        texture: Any,
        position: Vec2,
        source_rect: Rect | None = None,
        color: RGBA = WHITE,
        rotation: float = 0.0,
        origin: Vec2 = (0.0, 0.0),
        scale: Vec2 = (1.0, 1.0),
        effects: SpriteEffects = SpriteEffects.NONE,
        depth: float = 0.0,
    ) -> None:
        """スプライト 1 枚を現在のバッチへ積む（描画は `end()` で行う）。"""
        if not self._active:
            raise RuntimeError("draw() called outside begin()/end()")
        if not math.isfinite(rotation):
            raise ValueError(f"rotation must be finite, got {rotation}")
        self._items.append(
            SpriteDraw(
                texture=texture,
                position=(float(position[0]), float(position[1])),
                source_rect=source_rect,
                color=(float(color[0]), float(color[1]), float(color[2]), float(color[3])),
                rotation=float(rotation),
                origin=(float(origin[0]), float(origin[1])),
                scale=(float(scale[0]), float(scale[1])),
                effects=SpriteEffects(effects),
                depth=float(depth),
            )
        )

    def end(self) -> None:
        """積まれた要求をテクスチャ単位でアップロード/描画し、バッチを閉じる。"""
        if not self._active:
            raise RuntimeError("end() called without begin()")
        self._active = False
        items, self._items = self._items, []
        self.draw_calls = 0
        self.sprite_count = len(items)
        for texture, group in group_by_texture(items):
            texture.use(location=0)
            self.mesh.upload(pack_instances(group))
            self.mesh.render()
            self.draw_calls += 1
        if items:
            self._logger.debug("sprite batch flushed: sprites=%d draws=%d", len(items), self.draw_calls)

    def release(self) -> None:
        """GPU リソースを解放（冪等）。"""
        if self._released:
            return
        self._released = True
        self._items.clear()
        self._active = False
        self.mesh.release()
        self.program.release()


__all__ = ["SpriteBatch", "build_projection", "pack_instances", "group_by_texture"]
