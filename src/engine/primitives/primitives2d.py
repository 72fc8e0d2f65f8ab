"""
どこで: `engine.primitives.primitives2d`。
何を: 1×1 不透明テクスチャを拡大・回転して線分/折れ線/円/円弧を描く `Primitives2D`。
なぜ: すべての図形を「単位ピクセルを 2 点間に引き伸ばす」1 種類の描画要求に還元し、
     バッチ側の実装を最小にするため。

依存:
- `sprite_batch`: `ctx`（描画デバイス）と `draw(texture, position, source_rect, color,
  rotation, origin, scale, effects, depth)` を持つバッチ（`engine.render.SpriteBatch` 互換）。
- `texture_factory`: デバイスから 1×1 テクスチャを作る関数（既定 `create_pixel_texture`）。

寿命:
- テクスチャは構築時に 1 度だけ生成し、`dispose()` で 1 度だけ解放する。
- 2 回目以降の `dispose()` は何もしない。解放後の描画は `DisposedResourceError`。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Sequence

import numpy as np

from common.types import Vec2
from engine.render.texture import create_pixel_texture
from engine.render.types import SpriteEffects
from util.color import normalize_color

from .errors import DisposedResourceError, InvalidDependencyError, InvalidGeometryError
from .geometry import GeometryGenerator, default_generator

logger = logging.getLogger(__name__)

ColorLike = Any


def segment_transform(p1: Vec2, p2: Vec2) -> tuple[float, float]:
    """2 点間の (距離, 角度[rad]) を返す。角度は `atan2(dy, dx)`。"""
    dx = float(p2[0]) - float(p1[0])
    dy = float(p2[1]) - float(p1[1])
    return math.hypot(dx, dy), math.atan2(dy, dx)


class Primitives2D:
    """2D プリミティブ描画ヘルパ。"""

    def __init__(
        self,
        sprite_batch: Any,
        *,
        generator: GeometryGenerator | None = None,
        texture_factory: Callable[[Any], Any] | None = None,
    ) -> None:
        if sprite_batch is None:
            raise InvalidDependencyError("sprite_batch is required")
        if not callable(getattr(sprite_batch, "draw", None)):
            raise InvalidDependencyError(
                f"sprite_batch must provide draw(), got {type(sprite_batch).__name__}"
            )
        device = getattr(sprite_batch, "ctx", None)
        if device is None:
            raise InvalidDependencyError("sprite_batch has no rendering device (ctx)")

        factory = texture_factory if texture_factory is not None else create_pixel_texture
        self._pixel = factory(device)
        self._sprite_batch = sprite_batch
        self._generator = generator if generator is not None else default_generator()
        self._disposed = False

    # ---- lifecycle -------------------------------------------------------
    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def generator(self) -> GeometryGenerator:
        return self._generator

    def dispose(self) -> None:
        """ピクセルテクスチャを解放する（冪等）。"""
        if self._disposed:
            logger.debug("Primitives2D.dispose() called on an already disposed instance")
            return
        self._disposed = True
        self._pixel.release()

    close = dispose

    def __enter__(self) -> "Primitives2D":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.dispose()

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise DisposedResourceError("Primitives2D has been disposed")

    # ---- drawing ---------------------------------------------------------
    def draw_line(self, point1: Vec2, point2: Vec2, color: ColorLike, thickness: float) -> None:
        """point1 から point2 へ太さ `thickness` の線分を描く（描画要求 1 件）。"""
        self._ensure_alive()
        distance, angle = segment_transform(point1, point2)
        # ピクセルを 2 点間に引き伸ばす
        self._sprite_batch.draw(
            self._pixel,
            (float(point1[0]), float(point1[1])),
            None,
            normalize_color(color),
            angle,
            (0.0, 0.0),
            (distance, float(thickness)),
            SpriteEffects.NONE,
            0.0,
        )

    def draw_points(
        self,
        position: Vec2,
        points: Sequence[Vec2] | np.ndarray,
        color: ColorLike,
        thickness: float,
    ) -> None:
        """頂点列を順に結ぶ。各頂点は `position` を原点とする相対座標。

        2 点未満なら何もしない。`(N, 2)` 以外の形状は `InvalidGeometryError`。
        """
        self._ensure_alive()
        pts = np.asarray(points, dtype=np.float64)
        if pts.size == 0:
            return
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise InvalidGeometryError(f"points must have shape (N, 2), got {pts.shape}")
        if len(pts) < 2:
            return
        rgba = normalize_color(color)
        shifted = pts + np.asarray(position, dtype=np.float64)
        for i in range(1, len(shifted)):
            a = shifted[i - 1]
            b = shifted[i]
            self.draw_line((a[0], a[1]), (b[0], b[1]), rgba, thickness)

    def draw_circle(
        self, center: Vec2, radius: float, sides: int, color: ColorLike, thickness: float
    ) -> None:
        """中心 `center`・半径 `radius` の円を `sides` 角形で近似して描く。"""
        self._ensure_alive()
        self.draw_points(center, self._generator.create_circle(radius, sides), color, thickness)

    def draw_arc(
        self,
        center: Vec2,
        radius: float,
        sides: int,
        starting_angle: float,
        radians: float,
        color: ColorLike,
        thickness: float,
    ) -> None:
        """円弧を描く。

        引数:
            starting_angle: 開始角 [rad]。0 が東、画面座標では時計回りに増加。
            radians: 開始角から時計回りに描く角度 [rad]。
        """
        self._ensure_alive()
        arc = self._generator.create_arc(radius, sides, starting_angle, radians)
        self.draw_points(center, arc, color, thickness)


__all__ = ["Primitives2D", "segment_transform"]
