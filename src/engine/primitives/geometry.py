"""
どこで: `engine.primitives.geometry`。
何を: 円/円弧を近似する頂点列（PointSequence）の生成と、円キャッシュを持つ `GeometryGenerator`。
なぜ: 線分描画層から三角関数計算とキャッシュ方針を切り離し、純粋関数としてテスト可能にするため。

座標系:
- 角度 0 は +X（東）。角度は増加方向に進む（Y 下向きの画面座標では時計回りに見える）。
- 頂点列は `(N, 2)` の float32 配列。原点基準で、描画時に中心座標を加算する。
"""

from __future__ import annotations

import math
from numbers import Integral, Real

import numpy as np

from .cache import CircleCache
from .errors import InvalidGeometryError

TWO_PI = 2.0 * math.pi


def _validate_sides(sides: object) -> int:
    if isinstance(sides, bool) or not isinstance(sides, Integral):
        raise InvalidGeometryError(f"sides must be an integer, got {sides!r}")
    n = int(sides)
    if n < 1:
        raise InvalidGeometryError(f"sides must be >= 1, got {n}")
    return n


def _validate_radius(radius: object) -> float:
    if isinstance(radius, bool) or not isinstance(radius, Real):
        raise InvalidGeometryError(f"radius must be a real number, got {radius!r}")
    r = float(radius)
    if not math.isfinite(r) or r <= 0.0:
        raise InvalidGeometryError(f"radius must be finite and > 0, got {r}")
    return r


def _validate_angle(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidGeometryError(f"{name} must be a real number, got {value!r}")
    v = float(value)
    if not math.isfinite(v):
        raise InvalidGeometryError(f"{name} must be finite, got {v}")
    return v


def create_circle(radius: float, sides: int) -> np.ndarray:
    """円周上に等間隔な頂点列を生成します（キャッシュなし）。

    引数:
        radius: 半径（> 0）。
        sides: 辺の数（>= 1）。

    返り値:
        `(sides + 1, 2)` の配列。角度 0 の `(radius, 0)` から始まり、
        最後に先頭頂点を複製して閉ループにする。
    """
    r = _validate_radius(radius)
    n = _validate_sides(sides)

    # 累積加算ではなくインデックスから角度を求める（浮動小数誤差で頂点数が揺れない）
    theta = np.arange(n, dtype=np.float64) * (TWO_PI / n)
    vertices = np.stack([r * np.cos(theta), r * np.sin(theta)], axis=1).astype(np.float32)

    # 最初の頂点を末尾に追加して閉ループにする
    return np.append(vertices, vertices[0:1], axis=0)


def alignment_offset(starting_angle: float, angle_per_side: float) -> int:
    """開始角に最も近い辺境界までの先頭シフト量（辺の数）を返す。

    先頭ステップの中点角 `k * step + step / 2` が `starting_angle` 未満である間だけ
    進める規則を閉じた式で表す。すなわち開始角を最寄りの辺境界へ丸める（切り捨てではない）。
    中点角と開始角がちょうど一致する場合は進めない。
    戻り値は `sides` で剰余を取る前の値。
    """
    half = angle_per_side / 2.0
    if starting_angle <= half:
        return 0
    k = int(math.ceil((starting_angle - half) / angle_per_side))
    # 除算の丸め誤差で 1 辺ずれるため、ループと同じ比較で補正する
    while k > 0 and (k - 1) * angle_per_side + half >= starting_angle:
        k -= 1
    while k * angle_per_side + half < starting_angle:
        k += 1
    return k


def sides_in_arc(radians: float, angle_per_side: float) -> int:
    """掃引角に含まれる辺の数（0.5 を足して 0 方向へ切り捨て）。"""
    return int(radians / angle_per_side + 0.5)


def cut_arc(circle: np.ndarray, starting_angle: float, radians: float) -> np.ndarray:
    """閉ループの円頂点列から円弧部分を切り出す。

    `circle` は `create_circle` の戻り値（末尾が先頭の複製）を想定する。
    リングを回転させる代わりに、固定長リングへのインデックスオフセットで参照する。

    返り値:
        `sides_in_arc + 1` 点の配列。全周を掃引した場合は先頭と末尾が一致する。

    例外:
        InvalidGeometryError: 掃引角が負、または全周を超える辺数を要求したとき。
    """
    start = _validate_angle("starting_angle", starting_angle)
    sweep = _validate_angle("radians", radians)
    n = int(circle.shape[0]) - 1
    if n < 1:
        raise InvalidGeometryError("circle must contain at least one side")
    step = TWO_PI / n

    count = sides_in_arc(sweep, step)
    if count < 0 or count > n:
        raise InvalidGeometryError(
            f"arc sweep {sweep} rad selects {count} sides, outside 0..{n} for sides={n}"
        )

    offset = alignment_offset(start, step) % n
    ring = circle[:n]
    indices = (offset + np.arange(count + 1)) % n
    return ring[indices]


class GeometryGenerator:
    """円（キャッシュ付き）と円弧（非キャッシュ）の頂点列ジェネレータ。

    `cache` 未指定時はモジュール共有のキャッシュを使う（プロセス全体で 1 つ）。
    """

    def __init__(self, cache: CircleCache | None = None) -> None:
        self._cache = cache if cache is not None else _shared_cache()

    @property
    def cache(self) -> CircleCache:
        return self._cache

    def create_circle(self, radius: float, sides: int) -> np.ndarray:
        """`create_circle` のキャッシュ経由版。同一 (radius, sides) で同一インスタンスを返す。"""
        r = _validate_radius(radius)
        n = _validate_sides(sides)
        return self._cache.get_or_create(r, n, create_circle)

    def create_arc(
        self, radius: float, sides: int, starting_angle: float, radians: float
    ) -> np.ndarray:
        """円弧の頂点列を返す。

        引数:
            radius: 半径。
            sides: 切り出し元の円の辺数。
            starting_angle: 開始角 [rad]。0 が東。
            radians: 開始角から掃引する角度 [rad]。
        """
        return cut_arc(self.create_circle(radius, sides), starting_angle, radians)


# プロセス共有の円キャッシュ（import 時に 1 度だけ生成）
_SHARED_CACHE = CircleCache()


def _shared_cache() -> CircleCache:
    return _SHARED_CACHE


_DEFAULT_GENERATOR = GeometryGenerator(_SHARED_CACHE)


def default_generator() -> GeometryGenerator:
    """共有キャッシュを使う既定のジェネレータを返す。"""
    return _DEFAULT_GENERATOR


__all__ = [
    "TWO_PI",
    "create_circle",
    "alignment_offset",
    "sides_in_arc",
    "cut_arc",
    "GeometryGenerator",
    "default_generator",
]
