"""
どこで: `engine.primitives` サブパッケージ。
何を: 円/円弧の頂点生成（キャッシュ付き）と、単位ピクセルによる線分・図形描画。
なぜ: ハーネスで使う唯一の図形描画手段を、バッチ実装から独立した形で提供するため。
"""

from .cache import CircleCache
from .errors import (
    DisposedResourceError,
    InvalidDependencyError,
    InvalidGeometryError,
    PrimitivesError,
)
from .geometry import GeometryGenerator, create_circle, default_generator
from .primitives2d import Primitives2D

__all__ = [
    "CircleCache",
    "GeometryGenerator",
    "create_circle",
    "default_generator",
    "Primitives2D",
    "PrimitivesError",
    "InvalidGeometryError",
    "InvalidDependencyError",
    "DisposedResourceError",
]
