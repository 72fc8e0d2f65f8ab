"""
どこで: `engine.primitives.errors`。
何を: プリミティブ描画層の例外階層。
なぜ: 不正な幾何パラメータ/依存の欠落/解放後利用を呼び出し側が区別して扱えるようにするため。
"""

from __future__ import annotations


class PrimitivesError(Exception):
    """プリミティブ描画層の基底例外。"""


class InvalidGeometryError(PrimitivesError, ValueError):
    """半径/辺数/角度が円・円弧を生成できない値のとき。"""


class InvalidDependencyError(PrimitivesError, TypeError):
    """描画バッチ/デバイスが未指定または要件を満たさないとき（構築時に送出）。"""


class DisposedResourceError(PrimitivesError, RuntimeError):
    """解放済みの `Primitives2D` で描画しようとしたとき。"""


__all__ = [
    "PrimitivesError",
    "InvalidGeometryError",
    "InvalidDependencyError",
    "DisposedResourceError",
]
