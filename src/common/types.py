"""
どこで: `common` の型定義。
何を: Vec2/RGBA/Rect などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from __future__ import annotations

Vec2 = tuple[float, float]
RGBA = tuple[float, float, float, float]
# (x, y, width, height) [px]
Rect = tuple[int, int, int, int]

__all__ = ["Vec2", "RGBA", "Rect"]
