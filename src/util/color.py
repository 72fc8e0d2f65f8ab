"""
どこで: `util.color`。
何を: 色指定の正規化（名前, Hex, RGBA 0–1, RGBA 0–255）を一元化。
なぜ: 描画 API/設定ファイル/CLI で同一の受理仕様とエラーメッセージを提供するため。
"""

from __future__ import annotations

from typing import Sequence

from common.types import RGBA

# 名前付き色（小文字キー）。値は "#RRGGBB"。
NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "lime": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "gray": "#808080",
    "orange": "#ffa500",
    "cornflowerblue": "#6495ed",
    "transparent": "#00000000",
}


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> RGBA:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    大文字/小文字は不問。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def parse_color_str(s: str) -> RGBA:
    """色名または Hex 文字列を RGBA(0–1) へ変換する。"""
    named = NAMED_COLORS.get(s.strip().lower())
    if named is not None:
        return parse_hex_color_str(named)
    return parse_hex_color_str(s)


def _as_sequence(value: object) -> Sequence[float | int] | None:
    if isinstance(value, (list, tuple)):
        return value  # type: ignore[return-value]
    return None


def normalize_color(value: object) -> RGBA:
    """色を RGBA(0–1) へ正規化する。

    - 受理: 色名, Hex 文字列, (r,g,b[,a]) （0–1 または 0–255）
    - 返値: (r,g,b,a) （0–1）
    """
    if isinstance(value, str):
        return parse_color_str(value)
    seq = _as_sequence(value)
    if seq is None:
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        comps = [float(c) for c in seq]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(comps) == 3:
        comps.append(1.0 if all(0.0 <= c <= 1.0 for c in comps) else 255.0)
    # 全要素が 0..1 ならそのまま
    if all(0.0 <= c <= 1.0 for c in comps):
        r, g, b, a = comps
        return (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))
    # 0–255 とみなし、整数丸め → 0–1 へスケール
    r8, g8, b8, a8 = (max(0, min(255, int(round(c)))) for c in comps)
    return (r8 / 255.0, g8 / 255.0, b8 / 255.0, a8 / 255.0)


def to_u8_rgba(value: object) -> tuple[int, int, int, int]:
    """色を RGBA(0–255) へ変換する。"""
    r, g, b, a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(a * 255)))


__all__ = [
    "NAMED_COLORS",
    "parse_hex_color_str",
    "parse_color_str",
    "normalize_color",
    "to_u8_rgba",
]
