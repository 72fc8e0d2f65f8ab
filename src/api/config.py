"""
どこで: `api.config`。
何を: ハーネスの実行設定 `AppConfig` と、その解決（YAML → 明示指定の順に上書き）。
なぜ: ウィンドウ/背景/デモ描画の既定値を 1 箇所で検証し、アプリ本体を設定読込から切り離すため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from common import settings
from common.types import RGBA
from util.color import normalize_color


@dataclass(frozen=True)
class AppConfig:
    width: int = 1280
    height: int = 720
    caption: str = "MapGen"
    fps: int = 60
    background: RGBA = (100 / 255.0, 149 / 255.0, 237 / 255.0, 1.0)  # cornflowerblue
    demo_enabled: bool = True
    demo_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    demo_thickness: float = 2.0
    demo_sides: int = 32


def _section(cfg: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    sec = cfg.get(name, {})
    return sec if isinstance(sec, Mapping) else {}


def _positive_int(name: str, value: Any) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
    if v <= 0:
        raise ValueError(f"{name} must be > 0, got {v}")
    return v


def resolve_app_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    cfg: Mapping[str, Any] | None = None,
) -> AppConfig:
    """設定を解決して `AppConfig` を返す。

    優先順位は「`overrides` の非 None 値 > YAML（`window`/`demo` セクション）> 既定値」。
    `demo_sides` の既定値は `MGN_DEFAULT_SIDES`（`common.settings.DEFAULT_SIDES`）。
    `cfg` 省略時は `util.utils.load_config()` を読む。

    例外:
        ValueError: 寸法/FPS/辺数が正でない、または色が解釈できないとき。
    """
    if cfg is None:
        from util.utils import load_config

        cfg = load_config()
    window = _section(cfg, "window")
    demo = _section(cfg, "demo")
    defaults = AppConfig()

    values: dict[str, Any] = {
        "width": window.get("width", defaults.width),
        "height": window.get("height", defaults.height),
        "caption": window.get("caption", defaults.caption),
        "fps": window.get("fps", defaults.fps),
        "background": window.get("background_color", defaults.background),
        "demo_enabled": demo.get("enabled", defaults.demo_enabled),
        "demo_color": demo.get("color", defaults.demo_color),
        "demo_thickness": demo.get("thickness", defaults.demo_thickness),
        "demo_sides": demo.get("sides", settings.get().DEFAULT_SIDES),
    }
    for k, v in (overrides or {}).items():
        if k not in values:
            raise ValueError(f"unknown config key: {k}")
        if v is not None:
            values[k] = v

    thickness = float(values["demo_thickness"])
    if thickness <= 0.0:
        raise ValueError(f"demo_thickness must be > 0, got {thickness}")

    return AppConfig(
        width=_positive_int("width", values["width"]),
        height=_positive_int("height", values["height"]),
        caption=str(values["caption"]),
        fps=_positive_int("fps", values["fps"]),
        background=normalize_color(values["background"]),
        demo_enabled=bool(values["demo_enabled"]),
        demo_color=normalize_color(values["demo_color"]),
        demo_thickness=thickness,
        demo_sides=_positive_int("demo_sides", values["demo_sides"]),
    )


__all__ = ["AppConfig", "resolve_app_config"]
