"""
どこで: `common.settings`
何を: ハーネスの環境変数（`MGN_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int


@dataclass
class _Settings:
    # Primitives / circle cache
    CIRCLE_CACHE_DEBUG: bool = False
    # YAML の demo.sides 未指定時に使う辺数
    DEFAULT_SIDES: int = 32

    # Logging
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int` を使用。
    - `DEFAULT_SIDES` は 1 未満を 1 に丸める。
    """
    import os

    _settings.CIRCLE_CACHE_DEBUG = env_bool("MGN_CIRCLE_CACHE_DEBUG", False)
    _settings.DEFAULT_SIDES = env_int("MGN_DEFAULT_SIDES", 32, min_value=1)  # type: ignore[assignment]

    raw_level = os.getenv("MGN_LOG_LEVEL")
    _settings.LOG_LEVEL = raw_level.strip().upper() if raw_level and raw_level.strip() else "INFO"


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
