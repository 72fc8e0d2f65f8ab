"""
ハーネス向けの軽量ロギングユーティリティ。

要点:
- 各モジュールは `logging.getLogger(__name__)` でロガーを取得する。
- アプリ側で設定が無い場合でも、妥当な最小構成を 1 度だけ適用するヘルパーを提供する。
"""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str) -> int:
    """レベル指定（"DEBUG" などの名前または数値）を `logging` の数値へ解決する。

    未知の名前は INFO へフォールバックする。
    """
    if isinstance(level, str):
        lvl = logging.getLevelName(level.strip().upper())
        return lvl if isinstance(lvl, int) else logging.INFO
    return int(level)


def setup_default_logging(level: int | str | None = None) -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - `level` 省略時は `common.settings` の `LOG_LEVEL`（`MGN_LOG_LEVEL`）を使う
    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    if level is None:
        from .settings import get as _get_settings

        level = _get_settings().LOG_LEVEL
    lvl = resolve_level(level)

    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(level=lvl, format=_FORMAT)


__all__ = ["setup_default_logging", "resolve_level"]
