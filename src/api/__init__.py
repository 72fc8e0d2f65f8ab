"""
どこで: `api` 入口（高レベル公開 API）。
何を: アプリ本体 `MapGenApp`・設定 `AppConfig`・CLI `main` を再輸出。

Usage:
    from api import MapGenApp, resolve_app_config

    MapGenApp(resolve_app_config({"width": 800, "height": 600})).run()
"""

from .app import MapGenApp
from .config import AppConfig, resolve_app_config
from .run import main

__all__ = [
    "MapGenApp",
    "AppConfig",
    "resolve_app_config",
    "main",
]
