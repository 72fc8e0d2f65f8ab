from __future__ import annotations

from api import AppConfig, MapGenApp
from common import setup_default_logging

if __name__ == "__main__":
    setup_default_logging()
    MapGenApp(AppConfig(width=1280, height=720, demo_sides=64)).run()
