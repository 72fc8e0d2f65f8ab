"""
どこで: `api.run`（CLI 入口）。
何を: 引数を解析し、ロギング/設定を解決して `MapGenApp` を実行する。
なぜ: `python -m api.run` / `mapgen` コマンドから同じ手順で起動できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from common.logging import setup_default_logging

from .app import MapGenApp
from .config import AppConfig, resolve_app_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mapgen", description="Map generator test harness")
    p.add_argument("--width", type=int, default=None, help="window width [px]")
    p.add_argument("--height", type=int, default=None, help="window height [px]")
    p.add_argument("--fps", type=int, default=None, help="update rate")
    p.add_argument("--background", default=None, help="clear color (name or #RRGGBB[AA])")
    p.add_argument("--sides", type=int, default=None, help="sides used by the demo circle/arc")
    p.add_argument(
        "--no-demo", action="store_true", help="only clear the window (no primitives)"
    )
    p.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/... (MGN_LOG_LEVEL)")
    p.add_argument(
        "--init-only",
        action="store_true",
        help="resolve configuration and exit without opening a window",
    )
    return p


def resolve_from_args(args: argparse.Namespace) -> AppConfig:
    overrides = {
        "width": args.width,
        "height": args.height,
        "fps": args.fps,
        "background": args.background,
        "demo_sides": args.sides,
        "demo_enabled": False if args.no_demo else None,
    }
    return resolve_app_config(overrides)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_default_logging(args.log_level)
    config = resolve_from_args(args)
    logger.debug("resolved config: %s", config)
    if args.init_only:
        return 0
    MapGenApp(config).run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
