from __future__ import annotations

import pytest

import api.run as run_mod
from api.run import build_parser, main, resolve_from_args


def test_init_only_returns_zero_without_window() -> None:
    assert main(["--init-only"]) == 0


def test_cli_overrides_are_applied() -> None:
    args = build_parser().parse_args(
        ["--width", "640", "--sides", "12", "--background", "#102030", "--no-demo"]
    )
    cfg = resolve_from_args(args)
    assert cfg.width == 640
    assert cfg.demo_sides == 12
    assert cfg.demo_enabled is False
    assert cfg.background[3] == 1.0


def test_invalid_size_raises() -> None:
    with pytest.raises(ValueError):
        main(["--width", "0", "--init-only"])


def test_main_runs_app(monkeypatch: pytest.MonkeyPatch) -> None:
    ran: list = []

    class _App:
        def __init__(self, config) -> None:
            self.config = config

        def run(self) -> None:
            ran.append(self.config)

    monkeypatch.setattr(run_mod, "MapGenApp", _App)
    assert main(["--fps", "30"]) == 0
    assert len(ran) == 1
    assert ran[0].fps == 30
