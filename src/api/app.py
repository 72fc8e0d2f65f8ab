"""
どこで: `api.app`（アプリ本体）。
何を: ウィンドウ生成・コンテンツ読込/解放・入力ポーリング・クリア＆描画を行う `MapGenApp`。
なぜ: マップ生成器の動作確認用ハーネスとして、最小のライフサイクルと 2D プリミティブ描画を提供するため。

ライフサイクル:
1) `initialize()`  : 重い依存に触れない初期化（ログのみ）。
2) `load_content()`: ウィンドウ/ModernGL/SpriteBatch/Primitives2D を生成。
3) フレーム毎     : `update(dt)`（ESC で終了）→ `draw()`（背景クリア後にデモ描画）。
4) `unload_content()`: Primitives2D・バッチ・GL コンテキストを解放し、ウィンドウを閉じる。

`run()` は 1)〜4) を順に行い、ループが例外で抜けた場合も 4) を必ず実行する。
"""

from __future__ import annotations

import logging
import math
from typing import Any

from engine.primitives import Primitives2D

from .config import AppConfig

logger = logging.getLogger(__name__)


class MapGenApp:
    """マップ生成器テスト用のグラフィカルハーネス。"""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config if config is not None else AppConfig()
        self.window: Any = None
        self.ctx: Any = None
        self.sprite_batch: Any = None
        self.primitives: Primitives2D | None = None
        self.elapsed: float = 0.0
        self._exit_requested = False
        self._window_closed = False

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    # ---- lifecycle -------------------------------------------------------
    def initialize(self) -> None:
        """コンテンツ以外の初期化。現状はログ出力のみ。"""
        logger.info(
            "initializing %s (%dx%d @ %d fps)",
            self.config.caption,
            self.config.width,
            self.config.height,
            self.config.fps,
        )

    def load_content(self) -> None:
        """ウィンドウ/ModernGL コンテキスト/SpriteBatch/Primitives2D を生成する。"""
        # 遅延 import（ヘッドレス環境での import 時ウィンドウ生成を避ける）
        import moderngl

        from engine.core.render_window import RenderWindow
        from engine.render.sprite_batch import SpriteBatch, build_projection

        cfg = self.config
        self.window = RenderWindow(
            cfg.width, cfg.height, caption=cfg.caption, bg_color=cfg.background
        )
        self.ctx = moderngl.create_context()
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)

        self.sprite_batch = SpriteBatch(self.ctx, build_projection(cfg.width, cfg.height))
        self.primitives = Primitives2D(self.sprite_batch)
        self.window.add_draw_callback(self.draw)
        self.window.push_handlers(on_resize=self._on_resize)
        logger.debug("content loaded (GL %s)", self.ctx.info.get("GL_VERSION", "?"))

    def unload_content(self) -> None:
        """読み込んだリソースを解放する。未読込/一部のみ読込でも安全に呼べる。

        解放順は Primitives2D → SpriteBatch → ModernGL コンテキスト → ウィンドウ。
        途中で例外が出ても後続の解放は必ず行い、例外はそのまま伝播させる。
        """
        try:
            if self.primitives is not None:
                self.primitives.dispose()
        finally:
            try:
                if self.sprite_batch is not None:
                    self.sprite_batch.release()
            finally:
                try:
                    ctx, self.ctx = self.ctx, None
                    if ctx is not None:
                        ctx.release()
                finally:
                    self._close_window()
        logger.debug("content unloaded")

    def _close_window(self) -> None:
        if self.window is None or self._window_closed:
            return
        self._window_closed = True
        self.window.close()

    # ---- per frame -------------------------------------------------------
    def tick(self, dt: float) -> None:
        """`FrameClock` からの呼び出し口。"""
        self.update(dt)

    def update(self, dt: float) -> None:
        """入力をポーリングし、ESC で終了を要求する。"""
        self.elapsed += dt
        if self.window is not None and self.window.exit_requested():
            self.exit()

    def exit(self) -> None:
        """ウィンドウを閉じてループを終了させる（冪等）。"""
        if self._exit_requested:
            return
        self._exit_requested = True
        logger.info("exit requested")
        # 最後のウィンドウが閉じると pyglet のイベントループが終了する
        self._close_window()

    def draw(self) -> None:
        """背景クリア後（RenderWindow 側で実施）にデモ図形を描く。"""
        if not self.config.demo_enabled or self.primitives is None:
            return
        self.sprite_batch.begin()
        try:
            self.draw_demo()
        finally:
            self.sprite_batch.end()

    def draw_demo(self) -> None:
        """中心に円、その外周に回転する 3/4 円弧、対角線を 1 本描く。"""
        cfg = self.config
        prims = self.primitives
        assert prims is not None
        cx, cy = cfg.width / 2.0, cfg.height / 2.0
        radius = min(cfg.width, cfg.height) / 4.0
        color = cfg.demo_color
        thickness = cfg.demo_thickness

        prims.draw_circle((cx, cy), radius, cfg.demo_sides, color, thickness)
        start = math.fmod(self.elapsed, 2.0 * math.pi)
        prims.draw_arc(
            (cx, cy), radius * 1.25, cfg.demo_sides, start, 1.5 * math.pi, color, thickness
        )
        prims.draw_line((0.0, 0.0), (float(cfg.width), float(cfg.height)), color, 1.0)

    def _on_resize(self, width: int, height: int) -> None:
        if self.sprite_batch is None or width <= 0 or height <= 0:
            return
        from engine.render.sprite_batch import build_projection

        self.sprite_batch.set_projection(build_projection(width, height))

    # ---- main loop -------------------------------------------------------
    def run(self) -> None:
        """初期化 → コンテンツ読込 → pyglet ループ → 解放。"""
        import pyglet

        from engine.core.frame_clock import FrameClock

        self.initialize()
        frame_clock = FrameClock([self])
        try:
            self.load_content()
            pyglet.clock.schedule_interval(frame_clock.tick, 1.0 / self.config.fps)
            pyglet.app.run()
        finally:
            pyglet.clock.unschedule(frame_clock.tick)
            self.unload_content()
        logger.info(
            "exited after %d frames (%.1f fps)", frame_clock.frame_count, frame_clock.fps
        )


__all__ = ["MapGenApp"]
