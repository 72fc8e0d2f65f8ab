"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（背景クリア/キー状態/描画コールバック登録）を提供。
なぜ: アプリ本体/プリミティブ層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(1280, 720, bg_color=(0.39, 0.58, 0.93, 1.0))

    def draw_scene():
        batch.begin()
        primitives.draw_circle((640, 360), 100, 48, "white", 2)
        batch.end()

    win.add_draw_callback(draw_scene)
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor
from pyglet.window import key


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "MapGen",
        bg_color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
        vsync: bool = True,
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            caption: タイトルバー文字列。
            bg_color: 背景色 RGBA（0.0〜1.0）。
        """
        config = Config(double_buffer=True, sample_buffers=1, samples=4, vsync=vsync)
        super().__init__(width=width, height=height, caption=caption, config=config)
        self._bg_color = bg_color
        self._draw_callbacks: list[Callable[[], None]] = []
        # update 側からポーリングするキー状態
        self.keys = key.KeyStateHandler()
        self.push_handlers(self.keys)

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def is_key_down(self, symbol: int) -> bool:
        return bool(self.keys[symbol])

    def exit_requested(self) -> bool:
        """ESC が押されているか（update 側のポーリング用）。"""
        return self.is_key_down(key.ESCAPE)

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。背景をクリアし、登録された描画コールバックを呼び出す。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()

    def set_background_color(self, rgba: tuple[float, float, float, float]) -> None:
        """背景色 RGBA(0–1) を更新する。次フレームから反映。"""
        r, g, b, a = rgba
        self._bg_color = (float(r), float(g), float(b), float(a))
