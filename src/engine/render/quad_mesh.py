"""
どこで: `engine.render` の低レベルメッシュ層。
何を: 単位クアッド VBO・インスタンス VBO・VAO の確保・更新・解放を担当する `QuadMesh`。
なぜ: GPU 転送の詳細を SpriteBatch から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import moderngl as mgl
import numpy as np

# インスタンス属性のレイアウト（float32 x 16）
INSTANCE_FORMAT = "2f 2f 2f 2f 4f 4f/i"
INSTANCE_ATTRIBUTES = (
    "inst_pos",
    "inst_size",
    "inst_origin",
    "inst_rot_depth",
    "inst_color",
    "inst_uv",
)
INSTANCE_FLOATS = 16

# TRIANGLE_STRIP 順の単位クアッド
UNIT_QUAD = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [1.0, 1.0]], dtype=np.float32)


class QuadMesh:
    """
    単位クアッドを N 個のインスタンスとして描くための GPU バッファを管理
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期 GPU メモリ確保量（既定: 1024 インスタンス分）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * INSTANCE_FLOATS * 4,
    ):
        """
        ctx: ModernGL コンテキスト
        program: スプライトシェーダ（`engine.render.shader.Shader`）
        quad_vbo: 単位クアッドの 4 頂点（不変）
        instance_vbo: スプライトごとの位置/寸法/回転/色/UV
        """
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve

        self.quad_vbo = ctx.buffer(UNIT_QUAD.tobytes())
        self.instance_vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = self._build_vao()
        self.instance_count: int = 0

    def _build_vao(self) -> Any:
        return self.ctx.vertex_array(
            self.program,
            [
                (self.quad_vbo, "2f", "in_corner"),
                (self.instance_vbo, INSTANCE_FORMAT, *INSTANCE_ATTRIBUTES),
            ],
        )

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, nbytes: int) -> None:
        """データが大きくなったらインスタンスバッファを再確保"""
        if nbytes <= self.instance_vbo.size:
            return
        self.instance_vbo.release()
        self.instance_vbo = self.ctx.buffer(reserve=max(nbytes, self.initial_reserve), dynamic=True)
        # VAO は VBO が差し替わるたびに張り直す
        self.vao.release()
        self.vao = self._build_vao()

    def upload(self, instances: np.ndarray) -> None:
        """インスタンス配列 `(N, 16)` float32 を GPU へ送り込む"""
        self._ensure_capacity(instances.nbytes)
        self.instance_vbo.orphan()
        self.instance_vbo.write(np.ascontiguousarray(instances, dtype=np.float32).tobytes())
        self.instance_count = int(instances.shape[0])

    def render(self) -> None:
        """直近 upload 分のインスタンスを描画"""
        if self.instance_count <= 0:
            return
        self.vao.render(mgl.TRIANGLE_STRIP, vertices=4, instances=self.instance_count)

    def release(self) -> None:
        """GPU のメモリを解放する（終了時に使う）"""
        self.quad_vbo.release()
        self.instance_vbo.release()
        self.vao.release()


__all__ = ["QuadMesh", "INSTANCE_FLOATS", "INSTANCE_FORMAT", "UNIT_QUAD"]
