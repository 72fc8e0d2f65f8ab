"""
どこで: `engine.render.shader`。
何を: インスタンス描画用スプライトシェーダ（単位クアッドを拡大・回転・平行移動）を生成。
なぜ: GLSL ソースを描画ロジックから分離し、プログラム生成を一箇所に集約するため。
"""

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 330
uniform mat4 projection;

in vec2 in_corner;        // 単位クアッド (0..1, 0..1)

in vec2 inst_pos;         // 配置位置 [px]
in vec2 inst_size;        // ソース寸法 * scale [px]
in vec2 inst_origin;      // 回転基準（scale 適用済み）[px]
in vec2 inst_rot_depth;   // (rotation [rad], depth)
in vec4 inst_color;
in vec4 inst_uv;          // (u0, v0, u1, v1)

out vec2 v_uv;
out vec4 v_color;

void main() {
    vec2 local = in_corner * inst_size - inst_origin;
    float c = cos(inst_rot_depth.x);
    float s = sin(inst_rot_depth.x);
    vec2 world = vec2(local.x * c - local.y * s, local.x * s + local.y * c) + inst_pos;
    v_uv = mix(inst_uv.xy, inst_uv.zw, in_corner);
    v_color = inst_color;
    gl_Position = projection * vec4(world, inst_rot_depth.y, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 330
uniform sampler2D tex;

in vec2 v_uv;
in vec4 v_color;

out vec4 frag_color;

void main() {
    frag_color = texture(tex, v_uv) * v_color;
}
"""


class Shader:
    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """スプライト用プログラムを生成し、サンプラを 0 番ユニットへ割り当てて返す。"""
        program = ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
        program["tex"].value = 0
        return program


__all__ = ["Shader", "VERTEX_SHADER", "FRAGMENT_SHADER"]
