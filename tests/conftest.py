"""共通フィクスチャ。

- ModernGL コンテキスト/テクスチャ/バッファのフェイク（GPU 不要）
- 描画要求を記録するだけのバッチ
- 共有キャッシュから切り離したジオメトリジェネレータ
"""

from __future__ import annotations

from typing import Any

import pytest

from engine.primitives.cache import CircleCache
from engine.primitives.geometry import GeometryGenerator


class FakeTexture:
    def __init__(self, size: tuple[int, int] = (1, 1), components: int = 4, data: bytes = b""):
        self.size = tuple(size)
        self.components = components
        self.data = data
        self.filter: Any = None
        self.used: list[int] = []
        self.release_count = 0

    def use(self, location: int = 0) -> None:
        self.used.append(location)

    def release(self) -> None:
        self.release_count += 1


class FakeUniform:
    def __init__(self) -> None:
        self.value: Any = None
        self.writes: list[bytes] = []

    def write(self, data: bytes) -> None:
        self.writes.append(data)


class FakeProgram:
    def __init__(self, vertex_shader: str, fragment_shader: str) -> None:
        self.vertex_shader = vertex_shader
        self.fragment_shader = fragment_shader
        self.uniforms: dict[str, FakeUniform] = {}
        self.release_count = 0

    def __getitem__(self, name: str) -> FakeUniform:
        return self.uniforms.setdefault(name, FakeUniform())

    def release(self) -> None:
        self.release_count += 1


class FakeBuffer:
    def __init__(self, data: bytes | None = None, *, reserve: int = 0, dynamic: bool = False):
        self.size = len(data) if data is not None else int(reserve)
        self.dynamic = dynamic
        self.writes: list[bytes] = []
        self.orphans = 0
        self.release_count = 0

    def orphan(self) -> None:
        self.orphans += 1

    def write(self, data: bytes) -> None:
        self.writes.append(data)

    def release(self) -> None:
        self.release_count += 1


class FakeVAO:
    def __init__(self, program: FakeProgram, content: list[tuple]) -> None:
        self.program = program
        self.content = content
        self.render_calls: list[dict[str, int]] = []
        self.release_count = 0

    def render(self, mode: int, vertices: int = -1, first: int = 0, instances: int = -1) -> None:
        self.render_calls.append({"mode": mode, "vertices": vertices, "instances": instances})

    def release(self) -> None:
        self.release_count += 1


class FakeContext:
    """`moderngl.Context` のうち本プロジェクトが使う API だけを持つフェイク。"""

    def __init__(self) -> None:
        self.textures: list[FakeTexture] = []
        self.programs: list[FakeProgram] = []
        self.buffers: list[FakeBuffer] = []
        self.vertex_arrays: list[FakeVAO] = []
        self.release_count = 0

    def texture(self, size: tuple[int, int], components: int, data: bytes = b"") -> FakeTexture:
        tex = FakeTexture(size, components, data)
        self.textures.append(tex)
        return tex

    def program(self, *, vertex_shader: str, fragment_shader: str) -> FakeProgram:
        prog = FakeProgram(vertex_shader, fragment_shader)
        self.programs.append(prog)
        return prog

    def buffer(
        self, data: bytes | None = None, *, reserve: int = 0, dynamic: bool = False
    ) -> FakeBuffer:
        buf = FakeBuffer(data, reserve=reserve, dynamic=dynamic)
        self.buffers.append(buf)
        return buf

    def vertex_array(self, program: FakeProgram, content: list[tuple]) -> FakeVAO:
        vao = FakeVAO(program, content)
        self.vertex_arrays.append(vao)
        return vao

    def release(self) -> None:
        self.release_count += 1


class RecordingBatch:
    """`draw()` の引数を記録するだけのバッチ。"""

    def __init__(self, ctx: Any = None) -> None:
        self.ctx = ctx if ctx is not None else FakeContext()
        self.calls: list[dict[str, Any]] = []

    def draw(
        self,
        texture: Any,
        position: Any,
        source_rect: Any = None,
        color: Any = (1.0, 1.0, 1.0, 1.0),
        rotation: float = 0.0,
        origin: Any = (0.0, 0.0),
        scale: Any = (1.0, 1.0),
        effects: Any = 0,
        depth: float = 0.0,
    ) -> None:
        self.calls.append(
            {
                "texture": texture,
                "position": position,
                "source_rect": source_rect,
                "color": color,
                "rotation": rotation,
                "origin": origin,
                "scale": scale,
                "effects": effects,
                "depth": depth,
            }
        )


@pytest.fixture()
def fake_ctx() -> FakeContext:
    return FakeContext()


@pytest.fixture()
def recording_batch(fake_ctx: FakeContext) -> RecordingBatch:
    return RecordingBatch(fake_ctx)


@pytest.fixture()
def generator() -> GeometryGenerator:
    """共有キャッシュを汚さないジェネレータ。"""
    return GeometryGenerator(CircleCache(debug=False))
