from __future__ import annotations

import math

import moderngl
import numpy as np
import pytest

from engine.primitives import Primitives2D
from engine.render.quad_mesh import INSTANCE_FLOATS, QuadMesh
from engine.render.sprite_batch import (
    SpriteBatch,
    build_projection,
    group_by_texture,
    pack_instances,
)
from engine.render.types import SpriteDraw, SpriteEffects


def _sprite(texture, **kw) -> SpriteDraw:
    base = dict(
        texture=texture,
        position=(0.0, 0.0),
        source_rect=None,
        color=(1.0, 1.0, 1.0, 1.0),
        rotation=0.0,
        origin=(0.0, 0.0),
        scale=(1.0, 1.0),
    )
    base.update(kw)
    return SpriteDraw(**base)


def test_build_projection_maps_pixels_to_clip_space() -> None:
    proj = build_projection(800, 600)
    m = proj.T  # 転置済みで渡されるため戻してから適用
    top_left = m @ np.array([0.0, 0.0, 0.0, 1.0])
    bottom_right = m @ np.array([800.0, 600.0, 0.0, 1.0])
    assert np.allclose(top_left[:2], (-1.0, 1.0))
    assert np.allclose(bottom_right[:2], (1.0, -1.0))


def test_build_projection_rejects_empty_viewport() -> None:
    with pytest.raises(ValueError):
        build_projection(0, 600)


def test_pack_instances_for_stretched_pixel(fake_ctx) -> None:
    pixel = fake_ctx.texture((1, 1), 4, b"\xff" * 4)
    angle = math.atan2(4.0, 3.0)
    row = pack_instances(
        [_sprite(pixel, position=(10.0, 20.0), rotation=angle, scale=(5.0, 2.0), depth=0.25)]
    )[0]
    assert row.dtype == np.float32
    assert row.shape == (INSTANCE_FLOATS,)
    assert row[0:2].tolist() == [10.0, 20.0]
    assert row[2:4].tolist() == [5.0, 2.0]
    assert row[4:6].tolist() == [0.0, 0.0]
    assert row[6] == pytest.approx(angle)
    assert row[7] == pytest.approx(0.25)
    assert row[8:12].tolist() == [1.0, 1.0, 1.0, 1.0]
    assert row[12:16].tolist() == [0.0, 0.0, 1.0, 1.0]


def test_pack_instances_source_rect_origin_and_flip(fake_ctx) -> None:
    tex = fake_ctx.texture((4, 4), 4)
    row = pack_instances(
        [
            _sprite(
                tex,
                source_rect=(1, 1, 2, 2),
                origin=(1.0, 1.0),
                scale=(3.0, 3.0),
                effects=SpriteEffects.FLIP_HORIZONTALLY,
            )
        ]
    )[0]
    assert row[2:4].tolist() == [6.0, 6.0]
    assert row[4:6].tolist() == [3.0, 3.0]
    assert row[12:16].tolist() == pytest.approx([0.75, 0.25, 0.25, 0.75])


def test_group_by_texture_keeps_submission_order(fake_ctx) -> None:
    a = fake_ctx.texture((1, 1), 4)
    b = fake_ctx.texture((1, 1), 4)
    groups = group_by_texture([_sprite(a), _sprite(a), _sprite(b), _sprite(a)])
    assert [(tex is a, len(items)) for tex, items in groups] == [(True, 2), (False, 1), (True, 1)]


@pytest.fixture()
def batch(fake_ctx) -> SpriteBatch:
    return SpriteBatch(fake_ctx, build_projection(640, 480))


def test_batch_compiles_program_and_writes_projection(batch, fake_ctx) -> None:
    prog = fake_ctx.programs[0]
    assert "inst_rot_depth" in prog.vertex_shader
    assert prog["tex"].value == 0
    assert len(prog["projection"].writes) == 1


def test_batch_flushes_one_instanced_draw_per_texture_run(batch, fake_ctx) -> None:
    a = fake_ctx.texture((1, 1), 4)
    b = fake_ctx.texture((1, 1), 4)
    batch.begin()
    batch.draw(a, (0, 0), scale=(10, 1))
    batch.draw(a, (5, 5), scale=(10, 1))
    batch.draw(b, (5, 5))
    assert batch.pending == 3
    batch.end()

    assert batch.draw_calls == 2
    assert batch.sprite_count == 3
    assert batch.pending == 0
    renders = batch.mesh.vao.render_calls
    assert [r["instances"] for r in renders] == [2, 1]
    assert all(r["mode"] == moderngl.TRIANGLE_STRIP and r["vertices"] == 4 for r in renders)
    assert a.used == [0] and b.used == [0]


def test_empty_batch_renders_nothing(batch) -> None:
    batch.begin()
    batch.end()
    assert batch.draw_calls == 0
    assert batch.mesh.vao.render_calls == []


def test_batch_state_errors(batch, fake_ctx) -> None:
    tex = fake_ctx.texture((1, 1), 4)
    with pytest.raises(RuntimeError):
        batch.draw(tex, (0, 0))
    with pytest.raises(RuntimeError):
        batch.end()
    batch.begin()
    with pytest.raises(RuntimeError):
        batch.begin()
    with pytest.raises(ValueError):
        batch.draw(tex, (0, 0), rotation=float("nan"))


def test_release_is_idempotent_and_blocks_begin(batch, fake_ctx) -> None:
    batch.release()
    batch.release()
    assert fake_ctx.programs[0].release_count == 1
    assert batch.mesh.vao.release_count == 1
    with pytest.raises(RuntimeError):
        batch.begin()


def test_quad_mesh_grows_instance_buffer(fake_ctx) -> None:
    program = fake_ctx.program(vertex_shader="", fragment_shader="")
    mesh = QuadMesh(fake_ctx, program, initial_reserve=64)
    first_vbo = mesh.instance_vbo
    instances = np.zeros((10, INSTANCE_FLOATS), dtype=np.float32)
    mesh.upload(instances)
    assert first_vbo.release_count == 1
    assert mesh.instance_vbo.size >= instances.nbytes
    assert len(fake_ctx.vertex_arrays) == 2
    assert mesh.instance_count == 10
    mesh.render()
    assert mesh.vao.render_calls[-1]["instances"] == 10


def test_primitives_over_sprite_batch(batch) -> None:
    prims = Primitives2D(batch)
    batch.begin()
    prims.draw_circle((320.0, 240.0), 100.0, 24, "white", 2.0)
    prims.draw_line((0.0, 0.0), (640.0, 480.0), "red", 1.0)
    batch.end()
    # ピクセル 1 枚を共有するので 1 回の描画にまとまる
    assert batch.sprite_count == 25
    assert batch.draw_calls == 1
    prims.dispose()
