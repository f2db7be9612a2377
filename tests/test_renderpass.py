from types import SimpleNamespace

import pytest

from pixelbatch import log
from pixelbatch.blend import BlendMode
from pixelbatch.mesh import IndexFormat, Mesh
from pixelbatch.primitives import Rect, Vec2
from pixelbatch.renderpass import Compare, Cull, RenderPass


@pytest.fixture
def mesh():
    m = Mesh()
    m.index_data(IndexFormat.UINT32, [0, 1, 2, 0, 2, 3])
    return m


@pytest.fixture
def material():
    return SimpleNamespace(shader=object())


@pytest.fixture
def warnings():
    messages = []
    previous = log.set_handler(lambda msg, cat: messages.append((msg, cat)))
    yield messages
    log.set_handler(previous)


def test_defaults():
    rp = RenderPass()
    assert rp.blend == BlendMode.NORMAL
    assert rp.depth is Compare.NONE
    assert rp.cull is Cull.NONE


def test_requires_material(mesh):
    with pytest.raises(ValueError):
        RenderPass(mesh=mesh).perform(lambda p: None, Vec2(10, 10))


def test_requires_shader(mesh):
    with pytest.raises(ValueError):
        RenderPass(mesh=mesh, material=SimpleNamespace(shader=None)).perform(lambda p: None, Vec2(1, 1))


def test_requires_mesh(material):
    with pytest.raises(ValueError):
        RenderPass(material=material).perform(lambda p: None, Vec2(10, 10))


def test_viewport_defaults_to_draw_size(mesh, material):
    seen = []
    rp = RenderPass(mesh=mesh, material=material, index_count=6)
    result = rp.perform(seen.append, Vec2(320, 180))
    assert seen == [result]
    assert result.viewport == Rect(0, 0, 320, 180)
    assert rp.viewport == Rect()


def test_viewport_clipped(mesh, material):
    rp = RenderPass(mesh=mesh, material=material, index_count=6, has_viewport=True,
                    viewport=Rect(-10, 5, 100, 100))
    result = rp.perform(lambda p: None, Vec2(50, 50))
    assert result.viewport == Rect(0, 5, 50, 45)


def test_scissor_clipped_to_target(mesh, material):
    target = SimpleNamespace(width=40, height=30)
    rp = RenderPass(target=target, mesh=mesh, material=material, index_count=6,
                    has_scissor=True, scissor=Rect(10, 10, 100, 100))
    result = rp.perform(lambda p: None, Vec2(1000, 1000))
    assert result.scissor == Rect(10, 10, 30, 20)
    assert result.viewport == Rect(0, 0, 40, 30)


def test_index_overflow_trimmed(mesh, material, warnings):
    rp = RenderPass(mesh=mesh, material=material, index_start=2, index_count=6)
    result = rp.perform(lambda p: None, Vec2(10, 10))
    assert result.index_count == 4
    assert warnings and warnings[0][1] is log.LogCategory.WARNING


def test_index_overflow_skipped(mesh, material, warnings):
    seen = []
    rp = RenderPass(mesh=mesh, material=material, index_start=9, index_count=3)
    assert rp.perform(seen.append, Vec2(10, 10)) is None
    assert seen == []
    assert len(warnings) == 1


def test_instance_count_clamped(mesh, material, warnings):
    rp = RenderPass(mesh=mesh, material=material, index_count=6, instance_count=5)
    result = rp.perform(lambda p: None, Vec2(10, 10))
    assert result.instance_count == mesh.instance_count()
    assert len(warnings) == 1