import pytest

from pixelbatch.mesh import (
    IndexFormat,
    Mesh,
    VertexAttribute,
    VertexFormat,
    VertexType,
)


def test_stride_computed_for_sprite_format():
    fmt = VertexFormat([
        VertexAttribute(0, VertexType.FLOAT2, False),
        VertexAttribute(1, VertexType.FLOAT2, False),
        VertexAttribute(2, VertexType.UBYTE4, True),
        VertexAttribute(3, VertexType.UBYTE4, True),
    ])
    assert fmt.stride == 24
    assert len(fmt.attributes) == 4


def test_explicit_stride_kept():
    fmt = VertexFormat([VertexAttribute(0, VertexType.FLOAT)], stride=32)
    assert fmt.stride == 32


def test_none_attribute_adds_nothing():
    with_none = VertexFormat([VertexAttribute(0, VertexType.NONE), VertexAttribute(1, VertexType.FLOAT3)])
    without = VertexFormat([VertexAttribute(1, VertexType.FLOAT3)])
    assert with_none.stride == without.stride


@pytest.mark.parametrize("first", list(VertexType))
def test_stride_is_sum_of_attributes(first):
    second = VertexType.SHORT4
    combined = VertexFormat([VertexAttribute(0, first), VertexAttribute(1, second)])
    parts = (
        VertexFormat([VertexAttribute(0, first)]).stride
        + VertexFormat([VertexAttribute(1, second)]).stride
    )
    assert combined.stride == parts


def test_too_many_attributes():
    with pytest.raises(ValueError):
        VertexFormat([VertexAttribute(i, VertexType.FLOAT) for i in range(17)])


def test_mesh_counts():
    mesh = Mesh()
    assert (mesh.index_count(), mesh.vertex_count(), mesh.instance_count()) == (0, 0, 0)
    fmt = VertexFormat([VertexAttribute(0, VertexType.FLOAT2)])
    mesh.index_data(IndexFormat.UINT32, [0, 1, 2, 0, 2, 3])
    mesh.vertex_data(fmt, ["a", "b", "c", "d"])
    mesh.instance_data(fmt, ["i"])
    assert (mesh.index_count(), mesh.vertex_count(), mesh.instance_count()) == (6, 4, 1)
    assert mesh.indices == (0, 1, 2, 0, 2, 3)
    assert mesh.vertex_format is fmt


def test_uint16_index_range():
    mesh = Mesh()
    mesh.index_data(IndexFormat.UINT16, [65535])
    assert mesh.indices == (65535,)
    with pytest.raises(ValueError):
        mesh.index_data(IndexFormat.UINT16, [65536])


def test_negative_index_rejected():
    with pytest.raises(ValueError):
        Mesh().index_data(IndexFormat.UINT32, [-1])