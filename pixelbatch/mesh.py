"""Vertex formats and index/vertex buffers used for drawing."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple

MAX_ATTRIBUTES = 16


class VertexType(enum.Enum):
    """Value type of a vertex attribute."""

    NONE = 0
    FLOAT = 1
    FLOAT2 = 2
    FLOAT3 = 3
    FLOAT4 = 4
    BYTE4 = 5
    UBYTE4 = 6
    SHORT2 = 7
    USHORT2 = 8
    SHORT4 = 9
    USHORT4 = 10

    @property
    def size(self) -> int:
        """Size of one value of this type in bytes."""
        return _TYPE_SIZES[self]


_TYPE_SIZES = {
    VertexType.NONE: 0,
    VertexType.FLOAT: 4,
    VertexType.FLOAT2: 8,
    VertexType.FLOAT3: 12,
    VertexType.FLOAT4: 16,
    VertexType.BYTE4: 4,
    VertexType.UBYTE4: 4,
    VertexType.SHORT2: 4,
    VertexType.USHORT2: 4,
    VertexType.SHORT4: 8,
    VertexType.USHORT4: 8,
}


@dataclass(frozen=True)
class VertexAttribute:
    """One attribute: its location, value type and whether it is normalized."""

    index: int = 0
    type: VertexType = VertexType.NONE
    normalized: bool = False


@dataclass(frozen=True)
class VertexFormat:
    """Attribute list and per-vertex stride; a stride of 0 or less is computed."""

    attributes: Tuple[VertexAttribute, ...] = field(default_factory=tuple)
    stride: int = 0

    def __post_init__(self) -> None:
        attributes = tuple(self.attributes)
        if len(attributes) > MAX_ATTRIBUTES:
            raise ValueError(f"a vertex format holds at most {MAX_ATTRIBUTES} attributes")
        object.__setattr__(self, "attributes", attributes)
        if self.stride <= 0:
            object.__setattr__(self, "stride", sum(a.type.size for a in attributes))


class IndexFormat(enum.Enum):
    """Width of the values in an index buffer."""

    UINT16 = 16
    UINT32 = 32

    @property
    def max_value(self) -> int:
        return (1 << self.value) - 1


class Mesh:
    """Index, vertex and instance data for a draw call."""

    def __init__(self) -> None:
        self.index_format = IndexFormat.UINT32
        self.indices: Tuple[int, ...] = ()
        self.vertex_format: Optional[VertexFormat] = None
        self.vertices: Tuple[Any, ...] = ()
        self.instance_format: Optional[VertexFormat] = None
        self.instances: Tuple[Any, ...] = ()

    def index_data(self, index_format: IndexFormat, indices: Iterable[int]) -> None:
        """Replace the index buffer."""
        values = tuple(int(i) for i in indices)
        limit = index_format.max_value
        if any(not 0 <= v <= limit for v in values):
            raise ValueError(f"index out of range for {index_format.name}")
        self.index_format = index_format
        self.indices = values

    def vertex_data(self, vertex_format: VertexFormat, vertices: Iterable[Any]) -> None:
        """Replace the vertex buffer."""
        self.vertex_format = vertex_format
        self.vertices = tuple(vertices)

    def instance_data(self, vertex_format: VertexFormat, instances: Iterable[Any]) -> None:
        """Replace the instance buffer."""
        self.instance_format = vertex_format
        self.instances = tuple(instances)

    def index_count(self) -> int:
        return len(self.indices)

    def vertex_count(self) -> int:
        return len(self.vertices)

    def instance_count(self) -> int:
        return len(self.instances)