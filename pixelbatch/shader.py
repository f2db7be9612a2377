"""Shader programs and the uniforms they expose."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Tuple

MAX_HLSL_ATTRIBUTES = 16


class ShaderError(ValueError):
    """The shader data or its uniforms are not valid."""


class UniformType(enum.Enum):
    """Value type of a shader uniform."""

    NONE = 0
    FLOAT = 1
    FLOAT2 = 2
    FLOAT3 = 3
    FLOAT4 = 4
    MAT3X2 = 5
    MAT4X4 = 6
    TEXTURE2D = 7
    SAMPLER2D = 8


class ShaderType(enum.IntFlag):
    """Shader stage a uniform belongs to."""

    NONE = 0
    VERTEX = 1 << 0
    FRAGMENT = 1 << 1


@dataclass(frozen=True)
class UniformInfo:
    """A uniform as reported by a compiled shader."""

    name: str
    type: UniformType
    shader: ShaderType = ShaderType.NONE
    buffer_index: int = 0
    array_length: int = 1


@dataclass(frozen=True)
class HlslAttribute:
    """Semantic name and index of a vertex input, needed by HLSL shaders."""

    semantic_name: str = ""
    semantic_index: int = 0


@dataclass(frozen=True)
class ShaderData:
    """Source text of the vertex and fragment programs."""

    vertex: str = ""
    fragment: str = ""
    hlsl_attributes: Tuple[HlslAttribute, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        attributes = tuple(self.hlsl_attributes)
        if len(attributes) > MAX_HLSL_ATTRIBUTES:
            raise ValueError(f"at most {MAX_HLSL_ATTRIBUTES} HLSL attributes are allowed")
        object.__setattr__(self, "hlsl_attributes", attributes)


@dataclass(frozen=True)
class Shader:
    """A shader program together with its uniform list."""

    data: ShaderData
    uniforms: Tuple[UniformInfo, ...] = ()

    @classmethod
    def create(cls, data: ShaderData, uniforms: Iterable[UniformInfo] = ()) -> "Shader":
        """Validate the program data and uniforms and build a shader.

        Raises ShaderError for missing programs, uniforms of no type, or duplicate names.
        """
        if not data.vertex:
            raise ShaderError("must provide a vertex shader")
        if not data.fragment:
            raise ShaderError("must provide a fragment shader")

        listed = tuple(uniforms)
        for uniform in listed:
            if uniform.type is UniformType.NONE:
                raise ShaderError(
                    f"uniform '{uniform.name}' has an invalid type; only "
                    "Float/Float2/Float3/Float4/Mat3x2/Mat4x4/Texture are allowed"
                )

        seen = set()
        for uniform in listed:
            if uniform.name in seen:
                raise ShaderError(
                    f"shader uniform names '{uniform.name}' overlap; all names must be unique"
                )
            seen.add(uniform.name)

        return cls(data, listed)