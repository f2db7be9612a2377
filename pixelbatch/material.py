"""Per-draw values (textures, samplers and floats) bound to a shader's uniforms."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple, Union

from . import log
from .sampler import TextureSampler
from .shader import Shader, UniformInfo, UniformType

_COMPONENTS = {
    UniformType.FLOAT: 1,
    UniformType.FLOAT2: 2,
    UniformType.FLOAT3: 3,
    UniformType.FLOAT4: 4,
    UniformType.MAT3X2: 6,
    UniformType.MAT4X4: 16,
}

_NOT_VALUES = (UniformType.TEXTURE2D, UniformType.SAMPLER2D, UniformType.NONE)

Key = Union[str, int]


def uniform_size(uniform: UniformInfo) -> int:
    """Number of floats a value uniform occupies, array length included."""
    try:
        components = _COMPONENTS[uniform.type]
    except KeyError:
        raise ValueError(f"unexpected uniform type {uniform.type.name}") from None
    return components * uniform.array_length


class Material:
    """Holds the values assigned to a shader's uniforms during rendering."""

    def __init__(self, shader: Shader) -> None:
        if shader is None:
            raise ValueError("material requires a valid shader")
        self._shader = shader
        self._textures: List[Any] = []
        self._samplers: List[TextureSampler] = []
        float_size = 0
        for uniform in shader.uniforms:
            if uniform.type is UniformType.NONE:
                continue
            if uniform.type is UniformType.TEXTURE2D:
                self._textures.extend([None] * uniform.array_length)
            elif uniform.type is UniformType.SAMPLER2D:
                self._samplers.extend(TextureSampler() for _ in range(uniform.array_length))
            else:
                float_size += uniform_size(uniform)
        self._data: List[float] = [0.0] * float_size

    @property
    def shader(self) -> Shader:
        """The shader this material supplies values for."""
        return self._shader

    def _locate(self, kind: UniformType, key: Key, index: int, storage: list) -> Optional[int]:
        uniforms = [u for u in self._shader.uniforms if u.type is kind]
        offset = 0
        if isinstance(key, str):
            for uniform in uniforms:
                if uniform.name == key:
                    position = offset + index
                    return position if 0 <= position < len(storage) else None
                offset += uniform.array_length
                if offset + index >= len(storage):
                    break
            return None
        for slot, uniform in enumerate(uniforms):
            if slot == key:
                if not 0 <= index < uniform.array_length:
                    return None
                return offset + index
            offset += uniform.array_length
        return None

    @staticmethod
    def _missing(label: str, key: Key, index: int) -> None:
        if isinstance(key, str):
            log.warn(f"No {label} Uniform '{key}' at index [{index}] exists")
        else:
            log.warn(f"No {label} Uniform ['{key}'] at index [{index}] exists")

    def set_texture(self, key: Key, texture: Any, index: int = 0) -> None:
        """Assign a texture by uniform name or texture slot."""
        position = self._locate(UniformType.TEXTURE2D, key, index, self._textures)
        if position is not None:
            self._textures[position] = texture
        elif isinstance(key, str):
            self._missing("Texture", key, index)

    def get_texture(self, key: Key, index: int = 0) -> Any:
        """Texture by uniform name or slot, or None (with a warning) if there is none."""
        position = self._locate(UniformType.TEXTURE2D, key, index, self._textures)
        if position is None:
            self._missing("Texture", key, index)
            return None
        return self._textures[position]

    def set_sampler(self, key: Key, sampler: TextureSampler, index: int = 0) -> None:
        """Assign a sampler by uniform name or sampler slot."""
        position = self._locate(UniformType.SAMPLER2D, key, index, self._samplers)
        if position is not None:
            self._samplers[position] = sampler
        elif isinstance(key, str):
            self._missing("Sampler", key, index)

    def get_sampler(self, key: Key, index: int = 0) -> TextureSampler:
        """Sampler by uniform name or slot, or the default sampler if there is none."""
        position = self._locate(UniformType.SAMPLER2D, key, index, self._samplers)
        if position is None:
            self._missing("Sampler", key, index)
            return TextureSampler()
        return self._samplers[position]

    def set_value(self, name: str, values: Iterable[float]) -> None:
        """Write floats into a value uniform; extra values beyond its size are dropped."""
        floats = [float(v) for v in values]
        offset = 0
        for uniform in self._shader.uniforms:
            if uniform.type in _NOT_VALUES:
                continue
            size = uniform_size(uniform)
            if uniform.name == name:
                if len(floats) > size:
                    log.warn(f"Exceeding length of Uniform '{name}' ({len(floats)} / {size})")
                    floats = floats[:size]
                self._data[offset:offset + len(floats)] = floats
                return
            offset += size
        log.warn(f"No Uniform '{name}' exists")

    def get_value(self, name: str) -> Optional[Tuple[float, ...]]:
        """All floats of a value uniform, or None (with a warning) if it does not exist."""
        offset = 0
        for uniform in self._shader.uniforms:
            if uniform.type in _NOT_VALUES:
                continue
            size = uniform_size(uniform)
            if uniform.name == name:
                return tuple(self._data[offset:offset + size])
            offset += size
        log.warn(f"No Uniform '{name}' exists")
        return None

    def textures(self) -> Tuple[Any, ...]:
        """Every texture slot, in uniform order."""
        return tuple(self._textures)

    def samplers(self) -> Tuple[TextureSampler, ...]:
        """Every sampler slot, in uniform order."""
        return tuple(self._samplers)

    def data(self) -> Tuple[float, ...]:
        """All value uniforms packed together, in uniform order."""
        return tuple(self._data)