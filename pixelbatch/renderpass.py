"""A single draw call and its validation before it reaches a renderer."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from . import log
from .blend import BlendMode
from .mesh import Mesh
from .primitives import Rect, Vec2


class Compare(enum.Enum):
    """Depth comparison function."""

    NONE = 0
    ALWAYS = 1
    NEVER = 2
    LESS = 3
    EQUAL = 4
    LESS_OR_EQUAL = 5
    GREATER = 6
    NOT_EQUAL = 7
    GREATER_OR_EQUAL = 8


class Cull(enum.Enum):
    """Face culling mode."""

    NONE = 0
    FRONT = 1
    BACK = 2


@dataclass
class RenderPass:
    """Everything needed for one draw call; ``target`` None means the back buffer."""

    target: Optional[Any] = None
    mesh: Optional[Mesh] = None
    material: Optional[Any] = None
    has_viewport: bool = False
    has_scissor: bool = False
    viewport: Rect = field(default_factory=Rect)
    scissor: Rect = field(default_factory=Rect)
    index_start: int = 0
    index_count: int = 0
    instance_count: int = 0
    depth: Compare = Compare.NONE
    cull: Cull = Cull.NONE
    blend: BlendMode = BlendMode.NORMAL

    def perform(
        self, renderer: Callable[["RenderPass"], Any], draw_size: Vec2
    ) -> Optional["RenderPass"]:
        """Validate a copy of this pass and hand it to ``renderer``.

        ``draw_size`` is the back buffer size, used when there is no target.
        Returns the pass that was rendered, or None if it was skipped.
        """
        if self.material is None:
            raise ValueError("trying to draw with an invalid Material")
        if getattr(self.material, "shader", None) is None:
            raise ValueError("trying to draw with an invalid Shader")
        if self.mesh is None:
            raise ValueError("trying to draw with an invalid Mesh")

        rendered = replace(self)

        available = rendered.mesh.index_count()
        if rendered.index_start + rendered.index_count > available:
            log.warn(
                "Trying to draw more indices than exist in the index buffer "
                f"({rendered.index_start}-{rendered.index_start + rendered.index_count} / {available}); "
                "trimming extra indices"
            )
            if rendered.index_start > rendered.index_count:
                return None
            rendered.index_count = rendered.index_count - rendered.index_start

        instances = rendered.mesh.instance_count()
        if rendered.instance_count > instances:
            log.warn(
                "Trying to draw more instances than exist in the index buffer "
                f"({rendered.instance_count} / {instances}); trimming extra instances"
            )
            rendered.instance_count = instances

        if rendered.target is None:
            size = draw_size
        else:
            size = Vec2(rendered.target.width, rendered.target.height)
        bounds = Rect(0, 0, size.x, size.y)

        if not rendered.has_viewport:
            rendered.viewport = bounds
        else:
            rendered.viewport = rendered.viewport.overlap_rect(bounds)

        if rendered.has_scissor:
            rendered.scissor = rendered.scissor.overlap_rect(bounds)

        renderer(rendered)
        return rendered