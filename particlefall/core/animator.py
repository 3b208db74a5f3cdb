"""
Fall Animator - Host-side frame loop around a ParticleSystem

The particle system only knows how to advance one frame. The animator is the
host that owns everything around it:
- change detection for particle count and sprite (calls reconcile)
- viewport resizes
- rendering each frame to an RGBA canvas
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from .config import Rect, SimulationConfig
from .renderer import FrameRenderer
from .sprite import Sprite, generate_snowflake
from .system import ParticleSystem

logger = logging.getLogger(__name__)


class FallAnimator:
    """
    Drives a falling-particle effect frame by frame.

    Example:
        config = SimulationConfig(particle_count=80, viewport=Rect.from_size(320, 240))
        animator = FallAnimator(config)
        frames = animator.render_frames(48)
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        sprite: Optional[Sprite] = None,
        blend_mode: str = "add",
        background: Tuple[int, int, int, int] = (0, 0, 0, 0)
    ):
        self.config = config or SimulationConfig()
        self.sprite = sprite or generate_snowflake()
        self.config.particle_half_extent = self.sprite.half_extent

        # Recomputed only by set_sprite
        self._sprite_signature = self.sprite.signature

        self.renderer = FrameRenderer(self.sprite, blend_mode, background)
        self.system = ParticleSystem(self.config, self._sprite_signature)

        self._synced_count = self.config.target_count
        self._synced_signature = self._sprite_signature
        self.frame_index = 0

    # -------------------------------------------------------------------------
    # Host-side change detection
    # -------------------------------------------------------------------------

    def sync(self) -> bool:
        """Reconcile the system if count or sprite changed since last time"""
        count = self.config.target_count
        signature = self._sprite_signature

        if count == self._synced_count and signature == self._synced_signature:
            return False

        self.system.reconcile(count, signature)
        self._synced_count = count
        self._synced_signature = signature
        return True

    def set_sprite(self, sprite: Sprite) -> None:
        """Swap the particle image; particles are rebuilt on the next step"""
        logger.debug("Sprite changed to %s (%dx%d)", sprite.name, sprite.width, sprite.height)
        self.sprite = sprite
        self._sprite_signature = sprite.signature
        self.config.particle_half_extent = sprite.half_extent
        self.renderer.set_sprite(sprite)

    def set_viewport(self, viewport: Optional[Rect]) -> None:
        self.system.set_viewport(viewport)

    def resize(self, width: float, height: float) -> None:
        """Viewport follows a resized surface"""
        self.set_viewport(Rect.from_size(width, height))

    # -------------------------------------------------------------------------
    # Frame loop
    # -------------------------------------------------------------------------

    def step(self) -> None:
        """Advance one frame"""
        self.sync()
        self.system.advance_frame()
        self.frame_index += 1

    def warmup(self, frames: int) -> None:
        """Advance without rendering"""
        for _ in range(max(0, frames)):
            self.step()

    @property
    def canvas_size(self) -> Tuple[int, int]:
        """(width, height) of the rendered canvas"""
        viewport = self.config.viewport
        if viewport is None:
            width, height = self.config.display_size
        else:
            width, height = viewport.max_x, viewport.max_y
        return max(0, math.ceil(width)), max(0, math.ceil(height))

    def render_frame(self) -> np.ndarray:
        """Composite the current particle state"""
        return self.renderer.render(self.system.quads(), self.canvas_size)

    def render_frames(self, count: int) -> List[np.ndarray]:
        """Step and render count frames"""
        frames = []
        for _ in range(max(0, count)):
            self.step()
            frames.append(self.render_frame())
        return frames
