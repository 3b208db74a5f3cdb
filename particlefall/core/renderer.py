"""
Frame Renderer - Composites particle quads onto an RGBA canvas

The particle system emits a flat list of (Quad, size) render instructions.
The renderer draws them in a single pass: every quad gets the sprite scaled
to its box (nearest neighbour, so pixel-art sprites stay crisp), mirrored
when the quad is flipped, then blended onto the canvas.

Blend modes:
- add: additive RGB with max alpha, how overlapping flakes brighten
- alpha: standard source-over compositing
"""

from typing import Dict, Iterable, Tuple

import numpy as np
from PIL import Image

from .config import Quad
from .sprite import Sprite


BLEND_MODES = ('add', 'alpha')


class FrameRenderer:
    """
    Draws render instructions for one sprite.

    Example:
        renderer = FrameRenderer(generate_snowflake())
        canvas = renderer.render(system.quads(), (640, 480))
    """

    def __init__(
        self,
        sprite: Sprite,
        blend_mode: str = "add",
        background: Tuple[int, int, int, int] = (0, 0, 0, 0)
    ):
        if blend_mode not in BLEND_MODES:
            raise ValueError(f"Unknown blend mode: {blend_mode}. Available: {list(BLEND_MODES)}")

        self.blend_mode = blend_mode
        self.background = tuple(background)
        self._scaled: Dict[Tuple[int, int, bool, bool], np.ndarray] = {}
        self.set_sprite(sprite)

    def set_sprite(self, sprite: Sprite) -> None:
        self.sprite = sprite
        self._image = Image.fromarray(sprite.pixels.astype(np.uint8), 'RGBA')
        self._scaled.clear()

    def new_canvas(self, size: Tuple[int, int]) -> np.ndarray:
        """Blank canvas of (width, height) filled with the background"""
        width, height = size
        canvas = np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8)
        canvas[:, :] = self.background
        return canvas

    def render(self, quads: Iterable[Tuple[Quad, float]], size: Tuple[int, int]) -> np.ndarray:
        """
        Render all quads onto a fresh canvas.

        Args:
            quads: (quad, size) pairs from ParticleSystem.quads()
            size: Canvas (width, height) in pixels

        Returns:
            HxWx4 uint8 RGBA array
        """
        canvas = self.new_canvas(size).astype(np.float32)

        for quad, _size in quads:
            self._draw(canvas, quad)

        return np.clip(canvas, 0, 255).astype(np.uint8)

    def _scaled_sprite(self, width: int, height: int, flip_x: bool, flip_y: bool) -> np.ndarray:
        key = (width, height, flip_x, flip_y)
        scaled = self._scaled.get(key)
        if scaled is None:
            img = self._image.resize((width, height), Image.Resampling.NEAREST)
            if flip_x:
                img = img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
            if flip_y:
                img = img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            scaled = np.asarray(img, dtype=np.float32)
            self._scaled[key] = scaled
        return scaled

    def _draw(self, canvas: np.ndarray, quad: Quad) -> None:
        h, w = canvas.shape[:2]

        x0, x1 = int(round(quad.left)), int(round(quad.right))
        y0, y1 = int(round(quad.top)), int(round(quad.bottom))
        box_w, box_h = x1 - x0, y1 - y0

        # Clipped to nothing
        if box_w < 1 or box_h < 1:
            return

        # Visible part of the box
        cx0, cy0 = max(x0, 0), max(y0, 0)
        cx1, cy1 = min(x1, w), min(y1, h)
        if cx0 >= cx1 or cy0 >= cy1:
            return

        src = self._scaled_sprite(box_w, box_h, quad.flip_x, quad.flip_y)
        src = src[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0]
        dst = canvas[cy0:cy1, cx0:cx1]

        src_alpha = src[:, :, 3:4] / 255.0

        if self.blend_mode == "add":
            dst[:, :, :3] = np.minimum(255.0, dst[:, :, :3] + src[:, :, :3] * src_alpha)
            dst[:, :, 3] = np.maximum(dst[:, :, 3], src[:, :, 3])
        else:
            dst_alpha = dst[:, :, 3:4] / 255.0
            out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
            safe = np.where(out_alpha > 0, out_alpha, 1.0)
            dst[:, :, :3] = (
                src[:, :, :3] * src_alpha + dst[:, :, :3] * dst_alpha * (1.0 - src_alpha)
            ) / safe
            dst[:, :, 3:4] = out_alpha * 255.0
