"""
Viewport Projector - Maps particle-space positions to clamped pixel corners

Particle positions live in [0, 1] x [0, 1]. The projector scales them by the
viewport's max corner, widens them by the sprite's half-extent times the
particle size (foreshortened along the spin axis), and clamps every corner to
the viewport so particles near the edge are clipped instead of drawn outside.
"""

from typing import Optional, Tuple

from .config import DEFAULT_DISPLAY_SIZE, Axis, Quad, Rect


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]"""
    return min(high, max(value, low))


def fallback_viewport(
    display_size: Tuple[float, float],
    half_extent: Tuple[float, float]
) -> Rect:
    """Full display minus the sprite extent, used when no viewport is known"""
    hx, hy = half_extent
    width, height = display_size
    return Rect(0.0, 0.0, width - 2 * hx, height - 2 * hy)


def _ordered(low: float, high: float) -> Tuple[float, float, bool]:
    if low <= high:
        return low, high, False
    return high, low, True


def project(
    viewport: Optional[Rect],
    half_extent: Tuple[float, float],
    x: float,
    y: float,
    size: float,
    spin_orientation: Optional[Axis],
    current_spin: float,
    display_size: Tuple[float, float] = DEFAULT_DISPLAY_SIZE
) -> Quad:
    """
    Project a particle into the viewport.

    Args:
        viewport: Pixel bounds, or None for the degraded full-display mode
        half_extent: (hx, hy) half width/height of the sprite in pixels
        x, y: Normalized particle position
        size: Particle size multiplier
        spin_orientation: Axis the particle spins around, None for no spin
        current_spin: Spin value in [-1, 1]
        display_size: Display used by the degraded mode

    Returns:
        Quad with clamped, ordered corners
    """
    if viewport is None:
        viewport = fallback_viewport(display_size, half_extent)

    hx, hy = half_extent
    pixel_x = x * viewport.max_x
    pixel_y = y * viewport.max_y

    # Horizontal spin squeezes the width, vertical spin the height
    y_angle = current_spin if spin_orientation == Axis.HORIZONTAL else 1.0
    x_angle = current_spin if spin_orientation == Axis.VERTICAL else 1.0

    left = clamp(pixel_x + hx - y_angle * hx * size, viewport.min_x, viewport.max_x)
    right = clamp(pixel_x + hx + y_angle * hx * size, viewport.min_x, viewport.max_x)
    top = clamp(pixel_y + hy - x_angle * hy * size, viewport.min_y, viewport.max_y)
    bottom = clamp(pixel_y + hy + x_angle * hy * size, viewport.min_y, viewport.max_y)

    left, right, flip_x = _ordered(left, right)
    top, bottom, flip_y = _ordered(top, bottom)

    return Quad(left, top, right, bottom, flip_x, flip_y)
