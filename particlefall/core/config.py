"""
Simulation Configuration - Shared parameters read by every particle each frame

Geometry types used across the simulation and the render glue also live here:
- Rect: pixel-space viewport bounds
- Quad: the four clamped corners a particle is drawn into
- Axis: spin orientation (None disables foreshortening)
"""

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# Fallback display used when no viewport has been supplied
DEFAULT_DISPLAY_SIZE: Tuple[float, float] = (1920.0, 1080.0)


# =============================================================================
# Geometry
# =============================================================================

class Axis(Enum):
    """Spin orientation of a particle"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @classmethod
    def parse(cls, value: Any) -> Optional['Axis']:
        """Accept an Axis, its name/value string, or None/'none'"""
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ('', 'none', 'off', 'null'):
            return None
        for axis in cls:
            if text in (axis.value, axis.name.lower()):
                return axis
        raise ValueError(f"Unknown spin orientation: {value}")


@dataclass(frozen=True)
class Rect:
    """Pixel-space rectangle (min_x, min_y, max_x, max_y)"""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @classmethod
    def from_size(cls, width: float, height: float) -> 'Rect':
        """Rectangle anchored at the origin"""
        return cls(0.0, 0.0, float(width), float(height))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)


@dataclass(frozen=True)
class Quad:
    """
    Render instruction for one particle.

    Corners are always ordered (left <= right, top <= bottom). When the spin
    factor turns negative the corners cross over; the pair is swapped and the
    matching flip flag is set so the sprite is drawn mirrored.
    """
    left: float
    top: float
    right: float
    bottom: float
    flip_x: bool = False
    flip_y: bool = False

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def corners(self) -> Tuple[Tuple[float, float], ...]:
        """Upper-left, upper-right, lower-right, lower-left"""
        return (
            (self.left, self.top),
            (self.right, self.top),
            (self.right, self.bottom),
            (self.left, self.bottom),
        )


# =============================================================================
# Simulation Config
# =============================================================================

_FLOAT_FIELDS = ('speed', 'min_size', 'max_size', 'fall_angle_degrees', 'spin_speed')


def _to_number(key: str, value: Any, kind: type) -> Any:
    """Convert a loaded field value, naming the field on failure"""
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}") from None

@dataclass
class SimulationConfig:
    """
    Global simulation parameters.

    A single instance is shared by reference between the host and the
    particle system; any field may change between frames and takes effect on
    the next advance.
    """
    particle_count: int = 100
    speed: float = 1.0

    # Size multiplier bounds (swapped when reversed)
    min_size: float = 0.4
    max_size: float = 1.0

    # Direction of travel, 0 = straight down, 180 = straight up
    fall_angle_degrees: float = 0.0

    spin_speed: float = 20.0
    spin_orientation: Optional[Axis] = Axis.HORIZONTAL

    # Drawable bounds; None selects the full-display degraded mode
    viewport: Optional[Rect] = None

    # Half width/height of the source sprite, in pixels
    particle_half_extent: Tuple[float, float] = (0.0, 0.0)

    display_size: Tuple[float, float] = DEFAULT_DISPLAY_SIZE
    seed: Optional[int] = None

    @property
    def size_range(self) -> Tuple[float, float]:
        """Size bounds ordered low to high"""
        if self.min_size <= self.max_size:
            return self.min_size, self.max_size
        return self.max_size, self.min_size

    @property
    def fall_angle_radians(self) -> float:
        return math.radians(self.fall_angle_degrees)

    @property
    def target_count(self) -> int:
        """Particle count clamped to a non-negative integer"""
        return max(0, int(self.particle_count))

    def copy(self, **changes) -> 'SimulationConfig':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form, as stored in preset files"""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Axis):
                value = value.value
            elif isinstance(value, Rect):
                value = list(value.as_tuple())
            elif isinstance(value, tuple):
                value = list(value)
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """Create from a dictionary, ignoring unknown keys"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}

        # Coerced here so a bad value fails on load, not mid-animation
        for key in _FLOAT_FIELDS:
            if key in filtered:
                filtered[key] = _to_number(key, filtered[key], float)
        if 'particle_count' in filtered:
            filtered['particle_count'] = _to_number('particle_count', filtered['particle_count'], int)
        if filtered.get('seed') is not None:
            filtered['seed'] = _to_number('seed', filtered['seed'], int)

        if 'spin_orientation' in filtered:
            filtered['spin_orientation'] = Axis.parse(filtered['spin_orientation'])

        viewport = filtered.get('viewport')
        if viewport is not None and not isinstance(viewport, Rect):
            values = [float(v) for v in viewport]
            if len(values) == 2:
                filtered['viewport'] = Rect.from_size(*values)
            else:
                filtered['viewport'] = Rect(*values)

        for key in ('particle_half_extent', 'display_size'):
            if key in filtered:
                filtered[key] = tuple(float(v) for v in filtered[key])

        return cls(**filtered)
