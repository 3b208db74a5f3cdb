"""
Particle Fall - Core simulation and host glue
"""

from .config import (
    # Geometry
    Axis, Rect, Quad,
    # Config
    SimulationConfig, DEFAULT_DISPLAY_SIZE,
)
from .projector import project, clamp, fallback_viewport
from .particle import Particle, BASE_RATE, JITTER_RANGE
from .system import ParticleSystem
from .sprite import (
    Sprite,
    generate_snowflake, generate_raindrop, generate_dot,
    SPRITES, get_sprite, load_sprite,
)
from .renderer import FrameRenderer, BLEND_MODES
from .animator import FallAnimator
from .exporter import FrameExporter, EXPORT_FORMATS, grid_layout
from .presets import (
    FallPreset, PresetManager, BUILTIN_PRESETS,
    get_preset_manager, get_preset, list_presets,
)
from .preview import (
    PreviewConfig, PreviewWindow,
    apply_action, check_pygame_available, preview_animator,
)

__all__ = [
    # Geometry & config
    'Axis', 'Rect', 'Quad',
    'SimulationConfig', 'DEFAULT_DISPLAY_SIZE',
    # Simulation
    'project', 'clamp', 'fallback_viewport',
    'Particle', 'BASE_RATE', 'JITTER_RANGE',
    'ParticleSystem',
    # Sprites
    'Sprite',
    'generate_snowflake', 'generate_raindrop', 'generate_dot',
    'SPRITES', 'get_sprite', 'load_sprite',
    # Rendering & export
    'FrameRenderer', 'BLEND_MODES',
    'FallAnimator',
    'FrameExporter', 'EXPORT_FORMATS', 'grid_layout',
    # Presets
    'FallPreset', 'PresetManager', 'BUILTIN_PRESETS',
    'get_preset_manager', 'get_preset', 'list_presets',
    # Preview
    'PreviewConfig', 'PreviewWindow',
    'apply_action', 'check_pygame_available', 'preview_animator',
]
