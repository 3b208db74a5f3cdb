"""
Particle Fall - Animated falling, spinning particles (snow, rain, petals)
"""

from pathlib import Path

from .core import (
    Axis, Rect, Quad, SimulationConfig,
    Particle, ParticleSystem,
    Sprite, get_sprite, load_sprite,
    FallAnimator, FrameExporter, EXPORT_FORMATS,
    get_preset, list_presets,
)

__version__ = "0.1.0"
__all__ = [
    'Axis',
    'Rect',
    'Quad',
    'SimulationConfig',
    'Particle',
    'ParticleSystem',
    'Sprite',
    'FallAnimator',
    'FrameExporter',
    'get_preset',
    'list_presets',
    'animate',
]


def animate(
    output_path: str,
    preset: str = None,
    width: int = 320,
    height: int = 240,
    frames: int = 48,
    warmup: int = 0,
    format: str = 'gif',
    fps: int = 25,
    sprite: str = None,
    sprite_file: str = None,
    blend_mode: str = None,
    seed: int = None,
    **config_overrides
):
    """
    Render a falling-particle animation to disk.

    Args:
        output_path: Output file (gif/spritesheet) or directory (frames)
        preset: Preset name (default settings if None)
        width, height: Viewport size in pixels
        frames: Number of frames to render
        warmup: Frames to simulate before the first rendered one
        format: Output format ('gif', 'spritesheet', 'frames')
        fps: Playback rate written into the GIF
        sprite: Procedural sprite name, overrides the preset's
        sprite_file: Image file used as the sprite, overrides sprite
        blend_mode: 'add' or 'alpha', overrides the preset's
        seed: Random seed for reproducible output
        **config_overrides: SimulationConfig fields (speed, particle_count, ...)

    Returns:
        Path to the output file, or list of paths for 'frames'
    """
    if format not in EXPORT_FORMATS:
        raise ValueError(f"Unknown format: {format}. Available: {list(EXPORT_FORMATS)}")

    if preset is not None:
        fall_preset = get_preset(preset)
        if fall_preset is None:
            raise ValueError(f"Unknown preset: {preset}")
        config = fall_preset.build_config(**config_overrides)
        sprite = sprite or fall_preset.sprite
        blend_mode = blend_mode or fall_preset.blend_mode
        background = fall_preset.background
    else:
        config = SimulationConfig.from_dict(
            {k: v for k, v in config_overrides.items() if v is not None}
        )
        background = (0, 0, 0, 0)

    config.viewport = Rect.from_size(width, height)
    if seed is not None:
        config.seed = seed

    if sprite_file:
        particle_sprite = load_sprite(sprite_file)
    else:
        particle_sprite = get_sprite(sprite or 'snowflake')

    animator = FallAnimator(
        config,
        sprite=particle_sprite,
        blend_mode=blend_mode or 'add',
        background=background
    )
    animator.warmup(warmup)
    rendered = animator.render_frames(frames)

    return FrameExporter.export(rendered, Path(output_path), format=format, fps=fps)
