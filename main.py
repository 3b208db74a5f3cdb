#!/usr/bin/env python
"""
Particle Fall CLI - Render falling, spinning particle animations

Usage:
    python main.py [options]

Examples:
    python main.py                                # 48 frames of snow -> snow.gif
    python main.py --preset blizzard -o storm.gif
    python main.py --angle 30 --spin vertical     # Slanted, tumbling flakes
    python main.py --preset rain --preview        # Live window (requires pygame)
"""

import argparse
import logging
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render animated falling, spinning particles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Sprites:
  snowflake - 19x21 six-armed flake (default)
  raindrop  - thin fading streak
  dot       - soft round disc

Examples:
  %(prog)s                                    # Default snowfall
  %(prog)s --preset rain --frames 60          # Rain preset
  %(prog)s --count 250 --speed 2 --angle -40  # Wind-driven snow
  %(prog)s --format frames -o out/            # Individual PNG frames
  %(prog)s --list-presets                     # Show all presets
  %(prog)s --preset-info blizzard             # Show preset details
        """
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output path (default: <preset or snow>.gif)'
    )

    parser.add_argument(
        '-p', '--preset',
        type=str,
        default=None,
        help='Start from a named preset'
    )

    # Simulation settings (override the preset)
    parser.add_argument('-c', '--count', type=int, default=None,
                        help='Number of particles (default: 100)')
    parser.add_argument('-s', '--speed', type=float, default=None,
                        help='Speed multiplier (default: 1.0)')
    parser.add_argument('--min-size', type=float, default=None,
                        help='Minimum particle size multiplier (default: 0.4)')
    parser.add_argument('--max-size', type=float, default=None,
                        help='Maximum particle size multiplier (default: 1.0)')
    parser.add_argument('-a', '--angle', type=float, default=None,
                        help='Fall angle in degrees, 0 = straight down (default: 0)')
    parser.add_argument('--spin-speed', type=float, default=None,
                        help='Spin speed multiplier (default: 20)')
    parser.add_argument('--spin', type=str, default=None,
                        choices=['horizontal', 'vertical', 'none'],
                        help='Spin orientation (default: horizontal)')

    # Output settings
    parser.add_argument('--width', type=int, default=320,
                        help='Viewport width in pixels (default: 320)')
    parser.add_argument('--height', type=int, default=240,
                        help='Viewport height in pixels (default: 240)')
    parser.add_argument('-f', '--frames', type=int, default=48,
                        help='Number of frames to render (default: 48)')
    parser.add_argument('--warmup', type=int, default=0,
                        help='Frames to simulate before recording (default: 0)')
    parser.add_argument('--fps', type=int, default=25,
                        help='Playback frame rate (default: 25)')
    parser.add_argument('--format', type=str, default='gif',
                        choices=['gif', 'spritesheet', 'frames'],
                        help='Output format (default: gif)')

    # Appearance
    sprite_group = parser.add_mutually_exclusive_group()
    sprite_group.add_argument('--sprite', type=str, default=None,
                              choices=['snowflake', 'raindrop', 'dot'],
                              help='Procedural particle sprite')
    sprite_group.add_argument('--sprite-file', type=str, default=None, metavar='PATH',
                              help='Image file to use as the particle sprite')
    parser.add_argument('--blend', type=str, default=None, choices=['add', 'alpha'],
                        help='Blend mode (default: add)')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible output')

    parser.add_argument('--preview', action='store_true',
                        help='Open real-time preview window (requires pygame)')
    parser.add_argument('--list-presets', action='store_true',
                        help='List available presets and exit')
    parser.add_argument('--preset-info', type=str, default=None, metavar='NAME',
                        help='Show details for a preset and exit')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')

    return parser


def config_overrides(args) -> dict:
    """SimulationConfig fields given on the command line"""
    return {
        'particle_count': args.count,
        'speed': args.speed,
        'min_size': args.min_size,
        'max_size': args.max_size,
        'fall_angle_degrees': args.angle,
        'spin_speed': args.spin_speed,
        'spin_orientation': args.spin,
    }


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    from particlefall.core.presets import get_preset_manager

    if args.list_presets:
        manager = get_preset_manager()
        print("Available presets:\n")
        for name in manager.list_all():
            preset = manager.get(name)
            source = "built-in" if manager.is_builtin(name) else "user"
            print(f"  {name:<16} {preset.description} [{source}]")
        return

    if args.preset_info:
        info = get_preset_manager().get_preset_info(args.preset_info)
        if not info:
            print(f"Error: Preset '{args.preset_info}' not found")
            sys.exit(1)
        print(f"Preset: {info['name']}")
        print(f"Description: {info['description']}")
        print(f"Sprite: {info['sprite']}  Blend: {info['blend_mode']}")
        for key, value in info['config'].items():
            print(f"  {key}: {value}")
        if info['tags']:
            print(f"Tags: {', '.join(info['tags'])}")
        return

    if args.preset and not get_preset_manager().exists(args.preset):
        print(f"Error: Preset '{args.preset}' not found")
        print("Use --list-presets to see available presets")
        sys.exit(1)

    from particlefall import animate
    from particlefall.core import (
        FallAnimator, Rect, SimulationConfig, check_pygame_available,
        get_preset, get_sprite, load_sprite, preview_animator,
    )

    try:
        if args.preview:
            if not check_pygame_available():
                print("Error: Preview requires pygame. Install with: pip install pygame")
                sys.exit(1)

            overrides = {k: v for k, v in config_overrides(args).items() if v is not None}
            preset = get_preset(args.preset) if args.preset else None
            if preset:
                config = preset.build_config(**overrides)
            else:
                config = SimulationConfig.from_dict(overrides)
            if args.seed is not None:
                config.seed = args.seed
            config.viewport = Rect.from_size(args.width, args.height)

            if args.sprite_file:
                sprite = load_sprite(args.sprite_file)
            else:
                sprite = get_sprite(args.sprite or (preset.sprite if preset else 'snowflake'))

            animator = FallAnimator(
                config,
                sprite=sprite,
                blend_mode=args.blend or (preset.blend_mode if preset else 'add'),
            )
            print("Controls: SPACE=play/pause, UP/DOWN=speed, LEFT/RIGHT=angle, +/-=count, O=spin, ESC=quit")
            preview_animator(animator, width=args.width, height=args.height, fps=args.fps)
            print("Preview closed.")
            return

        output = args.output
        if output is None:
            stem = args.preset or 'snow'
            if args.format == 'frames':
                output = f"{stem}_frames"
            elif args.format == 'spritesheet':
                output = f"{stem}_sheet.png"
            else:
                output = f"{stem}.gif"

        print(f"Rendering {args.frames} frames at {args.width}x{args.height}"
              + (f" (preset: {args.preset})" if args.preset else ""))

        result = animate(
            output,
            preset=args.preset,
            width=args.width,
            height=args.height,
            frames=args.frames,
            warmup=args.warmup,
            format=args.format,
            fps=args.fps,
            sprite=args.sprite,
            sprite_file=args.sprite_file,
            blend_mode=args.blend,
            seed=args.seed,
            **config_overrides(args)
        )

        if isinstance(result, list):
            print(f"Output: {len(result)} frames in {output}")
        else:
            print(f"Output: {result}")
        print("Done!")

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
