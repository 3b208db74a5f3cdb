"""
Particle Sprites - The image every particle in a system is drawn with

Includes procedural generators for the built-in sprites and a loader for
image files. A sprite's signature identifies its pixels; particle systems are
rebuilt whenever the signature they were generated against changes.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass
class Sprite:
    """RGBA particle image"""
    pixels: np.ndarray  # HxWx4 uint8
    name: str = "sprite"

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def half_extent(self) -> Tuple[float, float]:
        """(half width, half height) in pixels"""
        return self.width / 2, self.height / 2

    @property
    def signature(self) -> int:
        """64-bit identity of the pixel data"""
        digest = hashlib.blake2b(digest_size=8)
        digest.update(np.asarray(self.pixels.shape, dtype=np.int64).tobytes())
        digest.update(np.ascontiguousarray(self.pixels, dtype=np.uint8).tobytes())
        return int.from_bytes(digest.digest(), 'big')

    def copy(self) -> 'Sprite':
        return Sprite(pixels=self.pixels.copy(), name=self.name)

    @classmethod
    def from_array(cls, pixels: np.ndarray, name: str = "sprite") -> 'Sprite':
        """Create a Sprite from an HxWx3 or HxWx4 array"""
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError("Pixels must be HxWx3 or HxWx4 array")

        pixels = pixels.astype(np.uint8)
        if pixels.shape[2] == 3:
            alpha = np.full((*pixels.shape[:2], 1), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels, alpha], axis=2)

        return cls(pixels=pixels, name=name)


# =============================================================================
# Procedural Sprites
# =============================================================================

SNOW_GRAY = (204, 204, 204, 255)

_SNOWFLAKE = (
    ".........#.........",
    ".......#.#.#.......",
    "........###........",
    ".#..#..#.#.#..#..#.",
    "..#.#....#....#.#..",
    "...##....#....##...",
    ".####....#....####.",
    ".....#..###..#.....",
    "......#..#..#......",
    "....#..#.#.#..#....",
    "#######.###.#######",
    "....#..#.#.#..#....",
    "......#..#..#......",
    ".....#..###..#.....",
    ".####....#....####.",
    "...##....#....##...",
    "..#.#....#....#.#..",
    ".#..#..#.#.#..#..#.",
    "........###........",
    ".......#.#.#.......",
    "...................",
)


def _from_pattern(rows, color: Tuple[int, int, int, int]) -> np.ndarray:
    mask = np.array([[c == '#' for c in row] for row in rows], dtype=bool)
    pixels = np.zeros((*mask.shape, 4), dtype=np.uint8)
    pixels[mask] = color
    return pixels


def generate_snowflake(color: Tuple[int, int, int, int] = SNOW_GRAY) -> Sprite:
    """19x21 six-armed snowflake glyph"""
    return Sprite(_from_pattern(_SNOWFLAKE, color), name="snowflake")


def generate_raindrop(
    length: int = 9,
    color: Tuple[int, int, int, int] = (170, 200, 255, 220)
) -> Sprite:
    """Thin vertical streak that fades toward its tail"""
    length = max(1, int(length))
    pixels = np.zeros((length, 3, 4), dtype=np.uint8)
    fade = np.linspace(0.25, 1.0, length)

    pixels[:, 1, :3] = color[:3]
    pixels[:, 1, 3] = (fade * color[3]).astype(np.uint8)
    # Soft halo on the head only
    pixels[-2:, 0, :3] = color[:3]
    pixels[-2:, 2, :3] = color[:3]
    pixels[-2:, 0, 3] = color[3] // 3
    pixels[-2:, 2, 3] = color[3] // 3

    return Sprite(pixels, name="raindrop")


def generate_dot(
    radius: int = 3,
    color: Tuple[int, int, int, int] = (255, 255, 255, 255)
) -> Sprite:
    """Filled disc with a soft edge"""
    radius = max(1, int(radius))
    size = radius * 2 + 1
    yy, xx = np.mgrid[0:size, 0:size]
    dist = np.sqrt((xx - radius) ** 2 + (yy - radius) ** 2)
    falloff = np.clip(radius + 0.5 - dist, 0.0, 1.0)

    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[:, :, :3] = color[:3]
    pixels[:, :, 3] = (falloff * color[3]).astype(np.uint8)

    return Sprite(pixels, name="dot")


SPRITES: Dict[str, Callable[[], Sprite]] = {
    'snowflake': generate_snowflake,
    'snow': generate_snowflake,  # Alias
    'raindrop': generate_raindrop,
    'rain': generate_raindrop,  # Alias
    'dot': generate_dot,
}


def get_sprite(name: str) -> Sprite:
    """Build a procedural sprite by name"""
    name = name.lower()
    if name not in SPRITES:
        raise ValueError(f"Unknown sprite: {name}. Available: {sorted(SPRITES)}")
    return SPRITES[name]()


def load_sprite(path: str | Path) -> Sprite:
    """Load an image file as an RGBA sprite"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    img = Image.open(path)
    if img.mode != 'RGBA':
        img = img.convert('RGBA')

    logger.debug("Loaded sprite %s (%dx%d)", path, img.width, img.height)
    return Sprite(pixels=np.array(img), name=path.stem)
