"""
Frame Exporter - Writes rendered particle frames to disk

Frames are the HxWx4 uint8 canvases produced by FallAnimator. Supported
outputs:
- gif: looping animation, alpha thresholded to one transparent palette slot
- spritesheet: PNG grid plus a JSON sidecar describing each cell
- frames: a directory of numbered PNGs
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('gif', 'spritesheet', 'frames')

# Palette slot reserved for fully transparent pixels in GIF output
GIF_TRANSPARENT_INDEX = 255


def _require_frames(frames: Sequence[np.ndarray]) -> None:
    if not frames:
        raise ValueError("No frames to export")


def _to_image(frame: np.ndarray) -> Image.Image:
    return Image.fromarray(np.asarray(frame, dtype=np.uint8), 'RGBA')


def grid_layout(count: int, columns: Optional[int] = None) -> Tuple[int, int]:
    """(columns, rows) for a sheet of count cells, at most 8 wide by default"""
    if columns is None or columns < 1:
        columns = min(count, 8)
    columns = max(1, min(columns, count))
    return columns, -(-count // columns)


class FrameExporter:
    """Exports rendered frames to various formats"""

    @classmethod
    def to_png(cls, frame: np.ndarray, path: str | Path) -> Path:
        """Write a single frame"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        _to_image(frame).save(path, 'PNG')
        return path

    @classmethod
    def to_gif(
        cls,
        frames: Sequence[np.ndarray],
        path: str | Path,
        duration: int = 40,
        loop: int = 0,
        alpha_threshold: int = 128
    ) -> Path:
        """
        Write a looping GIF.

        GIF has 1-bit transparency: pixels with alpha below alpha_threshold
        become transparent, everything else is drawn opaque.
        """
        _require_frames(frames)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        palettized = [cls._palettize(frame, alpha_threshold) for frame in frames]
        palettized[0].save(
            path,
            save_all=True,
            append_images=palettized[1:],
            duration=duration,
            loop=loop,
            transparency=GIF_TRANSPARENT_INDEX,
            disposal=2
        )

        logger.debug("Wrote %d frames to %s (%d ms/frame)", len(frames), path, duration)
        return path

    @staticmethod
    def _palettize(frame: np.ndarray, alpha_threshold: int) -> Image.Image:
        img = _to_image(frame)
        clear = Image.fromarray(
            np.where(np.asarray(frame)[:, :, 3] < alpha_threshold, 255, 0).astype(np.uint8), 'L'
        )
        # Leave one slot free for transparency
        indexed = img.convert('RGB').convert(
            'P', palette=Image.Palette.ADAPTIVE, colors=GIF_TRANSPARENT_INDEX
        )
        indexed.paste(GIF_TRANSPARENT_INDEX, mask=clear)
        return indexed

    @classmethod
    def to_spritesheet(
        cls,
        frames: Sequence[np.ndarray],
        path: str | Path,
        columns: Optional[int] = None,
        padding: int = 0,
        fps: Optional[int] = None
    ) -> Tuple[Path, Dict]:
        """
        Lay frames out in a grid and write <path>.json next to it.

        Returns:
            (sheet path, metadata dict as written to the sidecar)
        """
        _require_frames(frames)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        frame_height, frame_width = frames[0].shape[:2]
        columns, rows = grid_layout(len(frames), columns)
        step_x, step_y = frame_width + padding, frame_height + padding

        sheet = np.zeros((rows * step_y - padding, columns * step_x - padding, 4), dtype=np.uint8)
        cells = []
        for i, frame in enumerate(frames):
            x = (i % columns) * step_x
            y = (i // columns) * step_y
            sheet[y:y + frame_height, x:x + frame_width] = frame
            cells.append({'x': x, 'y': y, 'w': frame_width, 'h': frame_height})

        _to_image(sheet).save(path, 'PNG')

        metadata = {
            'frames': len(frames),
            'frame_width': frame_width,
            'frame_height': frame_height,
            'columns': columns,
            'rows': rows,
            'padding': padding,
            'sheet_width': sheet.shape[1],
            'sheet_height': sheet.shape[0],
            'fps': fps,
            'cells': cells,
        }
        with open(path.with_suffix('.json'), 'w') as f:
            json.dump(metadata, f, indent=2)

        logger.debug("Wrote %dx%d spritesheet to %s", columns, rows, path)
        return path, metadata

    @classmethod
    def to_frames(
        cls,
        frames: Sequence[np.ndarray],
        directory: str | Path,
        prefix: str = "frame"
    ) -> List[Path]:
        """Write each frame as <prefix>_0000.png, <prefix>_0001.png, ..."""
        _require_frames(frames)
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        paths = [cls.to_png(frame, directory / f"{prefix}_{i:04d}.png")
                 for i, frame in enumerate(frames)]
        logger.debug("Wrote %d frames to %s", len(paths), directory)
        return paths

    @classmethod
    def export(
        cls,
        frames: Sequence[np.ndarray],
        path: str | Path,
        format: str = 'gif',
        fps: int = 25
    ) -> Path | List[Path]:
        """Dispatch on format name; fps sets the GIF frame duration"""
        if format == 'gif':
            return cls.to_gif(frames, path, duration=int(1000 / max(1, fps)))
        if format == 'spritesheet':
            sheet_path, _ = cls.to_spritesheet(frames, path, fps=fps)
            return sheet_path
        if format == 'frames':
            return cls.to_frames(frames, path)
        raise ValueError(f"Unknown format: {format}. Available: {list(EXPORT_FORMATS)}")
