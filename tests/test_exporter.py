import json

import numpy as np
import pytest
from PIL import Image

from particlefall.core import FrameExporter, grid_layout


@pytest.fixture
def frames():
    result = []
    for i in range(5):
        frame = np.zeros((12, 16, 4), dtype=np.uint8)
        frame[2:6, i:i + 4] = (204, 204, 204, 255)
        result.append(frame)
    return result


def test_png(tmp_path, frames):
    path = FrameExporter.to_png(frames[0], tmp_path / "sub" / "one.png")

    with Image.open(path) as img:
        assert img.mode == 'RGBA'
        assert np.array_equal(np.array(img), frames[0])


def test_gif(tmp_path, frames):
    path = FrameExporter.to_gif(frames, tmp_path / "snow.gif", duration=50)

    with Image.open(path) as img:
        assert img.n_frames == 5
        assert img.size == (16, 12)
        assert img.info['duration'] == 50


def test_spritesheet(tmp_path, frames):
    path, meta = FrameExporter.to_spritesheet(frames, tmp_path / "sheet.png", columns=2, padding=1)

    assert meta['rows'] == 3
    assert meta['sheet_width'] == 2 * 17 - 1
    assert meta['sheet_height'] == 3 * 13 - 1

    with Image.open(path) as img:
        assert img.size == (meta['sheet_width'], meta['sheet_height'])
        sheet = np.array(img)
    assert np.array_equal(sheet[13:25, 17:33], frames[3])

    with open(path.with_suffix('.json')) as f:
        assert json.load(f) == meta


def test_spritesheet_default_columns(tmp_path, frames):
    _, meta = FrameExporter.to_spritesheet(frames, tmp_path / "sheet.png")
    assert meta['columns'] == 5
    assert meta['rows'] == 1


def test_frames(tmp_path, frames):
    paths = FrameExporter.to_frames(frames, tmp_path / "out", prefix="snow")

    assert [p.name for p in paths] == [f"snow_{i:04d}.png" for i in range(5)]
    assert all(p.exists() for p in paths)


@pytest.mark.parametrize("export", [
    lambda path: FrameExporter.to_gif([], path / "a.gif"),
    lambda path: FrameExporter.to_spritesheet([], path / "a.png"),
    lambda path: FrameExporter.to_frames([], path / "a"),
])
def test_no_frames(tmp_path, export):
    with pytest.raises(ValueError, match="No frames"):
        export(tmp_path)


@pytest.mark.parametrize("count,columns,expected", [
    (5, None, (5, 1)),
    (20, None, (8, 3)),
    (5, 2, (2, 3)),
    (3, 10, (3, 1)),
    (4, 0, (4, 1)),
])
def test_grid_layout(count, columns, expected):
    assert grid_layout(count, columns) == expected


def test_spritesheet_cells(tmp_path, frames):
    _, meta = FrameExporter.to_spritesheet(frames, tmp_path / "sheet.png", columns=3, fps=12)

    assert meta['fps'] == 12
    assert meta['cells'][4] == {'x': 16, 'y': 12, 'w': 16, 'h': 12}


class TestExportDispatch:

    def test_gif_duration_from_fps(self, tmp_path, frames):
        path = FrameExporter.export(frames, tmp_path / "a.gif", format='gif', fps=20)
        with Image.open(path) as img:
            assert img.info['duration'] == 50

    def test_spritesheet_returns_path(self, tmp_path, frames):
        path = FrameExporter.export(frames, tmp_path / "a.png", format='spritesheet')
        assert path == tmp_path / "a.png"
        assert path.with_suffix('.json').exists()

    def test_frames_returns_paths(self, tmp_path, frames):
        paths = FrameExporter.export(frames, tmp_path / "out", format='frames')
        assert len(paths) == 5

    def test_unknown_format(self, tmp_path, frames):
        with pytest.raises(ValueError, match="Unknown format"):
            FrameExporter.export(frames, tmp_path / "a.mov", format='mov')
