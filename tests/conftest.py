import numpy as np
import pytest

from particlefall.core import Rect, SimulationConfig


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def config():
    return SimulationConfig(
        particle_count=20,
        viewport=Rect.from_size(200, 100),
        particle_half_extent=(9.5, 10.5),
        seed=7,
    )


@pytest.fixture
def presets_dir(tmp_path, monkeypatch):
    directory = tmp_path / "presets"
    directory.mkdir()
    monkeypatch.setenv("PARTICLEFALL_PRESETS_DIR", str(directory))
    return directory
