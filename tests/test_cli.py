import pytest
from PIL import Image

import main
from particlefall import animate
from particlefall.core import presets as presets_module


@pytest.fixture(autouse=True)
def fresh_presets(presets_dir, monkeypatch):
    monkeypatch.setattr(presets_module, "_manager", None)


SMALL = ['--width', '32', '--height', '24', '-f', '3', '-c', '5', '--seed', '1']


def test_list_presets(capsys):
    main.main(['--list-presets'])
    out = capsys.readouterr().out

    assert "blizzard" in out
    assert "[built-in]" in out


def test_preset_info(capsys):
    main.main(['--preset-info', 'rain'])
    out = capsys.readouterr().out

    assert "Preset: rain" in out
    assert "Sprite: raindrop" in out


@pytest.mark.parametrize("args", [['--preset', 'hail'], ['--preset-info', 'hail']])
def test_unknown_preset_exits(capsys, args):
    with pytest.raises(SystemExit) as exc:
        main.main(args)

    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().out


def test_renders_gif(tmp_path, capsys):
    output = tmp_path / "snow.gif"
    main.main(['-o', str(output)] + SMALL)

    with Image.open(output) as img:
        assert img.size == (32, 24)
    assert "Done!" in capsys.readouterr().out


def test_renders_preset_spritesheet(tmp_path):
    output = tmp_path / "rain.png"
    main.main(['-o', str(output), '--preset', 'rain', '--format', 'spritesheet'] + SMALL)

    assert output.exists()
    assert output.with_suffix('.json').exists()


def test_render_error_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(['-o', str(tmp_path / "x.gif"), '--sprite-file', str(tmp_path / "missing.png")] + SMALL)

    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_overrides_only_given_flags():
    args = main.build_parser().parse_args(['--speed', '2', '--spin', 'none'])
    overrides = main.config_overrides(args)

    assert overrides['speed'] == 2.0
    assert overrides['spin_orientation'] == 'none'
    assert overrides['particle_count'] is None


class TestAnimate:

    def test_frames_format(self, tmp_path):
        paths = animate(tmp_path / "out", width=16, height=16, frames=2, format='frames',
                        particle_count=3, seed=2)
        assert len(paths) == 2

    def test_unknown_preset(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown preset"):
            animate(tmp_path / "x.gif", preset="hail")

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown format"):
            animate(tmp_path / "x.mov", width=8, height=8, frames=1, format='mov',
                    particle_count=1)
