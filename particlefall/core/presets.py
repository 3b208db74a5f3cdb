"""
Fall Presets Library - Pre-configured particle fall settings
Built-in presets plus user presets stored as YAML files
"""

import copy
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .config import SimulationConfig

logger = logging.getLogger(__name__)

PRESETS_DIR_ENV = "PARTICLEFALL_PRESETS_DIR"


# ============================================================================
# Preset Data Structure
# ============================================================================

@dataclass
class FallPreset:
    """A named particle fall configuration"""

    name: str
    description: str = ""

    # Procedural sprite name (see sprite.SPRITES)
    sprite: str = "snowflake"

    # SimulationConfig fields
    config: Dict[str, Any] = field(default_factory=dict)

    # Rendering
    blend_mode: str = "add"
    background: Tuple[int, int, int, int] = (0, 0, 0, 0)

    tags: List[str] = field(default_factory=list)

    def build_config(self, **overrides) -> SimulationConfig:
        """Fresh SimulationConfig from this preset, with overrides applied"""
        data = copy.deepcopy(self.config)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return SimulationConfig.from_dict(data)

    def has_tag(self, tag: str) -> bool:
        return tag.lower() in (t.lower() for t in self.tags)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, description and tags"""
        query = query.lower()
        return any(query in text.lower() for text in (self.name, self.description, *self.tags))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        data = asdict(self)
        data['background'] = list(self.background)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FallPreset':
        """Create from dictionary, ignoring unknown keys"""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}

        if 'background' in filtered:
            filtered['background'] = tuple(int(c) for c in filtered['background'])
        if filtered.get('config') is None:
            filtered['config'] = {}

        return cls(**filtered)


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    "snow": {
        "name": "snow",
        "description": "Steady snowfall with spinning flakes",
        "sprite": "snowflake",
        "config": {
            "particle_count": 100,
            "speed": 1.0,
            "min_size": 0.4,
            "max_size": 1.0,
            "fall_angle_degrees": 0.0,
            "spin_speed": 20.0,
            "spin_orientation": "horizontal",
        },
        "tags": ["winter", "snow", "ambient"],
    },

    "light_snow": {
        "name": "light_snow",
        "description": "Sparse, slow flakes drifting slightly sideways",
        "sprite": "snowflake",
        "config": {
            "particle_count": 40,
            "speed": 0.5,
            "min_size": 0.3,
            "max_size": 0.7,
            "fall_angle_degrees": -10.0,
            "spin_speed": 10.0,
            "spin_orientation": "horizontal",
        },
        "tags": ["winter", "snow", "subtle"],
    },

    "blizzard": {
        "name": "blizzard",
        "description": "Dense, fast, wind-driven snow",
        "sprite": "snowflake",
        "config": {
            "particle_count": 300,
            "speed": 2.5,
            "min_size": 0.3,
            "max_size": 1.2,
            "fall_angle_degrees": -50.0,
            "spin_speed": 35.0,
            "spin_orientation": "vertical",
        },
        "tags": ["winter", "snow", "storm"],
    },

    "rain": {
        "name": "rain",
        "description": "Straight, fast rain without spin",
        "sprite": "raindrop",
        "config": {
            "particle_count": 200,
            "speed": 3.0,
            "min_size": 0.8,
            "max_size": 1.4,
            "fall_angle_degrees": 0.0,
            "spin_speed": 0.0,
            "spin_orientation": None,
        },
        "tags": ["weather", "rain"],
    },

    "drizzle": {
        "name": "drizzle",
        "description": "Light slanted rain",
        "sprite": "raindrop",
        "config": {
            "particle_count": 60,
            "speed": 1.8,
            "min_size": 0.5,
            "max_size": 0.9,
            "fall_angle_degrees": -15.0,
            "spin_speed": 0.0,
            "spin_orientation": None,
        },
        "tags": ["weather", "rain", "subtle"],
    },

    "petals": {
        "name": "petals",
        "description": "Pink petals tumbling on a breeze",
        "sprite": "dot",
        "config": {
            "particle_count": 50,
            "speed": 0.7,
            "min_size": 0.6,
            "max_size": 1.3,
            "fall_angle_degrees": 35.0,
            "spin_speed": 12.0,
            "spin_orientation": "vertical",
        },
        "blend_mode": "alpha",
        "tags": ["nature", "spring"],
    },

    "confetti": {
        "name": "confetti",
        "description": "Fast-spinning celebration confetti",
        "sprite": "dot",
        "config": {
            "particle_count": 150,
            "speed": 1.2,
            "min_size": 0.5,
            "max_size": 1.5,
            "fall_angle_degrees": 0.0,
            "spin_speed": 60.0,
            "spin_orientation": "horizontal",
        },
        "blend_mode": "alpha",
        "tags": ["celebration", "ui"],
    },

    "rising_bubbles": {
        "name": "rising_bubbles",
        "description": "Bubbles floating upward",
        "sprite": "dot",
        "config": {
            "particle_count": 45,
            "speed": 0.6,
            "min_size": 0.5,
            "max_size": 1.6,
            "fall_angle_degrees": 180.0,
            "spin_speed": 5.0,
            "spin_orientation": None,
        },
        "tags": ["water", "ambient"],
    },
}


# ============================================================================
# User Preset Files
# ============================================================================

PRESET_SUFFIXES = ('.yaml', '.yml')


def default_presets_dir() -> Path:
    """User preset directory, overridable through the environment"""
    override = os.environ.get(PRESETS_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / '.particlefall' / 'presets'


def read_preset_file(path: Path) -> Dict[str, FallPreset]:
    """
    Parse one preset file.

    A file holds either a single preset, named after the file, or a
    ``presets:`` mapping of name to preset. Every preset must build a valid
    SimulationConfig.

    Raises:
        yaml.YAMLError, ValueError, TypeError: malformed file
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("expected a mapping at top level")

    if 'presets' in data:
        entries = data['presets'] or {}
        if not isinstance(entries, dict):
            raise ValueError("'presets' must map names to presets")
    else:
        entries = {path.stem: data}

    presets = {}
    for name, entry in entries.items():
        preset = FallPreset.from_dict({**(entry or {}), 'name': str(name)})
        preset.build_config()
        presets[preset.name] = preset
    return presets


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Built-in presets plus the YAML files in a user directory.

    User presets shadow built-ins of the same name. Files that fail to parse
    are skipped with a warning so one bad file never hides the others.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        self.user_presets_dir = Path(user_presets_dir) if user_presets_dir else default_presets_dir()

        self._builtin: Dict[str, FallPreset] = {
            name: FallPreset.from_dict(copy.deepcopy(data))
            for name, data in BUILTIN_PRESETS.items()
        }
        self._user: Dict[str, FallPreset] = {}
        # Which file each user preset was read from
        self._sources: Dict[str, Path] = {}

        self.reload()

    def reload(self) -> None:
        """Re-read the user preset directory"""
        self._user.clear()
        self._sources.clear()

        for path in self._preset_files():
            try:
                loaded = read_preset_file(path)
            except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Could not load preset file %s: %s", path, e)
                continue

            for name, preset in loaded.items():
                self._user[name] = preset
                self._sources[name] = path

        logger.debug("Loaded %d user presets from %s", len(self._user), self.user_presets_dir)

    def _preset_files(self) -> List[Path]:
        """Preset files in load order; later files shadow earlier ones"""
        if not self.user_presets_dir.is_dir():
            return []
        return sorted(p for p in self.user_presets_dir.iterdir() if p.suffix in PRESET_SUFFIXES)

    def _remove_entry(self, path: Path, name: str) -> bool:
        """
        Drop one preset from a file on disk.

        Pack entries are removed from the ``presets:`` mapping and the rest of
        the file is written back untouched; a pack left empty and a single
        preset file named after the preset are deleted.

        Returns:
            True if the file held the preset
        """
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read preset file %s: %s", path, e)
            return False

        if isinstance(data, dict) and isinstance(data.get('presets'), dict):
            entries = data['presets']
            key = next((k for k in entries if str(k) == name), None)
            if key is None:
                return False
            del entries[key]
            if entries:
                with open(path, 'w') as f:
                    yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
                return True
        elif path.stem != name:
            return False

        path.unlink()
        return True

    def _all(self) -> Dict[str, FallPreset]:
        return {**self._builtin, **self._user}

    def get(self, name: str) -> Optional[FallPreset]:
        """Preset by name, user presets first"""
        return self._all().get(name)

    def exists(self, name: str) -> bool:
        return name in self._user or name in self._builtin

    def is_builtin(self, name: str) -> bool:
        """True for a built-in that no user preset shadows"""
        return name in self._builtin and name not in self._user

    def list_all(self) -> List[str]:
        return sorted(self._all())

    def list_by_tag(self, tag: str) -> List[str]:
        return sorted(name for name, preset in self._all().items() if preset.has_tag(tag))

    def search(self, query: str) -> List[str]:
        return sorted(name for name, preset in self._all().items() if preset.matches(query))

    def save_preset(self, preset: FallPreset, filename: Optional[str] = None) -> Path:
        """
        Write a preset to its own YAML file in the user directory.

        Copies of the same name in files that load later, packs included, are
        removed so the saved version is the one that loads.

        Returns:
            Path of the written file

        Raises:
            ValueError, TypeError: the preset's config is invalid
        """
        preset.build_config()

        filename = filename or preset.name
        if not filename.endswith(PRESET_SUFFIXES):
            filename += '.yaml'

        self.user_presets_dir.mkdir(parents=True, exist_ok=True)
        path = self.user_presets_dir / filename

        with open(path, 'w') as f:
            yaml.safe_dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        for other in self._preset_files():
            if other > path and self._remove_entry(other, preset.name):
                logger.debug("Removed shadowing copy of %s from %s", preset.name, other)

        self.reload()
        logger.debug("Saved preset %s to %s", preset.name, path)
        return path

    def delete_preset(self, name: str) -> bool:
        """
        Remove a user preset from disk.

        A preset that shares a ``presets:`` file with others is removed from
        that file; the rest of the file is kept. If an earlier file also
        defines the name, that definition becomes the active one.

        Returns:
            False if there is no user preset with that name
        """
        if name not in self._user:
            return False

        path = self._sources[name]
        if path.exists():
            self._remove_entry(path, name)

        self.reload()
        logger.debug("Deleted preset %s from %s", name, path)
        return True

    def get_preset_info(self, name: str) -> Optional[Dict[str, Any]]:
        """Preset fields plus where it came from, for display"""
        preset = self.get(name)
        if preset is None:
            return None

        info = preset.to_dict()
        info['config'] = dict(preset.config)
        info['is_builtin'] = self.is_builtin(name)
        info['is_user'] = name in self._user
        info['source'] = str(self._sources[name]) if name in self._sources else None
        return info


# ============================================================================
# Module-level Manager
# ============================================================================

_manager: Optional[PresetManager] = None


def get_preset_manager() -> PresetManager:
    """Shared manager, created on first use"""
    global _manager
    if _manager is None:
        _manager = PresetManager()
    return _manager


def get_preset(name: str) -> Optional[FallPreset]:
    return get_preset_manager().get(name)


def list_presets(tag: Optional[str] = None) -> List[str]:
    """All preset names, or only those carrying tag"""
    manager = get_preset_manager()
    return manager.list_by_tag(tag) if tag else manager.list_all()
