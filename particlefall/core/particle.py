"""
Falling Particle - Per-particle simulation state and update rules

Each particle travels in normalized particle-space along the configured fall
angle. When it leaves the valid band [increment, 1 - increment] it respawns in
place on the edge it would enter from, with fresh size, jitter and spin phase.

Spawn edge selection:
- With probability |cos(angle)| the particle enters on a horizontal edge
  (top when falling down, bottom when rising)
- Otherwise it enters on a vertical edge (left when drifting right, right
  when drifting left)
"""

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .config import Quad, SimulationConfig
from .projector import project


# Fraction of the viewport a particle covers per frame at speed 1.0
BASE_RATE = 0.01

# Per-particle speed jitter lies in [1.0, 1.0 + JITTER_RANGE)
JITTER_RANGE = 0.2


@dataclass
class Particle:
    """A single falling particle"""
    # Normalized position
    x: float = 0.0
    y: float = 0.0

    size: float = 1.0
    speed_jitter: float = 1.0
    spin_phase: float = 0.0
    current_spin: float = 0.0

    # Derived each frame, not part of the simulation state
    quad: Optional[Quad] = field(default=None, compare=False, repr=False)

    @classmethod
    def new(cls, config: SimulationConfig, rng: np.random.Generator) -> 'Particle':
        """
        Create a particle scattered through the viewport.

        The edge spawn from generate() is overridden once so the first frame
        already shows a filled field instead of a single row at the edge.
        """
        particle = cls()
        particle.generate(config, rng)

        limit = 1.0 - particle.movement_increment(config)
        particle.x = rng.random() * limit
        particle.y = rng.random() * limit
        return particle

    def movement_increment(self, config: SimulationConfig) -> float:
        """Distance travelled per frame, in particle-space units"""
        return config.speed * self.speed_jitter * BASE_RATE

    def generate(self, config: SimulationConfig, rng: np.random.Generator) -> None:
        """Respawn on the upstream edge with fresh random attributes"""
        self.speed_jitter = 1.0 + rng.random() * JITTER_RANGE

        low, high = config.size_range
        self.size = low + rng.random() * (high - low)
        self.spin_phase = rng.random()

        inc = self.movement_increment(config)

        angle = config.fall_angle_radians
        cos = math.cos(angle)
        sin = math.sin(angle)

        if rng.random() < abs(cos):
            self.x = rng.random() * (1.0 - inc)
            self.y = inc if cos >= 0 else 1.0 - inc
        else:
            self.x = inc if sin >= 0 else 1.0 - inc
            self.y = rng.random() * (1.0 - inc)

    def is_traveling(self, config: SimulationConfig) -> bool:
        """True while the particle is inside the valid band"""
        inc = self.movement_increment(config)
        return inc <= self.x <= 1.0 - inc and inc <= self.y <= 1.0 - inc

    def update_position(self, config: SimulationConfig, rng: np.random.Generator) -> Quad:
        """Advance one frame, respawning if the particle left the band"""
        if not self.is_traveling(config):
            self.generate(config, rng)
        else:
            inc = self.movement_increment(config)
            angle = config.fall_angle_radians
            cos = math.cos(angle)
            sin = math.sin(angle)

            self.x += inc * sin
            self.y += inc * cos

            # Spin follows distance travelled, not time
            travelled = sin * self.x + cos * self.y
            self.current_spin = math.cos(travelled * self.spin_phase * config.spin_speed)

        self.quad = self.project(config)
        return self.quad

    def project(self, config: SimulationConfig) -> Quad:
        """Render corners for the current state"""
        return project(
            config.viewport,
            config.particle_half_extent,
            self.x,
            self.y,
            self.size,
            config.spin_orientation,
            self.current_spin,
            config.display_size,
        )
