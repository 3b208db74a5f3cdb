"""
Particle System - Owns the particle list and drives one frame at a time

Example:
    config = SimulationConfig(particle_count=150, viewport=Rect.from_size(640, 480))
    system = ParticleSystem(config, source_signature=sprite.signature)

    while running:                      # host-owned frame loop
        system.advance_frame()
        system.for_each_particle(draw)  # draw(quad, size)
"""

import logging
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from .config import Quad, Rect, SimulationConfig
from .particle import Particle

logger = logging.getLogger(__name__)


class ParticleSystem:
    """
    Ordered collection of falling particles sharing one SimulationConfig.

    The config is held by reference: the host may change any field between
    frames. Count and source changes are applied through reconcile(), which
    the host calls when it detects them.
    """

    def __init__(
        self,
        config: SimulationConfig,
        source_signature: int = 0,
        rng: Optional[np.random.Generator] = None
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._particles: List[Particle] = []
        self._signature = source_signature

        self.reconcile(config.target_count, source_signature)

    # -------------------------------------------------------------------------
    # Collection management
    # -------------------------------------------------------------------------

    def reconcile(self, desired_count: int, source_signature: int) -> None:
        """
        Bring the particle count in line with desired_count.

        Growing with the same source keeps every existing particle and
        appends new ones. Shrinking, or switching to a different source,
        discards all particles and rebuilds from zero.
        """
        desired_count = max(0, int(desired_count))

        if source_signature != self._signature or desired_count < len(self._particles):
            logger.debug(
                "Rebuilding particles: %d -> %d (signature %s -> %s)",
                len(self._particles), desired_count, self._signature, source_signature
            )
            self._particles.clear()
            self._signature = source_signature

        added = desired_count - len(self._particles)
        for _ in range(added):
            self._particles.append(Particle.new(self.config, self.rng))

        if added:
            logger.debug("Added %d particles (total %d)", added, len(self._particles))

    def set_viewport(self, viewport: Optional[Rect]) -> None:
        """Change the drawable bounds; applies from the next frame"""
        logger.debug("Viewport set to %s", viewport)
        self.config.viewport = viewport

    # -------------------------------------------------------------------------
    # Frame update
    # -------------------------------------------------------------------------

    def advance_frame(self) -> None:
        """Advance every particle by one frame"""
        for particle in self._particles:
            particle.update_position(self.config, self.rng)

    # -------------------------------------------------------------------------
    # Render output
    # -------------------------------------------------------------------------

    def for_each_particle(self, callback: Callable[[Quad, float], None]) -> None:
        """Call callback(quad, size) for every particle"""
        for quad, size in self.quads():
            callback(quad, size)

    def quads(self) -> List[Tuple[Quad, float]]:
        """Flat list of render instructions for the current frame"""
        return [(self._quad_of(p), p.size) for p in self._particles]

    def _quad_of(self, particle: Particle) -> Quad:
        # Particles that have not been advanced yet have no cached quad
        if particle.quad is None:
            particle.quad = particle.project(self.config)
        return particle.quad

    @property
    def particles(self) -> Tuple[Particle, ...]:
        return tuple(self._particles)

    @property
    def source_signature(self) -> int:
        return self._signature

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(tuple(self._particles))
