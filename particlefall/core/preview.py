"""
Real-Time Preview Window

Runs a FallAnimator live. The window's clock is the frame scheduler: every
tick calls animator.step() once and draws the rendered canvas.

Controls:
    SPACE       - Play/pause
    RIGHT       - Step one frame (while paused)
    UP/DOWN     - Speed up/down
    LEFT/RIGHT  - Rotate fall angle (while playing)
    +/-         - Add/remove 10 particles
    O           - Cycle spin orientation (horizontal, vertical, none)
    ESC/Q       - Quit

Requires: pygame (pip install pygame)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .animator import FallAnimator
from .config import Axis, SimulationConfig

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False
    pygame = None


# =============================================================================
# Preview Configuration
# =============================================================================

@dataclass
class PreviewConfig:
    """Configuration for the preview window"""
    window_width: int = 800
    window_height: int = 600
    window_title: str = "Particle Fall Preview"
    background_color: Tuple[int, int, int] = (16, 20, 32)
    fps: int = 60
    show_info: bool = True


# =============================================================================
# Key Actions
# =============================================================================

SPEED_STEP = 0.1
ANGLE_STEP = 5.0
COUNT_STEP = 10

_SPIN_CYCLE = (Axis.HORIZONTAL, Axis.VERTICAL, None)


def apply_action(config: SimulationConfig, action: str) -> str:
    """
    Apply a preview control action to the config.

    Returns:
        Short status text describing the new value
    """
    if action == 'speed_up':
        config.speed = round(config.speed + SPEED_STEP, 3)
        return f"speed {config.speed:.1f}"

    if action == 'speed_down':
        config.speed = round(max(0.0, config.speed - SPEED_STEP), 3)
        return f"speed {config.speed:.1f}"

    if action == 'angle_left':
        config.fall_angle_degrees = (config.fall_angle_degrees - ANGLE_STEP) % 360
        return f"angle {config.fall_angle_degrees:.0f}"

    if action == 'angle_right':
        config.fall_angle_degrees = (config.fall_angle_degrees + ANGLE_STEP) % 360
        return f"angle {config.fall_angle_degrees:.0f}"

    if action == 'more':
        config.particle_count = config.target_count + COUNT_STEP
        return f"particles {config.particle_count}"

    if action == 'fewer':
        config.particle_count = max(0, config.target_count - COUNT_STEP)
        return f"particles {config.particle_count}"

    if action == 'cycle_spin':
        current = _SPIN_CYCLE.index(config.spin_orientation)
        config.spin_orientation = _SPIN_CYCLE[(current + 1) % len(_SPIN_CYCLE)]
        label = config.spin_orientation.value if config.spin_orientation else "none"
        return f"spin {label}"

    raise ValueError(f"Unknown action: {action}")


def check_pygame_available() -> bool:
    """Check if pygame is available for preview"""
    return PYGAME_AVAILABLE


# =============================================================================
# Preview Window
# =============================================================================

def _key_actions() -> Dict[int, str]:
    """pygame key code -> apply_action name (RIGHT is handled separately)"""
    return {
        pygame.K_LEFT: 'angle_left',
        pygame.K_UP: 'speed_up',
        pygame.K_DOWN: 'speed_down',
        pygame.K_PLUS: 'more',
        pygame.K_EQUALS: 'more',
        pygame.K_KP_PLUS: 'more',
        pygame.K_MINUS: 'fewer',
        pygame.K_KP_MINUS: 'fewer',
        pygame.K_o: 'cycle_spin',
    }


class PreviewWindow:
    """
    Live animation window; the viewport follows the window size.

    Example:
        animator = FallAnimator(SimulationConfig())
        PreviewWindow(animator).run()
    """

    def __init__(self, animator: FallAnimator, config: Optional[PreviewConfig] = None):
        if not PYGAME_AVAILABLE:
            raise ImportError(
                "pygame is required for preview. Install with: pip install pygame"
            )

        self.animator = animator
        self.config = config or PreviewConfig()
        self.playing = True
        self.status = ""

        pygame.init()
        pygame.display.set_caption(self.config.window_title)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)
        self._actions = _key_actions()

        self._open(self.config.window_width, self.config.window_height)

    def _open(self, width: int, height: int) -> None:
        """(Re)create the display surface and resize the viewport to match"""
        self.config.window_width, self.config.window_height = width, height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.animator.resize(width, height)

    @staticmethod
    def _frame_surface(frame: np.ndarray) -> Any:
        h, w = frame.shape[:2]
        return pygame.image.frombuffer(np.ascontiguousarray(frame).tobytes(), (w, h), 'RGBA')

    def _handle_key(self, key: int) -> bool:
        """Handle a key press, returns False to quit"""
        if key in (pygame.K_ESCAPE, pygame.K_q):
            return False

        if key == pygame.K_SPACE:
            self.playing = not self.playing
            self.status = "playing" if self.playing else "paused"
        elif key == pygame.K_RIGHT:
            if self.playing:
                self.status = apply_action(self.animator.config, 'angle_right')
            else:
                self.animator.step()
                self.status = f"frame {self.animator.frame_index}"
        elif key in self._actions:
            self.status = apply_action(self.animator.config, self._actions[key])

        return True

    def _handle_event(self, event: Any) -> bool:
        """Returns False when the window should close"""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            return self._handle_key(event.key)
        if event.type == pygame.VIDEORESIZE:
            self._open(event.w, event.h)
        return True

    def _draw_info(self) -> None:
        sim = self.animator.config
        spin = sim.spin_orientation.value if sim.spin_orientation else "none"
        lines = [
            f"frame {self.animator.frame_index}  particles {len(self.animator.system)}",
            f"speed {sim.speed:.1f}  angle {sim.fall_angle_degrees:.0f}  spin {spin}",
            f"fps {self.clock.get_fps():.0f}",
        ]
        if self.status:
            lines.append(self.status)

        y = 8
        for line in lines:
            text = self.font.render(line, True, (220, 220, 220))
            self.screen.blit(text, (8, y))
            y += text.get_height() + 2

    def run(self) -> None:
        """Block until the window is closed; one animator step per tick"""
        running = True
        while running:
            self.clock.tick(self.config.fps)

            for event in pygame.event.get():
                running = self._handle_event(event) and running

            if self.playing:
                self.animator.step()

            self.screen.fill(self.config.background_color)
            frame = self.animator.render_frame()
            if frame.size:
                self.screen.blit(self._frame_surface(frame), (0, 0))
            if self.config.show_info:
                self._draw_info()

            pygame.display.flip()

        pygame.quit()


def preview_animator(animator: FallAnimator, title: str = "Particle Fall Preview",
                     width: int = 800, height: int = 600, fps: int = 60) -> None:
    """Open a preview window for an animator and block until it is closed"""
    PreviewWindow(
        animator,
        PreviewConfig(window_width=width, window_height=height, window_title=title, fps=fps),
    ).run()
