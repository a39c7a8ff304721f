# slopedash/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .config import (
    PLAYER_W, PLAYER_H, PLAYER_Y_FRAC, PLAYER_SCALE_MOBILE, PLAYER_SCALE_DESKTOP,
    MOVE_DISTANCE, MOVE_DELAY_MS, MOVE_SMOOTHING, TILT_ANGLE, TILT_SPEED,
    TILT_RELAX_FACTOR, EDGE_MARGIN, SWIPE_THRESHOLD, HITBOX_FACTOR
)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@dataclass
class Player:
    """
    Snowboarder with a fixed y and stepped lateral movement:
    - a move nudges x toward x + dir * MOVE_DISTANCE (lerp, MOVE_SMOOTHING)
    - moves are gated by MOVE_DELAY_MS, which gives the characteristic cadence
    - angle tilts toward -dir * TILT_ANGLE while moving, relaxes to 0 when idle
    """
    x: float
    y: float
    scale: float
    angle: float = 0.0
    moving: bool = False            # on-screen button held
    direction: int = 0              # -1 left, +1 right, 0 none
    move_delay_ms: float = MOVE_DELAY_MS
    _last_move_ms: float = float("-inf")
    _swipe_start_x: float | None = None

    @classmethod
    def for_viewport(cls, width: float, height: float, is_mobile: bool) -> "Player":
        scale = PLAYER_SCALE_MOBILE if is_mobile else PLAYER_SCALE_DESKTOP
        return cls(x=width / 2.0, y=height * PLAYER_Y_FRAC, scale=scale)

    @property
    def half_width(self) -> float:
        # bounds use the collision width, not the drawn sprite
        return (PLAYER_W * self.scale * HITBOX_FACTOR) / 2.0

    @property
    def rect(self) -> pygame.Rect:
        w = int(PLAYER_W * self.scale * HITBOX_FACTOR)
        h = int(PLAYER_H * self.scale * HITBOX_FACTOR)
        r = pygame.Rect(0, 0, w, h)
        r.center = (int(self.x), int(self.y))
        return r

    @property
    def draw_rect(self) -> pygame.Rect:
        r = pygame.Rect(0, 0, int(PLAYER_W * self.scale), int(PLAYER_H * self.scale))
        r.center = (int(self.x), int(self.y))
        return r

    def can_move(self, now_ms: float) -> bool:
        return now_ms - self._last_move_ms >= self.move_delay_ms

    def try_move(self, direction: int, now_ms: float, width: float) -> bool:
        """One step left/right. Returns True if the position changed."""
        if not self.can_move(now_ms):
            return False
        target_x = self.x + direction * MOVE_DISTANCE
        lo = EDGE_MARGIN + self.half_width
        hi = width - EDGE_MARGIN - self.half_width
        if not (lo <= target_x <= hi):
            return False

        self.x = lerp(self.x, target_x, MOVE_SMOOTHING)
        self.angle = lerp(self.angle, -direction * TILT_ANGLE, TILT_SPEED)
        self._last_move_ms = now_ms
        return True

    def relax(self):
        self.angle = lerp(self.angle, 0.0, TILT_SPEED * TILT_RELAX_FACTOR)

    # --- input events ---

    def press(self, direction: int):
        """On-screen button (or key) pressed."""
        self.moving = True
        self.direction = direction

    def release(self):
        self.moving = False
        self.direction = 0

    def start_swipe(self, x: float):
        self._swipe_start_x = x

    def end_swipe(self, x: float, now_ms: float, width: float) -> bool:
        if self._swipe_start_x is None:
            return False
        dx = x - self._swipe_start_x
        self._swipe_start_x = None
        if abs(dx) > SWIPE_THRESHOLD:
            return self.try_move(1 if dx > 0 else -1, now_ms, width)
        return False

    def update(self, now_ms: float, width: float, key_direction: int = 0):
        """Per-frame: held key or held button moves, otherwise straighten up."""
        if key_direction == -1 or (self.moving and self.direction == -1):
            self.try_move(-1, now_ms, width)
        elif key_direction == 1 or (self.moving and self.direction == 1):
            self.try_move(1, now_ms, width)
        else:
            self.relax()
