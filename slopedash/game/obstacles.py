# slopedash/game/obstacles.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional
import pygame
from .config import (
    OBSTACLE_W, OBSTACLE_H, HITBOX_FACTOR, REAP_Y, SKIER_CLAMP_MARGIN,
    DIRECTION_CHANGE_MIN_MS, DIRECTION_CHANGE_MAX_MS, HORIZONTAL_RESAMPLE
)

STATIC = "static"
MOVING = "moving"


@dataclass
class Obstacle:
    """
    A rock/tree (static) or a skier (moving), positioned by its centre.
    Static obstacles travel up at the global scroll speed; skiers carry their
    own `speed` and drift sideways.
    """
    kind: str                       # "static" or "moving"
    x: float
    y: float
    sprite: str                     # "rock" | "tree" | "skier"
    scale: float = 1.0
    lane: Optional[int] = None
    zone: Optional[int] = None      # spawn row index it was created on
    speed: float = 0.0              # moving only
    horizontal_speed: float = 0.0   # moving only
    next_direction_change: float = 0.0

    @property
    def is_moving(self) -> bool:
        return self.kind == MOVING

    @property
    def rect(self) -> pygame.Rect:
        """Collision box, centred on (x, y)."""
        w = int(OBSTACLE_W * self.scale * HITBOX_FACTOR)
        h = int(OBSTACLE_H * self.scale * HITBOX_FACTOR)
        r = pygame.Rect(0, 0, w, h)
        r.center = (int(self.x), int(self.y))
        return r

    @property
    def draw_rect(self) -> pygame.Rect:
        r = pygame.Rect(0, 0, int(OBSTACLE_W * self.scale), int(OBSTACLE_H * self.scale))
        r.center = (int(self.x), int(self.y))
        return r

    def update_movement(self, now_ms: float, width: float, rng: random.Random):
        """Skier drift: resample direction when its deadline passed, then clamp."""
        if now_ms > self.next_direction_change:
            self.horizontal_speed = rng.randint(-HORIZONTAL_RESAMPLE, HORIZONTAL_RESAMPLE)
            self.next_direction_change = now_ms + rng.randint(DIRECTION_CHANGE_MIN_MS,
                                                              DIRECTION_CHANGE_MAX_MS)
        self.x += self.horizontal_speed
        self.x = min(max(self.x, SKIER_CLAMP_MARGIN), width - SKIER_CLAMP_MARGIN)


def update_obstacles(obstacles: List[Obstacle],
                     scroll_speed: float,
                     now_ms: float,
                     width: float,
                     rng: random.Random) -> List[Obstacle]:
    """
    Advance every live obstacle by one frame and reap the ones that left the
    top of the screen. Mutates `obstacles` in place; returns the reaped ones.
    """
    for ob in obstacles:
        if ob.is_moving:
            ob.y -= ob.speed
            ob.update_movement(now_ms, width, rng)
        else:
            ob.y -= scroll_speed

    reaped = [ob for ob in obstacles if ob.y < REAP_Y]
    if reaped:
        obstacles[:] = [ob for ob in obstacles if ob.y >= REAP_Y]
    return reaped
