# slopedash/game/session.py
from __future__ import annotations
import random
from typing import List, Optional
from .config import BASE_SCROLL_SPEED, SCORE_TICK_MS
from . import difficulty as diff
from .obstacles import Obstacle, update_obstacles
from .player import Player
from .spawner import Spawner, Viewport


class GameSession:
    """
    All per-run state in one place: score, scroll speed, timers, input,
    player and live obstacles. The host (pygame loop or the gym env) calls
    `update(now_ms)` once per frame with a monotonic clock.
    """
    def __init__(self, viewport: Viewport, seed: Optional[int] = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.viewport = viewport
        self.spawner = Spawner(viewport, self.rng)
        self.player = Player.for_viewport(viewport.width, viewport.height, viewport.is_mobile)
        self.obstacles: List[Obstacle] = []

        self.score = 0
        self.speed = BASE_SCROLL_SPEED
        self.frame = 0
        self.now_ms = 0.0
        self.last_score_ms = 0.0
        self.key_direction = 0          # -1/+1 while an arrow key is held
        self.alive = True
        self.paused = False
        self.started = False

    # -------------------- Lifecycle --------------------

    def start(self, now_ms: float = 0.0):
        """Seed the first rows below the screen."""
        self.now_ms = now_ms
        self.last_score_ms = now_ms
        self.spawner.spawn(self.obstacles, self.score, now_ms)
        self.started = True

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def update(self, now_ms: float) -> bool:
        """
        Advance one frame. Returns False once the run is over (collision).
        Paused or finished sessions ignore the call.
        """
        if not self.alive:
            return False
        if self.paused:
            return True
        if not self.started:
            self.start(now_ms)

        self.now_ms = now_ms
        self.frame += 1

        self.player.update(now_ms, self.viewport.width, self.key_direction)

        self.speed = diff.scroll_speed(self.score)
        if now_ms - self.last_score_ms > SCORE_TICK_MS:
            self.score += diff.score_increment(self.speed)
            self.last_score_ms = now_ms

        update_obstacles(self.obstacles, self.speed, now_ms, self.viewport.width, self.rng)
        self.maybe_top_up()

        if self.collides():
            self.alive = False
        return self.alive

    def maybe_top_up(self) -> bool:
        """Run the spawner when the live count fell under the score-scaled floor."""
        if self.frame % diff.spawn_check_interval(self.score) != 0:
            return False
        if len(self.obstacles) >= diff.min_live_obstacles(self.score):
            return False
        self.spawner.spawn(self.obstacles, self.score, self.now_ms)
        return True

    def collides(self) -> bool:
        pr = self.player.rect
        return any(pr.colliderect(ob.rect) for ob in self.obstacles)

    # -------------------- Input --------------------

    def set_key_direction(self, direction: int):
        self.key_direction = direction

    @property
    def moving_count(self) -> int:
        return sum(1 for o in self.obstacles if o.is_moving)
