# slopedash/game/spawner.py
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Set
from .config import (
    MOBILE_BREAKPOINT, ROW_START_OFFSET, LOOKAHEAD_MOBILE, LOOKAHEAD_DESKTOP,
    LANES_MOBILE, LANES_DESKTOP, LANE_MARGIN, EXTRA_PLACEMENT_ATTEMPTS,
    OBSTACLE_SCALE_MOBILE, OBSTACLE_SCALE_DESKTOP, STATIC_SPRITES, MOVING_SPRITE,
    DIRECTION_CHANGE_MIN_MS, DIRECTION_CHANGE_MAX_MS,
    PATH_ROW_HEIGHT, DENSE_ROW_COUNT, MIN_PASSABLE_GAP, DEBUG_SPAWN_LOGS
)
from . import difficulty as diff
from .obstacles import Obstacle, STATIC, MOVING
from .occupancy import OccupancyGrid, Lane, partition_lanes


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    @property
    def is_mobile(self) -> bool:
        return self.width < MOBILE_BREAKPOINT

    @property
    def device_class(self) -> str:
        return diff.MOBILE if self.is_mobile else diff.DESKTOP

    @property
    def lane_count(self) -> int:
        return LANES_MOBILE if self.is_mobile else LANES_DESKTOP

    @property
    def lookahead(self) -> int:
        return LOOKAHEAD_MOBILE if self.is_mobile else LOOKAHEAD_DESKTOP

    @property
    def obstacle_scale(self) -> float:
        return OBSTACLE_SCALE_MOBILE if self.is_mobile else OBSTACLE_SCALE_DESKTOP


def has_passable_gap(row: List[Obstacle]) -> bool:
    xs = sorted(o.x for o in row)
    return any(xs[i + 1] - xs[i] >= MIN_PASSABLE_GAP for i in range(len(xs) - 1))


def ensure_clear_path(obstacles: List[Obstacle], rng: random.Random) -> List[Obstacle]:
    """
    Bucket obstacles into rows of PATH_ROW_HEIGHT. While a row holds
    DENSE_ROW_COUNT or more obstacles and no adjacent x gap of at least
    MIN_PASSABLE_GAP, drop one of them picked at random. Sparser rows are
    never touched. Mutates `obstacles` in place and returns what was removed.
    """
    rows: Dict[int, List[Obstacle]] = {}
    for ob in obstacles:
        rows.setdefault(math.floor(ob.y / PATH_ROW_HEIGHT), []).append(ob)

    removed: List[Obstacle] = []
    for row_idx in sorted(rows):
        row = rows[row_idx]
        row.sort(key=lambda o: o.x)
        while len(row) >= DENSE_ROW_COUNT and not has_passable_gap(row):
            victim = row.pop(rng.randrange(len(row)))
            removed.append(victim)
            if DEBUG_SPAWN_LOGS:
                print(f"[path] row={row_idx} n={len(row) + 1} removed x={victim.x:.0f} ({victim.sprite})")

    if removed:
        gone = {id(o) for o in removed}
        obstacles[:] = [o for o in obstacles if id(o) not in gone]
    return removed


class Spawner:
    """
    Populates the rows just below the visible playfield with rocks/trees and
    skiers. Everything random goes through `rng` so a seed fixes the layout.
    """
    def __init__(self, viewport: Viewport, rng: random.Random):
        self.viewport = viewport
        self.rng = rng
        self.lanes: List[Lane] = partition_lanes(viewport.width, viewport.lane_count)

    def spawn_rows(self, score: float) -> List[float]:
        """Target y of each spawn row, from just below the screen to the lookahead."""
        step = diff.spawn_row_interval(score, self.viewport.device_class)
        return [self.viewport.height + y
                for y in range(ROW_START_OFFSET, self.viewport.lookahead + 1, step)]

    def spawn(self, obstacles: List[Obstacle], score: float, now_ms: float) -> List[Obstacle]:
        """
        One spawner run: static pass, moving pass, then the path repair over
        every live obstacle. New obstacles are appended to `obstacles`;
        returns the ones created by this call that survived the repair.
        """
        rows = self.spawn_rows(score)
        grid = OccupancyGrid(vertical_radius=diff.vertical_spacing(score, self.viewport.device_class))
        lane_claims: List[Set[int]] = [set() for _ in rows]

        new = self._static_pass(rows, grid, lane_claims, score)
        new += self._moving_pass(rows, grid, lane_claims, score, now_ms)

        obstacles.extend(new)
        removed = ensure_clear_path(obstacles, self.rng)

        if DEBUG_SPAWN_LOGS:
            n_moving = sum(1 for o in new if o.is_moving)
            print(f"[spawn] score={score:.0f} rows={len(rows)} static={len(new) - n_moving} "
                  f"moving={n_moving} repaired={len(removed)} live={len(obstacles)}")

        gone = {id(o) for o in removed}
        return [o for o in new if id(o) not in gone]

    # ------------------------ Passes ------------------------

    def _static_pass(self, rows: List[float], grid: OccupancyGrid,
                     lane_claims: List[Set[int]], score: float) -> List[Obstacle]:
        created: List[Obstacle] = []
        min_per_zone = diff.min_obstacles_per_zone(score)
        chance = diff.static_spawn_chance(score)
        x_min, x_max = LANE_MARGIN, self.viewport.width - LANE_MARGIN

        for zone, zone_y in enumerate(rows):
            available = [ln for ln in self.lanes if ln.index not in lane_claims[zone]]
            self.rng.shuffle(available)

            placed = 0
            for lane in available[:min_per_zone]:
                x = lane.random_x(self.rng)
                if grid.is_occupied(x, zone_y):
                    continue
                # the lane is spent even if the roll below fails
                grid.claim(x, zone_y)
                lane_claims[zone].add(lane.index)
                if self.rng.randint(0, 100) < chance:
                    created.append(self._make_static(x, zone_y, lane.index, zone))
                    placed += 1

            if placed >= min_per_zone or not available:
                continue

            # top-up: a few unconstrained tries anywhere on the row
            attempts = min(EXTRA_PLACEMENT_ATTEMPTS, len(available) - placed)
            for _ in range(attempts):
                x = self.rng.uniform(x_min, x_max)
                if grid.is_occupied(x, zone_y):
                    continue
                grid.claim(x, zone_y)
                created.append(self._make_static(x, zone_y, self._lane_at(x), zone))
                placed += 1

            # last resort: any free grid column left on the row
            while placed < min_per_zone:
                free = grid.free_columns(zone_y, x_min, x_max)
                if not free:
                    break
                x = self.rng.choice(free)
                grid.claim(x, zone_y)
                created.append(self._make_static(x, zone_y, self._lane_at(x), zone))
                placed += 1

        return created

    def _moving_pass(self, rows: List[float], grid: OccupancyGrid,
                     lane_claims: List[Set[int]], score: float, now_ms: float) -> List[Obstacle]:
        created: List[Obstacle] = []
        chance = diff.moving_spawn_chance(score)

        for zone, zone_y in enumerate(rows):
            if zone % 2 != 0:
                continue
            if self.rng.randint(0, 100) >= chance:
                continue
            free_lanes = [ln for ln in self.lanes if ln.index not in lane_claims[zone]]
            if not free_lanes:
                continue
            lane = self.rng.choice(free_lanes)
            x = lane.random_x(self.rng)
            if grid.is_occupied(x, zone_y):
                continue
            grid.claim(x, zone_y)
            lane_claims[zone].add(lane.index)
            created.append(self._make_moving(x, zone_y, lane.index, zone, score, now_ms))

        return created

    # ------------------------ Factories ------------------------

    def _lane_at(self, x: float):
        for lane in self.lanes:
            if lane.contains(x):
                return lane.index
        return None

    def _make_static(self, x: float, y: float, lane, zone: int) -> Obstacle:
        return Obstacle(
            kind=STATIC, x=x, y=y,
            sprite=self.rng.choice(STATIC_SPRITES),
            scale=self.viewport.obstacle_scale,
            lane=lane, zone=zone,
        )

    def _make_moving(self, x: float, y: float, lane: int, zone: int,
                     score: float, now_ms: float) -> Obstacle:
        max_h = int(diff.max_horizontal_speed(score))
        return Obstacle(
            kind=MOVING, x=x, y=y,
            sprite=MOVING_SPRITE,
            scale=self.viewport.obstacle_scale,
            lane=lane, zone=zone,
            speed=diff.moving_obstacle_speed(score),
            horizontal_speed=self.rng.randint(-max_h, max_h),
            next_direction_change=now_ms + self.rng.randint(DIRECTION_CHANGE_MIN_MS,
                                                            DIRECTION_CHANGE_MAX_MS),
        )
