# slopedash/tests/spawner_tests.py
"""
Spawner + path repair checks.

Usage (from repo root):
  python -m slopedash.tests.spawner_tests
"""
from __future__ import annotations
import math
import random
import sys
from collections import defaultdict
from typing import List

from slopedash.game.obstacles import Obstacle, STATIC, MOVING
from slopedash.game.config import EXTRA_PLACEMENT_ATTEMPTS
from slopedash.game.spawner import Spawner, Viewport, ensure_clear_path, has_passable_gap

DESKTOP_VP = Viewport(1200, 800)
MOBILE_VP = Viewport(420, 780)
SEEDS = (1, 2, 3, 42, 12345)


def _spawn(viewport: Viewport, seed: int, score: float, now_ms: float = 0.0) -> List[Obstacle]:
    obstacles: List[Obstacle] = []
    Spawner(viewport, random.Random(seed)).spawn(obstacles, score, now_ms)
    return obstacles


def _static(x: float, y: float) -> Obstacle:
    return Obstacle(kind=STATIC, x=x, y=y, sprite="rock")


def test_viewport_classes():
    assert DESKTOP_VP.device_class == "desktop" and DESKTOP_VP.lane_count == 7
    assert MOBILE_VP.device_class == "mobile" and MOBILE_VP.lane_count == 5
    assert Viewport(767, 900).is_mobile and not Viewport(768, 900).is_mobile


def test_spawn_rows_cover_lookahead():
    rows = Spawner(DESKTOP_VP, random.Random(0)).spawn_rows(0)
    assert rows[0] == 850 and rows[1] == 910
    assert len(rows) == 20 and rows[-1] == 800 + 1190

    rows = Spawner(MOBILE_VP, random.Random(0)).spawn_rows(0)
    assert rows[0] == 830 and rows[1] == 898
    assert len(rows) == 12

    dense = Spawner(DESKTOP_VP, random.Random(0)).spawn_rows(700)
    assert dense[1] - dense[0] == 25


def test_first_rows_always_get_a_static_obstacle():
    for seed in SEEDS:
        obstacles = _spawn(DESKTOP_VP, seed, score=0)
        per_zone = defaultdict(int)
        for ob in obstacles:
            if ob.kind == STATIC:
                per_zone[ob.zone] += 1
        for zone in range(3):
            assert per_zone[zone] >= 1, f"seed={seed}: zone {zone} has no static obstacle"
        # one lane pick plus at most EXTRA_PLACEMENT_ATTEMPTS top-up tries
        assert all(n <= 1 + EXTRA_PLACEMENT_ATTEMPTS for n in per_zone.values()), f"seed={seed}: {dict(per_zone)}"


def test_failed_lane_roll_tops_up_with_all_attempts():
    densest = 0
    for seed in range(200):
        per_zone = defaultdict(int)
        for ob in _spawn(DESKTOP_VP, seed, score=0):
            if ob.kind == STATIC:
                per_zone[ob.zone] += 1
        densest = max(densest, max(per_zone.values()))
        assert all(n <= 1 + EXTRA_PLACEMENT_ATTEMPTS for n in per_zone.values())
    assert densest > 1, "top-up never placed more than one obstacle on a row"


def test_moving_obstacles_only_on_even_rows():
    for seed in SEEDS:
        for score in (0, 250, 700):
            for ob in _spawn(DESKTOP_VP, seed, score):
                if ob.kind == MOVING:
                    assert ob.zone % 2 == 0, f"seed={seed} score={score}: skier on odd zone {ob.zone}"


def test_moving_obstacle_parameters():
    now = 5_000.0
    seen = 0
    for seed in range(30):
        for ob in _spawn(DESKTOP_VP, seed, score=0, now_ms=now):
            if ob.kind != MOVING:
                continue
            seen += 1
            assert ob.sprite == "skier"
            assert ob.speed == 4.0
            assert -2 <= ob.horizontal_speed <= 2
            assert now + 500 <= ob.next_direction_change <= now + 2000
            assert ob.lane is not None
    assert seen > 0, "expected at least one skier across 30 seeds"


def test_static_obstacles_stay_inside_playfield():
    for seed in SEEDS:
        for vp in (DESKTOP_VP, MOBILE_VP):
            for ob in _spawn(vp, seed, score=400):
                assert 15 <= ob.x <= vp.width - 15
                assert ob.y > vp.height
                assert ob.scale == vp.obstacle_scale


def test_same_seed_same_layout():
    a = _spawn(DESKTOP_VP, 99, score=350)
    b = _spawn(DESKTOP_VP, 99, score=350)
    assert [(o.kind, o.x, o.y, o.sprite) for o in a] == [(o.kind, o.x, o.y, o.sprite) for o in b]


def test_no_dense_row_without_gap_after_spawn():
    for seed in SEEDS:
        for score in (300, 700, 1500):
            rows = defaultdict(list)
            for ob in _spawn(DESKTOP_VP, seed, score):
                rows[math.floor(ob.y / 50)].append(ob)
            for idx, row in rows.items():
                if len(row) >= 4:
                    assert has_passable_gap(row), f"seed={seed} score={score}: row {idx} blocked"


def test_path_repair_thins_blocked_row():
    rng = random.Random(3)
    blocked = [_static(x, 1000) for x in (100, 150, 200, 250, 300)]
    obstacles = list(blocked)
    removed = ensure_clear_path(obstacles, rng)
    assert len(removed) >= 1
    assert len(obstacles) + len(removed) == 5
    assert len(obstacles) < 4 or has_passable_gap(obstacles)


def test_path_repair_leaves_passable_and_sparse_rows():
    rng = random.Random(3)
    with_gap = [_static(x, 1000) for x in (100, 150, 300, 350)]
    sparse = [_static(x, 1200) for x in (100, 130, 160)]     # < 4: never checked
    obstacles = with_gap + sparse
    removed = ensure_clear_path(obstacles, rng)
    assert removed == []
    assert len(obstacles) == 7


def test_path_repair_handles_many_random_rows():
    rng = random.Random(11)
    obstacles = []
    for row in range(40):
        for _ in range(rng.randint(4, 9)):
            obstacles.append(_static(rng.uniform(15, 400), row * 50 + rng.uniform(0, 49)))
    ensure_clear_path(obstacles, rng)
    rows = defaultdict(list)
    for ob in obstacles:
        rows[math.floor(ob.y / 50)].append(ob)
    for idx, row in rows.items():
        assert len(row) < 4 or has_passable_gap(row), f"row {idx} still blocked"


def main():
    tests = [
        test_viewport_classes,
        test_spawn_rows_cover_lookahead,
        test_first_rows_always_get_a_static_obstacle,
        test_failed_lane_roll_tops_up_with_all_attempts,
        test_moving_obstacles_only_on_even_rows,
        test_moving_obstacle_parameters,
        test_static_obstacles_stay_inside_playfield,
        test_same_seed_same_layout,
        test_no_dense_row_without_gap_after_spawn,
        test_path_repair_thins_blocked_row,
        test_path_repair_leaves_passable_and_sparse_rows,
        test_path_repair_handles_many_random_rows,
    ]
    try:
        for t in tests:
            t()
            print(f"✓ {t.__name__}")
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    print("🎉 Spawner tests passed")


if __name__ == "__main__":
    main()
