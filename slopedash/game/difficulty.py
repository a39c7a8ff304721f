# slopedash/game/difficulty.py
"""
Score -> difficulty parameters.

Everything here is a pure function of the score (and the device class):
no randomness, no stored state. Bracketed constants live in a single table
keyed by (device_class, score_bracket); the linear curves are plain functions.
"""
from __future__ import annotations
import bisect
from dataclasses import dataclass
from typing import Dict, Tuple

from .config import BASE_SCROLL_SPEED, MAX_SCROLL_SPEED, SCROLL_SCORE_DIVISOR

MOBILE = "mobile"
DESKTOP = "desktop"

# Lower bounds of each score bracket after the first: [0,100), [100,200), ...
SCORE_BRACKETS: Tuple[int, ...] = (100, 200, 300, 400, 600)


@dataclass(frozen=True)
class DifficultyParams:
    spawn_row_interval: int      # vertical distance between spawn rows
    min_obstacles_per_zone: int  # static obstacles aimed for in each row
    vertical_spacing: int        # occupancy window radius in cells (y axis)


def _build_table() -> Dict[Tuple[str, int], DifficultyParams]:
    #            bracket:    0   1   2   3   4   5
    intervals = {MOBILE:  (68, 45, 45, 35, 35, 30),
                 DESKTOP: (60, 38, 38, 30, 30, 25)}
    spacing = {MOBILE:  (2, 2, 1, 1, 0, 0),
               DESKTOP: (3, 3, 2, 2, 1, 1)}
    per_zone = (1, 2, 2, 2, 2, 3)

    table = {}
    for device in (MOBILE, DESKTOP):
        for b in range(len(SCORE_BRACKETS) + 1):
            table[(device, b)] = DifficultyParams(
                spawn_row_interval=intervals[device][b],
                min_obstacles_per_zone=per_zone[b],
                vertical_spacing=spacing[device][b],
            )
    return table


DIFFICULTY_TABLE: Dict[Tuple[str, int], DifficultyParams] = _build_table()


def score_bracket(score: float) -> int:
    return bisect.bisect_right(SCORE_BRACKETS, score)


def params_for(score: float, device: str) -> DifficultyParams:
    assert device in (MOBILE, DESKTOP), f"Unknown device class {device!r}"
    return DIFFICULTY_TABLE[(device, score_bracket(score))]


def spawn_row_interval(score: float, device: str) -> int:
    return params_for(score, device).spawn_row_interval


def min_obstacles_per_zone(score: float) -> int:
    # same on both device classes
    return params_for(score, DESKTOP).min_obstacles_per_zone


def vertical_spacing(score: float, device: str) -> int:
    """Occupancy window radius (cells) along y; shrinks as the run gets harder."""
    return params_for(score, device).vertical_spacing


# ------------------------ Linear curves ------------------------

def static_spawn_chance(score: float) -> float:
    """Percent chance that a chosen lane actually receives a rock/tree."""
    return min(50.0 + score / 15.0, 90.0)


def moving_spawn_chance(score: float) -> float:
    return min(40.0 + score / 25.0, 80.0)


def moving_obstacle_speed(score: float) -> float:
    return min(4.0 + score / 75.0, 12.0)


def max_horizontal_speed(score: float) -> float:
    return 2.0 + min(score / 200.0, 2.0)


def min_live_obstacles(score: float) -> int:
    return min(8 + int(score // 80), 20)


def spawn_check_interval(score: float) -> int:
    """Frames between two top-up checks."""
    return max(10 - int(score // 150), 4)


def scroll_speed(score: float) -> float:
    return min(BASE_SCROLL_SPEED + score / SCROLL_SCORE_DIVISOR, MAX_SCROLL_SPEED)


def score_increment(speed: float) -> int:
    return int(5 + (speed - BASE_SCROLL_SPEED) * 1.2)
