# slopedash/env/observations.py
from __future__ import annotations
from typing import List
import numpy as np

from slopedash.game.config import TILT_ANGLE, BASE_SCROLL_SPEED, MAX_SCROLL_SPEED
from slopedash.game.occupancy import partition_lanes


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def observation_size(lane_count: int) -> int:
    return 3 + lane_count


def build_observation(session) -> np.ndarray:
    """
    Returns a (3 + lanes,) float32 vector:
      [ player_x_norm, tilt_norm, speed_norm, lane_0 ... lane_{N-1} ]
    - player_x_norm in [0,1] across the viewport width
    - tilt_norm     in [-1,1] (angle / TILT_ANGLE)
    - speed_norm    in [0,1] between base and max scroll speed
    - lane_i        distance from the player down to the nearest obstacle in
                    lane i, normalized by the screen height; 1.0 = clear
    """
    vp = session.viewport
    player = session.player

    x_norm = _clamp01(player.x / float(vp.width))
    tilt = max(-1.0, min(player.angle / TILT_ANGLE, 1.0))
    speed_norm = _clamp01((session.speed - BASE_SCROLL_SPEED) / (MAX_SCROLL_SPEED - BASE_SCROLL_SPEED))

    lanes = partition_lanes(vp.width, vp.lane_count)
    nearest: List[float] = [1.0] * len(lanes)
    for ob in session.obstacles:
        if ob.y < player.y:
            continue    # already passed
        d = _clamp01((ob.y - player.y) / float(vp.height))
        for lane in lanes:
            if lane.contains(ob.x):
                if d < nearest[lane.index]:
                    nearest[lane.index] = d
                break

    return np.asarray([x_norm, tilt, speed_norm] + nearest, dtype=np.float32)
