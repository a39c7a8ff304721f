# slopedash/tests/slope_env_tests.py
"""
Quick tests for SlopeEnv (Gymnasium environment).

Usage (from repo root):
  python -m slopedash.tests.slope_env_tests
  python -m slopedash.tests.slope_env_tests --render
  python -m slopedash.tests.slope_env_tests --no-api-check --no-determinism
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Tuple

import numpy as np
from gymnasium.utils.env_checker import check_env

from slopedash.env.slope_env import SlopeEnv, NOOP


def api_check(frame_skip: int = 4) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = SlopeEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def smoke(steps: int = 300, seed: int = 123, frame_skip: int = 4, width: int = 1200, height: int = 800) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = SlopeEnv(frame_skip=frame_skip, width=width, height=height)
    env.action_space.seed(seed)
    try:
        obs, info = env.reset(seed=seed)
        assert info["seed"] == seed
        assert env.observation_space.contains(obs), "Initial observation not in space"
        assert obs.shape == (3 + env.viewport.lane_count,)

        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert r == -1.0
                break
            assert r == 1.0
            if trunc:
                break
    finally:
        env.close()


def determinism(steps: int = 300, seed: int = 123, frame_skip: int = 4) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = SlopeEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            obs, _ = env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 3)) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        if not np.allclose(o1, o2):
            raise AssertionError(f"Determinism: obs mismatch at step {i}")
        if not (r1 == r2 and te1 == te2 and tr1 == tr2):
            raise AssertionError(f"Determinism: transition mismatch at step {i}")


def render_demo(steps: int, seed: int, frame_skip: int) -> None:
    """Open a window and run a short NOOP demo so you can visually verify behavior."""
    env = SlopeEnv(render_mode="human", frame_skip=frame_skip)
    try:
        env.reset(seed=seed)
        for _ in range(steps):
            _, _, term, trunc, _ = env.step(NOOP)
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Render demo finished")


# ------------------------ pytest entry points ------------------------

def test_api():
    api_check()


def test_smoke_desktop():
    smoke()


def test_smoke_mobile():
    smoke(width=420, height=780)


def test_determinism():
    determinism(steps=150)


def test_time_limit_truncates():
    env = SlopeEnv(frame_skip=4, time_limit_seconds=0.5)   # 7 decisions
    try:
        env.reset(seed=5)
        trunc = term = False
        n = 0
        while not (trunc or term):
            _, _, term, trunc, _ = env.step(NOOP)
            n += 1
        assert term or n == env.time_limit_decisions
    finally:
        env.close()


def test_rgb_array_render_shape():
    env = SlopeEnv(render_mode="rgb_array", width=420, height=780)
    try:
        env.reset(seed=1)
        frame = env.render()
        assert frame.shape == (780, 420, 3) and frame.dtype == np.uint8
    finally:
        env.close()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=123, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=300, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision step")
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            api_check(frame_skip=args.frame_skip)
            print("✓ API check ok")
        if not args.no_smoke:
            smoke(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Smoke test ok")
        if not args.no_determinism:
            determinism(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Determinism ok")
        if args.render:
            render_demo(steps=min(args.steps, 600), seed=args.seed, frame_skip=args.frame_skip)
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
