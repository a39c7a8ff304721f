# slopedash/env/slope_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from slopedash.game.config import WIDTH, HEIGHT, FPS
from slopedash.game.render import draw_world
from slopedash.game.session import GameSession
from slopedash.game.spawner import Viewport
from slopedash.env.observations import build_observation, observation_size

NOOP, LEFT, RIGHT = 0, 1, 2
ACTION_DIRECTION = {NOOP: 0, LEFT: -1, RIGHT: 1}


class SlopeEnv(gym.Env):
    """
    Slope Dash Gymnasium environment (vector observations).
    - Simulation at 60 Hz (internal clock in ms).
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Actions: 0 = NOOP, 1 = hold LEFT, 2 = hold RIGHT.
    - Observation: (3 + lanes,) float32, see observations.build_observation.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0,
                 width: int = WIDTH,
                 height: int = HEIGHT):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode {render_mode!r}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.viewport = Viewport(int(width), int(height))

        self.sim_fps = FPS
        self.frame_ms = 1000.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(3)
        n = observation_size(self.viewport.lane_count)
        low = np.array([0.0, -1.0, 0.0] + [0.0] * (n - 3), dtype=np.float32)
        high = np.ones(n, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[GameSession] = None
        self.sim_ms: float = 0.0
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # A given seed drives the session directly; otherwise draw one from
        # np_random so an earlier reset(seed=...) still fixes the sequence.
        if seed is not None:
            run_seed = int(seed)
        else:
            run_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.session = GameSession(self.viewport, run_seed)
        self.session.start(0.0)
        self.sim_ms = 0.0
        self.timestep = 0
        self.current_seed = self.session.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": self.session.score}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "Call reset() before step()"

        self.session.set_key_direction(ACTION_DIRECTION[int(action)])

        for _ in range(self.frame_skip):
            self.sim_ms += self.frame_ms
            if not self.session.update(self.sim_ms):
                break

        alive = self.session.alive
        reward = 1.0 if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.session.score,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "live_obstacles": len(self.session.obstacles),
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((self.viewport.width, self.viewport.height))
                pygame.display.set_caption("Slope Dash — Gym Env")
            else:
                self.screen = pygame.Surface((self.viewport.width, self.viewport.height))
            self.clock = pygame.time.Clock()

        draw_world(self.screen, self.session)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
