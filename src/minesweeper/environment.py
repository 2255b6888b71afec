"""
Gymnasium environment wrapper for Minesweeper.

Provides a standard RL interface over the game engine, and the plain
text renderer shared with the command line shell.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .cell import CellState, OBS_BOMB, OBS_FLAGGED
from .game import DEFAULT, Game, GameConfig
from .placement import BombPlacer


# ============================================================================
# Text Rendering
# ============================================================================

CELL_SYMBOLS = {
    CellState.HIDDEN: "#",
    CellState.FLAGGED: "F",
    CellState.BOMB: "*",
    CellState.BOMB_TRIGGERED: "X",
    CellState.BOMB_FLAGGED: "F",
    CellState.FLAG_WRONG: "!",
}


def render_text(
    game: Game, cursor: Optional[Tuple[int, int]] = None
) -> str:
    """
    Render the board as one character per cell.

    Revealed empty cells show ".", numbers show their count; the cursor
    cell, if given, is wrapped in brackets.
    """
    lines = []
    for y in range(game.config.height):
        row = []
        for x in range(game.config.width):
            view = game.cell_view(x, y)
            if view.state == CellState.REVEALED:
                char = str(view.adjacent_bombs) if view.adjacent_bombs else "."
            else:
                char = CELL_SYMBOLS[view.state]
            if cursor == (x, y):
                row.append(f"[{char}]")
            else:
                row.append(f" {char} ")
        lines.append("".join(row))
    return "\n".join(lines)


# ============================================================================
# Minesweeper Environment
# ============================================================================

REVEAL, FLAG, CHORD = range(3)
ACTION_KINDS = (REVEAL, FLAG, CHORD)


class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent bomb count
        - 9 = revealed bomb

    Actions:
        Discrete action space of size 3 * width * height.
        For action a, with n = width * height, a // n selects reveal,
        flag or chord, and cell a % n is at (x, y) = (i % width, i // width).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a bomb
        - 0 for toggling a flag
        - -0.1 for an action with no effect
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Game configuration (default: 10x10 with 15 bombs).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or DEFAULT
        self.game = Game(self.config, BombPlacer(self.np_random))
        self.render_mode = render_mode
        self._num_cells = self.config.width * self.config.height

        self.observation_space = spaces.Box(
            low=OBS_FLAGGED,
            high=OBS_BOMB,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(
            self._num_cells * len(ACTION_KINDS)
        )

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.game = Game(self.config, BombPlacer(self.np_random))
        self._steps = 0
        return self.game.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded action, see class docstring.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, x, y = self.decode_action(action)
        self._steps += 1

        reward = self._apply(kind, x, y)
        self.game.tick()

        observation = self.game.get_observation()
        terminated = not self.game.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def decode_action(self, action: int) -> Tuple[int, int, int]:
        """Convert a flat action into (kind, x, y)."""
        kind, index = divmod(int(action), self._num_cells)
        return kind, index % self.config.width, index // self.config.width

    def encode_action(self, kind: int, x: int, y: int) -> int:
        """Convert (kind, x, y) into a flat action."""
        return kind * self._num_cells + y * self.config.width + x

    def _apply(self, kind: int, x: int, y: int) -> float:
        """
        Perform the action and calculate its reward.

        Args:
            kind: REVEAL, FLAG or CHORD.
            x: Column.
            y: Row.

        Returns:
            Reward value.
        """
        if kind == FLAG:
            return 0.0 if self.game.toggle_flag(x, y) else -0.1

        if kind == CHORD:
            changed = self.game.chord(x, y)
        else:
            changed = self.game.reveal(x, y)

        if not changed:
            return -0.1
        if self.game.is_won:
            return 10.0
        if self.game.is_lost:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        snapshot = self.game.snapshot()
        safe_cells = self.game.config.safe_cells
        return {
            "steps": self._steps,
            "revealed": safe_cells - snapshot.unrevealed_safe_cells,
            "total_safe": safe_cells,
            "game_state": snapshot.status.name,
            "bombs_remaining": snapshot.bombs_remaining,
            "elapsed_ticks": snapshot.elapsed_ticks,
            "valid_actions": len(self.game.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_text(self.game)
        if self.render_mode == "human":
            print(render_text(self.game))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of reveal actions that would not be no-ops.

        Returns:
            Boolean array over the whole action space; only reveal
            actions on hidden, unflagged cells are True.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for x, y in self.game.get_valid_actions():
            mask[self.encode_action(REVEAL, x, y)] = True
        return mask


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[GameConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel play.

    Args:
        n_envs: Number of parallel environments.
        config: Game configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinesweeperEnv:
        return MinesweeperEnv(config=config)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
