"""
Minesweeper game engine.

Provides the board engine (grid, bomb placement, reveal, chording, flags,
timer), per-player sessions driven by domain actions, and a Gymnasium
environment for agents.
"""
from .cell import Cell, CellState
from .errors import ConfigurationError, MinesweeperError, OutOfRangeError
from .grid import Grid
from .placement import BombPlacer
from .game import (
    Game,
    GameConfig,
    GameSnapshot,
    GameStatus,
    CellView,
    new_game,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    DEFAULT,
    PRESETS,
)
from .actions import (
    Action, Chord, Direction, Edge, Jump, Move, Restart, Reveal, Tick,
    ToggleFlag,
)
from .session import GameSession, RandomSource, SessionClock
from .environment import MinesweeperEnv, make_vec_env, render_text

__all__ = [
    "Cell",
    "CellState",
    "ConfigurationError",
    "MinesweeperError",
    "OutOfRangeError",
    "Grid",
    "BombPlacer",
    "Game",
    "GameConfig",
    "GameSnapshot",
    "GameStatus",
    "CellView",
    "new_game",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "DEFAULT",
    "PRESETS",
    "Action",
    "Chord",
    "Direction",
    "Edge",
    "Jump",
    "Move",
    "Restart",
    "Reveal",
    "Tick",
    "ToggleFlag",
    "GameSession",
    "RandomSource",
    "SessionClock",
    "MinesweeperEnv",
    "make_vec_env",
    "render_text",
]
