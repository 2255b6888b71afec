"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import BombPlacer, Cell, Game, GameConfig, Grid


# ============================================================================
# Placement Helpers
# ============================================================================

class FixedPlacer(BombPlacer):
    """Placer that puts bombs at predetermined positions."""

    def __init__(self, bombs: Iterable[Tuple[int, int]]) -> None:
        super().__init__(np.random.default_rng(0))
        self.bombs = list(bombs)
        self.calls: List[Tuple[int, int]] = []

    def place(self, grid, first_x, first_y, bomb_count):
        self.calls.append((first_x, first_y))
        grid.set_bombs(self.bombs)
        return self.bombs


@pytest.fixture
def make_game() -> Callable[..., Game]:
    """Factory for games with bombs at fixed positions."""
    def factory(
        width: int,
        height: int,
        bombs: Iterable[Tuple[int, int]],
        cascade_over_flags: bool = True,
    ) -> Game:
        bombs = list(bombs)
        config = GameConfig(width, height, len(bombs), cascade_over_flags)
        return Game(config, FixedPlacer(bombs))
    return factory


# ============================================================================
# Game Fixtures
# ============================================================================

@pytest.fixture
def default_game() -> Game:
    """Create a default 10x10 game with 15 bombs."""
    return Game(placer=BombPlacer(np.random.default_rng(1234)))


@pytest.fixture
def beginner_game() -> Game:
    """Create a beginner difficulty game."""
    return Game(GameConfig(9, 9, 10), BombPlacer(np.random.default_rng(42)))


@pytest.fixture
def corner_bomb_game(make_game) -> Game:
    """3x3 game with a single bomb in the bottom-right corner."""
    return make_game(3, 3, [(2, 2)])


@pytest.fixture
def striped_game(make_game) -> Game:
    """
    5x5 game with a wall of bombs in column 2.

    Columns 0 and 4 are zero-count, columns 1 and 3 border the wall.
    """
    return make_game(5, 5, [(2, y) for y in range(5)])


# ============================================================================
# Grid and Cell Fixtures
# ============================================================================

@pytest.fixture
def small_grid() -> Grid:
    """Create an empty 4x3 grid."""
    return Grid(4, 3)


@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def bomb_cell() -> Cell:
    """Create a cell containing a bomb."""
    return Cell(is_bomb=True)
