"""
Bomb placement for Minesweeper.

Bombs are placed lazily on the first reveal. The first-clicked cell is
kept safe, and its 3x3 neighbourhood is filled only after every other
cell has been used.
"""
import logging
from typing import List, Optional, Sequence

import numpy as np

from .grid import Grid, Position


logger = logging.getLogger(__name__)


# ============================================================================
# Bomb Placer
# ============================================================================

class BombPlacer:
    """
    Places bombs with a first-click guarantee.

    Candidate order is: far cells (shuffled), then the near zone around
    the first click (shuffled), then the first click itself. The first
    ``bomb_count`` candidates become bombs, so the clicked cell is only
    used once every other cell already holds a bomb.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        """
        Initialize the placer.

        Args:
            rng: Random generator; a fresh unseeded one if omitted.
        """
        self.rng = rng if rng is not None else np.random.default_rng()

    def place(
        self, grid: Grid, first_x: int, first_y: int, bomb_count: int
    ) -> List[Position]:
        """
        Place bombs on ``grid`` and compute adjacency counts.

        Args:
            grid: Empty grid to fill.
            first_x: Column of the first reveal.
            first_y: Row of the first reveal.
            bomb_count: Number of bombs to place.

        Returns:
            The (x, y) positions that received a bomb.
        """
        bombs = self.candidate_order(grid, first_x, first_y)[:bomb_count]
        grid.set_bombs(bombs)
        logger.info(
            "Placed %d bombs on %dx%d grid, first click (%d, %d)",
            len(bombs), grid.width, grid.height, first_x, first_y,
        )
        return bombs

    def candidate_order(
        self, grid: Grid, first_x: int, first_y: int
    ) -> List[Position]:
        """Every cell, ordered from most to least preferred bomb site."""
        first = (first_x, first_y)
        near = grid.neighbors(first_x, first_y)
        near_set = set(near)
        far = [
            position for position in grid.positions()
            if position != first and position not in near_set
        ]
        return self._shuffled(far) + self._shuffled(near) + [first]

    def _shuffled(self, positions: Sequence[Position]) -> List[Position]:
        """Return a shuffled copy of ``positions``."""
        order = self.rng.permutation(len(positions))
        return [positions[i] for i in order]
