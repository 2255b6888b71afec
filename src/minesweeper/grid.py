"""
Grid module for Minesweeper game.

Holds the matrix of cells and the 8-neighbour geometry used by
placement, flood fill and chording.
"""
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

import numpy as np

from .cell import Cell
from .errors import ConfigurationError, OutOfRangeError


Position = Tuple[int, int]


# ============================================================================
# Grid Class
# ============================================================================

@dataclass
class Grid:
    """
    Fixed-size matrix of cells addressed by (x, y).

    x is the column and y the row; cells are stored row-major so the
    numeric observation has shape (height, width).
    """

    width: int
    height: int
    _cells: List[List[Cell]] = field(
        init=False, default_factory=list, repr=False
    )

    def __post_init__(self) -> None:
        """Validate dimensions and create empty cells."""
        if self.width < 1 or self.height < 1:
            raise ConfigurationError("Board dimensions must be positive")
        self._cells = [
            [Cell() for _ in range(self.width)]
            for _ in range(self.height)
        ]

    # ========================================================================
    # Geometry
    # ========================================================================

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def check_bounds(self, x: int, y: int) -> None:
        """Raise OutOfRangeError unless (x, y) is on the board."""
        if not self.in_bounds(x, y):
            raise OutOfRangeError(x, y, self.width, self.height)

    def neighbors(self, x: int, y: int) -> List[Position]:
        """
        Get valid neighboring cell positions.

        Args:
            x: Column of center cell.
            y: Row of center cell.

        Returns:
            Up to 8 (x, y) tuples, row by row, clipped at the edges.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self.in_bounds(new_x, new_y):
                    neighbors.append((new_x, new_y))
        return neighbors

    def positions(self) -> Iterator[Position]:
        """Iterate over every (x, y) in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    # ========================================================================
    # Cell Access
    # ========================================================================

    def cell(self, x: int, y: int) -> Cell:
        """Get cell at position."""
        self.check_bounds(x, y)
        return self._cells[y][x]

    def cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Iterate over (x, y, cell) in row-major order."""
        for y, row in enumerate(self._cells):
            for x, cell in enumerate(row):
                yield x, y, cell

    def count_adjacent_bombs(self, x: int, y: int) -> int:
        """Count bombs among the neighbours of (x, y)."""
        return sum(
            1 for nx, ny in self.neighbors(x, y)
            if self._cells[ny][nx].is_bomb
        )

    def count_adjacent_flags(self, x: int, y: int) -> int:
        """Count flagged neighbours of (x, y)."""
        return sum(
            1 for nx, ny in self.neighbors(x, y)
            if self._cells[ny][nx].flagged
        )

    def bomb_count(self) -> int:
        """Number of cells holding a bomb."""
        return sum(1 for _, _, cell in self.cells() if cell.is_bomb)

    # ========================================================================
    # Bomb Layout
    # ========================================================================

    def set_bombs(self, positions: Iterable[Position]) -> None:
        """
        Mark bomb cells and compute adjacency counts.

        Args:
            positions: (x, y) tuples to receive a bomb.
        """
        for x, y in positions:
            self.cell(x, y).is_bomb = True
        self._calculate_adjacent_bombs()

    def _calculate_adjacent_bombs(self) -> None:
        """Calculate adjacent bomb counts for all non-bomb cells."""
        for x, y, cell in self.cells():
            if not cell.is_bomb:
                cell.adjacent_bombs = self.count_adjacent_bombs(x, y)

    # ========================================================================
    # Observation
    # ========================================================================

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            int8 array of shape (height, width), see Cell.to_observation.
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for x, y, cell in self.cells():
            obs[y, x] = cell.to_observation()
        return obs
