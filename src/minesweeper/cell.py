"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their flags
(revealed/flagged) and content (bomb/number).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """How a cell should be displayed."""

    HIDDEN = auto()
    FLAGGED = auto()
    REVEALED = auto()
    BOMB = auto()
    BOMB_TRIGGERED = auto()
    BOMB_FLAGGED = auto()
    FLAG_WRONG = auto()


# Observation values for a numeric board view
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_BOMB = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        is_bomb: Whether this cell contains a bomb.
        adjacent_bombs: Count of bombs in neighboring cells (0-8).
        revealed: Whether the cell has been uncovered.
        flagged: Whether the player marked the cell as a bomb.
    """

    is_bomb: bool = False
    adjacent_bombs: int = 0
    revealed: bool = False
    flagged: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if already
            revealed or flagged.
        """
        if self.revealed or self.flagged:
            return False
        self.revealed = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.revealed:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is covered and unflagged."""
        return not self.revealed and not self.flagged

    @property
    def state(self) -> CellState:
        """Display state, ignoring which bomb ended the game."""
        if not self.revealed:
            return CellState.FLAGGED if self.flagged else CellState.HIDDEN
        if self.is_bomb:
            return CellState.BOMB_FLAGGED if self.flagged else CellState.BOMB
        if self.flagged:
            return CellState.FLAG_WRONG
        return CellState.REVEALED

    def to_observation(self) -> int:
        """
        Convert cell to observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent bomb count
            9: Revealed bomb (game over state)
        """
        if not self.revealed:
            return OBS_FLAGGED if self.flagged else OBS_HIDDEN
        if self.is_bomb:
            return OBS_BOMB
        return self.adjacent_bombs
