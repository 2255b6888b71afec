"""
Exception types raised by the Minesweeper engine.

In-game no-ops (revealing a revealed cell, flagging after the game ended)
are not errors; the engine reports them by returning False.
"""


class MinesweeperError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(MinesweeperError, ValueError):
    """Invalid board dimensions or bomb count."""


class OutOfRangeError(MinesweeperError, IndexError):
    """Coordinates outside the board."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(
            f"Position ({x}, {y}) is outside the {width}x{height} board"
        )
        self.x = x
        self.y = y
