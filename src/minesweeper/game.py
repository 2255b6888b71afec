"""
Game module for Minesweeper.

Implements the game state machine: deferred bomb placement, flood-fill
reveal, chording, flag bookkeeping, the tick timer and win/loss detection.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .cell import CellState
from .errors import ConfigurationError
from .grid import Grid, Position
from .placement import BombPlacer


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a Minesweeper game.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        bomb_count: Total bombs to place.
        cascade_over_flags: Whether flood fill reveals (and unflags)
            flagged cells it reaches.
    """

    width: int = 10
    height: int = 10
    bomb_count: int = 15
    cascade_over_flags: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ConfigurationError("Board dimensions must be positive")
        if self.bomb_count < 1:
            raise ConfigurationError("Bomb count must be positive")
        max_bombs = self.width * self.height - 1
        if self.bomb_count > max_bombs:
            raise ConfigurationError(f"Too many bombs (max {max_bombs})")

    @property
    def safe_cells(self) -> int:
        """Number of cells without a bomb."""
        return self.width * self.height - self.bomb_count


# Preset difficulty levels
BEGINNER = GameConfig(9, 9, 10)
INTERMEDIATE = GameConfig(16, 16, 40)
EXPERT = GameConfig(30, 16, 99)
DEFAULT = GameConfig(10, 10, 15)

PRESETS = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
    "default": DEFAULT,
}


# ============================================================================
# Read-only Views
# ============================================================================

class CellView(NamedTuple):
    """What a renderer may know about one cell."""

    revealed: bool
    flagged: bool
    is_bomb: Optional[bool]
    adjacent_bombs: Optional[int]
    state: CellState


@dataclass(frozen=True)
class GameSnapshot:
    """Observable summary of a game after an update."""

    status: GameStatus
    width: int
    height: int
    bomb_count: int
    bombs_remaining: int
    unrevealed_safe_cells: int
    bombs_placed: bool
    elapsed_ticks: int
    timer_running: bool
    triggered_cell: Optional[Position]


# ============================================================================
# Game Class
# ============================================================================

@dataclass
class Game:
    """
    One Minesweeper game.

    The owner holds the only reference and calls reveal, toggle_flag,
    chord and tick one at a time. Restarting means building a new Game.
    """

    config: GameConfig = field(default_factory=GameConfig)
    placer: BombPlacer = field(default_factory=BombPlacer, repr=False)
    grid: Grid = field(init=False, repr=False)
    _status: GameStatus = field(init=False, default=GameStatus.PLAYING)
    _bombs_placed: bool = field(init=False, default=False)
    _bombs_remaining: int = field(init=False, default=0)
    _unrevealed_safe_cells: int = field(init=False, default=0)
    _triggered_cell: Optional[Position] = field(init=False, default=None)
    _elapsed_ticks: int = field(init=False, default=0)
    _timer_running: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        """Build the empty grid and counters."""
        self.grid = Grid(self.config.width, self.config.height)
        self._bombs_remaining = self.config.bomb_count
        self._unrevealed_safe_cells = self.config.safe_cells

    # ========================================================================
    # Bomb Placement (Low-level)
    # ========================================================================

    def _handle_first_reveal(self, x: int, y: int) -> None:
        """Place bombs around a safe first click and start the timer."""
        self.placer.place(self.grid, x, y, self.config.bomb_count)
        self._bombs_placed = True
        self._timer_running = True
        logger.info(
            "Game started on %dx%d board with %d bombs",
            self.config.width, self.config.height, self.config.bomb_count,
        )

    # ========================================================================
    # Reveal (Mid-level)
    # ========================================================================

    def reveal(self, x: int, y: int) -> bool:
        """
        Reveal the cell at (x, y).

        On the first reveal, places bombs avoiding this cell. Revealing a
        bomb loses the game; revealing the last safe cell wins it; a cell
        with no adjacent bombs floods outwards.

        Args:
            x: Column to reveal.
            y: Row to reveal.

        Returns:
            True if the board changed, False for a no-op.

        Raises:
            OutOfRangeError: If (x, y) is off the board.
        """
        self.grid.check_bounds(x, y)
        if not self._can_reveal(x, y):
            logger.debug("Reveal (%d, %d) ignored", x, y)
            return False

        if not self._bombs_placed:
            self._handle_first_reveal(x, y)

        if self.grid.cell(x, y).is_bomb:
            self.grid.cell(x, y).reveal()
            self._lose(x, y)
            return True

        self._flood_reveal(x, y)
        return True

    def _can_reveal(self, x: int, y: int) -> bool:
        """Check if a cell can be revealed."""
        if self._status != GameStatus.PLAYING:
            return False
        cell = self.grid.cell(x, y)
        return not cell.revealed and not cell.flagged

    def _flood_reveal(self, x: int, y: int) -> None:
        """Reveal a safe cell and cascade through zero-count cells."""
        stack = [(x, y)]
        queued = {(x, y)}
        while stack:
            cx, cy = stack.pop()
            cell = self.grid.cell(cx, cy)
            if cell.revealed:
                continue
            if cell.flagged:
                if not self.config.cascade_over_flags:
                    continue
                cell.flagged = False
                self._bombs_remaining += 1

            cell.revealed = True
            self._unrevealed_safe_cells -= 1
            if self._unrevealed_safe_cells == 0:
                self._win()
                return

            if cell.adjacent_bombs == 0:
                for neighbor in self.grid.neighbors(cx, cy):
                    if neighbor not in queued:
                        queued.add(neighbor)
                        stack.append(neighbor)

    def _lose(self, x: int, y: int) -> None:
        """End the game on a bomb and uncover the whole board."""
        self._status = GameStatus.LOST
        self._timer_running = False
        self._triggered_cell = (x, y)
        for _, _, cell in self.grid.cells():
            cell.revealed = True
        logger.info(
            "Game lost at (%d, %d) after %d ticks", x, y, self._elapsed_ticks
        )

    def _win(self) -> None:
        """End the game as won, uncovering safe cells and flagging bombs."""
        self._status = GameStatus.WON
        self._timer_running = False
        for _, _, cell in self.grid.cells():
            if cell.is_bomb:
                cell.flagged = True
            else:
                cell.revealed = True
                cell.flagged = False
        self._bombs_remaining = 0
        logger.info("Game won after %d ticks", self._elapsed_ticks)

    # ========================================================================
    # Flags and Chording (Mid-level)
    # ========================================================================

    def toggle_flag(self, x: int, y: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            x: Column.
            y: Row.

        Returns:
            True if flag was toggled, False otherwise.
        """
        self.grid.check_bounds(x, y)
        if self._status != GameStatus.PLAYING:
            return False
        cell = self.grid.cell(x, y)
        if not cell.toggle_flag():
            logger.debug("Flag (%d, %d) ignored, cell revealed", x, y)
            return False
        self._bombs_remaining += -1 if cell.flagged else 1
        return True

    def chord(self, x: int, y: int) -> bool:
        """
        Chord action: reveal all unflagged neighbors if flag count matches.

        Args:
            x: Column.
            y: Row.

        Returns:
            True if any neighbour was revealed, False otherwise.
        """
        self.grid.check_bounds(x, y)
        if not self._can_chord(x, y):
            logger.debug("Chord (%d, %d) ignored", x, y)
            return False

        revealed_any = False
        for neighbor_x, neighbor_y in self.grid.neighbors(x, y):
            if self.reveal(neighbor_x, neighbor_y):
                revealed_any = True
        return revealed_any

    def _can_chord(self, x: int, y: int) -> bool:
        """Check if chord action is valid."""
        if self._status != GameStatus.PLAYING:
            return False
        cell = self.grid.cell(x, y)
        if not cell.revealed or cell.adjacent_bombs == 0:
            return False
        flag_count = self.grid.count_adjacent_flags(x, y)
        return flag_count == cell.adjacent_bombs

    # ========================================================================
    # Timer
    # ========================================================================

    def tick(self) -> bool:
        """
        Advance the timer by one unit.

        Returns:
            True if the timer advanced; False before the first reveal
            or after the game ended.
        """
        if self._status != GameStatus.PLAYING or not self._timer_running:
            return False
        self._elapsed_ticks += 1
        return True

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        """Get current game status."""
        return self._status

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._status == GameStatus.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._status == GameStatus.LOST

    @property
    def bombs_placed(self) -> bool:
        return self._bombs_placed

    @property
    def bombs_remaining(self) -> int:
        """Bomb count minus flags; a hint that may go negative."""
        return self._bombs_remaining

    @property
    def unrevealed_safe_cells(self) -> int:
        return self._unrevealed_safe_cells

    @property
    def triggered_cell(self) -> Optional[Position]:
        """The bomb that lost the game, if any."""
        return self._triggered_cell

    @property
    def elapsed_ticks(self) -> int:
        return self._elapsed_ticks

    @property
    def timer_running(self) -> bool:
        return self._timer_running

    def cell_view(self, x: int, y: int) -> CellView:
        """
        Get the renderable view of a cell.

        Bomb status is only exposed once the cell is revealed or the game
        is over; the adjacency count only once it is revealed.
        """
        cell = self.grid.cell(x, y)
        show_bomb = cell.revealed or not self.is_playing
        state = cell.state
        if (x, y) == self._triggered_cell:
            state = CellState.BOMB_TRIGGERED
        return CellView(
            revealed=cell.revealed,
            flagged=cell.flagged,
            is_bomb=cell.is_bomb if show_bomb else None,
            adjacent_bombs=cell.adjacent_bombs if cell.revealed else None,
            state=state,
        )

    def snapshot(self) -> GameSnapshot:
        """Capture the observable game state."""
        return GameSnapshot(
            status=self._status,
            width=self.config.width,
            height=self.config.height,
            bomb_count=self.config.bomb_count,
            bombs_remaining=self._bombs_remaining,
            unrevealed_safe_cells=self._unrevealed_safe_cells,
            bombs_placed=self._bombs_placed,
            elapsed_ticks=self._elapsed_ticks,
            timer_running=self._timer_running,
            triggered_cell=self._triggered_cell,
        )

    def get_observation(self) -> np.ndarray:
        """Board as an int8 array, see Cell.to_observation."""
        return self.grid.get_observation()

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of cells that can still be revealed.

        Returns:
            (x, y) positions that are neither revealed nor flagged.
        """
        if not self.is_playing:
            return []
        return [(x, y) for x, y, cell in self.grid.cells() if cell.is_hidden]


def new_game(
    width: int,
    height: int,
    bomb_count: int,
    rng: Optional[np.random.Generator] = None,
) -> Game:
    """
    Create a new game.

    Raises:
        ConfigurationError: If the dimensions or bomb count are invalid.
    """
    config = GameConfig(width, height, bomb_count)
    return Game(config, BombPlacer(rng))
