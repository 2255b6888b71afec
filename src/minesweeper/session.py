"""
Session module for Minesweeper.

A session owns one player's current game and cursor, applies actions one
at a time, and drives the game timer with a self-rearming clock. Sessions
share nothing but the random source used for bomb placement.
"""
import logging
import threading
from typing import Callable, Optional, Tuple

import numpy as np

from .actions import (
    Action, Chord, Edge, Jump, Move, Restart, Reveal, Tick, ToggleFlag,
)
from .game import DEFAULT, Game, GameConfig, GameSnapshot
from .placement import BombPlacer


logger = logging.getLogger(__name__)


# ============================================================================
# Random Source
# ============================================================================

class RandomSource:
    """
    Hands out independent random generators.

    Every call spawns a child of one SeedSequence, so concurrent games
    never draw from the same stream.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._seed_sequence = np.random.SeedSequence(seed)
        self._lock = threading.Lock()

    def generator(self) -> np.random.Generator:
        """Create a generator with its own independent stream."""
        with self._lock:
            (child,) = self._seed_sequence.spawn(1)
        return np.random.default_rng(child)


default_random_source = RandomSource()


# ============================================================================
# Session Clock
# ============================================================================

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class SessionClock:
    """
    Delivers Tick actions to a session while its game timer runs.

    The clock re-arms itself after each tick only if the timer is still
    running, so it stops on its own once the game ends.
    """

    def __init__(
        self,
        session: "GameSession",
        interval: float = 1.0,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self.session = session
        self.interval = interval
        self.timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._closed = False
        # Bumped on reset so a timer that already fired for a replaced
        # game cannot tick its successor.
        self._generation = 0

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Arm the clock if the game timer runs and nothing is pending."""
        with self._lock:
            if self._closed or self._timer is not None:
                return
            if not self.session.game.timer_running:
                return
            self._arm()

    def _arm(self) -> None:
        generation = self._generation
        self._timer = self.timer_factory(
            self.interval, lambda: self._fire(generation)
        )
        self._timer.daemon = True
        self._timer.start()

    def _fire(self, generation: int) -> None:
        """Apply one tick and re-arm while the timer keeps running."""
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
        self.session.apply(Tick())

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def reset(self) -> None:
        """Drop any pending tick; the clock can be started again."""
        with self._lock:
            self._generation += 1
            self._cancel()

    def stop(self) -> None:
        """Cancel any pending tick and refuse to re-arm."""
        with self._lock:
            self._closed = True
            self._cancel()


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    One player's game, cursor and timer.

    The session is the sole owner of its Game. Actions are serialised by
    a lock so input events and clock ticks never interleave.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT,
        random_source: Optional[RandomSource] = None,
        tick_interval: Optional[float] = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        """
        Initialize the session.

        Args:
            config: Configuration of the first game.
            random_source: Source of placement randomness; the shared
                module-level source if omitted.
            tick_interval: Seconds between ticks; no clock if None.
            timer_factory: Builds the timers used by the clock.
        """
        self.random_source = random_source or default_random_source
        self._lock = threading.RLock()
        self.game = self._new_game(config)
        self.cursor: Tuple[int, int] = (0, 0)
        self.clock: Optional[SessionClock] = None
        if tick_interval is not None:
            self.clock = SessionClock(self, tick_interval, timer_factory)

    def _new_game(self, config: GameConfig) -> Game:
        return Game(config, BombPlacer(self.random_source.generator()))

    @property
    def config(self) -> GameConfig:
        return self.game.config

    # ========================================================================
    # Dispatch
    # ========================================================================

    def apply(self, action: Action) -> GameSnapshot:
        """
        Apply one action and return the resulting snapshot.

        Raises:
            TypeError: If ``action`` is not a known action.
            OutOfRangeError: If an explicit target is off the board.
        """
        with self._lock:
            if isinstance(action, Move):
                self._move(*action.direction.value)
            elif isinstance(action, Jump):
                self._jump(action.edge)
            elif isinstance(action, Reveal):
                self.game.reveal(*self._target(action.at))
            elif isinstance(action, ToggleFlag):
                self.game.toggle_flag(*self._target(action.at))
            elif isinstance(action, Chord):
                self.game.chord(*self._target(action.at))
            elif isinstance(action, Restart):
                self.restart(action.config)
            elif isinstance(action, Tick):
                self._tick()
            else:
                raise TypeError(f"Unknown action: {action!r}")
            snapshot = self.game.snapshot()

        if self.clock is not None:
            self.clock.start()
        return snapshot

    def _target(self, at: Optional[Tuple[int, int]]) -> Tuple[int, int]:
        return self.cursor if at is None else at

    def _move(self, dx: int, dy: int) -> None:
        x, y = self.cursor
        self.cursor = (
            min(max(x + dx, 0), self.config.width - 1),
            min(max(y + dy, 0), self.config.height - 1),
        )

    def _jump(self, edge: Edge) -> None:
        x, y = self.cursor
        if edge == Edge.FIRST_ROW:
            y = 0
        elif edge == Edge.LAST_ROW:
            y = self.config.height - 1
        elif edge == Edge.FIRST_COLUMN:
            x = 0
        else:
            x = self.config.width - 1
        self.cursor = (x, y)

    def _tick(self) -> None:
        if self.game.tick():
            logger.debug("Tick %d", self.game.elapsed_ticks)

    def restart(self, config: Optional[GameConfig] = None) -> None:
        """Replace the current game with a fresh one."""
        with self._lock:
            if self.clock is not None:
                self.clock.reset()
            self.game = self._new_game(config or self.config)
            self.cursor = (0, 0)
        logger.info(
            "Session restarted with %dx%d board, %d bombs",
            self.config.width, self.config.height, self.config.bomb_count,
        )

    def close(self) -> None:
        """Stop the clock; the session must not be used afterwards."""
        if self.clock is not None:
            self.clock.stop()
