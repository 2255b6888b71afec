"""
Domain-level actions a session can apply.

Shells translate raw input (keys, clicks, protocol lines) into these
values; the engine never sees key names.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .game import GameConfig


class Direction(Enum):
    """One-step cursor movement as (dx, dy)."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


class Edge(Enum):
    """Board edge the cursor can jump to."""

    FIRST_ROW = "first_row"
    LAST_ROW = "last_row"
    FIRST_COLUMN = "first_column"
    LAST_COLUMN = "last_column"


@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class Jump:
    edge: Edge


@dataclass(frozen=True)
class Reveal:
    """Reveal ``at`` or, when omitted, the cell under the cursor."""

    at: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class ToggleFlag:
    at: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class Chord:
    at: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class Restart:
    """Start over, optionally with a different configuration."""

    config: Optional[GameConfig] = None


@dataclass(frozen=True)
class Tick:
    pass


Action = Union[Move, Jump, Reveal, ToggleFlag, Chord, Restart, Tick]
