#!/usr/bin/env python3
"""
Minesweeper engine - Main entry point.

Usage:
    python main.py play [--preset NAME | --width W --height H --bombs N]
    python main.py simulate [--games N] [--seed S]

In play mode each input line is one command:
    up/down/left/right, w/a/s/d or h/j/k/l   move the cursor
    gg, G, 0, $                              first/last row, first/last column
    (empty line) or reveal [X Y]             reveal; restarts a finished game
    f or flag [X Y]                          toggle flag
    c or chord [X Y]                         chord
    r                                        restart
    q                                        quit
"""
import argparse
import logging
import sys
from typing import Optional

import numpy as np

from src.minesweeper import (
    Action, Chord, Direction, Edge, GameConfig, GameSession, GameSnapshot,
    GameStatus, Jump, MinesweeperEnv, MinesweeperError, Move, PRESETS,
    RandomSource, Restart, Reveal, ToggleFlag, render_text,
)


KEY_ACTIONS = {
    "up": Move(Direction.UP), "w": Move(Direction.UP), "k": Move(Direction.UP),
    "down": Move(Direction.DOWN), "s": Move(Direction.DOWN),
    "j": Move(Direction.DOWN),
    "left": Move(Direction.LEFT), "a": Move(Direction.LEFT),
    "h": Move(Direction.LEFT),
    "right": Move(Direction.RIGHT), "d": Move(Direction.RIGHT),
    "l": Move(Direction.RIGHT),
    "gg": Jump(Edge.FIRST_ROW), "G": Jump(Edge.LAST_ROW),
    "0": Jump(Edge.FIRST_COLUMN), "$": Jump(Edge.LAST_COLUMN),
    "": Reveal(), "f": ToggleFlag(), "c": Chord(), "r": Restart(),
}

TARGETED_ACTIONS = {"reveal": Reveal, "flag": ToggleFlag, "chord": Chord}

STATUS_TEXT = {
    GameStatus.PLAYING: "Sweeping...",
    GameStatus.WON: "Victory",
    GameStatus.LOST: "Defeat",
}


def parse_command(line: str) -> Optional[Action]:
    """Translate one input line into an action, or None if unknown."""
    line = line.strip()
    if line in KEY_ACTIONS:
        return KEY_ACTIONS[line]
    words = line.split()
    if len(words) == 1 and words[0] in TARGETED_ACTIONS:
        return TARGETED_ACTIONS[words[0]]()
    if len(words) == 3 and words[0] in TARGETED_ACTIONS:
        try:
            x, y = int(words[1]), int(words[2])
        except ValueError:
            return None
        return TARGETED_ACTIONS[words[0]](at=(x, y))
    return None


def shell_action(action: Action, snapshot: GameSnapshot) -> Action:
    """Map a cursor reveal on a finished game to a restart."""
    if (
        isinstance(action, Reveal)
        and action.at is None
        and snapshot.status != GameStatus.PLAYING
    ):
        return Restart()
    return action


def status_line(snapshot: GameSnapshot) -> str:
    return (
        f"Bombs: {snapshot.bombs_remaining} | "
        f"Remaining: {snapshot.unrevealed_safe_cells} | "
        f"Time: {snapshot.elapsed_ticks} | "
        f"Status: {STATUS_TEXT[snapshot.status]}"
    )


def build_config(args: argparse.Namespace) -> GameConfig:
    """Build a game configuration from preset or explicit sizes."""
    if args.preset:
        return PRESETS[args.preset]
    return GameConfig(args.width, args.height, args.bombs)


def play(args: argparse.Namespace) -> None:
    """Play one session on stdin/stdout."""
    config = build_config(args)
    session = GameSession(
        config, RandomSource(args.seed), tick_interval=args.tick
    )
    print(render_text(session.game, session.cursor))
    print(status_line(session.game.snapshot()))

    try:
        for line in sys.stdin:
            if line.strip() in ("q", "quit"):
                break
            action = parse_command(line)
            if action is None:
                print(f"Unknown command: {line.strip()!r}")
                continue
            try:
                snapshot = session.apply(
                    shell_action(action, session.game.snapshot())
                )
            except MinesweeperError as exc:
                print(f"Error: {exc}")
                continue
            print(render_text(session.game, session.cursor))
            print(status_line(snapshot))
            if snapshot.status == GameStatus.LOST:
                print("GAME OVER! Press enter to restart or q to quit.")
            elif snapshot.status == GameStatus.WON:
                print("YOU WIN! Press enter to restart or q to quit.")
    finally:
        session.close()


def simulate(args: argparse.Namespace) -> None:
    """Play random games through the environment and report results."""
    config = build_config(args)
    env = MinesweeperEnv(config=config)
    rng = np.random.default_rng(args.seed)

    wins = 0
    total_steps = 0
    for game in range(args.games):
        env.reset(seed=None if args.seed is None else args.seed + game)
        done = False
        info = {}
        while not done:
            valid_actions = np.flatnonzero(env.get_action_mask())
            action = rng.choice(valid_actions)
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
        total_steps += info["steps"]
        if info["game_state"] == GameStatus.WON.name:
            wins += 1

    print(f"Results over {args.games} random games:")
    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg steps: {total_steps / args.games:.1f}")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper engine - play or simulate games"
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    for name, help_text in (
        ("play", "Play a game on the terminal"),
        ("simulate", "Play random games and report the win rate"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--preset", choices=sorted(PRESETS), help="Difficulty preset"
        )
        sub.add_argument("--width", type=int, default=10, help="Columns")
        sub.add_argument("--height", type=int, default=10, help="Rows")
        sub.add_argument("--bombs", type=int, default=15, help="Bomb count")
        sub.add_argument("--seed", type=int, default=None, help="Random seed")

    subparsers.choices["play"].add_argument(
        "--tick", type=float, default=1.0, help="Seconds per timer tick"
    )
    subparsers.choices["simulate"].add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.command == "play":
            play(args)
        elif args.command == "simulate":
            simulate(args)
        else:
            parser.print_help()
    except MinesweeperError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
