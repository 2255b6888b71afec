"""
Unit tests for Game class.

Tests configuration, deferred placement, flood-fill reveal, chording,
flag bookkeeping, the timer and win/loss conditions.
"""
import pytest
import numpy as np
from minesweeper import (
    CellState, ConfigurationError, Game, GameConfig, GameStatus,
    OutOfRangeError, new_game,
)


def revealed_positions(game: Game) -> set:
    return {(x, y) for x, y, cell in game.grid.cells() if cell.revealed}


# ============================================================================
# Game Configuration Tests
# ============================================================================

class TestGameConfig:
    """Test configuration validation."""

    def test_valid_config_creation(self) -> None:
        config = GameConfig(9, 9, 10)
        assert (config.width, config.height, config.bomb_count) == (9, 9, 10)
        assert config.safe_cells == 71

    def test_zero_width_raises_error(self) -> None:
        with pytest.raises(ConfigurationError, match="must be positive"):
            GameConfig(0, 9, 10)

    def test_zero_height_raises_error(self) -> None:
        with pytest.raises(ConfigurationError, match="must be positive"):
            GameConfig(9, 0, 10)

    def test_zero_bombs_raises_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Bomb count"):
            GameConfig(9, 9, 0)

    def test_bombs_filling_board_raises_error(self) -> None:
        """Bomb count must leave at least one safe cell."""
        with pytest.raises(ConfigurationError, match="Too many bombs"):
            GameConfig(3, 3, 9)

    def test_max_bombs_is_valid(self) -> None:
        assert GameConfig(3, 3, 8).bomb_count == 8

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            new_game(2, 2, 4)


# ============================================================================
# Game Initialization Tests
# ============================================================================

class TestGameInitialization:
    """Test game creation and initial state."""

    def test_new_game_is_playing(self, default_game: Game) -> None:
        assert default_game.status == GameStatus.PLAYING
        assert default_game.is_playing is True

    def test_new_game_counters(self, default_game: Game) -> None:
        snapshot = default_game.snapshot()
        assert snapshot.bomb_count == 15
        assert snapshot.bombs_remaining == 15
        assert snapshot.unrevealed_safe_cells == 85
        assert snapshot.elapsed_ticks == 0
        assert snapshot.timer_running is False
        assert snapshot.triggered_cell is None

    def test_bombs_not_placed_before_first_reveal(
        self, default_game: Game
    ) -> None:
        assert default_game.bombs_placed is False
        assert default_game.grid.bomb_count() == 0

    def test_new_game_factory(self) -> None:
        game = new_game(4, 3, 2, np.random.default_rng(0))
        assert game.config == GameConfig(4, 3, 2)
        assert game.get_observation().shape == (3, 4)


# ============================================================================
# First Reveal Tests
# ============================================================================

class TestFirstReveal:
    """Test deferred bomb placement."""

    def test_first_reveal_places_bombs(self, default_game: Game) -> None:
        default_game.reveal(0, 0)
        assert default_game.bombs_placed is True
        assert default_game.grid.bomb_count() == 15

    def test_first_reveal_never_hits_bomb(self) -> None:
        for seed in range(100):
            game = new_game(9, 9, 10, np.random.default_rng(seed))
            game.reveal(4, 4)
            assert game.is_lost is False

    def test_first_reveal_safe_on_crowded_board(self) -> None:
        """Even with one safe cell, the first reveal finds it."""
        for seed in range(10):
            game = new_game(2, 2, 3, np.random.default_rng(seed))
            game.reveal(0, 1)
            assert game.is_won is True

    def test_placement_happens_once(self, make_game) -> None:
        game = make_game(5, 5, [(2, y) for y in range(5)])
        game.reveal(0, 0)
        game.reveal(4, 4)
        assert game.placer.calls == [(0, 0)]
        assert game.grid.bomb_count() == 5

    def test_first_reveal_starts_timer(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        assert striped_game.timer_running is True


# ============================================================================
# Reveal and Flood Fill Tests
# ============================================================================

class TestReveal:
    """Test cell revealing behavior."""

    def test_reveal_returns_true_on_success(self, striped_game: Game) -> None:
        assert striped_game.reveal(1, 2) is True
        assert revealed_positions(striped_game) == {(1, 2)}

    def test_reveal_same_cell_twice_returns_false(
        self, striped_game: Game
    ) -> None:
        striped_game.reveal(1, 2)
        before = striped_game.snapshot()
        assert striped_game.reveal(1, 2) is False
        assert striped_game.snapshot() == before

    def test_reveal_flagged_cell_returns_false(
        self, striped_game: Game
    ) -> None:
        striped_game.toggle_flag(0, 0)
        assert striped_game.reveal(0, 0) is False
        assert striped_game.bombs_placed is False

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (5, 0), (0, 5)])
    def test_reveal_out_of_range_raises(
        self, striped_game: Game, x: int, y: int
    ) -> None:
        with pytest.raises(OutOfRangeError):
            striped_game.reveal(x, y)
        assert striped_game.bombs_placed is False

    def test_numbered_reveal_decrements_safe_count(
        self, striped_game: Game
    ) -> None:
        striped_game.reveal(1, 2)
        assert striped_game.unrevealed_safe_cells == 19
        assert striped_game.grid.cell(1, 2).adjacent_bombs == 3


class TestFloodFill:
    """Test zero-count cascade behavior."""

    def test_zero_region_and_border_revealed(self, striped_game: Game) -> None:
        """Cascade stops at the numbered cells bordering the bombs."""
        striped_game.reveal(0, 0)
        expected = {(x, y) for x in (0, 1) for y in range(5)}
        assert revealed_positions(striped_game) == expected
        assert striped_game.unrevealed_safe_cells == 10
        assert striped_game.is_playing is True

    def test_cascade_does_not_cross_bombs(self, striped_game: Game) -> None:
        striped_game.reveal(4, 0)
        expected = {(x, y) for x in (3, 4) for y in range(5)}
        assert revealed_positions(striped_game) == expected

    def test_cascade_reveals_and_unflags_flagged_cells(
        self, striped_game: Game
    ) -> None:
        striped_game.toggle_flag(0, 4)
        assert striped_game.bombs_remaining == 4
        striped_game.reveal(0, 0)
        cell = striped_game.grid.cell(0, 4)
        assert cell.revealed is True
        assert cell.flagged is False
        assert striped_game.bombs_remaining == 5

    def test_cascade_can_stop_at_flags(self, make_game) -> None:
        game = make_game(
            5, 5, [(2, y) for y in range(5)], cascade_over_flags=False
        )
        game.toggle_flag(0, 4)
        game.reveal(0, 0)
        assert game.grid.cell(0, 4).revealed is False
        assert game.grid.cell(0, 4).flagged is True
        assert game.unrevealed_safe_cells == 11

    def test_large_board_cascade(self, make_game) -> None:
        """Flood fill handles boards far beyond the recursion limit."""
        game = make_game(200, 200, [(199, 199)])
        game.reveal(0, 0)
        assert game.is_won is True
        assert game.unrevealed_safe_cells == 0


# ============================================================================
# Win/Lose Condition Tests
# ============================================================================

class TestGameEndConditions:
    """Test win and lose conditions."""

    def test_single_reveal_wins_corner_bomb_board(
        self, corner_bomb_game: Game
    ) -> None:
        corner_bomb_game.reveal(0, 0)
        assert corner_bomb_game.status == GameStatus.WON
        assert corner_bomb_game.unrevealed_safe_cells == 0
        assert revealed_positions(corner_bomb_game) == (
            set(corner_bomb_game.grid.positions()) - {(2, 2)}
        )

    def test_win_flags_bombs_and_stops_timer(
        self, corner_bomb_game: Game
    ) -> None:
        corner_bomb_game.reveal(0, 0)
        bomb = corner_bomb_game.grid.cell(2, 2)
        assert bomb.flagged is True
        assert bomb.revealed is False
        assert corner_bomb_game.bombs_remaining == 0
        assert corner_bomb_game.timer_running is False

    def test_reveal_bomb_loses_game(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        assert striped_game.reveal(2, 3) is True
        assert striped_game.status == GameStatus.LOST
        assert striped_game.triggered_cell == (2, 3)
        assert striped_game.timer_running is False

    def test_loss_reveals_every_cell(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        striped_game.reveal(2, 3)
        assert all(cell.revealed for _, _, cell in striped_game.grid.cells())

    def test_loss_display_states(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        striped_game.toggle_flag(2, 0)
        striped_game.toggle_flag(4, 4)
        striped_game.reveal(2, 3)
        assert striped_game.cell_view(2, 3).state == CellState.BOMB_TRIGGERED
        assert striped_game.cell_view(2, 1).state == CellState.BOMB
        assert striped_game.cell_view(2, 0).state == CellState.BOMB_FLAGGED
        assert striped_game.cell_view(4, 4).state == CellState.FLAG_WRONG
        assert striped_game.cell_view(0, 0).state == CellState.REVEALED

    def test_cannot_reveal_after_game_over(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        striped_game.reveal(2, 0)
        before = striped_game.snapshot()
        assert striped_game.reveal(4, 4) is False
        assert striped_game.snapshot() == before

    def test_status_never_leaves_won(self, corner_bomb_game: Game) -> None:
        corner_bomb_game.reveal(0, 0)
        assert corner_bomb_game.reveal(2, 2) is False
        assert corner_bomb_game.toggle_flag(2, 2) is False
        assert corner_bomb_game.is_won is True


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flagging behavior and the bombs-remaining hint."""

    def test_flag_decrements_remaining(self, striped_game: Game) -> None:
        assert striped_game.toggle_flag(3, 3) is True
        assert striped_game.grid.cell(3, 3).flagged is True
        assert striped_game.bombs_remaining == 4

    def test_toggle_twice_is_identity(self, striped_game: Game) -> None:
        before = striped_game.snapshot()
        striped_game.toggle_flag(3, 3)
        striped_game.toggle_flag(3, 3)
        assert striped_game.snapshot() == before
        assert striped_game.grid.cell(3, 3).is_hidden is True

    def test_over_flagging_goes_negative(self, corner_bomb_game: Game) -> None:
        for x in range(3):
            corner_bomb_game.toggle_flag(x, 0)
        assert corner_bomb_game.bombs_remaining == -2

    def test_flag_revealed_cell_is_noop(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        before = striped_game.snapshot()
        observation = striped_game.get_observation()
        assert striped_game.toggle_flag(0, 0) is False
        assert striped_game.snapshot() == before
        assert np.array_equal(striped_game.get_observation(), observation)

    def test_flag_out_of_range_raises(self, striped_game: Game) -> None:
        with pytest.raises(OutOfRangeError):
            striped_game.toggle_flag(7, 0)
        assert striped_game.bombs_remaining == 5


# ============================================================================
# Chord Tests
# ============================================================================

@pytest.fixture
def two_corner_game(make_game) -> Game:
    """4x4 game with bombs at (0, 0) and (3, 3); (1, 1) revealed."""
    game = make_game(4, 4, [(0, 0), (3, 3)])
    game.reveal(1, 1)
    return game


class TestChord:
    """Test chorded reveal."""

    def test_chord_without_matching_flags_is_noop(
        self, two_corner_game: Game
    ) -> None:
        before = two_corner_game.snapshot()
        assert two_corner_game.chord(1, 1) is False
        assert two_corner_game.snapshot() == before
        assert revealed_positions(two_corner_game) == {(1, 1)}

    def test_chord_with_matching_flags_cascades_to_win(
        self, two_corner_game: Game
    ) -> None:
        two_corner_game.toggle_flag(0, 0)
        assert two_corner_game.chord(1, 1) is True
        assert two_corner_game.is_won is True

    def test_chord_with_wrong_flag_loses(self, two_corner_game: Game) -> None:
        two_corner_game.toggle_flag(1, 0)
        assert two_corner_game.chord(1, 1) is True
        assert two_corner_game.is_lost is True
        assert two_corner_game.triggered_cell == (0, 0)

    def test_chord_with_too_many_flags_is_noop(
        self, two_corner_game: Game
    ) -> None:
        two_corner_game.toggle_flag(0, 0)
        two_corner_game.toggle_flag(2, 2)
        assert two_corner_game.chord(1, 1) is False
        assert revealed_positions(two_corner_game) == {(1, 1)}

    def test_chord_on_hidden_cell_is_noop(self, two_corner_game: Game) -> None:
        assert two_corner_game.chord(2, 2) is False

    def test_chord_on_zero_cell_is_noop(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        assert striped_game.chord(0, 0) is False

    def test_chord_skips_flagged_neighbors(self, make_game) -> None:
        game = make_game(3, 1, [(0, 0)])
        game.reveal(1, 0)
        game.toggle_flag(0, 0)
        assert game.chord(1, 0) is True
        assert game.grid.cell(0, 0).revealed is False
        assert game.is_won is True

    def test_chord_out_of_range_raises(self, two_corner_game: Game) -> None:
        with pytest.raises(OutOfRangeError):
            two_corner_game.chord(4, 4)


# ============================================================================
# Timer Tests
# ============================================================================

class TestTimer:
    """Test tick handling."""

    def test_tick_before_first_reveal_is_noop(
        self, striped_game: Game
    ) -> None:
        assert striped_game.tick() is False
        assert striped_game.elapsed_ticks == 0

    def test_tick_advances_while_playing(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        assert striped_game.tick() is True
        assert striped_game.tick() is True
        assert striped_game.elapsed_ticks == 2

    def test_timer_frozen_after_loss(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        striped_game.tick()
        striped_game.reveal(2, 2)
        assert striped_game.tick() is False
        assert striped_game.elapsed_ticks == 1


# ============================================================================
# Accessor Tests
# ============================================================================

class TestAccessors:
    """Test read-only views."""

    def test_hidden_cell_view_hides_content(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        view = striped_game.cell_view(2, 0)
        assert view.is_bomb is None
        assert view.adjacent_bombs is None
        assert view.state == CellState.HIDDEN

    def test_revealed_cell_view_shows_count(self, striped_game: Game) -> None:
        striped_game.reveal(0, 0)
        view = striped_game.cell_view(1, 0)
        assert view.revealed is True
        assert view.is_bomb is False
        assert view.adjacent_bombs == 2

    def test_valid_actions_exclude_revealed_and_flagged(
        self, striped_game: Game
    ) -> None:
        striped_game.reveal(0, 0)
        striped_game.toggle_flag(4, 4)
        actions = striped_game.get_valid_actions()
        assert (0, 0) not in actions
        assert (4, 4) not in actions
        assert len(actions) == 14

    def test_no_valid_actions_after_game_over(
        self, corner_bomb_game: Game
    ) -> None:
        corner_bomb_game.reveal(0, 0)
        assert corner_bomb_game.get_valid_actions() == []

    def test_observation_after_loss_shows_bombs(
        self, striped_game: Game
    ) -> None:
        striped_game.reveal(0, 0)
        striped_game.reveal(2, 2)
        obs = striped_game.get_observation()
        assert np.all(obs[:, 2] == 9)
        assert obs[0, 1] == 2
