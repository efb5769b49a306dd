"""
Unit tests for the round state machine.

Tests phase transitions, cleared-count bookkeeping, win/loss handling
and score recording.
"""
import pytest

from cubesweeper import (
    ConfigurationError,
    Coordinate,
    Difficulty,
    GameSettings,
    InvalidStateError,
    Mark,
    ORIGIN,
    RoundPhase,
    RoundState,
    ScoreStore,
    iter_shells,
)

EASY_TRIGGERS = [
    Coordinate(1, 0, 0),
    Coordinate(-1, -1, -1),
    Coordinate(0, 1, 1),
    Coordinate(1, -1, 0),
]


def safe_cells(round_state: RoundState):
    return [
        coord for coord in round_state.grid
        if not round_state.get_cell(coord).is_trigger
    ]


# ============================================================================
# Lifecycle Tests
# ============================================================================

class TestLifecycle:
    """Test start, configuration and reset transitions."""

    def test_new_round_state_is_idle(self, round_state: RoundState) -> None:
        assert round_state.phase is RoundPhase.IDLE
        assert round_state.is_playing is False
        assert round_state.grid is None
        assert round_state.get_cell(Coordinate(1, 0, 0)) is None

    def test_start_enters_playing(self, round_state: RoundState) -> None:
        grid = round_state.start(Difficulty.EASY)
        assert round_state.phase is RoundPhase.PLAYING
        assert round_state.is_playing is True
        assert round_state.grid is grid
        assert round_state.difficulty is Difficulty.EASY
        assert round_state.goal == 22
        assert round_state.cleared_count == 0
        assert round_state.elapsed_time == 0.0

    def test_start_accepts_integer(self, round_state: RoundState) -> None:
        round_state.start(3)
        assert round_state.difficulty is Difficulty.HARD
        assert round_state.goal == 257

    @pytest.mark.parametrize("difficulty", [0, 4, "expert"])
    def test_invalid_difficulty_not_started(
        self, round_state: RoundState, difficulty
    ) -> None:
        with pytest.raises(ConfigurationError):
            round_state.start(difficulty)
        assert round_state.phase is RoundPhase.IDLE
        assert round_state.grid is None

    def test_start_while_playing_rejected(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY)
        with pytest.raises(InvalidStateError):
            round_state.start(Difficulty.EASY)

    def test_deferred_begin(self, score_store: ScoreStore) -> None:
        """Without auto_begin the round waits in CONFIGURING."""
        settings = GameSettings(cascade_probability=0.0, auto_begin=False)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.EASY)
        assert round_state.phase is RoundPhase.CONFIGURING
        assert round_state.is_playing is False
        with pytest.raises(InvalidStateError):
            round_state.reveal_at(Coordinate(1, 1, 1))
        round_state.begin_playing()
        assert round_state.phase is RoundPhase.PLAYING

    def test_begin_playing_requires_configuring(self, round_state: RoundState) -> None:
        with pytest.raises(InvalidStateError):
            round_state.begin_playing()

    def test_reset_requires_finished_round(self, round_state: RoundState) -> None:
        with pytest.raises(InvalidStateError):
            round_state.reset_game()

    def test_restart_regenerates_grid(self, round_state: RoundState) -> None:
        first = round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.reveal_at(Coordinate(1, 0, 0))
        second = round_state.start(Difficulty.MEDIUM)
        assert second is not first
        assert len(second) == 124
        assert round_state.cleared_count == 0
        assert round_state.last_outcome is None


# ============================================================================
# Reveal Tests
# ============================================================================

class TestRevealAt:
    """Test reveal requests and the cleared count."""

    def test_reveal_outside_playing_rejected(self, round_state: RoundState) -> None:
        with pytest.raises(InvalidStateError):
            round_state.reveal_at(Coordinate(1, 1, 1))

    def test_safe_reveal_increments_count(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        result = round_state.reveal_at(Coordinate(-1, 1, 0))
        assert result.cleared == 1
        assert round_state.cleared_count == 1
        assert round_state.remaining == 21
        assert round_state.is_playing is True

    def test_repeat_reveal_changes_nothing(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.reveal_at(Coordinate(-1, 1, 0))
        round_state.reveal_at(Coordinate(-1, 1, 0))
        assert round_state.cleared_count == 1

    def test_unknown_coordinate_is_noop(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        assert round_state.reveal_at(ORIGIN).cleared == 0
        assert round_state.reveal_at(Coordinate(4, 4, 4)).cleared == 0
        assert round_state.cleared_count == 0
        assert round_state.is_playing is True

    def test_cascade_counts_every_cell(self, score_store: ScoreStore) -> None:
        settings = GameSettings(cascade_probability=1.0)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.MEDIUM, triggers=[Coordinate(2, 2, 2)])
        result = round_state.reveal_at(Coordinate(-2, -2, -2))
        assert result.cleared == 123
        assert round_state.cleared_count == 123
        assert round_state.is_won is True


# ============================================================================
# Loss Tests
# ============================================================================

class TestLoss:
    """Test trigger reveals."""

    def test_trigger_reveal_loses(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=[Coordinate(1, 0, 0)])
        result = round_state.reveal_at(Coordinate(1, 0, 0))
        assert result.is_loss is True
        assert round_state.cleared_count == 0
        assert round_state.is_lost is True
        assert round_state.last_outcome is RoundPhase.LOST
        assert round_state.phase is RoundPhase.IDLE

    def test_loss_does_not_touch_score(
        self, round_state: RoundState, score_store: ScoreStore
    ) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.tick(3.0)
        round_state.reveal_at(EASY_TRIGGERS[0])
        assert score_store.best(Difficulty.EASY) is None
        assert round_state.last_score is None

    def test_loss_keeps_lost_phase_without_auto_reset(
        self, score_store: ScoreStore
    ) -> None:
        settings = GameSettings(cascade_probability=0.0, auto_reset=False)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.reveal_at(EASY_TRIGGERS[1])
        assert round_state.phase is RoundPhase.LOST
        with pytest.raises(InvalidStateError):
            round_state.reveal_at(Coordinate(0, 0, 1))
        round_state.reset_game()
        assert round_state.phase is RoundPhase.IDLE

    def test_can_start_again_after_loss(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.reveal_at(EASY_TRIGGERS[2])
        round_state.start(Difficulty.EASY)
        assert round_state.is_playing is True


# ============================================================================
# Win Tests
# ============================================================================

class TestWin:
    """Test the win condition and score recording."""

    def test_revealing_all_safe_cells_wins(
        self, round_state: RoundState, score_store: ScoreStore
    ) -> None:
        round_state.start(Difficulty.EASY)
        assert round_state.goal == 22
        cells = safe_cells(round_state)
        assert len(cells) == 22

        for coord in cells[:-1]:
            round_state.reveal_at(coord)
            assert round_state.is_playing is True
        round_state.reveal_at(cells[-1])

        assert round_state.cleared_count == 22
        assert round_state.is_won is True
        assert round_state.phase is RoundPhase.IDLE
        assert score_store.best(Difficulty.EASY) == 0

    def test_win_records_normalized_score(
        self, score_store: ScoreStore
    ) -> None:
        settings = GameSettings(cascade_probability=0.0)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.MEDIUM, triggers=[Coordinate(2, 0, 0)])
        round_state.tick(40.5)
        for coord in safe_cells(round_state):
            round_state.reveal_at(coord)
        assert round_state.last_score == 42
        assert score_store.best(Difficulty.MEDIUM) == 42

    def test_slower_win_keeps_best(self, score_store: ScoreStore) -> None:
        score_store.save(10, Difficulty.EASY)
        settings = GameSettings(cascade_probability=0.0)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.tick(30.0)
        for coord in safe_cells(round_state):
            round_state.reveal_at(coord)
        assert round_state.last_score == 30
        assert score_store.best(Difficulty.EASY) == 10

    def test_win_stays_won_without_auto_reset(self, score_store: ScoreStore) -> None:
        settings = GameSettings(cascade_probability=0.0, auto_reset=False)
        round_state = RoundState(settings=settings, score_store=score_store)
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        for coord in safe_cells(round_state):
            round_state.reveal_at(coord)
        assert round_state.phase is RoundPhase.WON
        round_state.start(Difficulty.EASY)
        assert round_state.is_playing is True


# ============================================================================
# Mark and Clock Tests
# ============================================================================

class TestToggleMark:
    """Test the mark cycle through the round."""

    def test_cycle(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        coord = Coordinate(0, 0, -1)
        assert round_state.toggle_mark(coord) is Mark.FLAGGED
        assert round_state.toggle_mark(coord) is Mark.QUESTIONED
        assert round_state.toggle_mark(coord) is Mark.NORMAL
        assert round_state.phase is RoundPhase.PLAYING

    def test_revealed_or_unknown_cells(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.reveal_at(Coordinate(0, 0, -1))
        assert round_state.toggle_mark(Coordinate(0, 0, -1)) is None
        assert round_state.toggle_mark(ORIGIN) is None

    def test_mark_outside_playing_rejected(self, round_state: RoundState) -> None:
        with pytest.raises(InvalidStateError):
            round_state.toggle_mark(Coordinate(1, 1, 1))


class TestClock:
    """Test the frame-driven round clock."""

    def test_tick_only_while_playing(self, round_state: RoundState) -> None:
        round_state.tick(5.0)
        assert round_state.elapsed_time == 0.0
        round_state.start(Difficulty.EASY)
        round_state.tick(1.25)
        round_state.tick(1.5)
        assert round_state.elapsed_time == pytest.approx(2.75)
        assert round_state.elapsed_seconds == 2

    def test_clock_stops_after_round(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.tick(4.0)
        round_state.reveal_at(EASY_TRIGGERS[0])
        round_state.tick(10.0)
        assert round_state.elapsed_time == 4.0

    def test_start_resets_clock(self, round_state: RoundState) -> None:
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.tick(4.0)
        round_state.reveal_at(EASY_TRIGGERS[0])
        round_state.start(Difficulty.EASY)
        assert round_state.elapsed_time == 0.0


class TestScorePath:
    """Test the score file configured through settings."""

    def test_score_written_to_file(self, tmp_path) -> None:
        path = tmp_path / "scores.json"
        settings = GameSettings(cascade_probability=0.0, score_path=path)
        round_state = RoundState(settings=settings)
        round_state.start(Difficulty.EASY, triggers=EASY_TRIGGERS)
        round_state.tick(7.0)
        for coord in safe_cells(round_state):
            round_state.reveal_at(coord)
        assert path.exists()
        assert RoundState(settings=settings).score_store.best(Difficulty.EASY) == 7


def test_all_easy_cells_are_in_grid(round_state: RoundState) -> None:
    round_state.start(Difficulty.EASY)
    assert set(round_state.grid) == set(iter_shells(1))
