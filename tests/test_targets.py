import pytest

from pairing.targets import (
    TARGET_TOTAL_GAMES_TABLE,
    get_target_total_games,
    per_player_games,
    validate_target_table,
)


@pytest.mark.parametrize(
    "n, total",
    [(4, 3), (5, 5), (6, 9), (7, 14), (8, 14), (9, 18), (10, 20), (11, 33), (12, 33)],
)
def test_table_values(n, total):
    assert get_target_total_games(n) == total


@pytest.mark.parametrize("n", [-1, 0, 3, 13, 20])
def test_out_of_range_roster_sizes_get_no_matches(n):
    assert get_target_total_games(n) == 0


@pytest.mark.parametrize("n", range(4, 13))
def test_every_table_entry_gives_whole_per_player_count(n):
    assert (get_target_total_games(n) * 4) % n == 0


def test_validate_target_table_accepts_shipped_table():
    validate_target_table()


def test_validate_target_table_rejects_fractional_entry():
    with pytest.raises(ValueError, match="5 players"):
        validate_target_table({4: 3, 5: 3})


def test_table_is_read_only():
    with pytest.raises(TypeError):
        TARGET_TOTAL_GAMES_TABLE[13] = 39


def test_per_player_games():
    assert per_player_games(4, 3) == 3
    assert per_player_games(6, 9) == 6
    assert per_player_games(11, 33) == 12
    assert per_player_games(5, 3) is None
    assert per_player_games(3, 3) is None
    assert per_player_games(8, 0) is None
