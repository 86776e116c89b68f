from types import MappingProxyType
from typing import Mapping, Optional

MIN_PLAYERS = 4
MAX_PLAYERS = 12

# Total matches per roster size. Every entry keeps total * 4 divisible by the
# roster size so each player gets the same number of matches.
TARGET_TOTAL_GAMES_TABLE: Mapping[int, int] = MappingProxyType(
    {
        4: 3,
        5: 5,
        6: 9,
        7: 14,
        8: 14,
        9: 18,
        10: 20,
        11: 33,
        12: 33,
    }
)


def get_target_total_games(n: int) -> int:
    if n < MIN_PLAYERS or n > MAX_PLAYERS:
        return 0
    return TARGET_TOTAL_GAMES_TABLE.get(n, 0)


def per_player_games(n: int, target_total: int) -> Optional[int]:
    """
    Number of matches each player plays when `target_total` doubles matches are spread over
    `n` players, or None if that is not a whole number (or the inputs cannot be scheduled).
    """
    if n < MIN_PLAYERS or target_total <= 0:
        return None
    if (target_total * 4) % n != 0:
        return None
    return target_total * 4 // n


def validate_target_table(table: Mapping[int, int] = TARGET_TOTAL_GAMES_TABLE) -> None:
    for n, total in table.items():
        if total < 0 or (total * 4) % n != 0:
            raise ValueError(
                f"Target table entry for {n} players gives a fractional per-player count: "
                f"{total} * 4 / {n} = {total * 4 / n}"
            )
