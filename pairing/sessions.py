import math

import pandas as pd

from pairing.targets import MAX_PLAYERS, MIN_PLAYERS, get_target_total_games, per_player_games

# Expected length of one game to 21 points
MINUTES_PER_21PT_GAME = 15

MIN_COURTS = 1
MAX_COURTS = 2


def can_use_parallel_courts(n_players: int) -> bool:
    return n_players >= 8


def get_recommended_courts(n_players: int) -> int:
    return MAX_COURTS if can_use_parallel_courts(n_players) else MIN_COURTS


def get_min_courts(n_players: int) -> int:
    return MIN_COURTS


def get_max_courts(n_players: int) -> int:
    return MAX_COURTS if can_use_parallel_courts(n_players) else MIN_COURTS


def estimated_minutes(target_total: int, courts: int) -> int:
    return math.ceil(target_total * MINUTES_PER_21PT_GAME / courts)


def format_estimated_duration(total_minutes: int) -> str:
    if total_minutes < 60:
        return f"{total_minutes} min"
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} h {minutes} min" if minutes > 0 else f"{hours} h"


def session_overview(min_players: int = MIN_PLAYERS, max_players: int = MAX_PLAYERS) -> pd.DataFrame:
    """
    Per roster size: total matches, matches per player, courts and how long the session
    takes when every usable court runs in parallel.
    """
    data = []
    for n_players in range(min_players, max_players + 1):
        total = get_target_total_games(n_players)
        courts = get_max_courts(n_players)
        minutes = estimated_minutes(total, courts)
        data.append(
            (
                n_players,
                total,
                per_player_games(n_players, total) or 0,
                courts,
                minutes,
                format_estimated_duration(minutes),
            )
        )
    return pd.DataFrame(data, columns=["Players", "Total", "PerPlayer", "Courts", "Minutes", "Duration"])
