import logging
from typing import List, Optional, Sequence

import numpy as np

from pairing.matchups import build_round_robin_matches
from pairing.models import GameMode, Match, Player
from pairing.targets import MAX_PLAYERS, MIN_PLAYERS, get_target_total_games

logger = logging.getLogger(__name__)

GAME_MODES: List[GameMode] = [
    GameMode(
        id="individual",
        label="Individual A",
        category_id="doubles",
        min_players=MIN_PLAYERS,
        max_players=MAX_PLAYERS,
        default_score_limit=21,
        score_limit_options=[15, 21, 30],
    ),
    GameMode(
        id="individual_b",
        label="Individual B",
        category_id="doubles",
        min_players=MIN_PLAYERS,
        max_players=MAX_PLAYERS,
        default_score_limit=21,
        score_limit_options=[15, 21, 30],
    ),
]

ROUND_ROBIN_MODES = {"individual", "individual_b"}


def get_game_mode(mode_id: str) -> Optional[GameMode]:
    return next((mode for mode in GAME_MODES if mode.id == mode_id), None)


def supports_roster_size(mode: GameMode, n_players: int) -> bool:
    return mode.min_players <= n_players <= mode.max_players


def generate_matches_by_game_mode(mode_id: str, roster: Sequence[Player]) -> List[Match]:
    """Single entry point for match generation; unknown modes produce no matches."""
    if mode_id in ROUND_ROBIN_MODES:
        target = get_target_total_games(len(roster))
        return build_round_robin_matches(roster, target)
    logger.info("No generator registered for game mode %r", mode_id)
    return []


def shuffle_roster(roster: Sequence[Player], seed: Optional[int] = None) -> List[Player]:
    """
    Returns a permuted copy of the roster. The builder is deterministic, so permuting its
    input is how repeated generations for the same players get different schedules.
    """
    rng = np.random.default_rng(seed)
    return [roster[i] for i in rng.permutation(len(roster))]
