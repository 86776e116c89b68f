import itertools
import logging
from typing import List, Sequence, Tuple

import numpy as np

from pairing.models import Match, Player, Team
from pairing.targets import per_player_games

logger = logging.getLogger(__name__)

# Balance dominates everything else; a repeated partner costs twice a repeated opponent.
PARTNER_WEIGHT = 2
OPPONENT_WEIGHT = 1
BALANCE_WEIGHT = 100


class MatchupBuilder:
    """
    Greedy doubles match builder for one roster.

    Works on roster positions only and maps back to players when emitting matches. Each
    step scores every remaining 2-vs-2 grouping and commits the cheapest one, so the
    result is a local heuristic rather than an optimal design. The counters live on the
    builder and are thrown away with it.
    """

    def __init__(self, roster: Sequence[Player], target_total: int):
        self.roster = list(roster)
        self.n_players = len(self.roster)
        self.target_total = target_total
        self.per_player = per_player_games(self.n_players, target_total)

        self.appearances = np.zeros(self.n_players, dtype=np.int64)
        self.partner_counts = np.zeros((self.n_players, self.n_players), dtype=np.int64)
        self.opponent_counts = np.zeros((self.n_players, self.n_players), dtype=np.int64)

    def generate_all_candidate_matchups(self) -> np.ndarray:
        """
        Every (a, b, c, d) of distinct positions with a < b and c < d, where {a, b} is team 1
        and {c, d} is team 2. Rows come in traversal order (a, b, c, d ascending), which is
        the tie-break order of the builder.
        """
        positions = range(self.n_players)
        candidates = []
        for a, b in itertools.combinations(positions, 2):
            for c, d in itertools.combinations(positions, 2):
                if c in (a, b) or d in (a, b):
                    continue
                candidates.append((a, b, c, d))
        return np.array(candidates, dtype=np.int64).reshape(-1, 4)

    def build_matches(self) -> List[Match]:
        if self.per_player is None:
            return []

        candidates = self.generate_all_candidate_matchups()
        membership = np.zeros((len(candidates), self.n_players), dtype=np.int64)
        membership[np.arange(len(candidates))[:, None], candidates] = 1

        selected: List[Tuple[int, int, int, int]] = []
        for step in range(self.target_total):
            eligible = (self.appearances[candidates] < self.per_player).all(axis=1)
            if not eligible.any():
                logger.debug("No eligible grouping left after %d of %d matches", step, self.target_total)
                break

            costs = self._score_candidates(candidates, membership)
            eligible_rows = np.flatnonzero(eligible)
            # argmin returns the first minimum, so ties resolve in traversal order
            best = eligible_rows[np.argmin(costs[eligible_rows])]
            a, b, c, d = (int(i) for i in candidates[best])
            self._commit(a, b, c, d)
            selected.append((a, b, c, d))

        return [self._to_match(*quad) for quad in selected]

    def _score_candidates(self, candidates: np.ndarray, membership: np.ndarray) -> np.ndarray:
        a, b, c, d = candidates.T
        partner_score = self.partner_counts[a, b] + self.partner_counts[c, d]
        opp_score = (
            self.opponent_counts[a, c]
            + self.opponent_counts[a, d]
            + self.opponent_counts[b, c]
            + self.opponent_counts[b, d]
        )
        after = self.appearances + membership
        spread = after.max(axis=1) - after.min(axis=1)
        return partner_score * PARTNER_WEIGHT + opp_score * OPPONENT_WEIGHT + spread * BALANCE_WEIGHT

    def _commit(self, a: int, b: int, c: int, d: int) -> None:
        self.appearances[[a, b, c, d]] += 1
        for x, y in ((a, b), (c, d)):
            self.partner_counts[x, y] += 1
            self.partner_counts[y, x] += 1
        for x in (a, b):
            for y in (c, d):
                self.opponent_counts[x, y] += 1
                self.opponent_counts[y, x] += 1

    def _to_match(self, a: int, b: int, c: int, d: int) -> Match:
        return Match(
            team1=Team(players=(self.roster[a], self.roster[b])),
            team2=Team(players=(self.roster[c], self.roster[d])),
        )


def build_round_robin_matches(roster: Sequence[Player], target_total: int) -> List[Match]:
    """
    Generates `target_total` doubles matches in which every player appears equally often.

    Returns an empty list when the roster has fewer than four players, the target is not
    positive, or `target_total * 4` does not divide evenly over the roster. If the greedy
    search runs out of eligible groupings the matches found so far are returned, so callers
    that need the exact count must compare lengths.
    """
    n_players = len(roster)
    if n_players < 4 or target_total <= 0:
        return []
    if per_player_games(n_players, target_total) is None:
        logger.info(
            "Cannot balance %d matches over %d players, nothing generated", target_total, n_players
        )
        return []

    matches = MatchupBuilder(roster, target_total).build_matches()
    if len(matches) < target_total:
        logger.warning(
            "Generated only %d of %d matches for %d players", len(matches), target_total, n_players
        )
    else:
        logger.debug("Generated %d matches for %d players", len(matches), n_players)
    return matches


def pair_counts(matches: Sequence[Match], roster: Sequence[Player]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Partner and opponent count matrices (roster positions on both axes) for a schedule.

    Every player in `matches` must be on the roster; an unknown player id raises KeyError.
    Use `check_matches` first when the schedule comes from outside the builder.
    """
    positions = {player.id: i for i, player in enumerate(roster)}
    partners = np.zeros((len(roster), len(roster)), dtype=np.int64)
    opponents = np.zeros((len(roster), len(roster)), dtype=np.int64)
    for match in matches:
        team1 = [positions[p.id] for p in match.team1.players]
        team2 = [positions[p.id] for p in match.team2.players]
        for x, y in (team1, team2):
            partners[x, y] += 1
            partners[y, x] += 1
        for x in team1:
            for y in team2:
                opponents[x, y] += 1
                opponents[y, x] += 1
    return partners, opponents


def check_matches(matches: Sequence[Match], roster: Sequence[Player]) -> bool:
    positions = {player.id: i for i, player in enumerate(roster)}
    is_solution = True
    rows = []

    for number, match in enumerate(matches, start=1):
        ids = [p.id for p in match.players]
        unknown = [pid for pid in ids if pid not in positions]
        if unknown:
            logger.warning("Match %d uses players outside the roster: %s", number, unknown)
            is_solution = False
            continue
        row = np.array([positions[pid] for pid in ids])
        if len(np.unique(row)) != 4:
            logger.warning("Match %d does not have four distinct players.", number)
            is_solution = False
        rows.append(row)

    if rows and roster:
        appearances = np.bincount(np.concatenate(rows), minlength=len(roster))
        expected = len(matches) * 4 / len(roster)
        for i in np.flatnonzero(appearances != expected):
            logger.warning(
                "Player %s has %d matches, expected %s.", roster[i].name, appearances[i], expected
            )
            is_solution = False

    logger.info("Valid matches?: %s", is_solution)
    return is_solution
