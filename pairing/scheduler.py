import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import pulp

from pairing import config
from pairing.models import Match

logger = logging.getLogger(__name__)


class CourtSolver:
    """
    Lays generated matches out on courts and time slots. Which matches are played is fixed
    by the caller; this only decides when and where.
    """

    def __init__(self, n_courts: int, n_time_slots: Optional[int] = None):
        self.n_courts = n_courts
        self.n_time_slots = n_time_slots

    def schedule_matches(
        self, matches: Sequence[Match]
    ) -> Tuple[Optional[pd.DataFrame], List[str]]:
        constraints_relaxed: List[str] = []
        if not matches:
            return None, constraints_relaxed

        problem, variables = self.attempt_schedule(matches)

        if pulp.LpStatus[problem.status] == "Optimal":
            logger.debug("Court layout found for %d matches", len(matches))
        else:
            for constraint in ["consecutive_matches", "compact_slots"]:
                constraints_relaxed.append(constraint)
                problem, variables = self.attempt_schedule(
                    matches, relax_constraints=constraints_relaxed
                )
                if pulp.LpStatus[problem.status] == "Optimal":
                    logger.info("Court layout found after relaxing %s", ", ".join(constraints_relaxed))
                    break
            else:
                logger.warning("No feasible court layout even after relaxing constraints.")
                return None, constraints_relaxed

        return self._format_solution(variables, matches), constraints_relaxed

    def attempt_schedule(
        self, matches: Sequence[Match], relax_constraints: Sequence[str] = ()
    ) -> Tuple[pulp.LpProblem, Dict[int, Dict[int, pulp.LpVariable]]]:
        n_time_slots = self._slot_count(matches, relax_constraints)
        problem = pulp.LpProblem("Doubles_Court_Layout", pulp.LpMinimize)
        variables = pulp.LpVariable.dicts(
            "MatchTime",
            (range(len(matches)), range(1, n_time_slots + 1)),
            cat=pulp.LpBinary,
        )
        self.enforce_constraints(problem, variables, matches, n_time_slots, relax_constraints)

        problem.solve(pulp.PULP_CBC_CMD(msg=config.SOLVER_MSG, timeLimit=config.SOLVER_TIME_LIMIT))
        return problem, variables

    def check_schedule(self, df_schedule: pd.DataFrame) -> bool:
        is_solution = True
        for time_slot, df_time_slot in df_schedule.groupby("TimeSlot"):
            if len(df_time_slot) > self.n_courts:
                logger.warning(
                    "Time slot %s holds %d matches on %d courts.",
                    time_slot,
                    len(df_time_slot),
                    self.n_courts,
                )
                is_solution = False
            players_in_slot = np.array(
                [[p.id for p in match.players] for match in df_time_slot.Match]
            )
            if len(np.unique(players_in_slot)) != players_in_slot.size:
                logger.warning("A player is scheduled on two courts in time slot %s.", time_slot)
                is_solution = False
        logger.info("Valid schedule?: %s", is_solution)
        return is_solution

    def enforce_constraints(
        self,
        problem: pulp.LpProblem,
        variables: Dict[int, Dict[int, pulp.LpVariable]],
        matches: Sequence[Match],
        n_time_slots: int,
        relax_constraints: Sequence[str],
    ) -> None:
        slots = range(1, n_time_slots + 1)
        players = self._players_by_match(matches)

        self._enforce_each_match_occurrence(problem, variables, matches, slots)
        self._enforce_court_capacity_per_time_slot(problem, variables, matches, slots)
        self._enforce_no_simultaneous_scheduling_for_each_player(problem, variables, players, slots)
        if "consecutive_matches" not in relax_constraints:
            self._limit_consecutive_matches(problem, variables, players, n_time_slots)

    def _enforce_each_match_occurrence(self, problem, variables, matches, slots):
        for i in range(len(matches)):
            problem += pulp.lpSum(variables[i][k] for k in slots) == 1

    def _enforce_court_capacity_per_time_slot(self, problem, variables, matches, slots):
        for k in slots:
            problem += pulp.lpSum(variables[i][k] for i in range(len(matches))) <= self.n_courts

    def _enforce_no_simultaneous_scheduling_for_each_player(self, problem, variables, players, slots):
        for player_matches in players.values():
            for k in slots:
                problem += pulp.lpSum(variables[i][k] for i in player_matches) <= 1

    def _limit_consecutive_matches(self, problem, variables, players, n_time_slots):
        for player_matches in players.values():
            for k in range(1, n_time_slots - 1):
                problem += (
                    pulp.lpSum(
                        variables[i][k] + variables[i][k + 1] + variables[i][k + 2]
                        for i in player_matches
                    )
                    <= 2
                )

    def _slot_count(self, matches: Sequence[Match], relax_constraints: Sequence[str]) -> int:
        if "compact_slots" in relax_constraints:
            return len(matches)
        if self.n_time_slots is not None:
            return self.n_time_slots
        return math.ceil(len(matches) / self.n_courts)

    @staticmethod
    def _players_by_match(matches: Sequence[Match]) -> Dict[str, List[int]]:
        players: Dict[str, List[int]] = {}
        for i, match in enumerate(matches):
            for player in match.players:
                players.setdefault(player.id, []).append(i)
        return players

    def _format_solution(self, variables, matches: Sequence[Match]) -> pd.DataFrame:
        data = []
        for i, match in enumerate(matches):
            time_slot = next(k for k, var in variables[i].items() if round(var.varValue or 0) == 1)
            data.append((time_slot, i, match))
        df = pd.DataFrame(data, columns=["TimeSlot", "Order", "Match"])
        # squeeze out empty slots and number courts within each slot
        df["TimeSlot"] = df["TimeSlot"].rank(method="dense").astype(int)
        df.sort_values(["TimeSlot", "Order"], inplace=True)
        df["Court"] = df.groupby("TimeSlot").cumcount() + 1
        return df[["TimeSlot", "Court", "Match"]].reset_index(drop=True)
