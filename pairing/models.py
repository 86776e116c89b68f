from typing import List, Literal, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pairing import config


def new_id() -> str:
    return uuid4().hex[:9]


class Player(BaseModel):
    id: str = Field(default_factory=new_id, description="Unique player identifier", examples=["p1"])
    name: str = Field(..., description="Display name", examples=["Minji"])
    gender: Optional[Literal["M", "F"]] = Field(None, description="Player gender", examples=["F"])
    grade: Optional[Literal["A", "B", "C", "D"]] = Field(
        None, description="Skill grade, A is strongest", examples=["B"]
    )


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    players: Tuple[Player, Player]


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    team1: Team
    team2: Team
    score1: Optional[int] = None
    score2: Optional[int] = None

    @property
    def players(self) -> List[Player]:
        return [*self.team1.players, *self.team2.players]


class GameMode(BaseModel):
    id: str
    label: str
    category_id: str = "other"
    min_players: int
    max_players: int
    default_score_limit: int = 21
    score_limit_options: List[int] = Field(default_factory=lambda: [15, 21, 30])


class GameModesResponse(BaseModel):
    game_modes: List[GameMode]


class MatchesRequest(BaseModel):
    players: List[Player] = Field(..., description="Roster, in the order the generator should use")
    game_mode_id: str = Field(
        config.DEFAULT_GAME_MODE, description="Game mode to generate for", examples=["individual"]
    )
    shuffle: bool = Field(False, description="Permute the roster before generating")
    seed: Optional[int] = Field(None, description="Seed for the roster permutation", examples=[42])

    @field_validator("players")
    @classmethod
    def player_ids_unique(cls, players: List[Player]) -> List[Player]:
        ids = [p.id for p in players]
        if len(ids) != len(set(ids)):
            raise ValueError("player ids must be unique")
        return players


class MatchesResponse(BaseModel):
    matches: List[Match]
    target_total: int
    per_player: int
    partial: bool = False


class ScheduleRequest(MatchesRequest):
    n_courts: Optional[int] = Field(
        None, ge=1, le=2, description="Courts in parallel play, defaults to the recommended count"
    )


class ScheduleItem(BaseModel):
    TimeSlot: int
    Court: int
    Match: Match


class ScheduleResponse(BaseModel):
    schedule: List[ScheduleItem]
    constraints_relaxed: List[str]
    target_total: int
    estimated_minutes: int
    duration: str


class SessionOverviewRow(BaseModel):
    Players: int
    Total: int
    PerPlayer: int
    Courts: int
    Minutes: int
    Duration: str


class SessionOverviewResponse(BaseModel):
    rows: List[SessionOverviewRow]
