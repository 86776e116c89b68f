import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException

from pairing import config
from pairing.game_modes import (
    GAME_MODES,
    generate_matches_by_game_mode,
    get_game_mode,
    shuffle_roster,
    supports_roster_size,
)
from pairing.matchups import check_matches
from pairing.models import (
    GameModesResponse,
    MatchesRequest,
    MatchesResponse,
    ScheduleItem,
    ScheduleRequest,
    ScheduleResponse,
    SessionOverviewResponse,
    SessionOverviewRow,
)
from pairing.scheduler import CourtSolver
from pairing.sessions import (
    MINUTES_PER_21PT_GAME,
    format_estimated_duration,
    get_max_courts,
    get_recommended_courts,
    session_overview,
)
from pairing.targets import (
    TARGET_TOTAL_GAMES_TABLE,
    get_target_total_games,
    per_player_games,
    validate_target_table,
)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_target_table()
    logger.info("Target table checked for %d roster sizes", len(TARGET_TOTAL_GAMES_TABLE))
    yield


app = FastAPI(
    title="Doubles Pairing API",
    description="API to generate fair doubles match schedules for small groups of players",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/game-modes/", tags=["Game modes"])
async def list_game_modes() -> GameModesResponse:
    return GameModesResponse(game_modes=GAME_MODES)


@app.get("/session-overview/", tags=["Sessions"])
async def get_session_overview() -> SessionOverviewResponse:
    df_overview = session_overview()
    return SessionOverviewResponse(
        rows=[SessionOverviewRow(**row) for row in df_overview.to_dict("records")]
    )


@app.post("/generate-matches/", tags=["Matches"])
async def generate_matches(request: MatchesRequest) -> MatchesResponse:
    try:
        mode = get_game_mode(request.game_mode_id)
        if mode is None:
            raise HTTPException(status_code=400, detail=f"Unknown game mode: {request.game_mode_id}")

        n_players = len(request.players)
        if not supports_roster_size(mode, n_players):
            raise HTTPException(
                status_code=400,
                detail=(
                    f"{mode.label} needs {mode.min_players} to {mode.max_players} players, "
                    f"got {n_players}"
                ),
            )

        if request.shuffle:
            roster = shuffle_roster(request.players, seed=request.seed)
        else:
            roster = list(request.players)

        matches = generate_matches_by_game_mode(mode.id, roster)
        if not matches:
            raise HTTPException(status_code=404, detail="No valid schedule found")
        check_matches(matches, roster)

        target_total = get_target_total_games(n_players)
        return MatchesResponse(
            matches=matches,
            target_total=target_total,
            per_player=per_player_games(n_players, target_total),
            partial=len(matches) < target_total,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Match generation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/generate-schedule/", tags=["Schedule"])
async def generate_schedule(request: ScheduleRequest) -> ScheduleResponse:
    try:
        matches_response = await generate_matches(request=request)
        n_players = len(request.players)
        max_courts = get_max_courts(n_players)
        if request.n_courts is not None and request.n_courts > max_courts:
            raise HTTPException(
                status_code=400,
                detail=f"{n_players} players can use at most {max_courts} court(s), got {request.n_courts}",
            )
        n_courts = request.n_courts or get_recommended_courts(n_players)

        court_solver = CourtSolver(n_courts=n_courts)
        schedule, constraints_relaxed = court_solver.schedule_matches(matches_response.matches)
        if schedule is None:
            raise HTTPException(status_code=404, detail="No valid schedule found")
        court_solver.check_schedule(schedule)

        schedule_items = [
            ScheduleItem(TimeSlot=int(row["TimeSlot"]), Court=int(row["Court"]), Match=row["Match"])
            for _, row in schedule.iterrows()
        ]
        minutes = int(schedule["TimeSlot"].max()) * MINUTES_PER_21PT_GAME
        return ScheduleResponse(
            schedule=schedule_items,
            constraints_relaxed=constraints_relaxed,
            target_total=matches_response.target_total,
            estimated_minutes=minutes,
            duration=format_estimated_duration(minutes),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Schedule generation failed")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    uvicorn.run("pairing.main:app", host="0.0.0.0", port=8000)
