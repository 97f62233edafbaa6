#!/usr/bin/env python3
"""FastAPI application for the playsim motion engine."""

from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from playsim.config import config
from playsim.exceptions import (
    FormationError,
    PlayerNotFoundError,
    PlaysimException,
    QueryValidationError,
    RosterValidationError,
)
from playsim.formations import Formation, auto_assign_defense, build_preset_formation
from playsim.logging import bind_request_context, clear_request_context, configure_logging, get_logger
from playsim.models import (
    DEFAULT_ACCELERATION,
    DEFAULT_SPEED,
    CoverageStyle,
    Force,
    Player,
    Role,
    SimulationQuery,
    Team,
    ThrowEvent,
    ThrowPower,
    validate_query,
    validate_roster,
)
from playsim.simulation import PlaySimulation
from spatial.kinematics import position_at_time

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    configure_logging(config.log_level, config.json_logs)
    logger.info("api.starting", default_force=config.default_force.value)
    yield
    logger.info("api.stopping")


app = FastAPI(
    title="playsim",
    description="Motion simulation engine for ultimate frisbee play design",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag log lines with a per-request id."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    bind_request_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["x-request-id"] = request_id
    return response


# Request/Response Models
class PointModel(BaseModel):
    x: float
    y: float


class PlayerModel(BaseModel):
    """A player token as sent by the play designer."""

    id: str
    team: Team
    x: float
    y: float
    label: str = ""
    path: list[PointModel] = Field(default_factory=list)
    path_start_offset: float = 0.0
    speed: float = Field(default=DEFAULT_SPEED, ge=0)
    acceleration: float = Field(default=DEFAULT_ACCELERATION, ge=0)
    has_disc: bool = False
    role: Optional[Role] = None
    auto_assigned: bool = False
    covers_offense_id: Optional[str] = None
    coverage_style: Optional[CoverageStyle] = None

    def to_player(self) -> Player:
        return Player.from_dict(self.model_dump())


class ThrowModel(BaseModel):
    """A scheduled throw."""

    id: str
    thrower_id: str
    release_time: float = Field(ge=0)
    receiver_id: Optional[str] = None
    angle: float = Field(default=0.0, ge=-1, le=1)
    power: ThrowPower = ThrowPower.MEDIUM
    target_point: Optional[PointModel] = None

    def to_throw(self) -> ThrowEvent:
        target = (self.target_point.x, self.target_point.y) if self.target_point else None
        return ThrowEvent(
            id=self.id,
            thrower_id=self.thrower_id,
            release_time=self.release_time,
            receiver_id=self.receiver_id,
            angle=self.angle,
            power=self.power,
            target_point=target,
        )


class PositionsRequest(BaseModel):
    """Positions of every player at one play time."""

    players: list[PlayerModel]
    time: Optional[float] = Field(default=None, ge=0)
    force: Force = config.default_force
    disc_holder_id: Optional[str] = None
    throws: list[ThrowModel] = Field(default_factory=list)


class PositionsResponse(BaseModel):
    time: Optional[float]
    duration: float
    disc_holder_id: Optional[str]
    turnover_time: Optional[float]
    positions: dict[str, PointModel]


class PathPositionRequest(BaseModel):
    """Position along a single path."""

    start: PointModel
    path: list[PointModel] = Field(default_factory=list)
    time: float = Field(ge=0)
    speed: float = Field(default=DEFAULT_SPEED, ge=0)
    acceleration: float = Field(default=DEFAULT_ACCELERATION, ge=0)
    start_offset: float = 0.0


class RosterRequest(BaseModel):
    players: list[PlayerModel]
    force: Force = config.default_force


class RosterResponse(BaseModel):
    players: list[dict]


def _roster(players: list[PlayerModel]) -> list[Player]:
    roster = [p.to_player() for p in players]
    validate_roster(roster)
    return roster


# Error handling
_STATUS_CODES = {
    RosterValidationError: 422,
    QueryValidationError: 422,
    PlayerNotFoundError: 404,
    FormationError: 404,
}


@app.exception_handler(PlaysimException)
async def playsim_exception_handler(request: Request, exc: PlaysimException):
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)),
        400,
    )
    logger.warning("api.request_rejected", path=request.url.path, error=str(exc), status=status_code)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# REST Endpoints
@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok", "version": app.version}


@app.post("/positions", response_model=PositionsResponse)
async def get_positions(request: PositionsRequest):
    """Positions of every player at ``time`` (rest positions when time is null)."""
    query = SimulationQuery(
        players=tuple(p.to_player() for p in request.players),
        time=request.time,
        force=request.force,
        disc_holder_id=request.disc_holder_id,
        throws=tuple(t.to_throw() for t in request.throws),
    )
    validate_query(query)

    simulation = PlaySimulation(query.players, query.force, query.throws, config.steering)
    positions = simulation.positions_at_time(query.time, query.disc_holder_id)
    holder = simulation.disc_holder_at(query.time, query.disc_holder_id)

    return PositionsResponse(
        time=query.time,
        duration=simulation.duration,
        disc_holder_id=holder.id if holder else None,
        turnover_time=simulation.turnover_time,
        positions={pid: PointModel(x=x, y=y) for pid, (x, y) in positions.items()},
    )


@app.post("/paths/position", response_model=PointModel)
async def get_path_position(request: PathPositionRequest):
    """Evaluate a single path at ``time``."""
    x, y = position_at_time(
        (request.start.x, request.start.y),
        [(p.x, p.y) for p in request.path],
        request.time,
        request.speed,
        request.acceleration,
        request.start_offset,
    )
    return PointModel(x=x, y=y)


@app.post("/defense/auto-assign", response_model=RosterResponse)
async def assign_defense(request: RosterRequest):
    """Fill the defense with auto-assigned defenders for the current offense."""
    roster = auto_assign_defense(_roster(request.players), request.force)
    return RosterResponse(players=[p.to_dict() for p in roster])


@app.get("/formations/{formation}", response_model=RosterResponse)
async def get_formation(formation: Formation, force: Force = config.default_force):
    """Offense of a preset formation."""
    players = build_preset_formation(formation, force)
    return RosterResponse(players=[p.to_dict() for p in players])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host="0.0.0.0", port=8000, reload=True)
