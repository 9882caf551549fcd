"""HTTP routes for the Skirmish API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from skirmish.api.runtime import ApiState, SimulationRegistry
from skirmish.domain.errors import ConfigurationError, RunStateError
from skirmish.domain.models import GroupID
from skirmish.services.battle_simulator import BattleSimulator

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CreateSimulationRequest(BaseModel):
    side1_name: str | None = Field(default=None, min_length=1)
    side2_name: str | None = Field(default=None, min_length=1)


class GroupCreateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)


class GroupCreated(BaseModel):
    group_id: str


class UnitCreateRequest(BaseModel):
    type: str = Field(default="infantry", min_length=1)
    level: int = Field(default=1, ge=1)
    is_player_character: bool = False


class UnitCreated(BaseModel):
    group_id: str
    unit_id: int


class ItemCreateRequest(BaseModel):
    item_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class ItemCreated(BaseModel):
    group_id: str
    item_ref_id: int


class RunRequest(BaseModel):
    max_ticks: int | None = Field(default=None, ge=1)


class SideOutcome(BaseModel):
    name: str
    initial_power: float
    final_power: float
    casualties: int
    critical_hits: int


class SimulationResultResponse(BaseModel):
    winner: int | None
    reason: str
    ticks: int
    side1: SideOutcome
    side2: SideOutcome
    inconclusive: bool
    error: str | None


class StepResponse(BaseModel):
    status: str
    current_tick: int
    tick: dict[str, Any] | None
    result: SimulationResultResponse | None


class StepHistoryResponse(BaseModel):
    status: str
    current_tick: int
    ticks: list[dict[str, Any]]


class LogEntryResponse(BaseModel):
    message: str
    type: str
    timestamp: datetime


def _simulator(state: ApiState, simulation_id: int) -> BattleSimulator:
    try:
        return state.simulations.get(simulation_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def _step_response(simulator: BattleSimulator, tick: Any = None) -> StepResponse:
    result = simulator.stepper.result
    return StepResponse(
        status=str(simulator.status),
        current_tick=simulator.current_tick,
        tick=SimulationRegistry.tick_to_dict(tick) if tick is not None else None,
        result=(
            SimulationResultResponse.model_validate(SimulationRegistry.result_to_dict(result))
            if result is not None
            else None
        ),
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "sessions": len(state.simulations.ids()),
    }


@router.get("/rules")
async def rules_overview(state: ApiStateDep) -> dict[str, object]:
    """Expose a snapshot of configurable rule constants for clients."""

    engine = state.rules.engine
    standard = state.rules.standard
    return {
        "engine": {
            "winning_margin": engine.winning_margin,
            "defeat_rule": str(engine.defeat_rule),
            "transfer_loot": engine.transfer_loot,
        },
        "standard": {
            "unit_power_per_level": standard.unit_power_per_level,
            "player_power_multiplier": standard.player_power_multiplier,
            "attrition_rate_min": standard.attrition_rate_min,
            "attrition_rate_max": standard.attrition_rate_max,
        },
        "default_max_ticks": state.settings.default_max_ticks,
        "max_ticks_limit": state.settings.max_ticks_limit,
    }


@router.post("/simulations", status_code=status.HTTP_201_CREATED)
async def create_simulation(
    request: CreateSimulationRequest, state: ApiStateDep
) -> dict[str, Any]:
    session_id = state.simulations.create(request.side1_name, request.side2_name)
    simulator = state.simulations.get(session_id)
    return SimulationRegistry.to_detail_dict(session_id, simulator)


@router.get("/simulations/{simulation_id}")
async def get_simulation(simulation_id: int, state: ApiStateDep) -> dict[str, Any]:
    simulator = _simulator(state, simulation_id)
    return SimulationRegistry.to_detail_dict(simulation_id, simulator)


@router.delete("/simulations/{simulation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_simulation(simulation_id: int, state: ApiStateDep) -> None:
    try:
        state.simulations.delete(simulation_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post(
    "/simulations/{simulation_id}/sides/{side}/groups",
    response_model=GroupCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_group(
    simulation_id: int, side: int, request: GroupCreateRequest, state: ApiStateDep
) -> GroupCreated:
    simulator = _simulator(state, simulation_id)
    try:
        group_id = simulator.add_group(side, request.name)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return GroupCreated(group_id=str(group_id))


@router.delete(
    "/simulations/{simulation_id}/sides/{side}/groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_group(simulation_id: int, side: int, group_id: str, state: ApiStateDep) -> None:
    simulator = _simulator(state, simulation_id)
    simulator.delete_group(side, GroupID(group_id))


@router.post(
    "/simulations/{simulation_id}/groups/{group_id}/units",
    response_model=UnitCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_unit(
    simulation_id: int, group_id: str, request: UnitCreateRequest, state: ApiStateDep
) -> UnitCreated:
    simulator = _simulator(state, simulation_id)
    try:
        unit_id = simulator.add_unit(
            GroupID(group_id), request.type, request.level, request.is_player_character
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UnitCreated(group_id=group_id, unit_id=int(unit_id))


@router.post(
    "/simulations/{simulation_id}/groups/{group_id}/items",
    response_model=ItemCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_item(
    simulation_id: int, group_id: str, request: ItemCreateRequest, state: ApiStateDep
) -> ItemCreated:
    simulator = _simulator(state, simulation_id)
    ref_id = simulator.add_item(GroupID(group_id), request.item_id, request.quantity)
    return ItemCreated(group_id=group_id, item_ref_id=int(ref_id))


@router.post("/simulations/{simulation_id}/run", response_model=SimulationResultResponse)
async def run_simulation(
    simulation_id: int, request: RunRequest, state: ApiStateDep
) -> SimulationResultResponse:
    simulator = _simulator(state, simulation_id)
    try:
        result = simulator.run_battle_simulation(request.max_ticks)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return SimulationResultResponse.model_validate(SimulationRegistry.result_to_dict(result))


@router.post("/simulations/{simulation_id}/steps/start", response_model=StepResponse)
async def start_steps(simulation_id: int, request: RunRequest, state: ApiStateDep) -> StepResponse:
    simulator = _simulator(state, simulation_id)
    try:
        simulator.start_run(request.max_ticks)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _step_response(simulator)


@router.post("/simulations/{simulation_id}/steps/forward", response_model=StepResponse)
async def step_forward(simulation_id: int, state: ApiStateDep) -> StepResponse:
    simulator = _simulator(state, simulation_id)
    try:
        tick = simulator.step_forward()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _step_response(simulator, tick)


@router.post("/simulations/{simulation_id}/steps/fast-forward", response_model=StepResponse)
async def fast_forward(simulation_id: int, state: ApiStateDep) -> StepResponse:
    simulator = _simulator(state, simulation_id)
    try:
        simulator.fast_forward()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _step_response(simulator, simulator.current_step_state)


@router.post("/simulations/{simulation_id}/steps/reset", response_model=StepResponse)
async def reset_steps(simulation_id: int, state: ApiStateDep) -> StepResponse:
    simulator = _simulator(state, simulation_id)
    simulator.reset()
    return _step_response(simulator)


@router.post("/simulations/{simulation_id}/steps/rewind", response_model=StepResponse)
async def rewind_steps(
    simulation_id: int,
    state: ApiStateDep,
    tick: Annotated[int, Query(ge=0)],
) -> StepResponse:
    simulator = _simulator(state, simulation_id)
    try:
        simulator.rewind(tick)
    except RunStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _step_response(simulator, simulator.current_step_state)


@router.get("/simulations/{simulation_id}/steps", response_model=StepHistoryResponse)
async def list_steps(simulation_id: int, state: ApiStateDep) -> StepHistoryResponse:
    simulator = _simulator(state, simulation_id)
    return StepHistoryResponse(
        status=str(simulator.status),
        current_tick=simulator.current_tick,
        ticks=[SimulationRegistry.tick_to_dict(tick) for tick in simulator.intermediate_results],
    )


@router.get("/simulations/{simulation_id}/log", response_model=list[LogEntryResponse])
async def get_log(
    simulation_id: int,
    state: ApiStateDep,
    drain: Annotated[bool, Query()] = False,
) -> list[LogEntryResponse]:
    simulator = _simulator(state, simulation_id)
    entries = simulator.drain_log() if drain else simulator.log_entries()
    return [
        LogEntryResponse.model_validate(entry) for entry in SimulationRegistry.log_to_dicts(entries)
    ]
