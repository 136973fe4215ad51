"""Scenario endpoints — per-business listings, editing, confirmation and live views."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from scenario_manager.application.schemas import (
    ConfirmationResponse,
    ConfirmationToggle,
    RecordPatchResponse,
    ScenarioCreate,
    ScenarioResponse,
    ScenarioStatusResponse,
    ScenarioUpdate,
    StatusBadgeSchema,
)
from scenario_manager.application.services import ScenarioService, SnapshotStream, search_scenarios
from scenario_manager.domain.entities import Scenario, ScenarioStatus
from scenario_manager.domain.exceptions import EntityNotFoundError
from scenario_manager.infrastructure.dependencies import get_scenario_service
from scenario_manager.presentation.api.v1.streaming import snapshot_response

router = APIRouter(tags=["Scenarios"])


def _to_response(scenario: Scenario) -> ScenarioResponse:
    return ScenarioResponse.model_validate(scenario, from_attributes=True)


def _to_payload(scenarios: list[Scenario]) -> list[dict]:
    return [_to_response(s).model_dump(mode="json") for s in scenarios]


# ── Listings under a business ───────────────────────────────────────


@router.get("/businesses/{business_id}/scenarios", response_model=list[ScenarioResponse])
async def list_scenarios(
    business_id: str,
    q: str | None = None,
    service: ScenarioService = Depends(get_scenario_service),
) -> list[ScenarioResponse]:
    """Scenarios of a business, newest first, optionally narrowed by a title/content search."""
    scenarios = await service.list_scenarios(business_id)
    return [_to_response(s) for s in search_scenarios(scenarios, q)]


@router.get("/businesses/{business_id}/scenarios/stream")
async def stream_scenarios(
    business_id: str,
    q: str | None = None,
    service: ScenarioService = Depends(get_scenario_service),
) -> StreamingResponse:
    """SSE stream of a business's scenarios; the search is re-applied to every snapshot."""
    stream = SnapshotStream()
    subscription = await service.subscribe_scenarios(
        business_id,
        lambda scenarios: stream.push(_to_payload(search_scenarios(scenarios, q))),
    )
    return snapshot_response(stream, subscription)


@router.post(
    "/businesses/{business_id}/scenarios",
    response_model=ScenarioResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_scenario(
    business_id: str,
    data: ScenarioCreate,
    service: ScenarioService = Depends(get_scenario_service),
) -> ScenarioResponse:
    scenario = await service.create_scenario(business_id, data)
    return _to_response(scenario)


# ── Single scenario ─────────────────────────────────────────────────


@router.get("/scenario-statuses", response_model=list[ScenarioStatusResponse])
async def list_scenario_statuses() -> list[ScenarioStatusResponse]:
    """Every status with its display label and badge colours, in lifecycle order."""
    return [
        ScenarioStatusResponse(
            value=s,
            label=s.label,
            badge=StatusBadgeSchema(background=s.badge.background, foreground=s.badge.foreground),
        )
        for s in ScenarioStatus
    ]


@router.get("/scenarios/{scenario_id}", response_model=ScenarioResponse)
async def get_scenario(
    scenario_id: str,
    service: ScenarioService = Depends(get_scenario_service),
) -> ScenarioResponse:
    try:
        scenario = await service.get_scenario(scenario_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_response(scenario)


@router.get("/scenarios/{scenario_id}/stream")
async def stream_scenario(
    scenario_id: str,
    service: ScenarioService = Depends(get_scenario_service),
) -> StreamingResponse:
    """SSE stream of one scenario; ``null`` while it does not exist."""
    stream = SnapshotStream()
    subscription = await service.subscribe_scenario(
        scenario_id,
        lambda scenario: stream.push(
            _to_response(scenario).model_dump(mode="json") if scenario is not None else None
        ),
    )
    return snapshot_response(stream, subscription)


@router.patch("/scenarios/{scenario_id}", response_model=RecordPatchResponse)
async def update_scenario(
    scenario_id: str,
    data: ScenarioUpdate,
    service: ScenarioService = Depends(get_scenario_service),
) -> RecordPatchResponse:
    """Write only the fields sent; the response echoes them, not the merged record."""
    try:
        patch = await service.update_scenario(scenario_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordPatchResponse.model_validate(patch, from_attributes=True)


@router.post("/scenarios/{scenario_id}/confirmation", response_model=ConfirmationResponse)
async def toggle_confirmation(
    scenario_id: str,
    data: ConfirmationToggle,
    service: ScenarioService = Depends(get_scenario_service),
) -> ConfirmationResponse:
    try:
        confirmed = await service.toggle_confirmation(scenario_id, data.current)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ConfirmationResponse(id=scenario_id, confirmed=confirmed)


@router.delete("/scenarios/{scenario_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scenario(
    scenario_id: str,
    service: ScenarioService = Depends(get_scenario_service),
) -> None:
    if not await service.delete_scenario(scenario_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Scenario '{scenario_id}' could not be deleted",
        )
