"""Business endpoints — CRUD plus the live business list."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from scenario_manager.application.schemas import (
    BusinessCreate,
    BusinessResponse,
    BusinessUpdate,
    RecordPatchResponse,
)
from scenario_manager.application.services import BusinessService, SnapshotStream
from scenario_manager.domain.entities import Business
from scenario_manager.domain.exceptions import EntityNotFoundError
from scenario_manager.infrastructure.dependencies import get_business_service
from scenario_manager.presentation.api.v1.streaming import snapshot_response

router = APIRouter(prefix="/businesses", tags=["Businesses"])


def _to_response(business: Business) -> BusinessResponse:
    return BusinessResponse.model_validate(business, from_attributes=True)


@router.get("", response_model=list[BusinessResponse])
async def list_businesses(
    service: BusinessService = Depends(get_business_service),
) -> list[BusinessResponse]:
    """All businesses, alphabetically."""
    businesses = await service.list_businesses()
    return [_to_response(b) for b in businesses]


@router.get("/stream")
async def stream_businesses(
    service: BusinessService = Depends(get_business_service),
) -> StreamingResponse:
    """SSE stream of the full business list, re-sent on every change."""
    stream = SnapshotStream()
    subscription = await service.subscribe_businesses(
        lambda businesses: stream.push(
            [_to_response(b).model_dump(mode="json") for b in businesses]
        )
    )
    return snapshot_response(stream, subscription)


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    data: BusinessCreate,
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    business = await service.create_business(data)
    return _to_response(business)


@router.patch("/{business_id}", response_model=RecordPatchResponse)
async def rename_business(
    business_id: str,
    data: BusinessUpdate,
    service: BusinessService = Depends(get_business_service),
) -> RecordPatchResponse:
    try:
        patch = await service.rename_business(business_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordPatchResponse.model_validate(patch, from_attributes=True)


@router.delete("/{business_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_business(
    business_id: str,
    service: BusinessService = Depends(get_business_service),
) -> None:
    """Delete a business together with its scenarios and comments (unless cascading is off)."""
    if not await service.delete_business(business_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Business '{business_id}' could not be deleted",
        )
