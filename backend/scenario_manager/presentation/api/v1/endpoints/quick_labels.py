"""Quick label endpoints and the label insertion helper."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from scenario_manager.application.schemas import (
    LabelInsertRequest,
    LabelInsertResponse,
    QuickLabelCreate,
    QuickLabelResponse,
    QuickLabelUpdate,
    RecordPatchResponse,
)
from scenario_manager.application.services import QuickLabelService, SnapshotStream
from scenario_manager.domain.entities import QuickLabel, insert_quick_label
from scenario_manager.domain.exceptions import EntityNotFoundError
from scenario_manager.infrastructure.dependencies import get_quick_label_service
from scenario_manager.presentation.api.v1.streaming import snapshot_response

router = APIRouter(prefix="/quick-labels", tags=["Quick Labels"])


def _to_response(label: QuickLabel) -> QuickLabelResponse:
    return QuickLabelResponse.model_validate(label, from_attributes=True)


@router.get("", response_model=list[QuickLabelResponse])
async def list_labels(
    service: QuickLabelService = Depends(get_quick_label_service),
) -> list[QuickLabelResponse]:
    labels = await service.list_labels()
    return [_to_response(label) for label in labels]


@router.get("/stream")
async def stream_labels(
    service: QuickLabelService = Depends(get_quick_label_service),
) -> StreamingResponse:
    """SSE stream of the quick labels. An empty collection is seeded with the defaults once."""
    stream = SnapshotStream()
    feed = await service.open_feed(
        lambda labels: stream.push([_to_response(label).model_dump(mode="json") for label in labels])
    )
    return snapshot_response(stream, feed.subscription)


@router.post("", response_model=QuickLabelResponse, status_code=status.HTTP_201_CREATED)
async def add_label(
    data: QuickLabelCreate,
    service: QuickLabelService = Depends(get_quick_label_service),
) -> QuickLabelResponse:
    label = await service.add_label(data)
    return _to_response(label)


@router.post("/insert", response_model=LabelInsertResponse)
async def insert_label(data: LabelInsertRequest) -> LabelInsertResponse:
    """Insert ``<label>：`` into the text over the current selection."""
    text, cursor = insert_quick_label(data.text, data.label, data.start, data.end)
    return LabelInsertResponse(text=text, cursor=cursor)


@router.patch("/{label_id}", response_model=RecordPatchResponse)
async def update_label(
    label_id: str,
    data: QuickLabelUpdate,
    service: QuickLabelService = Depends(get_quick_label_service),
) -> RecordPatchResponse:
    try:
        patch = await service.update_label(label_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordPatchResponse.model_validate(patch, from_attributes=True)


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(
    label_id: str,
    service: QuickLabelService = Depends(get_quick_label_service),
) -> None:
    if not await service.delete_label(label_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Quick label '{label_id}' could not be deleted",
        )
