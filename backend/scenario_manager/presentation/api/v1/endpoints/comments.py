"""Comment endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from scenario_manager.application.schemas import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    RecordPatchResponse,
)
from scenario_manager.application.services import CommentService, SnapshotStream
from scenario_manager.domain.entities import Comment
from scenario_manager.domain.exceptions import EntityNotFoundError
from scenario_manager.infrastructure.dependencies import get_comment_service
from scenario_manager.presentation.api.v1.streaming import snapshot_response

router = APIRouter(tags=["Comments"])


def _to_response(comment: Comment) -> CommentResponse:
    return CommentResponse.model_validate(comment, from_attributes=True)


@router.get("/scenarios/{scenario_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    scenario_id: str,
    service: CommentService = Depends(get_comment_service),
) -> list[CommentResponse]:
    """Comments on a scenario, oldest first."""
    comments = await service.list_comments(scenario_id)
    return [_to_response(c) for c in comments]


@router.get("/scenarios/{scenario_id}/comments/stream")
async def stream_comments(
    scenario_id: str,
    service: CommentService = Depends(get_comment_service),
) -> StreamingResponse:
    stream = SnapshotStream()
    subscription = await service.subscribe_comments(
        scenario_id,
        lambda comments: stream.push([_to_response(c).model_dump(mode="json") for c in comments]),
    )
    return snapshot_response(stream, subscription)


@router.post(
    "/scenarios/{scenario_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    scenario_id: str,
    data: CommentCreate,
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    comment = await service.add_comment(scenario_id, data)
    return _to_response(comment)


@router.get("/comments/counts", response_model=dict[str, int])
async def comment_counts(
    service: CommentService = Depends(get_comment_service),
) -> dict[str, int]:
    """Number of comments per scenario id."""
    comments = await service.list_comments()
    return CommentService.count_by_scenario(comments)


@router.patch("/comments/{comment_id}", response_model=RecordPatchResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    service: CommentService = Depends(get_comment_service),
) -> RecordPatchResponse:
    try:
        patch = await service.update_comment(comment_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return RecordPatchResponse.model_validate(patch, from_attributes=True)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    service: CommentService = Depends(get_comment_service),
) -> None:
    if not await service.delete_comment(comment_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Comment '{comment_id}' could not be deleted",
        )
