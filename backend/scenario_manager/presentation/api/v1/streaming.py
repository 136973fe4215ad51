"""Server-Sent Events plumbing shared by the live list endpoints."""

from fastapi.responses import StreamingResponse

from scenario_manager.application.services import SnapshotStream, Subscription

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def snapshot_response(stream: SnapshotStream, subscription: Subscription) -> StreamingResponse:
    """Stream ``snapshot`` events until the client disconnects, then release the subscription."""
    return StreamingResponse(
        stream.events(subscription),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
