"""Pydantic DTO for update acknowledgements."""

from typing import Any

from pydantic import BaseModel


class RecordPatchResponse(BaseModel):
    """The updated record's id and the stored fields that were written.

    Not the merged record — clients take the final state from the stream.
    """

    id: str
    changes: dict[str, Any]

    model_config = {"from_attributes": True}
