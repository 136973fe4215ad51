"""Pydantic DTOs for the Comment feature."""

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Schema for adding a comment to a scenario."""

    author: str = Field(..., min_length=1, max_length=100, examples=["元田"])
    text: str = Field(..., min_length=1, examples=["Second line needs a pause."])


class CommentUpdate(BaseModel):
    """Only the text of a comment can be edited."""

    text: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    scenario_id: str
    author: str
    text: str
    created_at: str

    model_config = {"from_attributes": True}
