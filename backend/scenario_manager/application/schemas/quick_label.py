"""Pydantic DTOs for quick labels and the label insertion helper."""

from pydantic import BaseModel, Field


class QuickLabelCreate(BaseModel):
    """Schema for adding a quick label. Without ``order`` it goes last."""

    label: str = Field(..., min_length=1, max_length=50, examples=["ザキ"])
    order: int | None = None


class QuickLabelUpdate(BaseModel):
    """Schema for editing a quick label — all fields optional."""

    label: str | None = Field(None, min_length=1, max_length=50)
    order: int | None = None


class QuickLabelResponse(BaseModel):
    id: str
    label: str
    order: int

    model_config = {"from_attributes": True}


class LabelInsertRequest(BaseModel):
    """Insert ``label`` into ``text`` over the selection [start, end)."""

    text: str
    label: str = Field(..., min_length=1, max_length=50)
    start: int = Field(..., ge=0)
    end: int | None = Field(None, ge=0)


class LabelInsertResponse(BaseModel):
    text: str
    cursor: int
