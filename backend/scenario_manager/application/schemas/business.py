"""Pydantic DTOs (Data Transfer Objects) for the Business feature."""

from pydantic import BaseModel, Field


class BusinessCreate(BaseModel):
    """Schema for creating a new business."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Bakery Tanaka"])


class BusinessUpdate(BaseModel):
    """Schema for renaming a business."""

    name: str = Field(..., min_length=1, max_length=255)


class BusinessResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    name: str

    model_config = {"from_attributes": True}
