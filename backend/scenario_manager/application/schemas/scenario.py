"""Pydantic DTOs for the Scenario feature."""

from pydantic import BaseModel, Field, computed_field

from scenario_manager.domain.entities import ScenarioStatus


class ScenarioCreate(BaseModel):
    """Schema for creating a new scenario under a business."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Morning rush"])
    content: str = Field(..., min_length=1, examples=["ザキ：おはようございます"])
    url: str | None = Field(None, max_length=2048)


class ScenarioUpdate(BaseModel):
    """Schema for patching a scenario — only the fields sent are written.

    ``createdAt`` is deliberately absent: it never changes after creation.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    url: str | None = Field(None, max_length=2048)
    status: ScenarioStatus | None = None
    confirmed: bool | None = None


class ConfirmationToggle(BaseModel):
    """The confirmation state the client currently displays."""

    current: bool


class ConfirmationResponse(BaseModel):
    id: str
    confirmed: bool


class StatusBadgeSchema(BaseModel):
    background: str
    foreground: str


class ScenarioStatusResponse(BaseModel):
    """One status with its display label and colours."""

    value: ScenarioStatus
    label: str
    badge: StatusBadgeSchema


class ScenarioResponse(BaseModel):
    """Schema returned to the client, with status presentation resolved."""

    id: str
    title: str
    content: str
    business_id: str
    created_at: str
    confirmed: bool
    url: str | None = None
    status: ScenarioStatus

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def status_label(self) -> str:
        return self.status.label

    @computed_field
    @property
    def status_badge(self) -> StatusBadgeSchema:
        badge = self.status.badge
        return StatusBadgeSchema(background=badge.background, foreground=badge.foreground)
