from .business import BusinessCreate, BusinessUpdate, BusinessResponse
from .comment import CommentCreate, CommentUpdate, CommentResponse
from .quick_label import (
    QuickLabelCreate,
    QuickLabelUpdate,
    QuickLabelResponse,
    LabelInsertRequest,
    LabelInsertResponse,
)
from .record_patch import RecordPatchResponse
from .scenario import (
    ConfirmationResponse,
    ConfirmationToggle,
    ScenarioCreate,
    ScenarioResponse,
    ScenarioStatusResponse,
    ScenarioUpdate,
    StatusBadgeSchema,
)

__all__ = [
    "BusinessCreate",
    "BusinessUpdate",
    "BusinessResponse",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "QuickLabelCreate",
    "QuickLabelUpdate",
    "QuickLabelResponse",
    "LabelInsertRequest",
    "LabelInsertResponse",
    "RecordPatchResponse",
    "ConfirmationResponse",
    "ConfirmationToggle",
    "ScenarioCreate",
    "ScenarioResponse",
    "ScenarioStatusResponse",
    "ScenarioUpdate",
    "StatusBadgeSchema",
]
