from .business import Business
from .comment import Comment
from .quick_label import QuickLabel, insert_quick_label
from .record_patch import RecordPatch
from .scenario import Scenario, ScenarioStatus, StatusBadge, status_badge, status_label
from .timestamps import iso_timestamp

__all__ = [
    "Business",
    "Comment",
    "QuickLabel",
    "insert_quick_label",
    "RecordPatch",
    "Scenario",
    "ScenarioStatus",
    "StatusBadge",
    "status_badge",
    "status_label",
    "iso_timestamp",
]
