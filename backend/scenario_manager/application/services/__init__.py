from .subscription import Subscription
from .record_collection import RecordCollection
from .records import RecordCollections
from .cascade_policy import CascadePolicy
from .business_service import BusinessService
from .scenario_service import ScenarioService
from .comment_service import CommentService
from .quick_label_service import QuickLabelService, QuickLabelFeed
from .migration_service import MigrationService, MigrationResult
from .search import search_scenarios
from .snapshot_stream import SnapshotStream

__all__ = [
    "Subscription",
    "RecordCollection",
    "RecordCollections",
    "CascadePolicy",
    "BusinessService",
    "ScenarioService",
    "CommentService",
    "QuickLabelService",
    "QuickLabelFeed",
    "MigrationService",
    "MigrationResult",
    "search_scenarios",
    "SnapshotStream",
]
