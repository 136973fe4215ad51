"""Acknowledgement value returned by updates."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RecordPatch:
    """The id of an updated record plus exactly the fields that were sent.

    This is an immediate hint for the caller, not the merged record: the
    authoritative state arrives through the record's live subscription.
    Field names are the stored (camelCase) document names.
    """

    id: str
    changes: dict[str, Any] = field(default_factory=dict)
