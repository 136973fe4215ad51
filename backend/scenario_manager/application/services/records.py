"""Document ↔ entity mapping and the per-collection data-access objects."""

from dataclasses import dataclass

from scenario_manager.application.collections import (
    COLLECTION_BUSINESSES,
    COLLECTION_COMMENTS,
    COLLECTION_QUICK_LABELS,
    COLLECTION_SCENARIOS,
    FIELD_BUSINESS_ID,
    FIELD_CREATED_AT,
    FIELD_ORDER,
    FIELD_SCENARIO_ID,
)
from scenario_manager.application.interfaces import ID_FIELD, Document, DocumentStore
from scenario_manager.application.services.record_collection import RecordCollection
from scenario_manager.domain.entities import (
    Business,
    Comment,
    QuickLabel,
    Scenario,
    ScenarioStatus,
)


def _text(document: Document, field: str) -> str:
    value = document.get(field)
    return "" if value is None else str(value)


def _order(document: Document) -> int:
    """Stored order as an int; missing or non-numeric values read as 0."""
    try:
        return int(document.get(FIELD_ORDER) or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def business_from_document(document: Document) -> Business:
    return Business(id=document[ID_FIELD], name=_text(document, "name"))


def scenario_from_document(document: Document) -> Scenario:
    """Map a stored scenario; documents written before ``status`` existed read as writing."""
    return Scenario(
        id=document[ID_FIELD],
        title=_text(document, "title"),
        content=_text(document, "content"),
        business_id=_text(document, FIELD_BUSINESS_ID),
        created_at=_text(document, FIELD_CREATED_AT),
        confirmed=bool(document.get("confirmed", False)),
        url=document.get("url"),
        status=ScenarioStatus.parse(document.get("status")),
    )


def comment_from_document(document: Document) -> Comment:
    return Comment(
        id=document[ID_FIELD],
        scenario_id=_text(document, FIELD_SCENARIO_ID),
        author=_text(document, "author"),
        text=_text(document, "text"),
        created_at=_text(document, FIELD_CREATED_AT),
    )


def quick_label_from_document(document: Document) -> QuickLabel:
    return QuickLabel(
        id=document[ID_FIELD],
        label=_text(document, "label"),
        order=_order(document),
    )


def scenario_to_document(scenario: Scenario) -> Document:
    document: Document = {
        "title": scenario.title,
        "content": scenario.content,
        FIELD_BUSINESS_ID: scenario.business_id,
        FIELD_CREATED_AT: scenario.created_at,
        "confirmed": scenario.confirmed,
        "status": scenario.status.value,
    }
    if scenario.url is not None:
        document["url"] = scenario.url
    return document


def comment_to_document(comment: Comment) -> Document:
    return {
        FIELD_SCENARIO_ID: comment.scenario_id,
        "author": comment.author,
        "text": comment.text,
        FIELD_CREATED_AT: comment.created_at,
    }


@dataclass
class RecordCollections:
    """The four collections of the application, bound to one store."""

    businesses: RecordCollection[Business]
    scenarios: RecordCollection[Scenario]
    comments: RecordCollection[Comment]
    quick_labels: RecordCollection[QuickLabel]

    @classmethod
    def for_store(cls, store: DocumentStore) -> "RecordCollections":
        return cls(
            # Businesses carry no timestamp; list them alphabetically.
            businesses=RecordCollection(
                store,
                COLLECTION_BUSINESSES,
                to_entity=business_from_document,
                order_by="name",
            ),
            scenarios=RecordCollection(
                store,
                COLLECTION_SCENARIOS,
                to_entity=scenario_from_document,
                order_by=FIELD_CREATED_AT,
                descending=True,
                immutable_fields=(FIELD_CREATED_AT,),
            ),
            comments=RecordCollection(
                store,
                COLLECTION_COMMENTS,
                to_entity=comment_from_document,
                order_by=FIELD_CREATED_AT,
                immutable_fields=(FIELD_CREATED_AT,),
            ),
            quick_labels=RecordCollection(
                store,
                COLLECTION_QUICK_LABELS,
                to_entity=quick_label_from_document,
                order_by=FIELD_ORDER,
            ),
        )
