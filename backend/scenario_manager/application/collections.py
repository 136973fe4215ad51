"""Document store collection names and legacy local-cache keys (schema-in-code).

The document store has no DDL: collections come into existence on first
write. These constants are the single source of truth for the stored
layout; field names inside documents are camelCase.
"""

COLLECTION_BUSINESSES = "businesses"
COLLECTION_SCENARIOS = "scenarios"
COLLECTION_COMMENTS = "comments"
COLLECTION_QUICK_LABELS = "quickLabels"

# Foreign keys / sort keys
FIELD_BUSINESS_ID = "businessId"
FIELD_SCENARIO_ID = "scenarioId"
FIELD_CREATED_AT = "createdAt"
FIELD_ORDER = "order"

# Composite indexes the compound listing queries rely on:
# (collection, equality field, order field)
COMPOSITE_INDEXES = (
    (COLLECTION_SCENARIOS, FIELD_BUSINESS_ID, FIELD_CREATED_AT),
    (COLLECTION_COMMENTS, FIELD_SCENARIO_ID, FIELD_CREATED_AT),
)

# Pre-migration local cache: key -> target collection
LEGACY_CACHE_KEYS = {
    "cosmic_businesses": COLLECTION_BUSINESSES,
    "cosmic_scenarios": COLLECTION_SCENARIOS,
    "cosmic_comments": COLLECTION_COMMENTS,
}
