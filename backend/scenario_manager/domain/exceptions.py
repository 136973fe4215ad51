"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class StoreError(Exception):
    """Raised when the document store rejects or fails an operation.

    Store-agnostic — adapters translate their client library errors into this.
    """

    def __init__(self, operation: str, collection: str, message: str):
        self.operation = operation
        self.collection = collection
        self.message = message
        super().__init__(f"[{collection}] {operation} failed: {message}")


class MissingIndexError(StoreError):
    """Raised when a filtered+ordered query needs a composite index the store lacks."""
