"""Persistence-specific exceptions."""


class PersistenceError(Exception):
    """Base exception for all persistence errors.

    Raised as-is when a store call fails; callers treat it as retryable.
    """


class DocumentNotFoundError(PersistenceError):
    """Raised when a Firestore document does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class EventNotFoundError(DocumentNotFoundError):
    """Raised when no event matches a slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("events", slug)
