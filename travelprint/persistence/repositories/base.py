"""Generic async Firestore repository for top-level collections."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, Type, TypeVar

from google.api_core.exceptions import GoogleAPIError

from travelprint.contracts.common import FirestoreModel
from travelprint.persistence.errors import PersistenceError
from travelprint.persistence.firestore_client import get_firestore_client

T = TypeVar("T", bound=FirestoreModel)


@contextmanager
def store_call(action: str) -> Iterator[None]:
    """Translate Google API failures raised inside the block into ``PersistenceError``."""
    try:
        yield
    except GoogleAPIError as exc:
        raise PersistenceError(f"{action} failed: {exc}") from exc


class BaseRepository(Generic[T]):
    """CRUD for a root Firestore collection.

    Serialization relies entirely on the contract's ``to_firestore()``
    and ``from_firestore()`` methods, with no extra mapping layer.
    """

    def __init__(self, model_class: Type[T], collection_name: str):
        self._model_class = model_class
        self._collection_name = collection_name

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection_ref(self):
        db = get_firestore_client()
        return db.collection(self._collection_name)

    def _hydrate(self, doc: Any) -> T:
        data = doc.to_dict()
        data["id"] = doc.id
        return self._model_class.from_firestore(data)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, doc_id: str) -> T | None:
        """Fetch a single document by ID. Returns *None* if missing."""
        with store_call(f"get {self._collection_name}/{doc_id}"):
            doc = await self._collection_ref().document(doc_id).get()
        if not doc.exists:
            return None
        return self._hydrate(doc)

    async def list_all(self) -> list[T]:
        """Stream every document in the collection."""
        results: list[T] = []
        with store_call(f"list {self._collection_name}"):
            async for doc in self._collection_ref().stream():
                results.append(self._hydrate(doc))
        return results

    async def find_by(self, field: str, value: Any) -> list[T]:
        """Return every document whose *field* equals *value*."""
        query = self._collection_ref().where(field, "==", value)
        results: list[T] = []
        with store_call(f"query {self._collection_name}.{field}"):
            async for doc in query.stream():
                results.append(self._hydrate(doc))
        return results

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, entity: T) -> str:
        """Create a document and return its ID.

        A non-empty ``id`` on the entity is used as the document ID;
        otherwise Firestore auto-generates one.
        """
        data = entity.to_firestore()
        doc_id = data.pop("id", None) or getattr(entity, "id", None)
        with store_call(f"create in {self._collection_name}"):
            if doc_id:
                await self._collection_ref().document(doc_id).set(data)
                return doc_id
            ref = await self._collection_ref().add(data)
        return ref[1].id  # (write_result, doc_ref) tuple

    async def update(self, doc_id: str, entity: T) -> None:
        """Partial update (merge) of an existing document."""
        data = entity.to_firestore()
        data.pop("id", None)
        with store_call(f"update {self._collection_name}/{doc_id}"):
            await self._collection_ref().document(doc_id).set(data, merge=True)

    async def delete(self, doc_id: str) -> None:
        """Delete a document."""
        with store_call(f"delete {self._collection_name}/{doc_id}"):
            await self._collection_ref().document(doc_id).delete()
