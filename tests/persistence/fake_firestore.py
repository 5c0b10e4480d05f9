"""In-memory Firestore fake for repository unit tests.

Covers the slice of the google-cloud-firestore AsyncClient the repositories
use: documents, subcollections, equality queries, ``add`` and write batches.
Documents live in ``FakeFirestoreClient.store`` keyed by full path, e.g.
``submissions/abc/segments/0``.

Set ``fail_writes`` or ``fail_batches`` to make writes raise
``ServiceUnavailable``, as an unreachable backend would, or set
``write_error`` to raise a specific Google API error (e.g. a ``RetryError``
timeout) from every write.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from google.api_core.exceptions import ServiceUnavailable


def _new_id() -> str:
    return uuid.uuid4().hex[:20]


@dataclass
class FakeSnapshot:
    id: str
    data: dict[str, Any] | None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> dict[str, Any]:
        if self.data is None:
            raise ValueError(f"Document {self.id} does not exist")
        return dict(self.data)


class FakeDocument:
    def __init__(self, client: "FakeFirestoreClient", path: str):
        self._client = client
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    async def get(self) -> FakeSnapshot:
        return FakeSnapshot(self.id, self._client.store.get(self.path))

    async def set(self, data: dict, merge: bool = False) -> None:
        self._client.check_write()
        if merge:
            self._client.store.setdefault(self.path, {}).update(data)
        else:
            self._client.store[self.path] = dict(data)

    async def delete(self) -> None:
        self._client.check_write()
        self._client.store.pop(self.path, None)

    def collection(self, name: str) -> "FakeCollection":
        return FakeCollection(self._client, f"{self.path}/{name}")


class FakeCollection:
    """A collection path plus optional equality filters (``where`` chains)."""

    def __init__(
        self,
        client: "FakeFirestoreClient",
        path: str,
        filters: tuple[tuple[str, Any], ...] = (),
    ):
        self._client = client
        self._path = path
        self._filters = filters

    def document(self, doc_id: str | None = None) -> FakeDocument:
        return FakeDocument(self._client, f"{self._path}/{doc_id or _new_id()}")

    async def add(self, data: dict) -> tuple[None, FakeDocument]:
        self._client.check_write()
        doc = self.document()
        self._client.store[doc.path] = dict(data)
        return None, doc

    def where(self, field: str, op: str, value: Any) -> "FakeCollection":
        if op != "==":
            raise NotImplementedError(f"Fake queries only support '==', got {op!r}")
        return FakeCollection(self._client, self._path, self._filters + ((field, value),))

    async def stream(self):
        prefix = self._path + "/"
        for path, data in sorted(self._client.store.items()):
            doc_id = path[len(prefix):]
            # Direct children only; nested subcollection documents are skipped
            if not path.startswith(prefix) or "/" in doc_id:
                continue
            if all(data.get(field) == value for field, value in self._filters):
                yield FakeSnapshot(doc_id, dict(data))


class FakeBatch:
    def __init__(self, client: "FakeFirestoreClient"):
        self._client = client
        self._writes: list[tuple[str, dict]] = []

    def set(self, doc: FakeDocument, data: dict, merge: bool = False) -> None:
        self._writes.append((doc.path, dict(data)))

    async def commit(self) -> None:
        if self._client.fail_batches:
            raise ServiceUnavailable("batch commit unavailable")
        self._client.check_write()
        # All or nothing, like a real batch
        for path, data in self._writes:
            self._client.store[path] = data


class FakeFirestoreClient:
    """Drop-in replacement for ``google.cloud.firestore.AsyncClient``."""

    def __init__(self):
        self.store: dict[str, dict] = {}
        self.fail_writes = False
        self.fail_batches = False
        self.write_error: Exception | None = None

    def check_write(self) -> None:
        if self.write_error is not None:
            raise self.write_error
        if self.fail_writes:
            raise ServiceUnavailable("write unavailable")

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def batch(self) -> FakeBatch:
        return FakeBatch(self)
