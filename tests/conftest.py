"""Common utilities for tests."""

from typing import Any, Optional
from unittest.mock import MagicMock

from mockfirestore import CollectionReference, MockFirestore, Query


class FakeSnapshot:
    """A minimal document snapshot for MagicMock-based Firestore tests."""

    def __init__(
        self, doc_id: str, data: Optional[dict[str, Any]] = None, exists: bool = True
    ) -> None:
        self.id = doc_id
        self._data = data
        self.exists = exists and data is not None

    def to_dict(self) -> Optional[dict[str, Any]]:
        return dict(self._data) if self._data is not None else None


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and get_all."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    if not hasattr(MockFirestore, "get_all"):

        def get_all(self: Any, references: Any) -> Any:
            for reference in references:
                yield reference.get()

        MockFirestore.get_all = get_all


class FakeWatchRef:
    """A collection, document or query path that records its watches."""

    def __init__(self, db: "FakeWatchDb", path: str) -> None:
        self.db = db
        self.path = path

    def collection(self, name: str) -> "FakeWatchRef":
        return self.db.ref(f"{self.path}/{name}")

    def document(self, name: str) -> "FakeWatchRef":
        return self.db.ref(f"{self.path}/{name}")

    def order_by(self, *args: Any, **kwargs: Any) -> "FakeWatchRef":
        return self

    def on_snapshot(self, callback: Any) -> Any:
        if self.db.fail_on == self.path:
            raise RuntimeError("permission denied")
        watch = MagicMock()
        self.db.watches.append((self.path, callback, watch))
        return watch


class FakeWatchDb:
    """Stands in for a Firestore client whose snapshot callbacks tests fire."""

    def __init__(self) -> None:
        self.refs: dict[str, FakeWatchRef] = {}
        self.watches: list[tuple[str, Any, MagicMock]] = []
        self.fail_on: Optional[str] = None

    def collection(self, name: str) -> FakeWatchRef:
        return self.ref(name)

    def ref(self, path: str) -> FakeWatchRef:
        return self.refs.setdefault(path, FakeWatchRef(self, path))

    def callback(self, path: str) -> Any:
        return [cb for p, cb, _ in self.watches if p == path][-1]
