"""Normalization of Firestore document references.

References arrive in three encodings depending on who wrote the document:
a plain path or id string (``"sessions/abc123"``), a ``DocumentReference``
(anything with an ``id``), or a serialized object with only a ``path``.
``resolve_reference`` is called once at the ingestion boundary so that
downstream code only ever sees ``Resolved`` or ``Unresolved``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Resolved:
    """A reference whose target document id is known."""

    id: str


@dataclass(frozen=True)
class Unresolved:
    """A reference that could not be turned into a document id."""

    raw: Any = None


ResolvedReference = Union[Resolved, Unresolved]


def _last_segment(path: str) -> str:
    return path.rstrip("/").split("/")[-1]


def _get(raw: Any, key: str) -> Any:
    if isinstance(raw, dict):
        return raw.get(key)
    return getattr(raw, key, None)


def resolve_reference(raw: Any) -> ResolvedReference:
    """Resolve a reference in any supported encoding to a document id."""
    if raw is None:
        return Unresolved()

    if isinstance(raw, str):
        doc_id = _last_segment(raw)
        return Resolved(doc_id) if doc_id else Unresolved(raw)

    doc_id = _get(raw, "id")
    if isinstance(doc_id, str) and doc_id:
        return Resolved(doc_id)

    path = _get(raw, "path")
    if isinstance(path, str) and path:
        doc_id = _last_segment(path)
        if doc_id:
            return Resolved(doc_id)

    return Unresolved(raw)


def reference_id(raw: Any, default: str | None = None) -> str | None:
    """Return the resolved id of a reference, or ``default``."""
    resolved = resolve_reference(raw)
    if isinstance(resolved, Resolved):
        return resolved.id
    return default
