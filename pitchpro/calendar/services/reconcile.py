"""Merge ``sessionCalendar`` entries with their session documents.

Calendar documents are keyed ``{pitchId}:{month}:{year}`` and hold a
``session_entries`` list. Each entry is a lightweight copy of a booking that
points at the full ``sessions/{id}`` document through ``sessionRef``.
Recurring bookings put the same session in several entries, so the merged
list is deduplicated by session id.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from pitchpro.constants import (
    SESSION_CALENDAR_COLLECTION,
    SESSION_FETCH_BATCH_SIZE,
    SESSIONS_COLLECTION,
)
from pitchpro.core.dates import coerce_datetime, end_of_day, now_local
from pitchpro.core.references import (
    Resolved,
    ResolvedReference,
    reference_id,
    resolve_reference,
)
from pitchpro.errors import NotFoundError
from pitchpro.organization.models import Pitch

from ..models import SessionRecord, TimeOfDay
from .week import calendar_document_ids, months_between, week_end

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

DEFAULT_START = TimeOfDay(0, 0)
DEFAULT_END = TimeOfDay(1, 0)


@dataclass(frozen=True)
class CalendarEntry:
    """One ``session_entries`` element with where it came from."""

    doc_id: str
    pitch_id: str
    index: int
    session_ref: ResolvedReference
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def session_id(self) -> Optional[str]:
        if isinstance(self.session_ref, Resolved):
            return self.session_ref.id
        return None

    @property
    def key(self) -> str:
        """Session id, or ``{docId}-{index}`` when the reference is unresolved."""
        return self.session_id or f"{self.doc_id}-{self.index}"


def extract_entries(calendar_docs: Iterable[Any]) -> list[CalendarEntry]:
    """Flatten calendar document snapshots into entries.

    Session references are resolved here, once.
    """
    entries = []
    for doc in calendar_docs:
        if not getattr(doc, "exists", True):
            continue
        data = doc.to_dict() or {}
        pitch_id = doc.id.split(":")[0]
        for index, raw in enumerate(data.get("session_entries") or []):
            if not isinstance(raw, dict):
                continue
            entries.append(
                CalendarEntry(
                    doc_id=doc.id,
                    pitch_id=pitch_id,
                    index=index,
                    session_ref=resolve_reference(raw.get("sessionRef")),
                    data=raw,
                )
            )
    return entries


def unique_session_ids(entries: Iterable[CalendarEntry]) -> list[str]:
    """Resolved session ids in first-seen order, without repeats."""
    return list(
        dict.fromkeys(entry.session_id for entry in entries if entry.session_id)
    )


def fetch_calendar_documents(db: Client, doc_ids: Sequence[str]) -> list[Any]:
    """Point-read exactly the calendar documents named by ``doc_ids``."""
    if not doc_ids:
        return []
    collection = db.collection(SESSION_CALENDAR_COLLECTION)
    refs = [collection.document(doc_id) for doc_id in doc_ids]
    return [doc for doc in db.get_all(refs) if doc.exists]


def fetch_sessions(
    db: Client,
    session_ids: Sequence[str],
    batch_size: int = SESSION_FETCH_BATCH_SIZE,
) -> dict[str, dict[str, Any]]:
    """Fetch session documents by id, ``batch_size`` reads at a time.

    Reads within a batch run concurrently and the whole batch is awaited
    before the next starts. A failed read is logged and left out of the
    result, the same as a missing document.
    """
    collection = db.collection(SESSIONS_COLLECTION)

    def fetch_one(session_id: str) -> tuple[str, Optional[dict[str, Any]], Any]:
        try:
            doc = collection.document(session_id).get()
        except Exception as e:
            return session_id, None, e
        if not doc.exists:
            return session_id, None, None
        return session_id, {**(doc.to_dict() or {}), "id": session_id}, None

    cache: dict[str, dict[str, Any]] = {}
    for start in range(0, len(session_ids), batch_size):
        batch = session_ids[start : start + batch_size]
        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            results = list(pool.map(fetch_one, batch))
        for session_id, data, error in results:
            if error is not None:
                logger.error(f"Error fetching session {session_id}: {error}")
            elif data is not None:
                cache[session_id] = data
    return cache


def parse_time(
    raw: Any, default: TimeOfDay, tz: datetime.tzinfo | None = None
) -> TimeOfDay:
    """Read a stored time as a timestamp or as ``{hour, minute}``."""
    if isinstance(raw, datetime.datetime):
        local = coerce_datetime(raw, tz)
        return TimeOfDay(local.hour, local.minute)
    if isinstance(raw, dict) and isinstance(raw.get("hour"), int):
        return TimeOfDay(raw["hour"], raw.get("minute") or 0)
    return default


def _owner_name(data: Mapping[str, Any]) -> Optional[str]:
    owner = data.get("session_owner") or data.get("sessionOwner") or {}
    if isinstance(owner, dict) and owner.get("name"):
        return owner["name"]
    return data.get("ownerName") or None


def _collected_amount(data: Mapping[str, Any]) -> Optional[float]:
    for key in ("collected_amount", "collectedAmount"):
        if data.get(key) is not None:
            return data[key]
    return None


def build_session_record(
    entry: CalendarEntry,
    session: Optional[Mapping[str, Any]],
    pitch_names: Mapping[str, str],
    organization_id: str,
    tz: datetime.tzinfo | None = None,
    now: Optional[datetime.datetime] = None,
) -> SessionRecord:
    """Merge one calendar entry with its cached session document.

    Session-level values win; entry-level values fill in when the session
    lookup missed.
    """
    data = entry.data
    session = session or {}
    session_time = data.get("sessionTime") or {}
    owner = _owner_name(session) or _owner_name(data) or "Unknown"
    amount = _collected_amount(session)
    if amount is None:
        amount = _collected_amount(data)

    owner_ref = session.get("session_owner") or {}
    return SessionRecord(
        id=entry.key,
        session_date=coerce_datetime(data.get("sessionDate"), tz)
        or now
        or now_local(tz),
        start_time=parse_time(session_time.get("startTime"), DEFAULT_START, tz),
        end_time=parse_time(session_time.get("endTime"), DEFAULT_END, tz),
        owner_name=owner,
        owner_ref=reference_id(owner_ref.get("userRef"), "") or ""
        if isinstance(owner_ref, dict)
        else "",
        pitch_name=data.get("pitchName")
        or pitch_names.get(entry.pitch_id)
        or "Unknown Pitch",
        organization_ref=organization_id,
        session_type=session.get("session_type")
        or session.get("sessionType")
        or data.get("sessionType")
        or "Session",
        status=session.get("status") or data.get("status") or "Confirmed",
        collected_amount=amount,
        reference_id=entry.key,
    )


def reconcile_sessions(
    entries: Sequence[CalendarEntry],
    session_cache: Mapping[str, Mapping[str, Any]],
    pitch_names: Mapping[str, str],
    organization_id: str,
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    tz: datetime.tzinfo | None = None,
    now: Optional[datetime.datetime] = None,
) -> list[SessionRecord]:
    """Build, date-filter, deduplicate and sort session records.

    ``end_date`` is inclusive of its whole day. A recurring booking has one
    entry per occurrence under the same session id; the range is applied
    first so the occurrence inside it is the one kept.
    """
    now = now or now_local(tz)
    end_bound = end_of_day(end_date) if end_date else None

    records = []
    seen: set[str] = set()
    for entry in entries:
        if entry.key in seen:
            continue

        session = session_cache.get(entry.session_id) if entry.session_id else None
        record = build_session_record(
            entry, session, pitch_names, organization_id, tz, now
        )
        if start_date and record.session_date < start_date:
            continue
        if end_bound and record.session_date > end_bound:
            continue
        seen.add(entry.key)
        records.append(record)

    records.sort(key=lambda record: record.session_date, reverse=True)
    return records


def load_sessions(
    db: Client,
    organization_id: str,
    pitches: Sequence[Pitch],
    start_date: datetime.datetime,
    end_date: datetime.datetime,
    tz: datetime.tzinfo | None = None,
    batch_size: int = SESSION_FETCH_BATCH_SIZE,
) -> list[SessionRecord]:
    """Reconcile every session of ``pitches`` between two dates."""
    if not pitches:
        return []

    doc_ids = calendar_document_ids(
        [pitch.id for pitch in pitches], months_between(start_date, end_date)
    )
    logger.info(f"Fetching {len(doc_ids)} calendar documents for {organization_id}")
    entries = extract_entries(fetch_calendar_documents(db, doc_ids))

    session_ids = unique_session_ids(entries)
    session_cache = fetch_sessions(db, session_ids, batch_size)
    logger.info(
        f"Reconciling {len(entries)} calendar entries "
        f"({len(session_cache)}/{len(session_ids)} sessions fetched)"
    )

    return reconcile_sessions(
        entries,
        session_cache,
        {pitch.id: pitch.name for pitch in pitches},
        organization_id,
        start_date,
        end_date,
        tz,
    )


def load_week_sessions(
    db: Client,
    organization_id: str,
    pitches: Sequence[Pitch],
    week_start: datetime.datetime,
    tz: datetime.tzinfo | None = None,
    batch_size: int = SESSION_FETCH_BATCH_SIZE,
) -> list[SessionRecord]:
    """Reconcile the sessions visible in the week starting at ``week_start``.

    Only the one or two months the week overlaps are read.
    """
    return load_sessions(
        db,
        organization_id,
        pitches,
        week_start,
        week_end(week_start),
        tz,
        batch_size,
    )


def session_from_document(
    session_id: str,
    data: Mapping[str, Any],
    tz: datetime.tzinfo | None = None,
    now: Optional[datetime.datetime] = None,
) -> SessionRecord:
    """Normalize a ``sessions/{id}`` document into a record."""
    session_time = data.get("session_time") or data.get("sessionTime") or {}
    pitch = data.get("pitch") or {}
    owner = data.get("session_owner") or data.get("sessionOwner") or {}
    return SessionRecord(
        id=session_id,
        session_date=coerce_datetime(
            data.get("session_date") or data.get("sessionDate"), tz
        )
        or now
        or now_local(tz),
        start_time=parse_time(
            session_time.get("start_time") or session_time.get("startTime"),
            DEFAULT_START,
            tz,
        ),
        end_time=parse_time(
            session_time.get("end_time") or session_time.get("endTime"),
            DEFAULT_END,
            tz,
        ),
        owner_name=_owner_name(data) or "Unknown",
        owner_ref=reference_id(owner.get("userRef"), "") or ""
        if isinstance(owner, dict)
        else "",
        pitch_name=pitch.get("pitchName") or pitch.get("name") or "Unknown Pitch",
        organization_ref=reference_id(pitch.get("organization_ref"), "") or "",
        session_type=data.get("session_type") or data.get("sessionType") or "Session",
        status=data.get("status") or "Confirmed",
        collected_amount=_collected_amount(data),
        reference_id=session_id,
    )


def get_session(
    db: Client,
    session_id: str,
    organization_id: Optional[str] = None,
    tz: datetime.tzinfo | None = None,
) -> SessionRecord:
    """Load one session, hiding sessions that belong to another organization."""
    doc = db.collection(SESSIONS_COLLECTION).document(session_id).get()
    if not doc.exists:
        raise NotFoundError("Session not found.")

    record = session_from_document(session_id, doc.to_dict() or {}, tz)
    if (
        organization_id
        and record.organization_ref
        and record.organization_ref != organization_id
    ):
        logger.warning(
            f"Session {session_id} does not belong to organization {organization_id}"
        )
        raise NotFoundError("Session not found.")
    return record
