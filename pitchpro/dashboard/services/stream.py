"""Live organization -> pitches -> stats subscriptions."""

from __future__ import annotations

import datetime
import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Optional

from .data import DashboardState, organization_ref, pitches_query, stats_query
from .normalizer import (
    organization_from_snapshot,
    pitch_from_snapshot,
    stats_from_snapshot,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

StateListener = Callable[[DashboardState], None]


class DashboardStream:
    """Owns the three dashboard watches for one organization at a time.

    Watch callbacks arrive on Firestore SDK threads. Every subscription is
    tagged with the generation that created it; a snapshot whose generation is
    no longer current belongs to a previous organization and is dropped, so a
    slow late snapshot can never overwrite the newly selected organization's
    state.
    """

    def __init__(
        self,
        db: Client,
        on_change: Optional[StateListener] = None,
        tz: datetime.tzinfo | None = None,
    ) -> None:
        self._db = db
        self._on_change = on_change
        self._tz = tz
        self._lock = threading.RLock()
        self._generation = 0
        self._watches: list[Any] = []
        self._organization_id: Optional[str] = None
        self._state = DashboardState()

    @property
    def organization_id(self) -> Optional[str]:
        return self._organization_id

    @property
    def state(self) -> DashboardState:
        with self._lock:
            return self._state

    def switch(self, organization_id: Optional[str]) -> None:
        """Replace the current subscriptions with ones for ``organization_id``.

        All previous watches are unsubscribed before new ones are opened.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            stale, self._watches = self._watches, []
            self._organization_id = organization_id
            self._state = DashboardState(loading=bool(organization_id))
            self._notify(self._state)

        self._unsubscribe(stale)

        if not organization_id:
            return

        logger.info(f"Subscribing to dashboard streams for {organization_id}")
        watches: list[Any] = []
        try:
            watches.append(
                organization_ref(self._db, organization_id).on_snapshot(
                    self._organization_callback(generation)
                )
            )
            watches.append(
                pitches_query(self._db, organization_id).on_snapshot(
                    self._pitches_callback(generation, organization_id)
                )
            )
            watches.append(
                stats_query(self._db, organization_id).on_snapshot(
                    self._stats_callback(generation)
                )
            )
        except Exception as e:
            logger.error(f"Error setting up data streams for {organization_id}: {e}")
            self._unsubscribe(watches)
            self._apply(
                generation, loading=False, error=str(e) or "Failed to load data"
            )
            return

        with self._lock:
            if generation == self._generation:
                self._watches = watches
                return
        # Superseded by another switch while subscribing.
        self._unsubscribe(watches)

    def close(self) -> None:
        """Unsubscribe everything; later snapshots are ignored."""
        with self._lock:
            self._generation += 1
            stale, self._watches = self._watches, []
            self._organization_id = None
        self._unsubscribe(stale)

    def __enter__(self) -> DashboardStream:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _organization_callback(self, generation: int) -> Callable[..., None]:
        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            organization = organization_from_snapshot(docs[0]) if docs else None
            if organization is None:
                logger.warning("Organization not found")
                self._apply(
                    generation, organization=None, error="Organization not found"
                )
                return
            self._apply(generation, organization=organization)

        return on_snapshot

    def _pitches_callback(
        self, generation: int, organization_id: str
    ) -> Callable[..., None]:
        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                pitches = tuple(
                    pitch_from_snapshot(doc, organization_id) for doc in docs
                )
            except Exception as e:
                logger.error(f"Error processing pitches snapshot: {e}")
                self._apply(generation, error=str(e))
                return
            self._apply(generation, pitches=pitches)

        return on_snapshot

    def _stats_callback(self, generation: int) -> Callable[..., None]:
        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                stats = tuple(stats_from_snapshot(doc, self._tz) for doc in docs)
            except Exception as e:
                logger.error(f"Error processing stats snapshot: {e}")
                self._apply(generation, loading=False, error=str(e))
                return
            self._apply(generation, stats=stats, loading=False)

        return on_snapshot

    def _apply(self, generation: int, **changes: Any) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping snapshot from a superseded organization")
                return
            self._state = replace(self._state, **changes)
            self._notify(self._state)

    def _notify(self, state: DashboardState) -> None:
        """Deliver ``state``; callers hold the lock so states arrive in order."""
        if self._on_change is not None:
            self._on_change(state)

    @staticmethod
    def _unsubscribe(watches: list[Any]) -> None:
        for watch in watches:
            try:
                watch.unsubscribe()
            except Exception as e:
                logger.warning(f"Error unsubscribing watch: {e}")
