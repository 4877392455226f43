"""
Memory Sync Service - mirrors a user's trips, flight bookings and travel
preferences into memory.

Each entity is rendered as a natural-language memory entry and written
to the memory store once. The sync ledger remembers what was written, so
calling a sync again with the same input performs no remote writes.

Flow per batch:
1. Read the user's ledger entry (unreadable ledger == empty ledger)
2. Drop items already synced, and duplicate IDs in the input
3. Fan out one task per item: describe -> memory add -> mark synced
4. Fan in and return (success_count, failure_count)

Delivery is at-least-once: an item whose memory write succeeded but
whose ledger write failed is written again by the next sync.

Preferences bypass the ledger and are written in full on every save.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Set, TypeVar, Union

from soar.core.exceptions import LedgerError, RemoteServiceError
from soar.core.logging_config import get_logger
from soar.database.ledger import SyncLedger, get_ledger
from soar.memory.client import MemoryStoreClient, get_memory_client
from soar.memory.formatting import describe_flight_booking, describe_preferences, describe_trip
from soar.models.sync import SyncKind, SyncResult
from soar.models.travel import FlightBooking, TravelPreference, Trip

logger = get_logger(__name__)

Syncable = Union[Trip, FlightBooking]
T = TypeVar("T", Trip, FlightBooking)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemorySyncService:
    """
    Idempotent trip/booking -> memory synchronizer.

    Example:
        >>> service = MemorySyncService()
        >>> service.sync_trips("u1", trips)
        SyncResult(success_count=2, failure_count=0)
        >>> service.sync_trips("u1", trips)
        SyncResult(success_count=0, failure_count=0)
    """

    def __init__(
        self,
        memory_client: Optional[MemoryStoreClient] = None,
        ledger: Optional[SyncLedger] = None,
        max_workers: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the sync service.

        Args:
            memory_client: Memory store client (shared instance if omitted)
            ledger: Sync ledger (shared instance if omitted)
            max_workers: Upper bound on concurrent memory writes per batch
            clock: Returns "now" for PAST/UPCOMING/CURRENT labels
        """
        if max_workers is None:
            from soar.core.config import get_settings
            max_workers = get_settings().sync_max_workers

        self.memory_client = memory_client or get_memory_client()
        self.ledger = ledger or get_ledger()
        self.max_workers = max(1, max_workers)
        self.clock = clock or _utcnow

        logger.info(f"MemorySyncService initialized: max_workers={self.max_workers}")

    # ============================================================
    # Public API
    # ============================================================

    def sync_trips(self, user_id: str, trips: Sequence[Trip]) -> SyncResult:
        """
        Write memories for trips not yet synced.

        Args:
            user_id: User whose ledger and memories are updated
            trips: The user's current trips

        Returns:
            SyncResult of the items actually attempted
        """
        return self._sync_batch(user_id, SyncKind.TRIP, trips)

    def sync_flight_bookings(self, user_id: str, bookings: Sequence[FlightBooking]) -> SyncResult:
        """
        Write memories for flight bookings not yet synced.

        Args:
            user_id: User whose ledger and memories are updated
            bookings: The user's current flight bookings

        Returns:
            SyncResult of the items actually attempted
        """
        return self._sync_batch(user_id, SyncKind.FLIGHT_BOOKING, bookings)

    def sync_trip(self, user_id: str, trip: Trip) -> bool:
        """
        Write one trip after it was created or edited.

        The ledger is not consulted: an edited trip is written again so
        memory holds its latest details. The ID is marked synced afterwards.

        Returns:
            True if both the memory write and the ledger update succeeded
        """
        logger.info(f"Syncing single trip: user={user_id}, trip={trip.id}")
        return self._sync_one(user_id, SyncKind.TRIP, trip)

    def sync_user_data(
        self,
        user_id: str,
        trips: Sequence[Trip],
        bookings: Sequence[FlightBooking],
    ) -> Dict[str, SyncResult]:
        """
        Login-time sync of both collections.

        Returns:
            {"trips": SyncResult, "flight_bookings": SyncResult}
        """
        logger.info(
            f"Syncing user data: user={user_id}, trips={len(trips)}, bookings={len(bookings)}"
        )
        results = {
            "trips": self.sync_trips(user_id, trips),
            "flight_bookings": self.sync_flight_bookings(user_id, bookings),
        }
        logger.info(f"User data sync finished: user={user_id}, results={results}")
        return results

    def sync_preferences(self, user_id: str, preferences: TravelPreference) -> SyncResult:
        """
        Write the user's travel preferences as memories.

        Called when onboarding preferences are saved. Not tracked by the
        ledger: every call writes all preference memories again.

        Args:
            user_id: User whose memories are written
            preferences: The saved preferences

        Returns:
            SyncResult over the individual preference memories; the save
            counts as successful only when failure_count is 0
        """
        texts = describe_preferences(preferences)

        if preferences.owner_user_id != user_id:
            logger.warning(
                f"Refusing to sync preferences {preferences.id}: owned by "
                f"{preferences.owner_user_id}, not {user_id}"
            )
            return SyncResult(0, len(texts))

        logger.info(f"Syncing preferences: user={user_id}, memories={len(texts)}")

        success_count = 0
        failure_count = 0
        workers = min(self.max_workers, len(texts))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="soar-sync-preferences") as pool:
            futures = [pool.submit(self._write_text, user_id, text) for text in texts]
            for future in as_completed(futures):
                if future.result():
                    success_count += 1
                else:
                    failure_count += 1

        result = SyncResult(success_count, failure_count)
        logger.info(f"Preference sync finished: user={user_id}, result={result}")
        return result

    # ============================================================
    # Internals
    # ============================================================

    def _sync_batch(self, user_id: str, kind: SyncKind, items: Sequence[T]) -> SyncResult:
        already_synced = self._load_synced_ids(user_id, kind)
        pending = self._pending_items(items, already_synced)

        logger.info(
            f"Sync {kind.value}: user={user_id}, total={len(items)}, "
            f"skipped={len(items) - len(pending)}, pending={len(pending)}"
        )

        if not pending:
            return SyncResult(0, 0)

        success_count = 0
        failure_count = 0
        workers = min(self.max_workers, len(pending))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"soar-sync-{kind.value}") as pool:
            futures = [pool.submit(self._sync_one, user_id, kind, item) for item in pending]
            for future in as_completed(futures):
                if future.result():
                    success_count += 1
                else:
                    failure_count += 1

        result = SyncResult(success_count, failure_count)
        logger.info(f"Sync {kind.value} finished: user={user_id}, result={result}")
        return result

    def _load_synced_ids(self, user_id: str, kind: SyncKind) -> Set[str]:
        try:
            return self.ledger.get_synced_ids(user_id, kind)
        except LedgerError as e:
            # Everything gets rewritten; duplicates are tolerated
            logger.error(f"Ledger read failed, treating as empty: {e}")
            return set()

    @staticmethod
    def _pending_items(items: Sequence[T], already_synced: Set[str]) -> List[T]:
        seen = set(already_synced)
        pending = []
        for item in items:
            if item.id in seen:
                continue
            seen.add(item.id)
            pending.append(item)
        return pending

    def _sync_one(self, user_id: str, kind: SyncKind, item: Syncable) -> bool:
        """Describe, write and mark one item. Never raises."""
        if item.owner_user_id != user_id:
            logger.warning(
                f"Refusing to sync {kind.value} {item.id}: owned by "
                f"{item.owner_user_id}, not {user_id}"
            )
            return False

        try:
            text = self._describe(kind, item)
            self.memory_client.add(text, user_id)
        except RemoteServiceError as e:
            logger.error(f"Memory write failed for {kind.value} {item.id}: {e}")
            return False

        try:
            self.ledger.mark_synced(user_id, kind, [item.id])
        except LedgerError as e:
            logger.error(f"Memory written but ledger update failed for {kind.value} {item.id}: {e}")
            return False

        logger.debug(f"Synced {kind.value} {item.id} for user={user_id}")
        return True

    def _write_text(self, user_id: str, text: str) -> bool:
        try:
            self.memory_client.add(text, user_id)
        except RemoteServiceError as e:
            logger.error(f"Preference memory write failed for user={user_id}: {e}")
            return False
        return True

    def _describe(self, kind: SyncKind, item: Syncable) -> str:
        now = self.clock()
        if kind is SyncKind.TRIP:
            return describe_trip(item, now=now)
        return describe_flight_booking(item, now=now)


# Module-level instance (singleton pattern)
_sync_service: MemorySyncService | None = None


def get_sync_service() -> MemorySyncService:
    """Get or create the shared MemorySyncService."""
    global _sync_service
    if _sync_service is None:
        _sync_service = MemorySyncService()
    return _sync_service


def reset_sync_service() -> None:
    """Forget the shared MemorySyncService (useful for testing)."""
    global _sync_service
    _sync_service = None
