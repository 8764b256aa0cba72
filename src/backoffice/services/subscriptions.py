"""Live collection listeners and their lifecycle management."""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.domain.paths import child_path
from backoffice.errors import MutationError, SubscriptionError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

SnapshotListener = Callable[[], None]


class _Scope:
    """Guard created per subscription; callbacks check it before mutating."""

    def __init__(self) -> None:
        self.active = True


class LiveCollection(Generic[T]):
    """A live, locally materialized view of one database collection.

    Every snapshot replaces ``items`` wholesale. Mutators write straight to
    the database and leave ``items`` alone; the next snapshot is the only
    thing that changes the list. An empty path yields an empty, non-loading
    collection that never subscribes.
    """

    def __init__(
        self,
        database: RealtimeDatabase,
        path: str | None,
        parse: Callable[[str, dict[str, object]], T],
    ) -> None:
        self.database = database
        self.path = path or None
        self.parse = parse
        self.items: list[T] = []
        self.loading = self.path is not None
        self.error: SubscriptionError | None = None
        self._scope: _Scope | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._listeners: list[SnapshotListener] = []

    @property
    def active(self) -> bool:
        """Whether a subscription is currently held."""
        return self._scope is not None

    def open(self) -> None:
        """Subscribe to the path; a no-op when already open or pathless."""
        if self._scope is not None:
            return
        if self.path is None:
            self.items = []
            self.loading = False
            return
        scope = _Scope()
        self._scope = scope
        self.loading = True
        self.error = None
        _logger.debug("Listening to %s", self.path)
        self._unsubscribe = self.database.subscribe(
            self.path,
            lambda snapshot: self._on_snapshot(scope, snapshot),
            lambda exc: self._on_error(scope, exc),
        )

    def close(self) -> None:
        """Release the subscription; late callbacks are dropped."""
        scope, self._scope = self._scope, None
        if scope is not None:
            scope.active = False
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            _logger.debug("Released listener on %s", self.path)

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call listener after each applied snapshot or error."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def get(self, item_id: str) -> T | None:
        """Return the materialized entity with this id, if present."""
        for item in self.items:
            if getattr(item, "id", None) == item_id:
                return item
        return None

    def arrange(self, items: list[T]) -> list[T]:
        """Order a freshly parsed snapshot; the backend guarantees none."""
        return items

    async def create(self, payload: dict[str, object]) -> str:
        """Add an entry and return its backend-assigned id."""
        return await self._push(self._require_path(), payload)

    async def update(self, item_id: str, payload: dict[str, object]) -> None:
        """Overwrite the given fields of an entry."""
        await self._patch(child_path(self._require_path(), item_id), payload)

    async def replace(self, item_id: str, payload: dict[str, object]) -> None:
        """Replace an entry with payload."""
        path = child_path(self._require_path(), item_id)
        try:
            await self.database.set(path, payload)
        except Exception as exc:
            raise MutationError(f"Could not replace {path}") from exc
        _logger.info("Replaced %s", path)

    async def delete(self, item_id: str) -> None:
        """Remove an entry."""
        await self._remove(child_path(self._require_path(), item_id))

    async def _push(self, path: str, payload: dict[str, object]) -> str:
        try:
            key = await self.database.push(path, payload)
        except Exception as exc:
            raise MutationError(f"Could not create entry in {path}") from exc
        _logger.info("Created %s", child_path(path, key))
        return key

    async def _patch(self, path: str, payload: dict[str, object]) -> None:
        try:
            await self.database.update(path, payload)
        except Exception as exc:
            raise MutationError(f"Could not update {path}") from exc
        _logger.info("Updated %s", path)

    async def _remove(self, path: str) -> None:
        try:
            await self.database.remove(path)
        except Exception as exc:
            raise MutationError(f"Could not delete {path}") from exc
        _logger.info("Deleted %s", path)

    def _require_path(self) -> str:
        if self.path is None:
            raise MutationError("Collection has no path")
        return self.path

    def _on_snapshot(self, scope: _Scope, snapshot: dict[str, object]) -> None:
        if not scope.active:
            _logger.debug("Dropped snapshot for released listener on %s", self.path)
            return
        parsed = [
            self.parse(key, value)
            for key, value in snapshot.items()
            if isinstance(value, dict)
        ]
        self.items = self.arrange(parsed)
        self.loading = False
        self.error = None
        self._notify()

    def _on_error(self, scope: _Scope, exc: Exception) -> None:
        if not scope.active:
            return
        if isinstance(exc, SubscriptionError):
            self.error = exc
        else:
            self.error = SubscriptionError(str(exc) or "Listener failed")
            self.error.__cause__ = exc
        self.loading = False
        _logger.warning("Listener on %s failed: %s", self.path, self.error)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _logger.exception("Snapshot listener failed for %s", self.path)


class SubscriptionManager:
    """Holds at most one open collection per logical key.

    Acquiring a key that is already held closes the previous collection
    before opening the new one, so a path switch never leaves two listeners
    delivering for the same slot.
    """

    def __init__(self) -> None:
        self._handles: dict[str, LiveCollection] = {}

    def acquire(self, key: str, collection: LiveCollection[T]) -> LiveCollection[T]:
        """Open collection under key, releasing whatever held it before."""
        previous = self._handles.pop(key, None)
        if previous is not None and previous is not collection:
            previous.close()
        self._handles[key] = collection
        collection.open()
        return collection

    def get(self, key: str) -> LiveCollection | None:
        return self._handles.get(key)

    def release(self, key: str) -> None:
        """Close and forget the collection under key."""
        collection = self._handles.pop(key, None)
        if collection is not None:
            collection.close()

    def release_all(self) -> None:
        """Close every held collection."""
        for key in list(self._handles):
            self.release(key)

    def active_keys(self) -> list[str]:
        return [key for key, handle in self._handles.items() if handle.active]

    def __enter__(self) -> "SubscriptionManager":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.release_all()
