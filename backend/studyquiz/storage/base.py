import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
SnapshotCallback = Callable[[Optional[Record]], None]


class Subscription:
    """
    Handle on a live feed of one document.

    Nothing is delivered until `start()` is called; `start()` pushes the
    current snapshot and every later write follows until `stop()`.
    """

    def __init__(self, store: "DocumentStore", collection: str, doc_id: str, callback: SnapshotCallback):
        self.store = store
        self.collection = collection
        self.doc_id = doc_id
        self.callback = callback
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> "Subscription":
        if not self._active:
            with self.store._delivery_lock:
                self._active = True
                self.store._add_listener(self)
                snapshot = self.store.get(self.collection, self.doc_id)
                if snapshot is not None:
                    self.callback(snapshot)
        return self

    def stop(self) -> None:
        if self._active:
            self._active = False
            self.store._remove_listener(self)

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()


class DocumentStore(ABC):
    """Collections of JSON-like records keyed by id, with per-document listeners."""

    def __init__(self):
        self._listeners: Dict[Tuple[str, str], List[Subscription]] = {}
        self._listener_lock = threading.Lock()
        # held across snapshot read and delivery so listeners see snapshots in write order
        self._delivery_lock = threading.RLock()

    @abstractmethod
    def create(self, collection: str, record: Record) -> str:
        """Store a new record under a generated id and return the id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        """Return a copy of the record, or None."""

    @abstractmethod
    def _write(self, collection: str, doc_id: str, record: Record) -> None:
        ...

    @abstractmethod
    def list(self, collection: str) -> List[Record]:
        """Return every record of a collection, each with its "id"."""

    def set(self, collection: str, doc_id: str, record: Record, merge: bool = False) -> Record:
        data = dict(record)
        if merge:
            existing = self.get(collection, doc_id) or {}
            existing.update(data)
            data = existing
        data.pop("id", None)
        self._write(collection, doc_id, data)
        self._notify(collection, doc_id)
        return self.get(collection, doc_id)

    def subscribe(self, collection: str, doc_id: str, callback: SnapshotCallback) -> Subscription:
        return Subscription(self, collection, doc_id, callback)

    # ── listener bookkeeping
    def _add_listener(self, sub: Subscription) -> None:
        with self._listener_lock:
            self._listeners.setdefault((sub.collection, sub.doc_id), []).append(sub)

    def _remove_listener(self, sub: Subscription) -> None:
        with self._listener_lock:
            subs = self._listeners.get((sub.collection, sub.doc_id), [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._listeners.pop((sub.collection, sub.doc_id), None)

    def _notify(self, collection: str, doc_id: str) -> None:
        with self._delivery_lock:
            with self._listener_lock:
                subs = list(self._listeners.get((collection, doc_id), []))
            if not subs:
                return
            snapshot = self.get(collection, doc_id)
            for sub in subs:
                if sub.active:
                    sub.callback(copy.deepcopy(snapshot))
