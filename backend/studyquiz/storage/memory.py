import copy
import threading
from typing import Dict, List, Optional
from uuid import uuid4

from studyquiz.storage.base import DocumentStore, Record


class MemoryDocumentStore(DocumentStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self):
        super().__init__()
        self._collections: Dict[str, Dict[str, Record]] = {}
        self._lock = threading.Lock()

    def create(self, collection: str, record: Record) -> str:
        doc_id = str(uuid4())
        data = copy.deepcopy(dict(record))
        data.pop("id", None)
        self._write(collection, doc_id, data)
        self._notify(collection, doc_id)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        with self._lock:
            record = self._collections.get(collection, {}).get(doc_id)
            if record is None:
                return None
            return {"id": doc_id, **copy.deepcopy(record)}

    def _write(self, collection: str, doc_id: str, record: Record) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(record)

    def list(self, collection: str) -> List[Record]:
        with self._lock:
            return [
                {"id": doc_id, **copy.deepcopy(record)}
                for doc_id, record in self._collections.get(collection, {}).items()
            ]
