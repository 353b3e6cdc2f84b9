import copy
from typing import List, Optional
from uuid import uuid4

from sqlalchemy.orm import sessionmaker

from studyquiz.db.models import StoredRecord
from studyquiz.storage.base import DocumentStore, Record


class SqlDocumentStore(DocumentStore):
    """Documents persisted as JSON rows of the `records` table."""

    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self.SessionLocal = session_factory

    def create(self, collection: str, record: Record) -> str:
        doc_id = str(uuid4())
        data = dict(record)
        data.pop("id", None)
        self._write(collection, doc_id, data)
        self._notify(collection, doc_id)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        db = self.SessionLocal()
        try:
            row = db.get(StoredRecord, (collection, doc_id))
            if row is None:
                return None
            return {"id": row.id, **copy.deepcopy(row.data or {})}
        finally:
            db.close()

    def _write(self, collection: str, doc_id: str, record: Record) -> None:
        db = self.SessionLocal()
        try:
            row = db.get(StoredRecord, (collection, doc_id))
            if row is None:
                db.add(StoredRecord(collection=collection, id=doc_id, data=copy.deepcopy(record)))
            else:
                # assign a fresh object so the JSON column is flagged dirty
                row.data = copy.deepcopy(record)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list(self, collection: str) -> List[Record]:
        db = self.SessionLocal()
        try:
            rows = (
                db.query(StoredRecord)
                .filter(StoredRecord.collection == collection)
                .order_by(StoredRecord.created_at)
                .all()
            )
            return [{"id": row.id, **copy.deepcopy(row.data or {})} for row in rows]
        finally:
            db.close()

