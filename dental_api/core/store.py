import logging
import secrets
import string
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .exceptions import StoreError
from ..models.document import Document

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 20

_OPERATORS = {
    "==": lambda col, v: col == v,
    "!=": lambda col, v: col != v,
    "<": lambda col, v: col < v,
    "<=": lambda col, v: col <= v,
    ">": lambda col, v: col > v,
    ">=": lambda col, v: col >= v,
}


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


def generate_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _json_column(field: str, sample: Any):
    element = Document.data[field]
    if isinstance(sample, bool):
        return element.as_boolean()
    if isinstance(sample, (int, float)):
        return element.as_float()
    return element.as_string()


def _to_record(doc: Document) -> Dict[str, Any]:
    return {"id": doc.id, **(doc.data or {})}


class DocumentStore:
    """Collections of JSON documents persisted through SQLAlchemy.

    Records come back as plain dicts with the document id under ``"id"``.
    Any driver failure is raised as ``StoreError``.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Document store error: {e}")
            raise StoreError("Document store unavailable") from e
        finally:
            session.close()

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        stmt = select(Document).where(Document.collection == collection)
        for f in filters:
            if f.op not in _OPERATORS:
                raise ValueError(f"Unsupported filter operator: {f.op}")
            stmt = stmt.where(_OPERATORS[f.op](_json_column(f.field, f.value), f.value))
        if order_by is not None:
            column = Document.data[order_by.field].as_string()
            stmt = stmt.order_by(column.desc() if order_by.descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        with self._session() as session:
            return [_to_record(doc) for doc in session.scalars(stmt)]

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._session() as session:
            doc = session.get(Document, doc_id)
            if doc is None or doc.collection != collection:
                return None
            return _to_record(doc)

    def add(self, collection: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        doc_id = generate_id()
        with self._session() as session:
            session.add(Document(id=doc_id, collection=collection, data=dict(fields)))
        return {"id": doc_id, **fields}

    def put(
        self, collection: str, doc_id: str, fields: Dict[str, Any], merge: bool = True
    ) -> Dict[str, Any]:
        with self._session() as session:
            doc = session.get(Document, doc_id)
            if doc is None or doc.collection != collection:
                doc = Document(id=doc_id, collection=collection, data=dict(fields))
                session.add(doc)
            elif merge:
                # Assign a new dict so the JSON column is flagged dirty
                doc.data = {**(doc.data or {}), **fields}
            else:
                doc.data = dict(fields)
            session.flush()
            return _to_record(doc)

    def update(
        self, collection: str, doc_id: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Merge fields into an existing document; None if it does not exist."""
        with self._session() as session:
            doc = session.get(Document, doc_id)
            if doc is None or doc.collection != collection:
                return None
            doc.data = {**(doc.data or {}), **fields}
            session.flush()
            return _to_record(doc)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._session() as session:
            doc = session.get(Document, doc_id)
            if doc is None or doc.collection != collection:
                return False
            session.delete(doc)
            return True
