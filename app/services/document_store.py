# app/services/document_store.py
"""
Document store adapter over the SQLAlchemy session.

Every collection is addressed by name and every document is a camelCase
dict (see app.models.document). Reads never fail the caller: a store error
is logged and answered as "absent" / empty. Writes raise StoreError so the
caller can reply with a reason instead of pretending the write happened.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from app.models.command import Command
from app.models.counter import Counter
from app.models.equipment import Equipment
from app.models.zone import Zone
from app.utils.logger import get_logger

logger = get_logger(__name__)

COLLECTIONS = {
    "zones": Zone,
    "equipments": Equipment,
    "commands": Command,
    "counters": Counter,
}


@dataclass(frozen=True)
class Lookup:
    """Denormalizes one foreign key into the referenced row's name."""
    local_key: str
    target: str
    target_key: str
    name_field: str


LOOKUPS = {
    "zones": Lookup("parentId", "zones", "zoneId", "parentName"),
    "equipments": Lookup("zoneId", "zones", "zoneId", "zoneName"),
    "commands": Lookup("equipId", "equipments", "equipId", "equipName"),
}


class StoreError(Exception):
    """Raised when a write or delete cannot be persisted."""


class DocumentStore:
    def __init__(self, db: Session):
        self.db = db

    # ── Helpers ────────────────────────────────────────────────────────────
    @staticmethod
    def model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection '{collection}'")

    @staticmethod
    def _criteria(model, query: dict) -> list:
        criteria = []
        for key, value in query.items():
            column = model.column_for(key)
            if column is None:
                raise ValueError(f"Cannot filter {model.__tablename__} on '{key}'")
            criteria.append(column == value)
        return criteria

    def _find(self, collection: str, query: dict) -> list[dict]:
        model = self.model(collection)
        criteria = self._criteria(model, query)
        lookup = LOOKUPS.get(collection)
        if lookup is None:
            rows = self.db.query(model).filter(*criteria).order_by(model.id).all()
            return [row.to_document() for row in rows]

        target_model = self.model(lookup.target)
        target = aliased(target_model)
        target_column = getattr(target, target_model.FIELDS[lookup.target_key])
        rows = (
            self.db.query(model, target.name)
            .outerjoin(target, target_column == model.column_for(lookup.local_key))
            .filter(*criteria)
            .order_by(model.id)
            .all()
        )
        docs = []
        for row, ref_name in rows:
            doc = row.to_document()
            doc[lookup.name_field] = ref_name or ""
            docs.append(doc)
        return docs

    # ── Reads ──────────────────────────────────────────────────────────────
    def read_one(self, collection: str, query: dict) -> Optional[dict]:
        """First document matching the filter, or None (also on store error)."""
        try:
            docs = self._find(collection, query)
        except SQLAlchemyError as e:
            logger.error(f"read_one {collection} {query} failed: {e}")
            self.db.rollback()
            return None
        if not docs:
            logger.debug(f"read_one {collection} {query}: not found")
            return None
        return docs[0]

    def read_all(self, collection: str, query: dict) -> list[dict]:
        """Every document matching the filter; [] on no match or store error."""
        try:
            return self._find(collection, query)
        except SQLAlchemyError as e:
            logger.error(f"read_all {collection} {query} failed: {e}")
            self.db.rollback()
            return []

    def list(self, collection: str) -> list[dict]:
        return self.read_all(collection, {})

    # ── Writes ─────────────────────────────────────────────────────────────
    def upsert(self, collection: str, query: dict, fields: dict, create: bool = False) -> dict:
        """
        Apply the write-set to the row matching the filter, creating it from
        the filter values when absent. Always stamps updatedAt.
        With create=True an existing match is an error, never overwritten.
        Returns the written write-set.
        """
        model = self.model(collection)
        written = dict(fields)
        written["updatedAt"] = datetime.utcnow()
        try:
            row = self.db.query(model).filter(*self._criteria(model, query)).first()
            if row is not None and create:
                logger.warning(f"upsert {collection} {query}: created concurrently, refusing to overwrite")
                raise StoreError(f"Unable to create {collection} document: it already exists")
            if row is None:
                row = model()
                for key, value in query.items():
                    row.apply(key, value)
                self.db.add(row)
            for path, value in written.items():
                row.apply(path, value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"upsert {collection} {query} {written} failed: {e}")
            raise StoreError(f"Unable to write {collection} document") from e
        logger.debug(f"upsert {collection} {query} → {written}")
        return written

    def delete(self, collection: str, query: dict) -> int:
        """Remove every row matching the filter. Returns the removed count."""
        model = self.model(collection)
        try:
            count = self.db.query(model).filter(*self._criteria(model, query)).delete(
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"delete {collection} {query} failed: {e}")
            raise StoreError(f"Unable to delete from {collection}") from e
        logger.debug(f"delete {collection} {query}: {count} removed")
        return count
