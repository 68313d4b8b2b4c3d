# app/services/reconciliation.py
"""
Reconciliation engine: turns (current or shell document, update payload)
into a validated document plus the minimal write-set, or a rejection.

Flow of one request:
  resolve()   → existing document, or a shell with a freshly allocated id
  auto_name() → derived unique name for a new, unnamed document
  reconcile() → field rules in table order, first rejection wins
  commit()    → upsert the write-set (if any), then publish the document

Each step returns a new Work value; nothing is mutated in place.
A referenced row may still be deleted between its existence check and the
commit: that window is accepted, relations are not re-validated afterwards.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.services.change_publisher import ChangePublisher, publish_document
from app.services.counter_service import next_id
from app.services.document_store import DocumentStore
from app.services.integrity_service import exists, reference_exists, unique_name
from app.utils.logger import get_logger
from app.utils.reply import MAX_INT

logger = get_logger(__name__)


@dataclass(frozen=True)
class Work:
    doc: dict
    write_set: dict = field(default_factory=dict)
    is_new: bool = False
    add: bool = False
    err: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.err is None

    def assign(self, key: str, value: Any, path: Optional[str] = None) -> "Work":
        """Record a value in the document and in the write-set."""
        return replace(
            self,
            doc={**self.doc, key: value},
            write_set={**self.write_set, (path or key): value},
        )

    def annotate(self, key: str, value: Any) -> "Work":
        """Document-only value (denormalized names are never persisted)."""
        return replace(self, doc={**self.doc, key: value})

    def reject(self, reason: str) -> "Work":
        return replace(self, err=reason)


# ── Field rules ──────────────────────────────────────────────────────────────
# A rule receives the payload value of its field and returns the next Work.

class NameField:
    async def apply(self, store, kind, key, work: Work, value) -> Work:
        if not isinstance(value, str):
            return work.reject(f"Invalid value for {key}: {value}")
        if not value:
            return work.reject(f"Refusing to update to an empty {kind.label} name")
        if value == work.doc.get(key):
            return work
        if work.is_new and work.doc.get(key):
            return work.reject("Refusing to update the name of a just creating document")
        if await exists(store, kind.collection, {key: value}):
            return work.reject(f"Refusing to update to an already existing name: {value}")
        return work.assign(key, value)


class ReferenceField:
    """Foreign key to another collection; 0 clears the relation."""

    def __init__(self, target: str, target_key: str, label: str, name_field: Optional[str] = None):
        self.target = target
        self.target_key = target_key
        self.label = label
        self.name_field = name_field

    async def apply(self, store, kind, key, work: Work, value) -> Work:
        ref = as_int(value)
        if ref is None or ref < 0:
            return work.reject(f"{self.label} doesn't exist: {value}")
        if ref == work.doc.get(key):
            return work
        if ref == 0:
            work = work.assign(key, 0)
            return work.annotate(self.name_field, "") if self.name_field else work
        if not await reference_exists(store, self.target, self.target_key, ref):
            return work.reject(f"{self.label} doesn't exist: {value}")
        work = work.assign(key, ref)
        if self.name_field:
            referent = store.read_one(self.target, {self.target_key: ref})
            work = work.annotate(self.name_field, referent["name"] if referent else "")
        return work


class ChoiceField:
    """Enumerated value; changing it never clears dependent fields."""

    def __init__(self, choices: tuple, label: str):
        self.choices = choices
        self.label = label

    async def apply(self, store, kind, key, work: Work, value) -> Work:
        if value not in self.choices:
            return work.reject(f"Unmanaged {self.label}: {value}")
        if value == work.doc.get(key):
            return work
        return work.assign(key, value)


class ScalarField:
    """Schema-known scalar, coerced to its declared type."""

    def __init__(self, type_: type):
        self.type = type_

    def coerce(self, value):
        if self.type is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, int) and value in (0, 1):
                return bool(value)
            return None
        if self.type is int:
            return as_int(value)
        return value if isinstance(value, str) else None

    async def apply(self, store, kind, key, work: Work, value) -> Work:
        coerced = self.coerce(value)
        if coerced is None:
            return work.reject(f"Invalid value for {key}: {value}")
        if coerced == work.doc.get(key):
            return work
        return work.assign(key, coerced)


def as_int(value) -> Optional[int]:
    """Floor numeric input to an int; None when it is not a number or overflows a column."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        number = math.floor(number)
    return number if -MAX_INT - 1 <= number <= MAX_INT else None


# ── Extension fields ─────────────────────────────────────────────────────────

def same_value(a, b) -> bool:
    """Equality that also tells True from 1 and 1.0 from 1."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(same_value(a[k], b[k]) for k in a)
    return a == b


def _merge_extension(work: Work, key: str, value) -> Work:
    if isinstance(value, dict):
        if not work.add:
            if key in work.doc and same_value(work.doc[key], value):
                return work
            return work.assign(key, dict(value))
        for inner in value:
            if "." in inner:
                return work.reject(f"Invalid field name: {key}.{inner}")
        current = work.doc.get(key)
        if not isinstance(current, dict):
            # no sub-document to merge into yet: the whole value is written
            return work.assign(key, dict(value))
        merged = dict(current)
        for inner, inner_value in value.items():
            if inner in merged and same_value(merged[inner], inner_value):
                continue
            merged[inner] = inner_value
            work = replace(work, write_set={**work.write_set, f"{key}.{inner}": inner_value})
        return work.annotate(key, merged)
    if key in work.doc and same_value(work.doc[key], value):
        return work
    return work.assign(key, value)


# ── Engine ───────────────────────────────────────────────────────────────────

def shell(kind, new_id: int, seed: Optional[dict] = None) -> Work:
    """Fresh document for a creation request, fully recorded in the write-set."""
    doc = {"name": "", kind.id_field: new_id, **kind.defaults, **(seed or {}),
           "createdAt": datetime.utcnow()}
    write_set = dict(doc)
    for name_field in kind.derived:
        doc[name_field] = ""
    return Work(doc=doc, write_set=write_set, is_new=True)


async def resolve(db: Session, store: DocumentStore, kind, query: dict,
                  seed: Optional[dict] = None, add: bool = False) -> Work:
    """Existing document matching the filter, or a shell with a new id."""
    current = store.read_one(kind.collection, query)
    if current is not None:
        return Work(doc=dict(current), add=add)
    new_id = await next_id(db, kind.counter)
    logger.info(f"New {kind.label} {query} allocated {kind.id_field}={new_id}")
    return replace(shell(kind, new_id, seed), add=add)


async def auto_name(store: DocumentStore, kind, work: Work, candidate: str) -> Work:
    name = await unique_name(store, kind.collection, candidate)
    if name is None:
        return work.reject(f"Unable to find a free {kind.label} name from: {candidate}")
    return work.assign("name", name)


async def reconcile(store: DocumentStore, kind, work: Work, payload: dict) -> Work:
    """
    Apply the payload to the working document.

    Rules run in the entity's table order (name, references, choices,
    scalars); the remaining keys are extension fields, replaced or merged
    by inner key depending on work.add. The first rejection stops the pass
    and discards everything accumulated so far.
    """
    if not work.ok:
        return work
    for key, rule in kind.fields.items():
        if key in payload:
            work = await rule.apply(store, kind, key, work, payload[key])
            if not work.ok:
                logger.info(f"{kind.label} rejected: {work.err}")
                return work

    for key, value in payload.items():
        if key in kind.fields:
            continue
        if key in kind.protected:
            logger.debug(f"{kind.label}: ignoring protected field '{key}'")
            continue
        if not key or "." in key:
            work = work.reject(f"Invalid field name: {key}")
        else:
            work = _merge_extension(work, key, value)
        if not work.ok:
            logger.info(f"{kind.label} rejected: {work.err}")
            return work
    return work


async def commit(store: DocumentStore, kind, work: Work, query: dict,
                 publisher: Optional[ChangePublisher] = None) -> Work:
    """Persist the write-set and publish the final document."""
    if not work.ok:
        return work
    if not work.is_new and not work.write_set:
        logger.debug(f"{kind.label} {query}: ignoring empty update set")
        return work
    written = store.upsert(kind.collection, query, work.write_set, create=work.is_new)
    work = work.annotate("updatedAt", written["updatedAt"])
    if publisher is not None:
        publish_document(publisher, kind, work.doc)
    return work
