# app/services/counter_service.py
"""
Counter allocator: one monotonic sequence per logical name.

Allocation increments last_id in the database and reads it back inside the
same transaction (the UPDATE holds the row lock until commit), serialized
per counter name inside the process. The first allocation of a
name inserts the row; losing that insert race to another process falls back
to the increment.
"""

import threading
from collections import defaultdict
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.counter import Counter
from app.services.document_store import DocumentStore
from app.utils.logger import get_logger

logger = get_logger(__name__)

_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
_locks_guard = threading.Lock()


def _lock_for(name: str) -> threading.Lock:
    with _locks_guard:
        return _locks[name]


def _increment(db: Session, name: str):
    """Bump the counter row; None when the row does not exist yet."""
    stmt = (
        update(Counter)
        .where(Counter.name == name)
        .values(last_id=Counter.last_id + 1, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).rowcount == 0:
        return None
    return db.query(Counter.last_id).filter(Counter.name == name).scalar()


async def next_id(db: Session, name: str) -> int:
    """Allocate and return the next identifier of the named counter."""
    with _lock_for(name):
        last_id = _increment(db, name)
        if last_id is None:
            try:
                db.add(Counter(name=name, last_id=1, updated_at=datetime.utcnow()))
                db.commit()
                last_id = 1
            except IntegrityError:
                db.rollback()
                last_id = _increment(db, name)
                db.commit()
        else:
            db.commit()
    logger.debug(f"counter '{name}' → {last_id}")
    return last_id


def last_id(db: Session, name: str):
    """Last allocated identifier, or None when the counter was never used."""
    doc = DocumentStore(db).read_one("counters", {"name": name})
    return doc["lastId"] if doc else None


def list_counters(db: Session) -> list[dict]:
    return [
        {"name": doc["name"], "lastId": doc["lastId"]}
        for doc in DocumentStore(db).list("counters")
    ]
