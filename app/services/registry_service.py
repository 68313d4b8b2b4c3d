# app/services/registry_service.py
"""
Request-level orchestration shared by the zone, equipment and command
services: resolve → reconcile → commit, mapped to OK/ERR replies.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.services.change_publisher import ChangePublisher
from app.services.document_store import DocumentStore, StoreError
from app.services.reconciliation import Work, auto_name, commit, reconcile, resolve
from app.utils.logger import get_logger
from app.utils.reply import err, ok

logger = get_logger(__name__)


async def upsert_document(db: Session, kind, query: dict, payload: dict, add: bool,
                          publisher: Optional[ChangePublisher] = None,
                          seed: Optional[dict] = None,
                          name_candidate: Optional[str] = None,
                          must_exist: bool = False) -> dict:
    """
    Create or update the document identified by `query`.

    seed           -- initial values of a created document (besides defaults)
    name_candidate -- derived name of a created document when the payload has none
    must_exist     -- reply ERR instead of creating when nothing matches
    """
    store = DocumentStore(db)
    if must_exist and store.read_one(kind.collection, query) is None:
        return err(f"{_describe(query)}: {kind.label} not found")

    work = await resolve(db, store, kind, query, seed=seed, add=add)
    if work.is_new and name_candidate and "name" not in payload:
        work = await auto_name(store, kind, work, name_candidate)
    work = await reconcile(store, kind, work, payload)
    return await _commit(store, kind, work, query, publisher)


async def _commit(store: DocumentStore, kind, work: Work, query: dict,
                  publisher: Optional[ChangePublisher]) -> dict:
    if not work.ok:
        return err(work.err)
    try:
        work = await commit(store, kind, work, query, publisher)
    except StoreError as e:
        return err(str(e))
    logger.info(f"{kind.label} {work.doc.get(kind.id_field)} "
                f"{'created' if work.is_new else 'updated'}: {sorted(work.write_set)}")
    return ok(work.doc)


async def delete_document(db: Session, kind, query: dict) -> dict:
    try:
        count = DocumentStore(db).delete(kind.collection, query)
    except StoreError as e:
        return err(str(e))
    if count:
        logger.info(f"{kind.label} {query} deleted")
        return ok(f"{_describe(query)}: deleted {kind.label}")
    return err(f"{_describe(query)}: {kind.label} not found")


def _describe(query: dict) -> str:
    return "/".join(str(v) for v in query.values())
