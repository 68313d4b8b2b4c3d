# app/services/integrity_service.py
"""
Existence checks used by the reconciliation engine before accepting a
name or a foreign key.
"""

from typing import Optional

from app.config import settings
from app.services.document_store import DocumentStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def exists(store: DocumentStore, collection: str, query: dict) -> bool:
    return store.read_one(collection, query) is not None


async def reference_exists(store: DocumentStore, collection: str, key: str, value: int) -> bool:
    """0 means "no relation" and is always accepted without a lookup."""
    if value == 0:
        return True
    return len(store.read_all(collection, {key: value})) == 1


async def unique_name(store: DocumentStore, collection: str, candidate: str,
                      max_attempts: Optional[int] = None) -> Optional[str]:
    """
    First free name among candidate, candidate + "1", candidate + "11", ...
    Returns None once max_attempts names have been found taken.
    """
    attempts = max_attempts or settings.UNIQUE_NAME_MAX_ATTEMPTS
    name = candidate
    for _ in range(attempts):
        if not await exists(store, collection, {"name": name}):
            return name
        logger.debug(f"unique_name: '{name}' already used in {collection}")
        name += "1"
    logger.warning(f"unique_name: no free name from '{candidate}' after {attempts} attempts")
    return None
