# app/services/zone_service.py
"""
Zones: nested locations addressed by name (natural key) or zoneId.
parentId = 0 marks a top-level zone.
"""

from sqlalchemy.orm import Session

from app.services.change_publisher import ChangePublisher
from app.services.document_store import DocumentStore
from app.services.entity_kinds import ZONE
from app.services.registry_service import delete_document, upsert_document
from app.utils.reply import err, ok, parse_id


async def list_zones(db: Session) -> list[dict]:
    return DocumentStore(db).list(ZONE.collection)


async def get_by_name(db: Session, name: str) -> dict:
    if not name.strip():
        return err("Empty zone name, ignoring request")
    zone = DocumentStore(db).read_one(ZONE.collection, {"name": name})
    return ok(zone) if zone else err(f"{name}: zone not found")


async def get_by_parent(db: Session, name: str) -> dict:
    """Children of the named zone."""
    store = DocumentStore(db)
    if not name.strip():
        return ok(store.read_all(ZONE.collection, {"parentId": 0}))
    parent = store.read_one(ZONE.collection, {"name": name})
    if not parent:
        return err(f"{name}: zone not found")
    return ok(store.read_all(ZONE.collection, {"parentId": parent["zoneId"]}))


async def set_by_name(db: Session, name: str, payload: dict, add: bool = False,
                      publisher: ChangePublisher = None) -> dict:
    if not name.strip():
        return err("Empty zone name, ignoring request")
    return await upsert_document(db, ZONE, {"name": name}, payload, add,
                                 publisher=publisher, seed={"name": name})


async def delete_by_name(db: Session, name: str) -> dict:
    if not name.strip():
        return err("Empty zone name, ignoring request")
    return await delete_document(db, ZONE, {"name": name})


async def delete_by_id(db: Session, raw_id) -> dict:
    zone_id = parse_id(raw_id)
    if not zone_id:
        return err("Empty zone identifier, ignoring request")
    return await delete_document(db, ZONE, {"zoneId": zone_id})
