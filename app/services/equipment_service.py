# app/services/equipment_service.py
"""
Equipments: addressed by name, or by (className, classId) for the
devices a class driver creates on its own.
"""

from sqlalchemy.orm import Session

from app.services.change_publisher import ChangePublisher
from app.services.document_store import DocumentStore
from app.services.entity_kinds import EQUIPMENT, ZONE
from app.services.registry_service import delete_document, upsert_document
from app.utils.logger import get_logger
from app.utils.reply import err, ok, parse_id

logger = get_logger(__name__)


async def list_equipments(db: Session) -> list[dict]:
    return DocumentStore(db).list(EQUIPMENT.collection)


async def get_by_name(db: Session, name: str) -> dict:
    if not name.strip():
        return err("Empty equipment name, ignoring request")
    equipment = DocumentStore(db).read_one(EQUIPMENT.collection, {"name": name})
    return ok(equipment) if equipment else err(f"{name}: equipment not found")


async def get_by_class(db: Session, class_name: str) -> dict:
    """Equipments of a class; an empty class name lists unclassed ones."""
    return ok(DocumentStore(db).read_all(EQUIPMENT.collection, {"className": class_name}))


async def get_by_zone(db: Session, zone_name: str = "") -> dict:
    """Equipments of the named zone; no name lists the unzoned ones."""
    store = DocumentStore(db)
    zone_id = 0
    if zone_name.strip():
        zone = store.read_one(ZONE.collection, {"name": zone_name})
        if not zone:
            return err(f"{zone_name}: zone not found")
        zone_id = zone["zoneId"]
    equipments = store.read_all(EQUIPMENT.collection, {"zoneId": zone_id})
    if not equipments:
        logger.debug(f"get_by_zone({zone_name!r}) sending empty list")
    return ok(equipments)


async def set_by_name(db: Session, name: str, payload: dict, add: bool = False,
                      publisher: ChangePublisher = None) -> dict:
    if not name.strip():
        return err("Empty equipment name, ignoring request")
    return await upsert_document(db, EQUIPMENT, {"name": name}, payload, add,
                                 publisher=publisher, seed={"name": name})


async def set_by_class(db: Session, class_name: str, raw_id, payload: dict, add: bool = False,
                       publisher: ChangePublisher = None) -> dict:
    class_id = parse_id(raw_id)
    if not class_name.strip():
        return err("Empty class name, ignoring request")
    if not class_id:
        return err("Empty class identifier, ignoring request")
    query = {"className": class_name, "classId": class_id}
    return await upsert_document(db, EQUIPMENT, query, payload, add,
                                 publisher=publisher, seed=query,
                                 name_candidate=f"{class_name}-{class_id}")


async def delete_by_name(db: Session, name: str) -> dict:
    if not name.strip():
        return err("Empty equipment name, ignoring request")
    return await delete_document(db, EQUIPMENT, {"name": name})
