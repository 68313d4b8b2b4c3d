# app/services/command_service.py
"""
Commands: addressed by cmdId, or by (equipId, classId), the equipment
and the command number inside its class.
"""

from sqlalchemy.orm import Session

from app.services.change_publisher import ChangePublisher, publish_document
from app.services.document_store import DocumentStore
from app.services.entity_kinds import COMMAND
from app.services.registry_service import delete_document, upsert_document
from app.utils.logger import get_logger
from app.utils.reply import err, ok, parse_id

logger = get_logger(__name__)


async def list_commands(db: Session) -> list[dict]:
    return DocumentStore(db).list(COMMAND.collection)


async def get_by_equipment(db: Session, raw_id) -> dict:
    equip_id = parse_id(raw_id)
    if not equip_id:
        return err("Empty equipment identifier, ignoring request")
    return ok(DocumentStore(db).read_all(COMMAND.collection, {"equipId": equip_id}))


async def set_by_id(db: Session, raw_id, payload: dict, add: bool = False,
                    publisher: ChangePublisher = None) -> dict:
    """Update an existing command; commands are only created through their equipment."""
    cmd_id = parse_id(raw_id)
    if not cmd_id:
        return err("Empty command identifier, ignoring request")
    return await upsert_document(db, COMMAND, {"cmdId": cmd_id}, payload, add,
                                 publisher=publisher, must_exist=True)


async def set_by_equipment(db: Session, raw_id, raw_subid, payload: dict, add: bool = False,
                           publisher: ChangePublisher = None) -> dict:
    equip_id = parse_id(raw_id)
    class_id = parse_id(raw_subid)
    if not equip_id:
        return err("Empty equipment identifier, ignoring request")
    if not class_id:
        return err("Empty command identifier, ignoring request")
    query = {"equipId": equip_id, "classId": class_id}
    return await upsert_document(db, COMMAND, query, payload, add,
                                 publisher=publisher, seed=query,
                                 name_candidate=f"cmd-{equip_id}-{class_id}")


async def delete_by_id(db: Session, raw_id) -> dict:
    cmd_id = parse_id(raw_id)
    if not cmd_id:
        return err("Empty command identifier, ignoring request")
    return await delete_document(db, COMMAND, {"cmdId": cmd_id})


async def publish_all(db: Session, publisher: ChangePublisher) -> int:
    """Publish every known command, field by field. Returns the command count."""
    commands = DocumentStore(db).list(COMMAND.collection)
    for doc in commands:
        publish_document(publisher, COMMAND, doc)
    logger.info(f"Published {len(commands)} commands")
    return len(commands)
