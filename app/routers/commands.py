# app/routers/commands.py
"""Commands: list, lookup by equipment, create/update by equipment or id, delete."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.dependencies import get_publisher
from app.schemas.document import UpdatePayload
from app.services import command_service
from app.services.change_publisher import ChangePublisher

router = APIRouter()


@router.get("/commands", summary="List all commands with their equipment name")
async def list_commands(db: Session = Depends(get_db)):
    return await command_service.list_commands(db)


@router.get("/commands/equipment/{equip_id}", summary="List the commands of an equipment")
async def get_commands_by_equipment(equip_id: str, db: Session = Depends(get_db)):
    return await command_service.get_by_equipment(db, equip_id)


@router.put("/command/equipment/{equip_id}/{class_id}/set", summary="Create or update an equipment command, replacing sub-documents")
async def set_equipment_command(equip_id: str, class_id: str, payload: UpdatePayload = Body(default={}),
                                db: Session = Depends(get_db),
                                publisher: ChangePublisher = Depends(get_publisher)):
    """A created command is named "cmd-<equipId>-<classId>" unless the payload names it."""
    return await command_service.set_by_equipment(db, equip_id, class_id, payload, add=False, publisher=publisher)


@router.put("/command/equipment/{equip_id}/{class_id}/add", summary="Create or update an equipment command, merging sub-documents")
async def add_equipment_command(equip_id: str, class_id: str, payload: UpdatePayload = Body(default={}),
                                db: Session = Depends(get_db),
                                publisher: ChangePublisher = Depends(get_publisher)):
    return await command_service.set_by_equipment(db, equip_id, class_id, payload, add=True, publisher=publisher)


@router.put("/command/{cmd_id}/set", summary="Update a command, replacing sub-documents")
async def set_command(cmd_id: str, payload: UpdatePayload = Body(default={}),
                      db: Session = Depends(get_db),
                      publisher: ChangePublisher = Depends(get_publisher)):
    return await command_service.set_by_id(db, cmd_id, payload, add=False, publisher=publisher)


@router.put("/command/{cmd_id}/add", summary="Update a command, merging sub-documents")
async def add_command(cmd_id: str, payload: UpdatePayload = Body(default={}),
                      db: Session = Depends(get_db),
                      publisher: ChangePublisher = Depends(get_publisher)):
    return await command_service.set_by_id(db, cmd_id, payload, add=True, publisher=publisher)


@router.delete("/command/{cmd_id}", summary="Delete a command by identifier")
async def delete_command(cmd_id: str, db: Session = Depends(get_db)):
    return await command_service.delete_by_id(db, cmd_id)
