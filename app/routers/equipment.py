# app/routers/equipment.py
"""Equipments: list, lookups by name/class/zone, create/update by name or class, delete."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.dependencies import get_publisher
from app.schemas.document import UpdatePayload
from app.services import equipment_service
from app.services.change_publisher import ChangePublisher

router = APIRouter()


@router.get("/equipments", summary="List all equipments with their zone name")
async def list_equipments(db: Session = Depends(get_db)):
    return await equipment_service.list_equipments(db)


@router.get("/equipment/name/{name}", summary="Get an equipment by name")
async def get_equipment(name: str, db: Session = Depends(get_db)):
    return await equipment_service.get_by_name(db, name)


@router.get("/equipment/class/{name}", summary="List the equipments of a class")
async def get_equipments_by_class(name: str, db: Session = Depends(get_db)):
    return await equipment_service.get_by_class(db, name)


@router.get("/equipment/zone", summary="List the equipments without zone")
@router.get("/equipment/zone/{name}", summary="List the equipments of a zone")
async def get_equipments_by_zone(name: str = "", db: Session = Depends(get_db)):
    return await equipment_service.get_by_zone(db, name)


@router.put("/equipment/name/{name}/set", summary="Create or update an equipment, replacing sub-documents")
async def set_equipment(name: str, payload: UpdatePayload = Body(default={}),
                        db: Session = Depends(get_db),
                        publisher: ChangePublisher = Depends(get_publisher)):
    """
    Updatable: name, zoneId (0 clears the zone), powerSource (sector | battery),
    powerType, className, classId and any extension field.
    """
    return await equipment_service.set_by_name(db, name, payload, add=False, publisher=publisher)


@router.put("/equipment/name/{name}/add", summary="Create or update an equipment, merging sub-documents")
async def add_equipment(name: str, payload: UpdatePayload = Body(default={}),
                        db: Session = Depends(get_db),
                        publisher: ChangePublisher = Depends(get_publisher)):
    return await equipment_service.set_by_name(db, name, payload, add=True, publisher=publisher)


@router.put("/equipment/class/{name}/{class_id}/set", summary="Create or update a class equipment, replacing sub-documents")
async def set_class_equipment(name: str, class_id: str, payload: UpdatePayload = Body(default={}),
                              db: Session = Depends(get_db),
                              publisher: ChangePublisher = Depends(get_publisher)):
    """A created equipment is named "<className>-<classId>" unless the payload names it."""
    return await equipment_service.set_by_class(db, name, class_id, payload, add=False, publisher=publisher)


@router.put("/equipment/class/{name}/{class_id}/add", summary="Create or update a class equipment, merging sub-documents")
async def add_class_equipment(name: str, class_id: str, payload: UpdatePayload = Body(default={}),
                              db: Session = Depends(get_db),
                              publisher: ChangePublisher = Depends(get_publisher)):
    return await equipment_service.set_by_class(db, name, class_id, payload, add=True, publisher=publisher)


@router.delete("/equipment/{name}", summary="Delete an equipment by name")
async def delete_equipment(name: str, db: Session = Depends(get_db)):
    return await equipment_service.delete_by_name(db, name)
