# app/routers/zones.py
"""Zones: list, lookup, create/update ("set" replaces sub-documents, "add" merges them), delete."""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.routers.dependencies import get_publisher
from app.schemas.document import UpdatePayload
from app.services import zone_service
from app.services.change_publisher import ChangePublisher

router = APIRouter()


@router.get("/zones", summary="List all zones with their parent name")
async def list_zones(db: Session = Depends(get_db)):
    return await zone_service.list_zones(db)


@router.get("/zone/name/{name}", summary="Get a zone by name")
async def get_zone(name: str, db: Session = Depends(get_db)):
    return await zone_service.get_by_name(db, name)


@router.get("/zone/parent/{name}", summary="List the children of a zone")
async def get_zone_children(name: str, db: Session = Depends(get_db)):
    return await zone_service.get_by_parent(db, name)


@router.put("/zone/name/{name}/set", summary="Create or update a zone, replacing sub-documents")
async def set_zone(name: str, payload: UpdatePayload = Body(default={}),
                   db: Session = Depends(get_db),
                   publisher: ChangePublisher = Depends(get_publisher)):
    """
    Updatable: name, parentId (0 clears the parent, otherwise it must exist)
    and any extension field.
    """
    return await zone_service.set_by_name(db, name, payload, add=False, publisher=publisher)


@router.put("/zone/name/{name}/add", summary="Create or update a zone, merging sub-documents")
async def add_zone(name: str, payload: UpdatePayload = Body(default={}),
                   db: Session = Depends(get_db),
                   publisher: ChangePublisher = Depends(get_publisher)):
    return await zone_service.set_by_name(db, name, payload, add=True, publisher=publisher)


@router.delete("/zone/id/{zone_id}", summary="Delete a zone by identifier")
async def delete_zone_by_id(zone_id: str, db: Session = Depends(get_db)):
    return await zone_service.delete_by_id(db, zone_id)


@router.delete("/zone/{name}", summary="Delete a zone by name")
async def delete_zone(name: str, db: Session = Depends(get_db)):
    """Children and equipments of the zone keep their (now stale) zone identifier."""
    return await zone_service.delete_by_name(db, name)
