# app/routers/counters.py
"""Counters: inspect and allocate the identifier sequences."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.counter import CounterNextOut, CounterOut
from app.services import counter_service

router = APIRouter()


@router.get("/counters", response_model=list[CounterOut], summary="List the used counters")
def list_counters(db: Session = Depends(get_db)):
    return counter_service.list_counters(db)


@router.get("/counter/{name}", response_model=CounterOut, summary="Last identifier of a counter")
def get_counter(name: str, db: Session = Depends(get_db)):
    last_id = counter_service.last_id(db, name)
    return {"name": name, "lastId": last_id if last_id is not None else "never allocated"}


@router.get("/counter/{name}/next", response_model=CounterNextOut, summary="Allocate the next identifier")
async def next_counter(name: str, db: Session = Depends(get_db)):
    return {"name": name, "nextId": await counter_service.next_id(db, name)}
