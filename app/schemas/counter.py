# app/schemas/counter.py
from pydantic import BaseModel
from typing import Union


class CounterOut(BaseModel):
    name: str
    lastId: Union[int, str]      # "never allocated" when the counter was never used


class CounterNextOut(BaseModel):
    name: str
    nextId: int
