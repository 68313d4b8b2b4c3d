# app/models/counter.py
"""
Counters collection: one row per logical counter name ("zone", "equipment", "command").
lastId is the last identifier handed out; it never decreases.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base
from app.models.document import DocumentMixin


class Counter(DocumentMixin, Base):
    __tablename__ = "counters"

    FIELDS = {
        "name": "name",
        "lastId": "last_id",
        "updatedAt": "updated_at",
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    last_id = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Counter {self.name} lastId={self.last_id}>"
