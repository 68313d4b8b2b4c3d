# app/models/zone.py
"""
Zones collection.
A zone may be nested in a parent zone (parentId = 0 means top-level).
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.database import Base
from app.models.document import DocumentMixin


class Zone(DocumentMixin, Base):
    __tablename__ = "zones"

    FIELDS = {
        "name": "name",
        "zoneId": "zone_id",
        "parentId": "parent_id",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    zone_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    parent_id = Column(Integer, default=0, nullable=False, index=True)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)
    extensions = Column(JSON, default=dict, nullable=False)

    def __repr__(self):
        return f"<Zone {self.zone_id} name={self.name} parent={self.parent_id}>"
