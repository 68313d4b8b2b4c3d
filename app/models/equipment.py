# app/models/equipment.py
"""
Equipments collection.
An equipment belongs to at most one zone and carries free-form
class-keyed sub-documents in its extensions.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.database import Base
from app.models.document import DocumentMixin


class Equipment(DocumentMixin, Base):
    __tablename__ = "equipments"

    FIELDS = {
        "name": "name",
        "equipId": "equip_id",
        "className": "class_name",
        "classId": "class_id",
        "zoneId": "zone_id",
        "powerSource": "power_source",
        "powerType": "power_type",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    equip_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    class_name = Column(String(100), default="", nullable=False, index=True)
    class_id = Column(Integer, default=0, nullable=False)
    zone_id = Column(Integer, default=0, nullable=False, index=True)
    power_source = Column(String(20), default="", nullable=False)  # sector | battery
    power_type = Column(String(100), default="", nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)
    extensions = Column(JSON, default=dict, nullable=False)

    def __repr__(self):
        return f"<Equipment {self.equip_id} name={self.name} class={self.class_name}-{self.class_id}>"
