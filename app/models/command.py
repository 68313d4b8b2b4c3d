# app/models/command.py
"""
Commands collection.
A command is addressed either by its own cmdId or by the
(equipId, classId) pair of the equipment it drives.
"""

from sqlalchemy import Boolean, Column, Integer, String, DateTime, JSON
from app.database import Base
from app.models.document import DocumentMixin


class Command(DocumentMixin, Base):
    __tablename__ = "commands"

    FIELDS = {
        "name": "name",
        "cmdId": "cmd_id",
        "equipId": "equip_id",
        "classId": "class_id",
        "readable": "readable",
        "writable": "writable",
        "historized": "historized",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    cmd_id = Column(Integer, unique=True, nullable=False, index=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    equip_id = Column(Integer, default=0, nullable=False, index=True)
    class_id = Column(Integer, default=0, nullable=False)
    readable = Column(Boolean, default=False, nullable=False)
    writable = Column(Boolean, default=False, nullable=False)
    historized = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)
    extensions = Column(JSON, default=dict, nullable=False)

    def __repr__(self):
        return f"<Command {self.cmd_id} name={self.name} equip={self.equip_id}/{self.class_id}>"
