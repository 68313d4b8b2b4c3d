# app/services/entity_kinds.py
"""
Per-entity field tables consumed by the reconciliation engine.

The order of `fields` is the validation order: name first, then foreign
keys, enumerations and plain scalars. Keys absent from the table and from
`protected` are extension fields.
"""

from dataclasses import dataclass

from app.services.reconciliation import ChoiceField, NameField, ReferenceField, ScalarField

POWER_SOURCES = ("sector", "battery")


@dataclass(frozen=True)
class EntityKind:
    label: str
    collection: str
    counter: str
    id_field: str
    topic: str
    defaults: dict
    fields: dict
    derived: tuple = ()

    @property
    def protected(self) -> tuple:
        return (self.id_field, "createdAt", "updatedAt") + self.derived


ZONE = EntityKind(
    label="zone",
    collection="zones",
    counter="zone",
    id_field="zoneId",
    topic="zone",
    defaults={"parentId": 0},
    fields={
        "name": NameField(),
        "parentId": ReferenceField("zones", "zoneId", "Parent", name_field="parentName"),
    },
    derived=("parentName",),
)

EQUIPMENT = EntityKind(
    label="equipment",
    collection="equipments",
    counter="equipment",
    id_field="equipId",
    topic="equipment",
    defaults={
        "className": "",
        "classId": 0,
        "zoneId": 0,
        "powerSource": "",
        "powerType": "",
    },
    fields={
        "name": NameField(),
        "zoneId": ReferenceField("zones", "zoneId", "Zone", name_field="zoneName"),
        "powerSource": ChoiceField(POWER_SOURCES, "power source"),
        "powerType": ScalarField(str),
        "className": ScalarField(str),
        "classId": ScalarField(int),
    },
    derived=("zoneName",),
)

COMMAND = EntityKind(
    label="command",
    collection="commands",
    counter="command",
    id_field="cmdId",
    topic="command",
    defaults={
        "equipId": 0,
        "classId": 0,
        "readable": False,
        "writable": False,
        "historized": False,
    },
    fields={
        "name": NameField(),
        "equipId": ScalarField(int),
        "classId": ScalarField(int),
        "readable": ScalarField(bool),
        "writable": ScalarField(bool),
        "historized": ScalarField(bool),
    },
    derived=("equipName",),
)
