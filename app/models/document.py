# app/models/document.py
"""
Row <-> document mapping shared by every collection table.

A document is the camelCase dict exposed by the registry: the model's
mapped columns plus, for extensible collections, the free-form keys kept
in the JSON ``extensions`` column. Extension values are either scalars or
one level of ``{inner key: scalar}`` sub-document.
"""

from typing import Any, Optional

from sqlalchemy.orm.attributes import flag_modified


class DocumentMixin:
    # document key -> column attribute
    FIELDS: dict = {}

    @classmethod
    def column_for(cls, key: str):
        attr = cls.FIELDS.get(key)
        return getattr(cls, attr) if attr else None

    @classmethod
    def is_extensible(cls) -> bool:
        return hasattr(cls, "extensions")

    def to_document(self) -> dict:
        doc = {key: getattr(self, attr) for key, attr in self.FIELDS.items()}
        for key, value in (getattr(self, "extensions", None) or {}).items():
            doc[key] = dict(value) if isinstance(value, dict) else value
        return doc

    def apply(self, path: str, value: Any) -> None:
        """Set one write-set entry; ``field.subfield`` touches a single inner key."""
        head, _, inner = path.partition(".")
        if head in self.FIELDS:
            if inner:
                raise ValueError(f"'{head}' is not a sub-document")
            setattr(self, self.FIELDS[head], value)
            return
        if not self.is_extensible():
            raise ValueError(f"Unknown field '{head}' for {self.__tablename__}")

        extensions = dict(self.extensions or {})
        if inner:
            current: Optional[Any] = extensions.get(head)
            sub = dict(current) if isinstance(current, dict) else {}
            sub[inner] = value
            extensions[head] = sub
        else:
            extensions[head] = dict(value) if isinstance(value, dict) else value
        self.extensions = extensions
        # JSON columns compare with ==, which cannot tell True from 1
        flag_modified(self, "extensions")
