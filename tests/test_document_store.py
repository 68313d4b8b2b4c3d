# tests/test_document_store.py
"""Unit tests for the document store adapter."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from app.models.equipment import Equipment
from app.models.zone import Zone
from app.services.document_store import DocumentStore, StoreError


class TestDocumentMapping:
    def test_dotted_path_touches_one_inner_key(self):
        row = Equipment(extensions={"zwave": {"node": 4, "endpoint": 1}})

        row.apply("zwave.endpoint", 2)

        assert row.extensions == {"zwave": {"node": 4, "endpoint": 2}}

    def test_plain_key_maps_to_column(self):
        row = Zone()
        row.apply("parentId", 3)
        assert row.parent_id == 3

    def test_column_is_not_a_sub_document(self):
        with pytest.raises(ValueError):
            Zone().apply("parentId.x", 1)

    def test_document_merges_columns_and_extensions(self):
        row = Equipment(name="fridge", equip_id=2, extensions={"rating": "A++"})
        doc = row.to_document()
        assert doc["name"] == "fridge"
        assert doc["equipId"] == 2
        assert doc["rating"] == "A++"


class TestStoreReads:
    def test_read_failure_is_treated_as_absent(self):
        db = MagicMock()
        db.query.side_effect = SQLAlchemyError("connection lost")
        store = DocumentStore(db)

        assert store.read_one("zones", {"name": "kitchen"}) is None
        assert store.read_all("zones", {"parentId": 1}) == []
        assert store.list("equipments") == []
        db.rollback.assert_called()

    def test_unknown_filter_key(self, db):
        with pytest.raises(ValueError):
            DocumentStore(db).read_one("zones", {"color": "red"})

    def test_list_is_enriched_with_parent_name(self, db):
        store = DocumentStore(db)
        store.upsert("zones", {"name": "house"}, {"zoneId": 1, "parentId": 0})
        store.upsert("zones", {"name": "kitchen"}, {"zoneId": 2, "parentId": 1})

        docs = {d["name"]: d for d in store.list("zones")}

        assert docs["kitchen"]["parentName"] == "house"
        assert docs["house"]["parentName"] == ""


class TestStoreWrites:
    def test_upsert_stamps_updated_at(self, db):
        written = DocumentStore(db).upsert("zones", {"name": "house"}, {"zoneId": 1})
        assert written["updatedAt"] is not None
        assert written["zoneId"] == 1

    def test_upsert_updates_in_place(self, db):
        store = DocumentStore(db)
        store.upsert("equipments", {"name": "fridge"}, {"equipId": 1, "zwave": {"node": 4}})
        store.upsert("equipments", {"name": "fridge"}, {"zwave.endpoint": 2})

        docs = store.read_all("equipments", {"name": "fridge"})

        assert len(docs) == 1
        assert docs[0]["zwave"] == {"node": 4, "endpoint": 2}

    def test_upsert_persists_type_only_changes(self, db):
        store = DocumentStore(db)
        store.upsert("equipments", {"name": "lamp"}, {"equipId": 1, "state": 1})

        store.upsert("equipments", {"name": "lamp"}, {"state": True})

        db.expire_all()
        assert store.read_one("equipments", {"name": "lamp"})["state"] is True

    def test_create_never_overwrites_an_existing_row(self, db):
        store = DocumentStore(db)
        store.upsert("zones", {"name": "house"}, {"zoneId": 1}, create=True)

        with pytest.raises(StoreError):
            store.upsert("zones", {"name": "house"}, {"zoneId": 2}, create=True)

        assert store.read_one("zones", {"name": "house"})["zoneId"] == 1

    def test_names_are_unique_in_storage(self, db):
        store = DocumentStore(db)
        store.upsert("equipments", {"name": "fridge"}, {"equipId": 1})

        with pytest.raises(StoreError):
            store.upsert("equipments", {"equipId": 2}, {"name": "fridge"})

    def test_write_failure_raises_store_error(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("UPDATE", {}, Exception("disk full"))

        with pytest.raises(StoreError):
            DocumentStore(db).upsert("zones", {"name": "house"}, {"zoneId": 1})
        db.rollback.assert_called_once()

    def test_delete_returns_count(self, db):
        store = DocumentStore(db)
        store.upsert("zones", {"name": "house"}, {"zoneId": 1})

        assert store.delete("zones", {"name": "house"}) == 1
        assert store.delete("zones", {"name": "house"}) == 0
