# tests/test_reconciliation.py
"""Unit tests for the reconciliation engine and its integrity checks."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from app.services.entity_kinds import COMMAND, EQUIPMENT, ZONE
from app.services.integrity_service import reference_exists, unique_name
from app.services.reconciliation import Work, as_int, commit, reconcile, shell
from app.utils.reply import parse_id


def existing(**fields):
    doc = {"name": "fridge", "equipId": 3, "className": "", "classId": 0, "zoneId": 0,
           "zoneName": "", "powerSource": "sector", "powerType": "", **fields}
    return Work(doc=doc)


class TestWork:
    def test_steps_return_new_values(self):
        work = Work(doc={"name": "a"})
        updated = work.assign("name", "b")

        assert work.doc == {"name": "a"} and work.write_set == {}
        assert updated.doc == {"name": "b"} and updated.write_set == {"name": "b"}

    def test_annotate_stays_out_of_the_write_set(self):
        work = Work(doc={}).annotate("zoneName", "kitchen")
        assert work.doc == {"zoneName": "kitchen"}
        assert work.write_set == {}

    def test_shell_records_everything_but_derived_names(self):
        work = shell(ZONE, 4, {"name": "attic"})

        assert work.is_new
        assert work.doc["zoneId"] == 4
        assert work.doc["parentName"] == ""
        assert "parentName" not in work.write_set
        assert work.write_set["name"] == "attic"


class TestReconcile:
    @pytest.mark.asyncio
    async def test_first_rejection_stops_the_pass(self):
        store = MagicMock()
        work = await reconcile(store, EQUIPMENT, existing(), {"powerSource": "wind", "classId": 4})

        assert work.err == "Unmanaged power source: wind"
        assert "classId" not in work.write_set

    @pytest.mark.asyncio
    async def test_noop_payload_gives_empty_write_set(self):
        store = MagicMock()
        work = await reconcile(store, EQUIPMENT, existing(), {"name": "fridge", "powerSource": "sector"})

        assert work.ok
        assert work.write_set == {}
        store.read_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_mode_uses_dotted_paths(self):
        work = existing(zwave={"node": 4, "endpoint": 1})
        work = Work(doc=work.doc, add=True)

        work = await reconcile(MagicMock(), EQUIPMENT, work, {"zwave": {"endpoint": 2, "label": "x"}})

        assert work.write_set == {"zwave.endpoint": 2, "zwave.label": "x"}
        assert work.doc["zwave"] == {"node": 4, "endpoint": 2, "label": "x"}

    @pytest.mark.asyncio
    async def test_replace_mode_writes_the_whole_sub_document(self):
        work = existing(zwave={"node": 4, "endpoint": 1})

        work = await reconcile(MagicMock(), EQUIPMENT, work, {"zwave": {"endpoint": 2}})

        assert work.write_set == {"zwave": {"endpoint": 2}}

    @pytest.mark.asyncio
    async def test_dotted_keys_are_refused(self):
        work = await reconcile(MagicMock(), EQUIPMENT, existing(), {"zwave.node": 3})
        assert work.err == "Invalid field name: zwave.node"

    @pytest.mark.asyncio
    async def test_type_only_change_is_written(self):
        work = existing(state=1, cfg={"on": 1})

        work = await reconcile(MagicMock(), EQUIPMENT, work, {"state": True, "cfg": {"on": True}})

        assert work.write_set == {"state": True, "cfg": {"on": True}}
        assert work.doc["state"] is True

    @pytest.mark.asyncio
    async def test_add_mode_type_only_change_is_written(self):
        work = Work(doc=existing(cfg={"on": 1, "x": 2}).doc, add=True)

        work = await reconcile(MagicMock(), EQUIPMENT, work, {"cfg": {"on": True, "x": 2}})

        assert work.write_set == {"cfg.on": True}
        assert work.doc["cfg"] == {"on": True, "x": 2}

    @pytest.mark.asyncio
    async def test_add_mode_creates_missing_sub_document(self):
        work = Work(doc=existing().doc, add=True)

        work = await reconcile(MagicMock(), EQUIPMENT, work, {"cfg": {}})

        assert work.write_set == {"cfg": {}}
        assert work.doc["cfg"] == {}

    @pytest.mark.asyncio
    async def test_protected_fields_are_ignored(self):
        work = await reconcile(MagicMock(), COMMAND, Work(doc={"cmdId": 1, "name": "x"}),
                               {"cmdId": 8, "createdAt": 0, "equipName": "y"})
        assert work.ok
        assert work.write_set == {}


class TestCommit:
    @pytest.mark.asyncio
    async def test_empty_write_set_is_not_persisted(self):
        store = MagicMock()
        work = Work(doc={"name": "fridge", "equipId": 3})

        result = await commit(store, EQUIPMENT, work, {"name": "fridge"})

        store.upsert.assert_not_called()
        assert result.doc == work.doc

    @pytest.mark.asyncio
    async def test_new_document_is_always_persisted(self):
        store = MagicMock()
        store.upsert.return_value = {"updatedAt": "now"}

        result = await commit(store, ZONE, shell(ZONE, 1, {"name": "kitchen"}), {"name": "kitchen"})

        store.upsert.assert_called_once()
        assert result.doc["updatedAt"] == "now"

    @pytest.mark.asyncio
    async def test_rejected_work_is_not_persisted(self):
        store = MagicMock()
        await commit(store, ZONE, Work(doc={}, write_set={"name": "x"}).reject("no"), {})
        store.upsert.assert_not_called()


class TestIntegrityChecks:
    @pytest.mark.asyncio
    async def test_unique_name_is_bounded(self):
        store = MagicMock()
        store.read_one.return_value = {"name": "taken"}

        assert await unique_name(store, "commands", "cmd-1-1", max_attempts=5) is None
        assert store.read_one.call_count == 5

    @pytest.mark.asyncio
    async def test_unique_name_appends_suffix(self):
        store = MagicMock()
        store.read_one.side_effect = [{"name": "cmd-1-1"}, {"name": "cmd-1-11"}, None]

        assert await unique_name(store, "commands", "cmd-1-1") == "cmd-1-111"

    @pytest.mark.asyncio
    async def test_zero_reference_needs_no_lookup(self):
        store = MagicMock()
        assert await reference_exists(store, "zones", "zoneId", 0)
        store.read_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_reference_must_match_exactly_one_row(self):
        store = MagicMock()
        store.read_all.return_value = []
        assert not await reference_exists(store, "zones", "zoneId", 5)


class TestCoercion:
    def test_as_int(self):
        assert as_int(4) == 4
        assert as_int(4.9) == 4
        assert as_int("12") == 12
        assert as_int(True) is None
        assert as_int("abc") is None
        assert as_int(None) is None

    def test_out_of_range_integers_are_refused(self):
        assert as_int(2**31 - 1) == 2**31 - 1
        assert as_int(10**20) is None
        assert as_int(1e300) is None
        assert parse_id("100000000000000000000") == 0
