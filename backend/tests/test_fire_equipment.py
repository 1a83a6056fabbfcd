"""Tests for fire-equipment types and the equipment inventory."""
import pytest

from conftest import FIRE_CHIEF
from hse.core.exceptions import InUse, NotFound, ValidationFailed
from hse.models.base import generate_uuid
from hse.models.fire import FireEquipment
from hse.services import fire_equipment as svc

BASE = "/api/v1/fire"


class TestEquipmentTypes:
    def setup_method(self):
        self.payload = {
            "tag": "EXT-A1-01",
            "location": "Hall A",
            "install_date": "1401/03/10",
            "status": "operational",
        }

    def test_type_name_required(self, db):
        with pytest.raises(ValidationFailed):
            svc.add_equipment_type(db, "  ")

    def test_delete_blocked_while_in_use(self, db):
        co2 = svc.add_equipment_type(db, "CO2 extinguisher")
        svc.add_equipment(db, {**self.payload, "type_id": co2.id})
        with pytest.raises(InUse) as exc_info:
            svc.delete_equipment_type(db, co2.id)
        assert "CO2 extinguisher" in exc_info.value.message
        assert svc.get_equipment_type(db, co2.id).name == "CO2 extinguisher"

    def test_delete_unused_type(self, db):
        hose = svc.add_equipment_type(db, "Hose reel")
        svc.delete_equipment_type(db, hose.id)
        with pytest.raises(NotFound):
            svc.get_equipment_type(db, hose.id)

    def test_equipment_needs_existing_type_and_tag(self, db):
        with pytest.raises(NotFound):
            svc.add_equipment(db, {**self.payload, "type_id": "missing"})
        powder = svc.add_equipment_type(db, "Powder extinguisher")
        with pytest.raises(ValidationFailed):
            svc.add_equipment(db, {**self.payload, "tag": " ", "type_id": powder.id})

    def test_search_by_tag_location_and_type(self, db):
        co2 = svc.add_equipment_type(db, "CO2 extinguisher")
        hose = svc.add_equipment_type(db, "Hose reel")
        svc.add_equipment(db, {**self.payload, "type_id": co2.id})
        svc.add_equipment(db, {**self.payload, "tag": "HR-07", "location": "Boiler room", "type_id": hose.id})

        assert [e.tag for e in svc.list_equipment(db, "hose")] == ["HR-07"]
        assert [e.tag for e in svc.list_equipment(db, "hall")] == ["EXT-A1-01"]
        assert [e.tag for e in svc.list_equipment(db, "ext-a1")] == ["EXT-A1-01"]
        assert len(svc.list_equipment(db)) == 2

    def test_missing_type_reads_unknown(self):
        orphan = FireEquipment(id=generate_uuid(), tag="X", type_id="gone", location="")
        assert svc.type_name(orphan) == "unknown"


class TestFireApi:
    def test_crud_and_blocked_delete(self, client):
        type_resp = client.post(f"{BASE}/equipment-types", json={"name": "CO2 extinguisher"}, auth=FIRE_CHIEF)
        assert type_resp.status_code == 201
        type_id = type_resp.json()["id"]

        created = client.post(
            f"{BASE}/equipment",
            json={"tag": "EXT-01", "type_id": type_id, "location": "Lab", "next_inspection_date": "1404/1/5"},
            auth=FIRE_CHIEF,
        ).json()
        assert created["type_name"] == "CO2 extinguisher"
        assert created["next_inspection_date"] == "1404/01/05"

        blocked = client.delete(f"{BASE}/equipment-types/{type_id}", auth=FIRE_CHIEF)
        assert blocked.status_code == 409
        assert blocked.json()["message"] == "Cannot delete 'CO2 extinguisher' because it is in use."

        updated = client.put(
            f"{BASE}/equipment/{created['id']}",
            json={"tag": "EXT-01", "type_id": type_id, "location": "Lab", "status": "needs_service"},
            auth=FIRE_CHIEF,
        ).json()
        assert updated["status"] == "needs_service"

        assert client.delete(f"{BASE}/equipment/{created['id']}", auth=FIRE_CHIEF).status_code == 204
        assert client.delete(f"{BASE}/equipment-types/{type_id}", auth=FIRE_CHIEF).status_code == 204

    def test_invalid_status(self, client):
        type_id = client.post(f"{BASE}/equipment-types", json={"name": "Hydrant"}, auth=FIRE_CHIEF).json()["id"]
        resp = client.post(
            f"{BASE}/equipment", json={"tag": "H-1", "type_id": type_id, "status": "broken"}, auth=FIRE_CHIEF
        )
        assert resp.status_code == 400
