"""Tests for checklist categories, checklists and submissions."""
import pytest

from conftest import SAFETY_OFFICER
from hse.core.exceptions import NotFound, ValidationFailed
from hse.models.safety import Checklist, ChecklistSubmission
from hse.services import checklists as svc

BASE = "/api/v1/checklists"


class TestChecklistService:
    @pytest.fixture(autouse=True)
    def _db(self, db):
        self.db = db
        self.category = svc.add_category(db, "  Electrical  ")

    def _checklist(self, title="Panel inspection", texts=("Covers closed", "Labels readable")):
        return svc.add_checklist(self.db, self.category.id, title, [{"text": t} for t in texts])

    def test_category_name_is_trimmed_and_required(self):
        assert self.category.name == "Electrical"
        with pytest.raises(ValidationFailed):
            svc.add_category(self.db, "   ")
        with pytest.raises(ValidationFailed):
            svc.edit_category(self.db, self.category.id, "")

    def test_items_get_ids_and_blanks_are_dropped(self):
        checklist = svc.add_checklist(
            self.db, self.category.id, "Panel", [{"text": " A "}, {"text": "   "}, {"text": "B"}]
        )
        assert [item["text"] for item in checklist.items] == ["A", "B"]
        assert all(item["id"] for item in checklist.items)
        assert len({item["id"] for item in checklist.items}) == 2

    def test_checklist_needs_title_and_an_item(self):
        with pytest.raises(ValidationFailed):
            self._checklist(title=" ")
        with pytest.raises(ValidationFailed):
            self._checklist(texts=("", "  "))

    def test_checklist_needs_existing_category(self):
        with pytest.raises(NotFound):
            svc.add_checklist(self.db, "missing", "Title", [{"text": "A"}])

    def test_edit_keeps_existing_item_ids(self):
        checklist = self._checklist()
        first = dict(checklist.items[0])
        original_ids = {item["id"] for item in checklist.items}
        edited = svc.edit_checklist(
            self.db, checklist.id, "Panel inspection v2", [first, {"text": "Earth connected"}]
        )
        assert edited.items[0] == first
        assert edited.items[1]["id"] not in original_ids
        assert edited.category_id == self.category.id

    def test_category_delete_cascades_but_keeps_submissions(self):
        checklist = self._checklist()
        other = svc.add_category(self.db, "Mechanical")
        survivor = svc.add_checklist(self.db, other.id, "Guards", [{"text": "Guard fitted"}])
        submission = svc.add_submission(self.db, checklist.id, [])

        removed = svc.delete_category(self.db, self.category.id)

        assert removed == 1
        remaining = self.db.query(Checklist).all()
        assert [c.id for c in remaining] == [survivor.id]
        assert self.db.query(ChecklistSubmission).filter_by(id=submission.id).count() == 1
        history = svc.submission_history(self.db)
        assert history[0]["checklist_title"] == "deleted checklist"
        assert svc.submission_detail(self.db, submission.id)["category_name"] == "unknown"

    def test_submission_defaults_unanswered_to_na(self):
        checklist = self._checklist()
        a, b = checklist.items
        submission = svc.add_submission(
            self.db,
            checklist.id,
            [{"item_id": a["id"], "status": "fail", "comment": "Cover missing"}],
            location="Substation 2",
            performed_by="Safety officer",
        )
        assert submission.items == [
            {"item_id": a["id"], "status": "fail", "comment": "Cover missing"},
            {"item_id": b["id"], "status": "na", "comment": ""},
        ]
        assert len(submission.date) == len("1403/01/01 10:00")

    def test_submission_rejects_unknown_item_and_status(self):
        checklist = self._checklist()
        with pytest.raises(ValidationFailed):
            svc.add_submission(self.db, checklist.id, [{"item_id": "nope", "status": "pass"}])
        with pytest.raises(ValidationFailed):
            svc.add_submission(self.db, checklist.id, [{"item_id": checklist.items[0]["id"], "status": "ok"}])


class TestChecklistApi:
    def test_full_flow(self, client):
        category = client.post(f"{BASE}/categories", json={"name": "Fire safety"}, auth=SAFETY_OFFICER).json()
        checklist = client.post(
            BASE,
            json={"category_id": category["id"], "title": "Exit routes", "items": [{"text": "Exits unlocked"}]},
            auth=SAFETY_OFFICER,
        ).json()
        item_id = checklist["items"][0]["id"]

        resp = client.post(
            f"{BASE}/submissions",
            json={
                "checklist_id": checklist["id"],
                "location": "Warehouse",
                "performed_by": "Officer Amini",
                "items": [{"item_id": item_id, "status": "pass"}],
            },
            auth=SAFETY_OFFICER,
        )
        assert resp.status_code == 201
        assert resp.json()["checklist_title"] == "Exit routes"

        listing = client.get(f"{BASE}/categories", auth=SAFETY_OFFICER).json()
        assert listing[0]["checklists"][0]["title"] == "Exit routes"

        found = client.get(f"{BASE}/submissions", params={"search": "warehouse"}, auth=SAFETY_OFFICER).json()
        assert len(found) == 1

        detail = client.get(f"{BASE}/submissions/{found[0]['id']}", auth=SAFETY_OFFICER).json()
        assert detail["category_name"] == "Fire safety"
        assert detail["checklist_items"][0]["text"] == "Exits unlocked"

        deleted = client.delete(f"{BASE}/categories/{category['id']}", auth=SAFETY_OFFICER)
        assert deleted.json() == {"checklists_removed": 1}
        assert client.get(BASE, auth=SAFETY_OFFICER).json() == []
        history = client.get(f"{BASE}/submissions", auth=SAFETY_OFFICER).json()
        assert history[0]["checklist_title"] == "deleted checklist"

    def test_delete_single_checklist(self, client):
        category = client.post(f"{BASE}/categories", json={"name": "PPE"}, auth=SAFETY_OFFICER).json()
        checklist = client.post(
            BASE,
            json={"category_id": category["id"], "title": "Helmets", "items": [{"text": "Worn"}]},
            auth=SAFETY_OFFICER,
        ).json()
        assert client.delete(f"{BASE}/{checklist['id']}", auth=SAFETY_OFFICER).status_code == 204
        assert client.get(f"{BASE}/{checklist['id']}", auth=SAFETY_OFFICER).status_code == 404

    def test_blank_category_name(self, client):
        resp = client.post(f"{BASE}/categories", json={"name": " "}, auth=SAFETY_OFFICER)
        assert resp.status_code == 400
        assert resp.json()["error"] is True
