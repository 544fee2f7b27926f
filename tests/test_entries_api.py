"""HTTP tests for /api/entries, including role gates and photo uploads."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from app.client.api_client import photo_filename
from app.config import settings
from app.models.user import UserRole
from tests.helpers import entry_payload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def daily(make_user, headers_for):
    return headers_for(make_user(UserRole.DAILY_ADMIN))


@pytest.fixture
def weekly(make_user, headers_for):
    return headers_for(make_user(UserRole.WEEKLY_ADMIN))


@pytest.fixture
def yearly(make_user, headers_for):
    return headers_for(make_user(UserRole.YEARLY_ADMIN))


def create(client, headers, **overrides):
    resp = client.post("/api/entries", json=entry_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestEntryCrud:
    def test_create_then_get_round_trip(self, client, daily):
        created = create(client, daily)

        fetched = client.get(f"/api/entries/{created['id']}", headers=daily).json()

        assert fetched == created
        for field, value in entry_payload().items():
            assert fetched[field] == value
        assert fetched["fechaSalida"] is None
        assert fetched["photoUrl"] is None

    def test_register_exit_keeps_other_fields(self, client, daily):
        created = create(client, daily, tipoVehiculo=["Carro"], lugarDestino={"Entidades": ["Área 1"]})

        resp = client.patch(f"/api/entries/{created['id']}", json={"fechaSalida": "2026-10-17T18:15:00"},
                            headers=daily)

        assert resp.status_code == 200
        updated = resp.json()
        assert updated["fechaSalida"] == "2026-10-17T18:15:00"
        unchanged = {k: v for k, v in created.items() if k not in ("fechaSalida", "updatedAt")}
        assert {k: updated[k] for k in unchanged} == unchanged

    def test_exit_before_entry_is_400(self, client, daily):
        created = create(client, daily)
        resp = client.patch(f"/api/entries/{created['id']}", json={"fechaSalida": "2026-10-17T07:00:00"},
                            headers=daily)
        assert resp.status_code == 400

    def test_missing_required_field_is_422(self, client, daily):
        body = entry_payload()
        del body["chapa"]
        assert client.post("/api/entries", json=body, headers=daily).status_code == 422

    def test_list_contains_created(self, client, daily):
        a = create(client, daily, chapa="A-1")
        b = create(client, daily, chapa="B-2")
        ids = {e["id"] for e in client.get("/api/entries", headers=daily).json()}
        assert ids == {a["id"], b["id"]}

    def test_unknown_entry_is_404(self, client, daily):
        assert client.get("/api/entries/does-not-exist", headers=daily).status_code == 404
        resp = client.patch("/api/entries/does-not-exist", json={"chapa": "X"}, headers=daily)
        assert resp.status_code == 404

    def test_requires_token(self, client):
        assert client.get("/api/entries").status_code == 401
        assert client.post("/api/entries", json=entry_payload()).status_code == 401


class TestRoleGates:
    def test_daily_cannot_delete(self, client, daily):
        created = create(client, daily)
        assert client.delete(f"/api/entries/{created['id']}", headers=daily).status_code == 403

    def test_weekly_can_delete(self, client, daily, weekly):
        created = create(client, daily)
        assert client.delete(f"/api/entries/{created['id']}", headers=weekly).status_code == 204
        assert client.get(f"/api/entries/{created['id']}", headers=weekly).status_code == 404

    def test_statistics_gate(self, client, daily, weekly, yearly):
        create(client, daily)
        assert client.get("/api/entries/statistics", headers=daily).status_code == 403
        resp = client.get("/api/entries/statistics", headers=weekly)
        assert resp.status_code == 200
        assert resp.json() == {"total": 1, "completed": 0, "pending": 1, "todayEntries": 1}
        assert client.get("/api/entries/statistics", headers=yearly).status_code == 200

    def test_date_range(self, client, daily, weekly):
        created = create(client, daily)
        params = {"startDate": "2000-01-01", "endDate": "2999-12-31"}

        assert client.get("/api/entries/date-range", params=params, headers=daily).status_code == 403
        resp = client.get("/api/entries/date-range", params=params, headers=weekly)
        assert resp.status_code == 200
        assert [e["id"] for e in resp.json()] == [created["id"]]

    def test_date_range_bad_date_is_400(self, client, weekly):
        params = {"startDate": "soon", "endDate": "2999-12-31"}
        assert client.get("/api/entries/date-range", params=params, headers=weekly).status_code == 400


class TestBulkDelete:
    def test_delete_multiple(self, client, daily, weekly):
        ids = [create(client, daily, chapa=f"P{i}")["id"] for i in range(3)]

        resp = client.request("DELETE", "/api/entries", json={"ids": ids}, headers=weekly)

        assert resp.status_code == 200
        assert resp.json()["deletedCount"] == 3
        for entry_id in ids:
            assert client.get(f"/api/entries/{entry_id}", headers=weekly).status_code == 404

    def test_daily_forbidden(self, client, daily):
        entry_id = create(client, daily)["id"]
        resp = client.request("DELETE", "/api/entries", json={"ids": [entry_id]}, headers=daily)
        assert resp.status_code == 403

    def test_nothing_matching_is_404(self, client, weekly):
        resp = client.request("DELETE", "/api/entries", json={"ids": ["nope"]}, headers=weekly)
        assert resp.status_code == 404


class TestManualCleanupEndpoint:
    def test_yearly_only(self, client, daily, weekly, yearly):
        create(client, daily)
        create(client, daily, chapa="P2")

        assert client.post("/api/entries/cleanup", headers=weekly).status_code == 403
        resp = client.post("/api/entries/cleanup", headers=yearly)

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert resp.json()["deletedCount"] == 2
        assert client.get("/api/entries", headers=yearly).json() == []


class TestPhotoUpload:
    def test_upload_sets_photo_url_and_serves_file(self, client, daily):
        entry_id = create(client, daily)["id"]

        resp = client.post(f"/api/entries/{entry_id}/photo",
                           files={"photo": ("visitor_1.png", PNG_BYTES, "image/png")}, headers=daily)

        assert resp.status_code == 200
        assert resp.json()["photoUrl"] == "/uploads/visitor_1.png"
        assert os.path.isfile(os.path.join(settings.UPLOAD_DIR, "visitor_1.png"))

        photo = client.get(f"/api/entries/{entry_id}/photo", headers=daily)
        assert photo.status_code == 200
        assert photo.content == PNG_BYTES
        assert client.get("/uploads/visitor_1.png").content == PNG_BYTES

    def test_directory_components_are_stripped(self, client, daily):
        entry_id = create(client, daily)["id"]
        resp = client.post(f"/api/entries/{entry_id}/photo",
                           files={"photo": ("../../evil.JPG", PNG_BYTES, "image/jpeg")}, headers=daily)
        assert resp.status_code == 200
        assert resp.json()["photoUrl"] == "/uploads/evil.JPG"

    def test_wrong_extension_rejected(self, client, daily):
        entry_id = create(client, daily)["id"]
        resp = client.post(f"/api/entries/{entry_id}/photo",
                           files={"photo": ("notes.pdf", b"%PDF-1.4", "application/pdf")}, headers=daily)
        assert resp.status_code == 400
        assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, "notes.pdf"))

    def test_oversize_rejected_before_storage(self, client, daily, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 16)
        entry_id = create(client, daily)["id"]

        resp = client.post(f"/api/entries/{entry_id}/photo",
                           files={"photo": ("big.gif", b"G" * 17, "image/gif")}, headers=daily)

        assert resp.status_code == 413
        assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, "big.gif"))
        assert client.get(f"/api/entries/{entry_id}", headers=daily).json()["photoUrl"] is None

    def test_upload_to_unknown_entry_is_404(self, client, daily):
        resp = client.post("/api/entries/missing/photo",
                           files={"photo": ("ghost.png", PNG_BYTES, "image/png")}, headers=daily)
        assert resp.status_code == 404
        assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, "ghost.png"))

    def test_each_entry_keeps_its_own_photo(self, client, daily):
        first = create(client, daily, chapa="A-1")["id"]
        second = create(client, daily, chapa="B-2")["id"]

        for entry_id, content in ((first, b"AAAA"), (second, b"BBBB")):
            resp = client.post(f"/api/entries/{entry_id}/photo",
                               files={"photo": (photo_filename(entry_id), content, "image/jpeg")}, headers=daily)
            assert resp.status_code == 200
            assert resp.json()["photoUrl"] == f"/uploads/photo-{entry_id}.jpg"

        assert client.get(f"/api/entries/{first}/photo", headers=daily).content == b"AAAA"
        assert client.get(f"/api/entries/{second}/photo", headers=daily).content == b"BBBB"

    def test_photo_missing_is_404(self, client, daily):
        entry_id = create(client, daily)["id"]
        assert client.get(f"/api/entries/{entry_id}/photo", headers=daily).status_code == 404
