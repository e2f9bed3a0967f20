# =============================================================================
# tests/test_clients.py - Client Endpoint Tests
# =============================================================================
# CRUD клиентов, метрики и работа с изображением профиля.
# =============================================================================

import shutil
from pathlib import Path

import pytest
from sqlalchemy import func, select

from site_admin.config import site_settings
from site_admin.db.models import Client
from site_admin.main import app
from site_admin.services.images import get_images_root

URL = "/api/v1/client/"


def create_client(client, headers, png_bytes=None, **fields):
    data = {"name": "Acme Corp", "area": "Dhaka", "status": "Active"}
    data.update(fields)
    files = {"profileImage": ("logo.PNG", png_bytes, "image/png")} if png_bytes else None
    return client.post(URL, data=data, files=files, headers=headers)


class TestCreateClient:

    def test_create_without_image(self, client, admin_headers):
        response = create_client(client, admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["error"] is False
        assert body["message"] == "Client created (no image uploaded)"
        assert body["id"] > 0

    def test_create_with_image(self, client, admin_headers, png_bytes, images_root):
        response = create_client(client, admin_headers, png_bytes)

        assert response.status_code == 201
        client_id = response.json()["id"]
        assert response.json()["message"] == "Client created and image saved successfully"

        expected = f"{client_id}_Acme_Corp.png"
        assert (images_root / "clients" / expected).read_bytes() == png_bytes

        profile = client.get(f"/api/v1/client/profile/{client_id}").json()
        assert profile["image_link"] == expected
        assert profile["image_url"] == f"/api/v1/images/clients/{expected}"

    def test_create_requires_name_and_area(self, client, admin_headers):
        response = create_client(client, admin_headers, area="   ")

        assert response.status_code == 400
        assert response.json()["message"] == "name and area are required"

    def test_create_rejects_bad_extension(self, client, admin_headers, run_db):
        response = client.post(
            URL,
            data={"name": "Acme", "area": "Dhaka"},
            files={"profileImage": ("script.exe", b"MZ", "application/octet-stream")},
            headers=admin_headers,
        )

        assert response.status_code == 400

        async def _count(session):
            return await session.scalar(select(func.count(Client.id)))

        assert run_db(_count) == 0

    def test_create_rejects_oversized_image(self, client, admin_headers, run_db, images_root, monkeypatch):
        monkeypatch.setattr(site_settings, "MAX_IMAGE_SIZE_MB", 1)
        big = b"0" * (2 * 1024 * 1024)

        response = create_client(client, admin_headers, big)

        assert response.status_code == 413
        assert response.json()["error"] is True

        async def _count(session):
            return await session.scalar(select(func.count(Client.id)))

        assert run_db(_count) == 0
        assert not (images_root / "clients").exists()

    def test_create_requires_admin(self, client):
        response = client.post(URL, data={"name": "Acme", "area": "Dhaka"})
        assert response.status_code == 401


class TestListClients:

    def test_list_newest_first_and_status_filter(self, client, admin_headers):
        create_client(client, admin_headers, name="First", status="Active")
        create_client(client, admin_headers, name="Second", status="Completed")
        create_client(client, admin_headers, name="Third", status="Active")

        body = client.get(URL).json()
        assert body["error"] is False
        assert [c["name"] for c in body["clients"]] == ["Third", "Second", "First"]

        active = client.get(URL, params={"status": "Active"}).json()["clients"]
        assert [c["name"] for c in active] == ["Third", "First"]

    def test_empty_fields_are_strings(self, client, admin_headers):
        create_client(client, admin_headers)

        item = client.get(URL).json()["clients"][0]
        assert item["note"] == ""
        assert item["service_name"] == ""
        assert item["image_link"] == ""
        assert item["image_url"] is None


class TestClientMetrics:

    def test_metrics_empty_table(self, client):
        response = client.get("/api/v1/client/metrics")

        assert response.status_code == 200
        assert response.json() == {
            "total_distinct_clients": 0,
            "active_projects": 0,
            "completed_projects": 0,
        }

    def test_metrics_counts(self, client, admin_headers):
        create_client(client, admin_headers, name="Acme", status="Active")
        create_client(client, admin_headers, name="Acme", status="Completed")
        create_client(client, admin_headers, name="Globex", status="Active")
        create_client(client, admin_headers, name="Initech", status="Paused")

        assert client.get("/api/v1/client/metrics").json() == {
            "total_distinct_clients": 3,
            "active_projects": 2,
            "completed_projects": 1,
        }


class TestClientProfile:

    def test_invalid_id(self, client):
        response = client.get("/api/v1/client/profile/abc")
        assert response.status_code == 400

    def test_not_found(self, client):
        response = client.get("/api/v1/client/profile/42")

        assert response.status_code == 404
        assert response.json() == {"error": True, "status": "not_found", "message": "client not found"}


class TestUpdateClient:

    def test_update_applies_non_empty_fields(self, client, admin_headers):
        client_id = create_client(client, admin_headers, note="keep me").json()["id"]

        response = client.put(
            URL,
            params={"id": client_id},
            data={"name": "  Acme Ltd ", "area": "", "note": ""},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Acme Ltd"
        assert data["area"] == "Dhaka"
        assert data["note"] == "keep me"

    def test_update_replaces_image(self, client, admin_headers, png_bytes, images_root):
        client_id = create_client(client, admin_headers, png_bytes).json()["id"]
        old_file = images_root / "clients" / f"{client_id}_Acme_Corp.png"
        assert old_file.exists()

        response = client.put(
            URL,
            params={"id": client_id},
            data={"name": "New Name"},
            files={"profileImage": ("photo.jpg", b"new-image", "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        new_file = images_root / "clients" / f"{client_id}_New_Name.jpg"
        assert new_file.read_bytes() == b"new-image"
        assert not old_file.exists()
        assert not list((images_root / "clients").glob("*_backup*"))
        assert response.json()["data"]["image_link"] == new_file.name

    def test_update_to_name_ending_in_backup_keeps_image(self, client, admin_headers, png_bytes, images_root):
        client_id = create_client(client, admin_headers, png_bytes, name="a").json()["id"]

        response = client.put(
            URL,
            params={"id": client_id},
            data={"name": "a backup"},
            files={"profileImage": ("photo.png", b"new-image", "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        expected = f"{client_id}_a_backup.png"
        assert response.json()["data"]["image_link"] == expected
        assert sorted(p.name for p in (images_root / "clients").iterdir()) == [expected]
        assert (images_root / "clients" / expected).read_bytes() == b"new-image"

    def test_update_missing_id(self, client, admin_headers):
        response = client.put(URL, data={"name": "x"}, headers=admin_headers)
        assert response.status_code == 400

    def test_update_not_found(self, client, admin_headers):
        response = client.put(URL, params={"id": 7}, data={"name": "x"}, headers=admin_headers)
        assert response.status_code == 404


class TestDeleteClient:

    def test_delete_removes_row_and_image(self, client, admin_headers, png_bytes, images_root):
        client_id = create_client(client, admin_headers, png_bytes).json()["id"]

        response = client.delete(URL, params={"id": client_id}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["error"] is False
        assert not list((images_root / "clients").iterdir())
        assert client.get(f"/api/v1/client/profile/{client_id}").status_code == 404

    def test_delete_with_missing_file_still_succeeds(self, client, admin_headers, png_bytes, images_root):
        client_id = create_client(client, admin_headers, png_bytes).json()["id"]
        for path in (images_root / "clients").iterdir():
            path.unlink()

        response = client.delete(URL, params={"id": client_id}, headers=admin_headers)
        assert response.status_code == 200

    def test_delete_not_found(self, client, admin_headers):
        response = client.delete(URL, params={"id": 99}, headers=admin_headers)
        assert response.status_code == 404


@pytest.fixture
def served_images_root(client):
    """Хранилище в IMAGES_DIR: из этой папки раздаёт статика /api/v1/images."""
    root = Path(site_settings.IMAGES_DIR)
    root.mkdir(parents=True, exist_ok=True)
    app.dependency_overrides[get_images_root] = lambda: root
    yield root
    shutil.rmtree(root, ignore_errors=True)


class TestServedImage:

    def test_uploaded_image_is_served(self, client, admin_headers, png_bytes, served_images_root):
        client_id = create_client(client, admin_headers, png_bytes).json()["id"]
        image_url = client.get(f"/api/v1/client/profile/{client_id}").json()["image_url"]

        response = client.get(image_url)

        assert response.status_code == 200
        assert response.content == png_bytes

    def test_missing_image(self, client, served_images_root):
        response = client.get("/api/v1/images/clients/999_none.png")
        assert response.status_code == 404
