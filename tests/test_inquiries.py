# =============================================================================
# tests/test_inquiries.py - Inquiry Endpoint Tests
# =============================================================================

import pytest

URL = "/api/v1/inquiry/"


def inquiry_payload(**overrides):
    payload = {
        "name": "Visitor",
        "mobile": "+8801700000000",
        "email": "visitor@example.com",
        "subject": "Quote",
        "message": "Please call me back",
    }
    payload.update(overrides)
    return payload


def submit(client, **overrides):
    response = client.post(URL, json=inquiry_payload(**overrides))
    assert response.status_code == 201
    return response.json()["id"]


class TestSubmitInquiry:

    def test_submit_is_public(self, client, admin_headers):
        response = client.post(URL, json=inquiry_payload(name="  Visitor  "))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Inquiry submitted successfully"

        inquiry = client.get(f"{URL}{body['id']}", headers=admin_headers).json()
        assert inquiry["name"] == "Visitor"
        assert inquiry["status"] == "NEW"
        assert inquiry["inquiry_date"]

    @pytest.mark.parametrize("field", ["name", "mobile", "email", "subject", "message"])
    def test_all_fields_required(self, client, field):
        response = client.post(URL, json=inquiry_payload(**{field: "   "}))

        assert response.status_code == 400
        assert response.json() == {"error": True, "message": "All fields are required"}

    def test_invalid_email(self, client):
        response = client.post(URL, json=inquiry_payload(email="not-an-email"))

        assert response.status_code == 400
        assert "email" in response.json()["message"]

    def test_malformed_json(self, client):
        response = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400


class TestListInquiries:

    def test_requires_admin(self, client):
        assert client.get(URL).status_code == 401

    def test_counts_always_present(self, client, admin_headers):
        body = client.get(URL, headers=admin_headers).json()
        assert body == {"inquiries": [], "counts": {"NEW": 0, "RESOLVED": 0}}

    def test_list_filter_and_pagination(self, client, admin_headers):
        ids = [submit(client, subject=f"S{i}") for i in range(5)]
        client.patch(f"{URL}update-status", params={"id": ids[0]}, json={"status": "RESOLVED"}, headers=admin_headers)

        body = client.get(URL, headers=admin_headers).json()
        assert [i["subject"] for i in body["inquiries"]] == ["S4", "S3", "S2", "S1", "S0"]
        assert body["counts"] == {"NEW": 4, "RESOLVED": 1}

        resolved = client.get(URL, params={"status": "RESOLVED"}, headers=admin_headers).json()
        assert [i["id"] for i in resolved["inquiries"]] == [ids[0]]
        assert resolved["counts"] == {"NEW": 4, "RESOLVED": 1}

        page = client.get(URL, params={"page_index": 2, "page_length": 2}, headers=admin_headers).json()
        assert [i["subject"] for i in page["inquiries"]] == ["S2", "S1"]

        everything = client.get(URL, params={"page_length": 0}, headers=admin_headers).json()
        assert len(everything["inquiries"]) == 5


class TestUpdateInquiry:

    def test_update_status(self, client, admin_headers):
        inquiry_id = submit(client)

        response = client.patch(
            f"{URL}update-status",
            params={"id": inquiry_id},
            json={"status": "RESOLVED", "subject": ""},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "RESOLVED"
        assert data["subject"] == "Quote"

    def test_invalid_status(self, client, admin_headers):
        inquiry_id = submit(client)

        response = client.patch(
            f"{URL}update-status",
            params={"id": inquiry_id},
            json={"status": "ARCHIVED"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_update_not_found(self, client, admin_headers):
        response = client.patch(
            f"{URL}update-status", params={"id": 55}, json={"status": "NEW"}, headers=admin_headers
        )
        assert response.status_code == 404


class TestGetInquiry:

    def test_get_by_id(self, client, admin_headers):
        inquiry_id = submit(client, subject="Partnership")

        response = client.get(f"{URL}{inquiry_id}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == inquiry_id
        assert body["name"] == "Visitor"
        assert body["mobile"] == "+8801700000000"
        assert body["email"] == "visitor@example.com"
        assert body["subject"] == "Partnership"
        assert body["message"] == "Please call me back"
        assert body["status"] == "NEW"

    def test_get_requires_admin(self, client):
        inquiry_id = submit(client)
        assert client.get(f"{URL}{inquiry_id}").status_code == 401

    def test_get_invalid_id(self, client, admin_headers):
        assert client.get(f"{URL}abc", headers=admin_headers).status_code == 400


class TestDeleteInquiry:

    def test_delete(self, client, admin_headers):
        inquiry_id = submit(client)

        response = client.delete(URL, params={"id": inquiry_id}, headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{URL}{inquiry_id}", headers=admin_headers).status_code == 404

    def test_delete_not_found(self, client, admin_headers):
        assert client.delete(URL, params={"id": 8}, headers=admin_headers).status_code == 404
