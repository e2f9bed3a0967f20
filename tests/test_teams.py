# =============================================================================
# tests/test_teams.py - Team Endpoint Tests
# =============================================================================

URL = "/api/v1/team/"


def create_team(client, headers, title):
    response = client.post(URL, json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def create_member(client, headers, team_id, name):
    response = client.post(
        "/api/v1/member/",
        data={"name": name, "team": str(team_id)},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateTeam:

    def test_create(self, client, admin_headers):
        response = client.post(URL, json={"title": "  Engineering "}, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Team created successfully"

        team = client.get(f"/api/v1/team/{body['id']}").json()
        assert team["title"] == "Engineering"

    def test_title_required(self, client, admin_headers):
        response = client.post(URL, json={"title": "   "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "title is required"

    def test_requires_admin(self, client):
        assert client.post(URL, json={"title": "x"}).status_code == 401


class TestListTeams:

    def test_list_newest_first(self, client, admin_headers):
        create_team(client, admin_headers, "Alpha")
        create_team(client, admin_headers, "Beta")

        teams = client.get("/api/v1/team/list").json()
        assert [t["title"] for t in teams] == ["Beta", "Alpha"]

    def test_details_groups_members(self, client, admin_headers):
        alpha = create_team(client, admin_headers, "Alpha")
        beta = create_team(client, admin_headers, "Beta")
        empty = create_team(client, admin_headers, "Empty")
        create_member(client, admin_headers, beta, "Bob")
        create_member(client, admin_headers, alpha, "Alice")
        create_member(client, admin_headers, beta, "Carol")

        body = client.get("/api/v1/team/list/details").json()

        assert body["error"] is False
        assert [t["team_id"] for t in body["data"]] == [alpha, beta, empty]
        by_id = {t["team_id"]: t for t in body["data"]}
        assert [m["name"] for m in by_id[alpha]["members"]] == ["Alice"]
        assert [m["name"] for m in by_id[beta]["members"]] == ["Bob", "Carol"]
        assert by_id[beta]["members"][0]["team_name"] == "Beta"
        assert by_id[empty]["members"] == []


class TestTeamById:

    def test_get_invalid_id(self, client):
        assert client.get("/api/v1/team/abc").status_code == 400

    def test_get_not_found(self, client):
        response = client.get("/api/v1/team/5")

        assert response.status_code == 404
        assert response.json()["status"] == "not_found"

    def test_update_title(self, client, admin_headers):
        team_id = create_team(client, admin_headers, "Old")

        response = client.put(f"/api/v1/team/{team_id}", json={"title": "New"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "New"

    def test_update_empty_title_is_ignored(self, client, admin_headers):
        team_id = create_team(client, admin_headers, "Keep")

        response = client.put(f"/api/v1/team/{team_id}", json={"title": ""}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Keep"

    def test_delete_empty_team(self, client, admin_headers):
        team_id = create_team(client, admin_headers, "Temp")

        response = client.delete(f"/api/v1/team/{team_id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/v1/team/{team_id}").status_code == 404

    def test_delete_team_with_members_conflicts(self, client, admin_headers):
        team_id = create_team(client, admin_headers, "Busy")
        create_member(client, admin_headers, team_id, "Worker")

        response = client.delete(f"/api/v1/team/{team_id}", headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error"] is True
        assert client.get(f"/api/v1/team/{team_id}").status_code == 200
