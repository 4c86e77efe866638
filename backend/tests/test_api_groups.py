from datetime import timedelta
from uuid import uuid4

from conftest import auth_headers, utc
from weighin.core.timeutils import utcnow


API = "/api/v1"
DAY_1 = utc(2025, 1, 1)


def _create_group(client, owner, **payload):
    payload.setdefault("name", "Summer Cut")
    response = client.post(f"{API}/groups", json=payload, headers=auth_headers(owner))
    assert response.status_code == 201
    return response.json()


# ----------------------------------------------------------------------------
# Groups and membership
# ----------------------------------------------------------------------------

def test_create_join_and_list(client, make_user):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = _create_group(client, sam)

    assert len(group["invite_code"]) == 6
    assert group["member_count"] == 1
    assert group["members"][0]["role"] == "OWNER"

    joined = client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"].lower()}, headers=auth_headers(kim))
    assert joined.status_code == 200
    assert joined.json()["member_count"] == 2

    again = client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"]}, headers=auth_headers(kim))
    assert again.status_code == 409

    unknown = client.post(f"{API}/groups/join", json={"invite_code": "ZZZZZZ"}, headers=auth_headers(kim))
    assert unknown.status_code == 404

    listed = client.get(f"{API}/groups", headers=auth_headers(kim)).json()
    assert [g["id"] for g in listed] == [group["id"]]

    notes = client.get(f"{API}/notifications", headers=auth_headers(sam)).json()
    assert notes[0]["type"] == "member_joined"
    assert notes[0]["message"] == 'Kim joined the group "Summer Cut"'


def test_group_window_is_validated(client, make_user):
    sam = make_user("Sam")
    response = client.post(f"{API}/groups", json={
        "name": "Backwards",
        "start_date": "2025-02-01T00:00:00Z",
        "end_date": "2025-01-01T00:00:00Z",
    }, headers=auth_headers(sam))
    assert response.status_code == 422


def test_non_members_are_kept_out(client, make_user):
    sam, outsider = make_user("Sam"), make_user("Outsider")
    group = _create_group(client, sam)

    for path in ("", "/progress", "/settlement", "/teams"):
        response = client.get(f"{API}/groups/{group['id']}{path}", headers=auth_headers(outsider))
        assert response.status_code == 403, path

    assert client.get(f"{API}/groups/{uuid4()}", headers=auth_headers(sam)).status_code == 404
    assert client.get(f"{API}/groups/{group['id']}").status_code in (401, 403)


def test_only_owner_updates_and_deletes(client, make_user):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = _create_group(client, sam)
    client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"]}, headers=auth_headers(kim))

    url = f"{API}/groups/{group['id']}"
    assert client.put(url, json={"name": "Mine now"}, headers=auth_headers(kim)).status_code == 403
    assert client.put(url, json={"name": "Fall Cut"}, headers=auth_headers(sam)).json()["name"] == "Fall Cut"

    assert client.delete(url, headers=auth_headers(kim)).status_code == 403
    assert client.delete(url, headers=auth_headers(sam)).status_code == 204
    assert client.get(url, headers=auth_headers(sam)).status_code == 404


def test_leaving(client, make_user):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = _create_group(client, sam)
    client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"]}, headers=auth_headers(kim))

    leave_url = f"{API}/groups/{group['id']}/members/me"
    assert client.delete(leave_url, headers=auth_headers(sam)).status_code == 403
    assert client.delete(leave_url, headers=auth_headers(kim)).status_code == 204
    assert client.get(f"{API}/groups/{group['id']}", headers=auth_headers(kim)).status_code == 403

    types = [n["type"] for n in client.get(f"{API}/notifications", headers=auth_headers(sam)).json()]
    assert "member_left" in types


# ----------------------------------------------------------------------------
# Teams
# ----------------------------------------------------------------------------

def test_teams_require_team_challenge(client, make_user):
    sam = make_user("Sam")
    group = _create_group(client, sam)
    response = client.post(f"{API}/groups/{group['id']}/teams", json={"name": "Red"}, headers=auth_headers(sam))
    assert response.status_code == 422


def test_team_management_and_assignment(client, make_user):
    sam, kim, lee = make_user("Sam"), make_user("Kim"), make_user("Lee")
    group = _create_group(client, sam, is_team_challenge=True)
    gid = group["id"]
    for user in (kim, lee):
        client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"]}, headers=auth_headers(user))

    red = client.post(f"{API}/groups/{gid}/teams", json={"name": "Red"}, headers=auth_headers(sam)).json()
    blue = client.post(f"{API}/groups/{gid}/teams", json={"name": "Blue"}, headers=auth_headers(sam)).json()
    assert red["color"] != blue["color"]
    assert client.post(f"{API}/groups/{gid}/teams", json={"name": "X"}, headers=auth_headers(kim)).status_code == 403

    # Members move themselves; only the owner moves others
    assert client.put(
        f"{API}/groups/{gid}/members/{kim.id}/team", json={"team_id": red["id"]}, headers=auth_headers(kim)
    ).status_code == 200
    assert client.put(
        f"{API}/groups/{gid}/members/{lee.id}/team", json={"team_id": red["id"]}, headers=auth_headers(kim)
    ).status_code == 403

    # Once on a team, switching or leaving goes through the owner
    for team_id in (blue["id"], None):
        assert client.put(
            f"{API}/groups/{gid}/members/{kim.id}/team", json={"team_id": team_id}, headers=auth_headers(kim)
        ).status_code == 403
    assert client.put(
        f"{API}/groups/{gid}/members/{lee.id}/team", json={"team_id": blue["id"]}, headers=auth_headers(sam)
    ).json()["team_id"] == blue["id"]
    assert client.put(
        f"{API}/groups/{gid}/members/{lee.id}/team", json={"team_id": str(uuid4())}, headers=auth_headers(sam)
    ).status_code == 404

    # Kim sees her own team assignment but not Lee's
    members = {m["display_name"]: m["team_id"] for m in client.get(f"{API}/groups/{gid}", headers=auth_headers(kim)).json()["members"]}
    assert members == {"Sam": None, "Kim": red["id"], "Lee": None}

    renamed = client.put(f"{API}/groups/{gid}/teams/{red['id']}", json={"name": "Crimson"}, headers=auth_headers(sam))
    assert renamed.json()["name"] == "Crimson"

    assert client.delete(f"{API}/groups/{gid}/teams/{red['id']}", headers=auth_headers(sam)).status_code == 204
    teams = client.get(f"{API}/groups/{gid}/teams", headers=auth_headers(kim)).json()
    assert [t["name"] for t in teams] == ["Blue"]
    members = {m["display_name"]: m["team_id"] for m in client.get(f"{API}/groups/{gid}", headers=auth_headers(sam)).json()["members"]}
    assert members["Kim"] is None


# ----------------------------------------------------------------------------
# Progress and settlement
# ----------------------------------------------------------------------------

def test_progress_leaderboard_hides_private_entries(client, make_user):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = _create_group(client, sam)
    client.post(f"{API}/groups/join", json={"invite_code": group["invite_code"]}, headers=auth_headers(kim))

    for user, weights in ((sam, [200, 196]), (kim, [180, 171])):
        for weight in weights:
            client.post(f"{API}/weights", json={"weight": weight}, headers=auth_headers(user))
    client.post(f"{API}/weights", json={"weight": 150, "is_private": True}, headers=auth_headers(sam))

    body = client.get(f"{API}/groups/{group['id']}/progress", headers=auth_headers(sam)).json()

    assert body["is_team_challenge"] is False
    assert body["teams"] == []
    assert body["settlement"] is None
    assert [m["display_name"] for m in body["members"]] == ["Kim", "Sam"]
    sam_row = body["members"][1]
    assert sam_row["latest_change"] == -2.0
    assert sam_row["total_entries"] == 2
    assert len(sam_row["entries"]) == 2

    assert client.get(f"{API}/groups/{group['id']}/settlement", headers=auth_headers(sam)).status_code == 409


def test_team_progress_visibility(client, make_user, make_group, make_team, add_member, add_entry):
    sam, kim, lee = make_user("Sam"), make_user("Kim"), make_user("Lee")
    group = make_group(sam, is_team_challenge=True)
    red, blue = make_team(group, "Red"), make_team(group, "Blue", color="#3B82F6")
    add_member(group, kim, team=red)
    add_member(group, lee, team=blue)
    add_entry(kim, 200.0, 0.0, DAY_1)
    add_entry(kim, 190.0, -5.0, DAY_1 + timedelta(days=1))
    add_entry(lee, 200.0, 0.0, DAY_1)
    add_entry(lee, 196.0, -2.0, DAY_1 + timedelta(days=1))

    body = client.get(f"{API}/groups/{group.id}/progress", headers=auth_headers(kim)).json()

    teams = {t["name"]: t for t in body["teams"]}
    assert [t["name"] for t in body["teams"]] == ["Red", "Blue"]
    assert [m["display_name"] for m in teams["Red"]["members"]] == ["Kim"]
    assert teams["Blue"]["members"] is None
    assert teams["Blue"]["average_change"] == -2.0

    team_ids = {m["display_name"]: m["team_id"] for m in body["members"]}
    assert team_ids == {"Kim": str(red.id), "Lee": None, "Sam": None}

    owner_view = client.get(f"{API}/groups/{group.id}/progress", headers=auth_headers(sam)).json()
    assert all(t["members"] is None for t in owner_view["teams"])
    assert all(m["team_id"] is None for m in owner_view["members"])


def test_concluded_group_is_settled_once(client, make_user, make_group, add_member, add_entry):
    a, b = make_user("A"), make_user("B")
    group = make_group(a, start_date=DAY_1, end_date=utcnow() - timedelta(days=1))
    add_member(group, b)
    add_entry(a, 200.0, 0.0, DAY_1)
    add_entry(a, 190.0, -5.0, DAY_1 + timedelta(days=10))
    add_entry(b, 150.0, 0.0, DAY_1)
    add_entry(b, 155.0, 3.33, DAY_1 + timedelta(days=10))

    settled = client.get(f"{API}/groups/{group.id}/settlement", headers=auth_headers(b))
    assert settled.status_code == 200
    body = settled.json()
    assert [m["display_name"] for m in body["members"]] == ["A"]
    assert body["members"][0]["weight_loss"] == 10.0
    assert body["members"][0]["weight_loss_percentage"] == 5.0
    assert body["total_weight_lost"] == 10.0
    assert body["cached"] is True

    progress = client.get(f"{API}/groups/{group.id}/progress", headers=auth_headers(a)).json()
    assert progress["is_concluded"] is True
    assert progress["settlement"]["total_weight_lost"] == 10.0

    detail = client.get(f"{API}/groups/{group.id}", headers=auth_headers(a)).json()
    assert detail["total_weight_lost"] == 10.0
