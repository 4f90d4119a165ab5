from app.api.activities import router as activities_router


def _record(client, headers, child_id, activity_type="Eat", when="2024-06-08T12:00:00", **extra):
    return client.post(
        "/api/activities",
        json={"child_id": child_id, "activity_type": activity_type, "activity_time": when, **extra},
        headers=headers,
    )


def test_staff_record_and_filter_activities_by_day(roster, build_client):
    client = build_client(activities_router)

    lunch = _record(client, roster.teacher_headers, roster.child_a_id, food_item="Pasta")
    assert lunch.status_code == 201
    assert lunch.json()["child_name"] == "Emma Johnson"
    assert lunch.json()["activity_time"] == "2024-06-08T12:00:00"
    _record(client, roster.teacher_headers, roster.child_b_id, "Nap", "2024-06-07T13:30:00", duration_minutes=90)

    everything = client.get("/api/activities", headers=roster.admin_headers).json()
    assert [a["activity_type"] for a in everything] == ["Eat", "Nap"]
    today = client.get("/api/activities", params={"date": "2024-06-08"}, headers=roster.teacher_headers).json()
    assert [a["id"] for a in today] == [lunch.json()["id"]]


def test_parents_only_see_their_own_childs_activities(roster, build_client):
    client = build_client(activities_router)
    created = _record(client, roster.teacher_headers, roster.child_a_id).json()

    own = client.get(f"/api/activities/child/{roster.child_a_id}", headers=roster.parent_a_headers)
    assert [a["id"] for a in own.json()] == [created["id"]]
    assert client.get(f"/api/activities/child/{roster.child_a_id}", params={"date": "2024-06-07"},
                      headers=roster.parent_a_headers).json() == []
    assert client.get(f"/api/activities/{created['id']}", headers=roster.parent_a_headers).status_code == 200

    assert client.get(f"/api/activities/child/{roster.child_a_id}",
                      headers=roster.parent_b_headers).status_code == 403
    assert client.get(f"/api/activities/{created['id']}", headers=roster.parent_b_headers).status_code == 403
    assert client.get("/api/activities", headers=roster.parent_a_headers).status_code == 403
    assert _record(client, roster.parent_a_headers, roster.child_a_id).status_code == 403


def test_activity_validation(roster, build_client):
    client = build_client(activities_router)

    assert _record(client, roster.teacher_headers, roster.child_a_id, "Juggling").status_code == 422
    assert _record(client, roster.teacher_headers, 999).status_code == 404
    assert client.get("/api/activities/999", headers=roster.admin_headers).status_code == 404


def test_update_and_delete_activity(roster, build_client):
    client = build_client(activities_router)
    created = _record(client, roster.teacher_headers, roster.child_a_id, "Nap", duration_minutes=30).json()
    url = f"/api/activities/{created['id']}"

    updated = client.patch(url, json={"duration_minutes": 45, "notes": "Slept well"}, headers=roster.teacher_headers)
    assert updated.status_code == 200
    assert updated.json()["duration_minutes"] == 45
    assert updated.json()["activity_type"] == "Nap"
    assert client.patch(url, json={"activity_type": None}, headers=roster.teacher_headers).status_code == 400

    assert client.delete(url, headers=roster.teacher_headers).status_code == 403
    assert client.delete(url, headers=roster.admin_headers).status_code == 204
    assert client.get(url, headers=roster.admin_headers).status_code == 404
