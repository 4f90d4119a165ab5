from app.api.events import router as events_router
from app.api.holidays import router as holidays_router
from app.api.notifications import router as notifications_router
from app.models.child import Child
from app.models.notification import EVENT_REGISTRATION, NEW_EVENT, Notification

EVENT = {
    "name": "Summer Picnic",
    "type": "Outing",
    "description": "Lunch in the park",
    "price": "5.00",
    "capacity": 2,
    "time": "2024-06-20T11:00:00",
}


def _create_event(client, headers, **overrides):
    return client.post("/api/events", json={**EVENT, **overrides}, headers=headers)


def test_new_event_is_announced_to_parents_and_teachers(db, roster, build_client):
    client = build_client(events_router, notifications_router)

    response = _create_event(client, roster.teacher_headers)

    assert response.status_code == 201
    event = response.json()
    assert event["registered_count"] == 0
    assert db.query(Notification).filter(Notification.type == NEW_EVENT).count() == 3

    parent_notes = client.get("/api/notifications", headers=roster.parent_a_headers).json()
    assert parent_notes[0]["message"] == "New event 'Summer Picnic' has been created. Register your children now!"
    assert parent_notes[0]["redirect_url"] == f"/events/{event['id']}"
    teacher_notes = client.get("/api/notifications", headers=roster.teacher_headers).json()
    assert teacher_notes[0]["message"] == "New event 'Summer Picnic' has been created on Jun 20, 2024"


def test_parents_cannot_create_events(roster, build_client):
    client = build_client(events_router)

    assert _create_event(client, roster.parent_a_headers).status_code == 403
    assert _create_event(client, roster.admin_headers, age_from=5, age_to=3).status_code == 400


def test_registration_rules(db, roster, build_client):
    client = build_client(events_router)
    event_id = _create_event(client, roster.admin_headers).json()["id"]
    url = f"/api/events/{event_id}/participants"

    own = client.post(url, json={"child_id": roster.child_a_id}, headers=roster.parent_a_headers)
    assert own.status_code == 201
    assert own.json()["child_name"] == "Emma Johnson"
    assert own.json()["status"] == "Registered"

    duplicate = client.post(url, json={"child_id": roster.child_a_id}, headers=roster.admin_headers)
    assert duplicate.status_code == 400

    someone_else = client.post(url, json={"child_id": roster.child_b_id}, headers=roster.parent_a_headers)
    assert someone_else.status_code == 403

    assert client.post(url, json={"child_id": roster.child_b_id}, headers=roster.parent_b_headers).status_code == 201

    extra = Child(first_name="Ava", last_name="Chen", date_of_birth="2021-03-03", parent_id=roster.parent_b_id)
    db.add(extra)
    db.commit()
    full = client.post(url, json={"child_id": extra.id}, headers=roster.admin_headers)
    assert full.status_code == 400
    assert full.json()["detail"] == "Event is full"

    registrations = db.query(Notification).filter(Notification.type == EVENT_REGISTRATION).all()
    assert len(registrations) == 2
    assert all(n.user_id is None for n in registrations)

    assert client.get(f"/api/events/{event_id}", headers=roster.parent_a_headers).json()["registered_count"] == 2
    parent_view = client.get(url, headers=roster.parent_a_headers).json()
    assert [p["child_id"] for p in parent_view] == [roster.child_a_id]


def test_cancel_registration(roster, build_client):
    client = build_client(events_router)
    event_id = _create_event(client, roster.admin_headers).json()["id"]
    client.post(f"/api/events/{event_id}/participants", json={"child_id": roster.child_a_id},
                headers=roster.parent_a_headers)
    url = f"/api/events/{event_id}/participants/{roster.child_a_id}"

    assert client.delete(url, headers=roster.parent_b_headers).status_code == 403
    assert client.delete(url, headers=roster.parent_a_headers).status_code == 204
    assert client.delete(url, headers=roster.parent_a_headers).status_code == 404


def test_unknown_event_is_404(roster, build_client):
    client = build_client(events_router)

    assert client.get("/api/events/999", headers=roster.admin_headers).status_code == 404
    assert client.post(
        "/api/events/999/participants",
        json={"child_id": roster.child_a_id},
        headers=roster.admin_headers,
    ).status_code == 404


def test_holidays_are_admin_managed(roster, build_client):
    client = build_client(holidays_router)
    holiday = {"name": "Independence Day", "date": "2024-07-04", "is_recurring": True, "recurrence_type": "yearly"}

    assert client.post("/api/holidays", json=holiday, headers=roster.teacher_headers).status_code == 403
    created = client.post("/api/holidays", json=holiday, headers=roster.admin_headers)
    assert created.status_code == 201
    assert created.json()["is_recurring"] is True
    assert created.json()["color"] == "#FF6B6B"

    assert len(client.get("/api/holidays", params={"year": 2024}, headers=roster.parent_a_headers).json()) == 1
    assert client.get("/api/holidays", params={"year": 2025}, headers=roster.parent_a_headers).json() == []
    assert client.delete(f"/api/holidays/{created.json()['id']}", headers=roster.admin_headers).status_code == 204


def test_participants_hidden_from_unknown_roles(roster, build_client):
    client = build_client(events_router)
    event_id = _create_event(client, roster.admin_headers).json()["id"]

    response = client.get(f"/api/events/{event_id}/participants", headers=roster.guest_headers)

    assert response.status_code == 403
    assert client.get(f"/api/events/{event_id}/participants", headers=roster.teacher_headers).json() == []
