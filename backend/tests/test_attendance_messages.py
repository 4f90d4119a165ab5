from app.api.attendance import router as attendance_router
from app.api.messages import router as messages_router
from app.models.user import User


def test_check_in_and_out(roster, build_client):
    client = build_client(attendance_router)

    checked_in = client.post(
        "/api/attendance/check-in",
        json={"child_id": roster.child_a_id, "notes": "Dropped off by dad"},
        headers=roster.teacher_headers,
    )
    assert checked_in.status_code == 201
    record = checked_in.json()
    assert record["date"] == "2024-06-08"
    assert record["check_in_time"] == "2024-06-08T09:00:00"

    again = client.post("/api/attendance/check-in", json={"child_id": roster.child_a_id},
                        headers=roster.teacher_headers)
    assert again.status_code == 400

    out = client.put(f"/api/attendance/{record['id']}/check-out", json={}, headers=roster.teacher_headers)
    assert out.status_code == 200
    assert out.json()["check_out_time"] == "2024-06-08T09:00:00"
    assert client.put(f"/api/attendance/{record['id']}/check-out", json={},
                      headers=roster.teacher_headers).status_code == 400

    history = client.get(f"/api/attendance/child/{roster.child_a_id}", headers=roster.parent_a_headers)
    assert len(history.json()) == 1
    assert client.get(f"/api/attendance/child/{roster.child_a_id}",
                      headers=roster.parent_b_headers).status_code == 403
    assert len(client.get("/api/attendance/date/2024-06-08", headers=roster.admin_headers).json()) == 1


def test_parents_cannot_check_in(roster, build_client):
    client = build_client(attendance_router)

    response = client.post("/api/attendance/check-in", json={"child_id": roster.child_a_id},
                           headers=roster.parent_a_headers)

    assert response.status_code == 403


def test_messages_between_parent_and_teacher(db, roster, build_client):
    client = build_client(messages_router)
    teacher_id = db.query(User).filter(User.email == "maria@daycare.com").one().id
    parent_id = db.query(User).filter(User.email == "sarah@example.com").one().id

    sent = client.post(
        "/api/messages",
        json={"recipient_id": teacher_id, "content": "Emma has a cold today."},
        headers=roster.parent_a_headers,
    )
    assert sent.status_code == 201
    assert sent.json()["is_read"] is False

    assert client.get("/api/messages/unread-count", headers=roster.teacher_headers).json() == {"count": 1}
    conversation = client.get(f"/api/messages/conversation/{parent_id}", headers=roster.teacher_headers).json()
    assert [m["content"] for m in conversation] == ["Emma has a cold today."]

    message_id = sent.json()["id"]
    assert client.put(f"/api/messages/{message_id}/read", headers=roster.parent_a_headers).status_code == 404
    assert client.put(f"/api/messages/{message_id}/read", headers=roster.teacher_headers).status_code == 204
    assert client.get("/api/messages/unread-count", headers=roster.teacher_headers).json() == {"count": 0}

    to_self = client.post("/api/messages", json={"recipient_id": parent_id, "content": "hi"},
                          headers=roster.parent_a_headers)
    assert to_self.status_code == 400
