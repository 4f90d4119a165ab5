from app.api.auth import router as auth_router
from app.api.auth import ensure_admin_account, verify_password
from app.api.children import router as children_router
from app.api.parents import router as parents_router
from app.api.teachers import router as teachers_router
from app.models.teacher import TeacherChild
from app.models.user import User


def _login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_creating_parent_with_password_creates_login(db, roster, build_client):
    client = build_client(auth_router, parents_router)

    created = client.post(
        "/api/parents",
        json={
            "first_name": "Nora",
            "last_name": "Patel",
            "email": "Nora.Patel@example.com",
            "phone_number": "555-0199",
            "password": "Secret@123",
        },
        headers=roster.admin_headers,
    )
    assert created.status_code == 201
    assert created.json()["email"] == "nora.patel@example.com"

    login = _login(client, "nora.patel@example.com", "Secret@123")
    assert login.status_code == 200
    assert login.json()["role"] == "Parent"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert me.json()["parent_id"] == created.json()["id"]

    assert _login(client, "nora.patel@example.com", "wrong-password").status_code == 401


def test_duplicate_parent_email_is_rejected(roster, build_client):
    client = build_client(parents_router)

    response = client.post(
        "/api/parents",
        json={"first_name": "S", "last_name": "J", "email": "sarah@example.com", "phone_number": "1"},
        headers=roster.admin_headers,
    )

    assert response.status_code == 400


def test_parent_profile_access(roster, build_client):
    client = build_client(parents_router)

    assert client.get("/api/parents", headers=roster.parent_a_headers).status_code == 403
    assert len(client.get("/api/parents", headers=roster.teacher_headers).json()) == 2
    assert client.get(f"/api/parents/{roster.parent_b_id}", headers=roster.parent_a_headers).status_code == 403

    updated = client.patch(
        f"/api/parents/{roster.parent_a_id}",
        json={"address": "12 Maple Street"},
        headers=roster.parent_a_headers,
    )
    assert updated.json()["address"] == "12 Maple Street"
    deactivate = client.patch(
        f"/api/parents/{roster.parent_a_id}",
        json={"is_active": False},
        headers=roster.parent_a_headers,
    )
    assert deactivate.status_code == 403


def test_teacher_deactivation_disables_login(db, roster, build_client):
    client = build_client(teachers_router)

    assert client.delete(f"/api/teachers/{roster.teacher_id}", headers=roster.admin_headers).status_code == 204

    assert client.get("/api/teachers", headers=roster.admin_headers).json() == []
    assert client.get("/api/teachers", headers=roster.teacher_headers).status_code == 401
    account = db.query(User).filter(User.teacher_id == roster.teacher_id).one()
    assert account.is_active == 0


def test_assigning_children_to_a_teacher(db, roster, build_client):
    client = build_client(teachers_router, children_router)
    assign_url = f"/api/teachers/{roster.teacher_id}/assign-child"

    assigned = client.post(assign_url, json={"child_id": roster.child_a_id}, headers=roster.admin_headers)
    assert assigned.status_code == 201
    assert assigned.json()["child_name"] == "Emma Johnson"
    assert client.post(assign_url, json={"child_id": roster.child_a_id},
                       headers=roster.admin_headers).status_code == 400
    assert client.post(assign_url, json={"child_id": 999}, headers=roster.admin_headers).status_code == 400
    assert client.post(assign_url, json={"child_id": roster.child_b_id},
                       headers=roster.teacher_headers).status_code == 403

    mine = client.get(f"/api/teachers/{roster.teacher_id}/children", headers=roster.teacher_headers)
    assert [c["child_id"] for c in mine.json()] == [roster.child_a_id]
    assert client.get(f"/api/teachers/{roster.teacher_id}/children",
                      headers=roster.parent_a_headers).status_code == 403

    assert client.delete(f"/api/children/{roster.child_a_id}", headers=roster.admin_headers).status_code == 204
    assert db.query(TeacherChild).count() == 0
    assert client.delete(f"/api/teachers/{roster.teacher_id}/remove-child/{roster.child_a_id}",
                         headers=roster.admin_headers).status_code == 404


def test_removing_an_assignment(roster, build_client):
    client = build_client(teachers_router)
    client.post(f"/api/teachers/{roster.teacher_id}/assign-child", json={"child_id": roster.child_b_id},
                headers=roster.admin_headers)

    removed = client.delete(f"/api/teachers/{roster.teacher_id}/remove-child/{roster.child_b_id}",
                            headers=roster.admin_headers)

    assert removed.status_code == 204
    assert client.get(f"/api/teachers/{roster.teacher_id}/children", headers=roster.admin_headers).json() == []


def test_children_are_scoped_to_their_parent(roster, build_client):
    client = build_client(children_router)

    own = client.get("/api/children", headers=roster.parent_a_headers).json()
    assert [c["id"] for c in own] == [roster.child_a_id]
    assert client.get(f"/api/children/{roster.child_b_id}", headers=roster.parent_a_headers).status_code == 403
    assert len(client.get("/api/children", headers=roster.teacher_headers).json()) == 2

    missing_parent = client.post(
        "/api/children",
        json={"first_name": "Zed", "last_name": "X", "date_of_birth": "2022-01-01", "parent_id": 999},
        headers=roster.admin_headers,
    )
    assert missing_parent.status_code == 400

    created = client.post(
        "/api/children",
        json={"first_name": "Ava", "last_name": "Chen", "date_of_birth": "2022-02-28",
              "parent_id": roster.parent_b_id},
        headers=roster.teacher_headers,
    )
    assert created.status_code == 201
    assert created.json()["date_of_birth"] == "2022-02-28"


def test_bootstrap_admin_is_created_once(db):
    first = ensure_admin_account(db, "admin@daycare.com", "Admin@123")
    db.commit()
    second = ensure_admin_account(db, "admin@daycare.com", "Other@123")

    assert first.id == second.id
    assert first.role == "Admin"
    assert verify_password("Admin@123", second.password_hash)
