from fastapi.testclient import TestClient

from app.main import app


def test_health_without_scheduler():
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "app": "Daycare", "reminders": "disabled"}


def test_all_routers_are_mounted():
    paths = {route.path for route in app.routes}

    for path in (
        "/api/auth/login",
        "/api/parents",
        "/api/teachers",
        "/api/children",
        "/api/fees/update-overdue",
        "/api/holidays",
        "/api/events/{event_id}/participants",
        "/api/attendance/check-in",
        "/api/activities/child/{child_id}",
        "/api/leaves/balance",
        "/api/teachers/{teacher_id}/assign-child",
        "/api/messages",
        "/api/notifications/check-reminders",
    ):
        assert path in paths
