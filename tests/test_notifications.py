import pytest

from app.constants import NotificationType
from app.models import Notification
from app.services.notification_service import notify_user, notify_users


@pytest.fixture
def inbox(db, waiter, manager):
    notify_user(db, waiter.id, NotificationType.SHIFT_ASSIGNED, "Shift assigned", "Morning on Monday", manager.id)
    notify_user(db, waiter.id, NotificationType.GENERAL, "Welcome", "Hello Anna")
    notify_user(db, manager.id, NotificationType.GENERAL, "Manager only", "Not for Anna")
    db.commit()


def test_list_own_notifications(client, waiter_headers, inbox):
    response = client.get("/notifications", headers=waiter_headers)

    payload = response.json()["payload"]
    assert payload["unreadCount"] == 2
    assert [n["title"] for n in payload["notifications"]] == ["Welcome", "Shift assigned"]


def test_mark_single_notification_read(client, waiter_headers, inbox):
    first = client.get("/notifications", headers=waiter_headers).json()["payload"]["notifications"][0]

    response = client.put(f"/notifications/{first['id']}/read", headers=waiter_headers)
    assert response.status_code == 200
    assert response.json()["payload"]["isRead"] is True

    unread = client.get("/notifications?unreadOnly=true", headers=waiter_headers).json()["payload"]
    assert unread["unreadCount"] == 1
    assert len(unread["notifications"]) == 1


def test_mark_all_read(client, waiter_headers, manager_headers, inbox):
    response = client.put("/notifications/read-all", headers=waiter_headers)
    assert response.json()["payload"] == {"updated": 2}

    assert client.get("/notifications", headers=waiter_headers).json()["payload"]["unreadCount"] == 0
    assert client.get("/notifications", headers=manager_headers).json()["payload"]["unreadCount"] == 1


def test_cannot_read_someone_elses_notification(client, db, waiter_headers, manager, inbox):
    other = db.query(Notification).filter(Notification.user_id == manager.id).first()
    response = client.put(f"/notifications/{other.id}/read", headers=waiter_headers)
    assert response.status_code == 404


def test_notify_users_deduplicates(db, waiter, manager):
    assert notify_users(db, [waiter.id, manager.id, waiter.id], NotificationType.GENERAL, "Hi", "All hands") == 2
