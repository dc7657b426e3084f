from app.constants import RecordStatus, RoleName
from tests.conftest import PASSWORD


def test_login_returns_token_and_profile(client, waiter):
    response = client.post("/auth/login", json={"username": "anna", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["payload"]["tokenType"] == "bearer"
    assert body["payload"]["user"]["fullName"] == "Anna Nguyen"
    assert body["payload"]["user"]["role"] == RoleName.WAITER.value

    token = body["payload"]["accessToken"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["payload"]["username"] == "anna"


def test_login_rejects_wrong_password(client, waiter):
    response = client.post("/auth/login", json={"username": "anna", "password": "nope-nope"})

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid username or password"


def test_login_rejects_disabled_account(client, make_user):
    make_user("former", status=RecordStatus.INACTIVE.value)

    response = client.post("/auth/login", json={"username": "former", "password": PASSWORD})

    assert response.status_code == 403


def test_me_requires_bearer_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_manager_routes_reject_staff(client, branch, waiter_headers):
    response = client.post(
        "/shifts",
        json={"name": "Morning", "startTime": "07:00", "endTime": "15:00", "weekDays": ["MON"], "branchId": branch.id},
        headers=waiter_headers,
    )

    assert response.status_code == 403
