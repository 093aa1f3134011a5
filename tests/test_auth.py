from healthify.services.auth_service import create_access_token


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_is_rejected(client):
    response = client.get("/water/goal")

    assert response.status_code == 401
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Not authorized"


def test_garbage_token_is_rejected(client):
    response = client.get("/water/goal", headers=_bearer("not-a-jwt"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_expired_token_is_rejected(client, make_user):
    account = make_user()
    token = create_access_token(account.id, expires_minutes=-5)

    response = client.get("/water/goal", headers=_bearer(token))

    assert response.status_code == 401


def test_token_for_unknown_user_returns_not_found(client):
    response = client.get("/water/goal", headers=_bearer(create_access_token(424242)))

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_inactive_user_is_not_resolved(client, make_user):
    account = make_user(is_active=False)

    response = client.get("/water/goal", headers=_bearer(create_access_token(account.id)))

    assert response.status_code == 404


def test_valid_token_resolves_user(client, make_user):
    account = make_user(water_goal=11)

    response = client.get("/water/goal", headers=_bearer(create_access_token(account.id)))

    assert response.status_code == 200
    assert response.json()["data"] == {"waterGoal": 11}


def test_profile_reports_goal_without_mirror(client, make_user):
    account = make_user(water_goal=6, email="profile@example.com")

    response = client.get("/profile/me", headers=_bearer(create_access_token(account.id)))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "profile@example.com"
    assert data["waterGoal"] == 6
    assert data["currentWater"] is None
