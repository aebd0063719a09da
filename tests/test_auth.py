from datetime import timedelta

from fitdesk.application.services.auth_service import get_token_issuer

issuer = get_token_issuer()


def test_missing_header_is_rejected(client):
    r = client.get("/api/sessions")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "No authorization header provided"}


def test_empty_bearer_is_rejected(client):
    r = client.get("/api/sessions", headers={"Authorization": "Bearer "})
    assert r.status_code == 401
    assert r.json()["message"] == "No token provided"


def test_garbage_token_is_rejected(client):
    r = client.get("/api/sessions", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"


def test_expired_token_is_rejected(client, member):
    token = issuer.create_access_token(member, expires_delta=timedelta(seconds=-5))
    r = client.get("/api/sessions", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token has expired"


def test_token_without_bearer_prefix_is_accepted(client, member):
    token = issuer.create_access_token(member)
    r = client.get("/api/sessions", headers={"Authorization": token})
    assert r.status_code == 200


def test_token_for_missing_user_is_rejected(client, db, member):
    token = issuer.create_access_token(member)
    db.delete(member)
    db.commit()
    r = client.get("/api/sessions", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "User not found"


def test_refresh_token_is_not_an_access_token(client, member):
    token = issuer.create_refresh_token(member)
    r = client.get("/api/sessions", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"


def test_refresh_endpoint_issues_access_token(client, member, auth_header):
    refresh = issuer.create_refresh_token(member)
    r = client.post("/api/users/refresh-token", json={"refresh_token": refresh})
    assert r.status_code == 200
    access = r.json()["access_token"]

    payload = issuer.decode(access)
    assert payload["id"] == member.id
    assert payload["type"] == "access"


def test_refresh_endpoint_rejects_access_token(client, member):
    access = issuer.create_access_token(member)
    r = client.post("/api/users/refresh-token", json={"refresh_token": access})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"


def test_access_token_claims(member):
    payload = issuer.decode(issuer.create_access_token(member))
    assert payload["sub"] == str(member.id)
    assert payload["phone_number"] == member.phone_number
    assert payload["is_admin"] is False
    assert payload["is_trainer"] is False


def test_member_cannot_create_sessions(client, member, auth_header):
    r = client.post(
        "/api/sessions",
        json={"person_count": 1, "starting_time": "07:00:00", "date": "2030-01-01"},
        headers=auth_header(member),
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Trainer or Admin access required"


def test_trainer_cannot_delete_sessions(client, trainer, auth_header):
    r = client.delete("/api/sessions/1", headers=auth_header(trainer))
    assert r.status_code == 403
    assert r.json()["message"] == "Admin access required"


def test_admin_passes_trainer_check(client, admin, auth_header):
    r = client.post(
        "/api/sessions",
        json={"person_count": 1, "starting_time": "07:00:00", "date": "2030-01-01"},
        headers=auth_header(admin),
    )
    assert r.status_code == 201
