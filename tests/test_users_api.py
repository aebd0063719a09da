import httpx

from fitdesk.application.services.notification_service import NotificationService, get_notification_service
from fitdesk.config import Settings
from fitdesk.domain.models.otp import OTP
from fitdesk.domain.models.user import User
from fitdesk.infrastructure.email_client import EmailClient
from fitdesk.infrastructure.whatsapp_api import WhatsAppClient
from fitdesk.main import app


def test_email_login_creates_member(client, db, notifier):
    r = client.post("/api/users/request-otp", json={"email": "Asha@Example.com"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["identifier_type"] == "email"
    assert body["expires_in"] == "10 minutes"
    assert body["delivered"] is True
    assert "otp" not in body

    code = notifier.last_code("asha@example.com")
    r = client.post("/api/users/verify-otp", json={"email": "asha@example.com", "otp": code})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["user"]["email"] == "asha@example.com"
    assert body["user"]["name"] == "asha"
    assert set(body["tokens"]) == {"access_token", "refresh_token", "token_type"}

    assert db.query(User).filter(User.email == "asha@example.com").count() == 1


def test_phone_login_reuses_existing_user(client, db, notifier, member):
    spaced = f"{member.phone_number[:5]} {member.phone_number[5:]}"
    client.post("/api/users/request-otp", json={"phone_number": spaced})
    code = notifier.last_code(member.phone_number)

    r = client.post("/api/users/verify-otp", json={"phone_number": member.phone_number, "otp": code})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == member.id
    assert db.query(User).count() == 1


def test_login_token_grants_access_but_not_admin_routes(client, notifier):
    client.post("/api/users/request-otp", json={"phone_number": "9000000001"})
    code = notifier.last_code("9000000001")
    tokens = client.post(
        "/api/users/verify-otp", json={"phone_number": "9000000001", "otp": code}
    ).json()["tokens"]
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    assert client.get("/api/sessions", headers=headers).status_code == 200
    r = client.get("/api/users", headers=headers)
    assert r.status_code == 403
    assert r.json()["message"] == "Admin access required"


def test_request_otp_requires_an_identifier(client):
    r = client.post("/api/users/request-otp", json={})
    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"


def test_request_otp_rejects_bad_phone(client):
    r = client.post("/api/users/request-otp", json={"phone_number": "12345"})
    assert r.status_code == 400
    assert "Invalid Indian phone number" in r.json()["errors"][0]["message"]


def test_request_otp_reports_failed_delivery(client, notifier):
    notifier.delivered = False
    r = client.post("/api/users/request-otp", json={"phone_number": "9000000002"})
    assert r.status_code == 200
    assert r.json()["delivered"] is False


def test_repeat_request_hits_cooldown(client):
    client.post("/api/users/request-otp", json={"phone_number": "9000000003"})
    r = client.post("/api/users/request-otp", json={"phone_number": "9000000003"})
    assert r.status_code == 429
    assert r.json()["message"] == "Please wait 2 minute(s) before requesting a new OTP"


def test_wrong_code_is_400(client, notifier):
    client.post("/api/users/request-otp", json={"phone_number": "9000000004"})
    code = notifier.last_code("9000000004")
    wrong = "1000" if code != "1000" else "1001"
    r = client.post("/api/users/verify-otp", json={"phone_number": "9000000004", "otp": wrong})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Invalid OTP"}


def test_admin_lists_users(client, admin, member, auth_header):
    r = client.get("/api/users", headers=auth_header(admin))
    assert r.status_code == 200
    assert {u["id"] for u in r.json()["data"]} == {admin.id, member.id}


def test_user_reads_only_own_record(client, member, make_user, auth_header):
    other = make_user()
    assert client.get(f"/api/users/{member.id}", headers=auth_header(member)).status_code == 200

    r = client.get(f"/api/users/{other.id}", headers=auth_header(member))
    assert r.status_code == 403
    assert r.json()["message"] == "You can only access your own data"


def test_admin_gets_404_for_unknown_user(client, admin, auth_header):
    r = client.get("/api/users/999", headers=auth_header(admin))
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_whatsapp_verify_sends_welcome_then_login_alert(client, notifier):
    phone = "9000000005"
    r = client.post("/api/otp/send", json={"phone_number": phone})
    assert r.status_code == 200
    assert r.json()["message"] == "OTP sent successfully via WhatsApp"

    r = client.post("/api/otp/verify", json={"phone_number": phone, "otp": notifier.last_code(phone)})
    assert r.status_code == 200
    body = r.json()
    assert body["is_new_user"] is True
    assert body["user"]["name"].startswith("User_0005_")
    assert notifier.welcomes and notifier.welcomes[0][0] == phone
    assert notifier.logins == []


def test_otp_resend_respects_cooldown(client):
    phone = "9000000006"
    client.post("/api/otp/send", json={"phone_number": phone})
    r = client.post("/api/otp/resend", json={"phone_number": phone})
    assert r.status_code == 429


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"


def test_broken_whatsapp_gateway_does_not_fail_login(client, db):
    def handler(request):
        return httpx.Response(200, text="<html>OK</html>")

    settings = Settings(
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret",
        TWILIO_WHATSAPP_NUMBER="whatsapp:+14155238886",
    )
    whatsapp = WhatsAppClient(settings, transport=httpx.MockTransport(handler))
    whatsapp.retry_delay = 0
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(
        settings, whatsapp, EmailClient(settings)
    )

    phone = "9000000007"
    r = client.post("/api/otp/send", json={"phone_number": phone})
    assert r.status_code == 200
    assert r.json()["delivered"] is False

    code = db.query(OTP).filter(OTP.identifier == phone).one().otp
    r = client.post("/api/otp/verify", json={"phone_number": phone, "otp": code})
    assert r.status_code == 200
    assert r.json()["is_new_user"] is True
