import pytest

from fitdesk.domain.models.payment import Payment, calculate_final_amount


@pytest.fixture
def headers(trainer, auth_header):
    return auth_header(trainer)


@pytest.fixture
def admin_headers(admin, auth_header):
    return auth_header(admin)


@pytest.fixture
def new_payment(client, headers, member):
    def _create(**fields):
        body = {
            "user_id": member.id,
            "amount": 5000,
            "package_type": "standard",
            "session_count": 12,
            "date": "2030-06-15",
        }
        body.update(fields)
        r = client.post("/api/payments", json=body, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create


def _complete(client, payment, headers, **extra):
    return client.patch(f"/api/payments/{payment['id']}/status", json={"status": "completed", **extra}, headers=headers)


def test_final_amount_helper():
    assert calculate_final_amount(1000, 180, 50) == 1130
    assert calculate_final_amount(999.99, None, None) == 999.99


def test_create_computes_final_amount(new_payment):
    data = new_payment(gst=900, discount=400)
    assert data["final_amount"] == 5500
    assert data["payment_status"] == "pending"
    assert data["payment_method"] == "cash"
    assert data["currency"] == "INR"
    assert data["invoice_number"] is None
    assert data["payment_id"].startswith("PAY_")


def test_create_defaults_date_to_today(new_payment):
    data = new_payment(date=None)
    assert data["date"]


def test_user_cannot_refer_themselves(client, headers, member):
    r = client.post(
        "/api/payments",
        json={"user_id": member.id, "super_user_id": member.id, "amount": 100, "package_type": "basic", "session_count": 1},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "User cannot be their own super user (referrer)"


def test_unknown_payer_and_referrer(client, headers, member):
    base = {"amount": 100, "package_type": "basic", "session_count": 1}
    r = client.post("/api/payments", json={"user_id": 999, **base}, headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"

    r = client.post("/api/payments", json={"user_id": member.id, "super_user_id": 999, **base}, headers=headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Super user not found"


def test_missing_fields_are_all_reported(client, headers):
    r = client.post("/api/payments", json={}, headers=headers)
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"user_id", "amount", "package_type", "session_count"} <= fields


def test_members_cannot_touch_payments(client, member, auth_header):
    r = client.get("/api/payments", headers=auth_header(member))
    assert r.status_code == 403


def test_update_recomputes_final_amount(client, new_payment, headers):
    payment = new_payment(gst=100, discount=0)
    r = client.put(f"/api/payments/{payment['id']}", json={"discount": 600}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["final_amount"] == 4500

    r = client.put(f"/api/payments/{payment['id']}", json={"amount": 2000}, headers=headers)
    assert r.json()["data"]["final_amount"] == 1500


def test_update_checks_referrer_against_merged_values(client, new_payment, headers, member, make_user):
    referrer = make_user()
    payment = new_payment(super_user_id=referrer.id)

    r = client.put(f"/api/payments/{payment['id']}", json={"user_id": referrer.id}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "User cannot be their own super user (referrer)"

    r = client.put(f"/api/payments/{payment['id']}", json={"super_user_id": member.id}, headers=headers)
    assert r.status_code == 400


def test_completion_assigns_invoice_number(client, new_payment, headers):
    payment = new_payment()
    r = _complete(client, payment, headers, transaction_reference="UPI-42")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["payment_status"] == "completed"
    assert data["transaction_reference"] == "UPI-42"
    assert data["invoice_number"] == f"INV203006{payment['id']:06d}"


def test_invoice_number_is_never_reassigned(db, new_payment):
    payment = db.get(Payment, new_payment()["id"])
    first = payment.generate_invoice_number()
    payment.date = payment.date.replace(year=2031)
    assert payment.generate_invoice_number() == first


def test_completed_payment_is_locked(client, new_payment, headers, admin_headers):
    payment = new_payment()
    _complete(client, payment, headers)

    r = client.put(f"/api/payments/{payment['id']}", json={"amount": 1}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot update completed or refunded payments"

    r = client.patch(f"/api/payments/{payment['id']}/status", json={"status": "pending"}, headers=headers)
    assert r.status_code == 400

    r = client.delete(f"/api/payments/{payment['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete completed or refunded payments"


def test_status_endpoint_cannot_refund(client, new_payment, headers):
    payment = new_payment()
    r = client.patch(f"/api/payments/{payment['id']}/status", json={"status": "refunded"}, headers=headers)
    assert r.status_code == 400


def test_refund_appends_reason_to_notes(client, new_payment, headers, admin_headers):
    payment = new_payment(notes="Paid at desk")
    _complete(client, payment, headers)

    r = client.post(f"/api/payments/{payment['id']}/refund", json={"reason": "Moved city"}, headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["payment_status"] == "refunded"
    assert data["notes"] == "Paid at desk\nRefund Reason: Moved city"
    assert data["invoice_number"] is not None


def test_only_completed_payments_refund(client, new_payment, admin_headers):
    payment = new_payment()
    r = client.post(f"/api/payments/{payment['id']}/refund", json={}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Payment cannot be refunded. Only completed payments can be refunded."


def test_refund_requires_admin(client, new_payment, headers):
    payment = new_payment()
    _complete(client, payment, headers)
    r = client.post(f"/api/payments/{payment['id']}/refund", json={}, headers=headers)
    assert r.status_code == 403


def test_pending_payment_can_be_deleted(client, db, new_payment, admin_headers):
    payment = new_payment()
    r = client.delete(f"/api/payments/{payment['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert db.get(Payment, payment["id"]) is None


def test_user_and_referrer_summaries(client, new_payment, headers, member, make_user):
    referrer = make_user()
    done = new_payment(super_user_id=referrer.id, amount=3000, session_count=8)
    new_payment(super_user_id=referrer.id, amount=1000)
    _complete(client, done, headers)

    r = client.get(f"/api/payments/user/{member.id}", headers=headers)
    summary = r.json()["data"]["summary"]
    assert summary == {"total_payments": 2, "total_spent": 3000}

    r = client.get(f"/api/payments/super-user/{referrer.id}", headers=headers)
    data = r.json()["data"]
    assert len(data["payments"]) == 2
    assert data["summary"] == {"total_referrals": 1, "total_amount": 3000, "total_sessions": 8}


def test_lookup_by_payment_id_and_filters(client, new_payment, headers):
    first = new_payment(package_type="premium")
    new_payment(package_type="basic")

    r = client.get(f"/api/payments/payment/{first['payment_id']}", headers=headers)
    assert r.json()["data"]["id"] == first["id"]

    r = client.get("/api/payments", params={"package_type": "premium"}, headers=headers)
    assert [p["id"] for p in r.json()["data"]] == [first["id"]]

    assert client.get("/api/payments/999", headers=headers).status_code == 404


def test_statistics(client, new_payment, headers, admin_headers):
    a = new_payment(amount=1000, package_type="basic", session_count=4)
    b = new_payment(amount=2000, gst=360, package_type="premium", session_count=10)
    new_payment(amount=500, package_type="basic")
    _complete(client, a, headers)
    _complete(client, b, headers)

    assert client.get("/api/payments/statistics", headers=headers).status_code == 403

    r = client.get("/api/payments/statistics", headers=admin_headers)
    assert r.status_code == 200
    stats = r.json()["data"]
    assert stats["total_revenue"] == 3360

    by_status = {row["payment_status"]: row for row in stats["payments_by_status"]}
    assert by_status["completed"]["count"] == 2
    assert by_status["pending"]["count"] == 1

    by_package = {row["package_type"]: row for row in stats["payments_by_package"]}
    assert by_package["basic"] == {"package_type": "basic", "count": 1, "total_amount": 1000, "total_sessions": 4}
    assert by_package["premium"]["total_sessions"] == 10

    r = client.get(
        "/api/payments/statistics",
        params={"start_date": "2031-01-01", "end_date": "2031-12-31"},
        headers=admin_headers,
    )
    assert r.json()["data"]["total_revenue"] == 0


def test_refunded_payment_is_locked(client, new_payment, headers, admin_headers):
    payment = new_payment()
    invoice = _complete(client, payment, headers).json()["data"]["invoice_number"]
    r = client.post(f"/api/payments/{payment['id']}/refund", json={}, headers=admin_headers)
    assert r.status_code == 200

    r = client.put(f"/api/payments/{payment['id']}", json={"amount": 1}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot update completed or refunded payments"

    r = client.patch(f"/api/payments/{payment['id']}/status", json={"status": "completed"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot change the status of completed or refunded payments"

    r = client.delete(f"/api/payments/{payment['id']}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete completed or refunded payments"

    r = client.post(f"/api/payments/{payment['id']}/refund", json={}, headers=admin_headers)
    assert r.status_code == 400

    data = client.get(f"/api/payments/{payment['id']}", headers=headers).json()["data"]
    assert data["payment_status"] == "refunded"
    assert data["invoice_number"] == invoice
    assert data["amount"] == 5000
