def test_update_personal_details(client, member, auth_header):
    r = client.put(
        f"/api/profile/{member.id}/personal",
        json={"name": "Ravi", "height": 178.5},
        headers=auth_header(member),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Personal details updated successfully"
    assert body["data"]["name"] == "Ravi"
    assert body["data"]["height"] == 178.5
    assert body["data"]["weight"] is None


def test_measurements_are_partial(client, member, auth_header):
    headers = auth_header(member)
    client.put(f"/api/profile/{member.id}/measurements", json={"chest": 98, "left_arm": 33}, headers=headers)
    r = client.put(f"/api/profile/{member.id}/measurements", json={"chest": 96}, headers=headers)

    data = r.json()["data"]
    assert data["measurements_chest"] == 96
    assert data["measurements_left_arm"] == 33


def test_bca_update(client, member, auth_header):
    r = client.put(
        f"/api/profile/{member.id}/bca",
        json={"body_fat": 21.4, "body_age": 31, "bmr": 1650},
        headers=auth_header(member),
    )
    data = r.json()["data"]
    assert data["bca_body_fat"] == 21.4
    assert data["bca_body_age"] == 31
    assert data["bca_bmr"] == 1650


def test_negative_values_are_rejected(client, member, auth_header):
    r = client.put(
        f"/api/profile/{member.id}/measurements",
        json={"chest": -1, "mid_waist": -2},
        headers=auth_header(member),
    )
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"chest", "mid_waist"}


def test_full_profile_update(client, member, auth_header):
    r = client.put(
        f"/api/profile/{member.id}",
        json={
            "personal_details": {"weight": 72},
            "measurements": {"right_thigh": 55},
            "bca": {"weight": 71.8},
        },
        headers=auth_header(member),
    )
    data = r.json()["data"]
    assert data["weight"] == 72
    assert data["measurements_right_thigh"] == 55
    assert data["bca_weight"] == 71.8


def test_profile_is_owner_or_admin(client, member, admin, make_user, auth_header):
    other = make_user()
    r = client.get(f"/api/profile/{other.id}", headers=auth_header(member))
    assert r.status_code == 403

    r = client.get(f"/api/profile/{other.id}", headers=auth_header(admin))
    assert r.status_code == 200
    assert r.json()["data"]["id"] == other.id
