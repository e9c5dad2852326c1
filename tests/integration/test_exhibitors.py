from datetime import datetime, timezone

from src.domain.enums import UserStatus

NEW_EXHIBITOR = {
    "first_name": "Omar",
    "last_name": "Owner",
    "email": "omar@example.com",
    "company_name": "Omar Outdoors",
    "industry": "Retail",
    "password": "initial-pass",
}


def _book(client, headers, booth_id, total_price):
    response = client.post(
        "/api/bookings",
        json={"booth_id": booth_id, "total_price": total_price},
        headers=headers,
    )
    return response.json()["booking"]["id"]


def test_exhibitor_routes_are_admin_only(client, exhibitor_headers):
    assert client.get("/api/exhibitors", headers=exhibitor_headers).status_code == 403


def test_list_exhibitors_with_booking_summary(
    client, admin_headers, exhibitor, exhibitor_headers, make_user, make_booth
):
    make_user("bob@example.com", first_name="Bob", industry="Retail")
    kept = make_booth("E-1", price=1200)
    dropped = make_booth("E-2", price=800)
    _book(client, exhibitor_headers, kept.id, 1200)
    cancelled_id = _book(client, exhibitor_headers, dropped.id, 800)
    client.patch(f"/api/bookings/{cancelled_id}/cancel", headers=exhibitor_headers)

    by_name = client.get("/api/exhibitors", headers=admin_headers).json()["exhibitors"]
    assert [e["first_name"] for e in by_name] == ["Bob", "Erin"]
    assert all(e["role"] == "exhibitor" for e in by_name)

    erin = by_name[1]
    assert erin["total_bookings"] == 2
    assert erin["active_bookings"] == 1
    assert erin["total_spent"] == 1200
    assert len(erin["recent_bookings"]) == 2
    assert erin["recent_bookings"][0]["date_range"] == "Date TBD"
    assert "password_hash" not in erin

    busiest = client.get("/api/exhibitors?sort=mostBookings", headers=admin_headers).json()
    assert busiest["exhibitors"][0]["first_name"] == "Erin"

    retail = client.get("/api/exhibitors?industry=Retail", headers=admin_headers).json()
    assert [e["first_name"] for e in retail["exhibitors"]] == ["Bob"]


def test_exhibitor_stats(client, admin_headers, exhibitor, exhibitor_headers, make_user, make_booth):
    make_user("idle@example.com", status=UserStatus.INACTIVE)
    booth = make_booth("E-9", price=2600)
    _book(client, exhibitor_headers, booth.id, 2600)

    response = client.get("/api/exhibitors/stats", headers=admin_headers)

    assert response.json() == {
        "total_exhibitors": 2,
        "active_exhibitors": 1,
        "new_this_month": 2,
        "total_revenue": 2600,
        "total_revenue_k": 3,
    }


def test_export_rows(client, admin_headers, exhibitor):
    response = client.get("/api/exhibitors/export", headers=admin_headers)

    assert response.status_code == 200
    [row] = response.json()
    assert row["email"] == "exhibitor@example.com"
    assert row["total_bookings"] == 0
    assert row["total_spent"] == 0


def test_exhibitor_detail_timeline(client, admin_headers, exhibitor, exhibitor_headers, booth):
    _book(client, exhibitor_headers, booth.id, 2500)

    response = client.get(f"/api/exhibitors/{exhibitor.id}", headers=admin_headers)

    assert response.status_code == 200
    timeline = response.json()["timeline"]
    assert [entry["text"] for entry in timeline] == [
        "Registered as exhibitor",
        "First booking confirmed",
    ]
    assert timeline[1]["meta"] == "Tech Expo"
    assert timeline[1]["date"] == datetime.now(timezone.utc).strftime("%Y-%m-%d")


def test_admin_is_not_an_exhibitor(client, admin, admin_headers):
    response = client.get(f"/api/exhibitors/{admin.id}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Exhibitor not found"


def test_create_update_and_suspend_exhibitor(client, admin_headers):
    created = client.post("/api/exhibitors", json=NEW_EXHIBITOR, headers=admin_headers)
    assert created.status_code == 201
    exhibitor_id = created.json()["exhibitor"]["id"]
    assert created.json()["exhibitor"]["status"] == "active"

    updated = client.put(
        f"/api/exhibitors/{exhibitor_id}",
        json={"company_size": "11-50"},
        headers=admin_headers,
    )
    assert updated.json()["exhibitor"]["company_size"] == "11-50"
    assert updated.json()["exhibitor"]["company_name"] == "Omar Outdoors"

    suspended = client.patch(
        f"/api/exhibitors/{exhibitor_id}/status",
        json={"status": "inactive"},
        headers=admin_headers,
    )
    assert suspended.json()["exhibitor"]["status"] == "inactive"

    login = client.post(
        "/api/auth/login",
        json={"email": "omar@example.com", "password": "initial-pass"},
    )
    assert login.status_code == 400
    assert login.json()["error"] == "Account is suspended"


def test_delete_exhibitor(client, admin_headers, make_user):
    lonely = make_user("lonely@example.com")

    response = client.delete(f"/api/exhibitors/{lonely.id}", headers=admin_headers)

    assert response.status_code == 200
    assert client.get(f"/api/exhibitors/{lonely.id}", headers=admin_headers).status_code == 404


def test_exhibitor_with_bookings_cannot_be_deleted(
    client, admin_headers, exhibitor, exhibitor_headers, booth
):
    _book(client, exhibitor_headers, booth.id, 2500)

    response = client.delete(f"/api/exhibitors/{exhibitor.id}", headers=admin_headers)

    assert response.status_code == 409
