from datetime import datetime, timezone

from src.domain.enums import BoothStatus


def _book(client, headers, booth_id, total_price=2500):
    response = client.post(
        "/api/bookings",
        json={"booth_id": booth_id, "total_price": total_price},
        headers=headers,
    )
    return response.json()["booking"]["id"]


def test_admin_routes_reject_exhibitors(client, exhibitor_headers):
    for path in ("/api/admin/booths", "/api/admin/bookings", "/api/admin/stats", "/api/stats"):
        response = client.get(path, headers=exhibitor_headers)
        assert response.status_code == 403, path


def test_admin_booth_listing_filters(client, admin_headers, make_booth, booth):
    make_booth("B-1", location="Hall B", status=BoothStatus.MAINTENANCE)

    response = client.get("/api/admin/booths?hall=Hall B&status=MAINTENANCE", headers=admin_headers)

    assert response.json()["success"] is True
    assert [b["booth_number"] for b in response.json()["booths"]] == ["B-1"]

    bad = client.get("/api/admin/booths?status=sold", headers=admin_headers)
    assert bad.status_code == 400


def test_admin_create_and_drag_booth(client, admin_headers):
    created = client.post(
        "/api/admin/booths",
        json={"booth_number": "D-1", "price": 400, "location": "Hall D"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    booth_id = created.json()["booth"]["id"]

    moved = client.put(
        f"/api/admin/booths/{booth_id}",
        json={"coordinates": {"x": 220, "y": 160}},
        headers=admin_headers,
    )
    assert moved.json()["booth"]["coordinates"] == {"x": 220, "y": 160}

    removed = client.delete(f"/api/admin/booths/{booth_id}", headers=admin_headers)
    assert removed.json() == {"success": True, "message": "Booth deleted successfully"}


def test_auto_layout_persists_positions(client, admin_headers, make_booth):
    make_booth("A-2", location="Hall A")
    make_booth("A-1", location="Hall A")
    make_booth("Z-9", location="Hall A", position_x=700, position_y=400)

    response = client.post("/api/admin/booths/auto-layout", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["updated"] == 2
    coords = {b["booth_number"]: b["coordinates"] for b in response.json()["booths"]}
    assert coords["A-1"] == {"x": 40, "y": 40}
    assert coords["A-2"] == {"x": 130, "y": 40}
    assert coords["Z-9"] == {"x": 700, "y": 400}

    again = client.post("/api/admin/booths/auto-layout", headers=admin_headers)
    assert again.json()["updated"] == 0


def test_admin_status_change_updates_booth(client, admin_headers, exhibitor_headers, booth):
    booking_id = _book(client, exhibitor_headers, booth.id)

    booked = client.patch(
        f"/api/admin/bookings/{booking_id}/status",
        json={"status": "booked"},
        headers=admin_headers,
    )
    assert booked.status_code == 200
    assert booked.json()["booking"]["status"] == "booked"

    cancelled = client.patch(
        f"/api/admin/bookings/{booking_id}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )
    assert cancelled.status_code == 200
    assert client.get(f"/api/booths/{booth.id}").json()["status"] == "available"

    revived = client.patch(
        f"/api/admin/bookings/{booking_id}/status",
        json={"status": "confirmed"},
        headers=admin_headers,
    )
    assert revived.status_code == 409
    assert revived.json()["error"].endswith("(allowed: none)")


def test_admin_status_rejects_unknown_value(client, admin_headers, exhibitor_headers, booth):
    booking_id = _book(client, exhibitor_headers, booth.id)

    response = client.patch(
        f"/api/admin/bookings/{booking_id}/status",
        json={"status": "archived"},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_admin_lists_and_deletes_bookings(client, admin_headers, exhibitor_headers, booth):
    booking_id = _book(client, exhibitor_headers, booth.id)

    listing = client.get("/api/admin/bookings?status=confirmed", headers=admin_headers)
    assert [b["id"] for b in listing.json()["bookings"]] == [booking_id]

    unfiltered = client.get(
        "/api/admin/bookings?status=all&event_name=all", headers=admin_headers
    )
    assert [b["id"] for b in unfiltered.json()["bookings"]] == [booking_id]
    assert client.get("/api/admin/bookings?status=sold", headers=admin_headers).status_code == 400

    deleted = client.delete(f"/api/admin/bookings/{booking_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/booths/{booth.id}").json()["status"] == "available"


def test_dashboard_numbers(client, admin_headers, exhibitor_headers, make_booth):
    first = make_booth("K-1", price=1000)
    second = make_booth("K-2", price=3000)
    make_booth("K-3", status=BoothStatus.MAINTENANCE)
    _book(client, exhibitor_headers, first.id, total_price=1000)
    cancelled_id = _book(client, exhibitor_headers, second.id, total_price=3000)
    client.patch(f"/api/bookings/{cancelled_id}/cancel", headers=exhibitor_headers)

    admin_stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert admin_stats == {
        "total_booths": 3,
        "booked_booths": 1,
        "available_booths": 1,
        "maintenance_booths": 1,
        "pending_approvals": 0,
        "total_revenue": 1000,
    }

    global_stats = client.get("/api/stats", headers=admin_headers).json()
    assert global_stats["total_bookings"] == 2
    assert global_stats["confirmed_bookings"] == 1
    assert global_stats["total_users"] == 2
    assert global_stats["total_revenue"] == 1000

    trends = client.get("/api/admin/revenue-trends?months=3", headers=admin_headers).json()["trends"]
    assert len(trends) == 3
    assert trends[-1]["month"] == datetime.now(timezone.utc).strftime("%Y-%m")
    assert trends[-1]["revenue"] == 1000
    assert trends[-1]["bookings"] == 1

    activity = client.get("/api/admin/activity?limit=10", headers=admin_headers).json()["activities"]
    assert activity[0]["event_type"] == "BOOKING_CANCELLED"
    assert len(activity) == 3


def test_revenue_trend_bounds(client, admin_headers):
    assert client.get("/api/admin/revenue-trends?months=0", headers=admin_headers).status_code == 400
    assert client.get("/api/admin/revenue-trends?months=25", headers=admin_headers).status_code == 400
    assert client.get("/api/admin/activity?limit=51", headers=admin_headers).status_code == 400
