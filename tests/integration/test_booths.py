from src.domain.enums import BoothStatus


def test_list_booths_with_filters(client, make_booth, booth):
    make_booth("B-201", location="Hall B", price=900, size="3x6")
    make_booth("B-202", location="Hall B", price=5000, status=BoothStatus.MAINTENANCE)

    everything = client.get("/api/booths").json()["booths"]
    assert len(everything) == 3

    hall_b = client.get("/api/booths?location=Hall B").json()["booths"]
    assert {b["booth_number"] for b in hall_b} == {"B-201", "B-202"}

    cheap = client.get("/api/booths?max_price=1000").json()["booths"]
    assert [b["booth_number"] for b in cheap] == ["B-201"]

    ignored = client.get("/api/booths?max_price=cheap&status=all").json()["booths"]
    assert len(ignored) == 3

    maintenance = client.get("/api/booths?status=maintenance").json()["booths"]
    assert maintenance[0]["status_label"] == "Maintenance"


def test_filter_by_event_id_takes_precedence(client, make_booth, booth, event):
    make_booth("X-1", event="Tech Expo")

    response = client.get(f"/api/booths?event_id={event.id}&event=Other")

    assert [b["booth_number"] for b in response.json()["booths"]] == ["A-101"]


def test_get_booth_by_id_or_number(client, booth):
    assert client.get(f"/api/booths/{booth.id}").json()["booth_number"] == "A-101"
    assert client.get("/api/booths/A-101").json()["id"] == booth.id
    assert client.get("/api/booths/nope").status_code == 404


def test_booth_stats(client, make_booth):
    make_booth("S-1")
    make_booth("S-2", status=BoothStatus.BOOKED)
    make_booth("S-3", status=BoothStatus.MAINTENANCE)

    response = client.get("/api/booths/stats")

    assert response.json() == {
        "total_booths": 3,
        "booked_booths": 1,
        "available_booths": 1,
        "maintenance_booths": 1,
    }


def test_booth_mutations_require_admin(client, exhibitor_headers):
    response = client.post(
        "/api/booths",
        json={"booth_number": "Z-1", "price": 100},
        headers=exhibitor_headers,
    )

    assert response.status_code == 403


def test_create_booth_fills_event_name(client, admin_headers, event):
    response = client.post(
        "/api/booths",
        json={
            "booth_number": "N-1",
            "price": 1500,
            "event_id": event.id,
            "features": ["Power"],
            "coordinates": {"x": 100, "y": 120},
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    booth = response.json()["booth"]
    assert booth["event"] == "Tech Expo"
    assert booth["coordinates"] == {"x": 100, "y": 120}
    assert booth["features"] == ["Power"]


def test_create_booth_unknown_event(client, admin_headers):
    response = client.post(
        "/api/booths",
        json={"booth_number": "N-1", "price": 1500, "event_id": "missing"},
        headers=admin_headers,
    )

    assert response.status_code == 404


def test_update_and_delete_booth(client, admin_headers, booth):
    updated = client.put(
        "/api/booths/A-101",
        json={"price": 3100, "note": "Near entrance"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["booth"]["price"] == 3100
    assert updated.json()["booth"]["location"] == "Hall A"

    deleted = client.delete(f"/api/booths/{booth.id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/booths/{booth.id}").status_code == 404


def test_booth_with_active_booking_is_protected(
    client, admin_headers, exhibitor_headers, booth
):
    client.post(
        "/api/bookings",
        json={"booth_id": booth.id, "total_price": 2500},
        headers=exhibitor_headers,
    )

    delete = client.delete(f"/api/booths/{booth.id}", headers=admin_headers)
    assert delete.status_code == 409

    release = client.put(
        f"/api/booths/{booth.id}",
        json={"status": "available"},
        headers=admin_headers,
    )
    assert release.status_code == 409


def test_floor_plan_svg(client, booth, make_booth):
    make_booth("A-102", location="Hall A", price=1999, position_x=500, position_y=300)

    response = client.get("/api/booths/floor-plan.svg")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "A-101" in response.text
    assert 'x="500.0"' in response.text
    assert "booth-svg available" in response.text


def test_floor_plan_svg_empty(client):
    response = client.get("/api/booths/floor-plan.svg?location=Nowhere")

    assert "No booths available for this event/hall" in response.text
