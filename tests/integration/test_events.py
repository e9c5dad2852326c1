EVENT_FORM = {
    "title": "Design Week",
    "category": "Design",
    "date": "2026-12-01",
    "time": "10:30",
    "description": "Furniture and interiors",
    "venue": "Harbor Hall",
    "city": "Hamburg",
    "total_booths": "40",
    "booth_price": 1800,
    "booth_sizes": ["3x3", "3x6"],
    "registration_open": True,
}


def _create(client, headers, **overrides):
    return client.post("/api/events", json={**EVENT_FORM, **overrides}, headers=headers)


def test_create_event_maps_form_fields(client, admin_headers):
    response = _create(client, admin_headers)

    assert response.status_code == 201
    event = response.json()["event"]
    assert event["name"] == "Design Week"
    assert event["location"] == "Hamburg"
    assert event["max_booths"] == 40
    assert event["status"] == "draft"
    assert event["start_date"].startswith("2026-12-01T10:30")
    assert event["end_date"] == event["start_date"]


def test_create_event_requires_title_and_date(client, admin_headers):
    response = client.post("/api/events", json={"title": "No date"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Title and date are required"


def test_create_event_rejects_end_before_start(client, admin_headers):
    response = _create(client, admin_headers, end_date="2026-11-30")

    assert response.status_code == 400


def test_non_numeric_booth_total_becomes_zero(client, admin_headers):
    response = _create(client, admin_headers, total_booths="lots")

    assert response.json()["event"]["max_booths"] == 0


def test_exhibitor_cannot_create_event(client, exhibitor_headers):
    response = _create(client, exhibitor_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "Admin access required"


def test_list_filters_and_sort(client, admin_headers):
    _create(client, admin_headers, title="Alpha Fair", date="2026-12-05", status="upcoming")
    _create(client, admin_headers, title="Beta Expo", date="2026-12-01", venue="Dock 5")

    by_start = client.get("/api/events").json()["events"]
    assert [e["name"] for e in by_start] == ["Beta Expo", "Alpha Fair"]

    by_name_desc = client.get("/api/events?sort=name:desc").json()["events"]
    assert [e["name"] for e in by_name_desc] == ["Beta Expo", "Alpha Fair"]

    upcoming = client.get("/api/events?status=upcoming").json()["events"]
    assert [e["name"] for e in upcoming] == ["Alpha Fair"]

    everything = client.get("/api/events?status=all").json()["events"]
    assert len(everything) == 2

    searched = client.get("/api/events?q=dock").json()["events"]
    assert [e["name"] for e in searched] == ["Beta Expo"]

    later = client.get("/api/events?from=2026-12-03").json()["events"]
    assert [e["name"] for e in later] == ["Alpha Fair"]


def test_unknown_sort_field(client):
    response = client.get("/api/events?sort=password:asc")

    assert response.status_code == 400


def test_get_update_delete_event(client, admin_headers):
    event_id = _create(client, admin_headers).json()["event"]["id"]

    assert client.get(f"/api/events/{event_id}").status_code == 200

    updated = client.put(
        f"/api/events/{event_id}",
        json={"title": "Design Week 2026", "status": "upcoming", "address": "Pier 1"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["event"]["name"] == "Design Week 2026"
    assert updated.json()["event"]["status"] == "upcoming"
    assert updated.json()["event"]["location"] == "Pier 1"
    assert updated.json()["event"]["venue"] == "Harbor Hall"

    deleted = client.delete(f"/api/events/{event_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/events/{event_id}").status_code == 404


def test_deleting_event_detaches_booths(client, admin_headers, booth, event):
    event_id = event.id

    client.delete(f"/api/events/{event_id}", headers=admin_headers)

    response = client.get(f"/api/booths/{booth.id}")
    assert response.status_code == 200
    assert response.json()["event_id"] is None
    assert response.json()["event"] == "Tech Expo"
