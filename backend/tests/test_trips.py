from datetime import date, timedelta

import captains_log.database
from captains_log.main import refresh_trip_statuses
from captains_log.models.trip import Trip
from captains_log.services.trip_service import compute_auto_status


async def create_trip(client, headers, **overrides):
    payload = {"title": "Trip", **overrides}
    resp = await client.post("/api/trips", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_trip_defaults(client, headers):
    trip = await create_trip(client, headers, title="Weekend away", currency="eur")
    assert trip["status"] == "Planning"
    assert trip["privacy_level"] == "Private"
    assert trip["currency"] == "EUR"
    # Falls back to the owner's timezone
    assert trip["timezone"] == "UTC"


async def test_completed_trip_is_added_to_places_visited(client, headers):
    trip = await create_trip(client, headers, status="Completed")
    assert trip["add_to_places_visited"] is True


async def test_new_trip_links_myself(client, headers, trip):
    resp = await client.get(f"/api/companions/trips/{trip['id']}", headers=headers)
    assert [c["is_myself"] for c in resp.json()] == [True]


async def test_end_before_start_rejected(client, headers):
    resp = await client.post(
        "/api/trips", json={"title": "Backwards", "start_date": "2030-05-10", "end_date": "2030-05-01"}, headers=headers
    )
    assert resp.status_code == 422

    trip = await create_trip(client, headers, start_date="2030-05-01", end_date="2030-05-10")
    resp = await client.put(f"/api/trips/{trip['id']}", json={"end_date": "2030-04-01"}, headers=headers)
    assert resp.status_code == 400


async def test_get_update_delete(client, headers, trip):
    resp = await client.get(f"/api/trips/{trip['id']}", headers=headers)
    assert resp.json()["title"] == "Paris in Spring"

    resp = await client.put(f"/api/trips/{trip['id']}", json={"description": "Museums"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["description"] == "Museums"
    assert resp.json()["title"] == "Paris in Spring"

    resp = await client.delete(f"/api/trips/{trip['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/trips/{trip['id']}", headers=headers)
    assert resp.status_code == 404


async def test_other_users_cannot_see_trip(client, trip, other_headers):
    resp = await client.get(f"/api/trips/{trip['id']}", headers=other_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Trip not found or access denied"


async def test_list_filters_search_sort_and_paginate(client, headers):
    await create_trip(client, headers, title="Alps hiking", start_date="2030-07-01", description="mountains")
    await create_trip(client, headers, title="Beach week", start_date="2030-08-01", status="Dream")
    await create_trip(client, headers, title="City break", start_date="2030-06-01")

    resp = await client.get("/api/trips", params={"sort": "startDate-asc"}, headers=headers)
    body = resp.json()
    assert body["total"] == 3
    assert [t["title"] for t in body["trips"]] == ["City break", "Alps hiking", "Beach week"]

    resp = await client.get("/api/trips", params={"search": "MOUNTAIN"}, headers=headers)
    assert [t["title"] for t in resp.json()["trips"]] == ["Alps hiking"]

    resp = await client.get("/api/trips", params={"status": "Dream"}, headers=headers)
    assert [t["title"] for t in resp.json()["trips"]] == ["Beach week"]

    resp = await client.get("/api/trips", params={"sort": "title-desc", "limit": 2, "page": 2}, headers=headers)
    body = resp.json()
    assert body["total_pages"] == 2
    assert [t["title"] for t in body["trips"]] == ["Alps hiking"]

    resp = await client.get(
        "/api/trips", params={"start_date_from": "2030-06-15", "start_date_to": "2030-07-15"}, headers=headers
    )
    assert [t["title"] for t in resp.json()["trips"]] == ["Alps hiking"]


async def test_invalid_sort_rejected(client, headers):
    resp = await client.get("/api/trips", params={"sort": "random"}, headers=headers)
    assert resp.status_code == 422


def test_compute_auto_status():
    today = date(2030, 5, 10)
    trip = Trip(start_date=date(2030, 5, 8), end_date=date(2030, 5, 12), status="Planned")
    assert compute_auto_status(trip, today) == "In Progress"

    trip = Trip(start_date=date(2030, 5, 1), end_date=date(2030, 5, 5), status="In Progress")
    assert compute_auto_status(trip, today) == "Completed"

    trip = Trip(start_date=date(2030, 5, 1), end_date=date(2030, 5, 5), status="Cancelled")
    assert compute_auto_status(trip, today) is None

    trip = Trip(start_date=None, end_date=date(2030, 5, 5), status="Planned")
    assert compute_auto_status(trip, today) is None


async def test_status_refreshes_on_read(client, headers):
    today = date.today()
    ongoing = await create_trip(
        client, headers, start_date=(today - timedelta(days=1)).isoformat(), end_date=(today + timedelta(days=1)).isoformat()
    )
    finished = await create_trip(
        client, headers, start_date=(today - timedelta(days=10)).isoformat(), end_date=(today - timedelta(days=5)).isoformat()
    )

    resp = await client.get(f"/api/trips/{ongoing['id']}", headers=headers)
    assert resp.json()["status"] == "In Progress"

    resp = await client.get("/api/trips", headers=headers)
    by_id = {t["id"]: t for t in resp.json()["trips"]}
    assert by_id[finished["id"]]["status"] == "Completed"
    assert by_id[finished["id"]]["add_to_places_visited"] is True


async def test_duplicate_copies_selected_collections_and_links(client, headers, trip):
    trip_id = trip["id"]
    location = (await client.post(
        "/api/locations", json={"trip_id": trip_id, "name": "Louvre", "latitude": 48.86, "longitude": 2.34}, headers=headers
    )).json()
    activity = (await client.post(
        "/api/activities", json={"trip_id": trip_id, "name": "Museum day"}, headers=headers
    )).json()
    await client.post(
        "/api/lodging",
        json={"trip_id": trip_id, "type": "hotel", "name": "Hotel", "check_in_date": "2030-04-10T15:00:00"},
        headers=headers,
    )
    await client.post(
        f"/api/trips/{trip_id}/links",
        json={"source_type": "ACTIVITY", "source_id": activity["id"], "target_type": "LOCATION", "target_id": location["id"]},
        headers=headers,
    )

    resp = await client.post(
        f"/api/trips/{trip_id}/duplicate",
        json={"title": "Paris again", "copy_entities": {"locations": True, "activities": True}},
        headers=headers,
    )
    assert resp.status_code == 201
    copy = resp.json()
    assert copy["title"] == "Paris again"
    assert copy["status"] == "Planning"
    assert copy["id"] != trip_id

    activities = (await client.get(f"/api/activities/trip/{copy['id']}", headers=headers)).json()
    locations = (await client.get(f"/api/locations/trip/{copy['id']}", headers=headers)).json()
    lodging = (await client.get(f"/api/lodging/trip/{copy['id']}", headers=headers)).json()
    assert [a["name"] for a in activities] == ["Museum day"]
    assert [loc["name"] for loc in locations] == ["Louvre"]
    assert lodging == []

    links = (await client.get(
        f"/api/trips/{copy['id']}/links/from/ACTIVITY/{activities[0]['id']}", headers=headers
    )).json()
    assert len(links) == 1
    assert links[0]["target_id"] == locations[0]["id"]
    assert links[0]["relationship"] == "OCCURRED_AT"

    # The original is untouched
    original = (await client.get(f"/api/activities/trip/{trip_id}", headers=headers)).json()
    assert [a["id"] for a in original] == [activity["id"]]


async def test_currency_defaults_and_must_be_supported(client, headers):
    trip = await create_trip(client, headers)
    assert trip["currency"] == "USD"

    resp = await client.post("/api/trips", json={"title": "Mystery", "currency": "XYZ"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unsupported currency: XYZ"

    resp = await client.put(f"/api/trips/{trip['id']}", json={"currency": "jpy"}, headers=headers)
    assert resp.json()["currency"] == "JPY"


async def test_required_fields_cannot_be_cleared(client, headers, trip):
    for field in ("title", "status", "privacy_level", "currency", "add_to_places_visited"):
        resp = await client.put(f"/api/trips/{trip['id']}", json={field: None}, headers=headers)
        assert resp.status_code == 400, field
        assert resp.json()["detail"] == f"{field} cannot be null"

    resp = await client.get(f"/api/trips/{trip['id']}", headers=headers)
    assert resp.json()["title"] == "Paris in Spring"
    assert resp.json()["currency"] == "EUR"


async def test_duplicate_keeps_album_photos_and_cover(client, headers, trip):
    photos = [
        (await client.post("/api/photos", json={"trip_id": trip["id"], "caption": f"Shot {i}"}, headers=headers)).json()
        for i in range(3)
    ]
    album = (await client.post(
        "/api/albums", json={"trip_id": trip["id"], "name": "Best of", "cover_photo_id": photos[1]["id"]}, headers=headers
    )).json()
    await client.post(
        f"/api/albums/{album['id']}/photos", json={"photo_ids": [photos[0]["id"], photos[1]["id"]]}, headers=headers
    )

    copy = (await client.post(
        f"/api/trips/{trip['id']}/duplicate",
        json={"title": "Paris again", "copy_entities": {"photos": True, "photo_albums": True}},
        headers=headers,
    )).json()

    new_photos = (await client.get(f"/api/photos/trip/{copy['id']}", headers=headers)).json()
    new_ids = {p["caption"]: p["id"] for p in new_photos}
    assert sorted(new_ids) == ["Shot 0", "Shot 1", "Shot 2"]

    albums = (await client.get(f"/api/albums/trip/{copy['id']}", headers=headers)).json()
    assert [a["name"] for a in albums] == ["Best of"]
    detail = (await client.get(f"/api/albums/{albums[0]['id']}", headers=headers)).json()
    assert sorted(p["caption"] for p in detail["photos"]) == ["Shot 0", "Shot 1"]
    assert {p["id"] for p in detail["photos"]} == {new_ids["Shot 0"], new_ids["Shot 1"]}
    assert detail["cover_photo_id"] == new_ids["Shot 1"]


async def test_duplicate_albums_without_photos_are_empty(client, headers, trip):
    photo = (await client.post("/api/photos", json={"trip_id": trip["id"]}, headers=headers)).json()
    album = (await client.post(
        "/api/albums", json={"trip_id": trip["id"], "name": "Solo", "cover_photo_id": photo["id"]}, headers=headers
    )).json()
    await client.post(f"/api/albums/{album['id']}/photos", json={"photo_ids": [photo["id"]]}, headers=headers)

    copy = (await client.post(
        f"/api/trips/{trip['id']}/duplicate",
        json={"title": "Albums only", "copy_entities": {"photo_albums": True}},
        headers=headers,
    )).json()

    albums = (await client.get(f"/api/albums/trip/{copy['id']}", headers=headers)).json()
    assert albums[0]["photo_count"] == 0
    assert albums[0]["cover_photo_id"] is None


async def test_scheduled_refresh_updates_every_users_trips(
    client, headers, other_headers, session_factory, db_session, monkeypatch
):
    today = date.today()
    past = {"start_date": (today - timedelta(days=10)).isoformat(), "end_date": (today - timedelta(days=5)).isoformat()}
    finished = await create_trip(client, headers, **past)
    theirs = await create_trip(client, other_headers, **past)
    later = await create_trip(
        client, headers, start_date=(today + timedelta(days=30)).isoformat(), end_date=(today + timedelta(days=35)).isoformat()
    )
    assert finished["status"] == "Planning"

    monkeypatch.setattr(captains_log.database, "async_session_factory", session_factory)
    await refresh_trip_statuses()

    statuses = {trip_id: (await db_session.get(Trip, trip_id)).status for trip_id in (finished["id"], theirs["id"], later["id"])}
    assert statuses == {finished["id"]: "Completed", theirs["id"]: "Completed", later["id"]: "Planning"}
    assert (await db_session.get(Trip, finished["id"])).add_to_places_visited is True
