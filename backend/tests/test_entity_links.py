import pytest_asyncio


@pytest_asyncio.fixture
async def places(client, headers, trip):
    """A location, an activity, and two photos on the trip."""
    async def add(path, payload):
        resp = await client.post(path, json={"trip_id": trip["id"], **payload}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return {
        "location": await add("/api/locations", {"name": "Eiffel Tower"}),
        "activity": await add("/api/activities", {"name": "Sunset climb"}),
        "photos": [await add("/api/photos", {"caption": f"View {i}"}) for i in range(2)],
    }


def links_url(trip):
    return f"/api/trips/{trip['id']}/links"


async def test_create_link_defaults_relationship(client, headers, trip, places):
    resp = await client.post(links_url(trip), json={
        "source_type": "PHOTO", "source_id": places["photos"][0]["id"],
        "target_type": "LOCATION", "target_id": places["location"]["id"],
    }, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["relationship"] == "TAKEN_AT"


async def test_duplicate_and_self_links_rejected(client, headers, trip, places):
    body = {
        "source_type": "ACTIVITY", "source_id": places["activity"]["id"],
        "target_type": "LOCATION", "target_id": places["location"]["id"],
    }
    assert (await client.post(links_url(trip), json=body, headers=headers)).status_code == 201
    resp = await client.post(links_url(trip), json=body, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Link already exists between these entities"

    resp = await client.post(links_url(trip), json={
        "source_type": "ACTIVITY", "source_id": places["activity"]["id"],
        "target_type": "ACTIVITY", "target_id": places["activity"]["id"],
    }, headers=headers)
    assert resp.status_code == 400


async def test_link_to_missing_entity_is_404(client, headers, trip, places):
    resp = await client.post(links_url(trip), json={
        "source_type": "ACTIVITY", "source_id": places["activity"]["id"],
        "target_type": "LOCATION", "target_id": 9999,
    }, headers=headers)
    assert resp.status_code == 404


async def test_bulk_create_skips_existing(client, headers, trip, places):
    activity_id = places["activity"]["id"]
    await client.post(links_url(trip), json={
        "source_type": "ACTIVITY", "source_id": activity_id,
        "target_type": "LOCATION", "target_id": places["location"]["id"],
    }, headers=headers)

    resp = await client.post(f"{links_url(trip)}/bulk", json={
        "source_type": "ACTIVITY",
        "source_id": activity_id,
        "targets": [
            {"target_type": "LOCATION", "target_id": places["location"]["id"]},
            {"target_type": "PHOTO", "target_id": places["photos"][0]["id"]},
            {"target_type": "ACTIVITY", "target_id": activity_id},
        ],
    }, headers=headers)
    assert resp.json() == {"created": 1, "skipped": 2}


async def test_bulk_link_photos_and_photo_lookup(client, headers, trip, places):
    photo_ids = [p["id"] for p in places["photos"]]
    resp = await client.post(f"{links_url(trip)}/photos", json={
        "photo_ids": photo_ids, "target_type": "ACTIVITY", "target_id": places["activity"]["id"],
    }, headers=headers)
    assert resp.json() == {"created": 2, "skipped": 0}

    resp = await client.get(
        f"{links_url(trip)}/entity/ACTIVITY/{places['activity']['id']}/photos", headers=headers
    )
    assert [p["id"] for p in resp.json()] == photo_ids


async def test_entity_view_and_summary(client, headers, trip, places):
    activity_id = places["activity"]["id"]
    location_id = places["location"]["id"]
    await client.post(links_url(trip), json={
        "source_type": "ACTIVITY", "source_id": activity_id, "target_type": "LOCATION", "target_id": location_id,
    }, headers=headers)
    await client.post(links_url(trip), json={
        "source_type": "PHOTO", "source_id": places["photos"][0]["id"],
        "target_type": "ACTIVITY", "target_id": activity_id,
    }, headers=headers)

    resp = await client.get(f"{links_url(trip)}/entity/ACTIVITY/{activity_id}", headers=headers)
    body = resp.json()
    assert [link["target_name"] for link in body["links_from"]] == ["Eiffel Tower"]
    assert [link["source_name"] for link in body["links_to"]] == ["View 0"]
    assert body["summary"]["total_links"] == 2
    assert body["summary"]["link_counts"] == {"LOCATION": 1, "PHOTO": 1}

    resp = await client.get(f"{links_url(trip)}/from/ACTIVITY/{activity_id}", params={"target_type": "PHOTO"}, headers=headers)
    assert resp.json() == []

    summary = (await client.get(f"{links_url(trip)}/summary", headers=headers)).json()
    assert summary[f"ACTIVITY:{activity_id}"]["total_links"] == 2
    assert summary[f"LOCATION:{location_id}"]["link_counts"] == {"ACTIVITY": 1}


async def test_update_and_delete_links(client, headers, trip, places):
    link = (await client.post(links_url(trip), json={
        "source_type": "ACTIVITY", "source_id": places["activity"]["id"],
        "target_type": "LOCATION", "target_id": places["location"]["id"],
    }, headers=headers)).json()

    resp = await client.put(f"{links_url(trip)}/{link['id']}", json={"notes": "Meet here"}, headers=headers)
    assert resp.json()["notes"] == "Meet here"
    assert resp.json()["relationship"] == "OCCURRED_AT"

    resp = await client.post(f"{links_url(trip)}/delete", json={
        "source_type": "ACTIVITY", "source_id": places["activity"]["id"],
        "target_type": "LOCATION", "target_id": places["location"]["id"],
    }, headers=headers)
    assert resp.status_code == 204
    resp = await client.delete(f"{links_url(trip)}/{link['id']}", headers=headers)
    assert resp.status_code == 404


async def test_delete_all_links_for_entity(client, headers, trip, places):
    photo_ids = [p["id"] for p in places["photos"]]
    await client.post(f"{links_url(trip)}/photos", json={
        "photo_ids": photo_ids, "target_type": "LOCATION", "target_id": places["location"]["id"],
    }, headers=headers)

    resp = await client.delete(f"{links_url(trip)}/entity/LOCATION/{places['location']['id']}", headers=headers)
    assert resp.json() == {"deleted": 2}


async def test_links_are_scoped_to_owner(client, trip, places, other_headers):
    resp = await client.get(f"{links_url(trip)}/summary", headers=other_headers)
    assert resp.status_code == 404
