async def create_tag(client, headers, **payload):
    resp = await client.post("/api/tags", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_tag_crud(client, headers):
    tag = await create_tag(client, headers, name="Beach", color="#06B6D4", text_color="#FFFFFF")
    assert tag["color"] == "#06B6D4"

    resp = await client.put(f"/api/tags/{tag['id']}", json={"name": "Beaches", "color": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Beaches"
    assert resp.json()["color"] is None
    assert resp.json()["text_color"] == "#FFFFFF"

    resp = await client.put(f"/api/tags/{tag['id']}", json={"name": None}, headers=headers)
    assert resp.status_code == 400

    resp = await client.delete(f"/api/tags/{tag['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.get(f"/api/tags/{tag['id']}", headers=headers)
    assert resp.status_code == 404


async def test_invalid_color_rejected(client, headers):
    resp = await client.post("/api/tags", json={"name": "Bad", "color": "blue"}, headers=headers)
    assert resp.status_code == 422


async def test_link_list_and_unlink(client, headers, trip):
    city = await create_tag(client, headers, name="City break")
    food = await create_tag(client, headers, name="Food")
    await create_tag(client, headers, name="Adventure")

    for tag in (food, city):
        resp = await client.post("/api/tags/link", json={"trip_id": trip["id"], "tag_id": tag["id"]}, headers=headers)
        assert resp.status_code == 201
        assert resp.json() == {"trip_id": trip["id"], "tag_id": tag["id"]}

    resp = await client.post("/api/tags/link", json={"trip_id": trip["id"], "tag_id": city["id"]}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Tag already linked to this trip"

    resp = await client.get(f"/api/tags/trips/{trip['id']}", headers=headers)
    assert [t["name"] for t in resp.json()] == ["City break", "Food"]

    listed = (await client.get("/api/tags", headers=headers)).json()
    assert [(t["name"], t["trip_count"]) for t in listed] == [("Adventure", 0), ("City break", 1), ("Food", 1)]

    detail = (await client.get(f"/api/tags/{city['id']}", headers=headers)).json()
    assert [(t["id"], t["title"]) for t in detail["trips"]] == [(trip["id"], "Paris in Spring")]

    resp = await client.delete(f"/api/tags/trips/{trip['id']}/tags/{city['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await client.delete(f"/api/tags/trips/{trip['id']}/tags/{city['id']}", headers=headers)
    assert resp.status_code == 404
    resp = await client.get(f"/api/tags/trips/{trip['id']}", headers=headers)
    assert [t["name"] for t in resp.json()] == ["Food"]


async def test_deleting_tag_or_trip_drops_assignments(client, headers, trip):
    tag = await create_tag(client, headers, name="Spring")
    other_trip = (await client.post("/api/trips", json={"title": "Kyoto"}, headers=headers)).json()
    for trip_id in (trip["id"], other_trip["id"]):
        await client.post("/api/tags/link", json={"trip_id": trip_id, "tag_id": tag["id"]}, headers=headers)

    await client.delete(f"/api/trips/{other_trip['id']}", headers=headers)
    listed = (await client.get("/api/tags", headers=headers)).json()
    assert listed[0]["trip_count"] == 1

    await client.delete(f"/api/tags/{tag['id']}", headers=headers)
    resp = await client.get(f"/api/tags/trips/{trip['id']}", headers=headers)
    assert resp.json() == []
    # The trip itself survives
    resp = await client.get(f"/api/trips/{trip['id']}", headers=headers)
    assert resp.status_code == 200


async def test_tags_are_private(client, headers, trip, other_headers):
    tag = await create_tag(client, headers, name="Mine")
    theirs = await create_tag(client, other_headers, name="Theirs")

    assert (await client.get(f"/api/tags/{tag['id']}", headers=other_headers)).status_code == 404
    assert [t["name"] for t in (await client.get("/api/tags", headers=other_headers)).json()] == ["Theirs"]

    # Another user's tag cannot go on my trip, and my tag cannot go on theirs
    resp = await client.post("/api/tags/link", json={"trip_id": trip["id"], "tag_id": theirs["id"]}, headers=headers)
    assert resp.status_code == 404
    resp = await client.post("/api/tags/link", json={"trip_id": trip["id"], "tag_id": tag["id"]}, headers=other_headers)
    assert resp.status_code == 404
    resp = await client.get(f"/api/tags/trips/{trip['id']}", headers=other_headers)
    assert resp.status_code == 404
