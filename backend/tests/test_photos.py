async def add_photo(client, headers, trip, **payload):
    resp = await client.post("/api/photos", json={"trip_id": trip["id"], **payload}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_photo_metadata_crud(client, headers, trip):
    photo = await add_photo(client, headers, trip, file_path="2030/04/seine.jpg", caption="Seine", latitude=48.85, longitude=2.35)
    assert photo["source"] == "local"

    resp = await client.put(f"/api/photos/{photo['id']}", json={"caption": "Seine at dusk"}, headers=headers)
    assert resp.json()["caption"] == "Seine at dusk"

    resp = await client.get(f"/api/photos/trip/{trip['id']}", headers=headers)
    assert [p["id"] for p in resp.json()] == [photo["id"]]

    resp = await client.post("/api/photos", json={"trip_id": trip["id"], "latitude": 120}, headers=headers)
    assert resp.status_code == 422


async def test_album_membership(client, headers, trip):
    photos = [await add_photo(client, headers, trip, caption=f"Shot {i}") for i in range(3)]
    album = (await client.post(
        "/api/albums", json={"trip_id": trip["id"], "name": "Best of", "cover_photo_id": photos[0]["id"]}, headers=headers
    )).json()

    resp = await client.post(
        f"/api/albums/{album['id']}/photos", json={"photo_ids": [p["id"] for p in photos]}, headers=headers
    )
    assert resp.json() == {"success": True, "added": 3, "skipped": 0}
    resp = await client.post(f"/api/albums/{album['id']}/photos", json={"photo_ids": [photos[0]["id"]]}, headers=headers)
    assert resp.json()["skipped"] == 1

    detail = (await client.get(f"/api/albums/{album['id']}", headers=headers)).json()
    assert detail["photo_count"] == 3
    assert [p["caption"] for p in detail["photos"]] == ["Shot 0", "Shot 1", "Shot 2"]

    resp = await client.delete(f"/api/albums/{album['id']}/photos/{photos[0]['id']}", headers=headers)
    assert resp.json() == {"success": True}
    detail = (await client.get(f"/api/albums/{album['id']}", headers=headers)).json()
    assert detail["photo_count"] == 2
    assert detail["cover_photo_id"] is None


async def test_album_rejects_photos_from_other_trips(client, headers, trip):
    other_trip = (await client.post("/api/trips", json={"title": "Elsewhere"}, headers=headers)).json()
    stray = await add_photo(client, headers, other_trip)
    album = (await client.post("/api/albums", json={"trip_id": trip["id"], "name": "Album"}, headers=headers)).json()

    resp = await client.post(f"/api/albums/{album['id']}/photos", json={"photo_ids": [stray["id"]]}, headers=headers)
    assert resp.status_code == 404


async def test_deleting_cover_photo_clears_cover(client, headers, trip):
    cover = await add_photo(client, headers, trip)
    album = (await client.post(
        "/api/albums", json={"trip_id": trip["id"], "name": "Album", "cover_photo_id": cover["id"]}, headers=headers
    )).json()

    assert (await client.delete(f"/api/photos/{cover['id']}", headers=headers)).status_code == 204
    resp = await client.get(f"/api/albums/{album['id']}", headers=headers)
    assert resp.json()["cover_photo_id"] is None


async def test_album_name_cannot_be_cleared(client, headers, trip):
    album = (await client.post("/api/albums", json={"trip_id": trip["id"], "name": "Album"}, headers=headers)).json()

    resp = await client.put(f"/api/albums/{album['id']}", json={"name": None}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "name cannot be null"

    resp = await client.put(f"/api/albums/{album['id']}", json={"description": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Album"
