async def test_companion_crud(client, headers):
    resp = await client.post(
        "/api/companions",
        json={"name": "Sam", "relationship": "Friend", "email": "sam@example.com", "dietary_preferences": ["vegan"]},
        headers=headers,
    )
    assert resp.status_code == 201
    sam = resp.json()
    assert sam["relationship"] == "Friend"
    assert sam["is_myself"] is False

    resp = await client.put(f"/api/companions/{sam['id']}", json={"relationship": "Sibling"}, headers=headers)
    assert resp.json()["relationship"] == "Sibling"
    assert resp.json()["dietary_preferences"] == ["vegan"]

    names = [c["name"] for c in (await client.get("/api/companions", headers=headers)).json()]
    assert names == ["Myself", "Sam"]

    resp = await client.delete(f"/api/companions/{sam['id']}", headers=headers)
    assert resp.status_code == 204


async def test_myself_cannot_be_deleted(client, headers):
    myself = (await client.get("/api/companions", headers=headers)).json()[0]
    resp = await client.delete(f"/api/companions/{myself['id']}", headers=headers)
    assert resp.status_code == 400


async def test_link_and_unlink_trip(client, headers, trip):
    sam = (await client.post("/api/companions", json={"name": "Sam"}, headers=headers)).json()

    resp = await client.post("/api/companions/link", json={"trip_id": trip["id"], "companion_id": sam["id"]}, headers=headers)
    assert resp.json() == {"trip_id": trip["id"], "companion_id": sam["id"]}
    resp = await client.post("/api/companions/link", json={"trip_id": trip["id"], "companion_id": sam["id"]}, headers=headers)
    assert resp.status_code == 400

    names = {c["name"] for c in (await client.get(f"/api/companions/trips/{trip['id']}", headers=headers)).json()}
    assert names == {"Myself", "Sam"}

    resp = await client.delete(f"/api/companions/trips/{trip['id']}/companions/{sam['id']}", headers=headers)
    assert resp.json() == {"success": True}
    resp = await client.delete(f"/api/companions/trips/{trip['id']}/companions/{sam['id']}", headers=headers)
    assert resp.status_code == 404


async def test_companions_are_private(client, headers, other_headers):
    sam = (await client.post("/api/companions", json={"name": "Sam"}, headers=headers)).json()
    resp = await client.get(f"/api/companions/{sam['id']}", headers=other_headers)
    assert resp.status_code == 404


async def test_name_cannot_be_cleared(client, headers):
    sam = (await client.post("/api/companions", json={"name": "Sam"}, headers=headers)).json()

    resp = await client.put(f"/api/companions/{sam['id']}", json={"name": None}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "name cannot be null"

    resp = await client.put(f"/api/companions/{sam['id']}", json={"relationship": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Sam"
