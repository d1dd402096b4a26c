import pytest_asyncio


@pytest_asyncio.fixture
async def planned(client, headers, trip):
    """Paris trip with a hotel stay, a museum visit, a dinner, and a train out."""
    async def add(path, payload):
        resp = await client.post(path, json={"trip_id": trip["id"], **payload}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return {
        "hotel": await add("/api/lodging", {
            "type": "hotel", "name": "Hotel Lutetia", "cost": 600, "currency": "EUR",
            "check_in_date": "2030-04-10T15:00:00", "check_out_date": "2030-04-13T11:00:00",
        }),
        "museum": await add("/api/activities", {
            "name": "Musee d'Orsay", "category": "Museum", "cost": 16, "currency": "EUR",
            "start_time": "2030-04-11T10:00:00", "end_time": "2030-04-11T12:30:00",
        }),
        "dinner": await add("/api/activities", {
            "name": "Bistro", "category": "Food", "cost": 90, "currency": "EUR",
            "start_time": "2030-04-11T20:00:00",
        }),
        "train": await add("/api/transportation", {
            "type": "train", "to_location_name": "Lyon", "cost": 80, "currency": "EUR",
            "departure_time": "2030-04-13T12:00:00", "arrival_time": "2030-04-13T14:00:00",
        }),
    }


async def test_day_view_orders_all_day_items_first(client, headers, trip, planned):
    resp = await client.get(f"/api/trips/{trip['id']}/days/2030-04-11", headers=headers)
    assert resp.status_code == 200
    day = resp.json()
    assert day["date"] == "2030-04-11"
    assert day["trip_day"] == 2
    assert [(i["type"], i["title"]) for i in day["items"]] == [
        ("lodging", "Staying at Hotel Lutetia"),
        ("activity", "Musee d'Orsay"),
        ("activity", "Bistro"),
    ]
    assert day["items"][0]["display_time"] == "All day"
    assert day["items"][1]["display_time"] == "10:00 AM GMT+2"


async def test_day_view_check_out_and_departure(client, headers, trip, planned):
    day = (await client.get(f"/api/trips/{trip['id']}/days/2030-04-13", headers=headers)).json()
    assert [(i["kind"], i["title"]) for i in day["items"]] == [
        ("check_out", "Check out: Hotel Lutetia"),
        ("departure", "Train to Lyon"),
    ]


async def test_day_outside_trip_has_no_trip_day(client, headers, trip, planned):
    day = (await client.get(f"/api/trips/{trip['id']}/days/2030-05-01", headers=headers)).json()
    assert day["trip_day"] is None
    assert day["items"] == []


async def test_itinerary_covers_every_trip_day(client, headers, trip, planned):
    resp = await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)
    body = resp.json()
    assert body["timezone"] == "Europe/Paris"
    assert [d["date"] for d in body["days"]] == [
        "2030-04-10", "2030-04-11", "2030-04-12", "2030-04-13", "2030-04-14", "2030-04-15",
    ]
    assert [d["trip_day"] for d in body["days"]] == [1, 2, 3, 4, 5, 6]
    assert body["days"][4]["items"] == []


async def test_dashboard(client, headers, trip, planned):
    await client.post(
        "/api/checklists",
        json={"name": "Packing", "trip_id": trip["id"], "items": [{"name": "Passport"}, {"name": "Tickets"}]},
        headers=headers,
    )

    resp = await client.get(f"/api/trips/{trip['id']}/dashboard", headers=headers)
    assert resp.status_code == 200
    board = resp.json()

    assert board["trip"]["id"] == trip["id"]
    assert board["countdown"]["state"] == "countdown"
    assert board["next_up"]["state"] == "upcoming"
    assert board["next_up"]["event"]["title"] == "Check in: Hotel Lutetia"
    assert board["today"]["events"] == []

    budget = board["budget"]
    assert budget["currency"] == "EUR"
    assert budget["spent"] == 786.0
    assert budget["remaining"] == 1214.0
    assert budget["breakdown"] == {
        "lodging": 600.0, "transportation": 80.0, "activities": 16.0, "food": 90.0, "other": 0.0,
    }
    assert budget["status"] == "good"
    assert budget["display"]["spent"] == "€786.00"

    assert board["checklists"] == {"checklists": 1, "total": 2, "checked": 0, "percentage": 0}
    assert board["counts"]["activities"] == 2

    recent = board["recent_activity"]
    assert recent[0]["label"] == "Today"
    assert {item["action"] for item in recent[0]["items"]} == {"created"}


async def test_dashboard_is_owner_only(client, trip, other_headers):
    resp = await client.get(f"/api/trips/{trip['id']}/dashboard", headers=other_headers)
    assert resp.status_code == 404
