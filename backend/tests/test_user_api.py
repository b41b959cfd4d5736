from __future__ import annotations

from payloads import profile_payload


def test_pathway_missing_returns_null(client):
    test_client, _ = client

    response = test_client.get("/user/pathways", params={"user_id": "user-1", "trip_id": "trip-1"})

    assert response.status_code == 200
    assert response.json() == {"pathway": None}


def test_pathway_save_then_load(client):
    test_client, _ = client
    pathway = {"days": [{"day": 1, "date": "2026-06-01"}], "summary": "Crafts week"}

    saved = test_client.put("/user/pathways", json={"userId": "user-1", "tripId": "trip-1", "pathway": pathway})
    assert saved.status_code == 200
    assert saved.json() == {"success": True, "message": "Pathway saved successfully"}

    loaded = test_client.get("/user/pathways", params={"user_id": "user-1", "trip_id": "trip-1"})
    assert loaded.json() == {"pathway": pathway}

    other_user = test_client.get("/user/pathways", params={"user_id": "user-2", "trip_id": "trip-1"})
    assert other_user.json() == {"pathway": None}


def test_pathway_save_requires_trip_id(client):
    test_client, _ = client

    response = test_client.put("/user/pathways", json={"userId": "user-1", "pathway": {}})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"


def test_profile_missing_returns_null(client):
    test_client, _ = client

    response = test_client.get("/user/profile", params={"user_id": "user-1"})

    assert response.status_code == 200
    assert response.json() == {"profile": None}


def test_profile_save_then_load(client):
    test_client, _ = client

    saved = test_client.put("/user/profile", json={"userId": "user-1", "profile": profile_payload("Mika")})
    assert saved.status_code == 200
    assert saved.json()["message"] == "Profile saved successfully"

    loaded = test_client.get("/user/profile", params={"user_id": "user-1"}).json()["profile"]
    assert loaded["name"] == "Mika"
    assert loaded["timezone"] == "Asia/Tokyo"
    assert loaded["pblProfile"]["interests"] == ["history", "food"]
    assert loaded["constraints"]["maxDailyMinutes"] == 120


def test_profile_requires_name(client):
    test_client, _ = client
    profile = profile_payload()
    profile["name"] = ""

    response = test_client.put("/user/profile", json={"userId": "user-1", "profile": profile})

    assert response.status_code == 400
