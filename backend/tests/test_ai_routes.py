from __future__ import annotations

import json

from michi.core.config import Settings
from michi.core.errors import UpstreamUnavailableError
from michi.services import llm_client
from michi.services.llm_client import get_pathway_model
from michi.main import app
from payloads import plan_day, profile_payload

TRIP = {"id": "trip-1", "title": "Kyoto summer", "startDate": "2026-06-01", "endDate": "2026-06-05", "baseLocation": "Kyoto"}


def _plan_request(**overrides) -> dict:
    payload = {
        "learnerProfile": profile_payload(),
        "trip": TRIP,
        "learningTarget": {"track": "60min"},
        "existingItinerary": [],
    }
    payload.update(overrides)
    return payload


def test_plan_for_whole_trip(client, fake_model):
    test_client, _ = client
    fake_model.queue({"days": [plan_day(day) for day in range(1, 6)], "summary": "Five days"})

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 200, response.text
    body = response.json()
    assert [day["day"] for day in body["days"]] == [1, 2, 3, 4, 5]
    assert body["summary"] == "Five days"
    assert "5-day" in fake_model.calls[0]["user"]
    assert fake_model.calls[0]["trace_name"] == "pathway.plan"


def test_plan_maps_selected_days_in_date_order(client, fake_model):
    test_client, _ = client
    fenced = json.dumps({"days": [plan_day(1), plan_day(2)]})
    fake_model.queue(f"Here is the plan:\n```json\n{fenced}\n```")

    response = test_client.post(
        "/ai/plan",
        json=_plan_request(generationOptions={"selectedDays": ["2026-06-04", "2026-06-02"]}),
    )

    assert response.status_code == 200, response.text
    days = response.json()["days"]
    assert [(day["day"], day["date"]) for day in days] == [(2, "2026-06-02"), (4, "2026-06-04")]
    assert "2-day" in fake_model.calls[0]["user"]


def test_selected_day_outside_trip_is_rejected(client, fake_model):
    test_client, _ = client

    response = test_client.post("/ai/plan", json=_plan_request(generationOptions={"selectedDays": ["2026-07-01"]}))

    assert response.status_code == 400
    assert response.json()["error"] == "selectedDays must fall within the trip dates"
    assert fake_model.calls == []


def test_plan_with_builtin_profile(client, fake_model):
    test_client, _ = client
    fake_model.queue({"days": [plan_day(day) for day in range(1, 6)]})

    response = test_client.post("/ai/plan", json=_plan_request(learnerProfile=None, learnerProfileId="sam"))

    assert response.status_code == 200
    assert "- Name: Sam" in fake_model.calls[0]["user"]


def test_plan_with_unknown_builtin_profile(client):
    test_client, _ = client

    response = test_client.post("/ai/plan", json=_plan_request(learnerProfile=None, learnerProfileId="nobody"))

    assert response.status_code == 404
    assert response.json() == {"error": "Unknown learner profile: nobody"}


def test_plan_requires_some_profile(client):
    test_client, _ = client

    response = test_client.post("/ai/plan", json=_plan_request(learnerProfile=None))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"


def test_schema_mismatch_returns_details(client, fake_model):
    test_client, _ = client
    fake_model.queue({"days": [plan_day(day) for day in range(1, 5)]})

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "AI response does not match schema"
    assert {"path": "days", "message": "Expected exactly 5 days, got 4", "type": "days_length"} in body["details"]


def test_unparseable_model_output(client, fake_model):
    test_client, _ = client
    fake_model.queue("Sorry, I cannot help with that.")

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 500
    assert response.json()["error"] == "Invalid JSON response from AI"


def test_upstream_quota_failure_is_502(client, fake_model):
    test_client, _ = client
    fake_model.queue(UpstreamUnavailableError())

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 502
    assert response.json() == {"error": "The AI service is temporarily unavailable"}


def test_unexpected_failure_is_generic_500(client, fake_model):
    test_client, _ = client
    fake_model.queue(RuntimeError("connection reset, key sk-secret"))

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate learning pathway"}


def test_missing_api_key_is_500(client, monkeypatch):
    test_client, _ = client
    app.dependency_overrides.pop(get_pathway_model)
    monkeypatch.setattr(llm_client, "get_settings", lambda: Settings(openai_api_key=None))

    response = test_client.post("/ai/plan", json=_plan_request())

    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY is not configured"}


def _drafts_request(**overrides) -> dict:
    payload = {
        "tripId": "trip-1",
        "learnerId": "user-1",
        "selectedDates": ["2026-06-01", "2026-06-02"],
        "effortMode": "60min",
        "trip": TRIP,
        "learnerProfile": profile_payload(),
    }
    payload.update(overrides)
    return payload


def _raw_draft(draft_type: str, title: str) -> dict:
    return {
        "type": draft_type,
        "title": title,
        "overview": "Overview",
        "whyItFits": "Fits",
        "days": [
            {"day": 1, "date": "2026-06-01", "headline": f"{title} one"},
            {"day": 2, "date": "2026-06-02", "headline": f"{title} two"},
        ],
    }


def test_drafts_always_cover_three_types(client, fake_model):
    test_client, _ = client
    fake_model.queue({"drafts": [_raw_draft("continuous", "A"), _raw_draft("continuous", "B"), _raw_draft("hybrid", "C")]})

    response = test_client.post("/pathways/drafts", json=_drafts_request())

    assert response.status_code == 200, response.text
    drafts = response.json()["drafts"]
    assert [draft["type"] for draft in drafts] == ["continuous", "themes", "hybrid"]
    assert all(draft["id"].startswith("draft-") for draft in drafts)
    assert drafts[1]["whyItFits"] == "Fits"


def test_drafts_wrong_count_is_500(client, fake_model):
    test_client, _ = client
    fake_model.queue({"drafts": [_raw_draft("continuous", "A")]})

    response = test_client.post("/pathways/drafts", json=_drafts_request())

    assert response.status_code == 500
    assert response.json() == {"error": "AI did not return exactly 3 pathway drafts"}


def test_drafts_require_selected_dates(client):
    test_client, _ = client

    response = test_client.post("/pathways/drafts", json=_drafts_request(selectedDates=[]))

    assert response.status_code == 400


def _finalize_request(**overrides) -> dict:
    chosen = {"id": "draft-1", **_raw_draft("themes", "Crafts")}
    payload = {
        "tripId": "trip-1",
        "learnerId": "user-1",
        "chosenDraftId": "draft-1",
        "selectedDates": ["2026-06-03", "2026-06-05"],
        "effortMode": "60min",
        "trip": TRIP,
        "learnerProfile": profile_payload(),
        "chosenDraft": chosen,
    }
    payload.update(overrides)
    return payload


def test_finalize_pins_days_to_selected_dates(client, fake_model):
    test_client, _ = client
    fake_model.queue({"days": [plan_day(1), plan_day(2)], "summary": "Crafts week"})

    response = test_client.post("/pathways/finalize", json=_finalize_request())

    assert response.status_code == 200, response.text
    body = response.json()
    assert [(day["day"], day["date"]) for day in body["days"]] == [(1, "2026-06-03"), (2, "2026-06-05")]
    assert body["summary"] == "Crafts week"
    assert body["days"][0]["scheduleBlocks"][0]["title"] == "Market walk"
    assert "Crafts one" in fake_model.calls[0]["user"]


def test_finalize_uses_edited_draft(client, fake_model):
    test_client, _ = client
    edited = {
        "id": "draft-1",
        "type": "themes",
        "title": "Crafts, edited",
        "overview": "Overview",
        "whyItFits": "Fits",
        "days": [
            {"day": 1, "date": "2026-06-03", "headline": "Paper making"},
            {"day": 2, "date": "2026-06-05", "headline": "Pottery"},
        ],
    }
    fake_model.queue({"days": [plan_day(1), plan_day(2)]})

    response = test_client.post("/pathways/finalize", json=_finalize_request(editedDraft=edited))

    assert response.status_code == 200, response.text
    assert "Paper making" in fake_model.calls[0]["user"]
    assert "Crafts, edited" in fake_model.calls[0]["user"]


def test_finalize_rejects_misdated_edit(client, fake_model):
    test_client, _ = client
    edited = {
        "id": "draft-1",
        "type": "themes",
        "title": "Crafts",
        "overview": "Overview",
        "whyItFits": "Fits",
        "days": [
            {"day": 1, "date": "2026-06-03", "headline": "Paper making"},
            {"day": 2, "date": "2026-06-04", "headline": "Pottery"},
        ],
    }

    response = test_client.post("/pathways/finalize", json=_finalize_request(editedDraft=edited))

    assert response.status_code == 400
    assert response.json()["error"] == (
        "Invalid editedDraft: day 2 date (2026-06-04) does not match selectedDates[1] (2026-06-05)"
    )
    assert fake_model.calls == []


def test_finalize_schema_mismatch(client, fake_model):
    test_client, _ = client
    fake_model.queue({"days": [plan_day(1)]})

    response = test_client.post("/pathways/finalize", json=_finalize_request())

    assert response.status_code == 500
    assert response.json()["error"] == "AI response does not match schema"
