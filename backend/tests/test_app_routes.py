"""Regression tests for application route registration."""
from fastapi.routing import APIRoute

from michi.main import app


def _routes(path: str, method: str) -> list[APIRoute]:
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and route.path == path and method in route.methods
    ]


def test_core_routes_registered_once() -> None:
    expected = [
        ("/trips", "GET"),
        ("/trips", "POST"),
        ("/trips/{trip_id}", "PATCH"),
        ("/trips/{trip_id}/schedule/generate", "POST"),
        ("/trips/{trip_id}/schedule/apply-plan", "POST"),
        ("/user/schedule-blocks", "PUT"),
        ("/user/pathways", "GET"),
        ("/user/profile", "PUT"),
        ("/ai/plan", "POST"),
        ("/pathways/drafts", "POST"),
        ("/pathways/finalize", "POST"),
    ]
    for path, method in expected:
        assert len(_routes(path, method)) == 1, f"{method} {path} should be mounted exactly once"
