from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from michi.db.deps import get_db
from michi.db.models.user_metadata import UserMetadata
from michi.main import app
from michi.services.llm_client import get_pathway_model


class FakePathwayModel:
    """Returns scripted responses in order and records every prompt it saw."""

    model = "fake-model"

    def __init__(self) -> None:
        self.responses: List[Any] = []
        self.calls: List[Dict[str, Any]] = []

    def queue(self, response: Any) -> None:
        self.responses.append(response)

    def complete(self, system_prompt: str, user_prompt: str, *, trace_name: str, metadata=None, request_id=None) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "trace_name": trace_name})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    UserMetadata.__table__.create(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def fake_model() -> FakePathwayModel:
    return FakePathwayModel()


@pytest.fixture()
def client(session_factory, fake_model):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pathway_model] = lambda: fake_model
    with TestClient(app) as test_client:
        yield test_client, session_factory
    app.dependency_overrides.clear()
