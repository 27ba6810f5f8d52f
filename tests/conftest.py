"""Shared fixtures: a fake generator stands in for Gemini in every test."""
import pytest
from fastapi.testclient import TestClient

from value_intel.config import Settings
from value_intel.main import create_app


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    for key in ("GEMINI_API_KEY", "MODEL_NAME", "PORT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(port=3000, model_name="gemini-test", api_key="test-key")


@pytest.fixture
def model_payload() -> dict:
    return {
        "narratives": {
            "clinical": "Clinical story.",
            "operations": "Ops story.",
            "financial": "Finance story.",
            "executive": "Exec story.",
        },
        "assumptions_and_caveats": [f"Caveat {i}" for i in range(6)],
        "clinical_validation_checklist": [f"Check {i}" for i in range(5)],
        "next_best_actions": ["Run pilot.", "Pull Epic baseline.", "Review in 30 days."],
    }


@pytest.fixture
def acme_request() -> dict:
    return {
        "customerName": "Acme Clinic",
        "specialty": "Cardiology",
        "physicianCount": 10,
        "timeSavedHrsPerDay": 2,
        "patientIncreasePerDay": 1,
        "audiences": ["financial"],
    }


@pytest.fixture
def make_client(settings):
    def _make(generator) -> TestClient:
        return TestClient(create_app(settings, generator))

    return _make
