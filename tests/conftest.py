import pytest
from fastapi.testclient import TestClient

from main import app
from rightshield.core.config import Settings, get_settings
from rightshield.models.schemas import ScoreSet


@pytest.fixture
def config():
    return Settings(
        OPENAI_API_KEY="test-key",
        SUPABASE_URL="",
        SUPABASE_SERVICE_ROLE_KEY="",
    )


@pytest.fixture
def store_config():
    return Settings(
        OPENAI_API_KEY="test-key",
        SUPABASE_URL="https://db.example.test",
        SUPABASE_SERVICE_ROLE_KEY="service-key",
    )


@pytest.fixture
def use_config():
    """Swaps the Settings the app injects into routes."""
    def _use(cfg):
        app.dependency_overrides[get_settings] = lambda: cfg
    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def client(config, use_config):
    use_config(config)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def baseline():
    return ScoreSet(
        rights_shield_score=60,
        financial_fairness_score=60,
        termination_flexibility_score=60,
        privacy_data_score=60,
        legal_liability_score=60,
        ethics_fairness_score=60,
    )


@pytest.fixture
def fake_llm(monkeypatch):
    """
    Replaces call_chat_completion at `target` with a stub returning `reply`.
    Returns the list the stub records its calls into.
    """
    def install(target, reply):
        calls = []

        async def _fake(config, messages, **kwargs):
            calls.append({"messages": messages, **kwargs})
            return reply

        monkeypatch.setattr(target, _fake)
        return calls
    return install
