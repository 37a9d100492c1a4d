import pytest

from app.config import Settings
from tests.fakes import FakeAssistantClient, FakeClock


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test",
        OPENAI_ASSISTANT_ID="asst_test",
        CLASSIFICATION_POLL_INTERVAL_SECONDS=0.5,
        CLASSIFICATION_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_assistant():
    return FakeAssistantClient()
