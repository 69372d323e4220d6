"""Shared fixtures for session recorder tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from session_recorder.recording.models import ActionRecord, Session, SessionConfig
from session_recorder.recording.store import SessionStore


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep settings independent of the developer's environment."""
    for name in (
        "SESSION_RECORDER_SESSIONS_DIR",
        "SESSION_RECORDER_AUTO_SAVE",
        "SESSION_RECORDER_RECORDING_ENABLED",
        "SESSION_RECORDER_CAPTURE_FULL_PAGE_DATA",
        "SESSION_RECORDER_REPLAY_DELAY_MS",
        "SESSION_RECORDER_GENERATED_TESTS_DIR",
        "SESSION_RECORDER_DEFAULT_TEST_TIMEOUT_MS",
    ):
        monkeypatch.delenv(name, raising=False)
    # Settings read .env from the working directory
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sessions_dir(tmp_path):
    """Directory for persisted session files."""
    return tmp_path / "sessions"


@pytest.fixture
def store(sessions_dir):
    """Session store writing to a temporary directory."""
    return SessionStore(sessions_dir=sessions_dir)


@pytest.fixture
def make_action():
    """Factory for recorded actions."""
    counter = {"n": 0}

    def _make(tool, parameters=None, result=None, error=None, **kwargs):
        counter["n"] += 1
        return ActionRecord(
            id=f"action-{counter['n']}",
            timestamp=f"2025-08-12T09:12:{counter['n']:02d}.000Z",
            tool=tool,
            parameters=parameters if parameters is not None else {"instanceId": "inst-1"},
            result=result,
            error=error,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_session(make_action):
    """A login session as the recording surface would have captured it."""
    return Session(
        id="1aa789ef-5d2c-4c1e-9a7b-3f0f7d2b9c11",
        instance_id="inst-1",
        browser_type="chromium",
        started_at="2025-08-12T09:12:00.000Z",
        ended_at="2025-08-12T09:13:00.000Z",
        metadata={"name": "login"},
        config=SessionConfig(headless=True, viewport={"width": 1280, "height": 720}),
        actions=[
            make_action(
                "browser_create_instance",
                {"browserType": "chromium", "headless": True},
                result={"instanceId": "inst-1"},
            ),
            make_action(
                "browser_navigate",
                {"instanceId": "inst-1", "url": "https://example.com/login"},
                result={"url": "https://example.com/login", "title": "Login"},
            ),
            make_action(
                "browser_fill",
                {"instanceId": "inst-1", "selector": "#username", "value": "alice"},
                result={"filled": True},
            ),
            make_action(
                "browser_click",
                {"instanceId": "inst-1", "selector": "button[type=submit]"},
                result={"clicked": True},
            ),
            make_action(
                "browser_get_page_info",
                {"instanceId": "inst-1"},
                result={"url": "https://example.com/home", "title": "Home"},
            ),
        ],
    )


@pytest.fixture
def mock_pool():
    """Instance pool whose create_instance always yields instance 'replay-1'."""
    pool = MagicMock()
    pool.create_instance = AsyncMock(
        return_value={"success": True, "data": {"instanceId": "replay-1"}}
    )
    pool.get_instance = MagicMock(return_value=None)
    return pool


@pytest.fixture
def mock_tools():
    """Tool executor where every tool succeeds with an empty payload."""
    tools = MagicMock()
    tools.execute_tool = AsyncMock(return_value={"success": True, "data": {}})
    return tools
