from unittest.mock import MagicMock

import pytest

from toggl2slack.config import Config
from toggl2slack.payload import Payload
from toggl2slack.templates import Templates
from toggl2slack.toggl import Activity


def make_activity(activity_id, user_id=42, description="Writing tests", **fields):
    """Build an Activity the way the Toggl client would."""
    return Activity(
        id=str(activity_id),
        user_id=user_id,
        description=description,
        fields=dict(fields, user_id=user_id, description=description),
    )


def make_response(status_code=200, reason="OK", json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.text = text
    response.raw.version = 11
    response.json.return_value = json_data
    return response


@pytest.fixture
def templates() -> Templates:
    return Templates("started {description}", "finished {description}")


@pytest.fixture
def users() -> dict:
    return {
        "42": Payload(channel="#dev", username="tracker"),
        "7": Payload(icon_emoji=":clock1:"),
    }


@pytest.fixture
def config(users: dict, templates: Templates) -> Config:
    return Config(
        interval=5,
        toggl_token="token",
        dashboard_id=123,
        webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
        users=users,
        templates=templates,
    )


@pytest.fixture
def session() -> MagicMock:
    """A requests.Session stand-in returning 200 OK by default."""
    mock = MagicMock()
    mock.post.return_value = make_response()
    return mock


@pytest.fixture
def mock_sleep(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Mock time.sleep to skip delays."""
    mock = MagicMock()
    monkeypatch.setattr("time.sleep", mock)
    return mock
