from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from conftest import make_response
from toggl2slack.toggl import Activity, SourceError, TogglClient

DASHBOARD = {
    "most_active_user": [],
    "activity": [
        {"user_id": 9, "project_id": 3, "duration": -1714555800, "description": "Docs", "stop": None, "tid": None},
        {"user_id": 9, "project_id": 3, "duration": 600, "description": "Earlier", "stop": "2024-05-01T09:00:00+00:00"},
    ],
}


@pytest.fixture
def toggl_session() -> MagicMock:
    mock = MagicMock()
    mock.get.return_value = make_response(json_data=DASHBOARD)
    return mock


def test_current_activity_returns_running_entry(toggl_session: MagicMock) -> None:
    client = TogglClient("secret", 123, timeout=4, session=toggl_session)

    activity = client.current_activity()

    assert activity.id == "9:1714555800"
    assert activity.user_id == 9
    assert activity.description == "Docs"
    assert activity.project_id == 3
    assert activity.start == datetime.fromtimestamp(1714555800, tz=timezone.utc)
    toggl_session.get.assert_called_once_with(
        "https://api.track.toggl.com/api/v8/dashboard/123", timeout=4)
    assert toggl_session.auth == ("secret", "api_token")


def test_current_activity_none_when_idle(toggl_session: MagicMock) -> None:
    toggl_session.get.return_value = make_response(json_data={"activity": [DASHBOARD["activity"][1]]})

    assert TogglClient("secret", 123, session=toggl_session).current_activity() is None


def test_current_activity_none_without_activity_list(toggl_session: MagicMock) -> None:
    toggl_session.get.return_value = make_response(json_data={"activity": None})

    assert TogglClient("secret", 123, session=toggl_session).current_activity() is None


def test_network_error_raises_source_error(toggl_session: MagicMock) -> None:
    toggl_session.get.side_effect = requests.ConnectionError("down")

    with pytest.raises(SourceError, match="Failed to fetch Toggl dashboard 123"):
        TogglClient("secret", 123, session=toggl_session).current_activity()


def test_http_error_raises_source_error(toggl_session: MagicMock) -> None:
    response = make_response(403, "Forbidden")
    response.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
    toggl_session.get.return_value = response

    with pytest.raises(SourceError):
        TogglClient("bad", 123, session=toggl_session).current_activity()


def test_invalid_json_raises_source_error(toggl_session: MagicMock) -> None:
    response = make_response()
    response.json.side_effect = ValueError("Expecting value")
    toggl_session.get.return_value = response

    with pytest.raises(SourceError, match="Invalid dashboard response"):
        TogglClient("secret", 123, session=toggl_session).current_activity()


def test_unexpected_document_raises_source_error(toggl_session: MagicMock) -> None:
    toggl_session.get.return_value = make_response(json_data=["not", "a", "dict"])

    with pytest.raises(SourceError, match="Unexpected dashboard response"):
        TogglClient("secret", 123, session=toggl_session).current_activity()


def test_from_toggl_prefers_entry_id() -> None:
    activity = Activity.from_toggl({"id": 555, "user_id": 1, "duration": -10, "description": None})

    assert activity.id == "555"
    assert activity.description == ""
    assert activity.context()["duration"] == -10
