"""Toggl dashboard client used as the activity source."""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

import requests

logger = logging.getLogger(__name__)

TOGGL_DASHBOARD_URL = "https://api.track.toggl.com/api/v8/dashboard/{dashboard_id}"


class SourceError(RuntimeError):
    """Raised when the current activity cannot be fetched from Toggl."""


@dataclass(frozen=True)
class Activity:
    """Snapshot of a running Toggl time entry."""

    id: str
    user_id: int
    description: str = ""
    project_id: int = None
    start: datetime = None
    fields: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_toggl(cls, entry):
        """Build an activity from a dashboard `activity` entry."""
        user_id = entry.get("user_id")
        duration = entry.get("duration") or 0
        start = None
        if duration < 0:
            # Running entries carry the negated start epoch as duration
            start = datetime.fromtimestamp(-duration, tz=timezone.utc)

        activity_id = entry.get("id")
        if activity_id is None:
            activity_id = f"{user_id}:{-duration}"

        return cls(
            id=str(activity_id),
            user_id=user_id,
            description=entry.get("description") or "",
            project_id=entry.get("project_id") or entry.get("pid"),
            start=start,
            fields=dict(entry),
        )

    def context(self):
        """Return the data a template is rendered against."""
        data = dict(self.fields)
        data.update(
            id=self.id,
            user_id=self.user_id,
            description=self.description,
            project_id=self.project_id,
            start=self.start,
        )
        return data


class TogglClient:
    """Fetches the currently running activity of a Toggl dashboard."""

    def __init__(self, token, dashboard_id, timeout=10, session=None):
        """Initialize the client with the API token and dashboard (workspace) id."""
        self.token = token
        self.dashboard_id = dashboard_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (token, "api_token")

    @property
    def url(self):
        return TOGGL_DASHBOARD_URL.format(dashboard_id=self.dashboard_id)

    def fetch_dashboard(self):
        """Fetch the raw dashboard document."""
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise SourceError(f"Failed to fetch Toggl dashboard {self.dashboard_id}: {e}") from e
        except ValueError as e:
            raise SourceError(f"Invalid dashboard response from Toggl: {e}") from e

    def current_activity(self):
        """Return the running activity on the dashboard, or None when idle."""
        dashboard = self.fetch_dashboard()
        if not isinstance(dashboard, dict):
            raise SourceError("Unexpected dashboard response from Toggl")

        entries = dashboard.get("activity") or []

        for entry in entries:
            if (entry.get("duration") or 0) < 0:
                activity = Activity.from_toggl(entry)
                logger.debug("Current activity: %s (user %s)", activity.id, activity.user_id)
                return activity

        logger.debug("No running activity on dashboard %s", self.dashboard_id)
        return None
