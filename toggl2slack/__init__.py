"""
A service that watches Toggl for started and stopped time entries
and posts notifications to a Slack incoming webhook.
"""

__version__ = "0.1.0"

from .config import Config, ConfigError, load_config, generate_config
from .dispatcher import Dispatcher
from .monitor import ActivityMonitor, ActivityEvent, EventKind, diff_activity
from .notifier import NotificationService
from .payload import Payload, PayloadError
from .templates import Template, Templates, TemplateError
from .toggl import Activity, SourceError, TogglClient
