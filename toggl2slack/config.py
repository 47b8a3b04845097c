"""Configuration file handling."""
import json
import logging
import os
from dataclasses import dataclass, field

from .payload import Payload, PayloadError
from .templates import Templates, TemplateError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_TIMEOUT = 10

# Environment variables that take precedence over the config file
ENV_OVERRIDES = {
    "TOGGL_TOKEN": "toggl_token",
    "SLACK_WEBHOOK_URL": "webhook_url",
}


class ConfigError(ValueError):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class Config:
    """Settings of a toggl2slack process."""

    interval: int
    toggl_token: str
    dashboard_id: int
    webhook_url: str
    users: dict = field(default_factory=dict)
    templates: Templates = None
    timeout: float = DEFAULT_TIMEOUT

    def to_dict(self):
        return {
            "interval": self.interval,
            "toggl_token": self.toggl_token,
            "dashboard_id": self.dashboard_id,
            "webhook_url": self.webhook_url,
            "users": {user_id: p.to_config() for user_id, p in self.users.items()},
            "templates": self.templates.to_config(),
        }


def default_config():
    """Return the configuration written by `init`."""
    return Config(
        interval=60,
        toggl_token="YOUR_TOGGL_TOKEN",
        dashboard_id=0,
        webhook_url="https://hooks.slack.com/services/...",
        users={"TOGGL_USER_ID": Payload(channel="#general", username="toggl2slack")},
        templates=Templates("started {description}", "finished {description}"),
    )


def _require(data, key, types, type_name):
    if key not in data:
        raise ConfigError(f"Missing required setting: {key}")
    value = data[key]
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigError(f"{key} must be {type_name}, got {value!r}")
    return value


def parse_config(data, environ=None):
    """Build a Config from decoded JSON data, applying environment overrides."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    environ = os.environ if environ is None else environ
    data = dict(data)
    for env_var, key in ENV_OVERRIDES.items():
        value = environ.get(env_var)
        if value:
            logger.debug("Using %s from environment", env_var)
            data[key] = value

    interval = _require(data, "interval", int, "an integer")
    if interval <= 0:
        raise ConfigError(f"interval must be positive, got {interval}")

    timeout = data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"timeout must be a positive number, got {timeout!r}")

    users_data = data.get("users")
    if users_data is None:
        users_data = {}
    elif not isinstance(users_data, dict):
        raise ConfigError("users must be an object")
    try:
        users = {str(user_id): Payload.from_config(p) for user_id, p in users_data.items()}
        templates = Templates.from_config(data.get("templates"))
    except (PayloadError, TemplateError) as e:
        raise ConfigError(str(e)) from e

    return Config(
        interval=interval,
        toggl_token=_require(data, "toggl_token", str, "a string"),
        dashboard_id=_require(data, "dashboard_id", int, "an integer"),
        webhook_url=_require(data, "webhook_url", str, "a string"),
        users=users,
        templates=templates,
        timeout=timeout,
    )


def load_config(path=DEFAULT_CONFIG_PATH, environ=None):
    """Load and validate the JSON configuration file at `path`."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    config = parse_config(data, environ)
    logger.info("Loaded config from %s (%d users)", path, len(config.users))
    return config


def generate_config(path=DEFAULT_CONFIG_PATH):
    """Write the default configuration to `path`, which must not exist yet."""
    if os.path.exists(path):
        raise FileExistsError(f"{path} already exists")

    with open(path, "x", encoding="utf-8") as f:
        json.dump(default_config().to_dict(), f, indent=4)
        f.write("\n")
    logger.info("Generated config file: %s", path)
    return path
