"""Slack message payloads and their delivery defaults."""
from dataclasses import dataclass, fields, replace

DEFAULT_CHANNEL = "#general"
DEFAULT_USERNAME = "Toggl"
DEFAULT_ICON_URL = "http://blog.toggl.com/wp-content/uploads/2015/04/toggl-button-light.png"

CONFIG_KEYS = ("channel", "icon_emoji", "icon_url", "username")


class PayloadError(ValueError):
    """Raised when a payload cannot be finalized for delivery."""


@dataclass(frozen=True)
class Payload:
    """Delivery settings of one Toggl user plus the message text."""

    channel: str = ""
    icon_emoji: str = ""
    icon_url: str = ""
    username: str = ""
    text: str = ""

    @classmethod
    def from_config(cls, data):
        """Build a payload from a `users` entry of the config file."""
        if not isinstance(data, dict):
            raise PayloadError("user settings must be an object")

        unknown = sorted(set(data) - set(CONFIG_KEYS))
        if unknown:
            raise PayloadError(f"Unknown user settings: {', '.join(unknown)}")

        for key, value in data.items():
            if not isinstance(value, str):
                raise PayloadError(f"{key} must be a string")
        return cls(**data)

    def to_config(self):
        """Return the config file shape: no text, unset icons left out."""
        data = {"channel": self.channel, "username": self.username}
        if self.icon_emoji:
            data["icon_emoji"] = self.icon_emoji
        if self.icon_url:
            data["icon_url"] = self.icon_url
        return data

    def with_text(self, text):
        return replace(self, text=text)

    def reverse_merge_default(self):
        """Return a copy with unset fields filled in with the defaults.

        Raises PayloadError when both icon_emoji and icon_url are set.
        """
        if self.icon_emoji and self.icon_url:
            raise PayloadError("Do not specify both icon_emoji and icon_url")

        return replace(
            self,
            channel=self.channel or DEFAULT_CHANNEL,
            username=self.username or DEFAULT_USERNAME,
            icon_url=self.icon_url or ("" if self.icon_emoji else DEFAULT_ICON_URL),
        )

    def to_message(self):
        """Return the JSON object posted to the webhook."""
        message = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("icon_emoji", "icon_url") and not value:
                continue
            message[f.name] = value
        return message
