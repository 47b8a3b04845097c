"""Notification service for posting activity messages to Slack."""
import logging
from urllib.parse import urlsplit

import requests

logger = logging.getLogger(__name__)

HTTP_VERSIONS = {10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


class NotificationService:
    """Delivers finalized payloads to a Slack incoming webhook."""

    def __init__(self, webhook_url, timeout=10, session=None):
        """Initialize the notification service with the webhook endpoint."""
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, payload):
        """Post the payload to the webhook. Returns True on a 2xx response."""
        message = payload.to_message()
        host = urlsplit(self.webhook_url).netloc

        # Only the host is logged, the webhook path is a secret
        logger.info("POST %s", host)
        logger.debug("Payload: %s", message)

        try:
            response = self.session.post(
                self.webhook_url,
                json=message,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Error sending Slack notification: %s", e)
            return False

        logger.info("%s %s %s", _http_version(response), response.status_code, response.reason)

        if 200 <= response.status_code < 300:
            return True

        logger.error(
            "Failed to send Slack notification. Status code: %s, Response: %s",
            response.status_code, response.text)
        return False


def _http_version(response):
    version = getattr(response.raw, "version", None)
    return HTTP_VERSIONS.get(version, "HTTP/1.1")
