"""Routes activity events to the configured Slack settings of their user."""
import logging

from .templates import TemplateError

logger = logging.getLogger(__name__)


class Dispatcher:
    """Turns activity events into Slack notifications."""

    def __init__(self, users, templates, notifier):
        """Initialize with the user payload mapping, the templates and a notifier."""
        self.users = users
        self.templates = templates
        self.notifier = notifier

    def dispatch(self, event):
        """Notify about one event. Returns True when a message was delivered.

        Users missing from the mapping are skipped. A PayloadError from an
        invalid user configuration is left to the caller.
        """
        activity = event.activity
        user_id = str(activity.user_id)
        payload = self.users.get(user_id)
        if payload is None:
            logger.debug("No Slack settings for user %s, skipping %s event",
                         user_id, event.kind.value)
            return False

        template = self.templates.for_event(event.kind)
        try:
            text = template.render(activity)
        except TemplateError as e:
            logger.error("Error rendering %s message for activity %s: %s",
                         template.name, activity.id, e)
            return False

        message = payload.with_text(text).reverse_merge_default()
        delivered = self.notifier.send(message)
        if delivered:
            logger.info("Sent %s notification for activity %s of user %s",
                        event.kind.value, activity.id, user_id)
        else:
            logger.error("Failed to deliver %s notification for activity %s",
                         event.kind.value, activity.id)
        return delivered
