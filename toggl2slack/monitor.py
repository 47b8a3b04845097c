"""Main monitoring service for Toggl activities."""
import time
import logging
import traceback
from dataclasses import dataclass
from enum import Enum

from .payload import PayloadError
from .toggl import SourceError

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kind of activity transition; the value names the message template."""

    START = "started"
    STOP = "finished"


@dataclass(frozen=True)
class ActivityEvent:
    kind: EventKind
    activity: object


def diff_activity(previous, current):
    """Return the events for a transition from `previous` to `current`.

    Activities are compared by id only, so a changed description on a
    running entry does not produce any event.
    """
    if previous is None and current is None:
        return []
    if previous is None:
        return [ActivityEvent(EventKind.START, current)]
    if current is None:
        return [ActivityEvent(EventKind.STOP, previous)]
    if previous.id == current.id:
        return []
    return [ActivityEvent(EventKind.STOP, previous), ActivityEvent(EventKind.START, current)]


class ActivityMonitor:
    """Polls Toggl and notifies Slack when an activity starts or stops."""

    def __init__(self, config, source, dispatcher, on_error=None):
        """Initialize the monitor with configuration and its collaborators."""
        self.config = config
        self.source = source
        self.dispatcher = dispatcher
        self.on_error = on_error or self._log_source_error
        self.state = None
        self.running = False

    @staticmethod
    def _log_source_error(error):
        logger.error("Error fetching current activity: %s", error)

    def poll(self):
        """Run one poll cycle and return the events it raised."""
        try:
            current = self.source.current_activity()
        except SourceError as e:
            self.on_error(e)
            return []

        events = diff_activity(self.state, current)
        self.state = current

        for event in events:
            logger.info("Detected %s activity %s (user %s): %s",
                        event.kind.value, event.activity.id,
                        event.activity.user_id, event.activity.description)
            self.dispatcher.dispatch(event)
        return events

    def run(self):
        """Start the monitoring loop."""
        logger.info("Starting Toggl monitor for dashboard %s, polling every %ss",
                    self.config.dashboard_id, self.config.interval)
        self.running = True

        while self.running:
            try:
                self.poll()

                # Sleep for the configured interval
                time.sleep(self.config.interval)

            except KeyboardInterrupt:
                logger.info("Received keyboard interrupt, shutting down...")
                self.running = False
            except PayloadError:
                self.running = False
                raise
            except Exception as e:
                logger.error("Unhandled exception in monitoring loop: %s", e)
                logger.debug(traceback.format_exc())
                time.sleep(self.config.interval)

        logger.info("Toggl monitor stopped")
