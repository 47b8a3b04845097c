"""Message templates rendered against a Toggl activity.

Templates use ``str.format`` syntax, e.g. ``"started {description}"``.
Besides the standard ``!s``, ``!r`` and ``!a`` conversions a few text helpers
are available:

    ``!u``  upper case       ``{description!u}``
    ``!l``  lower case       ``{description!l}``
    ``!t``  title case       ``{description!t}``
    ``!c``  capitalize       ``{description!c}``

Fields missing from the activity render as an empty string.
"""
import logging
import string

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("started", "finished")


class TemplateError(ValueError):
    """Raised when a template cannot be parsed or rendered."""


class ActivityFormatter(string.Formatter):
    """Formatter with text helper conversions and lenient missing fields."""

    CONVERSIONS = {
        "u": str.upper,
        "l": str.lower,
        "t": str.title,
        "c": str.capitalize,
    }

    def get_value(self, key, args, kwargs):
        if isinstance(key, int):
            return super().get_value(key, args, kwargs)
        if key not in kwargs:
            logger.debug("Template field %r is not set, rendering it empty", key)
            return ""
        return kwargs[key]

    def convert_field(self, value, conversion):
        helper = self.CONVERSIONS.get(conversion)
        if helper:
            return helper("" if value is None else str(value))
        return super().convert_field(value, conversion)

    def format_field(self, value, format_spec):
        if value is None:
            return ""
        return super().format_field(value, format_spec)


_formatter = ActivityFormatter()
_VALID_CONVERSIONS = {None, "s", "r", "a"} | set(ActivityFormatter.CONVERSIONS)


class Template:
    """A named template bound to an event kind."""

    def __init__(self, name, source):
        self.name = name
        self.source = source
        self._validate()

    def _validate(self):
        if not isinstance(self.source, str):
            raise TemplateError(f"Template {self.name!r} must be a string")
        try:
            parsed = list(_formatter.parse(self.source))
        except ValueError as e:
            raise TemplateError(f"Invalid template {self.name!r}: {e}") from e

        for _, field_name, _, conversion in parsed:
            if field_name is not None and conversion not in _VALID_CONVERSIONS:
                raise TemplateError(
                    f"Unknown conversion !{conversion} in template {self.name!r}")

    def render(self, activity):
        """Render the template against the activity's data."""
        try:
            return _formatter.vformat(self.source, (), activity.context())
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise TemplateError(f"Failed to render template {self.name!r}: {e}") from e

    def __eq__(self, other):
        if not isinstance(other, Template):
            return NotImplemented
        return (self.name, self.source) == (other.name, other.source)

    def __repr__(self):
        return f"Template({self.name!r}, {self.source!r})"


class Templates:
    """The `started` and `finished` templates of a configuration."""

    def __init__(self, started, finished):
        self.started = Template("started", started)
        self.finished = Template("finished", finished)

    @classmethod
    def from_config(cls, data):
        if not isinstance(data, dict):
            raise TemplateError("templates must be an object")
        missing = [name for name in TEMPLATE_NAMES if name not in data]
        if missing:
            raise TemplateError(f"Missing templates: {', '.join(missing)}")
        return cls(data["started"], data["finished"])

    def to_config(self):
        return {"started": self.started.source, "finished": self.finished.source}

    def for_event(self, kind):
        """Return the template for an EventKind (its value is the template name)."""
        return getattr(self, kind.value)
