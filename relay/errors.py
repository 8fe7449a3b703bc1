"""Error taxonomy and shared error-parsing utilities."""

import json


class MissingParametersError(Exception):
    """Raised when required query parameters are absent from a webhook request.

    ``missing`` holds ``(name, label)`` pairs in the order they are reported,
    e.g. ``("ifttt-key", "IFTTT key")``.
    """

    def __init__(self, missing: list[tuple[str, str]]):
        self.missing = missing
        super().__init__(self.message)

    @property
    def message(self) -> str:
        parts = ["Missing parameter(s)."]
        parts.extend(f"Pass the {label} as `{name}`." for name, label in self.missing)
        return " ".join(parts)


def describe_error(exc: BaseException) -> str:
    """Best-effort human readable message for an unhandled exception.

    Checks ``description``, ``text`` and ``message`` attributes in that order,
    then the exception's own string, and finally a JSON dump of its type and args.
    """
    for attr in ("description", "text", "message"):
        value = getattr(exc, attr, None)
        if value:
            return str(value)

    text = str(exc)
    if text:
        return text

    return json.dumps({"type": type(exc).__name__, "args": exc.args}, default=str)


def parse_pco_error(response_text: str) -> str:
    """Extract a readable message from a Planning Center API error response.

    Planning Center returns JSON:API errors like
    {"errors": [{"status": "404", "title": "Not Found", "detail": "..."}]}.
    Returns the joined details (or titles) when parseable, raw text otherwise.
    """
    try:
        body = json.loads(response_text)
        errors = body.get("errors") or []
        messages = [e.get("detail") or e.get("title") for e in errors if isinstance(e, dict)]
        messages = [m for m in messages if m]
        if messages:
            return "; ".join(messages)
    except (ValueError, AttributeError):
        pass
    return response_text
