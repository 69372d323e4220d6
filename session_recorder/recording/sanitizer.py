"""Capture policy applied to every parameter bag and result before it is recorded."""

from collections.abc import Mapping
from typing import Any

from .tools import DATA_CAPTURING_TOOLS

REDACTED = "***REDACTED***"
SCREENSHOT_PLACEHOLDER = "[SCREENSHOT_DATA]"
TRUNCATION_MARKER = "...[TRUNCATED]"
TRUNCATE_AT = 1000

SENSITIVE_FIELDS = ("password", "token", "apiKey", "secret")
LARGE_TEXT_FIELDS = ("html", "content", "markdown")


class CapturePolicy:
    """Redacts secrets and bounds payload size for recorded actions.

    Redaction of sensitive parameters is unconditional. Result truncation
    depends on ``capture_full_page_data``: when it is on, results of the
    data-bearing tools are kept verbatim; everything else is truncated.

    Nothing here raises and inputs are never mutated.
    """

    def __init__(self, capture_full_page_data: bool = True):
        self.capture_full_page_data = capture_full_page_data

    def sanitize_parameters(self, params: Any) -> Any:
        """Return a copy of ``params`` with sensitive fields redacted."""
        if not isinstance(params, Mapping):
            return params

        sanitized = dict(params)
        for key in SENSITIVE_FIELDS:
            if key in sanitized:
                sanitized[key] = REDACTED

        if "screenshot" in sanitized:
            sanitized["screenshot"] = SCREENSHOT_PLACEHOLDER

        return sanitized

    def process_result(self, result: Any, tool: str) -> Any:
        """Apply the capture mode to a tool result."""
        if not result:
            return result

        if self.capture_full_page_data and tool in DATA_CAPTURING_TOOLS:
            return result

        return self.truncate_result(result)

    def truncate_result(self, result: Any) -> Any:
        """Cut large text fields and drop screenshot payloads."""
        if not isinstance(result, Mapping):
            return result

        truncated = self._truncate_fields(result)
        data = truncated.get("data")
        if isinstance(data, Mapping):
            truncated["data"] = self._truncate_fields(data)
        return truncated

    def _truncate_fields(self, payload: Mapping) -> dict:
        fields = dict(payload)
        for key in LARGE_TEXT_FIELDS:
            value = fields.get(key)
            if isinstance(value, str) and len(value) > TRUNCATE_AT:
                fields[key] = value[:TRUNCATE_AT] + TRUNCATION_MARKER
        if fields.get("screenshot"):
            fields["screenshot"] = SCREENSHOT_PLACEHOLDER
        return fields
