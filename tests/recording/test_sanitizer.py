"""Tests for the capture policy."""

from session_recorder.recording.sanitizer import (
    REDACTED,
    SCREENSHOT_PLACEHOLDER,
    TRUNCATE_AT,
    TRUNCATION_MARKER,
    CapturePolicy,
)


class TestSanitizeParameters:
    """Tests for parameter redaction."""

    def test_redacts_sensitive_keys(self):
        policy = CapturePolicy()
        params = {"selector": "#pw", "password": "hunter2", "token": "t", "apiKey": "k", "secret": "s"}
        sanitized = policy.sanitize_parameters(params)
        assert sanitized["selector"] == "#pw"
        for key in ("password", "token", "apiKey", "secret"):
            assert sanitized[key] == REDACTED

    def test_redacts_even_empty_values(self):
        sanitized = CapturePolicy().sanitize_parameters({"password": ""})
        assert sanitized["password"] == REDACTED

    def test_redaction_is_case_sensitive(self):
        sanitized = CapturePolicy().sanitize_parameters({"Password": "x", "apikey": "y"})
        assert sanitized == {"Password": "x", "apikey": "y"}

    def test_redacts_in_both_capture_modes(self):
        for full in (True, False):
            sanitized = CapturePolicy(capture_full_page_data=full).sanitize_parameters({"token": "abc"})
            assert sanitized["token"] == REDACTED

    def test_replaces_screenshot_parameter(self):
        sanitized = CapturePolicy().sanitize_parameters({"screenshot": "iVBORw0KGgo..."})
        assert sanitized["screenshot"] == SCREENSHOT_PLACEHOLDER

    def test_does_not_mutate_input(self):
        params = {"password": "hunter2"}
        CapturePolicy().sanitize_parameters(params)
        assert params == {"password": "hunter2"}

    def test_non_mapping_passes_through(self):
        assert CapturePolicy().sanitize_parameters(["a"]) == ["a"]
        assert CapturePolicy().sanitize_parameters(None) is None


class TestProcessResult:
    """Tests for result capture modes."""

    def test_full_capture_keeps_data_tool_results(self):
        html = "x" * 5000
        result = CapturePolicy(capture_full_page_data=True).process_result({"html": html}, "browser_get_page_info")
        assert result["html"] == html

    def test_full_capture_still_truncates_other_tools(self):
        result = CapturePolicy(capture_full_page_data=True).process_result({"content": "y" * 5000}, "browser_click")
        assert result["content"] == "y" * TRUNCATE_AT + TRUNCATION_MARKER

    def test_truncates_when_full_capture_off(self):
        result = CapturePolicy(capture_full_page_data=False).process_result(
            {"markdown": "m" * 1500, "title": "t"}, "browser_get_markdown"
        )
        assert result["markdown"] == "m" * TRUNCATE_AT + TRUNCATION_MARKER
        assert result["title"] == "t"

    def test_short_fields_untouched(self):
        result = CapturePolicy(capture_full_page_data=False).process_result({"html": "short"}, "browser_navigate")
        assert result == {"html": "short"}

    def test_truncates_nested_data(self):
        result = CapturePolicy(capture_full_page_data=False).process_result(
            {"success": True, "data": {"content": "c" * 2000}}, "browser_get_page_info"
        )
        assert result["data"]["content"].endswith(TRUNCATION_MARKER)
        assert len(result["data"]["content"]) == TRUNCATE_AT + len(TRUNCATION_MARKER)

    def test_replaces_screenshot_payload(self):
        result = CapturePolicy(capture_full_page_data=False).process_result(
            {"screenshot": "base64data"}, "browser_screenshot"
        )
        assert result["screenshot"] == SCREENSHOT_PLACEHOLDER

    def test_does_not_mutate_input(self):
        original = {"data": {"html": "h" * 2000}}
        CapturePolicy(capture_full_page_data=False).process_result(original, "browser_click")
        assert original["data"]["html"] == "h" * 2000

    def test_falsy_and_scalar_results_pass_through(self):
        policy = CapturePolicy(capture_full_page_data=False)
        assert policy.process_result({}, "browser_click") == {}
        assert policy.process_result("plain", "browser_click") == "plain"
        assert policy.process_result(42, "browser_evaluate") == 42
