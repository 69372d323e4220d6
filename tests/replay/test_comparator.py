"""Tests for replay result comparison."""

from session_recorder.recording.models import ToolResult
from session_recorder.replay.comparator import compare_results


class TestShallowComparison:
    """Success-flag comparison."""

    def test_matching_flags(self):
        outcome = compare_results(ToolResult.ok({"a": 1}), ToolResult.ok({"a": 2}))
        assert outcome.match is True
        assert outcome.differences is None

    def test_flag_mismatch_records_both(self):
        outcome = compare_results(ToolResult.ok(), {"success": False, "error": "timeout"})
        assert outcome.match is False
        assert outcome.differences == {
            "original": {"success": True},
            "replay": {"success": False, "error": "timeout"},
        }


class TestDeepComparison:
    """Page-content comparison."""

    def _result(self, url="https://example.com", title="Example", content=None):
        data = {"url": url, "title": title}
        if content is not None:
            data["content"] = content
        return ToolResult.ok(data)

    def test_identical_pages_match(self):
        outcome = compare_results(self._result(), self._result(), compare_content=True)
        assert outcome.match is True
        assert outcome.differences is None

    def test_url_difference_is_significant(self):
        outcome = compare_results(self._result(), self._result(url="https://example.com/error"), compare_content=True)
        assert outcome.match is False
        assert outcome.differences["url"] == {
            "original": "https://example.com",
            "replay": "https://example.com/error",
        }

    def test_title_difference_is_recorded_only(self):
        outcome = compare_results(self._result(), self._result(title="Example (3)"), compare_content=True)
        assert outcome.match is True
        assert outcome.differences["title"]["replay"] == "Example (3)"

    def test_small_content_drift_tolerated(self):
        outcome = compare_results(
            self._result(content="a" * 500), self._result(content="a" * 520), compare_content=True
        )
        assert outcome.match is True
        assert outcome.differences is None

    def test_large_content_drift_is_significant(self):
        outcome = compare_results(
            self._result(content="a" * 500), self._result(content="a" * 700), compare_content=True
        )
        assert outcome.match is False
        assert outcome.differences["contentLength"] == {"original": 500, "replay": 700, "difference": 200}

    def test_exactly_ten_percent_is_tolerated(self):
        outcome = compare_results(
            self._result(content="a" * 500), self._result(content="a" * 550), compare_content=True
        )
        assert outcome.match is True

    def test_non_mapping_payloads(self):
        outcome = compare_results(ToolResult.ok("text"), ToolResult.ok(3), compare_content=True)
        assert outcome.match is True
