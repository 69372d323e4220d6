"""Result comparison for verification replay.

Two tiers:
- shallow: outcomes match when their success flags agree
- deep: url must match, title drift is reported but tolerated, and content
  length may drift by up to 10% of the original (ads, timestamps and other
  dynamic content) before it counts as a divergence
"""

from collections.abc import Mapping
from typing import Any

from ..recording.models import ToolResult
from .models import ComparisonResult

CONTENT_LENGTH_TOLERANCE = 0.1


def _payload(result: ToolResult) -> Mapping:
    return result.data if isinstance(result.data, Mapping) else {}


def compare_results(original: Any, replay: Any, compare_content: bool = False) -> ComparisonResult:
    """Compare a recorded outcome with the outcome of its replay.

    Args:
        original: Recorded outcome (ToolResult or ``{success, data, error}``)
        replay: Replayed outcome
        compare_content: Use the deep comparator instead of success flags

    Returns:
        ComparisonResult with ``match`` and the differences found
    """
    original = ToolResult.from_value(original)
    replay = ToolResult.from_value(replay)

    if not compare_content:
        if original.success == replay.success:
            return ComparisonResult(match=True)
        return ComparisonResult(
            match=False,
            differences={"original": original.to_dict(), "replay": replay.to_dict()},
        )

    original_data = _payload(original)
    replay_data = _payload(replay)
    differences: dict[str, Any] = {}
    significant = False

    if original_data.get("url") != replay_data.get("url"):
        differences["url"] = {"original": original_data.get("url"), "replay": replay_data.get("url")}
        significant = True

    # Titles are volatile; report but never fail on them.
    if original_data.get("title") != replay_data.get("title"):
        differences["title"] = {"original": original_data.get("title"), "replay": replay_data.get("title")}

    original_content = original_data.get("content")
    replay_content = replay_data.get("content")
    if isinstance(original_content, str) and isinstance(replay_content, str) and original_content and replay_content:
        original_length = len(original_content)
        replay_length = len(replay_content)
        length_diff = abs(original_length - replay_length)
        if length_diff > original_length * CONTENT_LENGTH_TOLERANCE:
            differences["contentLength"] = {
                "original": original_length,
                "replay": replay_length,
                "difference": length_diff,
            }
            significant = True

    return ComparisonResult(match=not significant, differences=differences or None)
