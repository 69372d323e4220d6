"""Session replay - re-execute a recorded session and verify the results."""

from .comparator import compare_results
from .engine import ReplayEngine
from .models import ActionComparison, ComparisonResult, ReplayOptions, ReplayResult
from .snapshot import capture_page_data

__all__ = [
    "ReplayEngine",
    "ReplayOptions",
    "ReplayResult",
    "ActionComparison",
    "ComparisonResult",
    "compare_results",
    "capture_page_data",
]
