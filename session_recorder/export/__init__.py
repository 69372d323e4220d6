"""Session Export Module.

Renders recorded sessions as canonical JSON, as standalone Playwright
replay scripts and as regression tests.

Supported languages:
- Python: async Playwright script, pytest-playwright test
- TypeScript: Playwright script, @playwright/test spec

Example:
    from session_recorder.export import ExportEngine, TestGenerator, TestGenerationOptions

    engine = ExportEngine()
    result = engine.export_session(session, format="playwright", language="python")
    print(result.content)

    generator = TestGenerator(store)
    path = await generator.save_test_to_file(
        session.id,
        TestGenerationOptions(test_name="User login", expected_string="Welcome"),
    )
"""

from .engine import ExportEngine, session_to_json
from .models import (
    ExportFormat,
    ExportResult,
    SupportedLanguage,
    TestGenerationOptions,
)
from .statements import Statement, StatementKind, build_statement
from .test_generator import TestGenerator

__all__ = [
    "ExportEngine",
    "ExportFormat",
    "ExportResult",
    "SupportedLanguage",
    "TestGenerationOptions",
    "TestGenerator",
    "Statement",
    "StatementKind",
    "build_statement",
    "session_to_json",
]
