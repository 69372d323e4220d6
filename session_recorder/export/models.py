"""Data models for session export and test generation."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SupportedLanguage(str, Enum):
    """Languages generated scripts and tests can be written in."""

    PYTHON = "python"
    TYPESCRIPT = "typescript"


class ExportFormat(str, Enum):
    """Session export formats."""

    JSON = "json"
    PLAYWRIGHT = "playwright"


# Standalone replay scripts
FILE_EXTENSIONS = {
    SupportedLanguage.PYTHON: ".py",
    SupportedLanguage.TYPESCRIPT: ".ts",
}

# Generated regression tests
TEST_FILE_EXTENSIONS = {
    SupportedLanguage.PYTHON: ".py",
    SupportedLanguage.TYPESCRIPT: ".spec.ts",
}

# What a generated file needs installed to run
LANGUAGE_DEPENDENCIES = {
    SupportedLanguage.PYTHON: ["playwright", "pytest", "pytest-playwright"],
    SupportedLanguage.TYPESCRIPT: ["playwright", "@playwright/test"],
}


@dataclass
class TestGenerationOptions:
    """Options for generating a regression test from a session.

    Attributes:
        test_name: Test title (defaults to "Test session <id>")
        expected_string: Text the final page content must contain
        timeout: Test timeout in milliseconds (settings default if None)
        language: Target language of the generated test
    """

    __test__ = False

    test_name: Optional[str] = None
    expected_string: Optional[str] = None
    timeout: Optional[int] = None
    language: SupportedLanguage | str = SupportedLanguage.PYTHON

    def __post_init__(self):
        """Convert string values to enums."""
        if isinstance(self.language, str) and not isinstance(self.language, SupportedLanguage):
            self.language = SupportedLanguage(self.language.lower())

    @classmethod
    def from_dict(cls, data: Mapping) -> "TestGenerationOptions":
        """Build options from a camelCase tool argument mapping."""
        timeout = data.get("timeout")
        return cls(
            test_name=data.get("testName") or None,
            expected_string=data.get("expectedString") or None,
            timeout=int(timeout) if timeout is not None else None,
            language=data.get("language") or SupportedLanguage.PYTHON,
        )


@dataclass
class ExportResult:
    """Result from exporting a session.

    Attributes:
        success: Whether export succeeded
        content: Exported JSON document or generated script
        format: Export format used
        language: Script language (None for JSON)
        file_extension: Suggested file extension
        dependencies: Packages the generated script needs
        error: Error message if failed
        metadata: Additional export metadata
    """

    success: bool
    content: str = ""
    format: Optional[ExportFormat] = None
    language: Optional[SupportedLanguage] = None
    file_extension: str = ".json"
    dependencies: list[str] = field(default_factory=list)
    error: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for tool responses."""
        return {
            "success": self.success,
            "format": self.format.value if self.format else None,
            "language": self.language.value if self.language else None,
            "content": self.content,
            "fileExtension": self.file_extension,
            "dependencies": self.dependencies,
            "error": self.error,
            "metadata": self.metadata,
        }
