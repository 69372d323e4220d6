"""Export Engine - renders sessions as JSON documents or replay scripts."""

import json
from typing import Optional

import structlog

from ..recording.models import Session
from .formatters import CodeFormatter
from .models import (
    FILE_EXTENSIONS,
    LANGUAGE_DEPENDENCIES,
    ExportFormat,
    ExportResult,
    SupportedLanguage,
    TestGenerationOptions,
)
from .templates import BaseTemplate, PythonPlaywrightTemplate, TypeScriptPlaywrightTemplate

logger = structlog.get_logger()


# Template registry mapping language to template class
TEMPLATE_REGISTRY: dict[SupportedLanguage, type[BaseTemplate]] = {
    SupportedLanguage.PYTHON: PythonPlaywrightTemplate,
    SupportedLanguage.TYPESCRIPT: TypeScriptPlaywrightTemplate,
}


def session_to_json(session: Session) -> str:
    """Canonical persisted form of a session."""
    return json.dumps(session.to_dict(), indent=2, ensure_ascii=False)


class ExportEngine:
    """Renders sessions for use outside the recorder.

    This class:
    1. Serializes a session to its canonical JSON document
    2. Selects the template for the requested language
    3. Generates a replay script or a regression test
    4. Formats the output

    Example:
        engine = ExportEngine()

        result = engine.export_session(session, format="playwright", language="typescript")
        if result.success:
            print(result.content)
    """

    def __init__(self):
        """Initialize the export engine."""
        self.log = logger.bind(component="export_engine")

    def get_template(self, language: SupportedLanguage | str) -> BaseTemplate:
        """Template instance for a language.

        Raises:
            ValueError: If the language is not supported
        """
        language = SupportedLanguage(language)
        return TEMPLATE_REGISTRY[language]()

    def export_session(
        self,
        session: Session,
        format: ExportFormat | str = ExportFormat.JSON,
        language: SupportedLanguage | str = SupportedLanguage.PYTHON,
    ) -> ExportResult:
        """Export a session as JSON or as a standalone Playwright script.

        Args:
            session: Session to export
            format: ``json`` or ``playwright``
            language: Script language for the ``playwright`` format

        Returns:
            ExportResult with the rendered content or an error
        """
        try:
            format = ExportFormat(format)

            if format == ExportFormat.JSON:
                return ExportResult(
                    success=True,
                    content=session_to_json(session),
                    format=format,
                    file_extension=".json",
                    metadata=self._metadata(session),
                )

            language = SupportedLanguage(language)
            code = self.generate_script(session, language)

            self.log.info(
                "Export successful",
                session_id=session.id,
                format=format.value,
                language=language.value,
            )

            return ExportResult(
                success=True,
                content=code,
                format=format,
                language=language,
                file_extension=FILE_EXTENSIONS[language],
                dependencies=LANGUAGE_DEPENDENCIES[language],
                metadata=self._metadata(session),
            )

        except Exception as e:
            self.log.error("Export failed", session_id=session.id, error=str(e))
            return ExportResult(
                success=False,
                error=str(e),
            )

    def generate_script(
        self,
        session: Session,
        language: SupportedLanguage | str = SupportedLanguage.PYTHON,
    ) -> str:
        """Generate a formatted replay script for a session."""
        language = SupportedLanguage(language)
        template = self.get_template(language)
        code = template.generate_script(session)
        return CodeFormatter(language).format_code(code, template.verbatim_blocks(session))

    def generate_test(
        self,
        session: Session,
        options: TestGenerationOptions,
        timeout: int,
    ) -> str:
        """Generate a formatted regression test for a session.

        Args:
            session: Session to reproduce
            options: Name, expected content and language of the test
            timeout: Effective test timeout in milliseconds
        """
        language = SupportedLanguage(options.language)
        test_name = options.test_name or f"Test session {session.id}"
        template = self.get_template(language)
        code = template.generate_test(
            session,
            test_name=test_name,
            timeout=timeout,
            expected_string=options.expected_string,
        )
        return CodeFormatter(language).format_code(code, template.verbatim_blocks(session))

    @staticmethod
    def _metadata(session: Session) -> dict:
        return {
            "session_id": session.id,
            "instance_id": session.instance_id,
            "browser_type": session.browser_type,
            "actions_count": session.action_count,
        }


def export_session(
    session: Session,
    format: str = "json",
    language: Optional[str] = None,
) -> ExportResult:
    """Quick export function.

    Args:
        session: Session to export
        format: ``json`` or ``playwright``
        language: Script language (python if omitted)

    Returns:
        ExportResult
    """
    return ExportEngine().export_session(session, format, language or SupportedLanguage.PYTHON)
