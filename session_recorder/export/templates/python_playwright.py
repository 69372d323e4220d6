"""Python Playwright generation template."""

from collections.abc import Mapping
from typing import Any

from ...recording.models import Session
from ..statements import ScriptBody, Statement
from .base import BaseTemplate


class PythonPlaywrightTemplate(BaseTemplate):
    """Async Playwright replay scripts and pytest-playwright tests."""

    language = "python"
    file_extension = ".py"
    test_file_extension = ".py"
    indent = "    "
    script_indent = "        "
    comment_prefix = "#"
    quote_char = '"'
    script_awaits = True
    test_awaits = False

    def literal(self, value: Any) -> str:
        if value is None:
            return "None"
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, (int, float)):
            return repr(value)
        if isinstance(value, ScriptBody):
            return self.quote(value.source)
        if isinstance(value, Mapping):
            items = ", ".join(f"{self.quote(str(k))}: {self.literal(v)}" for k, v in value.items())
            return f"{{{items}}}"
        return self.quote(str(value))

    def render_statement(self, statement: Statement, awaited: bool) -> str:
        arguments = [self.literal(arg) for arg in statement.args]
        arguments.extend(f"{name}={self.literal(value)}" for name, value in statement.present_options())
        prefix = "await " if awaited else ""
        return f"{prefix}page.{statement.kind.value}({', '.join(arguments)})"

    def generate_script_header(self, session: Session) -> str:
        """Generate imports, launch and context setup."""
        config = session.config
        headless = config.headless if config.headless is not None else True

        context_options = []
        if config.viewport:
            context_options.append(f"viewport={self.literal(config.viewport)}")
        if config.user_agent:
            context_options.append(f"user_agent={self.quote(config.user_agent)}")

        lines = [
            self.format_comment(f"Generated Playwright script from session {session.id}"),
            self.format_comment(f"Created: {session.started_at}"),
            "",
            "import asyncio",
            "",
            "from playwright.async_api import async_playwright",
            "",
            "",
            "async def replay() -> None:",
            "    async with async_playwright() as playwright:",
            f"        browser = await playwright.{self.browser_type(session)}.launch(headless={self.literal(headless)})",
            f"        context = await browser.new_context({', '.join(context_options)})",
            "        page = await context.new_page()",
            "",
        ]
        return "\n".join(lines)

    def generate_script_footer(self) -> str:
        lines = [
            "",
            "        await browser.close()",
            "",
            "",
            'if __name__ == "__main__":',
            "    asyncio.run(replay())",
        ]
        return "\n".join(lines)

    def generate_test_header(self, session: Session, test_name: str, timeout: int) -> str:
        """Generate a pytest-playwright test function header."""
        function_name = self.to_snake_case(test_name) or "generated"
        if not function_name.startswith("test"):
            function_name = f"test_{function_name}"

        lines = [
            self.format_comment(f"Generated Playwright test from session {session.id}"),
            "",
            "from playwright.sync_api import Page",
            "",
            "",
            f"def {function_name}(page: Page) -> None:",
            f"    {self.quote(test_name)}",
            f"    page.set_default_timeout({self.literal(int(timeout))})",
            "",
        ]
        return "\n".join(lines)

    def generate_test_footer(self) -> str:
        return ""

    def generate_content_assertion(self, expected: str) -> list[str]:
        return [
            "content = page.content()",
            f"assert {self.quote(expected)} in content",
        ]

    def generate_url_assertion(self) -> list[str]:
        return ["assert page.url"]
