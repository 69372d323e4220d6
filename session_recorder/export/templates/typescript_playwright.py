"""TypeScript Playwright generation template."""

import re
from collections.abc import Mapping
from typing import Any

from ...recording.models import Session
from ..statements import ScriptBody, Statement, StatementKind
from .base import BaseTemplate

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class TypeScriptPlaywrightTemplate(BaseTemplate):
    """Playwright replay scripts and ``@playwright/test`` specs."""

    language = "typescript"
    file_extension = ".ts"
    test_file_extension = ".spec.ts"
    indent = "  "
    script_indent = "  "
    comment_prefix = "//"
    quote_char = "'"
    inlines_scripts = True

    METHOD_NAMES = {
        StatementKind.SELECT_OPTION: "selectOption",
        StatementKind.GO_BACK: "goBack",
        StatementKind.GO_FORWARD: "goForward",
        StatementKind.WAIT_FOR_SELECTOR: "waitForSelector",
        StatementKind.SET_VIEWPORT_SIZE: "setViewportSize",
        StatementKind.WAIT_FOR_TIMEOUT: "waitForTimeout",
    }

    def literal(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return repr(value)
        if isinstance(value, ScriptBody):
            # Recorded JavaScript is emitted as code, not as a string. The
            # closing brace starts its own line so a trailing // comment
            # in the script cannot swallow it.
            return f"() => {{\n{value.source}\n}}"
        if isinstance(value, Mapping):
            return self._object(value.items())
        return self.quote(str(value))

    def _object(self, items) -> str:
        rendered = []
        for key, value in items:
            key = str(key)
            name = key if _IDENTIFIER.match(key) else self.quote(key)
            rendered.append(f"{name}: {self.literal(value)}")
        return f"{{ {', '.join(rendered)} }}" if rendered else "{}"

    def render_statement(self, statement: Statement, awaited: bool) -> str:
        method = self.METHOD_NAMES.get(statement.kind, statement.kind.value)
        arguments = [self.literal(arg) for arg in statement.args]
        options = statement.present_options()
        if options:
            arguments.append(self._object((self.to_camel_case(name), value) for name, value in options))
        prefix = "await " if awaited else ""
        return f"{prefix}page.{method}({', '.join(arguments)});"

    def generate_script_header(self, session: Session) -> str:
        """Generate imports, launch and context setup."""
        config = session.config
        browser = self.browser_type(session)
        headless = config.headless if config.headless is not None else True

        context_options = []
        if config.viewport:
            context_options.append(("viewport", config.viewport))
        if config.user_agent:
            context_options.append(("userAgent", config.user_agent))

        lines = [
            self.format_comment(f"Generated Playwright script from session {session.id}"),
            self.format_comment(f"Created: {session.started_at}"),
            "",
            f"import {{ {browser} }} from 'playwright';",
            "",
            "async function replay() {",
            f"  const browser = await {browser}.launch({self._object([('headless', headless)])});",
            f"  const context = await browser.newContext({self._object(context_options)});",
            "  const page = await context.newPage();",
            "",
        ]
        return "\n".join(lines)

    def generate_script_footer(self) -> str:
        lines = [
            "",
            "  await browser.close();",
            "}",
            "",
            "replay();",
        ]
        return "\n".join(lines)

    def generate_test_header(self, session: Session, test_name: str, timeout: int) -> str:
        """Generate a Playwright test header."""
        lines = [
            self.format_comment(f"Generated Playwright test from session {session.id}"),
            "",
            "import { test, expect } from '@playwright/test';",
            "",
            f"test({self.quote(test_name)}, async ({{ page }}) => {{",
            f"  test.setTimeout({self.literal(int(timeout))});",
            "",
        ]
        return "\n".join(lines)

    def generate_test_footer(self) -> str:
        return "});"

    def generate_content_assertion(self, expected: str) -> list[str]:
        return [
            "const content = await page.content();",
            f"expect(content).toContain({self.quote(expected)});",
        ]

    def generate_url_assertion(self) -> list[str]:
        return [
            "const url = page.url();",
            "expect(url).toBeTruthy();",
        ]
