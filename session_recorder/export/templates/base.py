"""Base template class for session code generation."""

import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from ...recording.models import Session
from ...recording.tools import ToolName
from ..statements import ScriptBody, Statement, build_statement, settle_statement, viewport_statement

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

# Characters that end a line in either target language.
_LINE_BREAKS = re.compile(r"[\r\n\u2028\u2029]")

_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class BaseTemplate(ABC):
    """Base class for code generation templates.

    A template prints ``Statement`` objects in its language. Every string
    that reaches the output goes through ``quote()`` (or ``format_comment()``
    for comments); nothing else interpolates recorded values.
    """

    # Override these in subclasses
    language: str = "unknown"
    file_extension: str = ".txt"
    test_file_extension: str = ".txt"
    indent: str = "    "
    script_indent: str = "    "
    comment_prefix: str = "#"
    quote_char: str = '"'
    # Whether generated scripts and tests await page calls
    script_awaits: bool = True
    test_awaits: bool = True
    # Whether recorded JavaScript is inlined as code rather than quoted
    inlines_scripts: bool = False

    def __init__(self, config: Any = None):
        """Initialize template with optional config."""
        self.config = config or {}

    # ------------------------------------------------------------------
    # Language hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def literal(self, value: Any) -> str:
        """Render a Python value as a literal of the target language."""

    @abstractmethod
    def render_statement(self, statement: Statement, awaited: bool) -> str:
        """Render one page call."""

    @abstractmethod
    def generate_script_header(self, session: Session) -> str:
        """Imports, browser launch and page creation."""

    @abstractmethod
    def generate_script_footer(self) -> str:
        """Browser shutdown and entry point."""

    @abstractmethod
    def generate_test_header(self, session: Session, test_name: str, timeout: int) -> str:
        """Imports and the test declaration with its timeout."""

    @abstractmethod
    def generate_test_footer(self) -> str:
        """Close the test declaration."""

    @abstractmethod
    def generate_content_assertion(self, expected: str) -> list[str]:
        """Lines asserting the page content contains ``expected``."""

    @abstractmethod
    def generate_url_assertion(self) -> list[str]:
        """Lines asserting the page still has a url."""

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_script(self, session: Session) -> str:
        """Generate a standalone script replaying the session.

        Read-only and unknown tools emit nothing.
        """
        parts = [self.generate_script_header(session)]

        for action in session.actions:
            statement = build_statement(action)
            if statement is not None:
                parts.append(self.script_indent + self.render_statement(statement, self.script_awaits))

        parts.append(self.generate_script_footer())
        return "\n".join(parts)

    def generate_test(
        self,
        session: Session,
        test_name: str,
        timeout: int,
        expected_string: Optional[str] = None,
    ) -> str:
        """Generate a regression test reproducing the session.

        Every action except instance creation gets a comment, its statement
        (if it has one) and a short settle wait.
        """
        body = self.indent
        awaited = self.test_awaits
        parts = [self.generate_test_header(session, test_name, timeout)]

        viewport = viewport_statement(session.config.viewport)
        if viewport is not None:
            parts.append(body + self.format_comment("Set viewport"))
            parts.append(body + self.render_statement(viewport, awaited))
            parts.append("")

        for action in session.actions:
            if action.tool == ToolName.CREATE_INSTANCE.value:
                continue
            parts.append(body + self.format_comment(f"Action: {action.tool}"))
            statement = build_statement(action)
            if statement is not None:
                parts.append(body + self.render_statement(statement, awaited))
            parts.append(body + self.render_statement(settle_statement(), awaited))
            parts.append("")

        if expected_string:
            parts.append(body + self.format_comment("Verify expected content"))
            parts.extend(body + line for line in self.generate_content_assertion(expected_string))
            parts.append("")

        parts.append(body + self.format_comment("Verify page loaded without errors"))
        parts.extend(body + line for line in self.generate_url_assertion())
        parts.append(self.generate_test_footer())

        return "\n".join(parts)

    def verbatim_blocks(self, session: Session) -> list[str]:
        """Inlined script literals, in output order, that formatting must not touch."""
        if not self.inlines_scripts:
            return []
        blocks = []
        for action in session.actions:
            statement = build_statement(action)
            if statement is None:
                continue
            blocks.extend(self.literal(arg) for arg in statement.args if isinstance(arg, ScriptBody))
        return blocks

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def browser_type(self, session: Session) -> str:
        """Launcher name for the session's engine; unknown engines use chromium."""
        if session.browser_type in SUPPORTED_BROWSERS:
            return session.browser_type
        return "chromium"

    def escape_string(self, value: str) -> str:
        """Escape a string for the body of a ``quote_char``-delimited literal."""
        escaped = []
        for char in value:
            code = ord(char)
            if char in _ESCAPES:
                escaped.append(_ESCAPES[char])
            elif char == self.quote_char:
                escaped.append("\\" + char)
            elif code < 0x20 or code == 0x7F:
                escaped.append(f"\\x{code:02x}")
            elif 0xD800 <= code <= 0xDFFF:
                escaped.append(f"\\u{code:04x}")
            else:
                escaped.append(char)
        return "".join(escaped)

    def quote(self, value: str) -> str:
        """Render ``value`` as a string literal."""
        return f"{self.quote_char}{self.escape_string(str(value))}{self.quote_char}"

    def format_comment(self, text: str) -> str:
        """Single-line comment; line breaks in ``text`` become spaces."""
        return f"{self.comment_prefix} {_LINE_BREAKS.sub(' ', str(text))}"

    def to_camel_case(self, name: str) -> str:
        """Convert snake_case option names to camelCase."""
        words = re.sub(r"[^a-zA-Z0-9]", " ", name).split()
        if not words:
            return "test"
        return words[0].lower() + "".join(w.title() for w in words[1:])

    def to_snake_case(self, name: str) -> str:
        """Convert name to snake_case."""
        # Insert underscore before capitals
        s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
        s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
        # Replace non-alphanumeric with underscore
        s3 = re.sub(r"[^a-zA-Z0-9]", "_", s2)
        # Clean up multiple underscores
        return re.sub(r"_+", "_", s3).lower().strip("_")
