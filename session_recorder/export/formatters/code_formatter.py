"""Whitespace normalization for generated code."""

from collections.abc import Iterable

from ..models import SupportedLanguage


class CodeFormatter:
    """Formats generated code according to language conventions."""

    def __init__(self, language: SupportedLanguage):
        """Initialize formatter for a specific language."""
        self.language = language

    def format_code(self, code: str, verbatim: Iterable[str] = ()) -> str:
        """Format generated code.

        Args:
            code: Raw generated code
            verbatim: Blocks of ``code`` (in order of appearance) copied
                through unchanged, such as inlined recorded scripts

        Returns:
            Code without trailing whitespace, with at most two (Python) or one
            (TypeScript) consecutive blank lines and a final newline
        """
        max_blank = 2 if self.language == SupportedLanguage.PYTHON else 1

        pieces: list[tuple[str, bool]] = []
        rest = code
        for block in verbatim:
            index = rest.find(block) if block else -1
            if index < 0:
                continue
            pieces.append((rest[:index], False))
            pieces.append((block, True))
            rest = rest[index + len(block):]
        pieces.append((rest, False))

        output = []
        blank_count = 0
        for position, (text, keep) in enumerate(pieces):
            if keep:
                output.append(text)
                blank_count = 0
                continue

            lines = text.split("\n")
            # Pieces next to a verbatim block start or end mid-line.
            starts_open = position > 0
            ends_open = position < len(pieces) - 1
            formatted_lines = []
            for number, line in enumerate(lines):
                if ends_open and number == len(lines) - 1:
                    formatted_lines.append(line)
                    continue
                line = line.rstrip()
                if starts_open and number == 0:
                    formatted_lines.append(line)
                    continue
                if line == "":
                    blank_count += 1
                    if blank_count <= max_blank:
                        formatted_lines.append(line)
                else:
                    blank_count = 0
                    formatted_lines.append(line)
            output.append("\n".join(formatted_lines))

        return "".join(output).strip("\n") + "\n"
