"""Command-line interface for working with saved sessions."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import structlog

from .config import get_settings
from .export import ExportEngine, SupportedLanguage, TestGenerationOptions, TestGenerator
from .recording.errors import SessionRecorderError
from .recording.store import SessionStore
from .utils.logging import configure_logging

logger = structlog.get_logger()


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


async def list_sessions(store: SessionStore) -> int:
    """Print one line per saved session."""
    saved = await store.list_saved_sessions()
    if not saved:
        print(f"No saved sessions in {store.sessions_dir}")
        return 0

    for item in saved:
        session = item.session
        status = "open" if session.is_open else "closed"
        print(
            f"{session.id}  {session.browser_type:<8}  {session.action_count:>4} actions  "
            f"{status:<6}  {session.started_at}  {item.filename}"
        )
    return 0


async def show_session(store: SessionStore, ref: str) -> int:
    """Print a session's canonical JSON document."""
    session = await store.resolve_session(ref)
    result = ExportEngine().export_session(session, "json")
    print(result.content)
    return 0


async def export_session(
    store: SessionStore,
    ref: str,
    format: str,
    language: str,
    output: Optional[str],
) -> int:
    """Export a session as JSON or as a replay script."""
    session = await store.resolve_session(ref)
    result = ExportEngine().export_session(session, format, language)
    if not result.success:
        print(f"Export failed: {result.error}", file=sys.stderr)
        return 1

    if output:
        path = Path(output)
        await asyncio.to_thread(_write_text, path, result.content)
        logger.info("Export written", path=str(path))
    else:
        print(result.content, end="")
    return 0


async def generate_test(
    store: SessionStore,
    ref: str,
    options: TestGenerationOptions,
    output: Optional[str],
    stdout: bool,
) -> int:
    """Generate a regression test and save or print it."""
    generator = TestGenerator(store)
    if stdout:
        print(await generator.generate_test(ref, options), end="")
        return 0

    path = await generator.save_test_to_file(ref, options, output_path=output)
    print(f"Test saved to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="session-recorder",
        description="Inspect, export and turn recorded browser sessions into tests"
    )
    parser.add_argument(
        "--sessions-dir", "-d",
        help="Directory holding session files (default: SESSION_RECORDER_SESSIONS_DIR or ./sessions)"
    )
    languages = [language.value for language in SupportedLanguage]
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List saved sessions")

    show = subparsers.add_parser("show", help="Print a session as JSON")
    show.add_argument("session", help="Session ID or path to a session file")

    export = subparsers.add_parser("export", help="Export a session")
    export.add_argument("session", help="Session ID or path to a session file")
    export.add_argument("--format", "-f", choices=["json", "playwright"], default="playwright")
    export.add_argument("--language", "-l", choices=languages, default="python")
    export.add_argument("--output", "-o", help="Write to this file instead of stdout")

    test = subparsers.add_parser("generate-test", help="Generate a regression test from a session")
    test.add_argument("session", help="Session ID or path to a session file")
    test.add_argument("--name", "-n", help="Test name")
    test.add_argument("--expect", "-e", help="Text the final page must contain")
    test.add_argument("--timeout", "-t", type=int, help="Test timeout in milliseconds")
    test.add_argument("--language", "-l", choices=languages, default="python")
    test.add_argument("--output", "-o", help="Output file (default: tests/generated/...)")
    test.add_argument("--stdout", action="store_true", help="Print the test instead of saving it")

    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.sessions_dir:
        settings.sessions_dir = args.sessions_dir
    store = SessionStore.from_settings(settings)

    if args.command == "list":
        return await list_sessions(store)
    if args.command == "show":
        return await show_session(store, args.session)
    if args.command == "export":
        return await export_session(store, args.session, args.format, args.language, args.output)

    options = TestGenerationOptions(
        test_name=args.name,
        expected_string=args.expect,
        timeout=args.timeout,
        language=args.language,
    )
    return await generate_test(store, args.session, options, args.output, args.stdout)


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry point."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except (SessionRecorderError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
