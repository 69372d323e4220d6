"""Tests for the command-line interface."""

import asyncio
import json

import pytest

from session_recorder.main import build_parser, main


@pytest.fixture
def saved_session(store, sample_session):
    """Write the sample session to the sessions directory and return its path."""
    return asyncio.run(store.write_session(sample_session))


def _run(sessions_dir, *argv):
    return main(["--sessions-dir", str(sessions_dir), *argv])


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_generate_test_arguments(self):
        args = build_parser().parse_args(
            ["generate-test", "abc", "-n", "Login", "-e", "Welcome", "-t", "5000", "-l", "typescript"]
        )
        assert args.name == "Login"
        assert args.expect == "Welcome"
        assert args.timeout == 5000
        assert args.language == "typescript"
        assert args.stdout is False

    def test_rejects_unknown_language(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "abc", "--language", "ruby"])


class TestListAndShow:
    """Tests for the list and show commands."""

    def test_list_empty(self, sessions_dir, capsys):
        assert _run(sessions_dir, "list") == 0
        assert "No saved sessions" in capsys.readouterr().out

    def test_list_saved(self, sessions_dir, saved_session, sample_session, capsys):
        assert _run(sessions_dir, "list") == 0

        out = capsys.readouterr().out
        assert sample_session.id in out
        assert "5 actions" in out
        assert saved_session.name in out

    def test_show_by_id(self, sessions_dir, saved_session, sample_session, capsys):
        assert _run(sessions_dir, "show", sample_session.id) == 0
        assert json.loads(capsys.readouterr().out)["id"] == sample_session.id

    def test_show_unknown(self, sessions_dir, capsys):
        assert _run(sessions_dir, "show", "missing") == 1
        assert "Error: Session not found: missing" in capsys.readouterr().err


class TestExport:
    """Tests for the export command."""

    def test_export_typescript_to_stdout(self, sessions_dir, saved_session, capsys):
        assert _run(sessions_dir, "export", str(saved_session), "-l", "typescript") == 0
        assert "await page.goto('https://example.com/login');" in capsys.readouterr().out

    def test_export_json_to_file(self, sessions_dir, saved_session, sample_session, tmp_path):
        target = tmp_path / "exports" / "session.json"

        assert _run(sessions_dir, "export", str(saved_session), "-f", "json", "-o", str(target)) == 0

        assert json.loads(target.read_text(encoding="utf-8"))["id"] == sample_session.id

    def test_export_file_written_in_worker_thread(self, sessions_dir, saved_session, tmp_path, monkeypatch):
        offloaded = []

        async def to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return func(*args, **kwargs)

        monkeypatch.setattr("session_recorder.main.asyncio.to_thread", to_thread)
        target = tmp_path / "nested" / "out" / "replay.ts"

        assert _run(sessions_dir, "export", str(saved_session), "-l", "typescript", "-o", str(target)) == 0

        assert "_write_text" in offloaded
        assert "await page.goto('https://example.com/login');" in target.read_text(encoding="utf-8")


class TestGenerateTest:
    """Tests for the generate-test command."""

    def test_stdout(self, sessions_dir, saved_session, capsys):
        code = _run(sessions_dir, "generate-test", str(saved_session), "-n", "User login", "-e", "Welcome", "--stdout")

        assert code == 0
        out = capsys.readouterr().out
        assert "def test_user_login(page: Page) -> None:" in out
        assert 'assert "Welcome" in content' in out

    def test_saves_to_default_directory(self, sessions_dir, saved_session, tmp_path, capsys):
        assert _run(sessions_dir, "generate-test", str(saved_session), "-l", "typescript") == 0

        out = capsys.readouterr().out
        assert out.startswith("Test saved to ")
        written = list((tmp_path / "tests" / "generated").glob("test_generated_*.spec.ts"))
        assert len(written) == 1

    def test_invalid_session_file(self, sessions_dir, tmp_path, capsys):
        bogus = tmp_path / "bogus.json"
        bogus.write_text('{"formatVersion": 99}', encoding="utf-8")

        assert _run(sessions_dir, "generate-test", str(bogus), "--stdout") == 1
        assert "Unsupported session format version" in capsys.readouterr().err
