"""Session management tools.

Exposes the store, replay engine and code generation to an agent as named
tools with JSON input schemas. Every call returns a ToolResult; failures
never escape ``execute``.

Tools provided:
- session_get_current / session_list_all: inspect resident sessions
- session_save / session_load / session_list_saved: persistence
- session_export: JSON document or Playwright script
- session_replay / session_replay_with_verification: re-run a session
- session_get_stats: action counts, duration and errors
- session_toggle_recording / session_toggle_full_capture: capture policy
- session_generate_test / session_save_test: regression tests
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Optional

import structlog

from ..export import ExportEngine, SupportedLanguage, TestGenerationOptions, TestGenerator
from ..recording.models import ToolResult
from ..recording.store import SessionStore
from ..replay import ReplayEngine, ReplayOptions

logger = structlog.get_logger()

_LANGUAGE_PROPERTY = {
    "type": "string",
    "enum": [language.value for language in SupportedLanguage],
    "description": "Language of the generated code",
    "default": SupportedLanguage.PYTHON.value,
}

_INSTANCE_ID_SCHEMA = {
    "type": "object",
    "properties": {
        "instanceId": {
            "type": "string",
            "description": "Browser instance ID"
        }
    },
    "required": ["instanceId"]
}


# Tool definitions
SESSION_TOOLS = [
    {
        "name": "session_get_current",
        "description": "Get the recorded session of a browser instance.",
        "inputSchema": _INSTANCE_ID_SCHEMA,
    },
    {
        "name": "session_list_all",
        "description": "List all sessions currently held in memory.",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "session_save",
        "description": "Save the session of a browser instance to a JSON file.",
        "inputSchema": _INSTANCE_ID_SCHEMA,
    },
    {
        "name": "session_export",
        "description": "Export the session of a browser instance as JSON or as a Playwright script.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "instanceId": {
                    "type": "string",
                    "description": "Browser instance ID"
                },
                "format": {
                    "type": "string",
                    "enum": ["json", "playwright"],
                    "description": "Export format",
                    "default": "json"
                },
                "language": _LANGUAGE_PROPERTY,
            },
            "required": ["instanceId"]
        }
    },
    {
        "name": "session_list_saved",
        "description": "List all saved session files.",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "session_load",
        "description": "Load a saved session from a file.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "filepath": {
                    "type": "string",
                    "description": "Path to the session file"
                }
            },
            "required": ["filepath"]
        }
    },
    {
        "name": "session_replay",
        "description": (
            "Replay a session on a new browser instance. Failing actions are "
            "reported and the replay continues."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "filepath": {
                    "type": "string",
                    "description": "Path to a session file or a session ID"
                }
            },
            "required": ["filepath"]
        }
    },
    {
        "name": "session_replay_with_verification",
        "description": (
            "Replay a session and compare each result with the recorded one. "
            "Optionally captures page snapshots and stops at the first failure."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "filepath": {
                    "type": "string",
                    "description": "Path to a session file or a session ID"
                },
                "verifyResults": {
                    "type": "boolean",
                    "description": "Compare results with the original session",
                    "default": True
                },
                "captureNewData": {
                    "type": "boolean",
                    "description": "Capture a page snapshot after page-changing actions",
                    "default": False
                },
                "comparePageContent": {
                    "type": "boolean",
                    "description": "Compare url, title and content length instead of success flags",
                    "default": False
                },
                "stopOnError": {
                    "type": "boolean",
                    "description": "Stop at the first failing action",
                    "default": False
                },
                "delayBetweenActions": {
                    "type": "number",
                    "description": "Delay in milliseconds between actions",
                    "default": 100
                }
            },
            "required": ["filepath"]
        }
    },
    {
        "name": "session_get_stats",
        "description": "Get action count, duration, tool usage and error count for a session.",
        "inputSchema": _INSTANCE_ID_SCHEMA,
    },
    {
        "name": "session_toggle_recording",
        "description": "Enable or disable session recording.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "enabled": {
                    "type": "boolean",
                    "description": "Whether to record tool calls"
                }
            },
            "required": ["enabled"]
        }
    },
    {
        "name": "session_toggle_full_capture",
        "description": (
            "Enable or disable full page-data capture. When off, large page "
            "content in results is truncated."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "enabled": {
                    "type": "boolean",
                    "description": "Whether to keep data-bearing results whole"
                }
            },
            "required": ["enabled"]
        }
    },
    {
        "name": "session_generate_test",
        "description": (
            "Generate a Playwright regression test from a recorded session. "
            "Use it after completing a workflow to turn it into a repeatable check."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "sessionId": {
                    "type": "string",
                    "description": "Session ID or path to a saved session file"
                },
                "testName": {
                    "type": "string",
                    "description": "Name describing the workflow the test covers"
                },
                "expectedString": {
                    "type": "string",
                    "description": "Text the final page must contain (e.g. \"Welcome\" after login)"
                },
                "timeout": {
                    "type": "number",
                    "description": "Test timeout in milliseconds",
                    "default": 30000
                },
                "language": _LANGUAGE_PROPERTY,
            },
            "required": ["sessionId"]
        }
    },
    {
        "name": "session_save_test",
        "description": "Generate a Playwright regression test from a recorded session and save it to a file.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "sessionId": {
                    "type": "string",
                    "description": "Session ID or path to a saved session file"
                },
                "testName": {
                    "type": "string",
                    "description": "Name describing the workflow the test covers"
                },
                "expectedString": {
                    "type": "string",
                    "description": "Text the final page must contain"
                },
                "timeout": {
                    "type": "number",
                    "description": "Test timeout in milliseconds",
                    "default": 30000
                },
                "language": _LANGUAGE_PROPERTY,
                "outputPath": {
                    "type": "string",
                    "description": "Where to write the test (defaults to tests/generated/)"
                }
            },
            "required": ["sessionId"]
        }
    },
]

FAILURE_MESSAGES = {
    "session_save": "Failed to save session",
    "session_export": "Failed to export session",
    "session_list_saved": "Failed to list saved sessions",
    "session_load": "Failed to load session",
    "session_replay": "Failed to replay session",
    "session_replay_with_verification": "Failed to replay session with verification",
    "session_generate_test": "Failed to generate test",
    "session_save_test": "Failed to save test",
}


def _require(args: Mapping, key: str) -> Any:
    value = args.get(key)
    if value is None:
        raise ValueError(f"Missing required argument: {key}")
    return value


class SessionTools:
    """Dispatcher for the session management tools.

    Example:
        tools = SessionTools(store, replay_engine=ReplayEngine(store, pool, surface))
        result = await tools.execute("session_save", {"instanceId": "abc"})
    """

    def __init__(
        self,
        store: SessionStore,
        replay_engine: Optional[ReplayEngine] = None,
        export_engine: Optional[ExportEngine] = None,
        test_generator: Optional[TestGenerator] = None,
    ):
        self.store = store
        self.replay_engine = replay_engine
        self.export_engine = export_engine or ExportEngine()
        self.test_generator = test_generator or TestGenerator(store, self.export_engine)
        self.log = logger.bind(component="session_tools")

        self._handlers: dict[str, Callable[[dict], Awaitable[ToolResult]]] = {
            "session_get_current": self._get_current,
            "session_list_all": self._list_all,
            "session_save": self._save,
            "session_export": self._export,
            "session_list_saved": self._list_saved,
            "session_load": self._load,
            "session_replay": self._replay,
            "session_replay_with_verification": self._replay_with_verification,
            "session_get_stats": self._get_stats,
            "session_toggle_recording": self._toggle_recording,
            "session_toggle_full_capture": self._toggle_full_capture,
            "session_generate_test": self._generate_test,
            "session_save_test": self._save_test,
        }

    def get_tools(self) -> list[dict]:
        """Tool definitions (name, description, inputSchema)."""
        return SESSION_TOOLS

    def handles(self, name: str) -> bool:
        return name in self._handlers

    async def execute(self, name: str, arguments: Optional[Mapping] = None) -> ToolResult:
        """Execute a session tool.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            ToolResult; errors are reported, never raised
        """
        handler = self._handlers.get(name)
        if handler is None:
            return ToolResult.fail(f"Unknown tool: {name}")

        try:
            return await handler(dict(arguments or {}))
        except Exception as e:
            self.log.warning("Session tool failed", tool=name, error=str(e))
            return ToolResult.fail(f"{FAILURE_MESSAGES.get(name, f'Failed to run {name}')}: {e}")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    async def _get_current(self, args: dict) -> ToolResult:
        instance_id = _require(args, "instanceId")
        session = self.store.get_session(instance_id)
        if session is None:
            return ToolResult.fail(f"No session found for instance {instance_id}")
        return ToolResult.ok(session.to_dict())

    async def _list_all(self, args: dict) -> ToolResult:
        sessions = self.store.get_all_sessions()
        return ToolResult.ok({
            "sessions": [session.to_dict() for session in sessions],
            "count": len(sessions),
        })

    async def _get_stats(self, args: dict) -> ToolResult:
        instance_id = _require(args, "instanceId")
        stats = self.store.get_session_stats(instance_id)
        if stats is None:
            return ToolResult.fail(f"No session found for instance {instance_id}")
        return ToolResult.ok(stats.to_dict())

    # ------------------------------------------------------------------
    # Persistence and export
    # ------------------------------------------------------------------

    async def _save(self, args: dict) -> ToolResult:
        path = await self.store.save_session(_require(args, "instanceId"))
        return ToolResult.ok({"filepath": str(path)})

    async def _export(self, args: dict) -> ToolResult:
        instance_id = _require(args, "instanceId")
        session = self.store.get_session(instance_id)
        if session is None:
            return ToolResult.fail(f"Failed to export session: Session not found for instance: {instance_id}")

        result = self.export_engine.export_session(
            session,
            format=args.get("format") or "json",
            language=args.get("language") or SupportedLanguage.PYTHON,
        )
        if not result.success:
            return ToolResult.fail(f"Failed to export session: {result.error}")
        return ToolResult.ok({
            "format": result.format.value,
            "language": result.language.value if result.language else None,
            "content": result.content,
        })

    async def _list_saved(self, args: dict) -> ToolResult:
        saved = await self.store.list_saved_sessions()
        return ToolResult.ok({
            "sessions": [item.to_dict() for item in saved],
            "count": len(saved),
        })

    async def _load(self, args: dict) -> ToolResult:
        session = await self.store.load_session(_require(args, "filepath"))
        return ToolResult.ok(session.to_dict())

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    def _require_replay(self) -> ReplayEngine:
        if self.replay_engine is None:
            raise RuntimeError("replay is not configured (no instance pool)")
        return self.replay_engine

    async def _replay(self, args: dict) -> ToolResult:
        engine = self._require_replay()
        result = await engine.replay_session(_require(args, "filepath"))
        return ToolResult(
            success=result.success,
            data={"instanceId": result.instance_id, "actionsReplayed": result.actions_replayed},
            error=", ".join(result.errors) if result.errors else None,
        )

    async def _replay_with_verification(self, args: dict) -> ToolResult:
        engine = self._require_replay()
        result = await engine.replay_session_with_verification(
            _require(args, "filepath"),
            ReplayOptions.from_dict(args),
        )
        data = result.to_dict()
        data.pop("success")
        return ToolResult(
            success=result.success,
            data=data,
            error=", ".join(result.errors) if result.errors else None,
        )

    # ------------------------------------------------------------------
    # Capture policy
    # ------------------------------------------------------------------

    async def _toggle_recording(self, args: dict) -> ToolResult:
        enabled = bool(_require(args, "enabled"))
        self.store.set_recording_enabled(enabled)
        return ToolResult.ok({"recordingEnabled": enabled})

    async def _toggle_full_capture(self, args: dict) -> ToolResult:
        enabled = bool(_require(args, "enabled"))
        self.store.set_capture_full_page_data(enabled)
        return ToolResult.ok({"captureFullPageData": enabled})

    # ------------------------------------------------------------------
    # Test generation
    # ------------------------------------------------------------------

    async def _generate_test(self, args: dict) -> ToolResult:
        session_id = _require(args, "sessionId")
        code = await self.test_generator.generate_test(session_id, TestGenerationOptions.from_dict(args))
        return ToolResult.ok({
            "testCode": code,
            "message": f"Test generated successfully for session {session_id}",
        })

    async def _save_test(self, args: dict) -> ToolResult:
        session_id = _require(args, "sessionId")
        path = await self.test_generator.save_test_to_file(
            session_id,
            TestGenerationOptions.from_dict(args),
            output_path=args.get("outputPath"),
        )
        return ToolResult.ok({
            "filePath": str(path),
            "message": f"Test saved to {path}",
        })
