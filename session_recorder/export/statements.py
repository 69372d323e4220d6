"""Statement IR for code generation.

Recorded actions are first turned into ``Statement`` objects holding raw
argument values; a language template then prints them, escaping every
embedded string exactly once.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..recording.models import ActionRecord
from ..recording.tools import (
    ClickParams,
    EvaluateParams,
    FillParams,
    NavigateParams,
    ScreenshotParams,
    SelectOptionParams,
    ToolName,
    ToolParams,
    TypeParams,
    WaitForElementParams,
    parse_tool_params,
)


class StatementKind(str, Enum):
    """Page operations a generated script can perform."""

    GOTO = "goto"
    CLICK = "click"
    TYPE = "type"
    FILL = "fill"
    SELECT_OPTION = "select_option"
    SCREENSHOT = "screenshot"
    GO_BACK = "go_back"
    GO_FORWARD = "go_forward"
    RELOAD = "reload"
    WAIT_FOR_SELECTOR = "wait_for_selector"
    EVALUATE = "evaluate"
    SET_VIEWPORT_SIZE = "set_viewport_size"
    WAIT_FOR_TIMEOUT = "wait_for_timeout"


@dataclass(frozen=True)
class ScriptBody:
    """JavaScript statements recorded for ``browser_evaluate``."""

    source: str


@dataclass(frozen=True)
class Statement:
    """One page call: ``page.<kind>(*args, **options)``.

    Option names are snake_case; templates rename them for their language.
    Options whose value is None are dropped when printed.
    """

    kind: StatementKind
    args: tuple = ()
    options: dict[str, Any] = field(default_factory=dict)

    def present_options(self) -> list[tuple[str, Any]]:
        return [(name, value) for name, value in self.options.items() if value is not None]


def _goto(params: NavigateParams) -> Statement:
    return Statement(
        StatementKind.GOTO,
        (params.url,),
        {"timeout": params.timeout, "wait_until": params.wait_until},
    )


def _click(params: ClickParams) -> Statement:
    return Statement(
        StatementKind.CLICK,
        (params.selector,),
        {
            "button": params.button,
            "click_count": params.click_count,
            "delay": params.delay,
            "timeout": params.timeout,
        },
    )


def _type(params: TypeParams) -> Statement:
    return Statement(StatementKind.TYPE, (params.selector, params.text), {"delay": params.delay})


def _fill(params: FillParams) -> Statement:
    return Statement(StatementKind.FILL, (params.selector, params.value))


def _select_option(params: SelectOptionParams) -> Statement:
    return Statement(StatementKind.SELECT_OPTION, (params.selector, params.value))


def _screenshot(params: ScreenshotParams) -> Statement:
    return Statement(StatementKind.SCREENSHOT, options={"full_page": params.full_page})


def _wait_for_selector(params: WaitForElementParams) -> Statement:
    return Statement(StatementKind.WAIT_FOR_SELECTOR, (params.selector,), {"timeout": params.timeout})


def _evaluate(params: EvaluateParams) -> Statement:
    return Statement(StatementKind.EVALUATE, (ScriptBody(params.script),))


STATEMENT_BUILDERS: dict[ToolName, Callable[[ToolParams], Statement]] = {
    ToolName.NAVIGATE: _goto,
    ToolName.CLICK: _click,
    ToolName.TYPE: _type,
    ToolName.FILL: _fill,
    ToolName.SELECT_OPTION: _select_option,
    ToolName.SCREENSHOT: _screenshot,
    ToolName.GO_BACK: lambda params: Statement(StatementKind.GO_BACK),
    ToolName.GO_FORWARD: lambda params: Statement(StatementKind.GO_FORWARD),
    ToolName.REFRESH: lambda params: Statement(StatementKind.RELOAD),
    ToolName.WAIT_FOR_ELEMENT: _wait_for_selector,
    ToolName.EVALUATE: _evaluate,
}


def build_statement(action: ActionRecord) -> Optional[Statement]:
    """Map a recorded action to the statement that reproduces it.

    Returns None for read-only tools, instance lifecycle tools, unknown
    tools and parameter bags the tool cannot use.
    """
    params = parse_tool_params(action.tool, action.parameters)
    if params is None:
        return None
    builder = STATEMENT_BUILDERS.get(ToolName(action.tool))
    if builder is None:
        return None
    return builder(params)


def viewport_statement(viewport: Any) -> Optional[Statement]:
    """Statement resizing the page to a recorded ``{width, height}`` viewport."""
    if not isinstance(viewport, Mapping):
        return None
    width = viewport.get("width")
    height = viewport.get("height")
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (width, height)):
        return None
    return Statement(StatementKind.SET_VIEWPORT_SIZE, ({"width": width, "height": height},))


def settle_statement(milliseconds: int = 100) -> Statement:
    return Statement(StatementKind.WAIT_FOR_TIMEOUT, (milliseconds,))
