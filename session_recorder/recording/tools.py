"""Browser tool vocabulary and typed parameter views.

The session log stores parameter bags exactly as the tool surface received
them. Code that needs to understand a specific tool (code generation in
particular) asks ``parse_tool_params`` for a typed view; unknown tools and
malformed bags produce ``None`` and are skipped rather than failing.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ToolName(str, Enum):
    """Browser tools known to the recorder."""

    CREATE_INSTANCE = "browser_create_instance"
    CLOSE_INSTANCE = "browser_close_instance"
    NAVIGATE = "browser_navigate"
    GO_BACK = "browser_go_back"
    GO_FORWARD = "browser_go_forward"
    REFRESH = "browser_refresh"
    CLICK = "browser_click"
    TYPE = "browser_type"
    FILL = "browser_fill"
    SELECT_OPTION = "browser_select_option"
    GET_PAGE_INFO = "browser_get_page_info"
    GET_ELEMENT_TEXT = "browser_get_element_text"
    GET_ELEMENT_ATTRIBUTE = "browser_get_element_attribute"
    SCREENSHOT = "browser_screenshot"
    WAIT_FOR_ELEMENT = "browser_wait_for_element"
    WAIT_FOR_NAVIGATION = "browser_wait_for_navigation"
    EVALUATE = "browser_evaluate"
    GET_MARKDOWN = "browser_get_markdown"


# Results of these tools are the point of the recording and are kept whole
# when full page-data capture is on.
DATA_CAPTURING_TOOLS = frozenset({
    ToolName.GET_PAGE_INFO.value,
    ToolName.SCREENSHOT.value,
    ToolName.GET_MARKDOWN.value,
    ToolName.GET_ELEMENT_TEXT.value,
    ToolName.NAVIGATE.value,
})

# Tools that can change what the page shows.
PAGE_STATE_TOOLS = frozenset({
    ToolName.NAVIGATE.value,
    ToolName.CLICK.value,
    ToolName.TYPE.value,
    ToolName.FILL.value,
    ToolName.SELECT_OPTION.value,
    ToolName.GO_BACK.value,
    ToolName.GO_FORWARD.value,
    ToolName.REFRESH.value,
    ToolName.EVALUATE.value,
})

READ_ONLY_TOOLS = frozenset({
    ToolName.GET_PAGE_INFO.value,
    ToolName.GET_ELEMENT_TEXT.value,
    ToolName.GET_ELEMENT_ATTRIBUTE.value,
    ToolName.GET_MARKDOWN.value,
})

DEFAULT_TIMEOUT_MS = 30000


def _require_str(params: Mapping, key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _optional_int(params: Mapping, key: str, default: Optional[int] = None) -> Optional[int]:
    value = params.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number")
    return int(value)


@dataclass(frozen=True)
class CreateInstanceParams:
    browser_type: str = "chromium"
    headless: bool = True
    viewport: Optional[dict] = None
    user_agent: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "CreateInstanceParams":
        return cls(
            browser_type=params.get("browserType") or "chromium",
            headless=bool(params.get("headless", True)),
            viewport=params.get("viewport"),
            user_agent=params.get("userAgent"),
        )


@dataclass(frozen=True)
class NavigateParams:
    url: str
    timeout: Optional[int] = None
    wait_until: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "NavigateParams":
        return cls(
            url=_require_str(params, "url"),
            timeout=_optional_int(params, "timeout"),
            wait_until=params.get("waitUntil"),
        )


@dataclass(frozen=True)
class HistoryParams:
    """Back, forward and refresh take no arguments beyond the instance."""

    @classmethod
    def from_params(cls, params: Mapping) -> "HistoryParams":
        return cls()


@dataclass(frozen=True)
class ClickParams:
    selector: str
    button: Optional[str] = None
    click_count: Optional[int] = None
    delay: Optional[int] = None
    timeout: Optional[int] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "ClickParams":
        return cls(
            selector=_require_str(params, "selector"),
            button=params.get("button"),
            click_count=_optional_int(params, "clickCount"),
            delay=_optional_int(params, "delay"),
            timeout=_optional_int(params, "timeout"),
        )


@dataclass(frozen=True)
class TypeParams:
    selector: str
    text: str
    delay: Optional[int] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "TypeParams":
        return cls(
            selector=_require_str(params, "selector"),
            text=_require_str(params, "text"),
            delay=_optional_int(params, "delay"),
        )


@dataclass(frozen=True)
class FillParams:
    selector: str
    value: str

    @classmethod
    def from_params(cls, params: Mapping) -> "FillParams":
        return cls(selector=_require_str(params, "selector"), value=_require_str(params, "value"))


@dataclass(frozen=True)
class SelectOptionParams:
    selector: str
    value: str

    @classmethod
    def from_params(cls, params: Mapping) -> "SelectOptionParams":
        return cls(selector=_require_str(params, "selector"), value=_require_str(params, "value"))


@dataclass(frozen=True)
class ScreenshotParams:
    full_page: bool = False
    selector: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "ScreenshotParams":
        return cls(full_page=bool(params.get("fullPage", False)), selector=params.get("selector"))


@dataclass(frozen=True)
class WaitForElementParams:
    selector: str
    timeout: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_params(cls, params: Mapping) -> "WaitForElementParams":
        return cls(
            selector=_require_str(params, "selector"),
            timeout=_optional_int(params, "timeout") or DEFAULT_TIMEOUT_MS,
        )


@dataclass(frozen=True)
class WaitForNavigationParams:
    timeout: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_params(cls, params: Mapping) -> "WaitForNavigationParams":
        return cls(timeout=_optional_int(params, "timeout") or DEFAULT_TIMEOUT_MS)


@dataclass(frozen=True)
class EvaluateParams:
    script: str

    @classmethod
    def from_params(cls, params: Mapping) -> "EvaluateParams":
        return cls(script=_require_str(params, "script"))


@dataclass(frozen=True)
class ReadParams:
    """Page-info, element text/attribute and markdown reads."""

    selector: Optional[str] = None
    attribute: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "ReadParams":
        return cls(selector=params.get("selector"), attribute=params.get("attribute"))


ToolParams = Union[
    CreateInstanceParams,
    NavigateParams,
    HistoryParams,
    ClickParams,
    TypeParams,
    FillParams,
    SelectOptionParams,
    ScreenshotParams,
    WaitForElementParams,
    WaitForNavigationParams,
    EvaluateParams,
    ReadParams,
]

TOOL_PARAMS: dict[ToolName, type] = {
    ToolName.CREATE_INSTANCE: CreateInstanceParams,
    ToolName.CLOSE_INSTANCE: HistoryParams,
    ToolName.NAVIGATE: NavigateParams,
    ToolName.GO_BACK: HistoryParams,
    ToolName.GO_FORWARD: HistoryParams,
    ToolName.REFRESH: HistoryParams,
    ToolName.CLICK: ClickParams,
    ToolName.TYPE: TypeParams,
    ToolName.FILL: FillParams,
    ToolName.SELECT_OPTION: SelectOptionParams,
    ToolName.GET_PAGE_INFO: ReadParams,
    ToolName.GET_ELEMENT_TEXT: ReadParams,
    ToolName.GET_ELEMENT_ATTRIBUTE: ReadParams,
    ToolName.SCREENSHOT: ScreenshotParams,
    ToolName.WAIT_FOR_ELEMENT: WaitForElementParams,
    ToolName.WAIT_FOR_NAVIGATION: WaitForNavigationParams,
    ToolName.EVALUATE: EvaluateParams,
    ToolName.GET_MARKDOWN: ReadParams,
}


def known_tool(tool: str) -> Optional[ToolName]:
    """Return the ToolName for a tool string, or None if it is not known."""
    try:
        return ToolName(tool)
    except ValueError:
        return None


def parse_tool_params(tool: str, params: Any) -> Optional[ToolParams]:
    """Build the typed parameter view for a recorded invocation.

    Returns None for unknown tools and for parameter bags that do not carry
    what the tool needs.
    """
    name = known_tool(tool)
    if name is None or not isinstance(params, Mapping):
        return None
    try:
        return TOOL_PARAMS[name].from_params(params)
    except (TypeError, ValueError):
        return None
