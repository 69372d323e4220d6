"""Tests for the code generation statement IR."""

import pytest

from session_recorder.export.statements import (
    ScriptBody,
    Statement,
    StatementKind,
    build_statement,
    settle_statement,
    viewport_statement,
)


class TestBuildStatement:
    """Tests for mapping recorded actions to statements."""

    def test_navigate(self, make_action):
        statement = build_statement(make_action("browser_navigate", {"instanceId": "i", "url": "https://a.test"}))
        assert statement.kind == StatementKind.GOTO
        assert statement.args == ("https://a.test",)
        assert statement.present_options() == []

    def test_navigate_options(self, make_action):
        statement = build_statement(
            make_action("browser_navigate", {"url": "https://a.test", "timeout": 5000, "waitUntil": "networkidle"})
        )
        assert statement.present_options() == [("timeout", 5000), ("wait_until", "networkidle")]

    def test_click_with_options(self, make_action):
        statement = build_statement(make_action("browser_click", {"selector": "#b", "button": "right", "clickCount": 2}))
        assert statement.kind == StatementKind.CLICK
        assert statement.args == ("#b",)
        assert statement.present_options() == [("button", "right"), ("click_count", 2)]

    def test_type_and_fill(self, make_action):
        typed = build_statement(make_action("browser_type", {"selector": "#q", "text": "hello"}))
        filled = build_statement(make_action("browser_fill", {"selector": "#q", "value": "world"}))
        assert typed == Statement(StatementKind.TYPE, ("#q", "hello"), {"delay": None})
        assert filled == Statement(StatementKind.FILL, ("#q", "world"))

    def test_select_option(self, make_action):
        statement = build_statement(make_action("browser_select_option", {"selector": "#size", "value": "M"}))
        assert statement == Statement(StatementKind.SELECT_OPTION, ("#size", "M"))

    def test_screenshot_full_page(self, make_action):
        statement = build_statement(make_action("browser_screenshot", {"fullPage": True}))
        assert statement.kind == StatementKind.SCREENSHOT
        assert statement.present_options() == [("full_page", True)]

    @pytest.mark.parametrize(
        "tool,kind",
        [
            ("browser_go_back", StatementKind.GO_BACK),
            ("browser_go_forward", StatementKind.GO_FORWARD),
            ("browser_refresh", StatementKind.RELOAD),
        ],
    )
    def test_history(self, make_action, tool, kind):
        assert build_statement(make_action(tool, {"instanceId": "i"})) == Statement(kind)

    def test_wait_for_element(self, make_action):
        statement = build_statement(make_action("browser_wait_for_element", {"selector": ".done", "timeout": 5000}))
        assert statement == Statement(StatementKind.WAIT_FOR_SELECTOR, (".done",), {"timeout": 5000})

    def test_evaluate_keeps_script_verbatim(self, make_action):
        script = "document.querySelector('#x').click();\nreturn 1;"
        statement = build_statement(make_action("browser_evaluate", {"script": script}))
        assert statement.args == (ScriptBody(script),)

    @pytest.mark.parametrize(
        "tool",
        [
            "browser_get_page_info",
            "browser_get_element_text",
            "browser_get_element_attribute",
            "browser_get_markdown",
            "browser_create_instance",
            "browser_close_instance",
            "browser_wait_for_navigation",
            "browser_hover",
        ],
    )
    def test_tools_without_statement(self, make_action, tool):
        assert build_statement(make_action(tool, {"instanceId": "i", "selector": "#x"})) is None

    def test_malformed_parameters(self, make_action):
        assert build_statement(make_action("browser_click", {"instanceId": "i"})) is None


class TestHelperStatements:
    """Tests for viewport and settle statements."""

    def test_viewport(self):
        statement = viewport_statement({"width": 1280, "height": 720})
        assert statement == Statement(StatementKind.SET_VIEWPORT_SIZE, ({"width": 1280, "height": 720},))

    @pytest.mark.parametrize("viewport", [None, {}, {"width": "wide", "height": 1}, {"width": True, "height": 1}])
    def test_invalid_viewport(self, viewport):
        assert viewport_statement(viewport) is None

    def test_settle(self):
        assert settle_statement() == Statement(StatementKind.WAIT_FOR_TIMEOUT, (100,))
