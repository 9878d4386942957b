import pytest
from pydantic import ValidationError

from web_scraper_tool.errors import EngineUnavailable
from web_scraper_tool.models import (
    Action,
    ActionOutcome,
    ActionType,
    DurationWait,
    EngineKind,
    LocatorWait,
    ToolResult,
    parse_wait_spec,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2000", DurationWait(milliseconds=2000)),
        ("0", DurationWait(milliseconds=0)),
        ("#my-element", LocatorWait(selector="#my-element")),
        ("2000ms", LocatorWait(selector="2000ms")),
        ("-5", LocatorWait(selector="-5")),
        (" 10", LocatorWait(selector=" 10")),
    ],
)
def test_parse_wait_spec_is_decided_lexically(raw, expected):
    assert parse_wait_spec(raw) == expected


def test_action_keeps_unknown_kind_as_string():
    action = Action.model_validate({"type": "hover", "selector": "#menu"})
    assert action.kind is None
    assert action.type_name == "hover"
    assert action.missing_fields() == []


def test_action_parses_known_kind():
    action = Action.model_validate({"type": "getAttribute", "selector": "a", "value": "href"})
    assert action.kind is ActionType.GET_ATTRIBUTE
    assert action.type_name == "getAttribute"


def test_action_is_immutable():
    action = Action(type=ActionType.CLICK, selector="#login")
    with pytest.raises(ValidationError):
        action.selector = "#other"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("payload", "missing"),
    [
        ({"type": "click"}, ["selector"]),
        ({"type": "fill", "selector": "#user"}, ["value"]),
        ({"type": "fill", "selector": "#user", "value": ""}, []),
        ({"type": "getAttribute", "selector": "a"}, ["value"]),
        ({"type": "getText"}, ["selector"]),
        ({"type": "screenshot"}, []),
        ({"type": "wait", "selector": "#ready"}, []),
    ],
)
def test_action_missing_fields(payload, missing):
    assert Action.model_validate(payload).missing_fields() == missing


def test_engine_kind_parse_defaults_and_rejects_unknown():
    assert EngineKind.parse(None, EngineKind.CHROMIUM) is EngineKind.CHROMIUM
    assert EngineKind.parse("Firefox", EngineKind.CHROMIUM) is EngineKind.FIREFOX
    with pytest.raises(EngineUnavailable):
        EngineKind.parse("netscape", EngineKind.CHROMIUM)


def test_outcome_line_markers():
    ok = ActionOutcome(index=1, action_type="click", success=True, summary="Clicked: #a")
    bad = ActionOutcome(index=2, action_type="click", success=False, summary="Failed click on #b: x")
    assert ok.line == "✅ Clicked: #a"
    assert bad.line == "❌ Failed click on #b: x"


def test_tool_result_serialises_error_flag_by_alias():
    result = ToolResult.error("boom")
    data = result.model_dump(by_alias=True)
    assert data["isError"] is True
    assert data["content"] == [{"type": "text", "text": "Error: boom"}]
    assert ToolResult.model_validate(data).is_error is True
