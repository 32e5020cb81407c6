"""Tests for the per-prompt turn state machine."""

import json
from typing import Any, Dict, List

import pytest

from conftest import ScriptedProvider, text_response, tool_call_response
from llm_connector_toolkit.exceptions import ErrorKind, ProviderError
from llm_connector_toolkit.messages import MessageLog, Role
from llm_connector_toolkit.tools.dispatcher import ToolDispatcher
from llm_connector_toolkit.tools.models import ToolCallRequest
from llm_connector_toolkit.tools.tool_factory import ToolFactory
from llm_connector_toolkit.turn import NO_RESPONSE_PLACEHOLDER, TurnDriver, TurnState

MODEL = "gpt-4o-mini"


def _factory(calls: List[Dict[str, Any]], fail_on: str = "") -> ToolFactory:
    async def lookup(token: str, query: str) -> Dict[str, Any]:
        calls.append({"token": token, "query": query})
        if query == fail_on:
            raise RuntimeError(f"lookup failed for {query}")
        return {"query": query, "hits": 1}

    factory = ToolFactory()
    factory.register_tool(
        lookup,
        name="lookup",
        description="Look something up.",
        parameters={
            "type": "object",
            "properties": {"token": {"type": "string"}, "query": {"type": "string"}},
            "required": ["token", "query"],
        },
        credentials={"token": "LOOKUP_TOKEN"},
    )
    return factory


def _driver(provider: ScriptedProvider, factory: ToolFactory, log: MessageLog, **kwargs: Any) -> TurnDriver:
    return TurnDriver(
        provider,
        ToolDispatcher(factory, {"LOOKUP_TOKEN": "secret"}),
        log,
        MODEL,
        tools=factory.describe(),
        **kwargs,
    )


def _call(call_id: str, query: str) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, tool_name="lookup", raw_arguments=json.dumps({"query": query}))


@pytest.mark.asyncio
async def test_turn_without_tool_calls_uses_first_response() -> None:
    provider = ScriptedProvider([text_response("Hello there", total_tokens=12, model="gpt-4o-mini-2024")])
    factory = _factory([])
    log = MessageLog("sys")
    driver = _driver(provider, factory, log, request_options={"temperature": 0.2})

    outcome = await driver.run_turn("Hi")

    assert outcome.content == "Hello there"
    assert outcome.token_usage == 12
    assert outcome.model_type == "gpt-4o-mini-2024"
    assert not outcome.failed
    assert driver.state is TurnState.DONE
    assert len(provider.calls) == 1
    first_call = provider.calls[0]
    assert first_call["tool_choice"] == "auto"
    assert first_call["tools"] == factory.describe()
    assert first_call["options"] == {"temperature": 0.2}
    assert first_call["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "Hi"},
    ]
    assert [m.role for m in log] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]


@pytest.mark.asyncio
async def test_turn_with_tool_call_records_followup_response() -> None:
    calls: List[Dict[str, Any]] = []
    provider = ScriptedProvider(
        [
            tool_call_response(_call("call_1", "google.com"), content="Let me check", total_tokens=30),
            text_response("Found 3 people", total_tokens=55),
        ]
    )
    log = MessageLog("sys")
    driver = _driver(provider, _factory(calls), log, request_options={"temperature": 0})

    outcome = await driver.run_turn("find people at google.com")

    assert outcome.content == "Found 3 people"
    assert outcome.token_usage == 55
    assert calls == [{"token": "secret", "query": "google.com"}]

    followup_call = provider.calls[1]
    assert followup_call["tools"] is None
    assert followup_call["tool_choice"] is None
    assert followup_call["options"] == {"temperature": 0}

    entries = log.snapshot()
    assert [m.role for m in entries] == [
        Role.SYSTEM,
        Role.USER,
        Role.ASSISTANT,
        Role.TOOL,
        Role.ASSISTANT,
    ]
    # First reply stays in history even though it is not the recorded result.
    assert entries[2].content == "Let me check"
    assert entries[2].tool_calls[0].id == "call_1"
    assert entries[3].tool_call_id == "call_1"
    assert entries[3].name == "lookup"
    assert entries[4].content == "Found 3 people"
    assert followup_call["messages"] == [m.to_chat_dict() for m in entries[:4]]


@pytest.mark.asyncio
async def test_multiple_tool_calls_dispatch_in_model_order() -> None:
    calls: List[Dict[str, Any]] = []
    provider = ScriptedProvider(
        [
            tool_call_response(_call("call_a", "first"), _call("call_b", "second")),
            text_response("done"),
        ]
    )
    log = MessageLog("sys")

    await _driver(provider, _factory(calls), log).run_turn("two lookups")

    assert [c["query"] for c in calls] == ["first", "second"]
    tool_ids = [m.tool_call_id for m in log if m.role is Role.TOOL]
    assert tool_ids == ["call_a", "call_b"]


@pytest.mark.asyncio
async def test_empty_first_content_is_replaced_by_placeholder() -> None:
    provider = ScriptedProvider(
        [tool_call_response(_call("call_1", "x")), text_response(None)]
    )
    log = MessageLog("sys")

    outcome = await _driver(provider, _factory([]), log).run_turn("go")

    assert log.snapshot()[2].content == NO_RESPONSE_PLACEHOLDER
    assert log.last().content == NO_RESPONSE_PLACEHOLDER
    assert outcome.content is None
    assert not outcome.failed


@pytest.mark.asyncio
async def test_tool_failure_stops_remaining_calls_and_fails_turn() -> None:
    calls: List[Dict[str, Any]] = []
    provider = ScriptedProvider(
        [tool_call_response(_call("call_a", "boom"), _call("call_b", "never"))]
    )
    log = MessageLog("sys")
    driver = _driver(provider, _factory(calls, fail_on="boom"), log)

    outcome = await driver.run_turn("go")

    assert outcome.failed
    assert outcome.kind is ErrorKind.TOOL_EXECUTION_FAILURE
    assert "lookup failed for boom" in outcome.error
    assert outcome.model_type == MODEL
    assert outcome.content is None and outcome.token_usage is None
    assert driver.state is TurnState.FAILED
    assert [c["query"] for c in calls] == ["boom"]
    assert len(provider.calls) == 1
    # Appends made before the failure are kept.
    assert [m.role for m in log] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]


@pytest.mark.asyncio
async def test_unknown_tool_fails_turn() -> None:
    provider = ScriptedProvider(
        [tool_call_response(ToolCallRequest(id="c", tool_name="dropTables", raw_arguments="{}"))]
    )

    outcome = await _driver(provider, _factory([]), MessageLog("sys")).run_turn("go")

    assert outcome.kind is ErrorKind.UNKNOWN_TOOL
    assert outcome.error == "Tool 'dropTables' not found."


@pytest.mark.asyncio
async def test_malformed_arguments_fail_turn() -> None:
    provider = ScriptedProvider(
        [tool_call_response(ToolCallRequest(id="c", tool_name="lookup", raw_arguments="{oops"))]
    )

    outcome = await _driver(provider, _factory([]), MessageLog("sys")).run_turn("go")

    assert outcome.kind is ErrorKind.MALFORMED_ARGUMENTS


@pytest.mark.asyncio
async def test_provider_failure_on_first_call() -> None:
    provider = ScriptedProvider([RuntimeError("connection reset")])
    log = MessageLog("sys")
    driver = _driver(provider, _factory([]), log)

    outcome = await driver.run_turn("Hi")

    assert outcome.kind is ErrorKind.PROVIDER_REQUEST_FAILURE
    assert outcome.error == "connection reset"
    assert [m.role for m in log] == [Role.SYSTEM, Role.USER]


@pytest.mark.asyncio
async def test_provider_failure_on_followup_call() -> None:
    provider = ScriptedProvider(
        [tool_call_response(_call("call_1", "x")), ProviderError("rate limited")]
    )
    log = MessageLog("sys")

    outcome = await _driver(provider, _factory([]), log).run_turn("go")

    assert outcome.kind is ErrorKind.PROVIDER_REQUEST_FAILURE
    assert outcome.error == "rate limited"
    assert [m.role for m in log] == [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.TOOL]


@pytest.mark.asyncio
async def test_no_tools_declared_sends_no_tool_choice() -> None:
    provider = ScriptedProvider([text_response("ok")])
    driver = TurnDriver(provider, ToolDispatcher(ToolFactory()), MessageLog("sys"), MODEL)

    await driver.run_turn("Hi")

    assert provider.calls[0]["tools"] is None
    assert provider.calls[0]["tool_choice"] is None
