import json
from typing import Any, Dict

import pytest

from conftest import ScriptedProvider, text_response, tool_call_response
from llm_connector_toolkit.batch import BatchRunner
from llm_connector_toolkit.exceptions import BatchInfrastructureError
from llm_connector_toolkit.messages import MessageLog, Role
from llm_connector_toolkit.models import TurnOutcome
from llm_connector_toolkit.tools.dispatcher import ToolDispatcher
from llm_connector_toolkit.tools.models import ToolCallRequest
from llm_connector_toolkit.tools.tool_factory import ToolFactory
from llm_connector_toolkit.turn import TurnDriver

MODEL = "gpt-4o-mini"


def _runner(provider: ScriptedProvider, log: MessageLog) -> BatchRunner:
    async def lookup(query: str) -> Dict[str, Any]:
        if query == "bad":
            raise RuntimeError("lookup exploded")
        return {"query": query}

    factory = ToolFactory()
    factory.register_tool(
        lookup,
        name="lookup",
        description="Look up.",
        parameters={"type": "object", "properties": {"query": {"type": "string"}}, "required": ["query"]},
    )
    driver = TurnDriver(provider, ToolDispatcher(factory), log, MODEL, tools=factory.describe())
    return BatchRunner(driver)


@pytest.mark.asyncio
async def test_outcomes_match_prompt_order_and_history_accumulates() -> None:
    provider = ScriptedProvider([text_response("one"), text_response("two"), text_response("three")])
    log = MessageLog("sys")

    outcomes = await _runner(provider, log).run(["1", "2", "3"])

    assert [o.content for o in outcomes] == ["one", "two", "three"]
    # Each request sees everything the earlier prompts added.
    assert [len(call["messages"]) for call in provider.calls] == [2, 4, 6]
    assert provider.calls[2]["messages"][-1] == {"role": "user", "content": "3"}
    assert [m.content for m in log] == ["sys", "1", "one", "2", "two", "3", "three"]


@pytest.mark.asyncio
async def test_failing_prompt_does_not_affect_others() -> None:
    bad_call = ToolCallRequest(id="call_bad", tool_name="lookup", raw_arguments=json.dumps({"query": "bad"}))
    provider = ScriptedProvider(
        [
            text_response("first ok"),
            tool_call_response(bad_call),
            text_response("third ok"),
        ]
    )
    log = MessageLog("sys")

    outcomes = await _runner(provider, log).run(["A", "B", "C"])

    assert len(outcomes) == 3
    assert outcomes[0].content == "first ok" and not outcomes[0].failed
    assert outcomes[1].failed and "lookup exploded" in outcomes[1].error
    assert outcomes[2].content == "third ok" and not outcomes[2].failed
    # Prompt C still sees the partial history prompt B left behind.
    third_request = provider.calls[2]["messages"]
    assert {"role": "user", "content": "B"} in third_request
    assert [m.role for m in log][-2:] == [Role.USER, Role.ASSISTANT]


@pytest.mark.asyncio
async def test_empty_batch_returns_no_outcomes() -> None:
    provider = ScriptedProvider([])

    assert await _runner(provider, MessageLog("sys")).run([]) == []
    assert provider.calls == []


@pytest.mark.asyncio
async def test_defect_outside_turn_boundary_aborts_batch() -> None:
    class BrokenDriver:
        async def run_turn(self, prompt: str) -> TurnOutcome:
            raise KeyError("driver state corrupted")

    with pytest.raises(BatchInfrastructureError, match="driver state corrupted"):
        await BatchRunner(BrokenDriver()).run(["A"])  # type: ignore[arg-type]
