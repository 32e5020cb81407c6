"""Pytest configuration for llm_connector_toolkit tests."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

from llm_connector_toolkit.providers import BaseProvider, ProviderResponse
from llm_connector_toolkit.tools.models import ToolCallRequest

# Ensure pytest-asyncio is always available so async tests execute without
# requiring plugins to be explicitly enabled via command line options.
pytest_plugins = ("pytest_asyncio",)

TEST_MODEL = "gpt-4o-mini"


class ScriptedProvider(BaseProvider):
    """Provider that replays scripted responses and records every request."""

    def __init__(self, script: Sequence[Union[ProviderResponse, Exception]]) -> None:
        super().__init__(api_key="fake-key")
        self._script = list(script)
        self.calls: List[Dict[str, Any]] = []
        self.client_built = False

    def ensure_client(self) -> None:
        self.client_built = True

    async def _call_api(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        **options: Any,
    ) -> ProviderResponse:
        self.calls.append(
            {
                "model": model,
                "messages": copy.deepcopy(messages),
                "tools": tools,
                "tool_choice": tool_choice,
                "options": dict(options),
            }
        )
        if not self._script:
            raise AssertionError("ScriptedProvider ran out of responses.")
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


def text_response(
    content: Optional[str], total_tokens: Optional[int] = None, model: Optional[str] = None
) -> ProviderResponse:
    usage = {"total_tokens": total_tokens} if total_tokens is not None else None
    return ProviderResponse(content=content, usage=usage, model=model)


def tool_call_response(
    *calls: ToolCallRequest,
    content: Optional[str] = None,
    total_tokens: Optional[int] = None,
) -> ProviderResponse:
    usage = {"total_tokens": total_tokens} if total_tokens is not None else None
    return ProviderResponse(content=content, tool_calls=list(calls), usage=usage)


@pytest.fixture
def test_model() -> str:
    return TEST_MODEL
