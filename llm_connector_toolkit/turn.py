"""Drives one prompt through the model, any requested tools, and the follow-up call."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from .messages import Message, MessageLog
from .models import TurnOutcome
from .normalizer import map_error_to_outcome
from .providers import BaseProvider, ProviderResponse
from .tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

NO_RESPONSE_PLACEHOLDER = "No response."


class TurnState(str, Enum):
    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    TOOL_CALLS_PENDING = "tool_calls_pending"
    DISPATCHING_TOOLS = "dispatching_tools"
    AWAITING_FOLLOWUP_RESPONSE = "awaiting_followup_response"
    DONE = "done"
    FAILED = "failed"


class TurnDriver:
    """
    Runs turns against a shared :class:`MessageLog`.

    A turn appends the prompt, asks the model (declaring the registered tools
    with automatic tool choice), appends the assistant reply, and when the
    reply requests tools dispatches them one by one in the order given before
    asking the model again without tools. The follow-up reply, not the first
    one, is the turn's result in that case.

    Any failure ends the turn as an error outcome; nothing is raised to the
    caller and entries appended before the failure stay in the log.
    """

    def __init__(
        self,
        provider: BaseProvider,
        dispatcher: ToolDispatcher,
        message_log: MessageLog,
        model: str,
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        request_options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.provider = provider
        self.dispatcher = dispatcher
        self.message_log = message_log
        self.model = model
        self.tools = tools or []
        self.request_options = dict(request_options or {})
        self.state = TurnState.DONE

    async def run_turn(self, prompt: str) -> TurnOutcome:
        self.state = TurnState.AWAITING_FIRST_RESPONSE
        try:
            outcome = await self._drive(prompt)
        except Exception as e:
            self.state = TurnState.FAILED
            logger.error("Turn failed for prompt %r: %s", prompt[:80], e, exc_info=True)
            return map_error_to_outcome(e, self.model)
        self.state = TurnState.DONE
        return outcome

    async def _drive(self, prompt: str) -> TurnOutcome:
        self.message_log.append(Message.user(prompt))

        first = await self.provider.complete(
            self.model,
            self.message_log.to_payload(),
            tools=self.tools or None,
            tool_choice="auto" if self.tools else None,
            **self.request_options,
        )
        self.message_log.append(
            Message.assistant(first.content or NO_RESPONSE_PLACEHOLDER, first.tool_calls)
        )

        if not first.tool_calls:
            return self._success(first)

        self.state = TurnState.TOOL_CALLS_PENDING
        logger.info("Tool calls received: %d", len(first.tool_calls))

        self.state = TurnState.DISPATCHING_TOOLS
        for request in first.tool_calls:
            await self.dispatcher.dispatch(request, self.message_log)

        self.state = TurnState.AWAITING_FOLLOWUP_RESPONSE
        followup = await self.provider.complete(
            self.model,
            self.message_log.to_payload(),
            **self.request_options,
        )
        self.message_log.append(
            Message.assistant(followup.content or NO_RESPONSE_PLACEHOLDER)
        )
        return self._success(followup)

    @staticmethod
    def _success(response: ProviderResponse) -> TurnOutcome:
        return TurnOutcome(
            content=response.content,
            token_usage=response.total_tokens,
            model_type=response.model,
        )
