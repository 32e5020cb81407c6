"""Conversation entries and the append-only message log shared across a batch."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from .tools.models import ToolCallRequest, ToolResult

logger = logging.getLogger(__name__)


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(BaseModel):
    """One conversation entry, immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: Optional[str] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None
    tool_calls: Tuple[ToolCallRequest, ...] = ()

    @model_validator(mode="after")
    def _check_role_fields(self) -> "Message":
        if self.role is Role.TOOL:
            if not self.tool_call_id or not self.name:
                raise ValueError("Tool messages require 'tool_call_id' and 'name'.")
        elif self.tool_call_id is not None or self.name is not None:
            raise ValueError(
                f"'tool_call_id' and 'name' are only allowed on tool messages, not '{self.role.value}'."
            )
        if self.tool_calls and self.role is not Role.ASSISTANT:
            raise ValueError("Only assistant messages can carry tool calls.")
        if self.content is None and not self.tool_calls:
            raise ValueError(
                "Content may only be empty on an assistant message that requests tools."
            )
        return self

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: Optional[str],
        tool_calls: Sequence[ToolCallRequest] = (),
    ) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def from_tool_result(cls, result: ToolResult) -> "Message":
        return cls(
            role=Role.TOOL,
            content=result.payload,
            tool_call_id=result.tool_call_id,
            name=result.tool_name,
        )

    def to_chat_dict(self, answered_call_ids: Optional[Set[str]] = None) -> Dict[str, Any]:
        """Render the entry in Chat Completions format.

        With ``answered_call_ids``, only tool calls that have a tool reply are
        rendered; providers reject assistant tool calls left without one.
        """
        data: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_call_id is not None:
            data["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            data["name"] = self.name
        calls = [
            call
            for call in self.tool_calls
            if answered_call_ids is None or call.id in answered_call_ids
        ]
        if calls:
            data["tool_calls"] = [call.to_chat_dict() for call in calls]
        return data


class MessageLog:
    """
    Ordered, append-only conversation history for one batch invocation.

    The log is seeded with the system prompt, which stays the first entry for
    the log's whole life. Entries are only ever appended; every append is
    visible to all later reads, so a prompt's context includes everything the
    earlier prompts of the same batch added. A log is owned by a single batch
    call and has exactly one writer at a time.
    """

    def __init__(self, system_prompt: str) -> None:
        self._entries: List[Message] = [Message.system(system_prompt)]

    def append(self, message: Message) -> None:
        if message.role is Role.SYSTEM:
            raise ValueError("The system message is fixed at the start of the log.")
        self._entries.append(message)
        logger.debug(
            "Appended %s message (log size: %d)", message.role.value, len(self._entries)
        )

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._entries)

    def to_payload(self) -> List[Dict[str, Any]]:
        """Return the full history as provider-ready message dicts.

        Tool calls of a turn that failed before every call was answered stay in
        the log but are left out of the payload.
        """
        answered = {m.tool_call_id for m in self._entries if m.role is Role.TOOL}
        return [message.to_chat_dict(answered) for message in self._entries]

    def last(self) -> Message:
        return self._entries[-1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._entries))
