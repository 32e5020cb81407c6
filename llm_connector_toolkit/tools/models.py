# llm_connector_toolkit/llm_connector_toolkit/tools/models.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ToolCallRequest(BaseModel):
    """A tool call emitted by the model inside an assistant message."""

    model_config = ConfigDict(frozen=True)

    id: str  # Tool call ID from the provider
    tool_name: str  # Name of the function to be called
    raw_arguments: str = "{}"  # Encoded arguments exactly as the model sent them

    def to_chat_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": self.raw_arguments},
        }


class ToolExecutionResult(BaseModel):
    """Represents the outcome of a tool execution, separating LLM content from actionable payloads."""

    content: str  # The string to be added to the message history for the LLM
    payload: Any = None  # Data for the caller, not sent to the model
    metadata: Optional[Dict[str, Any]] = None


class ToolResult(BaseModel):
    """A dispatched tool's encoded result, correlated to its request."""

    model_config = ConfigDict(frozen=True)

    tool_call_id: str
    tool_name: str
    payload: str  # Encoded result placed into the conversation
