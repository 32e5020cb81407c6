# llm_connector_toolkit/llm_connector_toolkit/exceptions.py
from enum import Enum


class ErrorKind(str, Enum):
    """Kind tags carried by every connector error and error outcome."""

    CONFIGURATION_ERROR = "configuration_error"
    UNKNOWN_TOOL = "unknown_tool"
    MALFORMED_ARGUMENTS = "malformed_arguments"
    TOOL_ERROR = "tool_error"
    TOOL_EXECUTION_FAILURE = "tool_execution_failure"
    PROVIDER_REQUEST_FAILURE = "provider_request_failure"
    BATCH_INFRASTRUCTURE_FAILURE = "batch_infrastructure_failure"
    UNEXPECTED_ERROR = "unexpected_error"


class LLMConnectorError(Exception):
    """Base exception class for the llm_connector_toolkit library."""

    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR


class ConfigurationError(LLMConnectorError):
    """Exception raised for configuration errors (e.g., missing API key)."""

    kind = ErrorKind.CONFIGURATION_ERROR


class UnknownToolError(LLMConnectorError):
    """The model requested a tool that is not registered."""

    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool '{tool_name}' not found.")
        self.tool_name = tool_name


class MalformedArgumentsError(LLMConnectorError):
    """Tool-call arguments could not be decoded or failed validation."""

    kind = ErrorKind.MALFORMED_ARGUMENTS


class ToolError(LLMConnectorError):
    """Exception raised for errors during tool execution."""

    kind = ErrorKind.TOOL_ERROR


class ToolExecutionError(ToolError):
    """A resolved tool handler raised while executing."""

    kind = ErrorKind.TOOL_EXECUTION_FAILURE


class ProviderError(LLMConnectorError):
    """Exception raised for errors originating from a provider."""

    kind = ErrorKind.PROVIDER_REQUEST_FAILURE


class BatchInfrastructureError(LLMConnectorError):
    """A failure outside the per-prompt boundary; aborts the whole batch."""

    kind = ErrorKind.BATCH_INFRASTRUCTURE_FAILURE
