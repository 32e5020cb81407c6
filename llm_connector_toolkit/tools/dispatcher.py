"""Executes model-issued tool calls against the registry with trusted credentials."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import MalformedArgumentsError, ToolExecutionError
from ..messages import Message, MessageLog
from .models import ToolCallRequest, ToolExecutionResult, ToolResult
from .tool_factory import RegisteredTool, ToolFactory

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """
    Runs one tool call at a time and folds its result into the message log.

    ``credentials`` is the operator-owned settings bundle for the batch. It is
    wrapped read-only and is the only source of credential parameter values:
    whatever the model put in a credential field is discarded.
    """

    def __init__(
        self,
        tool_factory: ToolFactory,
        credentials: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.tool_factory = tool_factory
        self._credentials: Mapping[str, Any] = MappingProxyType(dict(credentials or {}))

    @property
    def credentials(self) -> Mapping[str, Any]:
        return self._credentials

    async def dispatch(
        self, request: ToolCallRequest, message_log: MessageLog
    ) -> ToolResult:
        """
        Resolve, validate and execute ``request``, then append the correlated
        tool message to ``message_log``.

        Raises:
            UnknownToolError: The tool is not registered.
            MalformedArgumentsError: Arguments are not a JSON object or fail
                the tool's schema.
            ToolExecutionError: A credential is not configured or the handler raised.
        """
        tool = self.tool_factory.resolve(request.tool_name)
        model_arguments = self.decode_arguments(request)
        arguments = self.inject_credentials(model_arguments, tool)
        validated = self.validate_arguments(arguments, tool)

        logger.info(
            "Executing tool '%s' (call %s) with parameters: %s",
            tool.name,
            request.id,
            sorted(validated),
        )
        try:
            if inspect.iscoroutinefunction(tool.function):
                result = await tool.function(**validated)
            else:
                result = tool.function(**validated)
                if asyncio.iscoroutine(result):
                    result = await result
        except Exception as e:
            logger.error(
                "Tool '%s' (call %s) failed: %s", tool.name, request.id, e, exc_info=True
            )
            raise ToolExecutionError(str(e) or repr(e)) from e

        tool_result = ToolResult(
            tool_call_id=request.id,
            tool_name=tool.name,
            payload=self.encode_payload(result, tool.name),
        )
        message_log.append(Message.from_tool_result(tool_result))
        logger.debug("Tool '%s' (call %s) result: %s", tool.name, request.id, tool_result.payload)
        return tool_result

    @staticmethod
    def decode_arguments(request: ToolCallRequest) -> Dict[str, Any]:
        raw = request.raw_arguments or "{}"
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedArgumentsError(
                f"Failed to decode JSON arguments for tool '{request.tool_name}': {e}"
            ) from e
        if not isinstance(decoded, dict):
            raise MalformedArgumentsError(
                f"Expected a JSON object for arguments of tool '{request.tool_name}', "
                f"got {type(decoded).__name__}."
            )
        return decoded

    def inject_credentials(
        self, arguments: Dict[str, Any], tool: RegisteredTool
    ) -> Dict[str, Any]:
        """
        Overwrite every credential parameter with the trusted settings value.

        Credentials are never taken from model-controlled input: a value the
        model supplied for a credential field is replaced unconditionally.
        """
        final_arguments = dict(arguments)
        for param_name, settings_key in tool.credentials.items():
            if param_name in arguments:
                logger.warning(
                    "Discarding model-supplied value for credential parameter '%s' of tool '%s'.",
                    param_name,
                    tool.name,
                )
            value = self._credentials.get(settings_key)
            if value is None:
                raise ToolExecutionError(
                    f"Credential '{settings_key}' required by tool '{tool.name}' is not configured."
                )
            final_arguments[param_name] = value
        return final_arguments

    @staticmethod
    def validate_arguments(
        arguments: Dict[str, Any], tool: RegisteredTool
    ) -> Dict[str, Any]:
        try:
            parsed = tool.arguments_model.model_validate(arguments)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            )
            raise MalformedArgumentsError(
                f"Invalid arguments for tool '{tool.name}': {problems}"
            ) from e
        return parsed.model_dump(exclude_unset=True)

    @staticmethod
    def encode_payload(result: Any, tool_name: str) -> str:
        if isinstance(result, ToolExecutionResult):
            return result.content
        try:
            return json.dumps(result)
        except (TypeError, ValueError) as e:
            raise ToolExecutionError(
                f"Tool '{tool_name}' returned a result that is not JSON serializable: {e}"
            ) from e
