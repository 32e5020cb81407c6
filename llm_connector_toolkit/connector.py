# llm_connector_toolkit/llm_connector_toolkit/connector.py
import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from .batch import BatchRunner
from .config import (
    DEFAULT_CONFIG,
    OPENAI_API_KEY,
    ConnectorConfig,
    load_settings,
    resolve_system_prompt,
    split_properties,
)
from .exceptions import ErrorKind, LLMConnectorError
from .messages import MessageLog
from .models import ConnectorErrorResponse, ConnectorResponse
from .normalizer import describe_error, map_to_response
from .providers import BaseProvider, create_provider_instance
from .tools.dispatcher import ToolDispatcher
from .tools.tool_factory import ToolFactory
from .turn import TurnDriver

module_logger = logging.getLogger(__name__)

ConnectorResult = Union[ConnectorResponse, ConnectorErrorResponse]


async def run(
    model: str,
    prompts: Sequence[str],
    properties: Optional[Mapping[str, Any]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    *,
    tool_factory: Optional[ToolFactory] = None,
    provider: Optional[BaseProvider] = None,
    config: ConnectorConfig = DEFAULT_CONFIG,
) -> ConnectorResult:
    """
    Run ``prompts`` in order against ``model`` and return one completion per prompt.

    All prompts share one conversation history seeded with the system prompt.
    A prompt that fails (provider error, unknown tool, bad tool arguments,
    tool failure) yields an error completion at its index while the rest of
    the batch continues. Failures outside the per-prompt boundary, such as
    building the provider client, yield a single ``ConnectorErrorResponse``.
    This coroutine never raises.

    Args:
        model: Model identifier to request.
        prompts: Prompts to process, in order.
        properties: ``prompt`` overrides the default system prompt; every other
            entry is passed through into each model request (e.g. ``temperature``).
        settings: Named credentials, e.g. ``OPENAI_API_KEY`` and ``APOLLO_KEY``.
            Missing names fall back to environment variables.
        tool_factory: Tools to expose. Defaults to the built-in tools.
        provider: Provider to use. Defaults to an OpenAI adapter built from settings.
        config: Connector configuration providing the default system prompt.
    """
    try:
        prompt_override, request_options = split_properties(properties)
        resolved_settings = load_settings(settings, config)

        if provider is None:
            provider = create_provider_instance(
                "openai", api_key=resolved_settings.get(OPENAI_API_KEY)
            )
        provider.ensure_client()

        if tool_factory is None:
            tool_factory = ToolFactory()
            tool_factory.register_builtins()

        message_log = MessageLog(resolve_system_prompt(prompt_override, config))
        turn_driver = TurnDriver(
            provider,
            ToolDispatcher(tool_factory, resolved_settings),
            message_log,
            model,
            tools=tool_factory.describe(),
            request_options=request_options,
        )

        module_logger.info(
            f"Running {len(prompts)} prompt(s) with model '{model}' "
            f"and tools {tool_factory.available_tool_names}"
        )
        outcomes = await BatchRunner(turn_driver).run(prompts)
        return map_to_response(outcomes, model)
    except Exception as e:
        module_logger.error(f"Connector run failed: {e}", exc_info=True)
        kind = (
            e.kind
            if isinstance(e, LLMConnectorError)
            else ErrorKind.BATCH_INFRASTRUCTURE_FAILURE
        )
        return ConnectorErrorResponse(
            error=describe_error(e), kind=kind, model_type=model
        )


def run_sync(
    model: str,
    prompts: Sequence[str],
    properties: Optional[Mapping[str, Any]] = None,
    settings: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> ConnectorResult:
    """Blocking wrapper around :func:`run` for callers without an event loop."""
    return asyncio.run(run(model, prompts, properties, settings, **kwargs))
