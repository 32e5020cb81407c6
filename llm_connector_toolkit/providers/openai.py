"""OpenAI Chat Completions adapter."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigurationError, ProviderError
from ..tools.models import ToolCallRequest
from . import register_provider
from ._base import BaseProvider, ProviderResponse

logger = logging.getLogger(__name__)


@register_provider("openai")
class OpenAIAdapter(BaseProvider):
    """Provider adapter for OpenAI using the Chat Completions API."""

    API_ENV_VAR = "OPENAI_API_KEY"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        timeout: float = 180.0,
        base_url: Optional[str] = None,
        client: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key=api_key, timeout=timeout, **kwargs)
        self._base_url = base_url
        self._async_client: Any = client  # Lazy-created unless injected

    def _get_client(self) -> Any:
        """Lazily import and create an ``AsyncOpenAI`` client."""
        if self._async_client is not None:
            return self._async_client

        from openai import AsyncOpenAI

        key = self.api_key or os.environ.get(self.API_ENV_VAR)
        if not key:
            raise ConfigurationError(
                f"OpenAI API key not found. Provide it in the settings or "
                f"set the {self.API_ENV_VAR} environment variable."
            )

        client_kwargs: Dict[str, Any] = {
            "api_key": key,
            "timeout": self.timeout,
            # Failures are reported per prompt, never retried.
            "max_retries": 0,
        }
        if self._base_url:
            client_kwargs["base_url"] = self._base_url

        try:
            self._async_client = AsyncOpenAI(**client_kwargs)
        except Exception as e:
            raise ConfigurationError(
                f"Failed to initialize OpenAI async client: {e}"
            ) from e
        return self._async_client

    def ensure_client(self) -> None:
        self._get_client()

    @staticmethod
    def _build_request(
        model: str,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        """Build the request payload for ``client.chat.completions.create``."""
        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
            if tool_choice:
                payload["tool_choice"] = tool_choice

        # Property overrides go last, as passthrough request options.
        if options:
            payload.update(options)
        return payload

    @staticmethod
    def _parse_completion(completion: Any) -> ProviderResponse:
        choices = getattr(completion, "choices", None) or []
        if not choices:
            raise ProviderError("OpenAI returned a completion without choices.")
        message = choices[0].message

        tool_calls: List[ToolCallRequest] = []
        for call in getattr(message, "tool_calls", None) or []:
            function = getattr(call, "function", None)
            tool_calls.append(
                ToolCallRequest(
                    id=getattr(call, "id", None) or "",
                    tool_name=getattr(function, "name", None) or "",
                    raw_arguments=getattr(function, "arguments", None) or "{}",
                )
            )

        usage: Optional[Dict[str, int]] = None
        comp_usage = getattr(completion, "usage", None)
        if comp_usage:
            usage = {
                "prompt_tokens": getattr(comp_usage, "prompt_tokens", 0) or 0,
                "completion_tokens": getattr(comp_usage, "completion_tokens", 0) or 0,
                "total_tokens": getattr(comp_usage, "total_tokens", 0) or 0,
            }

        return ProviderResponse(
            content=getattr(message, "content", None),
            tool_calls=tool_calls,
            usage=usage,
            model=getattr(completion, "model", None),
        )

    async def _call_api(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        **options: Any,
    ) -> ProviderResponse:
        """Make a single non-streaming call via OpenAI Chat Completions."""
        client = self._get_client()
        request = self._build_request(
            model, messages, tools=tools, tool_choice=tool_choice, **options
        )

        try:
            completion = await client.chat.completions.create(**request)
        except Exception as e:
            logger.error("OpenAI Chat Completions API error. Model: %s: %s", model, e)
            raise ProviderError(str(e) or repr(e)) from e

        response = self._parse_completion(completion)
        if response.content is None and not response.tool_calls:
            logger.warning(
                "Received an empty message content from OpenAI. Model: %s", model
            )
        return response
