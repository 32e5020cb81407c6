"""BaseProvider ABC: the single-request contract the turn driver talks to."""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigurationError, LLMConnectorError, ProviderError
from ..tools.models import ToolCallRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Normalised response returned by adapter _call_api
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProviderResponse:
    """Normalised response from a single provider API call."""

    content: Optional[str]
    tool_calls: List[ToolCallRequest] = field(default_factory=list)
    usage: Optional[Dict[str, int]] = None
    model: Optional[str] = None

    @property
    def total_tokens(self) -> Optional[int]:
        if not self.usage:
            return None
        return self.usage.get("total_tokens")


# ---------------------------------------------------------------------------
# BaseProvider ABC
# ---------------------------------------------------------------------------


class BaseProvider(abc.ABC):
    """Abstract base for all provider adapters.

    Subclasses implement the thin SDK-specific request; this class owns error
    normalisation. No retries are performed: a failed call surfaces as a
    :class:`ProviderError` for the caller to report.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        timeout: float = 180.0,
        **kwargs: Any,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        if kwargs:
            logger.debug(
                "Ignoring unsupported provider options for %s: %s",
                type(self).__name__,
                sorted(kwargs),
            )

    @abc.abstractmethod
    async def _call_api(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        **options: Any,
    ) -> ProviderResponse:
        """Make a single non-streaming API call.

        ``messages`` are in Chat Completions format. ``options`` are request
        property overrides forwarded verbatim to the SDK.
        """
        ...

    def ensure_client(self) -> None:
        """Build the underlying SDK client now instead of on first use.

        Raises:
            ConfigurationError: When the client cannot be constructed.
        """

    async def complete(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
        **options: Any,
    ) -> ProviderResponse:
        """Submit ``messages`` once and return the normalised response."""
        logger.debug(
            "Requesting completion. Model: %s, messages: %d, tools: %d",
            model,
            len(messages),
            len(tools or []),
        )
        try:
            return await self._call_api(
                model, messages, tools=tools, tool_choice=tool_choice, **options
            )
        except (ProviderError, ConfigurationError):
            raise
        except LLMConnectorError as e:
            raise ProviderError(str(e)) from e
        except Exception as e:
            raise ProviderError(str(e) or repr(e)) from e
