# llm_connector_toolkit/llm_connector_toolkit/providers/__init__.py
import logging
from typing import Any, Type

from ._base import BaseProvider, ProviderResponse
from ..exceptions import ConfigurationError

_provider_registry: dict[str, Type[BaseProvider]] = {}
module_logger = logging.getLogger(__name__)


def register_provider(name: str):
    """
    Decorator to register LLM Provider classes.

    Args:
        name (str): The identifier for the provider (e.g., 'openai').
    """

    def decorator(cls):
        if not issubclass(cls, BaseProvider):
            raise TypeError(
                f"Class {cls.__name__} must inherit from BaseProvider to be registered."
            )
        if name in _provider_registry:
            module_logger.warning(
                f"Provider '{name}' is already registered. Overwriting with {cls.__name__}."
            )
        _provider_registry[name] = cls
        module_logger.debug(f"Registered provider: '{name}' -> {cls.__name__}")
        return cls

    return decorator


def create_provider_instance(
    provider_type: str, api_key: str | None = None, **kwargs: Any
) -> BaseProvider:
    """
    Creates an instance of the specified provider class.

    Args:
        provider_type (str): The name/identifier of the provider type (e.g., 'openai').
        api_key (str, optional): The API key. Passed to the provider.
        **kwargs: Additional keyword arguments for the provider's constructor.

    Returns:
        BaseProvider: An instance of the requested provider class.

    Raises:
        ConfigurationError: If the provider type is not registered or cannot be created.
    """
    provider_class = _provider_registry.get(provider_type.lower())
    if not provider_class:
        available = list(_provider_registry.keys())
        raise ConfigurationError(
            f"Invalid provider type: '{provider_type}'. Available providers: {available}"
        )

    try:
        if api_key:
            kwargs["api_key"] = api_key
        return provider_class(**kwargs)
    except Exception as e:
        module_logger.error(
            f"Failed to instantiate provider '{provider_type}': {e}", exc_info=True
        )
        raise ConfigurationError(
            f"Could not create instance of provider '{provider_type}': {e}"
        ) from e


# Import adapters so their registration decorators run.
from . import openai  # noqa: E402,F401
from .openai import OpenAIAdapter  # noqa: E402

__all__ = [
    "BaseProvider",
    "ProviderResponse",
    "OpenAIAdapter",
    "register_provider",
    "create_provider_instance",
]
