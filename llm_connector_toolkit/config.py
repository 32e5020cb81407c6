# llm_connector_toolkit/llm_connector_toolkit/config.py
"""Connector configuration: default properties, setting names and their resolution."""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

module_logger = logging.getLogger(__name__)

OPENAI_API_KEY = "OPENAI_API_KEY"
APOLLO_KEY = "APOLLO_KEY"

# Request fields owned by the turn driver; a property may not override them.
RESERVED_REQUEST_FIELDS = frozenset({"model", "messages", "tools", "tool_choice"})

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful sales prospecting assistant. When the user asks to find "
    "people, such as employees of a company, people with a given job title or "
    "people in a given location, use the searchPeopleUsingApollo function and "
    "summarize the people you found."
)


class ConnectorProperty(BaseModel):
    id: str
    label: str
    type: str = "string"
    value: Any = None


class ConnectorConfig(BaseModel):
    """Static description of the connector and its configurable properties."""

    name: str
    description: str = ""
    properties: List[ConnectorProperty] = Field(default_factory=list)
    settings: List[str] = Field(default_factory=list)

    def get_property(self, property_id: str) -> Optional[ConnectorProperty]:
        return next((p for p in self.properties if p.id == property_id), None)

    @property
    def default_system_prompt(self) -> Optional[str]:
        prop = self.get_property("prompt")
        return prop.value if prop else None


DEFAULT_CONFIG = ConnectorConfig(
    name="OpenAI with Apollo people search",
    description=(
        "Runs prompts through an OpenAI chat model that can search people "
        "with the Apollo API."
    ),
    properties=[
        ConnectorProperty(
            id="prompt",
            label="System Prompt",
            type="string",
            value=DEFAULT_SYSTEM_PROMPT,
        ),
    ],
    settings=[OPENAI_API_KEY, APOLLO_KEY],
)


def split_properties(
    properties: Optional[Mapping[str, Any]],
) -> Tuple[Optional[str], Dict[str, Any]]:
    """Separate the ``prompt`` override from the passthrough request options."""
    options = dict(properties or {})
    prompt = options.pop("prompt", None)
    for reserved in RESERVED_REQUEST_FIELDS & set(options):
        module_logger.warning(
            f"Ignoring property '{reserved}': it is set by the connector itself."
        )
        options.pop(reserved)
    return prompt, options


def resolve_system_prompt(
    prompt_override: Optional[str], config: ConnectorConfig = DEFAULT_CONFIG
) -> str:
    """Return the prompt override, else the configured default system prompt."""
    system_prompt = prompt_override or config.default_system_prompt
    if not system_prompt:
        raise ConfigurationError(
            f"No system prompt supplied and connector '{config.name}' has no default."
        )
    return system_prompt


def load_settings(
    settings: Optional[Mapping[str, Any]] = None,
    config: ConnectorConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """
    Merge explicit settings over environment values for the known setting names.

    Environment variables (including those loaded from ``.env`` at import)
    only fill in names missing from ``settings``.
    """
    merged: Dict[str, Any] = {}
    for name in config.settings:
        env_value = os.environ.get(name)
        if env_value:
            merged[name] = env_value
    merged.update({k: v for k, v in (settings or {}).items() if v is not None})
    module_logger.debug(f"Resolved settings: {sorted(merged)}")
    return merged
