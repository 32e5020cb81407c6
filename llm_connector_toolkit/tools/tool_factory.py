# llm_connector_toolkit/llm_connector_toolkit/tools/tool_factory.py
import copy
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel

from ._schema_gen import build_arguments_model, generate_schema_from_function
from ..exceptions import ConfigurationError, ToolError, UnknownToolError

module_logger = logging.getLogger(__name__)

# Mapping of built-in tool metadata. Keys are tool names.
BUILTIN_TOOLS: Dict[str, Dict[str, Any]] = {
    "searchPeopleUsingApollo": {
        "function": "builtins.search_people_using_apollo",
        "description": (
            "Use this function to search for people using the Apollo API. Provide the "
            "search query parameters to filter and find specific individuals based on "
            "criteria such as organization domains, locations, titles, and limit. The "
            "results can include detailed information about the people matching the query."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "apiKey": {
                    "type": "string",
                    "description": "The API key to authenticate requests to the Apollo API.",
                },
                "organizationDomains": {
                    "type": "string",
                    "description": (
                        "The organization domains to search for, joined by a new line "
                        'character (e.g., "google.com\\nfacebook.com").'
                    ),
                },
                "locations": {
                    "type": "string",
                    "description": 'The allowed locations of the person (e.g., "California, US").',
                },
                "titles": {
                    "type": "string",
                    "description": "The person's titles to search for (e.g., \"sales manager\").",
                },
                "limit": {
                    "type": "integer",
                    "description": "The maximum number of results to return (default: 10).",
                },
            },
            "required": ["apiKey"],
        },
        "credentials": {"apiKey": "APOLLO_KEY"},
    },
}


@dataclass(frozen=True)
class RegisteredTool:
    """Everything the dispatcher needs to run one tool."""

    name: str
    description: str
    function: Callable[..., Any]
    parameters: Dict[str, Any]
    arguments_model: Type[BaseModel]
    credentials: Dict[str, str] = field(default_factory=dict)

    def to_definition(self) -> Dict[str, Any]:
        """Chat Completions declaration, with credential parameters hidden from the model."""
        declared = copy.deepcopy(self.parameters)
        properties = declared.get("properties") or {}
        for param_name in self.credentials:
            properties.pop(param_name, None)
        if "required" in declared:
            declared["required"] = [
                p for p in declared["required"] if p not in self.credentials
            ]
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": declared,
            },
        }


class ToolFactory:
    """
    Registry of the tools (functions) an LLM provider can call.
    Holds each tool's handler, declared parameter schema, the strict model
    its arguments are validated against, and which parameters are credentials
    to be filled from trusted settings. Credential values are never stored here.
    """

    def __init__(self):
        self._tools: Dict[str, RegisteredTool] = {}
        module_logger.info("ToolFactory initialized.")

    def register_tool(
        self,
        function: Callable[..., Any],
        name: str,
        description: str,
        parameters: Union[Dict[str, Any], Type[BaseModel], None] = None,
        credentials: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Registers a tool function and its definition (schema).

        Args:
            function: The callable to execute. Coroutine functions are awaited.
            name: The name the LLM will use to call the function. Should be unique.
            description: A description for the LLM explaining what the tool does.
            parameters: JSON Schema for the function's parameters (OpenAI's
                        format) or a pydantic model class. When omitted, the
                        schema is generated from the function's type hints.
            credentials: Maps parameter names to the settings key whose value
                         is injected at dispatch time, e.g. ``{"apiKey": "APOLLO_KEY"}``.
        """
        if name in self._tools:
            module_logger.warning(f"Tool '{name}' is already registered. Overwriting.")

        if isinstance(parameters, type) and issubclass(parameters, BaseModel):
            schema = parameters.model_json_schema()
            schema.pop("title", None)
        elif parameters is None:
            schema = generate_schema_from_function(function)
        else:
            schema = copy.deepcopy(parameters)

        if not isinstance(schema, dict) or schema.get("type") != "object":
            module_logger.warning(
                "Tool '%s' parameters does not seem to be a valid JSON "
                "Schema object. Ensure it follows the provider's expected format.",
                name,
            )

        credentials = dict(credentials or {})
        undeclared = set(credentials) - set(schema.get("properties") or {})
        if undeclared:
            raise ConfigurationError(
                f"Tool '{name}' declares credentials for unknown parameters: {sorted(undeclared)}"
            )

        self._tools[name] = RegisteredTool(
            name=name,
            description=description,
            function=function,
            parameters=schema,
            arguments_model=build_arguments_model(name, schema),
            credentials=credentials,
        )
        module_logger.info(f"Registered tool: {name}")

    def register_tool_class(
        self,
        tool_class: type,
        config: Optional[Dict[str, Any]] = None,
        name_override: Optional[str] = None,
        description_override: Optional[str] = None,
    ) -> None:
        """Registers a tool class that inherits from BaseTool."""
        from .base_tool import BaseTool

        if not issubclass(tool_class, BaseTool):
            raise ToolError(f"{tool_class.__name__} must inherit from BaseTool.")

        name = name_override or getattr(tool_class, "NAME", None)
        description = description_override or getattr(tool_class, "DESCRIPTION", None)

        if not name or not description:
            raise ToolError(
                f"Tool class {tool_class.__name__} missing required NAME or DESCRIPTION."
            )

        instance = tool_class.from_config(**(config or {}))
        parameters = tool_class.PARAMETERS or generate_schema_from_function(
            instance.execute
        )

        self.register_tool(
            function=instance.execute,
            name=name,
            description=description,
            parameters=parameters,
            credentials=tool_class.CREDENTIALS,
        )
        module_logger.info(f"Registered tool class: {tool_class.__name__} as '{name}'")

    def register_builtins(self, names: Optional[List[str]] = None) -> None:
        """Registers a selection of built-in tools by name."""
        if names is None:
            names = list(BUILTIN_TOOLS.keys())

        builtins_mod = importlib.import_module("llm_connector_toolkit.tools.builtins")
        for name in names:
            info = BUILTIN_TOOLS.get(name)
            if not info:
                module_logger.warning(f"Built-in tool '{name}' not found.")
                continue
            func = getattr(builtins_mod, info["function"].split(".")[-1], None)
            if func is None:
                module_logger.warning(f"Function for built-in '{name}' not available.")
                continue
            self.register_tool(
                function=func,
                name=name,
                description=info["description"],
                parameters=info.get("parameters"),
                credentials=info.get("credentials"),
            )

    def resolve(self, name: str) -> RegisteredTool:
        """Return the registered tool or raise ``UnknownToolError``."""
        tool = self._tools.get(name)
        if tool is None:
            module_logger.error(f"Tool '{name}' not found.")
            raise UnknownToolError(name)
        return tool

    def get_tool_definitions(
        self, filter_tool_names: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        """
        Returns the list of provider-compatible tool definitions, optionally filtered.

        Args:
            filter_tool_names (Optional[List[str]]): A list of tool names to include.
                If None, all registered tool definitions are returned.

        Returns:
            List[Dict[str, Any]]: The list of tool definitions for the provider.
        """
        if filter_tool_names is None:
            return [tool.to_definition() for tool in self._tools.values()]

        missing_names = set(filter_tool_names) - set(self._tools)
        if missing_names:
            module_logger.warning(
                f"Requested tools not found in factory: {sorted(missing_names)}. They will be excluded."
            )
        return [
            tool.to_definition()
            for name, tool in self._tools.items()
            if name in filter_tool_names
        ]

    def describe(self) -> List[Dict[str, Any]]:
        """Capability declarations surfaced to the model."""
        return self.get_tool_definitions()

    @property
    def available_tool_names(self) -> List[str]:
        """Returns a list of all registered tool names."""
        return list(self._tools)
