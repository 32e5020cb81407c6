# llm_connector_toolkit/llm_connector_toolkit/__init__.py
import logging
import os
from dotenv import load_dotenv

# Configure basic logging for the library
# Users can customize this further in their application
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Load .env from the working directory so settings can fall back to it
try:
    dotenv_path = os.path.join(os.getcwd(), ".env")
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path=dotenv_path)
except Exception as e:
    logging.getLogger(__name__).warning(f"Could not load .env file: {e}")


# Expose key components for easy import
from .connector import run, run_sync  # noqa: E402
from .config import DEFAULT_CONFIG, ConnectorConfig, ConnectorProperty  # noqa: E402
from .messages import Message, MessageLog, Role  # noqa: E402
from .models import (  # noqa: E402
    ConnectorErrorResponse,
    ConnectorResponse,
    ContentCompletion,
    ErrorCompletion,
    TurnOutcome,
)
from .providers import BaseProvider, ProviderResponse, create_provider_instance  # noqa: E402
from .tools.base_tool import BaseTool  # noqa: E402
from .tools.dispatcher import ToolDispatcher  # noqa: E402
from .tools.tool_factory import ToolFactory  # noqa: E402
from .turn import TurnDriver, TurnState  # noqa: E402
from .batch import BatchRunner  # noqa: E402
from .exceptions import (  # noqa: E402
    BatchInfrastructureError,
    ConfigurationError,
    ErrorKind,
    LLMConnectorError,
    MalformedArgumentsError,
    ProviderError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)

__all__ = [
    "run",
    "run_sync",
    "DEFAULT_CONFIG",
    "ConnectorConfig",
    "ConnectorProperty",
    "Message",
    "MessageLog",
    "Role",
    "ConnectorResponse",
    "ConnectorErrorResponse",
    "ContentCompletion",
    "ErrorCompletion",
    "TurnOutcome",
    "BaseProvider",
    "ProviderResponse",
    "create_provider_instance",
    "BaseTool",
    "ToolDispatcher",
    "ToolFactory",
    "TurnDriver",
    "TurnState",
    "BatchRunner",
    "LLMConnectorError",
    "BatchInfrastructureError",
    "ConfigurationError",
    "ErrorKind",
    "MalformedArgumentsError",
    "ProviderError",
    "ToolError",
    "ToolExecutionError",
    "UnknownToolError",
]

try:
    from importlib.metadata import version

    __version__ = version("llm_connector_toolkit")
except Exception:
    __version__ = "0.0.0-unknown"
