from . import builtins
from .base_tool import BaseTool
from .models import ToolCallRequest, ToolExecutionResult, ToolResult
from .tool_factory import RegisteredTool, ToolFactory

__all__ = [
    "ToolFactory",
    "RegisteredTool",
    "BaseTool",
    "ToolCallRequest",
    "ToolExecutionResult",
    "ToolResult",
    "builtins",
]
