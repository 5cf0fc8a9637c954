"""Agent tool surface for quillsh sessions."""

from .registry import ToolDescriptor, ToolRegistry
from .shell import register_shell_tools

__all__ = ["ToolDescriptor", "ToolRegistry", "register_shell_tools"]
