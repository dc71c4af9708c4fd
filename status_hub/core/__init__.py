"""
Core module - Task registry, merge policy, state machine and MCP dispatcher
"""

from .registry import TaskRegistry
from .mcp_dispatcher import McpDispatcher

__all__ = ['TaskRegistry', 'McpDispatcher']
