"""
Vibe Status Hub HTTP server - REST and MCP endpoints over one task registry
"""

from .app import create_app

__all__ = ['create_app']
