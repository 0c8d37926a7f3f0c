"""MCP (Model Context Protocol) server module for Green Car fare calculation.

This module provides an MCP server that exposes fare quotes, rankings and
station reachability through the Model Context Protocol.
"""

from .server import GreenFareMCPServer, main

__all__ = ["GreenFareMCPServer", "main"]
