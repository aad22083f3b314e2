"""Agent-facing tools.

    >>> from anycall.tools import HttpRequestTool, HttpRequestToolConfig
"""

from .http_request import HttpRequestTool, HttpRequestToolConfig, ToolParameter, prettify_tool_name

__all__ = ["HttpRequestTool", "HttpRequestToolConfig", "ToolParameter", "prettify_tool_name"]
