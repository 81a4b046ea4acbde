"""Jira tool-dispatch gateway: MCP tools backed by the jira CLI, reporting scripts and the REST API."""
__version__ = "1.0.0"
