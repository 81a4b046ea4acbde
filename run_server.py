#!/usr/bin/env python3
"""
Jira Gateway - stdio launcher
Runs the MCP server; an MCP client starts this as a child process.
"""
import os

# CLI output may carry non-ASCII summaries; keep the pipes UTF-8
os.environ.setdefault('PYTHONIOENCODING', 'utf-8')

from jira_gateway.server import main

if __name__ == "__main__":
    main()
