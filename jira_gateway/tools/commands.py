"""Builders for the external invocations behind the Jira tools.

Every builder returns a structured request: argv lists for processes (never a
joined command string) and URLs assembled by httpx for REST calls, so argument
values can't be re-read as extra commands or parameters.
"""
import base64
import json
import re
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import httpx

from ..backends import ProcessInvocation, HttpInvocation
from ..config import Settings

_JQL_FUNCTION = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\(\)$")

SEARCH_FIELDS = "key,summary,status,priority,assignee,created,updated,project,issuetype"


def split_list(value: str) -> List[str]:
    """Split a comma-separated argument into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def jql_value(value: str) -> str:
    """Quote a value for embedding in JQL.

    Bare function calls such as ``currentUser()`` pass through unquoted.
    """
    value = value.strip()
    if _JQL_FUNCTION.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def jira_cli(settings: Settings, *args: str) -> ProcessInvocation:
    env = {}
    config_file = settings.cli_config_file()
    if config_file:
        env["JIRA_CONFIG_FILE"] = config_file
    if settings.jira_api_token:
        env["JIRA_API_TOKEN"] = settings.jira_api_token
    return ProcessInvocation(
        program=settings.jira_cli_path,
        arguments=[str(a) for a in args],
        env=env,
        timeout_ms=settings.call_timeout_ms,
        max_output_bytes=settings.max_output_bytes,
    )


def report_script(settings: Settings, script: str, params: Mapping[str, Any]) -> ProcessInvocation:
    """Run a PowerShell reporting script with named ``-Name value`` parameters."""
    arguments = ["-NoProfile", "-ExecutionPolicy", "Bypass", "-File", str(settings.resolve_path(script))]
    for name, value in params.items():
        if value is None:
            continue
        arguments.extend([f"-{name}", _script_value(value)])
    return ProcessInvocation(
        program=settings.script_runner,
        arguments=arguments,
        timeout_ms=settings.call_timeout_ms,
        max_output_bytes=settings.max_output_bytes,
        cwd=settings.project_root,
    )


def _script_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def auth_headers(settings: Settings) -> Dict[str, str]:
    pair = f"{settings.jira_username}:{settings.jira_api_token}"
    encoded = base64.b64encode(pair.encode("utf-8")).decode("ascii")
    return {
        "Authorization": f"Basic {encoded}",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def jira_rest(
    settings: Settings,
    method: str,
    path: str,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[Any] = None,
) -> HttpInvocation:
    """Build a REST v3 request. Raises ConfigError when credentials are missing."""
    settings.require_rest()
    url = httpx.URL(settings.jira_base_url + path, params=dict(params) if params else None)
    return HttpInvocation(
        method=method,
        url=str(url),
        headers=auth_headers(settings),
        body=json.dumps(body) if body is not None else None,
        timeout_ms=settings.call_timeout_ms,
    )


def issue_path(issue_key: str, *rest: str) -> str:
    """REST path for an issue, with every segment percent-encoded."""
    parts = [quote(issue_key.strip(), safe="")] + [quote(r, safe="") for r in rest]
    return "/rest/api/3/issue/" + "/".join(parts)


def search_jql(settings: Settings, jql: str, max_results: Any) -> HttpInvocation:
    return jira_rest(
        settings,
        "GET",
        "/rest/api/3/search/jql",
        params={"jql": jql, "maxResults": int(max_results), "fields": SEARCH_FIELDS},
    )
