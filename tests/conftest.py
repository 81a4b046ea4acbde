"""Shared fixtures: isolated settings and recording backends."""
from typing import Callable, List, Optional

import pytest

from jira_gateway.backends import HttpInvocation, InvocationResult, ProcessInvocation
from jira_gateway.config import Settings
from jira_gateway.tools import Gateway

BASE_URL = "https://example.atlassian.net"


class RecordingProcessBackend:
    """Stands in for ProcessBackend; records invocations instead of spawning."""

    def __init__(self, handler: Optional[Callable[[ProcessInvocation], InvocationResult]] = None):
        self.calls: List[ProcessInvocation] = []
        self.handler = handler or (lambda inv: InvocationResult.ok("ok"))

    async def run(self, invocation: ProcessInvocation) -> InvocationResult:
        self.calls.append(invocation)
        return self.handler(invocation)


class RecordingHttpBackend:
    def __init__(self, handler: Optional[Callable[[HttpInvocation], InvocationResult]] = None):
        self.calls: List[HttpInvocation] = []
        self.handler = handler or (lambda inv: InvocationResult.ok('{"issues": [], "total": 0}', 200))

    async def call(self, invocation: HttpInvocation) -> InvocationResult:
        self.calls.append(invocation)
        return self.handler(invocation)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jira_cli_path="jira",
        jira_config_file="",
        jira_base_url=BASE_URL,
        jira_username="bot@example.com",
        jira_api_token="secret-token",
        project_root=str(tmp_path),
        script_runner="pwsh",
        call_timeout_ms=5000,
        max_concurrency=4,
        stderr_allow_prefixes=("INF",),
    )


@pytest.fixture
def process_backend():
    return RecordingProcessBackend()


@pytest.fixture
def http_backend():
    return RecordingHttpBackend()


@pytest.fixture
def gateway(settings, process_backend, http_backend):
    return Gateway(settings, process_backend=process_backend, http_backend=http_backend)


def argv(invocation: ProcessInvocation) -> List[str]:
    return list(invocation.arguments)
