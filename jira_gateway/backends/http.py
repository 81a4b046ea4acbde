"""HTTP backend — issues one request per invocation with httpx."""
import logging
from typing import Optional

import httpx

from .base import HttpInvocation, InvocationResult, TIMEOUT, truncate

logger = logging.getLogger(__name__)

_SNIPPET_CHARS = 200


class HttpBackend:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # transport is injectable for tests (httpx.MockTransport)
        self._transport = transport

    async def call(self, invocation: HttpInvocation) -> InvocationResult:
        method = invocation.method.upper()
        # Headers carry credentials: log method and URL only
        logger.info(f"HTTP: {method} {invocation.url}")
        try:
            async with httpx.AsyncClient(timeout=invocation.timeout_ms / 1000, transport=self._transport) as client:
                resp = await client.request(
                    method,
                    invocation.url,
                    headers=invocation.headers,
                    content=invocation.body,
                )
        except httpx.TimeoutException:
            logger.warning(f"HTTP: {method} {invocation.url} timed out after {invocation.timeout_ms}ms")
            return InvocationResult.failed(TIMEOUT)
        except httpx.HTTPError as e:
            logger.error(f"HTTP: {method} {invocation.url} transport error: {e}")
            return InvocationResult.failed(f"transport error: {e}")

        if resp.is_success:
            return InvocationResult.ok(resp.text, status_code=resp.status_code)

        snippet = truncate(resp.text, _SNIPPET_CHARS) or "(empty body)"
        logger.info(f"HTTP: {method} {invocation.url} -> {resp.status_code}")
        return InvocationResult.failed(
            f"HTTP {resp.status_code} {resp.reason_phrase}: {snippet}",
            status_code=resp.status_code,
        )
