"""Tool executor — the dispatch gateway between tool calls and external invocations.

A call is resolved against the registry, its arguments are validated, the
tool's mapping function turns them into one invocation (or a list of steps),
the matching backend runs it under a single call-level timeout, and the
result is normalized into an Envelope. Every path returns an Envelope; no
exception escapes ``dispatch``.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..backends import (
    HttpBackend, HttpInvocation, Invocation, InvocationResult, ProcessBackend, ProcessInvocation,
)
from ..config import Settings
from ..errors import ConfigError, UnknownTool, ValidationError
from .normalizer import Envelope, error_envelope, normalize, timeout_text
from .registry import Step, ToolDef, ToolRegistry, registry as default_registry
from .validation import validate_arguments

logger = logging.getLogger(__name__)

STEP_OK = "✅"
STEP_FAILED = "❌"
STEP_TIMEOUT = "timeout, may have partially completed"
STEP_NOT_RUN = "not run"


@dataclass
class ToolCall:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


class Gateway:
    def __init__(
        self,
        settings: Settings,
        registry: Optional[ToolRegistry] = None,
        process_backend: Optional[ProcessBackend] = None,
        http_backend: Optional[HttpBackend] = None,
    ):
        self.settings = settings
        self.registry = registry if registry is not None else default_registry
        self.process = process_backend or ProcessBackend(settings.stderr_allow_prefixes)
        self.http = http_backend or HttpBackend()
        self._slots = asyncio.Semaphore(max(1, settings.max_concurrency))
        self.registry.verify()

    async def dispatch(self, call: ToolCall, timeout_ms: Optional[int] = None) -> Envelope:
        timeout_ms = timeout_ms or self.settings.call_timeout_ms
        t0 = time.monotonic()
        envelope = await self._dispatch(call, timeout_ms)
        elapsed = time.monotonic() - t0
        outcome = envelope.error_kind or "ok"
        logger.info(f"Tool {call.name}: {elapsed:.1f}s -> {outcome}")
        return envelope

    async def _dispatch(self, call: ToolCall, timeout_ms: int) -> Envelope:
        try:
            tool = self.registry.resolve(call.name)
        except UnknownTool as e:
            logger.warning(f"Unknown tool: {call.name}")
            return error_envelope(f"Error: {e}", "unknown_tool")

        try:
            args = validate_arguments(tool, call.arguments)
            plan = tool.mapper(args, self.settings)
        except ValidationError as e:
            logger.info(f"Tool {tool.name} rejected: {e}")
            return error_envelope(f"Error: invalid arguments for {tool.name}: {e}", "validation")
        except ConfigError as e:
            logger.warning(f"Tool {tool.name} not configured: {e}")
            return error_envelope(f"Error: {tool.name} is not configured: {e}", "config")
        except Exception as e:
            logger.error(f"Tool {tool.name} mapping failed: {e}", exc_info=True)
            return error_envelope(f"Error executing {tool.name}: internal error ({type(e).__name__})", "internal")

        logger.info(f"Executing tool: {tool.name}({', '.join(sorted(args))})")
        # Steps append here as they finish so a timeout can still report them
        outcomes: List[Tuple[Step, InvocationResult]] = []
        try:
            return await asyncio.wait_for(self._execute(tool, args, plan, outcomes), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning(f"Tool {tool.name} exceeded {timeout_ms}ms, cancelled")
            if isinstance(plan, list):
                text = self._step_summary(tool, args, plan, outcomes, interrupted=True)
                return error_envelope(text, "timeout")
            return error_envelope(timeout_text(tool.name, timeout_ms), "timeout")
        except Exception as e:
            logger.error(f"Tool {tool.name} failed: {e}", exc_info=True)
            return error_envelope(f"Error executing {tool.name}: internal error ({type(e).__name__})", "internal")

    async def _execute(self, tool: ToolDef, args: Dict[str, Any], plan, outcomes) -> Envelope:
        if isinstance(plan, list):
            return await self._execute_steps(tool, args, plan, outcomes)
        result = await self.invoke(plan)
        return normalize(result, tool, args, self.settings)

    async def _execute_steps(
        self,
        tool: ToolDef,
        args: Dict[str, Any],
        steps: List[Step],
        outcomes: List[Tuple[Step, InvocationResult]],
    ) -> Envelope:
        """Run every step in order; one failure doesn't stop the rest."""
        for step in steps:
            result = await self.invoke(step.invocation)
            outcomes.append((step, result))
            if not result.succeeded:
                logger.info(f"Tool {tool.name}: step '{step.label}' failed: {result.error}")

        text = self._step_summary(tool, args, steps, outcomes)
        failed = [r for _, r in outcomes if not r.succeeded]
        if any(r.timed_out for r in failed):
            return error_envelope(text, "timeout")
        if failed:
            return error_envelope(text, "backend")
        return Envelope(text=text)

    def _step_summary(self, tool: ToolDef, args: Dict[str, Any], steps: List[Step],
                      outcomes: List[Tuple[Step, InvocationResult]], interrupted: bool = False) -> str:
        """One line per step. An interrupted run marks the running step as timed out and the rest as not run."""
        lines = [tool.success_text.format(**args) if tool.success_text else f"{tool.name}:"]
        for step, result in outcomes:
            if result.succeeded:
                lines.append(f"{step.label}: {STEP_OK}")
            elif result.timed_out:
                lines.append(f"{step.label}: {STEP_FAILED} ({STEP_TIMEOUT})")
            else:
                lines.append(f"{step.label}: {STEP_FAILED} ({result.error})")

        pending = steps[len(outcomes):]
        if interrupted and pending:
            lines.append(f"{pending[0].label}: {STEP_FAILED} ({STEP_TIMEOUT})")
            pending = pending[1:]
        for step in pending:
            lines.append(f"{step.label}: {STEP_NOT_RUN}")
        return "\n".join(lines)

    async def invoke(self, invocation: Invocation) -> InvocationResult:
        async with self._slots:
            if isinstance(invocation, ProcessInvocation):
                return await self.process.run(invocation)
            if isinstance(invocation, HttpInvocation):
                return await self.http.call(invocation)
        raise TypeError(f"Unsupported invocation: {type(invocation).__name__}")
