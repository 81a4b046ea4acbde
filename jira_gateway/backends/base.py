"""Invocation requests and results shared by the backends."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

TIMEOUT = "timeout"

# Diagnostics carried in InvocationResult.error are cut to this length
MAX_DIAGNOSTIC_CHARS = 500


@dataclass(frozen=True)
class ProcessInvocation:
    program: str
    arguments: List[str]
    env: Dict[str, str] = field(default_factory=dict)  # overlay on os.environ
    timeout_ms: int = 60000
    max_output_bytes: int = 10 * 1024 * 1024
    cwd: Optional[str] = None


@dataclass(frozen=True)
class HttpInvocation:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    timeout_ms: int = 60000


Invocation = Union[ProcessInvocation, HttpInvocation]


@dataclass
class InvocationResult:
    succeeded: bool
    output: str = ""
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def timed_out(self) -> bool:
        return not self.succeeded and self.error == TIMEOUT

    @classmethod
    def ok(cls, output: str, status_code: Optional[int] = None) -> "InvocationResult":
        return cls(succeeded=True, output=output, status_code=status_code)

    @classmethod
    def failed(cls, error: str, status_code: Optional[int] = None) -> "InvocationResult":
        return cls(succeeded=False, error=truncate(error), status_code=status_code)


def truncate(text: str, limit: int = MAX_DIAGNOSTIC_CHARS) -> str:
    text = text.strip()
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text
