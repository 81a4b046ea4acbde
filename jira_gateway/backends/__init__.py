"""Invocation backends — external processes and HTTP requests."""
from .base import (
    ProcessInvocation, HttpInvocation, Invocation, InvocationResult, TIMEOUT,
)
from .process import ProcessBackend
from .http import HttpBackend
