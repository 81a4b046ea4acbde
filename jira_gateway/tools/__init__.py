"""Tool system — registry, validation, executor, normalizer."""
from .registry import register_tool, registry, ToolDef, ToolParam, ToolRegistry, Step
from .normalizer import Envelope
from .executor import Gateway, ToolCall

# Auto-import builtin tools to trigger @register_tool decorators
from .builtin import *  # noqa
