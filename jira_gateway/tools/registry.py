"""Tool registry — decorator-based tool registration and lookup."""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..backends import Invocation
from ..errors import DuplicateName, UnknownTool

logger = logging.getLogger(__name__)

PARAM_TYPES = ("string", "number")


@dataclass(frozen=True)
class ToolParam:
    name: str
    type: str = "string"
    description: str = ""
    required: bool = True


@dataclass(frozen=True)
class Step:
    """One sub-operation of a multi-step tool."""
    label: str
    invocation: Invocation


Plan = Union[Invocation, List[Step]]
Mapper = Callable[..., Plan]


@dataclass(frozen=True)
class ToolDef:
    name: str
    description: str
    params: Tuple[ToolParam, ...]
    mapper: Mapper
    # Formatted with the arguments and {output} on success
    success_text: str = ""
    # Structured reply: render(output, args, settings) -> text
    render: Optional[Callable[..., str]] = None
    category: str = ""

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema advertised to protocol clients."""
        return {
            "type": "object",
            "properties": {
                p.name: {"type": p.type, "description": p.description}
                for p in self.params
            },
            "required": [p.name for p in self.params if p.required],
        }


class ToolRegistry:
    """Ordered catalog of tools keyed by name. Read-only once the server starts."""

    def __init__(self):
        self._tools: Dict[str, ToolDef] = {}

    def register(self, tool: ToolDef) -> ToolDef:
        if tool.name in self._tools:
            raise DuplicateName(tool.name)
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")
        return tool

    def resolve(self, name: str) -> ToolDef:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownTool(name)
        return tool

    def list(self) -> List[ToolDef]:
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def verify(self) -> None:
        """Check the catalog once at startup: one descriptor and one mapper per tool."""
        problems = []
        for name, tool in self._tools.items():
            if tool.name != name:
                problems.append(f"{name}: registered under a different name ({tool.name})")
            if not callable(tool.mapper):
                problems.append(f"{name}: mapper is not callable")
            seen = set()
            for p in tool.params:
                if p.name in seen:
                    problems.append(f"{name}: duplicate parameter {p.name}")
                seen.add(p.name)
                if p.type not in PARAM_TYPES:
                    problems.append(f"{name}: parameter {p.name} has unsupported type {p.type!r}")
        mappers: Dict[int, str] = {}
        for name, tool in self._tools.items():
            other = mappers.setdefault(id(tool.mapper), name)
            if other != name:
                problems.append(f"{name}: shares its mapper with {other}")
        if problems:
            raise RuntimeError("Invalid tool catalog: " + "; ".join(problems))
        logger.info(f"Tool catalog verified: {len(self._tools)} tools")


registry = ToolRegistry()


def register_tool(
    name: str,
    description: str = "",
    params: Optional[Sequence[ToolParam]] = None,
    success_text: str = "",
    render: Optional[Callable[..., str]] = None,
    category: str = "",
    target: Optional[ToolRegistry] = None,
):
    """Decorator to register a tool's mapping function."""
    def decorator(func):
        tool = ToolDef(
            name=name,
            description=description or (func.__doc__ or "").strip(),
            params=tuple(params or ()),
            mapper=func,
            success_text=success_text,
            render=render,
            category=category,
        )
        (target if target is not None else registry).register(tool)
        return func
    return decorator

