"""Result normalizer — turns backend results into the {text, is_error} envelope."""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..backends import InvocationResult
from ..config import Settings
from .registry import ToolDef

logger = logging.getLogger(__name__)

NO_OUTPUT = "(no output)"


@dataclass
class Envelope:
    text: str
    is_error: bool = False
    # unknown_tool | validation | config | timeout | backend | internal
    error_kind: Optional[str] = None


def error_envelope(text: str, kind: str) -> Envelope:
    return Envelope(text=text, is_error=True, error_kind=kind)


def timeout_text(tool_name: str, timeout_ms: int) -> str:
    return (
        f"Error executing {tool_name}: timeout after {timeout_ms / 1000:g}s. "
        "The operation may have partially completed on the Jira side; check before retrying."
    )


def failure_envelope(result: InvocationResult, tool_name: str, timeout_ms: int) -> Envelope:
    if result.timed_out:
        return error_envelope(timeout_text(tool_name, timeout_ms), "timeout")
    return error_envelope(f"Error executing {tool_name}: {result.error or 'unknown failure'}", "backend")


def normalize(
    result: InvocationResult,
    tool: ToolDef,
    arguments: Mapping[str, Any],
    settings: Settings,
) -> Envelope:
    if not result.succeeded:
        return failure_envelope(result, tool.name, settings.call_timeout_ms)

    if tool.render is not None:
        try:
            return Envelope(text=tool.render(result.output, arguments, settings))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Render failed for {tool.name}: {e}")
            return error_envelope(f"Error parsing response from {tool.name}: {e}", "backend")
        except OSError as e:
            # Renderers that write files (exports)
            logger.error(f"Render I/O failed for {tool.name}: {e}")
            return error_envelope(f"Error executing {tool.name}: {e}", "backend")

    output = result.output.rstrip()
    if tool.success_text:
        return Envelope(text=tool.success_text.format(output=output, **arguments).rstrip())
    return Envelope(text=output or NO_OUTPUT)


# ──────────────────────────────────────────────────────────
# Structured replies
# ──────────────────────────────────────────────────────────

def _name(obj: Any, key: str = "name", default: str = "None") -> str:
    if isinstance(obj, dict):
        return str(obj.get(key) or default)
    return default


def issue_row(issue: Dict[str, Any]) -> Dict[str, str]:
    """Flatten a REST issue into the fixed set of reported fields."""
    fields = issue.get("fields") or {}
    return {
        "key": str(issue.get("key", "")),
        "summary": str(fields.get("summary") or ""),
        "status": _name(fields.get("status")),
        "type": _name(fields.get("issuetype")),
        "priority": _name(fields.get("priority")),
        "assignee": _name(fields.get("assignee"), "displayName", "Unassigned"),
        "created": str(fields.get("created") or ""),
        "updated": str(fields.get("updated") or ""),
    }


def parse_issues(output: str) -> Tuple[List[Dict[str, Any]], Optional[int]]:
    data = json.loads(output)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    issues = data.get("issues") or []
    return issues, data.get("total")


def _cell(text: str) -> str:
    """Free text flattened to one column: no newlines, no column separators."""
    return " ".join(text.split()).replace("|", "/")


def render_issue_table(output: str, arguments: Mapping[str, Any], settings: Settings) -> str:
    """One issue per line: KEY | status | type | priority | assignee | summary | URL."""
    issues, total = parse_issues(output)
    shown = len(issues)
    header = f"Found {total if total is not None else shown} issues (showing {shown}):"
    lines = [header]
    for issue in issues:
        row = issue_row(issue)
        url = f"{settings.jira_base_url}/browse/{row['key']}"
        cells = [row["key"], row["status"], row["type"], row["priority"], row["assignee"], row["summary"]]
        lines.append(" | ".join([_cell(c) for c in cells] + [url]))
    return "\n".join(lines)
