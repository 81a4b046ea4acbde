"""Attachment tools."""
import json

from ..commands import issue_path, jira_cli, jira_rest
from ..registry import register_tool, ToolParam


@register_tool(
    "jira_attachment_add",
    description="Add an attachment to an issue",
    params=[
        ToolParam("issue_key", description="Jira issue key"),
        ToolParam("file_path", description="Full path to the file to attach"),
    ],
    success_text="✅ File attached to {issue_key}",
    category="attachment",
)
def attachment_add(args, settings):
    path = str(settings.resolve_path(args["file_path"]))
    return jira_cli(settings, "issue", "attach", args["issue_key"], path)


def render_attachments(output, arguments, settings) -> str:
    data = json.loads(output)
    attachments = (data.get("fields") or {}).get("attachment") or []
    key = data.get("key") or arguments["issue_key"]
    if not attachments:
        return f"{key} has no attachments"

    lines = [f"{key} has {len(attachments)} attachment(s):"]
    for a in attachments:
        author = (a.get("author") or {}).get("displayName", "unknown")
        lines.append(
            f"{a.get('filename', '?')} | {a.get('size', 0)} bytes | {a.get('mimeType', '')}"
            f" | {author} | {a.get('created', '')} | {a.get('content', '')}"
        )
    return "\n".join(lines)


@register_tool(
    "jira_attachment_list",
    description="List attachments for an issue",
    params=[ToolParam("issue_key", description="Jira issue key")],
    render=render_attachments,
    category="attachment",
)
def attachment_list(args, settings):
    return jira_rest(settings, "GET", issue_path(args["issue_key"]), params={"fields": "attachment"})
