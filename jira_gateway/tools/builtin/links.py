"""Issue link tools. Listing reads the issuelinks field over REST."""
import json

from ..commands import issue_path, jira_cli, jira_rest
from ..registry import register_tool, ToolParam


@register_tool(
    "jira_issue_link",
    description="Link two issues together (e.g., blocks, relates to, duplicates)",
    params=[
        ToolParam("from_issue", description="Source issue key"),
        ToolParam("to_issue", description="Target issue key"),
        ToolParam("link_type", description="Link type (e.g., 'blocks', 'relates to', 'duplicates', 'is blocked by')"),
    ],
    success_text="✅ Linked {from_issue} to {to_issue}",
    category="link",
)
def issue_link(args, settings):
    return jira_cli(settings, "issue", "link", args["from_issue"], args["to_issue"], "--type", args["link_type"])


def render_links(output, arguments, settings) -> str:
    """One link per line: <relation> <KEY> | status | summary."""
    data = json.loads(output)
    links = (data.get("fields") or {}).get("issuelinks") or []
    key = data.get("key") or arguments["issue_key"]
    if not links:
        return f"{key} has no links"

    lines = [f"{key} has {len(links)} link(s):"]
    for link in links:
        link_type = link.get("type") or {}
        if "outwardIssue" in link:
            relation, other = link_type.get("outward", "relates to"), link["outwardIssue"]
        else:
            relation, other = link_type.get("inward", "relates to"), link.get("inwardIssue") or {}
        fields = other.get("fields") or {}
        status = (fields.get("status") or {}).get("name", "")
        lines.append(f"{relation} {other.get('key', '?')} | {status} | {fields.get('summary', '')}")
    return "\n".join(lines)


@register_tool(
    "jira_issue_links",
    description="List all links for an issue",
    params=[ToolParam("issue_key", description="Jira issue key")],
    render=render_links,
    category="link",
)
def issue_links(args, settings):
    return jira_rest(settings, "GET", issue_path(args["issue_key"]), params={"fields": "issuelinks"})
