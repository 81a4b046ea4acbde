"""Watch & vote tools."""
from ..commands import jira_cli
from ..registry import register_tool, ToolParam

_KEY = [ToolParam("issue_key", description="Jira issue key")]


@register_tool(
    "jira_issue_watch",
    description="Watch an issue to receive notifications",
    params=_KEY,
    success_text="✅ Now watching {issue_key}",
    category="watch",
)
def issue_watch(args, settings):
    return jira_cli(settings, "issue", "watch", args["issue_key"])


@register_tool(
    "jira_issue_unwatch",
    description="Unwatch an issue to stop receiving notifications",
    params=_KEY,
    success_text="✅ Stopped watching {issue_key}",
    category="watch",
)
def issue_unwatch(args, settings):
    return jira_cli(settings, "issue", "unwatch", args["issue_key"])


@register_tool(
    "jira_issue_vote",
    description="Vote for an issue",
    params=_KEY,
    success_text="✅ Voted for {issue_key}",
    category="watch",
)
def issue_vote(args, settings):
    return jira_cli(settings, "issue", "vote", "up", args["issue_key"])


@register_tool(
    "jira_issue_unvote",
    description="Remove your vote from an issue",
    params=_KEY,
    success_text="✅ Removed vote from {issue_key}",
    category="watch",
)
def issue_unvote(args, settings):
    return jira_cli(settings, "issue", "vote", "down", args["issue_key"])
