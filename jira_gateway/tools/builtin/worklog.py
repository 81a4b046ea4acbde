"""Worklog tools — log and list time spent on an issue."""
from ..commands import jira_cli
from ..registry import register_tool, ToolParam


@register_tool(
    "jira_worklog_add",
    description="Add time spent (worklog) to an issue",
    params=[
        ToolParam("issue_key", description="Jira issue key"),
        ToolParam("time_spent", description="Time spent (e.g., '2h', '30m', '1d 4h')"),
        ToolParam("comment", description="Worklog comment/description", required=False),
        ToolParam("date", description="Date of work (optional, format: YYYY-MM-DD)", required=False),
    ],
    success_text="✅ Worklog added to {issue_key}",
    category="worklog",
)
def worklog_add(args, settings):
    argv = ["issue", "worklog", "add", args["issue_key"], "--time-spent", args["time_spent"]]
    if args.get("comment"):
        argv += ["-m", args["comment"]]
    if args.get("date"):
        argv += ["--started", args["date"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_worklog_list",
    description="List worklogs for an issue",
    params=[ToolParam("issue_key", description="Jira issue key")],
    category="worklog",
)
def worklog_list(args, settings):
    return jira_cli(settings, "issue", "worklog", "list", args["issue_key"], "--plain")
