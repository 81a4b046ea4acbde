"""Reporting tools backed by PowerShell scripts under the project root."""
from ..commands import report_script
from ..registry import register_tool, ToolParam


@register_tool(
    "jira_report_bugs",
    description="Get comprehensive bug report with statistics. Uses custom PowerShell script.",
    params=[
        ToolParam("status", description="Filter by status (comma-separated, e.g., 'Open,In Progress,To Do'). Use 'All' for all statuses.", required=False),
        ToolParam("maxResults", type="number", description="Maximum results (default: 100)", required=False),
        ToolParam("outputFormat", description="Output format: table, csv, or json", required=False),
    ],
    category="report",
)
def report_bugs(args, settings):
    return report_script(settings, settings.bug_report_script, {
        "Status": args.get("status"),
        "MaxResults": args.get("maxResults"),
        "OutputFormat": args.get("outputFormat"),
    })


@register_tool(
    "jira_report_recent_issues",
    description="Get report of all recent issues (last N days) with statistics",
    params=[
        ToolParam("daysBack", type="number", description="Number of days to look back (default: 7)", required=False),
        ToolParam("maxResults", type="number", description="Maximum results (default: 100)", required=False),
    ],
    category="report",
)
def report_recent_issues(args, settings):
    return report_script(settings, settings.recent_issues_script, {
        "DaysBack": args.get("daysBack"),
        "MaxResults": args.get("maxResults"),
    })
