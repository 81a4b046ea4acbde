"""JQL search and export — REST search API with structured replies."""
import csv
import io
import json
import logging

from ...errors import ValidationError
from ..commands import search_jql
from ..normalizer import issue_row, parse_issues, render_issue_table
from ..registry import register_tool, ToolParam

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 100
EXPORT_FORMATS = ("csv", "json")
CSV_COLUMNS = ["Key", "Summary", "Status", "Type", "Priority", "Assignee", "Created", "Updated"]


@register_tool(
    "jira_jql_query",
    description="Execute a custom JQL query. Very powerful for complex searches. Returns matching issues.",
    params=[
        ToolParam("jql", description="JQL query string (e.g., 'project = GVNS4 AND type = Bug AND status = \"To Do\"')"),
        ToolParam("maxResults", type="number", description="Maximum results to return (default: 100)", required=False),
    ],
    render=render_issue_table,
    category="search",
)
def jql_query(args, settings):
    return search_jql(settings, args["jql"], args.get("maxResults") or DEFAULT_MAX_RESULTS)


def issues_to_csv(issues) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for issue in issues:
        row = issue_row(issue)
        writer.writerow([
            row["key"], row["summary"], row["status"], row["type"],
            row["priority"], row["assignee"], row["created"], row["updated"],
        ])
    return buf.getvalue()


def render_export(output: str, arguments, settings) -> str:
    issues, _ = parse_issues(output)
    if arguments["format"].strip().lower() == "json":
        content = json.dumps(issues, indent=2, ensure_ascii=False)
    else:
        content = issues_to_csv(issues)

    output_file = arguments.get("output_file")
    if not output_file:
        return content

    path = settings.resolve_path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Export: wrote {len(issues)} issues to {path}")
    return f"✅ Exported {len(issues)} issues to {path}"


@register_tool(
    "jira_issue_export",
    description="Export issues to CSV or JSON format",
    params=[
        ToolParam("jql", description="JQL query to filter issues"),
        ToolParam("format", description="Export format: 'csv' or 'json'"),
        ToolParam("output_file", description="Output file path (optional, will print to console if not provided)", required=False),
        ToolParam("maxResults", type="number", description="Maximum results (default: 100)", required=False),
    ],
    render=render_export,
    category="search",
)
def issue_export(args, settings):
    fmt = args["format"].strip().lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError("format", f"must be one of {', '.join(EXPORT_FORMATS)}")
    return search_jql(settings, args["jql"], args.get("maxResults") or DEFAULT_MAX_RESULTS)
