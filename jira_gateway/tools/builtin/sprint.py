"""Sprint tools — list sprints and their issues, move issues in and out."""
from ...errors import ValidationError
from ..commands import jira_cli, jql_value, split_list
from ..registry import register_tool, ToolParam

_BOARD = ToolParam("board_name", description="Board name (optional)", required=False)


@register_tool(
    "jira_sprint_list",
    description="List sprints for a board",
    params=[
        ToolParam("board_name", description="Board name", required=False),
        ToolParam("state", description="Sprint state: active, future, closed, or all", required=False),
    ],
    category="sprint",
)
def sprint_list(args, settings):
    argv = ["sprint", "list"]
    if args.get("board_name"):
        argv += ["--board", args["board_name"]]
    if args.get("state"):
        argv += ["--state", args["state"]]
    argv.append("--plain")
    return jira_cli(settings, *argv)


@register_tool(
    "jira_sprint_issues",
    description="Get all issues in a specific sprint",
    params=[
        ToolParam("sprint_name", description="Sprint name"),
        ToolParam("board_name", description="Board name", required=False),
    ],
    category="sprint",
)
def sprint_issues(args, settings):
    # board_name is accepted for symmetry with sprint_list; JQL resolves sprints by name
    jql = f"sprint = {jql_value(args['sprint_name'])}"
    return jira_cli(settings, "issue", "list", "-q", jql, "--plain")


def _issue_keys(args):
    keys = split_list(args["issue_keys"])
    if not keys:
        raise ValidationError("issue_keys", "must name at least one issue")
    return keys


def _sprint_move(action, args, settings):
    argv = ["sprint", action, args["sprint_name"], *_issue_keys(args)]
    if args.get("board_name"):
        argv += ["--board", args["board_name"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_sprint_add_issue",
    description="Add issues to a sprint",
    params=[
        ToolParam("sprint_name", description="Sprint name"),
        ToolParam("issue_keys", description="Issue keys to add (comma-separated, e.g., 'PROJ-1,PROJ-2')"),
        _BOARD,
    ],
    success_text="✅ Issues added to sprint '{sprint_name}'",
    category="sprint",
)
def sprint_add_issue(args, settings):
    return _sprint_move("add", args, settings)


@register_tool(
    "jira_sprint_remove_issue",
    description="Remove issues from a sprint",
    params=[
        ToolParam("sprint_name", description="Sprint name"),
        ToolParam("issue_keys", description="Issue keys to remove (comma-separated)"),
        _BOARD,
    ],
    success_text="✅ Issues removed from sprint '{sprint_name}'",
    category="sprint",
)
def sprint_remove_issue(args, settings):
    return _sprint_move("remove", args, settings)
