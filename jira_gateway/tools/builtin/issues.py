"""Issue tools — list, view, create, update, delete, clone, subtasks."""
import logging

from ...errors import ValidationError
from ..commands import jira_cli, jql_value
from ..registry import register_tool, ToolParam, Step

logger = logging.getLogger(__name__)

ISSUE_KEY = ToolParam("issue_key", description="Jira issue key (e.g., 'PROJ-123')")

DEFAULT_LIST_LIMIT = 50


def issue_list_jql(args) -> str:
    filters = []
    if args.get("project"):
        filters.append(f"project = {jql_value(args['project'])}")
    if args.get("assignee"):
        filters.append(f"assignee = {jql_value(args['assignee'])}")
    if args.get("status"):
        filters.append(f"status = {jql_value(args['status'])}")
    if args.get("type"):
        filters.append(f"type = {jql_value(args['type'])}")
    return " AND ".join(filters) if filters else "order by updated DESC"


@register_tool(
    "jira_issue_list",
    description="List Jira issues with filters (project, assignee, status, type). Uses Jira CLI.",
    params=[
        ToolParam("project", description="Project key (e.g., 'GVNS4', 'ARSW3')", required=False),
        ToolParam("assignee", description="Assignee username or 'currentUser()'", required=False),
        ToolParam("status", description="Issue status (e.g., 'To Do', 'In Progress', 'Done')", required=False),
        ToolParam("type", description="Issue type (e.g., 'Bug', 'Story', 'Task')", required=False),
        ToolParam("limit", type="number", description="Maximum number of results (default: 50)", required=False),
    ],
    category="issue",
)
def issue_list(args, settings):
    limit = int(args.get("limit") or DEFAULT_LIST_LIMIT)
    return jira_cli(settings, "issue", "list", "-q", issue_list_jql(args), "--plain", "-n", str(limit))


@register_tool(
    "jira_issue_get",
    description="Get detailed information about a specific Jira issue by key (e.g., 'GVNS4-3475')",
    params=[ISSUE_KEY],
    category="issue",
)
def issue_get(args, settings):
    return jira_cli(settings, "issue", "view", args["issue_key"], "--plain")


@register_tool(
    "jira_issue_create",
    description="Create a new Jira issue. Returns the created issue key.",
    params=[
        ToolParam("project", description="Project key"),
        ToolParam("type", description="Issue type (Bug, Story, Task, etc.)"),
        ToolParam("summary", description="Issue summary/title"),
        ToolParam("description", description="Issue description", required=False),
        ToolParam("priority", description="Priority (Highest, High, Medium, Low, Lowest)", required=False),
        ToolParam("assignee", description="Assignee username", required=False),
    ],
    success_text="✅ Issue created successfully!\n\n{output}",
    category="issue",
)
def issue_create(args, settings):
    argv = ["issue", "create", "-t", args["type"], "-s", args["summary"], "-p", args["project"]]
    if args.get("description"):
        argv += ["-b", args["description"]]
    if args.get("priority"):
        argv += ["--priority", args["priority"]]
    if args.get("assignee"):
        argv += ["-a", args["assignee"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_issue_update",
    description="Update an existing Jira issue (status, assignee, priority, etc.)",
    params=[
        ISSUE_KEY,
        ToolParam("status", description="New status", required=False),
        ToolParam("assignee", description="New assignee", required=False),
        ToolParam("priority", description="New priority", required=False),
        ToolParam("comment", description="Add a comment", required=False),
    ],
    success_text="Issue {issue_key} updated:",
    category="issue",
)
def issue_update(args, settings):
    key = args["issue_key"]
    steps = []
    if args.get("status"):
        steps.append(Step("Status transition", jira_cli(settings, "issue", "move", key, args["status"])))
    if args.get("assignee"):
        steps.append(Step("Assignee update", jira_cli(settings, "issue", "assign", key, args["assignee"])))
    if args.get("priority"):
        steps.append(Step("Priority update", jira_cli(
            settings, "issue", "edit", key, "--priority", args["priority"], "--no-input")))
    if args.get("comment"):
        steps.append(Step("Comment added", jira_cli(settings, "issue", "comment", "add", key, "-m", args["comment"])))
    if not steps:
        raise ValidationError("status", "or one of assignee, priority, comment is required")
    return steps


@register_tool(
    "jira_issue_delete",
    description="Delete a Jira issue (use with caution!)",
    params=[ToolParam("issue_key", description="Jira issue key to delete")],
    success_text="✅ Issue {issue_key} deleted",
    category="issue",
)
def issue_delete(args, settings):
    return jira_cli(settings, "issue", "delete", args["issue_key"], "--force")


@register_tool(
    "jira_issue_clone",
    description="Clone/duplicate an existing issue",
    params=[
        ToolParam("issue_key", description="Jira issue key to clone"),
        ToolParam("summary", description="New summary (optional, will use original if not provided)", required=False),
    ],
    success_text="✅ Issue cloned\n{output}",
    category="issue",
)
def issue_clone(args, settings):
    argv = ["issue", "clone", args["issue_key"]]
    if args.get("summary"):
        argv += ["-s", args["summary"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_issue_transitions",
    description="List available status transitions for an issue",
    params=[ISSUE_KEY],
    category="issue",
)
def issue_transitions(args, settings):
    return jira_cli(settings, "issue", "transitions", args["issue_key"], "--plain")


@register_tool(
    "jira_subtask_create",
    description="Create a subtask under a parent issue",
    params=[
        ToolParam("parent_key", description="Parent issue key"),
        ToolParam("summary", description="Subtask summary/title"),
        ToolParam("description", description="Subtask description (optional)", required=False),
        ToolParam("assignee", description="Assignee username (optional)", required=False),
    ],
    success_text="✅ Subtask created under {parent_key}\n{output}",
    category="issue",
)
def subtask_create(args, settings):
    argv = ["issue", "create", "-t", "Subtask", "-s", args["summary"], "--parent", args["parent_key"]]
    if args.get("description"):
        argv += ["-b", args["description"]]
    if args.get("assignee"):
        argv += ["-a", args["assignee"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_open",
    description="Open a Jira issue in the default browser",
    params=[ISSUE_KEY],
    success_text="Opened {issue_key} in browser",
    category="issue",
)
def issue_open(args, settings):
    return jira_cli(settings, "open", args["issue_key"])
