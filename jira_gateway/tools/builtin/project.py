"""Project-level tools — projects, epics, boards, components, versions, instance info."""
from ..commands import jira_cli
from ..registry import register_tool, ToolParam

_PROJECT = ToolParam("project", description="Project key")


@register_tool(
    "jira_project_list",
    description="List all Jira projects you have access to",
    category="project",
)
def project_list(args, settings):
    return jira_cli(settings, "project", "list", "--plain")


@register_tool(
    "jira_epic_list",
    description="List epics in a project",
    params=[ToolParam("project", description="Project key", required=False)],
    category="project",
)
def epic_list(args, settings):
    argv = ["epic", "list", "--plain"]
    if args.get("project"):
        argv += ["-p", args["project"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_board_list",
    description="List all boards",
    params=[ToolParam("project", description="Filter by project key (optional)", required=False)],
    category="project",
)
def board_list(args, settings):
    argv = ["board", "list", "--plain"]
    if args.get("project"):
        argv += ["-p", args["project"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_component_list",
    description="List components in a project",
    params=[_PROJECT],
    category="project",
)
def component_list(args, settings):
    return jira_cli(settings, "component", "list", "-p", args["project"], "--plain")


@register_tool(
    "jira_component_add",
    description="Add a new component to a project",
    params=[
        _PROJECT,
        ToolParam("name", description="Component name"),
        ToolParam("description", description="Component description (optional)", required=False),
        ToolParam("lead", description="Component lead username (optional)", required=False),
    ],
    success_text="✅ Component '{name}' added to {project}",
    category="project",
)
def component_add(args, settings):
    argv = ["component", "add", args["name"], "-p", args["project"]]
    if args.get("description"):
        argv += ["-d", args["description"]]
    if args.get("lead"):
        argv += ["-l", args["lead"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_version_list",
    description="List versions/releases in a project",
    params=[_PROJECT],
    category="project",
)
def version_list(args, settings):
    return jira_cli(settings, "version", "list", "-p", args["project"], "--plain")


@register_tool(
    "jira_version_create",
    description="Create a new version/release in a project",
    params=[
        _PROJECT,
        ToolParam("name", description="Version name (e.g., '1.0.0', 'Sprint 42')"),
        ToolParam("description", description="Version description (optional)", required=False),
        ToolParam("release_date", description="Planned release date (optional, format: YYYY-MM-DD)", required=False),
    ],
    success_text="✅ Version '{name}' created in {project}",
    category="project",
)
def version_create(args, settings):
    argv = ["version", "create", args["name"], "-p", args["project"]]
    if args.get("description"):
        argv += ["-d", args["description"]]
    if args.get("release_date"):
        argv += ["-r", args["release_date"]]
    return jira_cli(settings, *argv)


@register_tool(
    "jira_me",
    description="Display information about the configured Jira user",
    category="info",
)
def me(args, settings):
    return jira_cli(settings, "me", "--plain")


@register_tool(
    "jira_serverinfo",
    description="Display information about the Jira instance",
    category="info",
)
def serverinfo(args, settings):
    return jira_cli(settings, "serverinfo", "--plain")
