"""Label tools — labels arrive comma-separated and leave as one argv token each."""
from ...errors import ValidationError
from ..commands import jira_cli, split_list
from ..registry import register_tool, ToolParam


def _labels(args):
    labels = split_list(args["labels"])
    if not labels:
        raise ValidationError("labels", "must name at least one label")
    return labels


@register_tool(
    "jira_label_add",
    description="Add one or more labels to an issue",
    params=[
        ToolParam("issue_key", description="Jira issue key"),
        ToolParam("labels", description="Labels to add (comma-separated, e.g., 'frontend,bug,urgent')"),
    ],
    success_text="✅ Labels added to {issue_key}",
    category="label",
)
def label_add(args, settings):
    return jira_cli(settings, "issue", "label", "add", args["issue_key"], *_labels(args))


@register_tool(
    "jira_label_remove",
    description="Remove one or more labels from an issue",
    params=[
        ToolParam("issue_key", description="Jira issue key"),
        ToolParam("labels", description="Labels to remove (comma-separated)"),
    ],
    success_text="✅ Labels removed from {issue_key}",
    category="label",
)
def label_remove(args, settings):
    return jira_cli(settings, "issue", "label", "remove", args["issue_key"], *_labels(args))
