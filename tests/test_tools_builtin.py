"""Tests for builtin tools — argv mapping, JQL building, REST requests, exports."""
import base64
import csv
import io
import json
from urllib.parse import parse_qs, urlsplit

import pytest

from conftest import BASE_URL
from jira_gateway.backends import HttpInvocation, InvocationResult, ProcessInvocation
from jira_gateway.errors import ConfigError, ValidationError
from jira_gateway.tools import ToolCall, registry
from jira_gateway.tools.commands import issue_path, jql_value, report_script, split_list
from jira_gateway.tools.validation import validate_arguments


def plan(tool_name, settings, **args):
    tool = registry.resolve(tool_name)
    return tool.mapper(validate_arguments(tool, args), settings)


def query(invocation):
    return {k: v[0] for k, v in parse_qs(urlsplit(invocation.url).query).items()}


# ──────────────────────────────────────────────────────────
# Command helpers
# ──────────────────────────────────────────────────────────

class TestHelpers:
    def test_split_list(self):
        assert split_list(" a, b ,,c ,") == ["a", "b", "c"]
        assert split_list(" , ") == []

    def test_jql_value_quotes(self):
        assert jql_value("In Progress") == '"In Progress"'
        assert jql_value('say "hi"') == '"say \\"hi\\""'
        assert jql_value("back\\slash") == '"back\\\\slash"'

    def test_jql_value_function_passthrough(self):
        assert jql_value("currentUser()") == "currentUser()"
        assert jql_value("currentUser() OR 1=1") == '"currentUser() OR 1=1"'

    def test_issue_path_encodes(self):
        assert issue_path("PROJ-1") == "/rest/api/3/issue/PROJ-1"
        assert issue_path("../admin?x=1") == "/rest/api/3/issue/..%2Fadmin%3Fx%3D1"

    def test_report_script(self, settings):
        inv = report_script(settings, "Local/r.ps1", {"Status": "Open", "MaxResults": 100.0, "Skip": None})
        assert inv.program == "pwsh"
        assert inv.arguments[:4] == ["-NoProfile", "-ExecutionPolicy", "Bypass", "-File"]
        assert inv.arguments[4].endswith("r.ps1")
        assert inv.arguments[5:] == ["-Status", "Open", "-MaxResults", "100"]
        assert inv.cwd == settings.project_root


# ──────────────────────────────────────────────────────────
# CLI-backed tools
# ──────────────────────────────────────────────────────────

class TestCliMappings:
    def test_cli_env_overlay(self, settings):
        inv = plan("jira_me", settings)
        assert isinstance(inv, ProcessInvocation)
        assert inv.program == "jira"
        assert inv.arguments == ["me", "--plain"]
        assert inv.env["JIRA_API_TOKEN"] == "secret-token"
        assert "JIRA_CONFIG_FILE" not in inv.env

    def test_cli_config_file_discovered(self, settings, tmp_path):
        (tmp_path / ".jira-config.yml").write_text("server: x\n")
        inv = plan("jira_serverinfo", settings)
        assert inv.env["JIRA_CONFIG_FILE"] == str(tmp_path / ".jira-config.yml")

    def test_issue_list_default(self, settings):
        inv = plan("jira_issue_list", settings)
        assert inv.arguments == ["issue", "list", "-q", "order by updated DESC", "--plain", "-n", "50"]

    def test_issue_list_filters(self, settings):
        inv = plan("jira_issue_list", settings, project="PROJ", assignee="currentUser()",
                   status="In Progress", limit=10)
        assert inv.arguments[3] == 'project = "PROJ" AND assignee = currentUser() AND status = "In Progress"'
        assert inv.arguments[-1] == "10"

    def test_issue_create(self, settings):
        inv = plan("jira_issue_create", settings, project="PROJ", type="Bug", summary="Crash",
                   priority="High")
        assert inv.arguments == ["issue", "create", "-t", "Bug", "-s", "Crash", "-p", "PROJ", "--priority", "High"]

    def test_issue_update_priority_step(self, settings):
        steps = plan("jira_issue_update", settings, issue_key="PROJ-1", priority="Low")
        assert [s.label for s in steps] == ["Priority update"]
        assert steps[0].invocation.arguments == ["issue", "edit", "PROJ-1", "--priority", "Low", "--no-input"]

    def test_issue_update_requires_a_field(self, settings):
        with pytest.raises(ValidationError):
            plan("jira_issue_update", settings, issue_key="PROJ-1")

    def test_issue_delete(self, settings):
        assert plan("jira_issue_delete", settings, issue_key="PROJ-1").arguments == [
            "issue", "delete", "PROJ-1", "--force"]

    def test_subtask_create(self, settings):
        inv = plan("jira_subtask_create", settings, parent_key="PROJ-1", summary="Part", assignee="ada")
        assert inv.arguments == ["issue", "create", "-t", "Subtask", "-s", "Part", "--parent", "PROJ-1", "-a", "ada"]

    def test_worklog_add(self, settings):
        inv = plan("jira_worklog_add", settings, issue_key="PROJ-1", time_spent="1d 4h",
                   comment="review", date="2024-05-01")
        assert inv.arguments == ["issue", "worklog", "add", "PROJ-1", "--time-spent", "1d 4h",
                                 "-m", "review", "--started", "2024-05-01"]

    def test_vote_and_unvote(self, settings):
        assert plan("jira_issue_vote", settings, issue_key="P-1").arguments == ["issue", "vote", "up", "P-1"]
        assert plan("jira_issue_unvote", settings, issue_key="P-1").arguments == ["issue", "vote", "down", "P-1"]

    def test_issue_link(self, settings):
        inv = plan("jira_issue_link", settings, from_issue="P-1", to_issue="P-2", link_type="is blocked by")
        assert inv.arguments == ["issue", "link", "P-1", "P-2", "--type", "is blocked by"]

    def test_label_remove(self, settings):
        inv = plan("jira_label_remove", settings, issue_key="P-1", labels="x,  y")
        assert inv.arguments == ["issue", "label", "remove", "P-1", "x", "y"]

    def test_labels_must_not_be_only_commas(self, settings):
        with pytest.raises(ValidationError):
            plan("jira_label_add", settings, issue_key="P-1", labels=" , ,")

    def test_component_add(self, settings):
        inv = plan("jira_component_add", settings, project="PROJ", name="API", lead="ada")
        assert inv.arguments == ["component", "add", "API", "-p", "PROJ", "-l", "ada"]

    def test_version_create(self, settings):
        inv = plan("jira_version_create", settings, project="PROJ", name="1.0.0", release_date="2024-06-01")
        assert inv.arguments == ["version", "create", "1.0.0", "-p", "PROJ", "-r", "2024-06-01"]

    def test_epic_list_with_project(self, settings):
        assert plan("jira_epic_list", settings, project="PROJ").arguments == ["epic", "list", "--plain", "-p", "PROJ"]

    def test_sprint_list(self, settings):
        inv = plan("jira_sprint_list", settings, board_name="Team A", state="active")
        assert inv.arguments == ["sprint", "list", "--board", "Team A", "--state", "active", "--plain"]

    def test_sprint_issues_quotes_name(self, settings):
        inv = plan("jira_sprint_issues", settings, sprint_name='Sprint "42"', board_name="Team A")
        assert inv.arguments == ["issue", "list", "-q", 'sprint = "Sprint \\"42\\""', "--plain"]

    def test_sprint_add_issue(self, settings):
        inv = plan("jira_sprint_add_issue", settings, sprint_name="Sprint 42", issue_keys="P-1, P-2")
        assert inv.arguments == ["sprint", "add", "Sprint 42", "P-1", "P-2"]

    def test_sprint_remove_issue_with_board(self, settings):
        inv = plan("jira_sprint_remove_issue", settings, sprint_name="S", issue_keys="P-1", board_name="B")
        assert inv.arguments == ["sprint", "remove", "S", "P-1", "--board", "B"]

    def test_attachment_add_resolves_path(self, settings, tmp_path):
        inv = plan("jira_attachment_add", settings, issue_key="P-1", file_path="logs/app.log")
        assert inv.arguments == ["issue", "attach", "P-1", str(tmp_path / "logs" / "app.log")]

    def test_report_bugs(self, settings):
        inv = plan("jira_report_bugs", settings, status="Open,In Progress", maxResults=20)
        assert inv.program == "pwsh"
        assert inv.arguments[4].endswith("get-jira-bugs.ps1")
        assert inv.arguments[5:] == ["-Status", "Open,In Progress", "-MaxResults", "20"]

    def test_report_recent_issues(self, settings):
        inv = plan("jira_report_recent_issues", settings, daysBack=7)
        assert inv.arguments[4].endswith("get-all-issues.ps1")
        assert inv.arguments[5:] == ["-DaysBack", "7"]


# ──────────────────────────────────────────────────────────
# REST-backed tools
# ──────────────────────────────────────────────────────────

ISSUES = {
    "total": 1,
    "issues": [{
        "key": "PROJ-7",
        "fields": {
            "summary": "Export me, please",
            "status": {"name": "Done"},
            "issuetype": {"name": "Task"},
            "priority": {"name": "Low"},
            "assignee": None,
            "created": "2024-01-01",
            "updated": "2024-01-03",
        },
    }],
}


class TestRestMappings:
    def test_jql_query_request(self, settings):
        inv = plan("jira_jql_query", settings, jql='project = "X" AND text ~ "a&b"')
        assert isinstance(inv, HttpInvocation)
        assert inv.method == "GET"
        assert inv.url.startswith(f"{BASE_URL}/rest/api/3/search/jql?")
        q = query(inv)
        assert q["jql"] == 'project = "X" AND text ~ "a&b"'
        assert q["maxResults"] == "100"
        assert "summary" in q["fields"]

    def test_basic_auth_header(self, settings):
        inv = plan("jira_jql_query", settings, jql="x", maxResults=5)
        token = base64.b64encode(b"bot@example.com:secret-token").decode()
        assert inv.headers["Authorization"] == f"Basic {token}"
        assert query(inv)["maxResults"] == "5"

    def test_missing_credentials(self, settings):
        unconfigured = settings.model_copy(update={"jira_username": ""})
        with pytest.raises(ConfigError, match="JIRA_USERNAME"):
            plan("jira_jql_query", unconfigured, jql="x")

    def test_issue_links_request(self, settings):
        inv = plan("jira_issue_links", settings, issue_key="PROJ-1")
        assert urlsplit(inv.url).path == "/rest/api/3/issue/PROJ-1"
        assert query(inv) == {"fields": "issuelinks"}

    def test_export_rejects_format(self, settings):
        with pytest.raises(ValidationError, match="format"):
            plan("jira_issue_export", settings, jql="x", format="xml")


class TestStructuredReplies:
    @pytest.mark.asyncio
    async def test_export_csv_inline(self, gateway):
        gateway.http.handler = lambda inv: InvocationResult.ok(json.dumps(ISSUES), 200)
        env = await gateway.dispatch(ToolCall("jira_issue_export", {"jql": "x", "format": "CSV"}))
        assert env.is_error is False
        rows = list(csv.reader(io.StringIO(env.text)))
        assert rows[0] == ["Key", "Summary", "Status", "Type", "Priority", "Assignee", "Created", "Updated"]
        assert rows[1] == ["PROJ-7", "Export me, please", "Done", "Task", "Low", "Unassigned",
                           "2024-01-01", "2024-01-03"]

    @pytest.mark.asyncio
    async def test_export_json_to_file(self, gateway, tmp_path):
        gateway.http.handler = lambda inv: InvocationResult.ok(json.dumps(ISSUES), 200)
        env = await gateway.dispatch(ToolCall("jira_issue_export", {
            "jql": "x", "format": "json", "output_file": "out/issues.json",
        }))
        assert env.is_error is False
        target = tmp_path / "out" / "issues.json"
        assert str(target) in env.text
        assert json.loads(target.read_text(encoding="utf-8"))[0]["key"] == "PROJ-7"

    @pytest.mark.asyncio
    async def test_issue_links_rendered(self, gateway):
        reply = {
            "key": "PROJ-1",
            "fields": {"issuelinks": [
                {"type": {"outward": "blocks", "inward": "is blocked by"},
                 "outwardIssue": {"key": "PROJ-2", "fields": {"summary": "B", "status": {"name": "Open"}}}},
                {"type": {"outward": "blocks", "inward": "is blocked by"},
                 "inwardIssue": {"key": "PROJ-3", "fields": {"summary": "C", "status": {"name": "Done"}}}},
            ]},
        }
        gateway.http.handler = lambda inv: InvocationResult.ok(json.dumps(reply), 200)
        env = await gateway.dispatch(ToolCall("jira_issue_links", {"issue_key": "PROJ-1"}))
        assert env.text.splitlines() == [
            "PROJ-1 has 2 link(s):",
            "blocks PROJ-2 | Open | B",
            "is blocked by PROJ-3 | Done | C",
        ]

    @pytest.mark.asyncio
    async def test_attachment_list_empty(self, gateway):
        gateway.http.handler = lambda inv: InvocationResult.ok('{"key": "PROJ-1", "fields": {}}', 200)
        env = await gateway.dispatch(ToolCall("jira_attachment_list", {"issue_key": "PROJ-1"}))
        assert env.text == "PROJ-1 has no attachments"

    @pytest.mark.asyncio
    async def test_attachment_list(self, gateway):
        reply = {"key": "PROJ-1", "fields": {"attachment": [{
            "filename": "trace.log", "size": 2048, "mimeType": "text/plain",
            "author": {"displayName": "Ada"}, "created": "2024-01-01", "content": "https://x/att/1",
        }]}}
        gateway.http.handler = lambda inv: InvocationResult.ok(json.dumps(reply), 200)
        env = await gateway.dispatch(ToolCall("jira_attachment_list", {"issue_key": "PROJ-1"}))
        lines = env.text.splitlines()
        assert lines[0] == "PROJ-1 has 1 attachment(s):"
        assert lines[1] == "trace.log | 2048 bytes | text/plain | Ada | 2024-01-01 | https://x/att/1"

    @pytest.mark.asyncio
    async def test_create_includes_output(self, gateway):
        gateway.process.handler = lambda inv: InvocationResult.ok("PROJ-9\nhttps://x/browse/PROJ-9\n")
        env = await gateway.dispatch(ToolCall("jira_issue_create", {
            "project": "PROJ", "type": "Task", "summary": "New",
        }))
        assert env.text.startswith("✅ Issue created successfully!")
        assert env.text.endswith("https://x/browse/PROJ-9")
