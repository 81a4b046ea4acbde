"""Tests for tools/normalizer.py — envelopes and structured replies."""
import json

import pytest

from jira_gateway.backends import InvocationResult
from jira_gateway.backends.base import TIMEOUT
from jira_gateway.tools.normalizer import (
    NO_OUTPUT, issue_row, normalize, parse_issues, render_issue_table,
)
from jira_gateway.tools.registry import ToolDef, ToolParam


def _tool(**kw):
    return ToolDef("t", "", (ToolParam("issue_key"),), lambda a, s: None, **kw)


SEARCH_REPLY = {
    "total": 42,
    "issues": [
        {
            "key": "PROJ-1",
            "fields": {
                "summary": "Login fails\non Safari",
                "status": {"name": "To Do"},
                "issuetype": {"name": "Bug"},
                "priority": {"name": "High"},
                "assignee": {"displayName": "Ada Lovelace"},
                "created": "2024-01-01T10:00:00.000+0000",
                "updated": "2024-01-02T10:00:00.000+0000",
            },
        },
        {"key": "PROJ-2", "fields": {"summary": "Docs", "assignee": None}},
    ],
}


class TestNormalize:
    def test_raw_output(self, settings):
        env = normalize(InvocationResult.ok("line\n\n"), _tool(), {"issue_key": "A-1"}, settings)
        assert env.is_error is False
        assert env.text == "line"

    def test_empty_output(self, settings):
        env = normalize(InvocationResult.ok("   \n"), _tool(), {"issue_key": "A-1"}, settings)
        assert env.text == NO_OUTPUT

    def test_success_template(self, settings):
        tool = _tool(success_text="✅ Done with {issue_key}\n{output}")
        env = normalize(InvocationResult.ok("details\n"), tool, {"issue_key": "A-1"}, settings)
        assert env.text == "✅ Done with A-1\ndetails"

    def test_failure(self, settings):
        env = normalize(InvocationResult.failed("bad key"), _tool(), {"issue_key": "A-1"}, settings)
        assert env.is_error is True
        assert env.error_kind == "backend"
        assert env.text == "Error executing t: bad key"

    def test_timeout(self, settings):
        env = normalize(InvocationResult.failed(TIMEOUT), _tool(), {"issue_key": "A-1"}, settings)
        assert env.error_kind == "timeout"
        assert "check before retrying" in env.text

    def test_render_parse_error(self, settings):
        tool = _tool(render=render_issue_table)
        env = normalize(InvocationResult.ok("<html>login</html>"), tool, {}, settings)
        assert env.is_error is True
        assert env.text.startswith("Error parsing response from t:")


class TestIssueRows:
    def test_issue_row(self):
        row = issue_row(SEARCH_REPLY["issues"][0])
        assert row["status"] == "To Do"
        assert row["assignee"] == "Ada Lovelace"
        assert row["priority"] == "High"

    def test_missing_fields(self):
        row = issue_row(SEARCH_REPLY["issues"][1])
        assert row["assignee"] == "Unassigned"
        assert row["status"] == "None"
        assert row["created"] == ""

    def test_parse_issues_requires_object(self):
        with pytest.raises(ValueError):
            parse_issues("[]")


class TestRenderIssueTable:
    def test_table(self, settings):
        text = render_issue_table(json.dumps(SEARCH_REPLY), {}, settings)
        lines = text.splitlines()
        assert lines[0] == "Found 42 issues (showing 2):"
        assert lines[1] == (
            "PROJ-1 | To Do | Bug | High | Ada Lovelace | Login fails on Safari | "
            "https://example.atlassian.net/browse/PROJ-1"
        )
        assert lines[2].startswith("PROJ-2 | None | None | None | Unassigned | Docs")

    def test_separator_in_free_text(self, settings):
        reply = {"issues": [{"key": "PROJ-3", "fields": {
            "summary": "Parse a | b  columns",
            "assignee": {"displayName": "Team | Ops"},
        }}]}
        line = render_issue_table(json.dumps(reply), {}, settings).splitlines()[1]
        assert line.count(" | ") == 6
        assert "Parse a / b columns" in line
        assert "Team / Ops" in line

    def test_total_missing(self, settings):
        text = render_issue_table(json.dumps({"issues": []}), {}, settings)
        assert text == "Found 0 issues (showing 0):"
