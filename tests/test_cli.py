"""Tests for the linctl command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from linear_cli import auth
from linear_cli.cli import build_parser, main
from linear_cli.output import _strip_ansi


RATE_HEADERS = {
    "X-RateLimit-Requests-Limit": "1500",
    "X-RateLimit-Requests-Remaining": "1200",
    "X-RateLimit-Complexity-Limit": "250000",
    "X-RateLimit-Complexity-Remaining": "100",
    "X-Complexity": "2",
}

ISSUE = {
    "id": "i1",
    "identifier": "ENG-1",
    "title": "Fix login",
    "priority": 2,
    "state": {"name": "Todo", "type": "unstarted"},
    "assignee": {"name": "Ada"},
    "team": {"key": "ENG"},
    "createdAt": "2024-05-01T10:00:00.000Z",
    "updatedAt": "2024-05-02T10:00:00.000Z",
}

TEAM_CONTEXT = {
    "team": {
        "id": "team-1",
        "key": "ENG",
        "name": "Engineering",
        "states": {"nodes": [{"id": "state-todo", "name": "Todo", "type": "unstarted"}]},
        "labels": {"nodes": [{"id": "label-bug", "name": "Bug"}]},
        "members": {"nodes": [{"id": "user-2", "email": "grace@example.com"}]},
    }
}


def run(linear: FakeLinear, *argv: str) -> int:
    return main(list(argv), client_factory=lambda settings: linear.client())


def json_out(capsys: pytest.CaptureFixture[str]):
    return json.loads(capsys.readouterr().out)


class TestGlobalFlags:
    """Test flags and settings shared by every command."""

    def test_subcommand_is_required(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args([])
        assert excinfo.value.code == 2

    def test_flags_accepted_before_and_after_subcommand(self) -> None:
        parser = build_parser()
        assert parser.parse_args(["--json", "issue", "list"]).json is True
        assert parser.parse_args(["issue", "list", "-j"]).json is True
        assert not hasattr(parser.parse_args(["issue", "list"]), "json")

    def test_settings_file_selects_output_mode(
        self, linear: FakeLinear, isolated_home: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (isolated_home / ".linctl.yaml").write_text("json: true\n", encoding="utf-8")
        linear.reply({"viewer": {"id": "u1", "name": "Ada", "email": "ada@example.com"}})

        assert run(linear, "user", "me") == 0
        assert json_out(capsys)["name"] == "Ada"

    def test_missing_config_file_is_reported(
        self, linear: FakeLinear, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        result = run(linear, "--config", str(tmp_path / "missing.yaml"), "-p", "team", "list")

        assert result == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_api_errors_become_exit_code_one(
        self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]
    ) -> None:
        linear.reply(status=500, body="Internal Server Error")

        assert run(linear, "--json", "team", "list") == 1
        assert "status 500" in json_out(capsys)["error"]


class TestIssueCommands:
    """Test issue listing and editing end to end."""

    def test_list_applies_default_filter(
        self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]
    ) -> None:
        linear.reply({"issues": {"nodes": [ISSUE], "pageInfo": {"hasNextPage": False}}})

        assert run(linear, "issue", "list", "--team", "ENG", "--assignee", "me", "--json") == 0

        variables = linear.last_body["variables"]
        assert variables["first"] == 50
        assert variables["filter"]["team"] == {"key": {"eq": "ENG"}}
        assert variables["filter"]["assignee"] == {"isMe": {"eq": True}}
        assert variables["filter"]["state"] == {"type": {"nin": ["completed", "canceled"]}}
        assert "gte" in variables["filter"]["createdAt"]
        assert "orderBy" not in variables
        assert json_out(capsys) == [ISSUE]

    def test_list_without_default_filters(self, linear: FakeLinear) -> None:
        linear.reply({"issues": {"nodes": []}})

        run(
            linear, "issue", "list", "--include-completed", "--newer-than", "all_time",
            "--sort", "updated", "--limit", "5",
        )

        assert linear.last_body["variables"] == {"first": 5, "orderBy": "updatedAt"}

    def test_list_plaintext(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"issues": {"nodes": [ISSUE]}})

        run(linear, "-p", "issue", "list")

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("Identifier\tTitle")
        assert lines[1].split("\t")[:3] == ["ENG-1", "Fix login", "Todo"]

    def test_list_table_mentions_more_results(
        self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]
    ) -> None:
        linear.reply({"issues": {"nodes": [ISSUE], "pageInfo": {"hasNextPage": True}}})

        run(linear, "issue", "list")

        out = _strip_ansi(capsys.readouterr().out)
        assert "ENG-1" in out
        assert "1 issues" in out
        assert "Use --limit to see more results" in out

    def test_empty_list(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"issues": {"nodes": []}})

        assert run(linear, "--json", "issue", "list") == 0
        assert json_out(capsys) == {"info": "No issues found"}

    def test_invalid_newer_than(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(linear, "-p", "issue", "list", "--newer-than", "someday") == 1
        assert "Invalid newer-than value" in capsys.readouterr().err
        assert linear.requests == []

    def test_create_resolves_names_through_team(
        self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]
    ) -> None:
        linear.reply(TEAM_CONTEXT)
        linear.reply({"issueCreate": {"success": True, "issue": ISSUE}})

        result = run(
            linear, "issue", "create", "--title", "Fix login", "--team", "ENG",
            "--state", "todo", "--labels", "bug", "--assignee", "grace@example.com", "--json",
        )

        assert result == 0
        assert linear.last_body["variables"]["input"] == {
            "title": "Fix login",
            "teamId": "team-1",
            "priority": 3,
            "stateId": "state-todo",
            "labelIds": ["label-bug"],
            "assigneeId": "user-2",
        }
        assert json_out(capsys)["identifier"] == "ENG-1"

    def test_create_uses_default_team_setting(
        self, linear: FakeLinear, isolated_home: Path
    ) -> None:
        (isolated_home / ".linctl.yaml").write_text("default_team: ENG\n", encoding="utf-8")
        linear.reply(TEAM_CONTEXT)
        linear.reply({"issueCreate": {"success": True, "issue": ISSUE}})

        assert run(linear, "issue", "create", "--title", "Fix login") == 0
        assert linear.bodies[0]["variables"] == {"key": "ENG"}

    def test_create_without_team_fails(self, linear: FakeLinear) -> None:
        assert run(linear, "issue", "create", "--title", "Orphan") == 1
        assert linear.requests == []

    def test_create_with_unknown_state(
        self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]
    ) -> None:
        linear.reply(TEAM_CONTEXT)

        assert run(linear, "-p", "issue", "create", "--title", "x", "-t", "ENG", "-s", "Doing") == 1
        assert "Available states: Todo" in capsys.readouterr().err

    def test_update_unassign(self, linear: FakeLinear) -> None:
        linear.reply({"issueUpdate": {"success": True, "issue": ISSUE}})

        assert run(linear, "issue", "update", "ENG-1", "--assignee", "none") == 0
        assert linear.last_body["variables"] == {"id": "ENG-1", "input": {"assigneeId": None}}

    def test_update_without_changes(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(linear, "-p", "issue", "update", "ENG-1") == 1
        assert "No updates specified" in capsys.readouterr().err

    def test_soft_failure_is_reported(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"issueUpdate": {"success": False, "issue": None}})

        assert run(linear, "-j", "issue", "update", "ENG-1", "--title", "New") == 1
        assert json_out(capsys) == {"error": "failed to update issue"}

    def test_archive_prints_entity(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"issueArchive": {"success": True, "entity": {"id": "i1", "identifier": "ENG-1"}}})

        assert run(linear, "-p", "issue", "archive", "ENG-1") == 0
        assert capsys.readouterr().out == "Archived issue ENG-1\n"

    def test_tree_plaintext(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        child = {"id": "i2", "identifier": "ENG-2", "title": "Child", "state": {"name": "Done"}}
        linear.reply({"issue": dict(ISSUE, parent=None, children={"nodes": [child]}, relations={"nodes": []})})
        linear.reply({"issue": dict(child, parent=None, children={"nodes": []}, relations={"nodes": []})})

        assert run(linear, "-p", "issue", "tree", "ENG-1") == 0
        assert capsys.readouterr().out.splitlines() == [
            "ENG-1 (Todo) - Fix login",
            "└── sub-issue: ENG-2 (Done) - Child",
        ]

    def test_relation_add_blocked_by(self, linear: FakeLinear) -> None:
        linear.reply({"issue": {"id": "a", "identifier": "ENG-1"}})
        linear.reply({"issue": {"id": "b", "identifier": "ENG-2"}})
        linear.reply({"issueRelationCreate": {"success": True, "issueRelation": {"id": "r1"}}})

        assert run(linear, "relation", "add", "ENG-1", "blocked-by", "ENG-2") == 0
        assert linear.last_body["variables"]["input"]["issueId"] == "b"

    def test_comment_body_from_file(self, linear: FakeLinear, tmp_path: Path) -> None:
        body = tmp_path / "comment.md"
        body.write_text("Ship it", encoding="utf-8")
        linear.reply({"issue": {"id": "i1", "identifier": "ENG-1"}})
        linear.reply({"commentCreate": {"success": True, "comment": {"id": "c1"}}})

        assert run(linear, "comment", "create", "ENG-1", "--file", str(body)) == 0
        assert linear.last_body["variables"]["input"] == {"issueId": "i1", "body": "Ship it"}


class TestProjectCommands:
    def test_project_list_filters(self, linear: FakeLinear) -> None:
        linear.reply({"projects": {"nodes": []}})

        run(linear, "project", "list", "--team", "ENG", "--newer-than", "all_time")

        assert linear.last_body["variables"]["filter"] == {
            "accessibleTeams": {"some": {"key": {"eq": "ENG"}}},
            "state": {"nin": ["completed", "canceled"]},
        }

    def test_add_team_keeps_existing_teams(self, linear: FakeLinear) -> None:
        linear.reply({"project": {"id": "p1", "name": "Launch", "teams": {"nodes": [{"id": "t1", "key": "ENG"}]}}})
        linear.reply({"team": {"id": "t2", "key": "OPS"}})
        linear.reply({"projectUpdate": {"success": True, "project": {"id": "p1"}}})

        assert run(linear, "project", "add-team", "p1", "OPS") == 0
        assert linear.last_body["variables"] == {"id": "p1", "input": {"teamIds": ["t1", "t2"]}}

    def test_view_create_with_project_filter(self, linear: FakeLinear) -> None:
        linear.reply({"customViewCreate": {"success": True, "customView": {"id": "v1", "name": "Mine"}}})

        run(
            linear, "view", "create", "--name", "Mine", "--model", "project",
            "--filter-json", '{"state": {"eq": "started"}}', "--shared",
        )

        assert linear.last_body["variables"]["input"] == {
            "name": "Mine",
            "shared": True,
            "projectFilterData": {"state": {"eq": "started"}},
        }

    def test_invalid_filter_json(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(linear, "-p", "view", "create", "--name", "x", "--filter-json", "{nope") == 1
        assert "invalid JSON for --filter-json" in capsys.readouterr().err

    def test_initiative_list_hides_completed(self, linear: FakeLinear) -> None:
        linear.reply({"initiatives": {"nodes": []}})

        run(linear, "initiative", "list")

        assert linear.last_body["variables"]["filter"] == {"status": {"nin": ["Completed"]}}
        assert linear.last_body["variables"]["includeArchived"] is False


class TestTeamCommands:
    def test_states_sorted_by_position(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"team": {"states": {"nodes": [
            {"id": "s2", "name": "Done", "type": "completed", "position": 3},
            {"id": "s1", "name": "Todo", "type": "unstarted", "position": 1},
        ]}}})

        assert run(linear, "-p", "team", "states", "ENG") == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1].startswith("Todo")
        assert lines[2].startswith("Done")

    def test_create_copies_settings_from_team(self, linear: FakeLinear) -> None:
        linear.reply({"team": {"id": "team-1", "key": "ENG"}})
        linear.reply({"teamCreate": {"success": True, "team": {"id": "team-2", "key": "OPS", "name": "Ops"}}})

        assert run(linear, "team", "create", "--name", "Ops", "--key", "OPS", "--copy-settings-from", "ENG") == 0
        assert linear.last_body["variables"] == {
            "input": {"name": "Ops", "key": "OPS"},
            "copySettingsFromTeamId": "team-1",
        }

    def test_unknown_team(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"team": None})

        assert run(linear, "-p", "team", "delete", "NOPE") == 1
        assert "Team 'NOPE' not found." in capsys.readouterr().err

    def test_active_cycle_filter(self, linear: FakeLinear) -> None:
        linear.reply({"cycles": {"nodes": []}})

        run(linear, "cycle", "list", "--team", "ENG", "--active")

        assert linear.last_body["variables"]["filter"] == {
            "team": {"key": {"eq": "ENG"}},
            "isActive": {"eq": True},
        }


class TestInboxCommands:
    def test_inbox_defaults_to_list(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"notifications": {"nodes": [{"id": "n1", "type": "issueAssigned", "readAt": None}]}})

        assert run(linear, "--json", "inbox") == 0
        assert json_out(capsys)[0]["id"] == "n1"

    def test_read_all(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"notifications": {"nodes": [{"id": "n1", "readAt": None}]}})
        linear.reply({"notificationUpdate": {"success": True, "notification": {"id": "n1"}}})

        assert run(linear, "-p", "inbox", "read", "--all") == 0
        assert capsys.readouterr().out == "Marked 1 notifications as read\n"

    def test_snooze_rejects_bad_duration(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(linear, "-p", "inbox", "snooze", "n1", "later") == 1
        assert "invalid duration" in capsys.readouterr().err

    def test_favorite_add_needs_a_target(self, linear: FakeLinear) -> None:
        assert run(linear, "favorite", "add") == 1
        assert linear.requests == []


class TestAccountCommands:
    def test_graphql_passes_variables(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"issue": {"title": "Fix login"}})

        assert run(linear, "gql", "query($id: String!) { issue(id: $id) { title } }", "-v", '{"id": "ENG-1"}') == 0
        assert linear.last_body["variables"] == {"id": "ENG-1"}
        assert json_out(capsys) == {"issue": {"title": "Fix login"}}

    def test_rate_limit_json(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"viewer": {"id": "u1"}}, headers=RATE_HEADERS)

        assert run(linear, "--json", "auth", "rate-limit") == 0
        data = json_out(capsys)
        assert data["requestRemaining"] == 1200
        assert data["complexityRemaining"] == 100

    def test_status_without_credentials(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--json", "auth", "status"]) == 1
        data = json_out(capsys)
        assert data["authenticated"] is False
        assert "auth login" in data["error"]

    def test_status_with_null_viewer(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply({"viewer": None})

        assert run(linear, "--json", "auth", "status") == 1
        assert json_out(capsys) == {
            "authenticated": False,
            "error": "no user returned for these credentials. Run 'linctl auth login' first.",
        }

    def test_whoami_reports_source(
        self, linear: FakeLinear, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_env")
        linear.reply({"viewer": {"id": "u1", "name": "Ada", "email": "ada@example.com"}})

        assert run(linear, "-p", "whoami") == 0
        assert capsys.readouterr().out.splitlines() == [
            "Authenticated as: Ada (ada@example.com)",
            "Auth source: environment ($LINEAR_API_KEY)",
        ]

    def test_login_validates_and_stores_key(self, linear: FakeLinear, isolated_home: Path) -> None:
        linear.reply({"viewer": {"id": "u1", "email": "ada@example.com"}})

        with patch("linear_cli.cli.LinearClient", side_effect=lambda token, endpoint=None: linear.client(token)):
            assert main(["-p", "auth", "login", "--api-key", "lin_api_new"]) == 0

        assert linear.requests[0].headers["Authorization"] == "lin_api_new"
        assert auth.load_auth().api_key == "lin_api_new"

    def test_login_with_rejected_key(self, linear: FakeLinear, capsys: pytest.CaptureFixture[str]) -> None:
        linear.reply(status=401, body="invalid key")

        with patch("linear_cli.cli.LinearClient", side_effect=lambda token, endpoint=None: linear.client(token)):
            assert main(["-p", "auth", "--api-key", "bad"]) == 1

        assert "Authentication failed" in capsys.readouterr().err
        assert not (auth.config.get_auth_path()).exists()

    def test_logout(self, capsys: pytest.CaptureFixture[str]) -> None:
        auth.save_auth(auth.AuthConfig(api_key="k"))

        assert main(["-p", "auth", "logout"]) == 0
        assert capsys.readouterr().out == "Successfully logged out\n"

    def test_docs(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["docs"]) == 0
        assert "linctl" in capsys.readouterr().out
