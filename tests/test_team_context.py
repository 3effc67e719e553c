"""Tests for TeamContext and related functionality."""

from __future__ import annotations

import pytest

from linear_cli.operations import NotFoundError, TeamContext, _normalize_key, fetch_team_context


class TestTeamContext:
    """Test TeamContext resolution methods."""

    @pytest.fixture
    def team_context(self) -> TeamContext:
        """Create a sample TeamContext for testing."""
        return TeamContext(
            key="ENG",
            id="team-123",
            name="Engineering",
            states={"backlog": "state-1", "todo": "state-2", "done": "state-3"},
            available_states=["Backlog", "Todo", "Done"],
            labels={"bug": "label-1", "feature": "label-2", "frontend": "label-3"},
            available_labels=["Bug", "Feature", "Frontend"],
            members={
                "dev1@example.com": "user-1",
                "dev2@example.com": "user-2",
            },
        )

    def test_resolve_state_id(self, team_context: TeamContext) -> None:
        """Test resolving state names to IDs."""
        assert team_context.resolve_state_id("Backlog") == "state-1"
        assert team_context.resolve_state_id("backlog") == "state-1"
        assert team_context.resolve_state_id(" Todo ") == "state-2"

    def test_resolve_state_id_invalid(self, team_context: TeamContext) -> None:
        """Test resolving invalid state name lists the valid ones."""
        with pytest.raises(NotFoundError, match="State 'Invalid' is not valid for team ENG"):
            team_context.resolve_state_id("Invalid")

    def test_resolve_label_ids_case_insensitive(self, team_context: TeamContext) -> None:
        """Test label resolution is case-insensitive and keeps order."""
        assert team_context.resolve_label_ids(["FEATURE", "bug"]) == ["label-2", "label-1"]

    def test_resolve_label_ids_missing(self, team_context: TeamContext) -> None:
        """Test resolving with missing label."""
        with pytest.raises(NotFoundError, match="Label\\(s\\) Invalid not found"):
            team_context.resolve_label_ids(["Bug", "Invalid"])

    def test_resolve_member_id(self, team_context: TeamContext) -> None:
        """Test resolving member email to ID."""
        assert team_context.resolve_member_id("dev1@example.com") == "user-1"
        assert team_context.resolve_member_id("DEV2@EXAMPLE.COM") == "user-2"

    def test_resolve_member_id_invalid(self, team_context: TeamContext) -> None:
        with pytest.raises(NotFoundError, match="No Linear member with email"):
            team_context.resolve_member_id("invalid@example.com")


class TestFetchTeamContext:
    """Test building a TeamContext from the API."""

    def test_fetch_team_context_success(self, linear, client) -> None:
        linear.reply(
            {
                "team": {
                    "id": "team-123",
                    "key": "ENG",
                    "name": "Engineering",
                    "states": {
                        "nodes": [
                            {"id": "state-1", "name": "Backlog", "type": "backlog"},
                            {"id": "state-3", "name": "Done", "type": "completed"},
                        ]
                    },
                    "labels": {"nodes": [{"id": "label-1", "name": "Bug"}]},
                    "members": {
                        "nodes": [
                            {"id": "user-1", "email": "Dev1@example.com"},
                            {"id": "user-9", "email": None},
                        ]
                    },
                }
            }
        )

        context = fetch_team_context(client, "ENG")

        assert context.id == "team-123"
        assert context.available_states == ["Backlog", "Done"]
        assert context.resolve_state_id("done") == "state-3"
        assert context.resolve_label_ids(["bug"]) == ["label-1"]
        assert context.members == {"dev1@example.com": "user-1"}
        assert linear.last_body["variables"] == {"key": "ENG"}

    def test_fetch_team_context_not_found(self, linear, client) -> None:
        linear.reply({"team": None})

        with pytest.raises(NotFoundError, match="Linear team with key 'ENG' not found"):
            fetch_team_context(client, "ENG")


class TestNormalizeKey:
    """Test key normalization function."""

    def test_normalize_lowercase(self) -> None:
        assert _normalize_key("TEST") == "test"

    def test_normalize_strips_whitespace(self) -> None:
        assert _normalize_key("\t Test String \n") == "test string"
