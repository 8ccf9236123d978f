"""Tests for generate/naming.py module."""

from __future__ import annotations

import pytest

from convexgen.generate.naming import (
    api_path,
    collision_prefix,
    grouped_api_export_base,
    hook_base_name,
    qualified_hook_name,
    safe_identifier,
    section_label,
    split_api_export_base,
    split_api_file_name,
    split_hook_file_name,
    to_camel_case,
    to_natural_language,
    to_pascal_case,
    to_singular,
)


class TestCaseConversion:
    """String case helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("users", "Users"), ("user_profiles", "UserProfiles"), ("issueLabels", "IssueLabels")],
    )
    def test_to_pascal_case(self, value: str, expected: str) -> None:
        assert to_pascal_case(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("voting/config", "VotingConfig"), ("my_module", "MyModule"), ("a-b", "AB")],
    )
    def test_to_camel_case(self, value: str, expected: str) -> None:
        assert to_camel_case(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("my-module", "myModule"), ("issues", "issues"), ("a.b c", "aBC"), ("--", "")],
    )
    def test_safe_identifier(self, value: str, expected: str) -> None:
        assert safe_identifier(value) == expected

    def test_to_natural_language(self) -> None:
        assert to_natural_language("getEventCheckInList") == "get event check in list"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("categories", "category"),
            ("addresses", "address"),
            ("projects", "project"),
            ("class", "class"),
            ("staff", "staff"),
        ],
    )
    def test_to_singular(self, value: str, expected: str) -> None:
        assert to_singular(value) == expected


class TestApiPath:
    """Reference-object paths."""

    def test_dotted_path(self) -> None:
        assert api_path("issues/queries", "list") == "api.issues.queries.list"

    def test_invalid_segments_use_brackets(self) -> None:
        assert api_path("my-module", "list") == 'api["my-module"].list'


class TestHookNames:
    """Hook and hook file naming."""

    def test_base_name(self) -> None:
        assert hook_base_name("issues", "listIssues") == "useIssuesListIssues"

    def test_qualified_name(self) -> None:
        assert qualified_hook_name("events", "voting/config", "get") == "useEventsVotingConfigGet"

    def test_qualified_name_without_sub_falls_back(self) -> None:
        assert qualified_hook_name("events", "", "get") == "useEventsGet"
        assert qualified_hook_name("events", "events", "get") == "useEventsGet"

    def test_split_file_name(self) -> None:
        assert split_hook_file_name("events/voting") == "useEvents_voting"

    def test_section_label(self) -> None:
        assert section_label("voting/config", "queries") == (
            "// ============= VOTINGCONFIG QUERIES ============="
        )


class TestApiNames:
    """API file and export naming."""

    def test_export_bases(self) -> None:
        assert grouped_api_export_base("my-module") == "MyModule"
        assert split_api_export_base("events/voting") == "EventsVoting"

    def test_split_file_name(self) -> None:
        assert split_api_file_name("events/voting") == "events-voting"

    @pytest.mark.parametrize(
        ("namespace", "expected"),
        [
            ("shop/appointmentSettingsQueries", "appointmentSettings"),
            ("shop/orders/admin", "orders"),
            ("shop/gift-cards", "giftCards"),
            ("shop", ""),
        ],
    )
    def test_collision_prefix(self, namespace: str, expected: str) -> None:
        assert collision_prefix(namespace, "shop") == expected
