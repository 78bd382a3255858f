"""Tests for phase parsing and resolution."""

import pytest

from conftest import E2E
from jira_linkflow.errors import NoPhaseConfiguration
from jira_linkflow.models import Transition
from jira_linkflow.phases import PhaseResolver, PhaseTable, parse_phase


def test_parse_phase():
    assert parse_phase("Block|Blocked, Start Review") == (
        ("Block", "Blocked"),
        ("Start Review",),
    )
    assert parse_phase(" Unblock ") == (("Unblock",),)
    assert parse_phase("A||B, ,C") == (("A", "B"), ("C",))
    assert parse_phase("") == ()


class TestPhaseTable:
    def test_lookup_by_type_id_and_jira_name(self, phase_table):
        assert phase_table.phases_for("e2e") is phase_table.phases_for(E2E)
        assert phase_table.phases_for("Task") is None

    def test_phase_names_ignore_case(self, phase_table):
        assert phase_table.groups_for(E2E, "BLOCK") == (("Block", "Blocked"),)

    def test_require(self, phase_table):
        assert phase_table.require(E2E, "review") == (("Start Review",), ("Approve",))
        with pytest.raises(NoPhaseConfiguration):
            phase_table.require(E2E, "release")
        with pytest.raises(NoPhaseConfiguration):
            phase_table.require("Task", "block")

    def test_groups_for_missing_phase(self, phase_table):
        assert phase_table.groups_for("Task", "block") == ()


class TestPhaseResolver:
    def test_picks_available_alternative(self, resolver):
        available = [Transition("11", "Start"), Transition("12", "Blocked")]
        assert resolver.resolve(E2E, "block", available) == Transition("12", "Blocked")

    def test_first_name_of_group_wins(self, resolver):
        available = [Transition("5", "Blocked"), Transition("4", "Block")]
        assert resolver.resolve(E2E, "block", available).id == "4"

    def test_earlier_group_wins(self):
        resolver = PhaseResolver(PhaseTable({E2E: {"decide": [["Approve"], ["Reject"]]}}))
        available = [Transition("2", "Reject"), Transition("1", "Approve")]
        assert resolver.resolve(E2E, "decide", available).name == "Approve"

    def test_later_group_when_earlier_unavailable(self, resolver):
        available = [Transition("31", "Approve")]
        assert resolver.resolve(E2E, "review", available).id == "31"

    def test_nothing_available(self, resolver):
        assert resolver.resolve(E2E, "block", [Transition("1", "Close")]) is None
        assert resolver.resolve(E2E, "block", []) is None

    def test_unconfigured_type_or_phase(self, resolver):
        available = [Transition("1", "Block")]
        assert resolver.resolve("Task", "block", available) is None
        assert resolver.resolve(E2E, "release", available) is None
