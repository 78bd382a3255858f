"""Tests for automatic and interactive transition application."""

import pytest

from conftest import E2E, FakeGateway, make_issue, scripted_input
from jira_linkflow.errors import MalformedSelection, UserCancelled, UserSkipped
from jira_linkflow.models import Transition
from jira_linkflow.transitions import (
    AdvanceState,
    OperatorPrompt,
    PhaseChooser,
    TransitionStateMachine,
)

START = Transition("11", "Start Review")
APPROVE = Transition("21", "Approve")
BLOCK = Transition("31", "Block")
CLOSE = Transition("41", "Close")
REOPEN = Transition("51", "Reopen")


def machine_for(gateway, resolver, *answers):
    return TransitionStateMachine(
        gateway, resolver, prompt=OperatorPrompt(scripted_input(*answers)), delay=0
    )


class TestAutoAdvance:
    def test_chains_phase_groups(self, resolver):
        gateway = FakeGateway(
            [make_issue("A")], {"A": [[START, CLOSE], [APPROVE, CLOSE], [CLOSE]]}
        )
        applied = machine_for(gateway, resolver).auto_advance("A", "review")

        assert applied == [START, APPROVE]
        assert gateway.applied == [("A", "11"), ("A", "21")]

    def test_no_matching_transition_leaves_issue_alone(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[CLOSE]]})
        applied = machine_for(gateway, resolver).auto_advance("A", "review")

        assert applied == []
        assert gateway.applied == []

    def test_loop_is_bounded_by_group_count(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[REOPEN]] * 10})
        applied = machine_for(gateway, resolver).auto_advance("A", "loop")

        assert applied == [REOPEN]
        assert len(gateway.applied) == 1

    def test_unconfigured_phase_applies_nothing(self, resolver):
        gateway = FakeGateway([make_issue("A", "Task")], {"A": [[BLOCK]]})
        assert machine_for(gateway, resolver).auto_advance("A", "block") == []

    def test_batch_isolates_failures(self, resolver):
        gateway = FakeGateway(
            [make_issue("X"), make_issue("Y")],
            {"X": [[Transition("99", "Blocked")]], "Y": [[BLOCK], []]},
        )
        gateway.rejected_ids.add("99")

        results = machine_for(gateway, resolver).auto_advance_all(
            ["X", "MISSING", "Y"], "block"
        )

        assert results == {"X": None, "MISSING": None, "Y": [BLOCK]}
        assert gateway.applied == [("Y", "31")]


class TestOperatorPrompt:
    def test_number_selects_by_position(self):
        prompt = OperatorPrompt(scripted_input("2"))
        assert prompt(make_issue("A"), [START, APPROVE]) == APPROVE

    def test_number_falls_back_to_transition_id(self):
        prompt = OperatorPrompt(scripted_input("21"))
        assert prompt(make_issue("A"), [START, APPROVE]) == APPROVE

    def test_skip_and_cancel(self):
        with pytest.raises(UserSkipped):
            OperatorPrompt(scripted_input("-1"))(make_issue("A"), [START])
        with pytest.raises(UserCancelled):
            OperatorPrompt(scripted_input("0"))(make_issue("A"), [START])

    def test_end_of_input_cancels(self):
        with pytest.raises(UserCancelled):
            OperatorPrompt(scripted_input())(make_issue("A"), [START])

    @pytest.mark.parametrize("answer", ["abc", "", "7", "-2"])
    def test_malformed_answers(self, answer):
        with pytest.raises(MalformedSelection):
            OperatorPrompt(scripted_input(answer))(make_issue("A"), [START])

    def test_lists_options(self, capsys):
        OperatorPrompt(scripted_input("1"))(make_issue("A"), [START])
        out = capsys.readouterr().out
        assert "Choose one of the following options" in out
        assert " -1) skip" in out
        assert "  0) cancel" in out
        assert "  1) 11 Start Review" in out


class TestInteractiveAdvance:
    def test_runs_until_terminal(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[START], [APPROVE], []]})
        state = machine_for(gateway, resolver, "1", "1").interactive_advance("A")

        assert state == AdvanceState.TERMINAL
        assert gateway.applied == [("A", "11"), ("A", "21")]

    def test_no_transition_is_terminal(self, resolver):
        gateway = FakeGateway([make_issue("A")])
        assert machine_for(gateway, resolver).interactive_advance("A") == AdvanceState.TERMINAL

    def test_malformed_input_prompts_again(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[START], []]})
        state = machine_for(gateway, resolver, "nope", "5", "1").interactive_advance("A")

        assert state == AdvanceState.TERMINAL
        assert gateway.applied == [("A", "11")]

    def test_cancel_stops_the_batch(self, resolver):
        gateway = FakeGateway(
            [make_issue("X"), make_issue("Y")], {"X": [[START]], "Y": [[START]]}
        )
        results = machine_for(gateway, resolver, "0").interactive_advance_all(["X", "Y"])

        assert results == {"X": AdvanceState.CANCELLED}
        assert "Y" not in gateway.fetched
        assert gateway.applied == []

    def test_skip_moves_to_next_issue(self, resolver):
        gateway = FakeGateway(
            [make_issue("X"), make_issue("Y")], {"X": [[START]], "Y": [[START], []]}
        )
        results = machine_for(gateway, resolver, "-1", "1").interactive_advance_all(
            ["X", "Y"]
        )

        assert results == {"X": AdvanceState.SKIPPED, "Y": AdvanceState.TERMINAL}
        assert gateway.applied == [("Y", "11")]

    def test_rejected_transition_marks_issue_failed(self, resolver):
        gateway = FakeGateway(
            [make_issue("X"), make_issue("Y")], {"X": [[START]], "Y": [[BLOCK], []]}
        )
        gateway.rejected_ids.add("11")
        results = machine_for(gateway, resolver, "1", "1").interactive_advance_all(
            ["X", "Y"]
        )

        assert results == {"X": AdvanceState.FAILED, "Y": AdvanceState.TERMINAL}


class TestStrategies:
    def test_unknown_strategy(self, resolver):
        with pytest.raises(ValueError):
            machine_for(FakeGateway(), resolver).chooser_for("random")

    def test_terminal_strategy_is_the_prompt(self, resolver):
        machine = machine_for(FakeGateway(), resolver)
        assert machine.chooser_for("terminal") is machine.prompt

    def test_phase_strategy_defaults_to_block(self, resolver):
        chooser = machine_for(FakeGateway(), resolver).chooser_for("phase")
        assert isinstance(chooser, PhaseChooser)
        assert chooser.phase == "block"

    def test_phase_chooser_falls_back_to_operator(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[BLOCK, CLOSE], [CLOSE], []]})
        machine = machine_for(gateway, resolver, "1")
        state = machine.interactive_advance("A", machine.chooser_for("phase", "block"))

        assert state == AdvanceState.TERMINAL
        assert gateway.applied == [("A", "31"), ("A", "41")]

    def test_phase_chooser_trusts_phase_once_per_group(self, resolver):
        gateway = FakeGateway([make_issue("A")], {"A": [[BLOCK], [BLOCK], []]})
        machine = machine_for(gateway, resolver, "-1")
        state = machine.interactive_advance("A", machine.chooser_for("phase", "block"))

        assert state == AdvanceState.SKIPPED
        assert gateway.applied == [("A", "31")]

    def test_phase_chooser_for_unconfigured_type_asks(self, resolver):
        gateway = FakeGateway([make_issue("A", "Task")], {"A": [[BLOCK], []]})
        machine = machine_for(gateway, resolver, "1")
        state = machine.interactive_advance("A", machine.chooser_for("phase"))

        assert state == AdvanceState.TERMINAL
        assert gateway.applied == [("A", "31")]


def test_e2e_type_name_is_resolved(resolver):
    gateway = FakeGateway([make_issue("A", E2E)], {"A": [[BLOCK], []]})
    assert machine_for(gateway, resolver).auto_advance("A", "block") == [BLOCK]
