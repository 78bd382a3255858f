"""
jira-linkflow transition state machine

Issues are advanced either automatically, by chaining the transitions of a
configured phase, or interactively, by letting an operator pick transitions
one after the other. Both modes only apply transitions Jira reports as
available at that moment.

Copyright (c) 2025
All rights reserved.

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are met:

1. Redistributions of source code must retain the above copyright notice, this
   list of conditions and the following disclaimer.

2. Redistributions in binary form must reproduce the above copyright notice,
   this list of conditions and the following disclaimer in the documentation
   and/or other materials provided with the distribution.

3. Neither the name of the copyright holder nor the names of its
   contributors may be used to endorse or promote products derived from
   this software without specific prior written permission.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from .constants import Constants
from .errors import (
    MalformedSelection,
    RemoteFetchError,
    TransitionRejected,
    UserCancelled,
    UserSkipped,
)
from .models import Issue, Transition
from .phases import PhaseResolver

Chooser = Callable[[Issue, List[Transition]], Transition]


class AdvanceState(Enum):
    SELECTING = "selecting"
    APPLYING = "applying"
    TERMINAL = "terminal"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    FAILED = "failed"


class OperatorPrompt:
    """Asks the operator which of the available transitions to apply.

    Raises UserSkipped on ``-1``, UserCancelled on ``0`` (or end of input) and
    MalformedSelection on anything that does not designate a transition.
    """

    def __init__(self, input_func: Optional[Callable[[str], str]] = None) -> None:
        self.input_func = input_func or input

    def __call__(self, issue: Issue, transitions: List[Transition]) -> Transition:
        print(f"\n{issue.key} - {issue.summary} [{issue.status}]")
        print("Choose one of the following options")
        print(f" {Constants.SKIP_CHOICE}) skip")
        print(f"  {Constants.CANCEL_CHOICE}) cancel")
        for number, transition in enumerate(transitions, 1):
            print(f"  {number}) {transition.id} {transition.name}")

        try:
            answer = self.input_func("choose transition: ").strip()
        except EOFError:
            raise UserCancelled("No more input")

        try:
            choice = int(answer)
        except ValueError:
            raise MalformedSelection(f"'{answer}' is not a number")

        if choice == Constants.SKIP_CHOICE:
            raise UserSkipped(f"Skipped {issue.key}")
        if choice == Constants.CANCEL_CHOICE:
            raise UserCancelled(f"Cancelled at {issue.key}")

        if 1 <= choice <= len(transitions):
            return transitions[choice - 1]
        for transition in transitions:
            if transition.id == str(choice):
                return transition
        raise MalformedSelection(f"No transition matches {choice}")


class PhaseChooser:
    """Picks transitions from a configured phase, asking the operator otherwise.

    The phase is trusted for at most as many picks per issue as it has groups.
    """

    def __init__(self, resolver: PhaseResolver, phase: str, fallback: Chooser) -> None:
        self.resolver = resolver
        self.phase = phase
        self.fallback = fallback
        self._picks: Dict[str, int] = {}

    def __call__(self, issue: Issue, transitions: List[Transition]) -> Transition:
        limit = len(self.resolver.phase_table.groups_for(issue.issue_type, self.phase))
        if self._picks.get(issue.key, 0) < limit:
            chosen = self.resolver.resolve(issue.issue_type, self.phase, transitions)
            if chosen is not None:
                self._picks[issue.key] = self._picks.get(issue.key, 0) + 1
                print(f"  {issue.key}: '{self.phase}' phase picks '{chosen.name}'")
                return chosen
        return self.fallback(issue, transitions)


def _terminal_strategy(resolver: PhaseResolver, prompt: Chooser, phase: Optional[str]) -> Chooser:
    return prompt


def _phase_strategy(resolver: PhaseResolver, prompt: Chooser, phase: Optional[str]) -> Chooser:
    return PhaseChooser(resolver, phase or Constants.BLOCK_PHASE, prompt)


SELECTION_STRATEGIES = {
    "terminal": _terminal_strategy,
    "phase": _phase_strategy,
}


class TransitionStateMachine:
    def __init__(
        self,
        gateway,
        resolver: PhaseResolver,
        prompt: Optional[Chooser] = None,
        delay: float = Constants.API_RATE_LIMIT_DELAY,
    ) -> None:
        self.gateway = gateway
        self.resolver = resolver
        self.prompt = prompt or OperatorPrompt()
        self.delay = delay
        self.logger = logging.getLogger(Constants.LOGGER_NAME)

    def chooser_for(self, strategy: str, phase: Optional[str] = None) -> Chooser:
        if strategy not in SELECTION_STRATEGIES:
            raise ValueError(
                f"Unknown selection strategy '{strategy}', use one of: {', '.join(SELECTION_STRATEGIES)}"
            )
        return SELECTION_STRATEGIES[strategy](self.resolver, self.prompt, phase)

    def auto_advance(self, issue_key: str, phase: str) -> List[Transition]:
        """Apply the transitions of ``phase`` back to back and return them.

        Every configured group of the phase allows at most one step, so the
        loop ends after as many steps as the phase has groups, or earlier when
        no group matches the available transitions.

        Raises:
            RemoteFetchError: the issue could not be fetched
            TransitionRejected: Jira refused one of the transitions
        """
        issue = self.gateway.fetch_issue(issue_key)
        groups = self.resolver.phase_table.groups_for(issue.issue_type, phase)

        applied: List[Transition] = []
        for _ in range(len(groups)):
            available = self.gateway.get_available_transitions(issue_key)
            chosen = self.resolver.resolve(issue.issue_type, phase, available)
            if chosen is None:
                break

            self.gateway.apply_transition(issue_key, chosen.id)
            self.logger.info(
                f"Transition {issue_key} - {issue.summary} to {chosen.id} {chosen.name}"
            )
            applied.append(chosen)

        self.logger.info(f"No more '{phase}' transitions for {issue_key} - {issue.summary}")
        return applied

    def auto_advance_all(
        self, issue_keys: Iterable[str], phase: str
    ) -> Dict[str, Optional[List[Transition]]]:
        """Auto advance every key; a failing key is reported as None and skipped."""
        results: Dict[str, Optional[List[Transition]]] = {}
        for issue_key in issue_keys:
            try:
                applied = self.auto_advance(issue_key, phase)
            except (RemoteFetchError, TransitionRejected) as e:
                self.logger.error(f"Failed to advance {issue_key} through '{phase}': {e}")
                print(f"  ✗ {issue_key}: Error - {e}")
                results[issue_key] = None
            else:
                if applied:
                    names = " -> ".join(t.name for t in applied)
                    print(f"  ✓ {issue_key}: {names}")
                else:
                    print(f"  ~ {issue_key}: no '{phase}' transition available")
                results[issue_key] = applied
            self._pause()
        return results

    def interactive_advance(
        self, issue_key: str, chooser: Optional[Chooser] = None
    ) -> AdvanceState:
        """Let ``chooser`` pick transitions until none is left, or it skips or cancels.

        Returns the final state: TERMINAL, SKIPPED or CANCELLED.

        Raises:
            RemoteFetchError: the issue could not be fetched
            TransitionRejected: Jira refused the chosen transition
        """
        chooser = chooser or self.prompt
        issue = self.gateway.fetch_issue(issue_key)
        available = self.gateway.get_available_transitions(issue_key)

        state = AdvanceState.SELECTING if available else AdvanceState.TERMINAL
        chosen: Optional[Transition] = None
        while state in (AdvanceState.SELECTING, AdvanceState.APPLYING):
            if state == AdvanceState.SELECTING:
                try:
                    chosen = chooser(issue, available)
                except MalformedSelection as e:
                    print(f"  ✗ {e}, try again")
                    continue
                except UserSkipped:
                    state = AdvanceState.SKIPPED
                    continue
                except UserCancelled:
                    state = AdvanceState.CANCELLED
                    continue
                state = AdvanceState.APPLYING
            else:
                self.gateway.apply_transition(issue_key, chosen.id)
                self.logger.info(
                    f"Issue {issue_key} - {issue.summary} moved to {chosen.id} - {chosen.name}"
                )
                print(f"  ✓ {issue_key}: Moved via '{chosen.name}'")
                available = self.gateway.get_available_transitions(issue_key)
                state = AdvanceState.SELECTING if available else AdvanceState.TERMINAL

        return state

    def interactive_advance_all(
        self, issue_keys: Iterable[str], chooser: Optional[Chooser] = None
    ) -> Dict[str, AdvanceState]:
        """Advance keys one by one; stops at the first cancellation."""
        results: Dict[str, AdvanceState] = {}
        for issue_key in issue_keys:
            try:
                state = self.interactive_advance(issue_key, chooser)
            except (RemoteFetchError, TransitionRejected) as e:
                self.logger.error(f"Failed to advance {issue_key}: {e}")
                print(f"  ✗ {issue_key}: Error - {e}")
                state = AdvanceState.FAILED

            results[issue_key] = state
            if state == AdvanceState.CANCELLED:
                self.logger.info(f"Cancelled by operator at {issue_key}")
                print("Cancelled.")
                break
            if state == AdvanceState.SKIPPED:
                self.logger.info(f"Skipped {issue_key}")
        return results

    def _pause(self) -> None:
        if self.delay > 0:
            time.sleep(self.delay)  # Be nice to the API
