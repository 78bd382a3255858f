"""Shared pytest fixtures."""

import pytest

from jira_linkflow.config import JiraConfig
from jira_linkflow.constants import Constants
from jira_linkflow.errors import RemoteFetchError, TransitionRejected
from jira_linkflow.models import Direction, Issue, IssueLink, Transition
from jira_linkflow.phases import PhaseResolver, PhaseTable

E2E = Constants.ISSUE_TYPE_E2E
DEFECT = Constants.ISSUE_TYPE_DEFECT
DEPENDS_ON = Constants.DEPENDS_ON_LINK
TESTED_BY = Constants.TESTED_BY_LINK


def outbound(target_key, link_type=DEPENDS_ON):
    return IssueLink(target_key, link_type, Direction.OUTBOUND)


def inbound(target_key, link_type=DEPENDS_ON):
    return IssueLink(target_key, link_type, Direction.INBOUND)


def make_issue(key, issue_type=E2E, links=(), status="Open", fields=None):
    return Issue(
        key=key,
        summary=f"Summary of {key}",
        issue_type=issue_type,
        status=status,
        links=tuple(links),
        fields=fields or {},
    )


class FakeGateway:
    """In-memory Jira: issues by key and, per key, the successive transition lists.

    Applying a transition moves the key to its next transition list.
    """

    def __init__(self, issues=(), transitions=None):
        self.issues = {issue.key: issue for issue in issues}
        self.transitions = {key: list(states) for key, states in (transitions or {}).items()}
        self.fetched = []
        self.applied = []
        self.rejected_ids = set()

    def fetch_issue(self, key):
        self.fetched.append(key)
        if key not in self.issues:
            raise RemoteFetchError(key, "issue not found")
        return self.issues[key]

    def get_available_transitions(self, key):
        states = self.transitions.get(key, [])
        return list(states[0]) if states else []

    def apply_transition(self, key, transition_id):
        if transition_id in self.rejected_ids:
            raise TransitionRejected(key, transition_id, "HTTP 400")
        self.applied.append((key, transition_id))
        states = self.transitions.get(key)
        if states:
            states.pop(0)


def scripted_input(*answers):
    """Input function returning ``answers`` one after the other."""
    remaining = list(answers)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _input


@pytest.fixture
def phase_table():
    return PhaseTable(
        {
            "e2e": {
                "block": [["Block", "Blocked"]],
                "review": [["Start Review"], ["Approve"]],
                "loop": [["Reopen"]],
            }
        },
        {"e2e": E2E},
    )


@pytest.fixture
def resolver(phase_table):
    return PhaseResolver(phase_table)


@pytest.fixture
def transition():
    def _transition(transition_id, name):
        return Transition(str(transition_id), name)

    return _transition


SAMPLE_INI = """[jira]
base_url = https://jira.example.com/
username = jdoe
api_token = secret

[discovery]
testable_types = End-to-end Test, Smoke Test
depends_on_link = Depends On

[link]
timeout_millis = 2500
types = clone:Cloners, depends-on:Depends On

[get]
short_properties = key, status

[issuetype e2e]
jira_issue_type_name = End-to-end Test
fields_to_not_clone = customfield_1, customfield_2
required_fields = customfield_3, customfield_4
required_field.customfield_3.defaults = value:Regression, id:7
required_field.customfield_4.defaults = 42
phase.block = Block|Blocked
phase.qe-review = Start Review, Approve|Accept

[issuetype bug]
jira_issue_type_name = Defect
phase.unblock = Unblock
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "jira.ini"
    path.write_text(SAMPLE_INI)
    return str(path)


@pytest.fixture
def config(config_path):
    return JiraConfig(config_path)
