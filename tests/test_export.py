"""Tests for discovery exports and printing."""

import json

from conftest import DEFECT, TESTED_BY, FakeGateway, make_issue, outbound
from jira_linkflow.discovery import DependencyDiscovery, DiscoveryRules
from jira_linkflow.display import format_issue, print_dependencies
from jira_linkflow.export import dependency_rows, export_to_csv, export_to_json


def sample_result():
    issues = [
        make_issue("BUG-1", DEFECT, links=[outbound("E2E-1", TESTED_BY)]),
        make_issue("E2E-1", links=[outbound("E2E-2"), outbound("E2E-3")]),
        make_issue("E2E-2", status="Done"),
        make_issue("E2E-3", status="Open"),
    ]
    return DependencyDiscovery(FakeGateway(issues)).discover(["BUG-1"], recursive=True)


def test_dependency_rows():
    rows = dependency_rows(sample_result(), DiscoveryRules())

    assert rows == [
        ["BUG-1", "", "Summary of BUG-1", "E2E-1"],
        ["", "E2E-1", "Summary of E2E-1", "E2E-2"],
        ["", "E2E-1", "Summary of E2E-1", "E2E-3"],
        ["", "E2E-2", "Summary of E2E-2", ""],
        ["", "E2E-3", "Summary of E2E-3", ""],
    ]


def test_export_to_csv(tmp_path):
    path = tmp_path / "deps.csv"

    count = export_to_csv(sample_result(), DiscoveryRules(), str(path))

    lines = path.read_text().splitlines()
    assert count == 5
    assert lines[0] == "Ticket;E2E;Summary;Depends On E2E"
    assert lines[1] == "BUG-1;;Summary of BUG-1;E2E-1"


def test_export_to_json(tmp_path):
    path = tmp_path / "deps.json"

    export_to_json(sample_result(), str(path))

    data = json.loads(path.read_text())
    assert [entry["key"] for entry in data] == ["BUG-1", "E2E-1", "E2E-2", "E2E-3"]
    assert data[1]["depends_on"] == [
        {"key": "E2E-2", "status": "Done"},
        {"key": "E2E-3", "status": "Open"},
    ]


def test_print_dependencies(capsys):
    print_dependencies(sample_result())

    out = capsys.readouterr().out
    assert "E2E-1 -> [E2E-2(Done),E2E-3(Open)]" in out
    assert "E2E-3 -> []" in out


def test_format_issue_with_links():
    issue = make_issue("E2E-1", links=[outbound("E2E-2")])
    text = format_issue(issue, ["key", "type", "summary", "status", "links"])

    assert "E2E-1" in text
    assert "'End-to-end Test'" in text
    assert "[Open]" in text
    assert "E2E-2" in text.splitlines()[1]
    assert "'Depends On':OUTBOUND" in text
