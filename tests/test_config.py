"""Tests for the INI configuration."""

import pytest

from jira_linkflow.config import JiraConfig, create_sample_config, split_list
from jira_linkflow.constants import Constants
from jira_linkflow.models import FieldKind, FieldValue


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        JiraConfig(str(tmp_path / "missing.ini"))


def test_credentials(config):
    assert config.base_url == "https://jira.example.com/"
    assert config.username == "jdoe"
    assert config.api_token == "secret"


def test_default_section_credentials(tmp_path):
    path = tmp_path / "jira.ini"
    path.write_text("[DEFAULT]\nbase_url = https://j\nusername = u\napi_token = t\n")
    config = JiraConfig(str(path))
    assert (config.base_url, config.username, config.api_token) == ("https://j", "u", "t")


def test_split_list():
    assert split_list(" a, ,b ,") == ["a", "b"]
    assert split_list(None) == []


def test_link_settings(config):
    assert config.link_timeout == 2.5
    assert config.link_types == {"clone": "Cloners", "depends-on": "Depends On"}
    assert config.normalize_link_type("depends-on") == "Depends On"
    assert config.normalize_link_type("Cloners") == "Cloners"
    assert config.normalize_link_type("Relates") == "Relates"


def test_no_link_timeout(tmp_path):
    path = tmp_path / "jira.ini"
    path.write_text("[link]\ntimeout_millis = 0\n")
    assert JiraConfig(str(path)).link_timeout is None


def test_issue_properties(config):
    assert config.issue_properties() == ["key", "status"]
    assert config.issue_properties(full=True) == list(Constants.FULL_PROPERTIES)


def test_discovery_rules(config):
    rules = config.discovery_rules()
    assert rules.testable_types == ("End-to-end Test", "Smoke Test")
    assert rules.releasable_types == Constants.RELEASABLE_TYPES
    assert rules.depends_on_link == "Depends On"
    assert rules.tested_by_link == Constants.TESTED_BY_LINK


def test_issue_types(config):
    e2e = config.config_for("End-to-end Test")
    assert e2e is config.config_for("e2e")
    assert e2e.fields_to_not_clone == {"customfield_1", "customfield_2"}
    assert e2e.required_fields == ("customfield_3", "customfield_4")
    assert e2e.required_field_defaults["customfield_3"].to_json() == {
        "value": "Regression",
        "id": "7",
    }
    assert e2e.required_field_defaults["customfield_4"].to_json() == 42
    assert config.config_for("Task") is None


def test_phase_table(config):
    table = config.phase_table()
    assert table.groups_for("End-to-end Test", "block") == (("Block", "Blocked"),)
    assert table.groups_for("e2e", "qe-review") == (
        ("Start Review",),
        ("Approve", "Accept"),
    )
    assert table.groups_for("Defect", "unblock") == (("Unblock",),)
    assert table.groups_for("Defect", "block") == ()


def test_field_value_kinds():
    assert FieldValue.parse("Regression") == FieldValue(FieldKind.STRING, "Regression")
    assert FieldValue.parse("1.5").to_json() == 1.5
    assert FieldValue.parse("id:3").kind == FieldKind.MAPPING


def test_sample_config_is_loadable(tmp_path):
    path = create_sample_config(str(tmp_path / "conf" / "jira"))
    config = JiraConfig(path)

    assert config.link_timeout is None
    assert config.normalize_link_type("tested-by") == "Tests Writing"
    assert config.phase_table().groups_for("End-to-end Test", "start") == (
        ("Start Progress",),
        ("Start Review",),
    )
