"""
jira-linkflow configuration

Everything is read from one INI file (``~/.config/jira`` by default): the
credentials, the discovery rules, the link settings and one
``[issuetype <id>]`` section per configured issue type holding its workflow
phases and cloning settings.

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

import configparser
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .constants import Constants
from .discovery import DiscoveryRules
from .models import FieldValue
from .phases import PhaseGroups, PhaseTable, parse_phase

ISSUE_TYPE_SECTION_PREFIX = "issuetype "
PHASE_OPTION_PREFIX = "phase."
REQUIRED_FIELD_OPTION_PREFIX = "required_field."
REQUIRED_FIELD_OPTION_SUFFIX = ".defaults"

SAMPLE_CONFIG = """[jira]
base_url = https://your-company.atlassian.net
username = your-email@company.com
api_token = your-api-token-here

# Alternative format using DEFAULT section:
# [DEFAULT]
# base_url = https://your-company.atlassian.net
# username = your-email@company.com
# api_token = your-api-token-here

[discovery]
testable_types = End-to-end Test
releasable_types = Defect, Customer Defect, Feature Story, Feature Defect
depends_on_link = Depends On
tested_by_link = Tests Writing

[link]
# 0 waits for Jira without a timeout
timeout_millis = 0
types = clone:Cloners, depends-on:Depends On, tested-by:Tests Writing

[get]
short_properties = key, summary, status
full_properties = key, type, summary, status, links

# One section per issue type. Phases list alternative groups separated by
# commas, alternatives inside a group separated by "|".
[issuetype e2e]
jira_issue_type_name = End-to-end Test
fields_to_not_clone = customfield_10100
required_fields = customfield_10200
required_field.customfield_10200.defaults = value:Regression
phase.block = Block|Blocked
phase.unblock = Unblock
phase.start = Start Progress, Start Review
"""


def split_list(text: Optional[str]) -> List[str]:
    """Split a comma separated value, dropping blanks."""
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


@dataclass(frozen=True)
class IssueTypeConfig:
    type_id: str
    jira_issue_type_name: str
    fields_to_not_clone: Set[str] = field(default_factory=set)
    required_fields: Tuple[str, ...] = ()
    required_field_defaults: Dict[str, FieldValue] = field(default_factory=dict)
    phases: Dict[str, PhaseGroups] = field(default_factory=dict)


class JiraConfig:
    def __init__(self, config_path: Optional[str] = None) -> None:
        if config_path is None:
            config_path = os.path.expanduser(Constants.DEFAULT_CONFIG_PATH)

        self.config_path = config_path
        self.config = configparser.ConfigParser(interpolation=None)

        if os.path.exists(config_path):
            self.config.read(config_path)
        else:
            raise FileNotFoundError(f"Config file not found: {config_path}")

        self.issue_types = self._load_issue_types()

    def get(self, section: str, key: str, fallback: str = None) -> str:
        return self.config.get(section, key, fallback=fallback)

    @property
    def base_url(self) -> str:
        return self.get("jira", "base_url") or self.get("DEFAULT", "base_url")

    @property
    def username(self) -> str:
        return self.get("jira", "username") or self.get("DEFAULT", "username")

    @property
    def api_token(self) -> str:
        return self.get("jira", "api_token") or self.get("DEFAULT", "api_token")

    @property
    def link_timeout(self) -> Optional[float]:
        """Seconds to wait for link creation, None to wait without limit."""
        millis = int(self.get("link", "timeout_millis", fallback="0") or 0)
        return millis / 1000.0 if millis > 0 else None

    @property
    def link_types(self) -> Dict[str, str]:
        types = {}
        for item in split_list(self.get("link", "types")):
            alias, _, name = item.partition(":")
            types[alias.strip()] = name.strip() or alias.strip()
        return types

    def normalize_link_type(self, link_type: str) -> str:
        """Map a configured alias (or the Jira name itself) to the Jira link name."""
        for alias, name in self.link_types.items():
            if link_type in (alias, name):
                return name
        return link_type

    def issue_properties(self, full: bool = False) -> List[str]:
        if full:
            configured = self.get("get", "full_properties")
            default = Constants.FULL_PROPERTIES
        else:
            configured = self.get("get", "short_properties")
            default = Constants.SHORT_PROPERTIES
        return split_list(configured) or list(default)

    def discovery_rules(self) -> DiscoveryRules:
        defaults = DiscoveryRules()
        return DiscoveryRules(
            testable_types=tuple(
                split_list(self.get("discovery", "testable_types"))
                or defaults.testable_types
            ),
            releasable_types=tuple(
                split_list(self.get("discovery", "releasable_types"))
                or defaults.releasable_types
            ),
            depends_on_link=self.get(
                "discovery", "depends_on_link", fallback=defaults.depends_on_link
            ),
            tested_by_link=self.get(
                "discovery", "tested_by_link", fallback=defaults.tested_by_link
            ),
        )

    def phase_table(self) -> PhaseTable:
        return PhaseTable(
            {type_id: conf.phases for type_id, conf in self.issue_types.items()},
            {
                type_id: conf.jira_issue_type_name
                for type_id, conf in self.issue_types.items()
            },
        )

    def config_for(self, issue_type: str) -> Optional[IssueTypeConfig]:
        """Look an issue type up by configuration id, then by Jira name."""
        if issue_type in self.issue_types:
            return self.issue_types[issue_type]
        for type_config in self.issue_types.values():
            if type_config.jira_issue_type_name == issue_type:
                return type_config
        return None

    def _load_issue_types(self) -> Dict[str, IssueTypeConfig]:
        issue_types = {}
        for section in self.config.sections():
            if not section.startswith(ISSUE_TYPE_SECTION_PREFIX):
                continue
            type_id = section[len(ISSUE_TYPE_SECTION_PREFIX):].strip()
            options = self.config[section]

            phases = {}
            required_field_defaults = {}
            for option, value in options.items():
                if option.startswith(PHASE_OPTION_PREFIX):
                    phases[option[len(PHASE_OPTION_PREFIX):]] = parse_phase(value)
                elif option.startswith(REQUIRED_FIELD_OPTION_PREFIX) and option.endswith(
                    REQUIRED_FIELD_OPTION_SUFFIX
                ):
                    field_id = option[
                        len(REQUIRED_FIELD_OPTION_PREFIX):-len(REQUIRED_FIELD_OPTION_SUFFIX)
                    ]
                    required_field_defaults[field_id] = FieldValue.parse(value)

            issue_types[type_id] = IssueTypeConfig(
                type_id=type_id,
                jira_issue_type_name=options.get("jira_issue_type_name", type_id),
                fields_to_not_clone=set(split_list(options.get("fields_to_not_clone"))),
                required_fields=tuple(split_list(options.get("required_fields"))),
                required_field_defaults=required_field_defaults,
                phases=phases,
            )
        return issue_types


def create_sample_config(config_path: Optional[str] = None) -> str:
    """Create a sample config file and return its path."""
    if config_path is None:
        config_path = os.path.expanduser(Constants.DEFAULT_CONFIG_PATH)
    config_dir = os.path.dirname(config_path)
    if config_dir:
        os.makedirs(config_dir, exist_ok=True)

    with open(config_path, "w") as f:
        f.write(SAMPLE_CONFIG)

    return config_path
