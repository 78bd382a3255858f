"""
jira-linkflow data model

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

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


class Direction(Enum):
    """Direction of an issue link as seen from the issue that holds it."""

    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"


@dataclass(frozen=True)
class IssueLink:
    target_key: str
    link_type_name: str
    direction: Direction

    @classmethod
    def from_api(cls, link_data: Dict) -> Optional["IssueLink"]:
        """Build a link from an entry of the ``issuelinks`` field."""
        link_type_name = link_data.get("type", {}).get("name", "")
        if "outwardIssue" in link_data:
            return cls(
                link_data["outwardIssue"].get("key", ""),
                link_type_name,
                Direction.OUTBOUND,
            )
        if "inwardIssue" in link_data:
            return cls(
                link_data["inwardIssue"].get("key", ""),
                link_type_name,
                Direction.INBOUND,
            )
        return None


@dataclass(frozen=True)
class Issue:
    """Snapshot of a Jira issue, fetched on demand."""

    key: str
    summary: str
    issue_type: str
    status: str
    links: Tuple[IssueLink, ...] = ()
    fields: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_api(cls, issue_data: Dict) -> "Issue":
        fields = issue_data.get("fields", {})
        links = []
        for link_data in fields.get("issuelinks") or []:
            link = IssueLink.from_api(link_data)
            if link is not None:
                links.append(link)

        return cls(
            key=issue_data.get("key", ""),
            summary=fields.get("summary", ""),
            issue_type=(fields.get("issuetype") or {}).get("name", ""),
            status=(fields.get("status") or {}).get("name", ""),
            links=tuple(links),
            fields=fields,
        )


@dataclass(frozen=True)
class Transition:
    id: str
    name: str

    @classmethod
    def from_api(cls, transition_data: Dict) -> "Transition":
        return cls(str(transition_data.get("id", "")), transition_data.get("name", ""))


class FieldKind(Enum):
    STRING = "string"
    NUMBER = "number"
    MAPPING = "mapping"


@dataclass(frozen=True)
class FieldValue:
    """Value sent to Jira for a required field: a string, a number or a mapping."""

    kind: FieldKind
    value: Union[str, float, Tuple[Tuple[str, str], ...]]

    @classmethod
    def parse(cls, text: str) -> "FieldValue":
        """Parse ``name:value`` pairs into a mapping, else a number, else a string."""
        text = text.strip()
        if ":" in text:
            pairs = []
            for item in text.split(","):
                if not item.strip():
                    continue
                name, _, value = item.partition(":")
                pairs.append((name.strip(), value.strip()))
            return cls(FieldKind.MAPPING, tuple(pairs))
        try:
            return cls(FieldKind.NUMBER, float(text))
        except ValueError:
            return cls(FieldKind.STRING, text)

    def to_json(self) -> Any:
        if self.kind == FieldKind.MAPPING:
            return dict(self.value)
        if self.kind == FieldKind.NUMBER and float(self.value).is_integer():
            return int(self.value)
        return self.value


class DependencySet:
    """Issues a key depends on, iterated in key order."""

    def __init__(self) -> None:
        self._issues: Dict[str, Issue] = {}

    def add(self, issue: Issue) -> None:
        if issue is None or not issue.key:
            raise ValueError("Dependency sets only hold fetched issues")
        self._issues[issue.key] = issue

    def keys(self) -> List[str]:
        return sorted(self._issues)

    def __iter__(self) -> Iterator[Issue]:
        for key in self.keys():
            yield self._issues[key]

    def __contains__(self, key: object) -> bool:
        return key in self._issues

    def __len__(self) -> int:
        return len(self._issues)

    def __repr__(self) -> str:
        return f"DependencySet({self.keys()})"


class TraversalResult:
    """Dependency sets keyed by issue key, in discovery order."""

    def __init__(self) -> None:
        self.dependencies: Dict[str, DependencySet] = {}
        self.issues: Dict[str, Issue] = {}

    def start(self, key: str, issue: Issue) -> DependencySet:
        """Register an issue with an empty dependency set and return the set."""
        dependencies = DependencySet()
        self.dependencies[key] = dependencies
        self.issues[key] = issue
        return dependencies

    def as_key_map(self) -> Dict[str, List[str]]:
        return {key: deps.keys() for key, deps in self.dependencies.items()}

    def __getitem__(self, key: str) -> DependencySet:
        return self.dependencies[key]

    def __contains__(self, key: object) -> bool:
        return key in self.dependencies

    def __iter__(self) -> Iterator[str]:
        return iter(self.dependencies)

    def __len__(self) -> int:
        return len(self.dependencies)

    def items(self):
        return self.dependencies.items()
