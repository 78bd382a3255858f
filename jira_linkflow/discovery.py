"""
jira-linkflow dependency discovery

Walks the Jira link graph breadth-first. End-to-end tests are followed through
their outbound "Depends On" links, releasable issues (defects, stories) through
their outbound "Tests Writing" links. Only end-to-end tests end up in a
dependency set.

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
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Iterable, Optional, Sequence, Set

from .constants import Constants
from .models import Direction, DependencySet, Issue, IssueLink, TraversalResult


class Role(Enum):
    TESTABLE = "testable"
    RELEASABLE = "releasable"
    OTHER = "other"


@dataclass(frozen=True)
class LinkRule:
    """A link type name followed in one direction."""

    link_type_name: str
    direction: Direction = Direction.OUTBOUND

    def matches(self, link: IssueLink) -> bool:
        return (
            link.link_type_name == self.link_type_name
            and link.direction == self.direction
        )


@dataclass(frozen=True)
class DiscoveryRules:
    testable_types: Sequence[str] = Constants.TESTABLE_TYPES
    releasable_types: Sequence[str] = Constants.RELEASABLE_TYPES
    depends_on_link: str = Constants.DEPENDS_ON_LINK
    tested_by_link: str = Constants.TESTED_BY_LINK

    def role_of(self, issue: Issue) -> Role:
        if issue.issue_type in self.testable_types:
            return Role.TESTABLE
        if issue.issue_type in self.releasable_types:
            return Role.RELEASABLE
        return Role.OTHER

    def edge_for(self, role: Role) -> Optional[LinkRule]:
        """Link rule followed for issues of ``role``, None when nothing is followed."""
        edges = {
            Role.TESTABLE: LinkRule(self.depends_on_link),
            Role.RELEASABLE: LinkRule(self.tested_by_link),
        }
        return edges.get(role)


class DependencyDiscovery:
    """Finds the end-to-end tests issues depend on.

    Each call to ``discover`` owns its own visited set and issue cache; an
    instance can be reused for several runs but not concurrently.
    """

    def __init__(self, gateway, rules: Optional[DiscoveryRules] = None) -> None:
        self.gateway = gateway
        self.rules = rules or DiscoveryRules()
        self.logger = logging.getLogger(Constants.LOGGER_NAME)

    def discover(self, seed_keys: Iterable[str], recursive: bool = False) -> TraversalResult:
        """Map every seed key (and, if recursive, every dependency) to its dependencies.

        Args:
            seed_keys: Issue keys to start from, at least one
            recursive: Also explore the dependencies of dependencies until no
                new key shows up

        Raises:
            RemoteFetchError: when any issue cannot be fetched; no partial
                result is returned
        """
        seed_keys = list(seed_keys)
        if not seed_keys:
            raise ValueError("At least one issue key is required")

        result = TraversalResult()
        fetched: Dict[str, Issue] = {}

        for key in seed_keys:
            if key not in result:
                self._expand(key, result, fetched)

        if recursive:
            visited: Set[str] = set(result)
            frontier: Deque[DependencySet] = deque(result[key] for key in result)
            while frontier:
                dependencies = frontier.popleft()
                for key in dependencies.keys():
                    if key in visited:
                        continue
                    visited.add(key)
                    frontier.append(self._expand(key, result, fetched))

        self.logger.info(
            f"Discovered {len(result)} issues from {', '.join(seed_keys)}"
        )
        return result

    def _fetch(self, key: str, fetched: Dict[str, Issue]) -> Issue:
        if key not in fetched:
            issue = self.gateway.fetch_issue(key)
            self.logger.debug(
                f"Fetched {issue.key} '{issue.issue_type}' [{issue.status}] with {len(issue.links)} links"
            )
            fetched[key] = issue
        return fetched[key]

    def _expand(
        self, key: str, result: TraversalResult, fetched: Dict[str, Issue]
    ) -> DependencySet:
        issue = self._fetch(key, fetched)
        dependencies = result.start(key, issue)

        edge = self.rules.edge_for(self.rules.role_of(issue))
        if edge is None:
            return dependencies

        for link in issue.links:
            if not edge.matches(link):
                continue
            target = self._fetch(link.target_key, fetched)
            if self.rules.role_of(target) == Role.TESTABLE:
                dependencies.add(target)

        return dependencies
