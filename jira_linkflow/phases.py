"""
jira-linkflow workflow phases and the phase resolver

A phase is a named step of a workflow ("block", "unblock", "qe-review"...)
configured per issue type as an ordered list of alternative groups. Each group
lists transition names, any of which satisfies the step when Jira currently
offers it.

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
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .constants import Constants
from .errors import NoPhaseConfiguration
from .models import Transition

PhaseGroups = Tuple[Tuple[str, ...], ...]


def parse_phase(text: str) -> PhaseGroups:
    """Parse ``"Block|Blocked, Start Review"`` into ordered alternative groups."""
    groups = []
    for group_text in text.split(","):
        names = tuple(name.strip() for name in group_text.split("|") if name.strip())
        if names:
            groups.append(names)
    return tuple(groups)


class PhaseTable:
    """Read-only mapping of issue type -> phase name -> alternative groups.

    Issue types are looked up by their configuration id first and then by the
    Jira issue type name they are configured for.
    """

    def __init__(
        self,
        phases_by_type: Mapping[str, Mapping[str, Sequence[Sequence[str]]]],
        type_names: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._phases: Dict[str, Dict[str, PhaseGroups]] = {}
        for type_id, phases in phases_by_type.items():
            self._phases[type_id] = {
                phase.lower(): tuple(tuple(group) for group in groups)
                for phase, groups in phases.items()
            }
        self._type_names = dict(type_names or {})

    def phases_for(self, issue_type: str) -> Optional[Dict[str, PhaseGroups]]:
        if issue_type in self._phases:
            return self._phases[issue_type]
        for type_id, jira_name in self._type_names.items():
            if jira_name == issue_type and type_id in self._phases:
                return self._phases[type_id]
        return None

    def require(self, issue_type: str, phase: str) -> PhaseGroups:
        """Return the groups of a phase, raising when none are configured."""
        groups = (self.phases_for(issue_type) or {}).get(phase.lower(), ())
        if not groups:
            raise NoPhaseConfiguration(issue_type, phase)
        return groups

    def groups_for(self, issue_type: str, phase: str) -> PhaseGroups:
        """Return the groups of a phase, empty when none are configured."""
        return (self.phases_for(issue_type) or {}).get(phase.lower(), ())


class PhaseResolver:
    """Picks the next transition of a phase among the available ones."""

    def __init__(self, phase_table: PhaseTable) -> None:
        self.phase_table = phase_table
        self.logger = logging.getLogger(Constants.LOGGER_NAME)

    def resolve(
        self, issue_type: str, phase: str, available: Iterable[Transition]
    ) -> Optional[Transition]:
        """Return the transition satisfying the first satisfiable group, if any.

        Groups are tried in configured order and, inside a group, names are
        tried in configured order too.
        """
        try:
            groups = self.phase_table.require(issue_type, phase)
        except NoPhaseConfiguration as e:
            self.logger.debug(str(e))
            return None

        by_name: Dict[str, Transition] = {}
        for transition in available:
            by_name.setdefault(transition.name, transition)

        for group in groups:
            for name in group:
                if name in by_name:
                    return by_name[name]
        return None
