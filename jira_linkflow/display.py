"""
jira-linkflow terminal output

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

import sys
from typing import Iterable, List

from .models import Issue, Transition, TraversalResult
from .utils import Colors


def _disable_colors_when_piped() -> None:
    if not sys.stdout.isatty():
        Colors.disable_colors()


def format_issue(issue: Issue, properties: Iterable[str]) -> str:
    """Render the requested properties of an issue on one line, links below."""
    parts: List[str] = []
    link_lines: List[str] = []
    for prop in properties:
        if prop == "key":
            parts.append(f"{Colors.BOLD}{issue.key}{Colors.RESET} -")
        elif prop == "type":
            parts.append(f"'{issue.issue_type}'")
        elif prop == "summary":
            parts.append(f"{Colors.CYAN}{issue.summary}{Colors.RESET}")
        elif prop == "status":
            parts.append(f"{Colors.YELLOW}[{issue.status or '<undefined>'}]{Colors.RESET}")
        elif prop == "links":
            for link in issue.links:
                link_lines.append(
                    f"    {issue.key} -> {Colors.BLUE}{link.target_key}{Colors.RESET}"
                    f" '{link.link_type_name}':{link.direction.value}"
                )

    return "\n".join([" ".join(parts)] + link_lines)


def print_issue(issue: Issue, properties: Iterable[str]) -> None:
    _disable_colors_when_piped()
    print(format_issue(issue, properties))


def print_transitions(issue_key: str, transitions: List[Transition]) -> None:
    if not transitions:
        print(f"{issue_key}: No transitions available")
        return

    _disable_colors_when_piped()
    print(f"Available transitions for {Colors.BOLD}{issue_key}{Colors.RESET}:")
    for transition in transitions:
        print(f"  {transition.id}) {transition.name}")


def print_dependencies(result: TraversalResult) -> None:
    """Print every discovered key with the keys (and statuses) it depends on."""
    _disable_colors_when_piped()
    for key, dependencies in result.items():
        rendered = ",".join(
            f"{dependency.key}({dependency.status})" for dependency in dependencies
        )
        print(f"    {Colors.BOLD}{key}{Colors.RESET} -> [{rendered}]")
