"""
jira-linkflow export of discovery results

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

import csv
import json
from typing import List

from .discovery import DiscoveryRules, Role
from .models import TraversalResult

CSV_HEADER = ["Ticket", "E2E", "Summary", "Depends On E2E"]


def dependency_rows(result: TraversalResult, rules: DiscoveryRules) -> List[List[str]]:
    """One row per dependency, or a single row for keys without dependencies.

    Releasable issues fill the Ticket column, everything else the E2E column.
    """
    rows = []
    for key, dependencies in result.items():
        issue = result.issues[key]
        if rules.role_of(issue) == Role.RELEASABLE:
            prefix = [key, ""]
        else:
            prefix = ["", key]

        if not dependencies:
            rows.append(prefix + [issue.summary, ""])
        for dependency in dependencies:
            rows.append(prefix + [issue.summary, dependency.key])
    return rows


def export_to_csv(result: TraversalResult, rules: DiscoveryRules, filename: str) -> int:
    """Write the discovery result as ';' separated CSV, return the row count."""
    rows = dependency_rows(result, rules)
    with open(filename, "w", newline="") as f:
        writer = csv.writer(f, delimiter=";")
        writer.writerow(CSV_HEADER)
        writer.writerows(rows)
    print(f"Exported {len(rows)} rows to {filename}")
    return len(rows)


def export_to_json(result: TraversalResult, filename: str) -> None:
    """Export the discovery result to a JSON file."""
    data = [
        {
            "key": key,
            "summary": result.issues[key].summary,
            "issue_type": result.issues[key].issue_type,
            "status": result.issues[key].status,
            "depends_on": [
                {"key": dependency.key, "status": dependency.status}
                for dependency in dependencies
            ],
        }
        for key, dependencies in result.items()
    ]

    with open(filename, "w") as f:
        json.dump(data, f, indent=2)
    print(f"Exported {len(data)} issues to {filename}")
