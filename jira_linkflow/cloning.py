"""
jira-linkflow issue cloning

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
from typing import Any, Dict, Optional

from .constants import Constants
from .models import Direction


class IssueCloner:
    """Copies an issue field by field, in its own project or another one."""

    def __init__(self, client, config, clone_links: bool = True) -> None:
        self.client = client
        self.config = config
        self.clone_links = clone_links
        self.logger = logging.getLogger(Constants.LOGGER_NAME)

    def build_fields(self, issue, project_key: str) -> Dict[str, Any]:
        type_config = self.config.config_for(issue.issue_type)
        if type_config is None:
            raise ValueError(
                f"Cannot clone or move issues of type {issue.issue_type}. No configuration found"
            )

        source = issue.fields
        fields: Dict[str, Any] = {
            "project": {"key": project_key},
            "issuetype": {"name": issue.issue_type},
        }

        for field_id, value in source.items():
            if value is None:
                continue
            if field_id not in Constants.CLONED_FIELDS and not field_id.startswith("customfield_"):
                continue
            if field_id in type_config.fields_to_not_clone:
                continue
            if field_id in type_config.required_fields:
                continue
            fields[field_id] = value

        for field_id in type_config.required_fields:
            default = type_config.required_field_defaults.get(field_id)
            if default is None:
                self.logger.warning(f"No default configured for required field {field_id}")
                continue
            self.logger.debug(f"Setting required field {field_id}: {default.to_json()}")
            fields[field_id] = default.to_json()

        return fields

    def clone(self, issue_key: str, project_key: Optional[str] = None) -> str:
        """Clone an issue and return the key of the copy.

        Args:
            issue_key: Issue to copy
            project_key: Destination project, the source project when omitted
        """
        issue = self.client.fetch_issue(issue_key)
        if project_key is None:
            project_key = (issue.fields.get("project") or {}).get("key", "")

        self.logger.info(f"Start cloning {issue_key} into {project_key}")
        clone_key = self.client.create_issue(self.build_fields(issue, project_key))
        self.logger.info(f"Issue {issue_key} cloned to {clone_key}")

        self.client.link_issues(clone_key, issue_key, Constants.CLONERS_LINK)
        if self.clone_links:
            for link in issue.links:
                if link.direction == Direction.OUTBOUND:
                    self.client.link_issues(clone_key, link.target_key, link.link_type_name)
                else:
                    self.client.link_issues(link.target_key, clone_key, link.link_type_name)

        return clone_key
