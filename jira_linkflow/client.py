"""
jira-linkflow REST client

The client is the only place talking HTTP to Jira. Every call is synchronous:
the caller waits for the response before doing anything else, which keeps the
order of side effects (transitions, links, clones) reproducible.

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
from typing import Any, Dict, List, Optional

import requests

from .constants import Constants
from .errors import (
    APIError,
    AuthenticationError,
    IssueNotFoundError,
    JiraError,
    RateLimitError,
    RemoteFetchError,
    TransitionRejected,
)
from .models import Issue, Transition
from .utils import retry_with_backoff


class JiraClient:
    def __init__(
        self,
        base_url: str,
        username: str,
        api_token: str,
        link_timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.session = requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {api_token}"})
        self.link_timeout = link_timeout
        self.logger = logging.getLogger(Constants.LOGGER_NAME)

    @classmethod
    def from_config(cls, config) -> "JiraClient":
        return cls(
            config.base_url,
            config.username,
            config.api_token,
            link_timeout=config.link_timeout,
        )

    def _handle_response_errors(self, response: requests.Response) -> None:
        """Handle common HTTP response errors."""
        if response.status_code == 401:
            raise AuthenticationError("Invalid credentials (username/API token)")
        elif response.status_code == 403:
            raise AuthenticationError("Access forbidden (check permissions)")
        elif response.status_code == 404:
            raise IssueNotFoundError("Resource not found")
        elif response.status_code == 429:
            raise RateLimitError("Rate limit exceeded")
        elif not response.ok:
            raise APIError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                response_text=response.text[:500] if response.text else None,
            )

    @retry_with_backoff()
    def test_auth(self) -> Dict:
        """Return the authenticated user, raising when credentials are rejected."""
        response = self.session.get(f"{self.base_url}/rest/api/2/myself")
        self._handle_response_errors(response)
        self.logger.info("Authentication successful")
        return response.json()

    @retry_with_backoff()
    def get_issue(self, issue_key: str) -> Dict:
        """Fetch the raw issue payload from Jira API."""
        url = f"{self.base_url}/rest/api/2/issue/{issue_key}"
        params = {"expand": "issuelinks"}

        response = self.session.get(url, params=params)
        self._handle_response_errors(response)
        return response.json()

    def fetch_issue(self, issue_key: str) -> Issue:
        """Fetch an issue snapshot, links included.

        Raises:
            RemoteFetchError: the issue does not exist or Jira could not be
                reached
        """
        try:
            issue_data = self.get_issue(issue_key)
        except IssueNotFoundError:
            raise RemoteFetchError(issue_key, "issue not found")
        except JiraError as e:
            raise RemoteFetchError(issue_key, str(e)) from e

        issue = Issue.from_api(issue_data)
        self.logger.debug(f"Loaded {issue.key} - {issue.summary} [{issue.status}]")
        return issue

    @retry_with_backoff()
    def _get_transitions(self, issue_key: str) -> List[Dict]:
        url = f"{self.base_url}/rest/api/2/issue/{issue_key}/transitions"
        response = self.session.get(url)
        self._handle_response_errors(response)
        return response.json().get("transitions", [])

    def get_available_transitions(self, issue_key: str) -> List[Transition]:
        """Get available transitions for an issue, empty when Jira fails to answer."""
        try:
            transitions = self._get_transitions(issue_key)
        except JiraError as e:
            self.logger.warning(
                f"Could not fetch transitions for {issue_key}, assuming none: {e}"
            )
            return []
        return [Transition.from_api(transition) for transition in transitions]

    def apply_transition(
        self, issue_key: str, transition_id: str, fields: Optional[Dict[str, Any]] = None
    ) -> None:
        """Move an issue through a transition.

        Raises:
            TransitionRejected: Jira did not accept the transition
        """
        url = f"{self.base_url}/rest/api/2/issue/{issue_key}/transitions"
        payload: Dict[str, Any] = {"transition": {"id": transition_id}}
        if fields:
            payload["fields"] = fields

        try:
            response = self.session.post(url, json=payload)
        except requests.RequestException as e:
            raise TransitionRejected(issue_key, transition_id, str(e)) from e

        if response.status_code != 204:
            reason = f"HTTP {response.status_code}"
            if response.text:
                reason = f"{reason}: {response.text[:500]}"
            raise TransitionRejected(issue_key, transition_id, reason)

    def link_issues(self, from_key: str, to_key: str, link_type: str) -> None:
        """Create a link of ``link_type`` from one issue to another."""
        url = f"{self.base_url}/rest/api/2/issueLink"
        payload = {
            "type": {"name": link_type},
            "inwardIssue": {"key": from_key},
            "outwardIssue": {"key": to_key},
        }

        self.logger.info(f"Link {from_key} to {to_key} as {link_type}")
        try:
            response = self.session.post(url, json=payload, timeout=self.link_timeout)
        except requests.Timeout as e:
            raise APIError(
                f"Linking {from_key} to {to_key} timed out after {self.link_timeout}s"
            ) from e
        except requests.RequestException as e:
            raise APIError(f"Failed to link {from_key} to {to_key}: {e}") from e
        self._handle_response_errors(response)
        self.logger.info(
            f"Link creation completed from {from_key} to {to_key} as {link_type}"
        )

    @retry_with_backoff()
    def assign_issue(self, issue_key: str, username: str) -> None:
        url = f"{self.base_url}/rest/api/2/issue/{issue_key}/assignee"
        response = self.session.put(url, json={"name": username})
        self._handle_response_errors(response)

    def create_issue(self, fields: Dict[str, Any]) -> str:
        """Create an issue and return its key."""
        url = f"{self.base_url}/rest/api/2/issue"
        response = self.session.post(url, json={"fields": fields})
        self._handle_response_errors(response)
        return response.json().get("key", "")
