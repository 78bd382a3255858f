"""
jira-linkflow exception hierarchy

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

from typing import Optional


class JiraError(Exception):
    """Base exception for Jira-related errors."""

    pass


class AuthenticationError(JiraError):
    """Authentication failed."""

    pass


class RateLimitError(JiraError):
    """Rate limit exceeded."""

    pass


class IssueNotFoundError(JiraError):
    """Issue not found."""

    pass


class APIError(JiraError):
    """General API error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class RemoteFetchError(JiraError):
    """An issue could not be retrieved from Jira."""

    def __init__(self, issue_key: str, reason: str):
        super().__init__(f"Failed to fetch issue {issue_key}: {reason}")
        self.issue_key = issue_key
        self.reason = reason


class TransitionRejected(JiraError):
    """Jira refused to apply a transition."""

    def __init__(self, issue_key: str, transition_id: str, reason: str):
        super().__init__(
            f"Transition {transition_id} rejected for {issue_key}: {reason}"
        )
        self.issue_key = issue_key
        self.transition_id = transition_id
        self.reason = reason


class NoPhaseConfiguration(JiraError):
    """No phase configured for an issue type."""

    def __init__(self, issue_type: str, phase: str):
        super().__init__(
            f"No '{phase}' phase configured for issue type '{issue_type}'"
        )
        self.issue_type = issue_type
        self.phase = phase


class UserCancelled(JiraError):
    """The operator cancelled the whole batch."""

    pass


class UserSkipped(JiraError):
    """The operator skipped the current issue."""

    pass


class MalformedSelection(JiraError):
    """The operator typed something that is not a valid choice."""

    pass
