"""
jira-linkflow constants

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


class Constants:
    """Application constants."""

    LOGGER_NAME = "jira-linkflow"
    DEFAULT_CONFIG_PATH = "~/.config/jira"

    # Rate limiting
    MAX_RETRIES = 3
    BASE_RETRY_DELAY = 1.0
    MAX_RETRY_DELAY = 30.0
    BACKOFF_FACTOR = 2.0

    # Pause between issues of a batch
    API_RATE_LIMIT_DELAY = 0.1

    # Issue types
    ISSUE_TYPE_E2E = "End-to-end Test"
    ISSUE_TYPE_DEFECT = "Defect"
    ISSUE_TYPE_CUSTOMER_DEFECT = "Customer Defect"
    ISSUE_TYPE_FEATURE_STORY = "Feature Story"
    ISSUE_TYPE_FEATURE_DEFECT = "Feature Defect"

    TESTABLE_TYPES = (ISSUE_TYPE_E2E,)
    RELEASABLE_TYPES = (
        ISSUE_TYPE_DEFECT,
        ISSUE_TYPE_CUSTOMER_DEFECT,
        ISSUE_TYPE_FEATURE_STORY,
        ISSUE_TYPE_FEATURE_DEFECT,
    )

    # Link types
    DEPENDS_ON_LINK = "Depends On"
    TESTED_BY_LINK = "Tests Writing"
    CLONERS_LINK = "Cloners"

    # Well known workflow phases
    BLOCK_PHASE = "block"
    UNBLOCK_PHASE = "unblock"

    # Interactive selection
    SKIP_CHOICE = -1
    CANCEL_CHOICE = 0

    # Issue properties printed by the get action
    SHORT_PROPERTIES = ("key", "summary", "status")
    FULL_PROPERTIES = ("key", "type", "summary", "status", "links")

    # Fields copied when cloning, besides the custom fields
    CLONED_FIELDS = (
        "summary",
        "description",
        "priority",
        "labels",
        "components",
        "versions",
        "reporter",
        "assignee",
    )
