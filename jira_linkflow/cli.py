"""
jira-linkflow command line interface

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

import argparse
import logging
import sys
from typing import List, Optional

from .cloning import IssueCloner
from .client import JiraClient
from .config import JiraConfig, create_sample_config
from .constants import Constants
from .discovery import DependencyDiscovery
from .display import print_dependencies, print_issue, print_transitions
from .errors import JiraError, RemoteFetchError
from .export import export_to_csv, export_to_json
from .phases import PhaseResolver
from .transitions import SELECTION_STRATEGIES, AdvanceState, TransitionStateMachine
from .utils import LogLevel, setup_logging, split_keys

logger = logging.getLogger(Constants.LOGGER_NAME)


def load_config(config_path: Optional[str] = None) -> JiraConfig:
    """Load and validate the configuration, exiting with a hint when unusable."""
    try:
        config = JiraConfig(config_path)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("Use 'create-config' action to create a sample config file.")
        sys.exit(1)

    if not all([config.base_url, config.username, config.api_token]):
        print(
            "Error: Missing required configuration values (base_url, username, api_token)"
        )
        print("Please check your config file")
        sys.exit(1)

    return config


def issue_keys_of(args) -> List[str]:
    keys: List[str] = []
    for value in args.issue_keys:
        for key in split_keys(value):
            if key not in keys:
                keys.append(key)
    return keys


def build_state_machine(config: JiraConfig, client: JiraClient) -> TransitionStateMachine:
    return TransitionStateMachine(client, PhaseResolver(config.phase_table()))


def action_create_config(args) -> None:
    """Create a sample config file."""
    config_path = create_sample_config(args.config)
    print(f"Sample config created at {config_path}")
    print("Please edit the file with your actual Jira credentials and workflow phases.")


def action_test_auth(args) -> None:
    """Test Jira authentication."""
    config = load_config(args.config)
    print(f"Testing authentication with {config.base_url}...")

    try:
        user_info = JiraClient.from_config(config).test_auth()
    except JiraError as e:
        logger.error(f"Authentication failed: {e}")
        print(f"✗ Authentication failed: {e}")
        sys.exit(1)

    print("✓ Authentication successful!")
    print(f"  User: {user_info.get('displayName', 'Unknown')}")
    print(f"  Email: {user_info.get('emailAddress', 'Unknown')}")


def action_get(args) -> None:
    """Print one or more issues."""
    config = load_config(args.config)
    client = JiraClient.from_config(config)
    properties = config.issue_properties(full=not args.short)

    failures = 0
    for issue_key in issue_keys_of(args):
        try:
            issue = client.fetch_issue(issue_key)
        except JiraError as e:
            logger.error(f"Could not get {issue_key}: {e}")
            print(f"  ✗ {issue_key}: Error - {e}")
            failures += 1
            continue
        print_issue(issue, properties)

    if failures:
        sys.exit(1)


def action_get_transitions(args) -> None:
    """List the transitions currently available for issues."""
    config = load_config(args.config)
    client = JiraClient.from_config(config)

    for issue_key in issue_keys_of(args):
        print_transitions(issue_key, client.get_available_transitions(issue_key))


def action_discover(args) -> None:
    """Find the end-to-end tests issues depend on."""
    config = load_config(args.config)
    rules = config.discovery_rules()
    discovery = DependencyDiscovery(JiraClient.from_config(config), rules)
    issue_keys = issue_keys_of(args)

    print(f"Discovering end-to-end tests of {', '.join(issue_keys)}...")
    try:
        result = discovery.discover(issue_keys, recursive=args.recursive)
    except RemoteFetchError as e:
        logger.error(f"Discovery aborted: {e}")
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\nE2Es for {', '.join(issue_keys)}:")
    print("=" * 50)
    print_dependencies(result)

    if args.export:
        export_to_csv(result, rules, args.export)
    if args.json:
        export_to_json(result, args.json)


def _auto_transition(args, phase: str) -> None:
    config = load_config(args.config)
    machine = build_state_machine(config, JiraClient.from_config(config))
    issue_keys = issue_keys_of(args)

    print(f"\nApplying '{phase}' phase to {len(issue_keys)} issue(s)...")
    results = machine.auto_advance_all(issue_keys, phase)

    succeeded = len([applied for applied in results.values() if applied is not None])
    print(f"\nCompleted: {succeeded}/{len(issue_keys)} issues processed successfully.")
    if succeeded < len(issue_keys):
        sys.exit(1)


def action_auto_transition(args) -> None:
    """Chain the transitions of a configured phase."""
    _auto_transition(args, args.phase)


def action_block(args) -> None:
    """Move issues through the 'block' phase."""
    _auto_transition(args, Constants.BLOCK_PHASE)


def action_unblock(args) -> None:
    """Move issues through the 'unblock' phase."""
    _auto_transition(args, Constants.UNBLOCK_PHASE)


def action_advance(args) -> None:
    """Advance issues interactively."""
    config = load_config(args.config)
    machine = build_state_machine(config, JiraClient.from_config(config))
    chooser = machine.chooser_for(args.strategy, args.phase)

    results = machine.interactive_advance_all(issue_keys_of(args), chooser)

    print("\nSummary:")
    for issue_key, state in results.items():
        print(f"  {issue_key}: {state.value}")
    if AdvanceState.FAILED in results.values():
        sys.exit(1)


def action_link(args) -> None:
    """Link every source issue to every target issue."""
    config = load_config(args.config)
    client = JiraClient.from_config(config)
    link_type = config.normalize_link_type(args.link_type)

    failures = 0
    for source in split_keys(args.sources):
        for target in split_keys(args.targets):
            try:
                client.link_issues(source, target, link_type)
            except JiraError as e:
                logger.error(f"Could not link {source} to {target}: {e}")
                print(f"  ✗ {source} -> {target}: Error - {e}")
                failures += 1
                continue
            print(f"  ✓ {source} -> {target} ({link_type})")

    if failures:
        sys.exit(1)


def action_assign(args) -> None:
    """Assign issues to a user, '@me' being the configured user."""
    config = load_config(args.config)
    client = JiraClient.from_config(config)
    username = config.username if args.user == "@me" else args.user

    failures = 0
    for issue_key in issue_keys_of(args):
        try:
            client.assign_issue(issue_key, username)
        except JiraError as e:
            logger.error(f"Could not assign {issue_key}: {e}")
            print(f"  ✗ {issue_key}: Error - {e}")
            failures += 1
            continue
        print(f"  ✓ {issue_key}: Assigned to {username}")

    if failures:
        sys.exit(1)


def _clone(args, project_key: Optional[str]) -> None:
    config = load_config(args.config)
    cloner = IssueCloner(JiraClient.from_config(config), config)

    failures = 0
    for issue_key in issue_keys_of(args):
        try:
            clone_key = cloner.clone(issue_key, project_key)
        except (JiraError, ValueError) as e:
            logger.error(f"Could not clone {issue_key}: {e}")
            print(f"  ✗ {issue_key}: Error - {e}")
            failures += 1
            continue
        print(f"  ✓ {issue_key}: Cloned to {clone_key}")

    if failures:
        sys.exit(1)


def action_clone(args) -> None:
    """Clone issues in their own project."""
    _clone(args, None)


def action_move(args) -> None:
    """Clone issues into another project."""
    _clone(args, args.project)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Jira link discovery and workflow automation"
    )
    parser.add_argument(
        "--config", help=f"Path to config file (default: {Constants.DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level",
    )
    parser.add_argument(
        "--no-timestamp", action="store_true", help="Disable timestamps in log output"
    )

    subparsers = parser.add_subparsers(
        dest="action", required=True, help="Available actions"
    )

    def add_keys(sub_parser):
        sub_parser.add_argument(
            "issue_keys",
            nargs="+",
            help="Issue keys, space or comma separated (e.g., PROJ-1,PROJ-2)",
        )

    create_config_parser = subparsers.add_parser(
        "create-config", help="Create a sample config file"
    )
    create_config_parser.set_defaults(func=action_create_config)

    test_auth_parser = subparsers.add_parser(
        "test-auth", help="Test Jira authentication"
    )
    test_auth_parser.set_defaults(func=action_test_auth)

    get_parser = subparsers.add_parser("get", help="Show issues")
    add_keys(get_parser)
    get_parser.add_argument(
        "--short", action="store_true", help="Use the short property list"
    )
    get_parser.set_defaults(func=action_get)

    get_transitions_parser = subparsers.add_parser(
        "get-transitions", help="List the transitions available for issues"
    )
    add_keys(get_transitions_parser)
    get_transitions_parser.set_defaults(func=action_get_transitions)

    discover_parser = subparsers.add_parser(
        "discover", help="Find the end-to-end tests issues depend on"
    )
    add_keys(discover_parser)
    discover_parser.add_argument(
        "--recursive",
        action="store_true",
        help="Also find the end-to-end tests of the end-to-end tests",
    )
    discover_parser.add_argument("--export", help="Export results to a CSV file")
    discover_parser.add_argument("--json", help="Export results to a JSON file")
    discover_parser.set_defaults(func=action_discover)

    auto_transition_parser = subparsers.add_parser(
        "auto-transition", help="Apply the transitions of a configured phase"
    )
    add_keys(auto_transition_parser)
    auto_transition_parser.add_argument(
        "--phase", required=True, help="Phase to apply (e.g., block, unblock, start)"
    )
    auto_transition_parser.set_defaults(func=action_auto_transition)

    block_parser = subparsers.add_parser("block", help="Apply the 'block' phase")
    add_keys(block_parser)
    block_parser.set_defaults(func=action_block)

    unblock_parser = subparsers.add_parser("unblock", help="Apply the 'unblock' phase")
    add_keys(unblock_parser)
    unblock_parser.set_defaults(func=action_unblock)

    advance_parser = subparsers.add_parser(
        "advance", help="Advance issues choosing transitions interactively"
    )
    add_keys(advance_parser)
    advance_parser.add_argument(
        "--strategy",
        choices=sorted(SELECTION_STRATEGIES),
        default="terminal",
        help="terminal: always ask; phase: follow --phase, ask when it has no answer",
    )
    advance_parser.add_argument(
        "--phase",
        default=Constants.BLOCK_PHASE,
        help=f"Phase used by the 'phase' strategy (default: {Constants.BLOCK_PHASE})",
    )
    advance_parser.set_defaults(func=action_advance)

    link_parser = subparsers.add_parser("link", help="Link issues")
    link_parser.add_argument("sources", help="Source issue keys, comma separated")
    link_parser.add_argument("targets", help="Target issue keys, comma separated")
    link_parser.add_argument(
        "link_type", help="Link type name or configured alias (e.g., depends-on)"
    )
    link_parser.set_defaults(func=action_link)

    assign_parser = subparsers.add_parser("assign", help="Assign issues to a user")
    add_keys(assign_parser)
    assign_parser.add_argument(
        "--user", default="@me", help="User to assign to (default: @me)"
    )
    assign_parser.set_defaults(func=action_assign)

    clone_parser = subparsers.add_parser("clone", help="Clone issues")
    add_keys(clone_parser)
    clone_parser.set_defaults(func=action_clone)

    move_parser = subparsers.add_parser("move", help="Clone issues into another project")
    add_keys(move_parser)
    move_parser.add_argument("--project", required=True, help="Destination project key")
    move_parser.set_defaults(func=action_move)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = LogLevel(args.log_level)
    setup_logging(log_level, not args.no_timestamp)

    logger.info(f"Starting jira-linkflow with action: {args.action}")

    try:
        args.func(args)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled.")
        sys.exit(1)
    except JiraError as e:
        logger.error(f"Jira error: {e}")
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
