# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import logging
from pathlib import Path
import sys
import time

from pr_assignment_agent.errors import ConfigurationError
from pr_assignment_agent.errors import ExternalCallError
from pr_assignment_agent.handler import PullRequest
from pr_assignment_agent.handler import handle_pull_request
from pr_assignment_agent.policy import Policy
from pr_assignment_agent.settings import AUTO_ASSIGN_CONFIG_PATH
from pr_assignment_agent.settings import EVENT_NAME
from pr_assignment_agent.settings import OWNER
from pr_assignment_agent.settings import PR_NUMBER
from pr_assignment_agent.settings import REPO
from pr_assignment_agent.utils import GitHubClient
from pr_assignment_agent.utils import parse_number_string


def process_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(
        description="A script that assigns reviewers and assignees to a PR.",
        epilog=(
            "Example usage: \n"
            "\tpython -m pr_assignment_agent.main --pr_number 21\n"
            "\tpython -m pr_assignment_agent.main --pr_number 21"
            " --config .github/auto_assign.json\n"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--pr_number",
        type=str,
        metavar="NUM",
        help="Process a specific pull request number.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(AUTO_ASSIGN_CONFIG_PATH),
        metavar="PATH",
        help="Path to the JSON assignment policy.",
    )
    return parser.parse_args(argv)


def resolve_pr_number(args: argparse.Namespace) -> int:
    """Pick the PR number from the arguments, then from the triggering event."""
    if args.pr_number:
        return parse_number_string(args.pr_number)
    if EVENT_NAME in ("pull_request", "pull_request_target") and PR_NUMBER:
        print(f"EVENT: Processing specific PR due to '{EVENT_NAME}' event.")
        return parse_number_string(PR_NUMBER)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = process_arguments(argv)
    pr_number = resolve_pr_number(args)
    if not pr_number:
        print(f"Error: No valid PR number received (event: {EVENT_NAME}).")
        return 1

    policy = Policy.from_file(args.config)
    client = GitHubClient(OWNER, REPO)
    try:
        payload = client.get_pull_request(pr_number)
    except ExternalCallError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Assigning reviewers and assignees on PR #{pr_number}...")
    handle_pull_request(PullRequest.from_payload(payload), policy, client)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    start_time = time.time()
    print(
        f"Start assigning {OWNER}/{REPO} pull requests at"
        f" {time.strftime('%Y-%m-%d %H:%M:%S', time.gmtime(start_time))}"
    )
    print("-" * 80)
    try:
        exit_code = main()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    print("-" * 80)
    end_time = time.time()
    print(
        "Assignment finished at"
        f" {time.strftime('%Y-%m-%d %H:%M:%S', time.gmtime(end_time))}",
    )
    print("Total script execution time:", f"{end_time - start_time:.2f} seconds")
    sys.exit(exit_code)
