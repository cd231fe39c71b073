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

import logging
from typing import Any

from pr_assignment_agent.errors import ExternalCallError
from pr_assignment_agent.settings import GITHUB_BASE_URL
from pr_assignment_agent.settings import GITHUB_TOKEN
import requests

logger = logging.getLogger(__name__)

headers = {
    "Authorization": f"token {GITHUB_TOKEN}",
    "Accept": "application/vnd.github.v3+json",
}


def get_request(url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    if params is None:
        params = {}
    response = requests.get(url, headers=headers, params=params, timeout=60)
    response.raise_for_status()
    return response.json()


def post_request(url: str, payload: Any) -> dict[str, Any]:
    response = requests.post(url, headers=headers, json=payload, timeout=60)
    response.raise_for_status()
    return response.json()


def parse_number_string(number_str: str | None, default_value: int = 0) -> int:
    """Parse a number from the given string."""
    if number_str is None:
        return default_value
    try:
        return int(number_str)
    except ValueError:
        logger.warning(
            "Invalid number string: %s. Defaulting to %s.", number_str, default_value
        )
        return default_value


class GitHubClient:
    """Pull request calls against one repository of the GitHub REST API.

    Every failed request is raised as an `ExternalCallError`.
    """

    def __init__(self, owner: str, repo: str) -> None:
        self._repo_url = f"{GITHUB_BASE_URL}/repos/{owner}/{repo}"

    def get_pull_request(self, pr_number: int) -> dict[str, Any]:
        """Fetch the pull request payload."""
        url = f"{self._repo_url}/pulls/{pr_number}"
        try:
            return get_request(url)
        except requests.exceptions.RequestException as e:
            raise ExternalCallError(
                f"Error fetching pull request #{pr_number}: {e}"
            ) from e

    def request_reviewers(
        self, pr_number: int, reviewers: list[str], team_reviewers: list[str]
    ) -> dict[str, Any]:
        """Request a review from the given users and teams.

        Args:
          pr_number: number of the pull request.
          reviewers: user logins.
          team_reviewers: team slugs.

        Returns:
          The updated pull request.
        """
        url = f"{self._repo_url}/pulls/{pr_number}/requested_reviewers"
        payload = {"reviewers": reviewers, "team_reviewers": team_reviewers}
        try:
            return post_request(url, payload)
        except requests.exceptions.RequestException as e:
            raise ExternalCallError(
                f"Error requesting reviewers on #{pr_number}: {e}"
            ) from e

    def add_assignees(self, pr_number: int, assignees: list[str]) -> dict[str, Any]:
        """Assign the given users. Pull requests share the issues endpoint."""
        url = f"{self._repo_url}/issues/{pr_number}/assignees"
        try:
            return post_request(url, {"assignees": assignees})
        except requests.exceptions.RequestException as e:
            raise ExternalCallError(
                f"Error adding assignees on #{pr_number}: {e}"
            ) from e
