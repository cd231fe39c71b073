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

from dataclasses import dataclass
from dataclasses import field
import logging
import random
from typing import Any
from typing import Protocol

from pr_assignment_agent.errors import ConfigurationError
from pr_assignment_agent.errors import ExternalCallError
from pr_assignment_agent.errors import VersionLabelError
from pr_assignment_agent.policy import Policy
from pr_assignment_agent.policy import VersionTier
from pr_assignment_agent.selection import choose_assignees
from pr_assignment_agent.selection import choose_reviewers
from pr_assignment_agent.selection import select_by_version_tier
from pr_assignment_agent.selection import should_skip

logger = logging.getLogger(__name__)


class Forge(Protocol):
    """Performs the GitHub calls for a pull request."""

    def request_reviewers(
        self, pr_number: int, reviewers: list[str], team_reviewers: list[str]
    ) -> Any:
        ...

    def add_assignees(self, pr_number: int, assignees: list[str]) -> Any:
        ...


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    author: str
    draft: bool = False
    labels: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PullRequest":
        """Read a pull request from its GitHub REST representation."""
        return cls(
            number=payload["number"],
            title=payload.get("title") or "",
            author=payload["user"]["login"],
            draft=bool(payload.get("draft", False)),
            labels=frozenset(label["name"] for label in payload.get("labels", [])),
        )


def handle_pull_request(
    pull_request: PullRequest,
    policy: Policy | None,
    forge: Forge,
    rng: random.Random | None = None,
) -> None:
    """Request reviews and add assignees on a pull request.

    Reviewers, assignees and version policy reviewers are handled one after
    the other, each in its own failure boundary: an error in one of them is
    logged and the others still run.

    Args:
      pull_request: the pull request to process.
      policy: the repository policy, None if it could not be loaded.
      forge: client performing the GitHub calls.
      rng: random source for the selection.

    Raises:
      ConfigurationError: if the policy is missing or inconsistent.
    """
    if policy is None:
        raise ConfigurationError("the configuration file failed to load")

    if should_skip(pull_request.title, policy.skip_keywords):
        logger.info("skips adding reviewers")
        return
    if pull_request.draft:
        logger.info("ignore draft PR")
        return

    policy.validate()

    if rng is None:
        rng = random.Random()
    if policy.add_reviewers:
        _add_reviewers(pull_request, policy, forge, rng)
    if policy.add_assignees:
        _add_assignees(pull_request, policy, forge, rng)
    if policy.add_version_policy_reviewers:
        _add_version_policy_reviewers(pull_request, policy, forge, rng)


def _add_reviewers(
    pull_request: PullRequest, policy: Policy, forge: Forge, rng: random.Random
) -> None:
    try:
        selection = choose_reviewers(pull_request.author, policy, rng)
        if selection.is_empty:
            return
        result = forge.request_reviewers(
            pull_request.number, selection.reviewers, selection.team_reviewers
        )
        logger.info("Requested reviews on #%s: %s", pull_request.number, result)
    except ExternalCallError as e:
        logger.error("Failed to add reviewers: %s", e)
    except Exception:
        logger.exception("Unexpected error while adding reviewers")


def _add_assignees(
    pull_request: PullRequest, policy: Policy, forge: Forge, rng: random.Random
) -> None:
    try:
        assignees = choose_assignees(pull_request.author, policy, rng)
        if not assignees:
            return
        result = forge.add_assignees(pull_request.number, assignees)
        logger.info("Added assignees on #%s: %s", pull_request.number, result)
    except ExternalCallError as e:
        logger.error("Failed to add assignees: %s", e)
    except Exception:
        logger.exception("Unexpected error while adding assignees")


def _add_version_policy_reviewers(
    pull_request: PullRequest, policy: Policy, forge: Forge, rng: random.Random
) -> None:
    try:
        tier = VersionTier.from_labels(pull_request.labels)
        selection = select_by_version_tier(pull_request.author, tier, policy, rng)
        if selection.is_empty:
            return
        result = forge.request_reviewers(
            pull_request.number, selection.reviewers, selection.team_reviewers
        )
        logger.info(
            "Requested %s version reviews on #%s: %s",
            tier.value,
            pull_request.number,
            result,
        )
    except (VersionLabelError, ExternalCallError) as e:
        logger.error("Failed to add version policy reviewers: %s", e)
    except Exception:
        logger.exception("Unexpected error while adding version policy reviewers")
