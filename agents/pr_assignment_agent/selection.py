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

"""Reviewer and assignee selection.

Pure functions from a policy and the PR author to the logins and team slugs
to request. The author is never selected. Sampling draws from a
`random.Random` passed by the caller, or a fresh one per call, so that
concurrent events never share random state and tests can pass a seeded
generator.
"""

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
import random

from pr_assignment_agent.policy import Identifier
from pr_assignment_agent.policy import Policy
from pr_assignment_agent.policy import VersionTier


@dataclass(frozen=True)
class SelectionResult:
    """Users and teams to request a review from."""

    reviewers: list[str] = field(default_factory=list)
    team_reviewers: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.reviewers and not self.team_reviewers


def should_skip(title: str | None, keywords: Iterable[str] | None) -> bool:
    """Whether the PR title opts out of automatic assignment.

    Args:
      title: title of the pull request.
      keywords: skip keywords from the policy, matched case-insensitively.

    Returns:
      True if any keyword occurs in the title.
    """
    if not title or not keywords:
        return False
    lowered = title.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def _is_author(identifier: Identifier, author: str) -> bool:
    # GitHub logins are case-insensitive.
    return not identifier.is_team and identifier.name.lower() == author.lower()


def select_flat(
    author: str,
    pool: Sequence[Identifier],
    count: int,
    rng: random.Random | None = None,
) -> list[Identifier]:
    """Pick up to `count` candidates from a flat pool, excluding the author.

    Args:
      author: login of the PR author.
      pool: candidates, in configuration order.
      count: how many to pick. Zero or less selects every candidate.
      rng: random source. A fresh generator is used when omitted.

    Returns:
      The selected candidates, without repetition. Empty when nobody but the
      author is available.
    """
    candidates = [c for c in pool if not _is_author(c, author)]
    if not candidates:
        return []
    if count <= 0:
        return candidates
    if rng is None:
        rng = random.Random()
    return rng.sample(candidates, min(count, len(candidates)))


def select_from_groups(
    author: str,
    groups: Mapping[str, Sequence[Identifier]],
    count_per_output: int,
    rng: random.Random | None = None,
) -> list[Identifier]:
    """Pick up to `count_per_output` candidates from each group.

    Groups are sampled independently, in their declared order, and the
    results concatenated. A member of two groups may therefore be picked
    twice.
    """
    if rng is None:
        rng = random.Random()
    selected: list[Identifier] = []
    for members in groups.values():
        selected.extend(select_flat(author, members, count_per_output, rng))
    return selected


def _select_by_kind(
    author: str,
    pool: Sequence[Identifier],
    count: int,
    rng: random.Random,
) -> SelectionResult:
    """Run the flat selection separately over the users and the teams."""
    users = [i for i in pool if not i.is_team]
    teams = [i for i in pool if i.is_team]
    return SelectionResult(
        reviewers=[u.name for u in select_flat(author, users, count, rng)],
        team_reviewers=[t.name for t in select_flat(author, teams, count, rng)],
    )


def _split_groups(
    groups: Mapping[str, Sequence[Identifier]], teams: bool
) -> dict[str, list[Identifier]]:
    return {
        name: [m for m in members if m.is_team == teams]
        for name, members in groups.items()
    }


def select_by_version_tier(
    author: str,
    tier: VersionTier,
    policy: Policy,
    rng: random.Random | None = None,
) -> SelectionResult:
    """Pick reviewers from the pool configured for a version tier."""
    if rng is None:
        rng = random.Random()
    return _select_by_kind(
        author, policy.tier_reviewers(tier), policy.number_of_reviewers, rng
    )


def choose_reviewers(
    author: str, policy: Policy, rng: random.Random | None = None
) -> SelectionResult:
    """Pick the reviewers to request for a PR.

    Uses the review groups when group mode is on and at least one group is
    configured, the flat reviewer list otherwise.
    """
    if rng is None:
        rng = random.Random()
    count = policy.number_of_reviewers
    if policy.use_review_groups and policy.review_groups:
        groups = policy.review_groups
        users = select_from_groups(author, _split_groups(groups, False), count, rng)
        teams = select_from_groups(author, _split_groups(groups, True), count, rng)
        return SelectionResult(
            reviewers=[u.name for u in users],
            team_reviewers=[t.name for t in teams],
        )
    return _select_by_kind(author, policy.reviewers, count, rng)


def choose_assignees(
    author: str, policy: Policy, rng: random.Random | None = None
) -> list[str]:
    """Pick the users to assign to a PR.

    The flat pool is the assignee list, or the reviewer list when no
    assignees are configured. Teams cannot be assigned and are left out.
    """
    if rng is None:
        rng = random.Random()
    count = policy.assignee_count
    if policy.use_assignee_groups and policy.assignee_groups:
        groups = _split_groups(policy.assignee_groups, False)
        selected = select_from_groups(author, groups, count, rng)
    else:
        pool = policy.assignees or policy.reviewers
        selected = select_flat(
            author, [m for m in pool if not m.is_team], count, rng
        )
    return [s.name for s in selected]
