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

"""Tests for reviewer and assignee selection."""

import random

import pytest

from pr_assignment_agent.policy import Policy
from pr_assignment_agent.policy import Team
from pr_assignment_agent.policy import User
from pr_assignment_agent.policy import VersionTier
from pr_assignment_agent.selection import choose_assignees
from pr_assignment_agent.selection import choose_reviewers
from pr_assignment_agent.selection import select_by_version_tier
from pr_assignment_agent.selection import select_flat
from pr_assignment_agent.selection import select_from_groups
from pr_assignment_agent.selection import should_skip


def _users(*logins: str) -> list[User]:
    return [User(login) for login in logins]


def _names(identifiers) -> list[str]:
    return [i.name for i in identifiers]


# =====================================================================
# Skip filter
# =====================================================================


class TestShouldSkip:
    def test_keyword_in_title(self) -> None:
        assert should_skip("wip: fix bug", ["wip"])

    def test_case_insensitive(self) -> None:
        assert should_skip("WIP fix bug", ["wip"])
        assert should_skip("wip fix bug", ["WIP"])

    def test_substring_match(self) -> None:
        assert should_skip("[do-not-merge] refactor", ["not-merge"])

    def test_no_match(self) -> None:
        assert not should_skip("fix bug", ["wip", "draft"])

    def test_empty_keywords(self) -> None:
        assert not should_skip("wip: fix bug", [])
        assert not should_skip("wip: fix bug", None)

    def test_empty_title(self) -> None:
        assert not should_skip("", ["wip"])
        assert not should_skip(None, ["wip"])


# =====================================================================
# Flat selector
# =====================================================================


class TestSelectFlat:
    def test_count_zero_selects_everyone(self) -> None:
        result = select_flat("r4", _users("r1", "r2", "r3"), 0)
        assert sorted(_names(result)) == ["r1", "r2", "r3"]

    def test_negative_count_selects_everyone(self) -> None:
        result = select_flat("r4", _users("r1", "r2", "r3"), -1)
        assert len(result) == 3

    def test_author_excluded_with_count(self) -> None:
        pool = _users("r1", "r2", "r3", "author")
        for seed in range(50):
            result = select_flat("author", pool, 2, random.Random(seed))
            assert len(result) == 2
            assert set(_names(result)) <= {"r1", "r2", "r3"}

    def test_author_excluded_when_selecting_everyone(self) -> None:
        result = select_flat("author", _users("r1", "author"), 0)
        assert _names(result) == ["r1"]

    def test_author_match_ignores_case(self) -> None:
        result = select_flat("Author", _users("r1", "author"), 0)
        assert _names(result) == ["r1"]

    def test_only_author_in_pool(self) -> None:
        assert select_flat("author", _users("author"), 0) == []
        assert select_flat("author", _users("author"), 3) == []

    def test_empty_pool(self) -> None:
        assert select_flat("author", [], 2) == []

    def test_count_larger_than_pool(self) -> None:
        result = select_flat("author", _users("r1", "r2"), 5, random.Random(1))
        assert sorted(_names(result)) == ["r1", "r2"]

    def test_no_repeats(self) -> None:
        pool = _users(*[f"r{i}" for i in range(10)])
        for seed in range(20):
            result = select_flat("author", pool, 6, random.Random(seed))
            assert len(set(result)) == 6

    def test_same_seed_same_selection(self) -> None:
        pool = _users(*[f"r{i}" for i in range(10)])
        first = select_flat("author", pool, 3, random.Random(42))
        second = select_flat("author", pool, 3, random.Random(42))
        assert first == second

    def test_team_with_author_slug_is_kept(self) -> None:
        pool = [Team("org", "author")]
        assert select_flat("author", pool, 0) == pool

    def test_every_candidate_can_be_drawn(self) -> None:
        pool = _users("r1", "r2", "r3")
        seen = set()
        rng = random.Random(7)
        for _ in range(200):
            seen.update(_names(select_flat("author", pool, 1, rng)))
        assert seen == {"r1", "r2", "r3"}


# =====================================================================
# Group selector
# =====================================================================


class TestSelectFromGroups:
    def test_sums_per_group_counts(self) -> None:
        groups = {
            "A": _users("g1a", "g1b", "g1c"),
            "B": _users("g2a"),
        }
        result = select_from_groups("author", groups, 2, random.Random(3))
        names = _names(result)
        assert len(names) == 3
        assert set(names[:2]) <= {"g1a", "g1b", "g1c"}
        assert names[2] == "g2a"

    def test_group_order_is_kept(self) -> None:
        groups = {
            "first": _users("a1", "a2"),
            "second": _users("b1", "b2"),
            "third": _users("c1", "c2"),
        }
        names = _names(select_from_groups("author", groups, 1, random.Random(0)))
        assert [n[0] for n in names] == ["a", "b", "c"]

    def test_author_removed_from_each_group(self) -> None:
        groups = {
            "A": _users("author", "a1"),
            "B": _users("author"),
        }
        result = select_from_groups("author", groups, 2, random.Random(0))
        assert _names(result) == ["a1"]

    def test_duplicates_across_groups_are_kept(self) -> None:
        groups = {"A": _users("shared"), "B": _users("shared")}
        result = select_from_groups("author", groups, 1)
        assert _names(result) == ["shared", "shared"]

    def test_count_zero_selects_whole_groups(self) -> None:
        groups = {"A": _users("a1", "a2"), "B": _users("b1")}
        result = select_from_groups("author", groups, 0)
        assert _names(result) == ["a1", "a2", "b1"]

    def test_empty_groups(self) -> None:
        assert select_from_groups("author", {}, 2) == []


# =====================================================================
# Reviewers and assignees
# =====================================================================


def _policy(**overrides) -> Policy:
    data = {
        "addReviewers": True,
        "addAssignees": True,
        "numberOfReviewers": 0,
        "reviewers": ["reviewer1", "reviewer2", "reviewer3"],
        "skipKeywords": ["wip"],
    }
    data.update(overrides)
    return Policy.from_dict(data)


class TestChooseReviewers:
    def test_flat_pool(self) -> None:
        result = choose_reviewers("pr-creator", _policy())
        assert sorted(result.reviewers) == ["reviewer1", "reviewer2", "reviewer3"]
        assert result.team_reviewers == []

    def test_teams_routed_separately(self) -> None:
        policy = _policy(reviewers=["reviewer1", "my-org/backend", "my-org/web"])
        result = choose_reviewers("pr-creator", policy)
        assert result.reviewers == ["reviewer1"]
        assert sorted(result.team_reviewers) == ["backend", "web"]

    def test_count_applies_per_channel(self) -> None:
        policy = _policy(
            numberOfReviewers=1,
            reviewers=["reviewer1", "reviewer2", "my-org/backend", "my-org/web"],
        )
        result = choose_reviewers("pr-creator", policy, random.Random(5))
        assert len(result.reviewers) == 1
        assert len(result.team_reviewers) == 1

    def test_only_author(self) -> None:
        result = choose_reviewers("pr-creator", _policy(reviewers=["pr-creator"]))
        assert result.is_empty

    def test_review_groups(self) -> None:
        policy = _policy(
            numberOfReviewers=1,
            useReviewGroups=True,
            reviewGroups={
                "groupA": ["group1-user1", "group1-user2", "group1-user3"],
                "groupB": ["group2-user1", "group2-user2", "group2-user3"],
            },
        )
        result = choose_reviewers("pr-creator", policy, random.Random(0))
        assert len(result.reviewers) == 2
        assert result.reviewers[0].startswith("group1")
        assert result.reviewers[1].startswith("group2")

    def test_review_group_smaller_than_count(self) -> None:
        policy = _policy(
            numberOfReviewers=2,
            useReviewGroups=True,
            reviewGroups={
                "groupA": ["group1-user1", "group1-user2", "group1-user3"],
                "groupB": ["group2-user1"],
            },
        )
        result = choose_reviewers("pr-creator", policy, random.Random(0))
        assert len(result.reviewers) == 3
        assert result.reviewers[2] == "group2-user1"

    def test_empty_review_groups_fall_back_to_reviewers(self) -> None:
        policy = _policy(numberOfReviewers=1, useReviewGroups=True, reviewGroups=[])
        result = choose_reviewers("pr-creator", policy, random.Random(0))
        assert len(result.reviewers) == 1
        assert result.reviewers[0].startswith("reviewer")

    def test_groups_ignored_when_disabled(self) -> None:
        policy = _policy(reviewGroups={"groupA": ["group1-user1"]})
        result = choose_reviewers("pr-creator", policy)
        assert sorted(result.reviewers) == ["reviewer1", "reviewer2", "reviewer3"]

    def test_teams_in_review_groups(self) -> None:
        policy = _policy(
            useReviewGroups=True,
            reviewGroups={"groupA": ["user1", "my-org/backend"]},
        )
        result = choose_reviewers("pr-creator", policy)
        assert result.reviewers == ["user1"]
        assert result.team_reviewers == ["backend"]


class TestChooseAssignees:
    def test_explicit_assignees(self) -> None:
        policy = _policy(assignees=["assignee1", "pr-creator"], numberOfAssignees=2)
        assert choose_assignees("pr-creator", policy) == ["assignee1"]

    def test_falls_back_to_reviewers_pool(self) -> None:
        assignees = choose_assignees("pr-creator", _policy())
        assert sorted(assignees) == ["reviewer1", "reviewer2", "reviewer3"]

    def test_only_author_in_reviewers(self) -> None:
        assert choose_assignees("pr-creator", _policy(reviewers=["pr-creator"])) == []

    def test_uses_reviewer_count_when_unset(self) -> None:
        policy = _policy(
            numberOfReviewers=2, assignees=["assignee1", "assignee2", "assignee3"]
        )
        assignees = choose_assignees("pr-creator", policy, random.Random(0))
        assert len(assignees) == 2
        assert all(a.startswith("assignee") for a in assignees)

    def test_explicit_zero_count_selects_everyone(self) -> None:
        policy = _policy(
            numberOfReviewers=1,
            numberOfAssignees=0,
            assignees=["assignee1", "assignee2"],
        )
        assert sorted(choose_assignees("pr-creator", policy)) == [
            "assignee1",
            "assignee2",
        ]

    def test_teams_are_never_assigned(self) -> None:
        policy = _policy(reviewers=["reviewer1", "my-org/backend"])
        assert choose_assignees("pr-creator", policy) == ["reviewer1"]

    def test_assignee_groups(self) -> None:
        policy = _policy(
            useAssigneeGroups=True,
            numberOfAssignees=1,
            numberOfReviewers=2,
            assigneeGroups={
                "groupA": ["group1-user1", "group1-user2", "group1-user3"],
                "groupB": ["group2-user1"],
                "groupC": ["group3-user1", "group3-user2", "group3-user3"],
            },
        )
        assignees = choose_assignees("pr-creator", policy, random.Random(0))
        assert len(assignees) == 3
        assert [a[:6] for a in assignees] == ["group1", "group2", "group3"]

    def test_assignee_groups_borrow_reviewer_count(self) -> None:
        policy = _policy(
            useAssigneeGroups=True,
            numberOfReviewers=2,
            assigneeGroups={
                "groupA": ["group1-user1", "group1-user2", "group1-user3"],
                "groupB": ["group2-user1"],
            },
        )
        assert len(choose_assignees("pr-creator", policy, random.Random(0))) == 3


# =====================================================================
# Version tier selector
# =====================================================================


class TestSelectByVersionTier:
    @pytest.fixture
    def policy(self) -> Policy:
        return _policy(
            numberOfReviewers=1,
            majorReviewers=["major1", "major2"],
            minorReviewers=["minor1", "my-org/minor-team"],
            patchReviewers=["pr-creator"],
        )

    def test_major_pool(self, policy: Policy) -> None:
        result = select_by_version_tier(
            "pr-creator", VersionTier.MAJOR, policy, random.Random(0)
        )
        assert len(result.reviewers) == 1
        assert result.reviewers[0] in ("major1", "major2")

    def test_minor_pool_routes_teams(self, policy: Policy) -> None:
        result = select_by_version_tier("pr-creator", VersionTier.MINOR, policy)
        assert result.reviewers == ["minor1"]
        assert result.team_reviewers == ["minor-team"]

    def test_author_only_pool_is_empty(self, policy: Policy) -> None:
        result = select_by_version_tier("pr-creator", VersionTier.PATCH, policy)
        assert result.is_empty
