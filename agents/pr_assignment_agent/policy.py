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

"""Assignment policy read from the repository configuration file.

The file uses the camelCase keys of the auto assign configuration:

    {
      "addReviewers": true,
      "addAssignees": true,
      "numberOfReviewers": 2,
      "reviewers": ["alice", "bob", "my-org/backend"],
      "skipKeywords": ["wip"]
    }

Entries of the form "org/slug" name a team, anything else a user.
"""

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
import enum
import json
from pathlib import Path
import types
from typing import Any
from typing import Union

from pr_assignment_agent.errors import ConfigurationError
from pr_assignment_agent.errors import VersionLabelError

GROUPS_ERROR_TEMPLATE = (
    "Error in configuration file to do with using review groups. Expected"
    " '{groups}' variable to be set because the variable '{flag}' = true."
)


@dataclass(frozen=True)
class User:
    login: str

    @property
    def name(self) -> str:
        return self.login

    @property
    def is_team(self) -> bool:
        return False


@dataclass(frozen=True)
class Team:
    org: str
    slug: str

    @property
    def name(self) -> str:
        return self.slug

    @property
    def is_team(self) -> bool:
        return True


Identifier = Union[User, Team]


def parse_identifier(value: str) -> Identifier:
    """Parse a configured reviewer entry into a user or a team.

    Raises:
      ConfigurationError: if the entry is blank or not a valid "org/slug".
    """
    entry = value.strip()
    if not entry:
        raise ConfigurationError("Reviewer and assignee entries cannot be blank.")
    if "/" not in entry:
        return User(login=entry)
    org, _, slug = entry.partition("/")
    if not org or not slug or "/" in slug:
        raise ConfigurationError(
            f"Invalid team '{entry}', expected 'org/team-slug'."
        )
    return Team(org=org, slug=slug)


class VersionTier(str, enum.Enum):
    MAJOR = "Major"
    MINOR = "Minor"
    PATCH = "Patch"

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> "VersionTier":
        """Pick the version tier from PR labels.

        Major wins over Minor, and Minor over Patch, when a PR carries more
        than one of them.

        Raises:
          VersionLabelError: if none of the version labels is present.
        """
        names = set(labels)
        for tier in (cls.MAJOR, cls.MINOR, cls.PATCH):
            if tier.value in names:
                return tier
        raise VersionLabelError("No version label found.")


@dataclass(frozen=True)
class Policy:
    add_reviewers: bool = False
    add_assignees: bool = False
    add_version_policy_reviewers: bool = False
    reviewers: tuple[Identifier, ...] = ()
    assignees: tuple[Identifier, ...] = ()
    major_reviewers: tuple[Identifier, ...] = ()
    minor_reviewers: tuple[Identifier, ...] = ()
    patch_reviewers: tuple[Identifier, ...] = ()
    number_of_reviewers: int = 0
    number_of_assignees: int | None = None
    skip_keywords: tuple[str, ...] = ()
    use_review_groups: bool = False
    use_assignee_groups: bool = False
    # Read-only views, left out of the hash.
    review_groups: Mapping[str, tuple[Identifier, ...]] | None = field(
        default=None, hash=False
    )
    assignee_groups: Mapping[str, tuple[Identifier, ...]] | None = field(
        default=None, hash=False
    )

    @classmethod
    def from_dict(cls, data: Any) -> "Policy":
        """Build a policy from a parsed configuration document.

        Args:
          data: the configuration mapping, with camelCase keys.

        Returns:
          The policy. Absent keys take their defaults.

        Raises:
          ConfigurationError: if the document is missing or malformed.
        """
        if data is None:
            raise ConfigurationError("the configuration file failed to load")
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top of the configuration file, got"
                f" {type(data).__name__}."
            )
        return cls(
            add_reviewers=bool(data.get("addReviewers", False)),
            add_assignees=bool(data.get("addAssignees", False)),
            add_version_policy_reviewers=bool(
                data.get("addVersionPolicyReviewers", False)
            ),
            reviewers=_identifiers(data, "reviewers"),
            assignees=_identifiers(data, "assignees"),
            major_reviewers=_identifiers(data, "majorReviewers"),
            minor_reviewers=_identifiers(data, "minorReviewers"),
            patch_reviewers=_identifiers(data, "patchReviewers"),
            number_of_reviewers=_count(data, "numberOfReviewers") or 0,
            number_of_assignees=_count(data, "numberOfAssignees"),
            skip_keywords=tuple(str(k) for k in _list(data, "skipKeywords")),
            use_review_groups=bool(data.get("useReviewGroups", False)),
            use_assignee_groups=bool(data.get("useAssigneeGroups", False)),
            review_groups=_groups(data, "reviewGroups"),
            assignee_groups=_groups(data, "assigneeGroups"),
        )

    @classmethod
    def from_file(cls, path: Path) -> "Policy":
        """Load a policy from a JSON configuration file."""
        if not path.exists():
            raise ConfigurationError("the configuration file failed to load")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"the configuration file failed to load: {e}"
            ) from e
        return cls.from_dict(data)

    @property
    def assignee_count(self) -> int:
        """Number of assignees to pick, borrowing the reviewer count if unset."""
        if self.number_of_assignees is not None:
            return self.number_of_assignees
        return self.number_of_reviewers

    def validate(self) -> None:
        """Check that enabled group modes have their groups configured.

        Raises:
          ConfigurationError: if a group mode is on without its groups.
        """
        if self.use_review_groups and self.review_groups is None:
            raise ConfigurationError(
                GROUPS_ERROR_TEMPLATE.format(
                    groups="reviewGroups", flag="useReviewGroups"
                )
            )
        if self.use_assignee_groups and self.assignee_groups is None:
            raise ConfigurationError(
                GROUPS_ERROR_TEMPLATE.format(
                    groups="assigneeGroups", flag="useAssigneeGroups"
                )
            )

    def tier_reviewers(self, tier: VersionTier) -> tuple[Identifier, ...]:
        return {
            VersionTier.MAJOR: self.major_reviewers,
            VersionTier.MINOR: self.minor_reviewers,
            VersionTier.PATCH: self.patch_reviewers,
        }[tier]


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"Expected '{key}' to be a list.")
    return value


def _identifiers(data: dict[str, Any], key: str) -> tuple[Identifier, ...]:
    return tuple(parse_identifier(str(v)) for v in _list(data, key))


def _count(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"Expected '{key}' to be an integer.")
    return value


def _groups(
    data: dict[str, Any], key: str
) -> Mapping[str, tuple[Identifier, ...]] | None:
    value = data.get(key)
    if value is None:
        return None
    # An empty list or mapping both mean "no groups".
    if not value:
        return types.MappingProxyType({})
    if not isinstance(value, dict):
        raise ConfigurationError(f"Expected '{key}' to be a mapping of groups.")
    groups = {}
    for name, members in value.items():
        if not isinstance(members, list):
            raise ConfigurationError(
                f"Expected group '{name}' in '{key}' to be a list."
            )
        groups[str(name)] = tuple(parse_identifier(str(m)) for m in members)
    return types.MappingProxyType(groups)
