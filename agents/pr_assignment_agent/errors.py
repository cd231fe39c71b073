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


class AssignmentError(Exception):
    """Base class for errors raised while assigning reviewers and assignees."""


class ConfigurationError(AssignmentError):
    """The assignment policy is missing or invalid.

    Fatal to the handling of the whole pull request event.
    """


class VersionLabelError(AssignmentError):
    """None of the version labels (Major, Minor, Patch) is set on the PR.

    Only aborts version policy reviewer selection.
    """


class ExternalCallError(AssignmentError):
    """A GitHub API call failed."""
