# Copyright 2025 Roger Cibrian
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

"""Public API return types for macpkgtool.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from pathlib import Path
        from macpkgtool.core import build_mac_pkg

        result = build_mac_pkg(Path("project.yaml"))
        print(result.package_path)  # Attribute access, not dict access
        ```

Note:
    Only public API return types belong in this module. Domain types (like
    ProjectMetadata) stay co-located with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class PackageResult:
    """Result from building a Mac product package.

    Attributes:
        name: Project name.
        version: Package version.
        identifier: Package identifier used in pkgbuild and the manifest.
        component_pkg: Path to the component package inside the staging dir.
        package_path: Path to the final product package.
        staging_dir: Staging directory used for the build.
        status: Build status (typically "success").
    """

    name: str
    version: str
    identifier: str
    component_pkg: Path
    package_path: Path
    staging_dir: Path
    status: str


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a project file.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        project_path: String path to the validated project file.
    """

    status: str
    project_path: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
