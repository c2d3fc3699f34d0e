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

"""Read-only project metadata consumed by the Mac packager.

The packager never sees the full project configuration. It reads a narrow
set of attributes through the PackageProject protocol, and ProjectMetadata
is the adapter that builds that view from a merged configuration dict.

Example:
    ```python
    from macpkgtool.config import load_effective_config
    from macpkgtool.project import ProjectMetadata

    config = load_effective_config(Path("project.yaml"))
    project = ProjectMetadata.from_config(config)
    print(project.name, project.version)
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from macpkgtool.exceptions import ConfigError

__all__ = ["PackageProject", "ProjectMetadata", "default_identifier"]

REQUIRED_FIELDS = (
    "name",
    "version",
    "install_path",
    "files_path",
    "package_dir",
)

PATH_FIELDS = ("install_path", "scripts_path", "files_path", "package_dir")


class PackageProject(Protocol):
    """Attributes the packager reads from a project."""

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> str: ...

    @property
    def install_path(self) -> Path: ...

    @property
    def scripts_path(self) -> Path | None: ...

    @property
    def files_path(self) -> Path: ...

    @property
    def package_dir(self) -> Path: ...

    @property
    def identifier(self) -> str | None: ...


def default_identifier(name: str) -> str:
    """Return the identifier used when a project does not configure one.

    Args:
        name: Project name.

    Returns:
        Reverse-DNS identifier of the form ``com.example.<name>``.
    """
    return f"com.example.{name}"


@dataclass(frozen=True)
class ProjectMetadata:
    """Concrete PackageProject built from configuration.

    scripts_path is None for projects without install scripts.
    """

    name: str
    version: str
    install_path: Path
    scripts_path: Path | None
    files_path: Path
    package_dir: Path
    identifier: str | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ProjectMetadata:
        """Build project metadata from a merged configuration dict.

        Args:
            config: Merged configuration with a top-level ``project`` mapping.

        Returns:
            ProjectMetadata for the configured project.

        Raises:
            ConfigError: If the project section or a required field is
                missing, or a field has the wrong type.
        """
        project = config.get("project")
        if not isinstance(project, dict):
            raise ConfigError("Missing required section: project")

        missing = [f for f in REQUIRED_FIELDS if project.get(f) in (None, "")]
        if missing:
            raise ConfigError(
                f"Missing required project field(s): {', '.join(missing)}"
            )

        name = project["name"]
        if not isinstance(name, str):
            raise ConfigError("Field 'project.name' must be a string")

        identifier = project.get("identifier") or None
        if identifier is not None and not isinstance(identifier, str):
            raise ConfigError("Field 'project.identifier' must be a string")

        # YAML reads 1.10 as the float 1.1, so floats cannot be trusted
        version = project["version"]
        if isinstance(version, bool) or not isinstance(version, (str, int)):
            raise ConfigError(
                "Field 'project.version' must be a string (quote it in YAML)"
            )

        paths: dict[str, Path | None] = {}
        for field in PATH_FIELDS:
            value = project.get(field)
            if value in (None, ""):
                paths[field] = None
            elif isinstance(value, str):
                paths[field] = Path(value)
            else:
                raise ConfigError(f"Field 'project.{field}' must be a string")

        return cls(
            name=name,
            version=str(version),
            identifier=identifier,
            **paths,
        )
