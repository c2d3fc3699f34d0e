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

"""Core orchestration for macpkgtool.

This module ties configuration loading to the packager. It is the layer the
CLI calls and the recommended entry point for programmatic use.

Example:
    Build a package from a project file:
        ```python
        from pathlib import Path
        from macpkgtool.core import build_mac_pkg

        result = build_mac_pkg(Path("project.yaml"), verbose=True)
        print(result.package_path)
        ```

    Preview the Distribution file without building:
        ```python
        from macpkgtool.core import render_project_distribution

        print(render_project_distribution(Path("project.yaml")))
        ```
"""

from __future__ import annotations

from pathlib import Path

from macpkgtool.build import MacPkgPackager
from macpkgtool.config import load_effective_config, packager_options
from macpkgtool.project import ProjectMetadata
from macpkgtool.results import PackageResult
from macpkgtool.runner import CommandRunner

__all__ = ["build_mac_pkg", "create_packager", "render_project_distribution"]


def create_packager(
    project_path: Path,
    *,
    staging_dir: Path | None = None,
    runner: CommandRunner | None = None,
    verbose: bool = False,
    debug: bool = False,
) -> MacPkgPackager:
    """Load a project file and construct its packager.

    Args:
        project_path: Path to the project YAML file.
        staging_dir: Overrides packager.staging_dir from the config.
        runner: CommandRunner for the external tools. Default is
            SubprocessRunner().
        verbose: Show verbose output. Default is False.
        debug: Show debug output. Default is False.

    Returns:
        A MacPkgPackager ready to build.

    Raises:
        FileNotFoundError: If the project file does not exist.
        ConfigError: If the configuration is invalid.
    """
    config = load_effective_config(project_path, verbose=verbose, debug=debug)
    project = ProjectMetadata.from_config(config)

    options = packager_options(config)
    if staging_dir is not None:
        options["staging_dir"] = staging_dir

    return MacPkgPackager(project, runner=runner, **options)


def build_mac_pkg(
    project_path: Path,
    *,
    staging_dir: Path | None = None,
    runner: CommandRunner | None = None,
    verbose: bool = False,
    debug: bool = False,
) -> PackageResult:
    """Build the Mac product package described by a project file.

    Args:
        project_path: Path to the project YAML file.
        staging_dir: Overrides packager.staging_dir from the config.
        runner: CommandRunner for the external tools. Default is
            SubprocessRunner().
        verbose: Show verbose output. Default is False.
        debug: Show debug output. Default is False.

    Returns:
        PackageResult for the finished package.

    Raises:
        FileNotFoundError: If the project file does not exist.
        ConfigError: If the configuration is invalid.
        PackagingError: If any build step fails (see MacPkgPackager.build).

    Note:
        Wipes the staging directory. Do not run two builds of the same
        project against the same staging directory at once.
    """
    packager = create_packager(
        project_path,
        staging_dir=staging_dir,
        runner=runner,
        verbose=verbose,
        debug=debug,
    )
    return packager.build()


def render_project_distribution(project_path: Path) -> str:
    """Return the Distribution document for a project file.

    Nothing is written to disk and no tools are run.

    Raises:
        FileNotFoundError: If the project file does not exist.
        ConfigError: If the configuration is invalid.
    """
    return create_packager(project_path).distribution
