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

"""Mac .pkg generation for macpkgtool.

This module builds a macOS product package from an installed project tree
using Apple's pkgbuild and productbuild tools.

Build Steps:
    1. Validate that the installer resources exist
    2. Reset the staging directory
    3. pkgbuild: package install_path into <name>-core.pkg (in staging)
    4. Write the Distribution file into staging
    5. productbuild: wrap the component into <package_dir>/<name>.pkg

Design Principles:
    - The staging directory is the working directory of both tools
    - The staging directory is wiped before every build, never reused
    - The Distribution file is regenerated on every product build
    - Tools run through an injectable CommandRunner with a fixed timeout
    - Any failure aborts the build; nothing is retried
    - Concurrent builds of the same project must use distinct staging dirs

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from macpkgtool.build.packager import MacPkgPackager
        from macpkgtool.project import ProjectMetadata

        project = ProjectMetadata(
            name="myproject",
            version="23.4.2",
            install_path=Path("/opt/myproject"),
            scripts_path=Path("/src/myproject/package-scripts"),
            files_path=Path("/src/myproject/files"),
            package_dir=Path("/src/myproject/pkg"),
            identifier="com.mycorp.myproject",
        )

        result = MacPkgPackager(project).build()
        print(f"Package: {result.package_path}")
        ```
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import shutil

from macpkgtool.build.distribution import render_distribution, write_distribution
from macpkgtool.exceptions import MissingResourceError, StagingIOError
from macpkgtool.logging import Logger
from macpkgtool.project import PackageProject, default_identifier
from macpkgtool.results import PackageResult
from macpkgtool.runner import CommandResult, CommandRunner, SubprocessRunner, check_result

DEFAULT_STAGING_DIR = Path("/tmp/macpkgtool-mac-pkg-tmp")

# Upper bound for a single pkgbuild/productbuild run (seconds)
DEFAULT_TIMEOUT = 3600

REQUIRED_RESOURCES = ("background.png", "welcome.html", "license.html")

PKGBUILD = "pkgbuild"
PRODUCTBUILD = "productbuild"

TOTAL_STEPS = 4


class MacPkgPackager:
    """Builds a Mac product package for a single project.

    All derived values are computed from the project on access and never
    cached, so the packager holds no state besides its configuration.

    Args:
        project: Read-only project metadata.
        staging_dir: Working directory for both tools. Wiped on every build.
        timeout: Timeout in seconds for each external tool run.
        runner: CommandRunner used to execute tools. Default is
            SubprocessRunner(logger=logger).
        extra_resources: Additional resource basenames required under
            files_path/mac_pkg/Resources, beyond the three the
            Distribution file references.
        pkgbuild: Name or path of the pkgbuild executable.
        productbuild: Name or path of the productbuild executable.
        logger: Logger for progress output. Default is the global logger.
    """

    def __init__(
        self,
        project: PackageProject,
        *,
        staging_dir: Path = DEFAULT_STAGING_DIR,
        timeout: float = DEFAULT_TIMEOUT,
        runner: CommandRunner | None = None,
        extra_resources: Sequence[str] = (),
        pkgbuild: str = PKGBUILD,
        productbuild: str = PRODUCTBUILD,
        logger: Logger | None = None,
    ) -> None:
        if logger is None:
            from macpkgtool.logging import get_global_logger

            logger = get_global_logger()

        self.project = project
        self.staging_dir = Path(staging_dir)
        self.timeout = timeout
        self.runner = runner if runner is not None else SubprocessRunner(logger=logger)
        self.extra_resources = tuple(extra_resources)
        self.pkgbuild = pkgbuild
        self.productbuild = productbuild
        self.logger = logger

    # -------------------------------
    # Derived values
    # -------------------------------

    @property
    def name(self) -> str:
        return self.project.name

    @property
    def version(self) -> str:
        return self.project.version

    @property
    def identifier(self) -> str:
        """Project identifier, or com.example.<name> when unset."""
        return self.project.identifier or default_identifier(self.name)

    @property
    def pkg_root(self) -> Path:
        return Path(self.project.install_path)

    @property
    def install_location(self) -> Path:
        return Path(self.project.install_path)

    @property
    def scripts(self) -> Path | None:
        """Install scripts directory, or None when the project has none."""
        scripts_path = self.project.scripts_path
        return Path(scripts_path) if scripts_path else None

    @property
    def component_pkg_name(self) -> str:
        return f"{self.name}-core.pkg"

    @property
    def resources_dir(self) -> Path:
        return Path(self.project.files_path) / "mac_pkg" / "Resources"

    @property
    def required_files(self) -> list[Path]:
        basenames = list(REQUIRED_RESOURCES)
        basenames.extend(b for b in self.extra_resources if b not in basenames)
        return [self.resources_dir / basename for basename in basenames]

    @property
    def distribution_path(self) -> Path:
        return self.staging_dir / "Distribution"

    @property
    def final_pkg_path(self) -> Path:
        return Path(self.project.package_dir) / f"{self.name}.pkg"

    @property
    def distribution(self) -> str:
        """Rendered Distribution document for this project."""
        return render_distribution(
            name=self.name,
            version=self.version,
            identifier=self.identifier,
            component_pkg_name=self.component_pkg_name,
        )

    # -------------------------------
    # Commands
    # -------------------------------

    def pkgbuild_args(self) -> list[str]:
        """Arguments for pkgbuild (argument order matters to the tool)."""
        args = ["--identifier", self.identifier, "--version", self.version]
        if self.scripts is not None:
            args.extend(["--scripts", str(self.scripts)])
        args += [
            "--root",
            str(self.pkg_root),
            "--install-location",
            str(self.install_location),
            self.component_pkg_name,
        ]
        return args

    def pkgbuild_command(self) -> list[str]:
        return [self.pkgbuild, *self.pkgbuild_args()]

    def productbuild_args(self) -> list[str]:
        """Arguments for productbuild (argument order matters to the tool)."""
        return [
            "--distribution",
            str(self.distribution_path),
            "--resources",
            str(self.resources_dir),
            str(self.final_pkg_path),
        ]

    def productbuild_command(self) -> list[str]:
        return [self.productbuild, *self.productbuild_args()]

    # -------------------------------
    # Build steps
    # -------------------------------

    def validate_project(self) -> None:
        """Verify that every required resource file exists.

        Checks all files before failing so the error lists everything that
        is missing. Has no side effects.

        Raises:
            MissingResourceError: If one or more files are missing.
        """
        missing = [path for path in self.required_files if not path.exists()]
        if missing:
            raise MissingResourceError(missing)

        self.logger.verbose(
            "VALIDATE", f"[OK] Found {len(self.required_files)} resource file(s)"
        )

    def setup_staging_dir(self) -> Path:
        """Remove and recreate the staging directory.

        Returns:
            The (now empty) staging directory.

        Raises:
            StagingIOError: If the directory cannot be removed or created.
        """
        staging_dir = self.staging_dir

        try:
            if staging_dir.exists() or staging_dir.is_symlink():
                self.logger.verbose("STAGING", f"Removing {staging_dir}")
                if staging_dir.is_dir() and not staging_dir.is_symlink():
                    shutil.rmtree(staging_dir)
                else:
                    staging_dir.unlink()
            # The parent (normally the system temp dir) must already exist
            staging_dir.mkdir()
        except OSError as err:
            raise StagingIOError(
                f"Failed to prepare staging directory {staging_dir}: {err}"
            ) from err

        self.logger.verbose("STAGING", f"[OK] Created {staging_dir}")

        return staging_dir

    def _run(self, argv: list[str]) -> CommandResult:
        result = self.runner.run(argv, cwd=self.staging_dir, timeout=self.timeout)
        return check_result(result)

    def build_component_pkg(self) -> Path:
        """Run pkgbuild to create the component package in staging.

        Returns:
            Path to the component package.

        Raises:
            ExternalToolError: If pkgbuild exits non-zero.
            ExternalToolTimeoutError: If pkgbuild exceeds the timeout.
        """
        self._run(self.pkgbuild_command())
        component_pkg = self.staging_dir / self.component_pkg_name
        self.logger.verbose("PKGBUILD", f"[OK] Created: {self.component_pkg_name}")
        return component_pkg

    def generate_distribution(self) -> Path:
        """Render the Distribution file and write it into staging.

        Raises:
            ManifestWriteError: If the file exists or cannot be written.
        """
        content = self.distribution
        self.logger.debug("DISTRIBUTION", f"--- {self.distribution_path} ---")
        for line in content.splitlines():
            self.logger.debug("DISTRIBUTION", line)
        return write_distribution(self.distribution_path, content, logger=self.logger)

    def build_product_pkg(self) -> Path:
        """Write the Distribution file and run productbuild.

        Must run after build_component_pkg(), since the Distribution file
        refers to the component package by its name in staging.

        Returns:
            Path to the final product package.

        Raises:
            ManifestWriteError: If the Distribution file cannot be written.
            ExternalToolError: If productbuild exits non-zero.
            ExternalToolTimeoutError: If productbuild exceeds the timeout.
        """
        self.generate_distribution()
        self._run(self.productbuild_command())
        self.logger.verbose("PRODUCTBUILD", f"[OK] Created: {self.final_pkg_path}")
        return self.final_pkg_path

    def build(self) -> PackageResult:
        """Run every build step in order.

        Returns:
            PackageResult describing the finished package.

        Raises:
            MissingResourceError: If installer resources are missing.
            StagingIOError: If the staging directory cannot be reset.
            ManifestWriteError: If the Distribution file cannot be written.
            ExternalToolError: If pkgbuild or productbuild fails.
            ExternalToolTimeoutError: If pkgbuild or productbuild times out.
        """
        logger = self.logger
        logger.verbose("BUILD", f"Packaging {self.name} v{self.version}")

        logger.step(1, TOTAL_STEPS, "Validating installer resources...")
        self.validate_project()

        logger.step(2, TOTAL_STEPS, "Preparing staging directory...")
        self.setup_staging_dir()

        logger.step(3, TOTAL_STEPS, "Building component package...")
        component_pkg = self.build_component_pkg()

        logger.step(4, TOTAL_STEPS, "Building product package...")
        package_path = self.build_product_pkg()

        logger.verbose("BUILD", f"[OK] Package created: {package_path}")

        return PackageResult(
            name=self.name,
            version=self.version,
            identifier=self.identifier,
            component_pkg=component_pkg,
            package_path=package_path,
            staging_dir=self.staging_dir,
            status="success",
        )
