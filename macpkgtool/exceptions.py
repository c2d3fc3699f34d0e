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

"""Exception hierarchy for macpkgtool.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Configuration-related errors (YAML parse, missing fields)
- PackagingError: Packaging/build-related errors, with one subclass per
  build step:

    - MissingResourceError: required installer resources are absent
    - StagingIOError: the staging directory could not be reset
    - ManifestWriteError: the Distribution file could not be written
    - ExternalToolError: pkgbuild/productbuild exited non-zero
    - ExternalToolTimeoutError: pkgbuild/productbuild exceeded its timeout

All exceptions inherit from MacPkgError, allowing users to catch all
macpkgtool errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from macpkgtool.core import build_mac_pkg
        from macpkgtool.exceptions import ExternalToolError, MissingResourceError

        try:
            result = build_mac_pkg(Path("project.yaml"))
        except MissingResourceError as e:
            print(e)
        except ExternalToolError as e:
            print(f"{e.argv[0]} failed with exit code {e.returncode}")
        ```
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

__all__ = [
    "MacPkgError",
    "ConfigError",
    "PackagingError",
    "MissingResourceError",
    "StagingIOError",
    "ManifestWriteError",
    "ExternalToolError",
    "ExternalToolTimeoutError",
]

MISSING_RESOURCE_HEADER = (
    "Your project is missing the following files required to build Mac\n"
    "packages:"
)


class MacPkgError(Exception):
    """Base exception for all macpkgtool errors."""

    pass


class ConfigError(MacPkgError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, empty files, non-mapping documents)
    - Missing or invalid project fields (name, version, paths)
    - Invalid packager settings (timeout, extra resources)
    """

    pass


class PackagingError(MacPkgError):
    """Raised for packaging/build-related errors.

    Every step of a Mac package build raises a subclass of this error, so
    callers that only care about "the build failed" can catch this one.
    """

    pass


class MissingResourceError(PackagingError):
    """Raised when required installer resource files are absent.

    Attributes:
        files: Full paths of every missing file, sorted by basename.
    """

    def __init__(self, files: Sequence[Path]) -> None:
        self.files = sorted((Path(f) for f in files), key=lambda p: p.name)
        lines = [MISSING_RESOURCE_HEADER]
        lines.extend(f"* {path}" for path in self.files)
        super().__init__("\n".join(lines) + "\n")


class StagingIOError(PackagingError):
    """Raised when the staging directory cannot be cleared or created."""

    pass


class ManifestWriteError(PackagingError):
    """Raised when the Distribution file cannot be created or written."""

    pass


class ExternalToolError(PackagingError):
    """Raised when an external packaging tool exits with a non-zero status.

    Attributes:
        argv: Full command line that was executed.
        returncode: Exit status reported by the process.
        output: Captured stdout/stderr of the process.
    """

    def __init__(self, argv: Sequence[str], returncode: int, output: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        tool = self.argv[0] if self.argv else "command"
        message = f"{tool} failed (exit code {returncode})"
        if output.strip():
            message += f"\n{output.strip()}"
        super().__init__(message)


class ExternalToolTimeoutError(PackagingError):
    """Raised when an external packaging tool runs past its timeout.

    The child process has already been killed when this is raised.

    Attributes:
        argv: Full command line that was executed.
        timeout: Timeout in seconds that was exceeded.
    """

    def __init__(self, argv: Sequence[str], timeout: float) -> None:
        self.argv = list(argv)
        self.timeout = timeout
        tool = self.argv[0] if self.argv else "command"
        super().__init__(f"{tool} timed out after {timeout}s")
