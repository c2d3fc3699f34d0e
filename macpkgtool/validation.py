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

"""Project file validation module.

This module checks a project file without touching the staging directory or
running any external tool, which makes it suitable for quick feedback and
CI pre-checks.

Validation Checks:

- YAML syntax is valid
- apiVersion is present and supported
- The project section has every required field with the right type
- Packager settings are well-formed
- Installer resource files exist under files_path/mac_pkg/Resources

Example:
    Validate a project and handle results:
        ```python
        from pathlib import Path
        from macpkgtool.validation import validate_project_file

        result = validate_project_file(Path("project.yaml"))
        if result.status == "valid":
            print("Project is valid")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path

from macpkgtool.exceptions import ConfigError, MissingResourceError
from macpkgtool.results import ValidationResult

__all__ = ["validate_project_file"]

SUPPORTED_API_VERSION = "macpkg/v1"


def validate_project_file(project_path: Path, verbose: bool = False) -> ValidationResult:
    """Validate a project file without building anything.

    Args:
        project_path: Path to the project YAML file.
        verbose: If True, print validation progress. Default is False.

    Returns:
        ValidationResult with status "valid" or "invalid", the collected
            errors and warnings, and the validated path.
    """
    from macpkgtool.build import MacPkgPackager
    from macpkgtool.config import load_effective_config, packager_options
    from macpkgtool.project import ProjectMetadata

    errors: list[str] = []
    warnings: list[str] = []

    def _result() -> ValidationResult:
        status = "valid" if not errors else "invalid"
        if verbose:
            if status == "valid":
                print("  [OK] Project is valid!")
            else:
                print(f"  [ERROR] Project has {len(errors)} error(s)")
        return ValidationResult(
            status=status,
            project_path=str(project_path),
            errors=errors,
            warnings=warnings,
        )

    if verbose:
        print(f"Validating project: {project_path}")

    if not project_path.exists():
        errors.append(f"Project file not found: {project_path}")
        return _result()

    try:
        config = load_effective_config(project_path)
    except ConfigError as err:
        errors.append(str(err))
        return _result()

    if verbose:
        print("  [OK] YAML syntax is valid")

    api_version = config.get("apiVersion")
    if api_version is None:
        errors.append("Missing required field: apiVersion")
    elif api_version != SUPPORTED_API_VERSION:
        warnings.append(
            f"apiVersion '{api_version}' may not be supported "
            f"(expected: {SUPPORTED_API_VERSION})"
        )

    try:
        project = ProjectMetadata.from_config(config)
    except ConfigError as err:
        errors.append(str(err))
        return _result()

    if verbose:
        print(f"  [OK] Project '{project.name}' v{project.version}")

    if project.identifier is None:
        warnings.append(
            "No project.identifier configured; "
            f"com.example.{project.name} will be used"
        )

    if not project.install_path.is_absolute():
        warnings.append(
            f"project.install_path should be absolute: {project.install_path}"
        )

    try:
        options = packager_options(config)
    except ConfigError as err:
        errors.append(str(err))
        return _result()

    packager = MacPkgPackager(project, **options)
    try:
        packager.validate_project()
    except MissingResourceError as err:
        for path in err.files:
            errors.append(f"Missing resource file: {path}")
    else:
        if verbose:
            print("  [OK] Installer resources present")

    return _result()
