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

"""Command-line interface for macpkgtool.

Commands:

    validate: Validate a project file and its installer resources
    build: Build the component and product packages
    distribution: Print the Distribution file without building

Example:
    Validate a project:
        ```bash
        $ macpkg validate project.yaml
        ```

    Build the package:
        ```bash
        $ macpkg build project.yaml --verbose
        ```

    Preview the Distribution file:
        ```bash
        $ macpkg distribution project.yaml
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, validation, or packaging failure)

Note:
    Verbose mode shows full tracebacks on errors for debugging. Debug mode
    implies verbose mode and also prints tool output and the generated
    Distribution file.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys

from macpkgtool.core import build_mac_pkg, render_project_distribution
from macpkgtool.exceptions import MacPkgError
from macpkgtool.logging import get_logger, set_global_logger
from macpkgtool.validation import validate_project_file


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if getattr(args, "verbose", False) or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()
    return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'macpkg validate' command.

    Args:
        args: Parsed command-line arguments containing the project path and
            verbose flag.

    Returns:
        Exit code (0 for a valid project, 1 for invalid).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=False))

    project_path = Path(args.project).resolve()

    print(f"Validating project: {project_path}")
    print()

    result = validate_project_file(project_path, verbose=args.verbose)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Project:     {result.project_path}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Project is valid!")
        return 0
    print()
    print(f"[FAILED] Project validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_build(args: argparse.Namespace) -> int:
    """Handler for 'macpkg build' command.

    Validates installer resources, resets the staging directory, runs
    pkgbuild, writes the Distribution file and runs productbuild.

    Args:
        args: Parsed command-line arguments containing the project path,
            staging directory override, and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    project_path = Path(args.project).resolve()
    staging_dir = Path(args.staging_dir).resolve() if args.staging_dir else None

    if not project_path.exists():
        print(f"Error: Project file not found: {project_path}")
        return 1

    print(f"Building Mac package for project: {project_path}")
    if staging_dir:
        print(f"Staging directory: {staging_dir}")
    print()

    try:
        result = build_mac_pkg(
            project_path,
            staging_dir=staging_dir,
            verbose=args.verbose,
            debug=args.debug,
        )
    except MacPkgError as err:
        return _report_error(err, args)

    print("=" * 70)
    print("PACKAGE RESULTS")
    print("=" * 70)
    print(f"Name:              {result.name}")
    print(f"Version:           {result.version}")
    print(f"Identifier:        {result.identifier}")
    print(f"Component Package: {result.component_pkg}")
    print(f"Package Path:      {result.package_path}")
    print(f"Status:            {result.status}")
    print("=" * 70)
    print()
    print("[SUCCESS] Mac package created successfully!")

    return 0


def cmd_distribution(args: argparse.Namespace) -> int:
    """Handler for 'macpkg distribution' command.

    Prints the Distribution file that 'macpkg build' would write.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    project_path = Path(args.project).resolve()

    if not project_path.exists():
        print(f"Error: Project file not found: {project_path}")
        return 1

    try:
        content = render_project_distribution(project_path)
    except MacPkgError as err:
        return _report_error(err, args)

    sys.stdout.write(content)
    return 0


def _tool_version() -> str:
    try:
        return version("macpkgtool")
    except PackageNotFoundError:
        from macpkgtool import __version__

        return __version__


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the macpkg CLI.

    This function is registered as the 'macpkg' console script in
    pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="macpkg",
        description="macpkgtool - build macOS installer packages with pkgbuild and productbuild",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"macpkg {_tool_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a project file and its installer resources",
        description="Check the project YAML and installer resources without building.",
    )
    parser_validate.add_argument(
        "project",
        help="Path to the project YAML file",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'build' command
    parser_build = subparsers.add_parser(
        "build",
        help="Build the Mac product package",
        description="Run pkgbuild and productbuild for a project.",
    )
    parser_build.add_argument(
        "project",
        help="Path to the project YAML file",
    )
    parser_build.add_argument(
        "--staging-dir",
        default=None,
        help="Staging directory, wiped before use (default: from config or /tmp/macpkgtool-mac-pkg-tmp)",
    )
    parser_build.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_build.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_build.set_defaults(func=cmd_build)

    # 'distribution' command
    parser_distribution = subparsers.add_parser(
        "distribution",
        help="Print the generated Distribution file",
        description="Render the productbuild Distribution file without building.",
    )
    parser_distribution.add_argument(
        "project",
        help="Path to the project YAML file",
    )
    parser_distribution.set_defaults(func=cmd_distribution)

    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
