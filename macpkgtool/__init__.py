"""
macpkgtool - macOS installer packages from an installed project tree

macpkgtool builds a two-stage macOS installer: a component package made by
pkgbuild from the project's install directory, wrapped into a product
package by productbuild using a generated Distribution file.

macpkgtool provides:
  - Declarative YAML project files with organization-wide defaults
  - Up-front validation of installer resources (background, welcome, license)
  - A staging directory that is reset on every build
  - Deterministic Distribution file generation
  - pkgbuild/productbuild execution with a bounded timeout

Quick Start
-----------
Validate a project file:

    $ macpkg validate project.yaml

Build the package:

    $ macpkg build project.yaml

For full CLI documentation:

    $ macpkg --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
config : package
    YAML configuration loading and merging.
build : package
    Packager and Distribution file generation.
runner : module
    External command execution.

Public API
----------
    from macpkgtool.core import build_mac_pkg
    from macpkgtool.validation import validate_project_file
    from macpkgtool.config import load_effective_config
    from macpkgtool.build import MacPkgPackager

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "macpkgtool - macOS pkgbuild/productbuild packaging"

# Re-export commonly used functions for convenience
from macpkgtool.build import MacPkgPackager
from macpkgtool.config import load_effective_config
from macpkgtool.core import build_mac_pkg
from macpkgtool.project import ProjectMetadata
from macpkgtool.validation import validate_project_file

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "build_mac_pkg",
    "validate_project_file",
    "load_effective_config",
    "MacPkgPackager",
    "ProjectMetadata",
]
