"""
Mac package building for macpkgtool.

This package turns an installed project tree into a macOS product package
with pkgbuild and productbuild.

Public API:

MacPkgPackager : class
    Validates resources, resets staging, and runs both build stages.
render_distribution : function
    Render the productbuild Distribution document.
write_distribution : function
    Write a rendered Distribution document with exclusive create.

Example:
    from macpkgtool.build import MacPkgPackager

    packager = MacPkgPackager(project, staging_dir=Path("/tmp/myproject-pkg"))
    packager.validate_project()
    print(packager.pkgbuild_command())
"""

from .distribution import render_distribution, write_distribution
from .packager import MacPkgPackager

__all__ = ["MacPkgPackager", "render_distribution", "write_distribution"]
