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

"""Distribution file generation for productbuild.

This module renders the installer-gui-script document that productbuild
consumes via --distribution, and writes it into the staging directory.

Private Helpers:
    - _xml_value: Escape a value for use in element text or attributes

Design Principles:
    - One product package wraps exactly one component package
    - Rendering is a pure string transform (no filesystem access)
    - Output is byte-for-byte deterministic for identical inputs
    - Install scripts belong to the component package, so the manifest
      sets require-scripts="false"
    - The single real choice is invisible; there is nothing to customize
    - The file is created exclusively; a stale Distribution is an error

Example:
    from pathlib import Path
    from macpkgtool.build.distribution import render_distribution, write_distribution

    content = render_distribution(
        name="myproject",
        version="23.4.2",
        identifier="com.mycorp.myproject",
        component_pkg_name="myproject-core.pkg",
    )
    write_distribution(Path("/tmp/macpkgtool-mac-pkg-tmp/Distribution"), content)
"""

from __future__ import annotations

import os
from pathlib import Path
from xml.sax.saxutils import escape

from macpkgtool.exceptions import ManifestWriteError
from macpkgtool.logging import Logger

DISTRIBUTION_TEMPLATE = """\
<?xml version="1.0" standalone="no"?>
<installer-gui-script minSpecVersion="1">
    <title>{title}</title>
    <background file="background.png" alignment="bottomleft" mime-type="image/png"/>
    <welcome file="welcome.html" mime-type="text/html"/>
    <license file="license.html" mime-type="text/html"/>

    <!-- Generated by productbuild - - synthesize -->
    <pkg-ref id="{identifier}"/>
    <options customize="never" require-scripts="false"/>
    <choices-outline>
        <line choice="default">
            <line choice="{identifier}"/>
        </line>
    </choices-outline>
    <choice id="default"/>
    <choice id="{identifier}" visible="false">
        <pkg-ref id="{identifier}"/>
    </choice>
    <pkg-ref id="{identifier}" version="{version}" onConclusion="none">{component_pkg_name}</pkg-ref>
</installer-gui-script>
"""

# Owner read/write only
DISTRIBUTION_FILE_MODE = 0o600


def _xml_value(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def render_distribution(
    name: str, version: str, identifier: str, component_pkg_name: str
) -> str:
    """Render the Distribution document for a single-component product.

    Args:
        name: Project name. Shown capitalized as the installer title.
        version: Package version recorded on the component pkg-ref.
        identifier: Package identifier, used for every pkg-ref and for the
            nested choice.
        component_pkg_name: Filename of the component package, relative to
            the staging directory.

    Returns:
        The Distribution XML text, terminated by a newline.

    Example:
        >>> doc = render_distribution("myproject", "1.0", "com.example.myproject",
        ...                           "myproject-core.pkg")
        >>> "<title>Myproject</title>" in doc
        True
    """
    return DISTRIBUTION_TEMPLATE.format(
        title=_xml_value(name.capitalize()),
        identifier=_xml_value(identifier),
        version=_xml_value(version),
        component_pkg_name=_xml_value(component_pkg_name),
    )


def write_distribution(
    path: Path, content: str, logger: Logger | None = None
) -> Path:
    """Write a rendered Distribution document to path.

    The file is opened with O_CREAT | O_EXCL so an existing file is never
    overwritten; the staging directory reset guarantees it is absent.

    Args:
        path: Destination path (normally <staging_dir>/Distribution).
        content: Rendered document from render_distribution().
        logger: Logger for progress output. Default is the global logger.

    Returns:
        The path that was written.

    Raises:
        ManifestWriteError: If the file already exists or cannot be
            created or written.
    """
    if logger is None:
        from macpkgtool.logging import get_global_logger

        logger = get_global_logger()
    flags = os.O_RDWR | os.O_CREAT | os.O_EXCL

    try:
        fd = os.open(path, flags, DISTRIBUTION_FILE_MODE)
    except FileExistsError as err:
        raise ManifestWriteError(
            f"Distribution file already exists: {path}"
        ) from err
    except OSError as err:
        raise ManifestWriteError(
            f"Failed to create Distribution file {path}: {err}"
        ) from err

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as err:
        raise ManifestWriteError(
            f"Failed to write Distribution file {path}: {err}"
        ) from err

    logger.verbose("DISTRIBUTION", f"[OK] Wrote {path}")

    return path
