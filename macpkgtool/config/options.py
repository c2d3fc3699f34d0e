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

"""Packager settings from the 'packager' configuration section."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from macpkgtool.exceptions import ConfigError


def packager_options(config: dict[str, Any]) -> dict[str, Any]:
    """Translate the 'packager' section into MacPkgPackager keyword arguments.

    Only keys present in the configuration are returned, so the packager's
    own defaults apply to everything else.

    Args:
        config: Merged configuration.

    Returns:
        Dict of keyword arguments (staging_dir, timeout, extra_resources,
            pkgbuild, productbuild), each present only when configured.

    Raises:
        ConfigError: If a setting has the wrong type or an invalid value.
    """
    section = config.get("packager") or {}
    if not isinstance(section, dict):
        raise ConfigError("Field 'packager' must be a mapping")

    options: dict[str, Any] = {}

    if section.get("staging_dir"):
        options["staging_dir"] = Path(section["staging_dir"])

    if "timeout" in section:
        timeout = section["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError("Field 'packager.timeout' must be a number")
        if timeout <= 0:
            raise ConfigError("Field 'packager.timeout' must be positive")
        options["timeout"] = timeout

    if "extra_resources" in section:
        extra = section["extra_resources"] or []
        if not isinstance(extra, list) or not all(
            isinstance(item, str) and item for item in extra
        ):
            raise ConfigError(
                "Field 'packager.extra_resources' must be a list of file names"
            )
        if any("/" in item for item in extra):
            raise ConfigError(
                "Field 'packager.extra_resources' must contain basenames, not paths"
            )
        options["extra_resources"] = extra

    for tool in ("pkgbuild", "productbuild"):
        if section.get(tool):
            if not isinstance(section[tool], str):
                raise ConfigError(f"Field 'packager.{tool}' must be a string")
            options[tool] = section[tool]

    return options
