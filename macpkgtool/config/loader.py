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

"""
Configuration loading and merging for macpkgtool.

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Found by walking upward from the project file
   - Typical content: packager.staging_dir, packager.timeout, tool paths
   - Optional

2. **Project configuration** (e.g. project.yaml)
   - Always required; defines the project itself
   - Overrides organization defaults

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten

Path Resolution
---------------
Relative paths are resolved against the PROJECT FILE location, so a project
file can be moved together with its resources. Currently resolved paths:
  - project.scripts_path
  - project.files_path
  - project.package_dir
  - packager.staging_dir

project.install_path is never resolved: it is the absolute location the
package installs to.

Error Handling
--------------
- FileNotFoundError: Project file doesn't exist
- ConfigError: YAML parse errors, empty files, non-mapping documents
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from macpkgtool.exceptions import ConfigError

RESOLVED_PATHS = (
    ("project", "scripts_path"),
    ("project", "files_path"),
    ("project", "package_dir"),
    ("packager", "staging_dir"),
)


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a YAML file that must contain a mapping.

    Raises:
      FileNotFoundError - when file does not exist
      ConfigError       - for invalid YAML, empty files or non-mapping content
    """
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _find_defaults_root(start_dir: Path) -> Path | None:
    """
    Walk upward from 'start_dir' looking for a 'defaults/org.yaml'.
    Returns the 'defaults' directory or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], project_dir: Path) -> None:
    """
    Resolve relative path fields in place against 'project_dir'.
    Absolute paths and missing fields are left untouched.
    """
    for section, key in RESOLVED_PATHS:
        block = cfg.get(section)
        if not isinstance(block, dict):
            continue
        raw_path = block.get(key)
        if isinstance(raw_path, str) and raw_path:
            p = Path(raw_path)
            if not p.is_absolute():
                block[key] = str((project_dir / p).resolve())


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    project_path: Path,
    *,
    verbose: bool = False,
    debug: bool = False,
) -> dict[str, Any]:
    """
    Load and merge the effective configuration for a project file.

    Steps
      1) Read project YAML.
      2) Find defaults root by scanning upwards for 'defaults/org.yaml'.
      3) Merge: org -> project (dicts deep-merge, lists replace).
      4) Resolve known relative paths (relative to the project directory).

    Returns
      A merged configuration dict.

    Raises
      FileNotFoundError if the project file is missing,
      ConfigError on YAML parse errors or non-mapping content.
    """
    from macpkgtool.logging import get_global_logger

    logger = get_global_logger()

    project_path = project_path.resolve()
    project_dir = project_path.parent

    logger.verbose("CONFIG", f"Loading project: {project_path}")
    project_obj = _load_yaml_file(project_path)

    merged: dict[str, Any] = {}
    layers_merged = 0

    defaults_root = _find_defaults_root(project_dir)
    if defaults_root:
        org_defaults_path = defaults_root / "org.yaml"
        logger.verbose("CONFIG", f"Loading: {org_defaults_path}")
        org_defaults = _load_yaml_file(org_defaults_path)
        if debug:
            logger.debug("CONFIG", "--- Content from org.yaml ---")
            logger.debug("CONFIG", yaml.safe_dump(org_defaults, sort_keys=False))
        merged = _deep_merge_dicts(merged, org_defaults)
        layers_merged += 1

    merged = _deep_merge_dicts(merged, project_obj)
    layers_merged += 1

    if verbose:
        logger.verbose("CONFIG", f"Deep merging {layers_merged} layer(s)")

    _resolve_known_paths(merged, project_dir)

    if debug:
        logger.debug("CONFIG", "--- Final Merged Configuration ---")
        logger.debug("CONFIG", yaml.safe_dump(merged, sort_keys=False))

    return merged
