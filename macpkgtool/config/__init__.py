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

"""Configuration loading for macpkgtool.

Project files are YAML and may be layered on top of organization-wide
defaults (defaults/org.yaml, found by walking upward from the project file).

Public API:

- load_effective_config: Load and merge configuration for a project
- packager_options: Extract MacPkgPackager keyword arguments from a config

Example:
    Basic usage:

        from pathlib import Path
        from macpkgtool.config import load_effective_config

        config = load_effective_config(Path("project.yaml"))
        print(config["project"]["name"])  # "myproject"

"""

from .loader import load_effective_config
from .options import packager_options

__all__ = ["load_effective_config", "packager_options"]
