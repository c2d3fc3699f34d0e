"""
Pytest configuration and shared fixtures for macpkgtool tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest
import yaml

from macpkgtool.logging import SilentLogger, set_global_logger
from macpkgtool.project import ProjectMetadata
from macpkgtool.runner import CommandResult

RESOURCE_NAMES = ("background.png", "welcome.html", "license.html")

EXPECTED_DISTRIBUTION = """\
<?xml version="1.0" standalone="no"?>
<installer-gui-script minSpecVersion="1">
    <title>Myproject</title>
    <background file="background.png" alignment="bottomleft" mime-type="image/png"/>
    <welcome file="welcome.html" mime-type="text/html"/>
    <license file="license.html" mime-type="text/html"/>

    <!-- Generated by productbuild - - synthesize -->
    <pkg-ref id="com.mycorp.myproject"/>
    <options customize="never" require-scripts="false"/>
    <choices-outline>
        <line choice="default">
            <line choice="com.mycorp.myproject"/>
        </line>
    </choices-outline>
    <choice id="default"/>
    <choice id="com.mycorp.myproject" visible="false">
        <pkg-ref id="com.mycorp.myproject"/>
    </choice>
    <pkg-ref id="com.mycorp.myproject" version="23.4.2" onConclusion="none">myproject-core.pkg</pkg-ref>
</installer-gui-script>
"""


class RecordingRunner:
    """CommandRunner that records invocations instead of spawning tools.

    Creates the output file named by the last argument inside cwd (or at
    the absolute path), like pkgbuild/productbuild would.
    """

    def __init__(self, returncodes: dict[str, int] | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.returncodes = returncodes or {}

    def run(
        self, argv: Sequence[str], *, cwd: Path, timeout: float
    ) -> CommandResult:
        argv = list(argv)
        self.calls.append({"argv": argv, "cwd": cwd, "timeout": timeout})

        returncode = self.returncodes.get(argv[0], 0)
        if returncode == 0:
            output = Path(cwd) / argv[-1]
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(b"xar!")
            return CommandResult(argv=argv, returncode=0, output="")
        return CommandResult(
            argv=argv, returncode=returncode, output=f"{argv[0]}: error"
        )

    @property
    def tools(self) -> list[str]:
        return [call["argv"][0] for call in self.calls]


class RecordingLogger:
    """Logger that keeps every message as a (level, prefix, message) tuple."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.messages.append(("step", f"{step}/{total}", message))

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append(("debug", prefix, message))

    def prefixes(self) -> set[str]:
        return {prefix for _, prefix, _ in self.messages}


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so CLI tests don't leak verbosity."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def fake_runner() -> RecordingRunner:
    """Provide a runner that records pkgbuild/productbuild invocations."""
    return RecordingRunner()


@pytest.fixture
def project() -> ProjectMetadata:
    """
    Provide project metadata with fixed, non-existent paths.

    Suitable for tests that only compute names and argument lists.
    """
    return ProjectMetadata(
        name="myproject",
        version="23.4.2",
        install_path=Path("/opt/myproject"),
        scripts_path=Path("/src/myproject/scripts"),
        files_path=Path("/src/myproject/files"),
        package_dir=Path("/home/builder/myproject/pkg"),
        identifier="com.mycorp.myproject",
    )


@pytest.fixture
def project_on_disk(tmp_path: Path) -> ProjectMetadata:
    """
    Provide project metadata whose files_path holds all installer resources.
    """
    files_path = tmp_path / "files"
    resources = files_path / "mac_pkg" / "Resources"
    resources.mkdir(parents=True)
    for name in RESOURCE_NAMES:
        (resources / name).write_text(name)

    scripts_path = tmp_path / "scripts"
    scripts_path.mkdir()
    package_dir = tmp_path / "pkg"
    package_dir.mkdir()

    return ProjectMetadata(
        name="myproject",
        version="23.4.2",
        install_path=Path("/opt/myproject"),
        scripts_path=scripts_path,
        files_path=files_path,
        package_dir=package_dir,
        identifier="com.mycorp.myproject",
    )


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Provide a per-test staging path (not yet created)."""
    return tmp_path / "staging"


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("project.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def sample_project_data() -> dict[str, Any]:
    """Provide a complete project configuration with relative paths."""
    return {
        "apiVersion": "macpkg/v1",
        "project": {
            "name": "myproject",
            "version": "23.4.2",
            "install_path": "/opt/myproject",
            "scripts_path": "package-scripts",
            "files_path": "files",
            "package_dir": "pkg",
            "identifier": "com.mycorp.myproject",
        },
    }


@pytest.fixture
def project_file(tmp_path: Path, create_yaml_file, sample_project_data) -> Path:
    """
    Provide a project YAML file with its resources, scripts and pkg dirs.
    """
    resources = tmp_path / "project" / "files" / "mac_pkg" / "Resources"
    resources.mkdir(parents=True)
    for name in RESOURCE_NAMES:
        (resources / name).write_text(name)
    (tmp_path / "project" / "package-scripts").mkdir()
    (tmp_path / "project" / "pkg").mkdir()

    data = dict(sample_project_data)
    data["packager"] = {"staging_dir": str(tmp_path / "staging")}
    return create_yaml_file("project/project.yaml", data)
