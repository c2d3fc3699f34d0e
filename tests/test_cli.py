"""
Tests for macpkgtool.cli module.

Tests command handlers and exit codes with the build layer mocked.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import EXPECTED_DISTRIBUTION
from macpkgtool.cli import main
from macpkgtool.exceptions import ExternalToolError
from macpkgtool.results import PackageResult


def _run_cli(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestValidateCommand:
    """Tests for 'macpkg validate'."""

    def test_valid_project(self, project_file, capsys):
        """Test a valid project exits 0."""
        assert _run_cli(["validate", str(project_file)]) == 0
        assert "[SUCCESS] Project is valid!" in capsys.readouterr().out

    def test_invalid_project(self, project_file, capsys):
        """Test missing resources exit 1 and are listed."""
        resources = project_file.parent / "files" / "mac_pkg" / "Resources"
        (resources / "license.html").unlink()

        assert _run_cli(["validate", str(project_file)]) == 1
        out = capsys.readouterr().out
        assert "license.html" in out
        assert "[FAILED]" in out


class TestBuildCommand:
    """Tests for 'macpkg build'."""

    @patch("macpkgtool.cli.build_mac_pkg")
    def test_build_success(self, mock_build, project_file, tmp_path, capsys):
        """Test a successful build prints the results banner."""
        mock_build.return_value = PackageResult(
            name="myproject",
            version="23.4.2",
            identifier="com.mycorp.myproject",
            component_pkg=tmp_path / "staging" / "myproject-core.pkg",
            package_path=tmp_path / "pkg" / "myproject.pkg",
            staging_dir=tmp_path / "staging",
            status="success",
        )

        assert _run_cli(["build", str(project_file)]) == 0

        out = capsys.readouterr().out
        assert "PACKAGE RESULTS" in out
        assert "com.mycorp.myproject" in out
        mock_build.assert_called_once_with(
            project_file.resolve(),
            staging_dir=None,
            verbose=False,
            debug=False,
        )

    @patch("macpkgtool.cli.build_mac_pkg")
    def test_build_staging_override(self, mock_build, project_file, tmp_path):
        """Test --staging-dir is passed through."""
        mock_build.side_effect = ExternalToolError(["pkgbuild"], 1, "")

        code = _run_cli(
            ["build", str(project_file), "--staging-dir", str(tmp_path / "s")]
        )

        assert code == 1
        assert mock_build.call_args.kwargs["staging_dir"] == (tmp_path / "s").resolve()

    @patch("macpkgtool.cli.build_mac_pkg")
    def test_build_failure(self, mock_build, project_file, capsys):
        """Test a packaging error exits 1 with the message."""
        mock_build.side_effect = ExternalToolError(["productbuild"], 2, "boom")

        assert _run_cli(["build", str(project_file)]) == 1
        assert "productbuild failed (exit code 2)" in capsys.readouterr().out

    def test_build_missing_project(self, tmp_path, capsys):
        """Test a missing project file exits 1."""
        assert _run_cli(["build", str(tmp_path / "nope.yaml")]) == 1
        assert "not found" in capsys.readouterr().out


class TestDistributionCommand:
    """Tests for 'macpkg distribution'."""

    def test_prints_distribution(self, project_file, capsys):
        """Test the Distribution document is printed verbatim."""
        assert _run_cli(["distribution", str(project_file)]) == 0
        assert capsys.readouterr().out == EXPECTED_DISTRIBUTION

    def test_invalid_project(self, create_yaml_file, capsys):
        """Test an invalid project exits 1."""
        project_path = create_yaml_file("bad.yaml", {"project": {}})

        assert _run_cli(["distribution", str(Path(project_path))]) == 1
        assert "Error:" in capsys.readouterr().out
