"""
Tests for project validation module.

This module tests validation of project files and installer resources
without touching the staging directory or running any tool.
"""

from __future__ import annotations

import yaml

from macpkgtool.validation import validate_project_file


def _rewrite(project_file, mutate):
    data = yaml.safe_load(project_file.read_text())
    mutate(data)
    project_file.write_text(yaml.dump(data))


class TestValidateProjectFile:
    """Tests for validate_project_file function."""

    def test_valid_project(self, project_file):
        """Test that a complete project passes validation."""
        result = validate_project_file(project_file)

        assert result.status == "valid"
        assert result.errors == []
        assert result.warnings == []
        assert result.project_path == str(project_file)

    def test_missing_file(self, tmp_path):
        """Test that a missing project file is reported."""
        result = validate_project_file(tmp_path / "nonexistent.yaml")

        assert result.status == "invalid"
        assert len(result.errors) == 1
        assert "not found" in result.errors[0]

    def test_invalid_yaml_syntax(self, tmp_path):
        """Test that invalid YAML syntax is reported, not raised."""
        project_path = tmp_path / "project.yaml"
        project_path.write_text("project: {name: [\n")

        result = validate_project_file(project_path)

        assert result.status == "invalid"
        assert "Error parsing YAML" in result.errors[0]

    def test_missing_api_version(self, project_file):
        """Test that a missing apiVersion is an error."""
        _rewrite(project_file, lambda d: d.pop("apiVersion"))

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert "Missing required field: apiVersion" in result.errors

    def test_unknown_api_version_warns(self, project_file):
        """Test that an unexpected apiVersion only warns."""
        _rewrite(project_file, lambda d: d.update(apiVersion="macpkg/v9"))

        result = validate_project_file(project_file)

        assert result.status == "valid"
        assert "macpkg/v9" in result.warnings[0]

    def test_missing_project_fields(self, project_file):
        """Test that missing required fields are listed."""

        def _drop(data):
            del data["project"]["version"]
            del data["project"]["files_path"]

        _rewrite(project_file, _drop)

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert "version" in result.errors[0]
        assert "files_path" in result.errors[0]

    def test_non_string_path_reported(self, project_file):
        """Test that a non-string path is reported instead of raised."""
        _rewrite(project_file, lambda d: d["project"].update(install_path=123))

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert "project.install_path" in result.errors[0]

    def test_unquoted_float_version_reported(self, project_file):
        """Test that a YAML float version is rejected rather than truncated."""
        text = project_file.read_text().replace("version: 23.4.2", "version: 1.10")
        assert "version: 1.10" in text
        project_file.write_text(text)

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert "project.version" in result.errors[0]

    def test_project_without_scripts(self, project_file):
        """Test that scripts_path may be omitted."""
        _rewrite(project_file, lambda d: d["project"].pop("scripts_path"))

        result = validate_project_file(project_file)

        assert result.status == "valid"

    def test_missing_identifier_warns(self, project_file):
        """Test that the identifier fallback is announced as a warning."""
        _rewrite(project_file, lambda d: d["project"].pop("identifier"))

        result = validate_project_file(project_file)

        assert result.status == "valid"
        assert any("com.example.myproject" in w for w in result.warnings)

    def test_relative_install_path_warns(self, project_file):
        """Test that a relative install_path is flagged."""
        _rewrite(project_file, lambda d: d["project"].update(install_path="opt/x"))

        result = validate_project_file(project_file)

        assert any("install_path" in w for w in result.warnings)

    def test_missing_resources_listed(self, project_file):
        """Test that every missing resource file becomes an error."""
        resources = project_file.parent.resolve() / "files" / "mac_pkg" / "Resources"
        (resources / "welcome.html").unlink()
        (resources / "background.png").unlink()

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert result.errors == [
            f"Missing resource file: {resources / 'background.png'}",
            f"Missing resource file: {resources / 'welcome.html'}",
        ]

    def test_extra_resources_checked(self, project_file):
        """Test that configured extra resources are required too."""
        _rewrite(
            project_file,
            lambda d: d["packager"].update(extra_resources=["license.de.html"]),
        )

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert result.errors[0].endswith("license.de.html")

    def test_invalid_packager_settings(self, project_file):
        """Test that bad packager settings are reported."""
        _rewrite(project_file, lambda d: d["packager"].update(timeout=-1))

        result = validate_project_file(project_file)

        assert result.status == "invalid"
        assert "timeout" in result.errors[0]

    def test_does_not_touch_staging(self, project_file, tmp_path):
        """Test that validation never creates the staging directory."""
        validate_project_file(project_file)

        assert not (tmp_path / "staging").exists()
