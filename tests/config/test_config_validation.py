"""Tests for configuration validation."""

import pytest
from pathlib import Path
from unittest.mock import patch

from divina.config.parser import Arch, PackageConfig, PackageType, WorkspaceConfig
from divina.config.validation import (
    ConfigValidator,
    ValidationIssue,
    ValidationResult,
    format_validation_results,
)


def make_package(path=None, **overrides):
    fields = dict(
        name="foo",
        version="0.1.0",
        minimum_divina_version="0.1.0",
        package_type=PackageType.BIN,
        arch=Arch.X86,
        path=path,
    )
    fields.update(overrides)
    return PackageConfig(**fields)


@pytest.fixture
def validator():
    return ConfigValidator(tool_version="0.1.0", check_tools=False)


@pytest.mark.unit
def test_valid_package(validator, package_project):
    """A package whose sources exist has no issues."""
    package = make_package(package_project, sources=["main.asm", "util.asm"])

    result = validator.validate(package)

    assert result.valid
    assert result.issues == []


@pytest.mark.unit
def test_missing_source_is_error(validator, tmp_path):
    package = make_package(tmp_path, sources=["missing.asm"])

    result = validator.validate(package)

    assert not result.valid
    assert result.issues[0].level == "error"
    assert "missing.asm" in result.issues[0].message


@pytest.mark.unit
def test_no_sources_is_info(validator, tmp_path):
    result = validator.validate(make_package(tmp_path, sources=["", "  "]))

    assert result.valid
    assert [i.level for i in result.issues] == ["info"]


@pytest.mark.unit
def test_colliding_object_names_warn(validator, tmp_path):
    """Sources that differ only by extension or directory clash in the output."""
    (tmp_path / "src").mkdir()
    for name in ("main.asm", "main.s", "src/main.asm"):
        (tmp_path / name).write_text("")

    result = validator.validate(
        make_package(tmp_path, sources=["main.asm", "main.s", "src/main.asm"])
    )

    assert result.valid
    warnings = [i for i in result.issues if i.level == "warning"]
    assert len(warnings) == 2
    assert "'main'" in warnings[0].message


@pytest.mark.unit
def test_newer_minimum_version_is_error(tmp_path):
    validator = ConfigValidator(tool_version="0.1.0", check_tools=False)

    result = validator.validate(make_package(tmp_path, minimum_divina_version="0.2.0"))

    assert not result.valid
    assert result.issues[0].field == "foo.minimum_divina_version"
    assert "requires Divina 0.2.0" in result.issues[0].message


@pytest.mark.unit
def test_older_minimum_version_ok(tmp_path):
    validator = ConfigValidator(tool_version="1.0.0", check_tools=False)

    result = validator.validate(make_package(tmp_path, minimum_divina_version="0.9"))

    assert result.valid


@pytest.mark.unit
def test_invalid_minimum_version_is_error(validator, tmp_path):
    result = validator.validate(
        make_package(tmp_path, minimum_divina_version="latest")
    )

    assert not result.valid
    assert "Invalid version format" in result.issues[0].message


@pytest.mark.unit
def test_invalid_package_version_is_warning(validator, tmp_path):
    result = validator.validate(make_package(tmp_path, version="one"))

    assert result.valid
    assert result.issues[0].level == "warning"
    assert result.issues[0].field == "foo.version"


@pytest.mark.unit
def test_defaults_to_running_version():
    from divina import __version__

    assert ConfigValidator().tool_version == __version__


class TestCompilerCheck:
    """Tests for assembler availability checks."""

    def test_missing_compiler_warns(self, tmp_path):
        validator = ConfigValidator(tool_version="0.1.0")

        with patch("divina.config.validation.shutil.which", return_value=None):
            result = validator.validate(make_package(tmp_path, compiler="nasm"))

        assert result.valid
        warnings = [i for i in result.issues if i.level == "warning"]
        assert warnings[0].field == "foo.compiler"
        assert "nasm not found" in warnings[0].message

    def test_present_compiler(self, tmp_path):
        validator = ConfigValidator(tool_version="0.1.0")

        with patch(
            "divina.config.validation.shutil.which", return_value="/usr/bin/yasm"
        ) as mock_which:
            result = validator.validate(make_package(tmp_path))

        mock_which.assert_called_once_with("yasm")
        assert not [i for i in result.issues if i.field == "foo.compiler"]


class TestWorkspaceValidation:
    """Tests for workspace-level checks."""

    def test_members_validated(self, validator, tmp_path):
        workspace = WorkspaceConfig(
            members=[
                make_package(tmp_path, name="a"),
                make_package(tmp_path, name="b", sources=["gone.asm"]),
            ],
            path=tmp_path,
        )

        result = validator.validate(workspace)

        assert not result.valid
        assert any(i.field == "b.sources" and i.level == "error" for i in result.issues)

    def test_empty_workspace_is_info(self, validator):
        result = validator.validate(WorkspaceConfig(members=[]))

        assert result.valid
        assert result.issues[0].field == "Workspace.members"

    def test_duplicate_member_names_warn(self, validator, tmp_path):
        workspace = WorkspaceConfig(
            members=[make_package(tmp_path), make_package(tmp_path)]
        )

        result = validator.validate(workspace)

        assert any("Duplicate package name 'foo'" in i.message for i in result.issues)

    def test_resolved_workspace(self, validator, workspace_project):
        from divina.config.parser import resolve_config

        result = validator.validate(resolve_config(workspace_project / "divina.yaml"))

        assert result.valid
        assert result.issues == []


class TestFormatting:
    """Tests for formatting validation output."""

    def test_no_issues(self):
        assert format_validation_results(ValidationResult(True, [])) == ":: no issues found"

    def test_sections(self):
        result = ValidationResult(
            valid=False,
            issues=[
                ValidationIssue("info", "foo.sources", "no sources", "add some"),
                ValidationIssue("error", "foo.version", "bad", "fix it"),
                ValidationIssue("warning", "foo.compiler", "missing", "install"),
            ],
        )

        output = format_validation_results(result)
        lines = output.splitlines()

        assert lines[0] == "Errors:"
        assert lines[1] == "  foo.version: bad"
        assert lines[2] == "    -> fix it"
        assert "Warnings:" in lines
        assert lines.index("Warnings:") < lines.index("Info:")
        assert output.endswith("    -> add some")


@pytest.mark.unit
def test_source_without_origin_uses_cwd(validator, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Path("main.asm").write_text("")

    result = validator.validate(make_package(None, sources=["main.asm"]))

    assert result.valid
    assert result.issues == []


@pytest.mark.unit
def test_two_digit_minor_minimum_version_from_script(tmp_path, write_script):
    """`minimum_divina_version: 0.10` asks for a newer tool than 0.1.0."""
    from divina.config.parser import resolve_config

    write_script(tmp_path, "Package:\n  name: foo\n  version: 0.1.0\n"
                 "  minimum_divina_version: 0.10\n  type: 1\n  arch: 1\n")
    validator = ConfigValidator(tool_version="0.1.0", check_tools=False)

    result = validator.validate(resolve_config(tmp_path / "divina.yaml"))

    assert not result.valid
    assert "requires Divina 0.10" in result.issues[0].message


@pytest.mark.unit
def test_padded_source_entry_checked_without_whitespace(validator, tmp_path):
    (tmp_path / "main.asm").write_text("")

    result = validator.validate(make_package(tmp_path, sources=["main.asm  "]))

    assert result.valid
    assert result.issues == []
