"""Tests for CLI argument parsing and dispatch."""

import pytest
from pathlib import Path
from unittest.mock import patch

from divina import __version__
from divina.cli.parser import CLI, main


class TestArgumentParsing:
    """Test argument parsing."""

    def test_defaults(self):
        args = CLI().parse_args(["build"])

        assert args.command == "build"
        assert args.verbose is False
        assert args.quiet is False
        assert args.config is None
        assert args.out_dir == "out"
        assert isinstance(args.project_root, Path)

    def test_global_options(self, tmp_path):
        args = CLI().parse_args(
            [
                "-v",
                "--config",
                str(tmp_path / "divina.yaml"),
                "--project-root",
                str(tmp_path),
                "--out-dir",
                "build",
                "clean",
                "--dry-run",
            ]
        )

        assert args.verbose is True
        assert args.config == tmp_path / "divina.yaml"
        assert args.project_root == tmp_path
        assert args.out_dir == "build"
        assert args.command == "clean"
        assert args.dry_run is True

    def test_config_subcommands(self):
        args = CLI().parse_args(["config", "show", "--raw"])
        assert args.config_command == "show"
        assert args.raw is True

        args = CLI().parse_args(["config", "compiler", "show"])
        assert args.config_command == "compiler"
        assert args.compiler_command == "show"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert f"Divina {__version__}" in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["install"])


class TestDispatch:
    """Test command dispatch."""

    def test_no_command_prints_help(self, capsys):
        assert CLI().run([]) == 1
        assert "usage: divina" in capsys.readouterr().out

    def test_build_dispatched(self):
        with patch("divina.cli.commands.build.run", return_value=0) as mock_run:
            assert CLI().run(["build"]) == 0

        assert mock_run.call_args.args[0].command == "build"

    def test_clean_dispatched(self):
        with patch("divina.cli.commands.clean.run", return_value=0) as mock_run:
            assert CLI().run(["clean"]) == 0

        mock_run.assert_called_once()

    @pytest.mark.parametrize(
        "argv,handler",
        [
            (["config", "show"], "run_show"),
            (["config", "validate"], "run_validate"),
            (["config", "compiler", "show"], "run_compiler_show"),
        ],
    )
    def test_config_dispatched(self, argv, handler):
        with patch(f"divina.cli.commands.config.{handler}", return_value=0) as mock_handler:
            assert CLI().run(argv) == 0

        mock_handler.assert_called_once()

    def test_config_without_subcommand(self):
        with pytest.raises(SystemExit):
            CLI().run(["config"])

    def test_unexpected_error_returns_one(self):
        with patch("divina.cli.commands.build.run", side_effect=RuntimeError("boom")):
            assert CLI().run(["build"]) == 1

    def test_keyboard_interrupt(self):
        with patch("divina.cli.commands.build.run", side_effect=KeyboardInterrupt):
            assert CLI().run(["build"]) == 130


@pytest.mark.unit
def test_main_exits_with_status():
    with patch.object(CLI, "run", return_value=3):
        with pytest.raises(SystemExit) as exc_info:
            main()

    assert exc_info.value.code == 3
