"""Tests for the command-line entry point."""

import io

import pytest

from nbtedit import cli
from nbtedit.commands import Session
from nbtedit.navigation import NavigationState


class TestMain:
    def test_prints_tree_by_default(self, scenario_file, capsys):
        assert cli.main([str(scenario_file)]) == 0
        assert capsys.readouterr().out.splitlines()[0] == "compound[2]"

    def test_depth_flag(self, scenario_file, capsys):
        assert cli.main([str(scenario_file), "-d", "0"]) == 0
        assert capsys.readouterr().out == "compound[2]\n"

    def test_exec_commands(self, scenario_file, capsys):
        assert cli.main([str(scenario_file), "-e", "cd items/0", "-e", "pwd"]) == 0
        assert capsys.readouterr().out == "/items/0\n"

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "absent.dat")]) == 1
        assert capsys.readouterr().err.startswith("error: ")

    def test_exec_without_a_file(self, scenario_file, capsys):
        assert cli.main(["-e", "pwd", "-e", f'load "{scenario_file}"', "-e", "pwd"]) == 0
        assert capsys.readouterr().out == "error: no file loaded\n/\n"

    def test_file_required_to_print(self, capsys):
        with pytest.raises(SystemExit) as info:
            cli.main([])
        assert info.value.code == 2
        assert "a file is required" in capsys.readouterr().err

    def test_negative_depth_rejected(self, scenario_file):
        with pytest.raises(SystemExit):
            cli.main([str(scenario_file), "-d", "-1"])


class TestShell:
    def test_runs_until_end_of_input(self, scenario_tree):
        lines = iter(["cd items", "pwd"])
        prompts = []

        def read_line(prompt):
            prompts.append(prompt)
            try:
                return next(lines)
            except StopIteration:
                raise EOFError from None

        session = Session(state=NavigationState(scenario_tree), out=io.StringIO())
        cli.run_shell(session, read_line)
        assert session.out.getvalue() == "/items\nGoodbye.\n"
        assert prompts == [cli.PROMPT] * 3
