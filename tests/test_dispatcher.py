"""Tests for top-level dispatch: aliases, builtins, scripts and external programs."""

import pytest

from cmdnest.aliases import AliasTable
from cmdnest.dispatcher import Dispatcher
from cmdnest.errors import CommandExecutionError, ResolutionError

from conftest import make_script, read_lines


class TestScripts:
    def test_runs_resolved_script_with_remaining_args(self, dispatcher, project):
        assert dispatcher.dispatch(["deploy", "staging", "--now", "two words"]) == 0

        assert read_lines(project / "args.txt") == ["--now", "two words"]
        assert read_lines(project / "cmd_name.txt") == ["deploy staging"]
        assert read_lines(project / "cwd.txt") == [str(project.resolve())]

    def test_parent_receives_unmatched_subcommand(self, dispatcher, project):
        assert dispatcher.dispatch(["deploy", "nowhere", "z"]) == 0
        assert read_lines(project / "args.txt") == ["nowhere", "z"]
        assert read_lines(project / "cmd_name.txt") == ["deploy"]

    def test_exit_status_passes_through(self, dispatcher, project):
        make_script(project / "scripts" / "fail", "exit 7\n")
        assert dispatcher.dispatch(["fail"]) == 7

    def test_signal_death_reported_like_a_shell(self, dispatcher, project):
        make_script(project / "scripts" / "killed", "kill -TERM $$\n")
        assert dispatcher.dispatch(["killed"]) == 128 + 15

    def test_unknown_command_raises(self, dispatcher):
        with pytest.raises(ResolutionError) as exc_info:
            dispatcher.dispatch(["doesnotexist"])
        available = exc_info.value.available
        assert "build" in available
        assert "help" in available
        assert available == sorted(set(available))

    def test_command_chain_is_extended_for_children(self, context, project):
        nested = Dispatcher(context.with_chain(["outer"]), AliasTable({}))
        nested.dispatch(["build"])
        assert read_lines(project / "cmd_name.txt") == ["outer build"]

    def test_namespace_only_group_cannot_run(self, dispatcher):
        with pytest.raises(ResolutionError):
            dispatcher.dispatch(["lib"])


class TestAliases:
    def test_alias_to_script(self, dispatcher, project):
        assert dispatcher.dispatch(["b", "extra"]) == 0
        assert read_lines(project / "args.txt") == ["--fast", "extra"]

    def test_alias_naming_alias_is_literal(self, dispatcher):
        # loop -> b; "b" is not expanded again and is not a script.
        with pytest.raises(CommandExecutionError):
            dispatcher.dispatch(["loop"])

    def test_alias_to_external_program(self, context, project, recording_runner):
        dispatcher = Dispatcher(context, AliasTable({"ls": ["ls", "-a"]}), runner=recording_runner)
        assert dispatcher.dispatch(["ls", "src"]) == 0

        call = recording_runner.calls[0]
        assert call["argv"] == ["ls", "-a", "src"]
        assert call["cwd"] == project

    def test_real_external_alias(self, context, project):
        dispatcher = Dispatcher(context, AliasTable({"mark": ["touch", "marker"]}))
        assert dispatcher.dispatch(["mark"]) == 0
        assert (project / "marker").exists()


class TestBuiltins:
    def test_builtin_takes_precedence_over_script(self, dispatcher, project, capsys):
        make_script(project / "scripts" / "builtins", "exit 9\n")
        assert dispatcher.dispatch(["builtins"]) == 0
        assert "complete" in capsys.readouterr().out.split()

    @pytest.mark.parametrize("flag", ["-h", "-help", "--help"])
    def test_help_flags(self, dispatcher, capsys, flag):
        assert dispatcher.dispatch([flag]) == 0
        assert "Usage: proj <command>" in capsys.readouterr().out

    def test_empty_argv_prints_usage_to_stderr(self, dispatcher, capsys):
        assert dispatcher.dispatch([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Usage: proj <command>" in captured.err
