"""Tests for the command-sequence executor."""

import re
import sys

import pytest

from pluginrelease.errors import CommandError
from pluginrelease.model import Command, CommandOptions
from pluginrelease.runner import CommandFailure, run_commands, run_process


def test_runs_commands_in_order(fake_run, console):
    commands = [
        Command("git", ["config", "user.name", "bot"]),
        Command("cp", ["-rf", "a", "b"]),
        Command("git", ["tag", "-f", "1.0.0"]),
    ]

    run_commands(commands, run=fake_run, console=console)

    assert fake_run.cmdlines == [
        "git config user.name bot",
        "cp -rf a b",
        "git tag -f 1.0.0",
    ]


def test_empty_command_is_not_invoked(fake_run, console):
    run_commands(
        [Command.noop(), Command("git", ["status"]), Command("", [])],
        run=fake_run,
        console=console,
    )

    assert fake_run.cmdlines == ["git status"]


@pytest.mark.parametrize("enterprise, expected", [
    (False, ["git status"]),
    (True, ["git status", "/bin/rm -rf src"]),
])
def test_enterprise_only_commands(fake_run, console, enterprise, expected):
    commands = [
        Command("git", ["status"]),
        Command("/bin/rm", ["-rf", "src"], CommandOptions(enterprise=True)),
    ]

    run_commands(commands, enterprise=enterprise, run=fake_run, console=console)

    assert fake_run.cmdlines == expected


def test_dryrun_flag_appended_last(fake_run, console):
    commands = [
        Command("git", ["push", "-f", "origin", "release-1.0.0"], CommandOptions(dryrun=True)),
        Command("git", ["tag", "-f", "1.0.0"]),
    ]

    run_commands(commands, dryrun=True, run=fake_run, console=console)

    assert fake_run.calls[0] == ("git", ["push", "-f", "origin", "release-1.0.0", "--dry-run"])
    # commands that do not opt in are untouched
    assert fake_run.calls[1] == ("git", ["tag", "-f", "1.0.0"])


def test_dryrun_option_without_global_flag(fake_run, console):
    command = Command("git", ["add", "--force", "dist"], CommandOptions(dryrun=True))

    run_commands([command], dryrun=False, run=fake_run, console=console)

    assert fake_run.calls == [("git", ["add", "--force", "dist"])]


def test_dryrun_does_not_mutate_descriptor(fake_run, console):
    command = Command("git", ["add", "dist"], CommandOptions(dryrun=True))

    run_commands([command, command], dryrun=True, run=fake_run, console=console)

    assert command.args == ("add", "dist")
    assert fake_run.calls[1] == ("git", ["add", "dist", "--dry-run"])


def test_commands_are_hashable_values():
    push = Command("git", ["push", "origin"], CommandOptions(dryrun=True, ok_on_error=(re.compile("up-to-date"),)))

    assert push.args == ("push", "origin")
    assert hash(push) == hash(Command("git", ("push", "origin"), push.options))
    assert len({push, Command("git", ["push", "origin"], push.options), Command.noop()}) == 2


def test_tolerated_failure_continues(make_runner, console):
    run = make_runner({"git commit": "Command failed with exit code 1: git commit\nnothing to commit, working tree clean"})
    commands = [
        Command(
            "git",
            ["commit", "-m", "release"],
            CommandOptions(ok_on_error=(re.compile("nothing added to commit"), re.compile("nothing to commit"))),
        ),
        Command("git", ["tag", "-f", "1.0.0"]),
    ]

    run_commands(commands, run=run, console=console)

    assert run.cmdlines == ["git commit -m release", "git tag -f 1.0.0"]


def test_string_patterns_are_accepted(make_runner, console):
    run = make_runner({"git commit": "no changes added to commit"})
    commands = [Command("git", ["commit"], CommandOptions(ok_on_error=("no changes added",)))]

    run_commands(commands, run=run, console=console)

    assert run.cmdlines == ["git commit"]


def test_untolerated_failure_stops(make_runner, console, capsys):
    run = make_runner({"git push": "Command failed with exit code 128: git push\nremote rejected"})
    commands = [
        Command("git", ["push", "origin"], CommandOptions(ok_on_error=(re.compile("nothing to commit"),))),
        Command("git", ["tag", "-f", "1.0.0"]),
    ]

    with pytest.raises(CommandError) as exc_info:
        run_commands(commands, run=run, console=console)

    assert run.cmdlines == ["git push origin"]
    assert exc_info.value.program == "git"
    assert exc_info.value.argv == ["push", "origin"]
    assert exc_info.value.reported
    assert "remote rejected" in capsys.readouterr().err


def test_failure_without_allow_list_stops(make_runner, console):
    run = make_runner({"cp": "cp: cannot stat 'ci/dist/x'"})

    with pytest.raises(CommandError, match="cannot stat"):
        run_commands([Command("cp", ["-rf", "ci/dist/x", "dist"]), Command("git", ["status"])], run=run, console=console)

    assert run.cmdlines == ["cp -rf ci/dist/x dist"]


def test_verbose_prints_commands_and_output(fake_run, console, capsys):
    run_commands([Command.noop(), Command("git", ["status"])], verbose=True, run=fake_run, console=console)

    out = capsys.readouterr().out
    assert "executing >> git status" in out
    assert "ran git status" in out
    assert "skipping empty command" in out


def test_quiet_by_default(fake_run, console, capsys):
    run_commands([Command("git", ["status"])], run=fake_run, console=console)

    assert capsys.readouterr().out == ""


def test_run_process_returns_stdout():
    out = run_process(sys.executable, ["-c", "print('hello')"])
    assert out == "hello"


def test_run_process_failure_includes_both_streams():
    code = "import sys; print('nothing to commit'); print('oops', file=sys.stderr); sys.exit(3)"

    with pytest.raises(CommandFailure) as exc_info:
        run_process(sys.executable, ["-c", code])

    err = exc_info.value
    assert err.exit_code == 3
    assert "exit code 3" in err.message
    assert "nothing to commit" in err.message
    assert "oops" in err.message


def test_run_process_missing_program():
    with pytest.raises(CommandFailure, match="ENOENT"):
        run_process("definitely-not-a-real-program-xyz", [])


@pytest.fixture
def not_executable(tmp_path):
    script = tmp_path / "release.sh"
    script.write_text("#!/bin/sh\necho hi\n")
    script.chmod(0o644)
    return str(script)


def test_run_process_not_executable(not_executable):
    with pytest.raises(CommandFailure) as exc_info:
        run_process(not_executable, [])

    assert "EACCES" in exc_info.value.message
    assert "Permission denied" in exc_info.value.message
    assert exc_info.value.exit_code is None


def test_unstartable_program_goes_through_allow_list(not_executable, console):
    ran = []

    def run(program, args):
        if program == not_executable:
            return run_process(program, args)
        ran.append(program)
        return ""

    commands = [
        Command(not_executable, [], CommandOptions(ok_on_error=("Permission denied",))),
        Command("git", ["status"]),
    ]

    run_commands(commands, run=run, console=console)

    assert ran == ["git"]


def test_unstartable_program_stops_with_command_error(not_executable, console, capsys):
    with pytest.raises(CommandError, match="Permission denied"):
        run_commands([Command(not_executable, []), Command("git", ["status"])], run=run_process, console=console)

    assert "EACCES" in capsys.readouterr().err
