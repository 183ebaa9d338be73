# runner.py
from __future__ import annotations

import errno
import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .errors import CommandError
from .model import Command
from .ui.console import Console, get_console

DRY_RUN_FLAG = "--dry-run"


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass(eq=False)
class CommandFailure(Exception):
    """A process that could not be started or exited non-zero."""
    program: str
    argv: List[str]
    message: str
    exit_code: int | None = None

    def __str__(self) -> str:
        return self.message


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def run_process(program: str, args: Sequence[str]) -> str:
    """
    Run one external program and return its stdout.

    The failure message carries both streams: git reports
    "nothing to commit" on stdout, not stderr.
    """
    cmdline = " ".join([program, *args])
    try:
        proc = subprocess.run(
            [program, *args],
            text=True,
            capture_output=True,
        )
    except OSError as e:
        # ENOENT, EACCES, ENOEXEC...: the process never started
        code = errno.errorcode.get(e.errno, "EUNKNOWN") if e.errno else "EUNKNOWN"
        raise CommandFailure(
            program=program,
            argv=list(args),
            message=f"Command failed with {code}: {cmdline}\nspawn {program} {code}: {e.strerror or e}",
        ) from e

    if proc.returncode != 0:
        parts = [f"Command failed with exit code {proc.returncode}: {cmdline}"]
        if proc.stderr.strip():
            parts.append(proc.stderr.strip())
        if proc.stdout.strip():
            parts.append(proc.stdout.strip())
        raise CommandFailure(
            program=program,
            argv=list(args),
            message="\n".join(parts),
            exit_code=proc.returncode,
        )

    return proc.stdout.strip()


def _tolerated(message: str, patterns: Iterable[Union[str, re.Pattern[str]]]) -> bool:
    for pattern in patterns:
        if re.search(pattern, message):
            return True
    return False


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

Run = Callable[[str, Sequence[str]], str]


def run_commands(
    commands: Iterable[Command],
    *,
    dryrun: bool = False,
    verbose: bool = False,
    enterprise: bool = False,
    run: Run = run_process,
    console: Optional[Console] = None,
) -> None:
    """
    Execute commands strictly in order.

    - empty commands are skipped
    - enterprise-only commands are skipped unless `enterprise` is set
    - commands opting into dry runs get --dry-run appended when `dryrun` is set
    - a failure matching one of the command's ok_on_error patterns is ignored

    Raises:
        CommandError: on the first failure that is not tolerated; later
            commands do not run.
    """
    console = console or get_console()

    for command in commands:
        if verbose:
            console.print_command(str(command) or "<empty>")

        if command.is_noop:
            if verbose:
                console.print_skipped("skipping empty command")
            continue

        opts = command.options
        if opts.enterprise and not enterprise:
            if verbose:
                console.print_skipped(f"{command} (enterprise only)")
            continue

        args = list(command.args)
        if dryrun and opts.dryrun:
            args.append(DRY_RUN_FLAG)

        try:
            stdout = run(command.program, args)
        except CommandFailure as e:
            if opts.ok_on_error and _tolerated(e.message, opts.ok_on_error):
                continue
            console.print_error("Command failed", e.message)
            raise CommandError(
                message=e.message,
                program=command.program,
                argv=args,
                reported=True,
            ) from e

        if verbose:
            console.print_output(stdout)
