"""Console output formatting utilities for pluginrelease."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Iterator, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_publish_started(
        self,
        repository: str,
        plugin_id: str,
        version: str,
        dryrun: bool,
    ) -> None:
        """Print release start information."""
        print("\nPUBLISH STARTED")
        print(f"Repository: {repository}")
        print(f"Plugin: {plugin_id}")
        print(f"Version: {version}")
        if dryrun:
            print("Mode: dry run")
        print()

    @contextmanager
    def task(self, label: str) -> Iterator[None]:
        """
        Wrap a long-running task with start/finish markers.

        The marker flips to a failure mark when the body raises; the
        exception is re-raised untouched.
        """
        print(f"{label}...")
        try:
            yield
        except BaseException:
            print(f"✖ {label}", file=sys.stderr)
            raise
        print(f"✓ {label}")

    def print_command(self, command: str) -> None:
        """Print a command about to be executed (verbose mode)."""
        print(f"executing >> {command}")

    def print_output(self, output: str) -> None:
        """Print captured command output (verbose mode)."""
        if output:
            print(output)

    def print_skipped(self, reason: str) -> None:
        """Print a skipped-command note (verbose mode)."""
        print(f"⏭ {reason}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_release_created(self, tag: str, url: str | None) -> None:
        """Print the hosted release summary."""
        print("\nRELEASE CREATED")
        print(f"Tag: {tag}")
        if url:
            print(f"URL: {url}")

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
