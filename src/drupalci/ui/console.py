"""Build log for drupalci: job and step banners, tool output, failures."""

from __future__ import annotations

import sys
from typing import Optional

OUTPUT_PREFIX = "  | "


class Console:
    """Everything a build prints goes through here."""

    def __init__(self, debug: bool = False, stream=None):
        """
        Args:
            debug: Print full error reports, stack traces and [DEBUG] lines
            stream: Build log destination (sys.stdout at print time when None)
        """
        self.debug = debug
        self._stream = stream

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def print_run_started(self, command: str, workspace: str) -> None:
        self._print("\nRUN STARTED")
        self._print(f"Command: {command}")
        self._print(f"Workspace: {workspace}")
        self._print()

    def print_job_start(self, name: str) -> None:
        self._print(f"\nJOB STARTED: {name}")

    def print_step(self, name: str) -> None:
        """One line per external command, before it starts."""
        self._print(f"STEP: {name}")

    def print_output(self, line: str) -> None:
        """Forward one line of git/drush output."""
        self._print(f"{OUTPUT_PREFIX}{line.rstrip()}")

    def print_success(self, name: str) -> None:
        self._print(f"STATUS: success ({name})")

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        hint: Optional[str] = None,
        output: Optional[str] = None,
        is_job: bool = False,
    ) -> None:
        """
        Report a failed job or command.

        Args:
            name: Job or command name
            reason: Error text; only its first line unless in debug mode
            exit_code: Exit status of the failed command
            hint: How to fix a missing tool
            output: Captured tail of the command's output, repeated here so
                    the failure report is readable on its own
            is_job: "JOB FAILED" instead of "STEP FAILED"
        """
        prefix = "JOB FAILED" if is_job else "STEP FAILED"
        self._print(f"{prefix}: {name}")
        if exit_code is not None:
            self._print(f"Exit code: {exit_code}")
        if hint:
            self._print(f"Hint: {hint}")
        if self.debug:
            self._print(f"Error details: {reason}")
        else:
            self._print(f"Error: {reason.splitlines()[0] if reason else 'unknown error'}")
        if output and output.strip():
            self._print("Output:")
            for line in output.rstrip().splitlines():
                self._print(f"{OUTPUT_PREFIX}{line}")

    def print_job_skipped(self, name: str, reason: str) -> None:
        self._print(f"\nJOB STARTED: {name}")
        self._print(f"STATUS: skipped ({reason})")

    def print_results(self, results: dict[str, str]) -> None:
        """Final summary, one line per job."""
        self._print("\n" + "=" * 40)
        self._print("RESULTS")
        self._print("=" * 40)
        for job, status in results.items():
            self._print(f"  {job}: {'SUCCESS' if status == 'ok' else status.upper()}")

    def print_error(self, title: str, message: str, details: Optional[list[str]] = None) -> None:
        """Errors that stop drupalci before any job runs (bad configuration) go to stderr."""
        print(f"\nERROR: {title}", file=sys.stderr)
        print(message, file=sys.stderr)
        for detail in details or []:
            print(f"  {detail}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        self._print(message)

    def print_warning(self, message: str) -> None:
        self._print(f"WARNING: {message}")

    def print_debug(self, message: str) -> None:
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Set by the CLI; library callers get a default Console
_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    global _console
    _console = console
