# runner.py
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Sequence, Tuple

from pydantic import BaseModel

from . import settings
from .model import Invocation, StepResult
from .ui.console import Console, get_console

if TYPE_CHECKING:
    from .step_workflows.base import BuildStep


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class CIError(Exception):
    """
    Structured CI error with enough context for:
      - clean CLI output
      - telling which step broke without a traceback
    """
    kind: str  # "io_failure" | "tool_unavailable"
    job: str
    step: str | None
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}", f"job={self.job}"]
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass
class StepFailure(Exception):
    job: str
    step: str
    cmd: str
    exit_code: int
    output: str = ""

    def __str__(self) -> str:
        return f"[{self.job}] step '{self.step}' failed (exit={self.exit_code}): {self.cmd}"


TOOL_HINTS = {
    "git": "Install Git or fix PATH (or set DRUPALCI_GIT).",
    "drush": "Install drush (e.g., composer global require drush/drush) or set DRUPALCI_DRUSH.",
}


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

class CommandRunner:
    """
    Runs external commands one at a time.

    Output is forwarded line by line to the console while the child runs and
    the tail of it is kept for error reports. Every finished command is
    appended to `history`.
    """

    def __init__(self, console: Console | None = None, *, job: str = ""):
        self.console = console or get_console()
        self.job = job
        self.history: List[Invocation] = []

    def run(
        self,
        name: str,
        argv: Sequence[str],
        *,
        cwd: str | Path | None = None,
        output_file: str | Path | None = None,
    ) -> Invocation:
        """
        Run argv and wait for it.

        Args:
            name: Step name used in logs and errors (e.g. "site-install")
            argv: Command and arguments, no shell involved
            cwd: Working directory
            output_file: If set, the command's stdout is written there instead
                         of the console (stderr is still streamed)

        Raises:
            CIError: executable or working directory missing
            StepFailure: the command exited non-zero
        """
        argv = tuple(str(a) for a in argv)
        cwd_s = str(cwd) if cwd is not None else None
        if cwd_s is not None and not Path(cwd_s).is_dir():
            raise CIError(
                kind="io_failure",
                job=self.job,
                step=name,
                message=f"working directory not found: {cwd_s}",
            )

        self.console.print_step(f"{name}: {' '.join(argv)}")
        self.console.print_debug(f"cwd={cwd_s or '.'}")
        captured: list[str] = []
        out = None
        if output_file is not None:
            try:
                out = open(output_file, "w", encoding="utf-8")
            except OSError as e:
                raise CIError(
                    kind="io_failure",
                    job=self.job,
                    step=name,
                    message=f"cannot write {output_file}: {e.strerror}",
                ) from e
        try:
            exit_code = self._stream(argv, cwd_s, captured, stdout=out)
        except FileNotFoundError as e:
            tool = Path(argv[0]).name
            raise CIError(
                kind="tool_unavailable",
                job=self.job,
                step=name,
                message=f"{tool} is not available",
                details={"hint": TOOL_HINTS.get(tool, f"Install {tool} or fix PATH."), "tool": tool},
            ) from e
        finally:
            if out is not None:
                out.close()

        output = "".join(captured)[-settings.OUTPUT_TAIL:]
        inv = Invocation(name=name, argv=argv, cwd=cwd_s, exit_code=exit_code, output=output)
        self.history.append(inv)

        if exit_code != 0:
            raise StepFailure(job=self.job, step=name, cmd=inv.cmd, exit_code=exit_code, output=output)
        return inv

    def _stream(self, argv: Tuple[str, ...], cwd: str | None, captured: list[str], stdout=None) -> int:
        if stdout is None:
            popen_kw = {"stdout": subprocess.PIPE, "stderr": subprocess.STDOUT}
        else:
            popen_kw = {"stdout": stdout, "stderr": subprocess.PIPE}

        # drush and coder may echo PHP sources in any encoding
        with subprocess.Popen(
            list(argv), cwd=cwd, encoding="utf-8", errors="replace", **popen_kw
        ) as proc:
            pipe = proc.stdout if stdout is None else proc.stderr
            for line in pipe:
                self.console.print_output(line)
                captured.append(line)
        return proc.returncode


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------

def run_steps(
    plan: Sequence[Tuple["BuildStep", BaseModel]],
    *,
    workspace: str | Path = ".",
    console: Console | None = None,
    fail_fast: bool = True,
) -> List[StepResult]:
    """
    Execute (step, config) pairs in order.

    With fail_fast the first failing step stops the pipeline and the remaining
    steps are reported as skipped; otherwise every step runs and failures are
    collected.
    """
    console = console or get_console()
    workspace_p = Path(workspace).resolve()
    results: List[StepResult] = []
    failed = False

    for step, config in plan:
        if failed and fail_fast:
            console.print_job_skipped(step.name, "previous step failed")
            results.append(StepResult(name=step.name, status="skipped"))
            continue

        console.print_job_start(step.name)
        try:
            result = step.execute(config, workspace_p, console)
        except StepFailure as e:
            console.print_failure(step.name, str(e), exit_code=e.exit_code, output=e.output, is_job=True)
            error = f"{e}\n{e.output}" if e.output else str(e)
            results.append(StepResult(name=step.name, status="failed", error=error.rstrip()))
            failed = True
            continue
        except CIError as e:
            console.print_failure(step.name, str(e), hint=e.details.get("hint"), is_job=True)
            results.append(StepResult(name=step.name, status="failed", error=str(e)))
            failed = True
            continue

        console.print_success(step.name)
        results.append(result)

    return results
