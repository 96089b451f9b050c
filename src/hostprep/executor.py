"""
Running LVM, mkfs, mount and curl.

Provisioners never call subprocess directly. They go through the executor held
by the Host so that tests can inject a fake that simulates LVM and mount
commands instead of touching real disks.
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol

from . import log


@dataclass
class RunResult:
    """Exit status and captured output of one command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def missing_tool(self) -> bool:
        """True when the command itself could not be found."""
        return self.returncode == 127


class Executor(Protocol):
    """Callable taking an argv list; the real one shells out, tests pass an in-memory fake."""

    def __call__(self, cmd: List[str], *, cwd: Optional[str] = None) -> RunResult:
        """Run cmd to completion. A missing binary is returncode 127, not an exception."""
        ...


def subprocess_executor(
    cmd: List[str],
    *,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> RunResult:
    """Run cmd, capturing text output.

    No timeout by default: mkfs on a large disk may legitimately take a long
    time and provisioning waits for every step to finish.
    """
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=timeout,
        )
        run_result = RunResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )
    except subprocess.TimeoutExpired as e:
        run_result = RunResult(
            stdout=e.stdout.decode() if isinstance(e.stdout, bytes) else (e.stdout or ""),
            stderr=f"Command timed out after {e.timeout}s",
            returncode=-1,
        )
    except FileNotFoundError:
        run_result = RunResult(stdout="", stderr="Command not found", returncode=127)
    log.debug(f"{' '.join(cmd)} -> {run_result.returncode}")
    return run_result


def make_executor(host_root: str) -> Executor:
    """Executor used outside tests; commands run with host_root as their working directory."""
    def run(cmd: List[str], *, cwd: Optional[str] = None) -> RunResult:
        return subprocess_executor(cmd, cwd=cwd or host_root)
    return run
