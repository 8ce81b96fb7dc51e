from __future__ import annotations

import subprocess
import time
from pathlib import Path


def run_process(cmd: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a child process to completion and capture its text output.

    Raises FileNotFoundError when the executable does not exist; a non-zero
    exit is left for the caller to classify.
    """
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        text=True,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
    )


def timed_process(cmd: list[str], cwd: Path | None = None) -> tuple[subprocess.CompletedProcess[str], float]:
    started = time.perf_counter()
    proc = run_process(cmd, cwd=cwd)
    return proc, (time.perf_counter() - started) * 1000.0


def describe_failure(cmd: list[str], proc: subprocess.CompletedProcess[str]) -> str:
    joined = " ".join(cmd)
    return f"command failed ({proc.returncode}): {joined}\nstdout:\n{proc.stdout}\nstderr:\n{proc.stderr}"
