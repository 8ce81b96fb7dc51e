from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from dispatch_bench.cases import CaseArtifacts
from dispatch_bench.config import HarnessConfig
from dispatch_bench.errors import RunError
from dispatch_bench.params import CaseConfig, DispatchStrategy
from dispatch_bench.process import describe_failure, timed_process


@dataclass(frozen=True)
class RunMeasurement:
    config: CaseConfig
    strategy: DispatchStrategy
    duration_ms: float


def run_binary(
    binary: Path,
    *,
    config: CaseConfig | None = None,
    strategy: DispatchStrategy | None = None,
) -> float:
    """Execute a benchmark binary without arguments; no timeout is applied."""
    cmd = [str(binary)]
    try:
        proc, elapsed = timed_process(cmd)
    except OSError as exc:
        raise RunError(f"cannot start {binary}: {exc}", config=config, strategy=strategy) from exc
    if proc.returncode != 0:
        raise RunError(
            describe_failure(cmd, proc),
            config=config,
            strategy=strategy,
            returncode=proc.returncode,
            stderr=proc.stderr,
        )
    return elapsed


def run_case(config: CaseConfig, strategy: DispatchStrategy, harness: HarnessConfig) -> RunMeasurement:
    config.require_runnable("run", strategy)
    artifacts = CaseArtifacts.for_case(harness.outdir, config, strategy, harness.name_fields)
    if not artifacts.binary.is_file():
        raise RunError(f"binary not found: {artifacts.binary} (run build first)", config=config, strategy=strategy)
    return RunMeasurement(
        config=config,
        strategy=strategy,
        duration_ms=run_binary(artifacts.binary.resolve(), config=config, strategy=strategy),
    )
