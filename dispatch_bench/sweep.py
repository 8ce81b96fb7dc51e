"""Drive one phase over a single case or over every point of a sweep."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Iterator, Union

from dispatch_bench.build import BuildMeasurement, build_case
from dispatch_bench.cases import materialize
from dispatch_bench.config import HarnessConfig
from dispatch_bench.errors import DispatchBenchError
from dispatch_bench.params import STRATEGIES, CaseConfig, DispatchStrategy, SweepRange
from dispatch_bench.report import GenerateResult, Reporter
from dispatch_bench.runner import RunMeasurement, run_case


PhaseResult = Union[GenerateResult, BuildMeasurement, RunMeasurement]


@unique
class Phase(str, Enum):
    GENERATE = "generate"
    BUILD = "build"
    RUN = "run"


def run_phase(phase: Phase, config: CaseConfig, strategy: DispatchStrategy, harness: HarnessConfig) -> PhaseResult:
    if phase is Phase.GENERATE:
        path = materialize(harness.outdir, config, strategy, harness.name_fields)
        return GenerateResult(config=config, strategy=strategy, source=path)
    if phase is Phase.BUILD:
        return build_case(config, strategy, harness)
    return run_case(config, strategy, harness)


@dataclass
class PointOutcome:
    config: CaseConfig
    results: list[PhaseResult] = field(default_factory=list)
    errors: list[DispatchBenchError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def run_one(phase: Phase, config: CaseConfig, harness: HarnessConfig, reporter: Reporter) -> list[PhaseResult]:
    """Both strategies for one case; the first error propagates."""
    results = []
    for strategy in STRATEGIES:
        result = run_phase(phase, config, strategy, harness)
        reporter.measurement(phase.value, result)
        results.append(result)
    return results


def run_point(phase: Phase, config: CaseConfig, harness: HarnessConfig, reporter: Reporter) -> PointOutcome:
    """Both strategies for one sweep point; errors are reported, not raised."""
    outcome = PointOutcome(config=config)
    for strategy in STRATEGIES:
        try:
            result = run_phase(phase, config, strategy, harness)
        except DispatchBenchError as exc:
            reporter.failure(exc)
            outcome.errors.append(exc)
            continue
        reporter.measurement(phase.value, result)
        outcome.results.append(result)
    return outcome


def sweep(
    sweep_range: SweepRange,
    phase: Phase,
    harness: HarnessConfig,
    reporter: Reporter,
) -> Iterator[PointOutcome]:
    """Visit points strictly in order, reporting each before moving on."""
    for config in sweep_range.points():
        yield run_point(phase, config, harness, reporter)


@dataclass
class SweepTally:
    total: int = 0
    succeeded: int = 0

    def add(self, outcome: PointOutcome) -> None:
        self.total += 1
        if outcome.ok:
            self.succeeded += 1

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded > 0 else 1


def run_sweep(sweep_range: SweepRange, phase: Phase, harness: HarnessConfig, reporter: Reporter) -> SweepTally:
    tally = SweepTally()
    for outcome in sweep(sweep_range, phase, harness, reporter):
        tally.add(outcome)
    reporter.summary(phase.value, tally.total, tally.succeeded)
    return tally
