from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dispatch_bench.params import CaseConfig, DispatchStrategy


class DispatchBenchError(Exception):
    """Base class for every failure the harness reports."""


class ConfigurationError(DispatchBenchError):
    """A case or harness setting cannot be used for the requested operation."""


class CaseIoError(DispatchBenchError):
    """Creating the case directory or writing a source file failed."""


class PhaseError(DispatchBenchError):
    """An external process failed while handling one (config, strategy) pair."""

    phase = "phase"

    def __init__(
        self,
        message: str,
        *,
        config: CaseConfig | None = None,
        strategy: DispatchStrategy | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.config = config
        self.strategy = strategy
        self.returncode = returncode
        self.stderr = stderr
        prefix = self.phase
        if strategy is not None:
            prefix += f" {strategy.value}"
        if config is not None:
            prefix += f" {config.label()}"
        super().__init__(f"{prefix}: {message}")


class BuildError(PhaseError):
    phase = "build"


class RunError(PhaseError):
    phase = "run"


class ToolingError(PhaseError):
    phase = "symbols"
