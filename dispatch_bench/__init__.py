"""Static vs dynamic dispatch benchmark generator and measurement harness."""
from __future__ import annotations

from dispatch_bench.errors import (
    BuildError,
    CaseIoError,
    ConfigurationError,
    DispatchBenchError,
    RunError,
    ToolingError,
)
from dispatch_bench.params import CaseConfig, DispatchStrategy, SweepRange
from dispatch_bench.synth import synthesize

__all__ = [
    "BuildError",
    "CaseConfig",
    "CaseIoError",
    "ConfigurationError",
    "DispatchBenchError",
    "DispatchStrategy",
    "RunError",
    "SweepRange",
    "ToolingError",
    "synthesize",
]

__version__ = "0.1.0"
