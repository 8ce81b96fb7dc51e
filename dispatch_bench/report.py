"""Print measurements as they are produced; nothing is kept afterwards."""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from dispatch_bench.build import BuildMeasurement
from dispatch_bench.errors import DispatchBenchError
from dispatch_bench.params import CaseConfig, DispatchStrategy
from dispatch_bench.runner import RunMeasurement


DIAG_PREFIX = "[dispatch-bench]"


@dataclass(frozen=True)
class GenerateResult:
    config: CaseConfig
    strategy: DispatchStrategy
    source: Path


def format_float(value: Any, digits: int = 2) -> str:
    if isinstance(value, (int, float)):
        return f"{float(value):.{digits}f}"
    return "n/a"


def measurement_record(phase: str, result: GenerateResult | BuildMeasurement | RunMeasurement) -> dict[str, Any]:
    record: dict[str, Any] = {
        "phase": phase,
        "strategy": result.strategy.value,
        "num_types": result.config.num_types,
        "num_functions": result.config.num_functions,
        "num_calls": result.config.num_calls,
        "duration_ms": None,
        "size_bytes": None,
        "method_symbols": None,
        "wrapper_symbols": None,
    }
    if isinstance(result, GenerateResult):
        record["source"] = str(result.source)
    elif isinstance(result, BuildMeasurement):
        record["duration_ms"] = result.duration_ms
        record["size_bytes"] = result.size_bytes
        if result.asm_duration_ms is not None:
            record["asm_duration_ms"] = result.asm_duration_ms
        if result.symbols is not None:
            record["method_symbols"] = result.symbols.method_symbols
            record["wrapper_symbols"] = result.symbols.wrapper_symbols
    else:
        record["duration_ms"] = result.duration_ms
    return record


def format_row(record: dict[str, Any]) -> str:
    cells = [
        record["phase"],
        record["strategy"],
        str(record["num_types"]),
        str(record["num_functions"]),
        str(record["num_calls"]),
        format_float(record["duration_ms"]),
        str(record["size_bytes"]) if record["size_bytes"] is not None else "n/a",
        str(record["method_symbols"]) if record["method_symbols"] is not None else "n/a",
        str(record["wrapper_symbols"]) if record["wrapper_symbols"] is not None else "n/a",
    ]
    return "| " + " | ".join(cells) + " |"


class Reporter:
    def __init__(self, *, json_lines: bool = False, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.json_lines = json_lines
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def header(self) -> None:
        print("| Phase | Strategy | Types | Functions | Calls | ms | Bytes | Methods | Wrappers |", file=self.out)
        print("|---|---|---:|---:|---:|---:|---:|---:|---:|", file=self.out)

    def measurement(self, phase: str, result: GenerateResult | BuildMeasurement | RunMeasurement) -> None:
        record = measurement_record(phase, result)
        print(format_row(record), file=self.out)
        if self.json_lines:
            print(json.dumps(record, sort_keys=True), file=self.out)
        if isinstance(result, BuildMeasurement) and result.tooling_error is not None:
            self.failure(result.tooling_error)
        self.out.flush()

    def failure(self, exc: DispatchBenchError) -> None:
        print(f"{DIAG_PREFIX} {exc}", file=self.err)
        self.err.flush()

    def summary(self, phase: str, total: int, succeeded: int) -> None:
        print(f"sweep {phase}: {total} point(s), {succeeded} ok, {total - succeeded} failed", file=self.out)
