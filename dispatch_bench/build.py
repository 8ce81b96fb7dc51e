"""Compile generated cases and classify the symbols they emit."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from dispatch_bench.cases import CaseArtifacts
from dispatch_bench.config import HarnessConfig
from dispatch_bench.errors import BuildError, ToolingError
from dispatch_bench.params import CaseConfig, DispatchStrategy
from dispatch_bench.process import describe_failure, run_process, timed_process
from dispatch_bench.synth import METHOD_NAME, WRAPPER_PREFIX


EMIT_LINK = "link"
EMIT_ASM = "asm"
RUST_EDITION = "2021"


@dataclass(frozen=True)
class SymbolCounts:
    """Lines of symbol-tool output matching each naming pattern.

    Substring matching only: the counts are as reliable as `do_io` and
    `call_site_` are unique among the binary's symbols. A line containing
    both substrings counts toward both totals.
    """

    method_symbols: int
    wrapper_symbols: int


@dataclass(frozen=True)
class BuildMeasurement:
    config: CaseConfig
    strategy: DispatchStrategy
    duration_ms: float
    size_bytes: int
    asm_duration_ms: float | None = None
    symbols: SymbolCounts | None = None
    tooling_error: ToolingError | None = None


def compiler_command(
    compiler: list[str],
    source: Path,
    output: Path,
    opt_level: int,
    emit: str = EMIT_LINK,
) -> list[str]:
    return [
        *compiler,
        "--edition",
        RUST_EDITION,
        "-C",
        f"opt-level={opt_level}",
        f"--emit={emit}",
        "-o",
        str(output),
        str(source),
    ]


def compile_source(
    compiler: list[str],
    source: Path,
    output: Path,
    opt_level: int,
    emit: str = EMIT_LINK,
    *,
    config: CaseConfig | None = None,
    strategy: DispatchStrategy | None = None,
) -> float:
    """Run the compiler once and return its wall-clock duration in ms."""
    cmd = compiler_command(compiler, source, output, opt_level, emit)
    try:
        proc, elapsed = timed_process(cmd)
    except OSError as exc:
        raise BuildError(f"cannot start compiler {cmd[0]}: {exc}", config=config, strategy=strategy) from exc
    if proc.returncode != 0:
        raise BuildError(
            describe_failure(cmd, proc),
            config=config,
            strategy=strategy,
            returncode=proc.returncode,
            stderr=proc.stderr,
        )
    return elapsed


def classify_symbols(listing: str) -> SymbolCounts:
    methods = 0
    wrappers = 0
    for line in listing.splitlines():
        if METHOD_NAME in line:
            methods += 1
        if WRAPPER_PREFIX in line:
            wrappers += 1
    return SymbolCounts(method_symbols=methods, wrapper_symbols=wrappers)


def list_symbols(
    symbol_tool: list[str],
    binary: Path,
    *,
    config: CaseConfig | None = None,
    strategy: DispatchStrategy | None = None,
) -> SymbolCounts:
    cmd = [*symbol_tool, str(binary)]
    try:
        proc = run_process(cmd)
    except OSError as exc:
        raise ToolingError(f"cannot start {cmd[0]}: {exc}", config=config, strategy=strategy) from exc
    if proc.returncode != 0:
        raise ToolingError(
            describe_failure(cmd, proc),
            config=config,
            strategy=strategy,
            returncode=proc.returncode,
            stderr=proc.stderr,
        )
    return classify_symbols(proc.stdout)


def build_case(config: CaseConfig, strategy: DispatchStrategy, harness: HarnessConfig) -> BuildMeasurement:
    """Build one materialized case; asm and symbol listing run only on request."""
    config.require_runnable("build", strategy)
    artifacts = CaseArtifacts.for_case(harness.outdir, config, strategy, harness.name_fields)
    if not artifacts.source.is_file():
        raise BuildError(
            f"source not found: {artifacts.source} (run generate first)",
            config=config,
            strategy=strategy,
        )

    duration = compile_source(
        harness.compiler,
        artifacts.source,
        artifacts.binary,
        config.opt_level,
        EMIT_LINK,
        config=config,
        strategy=strategy,
    )
    try:
        size = artifacts.binary.stat().st_size
    except OSError as exc:
        raise BuildError(
            f"compiler reported success but {artifacts.binary} is unreadable: {exc}",
            config=config,
            strategy=strategy,
        ) from exc

    asm_duration = None
    if config.asm_emit:
        asm_duration = compile_source(
            harness.compiler,
            artifacts.source,
            artifacts.asm,
            config.opt_level,
            EMIT_ASM,
            config=config,
            strategy=strategy,
        )

    symbols = None
    tooling_error = None
    if harness.symbols:
        try:
            symbols = list_symbols(harness.symbol_tool, artifacts.binary, config=config, strategy=strategy)
        except ToolingError as exc:
            tooling_error = exc

    return BuildMeasurement(
        config=config,
        strategy=strategy,
        duration_ms=duration,
        size_bytes=size,
        asm_duration_ms=asm_duration,
        symbols=symbols,
        tooling_error=tooling_error,
    )
