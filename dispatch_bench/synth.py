"""Render the Rust benchmark program for one case and dispatch strategy.

The static and dynamic programs share every declaration except the wrapper
functions: the static wrapper is generic over `T: Io` and is monomorphized
per value type, the dynamic wrapper takes `&dyn Io` and dispatches through
the vtable. `black_box` keeps the optimizer from deleting the calls that
are being measured.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from dispatch_bench.params import CaseConfig, DispatchStrategy, check_count


ITERATIONS = 100_000
INDENT = "    "

NO_INLINE = "#[inline(never)]"
METHOD_NAME = "do_io"
WRAPPER_PREFIX = "call_site_"

PREAMBLE = (
    "#![feature(test)]",
    "extern crate test;",
    "",
    "use test::black_box;",
    "",
    f"const ITERATIONS: usize = {ITERATIONS:_};",
    "",
    "trait Io {",
    f"{INDENT}fn {METHOD_NAME}(&self);",
    "}",
)


def type_name(index: int) -> str:
    return f"T{check_count('type index', index):04d}"


def instance_name(index: int) -> str:
    return f"V{check_count('type index', index):04d}"


def wrapper_name(index: int) -> str:
    return f"{WRAPPER_PREFIX}{check_count('function index', index):04d}"


@dataclass(frozen=True)
class Line:
    text: str
    depth: int = 0

    def render(self) -> str:
        if not self.text:
            return ""
        return INDENT * self.depth + self.text


class SourceBuilder:
    """Collects typed lines and renders them with consistent indentation."""

    def __init__(self) -> None:
        self._lines: list[Line] = []
        self._depth = 0

    def line(self, text: str = "") -> None:
        self._lines.append(Line(text, self._depth))

    def lines(self, texts: tuple[str, ...] | list[str]) -> None:
        for text in texts:
            self.line(text)

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        self.line(f"{header} {{")
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
        self.line("}")

    def render(self) -> str:
        return "\n".join(line.render() for line in self._lines) + "\n"


def call_sequence(config: CaseConfig) -> list[tuple[int, int]]:
    """(function, type) pairs in the order the timing loop calls them.

    Function-major by default; type-major when `predictable` is set. Each
    pair is repeated `num_calls` times in a row.
    """
    if config.num_types == 0 or config.num_functions == 0:
        return []
    pairs: list[tuple[int, int]] = []
    if config.predictable:
        for t in range(config.num_types):
            for f in range(config.num_functions):
                pairs.extend([(f, t)] * config.num_calls)
    else:
        for f in range(config.num_functions):
            for t in range(config.num_types):
                pairs.extend([(f, t)] * config.num_calls)
    return pairs


def _padding(config: CaseConfig, index: int) -> tuple[int, int]:
    return index, config.num_types - index


def _emit_types(out: SourceBuilder, config: CaseConfig) -> None:
    for i in range(config.num_types):
        lead, trail = _padding(config, i)
        out.line()
        out.line("#[derive(Debug)]")
        out.line(f"struct {type_name(i)}([u8; {lead}], [u8; {trail}]);")
        out.line()
        with out.block(f"impl Io for {type_name(i)}"):
            if config.no_inline:
                out.line(NO_INLINE)
            with out.block(f"fn {METHOD_NAME}(&self)"):
                out.line("black_box(self);")
                if config.no_dedup:
                    out.line(f"black_box({i}usize);")


def _emit_wrappers(out: SourceBuilder, config: CaseConfig, strategy: DispatchStrategy) -> None:
    for f in range(config.num_functions):
        out.line()
        if config.no_inline:
            out.line(NO_INLINE)
        if strategy is DispatchStrategy.STATIC:
            signature = f"fn {wrapper_name(f)}<T: Io>(io: &T)"
        else:
            signature = f"fn {wrapper_name(f)}(io: &dyn Io)"
        with out.block(signature):
            out.line(f"io.{METHOD_NAME}();")
            if config.no_dedup:
                out.line(f"black_box({f}usize);")


def _call(strategy: DispatchStrategy, function: int, type_index: int) -> str:
    if strategy is DispatchStrategy.STATIC:
        arg = f"black_box(&{instance_name(type_index)})"
    else:
        arg = f"black_box(&{instance_name(type_index)} as &dyn Io)"
    return f"{wrapper_name(function)}({arg});"


def _emit_main(out: SourceBuilder, config: CaseConfig, strategy: DispatchStrategy) -> None:
    out.line()
    with out.block("fn main()"):
        if config.num_types == 0 or config.num_functions == 0:
            return
        for i in range(config.num_types):
            lead, trail = _padding(config, i)
            out.line(
                f"static {instance_name(i)}: {type_name(i)} = {type_name(i)}([0; {lead}], [0; {trail}]);"
            )
        with out.block("for _ in 0..ITERATIONS"):
            for function, type_index in call_sequence(config):
                out.line(_call(strategy, function, type_index))


def synthesize(config: CaseConfig, strategy: DispatchStrategy) -> str:
    """Source text of the benchmark program; deterministic for equal inputs."""
    config.validate()
    strategy = DispatchStrategy(strategy)
    out = SourceBuilder()
    out.line(
        f"// strategy = {strategy.value}, types = {config.num_types}, "
        f"functions = {config.num_functions}, calls = {config.num_calls}"
    )
    out.lines(PREAMBLE)
    _emit_types(out, config)
    _emit_wrappers(out, config, strategy)
    _emit_main(out, config, strategy)
    return out.render()
