"""Case configuration, dispatch strategies and sweep ranges."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Iterator

from dispatch_bench.errors import ConfigurationError


# Keeps every numeric field of an artifact name four digits wide.
MAX_AXIS = 9999
MAX_OPT_LEVEL = 3


@unique
class DispatchStrategy(str, Enum):
    """How the shared `Io` behavior is resolved in a generated program."""

    STATIC = "static"
    DYNAMIC = "dynamic"


STRATEGIES = (DispatchStrategy.STATIC, DispatchStrategy.DYNAMIC)


def check_count(name: str, value: object, maximum: int = MAX_AXIS) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > maximum:
        raise ConfigurationError(f"{name} must be within 0..={maximum}, got {value}")
    return value


@dataclass(frozen=True)
class CaseConfig:
    """One measurement point: axis counts plus code-shape toggles."""

    num_types: int
    num_functions: int
    num_calls: int
    no_inline: bool = False
    no_dedup: bool = False
    predictable: bool = False
    asm_emit: bool = False
    opt_level: int = 3

    def validate(self) -> CaseConfig:
        check_count("num_types", self.num_types)
        check_count("num_functions", self.num_functions)
        check_count("num_calls", self.num_calls)
        check_count("opt_level", self.opt_level, MAX_OPT_LEVEL)
        return self

    def is_runnable(self) -> bool:
        return self.num_types > 0 and self.num_functions > 0 and self.num_calls > 0

    def require_runnable(self, operation: str, strategy: DispatchStrategy | None = None) -> None:
        """Reject generation-only cases before any process is spawned."""
        self.validate()
        if not self.is_runnable():
            target = f"{strategy.value} " if strategy is not None else ""
            raise ConfigurationError(
                f"cannot {operation} {target}{self.label()}: types, functions and calls must all be > 0"
            )

    def label(self) -> str:
        return f"types={self.num_types} functions={self.num_functions} calls={self.num_calls}"


def expand_axis(bound: int, step: int) -> list[int]:
    """Values of one sweep axis.

    A step of 0 pins the axis at `bound`. Otherwise the axis yields
    `step, 2*step, ...` up to and including `bound`, so a stepped axis
    never produces 0 and `step=1` is `1..=bound`.
    """
    check_count("bound", bound)
    if isinstance(step, bool) or not isinstance(step, int) or step < 0:
        raise ConfigurationError(f"step must be a non-negative integer, got {step!r}")
    if step == 0:
        return [bound]
    return list(range(step, bound + 1, step))


@dataclass(frozen=True)
class SweepRange:
    """A CaseConfig whose three axes each carry a bound and a step."""

    base: CaseConfig
    type_step: int = 1
    function_step: int = 1
    call_step: int = 1

    def points(self) -> Iterator[CaseConfig]:
        """Cartesian product in fixed order: types outer, functions, calls inner.

        Recomputed on every call, so iterating twice yields the same sequence.
        """
        types = expand_axis(self.base.num_types, self.type_step)
        functions = expand_axis(self.base.num_functions, self.function_step)
        calls = expand_axis(self.base.num_calls, self.call_step)
        for num_types in types:
            for num_functions in functions:
                for num_calls in calls:
                    yield replace(
                        self.base,
                        num_types=num_types,
                        num_functions=num_functions,
                        num_calls=num_calls,
                    )
