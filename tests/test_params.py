"""Tests for case configuration and sweep expansion."""
from __future__ import annotations

import pytest

from dispatch_bench.errors import ConfigurationError
from dispatch_bench.params import CaseConfig, DispatchStrategy, SweepRange, expand_axis


class TestDispatchStrategy:
    """Tests for DispatchStrategy enum."""

    def test_values(self) -> None:
        """Strategy values double as artifact name prefixes."""
        assert DispatchStrategy.STATIC.value == "static"
        assert DispatchStrategy.DYNAMIC.value == "dynamic"


class TestCaseConfig:
    """Tests for CaseConfig dataclass."""

    def test_default_toggles(self) -> None:
        """Toggles default to off with opt-level 3."""
        config = CaseConfig(1, 2, 3)

        assert config.no_inline is False
        assert config.no_dedup is False
        assert config.predictable is False
        assert config.asm_emit is False
        assert config.opt_level == 3

    def test_config_immutable(self) -> None:
        """Config is immutable."""
        config = CaseConfig(1, 1, 1)

        with pytest.raises(AttributeError):
            config.num_types = 5

    @pytest.mark.parametrize("counts", [(0, 1, 1), (1, 0, 1), (1, 1, 0)])
    def test_zero_axis_not_runnable(self, counts) -> None:
        """Any zero axis makes a case generation-only."""
        config = CaseConfig(*counts)

        assert config.is_runnable() is False
        with pytest.raises(ConfigurationError, match="must all be > 0"):
            config.require_runnable("build")

    @pytest.mark.parametrize("value", [-1, 10000, 1.5, True])
    def test_rejects_unrepresentable_counts(self, value) -> None:
        """Counts outside 0..=9999 or non-integers are rejected."""
        with pytest.raises(ConfigurationError):
            CaseConfig(value, 1, 1).validate()

    def test_rejects_opt_level(self) -> None:
        """opt-level is limited to 0..=3."""
        with pytest.raises(ConfigurationError, match="opt_level"):
            CaseConfig(1, 1, 1, opt_level=4).validate()

    def test_label(self) -> None:
        """Label names every axis."""
        assert CaseConfig(3, 2, 1).label() == "types=3 functions=2 calls=1"


class TestExpandAxis:
    """Tests for single-axis expansion."""

    def test_pinned(self) -> None:
        """Step 0 holds the given value."""
        assert expand_axis(7, 0) == [7]

    def test_pinned_zero(self) -> None:
        """A pinned axis may hold 0."""
        assert expand_axis(0, 0) == [0]

    def test_unit_step_is_one_to_bound(self) -> None:
        """Step 1 yields 1..=bound."""
        assert expand_axis(4, 1) == [1, 2, 3, 4]

    def test_inclusive_bound(self) -> None:
        """Bound is included when it is a multiple of the step."""
        assert expand_axis(6, 3) == [3, 6]

    def test_bound_not_multiple(self) -> None:
        """Values stop at the last multiple not above the bound."""
        assert expand_axis(7, 3) == [3, 6]

    def test_step_above_bound_is_empty(self) -> None:
        """Step larger than the bound yields nothing."""
        assert expand_axis(2, 5) == []

    def test_negative_step(self) -> None:
        """Negative steps are rejected."""
        with pytest.raises(ConfigurationError):
            expand_axis(4, -1)


class TestSweepRange:
    """Tests for Cartesian sweep expansion."""

    def test_stepped_types_pinned_rest(self) -> None:
        """Types (4, step 2) with pinned functions 2 and calls 1."""
        sweep = SweepRange(CaseConfig(4, 2, 1), type_step=2, function_step=0, call_step=0)

        points = [(c.num_types, c.num_functions, c.num_calls) for c in sweep.points()]

        assert points == [(2, 2, 1), (4, 2, 1)]

    def test_nesting_order(self) -> None:
        """Types outermost, calls innermost."""
        sweep = SweepRange(CaseConfig(2, 2, 2))

        points = [(c.num_types, c.num_functions, c.num_calls) for c in sweep.points()]

        assert points == [
            (1, 1, 1), (1, 1, 2), (1, 2, 1), (1, 2, 2),
            (2, 1, 1), (2, 1, 2), (2, 2, 1), (2, 2, 2),
        ]

    def test_restartable(self) -> None:
        """Iterating twice yields the same sequence."""
        sweep = SweepRange(CaseConfig(3, 1, 1), function_step=0, call_step=0)

        assert list(sweep.points()) == list(sweep.points())

    def test_toggles_carried(self) -> None:
        """Every point keeps the base toggles."""
        base = CaseConfig(2, 1, 1, no_inline=True, predictable=True, opt_level=1)
        sweep = SweepRange(base, function_step=0, call_step=0)

        for config in sweep.points():
            assert config.no_inline is True
            assert config.predictable is True
            assert config.opt_level == 1
