from __future__ import annotations

import argparse
import sys

from dispatch_bench.build import BuildMeasurement
from dispatch_bench.config import ENV_COMPILER, ENV_OUTDIR, ENV_SYMBOL_TOOL, HarnessConfig
from dispatch_bench.errors import DispatchBenchError
from dispatch_bench.params import CaseConfig, SweepRange
from dispatch_bench.report import Reporter
from dispatch_bench.sweep import Phase, run_one, run_sweep


COMMANDS: dict[str, tuple[Phase, bool]] = {
    "generate-one": (Phase.GENERATE, False),
    "build-one": (Phase.BUILD, False),
    "run-one": (Phase.RUN, False),
    "generate-all": (Phase.GENERATE, True),
    "build-all": (Phase.BUILD, True),
    "run-all": (Phase.RUN, True),
}


def add_case_arguments(parser: argparse.ArgumentParser, sweeping: bool) -> None:
    bound = " (sweep upper bound)" if sweeping else ""
    parser.add_argument("types", type=int, help=f"number of value types{bound}")
    parser.add_argument("functions", type=int, help=f"number of wrapper functions{bound}")
    parser.add_argument("calls", type=int, help=f"calls per type/function pair{bound}")
    parser.add_argument("--no-inline", action="store_true", help="mark methods and wrappers #[inline(never)]")
    parser.add_argument("--no-dedup", action="store_true", help="give every method and wrapper a distinct side effect")
    parser.add_argument("--predictable", action="store_true", help="call type-major instead of function-major")
    parser.add_argument("--asm", action="store_true", help="also emit an assembly listing when building")
    parser.add_argument("--opt-level", type=int, default=3, help="rustc opt-level (default: 3)")
    if sweeping:
        parser.add_argument("--step", type=int, default=1, help="step shared by every axis; 0 pins it (default: 1)")
        parser.add_argument("--type-step", type=int, default=None, help="step for the type axis")
        parser.add_argument("--function-step", type=int, default=None, help="step for the function axis")
        parser.add_argument("--call-step", type=int, default=None, help="step for the call axis")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dispatch-bench",
        description=(
            "Generate, build and run matched static/dynamic dispatch benchmark programs "
            "and print compile time, binary size and run time."
        ),
    )
    parser.add_argument("--outdir", default=None, help=f"case directory (default: ${ENV_OUTDIR} or cases)")
    parser.add_argument("--compiler", default=None, help=f"rustc command (default: ${ENV_COMPILER} or rustc)")
    parser.add_argument("--nm", default=None, help=f"symbol listing command (default: ${ENV_SYMBOL_TOOL} or nm)")
    parser.add_argument("--name-fields", type=int, choices=(1, 2, 3), default=3, help="numeric fields in artifact names")
    parser.add_argument("--symbols", action="store_true", help="count method/wrapper symbols after each build")
    parser.add_argument("--json", action="store_true", help="also print each measurement as a JSON line")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, (phase, sweeping) in COMMANDS.items():
        scope = "every point of a sweep" if sweeping else "one case"
        add_case_arguments(sub.add_parser(name, help=f"{phase.value} {scope}"), sweeping)
    return parser.parse_args(argv)


def case_from_args(args: argparse.Namespace) -> CaseConfig:
    return CaseConfig(
        num_types=args.types,
        num_functions=args.functions,
        num_calls=args.calls,
        no_inline=args.no_inline,
        no_dedup=args.no_dedup,
        predictable=args.predictable,
        asm_emit=args.asm,
        opt_level=args.opt_level,
    ).validate()


def range_from_args(args: argparse.Namespace, base: CaseConfig) -> SweepRange:
    def pick(value: int | None) -> int:
        return args.step if value is None else value

    return SweepRange(
        base=base,
        type_step=pick(args.type_step),
        function_step=pick(args.function_step),
        call_step=pick(args.call_step),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    phase, sweeping = COMMANDS[args.command]
    reporter = Reporter(json_lines=args.json)
    try:
        harness = HarnessConfig.from_env(
            outdir=args.outdir,
            compiler=args.compiler,
            symbol_tool=args.nm,
            name_fields=args.name_fields,
            symbols=args.symbols,
            json=args.json,
            resolve_tools=phase is Phase.BUILD,
        )
        base = case_from_args(args)
        reporter.header()
        if sweeping:
            return run_sweep(range_from_args(args, base), phase, harness, reporter).exit_code
        results = run_one(phase, base, harness, reporter)
        if any(isinstance(r, BuildMeasurement) and r.tooling_error is not None for r in results):
            return 1
    except DispatchBenchError as exc:
        reporter.failure(exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
