"""Pytest fixtures: stand-in compiler and symbol tools run as real child processes."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

from dispatch_bench.config import HarnessConfig
from dispatch_bench.params import CaseConfig


COMPILER_STUB = '''
import stat
import sys
from pathlib import Path

FAIL_MARKER = {fail_marker!r}
RUN_FAIL_MARKER = {run_fail_marker!r}

args = sys.argv[1:]
output = Path(args[args.index("-o") + 1])
source = Path(args[-1])
emit = [a.split("=", 1)[1] for a in args if a.startswith("--emit=")][0]
if FAIL_MARKER and FAIL_MARKER in source.name:
    sys.stderr.write("error: stub compiler rejected " + source.name + "\\n")
    sys.exit(1)
if emit == "asm":
    output.write_text("; assembly for " + source.name + "\\n")
else:
    code = 3 if RUN_FAIL_MARKER and RUN_FAIL_MARKER in output.name else 0
    output.write_text("#!" + sys.executable + "\\nimport sys\\nsys.exit(" + str(code) + ")\\n")
    output.chmod(output.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
'''

SYMBOL_STUB = '''
import sys

if {fail!r}:
    sys.stderr.write("nm: stub failure\\n")
    sys.exit(2)
print("0000000000001000 t _ZN4main5T00005do_io17h0123456789abcdefE")
print("0000000000001010 t _ZN4main5T00015do_io17h1123456789abcdefE")
print("0000000000001020 t _ZN4main14call_site_000017h2123456789abcdefE")
print("0000000000001030 T main")
'''


@pytest.fixture
def make_compiler(tmp_path: Path) -> Callable[..., list[str]]:
    """Factory for a compiler stub that can fail on a file-name marker."""

    def factory(fail_marker: str = "", run_fail_marker: str = "") -> list[str]:
        stub = tmp_path / "stub_rustc.py"
        stub.write_text(
            COMPILER_STUB.format(fail_marker=fail_marker, run_fail_marker=run_fail_marker),
            encoding="utf-8",
        )
        return [sys.executable, str(stub)]

    return factory


@pytest.fixture
def make_symbol_tool(tmp_path: Path) -> Callable[..., list[str]]:
    """Factory for an nm stub printing two methods and one wrapper."""

    def factory(fail: bool = False) -> list[str]:
        stub = tmp_path / "stub_nm.py"
        stub.write_text(SYMBOL_STUB.format(fail=fail), encoding="utf-8")
        return [sys.executable, str(stub)]

    return factory


@pytest.fixture
def outdir(tmp_path: Path) -> Path:
    return tmp_path / "cases"


@pytest.fixture
def harness(outdir: Path, make_compiler, make_symbol_tool) -> HarnessConfig:
    return HarnessConfig(outdir=outdir, compiler=make_compiler(), symbol_tool=make_symbol_tool())


@pytest.fixture
def small_case() -> CaseConfig:
    return CaseConfig(num_types=2, num_functions=2, num_calls=1)
