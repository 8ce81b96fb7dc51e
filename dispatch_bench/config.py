from __future__ import annotations

import os
import shlex
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from dispatch_bench.errors import ConfigurationError


DEFAULT_OUTDIR = "cases"
DEFAULT_COMPILER = "rustc"
DEFAULT_SYMBOL_TOOL = "nm"

ENV_OUTDIR = "DISPATCH_BENCH_OUTDIR"
ENV_COMPILER = "DISPATCH_BENCH_RUSTC"
ENV_SYMBOL_TOOL = "DISPATCH_BENCH_NM"


def require_tool(name: str, env_var: str | None = None) -> str:
    resolved = shutil.which(name)
    if not resolved:
        hint = f"; set {env_var} to override" if env_var else ""
        raise ConfigurationError(f"required tool not found in PATH: {name}{hint}")
    return resolved


def resolve_command(raw: str | None, default: str, env_var: str) -> list[str]:
    """Split a tool command; a bare program name must resolve on PATH."""
    cmd = shlex.split(raw) if raw else [default]
    if not cmd:
        raise ConfigurationError(f"empty command for {env_var}")
    if len(cmd) == 1 and os.sep not in cmd[0]:
        cmd[0] = require_tool(cmd[0], env_var)
    return cmd


@dataclass(frozen=True)
class HarnessConfig:
    """Settings shared by every operation.

    Attributes:
        outdir: Directory that holds every case artifact.
        compiler: Command prefix for rustc.
        symbol_tool: Command prefix for the symbol lister.
        name_fields: How many numeric fields artifact names carry (1..3).
        symbols: Classify emitted symbols after each build.
        json: Also print each measurement as a JSON line.
    """

    outdir: Path = Path(DEFAULT_OUTDIR)
    compiler: list[str] = field(default_factory=lambda: [DEFAULT_COMPILER])
    symbol_tool: list[str] = field(default_factory=lambda: [DEFAULT_SYMBOL_TOOL])
    name_fields: int = 3
    symbols: bool = False
    json: bool = False

    def __post_init__(self) -> None:
        if self.name_fields not in (1, 2, 3):
            raise ConfigurationError(f"name_fields must be 1, 2 or 3, got {self.name_fields}")

    @classmethod
    def from_env(
        cls,
        *,
        outdir: str | None = None,
        compiler: str | None = None,
        symbol_tool: str | None = None,
        name_fields: int = 3,
        symbols: bool = False,
        json: bool = False,
        resolve_tools: bool = True,
    ) -> HarnessConfig:
        outdir = outdir or os.environ.get(ENV_OUTDIR) or DEFAULT_OUTDIR
        compiler = compiler or os.environ.get(ENV_COMPILER)
        symbol_tool = symbol_tool or os.environ.get(ENV_SYMBOL_TOOL)
        if resolve_tools:
            compiler_cmd = resolve_command(compiler, DEFAULT_COMPILER, ENV_COMPILER)
            symbol_cmd = (
                resolve_command(symbol_tool, DEFAULT_SYMBOL_TOOL, ENV_SYMBOL_TOOL)
                if symbols
                else shlex.split(symbol_tool or DEFAULT_SYMBOL_TOOL)
            )
        else:
            compiler_cmd = shlex.split(compiler or DEFAULT_COMPILER)
            symbol_cmd = shlex.split(symbol_tool or DEFAULT_SYMBOL_TOOL)
        return cls(
            outdir=Path(outdir).expanduser(),
            compiler=compiler_cmd,
            symbol_tool=symbol_cmd,
            name_fields=name_fields,
            symbols=symbols,
            json=json,
        )
