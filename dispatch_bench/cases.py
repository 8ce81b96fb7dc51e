"""On-disk layout of a case: source, binary and assembly paths."""
from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from dispatch_bench.errors import CaseIoError
from dispatch_bench.params import CaseConfig, DispatchStrategy
from dispatch_bench.synth import synthesize


SOURCE_SUFFIX = ".rs"
ASM_SUFFIX = ".s"


def exe_name(stem: str) -> str:
    return f"{stem}.exe" if sys.platform.startswith("win") else stem


def artifact_stem(config: CaseConfig, strategy: DispatchStrategy, name_fields: int = 3) -> str:
    """`{strategy}-{types:04}[-{functions:04}[-{calls:04}]]`."""
    config.validate()
    fields = [config.num_types, config.num_functions, config.num_calls][:name_fields]
    return "-".join([DispatchStrategy(strategy).value] + [f"{value:04d}" for value in fields])


@dataclass(frozen=True)
class CaseArtifacts:
    source: Path
    binary: Path
    asm: Path

    @classmethod
    def for_case(
        cls,
        outdir: Path,
        config: CaseConfig,
        strategy: DispatchStrategy,
        name_fields: int = 3,
    ) -> CaseArtifacts:
        stem = artifact_stem(config, strategy, name_fields)
        outdir = Path(outdir)
        return cls(
            source=outdir / f"{stem}{SOURCE_SUFFIX}",
            binary=outdir / exe_name(stem),
            asm=outdir / f"{stem}{ASM_SUFFIX}",
        )


def write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="\n")


def materialize(
    outdir: Path,
    config: CaseConfig,
    strategy: DispatchStrategy,
    name_fields: int = 3,
) -> Path:
    """Write the synthesized program and return its path."""
    artifacts = CaseArtifacts.for_case(outdir, config, strategy, name_fields)
    source = synthesize(config, strategy)
    try:
        write_file(artifacts.source, source)
    except OSError as exc:
        raise CaseIoError(
            f"generate {DispatchStrategy(strategy).value} {config.label()}: "
            f"cannot write {artifacts.source}: {exc}"
        ) from exc
    return artifacts.source
