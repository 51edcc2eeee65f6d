"""Pipeline driving a full generator run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .assembler import PackageAssembler
from .config import GeneratorConfig, default_config
from .cue.embedder import CueEmbedder
from .emit.emitter import Emitter
from .golang.extractor import DeclarationExtractor
from .golang.imports import ImportSet
from .logging import count_warnings, get_logger
from .models import Registry
from .process import Runner
from .walker import DirectoryWalker


@dataclass
class GenerationResult:
    """Outcome of a generator run."""

    output: Path
    packages: list[str]
    formatted: bool
    warnings: int = 0


class Generator:
    """Walks the package tree, assembles every package and writes the registry."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        walker: DirectoryWalker | None = None,
        assembler: PackageAssembler | None = None,
        emitter: Emitter | None = None,
        cue_runner: Optional[Runner] = None,
        formatter_runner: Optional[Runner] = None,
    ) -> None:
        self.config = config or default_config(Path.cwd())
        self.walker = walker or DirectoryWalker(self.config.exclude_dirs)
        self.assembler = assembler or PackageAssembler(
            DeclarationExtractor(),
            CueEmbedder(self.config.cue.command, runner=cue_runner),
        )
        self.emitter = emitter or Emitter(
            package=self.config.package,
            init_hook=self.config.init_hook,
            strip_qualifier=self.config.strip_qualifier,
            formatter_command=self.config.formatter.command,
            runner=formatter_runner,
        )
        self.logger = get_logger("generator")

    def build(self, root: Path | None = None) -> Registry:
        """Collect the registry for every package below ``root``."""
        root_path = Path(root or self.config.root).expanduser().resolve()
        self.logger.info("Scanning %s", root_path)

        imports = ImportSet(excluded_path=self.config.interpreter_import)
        registry = Registry()
        for package in self.walker.walk(root_path):
            assembly = self.assembler.assemble(package)
            if assembly is None:
                continue
            imports.extend(assembly.imports)
            registry.entries.append(assembly.entry)
            registry.helpers.extend(assembly.helpers)
        registry.imports = imports.resolved()
        return registry

    def run(self, root: Path | None = None, output: Path | None = None) -> GenerationResult:
        """Generate the registry file; nothing is written if any step fails."""
        with count_warnings() as warnings:
            registry = self.build(root)
            rendered = self.emitter.render(registry)

        output_path = Path(output or self.config.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered.text, encoding="utf-8")
        self.logger.info(
            "Wrote %d packages to %s", len(registry.entries), output_path
        )
        return GenerationResult(
            output=output_path,
            packages=[entry.path for entry in registry.entries],
            formatted=rendered.formatted,
            warnings=warnings.count,
        )


__all__ = ["GenerationResult", "Generator"]
