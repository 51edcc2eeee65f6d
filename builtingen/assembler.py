"""Combines the extractions of one package directory into a registry entry."""

from __future__ import annotations

from typing import List, Optional

from .cue.embedder import CueEmbedder
from .golang.extractor import DeclarationExtractor
from .logging import get_logger
from .models import Decl, ImportSpec, PackageAssembly, PackageEntry
from .walker import PackageDir


class PackageAssembler:
    """Builds one PackageEntry from a directory's Go files and CUE snippet."""

    def __init__(
        self,
        extractor: DeclarationExtractor | None = None,
        embedder: CueEmbedder | None = None,
    ) -> None:
        self.extractor = extractor or DeclarationExtractor()
        self.embedder = embedder or CueEmbedder()
        self.logger = get_logger("assembler")

    def assemble(self, package: PackageDir) -> Optional[PackageAssembly]:
        if not package.go_files and not package.cue_files:
            return None

        decls: List[Decl] = []
        imports: List[ImportSpec] = []
        helpers: List[str] = []
        for path in package.go_files:
            extraction = self.extractor.extract_file(path, package.package_path)
            decls.extend(extraction.decls)
            imports.extend(extraction.imports)
            helpers.extend(extraction.helpers)

        snippet = self.embedder.embed(package.path) or None

        self.logger.info(
            "Assembled %s: %d declarations%s",
            package.package_path,
            len(decls),
            " + CUE" if snippet else "",
        )
        entry = PackageEntry(path=package.package_path, decls=tuple(decls), snippet=snippet)
        return PackageAssembly(entry=entry, imports=tuple(imports), helpers=tuple(helpers))


__all__ = ["PackageAssembler"]
