"""Consolidates the imports of every scanned Go file into one block."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..errors import ImportConflictError
from ..logging import get_logger
from ..models import ImportSpec


class ImportSet:
    """Deduplicates import specs by path and rejects inconsistent names."""

    def __init__(self, excluded_path: Optional[str] = None) -> None:
        self._excluded_path = excluded_path
        self._specs: Dict[str, ImportSpec] = {}
        self.logger = get_logger("imports")

    def add(self, spec: ImportSpec) -> None:
        if spec.path == self._excluded_path:
            return
        previous = self._specs.get(spec.path)
        if previous is None:
            self._specs[spec.path] = spec
            return
        if previous.effective_name != spec.effective_name:
            raise ImportConflictError(
                f"inconsistent name for import {go_path(spec.path)}: "
                f"{previous.effective_name!r} != {spec.effective_name!r}"
            )

    def extend(self, specs: Iterable[ImportSpec]) -> None:
        for spec in specs:
            self.add(spec)

    def resolved(self) -> List[ImportSpec]:
        """Return the specs sorted by path."""
        specs = [self._specs[path] for path in sorted(self._specs)]
        self.logger.debug("Consolidated %d imports", len(specs))
        return specs

    def __len__(self) -> int:
        return len(self._specs)


def go_path(path: str) -> str:
    return f'"{path}"'


def format_import(spec: ImportSpec) -> str:
    """Render one line of a Go import block."""
    if spec.alias:
        return f"{spec.alias} {go_path(spec.path)}"
    return go_path(spec.path)


__all__ = ["ImportSet", "format_import"]
