"""Package tree traversal."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from .errors import WalkError
from .logging import get_logger

GO_SUFFIX = ".go"
CUE_SUFFIX = ".cue"
_TEST_SUFFIX = "_test.go"


@dataclass(frozen=True)
class PackageDir:
    """A directory holding Go and/or CUE sources."""

    path: Path
    package_path: str
    go_files: Tuple[Path, ...]
    cue_files: Tuple[Path, ...]


def _detect_role(filename: str) -> str:
    if filename.endswith(_TEST_SUFFIX):
        return "test"
    if filename.endswith(GO_SUFFIX):
        return "go"
    if filename.endswith(CUE_SUFFIX):
        return "cue"
    return "other"


def _raise_walk_error(exc: OSError) -> None:
    raise WalkError(f"cannot walk {exc.filename}: {exc.strerror or exc}") from exc


class DirectoryWalker:
    """Walks the package root depth-first, skipping excluded subtrees."""

    def __init__(self, exclude_dirs: Iterable[str] = ("testdata",)) -> None:
        self.exclude_dirs = frozenset(exclude_dirs)
        self.logger = get_logger("walker")

    def walk(self, root: Path) -> Iterator[PackageDir]:
        """Yield package directories below ``root`` in sorted depth-first order."""
        root = Path(root)
        if not root.is_dir():
            raise WalkError(f"Package root is not a directory: {root}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            dirnames[:] = sorted(name for name in dirnames if name not in self.exclude_dirs)
            current = Path(dirpath)
            if current == root:
                continue

            go_files: List[Path] = []
            cue_files: List[Path] = []
            for filename in sorted(filenames):
                role = _detect_role(filename)
                if role == "go":
                    go_files.append(current / filename)
                elif role == "cue":
                    cue_files.append(current / filename)
                elif role == "test":
                    self.logger.debug("Skipping test file %s", current / filename)

            if not go_files and not cue_files:
                continue
            yield PackageDir(
                path=current,
                package_path=current.relative_to(root).as_posix(),
                go_files=tuple(go_files),
                cue_files=tuple(cue_files),
            )


__all__ = ["CUE_SUFFIX", "DirectoryWalker", "GO_SUFFIX", "PackageDir"]
