"""Compiles the CUE files of a package directory into embeddable schema text."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import DEFAULT_CUE_COMMAND
from ..errors import CueBuildError
from ..logging import get_logger
from ..process import Runner, run_command
from ..walker import CUE_SUFFIX

NO_SOURCES_MARKER = "no CUE files"


class CueEmbedder:
    """Runs the CUE tool on one directory at a time and normalizes its output."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_CUE_COMMAND,
        runner: Optional[Runner] = None,
    ) -> None:
        self.command = list(command)
        self._runner = runner or run_command
        self.logger = get_logger("cue")

    def embed(self, directory: Path) -> Optional[str]:
        """Return the formatted schema of ``directory``, or None without CUE sources."""
        if not any(directory.glob(f"*{CUE_SUFFIX}")):
            return None
        try:
            output = self._runner(self.command, cwd=directory)
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr or ""
            if NO_SOURCES_MARKER in stderr:
                return None
            raise CueBuildError(
                f"cue failed in {directory}: {stderr.strip() or exc}"
            ) from exc
        except OSError as exc:
            raise CueBuildError(f"cannot run {self.command[0]}: {exc}") from exc
        self.logger.debug("Compiled CUE sources in %s", directory)
        return collapse_blank_lines(output)


def collapse_blank_lines(text: str) -> str:
    """Strip trailing whitespace and fold runs of blank lines into one."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    cleaned: List[str] = []
    previous_blank = False
    for line in normalized.split("\n"):
        stripped = line.rstrip()
        if not stripped:
            if previous_blank or not cleaned:
                continue
            previous_blank = True
            cleaned.append("")
            continue
        cleaned.append(stripped)
        previous_blank = False

    while cleaned and cleaned[-1] == "":
        cleaned.pop()

    return "\n".join(cleaned) + "\n" if cleaned else ""


__all__ = ["CueEmbedder", "NO_SOURCES_MARKER", "collapse_blank_lines"]
