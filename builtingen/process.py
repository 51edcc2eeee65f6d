"""Subprocess helper shared by the external tool collaborators."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

Runner = Callable[..., str]


def run_command(
    args: Iterable[str],
    *,
    cwd: Path,
    input: Optional[str] = None,
) -> str:
    """Run a tool and return its stdout; raises CalledProcessError on failure."""
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        input=input,
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


__all__ = ["Runner", "run_command"]
