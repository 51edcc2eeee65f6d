from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional

import pytest

from builtingen.cue.embedder import NO_SOURCES_MARKER, CueEmbedder, collapse_blank_lines
from builtingen.errors import CueBuildError


class FakeRunner:
    def __init__(self, output: str = "", error: Optional[Exception] = None) -> None:
        self.output = output
        self.error = error
        self.calls: List[tuple] = []

    def __call__(self, args, *, cwd: Path, input: Optional[str] = None) -> str:  # type: ignore[no-untyped-def]
        self.calls.append((tuple(args), cwd))
        if self.error is not None:
            raise self.error
        return self.output


def _cue_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "tool"
    directory.mkdir()
    (directory / "tool.cue").write_text("package tool\n", encoding="utf-8")
    return directory


def test_embed_runs_cue_in_package_directory(tmp_path: Path) -> None:
    directory = _cue_dir(tmp_path)
    runner = FakeRunner(output="\n\nCommand: {\n\n\n\t$id: 1   \n}\n\n")
    embedder = CueEmbedder(runner=runner)

    snippet = embedder.embed(directory)

    assert snippet == "Command: {\n\n\t$id: 1\n}\n"
    assert runner.calls == [(("cue", "eval", "--show-hidden", "."), directory)]


def test_embed_skips_directories_without_cue_files(tmp_path: Path) -> None:
    runner = FakeRunner(output="ignored")
    assert CueEmbedder(runner=runner).embed(tmp_path) is None
    assert runner.calls == []


def test_no_sources_marker_means_no_snippet(tmp_path: Path) -> None:
    directory = _cue_dir(tmp_path)
    error = subprocess.CalledProcessError(1, ["cue"], stderr=f"build constraints exclude all CUE files: {NO_SOURCES_MARKER}")
    assert CueEmbedder(runner=FakeRunner(error=error)).embed(directory) is None


def test_cue_failure_is_fatal(tmp_path: Path) -> None:
    directory = _cue_dir(tmp_path)
    error = subprocess.CalledProcessError(1, ["cue"], stderr="tool.cue:3: expected operand")
    with pytest.raises(CueBuildError) as excinfo:
        CueEmbedder(runner=FakeRunner(error=error)).embed(directory)
    assert "expected operand" in str(excinfo.value)


def test_missing_cue_binary_is_fatal(tmp_path: Path) -> None:
    directory = _cue_dir(tmp_path)
    runner = FakeRunner(error=FileNotFoundError(2, "No such file or directory", "cue"))
    with pytest.raises(CueBuildError):
        CueEmbedder(runner=runner).embed(directory)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ""),
        ("\n\n\n", ""),
        ("a\r\n\r\n\r\nb", "a\n\nb\n"),
        ("a  \n\t\nb\n", "a\n\nb\n"),
    ],
)
def test_collapse_blank_lines(text: str, expected: str) -> None:
    assert collapse_blank_lines(text) == expected
