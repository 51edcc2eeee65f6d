from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import PackageTreeBuilder


@pytest.fixture
def tree(tmp_path: Path) -> PackageTreeBuilder:
    """Provide a package tree builder rooted at the pytest tmp_path."""
    return PackageTreeBuilder(tmp_path)


@pytest.fixture
def no_format():
    """Formatter runner that fails, forcing the unformatted fallback."""

    def runner(args, *, cwd, input=None):  # type: ignore[no-untyped-def]
        raise FileNotFoundError(args[0])

    return runner


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo CLI logging setup so caplog keeps seeing builtingen records."""
    yield
    logger = logging.getLogger("builtingen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
