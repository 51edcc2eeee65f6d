"""CLI entrypoint for builtingen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import GenerationError
from .generator import Generator
from .logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="builtingen",
        description="Generate the builtin package registry from a Go/CUE package tree.",
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Package tree to scan (defaults to the configured root, ../pkg).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Generated Go file (defaults to the configured output, builtins.go).",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=".",
        help="Path to .builtingen.yml or the directory containing it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for builtingen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"builtingen: {exc}\n")

    generator = Generator(config)
    try:
        result = generator.run(
            Path(args.root) if args.root else None,
            Path(args.output) if args.output else None,
        )
    except GenerationError as exc:
        parser.exit(1, f"builtingen failed: {exc}\nRun with --verbose for more details.\n")
    summary = f"Registry with {len(result.packages)} packages written to {_relativize(result.output)}"
    if result.warnings:
        summary += f" ({result.warnings} warnings, see log)"
    print(summary)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
