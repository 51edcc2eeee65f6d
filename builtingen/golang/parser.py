"""Tree-sitter front end for Go source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import GoSyntaxError

GO_LANGUAGE = Language(tree_sitter_go.language())


@dataclass(frozen=True)
class GoSource:
    """A parsed Go file: its bytes and the root of its syntax tree."""

    filename: str
    source: bytes
    root: Node

    def text(self, node: Node) -> str:
        return node_text(node, self.source)

    def declarations(self) -> Iterator[Node]:
        """Yield top-level children, comments included."""
        yield from self.root.named_children


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


class GoParser:
    """Parses Go files, keeping comments, and rejects trees with syntax errors."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Path) -> GoSource:
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise GoSyntaxError(f"{path}: cannot read source: {exc}") from exc
        return self.parse(source, str(path))

    def parse(self, source: bytes, filename: str = "<source>") -> GoSource:
        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            row, column = bad.start_point
            raise GoSyntaxError(f"{filename}:{row + 1}:{column + 1}: syntax error")
        return GoSource(filename=filename, source=source, root=root)


def _first_error(node: Node) -> Optional[Node]:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


__all__ = ["GO_LANGUAGE", "GoParser", "GoSource", "node_text"]
