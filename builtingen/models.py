"""Core data models shared across builtingen components."""

from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .emit.ir import FuncLit


class Kind(enum.Enum):
    """Closed set of value kinds understood by the interpreter.

    The member value is the Go identifier emitted into the registry.
    """

    BOOL = "boolKind"
    INT = "intKind"
    STRING = "stringKind"
    NUM = "numKind"
    LIST = "listKind"
    STRUCT = "structKind"
    BYTES = "bytesKind"
    READER = "readerKind"
    TOP = "topKind"
    BOTTOM = "bottomKind"


@dataclass(frozen=True)
class ConstValue:
    """Normalized constant literal; ``text`` is what the interpreter parses."""

    kind: str
    text: str


@dataclass(frozen=True)
class ConstDecl:
    name: str
    value: ConstValue


@dataclass(frozen=True)
class FunctionDecl:
    """An exported Go function re-expressed as a registry builtin."""

    name: str
    param_kinds: Tuple[Kind, ...]
    result_kind: Kind
    omit_check: bool
    returns_error: bool
    body: FuncLit


Decl = Union[ConstDecl, FunctionDecl]


@dataclass(frozen=True)
class ImportSpec:
    path: str
    alias: Optional[str] = None

    @property
    def effective_name(self) -> str:
        """Name the import binds in the importing file."""
        if self.alias:
            return self.alias
        return posixpath.basename(self.path)


@dataclass(frozen=True)
class FileContext:
    """Per-file state handed to every extraction step."""

    filename: str
    package_path: str
    package_name: str
    helper_tag: str
    default_package: str = ""

    @property
    def label(self) -> str:
        """Qualifier used in diagnostics."""
        return self.default_package or self.package_name


@dataclass(frozen=True)
class FileExtraction:
    """Declarations pulled out of a single Go file."""

    decls: Tuple[Decl, ...] = ()
    imports: Tuple[ImportSpec, ...] = ()
    helpers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageEntry:
    """Registry record for one package path."""

    path: str
    decls: Tuple[Decl, ...] = ()
    snippet: Optional[str] = None

    @property
    def constants(self) -> Tuple[ConstDecl, ...]:
        return tuple(decl for decl in self.decls if isinstance(decl, ConstDecl))

    @property
    def functions(self) -> Tuple[FunctionDecl, ...]:
        return tuple(decl for decl in self.decls if isinstance(decl, FunctionDecl))


@dataclass(frozen=True)
class PackageAssembly:
    """A package entry plus the supporting imports and helpers it contributed."""

    entry: PackageEntry
    imports: Tuple[ImportSpec, ...] = ()
    helpers: Tuple[str, ...] = ()


@dataclass
class Registry:
    """Everything the emitter needs for one generated file."""

    entries: list[PackageEntry] = field(default_factory=list)
    imports: list[ImportSpec] = field(default_factory=list)
    helpers: list[str] = field(default_factory=list)

    def entry(self, path: str) -> PackageEntry:
        for entry in self.entries:
            if entry.path == path:
                return entry
        raise KeyError(path)


__all__ = [
    "ConstDecl",
    "ConstValue",
    "Decl",
    "FileContext",
    "FileExtraction",
    "FunctionDecl",
    "ImportSpec",
    "Kind",
    "PackageAssembly",
    "PackageEntry",
    "Registry",
]
