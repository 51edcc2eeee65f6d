"""Renders the consolidated registry as one Go source file."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..config import DEFAULT_FORMATTER_COMMAND
from ..golang.imports import format_import
from ..logging import get_logger
from ..models import ConstDecl, Decl, PackageEntry, Registry
from ..process import Runner, run_command
from .ir import BinaryOp, Composite, Expr, Ident, KeyValue, Lit, RawString
from .printer import GoPrinter

REGISTRY_NAME = "builtinPackages"
_TEMPLATE_NAME = "builtins.go.j2"


@dataclass(frozen=True)
class RenderResult:
    text: str
    formatted: bool


class Emitter:
    """Assembles header, imports, init hook, helpers and the registry literal."""

    def __init__(
        self,
        *,
        package: str = "cue",
        init_hook: str = "initBuiltins",
        strip_qualifier: Optional[str] = "cue",
        formatter_command: Sequence[str] = DEFAULT_FORMATTER_COMMAND,
        runner: Optional[Runner] = None,
        printer: GoPrinter | None = None,
    ) -> None:
        self.package = package
        self.init_hook = init_hook
        self.strip_qualifier = strip_qualifier
        self.formatter_command = list(formatter_command)
        self._runner = runner or run_command
        self.printer = printer or GoPrinter()
        self.logger = get_logger("emitter")
        self._env = Environment(
            loader=FileSystemLoader(str(Path(__file__).with_name("templates"))),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, registry: Registry) -> RenderResult:
        template = self._env.get_template(_TEMPLATE_NAME)
        source = template.render(
            package=self.package,
            imports=[format_import(spec) for spec in registry.imports],
            init_hook=self.init_hook,
            registry_name=REGISTRY_NAME,
            reader_guard=any(spec.path == "io" for spec in registry.imports),
            helpers=registry.helpers,
            registry=self.printer.expr(self.registry_expr(registry.entries)),
        )
        formatted = self._format(source)
        text = formatted if formatted is not None else source
        return RenderResult(text=self._strip_qualifier(text), formatted=formatted is not None)

    def registry_expr(self, entries: Iterable[PackageEntry]) -> Composite:
        return Composite(
            "map[string]*builtinPkg",
            tuple(KeyValue(Lit(entry.path), self.entry_expr(entry)) for entry in entries),
        )

    def entry_expr(self, entry: PackageEntry) -> Composite:
        fields = [
            KeyValue(
                Ident("native"),
                Composite("[]*builtin", tuple(self.decl_expr(decl) for decl in entry.decls)),
            )
        ]
        if entry.snippet:
            fields.append(KeyValue(Ident("cue"), self.snippet_expr(entry.snippet, entry.path)))
        return Composite("&builtinPkg", tuple(fields))

    @staticmethod
    def decl_expr(decl: Decl) -> Composite:
        if isinstance(decl, ConstDecl):
            return Composite(
                None,
                (
                    KeyValue(Ident("Name"), Lit(decl.name)),
                    KeyValue(Ident("Const"), Lit(decl.value.text)),
                ),
            )
        return Composite(
            None,
            (
                KeyValue(Ident("Name"), Lit(decl.name)),
                KeyValue(
                    Ident("Params"),
                    Composite("[]kind", tuple(Ident(kind.value) for kind in decl.param_kinds)),
                ),
                KeyValue(Ident("Result"), Ident(decl.result_kind.value)),
                KeyValue(Ident("Func"), decl.body),
            ),
        )

    def snippet_expr(self, snippet: str, package_path: str) -> Expr:
        """Raw string for the snippet; backquotes are spliced in as quoted strings."""
        parts = snippet.split("`")
        expr: Expr = RawString(parts[0])
        if len(parts) > 1:
            self.logger.warning(
                "CUE snippet of %s contains %d backquote(s); splicing them as quoted strings",
                package_path,
                len(parts) - 1,
            )
        for part in parts[1:]:
            expr = BinaryOp("+", BinaryOp("+", expr, Lit("`")), RawString(part))
        return expr

    def _format(self, source: str) -> Optional[str]:
        if not self.formatter_command:
            return None
        try:
            return self._runner(self.formatter_command, cwd=Path.cwd(), input=source)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or str(exc)
            self.logger.warning("Formatting failed, writing unformatted source: %s", detail)
        except OSError as exc:
            self.logger.warning(
                "Formatter %s unavailable, writing unformatted source: %s",
                self.formatter_command[0],
                exc,
            )
        return None

    def _strip_qualifier(self, text: str) -> str:
        if not self.strip_qualifier:
            return text
        pattern = re.compile(rf"(?<![\w.]){re.escape(self.strip_qualifier)}\.(?=[A-Za-z_])")
        return pattern.sub("", text)


__all__ = ["Emitter", "REGISTRY_NAME", "RenderResult"]
