"""Extracts registry declarations from Go source files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..emit.ir import Assign, Attr, Block, Call, FuncLit, Ident, If, Lit, Verbatim
from ..errors import UnsupportedDeclarationError, UnsupportedExpressionError
from ..logging import get_logger
from ..models import ConstDecl, Decl, FileContext, FileExtraction, FunctionDecl, ImportSpec
from .constants import evaluate, kind_name, normalize
from .kinds import accessor_for, map_kind
from .parser import GoParser, GoSource
from .types import Named, TypeExpr, format_type, type_from_node

# Helper functions are kept when their name starts with the package tag.
_HELPER_TAG_OVERRIDES = {"structs": "struct"}

_ERROR_TYPE = Named("error")
_CALL_CONTEXT = Ident("c")


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


class DeclarationExtractor:
    """Splits a Go file into registry constants, registry functions and helpers."""

    def __init__(self, parser: GoParser | None = None) -> None:
        self.parser = parser or GoParser()
        self.logger = get_logger("extractor")

    def extract_file(self, path: Path, package_path: str) -> FileExtraction:
        return self.extract(self.parser.parse_file(path), package_path)

    def extract(self, source: GoSource, package_path: str) -> FileExtraction:
        imports = tuple(self._imports(source))
        package_name = self._package_name(source)
        ctx = FileContext(
            filename=source.filename,
            package_path=package_path,
            package_name=package_name,
            helper_tag=_HELPER_TAG_OVERRIDES.get(package_name, package_name),
            default_package=imports[0].effective_name if imports else "",
        )

        decls: List[Decl] = []
        helpers: List[str] = []
        for node in source.declarations():
            kind = node.type
            if kind in ("comment", "package_clause", "import_declaration"):
                continue
            if kind == "const_declaration":
                decls.extend(self._constants(node, source, ctx))
            elif kind == "var_declaration":
                helpers.append(self._variables(node, source, ctx))
            elif kind == "type_declaration":
                self._check_types(node, source, ctx)
            elif kind in ("function_declaration", "method_declaration"):
                function, helper = self._function(node, source, ctx)
                if function is not None:
                    decls.append(function)
                if helper is not None:
                    helpers.append(helper)
            else:
                raise UnsupportedDeclarationError(
                    f"gen {ctx.filename}: unexpected top-level {kind}"
                )

        self.logger.debug(
            "Extracted %d declarations and %d helpers from %s",
            len(decls),
            len(helpers),
            ctx.filename,
        )
        return FileExtraction(decls=tuple(decls), imports=imports, helpers=tuple(helpers))

    @staticmethod
    def _package_name(source: GoSource) -> str:
        for node in source.declarations():
            if node.type == "package_clause":
                for child in node.named_children:
                    if child.type == "package_identifier":
                        return source.text(child)
        return ""

    @staticmethod
    def _imports(source: GoSource) -> Iterator[ImportSpec]:
        for node in source.declarations():
            if node.type != "import_declaration":
                continue
            for spec in _specs(node, "import_spec"):
                path_node = spec.child_by_field_name("path")
                if path_node is None:
                    continue
                alias_node = spec.child_by_field_name("name")
                yield ImportSpec(
                    path=source.text(path_node)[1:-1],
                    alias=source.text(alias_node) if alias_node is not None else None,
                )

    def _constants(self, node: Node, source: GoSource, ctx: FileContext) -> Iterator[ConstDecl]:
        for spec in _specs(node, "const_spec"):
            names = [child for child in spec.children_by_field_name("name") if child.type == "identifier"]
            value_list = spec.child_by_field_name("value")
            values = [
                child for child in (value_list.named_children if value_list else []) if child.type != "comment"
            ]
            for index, name_node in enumerate(names):
                name = source.text(name_node)
                if not is_exported(name):
                    continue
                if index >= len(values):
                    raise UnsupportedExpressionError(
                        f"{ctx.label}: constant {name} has no explicit value"
                    )
                folded = evaluate(values[index], source.source, ctx)
                value = normalize(folded)
                if value is None:
                    self.logger.warning(
                        "Dropped entry %s.%s in %s (%s: %s)",
                        ctx.label,
                        name,
                        ctx.package_path,
                        kind_name(folded),
                        folded,
                    )
                    continue
                yield ConstDecl(name=name, value=value)

    @staticmethod
    def _variables(node: Node, source: GoSource, ctx: FileContext) -> str:
        for spec in _specs(node, "var_spec"):
            for name_node in spec.children_by_field_name("name"):
                if name_node.type == "identifier" and is_exported(source.text(name_node)):
                    raise UnsupportedDeclarationError(
                        f"gen {ctx.filename}: var declarations not supported "
                        f"({source.text(name_node)})"
                    )
        return source.text(node)

    @staticmethod
    def _check_types(node: Node, source: GoSource, ctx: FileContext) -> None:
        for spec_type in ("type_spec", "type_alias"):
            for spec in _specs(node, spec_type):
                name_node = spec.child_by_field_name("name")
                if name_node is not None and is_exported(source.text(name_node)):
                    raise UnsupportedDeclarationError(
                        f"gen {ctx.filename}: type declarations not supported "
                        f"({source.text(name_node)})"
                    )

    def _function(
        self, node: Node, source: GoSource, ctx: FileContext
    ) -> Tuple[Optional[FunctionDecl], Optional[str]]:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name_node is None or body is None:
            return None, None
        name = source.text(name_node)

        if node.type == "method_declaration" or not is_exported(name):
            if ctx.helper_tag and name.startswith(ctx.helper_tag):
                return None, source.text(node)
            return None, None

        if node.child_by_field_name("type_parameters") is not None:
            self._drop(ctx, name, "generic functions are not supported")
            return None, None

        results = self._results(node, source)
        if len(results) != 1 and (len(results) != 2 or results[1] != _ERROR_TYPE):
            shapes = ", ".join(format_type(result) for result in results)
            self._drop(ctx, name, f"must have one return value or a value and an error [{shapes}]")
            return None, None

        params = self._params(node, source)
        if params is None:
            self._drop(ctx, name, "variadic parameters are not supported")
            return None, None

        param_kinds = []
        fetches = []
        omit_check = True
        for index, (_, param_type) in enumerate(params):
            mapping = map_kind(param_type)
            omit_check = omit_check and mapping.ground
            param_kinds.append(mapping.kind)
            fetches.append(Call(Attr(_CALL_CONTEXT, accessor_for(param_type)), (Lit(index),)))
        result = map_kind(results[0])
        omit_check = omit_check and result.ground
        returns_error = len(results) == 2

        stmts: list = []
        if params:
            names = tuple(Ident(param_name) for param_name, _ in params)
            define = any(param_name != "_" for param_name, _ in params)
            stmts.append(Assign(names, tuple(fetches), define=define))
        invoke = _invoke(source.text(body), returns_error)
        if omit_check:
            stmts.append(invoke)
        else:
            stmts.append(If(Call(Attr(_CALL_CONTEXT, "do")), Block((invoke,))))

        function = FunctionDecl(
            name=name,
            param_kinds=tuple(param_kinds),
            result_kind=result.kind,
            omit_check=omit_check,
            returns_error=returns_error,
            body=FuncLit("c *callCtxt", "", Block(tuple(stmts))),
        )
        return function, None

    def _drop(self, ctx: FileContext, name: str, reason: str) -> None:
        self.logger.warning("Dropped func %s.%s in %s: %s", ctx.label, name, ctx.package_path, reason)

    @staticmethod
    def _results(node: Node, source: GoSource) -> List[TypeExpr]:
        result = node.child_by_field_name("result")
        if result is None:
            return []
        if result.type != "parameter_list":
            return [type_from_node(result, source.source)]
        types: List[TypeExpr] = []
        for decl in result.named_children:
            type_node = decl.child_by_field_name("type")
            if type_node is None:
                continue
            names = [child for child in decl.children_by_field_name("name") if child.type == "identifier"]
            types.extend([type_from_node(type_node, source.source)] * max(1, len(names)))
        return types

    @staticmethod
    def _params(node: Node, source: GoSource) -> Optional[List[Tuple[str, TypeExpr]]]:
        """Return (name, type) pairs, or None when a parameter is variadic."""
        param_list = node.child_by_field_name("parameters")
        params: List[Tuple[str, TypeExpr]] = []
        if param_list is None:
            return params
        for decl in param_list.named_children:
            if decl.type == "variadic_parameter_declaration":
                return None
            type_node = decl.child_by_field_name("type")
            if decl.type != "parameter_declaration" or type_node is None:
                continue
            param_type = type_from_node(type_node, source.source)
            names = [source.text(child) for child in decl.children_by_field_name("name") if child.type == "identifier"]
            for param_name in names or ["_"]:
                params.append((param_name, param_type))
        return params


def _invoke(body_text: str, returns_error: bool) -> Assign:
    """Assign the result of running the declared body to the call context."""
    if returns_error:
        targets = (Attr(_CALL_CONTEXT, "ret"), Attr(_CALL_CONTEXT, "err"))
        results = "(interface{}, error)"
    else:
        targets = (Attr(_CALL_CONTEXT, "ret"),)
        results = "interface{}"
    return Assign(targets, (Call(FuncLit("", results, Verbatim(body_text))),))


def _specs(node: Node, spec_type: str) -> Iterator[Node]:
    """Yield specs of a declaration, looking inside parenthesised spec lists."""
    for child in node.named_children:
        if child.type == spec_type:
            yield child
        elif child.type.endswith("_list"):
            for grandchild in child.named_children:
                if grandchild.type == spec_type:
                    yield grandchild


__all__ = ["DeclarationExtractor", "is_exported"]
