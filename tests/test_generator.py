"""End-to-end generator runs over temporary package trees."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from builtingen.config import GeneratorConfig, default_config
from builtingen.errors import ImportConflictError, UnsupportedDeclarationError
from builtingen.generator import Generator
from builtingen.models import ConstDecl, ConstValue, FunctionDecl, Kind
from tests._fixtures.repo_builder import PackageTreeBuilder


class FakeCue:
    """Returns canned `cue eval` output keyed by package directory name."""

    def __init__(self, outputs: Dict[str, str]) -> None:
        self.outputs = outputs
        self.calls: List[Path] = []

    def __call__(self, args, *, cwd: Path, input: Optional[str] = None) -> str:  # type: ignore[no-untyped-def]
        self.calls.append(cwd)
        return self.outputs[cwd.name]


def _config(tree: PackageTreeBuilder, tmp_path: Path) -> GeneratorConfig:
    config = default_config(tmp_path)
    config.root = tree.path()
    config.output = tmp_path / "out" / "builtins.go"
    return config


def _generator(tree, tmp_path, no_format, cue_outputs=None) -> Generator:  # type: ignore[no-untyped-def]
    return Generator(
        _config(tree, tmp_path),
        cue_runner=FakeCue(cue_outputs or {}),
        formatter_runner=no_format,
    )


MATH_GO = """
    package math

    const Pi = 3

    func Double(n int) int { return n * 2 }
"""


def test_constant_and_function_are_registered(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write({"math/math.go": MATH_GO})

    registry = _generator(tree, tmp_path, no_format).build()

    entry = registry.entry("math")
    assert entry.constants == (ConstDecl("Pi", ConstValue("int", "3")),)
    (double,) = entry.functions
    assert isinstance(double, FunctionDecl)
    assert double.param_kinds == (Kind.INT,)
    assert double.result_kind is Kind.INT
    assert double.omit_check is True
    assert entry.snippet is None


def test_run_writes_registry_file(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write({"math/math.go": MATH_GO})

    result = _generator(tree, tmp_path, no_format).run()

    assert result.output == tmp_path / "out" / "builtins.go"
    assert result.packages == ["math"]
    assert result.formatted is False
    text = result.output.read_text(encoding="utf-8")
    assert text.startswith("// Code generated by builtingen. DO NOT EDIT.")
    assert '"math": &builtinPkg{' in text
    assert 'Name: "Pi",' in text
    assert 'Const: "3",' in text
    assert "Result: intKind," in text
    assert "n := c.int(0)" in text
    assert "c.ret = func() interface{} { return n * 2 }()" in text


def test_cue_only_package_gets_snippet(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write({"tool/tool.cue": "package tool\n\nCommand: {}\n"})
    runner = FakeCue({"tool": "Command: {\n}\n\n\n"})
    generator = Generator(_config(tree, tmp_path), cue_runner=runner, formatter_runner=no_format)

    registry = generator.build()

    entry = registry.entry("tool")
    assert entry.decls == ()
    assert entry.snippet == "Command: {\n}\n"
    assert [path.name for path in runner.calls] == ["tool"]
    text = generator.emitter.render(registry).text
    assert "native: []*builtin{},\n\t\tcue: `Command: {\n}\n`," in text


def test_interpreter_import_and_qualifier_are_removed(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write(
        {
            "list/list.go": """
                package list

                import (
                    "cuelang.org/go/cue"
                    "strings"
                )

                func Join(xs []string, sep string) string { return strings.Join(xs, sep) }

                func Take(v cue.Value) cue.Value { return v }
            """,
        }
    )

    text = _generator(tree, tmp_path, no_format).run().output.read_text(encoding="utf-8")

    assert 'import (\n\t"strings"\n)' in text
    assert "cuelang.org/go/cue" not in text
    assert "cue.Value" not in text
    assert "v := c.value(0)" in text
    assert "xs, sep := c.strList(0), c.string(1)" in text
    assert "if c.do() {" in text


def test_helpers_follow_walk_order(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write(
        {
            "b/b.go": "package b\n\nfunc bHelper() int { return 2 }\n",
            "a/a.go": "package a\n\nfunc aHelper() int { return 1 }\n",
        }
    )

    registry = _generator(tree, tmp_path, no_format).build()

    assert [entry.path for entry in registry.entries] == ["a", "b"]
    assert registry.helpers == [
        "func aHelper() int { return 1 }",
        "func bHelper() int { return 2 }",
    ]


def test_conflicting_import_aliases_abort_without_output(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write(
        {
            "a/a.go": 'package a\n\nimport str "strings"\n\nfunc Up(s string) string { return str.ToUpper(s) }\n',
            "b/b.go": 'package b\n\nimport "strings"\n\nfunc Low(s string) string { return strings.ToLower(s) }\n',
        }
    )
    generator = _generator(tree, tmp_path, no_format)

    with pytest.raises(ImportConflictError):
        generator.run()
    assert not generator.config.output.exists()


def test_exported_variable_aborts_without_output(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write({"a/a.go": "package a\n\nvar Limit = 3\n"})
    generator = _generator(tree, tmp_path, no_format)

    with pytest.raises(UnsupportedDeclarationError):
        generator.run()
    assert not generator.config.output.exists()


def test_repeated_runs_are_byte_identical(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write(
        {
            "math/math.go": MATH_GO,
            "strings/strings.go": 'package strings\n\nimport "strings"\n\nconst Sep = "," + " "\n\nfunc Trim(s string) string { return strings.TrimSpace(s) }\n',
            "tool/tool.cue": "package tool\n",
        }
    )
    cue_outputs = {"tool": "Command: {}\n"}

    first = _generator(tree, tmp_path, no_format, cue_outputs).run(output=tmp_path / "first.go")
    second = _generator(tree, tmp_path, no_format, cue_outputs).run(output=tmp_path / "second.go")

    assert first.output.read_bytes() == second.output.read_bytes()
    assert 'Const: "\\", \\"",' in first.output.read_text(encoding="utf-8")


def test_run_reports_recoverable_warnings(tree: PackageTreeBuilder, tmp_path: Path, no_format) -> None:  # type: ignore[no-untyped-def]
    tree.write(
        {
            "strings/strings.go": """
                package strings

                func Pair(s string) (string, string) { return s, s }

                func Upper(s string) string { return s }
            """,
        }
    )

    result = _generator(tree, tmp_path, no_format).run()

    # One dropped function plus the unformatted fallback.
    assert result.warnings == 2
    assert result.formatted is False
