from __future__ import annotations

import pytest

from builtingen.errors import ImportConflictError
from builtingen.golang.imports import ImportSet, format_import
from builtingen.models import ImportSpec


def test_imports_are_deduplicated_and_sorted_by_path() -> None:
    imports = ImportSet()
    imports.extend(
        [
            ImportSpec("strings"),
            ImportSpec("math/big"),
            ImportSpec("strings"),
            ImportSpec("github.com/cockroachdb/apd/v2", alias="apd"),
            ImportSpec("math/big", alias="big"),
        ]
    )

    assert len(imports) == 3
    assert [spec.path for spec in imports.resolved()] == [
        "github.com/cockroachdb/apd/v2",
        "math/big",
        "strings",
    ]


def test_conflicting_names_for_one_path_are_fatal() -> None:
    imports = ImportSet()
    imports.add(ImportSpec("strings"))
    with pytest.raises(ImportConflictError) as excinfo:
        imports.add(ImportSpec("strings", alias="str"))
    assert '"strings"' in str(excinfo.value)


def test_interpreter_import_is_excluded() -> None:
    imports = ImportSet(excluded_path="cuelang.org/go/cue")
    imports.add(ImportSpec("cuelang.org/go/cue"))
    imports.add(ImportSpec("cuelang.org/go/cue", alias="other"))
    assert imports.resolved() == []


def test_format_import() -> None:
    assert format_import(ImportSpec("strings")) == '"strings"'
    assert format_import(ImportSpec("strings", alias="str")) == 'str "strings"'
