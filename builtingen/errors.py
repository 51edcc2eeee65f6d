"""Fatal error types raised while generating the builtin registry."""

from __future__ import annotations


class GenerationError(RuntimeError):
    """Base class for errors that abort a generator run."""


class WalkError(GenerationError):
    """Raised when the package tree cannot be traversed."""


class GoSyntaxError(GenerationError):
    """Raised when a Go source file fails to parse."""


class UnsupportedDeclarationError(GenerationError):
    """Raised for exported declarations the registry cannot represent."""


class UnsupportedExpressionError(GenerationError):
    """Raised when a constant expression cannot be folded."""


class ImportConflictError(GenerationError):
    """Raised when one import path is used under two different names."""


class CueBuildError(GenerationError):
    """Raised when the CUE tool fails for a reason other than missing sources."""


__all__ = [
    "CueBuildError",
    "GenerationError",
    "GoSyntaxError",
    "ImportConflictError",
    "UnsupportedDeclarationError",
    "UnsupportedExpressionError",
    "WalkError",
]
