"""Generate the builtin package registry of the CUE interpreter."""

__version__ = "0.1.0"
