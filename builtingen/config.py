"""Configuration loading for builtingen (.builtingen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".builtingen.yml"

DEFAULT_CUE_COMMAND = ("cue", "eval", "--show-hidden", ".")
DEFAULT_FORMATTER_COMMAND = ("gofmt",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CueConfig:
    """How the CUE tool is invoked for each package directory."""

    command: List[str] = field(default_factory=lambda: list(DEFAULT_CUE_COMMAND))


@dataclass
class FormatterConfig:
    """Formatter applied to the generated Go source. An empty command disables it."""

    command: List[str] = field(default_factory=lambda: list(DEFAULT_FORMATTER_COMMAND))


@dataclass
class GeneratorConfig:
    """Represents the settings defined in .builtingen.yml."""

    base_dir: Path
    root: Path
    output: Path
    package: str = "cue"
    interpreter_import: str = "cuelang.org/go/cue"
    strip_qualifier: Optional[str] = "cue"
    init_hook: str = "initBuiltins"
    exclude_dirs: List[str] = field(default_factory=lambda: ["testdata"])
    cue: CueConfig = field(default_factory=CueConfig)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)


def default_config(base_dir: Path) -> GeneratorConfig:
    """Return the defaults used when no configuration file exists."""
    base_dir = base_dir.resolve()
    return GeneratorConfig(
        base_dir=base_dir,
        root=(base_dir / ".." / "pkg").resolve(),
        output=base_dir / "builtins.go",
    )


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    base_dir = config_file.parent
    config = default_config(base_dir)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    root = _as_str(data.get("root"))
    if root:
        config.root = (base_dir / root).resolve()
    output = _as_str(data.get("output"))
    if output:
        config.output = (base_dir / output).resolve()

    package = _as_str(data.get("package"))
    if package:
        config.package = package
    interpreter_import = _as_str(data.get("interpreter_import"))
    if interpreter_import:
        config.interpreter_import = interpreter_import
    if "strip_qualifier" in data:
        config.strip_qualifier = _as_str(data.get("strip_qualifier")) or None
    init_hook = _as_str(data.get("init_hook"))
    if init_hook:
        config.init_hook = init_hook
    if "exclude_dirs" in data:
        config.exclude_dirs = _as_str_list(data.get("exclude_dirs"))

    cue_data = _as_dict(data.get("cue"))
    if "command" in cue_data:
        command = _as_str_list(cue_data.get("command"))
        if not command:
            raise ConfigError("cue.command must name the CUE executable")
        config.cue = CueConfig(command=command)

    formatter_data = _as_dict(data.get("formatter"))
    if "command" in formatter_data:
        config.formatter = FormatterConfig(command=_as_str_list(formatter_data.get("command")))

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
