"""Run configuration.

A single immutable ``Config`` is built once per run and threaded through
every renderer call. ``load_config`` reads it from a JSON file.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from .errors import ConfigurationError, DescriptorError
from .descriptors import TypeRef
from .loader import parse_type_ref

DEFAULT_BASE_MODULE = "Example"

SkipEntry = Union[str, re.Pattern[str]]


@dataclass(frozen=True)
class NamingContext:
    """Rename rules, skip list and namespaces for schema names.

    Rename rules run in order before namespace matching. The first
    namespace (in declaration order) that prefixes a name wins.
    """

    rename: tuple[tuple[re.Pattern[str], str], ...] = ()
    skip: tuple[SkipEntry, ...] = ()
    namespaces: tuple[str, ...] = ()


@dataclass(frozen=True)
class OutputSettings:
    schema_dir: str = "lib/example/schemas"
    operation_dir: str = "lib/example/operations"
    extension: str = ".ex"


@dataclass(frozen=True)
class Config:
    base_module: str = DEFAULT_BASE_MODULE
    error_type: TypeRef | None = None
    default_client: str | None = None
    naming: NamingContext = field(default_factory=NamingContext)
    output: OutputSettings = field(default_factory=OutputSettings)

    @property
    def client_module(self) -> str:
        """Module that executes requests when the caller passes no client."""
        return self.default_client or f"{self.base_module}.Client"


def compile_pattern(pattern: str, purpose: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"invalid {purpose} pattern {pattern!r}: {exc}") from exc


def build_naming(data: dict[str, Any]) -> NamingContext:
    """Build a NamingContext from its JSON form."""
    rename: list[tuple[re.Pattern[str], str]] = []
    for rule in data.get("rename", []):
        if not isinstance(rule, (list, tuple)) or len(rule) != 2:
            raise ConfigurationError(f"rename rule must be a [pattern, replacement] pair, got {rule!r}")
        pattern, replacement = rule
        rename.append((compile_pattern(pattern, "rename"), replacement))

    skip: list[SkipEntry] = []
    for entry in data.get("skip", []):
        if isinstance(entry, str):
            skip.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("pattern"), str):
            skip.append(compile_pattern(entry["pattern"], "skip"))
        else:
            raise ConfigurationError(f"skip entry must be a name or {{'pattern': ...}}, got {entry!r}")

    namespaces = data.get("namespace", [])
    if not all(isinstance(ns, str) and ns for ns in namespaces):
        raise ConfigurationError(f"namespaces must be non-empty strings, got {namespaces!r}")

    return NamingContext(rename=tuple(rename), skip=tuple(skip), namespaces=tuple(namespaces))


def build_config(data: dict[str, Any]) -> Config:
    """Build a Config from its JSON form."""
    if not isinstance(data, dict):
        raise ConfigurationError("configuration must be an object")

    for section in ("types", "naming", "output"):
        if not isinstance(data.get(section, {}), dict):
            raise ConfigurationError(f"{section!r} must be an object")

    error_type = None
    raw_error = data.get("types", {}).get("error")
    if raw_error is not None:
        try:
            error_type = parse_type_ref(raw_error)
        except DescriptorError as exc:
            raise ConfigurationError(f"invalid error type: {exc}") from exc

    output_data = data.get("output", {})
    defaults = OutputSettings()
    output = OutputSettings(
        schema_dir=output_data.get("schema_dir", defaults.schema_dir),
        operation_dir=output_data.get("operation_dir", defaults.operation_dir),
        extension=output_data.get("extension", defaults.extension),
    )

    return Config(
        base_module=data.get("base_module", DEFAULT_BASE_MODULE),
        error_type=error_type,
        default_client=data.get("default_client"),
        naming=build_naming(data.get("naming", {})),
        output=output,
    )


def load_config(path: Path | None = None) -> Config:
    """Load the run configuration from a JSON file, or return defaults."""
    if path is None:
        return Config()
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON: {exc}") from exc
    return build_config(data)
