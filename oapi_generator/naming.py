"""Normalize raw schema names into target module names.

Pipeline: replace '-' with '_' -> upper camel case -> rename rules ->
namespace qualification.

Examples (with rule ^Codespaces -> Codespace and namespace Codespace):
  codespaces-export     -> Codespace.Export
  codespace             -> Codespace
  repository-invitation -> RepositoryInvitation  (no Repository namespace)
  Codespace.Export      -> Codespace.Export      (already normalized)
"""

from __future__ import annotations

import re
from typing import Iterable

from .config import NamingContext
from .descriptors import SchemaDescriptor


def camelize(name: str) -> str:
    """Upper-camel-case each '.'-separated segment of a snake_case name."""
    segments = []
    for segment in name.split("."):
        pieces = [p[:1].upper() + p[1:] for p in segment.split("_") if p]
        segments.append("".join(pieces))
    return ".".join(segments)


def underscore(name: str) -> str:
    """Convert a normalized module name to a lower snake case path.

    ``Codespace.Export`` becomes ``codespace/export``.
    """
    parts = []
    for segment in name.split("."):
        s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", segment)
        parts.append(re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower())
    return "/".join(parts)


def variable_name(name: str) -> str:
    """Convert a raw parameter name into a valid argument identifier."""
    name = re.sub(r"[^0-9A-Za-z_]", "_", name)
    name = underscore(name.replace("_", "."))
    name = name.replace("/", "_")
    name = re.sub(r"_+", "_", name).strip("_")
    if not name or name[0].isdigit():
        name = f"p_{name}"
    return name


def apply_renames(name: str, naming: NamingContext) -> str:
    for pattern, replacement in naming.rename:
        name = pattern.sub(replacement, name)
    return name


def namespace(name: str, naming: NamingContext) -> str:
    """Qualify a name with the first registered namespace that prefixes it."""
    for ns in naming.namespaces:
        if not name.startswith(ns):
            continue
        remainder = name[len(ns):]
        if remainder.startswith(".") and remainder.strip("."):
            # Already qualified
            return name
        remainder = remainder.strip(".")
        return f"{ns}.{remainder}" if remainder else ns
    return name


def normalize(raw_name: str, naming: NamingContext) -> str:
    """Map a raw schema name to its normalized, namespaced identifier.

    A name already qualified by a registered namespace keeps the casing of
    its remainder, so normalizing twice changes nothing.
    """
    head, dot, rest = raw_name.partition(".")
    head = camelize(head.replace("-", "_"))
    if dot and head in naming.namespaces:
        name = f"{head}.{rest}"
    else:
        name = camelize(raw_name.replace("-", "_"))
    name = apply_renames(name, naming)
    return namespace(name, naming)


def is_skipped(name: str, naming: NamingContext) -> bool:
    """Check if a normalized schema name is excluded from generation."""
    for entry in naming.skip:
        if isinstance(entry, str):
            if entry == name:
                return True
        elif entry.search(name):
            return True
    return False


def build_name_table(schemas: Iterable[SchemaDescriptor], naming: NamingContext) -> dict[str, str]:
    """Pre-compute the normalized name of every schema, keyed by raw name."""
    return {schema.name: normalize(schema.name, naming) for schema in schemas}
