"""Descriptor data model handed in by the upstream processor.

Descriptors are immutable snapshots of one operation or one schema. The
generator reads them and never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

# Primitive kinds understood by the type resolver
PRIMITIVE_KINDS = frozenset({"boolean", "integer", "number", "string", "object", "null", "any"})

# Top-level schema kinds that never produce a generated type
SCALAR_SCHEMA_KINDS = frozenset({"array", "boolean", "integer", "number", "string", "null", "any"})


@dataclass(frozen=True)
class Primitive:
    kind: str


@dataclass(frozen=True)
class ArrayOf:
    item: TypeRef


@dataclass(frozen=True)
class SchemaRef:
    """Reference to another schema by its raw (un-normalized) name."""

    name: str


@dataclass(frozen=True)
class ExternalType:
    """Already qualified type that lives outside the generated code."""

    module: str


@dataclass(frozen=True)
class UnionOf:
    members: tuple[TypeRef, ...]


TypeRef = Union[Primitive, ArrayOf, SchemaRef, ExternalType, UnionOf]

Status = Union[int, str]


@dataclass(frozen=True)
class Param:
    name: str
    value_type: TypeRef


@dataclass(frozen=True)
class OperationDescriptor:
    """One API endpoint.

    Attributes:
        function_name: Name of the generated function
        module_name: Owning module, relative to the configured base module
        docstring: Documentation attached verbatim to the function
        method: HTTP method, lowercase
        path: URL template with ``{name}`` placeholders
        path_params: Path parameters in declaration order
        query_params: Query parameters
        request_body: ``(content_type, type)`` pairs
        responses: Status (int or ``"default"``) to content type to type
    """

    function_name: str
    module_name: str
    method: str
    path: str
    docstring: str = ""
    path_params: tuple[Param, ...] = ()
    query_params: tuple[Param, ...] = ()
    request_body: tuple[tuple[str, TypeRef], ...] = ()
    responses: Mapping[Status, Mapping[str, TypeRef]] = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaDescriptor:
    """One data shape.

    Properties keep their declaration order. A property that points at
    another schema has kind ``"reference"`` and carries the raw name in ``ref``.
    """

    name: str
    kind: str
    title: str | None = None
    description: str | None = None
    properties: Mapping[str, SchemaDescriptor] = field(default_factory=dict)
    items: SchemaDescriptor | None = None
    ref: str | None = None

    @property
    def is_reference(self) -> bool:
        return self.kind == "reference"


@dataclass(frozen=True)
class Descriptors:
    schemas: tuple[SchemaDescriptor, ...]
    operations: tuple[OperationDescriptor, ...]
