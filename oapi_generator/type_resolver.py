"""Resolve descriptor type references into type nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .descriptors import (
    ArrayOf,
    ExternalType,
    Primitive,
    SchemaDescriptor,
    SchemaRef,
    TypeRef,
    UnionOf,
)
from .errors import ResolutionError
from .nodes import MapType, NamedType, ScalarType, SequenceType, TypeNode, TypeUnion

NULL_TYPE = ScalarType("null")


@dataclass(frozen=True)
class TypeResolver:
    """Converts TypeRefs into target type nodes.

    References are looked up by raw name in ``names``, the table of every
    normalized schema name built before rendering starts. Nothing follows
    object pointers, so cyclic schemas need no special handling.

    Example:
        >>> resolver = TypeResolver("Example", {"pet": "Pet"})
        >>> resolver.resolve(ArrayOf(SchemaRef("pet")))
        SequenceType(item=NamedType(module='Example.Pet'))
    """

    base_module: str
    names: Mapping[str, str]

    def resolve(self, ref: TypeRef) -> TypeNode:
        if isinstance(ref, ArrayOf):
            return SequenceType(self.resolve(ref.item))
        if isinstance(ref, SchemaRef):
            return NamedType(self.module_name(ref.name))
        if isinstance(ref, ExternalType):
            return NamedType(ref.module)
        if isinstance(ref, UnionOf):
            return self.union(ref.members)
        if isinstance(ref, Primitive):
            if ref.kind == "object":
                return MapType()
            return ScalarType(ref.kind)
        raise TypeError(f"not a type reference: {ref!r}")

    def union(self, refs: Iterable[TypeRef]) -> TypeNode:
        """Resolve and merge several references into one type.

        Nested unions are flattened and duplicates removed, keeping the
        first-seen order.
        """
        members: list[TypeNode] = []
        for ref in refs:
            resolved = self.resolve(ref)
            if isinstance(resolved, TypeUnion):
                members.extend(resolved.members)
            else:
                members.append(resolved)
        unique = list(dict.fromkeys(members))
        if not unique:
            return NULL_TYPE
        if len(unique) == 1:
            return unique[0]
        return TypeUnion(tuple(unique))

    def module_name(self, raw_name: str) -> str:
        try:
            normalized = self.names[raw_name]
        except KeyError:
            raise ResolutionError(raw_name) from None
        return f"{self.base_module}.{normalized}"


def schema_type_ref(schema: SchemaDescriptor) -> TypeRef:
    """Convert a schema (typically an object property) into a TypeRef."""
    if schema.is_reference:
        return SchemaRef(schema.ref or schema.name)
    if schema.kind == "array":
        if schema.items is None:
            return ArrayOf(Primitive("any"))
        return ArrayOf(schema_type_ref(schema.items))
    return Primitive(schema.kind)
