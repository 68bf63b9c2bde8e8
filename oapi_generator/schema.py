"""Default rendering of schemas into typed structs with decoders."""

from __future__ import annotations

from .descriptors import SchemaDescriptor
from .naming import underscore
from .nodes import Access, CallExpr, Doc, Expr, Literal, ModuleRef, TypeNode, Var
from .state import SchemaArtifact, State
from .type_resolver import schema_type_ref

GENERATED_NOTICE = "Generated by OpenAPI Generator. Avoid editing this file directly."


def render(state: State, schema: SchemaDescriptor) -> SchemaArtifact:
    implementation = state.implementation
    normalized = state.names[schema.name]
    return SchemaArtifact(
        name=normalized,
        module=f"{state.config.base_module}.{normalized}",
        location=underscore(normalized),
        doc=implementation.render_schema_doc(state, schema),
        field_names=implementation.render_schema_fields(state, schema),
        field_types=implementation.render_schema_types(state, schema),
        decoders=implementation.render_schema_decoders(state, schema),
    )


def render_doc(state: State, schema: SchemaDescriptor) -> Doc:
    summary = schema.title or schema.description
    if summary:
        return Doc(f"{summary}\n\n{GENERATED_NOTICE}")
    return Doc(GENERATED_NOTICE)


def render_fields(state: State, schema: SchemaDescriptor) -> tuple[str, ...]:
    return tuple(sorted(schema.properties))


def render_types(state: State, schema: SchemaDescriptor) -> tuple[tuple[str, TypeNode], ...]:
    resolver = state.resolver
    return tuple(
        (name, resolver.resolve(schema_type_ref(prop)))
        for name, prop in sorted(schema.properties.items())
    )


def render_decoders(state: State, schema: SchemaDescriptor) -> tuple[tuple[str, Expr], ...]:
    """Build one decode expression per field.

    Reference fields dispatch into the referenced type's own ``decode`` by
    module name. Array fields are not decoded yet and emit a nil placeholder.
    """
    resolver = state.resolver
    decoders: list[tuple[str, Expr]] = []
    for name, prop in sorted(schema.properties.items()):
        raw = Access(Var("value"), Literal(name))
        if prop.kind == "array":
            # TODO: decode array items element-wise once item decoders exist
            decoder: Expr = Literal(None)
        elif prop.is_reference:
            module = resolver.module_name(prop.ref or prop.name)
            decoder = CallExpr(ModuleRef(module), "decode", (raw,))
        else:
            decoder = raw
        decoders.append((name, decoder))
    return tuple(decoders)
