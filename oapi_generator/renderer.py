"""Pluggable rendering steps.

Every step of rendering is a method on a ``Renderer``. ``DefaultRenderer``
provides the stock behaviour; ``OverrideRenderer`` replaces individual steps
and delegates the rest. Steps call each other through
``state.implementation``, so an overridden step is picked up everywhere.

Example:
    def render_operation_doc(state, operation):
        return Doc(f"{operation.docstring}\\n\\nDeprecated.")

    renderer = OverrideRenderer(DefaultRenderer(), render_operation_doc=render_operation_doc)
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol

from . import operation as _operation
from . import schema as _schema
from .descriptors import OperationDescriptor, SchemaDescriptor
from .nodes import Doc, Expr, FunctionDef, Signature, TypeNode
from .state import OperationArtifact, SchemaArtifact, State


class Renderer(Protocol):
    def render_operations(
        self, state: State, operations: Iterable[OperationDescriptor]
    ) -> list[OperationArtifact]: ...

    def render_operation(self, state: State, operation: OperationDescriptor) -> OperationArtifact: ...

    def render_operation_doc(self, state: State, operation: OperationDescriptor) -> Doc: ...

    def render_operation_spec(self, state: State, operation: OperationDescriptor) -> Signature: ...

    def render_operation_function(self, state: State, operation: OperationDescriptor) -> FunctionDef: ...

    def render_schema(self, state: State, schema: SchemaDescriptor) -> SchemaArtifact: ...

    def render_schema_doc(self, state: State, schema: SchemaDescriptor) -> Doc: ...

    def render_schema_fields(self, state: State, schema: SchemaDescriptor) -> tuple[str, ...]: ...

    def render_schema_types(
        self, state: State, schema: SchemaDescriptor
    ) -> tuple[tuple[str, TypeNode], ...]: ...

    def render_schema_decoders(
        self, state: State, schema: SchemaDescriptor
    ) -> tuple[tuple[str, Expr], ...]: ...


class DefaultRenderer:
    """Stock implementation of every rendering step."""

    def render_operations(self, state, operations):
        return _operation.render_all(state, operations)

    def render_operation(self, state, operation):
        return _operation.render(state, operation)

    def render_operation_doc(self, state, operation):
        return _operation.render_doc(state, operation)

    def render_operation_spec(self, state, operation):
        return _operation.render_spec(state, operation)

    def render_operation_function(self, state, operation):
        return _operation.render_function(state, operation)

    def render_schema(self, state, schema):
        return _schema.render(state, schema)

    def render_schema_doc(self, state, schema):
        return _schema.render_doc(state, schema)

    def render_schema_fields(self, state, schema):
        return _schema.render_fields(state, schema)

    def render_schema_types(self, state, schema):
        return _schema.render_types(state, schema)

    def render_schema_decoders(self, state, schema):
        return _schema.render_decoders(state, schema)


# Names of the steps an OverrideRenderer may replace
STEPS = frozenset(name for name in vars(DefaultRenderer) if name.startswith("render_"))


class OverrideRenderer:
    """Replace some rendering steps and delegate the others to ``base``.

    Overrides are plain functions taking ``(state, descriptor)``.
    """

    def __init__(self, base: Renderer, **overrides: Callable[..., Any]) -> None:
        unknown = set(overrides) - STEPS
        if unknown:
            raise TypeError(f"unknown rendering steps: {', '.join(sorted(unknown))}")
        self._base = base
        self._overrides = overrides

    def __getattr__(self, name: str) -> Any:
        overrides = self.__dict__.get("_overrides", {})
        if name in overrides:
            return overrides[name]
        base = self.__dict__.get("_base")
        if base is None:
            raise AttributeError(name)
        return getattr(base, name)
