"""Drive a generation run over every schema and operation.

Builds the schema name table, filters out schemas that do not produce a
type, groups operations by owning module and renders each artifact through
the configured renderer. A dangling schema reference drops only the artifact
being rendered; configuration errors abort the run.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config import Config
from .descriptors import SCALAR_SCHEMA_KINDS, OperationDescriptor, SchemaDescriptor
from .errors import ResolutionError
from .naming import build_name_table, is_skipped, underscore
from .renderer import DefaultRenderer, Renderer
from .state import GenerationResult, OperationModule, State

logger = logging.getLogger(__name__)


def should_generate(schema: SchemaDescriptor, normalized: str, config: Config) -> bool:
    """Only object and reference schemas that are not skip-listed get a type."""
    if schema.kind in SCALAR_SCHEMA_KINDS:
        return False
    return not is_skipped(normalized, config.naming)


def group_operations(operations: Iterable[OperationDescriptor]) -> dict[str, list[OperationDescriptor]]:
    """Group operations by owning module, modules in name order."""
    grouped: dict[str, list[OperationDescriptor]] = {}
    for operation in operations:
        grouped.setdefault(operation.module_name, []).append(operation)
    return {name: grouped[name] for name in sorted(grouped)}


def build_state(
    schemas: Iterable[SchemaDescriptor],
    config: Config,
    renderer: Renderer | None = None,
) -> State:
    names = build_name_table(schemas, config.naming)
    return State(config=config, names=names, implementation=renderer or DefaultRenderer())


def generate(
    schemas: Iterable[SchemaDescriptor],
    operations: Iterable[OperationDescriptor],
    config: Config,
    renderer: Renderer | None = None,
) -> GenerationResult:
    """Render every schema and operation into artifacts."""
    schemas = list(schemas)
    state = build_state(schemas, config, renderer)
    implementation = state.implementation
    result = GenerationResult(failures=state.failures)

    for schema in sorted(schemas, key=lambda s: state.names[s.name]):
        normalized = state.names[schema.name]
        if not should_generate(schema, normalized, config):
            logger.debug("Skipping schema %s (%s)", normalized, schema.kind)
            continue
        try:
            artifact = implementation.render_schema(state, schema)
        except ResolutionError as exc:
            state.record_failure(exc, normalized)
            continue
        logger.debug("Rendered schema %s", artifact.module)
        result.schemas.append(artifact)

    for module_name, module_operations in group_operations(operations).items():
        rendered = implementation.render_operations(state, module_operations)
        if not rendered:
            continue
        module = OperationModule(
            name=module_name,
            module=f"{config.base_module}.{module_name}",
            location=underscore(module_name),
            operations=tuple(rendered),
        )
        logger.debug("Rendered %d operations for %s", len(rendered), module.module)
        result.modules.append(module)

    return result
