"""Per-run rendering state and the artifacts renderers produce."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping

from .config import Config
from .errors import ResolutionError
from .nodes import Doc, Expr, FunctionDef, Signature, TypeNode
from .type_resolver import TypeResolver

if TYPE_CHECKING:
    from .renderer import Renderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class State:
    """Everything a renderer step may read.

    Attributes:
        config: Run configuration
        names: Raw schema name -> normalized name, for every schema
        implementation: Renderer whose steps are dispatched to; overrides
            installed here are seen by every step that calls another step
        failures: Artifacts dropped so far because of a dangling reference
    """

    config: Config
    names: Mapping[str, str]
    implementation: Renderer
    failures: list[ResolutionError] = field(default_factory=list)

    @property
    def resolver(self) -> TypeResolver:
        return TypeResolver(self.config.base_module, self.names)

    def record_failure(self, error: ResolutionError, artifact: str) -> None:
        """Drop one artifact: log the dangling reference and keep the error."""
        error = error.for_artifact(artifact)
        logger.warning("Skipping %s", error)
        self.failures.append(error)


@dataclass(frozen=True)
class OperationArtifact:
    name: str
    doc: Doc
    signature: Signature
    function: FunctionDef


@dataclass(frozen=True)
class OperationModule:
    """All operations of one owning module, sorted by function name."""

    name: str
    module: str
    location: str
    operations: tuple[OperationArtifact, ...]


@dataclass(frozen=True)
class SchemaArtifact:
    name: str
    module: str
    location: str
    doc: Doc
    field_names: tuple[str, ...]
    field_types: tuple[tuple[str, TypeNode], ...]
    decoders: tuple[tuple[str, Expr], ...]


@dataclass
class GenerationResult:
    schemas: list[SchemaArtifact] = field(default_factory=list)
    modules: list[OperationModule] = field(default_factory=list)
    failures: list[ResolutionError] = field(default_factory=list)
