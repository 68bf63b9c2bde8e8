"""Target-agnostic node tree produced by the renderers.

Renderers never emit source text. They build these nodes, and a backend
serializer (see ``serializer.py``) turns them into code.

Type nodes describe type positions (signatures, field types). Expression
nodes describe values (function bodies, decoders). ``TypeValue`` embeds a
type in a value position, e.g. the response map of a request descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# -- types ------------------------------------------------------------------


@dataclass(frozen=True)
class ScalarType:
    name: str


@dataclass(frozen=True)
class SequenceType:
    item: TypeNode


@dataclass(frozen=True)
class MapType:
    """Generic key/value map; field-level typing is not kept."""


@dataclass(frozen=True)
class NamedType:
    """A generated (or external) type, by fully qualified module name."""

    module: str


@dataclass(frozen=True)
class OptionsType:
    """Mapping of option name to value, used for the trailing options argument."""


@dataclass(frozen=True)
class TypeUnion:
    members: tuple[TypeNode, ...]


@dataclass(frozen=True)
class Tagged:
    """An ``ok``/``error`` arm of a return type; ``payload`` None is the bare marker."""

    tag: str
    payload: TypeNode | None = None


TypeNode = Union[ScalarType, SequenceType, MapType, NamedType, OptionsType, TypeUnion, Tagged]

# -- expressions ------------------------------------------------------------


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Atom:
    name: str


@dataclass(frozen=True)
class Literal:
    value: str | int | float | bool | None


@dataclass(frozen=True)
class ModuleRef:
    module: str


@dataclass(frozen=True)
class Attribute:
    """Compile-time module attribute, e.g. the default client."""

    name: str


@dataclass(frozen=True)
class TypeValue:
    type: TypeNode


@dataclass(frozen=True)
class Access:
    subject: Expr
    key: Expr


@dataclass(frozen=True)
class Fallback:
    primary: Expr
    fallback: Expr


@dataclass(frozen=True)
class SelectKeys:
    """Sub-mapping of ``source`` restricted to the allow-listed ``keys``."""

    source: Expr
    keys: tuple[str, ...]


@dataclass(frozen=True)
class Pair:
    key: Expr
    value: Expr


@dataclass(frozen=True)
class ListLiteral:
    items: tuple[Expr, ...]


@dataclass(frozen=True)
class MapLiteral:
    entries: tuple[tuple[str, Expr], ...]


@dataclass(frozen=True)
class StringInterp:
    """String built from literal text and variable references."""

    parts: tuple[str | Var, ...]


@dataclass(frozen=True)
class CallExpr:
    target: Expr
    function: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Assign:
    target: Var
    value: Expr


Expr = Union[
    Var,
    Atom,
    Literal,
    ModuleRef,
    Attribute,
    TypeValue,
    Access,
    Fallback,
    SelectKeys,
    Pair,
    ListLiteral,
    MapLiteral,
    StringInterp,
    CallExpr,
    Assign,
]

# -- definitions ------------------------------------------------------------


@dataclass(frozen=True)
class Doc:
    text: str


@dataclass(frozen=True)
class Argument:
    name: str
    default: Expr | None = None


@dataclass(frozen=True)
class Signature:
    name: str
    arguments: tuple[TypeNode, ...]
    return_type: TypeNode


@dataclass(frozen=True)
class FunctionDef:
    name: str
    arguments: tuple[Argument, ...]
    body: tuple[Expr, ...]
