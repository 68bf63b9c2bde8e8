"""Serialize node trees into Elixir source fragments.

Formatting is approximate; generated files are expected to go through
``mix format`` afterwards.
"""

from __future__ import annotations

import re
import textwrap

from .nodes import (
    Access,
    Argument,
    Assign,
    Atom,
    Attribute,
    CallExpr,
    Doc,
    Fallback,
    FunctionDef,
    ListLiteral,
    Literal,
    MapLiteral,
    MapType,
    ModuleRef,
    NamedType,
    OptionsType,
    Pair,
    ScalarType,
    SelectKeys,
    SequenceType,
    Signature,
    StringInterp,
    Tagged,
    TypeUnion,
    TypeValue,
    Var,
)

INDENT = "  "

_PLAIN_ATOM = re.compile(r"[a-z_][A-Za-z0-9_]*[?!]?")

_SCALAR_TYPES = {
    "boolean": "boolean",
    "integer": "integer",
    "number": "number",
    "string": "String.t()",
    "null": "nil",
    "any": "any",
}

_READABLE_SCALARS = {
    "boolean": ":boolean",
    "integer": ":integer",
    "number": ":number",
    "string": ":string",
    "null": ":null",
    "any": ":unknown",
}


def escape_string(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("#{", "\\#{")
        .replace("\n", "\\n")
    )


def string_literal(text: str) -> str:
    return f'"{escape_string(text)}"'


def atom(name: str) -> str:
    if _PLAIN_ATOM.fullmatch(name):
        return f":{name}"
    return f":{string_literal(name)}"


def atom_key(name: str) -> str:
    """Render a name as a keyword/map key, e.g. ``name:`` or ``"x-y":``."""
    if _PLAIN_ATOM.fullmatch(name):
        return f"{name}:"
    return f"{string_literal(name)}:"


def to_type(node) -> str:
    """Render a type node in type position (typespecs)."""
    if isinstance(node, ScalarType):
        return _SCALAR_TYPES.get(node.name, "any")
    if isinstance(node, SequenceType):
        return f"[{to_type(node.item)}]"
    if isinstance(node, MapType):
        return "map"
    if isinstance(node, NamedType):
        return f"{node.module}.t()"
    if isinstance(node, OptionsType):
        return "keyword"
    if isinstance(node, TypeUnion):
        return " | ".join(to_type(member) for member in node.members)
    if isinstance(node, Tagged):
        if node.payload is None:
            return atom(node.tag)
        return f"{{{atom(node.tag)}, {to_type(node.payload)}}}"
    raise TypeError(f"cannot render type {node!r}")


def to_readable(node) -> str:
    """Render a type node in value position, as a readable type marker."""
    if isinstance(node, ScalarType):
        return _READABLE_SCALARS.get(node.name, ":unknown")
    if isinstance(node, SequenceType):
        return f"[{to_readable(node.item)}]"
    if isinstance(node, MapType):
        return ":map"
    if isinstance(node, NamedType):
        return f"{{{node.module}, :t}}"
    if isinstance(node, OptionsType):
        return ":keyword"
    if isinstance(node, TypeUnion):
        return f"{{:union, [{', '.join(to_readable(member) for member in node.members)}]}}"
    if isinstance(node, Tagged):
        if node.payload is None:
            return atom(node.tag)
        return f"{{{atom(node.tag)}, {to_readable(node.payload)}}}"
    raise TypeError(f"cannot render type {node!r}")


def to_expr(node) -> str:
    """Render an expression node."""
    if isinstance(node, Var):
        return node.name
    if isinstance(node, Atom):
        return atom(node.name)
    if isinstance(node, Literal):
        return _literal(node.value)
    if isinstance(node, ModuleRef):
        return node.module
    if isinstance(node, Attribute):
        return f"@{node.name}"
    if isinstance(node, TypeValue):
        return to_readable(node.type)
    if isinstance(node, Access):
        return f"{to_expr(node.subject)}[{to_expr(node.key)}]"
    if isinstance(node, Fallback):
        return f"{to_expr(node.primary)} || {to_expr(node.fallback)}"
    if isinstance(node, SelectKeys):
        keys = ", ".join(atom(key) for key in node.keys)
        return f"Keyword.take({to_expr(node.source)}, [{keys}])"
    if isinstance(node, Pair):
        return f"{{{to_expr(node.key)}, {to_expr(node.value)}}}"
    if isinstance(node, ListLiteral):
        return _list(node)
    if isinstance(node, MapLiteral):
        return _map(node)
    if isinstance(node, StringInterp):
        return _interp(node)
    if isinstance(node, CallExpr):
        args = ", ".join(to_expr(arg) for arg in node.args)
        return f"{to_expr(node.target)}.{node.function}({args})"
    if isinstance(node, Assign):
        return f"{node.target.name} = {to_expr(node.value)}"
    raise TypeError(f"cannot render expression {node!r}")


def _literal(value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return string_literal(value)


def _is_keyword(node: ListLiteral) -> bool:
    return bool(node.items) and all(
        isinstance(item, Pair) and isinstance(item.key, Atom) for item in node.items
    )


def _list(node: ListLiteral) -> str:
    if _is_keyword(node):
        items = [f"{atom_key(item.key.name)} {to_expr(item.value)}" for item in node.items]
    else:
        items = [to_expr(item) for item in node.items]
    return f"[{', '.join(items)}]"


def _map(node: MapLiteral) -> str:
    if not node.entries:
        return "%{}"
    lines = [f"{INDENT}{atom_key(key)} {to_expr(value)}" for key, value in node.entries]
    return "%{\n" + ",\n".join(lines) + "\n}"


def _interp(node: StringInterp) -> str:
    parts = []
    for part in node.parts:
        if isinstance(part, Var):
            parts.append(f"#{{{part.name}}}")
        else:
            parts.append(escape_string(part))
    return '"' + "".join(parts) + '"'


def _heredoc(text: str) -> str:
    text = text.replace("\\", "\\\\").replace("#{", "\\#{").replace('"""', '\\"\\"\\"')
    return f'"""\n{text}\n"""'


def render_doc(doc: Doc) -> str:
    return f"@doc {_heredoc(doc.text)}"


def render_moduledoc(doc: Doc) -> str:
    return f"@moduledoc {_heredoc(doc.text)}"


def render_spec(signature: Signature) -> str:
    arguments = ", ".join(to_type(arg) for arg in signature.arguments)
    return f"@spec {signature.name}({arguments}) :: {to_type(signature.return_type)}"


def _argument(argument: Argument) -> str:
    if argument.default is None:
        return argument.name
    return f"{argument.name} \\\\ {to_expr(argument.default)}"


def render_function(function: FunctionDef) -> str:
    arguments = ", ".join(_argument(arg) for arg in function.arguments)
    *setup, last = [to_expr(expr) for expr in function.body] or ["nil"]
    body = "\n".join(setup)
    if setup:
        body += "\n\n"
    body += last
    return f"def {function.name}({arguments}) do\n{textwrap.indent(body, INDENT)}\nend"
