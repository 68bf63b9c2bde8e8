"""Default rendering of operations.

Each operation becomes a documented function with a signature and a body
that builds a request descriptor and hands it to a pluggable client:

    def my_operation(path_param, body, opts \\\\ []) do
      client = opts[:client] || @default_client
      query = Keyword.take(opts, [:query_param])

      client.request(%{
        args: [path_param: path_param, body: body],
        call: {Example.Operations, :my_operation},
        url: "/path/to/#{path_param}",
        body: body,
        method: :post,
        query: query,
        request: [{"application/json", :map}],
        response: [{200, :map}, {404, {Example.NotFoundError, :t}}],
        opts: opts
      })
    end

The nodes built here are backend-agnostic; the snippet above is how the
Elixir serializer prints them.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from .descriptors import OperationDescriptor, Status, TypeRef
from .errors import ConfigurationError, ResolutionError
from .naming import variable_name
from .nodes import (
    Access,
    Argument,
    Assign,
    Atom,
    Attribute,
    CallExpr,
    Doc,
    Expr,
    Fallback,
    FunctionDef,
    ListLiteral,
    Literal,
    MapLiteral,
    ModuleRef,
    OptionsType,
    Pair,
    SelectKeys,
    Signature,
    StringInterp,
    Tagged,
    TypeUnion,
    TypeValue,
    Var,
)
from .state import OperationArtifact, State

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

# Argument names the generated function already uses
_RESERVED_ARGUMENTS = frozenset({"body", "opts"})


def render_all(state: State, operations: Iterable[OperationDescriptor]) -> list[OperationArtifact]:
    """Render the operations of one module, sorted by function name.

    An operation with a dangling schema reference is recorded on ``state``
    and left out; the others are still rendered.
    """
    implementation = state.implementation
    rendered: list[OperationArtifact] = []
    for operation in sorted(operations, key=lambda op: op.function_name):
        try:
            rendered.append(implementation.render_operation(state, operation))
        except ResolutionError as exc:
            state.record_failure(exc, f"{operation.module_name}.{operation.function_name}")
    return rendered


def render(state: State, operation: OperationDescriptor) -> OperationArtifact:
    implementation = state.implementation
    return OperationArtifact(
        name=operation.function_name,
        doc=implementation.render_operation_doc(state, operation),
        signature=implementation.render_operation_spec(state, operation),
        function=implementation.render_operation_function(state, operation),
    )


def render_doc(state: State, operation: OperationDescriptor) -> Doc:
    """Use the processor's docstring without modification."""
    return Doc(operation.docstring)


def render_spec(state: State, operation: OperationDescriptor) -> Signature:
    resolver = state.resolver
    arguments = [resolver.resolve(param.value_type) for param in operation.path_params]
    if operation.request_body:
        arguments.append(resolver.union(body_type for _content_type, body_type in operation.request_body))
    arguments.append(OptionsType())
    return Signature(
        name=operation.function_name,
        arguments=tuple(arguments),
        return_type=render_return_type(state, operation),
    )


def render_return_type(state: State, operation: OperationDescriptor) -> TypeUnion:
    """Build the ``ok | error`` union for an operation.

    Redirects (3xx) and statuses without schemas take part in neither arm.
    A configured error type replaces whatever error schemas are declared.
    """
    resolver = state.resolver
    only_default = list(operation.responses) == ["default"]
    success: list[TypeRef] = []
    errors: list[TypeRef] = []
    for status, schemas in sorted_responses(operation.responses):
        if not schemas or _is_redirect(status):
            continue
        if status == "default":
            target = success if only_default else errors
        else:
            target = success if int(status) < 300 else errors
        target.extend(schemas.values())

    ok = Tagged("ok", resolver.union(success)) if success else Tagged("ok")

    error_type = state.config.error_type
    if error_type is not None:
        error = Tagged("error", resolver.resolve(error_type))
    elif errors:
        error = Tagged("error", resolver.union(errors))
    else:
        error = Tagged("error")

    return TypeUnion((ok, error))


def render_function(state: State, operation: OperationDescriptor) -> FunctionDef:
    arguments = [Argument(name) for name in path_arguments(operation).values()]
    if operation.request_body:
        arguments.append(Argument("body"))
    arguments.append(Argument("opts", default=ListLiteral(())))

    opts = Var("opts")
    body: list[Expr] = [
        Assign(Var("client"), Fallback(Access(opts, Atom("client")), Attribute("default_client"))),
    ]
    query = render_query(operation)
    if query is not None:
        body.append(query)
    body.append(render_call(state, operation))

    return FunctionDef(name=operation.function_name, arguments=tuple(arguments), body=tuple(body))


def render_query(operation: OperationDescriptor) -> Assign | None:
    """Restrict the options to the declared query parameters, if any."""
    if not operation.query_params:
        return None
    keys = tuple(sorted(param.name for param in operation.query_params))
    return Assign(Var("query"), SelectKeys(Var("opts"), keys))


def render_call(state: State, operation: OperationDescriptor) -> CallExpr:
    """Build ``client.request(descriptor)`` for an operation."""
    resolver = state.resolver
    has_body = bool(operation.request_body)

    args: list[Expr] = []
    for raw_name, name in path_arguments(operation).items():
        args.append(Pair(Atom(raw_name), Var(name)))
    if has_body:
        args.append(Pair(Atom("body"), Var("body")))

    module = f"{state.config.base_module}.{operation.module_name}"
    entries: list[tuple[str, Expr]] = [
        ("args", ListLiteral(tuple(args))),
        ("call", Pair(ModuleRef(module), Atom(operation.function_name))),
        ("url", render_url(operation)),
    ]
    if has_body:
        entries.append(("body", Var("body")))
    entries.append(("method", Atom(operation.method)))
    if operation.query_params:
        entries.append(("query", Var("query")))
    if has_body:
        request = [
            Pair(Literal(content_type), TypeValue(resolver.resolve(body_type)))
            for content_type, body_type in operation.request_body
        ]
        entries.append(("request", ListLiteral(tuple(request))))
    if operation.responses:
        response = [
            Pair(_status_literal(status), TypeValue(resolver.union(schemas.values())))
            for status, schemas in sorted_responses(operation.responses)
        ]
        entries.append(("response", ListLiteral(tuple(response))))
    entries.append(("opts", Var("opts")))

    return CallExpr(Var("client"), "request", (MapLiteral(tuple(entries)),))


def render_url(operation: OperationDescriptor) -> StringInterp:
    """Rewrite every ``{name}`` placeholder into a reference to its argument.

    Raises:
        ConfigurationError: if placeholders and path parameters do not match
    """
    path = operation.path
    arguments = path_arguments(operation)
    placeholders = _PLACEHOLDER.findall(path)

    for name in placeholders:
        if name not in arguments:
            raise ConfigurationError(
                f"{operation.function_name}: placeholder {{{name}}} in {path!r} has no path parameter"
            )
    for name in arguments:
        if name not in placeholders:
            raise ConfigurationError(
                f"{operation.function_name}: path parameter {name!r} does not appear in {path!r}"
            )

    if not arguments:
        return StringInterp((path,) if path else ())

    pattern = re.compile("|".join(r"\{" + re.escape(name) + r"\}" for name in arguments))
    parts: list[str | Var] = []
    position = 0
    for match in pattern.finditer(path):
        if match.start() > position:
            parts.append(path[position:match.start()])
        parts.append(Var(arguments[match.group(0)[1:-1]]))
        position = match.end()
    if position < len(path):
        parts.append(path[position:])
    return StringInterp(tuple(parts))


def path_arguments(operation: OperationDescriptor) -> dict[str, str]:
    """Map each path parameter name to its argument name, in declaration order.

    Raises:
        ConfigurationError: if two parameters share an argument name, or one
            takes a name the generated function already uses
    """
    arguments: dict[str, str] = {}
    seen: dict[str, str] = {}
    for param in operation.path_params:
        name = variable_name(param.name)
        if name in _RESERVED_ARGUMENTS:
            raise ConfigurationError(
                f"{operation.function_name}: path parameter {param.name!r} clashes with argument {name!r}"
            )
        if name in seen:
            raise ConfigurationError(
                f"{operation.function_name}: path parameters {seen[name]!r} and {param.name!r}"
                f" both map to argument {name!r}"
            )
        seen[name] = param.name
        arguments[param.name] = name
    return arguments


def sorted_responses(
    responses: Mapping[Status, Mapping[str, TypeRef]],
) -> list[tuple[Status, Mapping[str, TypeRef]]]:
    """Order responses by ascending status, with ``default`` last."""
    return sorted(responses.items(), key=lambda item: _status_key(item[0]))


def _status_key(status: Status) -> tuple[int, int]:
    if status == "default":
        return (1, 0)
    return (0, int(status))


def _is_redirect(status: Status) -> bool:
    return status != "default" and 300 <= int(status) < 400


def _status_literal(status: Status) -> Expr:
    if status == "default":
        return Atom("default")
    return Literal(int(status))
