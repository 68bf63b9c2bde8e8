"""Load processed descriptors.

Reads the JSON document produced by the upstream processor (from disk, a
URL or an already decoded mapping) and builds the descriptor dataclasses.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

import httpx

from .descriptors import (
    PRIMITIVE_KINDS,
    ArrayOf,
    Descriptors,
    ExternalType,
    OperationDescriptor,
    Param,
    Primitive,
    SchemaDescriptor,
    SchemaRef,
    Status,
    TypeRef,
    UnionOf,
)
from .errors import DescriptorError

DescriptorSource = Union[str, Path, Mapping[str, Any]]

_SCHEMA_KINDS = PRIMITIVE_KINDS | {"array"}


def load_descriptors(source: DescriptorSource, client: httpx.Client | None = None) -> Descriptors:
    """Load descriptors from a file path, an http(s) URL or a mapping."""
    if isinstance(source, Mapping):
        return parse_descriptors(source)
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return parse_descriptors(_fetch(source, client))
    with open(source) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise DescriptorError(f"{source}: invalid JSON: {exc}") from exc
    return parse_descriptors(data)


def _fetch(url: str, client: httpx.Client | None) -> Any:
    try:
        if client is None:
            resp = httpx.get(url, timeout=30)
        else:
            resp = client.get(url)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as exc:
        raise DescriptorError(f"failed to fetch descriptors from {url}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DescriptorError(f"{url}: invalid JSON: {exc}") from exc


def parse_descriptors(data: Any) -> Descriptors:
    if not isinstance(data, Mapping):
        raise DescriptorError("descriptor document must be an object")
    schemas = tuple(
        parse_schema(item, item.get("name") if isinstance(item, Mapping) else None)
        for item in data.get("schemas", [])
    )
    operations = tuple(parse_operation(item) for item in data.get("operations", []))
    return Descriptors(schemas=schemas, operations=operations)


def parse_type_ref(data: Any) -> TypeRef:
    """Parse a type reference.

    Accepted forms: ``{"$ref": name}``, ``{"module": "A.B"}``,
    ``{"oneOf": [...]}``, ``{"type": "array", "items": ...}`` and
    ``{"type": kind}``.
    """
    if not isinstance(data, Mapping):
        raise DescriptorError(f"type reference must be an object, got {data!r}")
    if "$ref" in data:
        return SchemaRef(data["$ref"])
    if "module" in data:
        return ExternalType(data["module"])
    if "oneOf" in data:
        return UnionOf(tuple(parse_type_ref(member) for member in data["oneOf"]))

    kind = data.get("type")
    if kind == "array":
        items = data.get("items")
        return ArrayOf(parse_type_ref(items) if items is not None else Primitive("any"))
    if kind in PRIMITIVE_KINDS:
        return Primitive(kind)
    raise DescriptorError(f"unsupported type reference {dict(data)!r}")


def parse_schema(data: Any, name: str | None = None) -> SchemaDescriptor:
    """Parse a schema, or a property of one, into a SchemaDescriptor."""
    if not isinstance(data, Mapping):
        raise DescriptorError(f"schema {name!r} must be an object")
    if "$ref" in data:
        return SchemaDescriptor(name=name or data["$ref"], kind="reference", ref=data["$ref"])

    kind = data.get("type", "object")
    if kind not in _SCHEMA_KINDS:
        raise DescriptorError(f"schema {name!r} has unsupported type {kind!r}")

    properties = {
        prop_name: parse_schema(prop, prop_name)
        for prop_name, prop in data.get("properties", {}).items()
    }
    items = data.get("items")
    return SchemaDescriptor(
        name=name or "",
        kind=kind,
        title=data.get("title"),
        description=data.get("description"),
        properties=properties,
        items=parse_schema(items) if items is not None else None,
    )


def _parse_status(status: str) -> Status:
    if status == "default":
        return status
    try:
        return int(status)
    except ValueError:
        raise DescriptorError(f"invalid response status {status!r}") from None


def _parse_params(items: list[Any]) -> tuple[Param, ...]:
    params = []
    for item in items:
        try:
            params.append(Param(name=item["name"], value_type=parse_type_ref(item.get("type", {"type": "any"}))))
        except (KeyError, TypeError) as exc:
            raise DescriptorError(f"invalid parameter {item!r}") from exc
    return tuple(params)


def parse_operation(data: Any) -> OperationDescriptor:
    if not isinstance(data, Mapping):
        raise DescriptorError("operation must be an object")
    try:
        function_name = data["function_name"]
        module_name = data["module_name"]
        method = data["method"].lower()
        path = data["path"]
    except (KeyError, AttributeError) as exc:
        raise DescriptorError(f"operation is missing {exc}") from exc

    request_body = tuple(
        (content_type, parse_type_ref(type_ref))
        for content_type, type_ref in data.get("request_body", [])
    )
    responses = {
        _parse_status(str(status)): {
            content_type: parse_type_ref(type_ref)
            for content_type, type_ref in content.items()
        }
        for status, content in data.get("responses", {}).items()
    }
    return OperationDescriptor(
        function_name=function_name,
        module_name=module_name,
        method=method,
        path=path,
        docstring=data.get("docstring", ""),
        path_params=_parse_params(data.get("path_params", [])),
        query_params=_parse_params(data.get("query_params", [])),
        request_body=request_body,
        responses=responses,
    )
