"""Shared fixtures: a small pet-store descriptor set and run configuration."""

from __future__ import annotations

import re

import pytest

from oapi_generator.config import Config, NamingContext
from oapi_generator.descriptors import (
    OperationDescriptor,
    Param,
    Primitive,
    SchemaDescriptor,
    SchemaRef,
)
from oapi_generator.driver import build_state


@pytest.fixture()
def naming() -> NamingContext:
    return NamingContext(
        rename=(
            (re.compile(r"^Codespaces"), "Codespace"),
            (re.compile(r"Oidc"), "OIDC"),
            (re.compile(r"^Scim"), "SCIM"),
        ),
        skip=(re.compile(r"^Nullable"), "Ignored"),
        namespaces=("Codespace", "Repository", "SCIM", "User"),
    )


@pytest.fixture()
def config(naming: NamingContext) -> Config:
    return Config(base_module="Example", naming=naming)


@pytest.fixture()
def schemas() -> list[SchemaDescriptor]:
    return [
        SchemaDescriptor(
            name="pet",
            kind="object",
            title="Pet",
            properties={
                "name": SchemaDescriptor(name="name", kind="string"),
                "id": SchemaDescriptor(name="id", kind="integer"),
                "owner": SchemaDescriptor(name="owner", kind="reference", ref="simple-user"),
                "tags": SchemaDescriptor(
                    name="tags", kind="array", items=SchemaDescriptor(name="", kind="string")
                ),
                "extra": SchemaDescriptor(name="extra", kind="object"),
            },
        ),
        SchemaDescriptor(
            name="simple-user",
            kind="object",
            description="A GitHub user",
            properties={"login": SchemaDescriptor(name="login", kind="string")},
        ),
        SchemaDescriptor(name="error", kind="object", properties={"message": SchemaDescriptor(name="message", kind="string")}),
        SchemaDescriptor(name="not-found", kind="object"),
        SchemaDescriptor(name="api-error", kind="object"),
        SchemaDescriptor(name="pet-names", kind="array", items=SchemaDescriptor(name="", kind="string")),
    ]


@pytest.fixture()
def state(schemas, config):
    return build_state(schemas, config)


@pytest.fixture()
def get_pet() -> OperationDescriptor:
    return OperationDescriptor(
        function_name="get_pet",
        module_name="Pets",
        docstring="Get a pet",
        method="get",
        path="/pets/{id}",
        path_params=(Param("id", Primitive("integer")),),
        responses={
            200: {"application/json": SchemaRef("pet")},
            404: {"application/json": SchemaRef("error")},
        },
    )
