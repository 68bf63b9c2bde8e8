"""Tests for the generation driver."""

import logging

import pytest

from oapi_generator.descriptors import (
    OperationDescriptor,
    Param,
    Primitive,
    SchemaDescriptor,
    SchemaRef,
)
from oapi_generator.driver import generate, group_operations, should_generate
from oapi_generator.errors import ConfigurationError, ResolutionError
from oapi_generator.nodes import Doc
from oapi_generator.renderer import DefaultRenderer, OverrideRenderer


def _op(name: str, module: str = "Pets", **kwargs) -> OperationDescriptor:
    return OperationDescriptor(function_name=name, module_name=module, method="get", path="/pets", **kwargs)


class TestSchemaFiltering:
    """Only object and reference schemas that are not skipped get generated."""

    def test_scalar_schemas_dropped(self, schemas, config):
        result = generate(schemas, [], config)
        assert "PetNames" not in [artifact.name for artifact in result.schemas]

    def test_generated_in_name_order(self, schemas, config):
        result = generate(schemas, [], config)
        assert [artifact.name for artifact in result.schemas] == [
            "ApiError",
            "Error",
            "NotFound",
            "Pet",
            "SimpleUser",
        ]

    def test_skip_list(self, config):
        schemas = [
            SchemaDescriptor(name="nullable-user", kind="object"),
            SchemaDescriptor(name="ignored", kind="object"),
            SchemaDescriptor(name="kept", kind="object"),
        ]
        result = generate(schemas, [], config)
        assert [artifact.name for artifact in result.schemas] == ["Kept"]

    def test_reference_schema_generated(self, config):
        schema = SchemaDescriptor(name="alias", kind="reference", ref="kept")
        assert should_generate(schema, "Alias", config)

    def test_skipped_schema_still_resolvable(self, config):
        schemas = [
            SchemaDescriptor(name="nullable-user", kind="object"),
            SchemaDescriptor(
                name="team",
                kind="object",
                properties={"owner": SchemaDescriptor(name="owner", kind="reference", ref="nullable-user")},
            ),
        ]
        result = generate(schemas, [], config)
        assert [artifact.name for artifact in result.schemas] == ["Team"]
        assert not result.failures

    def test_locations(self, config):
        schema = SchemaDescriptor(name="codespaces-export", kind="object")
        artifact = generate([schema], [], config).schemas[0]
        assert artifact.location == "codespace/export"
        assert artifact.module == "Example.Codespace.Export"


class TestOperations:
    """Test operation grouping and ordering."""

    def test_group_operations(self):
        grouped = group_operations([_op("b", "Users"), _op("a", "Pets"), _op("c", "Users")])
        assert list(grouped) == ["Pets", "Users"]
        assert [op.function_name for op in grouped["Users"]] == ["b", "c"]

    def test_modules_and_sorting(self, schemas, config):
        operations = [_op("update_pet"), _op("list_users", "Users"), _op("create_pet")]
        result = generate(schemas, operations, config)
        assert [module.name for module in result.modules] == ["Pets", "Users"]
        pets = result.modules[0]
        assert pets.module == "Example.Pets"
        assert pets.location == "pets"
        assert [op.name for op in pets.operations] == ["create_pet", "update_pet"]

    def test_scalar_query_param(self, schemas, config):
        operation = _op("list_pets", query_params=(Param("limit", Primitive("integer")),))
        result = generate(schemas, [operation], config)
        assert result.modules[0].operations[0].name == "list_pets"


class TestFailureIsolation:
    """A dangling reference drops one artifact, not the run."""

    def test_schema_failure(self, config, caplog):
        schemas = [
            SchemaDescriptor(
                name="broken",
                kind="object",
                properties={"x": SchemaDescriptor(name="x", kind="reference", ref="missing")},
            ),
            SchemaDescriptor(name="fine", kind="object"),
        ]
        with caplog.at_level(logging.WARNING, logger="oapi_generator.state"):
            result = generate(schemas, [], config)
        assert [artifact.name for artifact in result.schemas] == ["Fine"]
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert isinstance(failure, ResolutionError)
        assert failure.artifact == "Broken"
        assert failure.reference == "missing"
        assert "Broken" in caplog.text

    def test_operation_failure(self, schemas, config):
        broken = _op("get_ghost", responses={200: {"application/json": SchemaRef("ghost")}})
        fine = _op("list_pets", responses={200: {"application/json": SchemaRef("pet")}})
        result = generate(schemas, [broken, fine], config)
        assert [op.name for op in result.modules[0].operations] == ["list_pets"]
        assert result.failures[0].artifact == "Pets.get_ghost"

    def test_module_with_only_failures_is_dropped(self, schemas, config):
        broken = _op("get_ghost", "Ghosts", path_params=(), responses={200: {"application/json": SchemaRef("ghost")}})
        result = generate(schemas, [broken], config)
        assert result.modules == []

    def test_configuration_error_aborts(self, schemas, config):
        mismatched = OperationDescriptor(
            function_name="get_pet",
            module_name="Pets",
            method="get",
            path="/pets/{pet_id}",
            path_params=(Param("id", Primitive("integer")),),
        )
        with pytest.raises(ConfigurationError, match="pet_id"):
            generate(schemas, [mismatched], config)


class TestRenderer:
    """Test pluggable renderers."""

    def test_override_schema_doc(self, schemas, config):
        renderer = OverrideRenderer(
            DefaultRenderer(), render_schema_doc=lambda state, schema: Doc(f"Schema {schema.name}")
        )
        result = generate(schemas, [], config, renderer)
        assert result.schemas[0].doc == Doc("Schema api-error")

    def test_unknown_override_rejected(self):
        with pytest.raises(TypeError, match="render_everything"):
            OverrideRenderer(DefaultRenderer(), render_everything=lambda state, x: x)

    def test_override_renders_operation_modules(self, schemas, config):
        calls = []

        def render_operations(state, operations):
            calls.append([op.function_name for op in operations])
            return []

        renderer = OverrideRenderer(DefaultRenderer(), render_operations=render_operations)
        result = generate(schemas, [_op("list_pets"), _op("create_pet")], config, renderer)
        assert calls == [["list_pets", "create_pet"]]
        assert result.modules == []
