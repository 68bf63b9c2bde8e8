"""Tests for template rendering and file output."""

from dataclasses import replace

import jinja2
import pytest

from oapi_generator.codegen import build_environment, write
from oapi_generator.config import OutputSettings
from oapi_generator.driver import generate


@pytest.fixture()
def result(schemas, get_pet, config):
    return generate(schemas, [get_pet], config)


class TestWrite:
    """Test the files written for a generation run."""

    def test_paths(self, result, config, tmp_path):
        written = write(result, config, tmp_path)
        relative = sorted(str(path.relative_to(tmp_path)) for path in written)
        assert "lib/example/schemas/pet.ex" in relative
        assert "lib/example/schemas/simple_user.ex" in relative
        assert "lib/example/operations/pets.ex" in relative
        assert len(relative) == len(result.schemas) + len(result.modules)
        assert all(path.exists() for path in written)

    def test_custom_output(self, result, config, tmp_path):
        config = replace(config, output=OutputSettings(schema_dir="s", operation_dir="o", extension=".exs"))
        written = write(result, config, tmp_path)
        assert tmp_path / "o" / "pets.exs" in written
        assert tmp_path / "s" / "pet.exs" in written

    def test_summary_printed(self, result, config, tmp_path, capsys):
        write(result, config, tmp_path)
        assert "Generated 5 schemas and 1 operation modules" in capsys.readouterr().out


class TestOperationFile:
    @pytest.fixture()
    def content(self, result, config, tmp_path):
        write(result, config, tmp_path)
        return (tmp_path / "lib/example/operations/pets.ex").read_text()

    def test_module(self, content):
        assert content.startswith("defmodule Example.Pets do\n")
        assert content.rstrip().endswith("end")

    def test_default_client(self, content):
        assert "@default_client Example.Client" in content

    def test_function(self, content):
        assert "def get_pet(id, opts \\\\ []) do" in content
        assert "client = opts[:client] || @default_client" in content
        assert "client.request(%{" in content
        assert 'url: "/pets/#{id}",' in content
        assert "call: {Example.Pets, :get_pet}," in content
        assert "response: [{200, {Example.Pet, :t}}, {404, {Example.Error, :t}}]," in content

    def test_spec(self, content):
        assert "@spec get_pet(integer, keyword) :: {:ok, Example.Pet.t()} | {:error, Example.Error.t()}" in content

    def test_doc(self, content):
        assert "Get a pet" in content


class TestSchemaFile:
    @pytest.fixture()
    def content(self, result, config, tmp_path):
        write(result, config, tmp_path)
        return (tmp_path / "lib/example/schemas/pet.ex").read_text()

    def test_struct(self, content):
        assert "defmodule Example.Pet do" in content
        assert "defstruct [:extra, :id, :name, :owner, :tags]" in content

    def test_types(self, content):
        assert "owner: Example.SimpleUser.t()," in content
        assert "tags: [String.t()]" in content

    def test_decode(self, content):
        assert "def decode(value) do" in content
        assert 'owner: Example.SimpleUser.decode(value["owner"]),' in content
        assert "tags: nil" in content


class TestEnvironment:
    def test_strict_undefined(self):
        env = build_environment()
        with pytest.raises(jinja2.UndefinedError):
            env.get_template("schema.ex.j2").render()
