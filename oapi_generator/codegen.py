"""Render templates and write generated output.

Takes the artifacts from the driver and writes one Elixir file per schema
and one per operation module.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jinja2

from . import serializer
from .config import Config
from .state import GenerationResult

TEMPLATE_DIR = Path(__file__).parent / "templates"

logger = logging.getLogger(__name__)


def build_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters.update(
        atom=serializer.atom,
        atom_key=serializer.atom_key,
        type=serializer.to_type,
        expr=serializer.to_expr,
        doc=serializer.render_doc,
        moduledoc=serializer.render_moduledoc,
        spec=serializer.render_spec,
        function=serializer.render_function,
    )
    return env


def write(result: GenerationResult, config: Config, output_dir: Path) -> list[Path]:
    """Render every artifact and write it below ``output_dir``."""
    env = build_environment()
    output = config.output
    written: list[Path] = []

    schema_template = env.get_template("schema.ex.j2")
    for schema in result.schemas:
        location = output_dir / output.schema_dir / f"{schema.location}{output.extension}"
        _write(location, schema_template.render(schema=schema))
        written.append(location)

    operations_template = env.get_template("operations.ex.j2")
    for module in result.modules:
        location = output_dir / output.operation_dir / f"{module.location}{output.extension}"
        _write(location, operations_template.render(module=module, default_client=config.client_module))
        written.append(location)

    print(
        f"Generated {len(result.schemas)} schemas and {len(result.modules)} operation modules"
        f" in {output_dir}"
    )
    return written


def _write(location: Path, content: str) -> None:
    location.parent.mkdir(parents=True, exist_ok=True)
    location.write_text(content)
    logger.debug("Wrote %s", location)
