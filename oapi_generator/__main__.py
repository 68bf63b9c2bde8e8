"""Entry point: python -m oapi_generator

Reads processed descriptors, renders them and writes Elixir sources.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .codegen import write
from .config import load_config
from .driver import generate
from .errors import GeneratorError
from .loader import load_descriptors


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oapi_generator", description="Generate client code from processed OpenAPI descriptors."
    )
    parser.add_argument("descriptors", help="Path or URL of the descriptor JSON document")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to the JSON configuration")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every rendered artifact")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        descriptors = load_descriptors(args.descriptors)
        result = generate(descriptors.schemas, descriptors.operations, config)
        write(result, config, args.output_dir)
    except GeneratorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
