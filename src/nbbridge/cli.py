from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_options
from .errors import ConfigError, MalformedInputError
from .model import CODE
from .normalize import INDENT_AMOUNT, NBFORMAT, NBFORMAT_MINOR
from .serializer import NotebookSerializer


def _cmd_inspect(serializer: NotebookSerializer, path: Path) -> int:
    model = serializer.deserialize_notebook(path.read_bytes())
    kinds = {}
    for c in model.cells:
        label = c.language if c.kind == CODE else c.cell_type
        kinds[label] = kinds.get(label, 0) + 1
    print(f"cells: {len(model.cells)}")
    for label, count in kinds.items():
        print(f"  {label}: {count}")
    print(f"indent: {model.metadata.get(INDENT_AMOUNT)!r}")
    major = model.metadata.get(NBFORMAT, "-")
    minor = model.metadata.get(NBFORMAT_MINOR, "-")
    print(f"nbformat: {major}.{minor}")
    return 0


def _write_or_print(data: bytes, output: str | None) -> None:
    if output:
        Path(output).write_bytes(data)
    else:
        print(data.decode("utf-8"))


def _cmd_roundtrip(serializer: NotebookSerializer, path: Path, output: str | None) -> int:
    model = serializer.deserialize_notebook(path.read_bytes())
    _write_or_print(serializer.serialize_notebook(model), output)
    return 0


def _cmd_new(serializer: NotebookSerializer, path: Path) -> int:
    if path.exists():
        print(f"new: {path} already exists", file=sys.stderr)
        return 2
    model = serializer.deserialize_notebook(b"")
    path.write_bytes(serializer.serialize_notebook(model))
    print(f"Created: {path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="nbbridge", description="Notebook file serializer")
    parser.add_argument("--config", help="YAML file with serializer options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_inspect = sub.add_parser("inspect", help="Summarize a notebook file")
    p_inspect.add_argument("file")

    p_round = sub.add_parser("roundtrip", help="Read and rewrite a notebook file")
    p_round.add_argument("file")
    p_round.add_argument("-o", "--output", help="Output file (default: stdout)")

    p_new = sub.add_parser("new", help="Create an empty notebook file")
    p_new.add_argument("file")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        serializer = NotebookSerializer(load_options(args.config))
        path = Path(args.file)
        if args.cmd == "inspect":
            return _cmd_inspect(serializer, path)
        if args.cmd == "roundtrip":
            return _cmd_roundtrip(serializer, path, args.output)
        if args.cmd == "new":
            return _cmd_new(serializer, path)
    except (MalformedInputError, ConfigError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    parser.error(f"unknown command {args.cmd}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
