from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .normalize import DEFAULT_INDENT


@dataclass
class SerializerOptions:
    """Tunable behavior of NotebookSerializer.

    legacy_nbformat_minor: write a model's nbformat_minor into the output
    nbformat field instead of nbformat_minor, as older releases did. Off by
    default; turn it on when byte output must match those releases.
    """

    default_indent: str = DEFAULT_INDENT
    legacy_nbformat_minor: bool = False
    telemetry: bool = True


def options_from_mapping(data: Mapping[str, Any]) -> SerializerOptions:
    known = {f.name for f in fields(SerializerOptions)}
    values = {k: v for k, v in data.items() if k in known}
    indent = values.get("default_indent")
    if indent is not None and not isinstance(indent, str):
        raise ConfigError("default_indent must be a string")
    for flag in ("legacy_nbformat_minor", "telemetry"):
        if flag in values:
            if not isinstance(values[flag], bool):
                raise ConfigError(f"{flag} must be true or false")
    return SerializerOptions(**values)


def load_options(path: Optional[str]) -> SerializerOptions:
    """Read serializer options from a YAML file.

    A missing path or file yields the defaults.
    """
    if not path:
        return SerializerOptions()
    p = Path(path)
    if not p.exists():
        return SerializerOptions()
    yaml = YAML(typ="safe")
    try:
        data = yaml.load(p.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if data is None:
        return SerializerOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {p} must be a mapping")
    return options_from_mapping(data)
