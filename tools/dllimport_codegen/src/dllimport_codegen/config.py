from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from .bindings import BindingTarget
from .common import DllImportCodegenError, load_json

DEFAULT_OUTPUT_DIR = "generated"
DEFAULT_INDENT_WIDTH = 4


@dataclass(frozen=True)
class CodegenConfig:
    sources: tuple[str, ...] = ()
    output_dir: str = DEFAULT_OUTPUT_DIR
    listing_commands: tuple[tuple[str, ...], ...] = ()
    indent_width: int = DEFAULT_INDENT_WIDTH
    emit_attribute: bool = False
    attribute_namespace: str = ""
    targets: tuple[BindingTarget, ...] = field(default_factory=tuple)


def get_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schemas" / "config.schema.json"


def validate_config_payload(payload: dict[str, Any]) -> None:
    schema = load_json(get_schema_path())
    try:
        jsonschema.validate(payload, schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise DllImportCodegenError(f"config failed JSON schema validation at {location}: {exc.message}") from exc


def parse_target(entry: dict[str, Any]) -> BindingTarget:
    binary = entry["binary"]
    return BindingTarget(
        namespace=entry.get("namespace", ""),
        class_path=tuple(entry["classes"]),
        library_expression=entry.get("library_expression") or json.dumps(binary),
        file_name=binary,
        source="config",
    )


def parse_config(payload: dict[str, Any]) -> CodegenConfig:
    validate_config_payload(payload)
    return CodegenConfig(
        sources=tuple(payload.get("sources", [])),
        output_dir=payload.get("output_dir", DEFAULT_OUTPUT_DIR),
        listing_commands=tuple(tuple(command) for command in payload.get("listing_commands", [])),
        indent_width=int(payload.get("indent_width", DEFAULT_INDENT_WIDTH)),
        emit_attribute=bool(payload.get("emit_attribute", False)),
        attribute_namespace=payload.get("attribute_namespace", ""),
        targets=tuple(parse_target(entry) for entry in payload.get("targets", [])),
    )


def load_config(path: Path | None) -> CodegenConfig:
    if path is None:
        return CodegenConfig()
    return parse_config(load_json(path))
