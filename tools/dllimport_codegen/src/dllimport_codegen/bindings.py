from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from .naming import to_pascal_case
from .signatures import DecodedExport

GENERATOR_NAME = "dllimport_codegen"
ATTRIBUTE_NAME = "DllFileImportAttribute"


@dataclass(frozen=True)
class BindingTarget:
    namespace: str
    class_path: tuple[str, ...]
    library_expression: str
    file_name: str
    source: str | None = None

    @property
    def qualified_name(self) -> str:
        return ".".join(part for part in (self.namespace, *self.class_path) if part)

    def as_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "class_path": list(self.class_path),
            "library_expression": self.library_expression,
            "file_name": self.file_name,
            "source": self.source,
            "output": output_file_name(self.file_name),
        }


@dataclass(frozen=True)
class BindingDeclaration:
    ordinal: int
    name: str
    return_type: str
    parameter_types: tuple[str, ...] = ()
    unsafe: bool = False

    def parameter_list(self) -> str:
        return ", ".join(f"{param_type} param{index}" for index, param_type in enumerate(self.parameter_types, start=1))


@dataclass
class OutputUnit:
    file_name: str
    blocks: list[str] = field(default_factory=list)
    declaration_count: int = 0


def build_declaration(export: DecodedExport) -> BindingDeclaration:
    return BindingDeclaration(
        ordinal=export.ordinal,
        name=to_pascal_case(export.raw_name),
        return_type=export.return_type.render(),
        parameter_types=tuple(param.render() for param in export.parameters),
        unsafe=export.requires_unsafe,
    )


def build_declarations(exports: Iterable[DecodedExport]) -> list[BindingDeclaration]:
    return [build_declaration(export) for export in exports]


def render_declaration(declaration: BindingDeclaration, library_expression: str) -> str:
    modifiers = "public unsafe extern static" if declaration.unsafe else "public extern static"
    return (
        f'[DllImport({library_expression}, EntryPoint = "#{declaration.ordinal}")] '
        f"{modifiers} {declaration.return_type} {declaration.name}({declaration.parameter_list()});"
    )


def render_target_block(target: BindingTarget, declarations: list[BindingDeclaration], indent_width: int = 4) -> str:
    unit = " " * indent_width
    base = 0
    lines: list[str] = []
    if target.namespace:
        lines.append(f"namespace {target.namespace}")
        lines.append("{")
        base = 1

    for depth, class_name in enumerate(target.class_path, start=base):
        lines.append(f"{unit * depth}partial class {class_name}")
        lines.append(f"{unit * depth}{{")

    member_prefix = unit * (base + len(target.class_path))
    for declaration in declarations:
        lines.append(member_prefix + render_declaration(declaration, target.library_expression))

    for depth in reversed(range(base, base + len(target.class_path))):
        lines.append(f"{unit * depth}}}")
    if target.namespace:
        lines.append("}")
    return "\n".join(lines)


def render_unit(blocks: list[str]) -> str:
    lines = [
        "// <auto-generated />",
        f"// Generated by {GENERATOR_NAME}",
        "using System.Runtime.InteropServices;",
        "",
    ]
    lines.append("\n\n".join(blocks))
    content = "\n".join(lines)
    if not content.endswith("\n"):
        content += "\n"
    return content


def output_file_name(file_name: str) -> str:
    segments = [segment for segment in re.split(r"[\\/]", file_name) if segment]
    base = segments[-1] if segments else file_name
    return f"{base}.g.cs"


def render_attribute_source(namespace: str = "") -> str:
    body = [
        "[AttributeUsage(AttributeTargets.Class)]",
        f"internal sealed class {ATTRIBUTE_NAME} : Attribute",
        "{",
        f"    public {ATTRIBUTE_NAME}(string fileName)",
        "    {",
        "        FileName = fileName;",
        "    }",
        "",
        "    public string FileName { get; }",
        "}",
    ]
    lines = ["// <auto-generated />", f"// Generated by {GENERATOR_NAME}", "using System;", ""]
    if namespace:
        lines.append(f"namespace {namespace}")
        lines.append("{")
        lines.extend(f"    {line}" if line else "" for line in body)
        lines.append("}")
    else:
        lines.extend(body)
    return "\n".join(lines) + "\n"
