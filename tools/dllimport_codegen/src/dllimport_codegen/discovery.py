"""Find classes annotated with ``[DllFileImport("...")]`` in C# sources.

This is a token scanner, not a C# parser: it tracks namespaces and class
nesting by braces and only accepts string literal attribute arguments.
"""
from __future__ import annotations

import glob
import re
from pathlib import Path
from typing import Iterator

from .bindings import BindingTarget
from .common import DllImportCodegenError, ensure_relative_path, to_repo_relative

_TOKEN_PATTERN = re.compile(
    r"(?P<line_comment>//[^\n]*)"
    r"|(?P<block_comment>/\*.*?\*/)"
    r"|\bDllFileImport(?:Attribute)?\s*\(\s*(?P<literal>@\"(?:[^\"]|\"\")*\"|\"(?:[^\"\\\n]|\\.)*\")\s*\)"
    r"|(?P<verbatim>\$?@\$?\"(?:[^\"]|\"\")*\")"
    r"|(?P<string>\$?\"(?:[^\"\\\n]|\\.)*\")"
    r"|(?P<char>'(?:[^'\\\n]|\\.)+')"
    r"|\bnamespace\s+(?P<namespace>[A-Za-z_][\w.]*)\s*(?P<namespace_end>[;{])"
    r"|\bclass\s+(?P<class_name>[A-Za-z_]\w*)(?:\s*<(?P<type_params>[^<>{};]*)>)?"
    r"|(?P<open>\{)"
    r"|(?P<close>\})",
    flags=re.S,
)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_ESCAPE_PATTERN = re.compile(r"\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|x[0-9A-Fa-f]{1,4}|.)")


def _unescape(match: re.Match[str]) -> str:
    token = match.group(1)
    if token[0] in "uUx" and len(token) > 1:
        return chr(int(token[1:], 16))
    if token in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[token]
    raise DllImportCodegenError(f"Unsupported escape sequence '\\{token}' in C# string literal")


def string_literal_value(literal: str) -> str:
    if literal.startswith("@"):
        return literal[2:-1].replace('""', '"')
    return _ESCAPE_PATTERN.sub(_unescape, literal[1:-1])


def class_display_name(name: str, type_params: str | None) -> str:
    if type_params is None:
        return name
    params = ", ".join(param.strip() for param in type_params.split(","))
    return f"{name}<{params}>"


def scan_csharp_source(text: str, source: str | None = None) -> list[BindingTarget]:
    targets: list[BindingTarget] = []
    file_namespace = ""
    scopes: list[tuple[str, str]] = []
    pending_class: str | None = None
    pending_literal: str | None = None

    for match in _TOKEN_PATTERN.finditer(text):
        kind = match.lastgroup
        if kind in {"line_comment", "block_comment", "verbatim", "string", "char"}:
            continue
        if match.group("literal") is not None:
            pending_literal = match.group("literal")
        elif match.group("namespace") is not None:
            name = match.group("namespace")
            if match.group("namespace_end") == ";":
                file_namespace = name
            else:
                scopes.append(("namespace", name))
        elif match.group("class_name") is not None:
            pending_class = class_display_name(match.group("class_name"), match.group("type_params"))
            if pending_literal is not None:
                namespace_parts = [file_namespace] if file_namespace else []
                namespace_parts.extend(name for scope_kind, name in scopes if scope_kind == "namespace")
                class_path = [name for scope_kind, name in scopes if scope_kind == "class"]
                class_path.append(pending_class)
                targets.append(
                    BindingTarget(
                        namespace=".".join(namespace_parts),
                        class_path=tuple(class_path),
                        library_expression=pending_literal,
                        file_name=string_literal_value(pending_literal),
                        source=source,
                    )
                )
                pending_literal = None
        elif match.group("open") is not None:
            if pending_class is not None:
                scopes.append(("class", pending_class))
                pending_class = None
            else:
                scopes.append(("block", ""))
            pending_literal = None
        elif match.group("close") is not None:
            if scopes:
                scopes.pop()
            pending_class = None
            pending_literal = None

    return targets


BUILD_OUTPUT_DIRS = frozenset({"bin", "obj"})


def _expand_entry(root: Path, entry: str, suffix: str) -> Iterator[Path]:
    entry_path = ensure_relative_path(root, entry)
    if any(ch in entry for ch in "*?[]"):
        yield from (Path(item) for item in glob.glob(str(entry_path), recursive=True))
    elif entry_path.is_dir():
        yield from entry_path.rglob(f"*{suffix}")
    elif entry_path.is_file():
        yield entry_path
    else:
        raise DllImportCodegenError(f"Source entry '{entry}' does not exist")


def _is_build_output(path: Path, root: Path) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return not BUILD_OUTPUT_DIRS.isdisjoint(parts)


def iter_source_files(root: Path, entries: list[str], suffix: str = ".cs") -> list[Path]:
    resolved_root = root.resolve()
    found: set[Path] = set()
    for entry in entries:
        for candidate in _expand_entry(root, entry, suffix):
            if candidate.suffix.lower() != suffix or not candidate.is_file():
                continue
            resolved = candidate.resolve()
            if not _is_build_output(resolved, resolved_root):
                found.add(resolved)
    return sorted(found)


def discover_targets(root: Path, entries: list[str]) -> list[BindingTarget]:
    targets: list[BindingTarget] = []
    for path in iter_source_files(root, entries):
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise DllImportCodegenError(f"Unable to read C# file '{path}': {exc}") from exc
        targets.extend(scan_csharp_source(text, to_repo_relative(path, root)))
    return targets
