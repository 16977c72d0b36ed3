"""Lexer for the flat type runs found in MSVC decorated function names.

Only value primitives and ``PEA`` pointer prefixes are understood. Anything
else (structs, const pointers, references, wchar_t, ...) stops decoding.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .common import UnrecognizedTypeCodeError

POINTER_MARKER = "PEA"

TYPE_CODE_MAP: dict[str, str] = {
    "X": "void",
    "D": "char",
    "E": "byte",
    "F": "short",
    "G": "ushort",
    "H": "int",
    "I": "uint",
    "M": "float",
    "N": "double",
    "_N": "bool",
    "_J": "long",
    "_K": "ulong",
}

CodeTable = tuple[tuple[str, str], ...]


def codes_by_length(table: dict[str, str]) -> CodeTable:
    # Longest codes first; equal lengths keep table order.
    return tuple(sorted(table.items(), key=lambda item: len(item[0]), reverse=True))


_CODES_BY_LENGTH: CodeTable = codes_by_length(TYPE_CODE_MAP)
_CODES_BY_NAME: dict[str, str] = {name: code for code, name in TYPE_CODE_MAP.items()}


@dataclass(frozen=True)
class DecodedType:
    primitive_name: str
    pointer_depth: int = 0

    @property
    def is_pointer(self) -> bool:
        return self.pointer_depth > 0

    def render(self) -> str:
        return self.primitive_name + "*" * self.pointer_depth

    def as_dict(self) -> dict[str, object]:
        return {
            "primitive": self.primitive_name,
            "pointer_depth": self.pointer_depth,
            "type": self.render(),
        }


def match_primitive_code(run: str, position: int, codes: CodeTable | None = None) -> str | None:
    for code, _ in codes if codes is not None else _CODES_BY_LENGTH:
        if run.startswith(code, position):
            return code
    return None


def next_type(run: str, position: int = 0) -> tuple[DecodedType | None, int]:
    """Consume one type token starting at ``position``.

    Returns ``(None, position)`` at end of input, otherwise the decoded type
    and the cursor just past it.
    """
    if position >= len(run):
        return None, position

    cursor = position
    depth = 0
    while run.startswith(POINTER_MARKER, cursor):
        depth += 1
        cursor += len(POINTER_MARKER)

    code = match_primitive_code(run, cursor)
    if code is None:
        raise UnrecognizedTypeCodeError(run, cursor)
    return DecodedType(TYPE_CODE_MAP[code], depth), cursor + len(code)


def iter_types(run: str) -> Iterator[DecodedType]:
    position = 0
    while True:
        decoded, position = next_type(run, position)
        if decoded is None:
            return
        yield decoded


def decode_type_run(run: str) -> list[DecodedType]:
    return list(iter_types(run))


def encode_type(primitive_name: str, pointer_depth: int = 0) -> str:
    code = _CODES_BY_NAME.get(primitive_name)
    if code is None:
        raise KeyError(f"No type code for primitive '{primitive_name}'")
    if pointer_depth < 0:
        raise ValueError("pointer_depth must be non-negative")
    return POINTER_MARKER * pointer_depth + code
