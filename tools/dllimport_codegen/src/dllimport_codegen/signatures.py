from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .common import UnrecognizedTypeCodeError
from .type_codes import DecodedType, next_type

# ordinal, decorated ?name@@YA<type run> and the XZ / @Z terminator (both accepted alike)
EXPORT_LINE_PATTERN = re.compile(r"(\d+).*?\?([_a-zA-Z][_a-zA-Z0-9]*)@@YA([_A-Z]*)(XZ|@Z)")


@dataclass(frozen=True)
class DecodedExport:
    ordinal: int
    raw_name: str
    return_type: DecodedType
    parameters: tuple[DecodedType, ...] = ()

    @property
    def requires_unsafe(self) -> bool:
        return self.return_type.is_pointer or any(param.is_pointer for param in self.parameters)

    def as_dict(self) -> dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "raw_name": self.raw_name,
            "return_type": self.return_type.as_dict(),
            "parameters": [param.as_dict() for param in self.parameters],
            "requires_unsafe": self.requires_unsafe,
        }


@dataclass(frozen=True)
class SkippedExport:
    line_number: int
    raw_name: str
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "line": self.line_number,
            "raw_name": self.raw_name,
            "reason": self.reason,
        }


@dataclass
class ExportListing:
    exports: list[DecodedExport] = field(default_factory=list)
    skipped: list[SkippedExport] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "export_count": len(self.exports),
            "exports": [item.as_dict() for item in self.exports],
            "skipped": [item.as_dict() for item in self.skipped],
        }


def decode_export_line(line: str) -> DecodedExport | None:
    """Decode one export listing line.

    Lines outside the grammar and signatures without a return type give
    ``None``. An unknown type code raises ``UnrecognizedTypeCodeError``.
    """
    match = EXPORT_LINE_PATTERN.search(line)
    if not match:
        return None

    ordinal = int(match.group(1))
    raw_name = match.group(2)
    type_run = match.group(3)

    return_type, position = next_type(type_run)
    if return_type is None:
        return None

    parameters: list[DecodedType] = []
    while True:
        decoded, position = next_type(type_run, position)
        if decoded is None:
            break
        parameters.append(decoded)

    return DecodedExport(
        ordinal=ordinal,
        raw_name=raw_name,
        return_type=return_type,
        parameters=tuple(parameters),
    )


def decode_export_listing(output: str) -> ExportListing:
    listing = ExportListing()
    for line_number, raw_line in enumerate(output.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            decoded = decode_export_line(line)
        except UnrecognizedTypeCodeError as exc:
            match = EXPORT_LINE_PATTERN.search(line)
            raw_name = match.group(2) if match else ""
            listing.skipped.append(SkippedExport(line_number=line_number, raw_name=raw_name, reason=str(exc)))
            continue
        if decoded is not None:
            listing.exports.append(decoded)
    return listing
