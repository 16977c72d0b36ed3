from .bindings import (
    BindingDeclaration,
    BindingTarget,
    build_declaration,
    build_declarations,
    output_file_name,
    render_declaration,
    render_target_block,
    render_unit,
)
from .common import DllImportCodegenError, UnrecognizedTypeCodeError, write_if_changed
from .discovery import discover_targets, scan_csharp_source
from .naming import to_pascal_case
from .signatures import DecodedExport, ExportListing, decode_export_line, decode_export_listing
from .type_codes import DecodedType, decode_type_run, next_type

__all__ = [
    "BindingDeclaration",
    "BindingTarget",
    "DecodedExport",
    "DecodedType",
    "DllImportCodegenError",
    "ExportListing",
    "UnrecognizedTypeCodeError",
    "build_declaration",
    "build_declarations",
    "decode_export_line",
    "decode_export_listing",
    "decode_type_run",
    "discover_targets",
    "next_type",
    "output_file_name",
    "render_declaration",
    "render_target_block",
    "render_unit",
    "scan_csharp_source",
    "to_pascal_case",
    "write_if_changed",
]
