from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .bindings import (
    ATTRIBUTE_NAME,
    BindingTarget,
    OutputUnit,
    build_declarations,
    output_file_name,
    render_attribute_source,
    render_declaration,
    render_target_block,
    render_unit,
)
from .common import DllImportCodegenError, ensure_relative_path, write_if_changed
from .config import load_config
from .discovery import discover_targets
from .exports import list_exports, read_listing
from .naming import to_pascal_case
from .signatures import ExportListing, decode_export_listing

TOOL_NAME = "dllimport_codegen"


def warn(message: str) -> None:
    print(f"{TOOL_NAME} warning: {message}", file=sys.stderr)


def parse_listing_overrides(values: list[str] | None, repo_root: Path) -> dict[str, Path]:
    overrides: dict[str, Path] = {}
    for value in values or []:
        name, sep, path = value.partition("=")
        if not sep or not name or not path:
            raise DllImportCodegenError(f"--listing expects NAME=PATH, got '{value}'")
        overrides[name] = ensure_relative_path(repo_root, path)
    return overrides


def find_listing_override(target: BindingTarget, overrides: dict[str, Path]) -> Path | None:
    if target.file_name in overrides:
        return overrides[target.file_name]
    base = output_file_name(target.file_name)[: -len(".g.cs")]
    return overrides.get(base)


def report_skipped(file_name: str, listing: ExportListing) -> None:
    for skipped in listing.skipped:
        warn(f"{file_name}: line {skipped.line_number}: skipped export '{skipped.raw_name}': {skipped.reason}")


def command_generate(args: argparse.Namespace) -> int:
    repo_root = Path(args.repo_root).resolve()
    config = load_config(Path(args.config).resolve() if args.config else None)

    sources = list(config.sources) + list(args.source or [])
    targets = discover_targets(repo_root, sources) if sources else []
    targets.extend(config.targets)
    if not targets:
        raise DllImportCodegenError("No binding targets found. Pass --source or configure targets.")

    output_dir = ensure_relative_path(repo_root, args.output_dir or config.output_dir)
    indent_width = args.indent_width or config.indent_width
    overrides = parse_listing_overrides(args.listing, repo_root)
    commands = [list(command) for command in config.listing_commands]

    listings: dict[str, ExportListing] = {}
    units: dict[str, OutputUnit] = {}
    for target in targets:
        listing = listings.get(target.file_name)
        if listing is None:
            override = find_listing_override(target, overrides)
            if override is not None:
                raw_output = read_listing(override)
            else:
                raw_output = list_exports(ensure_relative_path(repo_root, target.file_name), commands).stdout
            listing = decode_export_listing(raw_output)
            listings[target.file_name] = listing
            if not args.quiet:
                report_skipped(target.file_name, listing)

        declarations = build_declarations(listing.exports)
        name = output_file_name(target.file_name)
        unit = units.setdefault(name, OutputUnit(file_name=name))
        unit.blocks.append(render_target_block(target, declarations, indent_width))
        unit.declaration_count += len(declarations)

    status = 0
    for unit in units.values():
        status |= write_if_changed(output_dir / unit.file_name, render_unit(unit.blocks), args.check, args.dry_run)

    if args.emit_attribute or config.emit_attribute:
        attribute_source = render_attribute_source(config.attribute_namespace)
        status |= write_if_changed(output_dir / f"{ATTRIBUTE_NAME}.g.cs", attribute_source, args.check, args.dry_run)

    declaration_total = sum(unit.declaration_count for unit in units.values())
    print(
        f"Generated {declaration_total} declarations for {len(targets)} targets into {len(units)} files.",
        file=sys.stderr,
    )
    return status


def command_decode(args: argparse.Namespace) -> int:
    listing = decode_export_listing(read_listing(Path(args.listing)))
    if args.format == "json":
        print(json.dumps(listing.as_dict(), indent=2))
    else:
        for declaration in build_declarations(listing.exports):
            print(render_declaration(declaration, args.library))
    if not args.quiet:
        report_skipped(args.listing, listing)
    return 0


def command_scan(args: argparse.Namespace) -> int:
    repo_root = Path(args.repo_root).resolve()
    targets = discover_targets(repo_root, args.source)
    print(json.dumps([target.as_dict() for target in targets], indent=2))
    print(f"Found {len(targets)} binding targets.", file=sys.stderr)
    return 0


def command_normalize(args: argparse.Namespace) -> int:
    for name in args.names:
        print(to_pascal_case(name))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="Generate C# DllImport bindings from the decorated exports of a native binary.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate binding sources for discovered targets.")
    generate.add_argument(
        "--repo-root",
        default=".",
        help="Repository root used to resolve relative paths (default: current directory).",
    )
    generate.add_argument("--config", help="Path to codegen config JSON.")
    generate.add_argument("--source", action="append", help="C# file, directory or glob to scan (repeatable).")
    generate.add_argument("--output-dir", help="Directory for generated sources (default: config output_dir).")
    generate.add_argument(
        "--listing",
        action="append",
        help="Use a captured export listing instead of running dumpbin: NAME=PATH (repeatable).",
    )
    generate.add_argument("--indent-width", type=int, help="Spaces per nesting level (default: 4).")
    generate.add_argument("--emit-attribute", action="store_true", help=f"Also write {ATTRIBUTE_NAME}.g.cs.")
    generate.add_argument("--check", action="store_true", help="Fail with a diff instead of writing changes.")
    generate.add_argument("--dry-run", action="store_true", help="Do not write any files.")
    generate.add_argument("--quiet", action="store_true", help="Suppress skipped-export warnings.")
    generate.set_defaults(func=command_generate)

    decode = sub.add_parser("decode", help="Decode a captured export listing.")
    decode.add_argument("--listing", required=True, help="Path to captured dumpbin /EXPORTS output.")
    decode.add_argument("--format", choices=["json", "csharp"], default="json", help="Output format.")
    decode.add_argument("--library", default='"native.dll"', help="Library expression for csharp output.")
    decode.add_argument("--quiet", action="store_true", help="Suppress skipped-export warnings.")
    decode.set_defaults(func=command_decode)

    scan = sub.add_parser("scan", help="List classes annotated with DllFileImport.")
    scan.add_argument("--repo-root", default=".", help="Repository root for relative path resolution.")
    scan.add_argument("--source", action="append", required=True, help="C# file, directory or glob (repeatable).")
    scan.set_defaults(func=command_scan)

    normalize = sub.add_parser("normalize", help="Print the PascalCase binding name for raw export names.")
    normalize.add_argument("names", nargs="+", help="Raw export names.")
    normalize.set_defaults(func=command_normalize)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except DllImportCodegenError as exc:
        print(f"{TOOL_NAME} error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
