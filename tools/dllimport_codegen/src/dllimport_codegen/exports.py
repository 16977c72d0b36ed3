from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .common import DllImportCodegenError

DEFAULT_LISTING_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("dumpbin", "/EXPORTS", "{binary}"),
    ("dumpbin.exe", "/EXPORTS", "{binary}"),
)


@dataclass(frozen=True)
class ListingRun:
    command: tuple[str, ...]
    stdout: str


def run_listing_tool(commands: list[list[str]]) -> ListingRun:
    missing: list[str] = []
    failures: list[str] = []
    for command in commands:
        if shutil.which(command[0]) is None:
            missing.append(command[0])
            continue
        try:
            proc = subprocess.run(command, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip() or f"exit status {exc.returncode}"
            failures.append(f"{shlex.join(command)}: {detail}")
            continue
        except OSError as exc:
            failures.append(f"{shlex.join(command)}: {exc}")
            continue
        return ListingRun(command=tuple(command), stdout=proc.stdout)

    if failures:
        raise DllImportCodegenError("Export listing tool failed: " + " | ".join(failures))
    tried = ", ".join(missing) or "<none>"
    raise DllImportCodegenError(
        f"No export listing tool found (tried: {tried}). Install dumpbin or configure listing_commands."
    )


def expand_command(template: list[str] | tuple[str, ...], binary_path: Path) -> list[str]:
    return [part.replace("{binary}", os.fspath(binary_path)) for part in template]


def list_exports(binary_path: Path, commands: list[list[str]] | None = None) -> ListingRun:
    if not binary_path.is_file():
        raise DllImportCodegenError(f"Binary '{binary_path}' does not exist")
    templates = commands if commands else [list(item) for item in DEFAULT_LISTING_COMMANDS]
    return run_listing_tool([expand_command(template, binary_path) for template in templates])


def read_listing(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise DllImportCodegenError(f"Unable to read export listing '{path}': {exc}") from exc
