from __future__ import annotations

import difflib
import json
from pathlib import Path
from typing import Any


class DllImportCodegenError(Exception):
    pass


class UnrecognizedTypeCodeError(DllImportCodegenError):
    def __init__(self, type_run: str, position: int) -> None:
        super().__init__(f"Unrecognized type code at offset {position} in '{type_run}'")
        self.type_run = type_run
        self.position = position


def load_json(path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DllImportCodegenError(f"Unable to read JSON file '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DllImportCodegenError(f"Invalid JSON in '{path}': {exc}") from exc
    if not isinstance(payload, dict):
        raise DllImportCodegenError(f"JSON root in '{path}' must be an object")
    return payload


def ensure_relative_path(root: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return root / path


def to_repo_relative(path: Path, repo_root: Path) -> str:
    try:
        return path.resolve().relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        return str(path.resolve())


def read_text_if_exists(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DllImportCodegenError(f"Unable to read '{path}': {exc}") from exc


def render_drift(path: Path, existing: str, content: str) -> str:
    diff = difflib.unified_diff(
        existing.splitlines(),
        content.splitlines(),
        fromfile=f"{path} (on disk)",
        tofile=f"{path} (generated)",
        lineterm="",
    )
    return "\n".join(diff)


def write_if_changed(path: Path, content: str, check: bool, dry_run: bool) -> int:
    """Return 1 only when ``check`` finds generated output out of date."""
    existing = read_text_if_exists(path)
    if existing == content:
        return 0
    if check:
        print(render_drift(path, existing, content))
        return 1
    if dry_run:
        return 0
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise DllImportCodegenError(f"Unable to write '{path}': {exc}") from exc
    return 0
