"""Render barrel (index) module content from per-file export inventories."""

from __future__ import annotations

import re
from typing import Mapping, Sequence, Union

from barrelroll.models import (
    PARENT_DIRECTORY_SEGMENT,
    BarrelEntry,
    BarrelExport,
    DefaultExport,
    DirectoryEntry,
    FileEntry,
    TypeExport,
    ValueExport,
)

NEWLINE = "\n"

_SOURCE_EXTENSION_RE = re.compile(r"\.(?:tsx?|mts|cts|jsx?|mjs|cjs)$")

EntryValue = Union[BarrelEntry, Sequence[str]]


def _to_posix(path: str) -> str:
    return path.replace("\\", "/")


def is_parent_path(path: str) -> bool:
    """True for paths that climb out of the base directory (``..`` or ``../x``)."""
    path = _to_posix(path)
    return path == PARENT_DIRECTORY_SEGMENT or path.startswith(PARENT_DIRECTORY_SEGMENT + "/")


def _normalize_entry(entry: EntryValue) -> BarrelEntry:
    """Bring a legacy raw-name sequence into the typed entry shape."""
    if isinstance(entry, (FileEntry, DirectoryEntry)):
        return entry
    return FileEntry.from_names(entry)


def module_path(relative_path: str, base_directory: str = "", *, is_file: bool = True) -> str:
    """Turn an entry key into the path used after ``./`` in the specifier.

    Separators become ``/``, a leading ``./`` and a leading ``base_directory/``
    prefix are dropped, and file keys lose their source extension.
    """
    path = _to_posix(relative_path)
    while path.startswith("./"):
        path = path[2:]

    base = _to_posix(base_directory).rstrip("/")
    while base.startswith("./"):
        base = base[2:]
    if base and base != "." and path.startswith(base + "/"):
        path = path[len(base) + 1 :]

    if is_file:
        path = _SOURCE_EXTENSION_RE.sub("", path)
    return path


def _file_lines(path: str, exports: Sequence[BarrelExport]) -> list[str]:
    values = [e.name for e in exports if isinstance(e, ValueExport)]
    types = [e.name for e in exports if isinstance(e, TypeExport)]
    has_default = any(isinstance(e, DefaultExport) for e in exports)

    lines: list[str] = []
    if values and types:
        names = values + [f"type {name}" for name in types]
        lines.append(f"export {{ {', '.join(names)} }} from './{path}';")
    elif values:
        lines.append(f"export {{ {', '.join(values)} }} from './{path}';")
    elif types:
        lines.append(f"export type {{ {', '.join(types)} }} from './{path}';")

    if has_default:
        lines.append(f"export {{ default }} from './{path}';")
    return lines


def _entry_lines(path: str, entry: BarrelEntry) -> list[str]:
    if isinstance(entry, DirectoryEntry):
        return [f"export * from './{path}';"]
    return _file_lines(path, entry.exports)


def build_content(entries: Mapping[str, EntryValue], base_directory: str = "") -> str:
    """Render the barrel module text for one directory.

    Args:
        entries: Relative path -> ``FileEntry`` / ``DirectoryEntry``, or a
            legacy list of raw export names (``"default"`` marks a default
            export). Keys that start with ``../`` are dropped.
        base_directory: Only used to strip a shared leading prefix from keys.

    Returns:
        One statement per line, sorted by module path, newline terminated.
        An input with nothing to export renders as ``"\\n"``.
    """
    normalized: list[tuple[str, bool, str, BarrelEntry]] = []
    for relative_path, raw_entry in entries.items():
        if is_parent_path(relative_path):
            continue
        entry = _normalize_entry(raw_entry)
        is_directory = isinstance(entry, DirectoryEntry)
        path = module_path(relative_path, base_directory, is_file=not is_directory)
        if is_parent_path(path):
            continue
        normalized.append((path, is_directory, relative_path, entry))

    # files before directories, then raw key, when module paths collide
    normalized.sort(key=lambda item: item[:3])

    lines: list[str] = []
    for path, _, _, entry in normalized:
        lines.extend(_entry_lines(path, entry))

    return NEWLINE.join(lines) + NEWLINE
