"""Directory listing and file I/O for barrel generation."""

from __future__ import annotations

from pathlib import Path

from barrelroll.models import INDEX_FILENAME

IGNORED_DIRECTORIES = frozenset({"node_modules", ".git"})
SOURCE_SUFFIXES = (".ts", ".tsx")
DEFINITION_SUFFIX = ".d.ts"


class FileSystemError(RuntimeError):
    """A read, write or listing operation failed."""


def _read_directory(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FileSystemError(f"Failed to read directory: {e}") from e


def is_source_file(path: Path) -> bool:
    """TypeScript module that belongs in a barrel (not the barrel, not a .d.ts)."""
    name = path.name
    if name == INDEX_FILENAME or name.endswith(DEFINITION_SUFFIX):
        return False
    return name.endswith(SOURCE_SUFFIXES) and path.is_file()


def is_traversable_directory(path: Path) -> bool:
    name = path.name
    return path.is_dir() and name not in IGNORED_DIRECTORIES and not name.startswith(".")


def list_source_files(directory: Path) -> list[Path]:
    return [p for p in _read_directory(directory) if is_source_file(p)]


def list_subdirectories(directory: Path) -> list[Path]:
    return [p for p in _read_directory(directory) if is_traversable_directory(p)]


def file_exists(path: Path) -> bool:
    return path.is_file()


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"Failed to read file {path}: {e}") from e


def write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"Failed to write file {path}: {e}") from e
