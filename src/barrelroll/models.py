"""All shared data models for barrelroll."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Union

DEFAULT_EXPORT_NAME = "default"
INDEX_FILENAME = "index.ts"
PARENT_DIRECTORY_SEGMENT = ".."

# ── Export extraction ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ExportDescriptor:
    """One exported symbol discovered in a module."""

    name: str
    type_only: bool = False

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_EXPORT_NAME


# ── Barrel entries ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ValueExport:
    """A runtime export (function, class, constant, enum)."""

    name: str


@dataclass(frozen=True)
class TypeExport:
    """A compile-time only export (interface, type alias)."""

    name: str


@dataclass(frozen=True)
class DefaultExport:
    """The module's default export. Carries no name."""


BarrelExport = Union[ValueExport, TypeExport, DefaultExport]


def to_barrel_export(descriptor: ExportDescriptor) -> BarrelExport:
    """Refine an extracted descriptor into the export kind used for synthesis."""
    if descriptor.is_default:
        return DefaultExport()
    if descriptor.type_only:
        return TypeExport(descriptor.name)
    return ValueExport(descriptor.name)


@dataclass(frozen=True)
class FileEntry:
    """Exports of a single module file."""

    exports: tuple[BarrelExport, ...] = ()

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[ExportDescriptor]) -> FileEntry:
        return cls(tuple(to_barrel_export(d) for d in descriptors))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> FileEntry:
        """Build an entry from the legacy raw-name shape.

        Non-default names become value exports in alphabetical order and the
        ``"default"`` sentinel, when present, becomes a trailing default export.
        """
        names = list(names)
        exports: list[BarrelExport] = [
            ValueExport(n) for n in sorted(n for n in names if n != DEFAULT_EXPORT_NAME)
        ]
        if DEFAULT_EXPORT_NAME in names:
            exports.append(DefaultExport())
        return cls(tuple(exports))


@dataclass(frozen=True)
class DirectoryEntry:
    """A subdirectory that has its own barrel."""


BarrelEntry = Union[FileEntry, DirectoryEntry]


# ── Generation ──────────────────────────────────────────────────────────────


class GenerationMode(Enum):
    CREATE_OR_UPDATE = "create_or_update"
    UPDATE_EXISTING = "update_existing"


@dataclass
class GenerationOptions:
    recursive: bool = False
    mode: GenerationMode = GenerationMode.CREATE_OR_UPDATE
    max_concurrent: int = 20
    preserve_definitions: bool = True


@dataclass
class BarrelResult:
    """Outcome of generating the barrel for one directory."""

    directory: Path
    index_path: Path
    content: str = ""
    written: bool = False
    entries: int = 0
    preserved_lines: list[str] = field(default_factory=list)
