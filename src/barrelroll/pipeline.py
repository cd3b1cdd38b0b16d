"""Pipeline orchestrator: wires discovery, extraction, synthesis and writing."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from barrelroll.extractors.exports import extract_exports
from barrelroll.filesystem import (
    FileSystemError,
    file_exists,
    list_source_files,
    list_subdirectories,
    read_text,
    write_text,
)
from barrelroll.models import (
    INDEX_FILENAME,
    BarrelEntry,
    BarrelResult,
    DirectoryEntry,
    ExportDescriptor,
    FileEntry,
    GenerationMode,
    GenerationOptions,
)
from barrelroll.synthesis.builder import build_content
from barrelroll.synthesis.sanitizer import (
    merge_preserved,
    preserve_definitions,
    regenerated_paths,
)

TYPE_CHECKING = False
if TYPE_CHECKING:
    from barrelroll.cache import ExportCache

logger = logging.getLogger(__name__)


class NoSourceFilesError(RuntimeError):
    """Raised when a non-recursive run finds nothing to put in a barrel."""


async def _extract_file(
    path: Path,
    semaphore: asyncio.Semaphore,
    cache: ExportCache | None = None,
) -> list[ExportDescriptor]:
    """Read and extract a single file with concurrency control."""
    async with semaphore:
        key = None
        if cache is not None:
            # taken before the read so a concurrent edit invalidates the entry
            key = cache.key_for(path)
            if key is not None:
                cached = cache.get_exports(path, key=key)
                if cached is not None:
                    return cached

        try:
            content = await asyncio.to_thread(read_text, path)
        except FileSystemError as e:
            logger.error("%s", e)
            raise

        exports = extract_exports(content)
        logger.debug("%s: %d exports", path, len(exports))

        if cache is not None and key is not None:
            cache.set_exports(path, exports, key=key)
        return exports


async def collect_entries(
    directory: Path,
    *,
    max_concurrent: int = 20,
    cache: ExportCache | None = None,
    pending_indexes: set[Path] | None = None,
) -> dict[str, BarrelEntry]:
    """Build the barrel input mapping for one directory.

    Args:
        directory: Directory whose modules are scanned.
        max_concurrent: Maximum files read and extracted at once.
        cache: Optional export cache.
        pending_indexes: Child index files that are about to be written (dry
            runs), treated as if they already existed.

    Returns:
        Relative path -> entry. Files without exports are left out and
        subdirectories only appear when they have their own index.
    """
    files = list_source_files(directory)
    semaphore = asyncio.Semaphore(max_concurrent)
    results = await asyncio.gather(*(_extract_file(f, semaphore, cache) for f in files))

    entries: dict[str, BarrelEntry] = {}
    for path, exports in zip(files, results):
        if not exports:
            continue
        entries[path.relative_to(directory).as_posix()] = FileEntry.from_descriptors(exports)

    pending = pending_indexes or set()
    for sub in list_subdirectories(directory):
        index_path = sub / INDEX_FILENAME
        if file_exists(index_path) or index_path in pending:
            entries[sub.relative_to(directory).as_posix()] = DirectoryEntry()

    return entries


def _should_write(
    entries: dict[str, BarrelEntry], options: GenerationOptions, has_existing_index: bool
) -> bool:
    if entries:
        return True
    if options.mode is GenerationMode.UPDATE_EXISTING:
        return has_existing_index
    if not options.recursive:
        raise NoSourceFilesError("No TypeScript files found in the selected directory")
    return has_existing_index


async def generate_barrel(
    directory: Path,
    options: GenerationOptions,
    *,
    cache: ExportCache | None = None,
    dry_run: bool = False,
) -> list[BarrelResult]:
    """Generate (or update) index.ts in ``directory`` and, if recursive, below it.

    Children are handled before their parent so the parent sees fresh child
    barrels. Returns one result per visited directory, children first.
    """
    directory = Path(directory)
    results: list[BarrelResult] = []

    if options.recursive:
        for sub in list_subdirectories(directory):
            if options.mode is GenerationMode.UPDATE_EXISTING and not file_exists(
                sub / INDEX_FILENAME
            ):
                continue
            results.extend(await generate_barrel(sub, options, cache=cache, dry_run=dry_run))

    index_path = directory / INDEX_FILENAME
    entries = await collect_entries(
        directory,
        max_concurrent=options.max_concurrent,
        cache=cache,
        pending_indexes={r.index_path for r in results if r.written},
    )
    has_existing_index = file_exists(index_path)
    result = BarrelResult(directory=directory, index_path=index_path, entries=len(entries))

    if not _should_write(entries, options, has_existing_index):
        logger.info("Skipping %s: nothing to export", directory)
        results.append(result)
        return results

    content = build_content(entries, directory.as_posix())

    if options.preserve_definitions and has_existing_index:
        existing = await asyncio.to_thread(read_text, index_path)
        preserved = preserve_definitions(existing, regenerated_paths(content))
        content = merge_preserved(preserved, content)
        result.preserved_lines = preserved

    result.content = content
    if not dry_run:
        await asyncio.to_thread(write_text, index_path, content)
        logger.info("Wrote %s (%d entries)", index_path, len(entries))
    result.written = True
    results.append(result)
    return results


def run_pipeline(
    directory: Path,
    options: GenerationOptions,
    *,
    use_cache: bool = False,
    cache_max_entries: int = 1000,
    dry_run: bool = False,
) -> list[BarrelResult]:
    """Run barrel generation for ``directory`` to completion."""
    cache = None
    if use_cache:
        from barrelroll.cache import ExportCache

        cache = ExportCache(directory)

    try:
        return asyncio.run(generate_barrel(directory, options, cache=cache, dry_run=dry_run))
    finally:
        if cache is not None:
            removed = cache.prune(cache_max_entries)
            if removed:
                logger.debug("Pruned %d cache entries", removed)
            cache.close()
