"""Keep hand-written content of an existing barrel across regeneration."""

from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)

# export [type] { ... } | * [as ns] from 'path' [;] [// comment | /* comment */]
_EXPORT_PATH_RE = re.compile(
    r"^export(?:\s+type)?\s*(?:\*|\{[\s\S]*?\})[\s\S]*?from\s*[\"']([^\"']+)[\"']"
    r"\s*;?\s*(?://.*|/\*[\s\S]*?\*/)?$"
)
_MULTILINE_END_RE = re.compile(r"\}\s*from\s*[\"']")
_LOCAL_LIST_END_RE = re.compile(r"\}\s*;?\s*(?://.*|/\*[\s\S]*?\*/)?$")
_MULTILINE_START_RE = re.compile(r"^export(?:\s+type)?\s*\{")
_EXTENSION_RE = re.compile(r"\.(?:js|mjs|ts|tsx|mts|cts)$")
_INDEX_SUFFIX_RE = re.compile(r"/index$")


def extract_export_path(text: str) -> str | None:
    """Return the module specifier of a re-export statement, else None."""
    m = _EXPORT_PATH_RE.match(text.strip())
    return m.group(1) if m else None


def normalize_export_path(export_path: str) -> str:
    """Make './foo', './foo.js' and './foo/index' compare equal."""
    return _INDEX_SUFFIX_RE.sub("", _EXTENSION_RE.sub("", export_path))


def _is_multiline_start(line: str) -> bool:
    if not _MULTILINE_START_RE.match(line):
        return False
    return not (_MULTILINE_END_RE.search(line) or _LOCAL_LIST_END_RE.search(line))


def _should_preserve(export_path: str, regenerated: set[str]) -> bool:
    normalized = normalize_export_path(export_path)
    if export_path.startswith(".."):
        log.debug("Stripping external re-export: %s", export_path)
        return False
    if normalized in regenerated:
        log.debug("Stripping re-export that will be regenerated: %s (%s)", export_path, normalized)
        return False
    log.debug("Preserving re-export: %s", export_path)
    return True


def preserve_definitions(existing: str, regenerated_paths: set[str]) -> list[str]:
    """Select the lines of an existing barrel that regeneration must keep.

    Direct definitions and re-exports of modules that will not be regenerated
    survive. Re-exports that point outside the directory (``..``) or at a
    module in ``regenerated_paths`` are dropped, as are blank lines. Multi-line
    ``export { ... } from '...'`` blocks are judged as a whole, local
    ``export { ... };`` lists are always kept and a block that never closes
    is kept verbatim.

    Args:
        existing: Current barrel file content.
        regenerated_paths: Specifiers (e.g. ``./alpha``) the new content covers.
            They are normalized before comparison.
    """
    regenerated = {normalize_export_path(p) for p in regenerated_paths}
    preserved: list[str] = []
    buffer: list[str] = []

    for line in existing.strip().split("\n"):
        stripped = line.strip()

        if buffer:
            buffer.append(line)
            if _MULTILINE_END_RE.search(stripped):
                export_path = extract_export_path("\n".join(buffer))
                if export_path is None or _should_preserve(export_path, regenerated):
                    preserved.extend(buffer)
                buffer = []
            elif _LOCAL_LIST_END_RE.search(stripped):
                # local export list, no module to regenerate
                preserved.extend(buffer)
                buffer = []
            continue

        if _is_multiline_start(stripped):
            buffer = [line]
            continue

        export_path = extract_export_path(stripped)
        if export_path is not None:
            if _should_preserve(export_path, regenerated):
                preserved.append(line)
        elif stripped:
            preserved.append(line)

    # unterminated multi-line export
    preserved.extend(buffer)
    return preserved


def regenerated_paths(content: str) -> set[str]:
    """Normalized specifiers of every re-export in generated barrel content."""
    paths: set[str] = set()
    for line in content.strip().split("\n"):
        export_path = extract_export_path(line)
        if export_path is not None:
            paths.add(normalize_export_path(export_path))
    return paths


def merge_preserved(preserved: list[str], generated: str) -> str:
    """Place preserved lines above freshly generated barrel content."""
    if not preserved:
        return generated
    if not generated.strip():
        return "\n".join(preserved) + "\n"
    return "\n".join(preserved) + "\n\n" + generated
