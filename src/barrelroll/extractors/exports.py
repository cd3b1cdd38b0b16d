"""Lexical export extraction from TypeScript module source."""

from __future__ import annotations

import re

from barrelroll.models import DEFAULT_EXPORT_NAME, ExportDescriptor

_IDENTIFIER = r"[A-Za-z_$][\w$]*"
_IDENTIFIER_RE = re.compile(rf"^{_IDENTIFIER}$")

# Quoted literals are matched alongside comments so that comment markers
# inside strings (URLs, globs) are left alone.
_COMMENT_RE = re.compile(
    r"""(?P<literal>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"|(?P<comment>/\*[\s\S]*?\*/|//[^\n]*)"
)

_DECLARATION_RE = re.compile(
    r"\bexport\s+(?:declare\s+)?(?:(?:abstract|async)\s+)?"
    r"(?P<keyword>class|interface|type|function|const\s+enum|enum|const|let|var)"
    r"(?:(?<=function)\s*\*\s*|\s+)"
    rf"(?P<name>{_IDENTIFIER})"
)
_DEFAULT_RE = re.compile(r"\bexport\s+default\b")
_EXPORT_LIST_RE = re.compile(r"\bexport\s*(?:(?P<type>type)\s*)?\{(?P<body>[^}]*)\}")
_NAMESPACE_REEXPORT_RE = re.compile(
    rf"\bexport\s*(?:(?P<type>type)\s*)?\*\s*as\s+(?P<name>{_IDENTIFIER})"
)

_SPECIFIER_RE = re.compile(r"[^,]+")
_TYPE_MODIFIER_RE = re.compile(r"^type\s+(?!as\b)")
_ALIAS_SPLIT_RE = re.compile(r"\s+as\s+")

_TYPE_KEYWORDS = frozenset({"interface", "type"})


def _strip_comments(text: str) -> str:
    """Blank out comments, keeping newlines so offsets stay aligned."""

    def replace(m: re.Match[str]) -> str:
        if m.group("literal") is not None:
            return m.group("literal")
        return re.sub(r"[^\n]", " ", m.group("comment"))

    return _COMMENT_RE.sub(replace, text)


def _parse_specifier(raw: str, list_is_type_only: bool) -> tuple[str, bool] | None:
    """Parse one ``export { ... }`` specifier into (exported name, type_only)."""
    spec = raw.strip()
    if not spec:
        return None

    type_only = list_is_type_only
    if _TYPE_MODIFIER_RE.match(spec):
        type_only = True
        spec = _TYPE_MODIFIER_RE.sub("", spec, count=1)

    name = _ALIAS_SPLIT_RE.split(spec)[-1].strip()
    if not _IDENTIFIER_RE.match(name):
        return None
    return name, type_only


def _iter_candidates(text: str) -> list[tuple[int, str, bool]]:
    """Collect (offset, name, type_only) for every recognized export form."""
    found: list[tuple[int, str, bool]] = []

    for m in _DECLARATION_RE.finditer(text):
        keyword = m.group("keyword")
        found.append((m.start(), m.group("name"), keyword in _TYPE_KEYWORDS))

    for m in _DEFAULT_RE.finditer(text):
        found.append((m.start(), DEFAULT_EXPORT_NAME, False))

    for m in _NAMESPACE_REEXPORT_RE.finditer(text):
        found.append((m.start(), m.group("name"), m.group("type") is not None))

    for m in _EXPORT_LIST_RE.finditer(text):
        list_is_type_only = m.group("type") is not None
        body_start = m.start("body")
        for spec in _SPECIFIER_RE.finditer(m.group("body")):
            parsed = _parse_specifier(spec.group(0), list_is_type_only)
            if parsed is None:
                continue
            name, type_only = parsed
            if name == DEFAULT_EXPORT_NAME:
                type_only = False
            found.append((body_start + spec.start(), name, type_only))

    found.sort(key=lambda item: item[0])
    return found


def extract_exports(source: str) -> list[ExportDescriptor]:
    """Extract exported symbols from TypeScript source text.

    Recognizes declarations (``export const|let|var|function|class|enum``),
    type declarations (``export interface|type``), ``export default``,
    export lists (``export { a, b as c }``, ``export type { T }`` and
    per-specifier ``type`` markers) and ``export * as ns``. Comments are never
    scanned. Matching is lexical, so export-like text inside string literals
    may still be picked up.

    Args:
        source: Full text of one module.

    Returns:
        Descriptors in order of first appearance, one per exported name. The
        first occurrence of a name decides its ``type_only`` flag.
    """
    text = _strip_comments(source)

    seen: set[str] = set()
    exports: list[ExportDescriptor] = []
    for _, name, type_only in _iter_candidates(text):
        if name in seen:
            continue
        seen.add(name)
        exports.append(ExportDescriptor(name=name, type_only=type_only))
    return exports
