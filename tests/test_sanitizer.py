"""Tests for preserving hand-written barrel content."""

from __future__ import annotations

from barrelroll.synthesis.sanitizer import (
    extract_export_path,
    merge_preserved,
    normalize_export_path,
    preserve_definitions,
    regenerated_paths,
)


class TestExtractExportPath:
    def test_named(self):
        assert extract_export_path("export { alpha } from './alpha';") == "./alpha"

    def test_type(self):
        assert extract_export_path('export type { Bravo } from "./beta";') == "./beta"

    def test_wildcard(self):
        assert extract_export_path("export * from './nested';") == "./nested"

    def test_no_space_and_no_semicolon(self):
        assert extract_export_path("export{ a }from './a'") == "./a"

    def test_trailing_comments(self):
        assert extract_export_path("export { a } from './a'; // generated") == "./a"
        assert extract_export_path("export { a } from './a'; /* keep */") == "./a"

    def test_multiline(self):
        assert extract_export_path("export {\n  a,\n  b,\n} from './ab';") == "./ab"

    def test_not_a_reexport(self):
        assert extract_export_path("export const direct = 1;") is None
        assert extract_export_path("import { a } from './a';") is None
        assert extract_export_path("") is None


class TestNormalizeExportPath:
    def test_equivalent_forms(self):
        for path in ("./foo", "./foo.js", "./foo.ts", "./foo/index", "./foo/index.js"):
            assert normalize_export_path(path) == "./foo"

    def test_other_paths_untouched(self):
        assert normalize_export_path("./foo.styles") == "./foo.styles"


class TestPreserveDefinitions:
    def test_strips_regenerated_and_external_reexports(self):
        existing = "\n".join(
            [
                "export * from '../external';",
                "export { alpha } from './alpha';",
                "export {",
                "  beta,",
                "} from './beta';",
                "",
                "export const direct = 1;",
            ]
        )
        preserved = preserve_definitions(existing, {"./alpha", "./beta"})
        assert preserved == ["export const direct = 1;"]

    def test_keeps_reexports_that_are_not_regenerated(self):
        existing = "export { legacy } from './legacy';\nexport { alpha } from './alpha';\n"
        assert preserve_definitions(existing, {"./alpha"}) == [
            "export { legacy } from './legacy';"
        ]

    def test_keeps_multiline_block_that_is_not_regenerated(self):
        existing = "export {\n  one,\n  two,\n} from './manual';\n"
        assert preserve_definitions(existing, {"./alpha"}) == [
            "export {",
            "  one,",
            "  two,",
            "} from './manual';",
        ]

    def test_regenerated_paths_are_normalized(self):
        existing = "export { alpha } from './alpha.js';\nexport * from './nested/index';\n"
        assert preserve_definitions(existing, {"./alpha", "./nested"}) == []

    def test_keeps_multiline_local_export_list(self):
        existing = "const a = 1;\nexport {\n  a,\n};\nexport { Alpha } from './alpha';\n"
        assert preserve_definitions(existing, {"./alpha"}) == [
            "const a = 1;",
            "export {",
            "  a,",
            "};",
        ]

    def test_keeps_single_line_local_export_list(self):
        existing = "export { a, b };\nexport { Alpha } from './alpha';\nexport const c = 1;\n"
        assert preserve_definitions(existing, {"./alpha"}) == [
            "export { a, b };",
            "export const c = 1;",
        ]

    def test_unterminated_block_is_kept(self):
        existing = "export const x = 1;\nexport {\n  dangling,"
        assert preserve_definitions(existing, set()) == [
            "export const x = 1;",
            "export {",
            "  dangling,",
        ]

    def test_keeps_comments_and_imports(self):
        existing = "// Hand-written header\nimport './polyfills';\nexport { a } from './a';\n"
        assert preserve_definitions(existing, {"./a"}) == [
            "// Hand-written header",
            "import './polyfills';",
        ]

    def test_empty_existing(self):
        assert preserve_definitions("", {"./a"}) == []


class TestRegeneratedPaths:
    def test_collects_all_specifiers(self):
        content = (
            "export { A, type B } from './alpha';\n"
            "export { default } from './alpha';\n"
            "export * from './nested';\n"
        )
        assert regenerated_paths(content) == {"./alpha", "./nested"}

    def test_empty_content(self):
        assert regenerated_paths("\n") == set()


class TestMergePreserved:
    def test_nothing_preserved(self):
        assert merge_preserved([], "export * from './a';\n") == "export * from './a';\n"

    def test_preserved_above_generated(self):
        merged = merge_preserved(["export const x = 1;"], "export * from './a';\n")
        assert merged == "export const x = 1;\n\nexport * from './a';\n"

    def test_nothing_generated(self):
        assert merge_preserved(["export const x = 1;"], "\n") == "export const x = 1;\n"

    def test_merge_is_stable_on_rerun(self):
        generated = "export { A } from './alpha';\n"
        first = merge_preserved(
            preserve_definitions("export const x = 1;\n", regenerated_paths(generated)),
            generated,
        )
        second = merge_preserved(
            preserve_definitions(first, regenerated_paths(generated)), generated
        )
        assert first == second
