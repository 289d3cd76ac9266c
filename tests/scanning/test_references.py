"""Tests for the reference scanner."""

import pytest

from import_atlas.exceptions import FileAccessError, UnsupportedLanguageError
from import_atlas.scanning import RefKind, Reference

# One construct per line so positions are easy to check.
TS_LINES = [
    'import "./polyfill";',  # 1
    'import React from "react";',  # 2
    'import * as path from "node:path";',  # 3
    'import def, { a, b as c } from "./mod";',  # 4
    'import type { T } from "./types";',  # 5
    'import { type U, V } from "./mixed";',  # 6
    'export * from "./all";',  # 7
    'export { x, y as z } from "./named";',  # 8
    'export * as ns from "./ns";',  # 9
    'const lazy = import("./lazy");',  # 10
    'const fs = require("fs");',  # 11
    'import legacy = require("./legacy");',  # 12
    "function nested() {",  # 13
    "  if (cond) {",  # 14
    "    return require(`./tmpl`);",  # 15
    "  }",  # 16
    "}",  # 17
    "require(name);",  # 18
    "import(`./dyn/${x}`);",  # 19
    "export const local = 1;",  # 20
]
TS_SOURCE = "\n".join(TS_LINES) + "\n"


@pytest.fixture
def ts_refs(scanner, tmp_path):
    return scanner.scan(tmp_path / "sample.ts", TS_SOURCE)


def _simplify(refs):
    return [(r.kind, r.specifier, r.detail) for r in refs]


class TestReferenceForms:
    """Each recognized form produces one reference with the right detail."""

    def test_counts_every_literal_reference(self, ts_refs):
        """Thirteen literal references; computed targets are dropped."""
        assert len(ts_refs) == 13

    def test_kinds_and_details_in_source_order(self, ts_refs):
        """Kinds, specifiers and details match the fixture line by line."""
        assert _simplify(ts_refs) == [
            (RefKind.IMPORT, "./polyfill", "side-effect"),
            (RefKind.IMPORT, "react", "default:React"),
            (RefKind.IMPORT, "node:path", "namespace:path"),
            (RefKind.IMPORT, "./mod", "default:def named:{a, b as c}"),
            (RefKind.IMPORT, "./types", "type named:{T}"),
            (RefKind.IMPORT, "./mixed", "named:{type U, V}"),
            (RefKind.REEXPORT, "./all", "*"),
            (RefKind.REEXPORT, "./named", "{x, y as z}"),
            (RefKind.REEXPORT, "./ns", "*"),
            (RefKind.DYNAMIC_IMPORT, "./lazy", None),
            (RefKind.REQUIRE, "fs", None),
            (RefKind.IMPORT_EQUALS, "./legacy", "legacy"),
            (RefKind.REQUIRE, "./tmpl", None),
        ]

    def test_file_is_recorded_on_each_reference(self, ts_refs, tmp_path):
        """Every reference carries the path it was scanned under."""
        assert {r.file for r in ts_refs} == {str(tmp_path / "sample.ts")}

    def test_exported_import_equals(self, scanner, tmp_path):
        """``export import X = require(...)`` is an import-equals."""
        source = 'const a = 1;\nexport import Foo = require("./foo");\nrequire("./after");\n'
        refs = scanner.scan(tmp_path / "ns.ts", source)
        assert _simplify(refs) == [
            (RefKind.IMPORT_EQUALS, "./foo", "Foo"),
            (RefKind.REQUIRE, "./after", None),
        ]
        assert (refs[0].line, refs[0].col) == (2, 1)

    def test_exported_plain_alias_is_not_a_reference(self, scanner, tmp_path):
        """``export import X = Y.Z`` names no module."""
        source = 'namespace N { export const z = 1; }\nexport import Z = N.z;\n("./not-a-module");\n'
        assert scanner.scan(tmp_path / "alias.ts", source) == []

    def test_references_are_immutable(self, ts_refs):
        """Reference is a frozen dataclass."""
        with pytest.raises(AttributeError):
            ts_refs[0].specifier = "changed"


class TestPositions:
    """line/col are 1-indexed and point at the construct's first token."""

    def test_statement_positions(self, ts_refs):
        """Declarations start at column 1 of their line."""
        by_spec = {r.specifier: r for r in ts_refs}
        assert (by_spec["./polyfill"].line, by_spec["./polyfill"].col) == (1, 1)
        assert (by_spec["./named"].line, by_spec["./named"].col) == (8, 1)
        assert (by_spec["./legacy"].line, by_spec["./legacy"].col) == (12, 1)

    def test_call_positions(self, ts_refs):
        """Calls start at the callee token."""
        by_spec = {r.specifier: r for r in ts_refs}
        assert (by_spec["./lazy"].line, by_spec["./lazy"].col) == (10, 14)
        assert (by_spec["fs"].line, by_spec["fs"].col) == (11, 12)

    def test_positions_ascend(self, ts_refs):
        """References come out in ascending source position."""
        positions = [(r.line, r.col) for r in ts_refs]
        assert positions == sorted(positions)

    def test_column_counts_characters_not_bytes(self, scanner, tmp_path):
        """Multi-byte characters before the construct count once."""
        refs = scanner.scan(tmp_path / "u.js", 'const café = require("x");\n')
        assert len(refs) == 1
        assert refs[0].col == 14


class TestNestedTraversal:
    """No subtree is skipped, however deep."""

    def test_require_inside_nested_blocks(self, scanner, tmp_path):
        """Requires in functions, conditionals, loops and callbacks are found."""
        source = "\n".join(
            [
                "function outer() {",
                "  if (a) {",
                "    for (const k of ks) {",
                "      try {",
                '        const m = require("./deep");',
                "      } catch (e) {",
                '        setTimeout(() => import("./later"), 0);',
                "      }",
                "    }",
                "  }",
                "}",
                "class Service {",
                "  load() {",
                '    return require("./method");',
                "  }",
                "}",
            ]
        )
        refs = scanner.scan(tmp_path / "deep.js", source)
        assert _simplify(refs) == [
            (RefKind.REQUIRE, "./deep", None),
            (RefKind.DYNAMIC_IMPORT, "./later", None),
            (RefKind.REQUIRE, "./method", None),
        ]
        assert (refs[0].line, refs[0].col) == (5, 19)

    def test_template_require_in_function_body(self, scanner, tmp_path):
        """A substitution-free template inside nested blocks is recorded."""
        source = "function f() {\n  if (x) {\n    return require(`./tmpl`);\n  }\n}\n"
        refs = scanner.scan(tmp_path / "t.ts", source)
        assert _simplify(refs) == [(RefKind.REQUIRE, "./tmpl", None)]
        assert (refs[0].line, refs[0].col) == (3, 12)

    def test_deeply_nested_source_does_not_overflow(self, scanner, tmp_path):
        """Thousands of nested blocks are walked without recursion errors."""
        depth = 1500
        source = "{" * depth + 'require("./bottom");' + "}" * depth
        refs = scanner.scan(tmp_path / "blocks.js", source)
        assert [r.specifier for r in refs] == ["./bottom"]


class TestNonLiteralTargets:
    """Computed targets never produce a reference."""

    def test_variable_and_template_substitution(self, scanner, tmp_path):
        """require(name), import(`${x}`) and concatenations are ignored."""
        source = "\n".join(
            [
                "require(name);",
                "import(`./dyn/${x}`);",
                'require("./a" + suffix);',
                "import(path);",
                "require();",
            ]
        )
        assert scanner.scan(tmp_path / "dyn.js", source) == []

    def test_member_require_is_not_require(self, scanner, tmp_path):
        """Only calls to the bare identifier ``require`` count."""
        source = 'require.resolve("./x");\nmodule.require("./y");\n'
        assert scanner.scan(tmp_path / "m.js", source) == []

    def test_local_exports_are_not_reexports(self, scanner, tmp_path):
        """export statements without a source are skipped."""
        source = "export const a = 1;\nexport { a as b };\nexport default a;\n"
        assert scanner.scan(tmp_path / "e.ts", source) == []


class TestImportTypes:
    """import("...") in type position is kept apart from dynamic import."""

    @pytest.mark.parametrize(
        "source,col",
        [
            ('let t: import("./m").T;\n', 8),
            ('let t: import("./m").A.B;\n', 8),
            ('const x = y as import("./m").T;\n', 16),
            ('let t: typeof import("./m");\n', 8),
        ],
        ids=["annotation", "member-chain", "as-operand", "typeof-annotation"],
    )
    def test_type_position_import(self, scanner, tmp_path, source, col):
        """import("...") in annotations, member chains and ``as`` operands."""
        refs = scanner.scan(tmp_path / "types.ts", source)
        assert _simplify(refs) == [(RefKind.IMPORT_TYPE, "./m", None)]
        assert (refs[0].line, refs[0].col) == (1, col)

    def test_as_expression_subject_stays_dynamic(self, scanner, tmp_path):
        """Only the type operand of ``as`` is a type position."""
        refs = scanner.scan(tmp_path / "cast.ts", 'const m = import("./m") as Promise<unknown>;\n')
        assert _simplify(refs) == [(RefKind.DYNAMIC_IMPORT, "./m", None)]

    def test_typeof_import_starts_at_typeof(self, scanner, tmp_path):
        """``typeof import("./cfg")`` is positioned at ``typeof``."""
        refs = scanner.scan(tmp_path / "q.ts", 'type Cfg = typeof import("./cfg");\n')
        assert _simplify(refs) == [(RefKind.IMPORT_TYPE, "./cfg", None)]
        assert refs[0].col == 12

    def test_runtime_import_stays_dynamic(self, scanner, tmp_path):
        """Awaited and chained imports are runtime dynamic imports."""
        source = 'await import("./a");\nimport("./b").then(run);\n'
        refs = scanner.scan(tmp_path / "r.ts", source)
        assert [r.kind for r in refs] == [RefKind.DYNAMIC_IMPORT, RefKind.DYNAMIC_IMPORT]


class TestGrammars:
    """Extension selects the grammar."""

    def test_jsx_file(self, scanner, tmp_path):
        """JSX markup parses with the JavaScript grammar."""
        source = (
            'import React from "react";\n'
            'export const App = () => <div>{require("./x")}</div>;\n'
        )
        refs = scanner.scan(tmp_path / "App.jsx", source)
        assert [r.specifier for r in refs] == ["react", "./x"]

    def test_tsx_file(self, scanner, tmp_path):
        """TSX files combine type syntax and markup."""
        source = (
            'import type { Props } from "./props";\n'
            "export const View = (p: Props) => <span>{p.label}</span>;\n"
        )
        refs = scanner.scan(tmp_path / "View.tsx", source)
        assert _simplify(refs) == [(RefKind.IMPORT, "./props", "type named:{Props}")]

    def test_commonjs_file(self, scanner, tmp_path):
        """CommonJS modules (.cjs) use the JavaScript grammar."""
        refs = scanner.scan(tmp_path / "x.cjs", 'module.exports = require("./impl");\n')
        assert _simplify(refs) == [(RefKind.REQUIRE, "./impl", None)]


class TestScanFailures:
    """Failures abort one file's scan with a typed error."""

    def test_unsupported_extension(self, scanner, tmp_path):
        """No grammar for .py."""
        with pytest.raises(UnsupportedLanguageError):
            scanner.scan(tmp_path / "x.py", "import os\n")

    def test_missing_file(self, scanner, tmp_path):
        """Unreadable files raise FileAccessError."""
        with pytest.raises(FileAccessError):
            scanner.scan_file(tmp_path / "missing.ts")

    def test_invalid_utf8(self, scanner, tmp_path):
        """Undecodable files raise FileAccessError."""
        path = tmp_path / "bad.js"
        path.write_bytes(b'require("./a");\n\xff\xfe\x00')
        with pytest.raises(FileAccessError):
            scanner.scan_file(path)

    def test_syntax_errors_are_best_effort(self, scanner, tmp_path):
        """Broken syntax elsewhere does not stop extraction."""
        source = 'import a from "./a";\nfunction (( {\n'
        refs = scanner.scan(tmp_path / "broken.ts", source)
        assert isinstance(refs, list)
        assert all(isinstance(r, Reference) for r in refs)

    def test_scan_file_reads_from_disk(self, scanner, tmp_path):
        """scan_file matches scan on the same text."""
        path = tmp_path / "disk.ts"
        path.write_text(TS_SOURCE, encoding="utf-8")
        assert scanner.scan_file(path) == scanner.scan(path, TS_SOURCE)
