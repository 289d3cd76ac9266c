"""Reference scanner: find every module reference in a JS/TS file.

The scanner walks the whole tree-sitter syntax tree (pre-order, so results
come out in source order) and recognizes six forms:

    import x, { a as b } from "./m"     -> import
    export { a } from "./m"             -> reexport
    import("./m")                       -> dynamic-import
    require("./m")                      -> require
    import x = require("./m")           -> import-equals
    export import x = require("./m")    -> import-equals
    let t: import("./m").T              -> import-type

Only string-literal targets are recorded. ``require(name)`` or
``import(`./${x}`)`` carry no reference.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Union

import tree_sitter

from ..exceptions import FileAccessError, ParsingError, UnsupportedLanguageError
from ..logging_config import get_logger
from .languages import detect_language
from .models import RefKind, Reference
from .treesitter_parser import TreeSitterParser, get_supported_languages

logger = get_logger(__name__)

Node = tree_sitter.Node

# Nodes that put an ``import("...")`` call in type position.
_TYPE_CONTEXTS = frozenset(
    {
        "type_annotation",
        "opting_type_annotation",
        "omitting_type_annotation",
        "type_query",
        "type_alias_declaration",
        "type_arguments",
        "generic_type",
        "union_type",
        "intersection_type",
        "array_type",
        "tuple_type",
        "lookup_type",
        "index_type_query",
        "parenthesized_type",
        "conditional_type",
        "function_type",
        "constructor_type",
        "readonly_type",
        "optional_type",
        "rest_type",
        "constraint",
        "default_type",
        "extends_type_clause",
    }
)

# Expressions whose trailing operand is a type: ``x as T``, ``x satisfies T``.
_TYPE_OPERAND_EXPRESSIONS = frozenset({"as_expression", "satisfies_expression"})

# A type-position import call may be wrapped in member accesses
# (``import("./m").A.B``) before reaching its type context.
_IMPORT_TYPE_WRAPPERS = frozenset({"member_expression", "call_expression"})


class ReferenceScanner:
    """Extracts Reference records from JavaScript/TypeScript sources.

    One scanner can be reused for any number of files; per-file state
    lives in a ``_FileReferences`` collector.
    """

    def __init__(self, parser: Optional[TreeSitterParser] = None) -> None:
        self._parser = parser or TreeSitterParser()

    def scan_file(self, path: Union[str, Path]) -> list[Reference]:
        """Read ``path`` as UTF-8 and scan it.

        Raises:
            FileAccessError: If the file cannot be read
            UnsupportedLanguageError: If no grammar handles the extension
            ParsingError: If the parser yields no tree
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(path, str(e))
        return self.scan(path, text)

    def scan(self, path: Union[str, Path], text: str) -> list[Reference]:
        """Scan already-loaded source text.

        Args:
            path: Absolute path of the file (stored on each Reference and
                used to pick the grammar)
            text: Full file contents

        Returns:
            References in ascending source position
        """
        path = Path(path)
        language = detect_language(path)
        if not self._parser.is_language_supported(language):
            raise UnsupportedLanguageError(language, get_supported_languages())

        source = text.encode("utf-8")
        tree = self._parser.parse(source, language)
        if tree is None:
            raise ParsingError(path, language, "parser returned no tree")

        if tree.root_node.has_error:
            logger.debug(f"{path}: syntax errors, extracting references best-effort")

        collector = _FileReferences(str(path), source)
        collector.walk(tree.root_node)
        logger.debug(f"{path}: {len(collector.references)} references")
        return collector.references


class _FileReferences:
    """Collects references for one file during a single tree walk."""

    def __init__(self, file: str, source: bytes) -> None:
        self.file = file
        self.source = source
        self.references: list[Reference] = []
        self._visitors: dict[str, Callable[[Node], None]] = {
            "import_statement": self._visit_import,
            "export_statement": self._visit_export,
            "call_expression": self._visit_call,
        }

    def walk(self, root: Node) -> None:
        # Explicit stack: nesting depth in real code can exceed the recursion limit
        stack = [root]
        while stack:
            node = stack.pop()
            visitor = self._visitors.get(node.type)
            if visitor is not None:
                visitor(node)
            stack.extend(reversed(node.children))

    def add(self, kind: RefKind, specifier: str, node: Node, detail: Optional[str] = None) -> None:
        row, byte_col = node.start_point
        line_prefix = self.source[node.start_byte - byte_col : node.start_byte]
        col = len(line_prefix.decode("utf-8", errors="replace")) + 1
        self.references.append(
            Reference(
                file=self.file,
                kind=kind,
                specifier=specifier,
                line=row + 1,
                col=col,
                detail=detail,
            )
        )

    # ── Visitors ───────────────────────────────────────────────

    def _visit_import(self, node: Node) -> None:
        require_clause = _child_of_type(node, "import_require_clause")
        if require_clause is not None:
            specifier = _literal_text(_child_of_type(require_clause, "string"))
            if specifier is not None:
                name = _child_of_type(require_clause, "identifier")
                self.add(RefKind.IMPORT_EQUALS, specifier, node, _text(name) if name else None)
            return

        specifier = _literal_text(node.child_by_field_name("source"))
        if specifier is not None:
            self.add(RefKind.IMPORT, specifier, node, _import_detail(node))

    def _visit_export(self, node: Node) -> None:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None and declaration.type == "import_alias":
            self._visit_exported_require(node, declaration)
            return

        specifier = _literal_text(node.child_by_field_name("source"))
        if specifier is None:
            return

        clause = _child_of_type(node, "export_clause")
        if clause is None:
            # export * from / export * as ns from
            detail = "*"
        else:
            names = [
                _binding_text(spec)
                for spec in clause.named_children
                if spec.type == "export_specifier"
            ]
            detail = "{" + ", ".join(names) + "}"
        self.add(RefKind.REEXPORT, specifier, node, detail)

    def _visit_exported_require(self, node: Node, alias: Node) -> None:
        """``export import X = require("./m")``.

        The grammar reads this as an alias of ``require`` followed by a
        separate ``("./m")`` statement, so the string comes from the next
        sibling.
        """
        names = [child for child in alias.named_children if child.type == "identifier"]
        if len(names) < 2 or _text(names[-1]) != "require" or _has_keyword(alias, ";"):
            return

        following = node.next_named_sibling
        if following is None or following.type != "expression_statement":
            return
        wrapped = following.named_children[0] if following.named_children else None
        if wrapped is None or wrapped.type != "parenthesized_expression":
            return

        inner = [child for child in wrapped.named_children if child.type != "comment"]
        specifier = _literal_text(inner[0]) if len(inner) == 1 else None
        if specifier is not None:
            self.add(RefKind.IMPORT_EQUALS, specifier, node, _text(names[0]))

    def _visit_call(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        if function is None:
            return

        if function.type == "import":
            specifier = _literal_text(_first_argument(node))
            if specifier is None:
                return
            context = _type_context(node)
            if context is None:
                self.add(RefKind.DYNAMIC_IMPORT, specifier, node)
            else:
                start = context if context.type == "type_query" else node
                self.add(RefKind.IMPORT_TYPE, specifier, start)

        elif function.type == "identifier" and _text(function) == "require":
            specifier = _literal_text(_first_argument(node))
            if specifier is not None:
                self.add(RefKind.REQUIRE, specifier, node)


# ── Node helpers ───────────────────────────────────────────────


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _child_of_type(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _has_keyword(node: Node, keyword: str) -> bool:
    """True if ``keyword`` appears as an anonymous token directly under ``node``."""
    return any(child.type == keyword and not child.is_named for child in node.children)


def _first_argument(call: Node) -> Optional[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def _literal_text(node: Optional[Node]) -> Optional[str]:
    """Value of a compile-time string literal, or None for anything else.

    Template strings count only when they contain no substitutions.
    """
    if node is None:
        return None
    if node.type == "string":
        return _text(node)[1:-1]
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.children):
            return None
        return _text(node)[1:-1]
    return None


def _binding_text(specifier: Node) -> str:
    """``name`` or ``name as alias`` for an import/export specifier."""
    name = specifier.child_by_field_name("name")
    alias = specifier.child_by_field_name("alias")
    if name is None:
        return _text(specifier)
    if alias is None:
        return _text(name)
    return f"{_text(name)} as {_text(alias)}"


def _import_detail(node: Node) -> str:
    clause = _child_of_type(node, "import_clause")
    if clause is None:
        return "side-effect"

    bits: list[str] = []
    if _has_keyword(node, "type"):
        bits.append("type")

    for child in clause.named_children:
        if child.type == "identifier":
            bits.append(f"default:{_text(child)}")
        elif child.type == "namespace_import":
            name = _child_of_type(child, "identifier")
            bits.append(f"namespace:{_text(name) if name else _text(child)}")
        elif child.type == "named_imports":
            elements = [
                ("type " if _has_keyword(spec, "type") else "") + _binding_text(spec)
                for spec in child.named_children
                if spec.type == "import_specifier"
            ]
            bits.append("named:{" + ", ".join(elements) + "}")

    return " ".join(bits)


def _type_context(call: Node) -> Optional[Node]:
    """The type-position node enclosing an ``import(...)`` call, if any."""
    current = call
    parent = call.parent
    while parent is not None and parent.type in _IMPORT_TYPE_WRAPPERS:
        current = parent
        parent = parent.parent

    if parent is None:
        return None
    if parent.type in _TYPE_CONTEXTS:
        return parent
    if parent.type in _TYPE_OPERAND_EXPRESSIONS:
        operands = parent.named_children
        if operands and operands[0] != current:
            return parent
    return None
