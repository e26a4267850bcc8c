"""Tree-sitter based extraction of exports and imports from TS/JS sources."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from functools import lru_cache

from blastradius.exceptions import ParserError
from blastradius.parser.models import DependencyNode, ImportInfo, SymbolInfo, SymbolKind

# Tree-sitter grammar mapping: language -> (module, language factory)
_TS_LANGUAGE_MODULES = {
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "javascript": ("tree_sitter_javascript", "language"),
}

# Top-level node types that declare a symbol
_DECLARATION_KINDS = {
    "function_declaration": SymbolKind.FUNCTION,
    "generator_function_declaration": SymbolKind.FUNCTION,
    "class_declaration": SymbolKind.CLASS,
    "abstract_class_declaration": SymbolKind.CLASS,
    "lexical_declaration": SymbolKind.VARIABLE,
    "variable_declaration": SymbolKind.VARIABLE,
    "interface_declaration": SymbolKind.INTERFACE,
    "type_alias_declaration": SymbolKind.TYPE,
    "enum_declaration": SymbolKind.ENUM,
}

# Anonymous values allowed after `export default`
_DEFAULT_EXPORT_KINDS = {
    "function_expression": SymbolKind.FUNCTION,
    "function": SymbolKind.FUNCTION,
    "generator_function": SymbolKind.FUNCTION,
    "class": SymbolKind.CLASS,
}

# Only these kinds carry referenced symbol names; types, interfaces and
# enums are recorded without references.
_REFERENCE_KINDS = {SymbolKind.FUNCTION, SymbolKind.CLASS, SymbolKind.VARIABLE}

_IDENTIFIER_TYPES = {
    "identifier",
    "property_identifier",
    "type_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "statement_identifier",
}

_IMPORT_PARENT_TYPES = {
    "import_statement",
    "import_clause",
    "import_specifier",
    "namespace_import",
    "import_require_clause",
}

DEFAULT_EXPORT_NAME = "default"


@dataclass
class Declaration:
    """A top-level declaration found in a file, exported or not."""

    name: str
    kind: SymbolKind
    line: int
    node: object  # tree_sitter.Node
    exported: bool = False


def is_available(language: str | None = None) -> bool:
    """Check if tree-sitter and the required language grammar are available."""
    try:
        import tree_sitter  # noqa: F401
    except ImportError:
        return False

    if language is None:
        return True

    entry = _TS_LANGUAGE_MODULES.get(language)
    if not entry:
        return False

    try:
        importlib.import_module(entry[0])
        return True
    except ImportError:
        return False


@lru_cache(maxsize=None)
def _get_language(lang: str):
    """Get a tree-sitter Language object for the given language."""
    from tree_sitter import Language

    entry = _TS_LANGUAGE_MODULES.get(lang)
    if not entry:
        raise ParserError(f"No tree-sitter grammar for language: {lang}")

    module_name, factory = entry
    module = importlib.import_module(module_name)
    return Language(getattr(module, factory)())


def parse_source(source: bytes, language: str):
    """Parse source bytes and return the tree-sitter root node."""
    from tree_sitter import Parser

    try:
        parser = Parser(_get_language(language))
        tree = parser.parse(source)
    except ParserError:
        raise
    except Exception as e:
        raise ParserError(f"tree-sitter parse error: {e}") from e
    return tree.root_node


def extract_dependency_node(
    file_path: str,
    root,
    resolve: Callable[[str], str | None] | None = None,
) -> DependencyNode:
    """Build the DependencyNode for a parsed file.

    Args:
        file_path: Identity of the file being extracted.
        root: tree-sitter root node of the file.
        resolve: Maps a module specifier to a project file identity, or None.
    """
    exports = [
        SymbolInfo(
            name=decl.name,
            kind=decl.kind,
            line=decl.line,
            references=(
                _referenced_names(decl.node)
                if decl.kind in _REFERENCE_KINDS
                else frozenset()
            ),
        )
        for decl in collect_declarations(root)
        if decl.exported
    ]

    imports = []
    for child in root.named_children:
        if child.type != "import_statement":
            continue
        info = _extract_import(child)
        if info is None:
            continue
        if resolve is not None:
            info.resolved_path = resolve(info.source)
        imports.append(info)

    return DependencyNode(file_path=file_path, exports=exports, imports=imports)


def collect_declarations(root) -> list[Declaration]:
    """Collect the top-level declarations of a file in source order.

    A declaration is marked exported when it carries the ``export`` keyword,
    is named by a local ``export { ... }`` clause, or is the default export.
    """
    declarations: list[Declaration] = []
    local_exports: set[str] = set()

    for child in root.named_children:
        if child.type == "export_statement":
            declaration = child.child_by_field_name("declaration")
            if declaration is not None:
                declarations.extend(_declarations_from(declaration, exported=True))
                continue

            # `export { a } from './x'` re-exports another module's symbols
            if child.child_by_field_name("source") is not None:
                continue

            value = child.child_by_field_name("value")
            if value is not None:
                if value.type == "identifier":
                    local_exports.add(_text(value))
                elif value.type in _DEFAULT_EXPORT_KINDS:
                    name_node = value.child_by_field_name("name")
                    declarations.append(
                        Declaration(
                            name=_text(name_node) if name_node else DEFAULT_EXPORT_NAME,
                            kind=_DEFAULT_EXPORT_KINDS[value.type],
                            line=_line(value),
                            node=value,
                            exported=True,
                        )
                    )
                continue

            for clause in child.named_children:
                if clause.type != "export_clause":
                    continue
                for spec in clause.named_children:
                    if spec.type == "export_specifier":
                        name_node = spec.child_by_field_name("name")
                        if name_node is not None:
                            local_exports.add(_string_or_identifier(name_node))

        elif child.type in _DECLARATION_KINDS or child.type == "ambient_declaration":
            declarations.extend(_declarations_from(child, exported=False))

    for decl in declarations:
        if not decl.exported and decl.name in local_exports:
            decl.exported = True

    return declarations


def _declarations_from(node, exported: bool) -> Iterator[Declaration]:
    if node.type == "ambient_declaration":
        # `declare function f(): void;` and friends
        for inner in node.named_children:
            if inner.type == "function_signature":
                name_node = inner.child_by_field_name("name")
                if name_node is not None:
                    yield Declaration(
                        _text(name_node), SymbolKind.FUNCTION, _line(inner), inner, exported
                    )
            elif inner.type in _DECLARATION_KINDS:
                yield from _declarations_from(inner, exported)
        return

    kind = _DECLARATION_KINDS.get(node.type)
    if kind is None:
        return

    if kind == SymbolKind.VARIABLE:
        # One symbol per binding: `export const a = 1, b = 2;`
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None:
                continue
            yield Declaration(_text(name_node), kind, _line(declarator), declarator, exported)
        return

    name_node = node.child_by_field_name("name")
    name = _text(name_node) if name_node is not None else DEFAULT_EXPORT_NAME
    yield Declaration(name, kind, _line(node), node, exported)


def _referenced_names(node) -> frozenset[str]:
    """Every identifier token inside `node` that is not part of an import."""
    refs: set[str] = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in _IDENTIFIER_TYPES:
            parent = current.parent
            if parent is None or parent.type not in _IMPORT_PARENT_TYPES:
                refs.add(_text(current))
        stack.extend(current.children)
    return frozenset(refs)


def _extract_import(node) -> ImportInfo | None:
    """Extract an ImportInfo from an import_statement node."""
    source_node = node.child_by_field_name("source")
    symbols: list[str] = []

    for child in node.named_children:
        if child.type == "import_clause":
            symbols = _import_clause_symbols(child)
        elif child.type == "import_require_clause":
            # `import fs = require('fs')`
            for inner in child.named_children:
                if inner.type == "identifier":
                    symbols = [_text(inner)]
                    break
            if source_node is None:
                source_node = child.child_by_field_name("source") or _first_child_of_type(
                    child, "string"
                )

    if source_node is None:
        source_node = _first_child_of_type(node, "string")
    if source_node is None:
        return None

    return ImportInfo(symbols=symbols, source=_string_value(source_node))


def _import_clause_symbols(clause) -> list[str]:
    named: list[str] = []
    default: str | None = None
    namespace: str | None = None

    for child in clause.named_children:
        if child.type == "identifier":
            default = _text(child)
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                # The imported (exporting-side) name, not the local alias
                name_node = spec.child_by_field_name("name")
                if name_node is not None:
                    named.append(_string_or_identifier(name_node))
        elif child.type == "namespace_import":
            ident = _first_child_of_type(child, "identifier")
            if ident is not None:
                namespace = f"* as {_text(ident)}"

    symbols = named
    if default is not None:
        symbols.append(default)
    if namespace is not None:
        symbols.append(namespace)
    return symbols


def _first_child_of_type(node, node_type: str):
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def _string_or_identifier(node) -> str:
    return _string_value(node) if node.type == "string" else _text(node)


def _string_value(node) -> str:
    text = _text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _line(node) -> int:
    return node.start_point[0] + 1
