"""
Go package parser that builds the type universe.

Phase 1 of the pipeline: parse every Go file of a package with
tree-sitter and turn its type declarations into TypeDescriptors,
without interpreting tags or deciding what gets generated.

Packages imported by the parsed package are loaded on demand, only for
the named types that its declarations actually reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ...errors import DiscoveryError
from ...logging import get_logger
from .modules import GoModule, find_module, is_standard_library
from .nodes import BUILTIN_TYPES, FieldDescriptor, GoPackage, TypeDescriptor, TypeKind

GO_LANGUAGE = Language(tree_sitter_go.language())

# "//go:generate", "//nolint:..." and friends are not documentation
_DIRECTIVE_PATTERN = re.compile(r"^//[a-z0-9]+:[a-z0-9]")

_IGNORE_CONSTRAINT = re.compile(rb"^//go:build ignore\s*$", re.MULTILINE)

logger = get_logger("parser")


@dataclass
class _Scope:
    """The type declarations of one loaded package."""

    path: str
    directory: Path
    name: str = ""
    decls: dict[str, _TypeDecl] = field(default_factory=dict)
    named: dict[str, TypeDescriptor] = field(default_factory=dict)


@dataclass
class _SourceFile:
    """A parsed Go file and the import aliases visible in it."""

    path: Path
    root: Node
    scope: _Scope
    imports: dict[str, str] = field(default_factory=dict)  # alias -> import path


@dataclass
class _TypeDecl:
    """A named type declaration waiting to be resolved."""

    name: str
    type_node: Node
    source: _SourceFile
    comment_lines: list[str] = field(default_factory=list)
    is_alias: bool = False  # type X = Y


class GoPackageParser:
    """Parses the Go files of one directory into a GoPackage."""

    def __init__(self):
        self._parser = Parser(GO_LANGUAGE)
        self._reset()

    def _reset(self) -> None:
        self._module: GoModule | None = None
        self._scopes: dict[str, _Scope] = {}  # import path -> loaded package
        self._unavailable: set[str] = set()
        self._builtins: dict[str, TypeDescriptor] = {}
        self._externals: dict[tuple[str, str], TypeDescriptor] = {}

    def parse_dir(self, directory: str | Path) -> GoPackage:
        """
        Parse a Go package directory.

        Args:
            directory: Directory holding the package's .go files

        Returns:
            GoPackage with every named type declared in the package

        Raises:
            DiscoveryError: If the package or a package it imports cannot be read or parsed
        """
        self._reset()
        directory = Path(directory)
        if not directory.is_dir():
            raise DiscoveryError(f"not a directory: {directory}")

        self._module = find_module(directory)
        if self._module is not None:
            path = self._module.package_path(directory)
        else:
            path = directory.resolve().name
        scope = self._load_scope(directory, path)

        package = GoPackage(path=scope.path, name=scope.name)
        for name, decl in scope.decls.items():
            if decl.is_alias:
                continue
            package.types.append(self._named_type(scope, name))
        logger.debug("Loaded %d types from package %s", len(package.types), package.path)
        return package

    def _load_scope(self, directory: Path, path: str, strict: bool = True) -> _Scope:
        """Parse a package directory.

        Imported packages are loaded leniently: files of another package and
        repeated declarations from build-constrained variants are skipped.
        """
        go_files = sorted(p for p in directory.glob("*.go") if p.is_file() and not p.name.endswith("_test.go"))
        scope = _Scope(path=path, directory=directory)
        sources = []
        for go_file in go_files:
            source = self._parse_file(go_file, scope)
            if source is None:
                continue
            name = _package_name(source.root)
            if scope.name and name != scope.name:
                if not strict:
                    continue
                raise DiscoveryError(f"found packages {scope.name} and {name} in {directory}")
            scope.name = name
            sources.append(source)
        if not sources:
            raise DiscoveryError(f"no buildable Go source files in {directory}")

        for source in sources:
            self._collect_decls(source, strict)
        self._scopes[path] = scope
        return scope

    def _parse_file(self, path: Path, scope: _Scope) -> _SourceFile | None:
        try:
            content = path.read_bytes()
        except OSError as e:
            raise DiscoveryError(f"reading {path}: {e}") from e
        if _IGNORE_CONSTRAINT.search(content):
            return None

        tree = self._parser.parse(content)
        if tree.root_node.has_error:
            row, column = _first_error_point(tree.root_node)
            raise DiscoveryError(f"{path}:{row + 1}:{column + 1}: syntax error")

        source = _SourceFile(path=path, root=tree.root_node, scope=scope)
        for child in tree.root_node.named_children:
            if child.type == "import_declaration":
                for spec in _import_specs(child):
                    import_path = _text(spec.child_by_field_name("path")).strip('"`')
                    alias_node = spec.child_by_field_name("name")
                    alias = _text(alias_node) if alias_node is not None else import_path.rsplit("/", 1)[-1]
                    source.imports[alias] = import_path
        return source

    def _collect_decls(self, source: _SourceFile, strict: bool) -> None:
        decls = source.scope.decls
        for child in source.root.named_children:
            if child.type != "type_declaration":
                continue

            specs = [c for c in child.named_children if c.type in ("type_spec", "type_alias")]
            decl_doc = _doc_comment(child)
            for spec in specs:
                name = _text(spec.child_by_field_name("name"))
                if name in decls:
                    if not strict:
                        continue
                    raise DiscoveryError(f"{name} redeclared in {source.path}")
                doc = _doc_comment(spec)
                if not doc and len(specs) == 1:
                    doc = decl_doc
                decls[name] = _TypeDecl(
                    name=name,
                    type_node=spec.child_by_field_name("type"),
                    source=source,
                    comment_lines=doc,
                    is_alias=spec.type == "type_alias",
                )

    def _imported_scope(self, import_path: str, source: _SourceFile) -> _Scope | None:
        """The loaded package behind an import, or None for an unavailable standard library package."""
        if import_path in self._scopes:
            return self._scopes[import_path]
        if import_path in self._unavailable:
            return None

        directory = self._module.locate(import_path) if self._module is not None else None
        if directory is None:
            if is_standard_library(import_path):
                self._unavailable.add(import_path)
                return None
            raise DiscoveryError(f"cannot find package {import_path} imported by {source.path}")

        logger.debug("Loading imported package %s from %s", import_path, directory)
        return self._load_scope(directory, import_path, strict=False)

    def _named_type(self, scope: _Scope, name: str) -> TypeDescriptor:
        """Resolve a named type declared in a loaded package, memoized."""
        if name in scope.named:
            return scope.named[name]

        decl = scope.decls[name]
        if decl.is_alias:
            # A true alias is the same type as its target
            placeholder = TypeDescriptor(kind=TypeKind.UNSUPPORTED, name=name, package=scope.path)
            scope.named[name] = placeholder
            resolved = self._resolve(decl.type_node, decl.source)
            scope.named[name] = resolved
            return resolved

        t = TypeDescriptor(name=name, package=scope.path, comment_lines=decl.comment_lines)
        # Register before resolving fields so self-referencing types terminate
        scope.named[name] = t

        if decl.type_node.type == "struct_type":
            t.kind = TypeKind.STRUCT
            t.members.extend(self._struct_members(decl.type_node, decl.source))
        elif decl.type_node.type == "interface_type":
            t.kind = TypeKind.INTERFACE
        else:
            target = self._resolve(decl.type_node, decl.source)
            if target.kind == TypeKind.STRUCT:
                t.kind = TypeKind.STRUCT
                t.members = target.members
            elif target.kind == TypeKind.ALIAS:
                t.kind = TypeKind.ALIAS
                t.underlying = target.underlying
            elif target.kind in (TypeKind.EXTERNAL, TypeKind.INTERFACE, TypeKind.UNSUPPORTED):
                t.kind = target.kind
            else:
                t.kind = TypeKind.ALIAS
                t.underlying = target
        return t

    def _qualified_type(self, import_path: str, name: str, source: _SourceFile) -> TypeDescriptor:
        scope = self._imported_scope(import_path, source)
        if scope is None:
            key = (import_path, name)
            if key not in self._externals:
                self._externals[key] = TypeDescriptor(kind=TypeKind.EXTERNAL, name=name, package=import_path)
            return self._externals[key]
        if name not in scope.decls:
            raise DiscoveryError(f"undefined: {import_path}.{name} (used in {source.path})")
        return self._named_type(scope, name)

    def _resolve(self, node: Node, source: _SourceFile) -> TypeDescriptor:
        """Resolve a type expression to a descriptor."""
        node_type = node.type

        if node_type == "type_identifier":
            name = _text(node)
            if name in source.scope.decls:
                return self._named_type(source.scope, name)
            if name in BUILTIN_TYPES:
                if name not in self._builtins:
                    self._builtins[name] = TypeDescriptor(kind=TypeKind.BUILTIN, name=name)
                return self._builtins[name]
            return TypeDescriptor(kind=TypeKind.UNSUPPORTED, name=name)

        if node_type == "qualified_type":
            alias = _text(node.child_by_field_name("package"))
            name = _text(node.child_by_field_name("name"))
            return self._qualified_type(source.imports.get(alias, alias), name, source)

        if node_type == "pointer_type":
            elem = self._resolve(node.named_children[0], source)
            return TypeDescriptor(kind=TypeKind.POINTER, name=_text(node), elem=elem)

        if node_type == "slice_type":
            elem = self._resolve(node.child_by_field_name("element"), source)
            return TypeDescriptor(kind=TypeKind.SLICE, name=_text(node), elem=elem)

        if node_type == "array_type":
            elem = self._resolve(node.child_by_field_name("element"), source)
            return TypeDescriptor(kind=TypeKind.ARRAY, name=_text(node), elem=elem)

        if node_type == "map_type":
            key = self._resolve(node.child_by_field_name("key"), source)
            elem = self._resolve(node.child_by_field_name("value"), source)
            return TypeDescriptor(kind=TypeKind.MAP, name=_text(node), key=key, elem=elem)

        if node_type == "parenthesized_type":
            return self._resolve(node.named_children[0], source)

        if node_type == "interface_type":
            return TypeDescriptor(kind=TypeKind.INTERFACE, name=_text(node))

        # Anonymous structs, channels, functions, generic instantiations
        return TypeDescriptor(kind=TypeKind.UNSUPPORTED, name=_text(node))

    def _struct_members(self, struct_node: Node, source: _SourceFile) -> list[FieldDescriptor]:
        members = []
        field_list = next((c for c in struct_node.named_children if c.type == "field_declaration_list"), None)
        if field_list is None:
            return members

        for decl in field_list.named_children:
            if decl.type != "field_declaration":
                continue

            type_node = decl.child_by_field_name("type")
            field_type = self._resolve(type_node, source)
            doc = _doc_comment(decl)
            names = [_text(n) for n in decl.children_by_field_name("name")]
            if names:
                for name in names:
                    members.append(FieldDescriptor(name=name, type=field_type, comment_lines=list(doc)))
                continue

            # Embedded field: named after its type
            if any(c.type == "*" for c in decl.children):
                field_type = TypeDescriptor(kind=TypeKind.POINTER, name=f"*{_text(type_node)}", elem=field_type)
            members.append(FieldDescriptor(name=_embedded_name(type_node), type=field_type, comment_lines=doc))
        return members


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _package_name(root: Node) -> str:
    for child in root.named_children:
        if child.type == "package_clause":
            return _text(child.named_children[0])
    return ""


def _import_specs(import_decl: Node) -> list[Node]:
    specs = []
    for child in import_decl.named_children:
        if child.type == "import_spec":
            specs.append(child)
        elif child.type == "import_spec_list":
            specs.extend(c for c in child.named_children if c.type == "import_spec")
    return specs


def _embedded_name(type_node: Node) -> str:
    if type_node.type == "qualified_type":
        return _text(type_node.child_by_field_name("name"))
    if type_node.type == "generic_type":
        return _text(type_node.child_by_field_name("type")).rsplit(".", 1)[-1]
    return _text(type_node)


def _first_error_point(node: Node) -> tuple[int, int]:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0], node.start_point[1]
    for child in node.children:
        if child.has_error:
            return _first_error_point(child)
    return node.start_point[0], node.start_point[1]


def _comment_lines(comment: str) -> list[str]:
    """Strip comment markers the way go/ast does for doc comments."""
    if comment.startswith("//"):
        if _DIRECTIVE_PATTERN.match(comment):
            return []
        body = comment[2:]
        if body.startswith(" "):
            body = body[1:]
        return [body.rstrip()]
    return [line.rstrip() for line in comment[2:-2].splitlines()]


def _doc_comment(node: Node) -> list[str]:
    """Collect the comment block directly above a declaration.

    Only comments on consecutive lines ending right above the node count;
    a trailing comment on the previous declaration's line does not.
    """
    blocks = []
    expected_row = node.start_point[0] - 1
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == "comment" and sibling.end_point[0] == expected_row:
        previous = sibling.prev_named_sibling
        if previous is not None and previous.type != "comment" and previous.end_point[0] == sibling.start_point[0]:
            break
        blocks.insert(0, _comment_lines(_text(sibling)))
        expected_row = sibling.start_point[0] - 1
        sibling = previous

    lines = [line for block in blocks for line in block]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines
