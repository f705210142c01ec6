"""Tree-sitter powered structural analysis for JavaScript and TypeScript."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Optional

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from ..models import ApiRoute, ClassInfo, FileAnalysis, FunctionInfo, ImportRef
from .base import CodeAnalyzer, ParseFailure, dedupe_routes, is_route_call
from .tables import ROUTE_METHODS

JS_LANGUAGE = Language(tsjs.language())
TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

_LANGUAGE_BY_SUFFIX: Dict[str, Language] = {
    ".js": JS_LANGUAGE,
    ".jsx": JS_LANGUAGE,
    ".mjs": JS_LANGUAGE,
    ".cjs": JS_LANGUAGE,
    ".ts": TS_LANGUAGE,
    ".tsx": TSX_LANGUAGE,
}

SUPPORTED_SUFFIXES = frozenset(_LANGUAGE_BY_SUFFIX)

_FUNCTION_VALUES = {"arrow_function", "function_expression", "function", "generator_function"}
_CLASS_TYPES = {"class_declaration", "abstract_class_declaration"}


class TreeSitterAnalyzer(CodeAnalyzer):
    """Walks a tree-sitter syntax tree for imports, functions, classes and routes."""

    name = "tree-sitter"

    def __init__(self, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(*args, **kwargs)
        self._parsers: Dict[str, Parser] = {}

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        suffix = PurePosixPath(filename).suffix.lower()
        source = text.encode("utf-8")
        tree = self._get_parser(suffix).parse(source)
        root = tree.root_node
        if root.has_error:
            raise ParseFailure(f"{filename}: syntax errors in source")

        imports: List[ImportRef] = []
        classes: List[ClassInfo] = []
        routes: List[ApiRoute] = []
        for node in _walk(root):
            if node.type == "import_statement":
                imports.append(_es_import(node))
            elif node.type == "call_expression":
                required = _require_import(node)
                if required is not None:
                    imports.append(required)
                    continue
                route = _route_from_call(node, filename)
                if route is not None:
                    routes.append(route)
            elif node.type in _CLASS_TYPES:
                info = _class_info(node)
                if info is not None:
                    classes.append(info)

        functions = list(_top_level_functions(root))
        return self.build_analysis(
            text,
            filename,
            imports=imports,
            functions=functions,
            classes=classes,
            routes=dedupe_routes(routes),
        )

    def _get_parser(self, suffix: str) -> Parser:
        parser = self._parsers.get(suffix)
        if parser is None:
            parser = Parser(_LANGUAGE_BY_SUFFIX.get(suffix, JS_LANGUAGE))
            self._parsers[suffix] = parser
        return parser


def _walk(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def _string_value(node: Optional[Node]) -> Optional[str]:
    """Return the literal value of a string node, or None when it is computed."""
    if node is None:
        return None
    if node.type == "string":
        return _text(node)[1:-1]
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.children):
            return None
        return _text(node)[1:-1]
    return None


def _es_import(node: Node) -> ImportRef:
    source = _string_value(node.child_by_field_name("source")) or ""
    bound: List[str] = []
    for child in node.named_children:
        if child.type != "import_clause":
            continue
        for part in child.named_children:
            if part.type == "identifier":
                bound.append(_text(part))
            elif part.type == "namespace_import":
                bound.extend(_text(n) for n in part.named_children if n.type == "identifier")
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    alias = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                    bound.append(_text(alias))
    return ImportRef(source=source, bound_names=tuple(name for name in bound if name))


def _require_import(node: Node) -> Optional[ImportRef]:
    function = node.child_by_field_name("function")
    if function is None or function.type not in {"identifier", "import"}:
        return None
    if function.type == "identifier" and _text(function) != "require":
        return None
    arguments = node.child_by_field_name("arguments")
    first = arguments.named_children[0] if arguments is not None and arguments.named_children else None
    source = _string_value(first)
    if source is None:
        return None

    bound: List[str] = []
    parent = node.parent
    if parent is not None and parent.type == "await_expression":
        parent = parent.parent
    if parent is not None and parent.type == "variable_declarator":
        target = parent.child_by_field_name("name")
        if target is not None and target.type == "identifier":
            bound.append(_text(target))
        elif target is not None and target.type == "object_pattern":
            for prop in target.named_children:
                if prop.type == "shorthand_property_identifier_pattern":
                    bound.append(_text(prop))
                elif prop.type == "pair_pattern":
                    bound.append(_text(prop.child_by_field_name("value")))
    return ImportRef(source=source, bound_names=tuple(bound))


def _route_from_call(node: Node, filename: str) -> Optional[ApiRoute]:
    function = node.child_by_field_name("function")
    if function is None or function.type != "member_expression":
        return None
    method = _text(function.child_by_field_name("property")).lower()
    if method not in ROUTE_METHODS:
        return None
    receiver = _text(function.child_by_field_name("object"))
    arguments = node.child_by_field_name("arguments")
    first = arguments.named_children[0] if arguments is not None and arguments.named_children else None
    path = _string_value(first)
    if not is_route_call(receiver, path):
        return None
    verb = "ALL" if method in {"all", "route", "api_route"} else method.upper()
    return ApiRoute(method=verb, path=path if path is not None else "dynamic", file=filename)


def _class_info(node: Node) -> Optional[ClassInfo]:
    name = _text(node.child_by_field_name("name"))
    if not name:
        return None
    methods: List[str] = []
    body = node.child_by_field_name("body")
    if body is not None:
        for member in body.named_children:
            if member.type != "method_definition":
                continue
            if any(child.type == "static" for child in member.children):
                continue
            method_name = _text(member.child_by_field_name("name"))
            if method_name:
                methods.append(method_name)
    return ClassInfo(name=name, methods=tuple(methods))


def _top_level_functions(root: Node) -> Iterator[FunctionInfo]:
    for node in root.named_children:
        if node.type == "export_statement":
            node = node.child_by_field_name("declaration") or node.child_by_field_name("value") or node
        if node.type in {"function_declaration", "generator_function_declaration"}:
            name = _text(node.child_by_field_name("name"))
            if name:
                yield FunctionInfo(name=name, parameters=_parameters(node), is_async=_is_async(node))
        elif node.type in {"lexical_declaration", "variable_declaration"}:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                value = declarator.child_by_field_name("value")
                if value is None or value.type not in _FUNCTION_VALUES:
                    continue
                name = _text(declarator.child_by_field_name("name"))
                if name:
                    yield FunctionInfo(
                        name=name,
                        parameters=_parameters(value),
                        is_async=_is_async(value),
                    )


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def _parameters(node: Node) -> tuple[str, ...]:
    single = node.child_by_field_name("parameter")
    if single is not None:
        return (_param_name(single),)
    params = node.child_by_field_name("parameters")
    if params is None:
        return ()
    return tuple(_param_name(child) for child in params.named_children if child.type != "comment")


def _param_name(node: Node) -> str:
    if node.type == "rest_pattern":
        inner = node.named_children[0] if node.named_children else None
        return "..." + (_param_name(inner) if inner is not None else "")
    if node.type in {"identifier", "shorthand_property_identifier_pattern"}:
        return _text(node)
    for field in ("pattern", "left"):
        child = node.child_by_field_name(field)
        if child is not None:
            return _param_name(child)
    return " ".join(_text(node).split())


__all__ = ["SUPPORTED_SUFFIXES", "TreeSitterAnalyzer"]
