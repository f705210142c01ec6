"""Structural analysis of Python sources via the stdlib ast module."""

from __future__ import annotations

import ast
from typing import List, Optional

from ..models import ApiRoute, ClassInfo, FileAnalysis, FunctionInfo, ImportRef
from .base import CodeAnalyzer, ParseFailure, dedupe_routes, is_route_call
from .tables import ROUTE_METHODS


class PythonAstAnalyzer(CodeAnalyzer):
    """Collects imports, top-level functions, classes and route registrations."""

    name = "python-ast"

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        try:
            tree = ast.parse(text, filename=filename)
        except (SyntaxError, ValueError) as exc:
            raise ParseFailure(f"{filename}: {exc}") from exc

        imports: List[ImportRef] = []
        routes: List[ApiRoute] = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    bound = alias.asname or alias.name.split(".")[0]
                    imports.append(ImportRef(source=alias.name, bound_names=(bound,)))
            elif isinstance(node, ast.ImportFrom):
                source = "." * node.level + (node.module or "")
                bound = tuple(alias.asname or alias.name for alias in node.names)
                imports.append(ImportRef(source=source, bound_names=bound))
            elif isinstance(node, ast.Call):
                route = _route_from_call(node, filename)
                if route is not None:
                    routes.append(route)

        functions: List[FunctionInfo] = []
        classes: List[ClassInfo] = []
        for node in tree.body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                functions.append(_function_info(node))
            elif isinstance(node, ast.ClassDef):
                methods = tuple(
                    child.name
                    for child in node.body
                    if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef))
                )
                classes.append(ClassInfo(name=node.name, methods=methods))

        return self.build_analysis(
            text,
            filename,
            imports=imports,
            functions=functions,
            classes=classes,
            routes=dedupe_routes(routes),
        )


def _function_info(node: ast.FunctionDef | ast.AsyncFunctionDef) -> FunctionInfo:
    args = node.args
    params = [arg.arg for arg in args.posonlyargs + args.args]
    if args.vararg is not None:
        params.append(f"*{args.vararg.arg}")
    params.extend(arg.arg for arg in args.kwonlyargs)
    if args.kwarg is not None:
        params.append(f"**{args.kwarg.arg}")
    return FunctionInfo(
        name=node.name,
        parameters=tuple(params),
        is_async=isinstance(node, ast.AsyncFunctionDef),
    )


def _route_from_call(node: ast.Call, filename: str) -> Optional[ApiRoute]:
    func = node.func
    if not isinstance(func, ast.Attribute) or func.attr.lower() not in ROUTE_METHODS:
        return None
    receiver = _dotted_name(func.value)
    path = _literal_path(node)
    if not is_route_call(receiver, path):
        return None
    return ApiRoute(
        method=_http_method(func.attr, node),
        path=path if path is not None else "dynamic",
        file=filename,
    )


def _literal_path(node: ast.Call) -> Optional[str]:
    if node.args:
        first = node.args[0]
        if isinstance(first, ast.Constant) and isinstance(first.value, str):
            return first.value
        return None
    for keyword in node.keywords:
        if keyword.arg in {"path", "rule"} and isinstance(keyword.value, ast.Constant):
            if isinstance(keyword.value.value, str):
                return keyword.value.value
    return None


def _http_method(attr: str, node: ast.Call) -> str:
    lowered = attr.lower()
    if lowered not in {"route", "api_route"}:
        return lowered.upper()
    for keyword in node.keywords:
        if keyword.arg == "methods" and isinstance(keyword.value, (ast.List, ast.Tuple)):
            verbs = [
                element.value.upper()
                for element in keyword.value.elts
                if isinstance(element, ast.Constant) and isinstance(element.value, str)
            ]
            if verbs:
                return ",".join(verbs)
    return "GET"


def _dotted_name(node: ast.AST) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        prefix = _dotted_name(node.value)
        return f"{prefix}.{node.attr}" if prefix else node.attr
    return ""


__all__ = ["PythonAstAnalyzer"]
