"""Regex-driven analysis for languages without a structural parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Pattern, Tuple

from ..models import ApiRoute, ClassInfo, FileAnalysis, FunctionInfo, ImportRef
from .base import CodeAnalyzer, dedupe_routes, is_route_call

_M = re.MULTILINE


@dataclass(frozen=True)
class SyntaxPatterns:
    """Line-anchored patterns for one language family.

    Named groups: imports use ``source`` and optional ``names``; functions
    use ``name``, optional ``params`` and ``async``; classes use ``name``.
    """

    imports: Tuple[Pattern[str], ...]
    functions: Tuple[Pattern[str], ...]
    classes: Tuple[Pattern[str], ...]
    import_blocks: Tuple[Pattern[str], ...] = ()


_PYTHON = SyntaxPatterns(
    imports=(
        re.compile(r"^[ \t]*import\s+(?P<source>[\w.]+)(?:\s+as\s+(?P<names>\w+))?", _M),
        re.compile(r"^[ \t]*from\s+(?P<source>[\w.]+)\s+import\s+\(?(?P<names>[\w ,*]+)", _M),
    ),
    functions=(
        re.compile(r"^(?P<async>async\s+)?def\s+(?P<name>\w+)\s*\((?P<params>[^)]*)", _M),
    ),
    classes=(re.compile(r"^class\s+(?P<name>\w+)", _M),),
)

_JAVASCRIPT = SyntaxPatterns(
    imports=(
        re.compile(
            r"^[ \t]*import\s+(?:(?P<names>[^'\"]+?)\s+from\s+)?['\"](?P<source>[^'\"]+)['\"]", _M
        ),
        re.compile(
            r"^[ \t]*(?:const|let|var)\s+(?P<names>\{[^}]*\}|\w+)\s*=\s*require\(\s*['\"](?P<source>[^'\"]+)['\"]\s*\)",
            _M,
        ),
    ),
    functions=(
        re.compile(
            r"^(?:export\s+(?:default\s+)?)?(?P<async>async\s+)?function\s*\*?\s*(?P<name>\w+)\s*\((?P<params>[^)]*)\)",
            _M,
        ),
        re.compile(
            r"^(?:export\s+)?(?:const|let|var)\s+(?P<name>\w+)\s*=\s*(?P<async>async\s+)?(?:function\s*)?\((?P<params>[^)]*)\)\s*(?:=>|\{)",
            _M,
        ),
    ),
    classes=(re.compile(r"^[ \t]*(?:export\s+(?:default\s+)?)?class\s+(?P<name>\w+)", _M),),
)

_RUBY = SyntaxPatterns(
    imports=(re.compile(r"^[ \t]*require(?:_relative)?\s+['\"](?P<source>[^'\"]+)['\"]", _M),),
    functions=(
        re.compile(r"^[ \t]*def\s+(?:self\.)?(?P<name>[\w?!]+)\s*(?:\((?P<params>[^)]*)\))?", _M),
    ),
    classes=(re.compile(r"^[ \t]*(?:class|module)\s+(?P<name>[\w:]+)", _M),),
)

_GO = SyntaxPatterns(
    imports=(
        re.compile(r"^[ \t]*import\s+(?:(?P<names>\w+)\s+)?\"(?P<source>[^\"]+)\"", _M),
    ),
    functions=(
        re.compile(r"^func\s+(?:\([^)]*\)\s*)?(?P<name>\w+)\s*\((?P<params>[^)]*)\)", _M),
    ),
    classes=(re.compile(r"^type\s+(?P<name>\w+)\s+(?:struct|interface)\b", _M),),
    import_blocks=(re.compile(r"^import\s*\((?P<block>[^)]*)\)", _M),),
)

_PHP = SyntaxPatterns(
    imports=(
        re.compile(r"^[ \t]*use\s+(?P<source>[\w\\]+)", _M),
        re.compile(r"^[ \t]*(?:require|include)(?:_once)?\s*\(?\s*['\"](?P<source>[^'\"]+)['\"]", _M),
    ),
    functions=(
        re.compile(
            r"^[ \t]*(?:(?:public|private|protected|static|final|abstract)\s+)*function\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)",
            _M,
        ),
    ),
    classes=(re.compile(r"^[ \t]*(?:(?:abstract|final)\s+)?(?:class|trait|interface)\s+(?P<name>\w+)", _M),),
)

_JVM = SyntaxPatterns(
    imports=(re.compile(r"^[ \t]*import\s+(?:static\s+)?(?P<source>[\w.*]+)", _M),),
    functions=(
        re.compile(
            r"^[ \t]*(?:(?:public|private|protected|static|final|synchronized|abstract|native|default)[ \t]+)+"
            # Optional type parameters and return type, e.g. `<T> Map<K, V>[]`.
            r"(?:<[^<>\n]*>[ \t]+)?(?:[\w.?]+(?:<[^\n(){};=]*>)?(?:\[\])*[ \t]+)?"
            r"(?P<name>\w+)[ \t]*\((?P<params>[^)]*)\)[ \t]*(?:throws[ \t]+[\w., \t]+)?\{",
            _M,
        ),
        re.compile(r"^[ \t]*(?:\w+[ \t]+)*fun[ \t]+(?P<name>\w+)\s*\((?P<params>[^)]*)\)", _M),
    ),
    classes=(
        re.compile(
            r"^[ \t]*(?:(?:public|private|protected|abstract|final|data|open|sealed)\s+)*(?:class|interface|enum|object)\s+(?P<name>\w+)",
            _M,
        ),
    ),
)

_RUST = SyntaxPatterns(
    imports=(re.compile(r"^[ \t]*use\s+(?P<source>[\w:]+)", _M),),
    functions=(
        re.compile(
            r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?(?P<async>async\s+)?fn\s+(?P<name>\w+)\s*(?:<[^>]*>)?\((?P<params>[^)]*)\)",
            _M,
        ),
    ),
    classes=(re.compile(r"^[ \t]*(?:pub\s+)?(?:struct|enum|trait)\s+(?P<name>\w+)", _M),),
)

_SHELL = SyntaxPatterns(
    imports=(re.compile(r"^[ \t]*(?:source|\.)\s+(?P<source>\S+)", _M),),
    functions=(re.compile(r"^[ \t]*(?:function\s+)?(?P<name>[\w-]+)\s*\(\)\s*\{?", _M),),
    classes=(),
)

PATTERNS_BY_SUFFIX: Dict[str, SyntaxPatterns] = {
    ".py": _PYTHON,
    ".js": _JAVASCRIPT,
    ".jsx": _JAVASCRIPT,
    ".mjs": _JAVASCRIPT,
    ".cjs": _JAVASCRIPT,
    ".ts": _JAVASCRIPT,
    ".tsx": _JAVASCRIPT,
    ".vue": _JAVASCRIPT,
    ".svelte": _JAVASCRIPT,
    ".rb": _RUBY,
    ".go": _GO,
    ".php": _PHP,
    ".java": _JVM,
    ".kt": _JVM,
    ".scala": _JVM,
    ".rs": _RUST,
    ".sh": _SHELL,
    ".bash": _SHELL,
}

SUPPORTED_SUFFIXES = frozenset(PATTERNS_BY_SUFFIX)

_BLOCK_IMPORT = re.compile(r"^[ \t]*(?:(?P<names>\w+)\s+)?\"(?P<source>[^\"]+)\"", _M)

_ROUTE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(
        r"(?P<receiver>[\w.]+)\.(?P<method>get|post|put|patch|delete|all|route)\(\s*['\"`](?P<path>[^'\"`]*)['\"`]",
        re.IGNORECASE,
    ),
    # Sinatra / Rails style DSL: get '/path' do
    re.compile(r"^[ \t]*(?P<method>get|post|put|patch|delete)\s+['\"](?P<path>/[^'\"]*)['\"]", _M),
)


class LightweightAnalyzer(CodeAnalyzer):
    """Recovers imports, signatures and class headers with regular expressions."""

    name = "lightweight"

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        patterns = PATTERNS_BY_SUFFIX.get(PurePosixPath(filename).suffix.lower(), _JAVASCRIPT)
        return self.build_analysis(
            text,
            filename,
            imports=_imports(text, patterns),
            functions=_functions(text, patterns),
            classes=[
                ClassInfo(name=match.group("name"))
                for pattern in patterns.classes
                for match in pattern.finditer(text)
            ],
            routes=_routes(text, filename),
        )


def _imports(text: str, patterns: SyntaxPatterns) -> List[ImportRef]:
    found: List[Tuple[int, ImportRef]] = []
    for pattern in patterns.imports:
        for match in pattern.finditer(text):
            names = _group(match, "names")
            found.append(
                (
                    match.start(),
                    ImportRef(source=match.group("source"), bound_names=_split_names(names)),
                )
            )
    for pattern in patterns.import_blocks:
        for block in pattern.finditer(text):
            offset = block.start("block")
            for match in _BLOCK_IMPORT.finditer(block.group("block")):
                names = _group(match, "names")
                found.append(
                    (
                        offset + match.start(),
                        ImportRef(source=match.group("source"), bound_names=_split_names(names)),
                    )
                )
    found.sort(key=lambda item: item[0])
    return [ref for _, ref in found]


def _functions(text: str, patterns: SyntaxPatterns) -> List[FunctionInfo]:
    found: List[Tuple[int, FunctionInfo]] = []
    for pattern in patterns.functions:
        for match in pattern.finditer(text):
            params = _group(match, "params") or ""
            found.append(
                (
                    match.start(),
                    FunctionInfo(
                        name=match.group("name"),
                        parameters=tuple(p.strip() for p in params.split(",") if p.strip()),
                        is_async=bool(_group(match, "async")),
                    ),
                )
            )
    found.sort(key=lambda item: item[0])
    return [info for _, info in found]


def _routes(text: str, filename: str) -> List[ApiRoute]:
    routes: List[ApiRoute] = []
    for pattern in _ROUTE_PATTERNS:
        for match in pattern.finditer(text):
            receiver = _group(match, "receiver") or "app"
            path = match.group("path")
            if not is_route_call(receiver, path):
                continue
            method = match.group("method").lower()
            verb = "ALL" if method in {"all", "route"} else method.upper()
            routes.append(ApiRoute(method=verb, path=path, file=filename))
    return dedupe_routes(routes)


def _group(match: re.Match[str], name: str) -> Optional[str]:
    if name not in match.re.groupindex:
        return None
    return match.group(name)


def _split_names(names: Optional[str]) -> Tuple[str, ...]:
    if not names:
        return ()
    cleaned = re.sub(r"[{}()*]", " ", names)
    parts = []
    for chunk in cleaned.split(","):
        words = chunk.split()
        if not words:
            continue
        # `a as b` and `a: b` bind the last name.
        parts.append(words[-1].rstrip(":"))
    return tuple(part for part in parts if part and part != "as")


__all__ = ["LightweightAnalyzer", "PATTERNS_BY_SUFFIX", "SUPPORTED_SUFFIXES", "SyntaxPatterns"]
