"""Tests for strategy selection and the parse-failure fallback."""

from __future__ import annotations

import pytest

from readmegen.analyzers import FileAnalyzer, Strategy, analyze_file, select_strategy
from readmegen.models import AnalysisKind


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("package.json", Strategy.CONFIG),
        ("services/api/Dockerfile", Strategy.CONFIG),
        ("requirements.txt", Strategy.CONFIG),
        ("src/App.jsx", Strategy.TREE_SITTER),
        ("src/index.ts", Strategy.TREE_SITTER),
        ("main.py", Strategy.PYTHON_AST),
        ("app.rb", Strategy.LIGHTWEIGHT),
        ("cmd/main.go", Strategy.LIGHTWEIGHT),
        ("components/Card.vue", Strategy.LIGHTWEIGHT),
        ("README.md", Strategy.KEYWORDS),
        ("schema.sql", Strategy.KEYWORDS),
        ("Makefile", Strategy.KEYWORDS),
    ],
)
def test_select_strategy_by_name(filename: str, expected: Strategy) -> None:
    assert select_strategy(filename) is expected


def test_malformed_python_falls_back_to_regex() -> None:
    source = "import flask\n\ndef login(user:\n    return user\n"
    analysis = FileAnalyzer().analyze(source, "auth.py")

    assert analysis.strategy == "lightweight"
    assert analysis.kind is AnalysisKind.SCRIPT
    assert [ref.source for ref in analysis.imports] == ["flask"]
    assert analysis.functions[0].name == "login"
    assert "Authentication" in analysis.features_detected


def test_malformed_javascript_falls_back_to_regex() -> None:
    source = "import React from 'react';\nexport function App( {\n  return <div>;\n"
    analysis = analyze_file(source, "src/App.jsx")

    assert analysis.strategy == "lightweight"
    assert analysis.imports[0].source == "react"
    assert "React" in analysis.frameworks_detected


def test_config_bounds_come_from_constructor() -> None:
    analyzer = FileAnalyzer(snippet_max_lines=5, config_excerpt_chars=10)
    config = analyzer.analyze("x" * 50, ".env.example")
    script = analyzer.analyze("\n".join(f"v{i} = {i}" for i in range(20)), "mod.py")

    assert config.code_excerpt == "x" * 10
    assert len(script.code_excerpt.splitlines()) == 5
