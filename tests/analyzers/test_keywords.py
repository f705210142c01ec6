"""Tests for the universal keyword fallback."""

from __future__ import annotations

from readmegen.analyzers.keywords import KeywordAnalyzer, count_keywords
from readmegen.models import AnalysisKind


def test_counts_above_threshold_only() -> None:
    text = "login here\nlogin there\npassword reset\nstripe payment\n"
    hits = dict(count_keywords(text))

    assert hits == {"Authentication": 3}


def test_analysis_records_features_and_hits() -> None:
    text = "\n".join(
        [
            "SELECT * FROM users; -- database query",
            "upload the file; upload again; upload done",
            "send email via smtp, then email again",
        ]
    )
    analysis = KeywordAnalyzer().analyze(text, "notes/schema.sql")

    assert analysis.kind is AnalysisKind.UNSTRUCTURED
    assert analysis.strategy == "keywords"
    assert analysis.language == "SQL"
    assert analysis.features_detected == {"File Upload", "Email Services"}
    assert ("File Upload", 3) in analysis.keyword_hits
    assert analysis.code_excerpt == text
    assert analysis.imports == ()
    assert analysis.frameworks_detected == frozenset()
