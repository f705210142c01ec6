"""Universal fallback: domain keyword counting over the whole file."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Pattern, Tuple

from ..models import AnalysisKind, FileAnalysis
from .base import CodeAnalyzer

# A feature is recorded once its pattern matches more than this many times.
MATCH_THRESHOLD = 2

_I = re.IGNORECASE

DOMAIN_KEYWORDS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("Authentication", re.compile(r"\b(?:auth\w*|login|logout|signin|signup|password|jwt|oauth|token)\b", _I)),
    ("Database Integration", re.compile(r"\b(?:database|db|sql|query|schema|table|collection|orm)\b", _I)),
    ("API Integration", re.compile(r"\b(?:api|endpoint|rest|http|request|response|fetch)\b", _I)),
    ("File Upload", re.compile(r"\b(?:upload\w*|multipart|attachment)\b", _I)),
    ("Email Services", re.compile(r"\b(?:e-?mail|smtp|mailer|inbox)\b", _I)),
    ("Payment Processing", re.compile(r"\b(?:payment|checkout|invoice|stripe|paypal|billing)\b", _I)),
    ("Machine Learning", re.compile(r"\b(?:model|train\w*|predict\w*|inference|neural|classifier)\b", _I)),
    ("Data Processing", re.compile(r"\b(?:etl|pipeline|transform\w*|dataset|dataframe|csv|parse\w*)\b", _I)),
)


def count_keywords(text: str, threshold: int = MATCH_THRESHOLD) -> List[Tuple[str, int]]:
    """Return ``(label, count)`` for every domain pattern matched above the threshold."""
    hits: List[Tuple[str, int]] = []
    for label, pattern in DOMAIN_KEYWORDS:
        count = sum(1 for _ in pattern.finditer(text))
        if count > threshold:
            hits.append((label, count))
    return hits


class KeywordAnalyzer(CodeAnalyzer):
    """Records domain features for files no other strategy understands."""

    name = "keywords"

    def __init__(self, *args, threshold: int = MATCH_THRESHOLD, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(*args, **kwargs)
        self.threshold = threshold

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        hits = count_keywords(text, self.threshold)
        base = self.build_analysis(text, filename, kind=AnalysisKind.UNSTRUCTURED)
        return replace(
            base,
            features_detected=frozenset(label for label, _ in hits),
            keyword_hits=tuple(hits),
        )


__all__ = ["DOMAIN_KEYWORDS", "KeywordAnalyzer", "MATCH_THRESHOLD", "count_keywords"]
