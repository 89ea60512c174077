"""
Fuzzy matching of property names.

Names extracted from check-in sheets rarely match the catalogue exactly
("Apt. São João 2" vs "Apartamento Sao Joao 2"), so several similarity
measures are combined into one weighted score in ``[0, 1]``.
"""

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from rapidfuzz import fuzz
from rapidfuzz.distance import JaroWinkler, Levenshtein

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6

# Abbreviations common in Portuguese property names, expanded before comparison.
ABBREVIATIONS: Dict[str, str] = {
    "apt": "apartamento",
    "apto": "apartamento",
    "ed": "edificio",
    "edif": "edificio",
    "prd": "predio",
    "r": "rua",
    "av": "avenida",
    "pc": "praca",
    "lg": "largo",
    "n": "numero",
    "st": "santo",
    "sta": "santa",
    "wc": "casa de banho",
    "qrt": "quarto",
    "slv": "sala de visitas",
    "slj": "sala de jantar",
    "coz": "cozinha",
}

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


@dataclass
class MatchWeights:
    levenshtein: float = 0.25
    jaro_winkler: float = 0.30
    ngram: float = 0.25
    exact: float = 0.15
    partial: float = 0.05


PROPERTY_WEIGHTS = MatchWeights(
    levenshtein=0.20, jaro_winkler=0.35, ngram=0.25, exact=0.15, partial=0.05
)


@dataclass
class MatchResult:
    score: float
    algorithm: str


@dataclass
class CombinedMatchResult:
    overall_score: float
    best_match: MatchResult
    all_results: List[MatchResult] = field(default_factory=list)

    @property
    def is_high_confidence(self) -> bool:
        return self.overall_score >= HIGH_CONFIDENCE

    @property
    def is_medium_confidence(self) -> bool:
        return self.overall_score >= MEDIUM_CONFIDENCE


@dataclass
class CandidateMatch:
    candidate: str
    index: int
    result: CombinedMatchResult


def remove_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def expand_abbreviations(text: str) -> str:
    words = []
    for word in text.split():
        key = _NON_WORD.sub("", word)
        words.append(ABBREVIATIONS.get(key, word))
    return " ".join(words)


def normalize_text(text: str) -> str:
    """Lowercase, strip accents, expand abbreviations and collapse punctuation."""
    normalized = remove_accents(text.lower())
    normalized = expand_abbreviations(normalized)
    normalized = _NON_WORD.sub(" ", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()


def levenshtein_similarity(query: str, target: str) -> float:
    """1 - edit distance / length of the longer string."""
    if query == target:
        return 1.0
    return Levenshtein.normalized_similarity(query, target)


def jaro_winkler_similarity(query: str, target: str, scaling: float = 0.1) -> float:
    # rapidfuzz applies the prefix boost only above a Jaro score of 0.7
    if query == target:
        return 1.0
    return JaroWinkler.normalized_similarity(query, target, prefix_weight=scaling)


def _ngrams(text: str, n: int) -> List[str]:
    if len(text) < n:
        return [text]
    return [text[i : i + n] for i in range(len(text) - n + 1)]


def ngram_similarity(query: str, target: str, n: int = 2) -> float:
    """Mean of Jaccard similarity and frequency-weighted overlap."""
    if query == target:
        return 1.0

    query_counts = Counter(_ngrams(query, n))
    target_counts = Counter(_ngrams(target, n))

    intersection = set(query_counts) & set(target_counts)
    union = set(query_counts) | set(target_counts)
    if not union:
        return 0.0
    jaccard = len(intersection) / len(union)

    overlap = sum(min(query_counts[g], target_counts[g]) for g in intersection)
    weight = sum(max(query_counts[g], target_counts[g]) for g in intersection)
    weighted = overlap / weight if weight else 0.0

    return (jaccard + weighted) / 2


def exact_similarity(query: str, target: str) -> float:
    return 1.0 if query == target else 0.0


def partial_similarity(query: str, target: str) -> float:
    """Best alignment of the shorter string inside the longer one."""
    if query == target:
        return 1.0
    return fuzz.partial_ratio(query, target) / 100


def combined_match(
    query: str,
    target: str,
    weights: Optional[MatchWeights] = None,
    min_length: int = 2,
) -> CombinedMatchResult:
    """Score two names with every algorithm and blend them by weight."""
    weights = weights or MatchWeights()

    if len(query) < min_length or len(target) < min_length:
        empty = MatchResult(0.0, "combined")
        return CombinedMatchResult(0.0, empty, [empty])

    q = normalize_text(query)
    t = normalize_text(target)

    weighted_results = [
        (MatchResult(exact_similarity(q, t), "exact"), weights.exact),
        (MatchResult(levenshtein_similarity(q, t), "levenshtein"), weights.levenshtein),
        (
            MatchResult(jaro_winkler_similarity(q, t), "jaro-winkler"),
            weights.jaro_winkler,
        ),
        (MatchResult(ngram_similarity(q, t, 2), "2-gram"), weights.ngram / 2),
        (MatchResult(partial_similarity(q, t), "partial"), weights.partial),
    ]
    if min(len(query), len(target)) >= 3:
        weighted_results.append(
            (MatchResult(ngram_similarity(q, t, 3), "3-gram"), weights.ngram / 2)
        )

    total_weight = sum(weight for _, weight in weighted_results)
    score = sum(result.score * weight for result, weight in weighted_results)
    overall = score / total_weight if total_weight else 0.0

    results = [result for result, _ in weighted_results]
    best = max(results, key=lambda r: r.score)
    return CombinedMatchResult(max(0.0, min(1.0, overall)), best, results)


def find_best_matches(
    query: str,
    candidates: Sequence[str],
    max_results: int = 5,
    weights: Optional[MatchWeights] = None,
    min_length: int = 2,
) -> List[CandidateMatch]:
    matches = [
        CandidateMatch(
            candidate, index, combined_match(query, candidate, weights, min_length)
        )
        for index, candidate in enumerate(candidates)
    ]
    matches.sort(key=lambda m: m.result.overall_score, reverse=True)
    return matches[:max_results]


def match_property_names(query: str, candidates: Sequence[str]) -> List[CandidateMatch]:
    """Rank catalogue property names against a name read from a document."""
    return find_best_matches(
        query, candidates, max_results=10, weights=PROPERTY_WEIGHTS, min_length=1
    )
