"""
Static complexity estimator.

Guesses the time and space complexity of submitted source code by pattern
matching on the raw text. Nothing is parsed or executed: the result is an
advisory signal for the results panel, not a proven bound.

The estimate is a pure function of the source text. Language selection and
program input play no part in it.
"""
from __future__ import annotations

import re

from .config import logger
from .models import ComplexityEstimate, SourceSignals


# Upper bound on distinct call targets checked for self-reference.
MAX_CALL_CANDIDATES = 512

_WHITESPACE = re.compile(r"\s+")
_CALL_TARGET = re.compile(r"\b([A-Za-z_]\w*)\s*\(")
_LOOP_OPEN = re.compile(r"\b(?:for|while|do)\s*\(")
_BRACES = re.compile(r"([{}])")

# Keywords that take a parenthesised clause but are never call targets.
_NON_CALL_KEYWORDS = frozenset({
    "if", "else", "elif", "for", "foreach", "while", "do", "switch", "case",
    "catch", "except", "return", "sizeof", "typeof", "alignof", "decltype",
    "new", "delete", "throw", "assert", "synchronized", "with", "lambda",
    "yield", "await", "and", "or", "not", "in",
})

_HALVING_PATTERNS = (
    # n = n / 2, n = n // 2
    re.compile(r"\b(\w+)\s*=\s*\1\s*//?\s*2\b"),
    # n /= 2, n //= 2
    re.compile(r"\b\w+\s*//?=\s*2\b"),
    # n = n >> 1
    re.compile(r"\b(\w+)\s*=\s*\1\s*>>\s*1\b"),
    # n >>= 1
    re.compile(r"\b\w+\s*>>=\s*1\b"),
    # while (lo < n / 2), while ((hi - lo) / 2 > 0), for (...; i < size(v) / 2; ...)
    re.compile(r"\b(?:for|while)\s*\((?:[^()]|\([^()]*\))*?/\s*2\b"),
    # f(n / 2), search(a, lo, (lo + hi) / 2)
    re.compile(
        r"\b(?!(?:if|switch|return|sizeof)\b)[A-Za-z_]\w*\s*\((?:[^()]|\([^()]*\))*?/\s*2\b"
    ),
)

_ALLOCATION_PATTERNS = (
    re.compile(r"vector"),
    re.compile(r"\bnew\b"),
)

_POLYNOMIAL_TIME = {
    0: "O(1)",
    1: "O(n)",
    2: "O(n^2)",
    3: "O(n^3)",
}


def normalize(source: str) -> str:
    """Collapse every run of whitespace into a single space."""
    return _WHITESPACE.sub(" ", source)


def call_targets(normalized: str) -> list[str]:
    """Identifiers used as call targets, in order of appearance, duplicates kept."""
    return [
        name for name in _CALL_TARGET.findall(normalized)
        if name not in _NON_CALL_KEYWORDS
    ]


def is_recursive(source: str, normalized: str | None = None) -> bool:
    """
    Report whether any call target is called more than once.

    This is a syntactic proxy for recursion: a function that calls itself
    shows up at its definition and at the call site. A helper invoked from
    two places is reported the same way.
    """
    if normalized is None:
        normalized = normalize(source)

    candidates = list(dict.fromkeys(call_targets(normalized)))
    for name in candidates[:MAX_CALL_CANDIDATES]:
        pattern = re.compile(rf"\b{re.escape(name)}\s*\(")
        occurrences = 0
        for _ in pattern.finditer(source):
            occurrences += 1
            if occurrences > 1:
                return True
    return False


def has_halving_pattern(source: str) -> bool:
    """Look for a problem size being halved (n /= 2, n >>= 1, n / 2 in a loop bound or call)."""
    return any(pattern.search(source) for pattern in _HALVING_PATTERNS)


def max_loop_depth(normalized: str) -> int:
    """
    Deepest loop nesting, tracked by brace level.

    Every segment that opens a loop raises the current depth and every
    closing brace lowers it, never below zero. Braceless loop bodies are
    not seen; unrelated blocks can inflate the count.
    """
    depth = 0
    deepest = 0
    for token in _BRACES.split(normalized):
        if token == "}":
            depth = max(depth - 1, 0)
        elif _LOOP_OPEN.search(token):
            depth += 1
            deepest = max(deepest, depth)
    return deepest


def scan(source: str) -> SourceSignals:
    """Extract recursion, halving and loop-depth signals from source text."""
    normalized = normalize(source)
    return SourceSignals(
        recursive=is_recursive(source, normalized),
        halving=has_halving_pattern(source),
        max_loop_depth=max_loop_depth(normalized),
    )


def classify_time(signals: SourceSignals) -> str:
    """Map scan signals to a time complexity label."""
    depth = signals.max_loop_depth

    if signals.recursive:
        if signals.halving:
            return "O(log n)"
        if depth > 0:
            return "O(n · 2^n)"
        return "O(2^n)"

    if signals.halving:
        return "O(n log n)" if depth > 1 else "O(log n)"

    return _POLYNOMIAL_TIME.get(depth, f"O(n^{depth})")


def classify_space(source: str) -> str:
    """O(n) when the source allocates a container or uses new, else O(1)."""
    if any(pattern.search(source) for pattern in _ALLOCATION_PATTERNS):
        return "O(n)"
    return "O(1)"


def estimate(source: str) -> ComplexityEstimate:
    """
    Estimate time and space complexity of source code.

    Args:
        source: Program text as typed in the editor (any language)

    Returns:
        ComplexityEstimate; O(1)/O(1) when nothing is recognised
    """
    if not source:
        return ComplexityEstimate(time="O(1)", space="O(1)")

    signals = scan(source)
    result = ComplexityEstimate(
        time=classify_time(signals),
        space=classify_space(source),
    )
    logger.debug(
        "Estimated %s / %s (recursive=%s, halving=%s, depth=%d)",
        result.time,
        result.space,
        signals.recursive,
        signals.halving,
        signals.max_loop_depth,
    )
    return result
