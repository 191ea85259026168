"""Core module for complexity estimation and remote code runs."""

from .models import ComplexityEstimate, ExecutionResult, Language, SourceSignals
from .estimator import estimate
from .languages import LANGUAGES, DEFAULT_LANGUAGE_ID, UnsupportedLanguageError

__all__ = [
    "ComplexityEstimate",
    "ExecutionResult",
    "Language",
    "SourceSignals",
    "estimate",
    "LANGUAGES",
    "DEFAULT_LANGUAGE_ID",
    "UnsupportedLanguageError",
]
