"""
Languages offered by the editor and their Judge0 ids.

The table is fixed at import time and read-only afterwards.
"""
from __future__ import annotations

from types import MappingProxyType

from .models import Language


class UnsupportedLanguageError(ValueError):
    """Raised for a language id that is not in the table."""

    def __init__(self, language_id: int):
        self.language_id = language_id
        super().__init__(f"Unsupported language id: {language_id}")


DEFAULT_LANGUAGE_ID = 54
FALLBACK_EDITOR_MODE = "javascript"

LANGUAGES: tuple[Language, ...] = (
    Language(id=54, name="C++ (GCC 9.2.0)", editor_mode="cpp"),
    Language(id=50, name="C (GCC 9.2.0)", editor_mode="c"),
    Language(id=62, name="Java (OpenJDK 13.0.1)", editor_mode="java"),
    Language(id=71, name="Python (3.8.1)", editor_mode="python"),
    Language(id=63, name="JavaScript (Node.js 12.14.0)", editor_mode="javascript"),
)

LANGUAGES_BY_ID = MappingProxyType({language.id: language for language in LANGUAGES})


def get_language(language_id: int) -> Language:
    try:
        return LANGUAGES_BY_ID[language_id]
    except KeyError:
        raise UnsupportedLanguageError(language_id) from None


def editor_mode(language_id: int) -> str:
    """Editor syntax mode for a language id; unknown ids get plain JavaScript."""
    language = LANGUAGES_BY_ID.get(language_id)
    return language.editor_mode if language else FALLBACK_EDITOR_MODE
