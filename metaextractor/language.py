"""
Language detection for extracted pages.
"""
from typing import Optional, Protocol

from metaextractor.parser.html_parser import parse_html

DEFAULT_LANGUAGE = "en"

# Longer values are not language tags
MAX_LANGUAGE_TAG_LENGTH = 35


class LanguageDetector(Protocol):
    """Protocol for objects that guess the language of an HTML page."""

    def get_html_page_language(self, html: Optional[str]) -> str:
        """
        Return a language code for the page.

        Implementations must not raise on malformed input.
        """
        ...


class StaticLanguageDetector:
    """Always reports the same language."""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language

    def get_html_page_language(self, html: Optional[str]) -> str:
        return self.language


class HtmlLangDetector:
    """
    Reads the language the page declares.

    Sources, in order: ``<html lang>``, then
    ``<meta http-equiv="content-language">``. Falls back to ``default``.
    """

    def __init__(self, default: str = DEFAULT_LANGUAGE):
        self.default = default

    def get_html_page_language(self, html: Optional[str]) -> str:
        document = parse_html(html)

        root = document.find('html')
        if root:
            lang = _clean_tag(root.get('lang'))
            if lang:
                return lang

        for meta in document.find_all('meta'):
            if (meta.get('http-equiv') or '').strip().lower() == 'content-language':
                # The header form allows a list; the first entry is the primary language
                lang = _clean_tag((meta.get('content') or '').split(',')[0])
                if lang:
                    return lang

        return self.default


def _clean_tag(value: Optional[str]) -> str:
    value = (value or '').strip()
    if len(value) > MAX_LANGUAGE_TAG_LENGTH:
        return ''
    return value
