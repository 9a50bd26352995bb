"""
Keyword and description extraction from ``<meta name=...>`` tags.
"""
from typing import List

from metaextractor.extractor.readers import read_meta_name
from metaextractor.parser.html_parser import HTMLParser


def extract_keywords(document: HTMLParser) -> List[str]:
    """
    Extract keywords from ``<meta name="keywords">``.

    The content is split on commas; pieces are trimmed and empty ones
    dropped. Order is kept and duplicates are not removed.

    Args:
        document: Parsed document

    Returns:
        List[str]: Keywords in source order
    """
    value = read_meta_name(document, 'keywords')
    if not value.strip():
        return []
    return [piece.strip() for piece in value.split(',') if piece.strip()]


def extract_description(document: HTMLParser) -> str:
    """Extract the ``<meta name="description">`` content."""
    return read_meta_name(document, 'description')
