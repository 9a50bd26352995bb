"""
Single-tag readers.

Each reader looks up one node in a parsed document and reads one attribute
or its text, treating absence as an empty string. The parser has already
decoded character references, so values are returned as read.
"""
from typing import Optional

from metaextractor.parser.html_parser import HTMLParser


def decoded_value(text: Optional[str]) -> str:
    """
    Normalize a parser-decoded value.

    Missing or blank values become an empty string. Character references are
    not decoded again, so ``&amp;lt;`` in the source stays ``&lt;``.
    """
    if text is None or not text.strip():
        return ""
    return text


def read_property(document: HTMLParser, property_name: str) -> str:
    """
    Read the ``content`` of the first ``<meta property="...">`` node.

    The property must match exactly. Only the first matching node is
    considered, even when it has no ``content`` attribute.

    Args:
        document: Parsed document
        property_name: Property to look up, e.g. ``og:title``

    Returns:
        str: Decoded content, or an empty string
    """
    node = document.find('meta', attrs={'property': property_name})
    return decoded_value(node.get('content')) if node else ""


def read_meta_name(document: HTMLParser, name: str) -> str:
    """Read the ``content`` of the first ``<meta name="...">`` node."""
    node = document.find('meta', attrs={'name': name})
    return decoded_value(node.get('content')) if node else ""


def read_head_title(document: HTMLParser) -> str:
    """Text of ``<title>`` when it is a direct child of ``<head>``."""
    node = document.select_one('head > title')
    return decoded_value(node.get_text()) if node else ""
