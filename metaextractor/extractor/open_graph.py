"""
Open Graph tag collection.
"""
from typing import List, Tuple

from metaextractor.parser.html_parser import HTMLParser

OPEN_GRAPH_PREFIX = "og:"


def extract_open_graph_tags(document: HTMLParser) -> List[Tuple[str, str]]:
    """
    Collect every ``<meta property="og:*">`` as a ``(property, content)`` pair.

    Pairs are returned in document order. Repeated properties (several
    ``og:image`` entries, for instance) are all kept. Missing ``content``
    yields an empty value.

    Args:
        document: Parsed document

    Returns:
        List[Tuple[str, str]]: Open Graph pairs
    """
    tags = []

    for meta in document.find_all('meta'):
        key = meta.get('property') or ""
        if not key.strip() or not key.startswith(OPEN_GRAPH_PREFIX):
            continue
        tags.append((key, meta.get('content') or ""))

    return tags
