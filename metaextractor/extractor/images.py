"""
Page image discovery and preview image selection.
"""
from typing import List

from metaextractor.parser.html_parser import HTMLParser


def extract_page_images(document: HTMLParser) -> List[str]:
    """
    Return every non-empty ``<img src>`` in document order.

    URLs are returned verbatim; relative paths are not resolved.
    """
    sources = (img.get('src') for img in document.find_all('img'))
    return [src for src in sources if src]


def resolve_images(page_images: List[str], open_graph_image: str, default_image: str = "") -> List[str]:
    """
    Pick the preview images.

    An Open Graph image replaces the page images entirely. Otherwise the page
    images are used, falling back to ``default_image`` when the page has none.
    """
    if open_graph_image:
        return [open_graph_image]
    if not page_images and default_image:
        return [default_image]
    return list(page_images)
