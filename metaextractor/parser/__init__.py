"""
HTML parsing package.

Exposes the document adapter used by every extraction step so that the
concrete parsing library stays behind a single seam.
"""
from metaextractor.parser.html_parser import HTMLElement, HTMLParser, parse_html

__all__ = ["HTMLElement", "HTMLParser", "parse_html"]
