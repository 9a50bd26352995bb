"""
HTML parsing abstraction layer using BeautifulSoup.

This module provides the small document API the extractors rely on:
parsing a string into a tree, selecting the first or all nodes matching a
tag/attribute predicate, reading attributes and text, and serializing nodes
back to markup. Keeping these operations behind one adapter isolates the
parsing library from the extraction logic.

The ``html.parser`` tree builder is used because it is lenient, ships with
Python and does not synthesize ``<html>``/``<head>``/``<body>`` wrappers, so
fragments round-trip as fragments. The builder is told to preserve whitespace
from the document root down, so whitespace-only strings (blank lines between
blocks) are kept verbatim instead of being squeezed to a single newline.

Attribute values and text are entity-decoded by the parser; callers get
decoded values and must not decode them again.
"""
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog
from bs4 import BeautifulSoup
from bs4.builder import HTMLParserTreeBuilder
from bs4.dammit import EntitySubstitution
from bs4.element import Doctype, NavigableString, PreformattedString, Tag
from bs4.formatter import HTMLFormatter

# Set up structured logger
logger = structlog.get_logger()


class SourceOrderFormatter(HTMLFormatter):
    """Minimal entity escaping; attributes keep their source order."""

    def attributes(self, tag: Tag) -> List[Tuple[str, Any]]:
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


FORMATTER = SourceOrderFormatter(entity_substitution=EntitySubstitution.substitute_xml)


# The document root is listed so whitespace is kept everywhere, not only in <pre>
PRESERVE_WHITESPACE_TAGS = frozenset(
    set(HTMLParserTreeBuilder.DEFAULT_PRESERVE_WHITESPACE_TAGS) | {BeautifulSoup.ROOT_TAG_NAME}
)


def _tree_builder() -> HTMLParserTreeBuilder:
    """A fresh builder per parse; builders keep parse state."""
    return HTMLParserTreeBuilder(preserve_whitespace_tags=PRESERVE_WHITESPACE_TAGS)


def _is_plain_text(node: Any) -> bool:
    """Comments, CDATA, doctypes and friends are strings too; exclude them."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class HTMLElement:
    """
    Wrapper around a BeautifulSoup node (element or string).

    Identity follows the wrapped node, so two wrappers around the same node
    compare equal and hash alike.
    """

    def __init__(self, element: Any):
        """Initialize with a BeautifulSoup node."""
        self._element = element

    @property
    def name(self) -> Optional[str]:
        """Get the tag name, or None for text, comments and other strings."""
        if isinstance(self._element, Tag):
            return self._element.name
        return None

    @property
    def is_element(self) -> bool:
        return isinstance(self._element, Tag)

    @property
    def is_text(self) -> bool:
        return _is_plain_text(self._element)

    @property
    def is_doctype(self) -> bool:
        return isinstance(self._element, Doctype)

    @property
    def attrs(self) -> Dict[str, Any]:
        """Get element attributes as a dictionary."""
        if isinstance(self._element, Tag):
            return self._element.attrs or {}
        return {}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value, joining multi-valued attributes with spaces."""
        value = self.attrs.get(key, default)
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def __getitem__(self, key: str) -> Any:
        """Get an attribute using bracket notation."""
        return self.get(key)

    @property
    def children(self) -> List['HTMLElement']:
        """Immediate element and text children, in document order."""
        if not isinstance(self._element, Tag):
            return []
        return [
            HTMLElement(child)
            for child in self._element.contents
            if isinstance(child, Tag) or _is_plain_text(child)
        ]

    @property
    def contents(self) -> List['HTMLElement']:
        """Every immediate child node, including comments and declarations."""
        if not isinstance(self._element, Tag):
            return []
        return [HTMLElement(child) for child in self._element.contents]

    def descendants(self) -> List['HTMLElement']:
        """All descendant nodes in document order (snapshot)."""
        if not isinstance(self._element, Tag):
            return []
        return [HTMLElement(node) for node in self._element.descendants]

    def find(self, name: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None,
             **kwargs) -> Optional['HTMLElement']:
        """Find the first matching descendant element."""
        if not isinstance(self._element, Tag):
            return None
        result = self._element.find(name, attrs=_merge_attrs(attrs, kwargs))
        return HTMLElement(result) if result is not None else None

    def find_all(self, name: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None,
                 **kwargs) -> List['HTMLElement']:
        """Find all matching descendant elements."""
        if not isinstance(self._element, Tag):
            return []
        results = self._element.find_all(name, attrs=_merge_attrs(attrs, kwargs))
        return [HTMLElement(elem) for elem in results]

    def get_text(self, separator: str = '', strip: bool = False) -> str:
        """Get all text content from this element and children."""
        if isinstance(self._element, Tag):
            return self._element.get_text(separator=separator, strip=strip)
        text = str(self._element)
        return text.strip() if strip else text

    def remove(self) -> None:
        """Detach this node from the tree. Detached nodes are left untouched."""
        if self._element.parent is not None:
            self._element.extract()

    def serialize(self) -> str:
        """Return the markup for this node, entity-escaping text."""
        if isinstance(self._element, NavigableString):
            return self._element.output_ready(formatter=FORMATTER)
        return self._element.decode(formatter=FORMATTER)

    def __str__(self) -> str:
        """Return HTML representation."""
        return self.serialize()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HTMLElement) and other._element is self._element

    def __hash__(self) -> int:
        return id(self._element)

    def __repr__(self) -> str:
        return f"HTMLElement({self.name or type(self._element).__name__})"


class HTMLParser:
    """
    Main HTML parser class using BeautifulSoup.

    Parsing never fails: empty or missing input yields an empty document, and
    if the tree builder raises on pathological markup an empty document is
    substituted.
    """

    def __init__(self, content: Union[str, bytes, None]):
        """
        Initialize the parser with HTML content.

        Args:
            content: HTML content as string or bytes (None is treated as empty)
        """
        if isinstance(content, bytes):
            content = content.decode('utf-8', errors='replace')

        try:
            self.soup = BeautifulSoup(content or "", builder=_tree_builder())
        except Exception as e:
            logger.warning("Error parsing HTML, using an empty document", error=str(e))
            self.soup = BeautifulSoup("", builder=_tree_builder())
        self.root = HTMLElement(self.soup)

    def find(self, name: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None,
             **kwargs) -> Optional[HTMLElement]:
        """Find the first element matching the criteria, in document order."""
        return self.root.find(name, attrs, **kwargs)

    def find_all(self, name: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None,
                 **kwargs) -> List[HTMLElement]:
        """Find all elements matching the criteria, in document order."""
        return self.root.find_all(name, attrs, **kwargs)

    def select(self, selector: str) -> List[HTMLElement]:
        """Select elements using CSS selector syntax."""
        try:
            results = self.soup.select(selector)
        except Exception as e:
            logger.debug("Error in select()", selector=selector, error=str(e))
            return []
        return [HTMLElement(elem) for elem in results]

    def select_one(self, selector: str) -> Optional[HTMLElement]:
        """Select the first element matching the CSS selector."""
        results = self.select(selector)
        return results[0] if results else None

    def get_text(self) -> str:
        """Get all text content from the document."""
        return self.root.get_text()

    def serialize(self) -> str:
        """Serialize the whole document back to markup."""
        return "".join(child.serialize() for child in self.root.contents)


def _merge_attrs(attrs: Optional[Dict[str, Any]], kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Combine an explicit attrs mapping with keyword attributes."""
    merged = dict(attrs or {})
    for key, value in kwargs.items():
        merged.setdefault(key, value)
    return merged


def parse_html(content: Union[str, bytes, None]) -> HTMLParser:
    """
    Parse HTML content and return a parser object.

    This is the main entry point for HTML parsing.

    Args:
        content: HTML content as string or bytes

    Returns:
        HTMLParser: A parser object that can be used to query the HTML
    """
    return HTMLParser(content)
