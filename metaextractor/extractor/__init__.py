"""
Extractor package for the metadata extractor.

This package turns parsed HTML into the pieces of a page preview and
combines them into a single Metadata record.

The main components are:
- Single-tag readers for meta properties, meta names and the page title
- Keyword and description extraction
- Open Graph tag collection
- Page image discovery
- Content sanitizer that flattens markup to a few inline tags
- The Extractor that runs the fallback chain
"""
from metaextractor.extractor.images import extract_page_images, resolve_images
from metaextractor.extractor.keywords import extract_description, extract_keywords
from metaextractor.extractor.metadata import Extractor, extract_metadata
from metaextractor.extractor.open_graph import extract_open_graph_tags
from metaextractor.extractor.readers import (
    decoded_value,
    read_head_title,
    read_meta_name,
    read_property,
)
from metaextractor.extractor.sanitizer import flatten_text, sanitize_content

__all__ = [
    "Extractor",
    "extract_metadata",
    "extract_keywords",
    "extract_description",
    "extract_open_graph_tags",
    "extract_page_images",
    "resolve_images",
    "decoded_value",
    "read_property",
    "read_meta_name",
    "read_head_title",
    "sanitize_content",
    "flatten_text",
]
