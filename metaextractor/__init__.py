"""
Page Metadata Extractor

A library that turns an arbitrary HTML page into a normalized preview record:
title, description, images, keywords, Open Graph tags, language and a
sanitized copy of the body content.
"""

__version__ = "0.1.0"
__author__ = "Metaextractor Team"
__description__ = "Extract normalized preview metadata from HTML pages"
__license__ = "MIT"

# Version info tuple
VERSION_INFO = tuple(map(int, __version__.split('.')))

from metaextractor.extractor.metadata import Extractor, extract_metadata  # noqa: E402
from metaextractor.models.metadata import Metadata  # noqa: E402

__all__ = [
    "Extractor",
    "Metadata",
    "extract_metadata",
]
