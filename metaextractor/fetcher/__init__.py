"""
Fetcher package for the metadata extractor.

Provides the page content loader used to retrieve HTML before extraction.
"""
from metaextractor.fetcher.http_client import DEFAULT_TIMEOUT, PageContentLoader

__all__ = [
    "DEFAULT_TIMEOUT",
    "PageContentLoader",
]
