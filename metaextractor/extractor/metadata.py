"""
Metadata extraction module.

This module turns an HTML page into a Metadata record. Sources are tried in
order of trust: Open Graph tags curated by the publisher first, then plain
``<title>``/``<meta>`` tags, and finally a truncated slice of the page text.

The waterfall is a sequence of pure steps. Each step receives the current
ExtractionState and the parsed document and returns an updated copy.
"""
from typing import List, Optional, Tuple, Union

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from metaextractor.config import Settings
from metaextractor.extractor.images import extract_page_images, resolve_images
from metaextractor.extractor.keywords import extract_description, extract_keywords
from metaextractor.extractor.open_graph import extract_open_graph_tags
from metaextractor.extractor.readers import read_head_title, read_property
from metaextractor.extractor.sanitizer import flatten_text, sanitize_content
from metaextractor.fetcher.http_client import DEFAULT_TIMEOUT, PageContentLoader
from metaextractor.language import (
    HtmlLangDetector,
    LanguageDetector,
    StaticLanguageDetector,
)
from metaextractor.models.metadata import Metadata
from metaextractor.parser.html_parser import HTMLParser, parse_html

# Set up structured logger
logger = structlog.get_logger()

# Length of the description cut from the page text when no tag provides one
DESCRIPTION_FALLBACK_LENGTH = 300

URL = Union[str, httpx.URL]


class ExtractionState(BaseModel):
    """Intermediate result threaded through the extraction steps."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    image: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    content: str = ""
    images: List[str] = Field(default_factory=list)
    open_graph_tags: List[Tuple[str, str]] = Field(default_factory=list)
    fallbacks: Tuple[str, ...] = ()

    def fell_back(self, step: str, **update) -> "ExtractionState":
        """Copy with ``update`` applied, recording which fallback fired."""
        return self.model_copy(update={**update, "fallbacks": self.fallbacks + (step,)})


def read_open_graph(state: ExtractionState, document: HTMLParser) -> ExtractionState:
    """Primary sources: og:title, og:image, og:description and the full tag list."""
    return state.model_copy(update={
        "title": read_property(document, "og:title"),
        "image": read_property(document, "og:image"),
        "description": read_property(document, "og:description"),
        "open_graph_tags": extract_open_graph_tags(document),
    })


def read_keywords(state: ExtractionState, document: HTMLParser) -> ExtractionState:
    return state.model_copy(update={"keywords": extract_keywords(document)})


def fallback_title(state: ExtractionState, document: HTMLParser) -> ExtractionState:
    """Use ``<head><title>`` when Open Graph has no title."""
    if state.title:
        return state
    return state.fell_back("head_title", title=read_head_title(document))


def collect_images(state: ExtractionState, document: HTMLParser, default_image: str = "") -> ExtractionState:
    """Open Graph image wins, then page images, then the configured default."""
    page_images = extract_page_images(document)
    images = resolve_images(page_images, state.image, default_image)
    if not state.image and not page_images and images:
        return state.fell_back("default_image", images=images)
    return state.model_copy(update={"images": images})


def fallback_meta_description(state: ExtractionState, document: HTMLParser) -> ExtractionState:
    """Use ``<meta name="description">`` when Open Graph has no description."""
    if state.description:
        return state
    return state.fell_back("meta_description", description=extract_description(document))


def fallback_text_description(state: ExtractionState) -> ExtractionState:
    """
    Cut the description from the sanitized content's plain text.

    This is a hard cut at DESCRIPTION_FALLBACK_LENGTH characters with no
    regard for word boundaries.
    """
    if state.description:
        return state
    text = flatten_text(state.content)
    return state.fell_back("content_text", description=text[:DESCRIPTION_FALLBACK_LENGTH])


class Extractor:
    """
    Extracts Metadata from web pages.

    The extractor holds only configuration and its collaborators, a page
    content loader and a language detector, so a single instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        default_image: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        use_single_http_client: bool = False,
        page_content_loader: Optional[PageContentLoader] = None,
        language_detector: Optional[LanguageDetector] = None,
    ):
        """
        Initialize the extractor.

        Args:
            default_image: Image used when a page has neither og:image nor <img>
            timeout: Fetch timeout in seconds (ignored if a loader is given)
            use_single_http_client: Reuse one HTTP client across fetches
                (ignored if a loader is given)
            page_content_loader: Custom page fetcher
            language_detector: Custom language detector
        """
        self.default_image = default_image or ""
        self.page_content_loader = page_content_loader or PageContentLoader(
            timeout=timeout,
            use_single_http_client=use_single_http_client,
        )
        self.language_detector = language_detector or StaticLanguageDetector()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Extractor":
        """Build an extractor from application settings."""
        if settings.detect_language_from_markup:
            detector: LanguageDetector = HtmlLangDetector(default=settings.language)
        else:
            detector = StaticLanguageDetector(settings.language)

        loader = PageContentLoader(
            timeout=settings.timeout_seconds,
            use_single_http_client=settings.use_single_http_client,
            user_agent=settings.user_agent,
        )
        return cls(
            default_image=settings.default_image,
            page_content_loader=loader,
            language_detector=detector,
        )

    def __enter__(self) -> "Extractor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> "Extractor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def close(self) -> None:
        """Release the shared synchronous HTTP client, if any."""
        self.page_content_loader.close()

    async def aclose(self) -> None:
        """Release the shared HTTP clients, if any."""
        await self.page_content_loader.aclose()

    def extract(self, url: URL) -> Metadata:
        """
        Fetch a page and extract its metadata.

        Raises:
            httpx.HTTPError: If the page cannot be fetched
        """
        html = self.page_content_loader.load_page_content(url)
        return self.extract_html(url, html)

    async def extract_async(self, url: URL) -> Metadata:
        """
        Fetch a page asynchronously and extract its metadata.

        Only the fetch is awaited; extraction itself runs synchronously.

        Raises:
            httpx.HTTPError: If the page cannot be fetched
        """
        html = await self.page_content_loader.load_page_content_async(url)
        return self.extract_html(url, html)

    def extract_html(self, url: URL, html: Optional[str]) -> Metadata:
        """
        Extract metadata from already fetched HTML.

        Never raises on malformed, partial or empty markup.

        Args:
            url: Address the HTML was loaded from (recorded verbatim)
            html: Raw HTML (None is treated as an empty document)

        Returns:
            Metadata: Extracted metadata
        """
        html = html or ""
        logger.debug("Extracting metadata", url=str(url), html_length=len(html))

        document = parse_html(html)

        state = read_open_graph(ExtractionState(), document)
        state = fallback_title(state, document)
        state = read_keywords(state, document)
        state = state.model_copy(update={"content": sanitize_content(html)})
        state = collect_images(state, document, self.default_image)
        state = fallback_meta_description(state, document)
        state = fallback_text_description(state)

        language = self.language_detector.get_html_page_language(html)

        logger.debug(
            "Extracted metadata",
            url=str(url),
            fallbacks=list(state.fallbacks),
            images=len(state.images),
            open_graph_tags=len(state.open_graph_tags),
        )

        return Metadata(
            title=state.title.strip(),
            description=state.description.strip(),
            keywords=state.keywords,
            open_graph_tags=state.open_graph_tags,
            images=state.images,
            content=state.content,
            raw=html,
            url=str(url),
            language=language,
        )


def extract_metadata(
    html: Optional[str],
    url: URL = "",
    default_image: str = "",
    language_detector: Optional[LanguageDetector] = None,
) -> Metadata:
    """
    Extract metadata from HTML without fetching anything.

    Args:
        html: Raw HTML content
        url: Address the HTML came from
        default_image: Image used when the page has none
        language_detector: Language detector (defaults to the static one)

    Returns:
        Metadata: Extracted metadata
    """
    extractor = Extractor(
        default_image=default_image,
        language_detector=language_detector,
    )
    return extractor.extract_html(url, html)
