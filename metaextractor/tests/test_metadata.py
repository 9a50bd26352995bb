import httpx
import pytest
from pydantic import ValidationError
from unittest.mock import MagicMock

from metaextractor.extractor.metadata import (
    DESCRIPTION_FALLBACK_LENGTH,
    ExtractionState,
    Extractor,
    collect_images,
    extract_metadata,
    fallback_text_description,
)
from metaextractor.fetcher.http_client import PageContentLoader
from metaextractor.language import StaticLanguageDetector
from metaextractor.models.metadata import Metadata
from metaextractor.parser.html_parser import parse_html

# Sample HTML for testing
SAMPLE_HTML = """<!DOCTYPE html>
<html>
    <head>
        <title>Plain Title</title>
        <meta name="description" content="Meta description">
        <meta name="keywords" content="python, html ,, parsing">
        <meta property="og:title" content="  Open Graph Title  ">
        <meta property="og:description" content="Open Graph description">
        <meta property="og:image" content="https://example.com/og.png">
        <meta property="og:image" content="https://example.com/og-2.png">
        <script>var tracking = true;</script>
    </head>
    <body>
        <article>
            <h1>Heading</h1>
            <p>This is a <strong>paragraph</strong>.</p>
            <img src="https://example.com/body.png">
        </article>
    </body>
</html>
"""

PLAIN_HTML = """
<html>
    <head><title> Only a title </title></head>
    <body><p>Body text</p><img src="one.png"><img src="two.png"></body>
</html>
"""


def test_open_graph_values_take_precedence():
    metadata = extract_metadata(SAMPLE_HTML, "https://example.com/page")

    assert metadata.title == "Open Graph Title"
    assert metadata.description == "Open Graph description"
    assert metadata.images == ["https://example.com/og.png"]
    assert metadata.keywords == ["python", "html", "parsing"]
    assert metadata.open_graph_tags == [
        ("og:title", "  Open Graph Title  "),
        ("og:description", "Open Graph description"),
        ("og:image", "https://example.com/og.png"),
        ("og:image", "https://example.com/og-2.png"),
    ]
    assert metadata.url == "https://example.com/page"
    assert metadata.raw == SAMPLE_HTML
    assert metadata.language == "en"


def test_content_is_sanitized():
    metadata = extract_metadata(SAMPLE_HTML, "https://example.com/page")

    assert "tracking" not in metadata.content
    assert "<script" not in metadata.content
    assert "<p>" not in metadata.content
    assert "<strong>paragraph</strong>" in metadata.content
    assert '<img src="https://example.com/body.png"/>' in metadata.content
    assert metadata.content == metadata.content.strip()


def test_title_falls_back_to_head_title():
    metadata = extract_metadata(PLAIN_HTML, "https://example.com")
    assert metadata.title == "Only a title"


def test_page_images_used_without_og_image():
    metadata = extract_metadata(PLAIN_HTML, "https://example.com", default_image="default.png")
    assert metadata.images == ["one.png", "two.png"]


def test_default_image_when_page_has_none():
    metadata = extract_metadata("<p>No pictures</p>", "https://example.com", default_image="default.png")
    assert metadata.images == ["default.png"]
    assert metadata.image == "default.png"


def test_no_images_without_default():
    metadata = extract_metadata("<p>No pictures</p>", "https://example.com")
    assert metadata.images == []
    assert metadata.image == ""


def test_description_falls_back_to_meta_description():
    html = '<head><meta name="description" content=" From meta "></head><p>Body</p>'
    assert extract_metadata(html).description == "From meta"


def test_blank_og_description_falls_back():
    html = (
        '<meta property="og:description" content="   ">'
        '<meta name="description" content="From meta">'
    )
    assert extract_metadata(html).description == "From meta"


def test_description_falls_back_to_truncated_text():
    html = "<html><body><div>" + "x" * 500 + "</div></body></html>"
    metadata = extract_metadata(html)
    assert len(metadata.description) == DESCRIPTION_FALLBACK_LENGTH
    assert metadata.description == "x" * 300


def test_description_text_fallback_shorter_than_limit():
    metadata = extract_metadata("<div><p>Short <em>text</em> &amp; more</p></div>")
    assert metadata.description == "Short text & more"


def test_description_text_fallback_is_a_hard_cut():
    words = " ".join(["word"] * 100)
    metadata = extract_metadata(f"<p>{words}</p>")
    assert metadata.description == words[:300].strip()


@pytest.mark.parametrize("html", [None, "", "   ", "<<<>>>", "<div><p>unclosed <b>tags"])
def test_never_fails_on_bad_input(html):
    metadata = extract_metadata(html, "https://example.com")
    assert isinstance(metadata, Metadata)
    assert metadata.url == "https://example.com"
    assert metadata.title == metadata.title.strip()


def test_empty_document_yields_empty_fields():
    metadata = extract_metadata(None, "https://example.com")
    assert metadata.title == ""
    assert metadata.description == ""
    assert metadata.content == ""
    assert metadata.keywords == []
    assert metadata.open_graph_tags == []
    assert metadata.images == []
    assert metadata.raw == ""


def test_language_detector_receives_raw_html():
    detector = MagicMock()
    detector.get_html_page_language.return_value = "fr"

    metadata = extract_metadata(SAMPLE_HTML, language_detector=detector)

    assert metadata.language == "fr"
    detector.get_html_page_language.assert_called_once_with(SAMPLE_HTML)


def test_url_accepts_httpx_url():
    metadata = extract_metadata("<p>x</p>", httpx.URL("https://example.com/a?b=1"))
    assert metadata.url == "https://example.com/a?b=1"


def test_metadata_is_frozen():
    metadata = extract_metadata(SAMPLE_HTML)
    with pytest.raises(ValidationError):
        metadata.title = "changed"


def test_metadata_open_graph_helpers():
    metadata = extract_metadata(SAMPLE_HTML)
    assert metadata.open_graph("og:image") == "https://example.com/og.png"
    assert metadata.open_graph_all("og:image") == [
        "https://example.com/og.png",
        "https://example.com/og-2.png",
    ]
    assert metadata.open_graph("og:type") == ""


def test_steps_return_new_state():
    state = ExtractionState(content="<em>Some</em> content")
    updated = fallback_text_description(state)
    assert state.description == ""
    assert updated.description == "Some content"
    assert updated.fallbacks == ("content_text",)


def test_collect_images_records_default_fallback():
    state = collect_images(ExtractionState(), parse_html("<p>x</p>"), "default.png")
    assert state.images == ["default.png"]
    assert state.fallbacks == ("default_image",)


def _loader(html: str) -> PageContentLoader:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=html))
    return PageContentLoader(transport=transport, async_transport=transport)


def test_extract_fetches_page():
    extractor = Extractor(page_content_loader=_loader(SAMPLE_HTML))
    metadata = extractor.extract("https://example.com/page")
    assert metadata.title == "Open Graph Title"
    assert metadata.raw == SAMPLE_HTML


@pytest.mark.asyncio
async def test_sync_and_async_results_match():
    extractor = Extractor(
        default_image="default.png",
        page_content_loader=_loader(PLAIN_HTML),
        language_detector=StaticLanguageDetector("de"),
    )

    sync_metadata = extractor.extract("https://example.com/page")
    async_metadata = await extractor.extract_async("https://example.com/page")

    assert sync_metadata == async_metadata
    assert async_metadata.language == "de"
    assert async_metadata == extractor.extract_html("https://example.com/page", PLAIN_HTML)


@pytest.mark.asyncio
async def test_fetch_errors_propagate():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
    loader = PageContentLoader(transport=transport, async_transport=transport)

    async with Extractor(page_content_loader=loader) as extractor:
        with pytest.raises(httpx.HTTPStatusError):
            await extractor.extract_async("https://example.com/broken")
        with pytest.raises(httpx.HTTPStatusError):
            extractor.extract("https://example.com/broken")


def test_parser_failure_yields_empty_metadata(monkeypatch):
    from metaextractor.parser import html_parser

    real_soup = html_parser.BeautifulSoup

    def failing_soup(markup, *args, **kwargs):
        if markup:
            raise ValueError("tree builder failed")
        return real_soup(markup, *args, **kwargs)

    monkeypatch.setattr(html_parser, "BeautifulSoup", failing_soup)

    metadata = extract_metadata(SAMPLE_HTML, "https://example.com/page")

    assert metadata.title == ""
    assert metadata.description == ""
    assert metadata.content == ""
    assert metadata.keywords == []
    assert metadata.open_graph_tags == []
    assert metadata.images == []
    assert metadata.url == "https://example.com/page"
