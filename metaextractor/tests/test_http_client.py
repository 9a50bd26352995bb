import httpx
import pytest

from metaextractor.fetcher.http_client import DEFAULT_USER_AGENT, PageContentLoader

PAGE = "<html><head><title>Fetched</title></head></html>"


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/old":
        return httpx.Response(301, headers={"Location": "https://example.com/new"})
    if request.url.path == "/missing":
        return httpx.Response(404, text="not found")
    return httpx.Response(200, text=PAGE)


def _loader(**kwargs) -> PageContentLoader:
    transport = httpx.MockTransport(_handler)
    return PageContentLoader(transport=transport, async_transport=transport, **kwargs)


def test_load_page_content():
    assert _loader().load_page_content("https://example.com/page") == PAGE


def test_follows_redirects():
    assert _loader().load_page_content("https://example.com/old") == PAGE


def test_http_errors_are_raised():
    with pytest.raises(httpx.HTTPStatusError):
        _loader().load_page_content("https://example.com/missing")


def test_connection_errors_are_raised():
    def fail(request):
        raise httpx.ConnectError("refused", request=request)

    loader = PageContentLoader(transport=httpx.MockTransport(fail))
    with pytest.raises(httpx.ConnectError):
        loader.load_page_content("https://example.com/")


def test_sends_user_agent_and_headers():
    seen = {}

    def capture(request):
        seen.update(request.headers)
        return httpx.Response(200, text="ok")

    loader = PageContentLoader(
        headers={"Accept-Language": "en"},
        transport=httpx.MockTransport(capture),
    )
    loader.load_page_content("https://example.com/")

    assert seen["user-agent"] == DEFAULT_USER_AGENT
    assert seen["accept-language"] == "en"


def test_custom_user_agent():
    loader = PageContentLoader(user_agent="TestAgent/1.0")
    assert loader.default_headers["User-Agent"] == "TestAgent/1.0"


def test_single_client_is_reused_until_closed():
    loader = _loader(use_single_http_client=True)
    loader.load_page_content("https://example.com/a")
    client = loader._client
    loader.load_page_content("https://example.com/b")

    assert client is not None
    assert loader._client is client

    loader.close()
    assert loader._client is None
    assert client.is_closed


def test_per_request_clients_are_not_kept():
    loader = _loader()
    loader.load_page_content("https://example.com/a")
    assert loader._client is None


@pytest.mark.asyncio
async def test_load_page_content_async():
    loader = _loader()
    assert await loader.load_page_content_async("https://example.com/page") == PAGE
    with pytest.raises(httpx.HTTPStatusError):
        await loader.load_page_content_async("https://example.com/missing")


@pytest.mark.asyncio
async def test_async_single_client_is_reused():
    loader = _loader(use_single_http_client=True)
    await loader.load_page_content_async("https://example.com/a")
    client = loader._async_client
    await loader.load_page_content_async("https://example.com/b")

    assert loader._async_client is client

    await loader.aclose()
    assert loader._async_client is None
    assert client.is_closed


def test_shared_client_created_once_across_threads(monkeypatch):
    from concurrent.futures import ThreadPoolExecutor

    loader = _loader(use_single_http_client=True)
    created = []
    real_new_client = loader._new_client

    def counting_new_client():
        created.append(1)
        return real_new_client()

    monkeypatch.setattr(loader, "_new_client", counting_new_client)

    with ThreadPoolExecutor(max_workers=8) as pool:
        pages = list(pool.map(loader.load_page_content, ["https://example.com/p"] * 32))

    assert pages == [PAGE] * 32
    assert len(created) == 1
    loader.close()
