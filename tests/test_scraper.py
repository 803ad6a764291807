import httpx
import pytest

from article_infographics import scraper
from article_infographics.config import Settings
from article_infographics.errors import ExtractionError, FetchError
from article_infographics.scraper import extract_article, fetch_html, html_to_text

ARTICLE_HTML = """
<html>
  <head><title>Quarterly Results Beat Expectations</title></head>
  <body>
    <div class="menu">
      <a href="/">Home</a> <a href="/about">About</a> <a href="/contact">Contact</a>
    </div>
    <div id="story" class="article-body">
      <p>Revenue grew twelve percent year over year, driven by subscriptions,
         renewals, and a larger enterprise customer base across every region.</p>
      <p>Operating margins expanded as cloud costs were renegotiated, and the
         company reduced marketing spend without slowing new customer growth.</p>
      <p>Management raised full-year guidance, announced a new buyback program,
         and said hiring would remain focused on engineering and sales roles.</p>
    </div>
  </body>
</html>
"""


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_fetch_html_sends_browser_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(200, text="<html>ok</html>")

    html = fetch_html("https://example.com/a", _settings(), client=_client(handler))

    assert html == "<html>ok</html>"
    assert seen["ua"].startswith("Mozilla/5.0")


def test_fetch_html_raises_with_status_on_http_error():
    def handler(request):
        return httpx.Response(404, text="not found")

    with pytest.raises(FetchError) as excinfo:
        fetch_html("https://example.com/missing", _settings(), client=_client(handler))

    assert excinfo.value.status_code == 404
    assert str(excinfo.value) == "HTTP error! status: 404"


def test_fetch_html_wraps_network_failures():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as excinfo:
        fetch_html("https://example.com/down", _settings(), client=_client(handler))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_fetch_html_wraps_timeouts():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(FetchError) as excinfo:
        fetch_html("https://example.com/slow", _settings(), client=_client(handler))

    assert isinstance(excinfo.value.__cause__, httpx.TimeoutException)


@pytest.mark.parametrize("url", ["http://[::1", "http://exa mple.com/\x00"])
def test_fetch_html_wraps_invalid_urls(url):
    with pytest.raises(FetchError) as excinfo:
        fetch_html(url, _settings())

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.InvalidURL)


def test_default_client_uses_configured_timeout(monkeypatch):
    real_client = httpx.Client
    created = {}

    def handler(request):
        return httpx.Response(200, text="<html>ok</html>")

    def fake_client(**kwargs):
        created.update(kwargs)
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(scraper.httpx, "Client", fake_client)

    fetch_html("https://example.com/a", _settings(fetch_timeout=3.5))

    assert created["timeout"] == 3.5
    assert created["follow_redirects"] is True


def test_extract_article_returns_title_and_paragraphs():
    article = extract_article(ARTICLE_HTML, "https://example.com/results")

    assert article.title == "Quarterly Results Beat Expectations"
    assert article.source_url == "https://example.com/results"
    assert "Revenue grew twelve percent" in article.content
    assert "Management raised full-year guidance" in article.content
    assert "<p>" not in article.content
    assert "\n\n" in article.content


def test_extract_article_uses_placeholder_title():
    html = ARTICLE_HTML.replace(
        "<head><title>Quarterly Results Beat Expectations</title></head>", ""
    )
    article = extract_article(html)
    assert article.title == "Article Analysis"


@pytest.mark.parametrize("html", ["", "   ", "<html><body></body></html>"])
def test_extract_article_rejects_pages_without_content(html):
    with pytest.raises(ExtractionError):
        extract_article(html)


def test_html_to_text_separates_blocks():
    text = html_to_text("<div><h1>Heading</h1><p>First   para</p><p>Second</p></div>")
    assert text == "Heading\n\nFirst para\n\nSecond"
