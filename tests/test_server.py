import json

from fastapi.testclient import TestClient

from article_infographics.config import Settings
from article_infographics.errors import FetchError, UpstreamError
from article_infographics.server import app
from article_infographics.workflow import ArticlePipeline

PATH = "/api/process-article"
LONG_TEXT = (
    "The company reported record quarterly revenue driven by strong demand. "
    "Analysts expect the momentum to continue into the next fiscal year. "
    "New product lines contributed a third of total sales growth overall. "
)


def make_client() -> TestClient:
    return TestClient(app)


def _use_pipeline(monkeypatch, *, fetch_fn=None, complete_fn=None):
    settings = Settings(_env_file=None, OPENAI_API_KEY="test-key")

    def fake_fetch(url):
        raise AssertionError("fetch should not be called")

    pipeline = ArticlePipeline(
        settings,
        fetch_fn=fetch_fn or fake_fetch,
        complete_fn=complete_fn or (lambda messages: "{not json"),
    )
    monkeypatch.setattr("article_infographics.server._build_pipeline", lambda: pipeline)


def _assert_cors(resp):
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_health():
    resp = make_client().get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_options_preflight_returns_empty_body():
    resp = make_client().options(PATH)
    assert resp.status_code == 200
    assert resp.content == b""
    _assert_cors(resp)


def test_other_methods_are_not_allowed():
    client = make_client()
    for method in ("get", "put", "delete"):
        resp = getattr(client, method)(PATH)
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}
        _assert_cors(resp)


def test_head_is_not_allowed():
    resp = make_client().head(PATH)
    assert resp.status_code == 405
    expected = json.dumps({"error": "Method not allowed"}, separators=(",", ":"))
    assert resp.headers["content-length"] == str(len(expected))
    _assert_cors(resp)


def test_missing_url_and_text_returns_400(monkeypatch):
    _use_pipeline(monkeypatch)
    resp = make_client().post(PATH, json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "URL or text content is required"}
    _assert_cors(resp)


def test_short_text_returns_400(monkeypatch):
    _use_pipeline(monkeypatch)
    resp = make_client().post(PATH, json={"text": "too short"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Article content is too short or empty"


def test_fetch_failure_returns_scrape_error(monkeypatch):
    def failing_fetch(url):
        raise FetchError("HTTP error! status: 404", status_code=404)

    _use_pipeline(monkeypatch, fetch_fn=failing_fetch)
    resp = make_client().post(PATH, json={"url": "https://example.com/missing"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"].startswith("Failed to scrape article")
    assert body["details"] == "HTTP error! status: 404"


def test_invalid_url_returns_scrape_error(monkeypatch):
    settings = Settings(_env_file=None, OPENAI_API_KEY="test-key")
    pipeline = ArticlePipeline(settings, complete_fn=lambda messages: "{not json")
    monkeypatch.setattr("article_infographics.server._build_pipeline", lambda: pipeline)

    resp = make_client().post(PATH, json={"url": "http://[::1"})

    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Failed to scrape article")
    _assert_cors(resp)


def test_non_finite_numbers_in_model_output_use_fallback(monkeypatch):
    reply = '{"slides": [{"headline": "h", "statistics": [{"value": NaN}]}]}'
    _use_pipeline(monkeypatch, complete_fn=lambda messages: reply)

    resp = make_client().post(PATH, json={"text": LONG_TEXT})

    assert resp.status_code == 200
    body = resp.json()
    assert body["slides"][0]["subtitle"] == "Executive Summary"
    _assert_cors(resp)


def test_unparseable_model_output_still_succeeds(monkeypatch):
    _use_pipeline(monkeypatch, complete_fn=lambda messages: "{not json")
    resp = make_client().post(PATH, json={"text": LONG_TEXT, "url": "https://example.com/a"})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["slides"]) == 1
    assert set(body["socialPosts"]) == {"twitter", "linkedin", "instagram", "youtube", "facebook"}
    assert body["metadata"]["title"] == "Article Analysis"
    assert body["metadata"]["originalUrl"] == "https://example.com/a"
    assert "degraded" not in body
    _assert_cors(resp)


def test_model_output_is_returned_with_metadata(monkeypatch):
    reply = json.dumps({"slides": [{"headline": "From the model"}], "socialPosts": {}})
    _use_pipeline(monkeypatch, complete_fn=lambda messages: reply)

    resp = make_client().post(PATH, json={"text": LONG_TEXT})

    assert resp.status_code == 200
    body = resp.json()
    assert body["slides"] == [{"headline": "From the model"}]
    assert body["metadata"]["wordCount"] == len(LONG_TEXT.split())


def test_upstream_failure_returns_500(monkeypatch):
    def failing_complete(messages):
        raise UpstreamError("OpenAI API error: 500 - boom", status_code=500, body="boom")

    _use_pipeline(monkeypatch, complete_fn=failing_complete)
    resp = make_client().post(PATH, json={"text": LONG_TEXT})

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "Failed to process article",
        "details": "OpenAI API error: 500 - boom",
    }
    _assert_cors(resp)


def test_malformed_json_body_returns_400(monkeypatch):
    _use_pipeline(monkeypatch)
    resp = make_client().post(
        PATH, content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"


def test_non_string_text_returns_400(monkeypatch):
    _use_pipeline(monkeypatch)
    resp = make_client().post(PATH, json={"text": ["not", "a", "string"]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"
