"""Shared test fixtures."""

from __future__ import annotations

import httpx
import pytest

from sora.config import load_config
from sora.document import parse_document
from sora.models import FetchResult

ARTICLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Page Title | Example</title>
  <meta property="og:title" content="Foo">
  <meta name="twitter:title" content="Twitter Foo">
  <meta property="og:image" content="https://cdn.example.com/hero.jpg">
  <meta name="author" content="  Jane   Doe ">
  <meta property="article:published_time" content="2024-03-15T10:30:00Z">
  <script>var tracking = "do not read";</script>
  <style>body { color: red; }</style>
</head>
<body>
  <header>Site header</header>
  <nav>Home | About</nav>
  <h1>Heading Foo</h1>
  <article>
    <p>First paragraph of the story.</p>
    <div class="ad">Buy things now</div>
    <img src="https://cdn.example.com/inline.jpg">
    <p>Second   paragraph
       of the story.</p>
    <aside>Related links</aside>
  </article>
  <footer>Copyright</footer>
</body>
</html>
"""


@pytest.fixture
def sample_config(tmp_path):
    """Minimal config with tight bounds for testing."""
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("""
fetch:
  timeout_seconds: 2
  max_bytes: 1048576
  user_agent: "SoraBot-Test/1.0 (+https://sora.app)"

extract:
  max_title_length: 200
  max_content_length: 100000
  excerpt_length: 300
  resolve_relative_images: false
""")
    return load_config(str(cfg_path))


@pytest.fixture
def make_transport():
    """Factory for an httpx MockTransport serving a fixed response.

    The returned transport records every request in ``.requests``.
    """

    def _make(
        body: str | bytes = "",
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
    ) -> httpx.MockTransport:
        payload = body.encode("utf-8") if isinstance(body, str) else body
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            headers = {"content-type": content_type} if content_type else {}
            return httpx.Response(status, headers=headers, content=payload)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return _make


@pytest.fixture
def make_doc():
    """Parse an HTML string straight into a Document."""

    def _make(markup: str, url: str = "https://example.com/post"):
        fetched = FetchResult(
            url=url,
            final_url=url,
            status_code=200,
            content_type="text/html",
            encoding="utf-8",
            body=markup.encode("utf-8"),
        )
        return parse_document(fetched)

    return _make


@pytest.fixture
def article_html():
    return ARTICLE_HTML
