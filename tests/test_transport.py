import pytest
import requests

from burst_crawler.fetch.transport import FetchConfig, HTTPTransport


class FakeResponse:
    def __init__(self, status_code=200, body=b"", headers=None, encoding="utf-8"):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.encoding = encoding
        self.closed = False

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]

    def close(self):
        self.closed = True


@pytest.fixture
def transport():
    t = HTTPTransport(FetchConfig(max_content_size_mb=1))
    yield t
    t.close()


def serve(monkeypatch, transport, outcome):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(transport.session, "get", fake_get)
    return calls


def test_successful_fetch_returns_body(monkeypatch, transport):
    response = FakeResponse(body="<html>café</html>".encode("utf-8"))
    calls = serve(monkeypatch, transport, response)

    body, ok = transport.fetch_text("https://burst.shopify.com/photos")

    assert ok is True
    assert body == "<html>café</html>"
    assert response.closed
    assert calls[0][1]["timeout"] == 30
    assert transport.get_stats()["successful"] == 1


def test_utf8_body_without_charset_keeps_accents(monkeypatch, transport):
    # requests guesses ISO-8859-1 for text/* without a charset
    response = FakeResponse(body="<h1>Café Crème</h1>".encode("utf-8"),
                            headers={"Content-Type": "text/html"}, encoding="ISO-8859-1")
    serve(monkeypatch, transport, response)

    body, ok = transport.fetch_text("https://burst.shopify.com/photos/cafe")

    assert ok is True
    assert "Café Crème" in body


def test_declared_charset_is_honoured(monkeypatch, transport):
    response = FakeResponse(body="<h1>Crème</h1>".encode("latin-1"),
                            headers={"Content-Type": "text/html; charset=ISO-8859-1"},
                            encoding="ISO-8859-1")
    serve(monkeypatch, transport, response)

    assert transport.fetch_text("https://a/latin") == ("<h1>Crème</h1>", True)


def test_body_spread_over_many_chunks(monkeypatch, transport):
    payload = ("<p>" + "é" * 20000 + "</p>").encode("utf-8")
    serve(monkeypatch, transport, FakeResponse(body=payload, headers={"Content-Type": "text/html"}))

    body, ok = transport.fetch_text("https://a/long")

    assert ok is True
    assert body == payload.decode("utf-8")


@pytest.mark.parametrize("status", [404, 500, 301])
def test_non_2xx_is_a_failure(monkeypatch, transport, status):
    serve(monkeypatch, transport, FakeResponse(status_code=status, body=b"nope"))

    assert transport.fetch_text("https://burst.shopify.com/x") == ("", False)
    assert transport.get_stats()["http_errors"] == {str(status): 1}


@pytest.mark.parametrize("error", [requests.Timeout("slow"), requests.ConnectionError("down")])
def test_network_errors_are_not_raised(monkeypatch, transport, error):
    serve(monkeypatch, transport, error)

    assert transport.fetch_text("https://burst.shopify.com/x") == ("", False)
    assert transport.get_stats()["failed"] == 1


def test_oversized_and_empty_bodies_fail(monkeypatch, transport):
    serve(monkeypatch, transport, FakeResponse(headers={"Content-Length": str(2 * 1024 * 1024)}, body=b"x"))
    assert transport.fetch_text("https://a/big") == ("", False)

    serve(monkeypatch, transport, FakeResponse(body=b"x" * (1024 * 1024 + 1)))
    assert transport.fetch_text("https://a/streamed") == ("", False)

    serve(monkeypatch, transport, FakeResponse(body=b""))
    assert transport.fetch_text("https://a/empty") == ("", False)


def test_session_does_not_retry():
    t = HTTPTransport()
    adapter = t.session.get_adapter("https://burst.shopify.com")
    assert adapter.max_retries.total == 0
    assert t.session.headers["User-Agent"] == "BurstCrawler/1.0"
    t.close()
