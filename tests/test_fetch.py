import io
from http import client
from urllib import error

import pytest

from tlddb import fetch
from tlddb.fetch import FetchError, fetch_lines, read_lines


class FakeResponse(io.BytesIO):
    def __init__(self, body: bytes, code: int = 200):
        super().__init__(body)
        self.code = code

    def getcode(self):
        return self.code


def test_fetch_lines(monkeypatch):
    seen = {}

    def fake_urlopen(req, timeout):
        seen["url"] = req.full_url
        seen["timeout"] = timeout
        return FakeResponse(b"// comment\ncom\nco.uk\n")

    monkeypatch.setattr(fetch.request, "urlopen", fake_urlopen)
    assert fetch_lines("https://example.test/list.dat", timeout=5) == ["// comment", "com", "co.uk"]
    assert seen == {"url": "https://example.test/list.dat", "timeout": 5}


def test_fetch_http_error(monkeypatch):
    def fake_urlopen(req, timeout):
        raise error.HTTPError(req.full_url, 503, "unavailable", {}, None)

    monkeypatch.setattr(fetch.request, "urlopen", fake_urlopen)
    with pytest.raises(FetchError, match="http-503"):
        fetch_lines("https://example.test/list.dat")


def test_fetch_network_error(monkeypatch):
    def fake_urlopen(req, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr(fetch.request, "urlopen", fake_urlopen)
    with pytest.raises(FetchError):
        fetch_lines("https://example.test/list.dat")


def test_fetch_bad_status(monkeypatch):
    monkeypatch.setattr(fetch.request, "urlopen", lambda req, timeout: FakeResponse(b"", 404))
    with pytest.raises(FetchError, match="http-404"):
        fetch_lines("https://example.test/list.dat")


def test_fetch_truncated_body(monkeypatch):
    class Truncated(FakeResponse):
        def read(self, *args):
            raise client.IncompleteRead(b"com\nco.", 100)

    monkeypatch.setattr(fetch.request, "urlopen", lambda req, timeout: Truncated(b""))
    with pytest.raises(FetchError):
        fetch_lines("https://example.test/list.dat")


def test_fetch_bad_encoding(monkeypatch):
    monkeypatch.setattr(fetch.request, "urlopen", lambda req, timeout: FakeResponse(b"\xff\xfe\xfa"))
    with pytest.raises(FetchError):
        fetch_lines("https://example.test/list.dat")


def test_read_lines(tmp_path):
    path = tmp_path / "list.dat"
    path.write_text("com\n// ===BEGIN PRIVATE DOMAINS===\ngithub.io\n", encoding="utf-8")
    assert read_lines(str(path)) == ["com", "// ===BEGIN PRIVATE DOMAINS===", "github.io"]


def test_read_lines_missing(tmp_path):
    with pytest.raises(FetchError):
        read_lines(str(tmp_path / "missing.dat"))
