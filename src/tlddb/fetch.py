"""
Download helpers for the Public Suffix List.

Uses Python's standard library (urllib) to avoid extra dependencies.
Anything that can be called as fetch(url, timeout) and returns a list of
lines can stand in for fetch_lines().
"""

from http import client
from typing import List
from urllib import request, error

PUBLIC_SUFFIX_LIST_URL = "https://publicsuffix.org/list/public_suffix_list.dat"
DEFAULT_TIMEOUT = 30


class FetchError(Exception):
    """Raised when the list cannot be downloaded or read."""


def _split(body: bytes, source: str) -> List[str]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FetchError(f"{source}: not valid utf-8 ({e})")
    return text.splitlines()


def fetch_lines(url: str = PUBLIC_SUFFIX_LIST_URL, timeout: int = DEFAULT_TIMEOUT) -> List[str]:
    """
    GET url and return the body split into lines.
    Raises FetchError on any network or HTTP failure.
    """
    req = request.Request(url, method="GET")
    req.add_header("User-Agent", "tlddb")

    try:
        with request.urlopen(req, timeout=timeout) as resp:
            code = resp.getcode()
            body = resp.read()
    except error.HTTPError as e:
        raise FetchError(f"http-{e.code}: {url}")
    except (error.URLError, client.HTTPException, OSError, ValueError) as e:
        raise FetchError(f"{url}: {e}")

    if code is not None and not 200 <= code < 300:
        raise FetchError(f"http-{code}: {url}")
    return _split(body, url)


def read_lines(path: str) -> List[str]:
    """Read a list that is already on disk."""
    try:
        with open(path, "rb") as f:
            body = f.read()
    except OSError as e:
        raise FetchError(f"cannot read {path}: {e}")
    return _split(body, path)
