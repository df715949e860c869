import os
import threading

import pytest

from tlddb.database import SuffixDatabase
from tlddb.fetch import FetchError
from tlddb.parser import parse_lines
from tlddb.store import StoreError, save_rules


def _db(tmp_path, lines=None, **kwargs):
    path = str(tmp_path / "db.json")
    if lines is not None:
        save_rules(parse_lines(lines), path)
    return SuffixDatabase(path=path, **kwargs)


def test_lazy_load(tmp_path, sample_lines):
    db = _db(tmp_path, sample_lines)
    assert db.classify("www.example.co.uk").registrable_domain == "example.co.uk"
    assert db.index is db.index


def test_missing_database(tmp_path):
    db = _db(tmp_path)
    with pytest.raises(StoreError):
        db.classify("example.com")


def test_include_private(tmp_path, sample_lines):
    assert _db(tmp_path, sample_lines).classify("u.github.io").public_suffix == "github.io"
    db = _db(tmp_path, sample_lines, include_private=False)
    assert db.classify("u.github.io").public_suffix == "io"


def test_refresh_swaps_index(tmp_path):
    lists = [["com"], ["com", "co.uk"]]
    db = _db(tmp_path, fetch=lambda url, timeout: lists.pop(0))

    first = db.refresh()
    assert db.classify("a.co.uk").public_suffix == "uk"

    second = db.refresh()
    assert second is not first
    assert db.index is second
    assert db.classify("a.co.uk").public_suffix == "co.uk"
    assert os.path.exists(db.path)


def test_failed_refresh_keeps_current(tmp_path):
    db = _db(tmp_path, ["com", "co.uk"])
    before = db.index

    def broken(url, timeout):
        raise FetchError("offline")

    db.fetch = broken
    with pytest.raises(FetchError):
        db.refresh()
    assert db.index is before


def test_reload_if_changed(tmp_path):
    db = _db(tmp_path, ["com"])
    db.index
    assert db.reload_if_changed() is False

    save_rules(parse_lines(["com", "co.uk"]), db.path)
    st = os.stat(db.path)
    os.utime(db.path, (st.st_atime, st.st_mtime + 10))

    assert db.reload_if_changed() is True
    assert db.classify("a.co.uk").public_suffix == "co.uk"
    assert db.reload_if_changed() is False


def test_reload_if_changed_without_file(tmp_path):
    assert _db(tmp_path).reload_if_changed() is False


def test_readers_during_refresh(tmp_path):
    db = _db(tmp_path, ["com", "co.uk"], fetch=lambda url, timeout: ["com", "co.uk"])
    db.index
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            res = db.classify("www.example.co.uk")
            if res.registrable_domain != "example.co.uk":
                errors.append(res)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(20):
        db.refresh()
    stop.set()
    for t in threads:
        t.join()
    assert errors == []
