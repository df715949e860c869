import os
import threading
from typing import Optional

from .classifier import ClassificationResult, classify
from .fetch import DEFAULT_TIMEOUT, PUBLIC_SUFFIX_LIST_URL, fetch_lines
from .index import RuleIndex
from .parser import Skipped
from .store import DEFAULT_DATABASE, load_rules
from .update import Fetcher, update


def _mtime(path: str) -> float:
    try:
        return os.stat(path).st_mtime
    except FileNotFoundError:
        return 0.0


class SuffixDatabase:
    """
    Holds the RuleIndex currently in use.

    A new index is always built completely before it replaces the old one
    with a single assignment; readers just take whatever self._index is and
    keep using it, so they never need the lock. The lock only keeps two
    refreshes from running at once.
    """

    def __init__(
        self,
        path: str = DEFAULT_DATABASE,
        url: str = PUBLIC_SUFFIX_LIST_URL,
        fetch: Fetcher = fetch_lines,
        timeout: int = DEFAULT_TIMEOUT,
        include_private: bool = True,
    ):
        self.path = path
        self.url = url
        self.fetch = fetch
        self.timeout = timeout
        self.include_private = include_private

        self._index: Optional[RuleIndex] = None
        self._mtime = 0.0
        self._lock = threading.Lock()

    @property
    def index(self) -> RuleIndex:
        index = self._index
        if index is None:
            index = self.reload()
        return index

    def classify(self, hostname: str) -> ClassificationResult:
        return classify(hostname, self.index, self.include_private)

    def _load(self) -> RuleIndex:
        mtime = _mtime(self.path)
        index = RuleIndex(load_rules(self.path))
        self._index = index
        self._mtime = mtime
        return index

    def reload(self) -> RuleIndex:
        """Load the stored database and make it current."""
        with self._lock:
            return self._load()

    def reload_if_changed(self) -> bool:
        """Reload when the database file changed on disk since the last load."""
        current = _mtime(self.path)
        if not current or current == self._mtime:
            return False
        with self._lock:
            if _mtime(self.path) == self._mtime:
                return False
            self._load()
        return True

    def refresh(self, skipped: Optional[Skipped] = None) -> RuleIndex:
        """
        Download the list, store it and make it current.
        On any failure the current index stays as it was.
        """
        with self._lock:
            rule_set = update(self.path, self.url, self.fetch, self.timeout, skipped=skipped)
            index = RuleIndex(rule_set)
            self._index = index
            self._mtime = _mtime(self.path)
            return index
