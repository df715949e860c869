from typing import Callable, List, Optional

from .fetch import DEFAULT_TIMEOUT, PUBLIC_SUFFIX_LIST_URL, fetch_lines
from .parser import Skipped, parse_lines
from .rules import RuleSet
from .store import DEFAULT_DATABASE, save_rules

Fetcher = Callable[[str, int], List[str]]


def update(
    path: str = DEFAULT_DATABASE,
    url: str = PUBLIC_SUFFIX_LIST_URL,
    fetch: Fetcher = fetch_lines,
    timeout: int = DEFAULT_TIMEOUT,
    skipped: Optional[Skipped] = None,
) -> RuleSet:
    """
    Fetch the current list, parse it and write it to path.

    Nothing is written unless fetching and parsing both succeed.
    """
    lines = fetch(url, timeout)
    rule_set = parse_lines(lines, skipped=skipped)
    save_rules(rule_set, path)
    return rule_set
