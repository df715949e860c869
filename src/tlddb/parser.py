import re
from typing import Iterable, List, Optional, Tuple, Union

from .rules import (
    EXCEPTION, ICANN, PLAIN, PRIVATE, WILDCARD, WILDCARD_LABEL, Rule, RuleSet,
)


class MalformedLine(Exception):
    pass


class EmptyRuleSet(Exception):
    pass


_LABEL_RE = re.compile(r"^[a-z0-9-]{1,63}$")

_SECTION_MARKERS = {
    "===BEGIN ICANN DOMAINS===": ICANN,
    "===BEGIN PRIVATE DOMAINS===": PRIVATE,
}

Skipped = List[Tuple[int, str, str]]


def parse_rule(text: str, section: str = ICANN) -> Rule:
    """
    Parse a single rule written the way the list writes it:
    "com", "co.uk", "*.ck" or "!www.ck".
    """
    pattern = text.strip().lower()
    kind = PLAIN
    if pattern.startswith("!"):
        kind = EXCEPTION
        pattern = pattern[1:]
    elif pattern.startswith("*."):
        kind = WILDCARD

    if not pattern:
        raise MalformedLine(f"empty rule: {text!r}")

    labels = tuple(reversed(pattern.split(".")))
    for pos, label in enumerate(labels):
        if label == WILDCARD_LABEL:
            if kind != WILDCARD or pos != len(labels) - 1:
                raise MalformedLine(f"misplaced wildcard: {text!r}")
            continue
        if not _LABEL_RE.match(label):
            raise MalformedLine(f"invalid label {label!r} in {text!r}")

    if kind == WILDCARD and len(labels) < 2:
        raise MalformedLine(f"bare wildcard: {text!r}")
    if kind == EXCEPTION and len(labels) < 2:
        raise MalformedLine(f"exception needs at least two labels: {text!r}")

    return Rule(labels=labels, kind=kind, section=section)


def _decode(line: Union[str, bytes]) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8", errors="replace")
    return line


def parse_lines(lines: Iterable[Union[str, bytes]], skipped: Optional[Skipped] = None) -> RuleSet:
    """
    Turn raw list lines into a RuleSet.

    Bad lines are dropped; when `skipped` is given, each one is appended to
    it as (line_number, text, reason). Raises EmptyRuleSet when nothing
    usable is left.
    """
    rules: List[Tuple[int, str, Rule]] = []
    section = ICANN

    for lineno, raw in enumerate(lines, start=1):
        line = _decode(raw).strip()
        if not line:
            continue
        if line.startswith("//"):
            marker = line[2:].strip()
            if marker in _SECTION_MARKERS:
                section = _SECTION_MARKERS[marker]
            elif marker.startswith("===END "):
                section = ICANN
            continue

        # a rule ends at the first whitespace
        token = line.split()[0]
        try:
            rules.append((lineno, token, parse_rule(token, section)))
        except MalformedLine as e:
            if skipped is not None:
                skipped.append((lineno, line, str(e)))

    # an exception is only meaningful below a wildcard of its parent
    wildcards = {r.labels[:-1] for _, _, r in rules if r.kind == WILDCARD}
    kept = []
    for lineno, token, rule in rules:
        if rule.kind == EXCEPTION and rule.labels[:-1] not in wildcards:
            if skipped is not None:
                skipped.append((lineno, token, f"exception without wildcard: {token!r}"))
            continue
        kept.append(rule)

    if not kept:
        raise EmptyRuleSet("input does not contain any valid rule")

    return RuleSet.from_rules(kept)
