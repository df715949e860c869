from typing import List, NamedTuple, Optional

from .index import RuleIndex
from .rules import EXCEPTION, Rule

MAX_HOSTNAME_LENGTH = 253
MAX_LABEL_LENGTH = 63


class ClassificationResult(NamedTuple):
    public_suffix: Optional[str] = None
    registrable_domain: Optional[str] = None
    subdomain: Optional[str] = None
    is_valid: bool = False

    @property
    def domain(self) -> Optional[str]:
        """The label directly left of the public suffix, if any."""
        if self.registrable_domain is None:
            return None
        return self.registrable_domain.split(".", 1)[0]


INVALID = ClassificationResult()


def _split_labels(hostname) -> Optional[List[str]]:
    if not isinstance(hostname, str) or not hostname:
        return None
    if len(hostname) > MAX_HOSTNAME_LENGTH:
        return None
    labels = hostname.lower().split(".")
    for label in labels:
        if not label or len(label) > MAX_LABEL_LENGTH:
            return None
    return labels


def prevailing_rule(host_labels: List[str], index: RuleIndex, include_private: bool = True) -> Optional[Rule]:
    """
    Rule that decides the public suffix for right-to-left host_labels,
    or None when no rule matches.
    """
    best = None
    for rule in index.candidates(host_labels[0], include_private):
        if best is not None and len(rule.labels) < len(best.labels):
            # candidates come longest first
            break
        if not rule.matches(host_labels):
            continue
        if best is None or rule.kind == EXCEPTION:
            best = rule
    return best


def classify(hostname: str, index: RuleIndex, include_private: bool = True) -> ClassificationResult:
    """
    Split a hostname into public suffix, registrable domain and subdomain.

    Never raises: bad input comes back with is_valid=False and nothing else
    set, and a name no rule covers falls back to its rightmost label as
    the suffix.
    """
    labels = _split_labels(hostname)
    if labels is None:
        return INVALID

    reversed_labels = labels[::-1]
    rule = prevailing_rule(reversed_labels, index, include_private)
    k = rule.suffix_length if rule is not None else 1

    public_suffix = ".".join(labels[-k:])
    registrable_domain = None
    subdomain = None
    if len(labels) > k:
        registrable_domain = ".".join(labels[-(k + 1):])
        if len(labels) > k + 1:
            subdomain = ".".join(labels[:-(k + 1)])

    return ClassificationResult(
        public_suffix=public_suffix,
        registrable_domain=registrable_domain,
        subdomain=subdomain,
        is_valid=True,
    )
