from typing import Iterable, Iterator, NamedTuple, Sequence, Tuple

PLAIN = "plain"
WILDCARD = "wildcard"
EXCEPTION = "exception"

ICANN = "icann"
PRIVATE = "private"
SECTIONS = (ICANN, PRIVATE)

WILDCARD_LABEL = "*"


class Rule(NamedTuple):
    """
    One Public Suffix List rule.

    labels are stored right-to-left: "co.uk" -> ("uk", "co").
    """
    labels: Tuple[str, ...]
    kind: str
    section: str = ICANN

    @property
    def text(self) -> str:
        """The rule as it is written in the list (e.g. "*.ck", "!www.ck")."""
        name = ".".join(reversed(self.labels))
        return "!" + name if self.kind == EXCEPTION else name

    @property
    def tld(self) -> str:
        return self.labels[0]

    @property
    def suffix_length(self) -> int:
        # an exception marks a registrable name, so its leftmost label is not public
        if self.kind == EXCEPTION:
            return len(self.labels) - 1
        return len(self.labels)

    def matches(self, host_labels: Sequence[str]) -> bool:
        """host_labels must be right-to-left, like self.labels."""
        if len(host_labels) < len(self.labels):
            return False
        for want, got in zip(self.labels, host_labels):
            if want != WILDCARD_LABEL and want != got:
                return False
        return True


class RuleSet:
    """
    Parsed rules partitioned by kind. Immutable; a new list means a new RuleSet.
    """
    __slots__ = ("plain", "wildcard", "exception")

    def __init__(self, plain=(), wildcard=(), exception=()):
        object.__setattr__(self, "plain", frozenset(plain))
        object.__setattr__(self, "wildcard", frozenset(wildcard))
        object.__setattr__(self, "exception", frozenset(exception))

    def __setattr__(self, name, value):
        raise AttributeError("RuleSet is immutable")

    def __eq__(self, other) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return (
            self.plain == other.plain
            and self.wildcard == other.wildcard
            and self.exception == other.exception
        )

    def __hash__(self) -> int:
        return hash((self.plain, self.wildcard, self.exception))

    def __repr__(self) -> str:
        return (
            f"<RuleSet plain={len(self.plain)} wildcard={len(self.wildcard)} "
            f"exception={len(self.exception)}>"
        )

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "RuleSet":
        buckets = {PLAIN: set(), WILDCARD: set(), EXCEPTION: set()}
        for rule in rules:
            buckets[rule.kind].add(rule)
        return cls(
            plain=frozenset(buckets[PLAIN]),
            wildcard=frozenset(buckets[WILDCARD]),
            exception=frozenset(buckets[EXCEPTION]),
        )

    def __iter__(self) -> Iterator[Rule]:
        yield from self.plain
        yield from self.wildcard
        yield from self.exception

    def __len__(self) -> int:
        return len(self.plain) + len(self.wildcard) + len(self.exception)

    def __contains__(self, rule) -> bool:
        return rule in self.plain or rule in self.wildcard or rule in self.exception

    def section(self, name: str) -> "RuleSet":
        return RuleSet.from_rules(r for r in self if r.section == name)

    def counts(self) -> dict:
        return {
            PLAIN: len(self.plain),
            WILDCARD: len(self.wildcard),
            EXCEPTION: len(self.exception),
        }
