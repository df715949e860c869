from typing import Dict, Iterable, List, Tuple, Union

from .parser import parse_lines
from .rules import ICANN, PRIVATE, Rule, RuleSet


class SuffixNotFound(KeyError):
    pass


class RuleIndex:
    """
    Rules grouped by their rightmost label.

    Built once from a RuleSet and never changed afterwards, so any number of
    threads may read it at the same time.
    """

    def __init__(self, rule_set: RuleSet):
        by_tld: Dict[str, List[Rule]] = {}
        by_text: Dict[str, str] = {}
        for rule in rule_set:
            by_tld.setdefault(rule.tld, []).append(rule)
            # a rule listed in both sections is reported as icann
            if rule.section == ICANN or rule.text not in by_text:
                by_text[rule.text] = rule.section

        self._rule_set = rule_set
        # longest patterns first so the first match found is the longest one
        self._by_tld: Dict[str, Tuple[Rule, ...]] = {
            tld: tuple(sorted(rules, key=lambda r: (-len(r.labels), r.kind, r.section)))
            for tld, rules in by_tld.items()
        }
        self._by_text = by_text

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def __len__(self) -> int:
        return len(self._rule_set)

    def tlds(self) -> List[str]:
        return sorted(self._by_tld)

    def candidates(self, tld: str, include_private: bool = True) -> Tuple[Rule, ...]:
        rules = self._by_tld.get(tld, ())
        if include_private:
            return rules
        return tuple(r for r in rules if r.section != PRIVATE)

    def exists(self, rule_text: str) -> bool:
        """True if the list contains this rule, written as in the list ("*.ck", "!www.ck")."""
        return rule_text.strip().lower() in self._by_text

    def get_type(self, rule_text: str) -> str:
        """Section (icann or private) a rule belongs to."""
        key = rule_text.strip().lower()
        if key not in self._by_text:
            raise SuffixNotFound(rule_text)
        return self._by_text[key]

    def is_icann(self, rule_text: str) -> bool:
        return self.get_type(rule_text) == ICANN

    def is_private(self, rule_text: str) -> bool:
        return self.get_type(rule_text) == PRIVATE


def build_rule_index(lines: Iterable[Union[str, bytes]]) -> RuleIndex:
    """Parse raw list lines and index them. Raises EmptyRuleSet."""
    return RuleIndex(parse_lines(lines))
