"""
On-disk copy of a parsed RuleSet.

The file is JSON:

    {"format": 1, "rules": {"icann": ["com", "*.ck", "!www.ck"], "private": [...]}}

Writers hold an exclusive flock on "<path>.lock" and replace the target with
os.replace(), so readers only ever see a complete old or new file.
"""

import fcntl
import json
import os
import tempfile
from typing import Dict, List

from .parser import MalformedLine, parse_rule
from .rules import SECTIONS, RuleSet

DEFAULT_DATABASE = "public_suffix_list.json"
FORMAT_VERSION = 1


class StoreError(Exception):
    pass


class CorruptionError(StoreError):
    pass


def _serialize(rule_set: RuleSet) -> Dict:
    rules: Dict[str, List[str]] = {name: [] for name in SECTIONS}
    for rule in rule_set:
        rules[rule.section].append(rule.text)
    for texts in rules.values():
        texts.sort()
    return {"format": FORMAT_VERSION, "rules": rules}


def save_rules(rule_set: RuleSet, path: str = DEFAULT_DATABASE) -> None:
    payload = json.dumps(_serialize(rule_set), indent=1, sort_keys=True)
    directory = os.path.dirname(os.path.abspath(path))

    try:
        os.makedirs(directory, exist_ok=True)
        with open(path + ".lock", "w") as lock:
            fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
            try:
                fd, tmp = tempfile.mkstemp(dir=directory, prefix=".tlddb-", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        f.write(payload)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(tmp, path)
                except BaseException:
                    if os.path.exists(tmp):
                        os.unlink(tmp)
                    raise
            finally:
                fcntl.flock(lock.fileno(), fcntl.LOCK_UN)
    except OSError as e:
        raise StoreError(f"write to {path} failed: {e}")


def load_rules(path: str = DEFAULT_DATABASE) -> RuleSet:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise StoreError(f"database file not found: {path}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptionError(f"{path}: not a valid database ({e})")
    except OSError as e:
        raise StoreError(f"cannot read {path}: {e}")

    if not isinstance(data, dict) or data.get("format") != FORMAT_VERSION:
        raise CorruptionError(f"{path}: unknown database format")
    sections = data.get("rules")
    if not isinstance(sections, dict):
        raise CorruptionError(f"{path}: missing rules")

    rules = []
    for name, texts in sections.items():
        if name not in SECTIONS or not isinstance(texts, list):
            raise CorruptionError(f"{path}: bad section {name!r}")
        for text in texts:
            if not isinstance(text, str):
                raise CorruptionError(f"{path}: bad rule {text!r}")
            try:
                rules.append(parse_rule(text, name))
            except MalformedLine as e:
                raise CorruptionError(f"{path}: {e}")

    if not rules:
        raise CorruptionError(f"{path}: database is empty")
    return RuleSet.from_rules(rules)
