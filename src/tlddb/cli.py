import argparse

from .classifier import classify
from .config import load_config, ConfigError
from .database import SuffixDatabase
from .fetch import FetchError, read_lines
from .parser import EmptyRuleSet
from .rules import SECTIONS
from .store import StoreError


def _database(cfg: dict, fetch=None) -> SuffixDatabase:
    kwargs = {}
    if fetch is not None:
        kwargs["fetch"] = fetch
    return SuffixDatabase(
        path=cfg["database"]["path"],
        url=cfg["update"]["url"],
        timeout=cfg["update"]["timeout_seconds"],
        include_private=cfg["classify"]["include_private"],
        **kwargs,
    )


def cmd_check(cfg: dict, args) -> int:
    print("[tlddb] config OK")
    print(f"  database  : {cfg['database']['path']}")
    print(f"  url       : {cfg['update']['url']}")
    print(f"  timeout   : {cfg['update']['timeout_seconds']}s")
    print(f"  private   : {'included' if cfg['classify']['include_private'] else 'excluded'}")

    rule_set = _database(cfg).index.rule_set
    print("[tlddb] database OK")
    print(f"  rules     : {len(rule_set)}")
    for kind, count in rule_set.counts().items():
        print(f"  {kind:<10}: {count}")
    for name in SECTIONS:
        print(f"  {name:<10}: {len(rule_set.section(name))}")
    return 0


def cmd_update(cfg: dict, args) -> int:
    fetch = None
    source = cfg["update"]["url"]
    if args.file:
        source = args.file

        def fetch(url, timeout):
            return read_lines(args.file)

    skipped = []
    index = _database(cfg, fetch).refresh(skipped=skipped)
    print(f"[tlddb] updated {cfg['database']['path']} from {source}")
    print(f"  rules     : {len(index)}")
    print(f"  skipped   : {len(skipped)}")
    if args.verbose:
        for lineno, line, reason in skipped:
            print(f"  line {lineno}: {line} ({reason})")
    return 0


def cmd_classify(cfg: dict, args) -> int:
    db = _database(cfg)
    include_private = cfg["classify"]["include_private"] and not args.icann_only

    status = 0
    for host in args.hosts:
        res = classify(host, db.index, include_private)
        if not res.is_valid:
            print(f"{host}: invalid hostname")
            status = 1
            continue
        print(f"{host}")
        print(f"  suffix    : {res.public_suffix}")
        print(f"  domain    : {res.registrable_domain or '-'}")
        print(f"  subdomain : {res.subdomain or '-'}")
    return status


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="tlddb", description="Local Public Suffix List database")
    ap.add_argument("-c", "--config", help="INI config file (defaults apply when omitted)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("check", help="show config and database statistics")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("update", help="download the list and store it")
    p.add_argument("--file", help="read the list from a local file instead")
    p.add_argument("-v", "--verbose", action="store_true", help="print skipped lines")
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("classify", help="split hostnames into suffix, domain and subdomain")
    p.add_argument("hosts", nargs="+")
    p.add_argument("--icann-only", action="store_true", help="ignore private suffixes")
    p.set_defaults(func=cmd_classify)
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
        status = args.func(cfg, args)
    except (ConfigError, FetchError, EmptyRuleSet, StoreError) as e:
        print(f"[tlddb] error: {e}")
        raise SystemExit(2)
    raise SystemExit(status)


if __name__ == "__main__":
    main()
