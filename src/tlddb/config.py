# src/tlddb/config.py
from configparser import ConfigParser, Error as ConfigParserError
from typing import Optional

from .fetch import DEFAULT_TIMEOUT, PUBLIC_SUFFIX_LIST_URL
from .store import DEFAULT_DATABASE


class ConfigError(Exception):
    pass


def load_config(path: Optional[str] = None) -> dict:
    """
    Load and validate tlddb configuration from an INI-style file.
    With no path, every setting takes its default.
    """
    cp = ConfigParser()
    if path is not None:
        try:
            read = cp.read(path, encoding="utf-8")
        except ConfigParserError as e:
            raise ConfigError(f"config file is not valid INI: {e}")
        if not read:
            raise ConfigError(f"config file not found or unreadable: {path}")

    db_path = cp.get("database", "path", fallback=DEFAULT_DATABASE).strip()
    if not db_path:
        raise ConfigError("[database].path must not be empty")

    url = cp.get("update", "url", fallback=PUBLIC_SUFFIX_LIST_URL).strip()
    if not url.startswith(("https://", "http://", "file://")):
        raise ConfigError("[update].url must be an http(s):// or file:// url")

    try:
        timeout = cp.getint("update", "timeout_seconds", fallback=DEFAULT_TIMEOUT)
    except ValueError:
        raise ConfigError("[update].timeout_seconds must be an integer")
    if timeout <= 0:
        raise ConfigError("[update].timeout_seconds must be > 0")

    try:
        include_private = cp.getboolean("classify", "include_private", fallback=True)
    except ValueError:
        raise ConfigError("[classify].include_private must be true or false")

    cfg = {
        "database": {
            "path": db_path,
        },
        "update": {
            "url": url,
            "timeout_seconds": timeout,
        },
        "classify": {
            "include_private": include_private,
        },
    }
    return cfg
