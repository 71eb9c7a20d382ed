from urllib.parse import urlparse
from typing import Iterable, List, Pattern
import re

from linkcheck.core.config import ConfigurationError, DEFAULT_USER_AGENT

_REGEX_CHARS = set(".*+?^${}[]|()\\")


def get_headers(user_agent: str = DEFAULT_USER_AGENT):
    """Return headers mimicking a browser to avoid bot detection."""
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Upgrade-Insecure-Requests": "1",
    }


def is_url(value: str) -> bool:
    """True for inputs with both a scheme and a host, e.g. ``https://example.com``."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def split_patterns(values: Iterable[str]) -> List[str]:
    """Flatten ``--ignore a,b --ignore c`` style values into a list."""
    patterns = []
    for value in values:
        patterns.extend(part.strip() for part in value.split(",") if part.strip())
    return patterns


def compile_ignore_pattern(pattern: str) -> Pattern:
    """Turn a domain or glob-like pattern into a regex.

    ``*`` and ``?`` behave like glob wildcards; a plain word with no regex
    characters matches anywhere in the URL.
    """
    if not any(char in _REGEX_CHARS for char in pattern):
        regex = f".*{re.escape(pattern)}.*"
    else:
        regex = pattern.replace("*", ".*").replace("?", ".")
    try:
        return re.compile(regex)
    except re.error as e:
        raise ConfigurationError(f"invalid ignore pattern '{pattern}': {e}") from e


class IgnoreFilter:
    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = list(patterns)
        self._compiled = [compile_ignore_pattern(p) for p in self.patterns]

    def is_ignored(self, url: str) -> bool:
        return any(regex.search(url) for regex in self._compiled)
