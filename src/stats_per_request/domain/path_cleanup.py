"""Path cleanups: collapse id-like URL segments so stats group by route shape."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

PathCleanup = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class Rule:
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, path: str) -> str:
        return self.pattern.sub(self.replacement, path)


def _rule(pattern: str, replacement: str) -> Rule:
    return Rule(re.compile(pattern), replacement)


# Order matters: specific shapes (msgid, hexpath, sha1, uuid) must be
# replaced before the generic digit and hex rules can eat them.
IDISH_RULES: tuple[Rule, ...] = (
    _rule(r"/[a-f0-9\-.]+@[a-z0-9\-.]+/", "/:msgid/"),
    _rule(r"/[a-f0-9]+/[a-f0-9/]+/", "/:hexpath/"),
    _rule(r"[a-f0-9]{40}", ":sha1"),
    _rule(r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}", ":uuid"),
    _rule(r"[0-9]{6,}", ":int"),
    _rule(r"[0-9]+x[0-9]+", ":imgdim"),
    _rule(r"/[0-9]+/", "/:int/"),
    _rule(r"/[^/]{55,}/", "/:long/"),
    _rule(r"/[a-f0-9\-]{8,}/", "/:hex/"),
)


def replace_idish(path: str) -> str:
    """Replace things that look like ids with fixed tokens.

    /users/1234567/profile                          -> /users/:int/profile
    /files/da39a3ee5e6b4b0d3255bfef95601890afd80709 -> /files/:sha1
    /img/300x200/banner                             -> /img/:imgdim/banner

    The path is lower-cased. A trailing slash is appended while the rules
    run so every segment is delimited on both sides, and removed afterwards.
    """
    cleaned = (path + "/").lower()
    for rule in IDISH_RULES:
        cleaned = rule.apply(cleaned)
    return cleaned[:-1]


def apply_path_cleanups(path: str, cleanups: Iterable[PathCleanup]) -> str:
    for cleanup in cleanups:
        path = cleanup(path)
    return path


BUILTIN_CLEANUPS: dict[str, PathCleanup] = {
    "replace_idish": replace_idish,
}
