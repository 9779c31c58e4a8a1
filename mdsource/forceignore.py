"""Gitignore-style path exclusion scoped to the directory of an ignore file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Sequence

from .logging import get_logger

DEFAULT_IGNORE_FILE = ".forceignore"

logger = get_logger("forceignore")


@dataclass(frozen=True)
class IgnorePattern:
    """One pattern line of an ignore file, compiled to a regular expression.

    Patterns without a slash match a single path segment at any depth. Patterns
    with a slash match the whole path relative to the ignore file's directory.
    """

    pattern: str
    negate: bool
    directory_only: bool
    anchored: bool
    regex: Pattern[str]

    @classmethod
    def parse(cls, line: str) -> Optional["IgnorePattern"]:
        """Parse one line; comments and blank lines yield None."""
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        # a slash anywhere but the end ties the pattern to the ignore root
        anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(
            pattern=text,
            negate=negate,
            directory_only=directory_only,
            anchored=anchored,
            regex=re.compile(glob_to_regex(text)),
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return self.regex.fullmatch(rel_path) is not None
        return self.regex.fullmatch(rel_path.rsplit("/", 1)[-1]) is not None


def glob_to_regex(glob: str) -> str:
    """Translate a gitignore glob into a regular expression over `/`-separated paths.

    `*` and `?` stay within one segment, a `**/` prefix or `/**/` infix spans zero
    or more directories and a trailing `/**` matches everything below.
    """
    out: List[str] = []
    index = 0
    length = len(glob)
    while index < length:
        if glob.startswith("**/", index) and (index == 0 or glob[index - 1] == "/"):
            out.append("(?:.*/)?")
            index += 3
        elif glob.startswith("/**", index) and index + 3 == length:
            out.append("/.*")
            index += 3
        elif glob.startswith("**", index):
            out.append(".*")
            index += 2
        elif glob[index] == "*":
            out.append("[^/]*")
            index += 1
        elif glob[index] == "?":
            out.append("[^/]")
            index += 1
        elif glob[index] == "[" and "]" in glob[index + 2 :]:
            close = glob.index("]", index + 2)
            body = glob[index + 1 : close].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            index = close + 1
        else:
            out.append(re.escape(glob[index]))
            index += 1
    return "".join(out)


def parse_ignore_lines(lines: Sequence[str]) -> List[IgnorePattern]:
    return [pattern for pattern in map(IgnorePattern.parse, lines) if pattern is not None]


def _is_excluded(rel_path: str, is_dir: bool, patterns: Sequence[IgnorePattern]) -> bool:
    excluded = False
    for pattern in patterns:
        if pattern.matches(rel_path, is_dir):
            excluded = not pattern.negate
    return excluded


def search_up(seed: str, file_name: str) -> Optional[Path]:
    """Return the nearest `file_name` in `seed` or one of its ancestors."""
    current = os.path.abspath(seed)
    if not os.path.isdir(current):
        current = os.path.dirname(current)
    while True:
        candidate = os.path.join(current, file_name)
        if os.path.isfile(candidate):
            return Path(candidate)
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


class ForceIgnore:
    """Evaluates ignore patterns relative to the ignore file's directory.

    Without an ignore file nothing is denied.
    """

    def __init__(self, ignore_file: Path | str | None = None) -> None:
        self._root: Optional[str] = None
        self._patterns: List[IgnorePattern] = []
        if ignore_file is None:
            return
        path = Path(ignore_file)
        if not path.is_file():
            return
        self._root = str(path.resolve().parent)
        self._patterns = parse_ignore_lines(path.read_text(encoding="utf-8").splitlines())
        logger.debug("Loaded %d ignore patterns from %s", len(self._patterns), path)

    @classmethod
    def find_and_create(cls, seed: str, file_name: str = DEFAULT_IGNORE_FILE) -> "ForceIgnore":
        """Bind to the nearest ignore file found by walking upward from `seed`."""
        return cls(search_up(seed, file_name))

    @property
    def root(self) -> Optional[str]:
        return self._root

    def denies(self, path: str, is_dir: Optional[bool] = None) -> bool:
        if self._root is None or not self._patterns:
            return False

        absolute = os.path.abspath(path)
        rel_path = os.path.relpath(absolute, self._root)
        if rel_path == "." or rel_path.startswith(".."):
            return False

        parts = rel_path.replace(os.sep, "/").split("/")
        if is_dir is None:
            is_dir = os.path.isdir(absolute)
        # an excluded directory cannot have its contents re-included
        for depth in range(1, len(parts) + 1):
            is_last = depth == len(parts)
            if _is_excluded("/".join(parts[:depth]), is_dir if is_last else True, self._patterns):
                return True
        return False

    def accepts(self, path: str, is_dir: Optional[bool] = None) -> bool:
        return not self.denies(path, is_dir)


__all__ = [
    "DEFAULT_IGNORE_FILE",
    "ForceIgnore",
    "IgnorePattern",
    "glob_to_regex",
    "parse_ignore_lines",
    "search_up",
]
