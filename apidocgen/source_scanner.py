"""Source tree walking and comment collection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .comments import SYNTAX_BY_SUFFIX, CommentSyntax, extract_comments
from .logging import get_logger
from .models import SourceComment

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "vendor",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".tox",
}


class ScanError(RuntimeError):
    """Raised when a source file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .apidocgen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ScanError(path, exc.strerror or str(exc)) from exc

    rules: List[IgnoreRule] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class SourceScanner:
    """Walks a source tree and yields the comments of every supported file."""

    def __init__(
        self,
        *,
        exclude_paths: Iterable[str] = (),
        extensions: Iterable[str] = (),
    ) -> None:
        self._extra_rules = [
            rule for rule in (build_ignore_rule(pattern) for pattern in exclude_paths) if rule
        ]
        self._extensions = {suffix.lower() for suffix in extensions}
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path) -> Iterator[SourceComment]:
        """Yield comments file by file in sorted path order."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        rules = _parse_gitignore(root_path / ".gitignore") + self._extra_rules
        for path in self._iter_files(root_path, rules):
            syntax = self._syntax_for(path)
            if syntax is None:
                continue
            rel_path = path.relative_to(root_path).as_posix()
            source = self._read(path)
            comments = extract_comments(source, syntax)
            self.logger.debug("Found %d comment(s) in %s", len(comments), rel_path)
            for line, text in comments:
                yield SourceComment(path=rel_path, line=line, text=text)

    def _syntax_for(self, path: Path) -> CommentSyntax | None:
        suffix = path.suffix.lower()
        if self._extensions and suffix not in self._extensions:
            return None
        return SYNTAX_BY_SUFFIX.get(suffix)

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ScanError(path, exc.strerror or str(exc)) from exc

    @staticmethod
    def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename


__all__ = ["IgnoreRule", "ScanError", "SourceScanner", "build_ignore_rule"]
