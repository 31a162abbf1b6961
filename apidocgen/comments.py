"""Comment extraction for the source languages apidocgen understands."""

from __future__ import annotations

import ast
import io
import re
import textwrap
import tokenize
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .logging import get_logger


class CommentSyntax(str, Enum):
    """Comment conventions shared by groups of languages."""

    C_FAMILY = "c"
    RUST = "rust"
    HASH = "hash"
    PYTHON = "python"


SYNTAX_BY_SUFFIX: Dict[str, CommentSyntax] = {
    ".go": CommentSyntax.C_FAMILY,
    ".c": CommentSyntax.C_FAMILY,
    ".h": CommentSyntax.C_FAMILY,
    ".cc": CommentSyntax.C_FAMILY,
    ".cpp": CommentSyntax.C_FAMILY,
    ".hh": CommentSyntax.C_FAMILY,
    ".hpp": CommentSyntax.C_FAMILY,
    ".java": CommentSyntax.C_FAMILY,
    ".js": CommentSyntax.C_FAMILY,
    ".jsx": CommentSyntax.C_FAMILY,
    ".mjs": CommentSyntax.C_FAMILY,
    ".ts": CommentSyntax.C_FAMILY,
    ".tsx": CommentSyntax.C_FAMILY,
    ".cs": CommentSyntax.C_FAMILY,
    ".swift": CommentSyntax.C_FAMILY,
    ".kt": CommentSyntax.C_FAMILY,
    ".kts": CommentSyntax.C_FAMILY,
    ".scala": CommentSyntax.C_FAMILY,
    ".rs": CommentSyntax.RUST,
    ".php": CommentSyntax.C_FAMILY,
    ".dart": CommentSyntax.C_FAMILY,
    ".m": CommentSyntax.C_FAMILY,
    ".mm": CommentSyntax.C_FAMILY,
    ".rb": CommentSyntax.HASH,
    ".sh": CommentSyntax.HASH,
    ".bash": CommentSyntax.HASH,
    ".pl": CommentSyntax.HASH,
    ".r": CommentSyntax.HASH,
    ".yaml": CommentSyntax.HASH,
    ".yml": CommentSyntax.HASH,
    ".toml": CommentSyntax.HASH,
    ".py": CommentSyntax.PYTHON,
    ".pyi": CommentSyntax.PYTHON,
}

_LINE_MARKERS = {
    CommentSyntax.C_FAMILY: "//",
    CommentSyntax.RUST: "//",
    CommentSyntax.HASH: "#",
}
_STRING_DELIMITERS = {
    CommentSyntax.C_FAMILY: "\"'`",
    CommentSyntax.RUST: "\"'",
    CommentSyntax.HASH: "\"'",
}
_BLOCK_SYNTAXES = frozenset({CommentSyntax.C_FAMILY, CommentSyntax.RUST})

# 'x', '\n', '\x7f' and '\u{1F600}'; any other quote is a lifetime or label.
_RUST_CHAR_LITERAL = re.compile(r"'(?:\\(?:u\{[0-9A-Fa-f]{1,6}\}|x[0-9A-Fa-f]{2}|.)|[^\\'\n])'")

logger = get_logger("comments")


@dataclass
class _RawComment:
    line: int
    text: str
    block: bool
    own_line: bool
    end_line: int = 0

    def __post_init__(self) -> None:
        if not self.end_line:
            self.end_line = self.line


def syntax_for_path(path: str) -> Optional[CommentSyntax]:
    """Return the comment syntax for ``path`` based on its suffix."""
    dot = path.rfind(".")
    if dot == -1:
        return None
    return SYNTAX_BY_SUFFIX.get(path[dot:].lower())


def extract_comments(source: str, syntax: CommentSyntax) -> List[Tuple[int, str]]:
    """Return ``(line, text)`` pairs for each comment or comment group in ``source``."""
    if syntax is CommentSyntax.PYTHON:
        try:
            raw = _python_comments(source)
        except (SyntaxError, ValueError, tokenize.TokenError) as exc:
            logger.debug("Python parse failed (%s); scanning for # comments instead", exc)
            raw = _scan(source, CommentSyntax.HASH)
    else:
        raw = _scan(source, syntax)
    return [(comment.line, comment.text) for comment in _group(raw) if comment.text.strip()]


def _scan(source: str, syntax: CommentSyntax) -> List[_RawComment]:
    marker = _LINE_MARKERS[syntax]
    delimiters = _STRING_DELIMITERS[syntax]
    allow_blocks = syntax in _BLOCK_SYNTAXES
    rust = syntax is CommentSyntax.RUST

    comments: List[_RawComment] = []
    index = 0
    length = len(source)
    # Newlines before ``counted`` are already included in ``line``.
    line = 1
    counted = 0
    while index < length:
        if source.startswith(marker, index):
            line += source.count("\n", counted, index)
            counted = index
            end = source.find("\n", index)
            if end == -1:
                end = length
            comments.append(
                _RawComment(
                    line=line,
                    text=_strip_line_marker(source[index + len(marker) : end], marker),
                    block=False,
                    own_line=_starts_line(source, index),
                )
            )
            index = end
            continue
        if allow_blocks and source.startswith("/*", index):
            line += source.count("\n", counted, index)
            counted = index
            end = source.find("*/", index + 2)
            body_end = length if end == -1 else end
            comments.append(
                _RawComment(
                    line=line,
                    text=_clean_block(source[index + 2 : body_end]),
                    block=True,
                    own_line=_starts_line(source, index),
                )
            )
            index = length if end == -1 else end + 2
            continue
        char = source[index]
        if rust and char == "'":
            literal = _RUST_CHAR_LITERAL.match(source, index)
            index = literal.end() if literal else index + 1
            continue
        if char in delimiters:
            index = _skip_string(source, index, char, multiline=rust)
            continue
        index += 1
    return comments


def _skip_string(source: str, start: int, quote: str, *, multiline: bool = False) -> int:
    # Backtick strings are raw and may span lines; the others end at the line
    # unless the language allows multi-line literals.
    raw = quote == "`"
    multiline = multiline or raw
    index = start + 1
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\" and not raw:
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n" and not multiline:
            return index
        index += 1
    return length


def _starts_line(source: str, index: int) -> bool:
    line_start = source.rfind("\n", 0, index) + 1
    return not source[line_start:index].strip()


def _strip_line_marker(text: str, marker: str) -> str:
    # Doc-comment variants: ///, //!, ##
    text = text.lstrip(marker[0])
    if text.startswith("!"):
        text = text[1:]
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


def _clean_block(body: str) -> str:
    lines = body.split("\n")
    first = lines[0].lstrip("*!").strip()
    rest = lines[1:]
    if rest and all(line.lstrip().startswith("*") for line in rest if line.strip()):
        rest = [_strip_decoration(line) for line in rest]
    else:
        rest = textwrap.dedent("\n".join(rest)).split("\n") if rest else []
    return "\n".join([first, *rest]).strip()


def _strip_decoration(line: str) -> str:
    stripped = line.lstrip()
    if not stripped:
        return ""
    stripped = stripped[1:]
    if stripped.startswith(" "):
        stripped = stripped[1:]
    return stripped.rstrip()


def _python_comments(source: str) -> List[_RawComment]:
    comments: List[_RawComment] = []
    for token in tokenize.generate_tokens(io.StringIO(source).readline):
        if token.type != tokenize.COMMENT:
            continue
        row, column = token.start
        comments.append(
            _RawComment(
                line=row,
                text=_strip_line_marker(token.string[1:], "#"),
                block=False,
                own_line=not token.line[:column].strip(),
            )
        )

    tree = ast.parse(source)
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        docstring = ast.get_docstring(node, clean=True)
        if docstring:
            comments.append(
                _RawComment(line=node.body[0].lineno, text=docstring, block=True, own_line=True)
            )

    comments.sort(key=lambda comment: comment.line)
    return comments


def _group(comments: Sequence[_RawComment]) -> List[_RawComment]:
    """Merge runs of own-line line comments on consecutive lines."""
    grouped: List[_RawComment] = []
    for comment in comments:
        previous = grouped[-1] if grouped else None
        if (
            previous is not None
            and not comment.block
            and not previous.block
            and comment.own_line
            and previous.own_line
            and comment.line == previous.end_line + 1
        ):
            previous.text = f"{previous.text}\n{comment.text}"
            previous.end_line = comment.line
            continue
        grouped.append(
            _RawComment(
                line=comment.line,
                text=comment.text,
                block=comment.block,
                own_line=comment.own_line,
                end_line=comment.end_line,
            )
        )
    return grouped


__all__ = ["CommentSyntax", "SYNTAX_BY_SUFFIX", "extract_comments", "syntax_for_path"]
