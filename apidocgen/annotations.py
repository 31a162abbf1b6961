"""Pattern matchers for the ``@tag value`` annotations found in comments."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .models import EndpointArgument

HTTP_METHODS: Tuple[str, ...] = ("DELETE", "GET", "POST", "PUT")
DEFAULT_METHOD = "GET"

SAMPLE_TAGS: Tuple[str, ...] = ("sampleBody", "sampleResponse")

RECOGNIZED_TAGS: Tuple[str, ...] = (
    "package",
    "endpoint",
    "method",
    "command",
    "broadcast",
    "description",
    "purpose",
    "pathArg",
) + SAMPLE_TAGS

# Free text runs until one of these, so stray "@" characters stay in the text.
NEXT_TAG = r"@(?:" + "|".join(RECOGNIZED_TAGS) + r")(?!\w)"

_FREE_TEXT = r"\s+(?P<value>.*?)(?=" + NEXT_TAG + r"|\Z)"

_SINGLE_VALUE_PATTERNS: Dict[str, re.Pattern[str]] = {
    "package": re.compile(r"@package[ \t]+(?P<value>\S+)"),
    "endpoint": re.compile(r"@endpoint[ \t]+(?P<value>\S+)"),
    "method": re.compile(
        r"@method[ \t]+(?P<value>" + "|".join(HTTP_METHODS) + r")(?!\S)"
    ),
    "command": re.compile(r"@command" + _FREE_TEXT, re.DOTALL),
    "broadcast": re.compile(r"@broadcast[ \t]+(?P<value>\w+)"),
    "description": re.compile(r"@description" + _FREE_TEXT, re.DOTALL),
    "purpose": re.compile(r"@purpose[ \t]+(?P<value>[^\n]+)"),
}

_PATH_ARG_PATTERN = re.compile(
    r"@pathArg[ \t]+(?P<name>\w+)(?:[ \t]+(?P<description>[^\n]*)|[ \t]*)$",
    re.MULTILINE,
)


def match_tag(comment: str, tag: str) -> Optional[str]:
    """Return the trimmed argument of the first ``@tag`` in ``comment``.

    Returns ``None`` when the tag is absent, malformed, or carries an empty
    argument. ``pathArg`` and the sample tags are repeatable and have their
    own extractors (:func:`match_path_args` and :mod:`apidocgen.samples`).
    """
    pattern = _SINGLE_VALUE_PATTERNS.get(tag)
    if pattern is None:
        raise ValueError(f"Unsupported single-value annotation: @{tag}")
    match = pattern.search(comment)
    if match is None:
        return None
    value = match.group("value").strip()
    return value or None


def match_method(comment: str) -> str:
    """Return the declared HTTP method, defaulting to GET."""
    return match_tag(comment, "method") or DEFAULT_METHOD


def match_path_args(comment: str) -> List[EndpointArgument]:
    """Return every ``@pathArg <name> <description>`` in source order."""
    arguments: List[EndpointArgument] = []
    for match in _PATH_ARG_PATTERN.finditer(comment):
        description = (match.group("description") or "").strip()
        arguments.append(EndpointArgument(name=match.group("name"), description=description))
    return arguments


__all__ = [
    "DEFAULT_METHOD",
    "HTTP_METHODS",
    "NEXT_TAG",
    "RECOGNIZED_TAGS",
    "SAMPLE_TAGS",
    "match_method",
    "match_path_args",
    "match_tag",
]
