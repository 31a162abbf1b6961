"""Classify annotated comments into REST, RPC or broadcast documents."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from .annotations import match_method, match_path_args, match_tag
from .models import BroadcastDoc, Document, RestDoc, RpcDoc
from .samples import extract_samples

DocBuilder = Callable[[str], Optional[Document]]


def build_rest_doc(comment: str) -> Optional[RestDoc]:
    """Build a REST endpoint document; requires ``@package`` and ``@endpoint``."""
    package_name = match_tag(comment, "package")
    if package_name is None:
        return None
    endpoint = match_tag(comment, "endpoint")
    if endpoint is None:
        return None

    return RestDoc(
        package_name=package_name,
        endpoint=endpoint,
        method=match_method(comment),
        description=match_tag(comment, "description") or "",
        purpose=match_tag(comment, "purpose") or "",
        path_args=tuple(match_path_args(comment)),
        samples=tuple(extract_samples(comment)),
    )


def build_rpc_doc(comment: str) -> Optional[RpcDoc]:
    """Build an RPC command document; requires ``@package`` and ``@command``."""
    package_name = match_tag(comment, "package")
    if package_name is None:
        return None
    command = match_tag(comment, "command")
    if command is None:
        return None

    return RpcDoc(
        package_name=package_name,
        command=command,
        description=match_tag(comment, "description") or "",
        samples=tuple(extract_samples(comment)),
    )


def build_broadcast_doc(comment: str) -> Optional[BroadcastDoc]:
    """Build a broadcast document; requires ``@package`` and ``@broadcast``."""
    package_name = match_tag(comment, "package")
    if package_name is None:
        return None
    name = match_tag(comment, "broadcast")
    if name is None:
        return None

    return BroadcastDoc(
        package_name=package_name,
        name=name,
        description=match_tag(comment, "description") or "",
        samples=tuple(extract_samples(comment)),
    )


# Priority order: the first builder that succeeds claims the comment.
DOC_BUILDERS: Tuple[DocBuilder, ...] = (
    build_rest_doc,
    build_rpc_doc,
    build_broadcast_doc,
)


def classify(
    comment: str, builders: Tuple[DocBuilder, ...] = DOC_BUILDERS
) -> Optional[Document]:
    """Return the first document any builder produces, or None for ordinary comments."""
    if "@package" not in comment:
        return None
    for builder in builders:
        document = builder(comment)
        if document is not None:
            return document
    return None


__all__ = [
    "DOC_BUILDERS",
    "DocBuilder",
    "build_broadcast_doc",
    "build_rest_doc",
    "build_rpc_doc",
    "classify",
]
