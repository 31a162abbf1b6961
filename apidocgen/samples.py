"""Extraction of fenced ``@sampleBody`` / ``@sampleResponse`` blocks."""

from __future__ import annotations

import re
from typing import List, Optional

from .annotations import NEXT_TAG
from .logging import get_logger
from .models import Sample, SampleKind

_SAMPLE_KINDS = {
    "sampleBody": SampleKind.BODY,
    "sampleResponse": SampleKind.RESPONSE,
}

_REGION_PATTERN = re.compile(
    r"@(?P<tag>sampleBody|sampleResponse)(?!\w)(?P<body>.*?)(?=" + NEXT_TAG + r"|\Z)",
    re.DOTALL,
)

# The info string runs to the end of the opening fence line.
_FENCE_PATTERN = re.compile(
    r"```[ \t]*(?P<language>[^\n`]*?)[ \t]*\n(?P<code>.*?)```",
    re.DOTALL,
)

logger = get_logger("samples")


def extract_samples(comment: str) -> List[Sample]:
    """Return every complete sample block in the order its tag appears."""
    samples: List[Sample] = []
    for region in _REGION_PATTERN.finditer(comment):
        kind = _SAMPLE_KINDS[region.group("tag")]
        sample = parse_sample_region(region.group("body"), kind)
        if sample is None:
            logger.debug("Skipping @%s without a complete code fence", region.group("tag"))
            continue
        samples.append(sample)
    return samples


def parse_sample_region(region: str, kind: SampleKind) -> Optional[Sample]:
    """Split one sample region into leading prose, language tag and code."""
    fence = _FENCE_PATTERN.search(region)
    if fence is None:
        return None
    return Sample(
        leading_text=region[: fence.start()].strip(),
        code=fence.group("code").strip(),
        kind=kind,
        language=fence.group("language").strip(),
    )


__all__ = ["extract_samples", "parse_sample_region"]
