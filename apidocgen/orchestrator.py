"""Coordinates the scan -> classify -> aggregate -> render pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .aggregator import PackageAggregator
from .classifier import classify
from .config import ApiDocConfig, load_config
from .logging import get_logger
from .models import Catalog
from .render import SiteRenderer
from .source_scanner import SourceScanner


@dataclass
class BuildOutcome:
    """Result of a successful documentation build."""

    output_dir: Path
    catalog: Catalog
    pages: List[Path]


def build_catalog(
    comments: Iterable[str], descriptions: Optional[Mapping[str, str]] = None
) -> Catalog:
    """Classify each comment in order and return the finalized Catalog."""
    aggregator = PackageAggregator(descriptions)
    for comment in comments:
        document = classify(comment)
        if document is not None:
            aggregator.add(document)
    return aggregator.finalize()


class Orchestrator:
    """Runs apidocgen pipelines against a source tree."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        renderer: SiteRenderer | None = None,
    ) -> None:
        self._scanner_override = scanner
        self._renderer_override = renderer
        self.logger = get_logger("orchestrator")

    def collect(self, path: str | Path) -> Catalog:
        """Scan ``path`` and aggregate every annotated comment into a Catalog."""
        source_root = self._resolve_root(path)
        config = load_config(source_root)
        return self._collect(source_root, config)

    def run_build(self, path: str | Path, output: str | Path | None = None) -> BuildOutcome:
        """Build the HTML site for ``path`` and return where it was written."""
        source_root = self._resolve_root(path)
        config = load_config(source_root)
        self.logger.info("Starting build for %s", source_root)

        catalog = self._collect(source_root, config)

        if output is not None:
            output_root = Path(output).expanduser().resolve()
        else:
            output_root = config.output_dir or source_root
        output_dir = output_root / config.output_subdir

        renderer = self._renderer_override or SiteRenderer(config.templates_dir)
        pages = renderer.render(catalog, output_dir, title=config.title)
        self.logger.info("Documentation written to %s", output_dir)
        return BuildOutcome(output_dir=output_dir, catalog=catalog, pages=pages)

    def run_dump(self, path: str | Path) -> str:
        """Return the Catalog for ``path`` as indented JSON."""
        catalog = self.collect(path)
        return json.dumps(catalog.to_dict(), indent=2)

    def _collect(self, source_root: Path, config: ApiDocConfig) -> Catalog:
        scanner = self._scanner_override or SourceScanner(
            exclude_paths=config.exclude_paths,
            extensions=config.extensions,
        )
        aggregator = PackageAggregator(config.packages)

        scanned = 0
        matched = 0
        for comment in scanner.scan(source_root):
            scanned += 1
            document = classify(comment.text)
            if document is None:
                continue
            matched += 1
            self.logger.debug(
                "%s:%d -> %s document in package %s",
                comment.path,
                comment.line,
                document.shape.value,
                document.package_name,
            )
            aggregator.add(document)

        catalog = aggregator.finalize()
        self.logger.info(
            "Classified %d of %d comment(s) into %d package(s)",
            matched,
            scanned,
            len(catalog),
        )
        return catalog

    @staticmethod
    def _resolve_root(path: str | Path) -> Path:
        return Path(path).expanduser().resolve()


__all__ = ["BuildOutcome", "Orchestrator", "build_catalog"]
