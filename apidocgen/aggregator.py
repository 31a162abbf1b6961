"""Fold classified documents into per-package collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .logging import get_logger
from .models import BroadcastDoc, Catalog, Document, PackageDoc, RestDoc, RpcDoc


@dataclass
class _PackageBucket:
    name: str
    rest_docs: List[RestDoc] = field(default_factory=list)
    rpc_docs: List[RpcDoc] = field(default_factory=list)
    broadcast_docs: List[BroadcastDoc] = field(default_factory=list)


class PackageAggregator:
    """Collects documents by package name and produces a sorted Catalog."""

    def __init__(self, descriptions: Optional[Mapping[str, str]] = None) -> None:
        self._descriptions = dict(descriptions or {})
        self._buckets: Dict[str, _PackageBucket] = {}
        self._catalog: Optional[Catalog] = None
        self.logger = get_logger("aggregator")

    @property
    def finalized(self) -> bool:
        return self._catalog is not None

    def add(self, document: Document) -> None:
        """Append ``document`` to its package, creating the package on first use."""
        if self._catalog is not None:
            raise RuntimeError("Cannot add documents to a finalized catalog")

        bucket = self._buckets.get(document.package_name)
        if bucket is None:
            bucket = _PackageBucket(name=document.package_name)
            self._buckets[bucket.name] = bucket
            self.logger.debug("Created package %s", bucket.name)

        if isinstance(document, RestDoc):
            bucket.rest_docs.append(document)
        elif isinstance(document, RpcDoc):
            bucket.rpc_docs.append(document)
        elif isinstance(document, BroadcastDoc):
            bucket.broadcast_docs.append(document)
        else:
            raise TypeError(f"Unsupported document type: {type(document).__name__}")

    def extend(self, documents: Iterable[Document]) -> None:
        for document in documents:
            self.add(document)

    def finalize(self) -> Catalog:
        """Sort each package's RPC and broadcast lists and freeze the result."""
        if self._catalog is not None:
            return self._catalog

        packages: Dict[str, PackageDoc] = {}
        for name, bucket in self._buckets.items():
            packages[name] = PackageDoc(
                name=name,
                description=self._descriptions.get(name, ""),
                rest_docs=tuple(bucket.rest_docs),
                rpc_docs=tuple(sorted(bucket.rpc_docs, key=lambda doc: doc.command)),
                broadcast_docs=tuple(sorted(bucket.broadcast_docs, key=lambda doc: doc.name)),
            )

        self._catalog = Catalog(packages=packages, package_names=tuple(sorted(packages)))
        self.logger.debug("Finalized catalog with %d package(s)", len(packages))
        return self._catalog


__all__ = ["PackageAggregator"]
