"""Extract annotated API documentation from source comments and render it as HTML."""

from .aggregator import PackageAggregator
from .classifier import classify
from .models import (
    BroadcastDoc,
    Catalog,
    DocShape,
    EndpointArgument,
    PackageDoc,
    RestDoc,
    RpcDoc,
    Sample,
    SampleKind,
)
from .orchestrator import Orchestrator, build_catalog

__version__ = "0.1.0"

__all__ = [
    "BroadcastDoc",
    "Catalog",
    "DocShape",
    "EndpointArgument",
    "Orchestrator",
    "PackageAggregator",
    "PackageDoc",
    "RestDoc",
    "RpcDoc",
    "Sample",
    "SampleKind",
    "build_catalog",
    "classify",
]
