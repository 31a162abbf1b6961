"""Core data models shared across apidocgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Optional, Tuple, Union


class SampleKind(str, Enum):
    """Which side of an exchange a sample illustrates."""

    BODY = "body"
    RESPONSE = "response"


class DocShape(str, Enum):
    """The three document shapes an annotated comment can describe."""

    REST = "rest"
    RPC = "rpc"
    BROADCAST = "broadcast"


@dataclass(frozen=True)
class Sample:
    """A fenced example embedded in a comment."""

    leading_text: str
    code: str
    kind: SampleKind
    language: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.leading_text,
            "code": self.code,
            "type": self.kind.value,
            "language": self.language,
        }


@dataclass(frozen=True)
class EndpointArgument:
    """A documented path parameter of a REST endpoint."""

    name: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class RestDoc:
    """Documentation for a single HTTP endpoint."""

    shape: ClassVar[DocShape] = DocShape.REST

    package_name: str
    endpoint: str
    method: str = "GET"
    description: str = ""
    purpose: str = ""
    path_args: Tuple[EndpointArgument, ...] = ()
    samples: Tuple[Sample, ...] = ()

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.endpoint, self.method)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package_name": self.package_name,
            "endpoint": self.endpoint,
            "method": self.method,
            "description": self.description,
            "purpose": self.purpose,
            "path_arguments": [arg.to_dict() for arg in self.path_args],
            "samples": [sample.to_dict() for sample in self.samples],
        }


@dataclass(frozen=True)
class RpcDoc:
    """Documentation for an RPC command."""

    shape: ClassVar[DocShape] = DocShape.RPC

    package_name: str
    command: str
    description: str = ""
    samples: Tuple[Sample, ...] = ()

    @property
    def identity(self) -> str:
        return self.command

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package_name": self.package_name,
            "command": self.command,
            "description": self.description,
            "samples": [sample.to_dict() for sample in self.samples],
        }


@dataclass(frozen=True)
class BroadcastDoc:
    """Documentation for a broadcast event."""

    shape: ClassVar[DocShape] = DocShape.BROADCAST

    package_name: str
    name: str
    description: str = ""
    samples: Tuple[Sample, ...] = ()

    @property
    def identity(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package_name": self.package_name,
            "name": self.name,
            "description": self.description,
            "samples": [sample.to_dict() for sample in self.samples],
        }


Document = Union[RestDoc, RpcDoc, BroadcastDoc]


@dataclass(frozen=True)
class PackageDoc:
    """All documents that share one ``@package`` name."""

    name: str
    description: str = ""
    rest_docs: Tuple[RestDoc, ...] = ()
    rpc_docs: Tuple[RpcDoc, ...] = ()
    broadcast_docs: Tuple[BroadcastDoc, ...] = ()

    def __len__(self) -> int:
        return len(self.rest_docs) + len(self.rpc_docs) + len(self.broadcast_docs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "rest": [doc.to_dict() for doc in self.rest_docs],
            "rpc": [doc.to_dict() for doc in self.rpc_docs],
            "broadcast": [doc.to_dict() for doc in self.broadcast_docs],
        }


@dataclass(frozen=True)
class Catalog:
    """Finalized mapping from package name to its aggregated documents."""

    packages: Mapping[str, PackageDoc] = field(default_factory=dict)
    package_names: Tuple[str, ...] = ()

    def __iter__(self) -> Iterator[PackageDoc]:
        for name in self.package_names:
            yield self.packages[name]

    def __len__(self) -> int:
        return len(self.package_names)

    def get(self, name: str) -> Optional[PackageDoc]:
        return self.packages.get(name)

    def to_dict(self) -> Dict[str, Any]:
        packages: List[Dict[str, Any]] = [package.to_dict() for package in self]
        return {"package_names": list(self.package_names), "packages": packages}


@dataclass(frozen=True)
class SourceComment:
    """Raw comment text found by the source scanner."""

    path: str
    line: int
    text: str


__all__ = [
    "BroadcastDoc",
    "Catalog",
    "Document",
    "DocShape",
    "EndpointArgument",
    "PackageDoc",
    "RestDoc",
    "RpcDoc",
    "Sample",
    "SampleKind",
    "SourceComment",
]
