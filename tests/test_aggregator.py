"""Tests for the package aggregator and build_catalog."""

from __future__ import annotations

import pytest

from apidocgen.aggregator import PackageAggregator
from apidocgen.models import BroadcastDoc, RestDoc, RpcDoc
from apidocgen.orchestrator import build_catalog


def test_rpc_commands_are_sorted_on_finalize() -> None:
    aggregator = PackageAggregator()
    for command in ["zeta", "alpha", "mu"]:
        aggregator.add(RpcDoc(package_name="Windows", command=command))

    catalog = aggregator.finalize()

    assert [doc.command for doc in catalog.packages["Windows"].rpc_docs] == ["alpha", "mu", "zeta"]


def test_broadcasts_sort_stably_by_name() -> None:
    aggregator = PackageAggregator()
    aggregator.add(BroadcastDoc(package_name="Tabs", name="closed", description="first"))
    aggregator.add(BroadcastDoc(package_name="Tabs", name="attached"))
    aggregator.add(BroadcastDoc(package_name="Tabs", name="closed", description="second"))

    docs = aggregator.finalize().packages["Tabs"].broadcast_docs

    assert [(doc.name, doc.description) for doc in docs] == [
        ("attached", ""),
        ("closed", "first"),
        ("closed", "second"),
    ]


def test_rest_docs_keep_encounter_order() -> None:
    aggregator = PackageAggregator()
    aggregator.add(RestDoc(package_name="Windows", endpoint="/z"))
    aggregator.add(RestDoc(package_name="Windows", endpoint="/a"))

    docs = aggregator.finalize().packages["Windows"].rest_docs

    assert [doc.endpoint for doc in docs] == ["/z", "/a"]


def test_shapes_share_one_package_doc() -> None:
    catalog = build_catalog(
        [
            "@package Windows\n@endpoint /windows\n@description Returns windows.",
            "@package Windows\n@command set_zoom_factor\n@description Set zoom.",
        ]
    )

    assert catalog.package_names == ("Windows",)
    package = catalog.packages["Windows"]
    assert len(package.rest_docs) == 1
    assert len(package.rpc_docs) == 1
    assert package.broadcast_docs == ()


def test_package_names_are_sorted_and_case_sensitive() -> None:
    catalog = build_catalog(
        [
            "@package tabs\n@broadcast closed",
            "@package Windows\n@command focus",
            "@package Tabs\n@broadcast opened",
        ]
    )

    assert catalog.package_names == ("Tabs", "Windows", "tabs")
    assert [package.name for package in catalog] == ["Tabs", "Windows", "tabs"]


def test_descriptions_apply_only_to_referenced_packages() -> None:
    catalog = build_catalog(
        ["@package Windows\n@command focus"],
        descriptions={"Windows": "Window management.", "Unused": "Never referenced."},
    )

    assert catalog.package_names == ("Windows",)
    assert catalog.packages["Windows"].description == "Window management."
    assert catalog.get("Unused") is None


def test_pipeline_is_idempotent() -> None:
    comments = [
        "@package Windows\n@command zeta",
        "@package Windows\n@command alpha",
        "plain comment",
        "@package Tabs\n@endpoint /tabs\n@method POST",
    ]

    assert build_catalog(comments) == build_catalog(comments)


def test_finalized_aggregator_is_read_only() -> None:
    aggregator = PackageAggregator()
    aggregator.add(RpcDoc(package_name="Windows", command="focus"))
    first = aggregator.finalize()

    with pytest.raises(RuntimeError):
        aggregator.add(RpcDoc(package_name="Windows", command="blur"))
    assert aggregator.finalize() == first
    assert aggregator.finalized is True


def test_catalog_to_dict_uses_wire_field_names() -> None:
    catalog = build_catalog(
        [
            "@package Windows\n@endpoint /windows/{id}\n@pathArg id Window id\n"
            "@sampleResponse\n```json\n{}\n```",
        ]
    )

    payload = catalog.to_dict()

    assert payload["package_names"] == ["Windows"]
    rest = payload["packages"][0]["rest"][0]
    assert rest["package_name"] == "Windows"
    assert rest["method"] == "GET"
    assert rest["path_arguments"] == [{"name": "id", "description": "Window id"}]
    assert rest["samples"] == [{"text": "", "code": "{}", "type": "response", "language": "json"}]
