"""End-to-end tests for the orchestrator pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from apidocgen.config import ConfigError
from apidocgen.models import RestDoc, RpcDoc
from apidocgen.orchestrator import Orchestrator
from tests._fixtures.repo_builder import RepoBuilder

_WINDOWS_GO = """
    package windows

    /*
    @package Windows
    @endpoint /windows
    @method GET
    @description Returns windows.
    */
    func listWindows() {}

    // @package Windows
    // @command set_zoom_factor
    // @description Set zoom.
    func setZoom() {}

    // @package Windows
    // @command focus
    func focus() {}

    // helper without annotations
    func helper() {}
"""

_TABS_PY = '''
    def closed():
        """
        @package Tabs
        @broadcast tab_closed
        @description Fired when a tab closes.
        @sampleBody
        ```json
        {"tab": 3}
        ```
        """
'''


def test_collect_builds_catalog_from_source_tree(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"windows/windows.go": _WINDOWS_GO, "tabs/events.py": _TABS_PY})

    catalog = Orchestrator().collect(repo_builder.path())

    assert catalog.package_names == ("Tabs", "Windows")
    windows = catalog.packages["Windows"]
    assert windows.rest_docs == (
        RestDoc(
            package_name="Windows",
            endpoint="/windows",
            method="GET",
            description="Returns windows.",
        ),
    )
    assert [doc.command for doc in windows.rpc_docs] == ["focus", "set_zoom_factor"]
    assert isinstance(windows.rpc_docs[1], RpcDoc)
    assert windows.rpc_docs[1].description == "Set zoom."

    tabs = catalog.packages["Tabs"]
    assert tabs.broadcast_docs[0].name == "tab_closed"
    assert tabs.broadcast_docs[0].samples[0].code == '{"tab": 3}'


def test_collect_is_idempotent(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"windows/windows.go": _WINDOWS_GO, "tabs/events.py": _TABS_PY})
    orchestrator = Orchestrator()

    assert orchestrator.collect(repo_builder.path()) == orchestrator.collect(repo_builder.path())


def test_run_build_writes_site_under_docs(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    repo_builder.write({"windows/windows.go": _WINDOWS_GO})
    output_root = tmp_path / "out"

    outcome = Orchestrator().run_build(repo_builder.path(), output_root)

    assert outcome.output_dir == output_root.resolve() / "docs"
    assert (outcome.output_dir / "Windows.html").exists()
    assert (outcome.output_dir / "index.html").exists()
    assert outcome.catalog.package_names == ("Windows",)


def test_run_build_uses_config_defaults(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "windows/windows.go": _WINDOWS_GO,
            ".apidocgen.yml": """
                title: Browser API
                output_dir: site
                output_subdir: reference
                packages:
                  Windows: Window management.
            """,
        }
    )

    outcome = Orchestrator().run_build(repo_builder.path())

    expected_dir = repo_builder.path().resolve() / "site" / "reference"
    assert outcome.output_dir == expected_dir
    assert outcome.catalog.packages["Windows"].description == "Window management."
    page = (expected_dir / "Windows.html").read_text(encoding="utf-8")
    assert "Window management." in page
    assert "Browser API" in page


def test_run_dump_returns_json(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"windows/windows.go": _WINDOWS_GO})

    payload = json.loads(Orchestrator().run_dump(repo_builder.path()))

    assert payload["package_names"] == ["Windows"]
    assert [doc["command"] for doc in payload["packages"][0]["rpc"]] == ["focus", "set_zoom_factor"]


def test_missing_source_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Orchestrator().collect(tmp_path / "missing")


def test_invalid_config_is_fatal(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".apidocgen.yml": "- not\n- a mapping\n"})

    with pytest.raises(ConfigError):
        Orchestrator().collect(repo_builder.path())
