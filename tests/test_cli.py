"""Tests for the github-dependents command line."""

import json

import pytest
from click.testing import CliRunner

from github_dependents import cli as cli_module
from github_dependents import dependents
from github_dependents.cli import cli
from github_dependents.driver import sync_driver
from tests.mock_server import MockPackage, generate_dependents_page, make_dependents
from tests.utils import FakeRequestManager

URL = "https://github.com/octo/lib/network/dependents"
PAGE_2 = f"{URL}?dependents_after=page2"


@pytest.fixture
def pages() -> dict[str, str]:
    deps = make_dependents(40)
    return {
        URL: generate_dependents_page(
            deps[:30],
            total_count=40,
            next_url=PAGE_2,
            packages=[MockPackage("lib-core", "cGtnMQ%3D%3D")],
        ),
        PAGE_2: generate_dependents_page(deps[30:], total_count=40),
    }


@pytest.fixture
def fake_network(pages, monkeypatch) -> list[FakeRequestManager]:
    """Route every request manager the CLI creates to canned pages."""
    created: list[FakeRequestManager] = []

    def factory(timeout=None):
        manager = FakeRequestManager(pages)
        created.append(manager)
        return manager

    monkeypatch.setattr(sync_driver, "SyncRequestManager", factory)
    monkeypatch.setattr(dependents, "SyncRequestManager", factory)
    monkeypatch.setattr(cli_module, "_configure_logging", lambda verbose: None)
    return created


def test_list_jsonl(fake_network, tmp_path):
    out = tmp_path / "deps.jsonl"

    result = CliRunner().invoke(cli, ["list", "octo", "lib", "--output", str(out)])

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in out.read_text().splitlines()]
    assert len(records) == 30
    assert records[0]["owner"] == "user0"
    assert fake_network[0].fetched == [URL]


def test_list_json_stops_at_listed_count(fake_network, tmp_path):
    out = tmp_path / "deps.json"

    result = CliRunner().invoke(
        cli,
        ["list", "octo", "lib", "--pages", "3", "--format", "json", "--output", str(out)],
    )

    assert result.exit_code == 0, result.output
    # 40 listed is a single full page of 30
    assert len(json.loads(out.read_text())) == 30
    assert fake_network[0].fetched == [URL]


def test_list_table(fake_network):
    result = CliRunner().invoke(cli, ["list", "octo", "lib", "--format", "table"])

    assert result.exit_code == 0, result.output
    assert "REPOSITORY" in result.output
    assert "user0/project-0" in result.output


def test_list_rejects_zero_pages(fake_network):
    result = CliRunner().invoke(cli, ["list", "octo", "lib", "--pages", "0"])

    assert result.exit_code == 2
    assert "--pages" in result.output
    assert fake_network == []


def test_table_rejects_zero_pages_before_printing(fake_network):
    result = CliRunner().invoke(
        cli, ["list", "octo", "lib", "--pages", "0", "--format", "table"]
    )

    assert result.exit_code == 2
    assert "REPOSITORY" not in result.output


def test_json_keeps_records_read_before_a_failure(fake_network, pages, tmp_path):
    pages[URL] = generate_dependents_page(
        make_dependents(30), total_count=62, next_url=PAGE_2
    )
    del pages[PAGE_2]
    out = tmp_path / "deps.json"

    result = CliRunner().invoke(
        cli,
        ["list", "octo", "lib", "--pages", "2", "--format", "json", "--output", str(out)],
    )

    assert result.exit_code == 1
    assert "unknown host" in result.output
    records = json.loads(out.read_text())
    assert len(records) == 30
    assert records[-1]["owner"] == "user29"


def test_list_reports_fetch_failure(fake_network):
    result = CliRunner().invoke(cli, ["list", "octo", "unknown"])

    assert result.exit_code == 1
    assert "unknown host" in result.output


def test_packages(fake_network):
    result = CliRunner().invoke(cli, ["packages", "octo", "lib"])

    assert result.exit_code == 0, result.output
    assert "cGtnMQ==\tlib-core" in result.output
    assert fake_network[0].closed


def test_packages_none(fake_network, pages):
    pages[URL] = generate_dependents_page(make_dependents(1))

    result = CliRunner().invoke(cli, ["packages", "octo", "lib"])

    assert result.exit_code == 0
    assert "octo/lib lists no separate packages." in result.output
