# File: tests/test_cli.py
"""CLI tests with click.testing.CliRunner; the crawl itself is patched out."""
import importlib
import json
from datetime import datetime, timezone

import pytest
from click.testing import CliRunner

import seo_scout.cli as cli_module
from seo_scout.aggregator import build_report
from seo_scout.cli import cli
from seo_scout.crawler.models import PageResult
from seo_scout.logger import init_logging


@pytest.fixture(autouse=True)
def patch_start_scan(monkeypatch):
    """Replace start_scan with a coroutine that records the config it got."""
    calls = []

    async def fake_scan(cfg):
        calls.append(cfg)
        pages = [PageResult(url=str(cfg.base_url).rstrip("/"), title="Home")]
        return build_report(pages, base_url=str(cfg.base_url), crawl_date=datetime.now(timezone.utc))

    monkeypatch.setattr(cli_module, "start_scan", fake_scan)
    return calls


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI binds log handlers to the runner streams; rebind them afterwards."""
    yield
    init_logging()


def test_cli_module_is_importable():
    assert importlib.import_module("seo_scout.cli") is cli_module
    assert hasattr(cli_module, "start_scan")


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SeoScout" in result.output


def test_help():
    result = CliRunner().invoke(cli, ["scan", "--help"])
    assert result.exit_code == 0
    assert "--sitemap-only" in result.output


def test_scan_requires_url(patch_start_scan):
    result = CliRunner().invoke(cli, ["scan"])
    assert result.exit_code == 1
    assert "URL is required" in result.output
    assert patch_start_scan == []


def test_scan_prints_summary(tmp_path, patch_start_scan):
    result = CliRunner().invoke(
        cli,
        [
            "scan",
            "--url", "example.com",
            "--depth", "1",
            "--limit", "7",
            "--concurrency", "2",
            "--format", "json",
            "--output-dir", str(tmp_path),
            "--no-follow-links",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "SEO Metadata Summary" in result.output
    assert "Quick Recommendations" in result.output

    [cfg] = patch_start_scan
    assert str(cfg.base_url) == "https://example.com/"
    assert (cfg.max_depth, cfg.page_limit, cfg.concurrency) == (1, 7, 2)
    assert not cfg.follow_links
    assert cfg.output_path == tmp_path / "seo-report.json"


def test_scan_single_page(patch_start_scan):
    result = CliRunner().invoke(cli, ["scan", "--page", "https://example.com/pricing", "--depth", "4"])
    assert result.exit_code == 0, result.output
    [cfg] = patch_start_scan
    assert cfg.single_page
    assert (cfg.max_depth, cfg.page_limit, cfg.follow_links) == (0, 1, False)


def test_scan_uses_config_file(tmp_path, patch_start_scan):
    cfg_file = tmp_path / "settings.yaml"
    cfg_file.write_text("base_url: https://example.org\npage_limit: 12\nsuggestions:\n  model: m1\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "scan", "--suggest", "--limit", "3"])
    assert result.exit_code == 0, result.output

    [cfg] = patch_start_scan
    assert str(cfg.base_url) == "https://example.org/"
    assert cfg.page_limit == 3
    assert cfg.suggestions.enabled
    assert cfg.suggestions.model == "m1"


def test_scan_invalid_option_value(patch_start_scan):
    result = CliRunner().invoke(cli, ["scan", "--url", "example.com", "--concurrency", "0"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert patch_start_scan == []


def test_scan_reports_crawler_error(monkeypatch):
    async def broken_scan(cfg):
        raise RuntimeError("disk full")

    monkeypatch.setattr(cli_module, "start_scan", broken_scan)
    result = CliRunner().invoke(cli, ["scan", "--url", "example.com"])
    assert result.exit_code == 1
    assert "Crawler error: disk full" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "settings.json"
    cfg_file.write_text(json.dumps({"base_url": "https://example.com", "max_depth": 1}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["max_depth"] == 1
    assert data["page_limit"] == 100


def test_show_config_requires_file():
    result = CliRunner().invoke(cli, ["config"])
    assert result.exit_code == 1
    assert "no settings file" in result.output
