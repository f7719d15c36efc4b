# === FILE: seo_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of the SeoScout crawler.

Commands:
  scan      Crawl a site (or one page) and write the SEO report
  config    Show the settings file as JSON

Common options:
  --config PATH       YAML/JSON settings file (values are overridden by flags)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (console only when omitted)
  --log-format FORMAT Logging format string

Example:
  seo-scout scan --url example.com --format html --limit 200
  seo-scout scan --page https://example.com/pricing
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from seo_scout import __version__
from seo_scout.config import OutputFormat, load_config, read_settings
from seo_scout.engine import start_scan
from seo_scout.logger import DEFAULT_FORMAT, init_logging
from seo_scout.report.text_report import format_recommendations, format_summary

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SeoScout, version %(version)s')
@click.option(
    '--config', '-C', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON settings file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (console only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SeoScout: crawl a website and grade its SEO metadata."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', default=None, help='Site to crawl.')
@click.option('--page', '-p', default=None, help='Crawl this single page only.')
@click.option('--sitemap', '-s', 'sitemap_url', default=None, help='Sitemap URL (default: robots.txt or /sitemap.xml).')
@click.option('--depth', '-d', 'max_depth', type=int, default=None, help='Maximum link depth [default: 3]')
@click.option('--limit', '-l', 'page_limit', type=int, default=None, help='Maximum number of pages [default: 100]')
@click.option('--timeout', '-t', type=float, default=None, help='Request timeout in seconds [default: 10]')
@click.option('--concurrency', '-c', type=int, default=None, help='Concurrent requests per batch [default: 5]')
@click.option('--output', '-o', 'output_name', default=None, help='Report file name without extension [default: seo-report]')
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help='Format written after every batch [default: csv]'
)
@click.option(
    '--output-dir', 'output_dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Directory for reports [default: output]'
)
@click.option('--sitemap-only', is_flag=True, default=None, help='Only crawl URLs listed in the sitemap.')
@click.option('--follow-links/--no-follow-links', default=None, help='Follow same-domain links [default: follow]')
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header.')
@click.option('--force', '-F', 'force_refresh', is_flag=True, default=None, help='Do not reuse a recent cached crawl.')
@click.option('--suggest', is_flag=True, default=False, help='Ask the suggestion service for better metadata.')
@click.pass_context
def scan(ctx, url, page, sitemap_url, max_depth, page_limit, timeout, concurrency, output_name,
         output_format, output_dir, sitemap_only, follow_links, user_agent, force_refresh, suggest):
    """Crawl a site and generate the SEO report."""
    config_path = ctx.obj.get('config_path')
    overrides = dict(
        base_url=page or url,
        single_page=True if page else None,
        sitemap_url=sitemap_url,
        max_depth=max_depth,
        page_limit=page_limit,
        timeout=timeout,
        concurrency=concurrency,
        output_name=output_name,
        output_format=output_format,
        output_dir=output_dir,
        sitemap_only=sitemap_only,
        follow_links=follow_links,
        user_agent=user_agent,
        force_refresh=force_refresh,
    )
    try:
        settings = read_settings(config_path) if config_path else {}
    except Exception as e:
        print_error(f'Error loading configuration: {e}')
    if not overrides['base_url'] and not settings.get('base_url'):
        print_error('Error: URL is required (use --url or --page)')
    if suggest:
        overrides['suggestions'] = {**settings.get('suggestions', {}), 'enabled': True}

    try:
        cfg = load_config(config_path, **overrides)
    except ValidationError as e:
        print_error(f'Invalid configuration: {e}')
    except Exception as e:
        print_error(f'Error loading configuration: {e}')

    click.echo(f'Starting crawl of {cfg.base_url}', err=True)
    try:
        report = asyncio.run(start_scan(cfg))
    except Exception as e:
        print_error(f'Crawler error: {e}')

    click.secho(f'Report saved to {cfg.output_path}', fg='green')
    click.secho('\nSEO Metadata Summary:', fg='yellow')
    click.echo(format_summary(report.summary))
    click.secho('\nQuick Recommendations:', fg='yellow')
    click.echo(format_recommendations(report.summary))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective settings (file values plus defaults) as JSON."""
    config_path = ctx.obj.get('config_path')
    if config_path is None:
        print_error('Error: no settings file given (use --config)')
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Error loading configuration: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
