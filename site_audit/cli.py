# === FILE: site_audit/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of SiteAudit.

Commands:
  analyze URL   Crawl from URL, run every analysis and print/save the report
  config        Show the effective configuration

Global options:
  --config PATH       Path to a YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (logs go to stderr only when omitted)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

analyze options:
  --depth INT         Crawl depth bound (override max_depth)
  --seed-only         Analyze only the seed page, skip status and load-time checks
  --thumbnails DIR    Directory for thumbnails (override thumbnail_dir)
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Folder with Jinja2 templates
  --pretty            Indent JSON output by 2

Also:
  --version, -v       Show the SiteAudit version

Example:
  site-audit analyze https://example.com/ --depth 1 --json report.json --pretty
"""
import sys
import asyncio
from pathlib import Path

import click

from site_audit import __version__
from site_audit.config import load_config
from site_audit.logger import init_logging
from site_audit.engine import SeedValidationError, start_audit
from site_audit.report.json_report import render_json
from site_audit.report.html_report import render_html

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)

@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteAudit, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON configuration file.'
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
    help='Log file path (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteAudit command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg

@cli.command('analyze', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False, default='')
@click.option(
    '--depth', '-d', 'depth',
    type=click.IntRange(min=0),
    default=None,
    help='Crawl depth bound (override max_depth)'
)
@click.option(
    '--seed-only', is_flag=True,
    help='Analyze only the seed page; skip status and load-time checks'
)
@click.option(
    '--thumbnails', 'thumbnail_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory for thumbnails (override thumbnail_dir)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Folder with Jinja2 templates (bundled templates by default)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output by 2'
)
@click.pass_context
def analyze(ctx, url, depth, seed_only, thumbnail_dir, json_output, html_output, template_dir, pretty):
    """Crawl URL, run every analysis and produce the report."""
    cfg = ctx.obj['config']
    overrides = {}
    if depth is not None:
        overrides['max_depth'] = depth
    if seed_only:
        overrides['extended'] = False
    if thumbnail_dir is not None:
        overrides['thumbnail_dir'] = thumbnail_dir
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        report = asyncio.run(start_audit(cfg, url))
    except SeedValidationError as e:
        print_error(str(e))
    except Exception as e:
        print_error(f'Audit failed: {e}')

    # Nothing to save: print to stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML: {e}')

@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))

if __name__ == "__main__":
    cli()
