import logging
import sys

import boto3
import click

from .config import TaggerConfig, load_config
from .context import RunContext
from .discovery import RegionEnumerator
from .exceptions import ConfigurationError, RegionEnumerationError
from .orchestrator import TaggingOrchestrator
from .tagging import TagMode
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(), default=None,
              help='Path to a YAML configuration file')
@click.option('--profile', '-p', help='AWS profile to use')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.option('--log-format', default='console', type=click.Choice(['console', 'json', 'detailed']))
@click.option('--log-file', type=click.Path(), default=None, help='Also write logs to this file')
@click.pass_context
def cli(ctx, config, profile, log_level, log_format, log_file):
    """AWS Tag Sweeper - apply a standard tag set to every resource in an account"""
    ctx.ensure_object(dict)
    setup_logging(log_level=log_level, log_file=log_file, log_format=log_format)

    try:
        ctx.obj['config'] = load_config(config) if config else TaggerConfig.from_env()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    ctx.obj['session'] = boto3.Session(profile_name=profile) if profile else boto3.Session()


@cli.command()
@click.option('--mode', type=click.Choice([m.value for m in TagMode]), default=None,
              help='Tag merge policy')
@click.option('--region', '-r', multiple=True, help='Restrict the scan to these regions')
@click.option('--dry-run', is_flag=True, help='Show what would be tagged without tagging')
@click.option('--batch-size', type=click.IntRange(min=1), default=None,
              help='Regions discovered concurrently per batch')
@click.option('--delay', type=click.FloatRange(min=0), default=None,
              help='Seconds to wait between tag operations')
@click.pass_context
def run(ctx, mode, region, dry_run, batch_size, delay):
    """Discover resources in every region and apply the desired tags"""
    config = ctx.obj['config'].with_overrides(
        mode=TagMode(mode) if mode else None,
        regions=list(region) if region else None,
        dry_run=dry_run or None,
        region_batch_size=batch_size,
        inter_operation_delay=delay
    )

    context = RunContext(config.home_region, session=ctx.obj['session'])
    orchestrator = TaggingOrchestrator(config, context=context)

    try:
        orchestrator.run()
    except Exception:
        # Already logged by the orchestrator
        sys.exit(1)


@cli.command()
@click.pass_context
def regions(ctx):
    """List the regions a run would scan"""
    config = ctx.obj['config']
    context = RunContext(config.home_region, session=ctx.obj['session'])

    try:
        region_names = RegionEnumerator(context).list_regions()
    except RegionEnumerationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for name in region_names:
        click.echo(name)


if __name__ == '__main__':
    cli()
