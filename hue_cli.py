#!/usr/bin/env python3
"""
Hue CLI
List Philips Hue lights and rename them by id.
"""

import logging
from pathlib import Path

import click

from core.config import DEFAULT_PAIR_TIMEOUT, DEFAULT_TIMEOUT, USER_CONFIG_FILE, Settings
from commands.setup import ColouredGroup, help_command, register_command
from commands.inspection import list_command
from commands.control import name_command, scan_command


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 120,
    }
)
@click.version_option(version='0.1.0', prog_name='hue')
@click.option('--ip', 'bridge_ip', envvar='HUE_BRIDGE_IP', metavar='ADDRESS',
              help='Bridge IP address or hostname (searches the network if omitted)')
@click.option('--config', 'config_file', envvar='HUE_CONFIG', default=USER_CONFIG_FILE,
              show_default=True, type=click.Path(dir_okay=False, path_type=Path),
              help='Credentials file')
@click.option('--http/--https', 'use_http', envvar='HUE_USE_HTTP', default=False,
              help='Talk to the bridge over plain HTTP (default: HTTPS)')
@click.option('--timeout', envvar='HUE_TIMEOUT', type=click.FloatRange(min=0, min_open=True),
              default=DEFAULT_TIMEOUT, show_default=True, help='Seconds to wait for each bridge response')
@click.option('--pair-timeout', envvar='HUE_PAIR_TIMEOUT', type=click.FloatRange(min=0),
              default=DEFAULT_PAIR_TIMEOUT, show_default=True,
              help='Seconds to wait for the link button when pairing')
@click.option('--verbose', '-v', is_flag=True, help='Log bridge requests to stderr')
@click.pass_context
def cli(ctx, bridge_ip: str | None, config_file: Path, use_http: bool, timeout: float,
        pair_timeout: float, verbose: bool):
    """Helper for Philips Hue lights.

On first use the bridge is discovered on the network and you are asked
to press its link button; the credentials are saved for later runs.

Use 'COMMAND -h' for detailed help on a specific command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    ctx.obj = Settings(
        config_file=config_file,
        bridge_ip=bridge_ip,
        use_https=not use_http,
        timeout=timeout,
        pair_timeout=pair_timeout,
    )


cli.add_command(help_command)
cli.add_command(register_command)
cli.add_command(list_command)
cli.add_command(name_command)
cli.add_command(scan_command)


if __name__ == '__main__':
    cli()
