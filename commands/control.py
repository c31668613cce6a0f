"""
Control commands that change what the bridge knows about lights.

Includes renaming a light and searching for new lights.
"""

import time

import click

from core.config import Settings
from core.controller import validate_light_name
from models.utils import get_controller

# The bridge searches for new lights for about 40 seconds
SCAN_WAIT_SECONDS = 40


@click.command(name='name')
@click.argument('light_id', metavar='ID', type=int)
@click.argument('new_name', metavar='NAME')
@click.pass_obj
def name_command(settings: Settings, light_id: int, new_name: str):
    """Rename the light with the given ID.

    \b
    Examples:
      hue name 2 "Desk lamp"
    """
    try:
        validate_light_name(new_name)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'NAME'") from e

    controller = get_controller(settings)
    light = controller.rename_light(light_id, new_name)
    click.echo(f'Set light {light.id} name to "{light.name}"')


@click.command(name='scan')
@click.option('--wait', type=click.IntRange(min=0), default=SCAN_WAIT_SECONDS, show_default=True,
              help='Seconds to wait for the bridge to finish searching')
@click.pass_obj
def scan_command(settings: Settings, wait: int):
    """Search for new lights and list the ones found."""
    controller = get_controller(settings)
    controller.search_new_lights()

    click.echo(f"Initiated scan. Sleeping for {wait} seconds.")
    time.sleep(wait)

    new_lights = controller.get_new_lights()
    if not new_lights.lights:
        click.echo("No new lights found.")
        return

    click.secho(f"Found {len(new_lights.lights)} new light(s):", fg='green')
    for light_id, name in new_lights.lights:
        click.echo(f"  {light_id}: {name}")
