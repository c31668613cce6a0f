"""
Inspection commands.

Read-only views of the lights known to the bridge.
"""

import click

from core.config import Settings
from models.utils import format_light_table, get_controller


@click.command(name='list')
@click.pass_obj
def list_command(settings: Settings):
    """List all lights with their reachability and on/off state.

    \b
    Example:
      hue list
    """
    controller = get_controller(settings)
    lights = controller.list_lights()

    if not lights:
        click.echo("No lights found.")
        return

    header, separator, *rows = format_light_table(lights)
    click.secho(header, bold=True)
    click.echo(separator)
    for row in rows:
        click.echo(row)
