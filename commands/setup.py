"""
Setup and help commands for the Hue CLI.

Contains the custom Click group class that colours help output, suggests
similar commands for typos and turns HueError into a clean exit.
"""

from dataclasses import dataclass

import click

from core.auth import register
from core.config import Settings
from core.errors import HueError
from models.utils import similarity_score


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


COMMAND_SECTIONS = [
    CommandSection(
        name="LIGHTS",
        commands=[
            ("list", "Show all lights with reachable and on/off state"),
            ("name <id> <name>", "Rename a light"),
            ("scan [--wait <seconds>]", "Search for new lights"),
        ]
    ),
    CommandSection(
        name="SETUP",
        commands=[
            ("register", "Pair with a bridge and save the application key"),
        ]
    ),
]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def invoke(self, ctx):
        """Invoke the subcommand, reporting bridge errors as a one-line message."""
        try:
            return super().invoke(ctx)
        except HueError as e:
            raise click.ClickException(str(e)) from e

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  - {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg, ctx) from e
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name, command)
                if score > 25:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_usage(self, ctx, formatter):
        """Format the usage line with colour."""
        formatter.write_paragraph()
        formatter.write_text(
            click.style('Usage: ', fg='cyan', bold=True) +
            click.style(f'{ctx.command_path} [OPTIONS] COMMAND [ARGS]...', fg='white')
        )

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            max_len = max(len(cmd[0]) for cmd in commands)
            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


@click.command(name='help')
def help_command():
    """Display a quick reference of all commands."""
    click.secho("\nHue CLI - Quick Reference\n", fg='cyan', bold=True)

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * (28 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("For detailed help on any command:", fg='cyan')
    click.echo(f"  hue {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command(name='register')
@click.pass_obj
def register_command(settings: Settings):
    """Pair with a Hue Bridge and save the application key.

    Discovers the bridge (or uses --ip), then waits for the link button
    on the bridge to be pressed. Run this again if the bridge starts
    rejecting the stored key.
    """
    credentials = register(settings)
    click.echo(f"Bridge: {credentials.bridge_address}")
    click.echo(f"Application key: {credentials.application_key}")
