"""Utility functions for the Hue CLI.

This module contains helper functions used across the application:
- display_width: Calculate terminal display width for Unicode/emojis
- format_table: Render rows as a plain text table
- format_light_table: Render lights as the id/name/reachable/on table
- similarity_score: Fuzzy string matching for command suggestions
- get_controller: Build a controller from the invocation settings
"""

import unicodedata

from core.auth import get_auth_credentials
from core.config import Settings
from core.controller import HueController
from models.types import Light


def display_width(text: str) -> int:
    """Calculate the display width of text accounting for wide characters.

    East Asian wide characters and most emojis take up 2 columns in the
    terminal; combining marks take none.
    """
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        if unicodedata.east_asian_width(char) in ('W', 'F'):
            width += 2
        else:
            width += 1
    return width


def _pad(text: str, width: int) -> str:
    return text + ' ' * (width - display_width(text))


def format_table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Render a table with a header row and a dashed separator.

    Cells are left-aligned and each column is as wide as its widest cell.

    Example:
        >>> format_table(['id', 'name'], [['1', 'Desk']])
        [' id | name', '----+------', ' 1  | Desk']
    """
    widths = [display_width(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], display_width(cell))

    def render(cells: list[str]) -> str:
        return (' ' + ' | '.join(_pad(cell, widths[i]) for i, cell in enumerate(cells))).rstrip()

    separator = '+'.join('-' * (width + 2) for width in widths)
    return [render(headers), separator] + [render(row) for row in rows]


def yes_no(value: bool | None) -> str:
    if value is None:
        return '-'
    return 'yes' if value else 'no'


def format_light_table(lights: list[Light]) -> list[str]:
    """Render lights as id/name/reachable/on rows, keeping their order."""
    rows = [
        [str(light.id), light.name, yes_no(light.reachable), yes_no(light.on)]
        for light in lights
    ]
    return format_table(['id', 'name', 'reachable', 'on'], rows)


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Count characters of s1 found in order in s2
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if not s1_lower:
        return 0
    return int(50 * matches / max(len(s1_lower), len(s2_lower)))


def get_controller(settings: Settings) -> HueController:
    """Create a controller for the configured bridge, pairing if needed."""
    credentials = get_auth_credentials(settings)
    return HueController(credentials, use_https=settings.use_https, timeout=settings.timeout)
