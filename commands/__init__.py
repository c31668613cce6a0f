"""CLI command modules.

This package contains:
- inspection: Read-only commands (list)
- control: Commands that change the bridge (name, scan)
- setup: Custom click group, pairing and help commands
"""
