"""Data models and utility functions.

This package contains:
- types: Light, Credentials and other decoded bridge payloads
- utils: Utility functions (display_width, format_light_table, etc.)
"""
