"""Core functionality for the Hue CLI.

This package contains:
- controller: HueController class for bridge API requests
- auth: Bridge discovery and link button pairing
- config: Settings and credential storage
- errors: Exceptions raised for bridge failures
"""
