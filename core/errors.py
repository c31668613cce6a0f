"""Exceptions raised while talking to a Hue Bridge.

Every failure the CLI can report derives from HueError so the command
layer can turn them into a one-line message and a non-zero exit code.
"""

# Error types returned in the bridge's [{"error": {...}}] payloads
ERROR_UNAUTHORIZED = 1
ERROR_RESOURCE_NOT_AVAILABLE = 3
ERROR_LINK_BUTTON_NOT_PRESSED = 101


class HueError(Exception):
    """Base class for all bridge related failures."""


class BridgeUnreachable(HueError):
    """The bridge did not answer (network or address problem)."""

    def __init__(self, address: str, reason: object = None):
        self.address = address
        message = f"Could not reach Hue Bridge at {address}"
        if reason is not None:
            message += f": {reason}"
        super().__init__(message)


class Unauthorized(HueError):
    """The application key was missing or rejected by the bridge."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(
            f"Hue Bridge at {address} rejected the application key. "
            "Run 'hue register' to pair again."
        )


class LightNotFound(HueError):
    """No light with the requested id exists on the bridge."""

    def __init__(self, light_id: int):
        self.light_id = light_id
        super().__init__(f"Light {light_id} not found")


class PairingTimeout(HueError):
    """The link button was not pressed within the pairing window."""

    def __init__(self, address: str, timeout: float):
        self.address = address
        self.timeout = timeout
        super().__init__(
            f"Link button on Hue Bridge at {address} was not pressed within "
            f"{timeout:g} seconds. Press the button and run the command again."
        )


class NoBridgeFound(HueError):
    """Discovery found no bridge and no address was given."""

    def __init__(self):
        super().__init__(
            "No Hue Bridge found on the network. "
            "Pass the bridge address with --ip or set HUE_BRIDGE_IP."
        )


class ProtocolError(HueError):
    """The bridge answered with something we could not understand."""
