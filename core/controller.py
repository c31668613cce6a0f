"""HueController class for talking to a Hue Bridge.

This module contains the controller that reads and renames lights through
the bridge's local REST API (/api/<application key>/lights). Every call is
a single synchronous request; failures are raised as HueError subclasses
and never retried.
"""

import logging

import requests
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from core.config import DEFAULT_TIMEOUT
from core.errors import (
    ERROR_RESOURCE_NOT_AVAILABLE,
    ERROR_UNAUTHORIZED,
    BridgeUnreachable,
    LightNotFound,
    ProtocolError,
    Unauthorized,
)
from models.types import Credentials, Light, NewLights

logger = logging.getLogger(__name__)

# Bridge limit for light names
MAX_NAME_LENGTH = 32

# Disable SSL warnings for self-signed certificate
requests.packages.urllib3.disable_warnings(InsecureRequestWarning)


class HueController:
    """Manages requests to a single Philips Hue Bridge."""

    def __init__(self, credentials: Credentials, use_https: bool = True,
                 timeout: float = DEFAULT_TIMEOUT):
        """Initialise HueController.

        Args:
            credentials: Bridge address and application key
            use_https: Use HTTPS (bridge certificate is self-signed, not verified)
            timeout: Seconds to wait for each response
        """
        self.credentials = credentials
        self.bridge_ip = credentials.bridge_address
        scheme = 'https' if use_https else 'http'
        self.base_url = f"{scheme}://{self.bridge_ip}/api/{credentials.application_key}"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = False  # Accept self-signed certificate

    def list_lights(self) -> list[Light]:
        """Return all lights in the order the bridge reports them."""
        result = self._request('GET', '/lights')
        if not isinstance(result, dict):
            raise ProtocolError(f"Expected an object of lights, got {type(result).__name__}")
        return [Light.from_api(light_id, payload) for light_id, payload in result.items()]

    def get_light(self, light_id: int) -> Light:
        """Return a single light.

        Raises:
            LightNotFound: If no light has this id
        """
        result = self._request('GET', f'/lights/{light_id}', light_id=light_id)
        return Light.from_api(light_id, result)

    def rename_light(self, light_id: int, new_name: str) -> Light:
        """Set the name of a light and return the bridge's updated copy.

        Args:
            light_id: Bridge light id
            new_name: New name, 1-32 characters

        Raises:
            ValueError: If the name is empty or too long
            LightNotFound: If no light has this id
        """
        validate_light_name(new_name)

        result = self._request('PUT', f'/lights/{light_id}', {'name': new_name}, light_id=light_id)
        if not _has_success(result):
            raise ProtocolError(f"Unexpected response when renaming light {light_id}: {result!r}")

        return self.get_light(light_id)

    def search_new_lights(self) -> None:
        """Ask the bridge to start searching for new lights (takes ~40 seconds)."""
        result = self._request('POST', '/lights')
        if not _has_success(result):
            raise ProtocolError(f"Unexpected response when starting light search: {result!r}")

    def get_new_lights(self) -> NewLights:
        """Return lights found by the most recent search."""
        return NewLights.from_api(self._request('GET', '/lights/new'))

    def _request(self, method: str, endpoint: str, data: dict | None = None,
                 light_id: int | None = None):
        """Make a request to the bridge and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Path below /api/<application key>
            data: JSON body for PUT/POST
            light_id: Light addressed by the request, used to report LightNotFound
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s %s", method, endpoint, data if data is not None else '')

        try:
            response = self.session.request(method, url, json=data, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise BridgeUnreachable(self.bridge_ip, e) from e

        logger.debug("-> %s %s", response.status_code, response.text)

        if response.status_code in (401, 403):
            raise Unauthorized(self.bridge_ip)
        if response.status_code == 404 and light_id is not None:
            raise LightNotFound(light_id)
        if response.status_code >= 400:
            raise ProtocolError(
                f"Hue Bridge request {method} {endpoint} failed with status {response.status_code}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ProtocolError(f"Hue Bridge returned invalid JSON for {method} {endpoint}") from e

        self._raise_for_errors(result, light_id)
        return result

    def _raise_for_errors(self, result, light_id: int | None) -> None:
        """Raise the matching HueError if the body holds bridge errors.

        Errors are returned with HTTP 200 as [{"error": {"type": ..., "description": ...}}].
        """
        if not isinstance(result, list):
            return

        errors = [item['error'] for item in result
                  if isinstance(item, dict) and isinstance(item.get('error'), dict)]
        if not errors:
            return

        error = errors[0]
        error_type = error.get('type')
        if error_type == ERROR_UNAUTHORIZED:
            raise Unauthorized(self.bridge_ip)
        if error_type == ERROR_RESOURCE_NOT_AVAILABLE and light_id is not None:
            raise LightNotFound(light_id)

        description = error.get('description', 'Unknown error')
        raise ProtocolError(f"Hue Bridge error {error_type}: {description}")


def validate_light_name(name: str) -> None:
    """Check a light name against the bridge limits."""
    if not name or not name.strip():
        raise ValueError("Light name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Light name must be at most {MAX_NAME_LENGTH} characters")


def _has_success(result) -> bool:
    return isinstance(result, list) and any(
        isinstance(item, dict) and 'success' in item for item in result
    )
