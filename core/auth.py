"""
Authentication module for Hue Bridge.

Handles bridge discovery, link button pairing, and loading or creating
the stored credentials for a CLI invocation.
"""

import logging
import socket
import time

import click
import requests
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from core.config import DEFAULT_TIMEOUT, Settings, load_credentials, save_credentials
from core.errors import (
    ERROR_LINK_BUTTON_NOT_PRESSED,
    BridgeUnreachable,
    NoBridgeFound,
    PairingTimeout,
    ProtocolError,
)
from models.types import Credentials, DiscoveredBridge

logger = logging.getLogger(__name__)

DISCOVERY_URL = 'https://discovery.meethue.com/'
POLL_INTERVAL = 1.0

# Disable SSL warnings for self-signed certificate
requests.packages.urllib3.disable_warnings(InsecureRequestWarning)


def discover_bridges(timeout: float = DEFAULT_TIMEOUT) -> list[DiscoveredBridge]:
    """Discover Hue bridges on the network using N-UPnP.

    Uses the Philips discovery service at https://discovery.meethue.com/
    to find bridges on the same network.

    Returns:
        Bridges sorted by address, or an empty list if discovery fails
    """
    try:
        response = requests.get(DISCOVERY_URL, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(f"expected a list, got {type(payload).__name__}")

        bridges = []
        for entry in payload:
            try:
                bridges.append(DiscoveredBridge.from_api(entry))
            except ProtocolError as e:
                logger.debug("Skipping discovery entry %r: %s", entry, e)

        if payload and not bridges:
            raise ValueError("no entry has a bridge address")
        return sorted(bridges, key=lambda b: b.address)

    except requests.exceptions.HTTPError as e:
        if e.response is not None and e.response.status_code == 429:
            click.secho("Philips discovery service rate limit reached", fg='yellow', err=True)
            click.echo("Pass the bridge address with --ip instead.", err=True)
        else:
            click.echo(f"Bridge discovery failed: {e}", err=True)
        return []
    except requests.exceptions.RequestException as e:
        click.echo(f"Bridge discovery failed: {e}", err=True)
        return []
    except ValueError as e:
        click.echo(f"Failed to parse discovery response: {e}", err=True)
        return []


def choose_bridge(settings: Settings) -> str:
    """Return the bridge address to pair with.

    An explicit address wins; otherwise the network is searched and the
    user picks one if several bridges answer.

    Raises:
        NoBridgeFound: If no address was given and discovery found nothing
    """
    if settings.bridge_ip:
        return settings.bridge_ip

    click.echo("Discovering Hue bridges...", err=True)
    bridges = discover_bridges(timeout=settings.timeout)

    if not bridges:
        raise NoBridgeFound()

    if len(bridges) == 1:
        click.echo(f"Found Hue Bridge at {bridges[0].host}", err=True)
        return bridges[0].host

    click.secho(f"Found {len(bridges)} Hue bridges:", fg='cyan', bold=True, err=True)
    for i, bridge in enumerate(bridges, 1):
        click.echo(f"  {i}. {bridge.host} (id {bridge.id or 'unknown'})", err=True)

    choice = click.prompt(
        "Select bridge",
        type=click.IntRange(1, len(bridges)),
        default=1,
        err=True,
    )
    return bridges[choice - 1].host


def pair_with_bridge(bridge_ip: str, timeout: float, use_https: bool = True,
                     poll_interval: float = POLL_INTERVAL, request_timeout: float = DEFAULT_TIMEOUT,
                     app_name: str | None = None, sleep=time.sleep, clock=time.monotonic) -> Credentials:
    """Request an application key from the bridge via the link button.

    Polls the bridge until the link button has been pressed or the wait
    window runs out.

    Args:
        bridge_ip: Bridge address
        timeout: Seconds to wait for the link button
        use_https: Use HTTPS (certificate is not verified)
        poll_interval: Seconds between attempts
        request_timeout: Seconds to wait for each response
        app_name: devicetype sent to the bridge (defaults to hue-cli#<hostname>)
        sleep, clock: Time functions, replaceable in tests

    Returns:
        Credentials holding the new application key

    Raises:
        PairingTimeout: If the button was not pressed within the window
        BridgeUnreachable: If the bridge does not answer
        ProtocolError: For any other bridge response
    """
    scheme = 'https' if use_https else 'http'
    url = f"{scheme}://{bridge_ip}/api"
    payload = {'devicetype': app_name or _default_app_name()}

    click.secho("Press the link button on your Hue Bridge", fg='yellow', bold=True, err=True)
    click.echo(f"Waiting up to {timeout:g} seconds...", err=True)

    deadline = clock() + timeout
    while True:
        logger.debug("POST /api %s", payload)
        try:
            response = requests.post(url, json=payload, verify=False, timeout=request_timeout)
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise BridgeUnreachable(bridge_ip, e) from e
        except ValueError as e:
            raise ProtocolError(f"Hue Bridge at {bridge_ip} returned invalid JSON while pairing") from e

        key = _parse_pairing_response(data)
        if key is not None:
            click.secho("Paired with Hue Bridge", fg='green', err=True)
            return Credentials(bridge_address=bridge_ip, application_key=key)

        if clock() + poll_interval > deadline:
            raise PairingTimeout(bridge_ip, timeout)
        sleep(poll_interval)


def get_auth_credentials(settings: Settings) -> Credentials:
    """Load stored credentials, pairing with a bridge on first run.

    A bridge address passed on the command line overrides the stored one.
    Failure to save new credentials is reported but not fatal.
    """
    credentials = load_credentials(settings.config_file)
    if credentials:
        if settings.bridge_ip and settings.bridge_ip != credentials.bridge_address:
            return Credentials(settings.bridge_ip, credentials.application_key)
        return credentials

    click.secho("No stored credentials found, pairing with a Hue Bridge.", fg='yellow', err=True)
    return register(settings)


def register(settings: Settings) -> Credentials:
    """Discover a bridge, pair with it and store the credentials."""
    bridge_ip = choose_bridge(settings)
    credentials = pair_with_bridge(
        bridge_ip,
        timeout=settings.pair_timeout,
        use_https=settings.use_https,
        request_timeout=settings.timeout,
    )

    if save_credentials(credentials, settings.config_file):
        click.secho(f"Configuration saved to {settings.config_file}", fg='green', err=True)
    else:
        click.echo("Credentials could not be saved; you will be asked to pair again next time.", err=True)

    return credentials


def _parse_pairing_response(data) -> str | None:
    """Return the application key, or None while the link button is unpressed."""
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        raise ProtocolError(f"Unexpected pairing response: {data!r}")

    entry = data[0]
    if 'success' in entry:
        username = entry['success'].get('username') if isinstance(entry['success'], dict) else None
        if not isinstance(username, str) or not username:
            raise ProtocolError("Pairing response did not contain an application key")
        return username

    error = entry.get('error')
    if isinstance(error, dict):
        if error.get('type') == ERROR_LINK_BUTTON_NOT_PRESSED:
            return None
        raise ProtocolError(f"Pairing failed: {error.get('description', 'Unknown error')}")

    raise ProtocolError(f"Unexpected pairing response: {data!r}")


def _default_app_name() -> str:
    # devicetype is limited to 40 characters, 19 after the '#'
    return f"hue-cli#{socket.gethostname()[:19]}"
