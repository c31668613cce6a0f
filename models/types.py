"""Type definitions for the Hue CLI.

Bridge payloads are plain JSON. They are decoded into these dataclasses
at the HTTP boundary so the rest of the application never sees raw dicts.
Anything that does not match the expected shape raises ProtocolError.
"""

from dataclasses import dataclass

from core.errors import ProtocolError


@dataclass(frozen=True)
class Credentials:
    """Bridge address and the application key it issued."""
    bridge_address: str
    application_key: str

    def to_dict(self) -> dict:
        return {
            'bridge_address': self.bridge_address,
            'application_key': self.application_key,
        }

    @classmethod
    def from_dict(cls, data: object) -> 'Credentials | None':
        """Build credentials from a stored dict, or None if incomplete."""
        if not isinstance(data, dict):
            return None

        bridge_address = data.get('bridge_address')
        application_key = data.get('application_key')
        if (isinstance(bridge_address, str) and bridge_address
                and isinstance(application_key, str) and application_key):
            return cls(bridge_address, application_key)
        return None


@dataclass(frozen=True)
class Light:
    """A light as reported by the bridge.

    `on` is None for devices that do not report an on/off state.
    """
    id: int
    name: str
    reachable: bool
    on: bool | None

    @classmethod
    def from_api(cls, light_id: object, payload: object) -> 'Light':
        """Decode one entry of the bridge's /lights resource.

        Args:
            light_id: Key of the entry (the bridge uses numeric strings)
            payload: Light object, e.g. {"name": ..., "state": {...}}

        Raises:
            ProtocolError: If the id or payload is malformed
        """
        parsed_id = parse_light_id(light_id)

        if not isinstance(payload, dict):
            raise ProtocolError(f"Light {parsed_id}: expected an object, got {type(payload).__name__}")

        name = payload.get('name')
        if not isinstance(name, str):
            raise ProtocolError(f"Light {parsed_id}: missing or invalid 'name'")

        state = payload.get('state')
        if not isinstance(state, dict):
            raise ProtocolError(f"Light {parsed_id}: missing or invalid 'state'")

        reachable = state.get('reachable')
        if not isinstance(reachable, bool):
            raise ProtocolError(f"Light {parsed_id}: missing or invalid 'state.reachable'")

        on = state.get('on')
        if on is not None and not isinstance(on, bool):
            raise ProtocolError(f"Light {parsed_id}: invalid 'state.on'")

        return cls(id=parsed_id, name=name, reachable=reachable, on=on)


@dataclass(frozen=True)
class DiscoveredBridge:
    """Bridge information from N-UPnP discovery."""
    id: str
    address: str
    port: int | None = None

    @property
    def host(self) -> str:
        """Address to connect to, with the port when it is not a default one."""
        if self.port is None or self.port in (80, 443):
            return self.address
        return f"{self.address}:{self.port}"

    @classmethod
    def from_api(cls, payload: object) -> 'DiscoveredBridge':
        if not isinstance(payload, dict):
            raise ProtocolError("Discovery entry is not an object")

        address = payload.get('internalipaddress')
        if not isinstance(address, str) or not address:
            raise ProtocolError("Discovery entry has no 'internalipaddress'")

        port = payload.get('port')
        return cls(
            id=str(payload.get('id', '')),
            address=address,
            port=port if isinstance(port, int) else None,
        )


@dataclass(frozen=True)
class NewLights:
    """Result of a light search: lights found and when the scan ran."""
    lights: list[tuple[int, str]]
    last_scan: str | None

    @classmethod
    def from_api(cls, payload: object) -> 'NewLights':
        if not isinstance(payload, dict):
            raise ProtocolError("New lights response is not an object")

        last_scan = payload.get('lastscan')
        lights = []
        for key, value in payload.items():
            if key == 'lastscan':
                continue
            if not isinstance(value, dict) or not isinstance(value.get('name'), str):
                raise ProtocolError(f"New light {key}: missing or invalid 'name'")
            lights.append((parse_light_id(key), value['name']))

        return cls(lights=lights, last_scan=last_scan if isinstance(last_scan, str) else None)


def parse_light_id(value: object) -> int:
    """Convert a bridge light id ("1", "12") to an int."""
    if isinstance(value, bool):
        raise ProtocolError(f"Invalid light id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise ProtocolError(f"Invalid light id: {value!r}")
