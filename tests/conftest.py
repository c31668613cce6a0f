"""Pytest configuration and fixtures for Hue CLI tests."""

import json
import re
from pathlib import Path

import pytest
import responses

from core.config import Settings
from models.types import Credentials

BRIDGE_IP = '192.168.1.2'
APP_KEY = 'test-key'


class FakeBridge:
    """In-memory bridge serving the lights API through `responses`.

    Requests made with any key other than `key` are rejected as
    unauthorized, the same way a real bridge answers them.
    """

    def __init__(self, rsps: responses.RequestsMock, address: str = BRIDGE_IP,
                 key: str = APP_KEY, scheme: str = 'https'):
        self.key = key
        self.lights = {
            '1': {'name': 'Some light', 'type': 'Extended color light',
                  'state': {'on': True, 'reachable': True, 'bri': 254}},
            '2': {'name': 'Other light', 'type': 'Dimmable light',
                  'state': {'on': True, 'reachable': False, 'bri': 120}},
            '3': {'name': 'Hallway', 'type': 'Dimmable light',
                  'state': {'on': False, 'reachable': True, 'bri': 1}},
        }
        self.pair_attempts = 0
        self.link_button_pressed = True

        root = f"{scheme}://{re.escape(address)}/api"
        lights = re.compile(rf"{root}/(?P<key>[^/]+)/lights$")
        light = re.compile(rf"{root}/(?P<key>[^/]+)/lights/(?P<id>\d+)$")

        rsps.add_callback(responses.GET, lights, callback=self._list)
        rsps.add_callback(responses.GET, light, callback=self._get)
        rsps.add_callback(responses.PUT, light, callback=self._put)
        rsps.add_callback(responses.POST, f"{scheme}://{address}/api", callback=self._pair)

        self._lights_url = lights
        self._light_url = light

    @staticmethod
    def _reply(body, status=200):
        return status, {'Content-Type': 'application/json'}, json.dumps(body)

    def _unauthorized(self, path):
        return self._reply([{'error': {'type': 1, 'address': path,
                                       'description': 'unauthorized user'}}])

    def _list(self, request):
        match = self._lights_url.match(request.url)
        if match.group('key') != self.key:
            return self._unauthorized('/lights')
        return self._reply(self.lights)

    def _get(self, request):
        match = self._light_url.match(request.url)
        light_id = match.group('id')
        if match.group('key') != self.key:
            return self._unauthorized(f'/lights/{light_id}')
        if light_id not in self.lights:
            return self._reply([{'error': {'type': 3, 'address': f'/lights/{light_id}',
                                           'description': f'resource, /lights/{light_id}, not available'}}])
        return self._reply(self.lights[light_id])

    def _put(self, request):
        match = self._light_url.match(request.url)
        light_id = match.group('id')
        if match.group('key') != self.key:
            return self._unauthorized(f'/lights/{light_id}')
        if light_id not in self.lights:
            return self._reply([{'error': {'type': 3, 'address': f'/lights/{light_id}',
                                           'description': f'resource, /lights/{light_id}, not available'}}])
        body = json.loads(request.body)
        self.lights[light_id]['name'] = body['name']
        return self._reply([{'success': {f'/lights/{light_id}/name': body['name']}}])

    def _pair(self, request):
        self.pair_attempts += 1
        if not self.link_button_pressed:
            return self._reply([{'error': {'type': 101, 'address': '',
                                           'description': 'link button not pressed'}}])
        return self._reply([{'success': {'username': self.key}}])


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def credentials():
    return Credentials(bridge_address=BRIDGE_IP, application_key=APP_KEY)


@pytest.fixture
def config_file(tmp_path):
    """Path of a credentials file that does not exist yet."""
    return tmp_path / 'hue' / 'config.json'


@pytest.fixture
def settings(config_file):
    return Settings(config_file=config_file, pair_timeout=0)


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def fake_bridge(mocked_responses):
    return FakeBridge(mocked_responses)
