"""
Tests for HueController requests against the bridge's lights API.

Most tests run against the FakeBridge fixture so that reads observe the
effect of earlier writes.
"""

import json

import pytest
import requests
import responses

from core.controller import HueController, MAX_NAME_LENGTH, validate_light_name
from core.errors import BridgeUnreachable, LightNotFound, ProtocolError, Unauthorized
from models.types import Credentials, Light

LIGHTS_URL = 'https://192.168.1.2/api/test-key/lights'


@pytest.fixture
def controller(credentials):
    return HueController(credentials)


class TestListLights:
    """list_lights() decoding and ordering."""

    def test_returns_one_record_per_light(self, controller, fake_bridge):
        lights = controller.list_lights()

        assert len(lights) == len(fake_bridge.lights)
        assert len({light.id for light in lights}) == len(lights)

    def test_keeps_bridge_order_and_decodes_fields(self, controller, fake_bridge):
        lights = controller.list_lights()

        assert lights == [
            Light(id=1, name='Some light', reachable=True, on=True),
            Light(id=2, name='Other light', reachable=False, on=True),
            Light(id=3, name='Hallway', reachable=True, on=False),
        ]

    def test_empty_bridge(self, controller, fake_bridge):
        fake_bridge.lights.clear()
        assert controller.list_lights() == []

    def test_rejected_key_raises_unauthorized(self, fake_bridge):
        controller = HueController(Credentials('192.168.1.2', 'wrong-key'))

        with pytest.raises(Unauthorized) as excinfo:
            controller.list_lights()

        assert 'hue register' in str(excinfo.value)

    def test_http_401_raises_unauthorized(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, status=401)

        with pytest.raises(Unauthorized):
            controller.list_lights()

    def test_connection_error_raises_unreachable(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL,
                             body=requests.exceptions.ConnectionError('no route to host'))

        with pytest.raises(BridgeUnreachable) as excinfo:
            controller.list_lights()

        assert '192.168.1.2' in str(excinfo.value)

    def test_timeout_raises_unreachable(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, body=requests.exceptions.ReadTimeout())

        with pytest.raises(BridgeUnreachable):
            controller.list_lights()

    def test_invalid_json_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, body='<html>not json</html>')

        with pytest.raises(ProtocolError):
            controller.list_lights()

    def test_malformed_light_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, json={'1': {'name': 'No state'}})

        with pytest.raises(ProtocolError):
            controller.list_lights()

    def test_list_instead_of_object_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, json=[{'success': {}}])

        with pytest.raises(ProtocolError):
            controller.list_lights()

    def test_unknown_bridge_error_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(
            responses.GET, LIGHTS_URL,
            json=[{'error': {'type': 901, 'address': '/lights', 'description': 'Internal error, 404'}}],
        )

        with pytest.raises(ProtocolError) as excinfo:
            controller.list_lights()

        assert 'Internal error' in str(excinfo.value)

    def test_server_error_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, LIGHTS_URL, status=503)

        with pytest.raises(ProtocolError):
            controller.list_lights()

    def test_plain_http(self, credentials, mocked_responses):
        mocked_responses.add(responses.GET, 'http://192.168.1.2/api/test-key/lights', json={})

        controller = HueController(credentials, use_https=False)

        assert controller.list_lights() == []


class TestRenameLight:
    """rename_light() round trips through the bridge."""

    def test_rename_then_list_shows_new_name(self, controller, fake_bridge):
        before = {light.id: light for light in controller.list_lights()}

        renamed = controller.rename_light(2, 'Different name')
        after = {light.id: light for light in controller.list_lights()}

        assert renamed == Light(id=2, name='Different name', reachable=False, on=True)
        assert after[2].name == 'Different name'
        assert (after[2].reachable, after[2].on) == (before[2].reachable, before[2].on)
        assert after[1] == before[1]
        assert after[3] == before[3]

    def test_sends_only_the_name(self, controller, fake_bridge, mocked_responses):
        controller.rename_light(1, 'Desk')

        put = next(call for call in mocked_responses.calls if call.request.method == 'PUT')
        assert put.request.url == f'{LIGHTS_URL}/1'
        assert json.loads(put.request.body) == {'name': 'Desk'}

    def test_unknown_id_raises_not_found_and_changes_nothing(self, controller, fake_bridge):
        before = controller.list_lights()

        with pytest.raises(LightNotFound) as excinfo:
            controller.rename_light(42, 'Ghost')

        assert excinfo.value.light_id == 42
        assert controller.list_lights() == before

    def test_rejected_key_raises_unauthorized(self, fake_bridge):
        controller = HueController(Credentials('192.168.1.2', 'wrong-key'))

        with pytest.raises(Unauthorized):
            controller.rename_light(1, 'Desk')

        assert fake_bridge.lights['1']['name'] == 'Some light'

    def test_http_404_raises_not_found(self, controller, mocked_responses):
        mocked_responses.add(responses.PUT, f'{LIGHTS_URL}/7', status=404)

        with pytest.raises(LightNotFound):
            controller.rename_light(7, 'Desk')

    def test_invalid_name_is_rejected_before_any_request(self, controller, mocked_responses):
        with pytest.raises(ValueError):
            controller.rename_light(1, '')

        assert len(mocked_responses.calls) == 0

    def test_unexpected_response_raises_protocol_error(self, controller, mocked_responses):
        mocked_responses.add(responses.PUT, f'{LIGHTS_URL}/1', json={'ok': True})

        with pytest.raises(ProtocolError):
            controller.rename_light(1, 'Desk')


class TestNewLights:
    """Light search helpers."""

    def test_search_new_lights(self, controller, mocked_responses):
        mocked_responses.add(responses.POST, LIGHTS_URL,
                             json=[{'success': {'/lights': 'Searching for new devices'}}])

        controller.search_new_lights()

        assert mocked_responses.calls[0].request.method == 'POST'

    def test_get_new_lights(self, controller, mocked_responses):
        mocked_responses.add(responses.GET, f'{LIGHTS_URL}/new', json={
            '7': {'name': 'Hue Lamp 7'},
            '8': {'name': 'Hue Lamp 8'},
            'lastscan': '2024-10-29T12:00:00',
        })

        result = controller.get_new_lights()

        assert result.lights == [(7, 'Hue Lamp 7'), (8, 'Hue Lamp 8')]
        assert result.last_scan == '2024-10-29T12:00:00'

    def test_search_rejected_key(self, controller, mocked_responses):
        mocked_responses.add(responses.POST, LIGHTS_URL,
                             json=[{'error': {'type': 1, 'address': '/lights',
                                              'description': 'unauthorized user'}}])

        with pytest.raises(Unauthorized):
            controller.search_new_lights()


class TestValidateLightName:

    def test_accepts_normal_name(self):
        validate_light_name('Kitchen')

    @pytest.mark.parametrize('name', ['', '   ', 'x' * (MAX_NAME_LENGTH + 1)])
    def test_rejects_invalid_names(self, name):
        with pytest.raises(ValueError):
            validate_light_name(name)
