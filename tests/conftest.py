"""Pytest fixtures for appleauth tests."""
import pytest

from appleauth.core.api import APIConfig, RequestBuilder
from appleauth.core.auth.models import SessionContext
from helpers import RecordingSink, make_response


@pytest.fixture
def config():
    return APIConfig.default()


@pytest.fixture
def endpoints(config):
    return config.endpoints


@pytest.fixture
def builder(endpoints):
    return RequestBuilder(endpoints)


@pytest.fixture
def context():
    return SessionContext(service_key='service-key', session_id='session-123', scnt='scnt-abc')


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def valid_session_response():
    return make_response(200, {'provider': {'providerId': 1, 'name': 'Example Inc.'}})


@pytest.fixture
def second_factor_headers():
    return {'X-Apple-ID-Session-Id': 'session-123', 'scnt': 'scnt-abc'}


@pytest.fixture
def phone_numbers_payload():
    return [
        {'id': 1, 'numberWithDialCode': '+1 (•••) •••-••01'},
        {'id': 2, 'numberWithDialCode': '+1 (•••) •••-••02'},
        {'id': 3, 'numberWithDialCode': '+44 ••••• ••••03'},
    ]
