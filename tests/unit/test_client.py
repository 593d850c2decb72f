"""End-to-end scenarios through AppleAuthClient with a scripted transport."""
import asyncio
import time
from unittest.mock import Mock

import pytest

from appleauth import AppleAuthClient, LoginStatus
from appleauth.core.exceptions import IncorrectSecurityCode, InvalidCredentials, InvalidSession
from appleauth.core.session import MemoryCookieStorage
from helpers import FakeAPIClient, RecordingSink, ScriptedPrompt, auth_options_payload, make_response


SERVICE_KEY = make_response(200, {'authServiceKey': 'widget-key'})


@pytest.fixture
def storage():
    storage = Mock(spec=MemoryCookieStorage)
    storage.load.return_value = False
    return storage


def build_client(api, prompt=None, storage=None, **kwargs):
    return AppleAuthClient(
        prompt=prompt or ScriptedPrompt(),
        log_sink=RecordingSink(),
        storage=storage or MemoryCookieStorage(),
        api_client=api,
        **kwargs
    )


class TestLoginScenarios:
    """Test suite for complete login attempts."""
    
    @pytest.mark.asyncio
    async def test_no_second_factor(self, valid_session_response, storage):
        """Test service key, sign-in and one validation call."""
        api = FakeAPIClient(SERVICE_KEY, make_response(200, {}), valid_session_response)
        
        async with build_client(api, storage=storage) as client:
            result = await client.login('user@example.com', 'pw')
            assert client.is_authenticated
        
        assert result.status is LoginStatus.AUTHENTICATED
        assert len(api.sent) == 3
        storage.save.assert_called_with(api.cookie_jar)
        assert api.closed
    
    @pytest.mark.asyncio
    async def test_sms_fallback_with_phone_selection(
        self, second_factor_headers, phone_numbers_payload, valid_session_response
    ):
        """Test 'sms' escape, phone #2, correct code: seven calls in order."""
        api = FakeAPIClient(
            SERVICE_KEY,
            make_response(409, {'authType': 'hsa2'}, headers=second_factor_headers),
            make_response(200, auth_options_payload(phones=phone_numbers_payload, no_trusted_devices=False)),
            make_response(200, {}),
            make_response(200, {}),
            make_response(204),
            valid_session_response,
        )
        prompt = ScriptedPrompt('sms', '2', '123456')
        
        async with build_client(api, prompt) as client:
            result = await client.login('user@example.com', 'pw')
        
        endpoints = client._config.endpoints
        assert result.authenticated
        assert [(r.method, r.url) for r in api.sent] == [
            ('GET', endpoints.service_key_url),
            ('POST', endpoints.sign_in_url),
            ('GET', endpoints.auth_options_url),
            ('PUT', endpoints.request_phone_code_url),
            ('POST', endpoints.submit_code_url('phone')),
            ('GET', endpoints.trust_url),
            ('GET', endpoints.session_url),
        ]
        assert api.sent[3].json == {'phoneNumber': {'id': 2}, 'mode': 'sms'}
        for request in api.sent[2:6]:
            assert request.headers['X-Apple-ID-Session-Id'] == 'session-123'
            assert request.headers['scnt'] == 'scnt-abc'
            assert request.headers['X-Apple-Widget-Key'] == 'widget-key'
    
    @pytest.mark.asyncio
    async def test_incorrect_code_surfaces(self, second_factor_headers, phone_numbers_payload, storage):
        """Test no further calls follow a rejected code."""
        api = FakeAPIClient(
            SERVICE_KEY,
            make_response(409, {}, headers=second_factor_headers),
            make_response(200, auth_options_payload(phones=phone_numbers_payload)),
            make_response(401, b''),
        )
        
        client = build_client(api, ScriptedPrompt('000000'), storage=storage)
        with pytest.raises(IncorrectSecurityCode):
            await client.login('user@example.com', 'pw')
        await client.close()
        
        assert len(api.sent) == 4
        assert not client.is_authenticated
        storage.save.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_two_step_is_incomplete(self, second_factor_headers, phone_numbers_payload, storage):
        devices = [{'id': 'd1', 'name': 'iPad', 'modelName': 'iPad Pro'}]
        api = FakeAPIClient(
            SERVICE_KEY,
            make_response(409, {}, headers=second_factor_headers),
            make_response(200, auth_options_payload(phones=phone_numbers_payload, devices=devices)),
        )
        
        async with build_client(api, storage=storage) as client:
            result = await client.login('user@example.com', 'pw')
        
        assert result.status is LoginStatus.INCOMPLETE
        assert not client.is_authenticated
        storage.save.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_invalid_credentials(self):
        api = FakeAPIClient(SERVICE_KEY, make_response(401, {}))
        
        async with build_client(api) as client:
            with pytest.raises(InvalidCredentials):
                await client.login('user@example.com', 'wrong')


class TestStart:
    """Test suite for start()."""
    
    @pytest.mark.asyncio
    async def test_reuses_valid_session(self, valid_session_response):
        """Test no credentials are asked for when cookies are valid."""
        api = FakeAPIClient(valid_session_response)
        prompt = ScriptedPrompt()
        
        async with build_client(api, prompt) as client:
            result = await client.start()
        
        assert result.authenticated
        assert result.account_name is None
        assert prompt.prompts == []
        assert len(api.sent) == 1
    
    @pytest.mark.asyncio
    async def test_prompts_for_missing_credentials(self, valid_session_response):
        api = FakeAPIClient(
            make_response(401, b''),
            SERVICE_KEY,
            make_response(200, {}),
            valid_session_response,
        )
        prompt = ScriptedPrompt('user@example.com', 'secret')
        
        async with build_client(api, prompt) as client:
            result = await client.start()
        
        assert result.authenticated
        assert prompt.prompts == ['Apple ID: ', 'Apple ID Password: ']
        assert api.sent[2].json['password'] == 'secret'
    
    @pytest.mark.asyncio
    async def test_uses_secret_prompt_when_available(self, valid_session_response):
        api = FakeAPIClient(
            make_response(200, {}),
            SERVICE_KEY,
            make_response(200, {}),
            valid_session_response,
        )
        prompt = ScriptedPrompt()
        prompt.read_secret = Mock(return_value='hidden')
        
        async with build_client(api, prompt) as client:
            await client.start(account_name='user@example.com')
        
        prompt.read_secret.assert_called_once_with('Apple ID Password: ')
        assert api.sent[2].json['password'] == 'hidden'
    
    @pytest.mark.asyncio
    async def test_missing_credentials_raise(self):
        api = FakeAPIClient(make_response(401, b''))
        
        async with build_client(api, ScriptedPrompt(None, None)) as client:
            with pytest.raises(ValueError):
                await client.start()


class TestSessionHandling:
    """Test suite for session helpers."""
    
    @pytest.mark.asyncio
    async def test_loads_stored_cookies_on_connect(self, storage):
        api = FakeAPIClient()
        
        await build_client(api, storage=storage).connect()
        
        storage.load.assert_called_once_with(api.cookie_jar)
    
    @pytest.mark.asyncio
    async def test_get_http_session_requires_authentication(self):
        async with build_client(FakeAPIClient()) as client:
            with pytest.raises(InvalidSession):
                await client.get_http_session()
    
    @pytest.mark.asyncio
    async def test_get_http_session_after_validation(self, valid_session_response):
        api = FakeAPIClient(valid_session_response)
        
        async with build_client(api) as client:
            await client.validate_session()
            assert await client.get_http_session() is api
    
    @pytest.mark.asyncio
    async def test_failed_validation_clears_flag(self, valid_session_response):
        api = FakeAPIClient(valid_session_response, make_response(200, {}))
        
        async with build_client(api) as client:
            assert await client.is_session_valid() is True
            assert await client.is_session_valid() is False
            assert not client.is_authenticated
    
    @pytest.mark.asyncio
    async def test_logout(self, valid_session_response, storage):
        api = FakeAPIClient(valid_session_response)
        
        async with build_client(api, storage=storage) as client:
            await client.validate_session()
            await client.logout()
            assert not client.is_authenticated
        
        assert api.cookie_jar.cleared
        storage.delete.assert_called_once()
        storage.save.assert_not_called()
    
    def test_file_storage_from_config(self, tmp_path):
        from appleauth import APIConfig, FileCookieStorage
        
        client = AppleAuthClient(
            APIConfig(cookie_file=tmp_path / 'cookies'),
            prompt=ScriptedPrompt(),
            log_sink=RecordingSink()
        )
        
        assert isinstance(client._storage, FileCookieStorage)
        assert client._storage.path == tmp_path / 'cookies'


class SlowPrompt(ScriptedPrompt):
    """Prompt that blocks its thread like a user taking time to type."""
    
    def read_line(self, prompt):
        time.sleep(0.2)
        return super().read_line(prompt)


class TestPromptConcurrency:
    """Test suite for credential prompts sharing the event loop."""
    
    @pytest.mark.asyncio
    async def test_other_tasks_run_during_credential_prompts(self, valid_session_response):
        api = FakeAPIClient(
            make_response(401, b''),
            SERVICE_KEY,
            make_response(200, {}),
            valid_session_response,
        )
        ticks = []
        
        async def ticker():
            while True:
                await asyncio.sleep(0.01)
                ticks.append(None)
        
        task = asyncio.ensure_future(ticker())
        try:
            async with build_client(api, SlowPrompt('user@example.com', 'secret')) as client:
                result = await client.start()
        finally:
            task.cancel()
        
        assert result.authenticated
        assert len(ticks) >= 10
