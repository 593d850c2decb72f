"""Tests for request building."""
import pytest

from appleauth.core.api import Endpoints, RequestBuilder
from appleauth.core.auth.models import (
    Credentials,
    DeviceSecurityCode,
    SMSSecurityCode,
    TrustedPhoneNumber,
)


class TestRequestBuilder:
    """Test suite for RequestBuilder."""
    
    def test_service_key(self, builder):
        """Test service key request."""
        request = builder.service_key()
        
        assert request.method == 'GET'
        assert request.url == (
            'https://appstoreconnect.apple.com/olympus/v1/app/config'
            '?hostname=itunesconnect.apple.com'
        )
        assert request.json is None
    
    def test_session(self, builder):
        """Test session status request."""
        request = builder.session()
        
        assert request.method == 'GET'
        assert request.url == 'https://appstoreconnect.apple.com/olympus/v1/session'
    
    def test_sign_in(self, builder):
        """Test sign-in request carries credentials and widget key."""
        request = builder.sign_in('widget', Credentials('user@example.com', 'secret'))
        
        assert request.method == 'POST'
        assert request.url == 'https://idmsa.apple.com/appleauth/auth/signin'
        assert request.json == {
            'accountName': 'user@example.com',
            'password': 'secret',
            'rememberMe': True
        }
        assert request.headers['X-Apple-Widget-Key'] == 'widget'
        assert request.headers['X-Requested-With'] == 'XMLHttpRequest'
        assert request.headers['Accept'] == 'application/json, text/javascript'
    
    def test_auth_options_uses_context(self, builder, context):
        """Test auth options request carries all session headers."""
        request = builder.auth_options(context)
        
        assert request.method == 'GET'
        assert request.url == 'https://idmsa.apple.com/appleauth/auth'
        assert request.headers['X-Apple-ID-Session-Id'] == 'session-123'
        assert request.headers['X-Apple-Widget-Key'] == 'service-key'
        assert request.headers['scnt'] == 'scnt-abc'
    
    def test_request_security_code(self, builder, context):
        """Test SMS code request targets the chosen phone."""
        request = builder.request_security_code(context, TrustedPhoneNumber(2, '+1 555'))
        
        assert request.method == 'PUT'
        assert request.url == 'https://idmsa.apple.com/appleauth/auth/verify/phone'
        assert request.json == {'phoneNumber': {'id': 2}, 'mode': 'sms'}
        assert request.headers['scnt'] == 'scnt-abc'
    
    @pytest.mark.parametrize('code, component', [
        (DeviceSecurityCode('123456'), 'trusteddevice'),
        (SMSSecurityCode('123456', 3), 'phone'),
    ])
    def test_submit_security_code_path(self, builder, context, code, component):
        """Test the code channel selects the endpoint."""
        request = builder.submit_security_code(context, code)
        
        assert request.method == 'POST'
        assert request.url == f'https://idmsa.apple.com/appleauth/auth/verify/{component}/securitycode'
        assert request.json == code.to_json()
        assert request.headers['X-Apple-ID-Session-Id'] == 'session-123'
    
    def test_trust(self, builder, context):
        """Test trust request."""
        request = builder.trust(context)
        
        assert request.method == 'GET'
        assert request.url == 'https://idmsa.apple.com/appleauth/auth/2sv/trust'
        assert request.headers['X-Apple-Widget-Key'] == 'service-key'
    
    def test_custom_endpoints(self, context):
        """Test URLs and header names come from configuration."""
        endpoints = Endpoints(
            auth_base_url='https://idp.example.test/auth',
            scnt_header='X-Scnt'
        )
        request = RequestBuilder(endpoints).trust(context)
        
        assert request.url == 'https://idp.example.test/auth/2sv/trust'
        assert request.headers['X-Scnt'] == 'scnt-abc'
        assert 'scnt' not in request.headers
    
    def test_session_headers_not_shared(self, builder, context):
        """Test each request gets its own header mapping."""
        first = builder.submit_security_code(context, DeviceSecurityCode('1'))
        second = builder.trust(context)
        
        assert 'Content-Type' in first.headers
        assert 'Content-Type' not in second.headers
