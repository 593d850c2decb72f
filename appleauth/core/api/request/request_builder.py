"""Request builder for the Apple ID sign-in flow."""
from typing import Dict

from ..config import Endpoints
from ..models import PreparedRequest
from ...auth.models import Credentials, SecurityCode, SessionContext, TrustedPhoneNumber


class RequestBuilder:
    """
    Builds the requests of one sign-in flow.

    Every request after sign-in is built from a ``SessionContext`` so that
    the service key, session id and scnt of one attempt travel together.
    """

    JSON_ACCEPT = 'application/json'
    SIGN_IN_ACCEPT = 'application/json, text/javascript'

    def __init__(self, endpoints: Endpoints):
        """Initializes request builder."""
        self.endpoints = endpoints

    def service_key(self) -> PreparedRequest:
        return PreparedRequest('GET', self.endpoints.service_key_url)

    def session(self) -> PreparedRequest:
        return PreparedRequest('GET', self.endpoints.session_url)

    def sign_in(self, service_key: str, credentials: Credentials) -> PreparedRequest:
        headers = {
            'Content-Type': 'application/json',
            'X-Requested-With': 'XMLHttpRequest',
            self.endpoints.widget_key_header: service_key,
            'Accept': self.SIGN_IN_ACCEPT,
        }
        body = {
            'accountName': credentials.account_name,
            'password': credentials.password,
            'rememberMe': True,
        }
        return PreparedRequest('POST', self.endpoints.sign_in_url, headers, body)

    def auth_options(self, context: SessionContext) -> PreparedRequest:
        return PreparedRequest(
            'GET',
            self.endpoints.auth_options_url,
            self._session_headers(context)
        )

    def request_security_code(
        self,
        context: SessionContext,
        phone_number: TrustedPhoneNumber
    ) -> PreparedRequest:
        headers = self._session_headers(context)
        headers['Content-Type'] = 'application/json'
        body = {'phoneNumber': {'id': phone_number.id}, 'mode': 'sms'}
        return PreparedRequest('PUT', self.endpoints.request_phone_code_url, headers, body)

    def submit_security_code(self, context: SessionContext, code: SecurityCode) -> PreparedRequest:
        headers = self._session_headers(context)
        headers['Content-Type'] = 'application/json'
        return PreparedRequest(
            'POST',
            self.endpoints.submit_code_url(code.path_component),
            headers,
            code.to_json()
        )

    def trust(self, context: SessionContext) -> PreparedRequest:
        return PreparedRequest('GET', self.endpoints.trust_url, self._session_headers(context))

    def _session_headers(self, context: SessionContext) -> Dict[str, str]:
        return {
            self.endpoints.session_id_header: context.session_id,
            self.endpoints.widget_key_header: context.service_key,
            self.endpoints.scnt_header: context.scnt,
            'Accept': self.JSON_ACCEPT,
        }
