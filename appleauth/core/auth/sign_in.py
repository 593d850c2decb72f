"""
Sign-in negotiation.

Exchanges credentials for a session: fetch the service key, post the
credentials, classify the response once and act on the classification.
"""
from .models import (
    AcknowledgementRequiredResponse,
    Credentials,
    LoginResult,
    LoginStatus,
    SecondFactorRequired,
    ServiceKeyBody,
    SessionContext,
    SignInAccepted,
    SignInBody,
    SignInRejected,
    SignInResponse,
    UnrecognizedSignInResponse,
)
from .second_factor import SecondFactorResolver
from .session_validator import SessionValidator
from ..api.async_client import AsyncAPIClient
from ..api.config import Endpoints
from ..api.errors import ResponseDecodingError
from ..api.models import APIResponse
from ..api.request import RequestBuilder, ResponseHandler
from ..exceptions import AcknowledgementRequired, InvalidCredentials, UnexpectedSignInResponse
from ..logging import get_logger


class SignInNegotiator:
    """
    Performs the credential exchange of one login attempt.

    The service key obtained in the first step is reused unchanged for
    every later request of the same attempt.
    """

    def __init__(
        self,
        client: AsyncAPIClient,
        builder: RequestBuilder,
        validator: SessionValidator,
        resolver: SecondFactorResolver
    ):
        self._client = client
        self._builder = builder
        self._validator = validator
        self._resolver = resolver
        self._logger = get_logger('appleauth.auth.sign_in')

    async def login(self, account_name: str, password: str) -> LoginResult:
        """
        Sign in with an account name and password.

        Args:
            account_name: Apple ID
            password: Apple ID password

        Returns:
            LoginResult, AUTHENTICATED when a session was validated

        Raises:
            InvalidCredentials: On 401
            AcknowledgementRequired: On 412 with a recognized authType
            UnexpectedSignInResponse: For any other outcome
            ResponseDecodingError: If a strictly typed body does not decode
        """
        credentials = Credentials(account_name, password)

        service_key = await self.fetch_service_key()

        response = await self._client.send(self._builder.sign_in(service_key, credentials))
        outcome = classify_sign_in_response(
            response,
            service_key,
            credentials.account_name,
            self._builder.endpoints
        )
        self._logger.debug(f"Sign-in response classified as {type(outcome).__name__}")

        if isinstance(outcome, SignInAccepted):
            await self._validator.validate_session()
            return LoginResult(LoginStatus.AUTHENTICATED, account_name)

        if isinstance(outcome, SignInRejected):
            raise InvalidCredentials(outcome.account_name)

        if isinstance(outcome, SecondFactorRequired):
            return await self._resolver.resolve(outcome.context, account_name, outcome.raw_body)

        if isinstance(outcome, AcknowledgementRequiredResponse):
            raise AcknowledgementRequired()

        if isinstance(outcome, UnrecognizedSignInResponse):
            raise UnexpectedSignInResponse(outcome.status_code, outcome.message)

        raise TypeError(f"Unhandled sign-in response {outcome!r}")

    async def fetch_service_key(self) -> str:
        """
        Raises:
            ResponseDecodingError: If the provisioning response is malformed
        """
        response = await self._client.send(self._builder.service_key())
        return ResponseHandler.decode(response, ServiceKeyBody.from_dict).auth_service_key


def classify_sign_in_response(
    response: APIResponse,
    service_key: str,
    account_name: str,
    endpoints: Endpoints
) -> SignInResponse:
    """
    Decode a sign-in response into exactly one tagged variant.

    Classification is by status code only; the body supplies the authType
    and service errors.

    Raises:
        ResponseDecodingError: If the body does not decode, or a 409 lacks
            the session headers
    """
    body = ResponseHandler.decode(response, SignInBody.from_dict, allow_empty=True)
    status = response.status

    if status == 200:
        return SignInAccepted()

    if status == 401:
        return SignInRejected(account_name)

    if status == 409:
        return SecondFactorRequired(
            _session_context(response, service_key, endpoints),
            response.body
        )

    if status == 412 and body.auth_type in endpoints.acknowledgement_auth_types:
        return AcknowledgementRequiredResponse(body.auth_type)

    return UnrecognizedSignInResponse(status, body.joined_errors())


def _session_context(response: APIResponse, service_key: str, endpoints: Endpoints) -> SessionContext:
    session_id = response.header(endpoints.session_id_header)
    scnt = response.header(endpoints.scnt_header)

    if session_id is None or scnt is None:
        missing = endpoints.session_id_header if session_id is None else endpoints.scnt_header
        raise ResponseDecodingError(
            KeyError(f"Missing response header '{missing}'"),
            response.body,
            response
        )

    return SessionContext(service_key=service_key, session_id=session_id, scnt=scnt)
