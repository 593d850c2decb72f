"""
Second-factor resolution.

Drives the two-factor part of a sign-in attempt once the sign-in endpoint
answered 409: discover the auth options, obtain a security code from the
user (trusted device or SMS), submit it, establish trust and validate the
resulting session.
"""
from typing import List, Optional

from .models import (
    AuthKind,
    AuthOptions,
    DeviceSecurityCode,
    LoginResult,
    LoginStatus,
    SMSSecurityCode,
    SecurityCode,
    SessionContext,
    TrustedPhoneNumber,
)
from .protocols import LogSink, PromptInterface, ask
from .session_validator import SessionValidator
from ..api.async_client import AsyncAPIClient
from ..api.request import RequestBuilder, ResponseHandler
from ..exceptions import IncorrectSecurityCode, InvalidPhoneNumberIndex, legible_description
from ..logging import get_logger


TWO_STEP_NOTICE = (
    "Received a response from Apple that indicates this account has two-step "
    "authentication enabled. appleauth currently only supports the newer "
    "two-factor authentication, though. Please consider upgrading to "
    "two-factor authentication."
)

UNKNOWN_NOTICE = (
    "Received a response from Apple that indicates this account has two-step "
    "or two-factor authentication enabled, but appleauth is unsure how to "
    "handle this response:"
)

TWO_FACTOR_NOTICE = "Two-factor authentication is enabled for this account.\n"

SMS_ESCAPE = 'sms'


class SecondFactorResolver:
    """
    State machine for the second-factor part of one login attempt.

    Start -> Classify -> {TwoStepUnsupported | AwaitCode | SelectPhone}
    -> SubmitCode -> Trust -> Done

    The same ``SessionContext`` is passed to every call. Nothing is retried
    automatically except the interactive phone selection.
    """

    def __init__(
        self,
        client: AsyncAPIClient,
        builder: RequestBuilder,
        validator: SessionValidator,
        prompt: PromptInterface,
        log_sink: LogSink,
        max_phone_selection_attempts: Optional[int] = None
    ):
        """
        Initialize the resolver.

        Args:
            client: Transport shared with the rest of the attempt
            builder: Request builder
            validator: Session validator used to finalize the session
            prompt: Source of user input
            log_sink: Destination of user-facing messages
            max_phone_selection_attempts: Give up phone selection after this
                many invalid answers (None keeps asking)
        """
        if max_phone_selection_attempts is not None and max_phone_selection_attempts < 1:
            raise ValueError("max_phone_selection_attempts must be at least 1")

        self._client = client
        self._builder = builder
        self._validator = validator
        self._prompt = prompt
        self._sink = log_sink
        self._max_attempts = max_phone_selection_attempts
        self._logger = get_logger('appleauth.auth.second_factor')

    async def resolve(
        self,
        context: SessionContext,
        account_name: str,
        raw_body: bytes = b''
    ) -> LoginResult:
        """
        Run the second-factor flow.

        Args:
            context: Session context from the 409 sign-in response
            account_name: Account being signed in
            raw_body: Raw sign-in response body, logged for unknown shapes

        Returns:
            AUTHENTICATED once the session validates, INCOMPLETE for
            two-step or unrecognized accounts

        Raises:
            IncorrectSecurityCode: If the code is rejected
            InvalidPhoneNumberIndex: If phone selection attempts run out
            ResponseDecodingError: If auth options do not decode
            BadStatusCode: On other non-2xx responses
            InvalidSession: If the final session check fails
        """
        options = await self.fetch_auth_options(context)
        self._logger.debug(f"Auth options kind: {options.kind.value}")

        if options.kind is AuthKind.TWO_STEP:
            self._sink.log(TWO_STEP_NOTICE)
            return LoginResult(LoginStatus.INCOMPLETE, account_name, options.kind)

        if options.kind is AuthKind.UNKNOWN:
            self._sink.log(UNKNOWN_NOTICE)
            self._sink.log(raw_body.decode('utf-8', errors='replace'))
            return LoginResult(LoginStatus.INCOMPLETE, account_name, options.kind)

        self._sink.log(TWO_FACTOR_NOTICE)
        self._report_rate_limits(options)

        code = await self._obtain_code(context, options)
        await self.submit_code(context, code)
        await self.establish_trust(context)

        return LoginResult(LoginStatus.AUTHENTICATED, account_name, options.kind)

    async def fetch_auth_options(self, context: SessionContext) -> AuthOptions:
        """
        Raises:
            ResponseDecodingError: If the body does not match the schema
        """
        response = await self._client.send(self._builder.auth_options(context))
        return ResponseHandler.decode(response, AuthOptions.from_dict)

    async def _obtain_code(self, context: SessionContext, options: AuthOptions) -> SecurityCode:
        length = options.security_code.length

        # SMS was sent automatically
        if options.sms_automatically_sent:
            return await self.prompt_for_sms_code(length, options.phone_numbers[0])

        # No trusted device; a phone must be chosen before a code is sent.
        # Several phones with noTrustedDevices has not been confirmed
        # against real accounts.
        if options.can_fall_back_to_sms:
            return await self._select_phone_and_request_code(context, options)

        # Code is shown on trusted devices
        answer = await ask(
            self._prompt.read_line,
            f'Enter "{SMS_ESCAPE}" without quotes to exit this prompt and choose a '
            'phone number to send an SMS security code to.\n'
            f'Enter the {length} digit code from one of your trusted devices: '
        )
        answer = (answer or '').strip()

        if answer == SMS_ESCAPE:
            return await self._select_phone_and_request_code(context, options)

        return DeviceSecurityCode(answer)

    async def _select_phone_and_request_code(
        self,
        context: SessionContext,
        options: AuthOptions
    ) -> SMSSecurityCode:
        phone_number = await self.select_phone_number(options.phone_numbers)
        await self.request_sms_code(context, phone_number)
        return await self.prompt_for_sms_code(options.security_code.length, phone_number)

    async def select_phone_number(self, phone_numbers: List[TrustedPhoneNumber]) -> TrustedPhoneNumber:
        """
        Ask the user to pick a trusted phone number until the answer is valid.

        Raises:
            InvalidPhoneNumberIndex: If there are no phone numbers, or the
                configured number of attempts is used up
        """
        if not phone_numbers:
            raise InvalidPhoneNumberIndex(1, 0, None)

        attempts = 0
        while True:
            self._sink.log("Trusted phone numbers:")
            for index, phone_number in enumerate(phone_numbers, start=1):
                self._sink.log(f"{index}: {phone_number.number_with_dial_code}")

            given = await ask(
                self._prompt.read_line,
                "Select a trusted phone number to receive a code via SMS: "
            )
            try:
                return self._phone_number_at(phone_numbers, given)
            except InvalidPhoneNumberIndex as e:
                attempts += 1
                self._sink.log(f"{legible_description(e)}\n")
                if self._max_attempts is not None and attempts >= self._max_attempts:
                    raise

    @staticmethod
    def _phone_number_at(
        phone_numbers: List[TrustedPhoneNumber],
        given: Optional[str]
    ) -> TrustedPhoneNumber:
        error = InvalidPhoneNumberIndex(1, len(phone_numbers), given)
        if given is None:
            raise error

        # Plain ASCII digits only
        text = given.strip()
        if not (text.isascii() and text.isdecimal()):
            raise error

        selection = int(text)
        if not 1 <= selection <= len(phone_numbers):
            raise error
        return phone_numbers[selection - 1]

    async def request_sms_code(self, context: SessionContext, phone_number: TrustedPhoneNumber) -> None:
        """
        Ask the provider to text a code to ``phone_number``.

        Raises:
            BadStatusCode: If the request is refused
        """
        response = await self._client.send(
            self._builder.request_security_code(context, phone_number)
        )
        ResponseHandler.ensure_success(response)

    async def prompt_for_sms_code(self, length: int, phone_number: TrustedPhoneNumber) -> SMSSecurityCode:
        code = await ask(
            self._prompt.read_line,
            f"Enter the {length} digit code sent to {phone_number.number_with_dial_code}: "
        )
        return SMSSecurityCode((code or '').strip(), phone_number.id)

    async def submit_code(self, context: SessionContext, code: SecurityCode) -> None:
        """
        Raises:
            IncorrectSecurityCode: On 401
            BadStatusCode: On any other non-2xx status
        """
        response = await self._client.send(self._builder.submit_security_code(context, code))
        if response.status == 401:
            raise IncorrectSecurityCode()
        ResponseHandler.ensure_success(response)

    async def establish_trust(self, context: SessionContext) -> None:
        """Trust this client, then confirm the session is usable."""
        await self._client.send(self._builder.trust(context))
        await self._validator.validate_session()

    def _report_rate_limits(self, options: AuthOptions) -> None:
        info = options.security_code
        if not info.rate_limited:
            return

        flags = []
        if info.too_many_codes_sent:
            flags.append("too many codes sent")
        if info.too_many_codes_validated:
            flags.append("too many codes validated")
        if info.security_code_locked:
            flags.append("security code locked")
        if info.security_code_cooldown:
            flags.append("security code cooldown")
        self._sink.log(f"Apple reports: {', '.join(flags)}. Verification may be refused.")
