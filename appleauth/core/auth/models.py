"""
Authentication data models.

Value objects describing one login attempt: the credentials, the session
context threaded through the second-factor calls, the server-reported
auth options and the classified sign-in outcome.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Credentials:
    """Account name and password for a single login attempt."""
    account_name: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class SessionContext:
    """
    Attempt-scoped state required by every call after sign-in.

    Attributes:
        service_key: Widget key issued by the provisioning endpoint
        session_id: Value of the ``X-Apple-ID-Session-Id`` response header
        scnt: Value of the ``scnt`` response header
    """
    service_key: str
    session_id: str
    scnt: str


@dataclass(frozen=True)
class ServiceError:
    """A (code, message) pair reported by the identity provider."""
    code: str
    message: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceError':
        return cls(code=_require_str(data, 'code'), message=_require_str(data, 'message'))

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class TrustedPhoneNumber:
    """A phone number that can receive SMS security codes."""
    id: int
    number_with_dial_code: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrustedPhoneNumber':
        return cls(
            id=_require_int(data, 'id'),
            number_with_dial_code=_require_str(data, 'numberWithDialCode')
        )


@dataclass(frozen=True)
class TrustedDevice:
    """A device registered for the legacy two-step flow."""
    id: str
    name: str
    model_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrustedDevice':
        return cls(
            id=_require_str(data, 'id'),
            name=_require_str(data, 'name'),
            model_name=_require_str(data, 'modelName')
        )


@dataclass(frozen=True)
class SecurityCodeInfo:
    """Security code requirements and rate-limit flags."""
    length: int
    too_many_codes_sent: bool = False
    too_many_codes_validated: bool = False
    security_code_locked: bool = False
    security_code_cooldown: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SecurityCodeInfo':
        return cls(
            length=_require_int(data, 'length'),
            too_many_codes_sent=_require_bool(data, 'tooManyCodesSent'),
            too_many_codes_validated=_require_bool(data, 'tooManyCodesValidated'),
            security_code_locked=_require_bool(data, 'securityCodeLocked'),
            security_code_cooldown=_require_bool(data, 'securityCodeCooldown')
        )

    @property
    def rate_limited(self) -> bool:
        """True when any of the provider's throttling flags is set."""
        return (
            self.too_many_codes_sent or
            self.too_many_codes_validated or
            self.security_code_locked or
            self.security_code_cooldown
        )


class AuthKind(Enum):
    """Second-factor flavour reported by the auth options endpoint."""
    TWO_STEP = 'twoStep'
    TWO_FACTOR = 'twoFactor'
    UNKNOWN = 'unknown'


def classify_auth_kind(has_trusted_devices: bool, has_trusted_phone_numbers: bool) -> AuthKind:
    """Device list wins over phone list; neither means unknown."""
    if has_trusted_devices:
        return AuthKind.TWO_STEP
    if has_trusted_phone_numbers:
        return AuthKind.TWO_FACTOR
    return AuthKind.UNKNOWN


@dataclass(frozen=True)
class AuthOptions:
    """
    Second-factor metadata for the current attempt.

    ``kind`` is derived once from the presence of the device and phone
    lists when the object is built. An empty list still counts as present.
    """
    security_code: SecurityCodeInfo
    trusted_phone_numbers: Optional[Tuple[TrustedPhoneNumber, ...]] = None
    trusted_devices: Optional[Tuple[TrustedDevice, ...]] = None
    no_trusted_devices: Optional[bool] = None
    service_errors: Tuple[ServiceError, ...] = ()
    kind: AuthKind = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'kind', classify_auth_kind(
            self.trusted_devices is not None,
            self.trusted_phone_numbers is not None
        ))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuthOptions':
        """
        Build from the decoded auth options body.

        Raises:
            ValueError: If a required field is missing or mistyped
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        if 'securityCode' not in data or not isinstance(data['securityCode'], dict):
            raise ValueError("Missing object field 'securityCode'")

        phones = _optional_list(data, 'trustedPhoneNumbers')
        devices = _optional_list(data, 'trustedDevices')
        errors = _optional_list(data, 'serviceErrors') or []

        no_trusted_devices = data.get('noTrustedDevices')
        if no_trusted_devices is not None and not isinstance(no_trusted_devices, bool):
            raise ValueError("Field 'noTrustedDevices' must be a boolean")

        return cls(
            security_code=SecurityCodeInfo.from_dict(data['securityCode']),
            trusted_phone_numbers=(
                tuple(TrustedPhoneNumber.from_dict(p) for p in phones)
                if phones is not None else None
            ),
            trusted_devices=(
                tuple(TrustedDevice.from_dict(d) for d in devices)
                if devices is not None else None
            ),
            no_trusted_devices=no_trusted_devices,
            service_errors=tuple(ServiceError.from_dict(e) for e in errors)
        )

    @property
    def can_fall_back_to_sms(self) -> bool:
        # Seen once with noTrustedDevices missing on an account without
        # trusted devices; treated as False here.
        return self.no_trusted_devices is True

    @property
    def sms_automatically_sent(self) -> bool:
        phones = self.trusted_phone_numbers
        return phones is not None and len(phones) == 1 and self.can_fall_back_to_sms

    @property
    def phone_numbers(self) -> List[TrustedPhoneNumber]:
        return list(self.trusted_phone_numbers or ())


@dataclass(frozen=True)
class DeviceSecurityCode:
    """Code displayed on a trusted device."""
    code: str

    path_component = 'trusteddevice'

    def to_json(self) -> Dict[str, Any]:
        return {'securityCode': {'code': self.code}}


@dataclass(frozen=True)
class SMSSecurityCode:
    """Code delivered by SMS to a specific trusted phone number."""
    code: str
    phone_number_id: int

    path_component = 'phone'

    def to_json(self) -> Dict[str, Any]:
        return {
            'securityCode': {'code': self.code},
            'phoneNumber': {'id': self.phone_number_id},
            'mode': 'sms'
        }


SecurityCode = Union[DeviceSecurityCode, SMSSecurityCode]


@dataclass(frozen=True)
class SignInBody:
    """Structured sign-in response body."""
    auth_type: Optional[str] = None
    service_errors: Optional[Tuple[ServiceError, ...]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SignInBody':
        """
        Raises:
            ValueError: If a present field is mistyped
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        auth_type = data.get('authType')
        if auth_type is not None and not isinstance(auth_type, str):
            raise ValueError("Field 'authType' must be a string")

        errors = _optional_list(data, 'serviceErrors')
        return cls(
            auth_type=auth_type,
            service_errors=(
                tuple(ServiceError.from_dict(e) for e in errors)
                if errors is not None else None
            )
        )

    def joined_errors(self) -> Optional[str]:
        """Service errors joined for display, None when there are none."""
        if self.service_errors is None:
            return None
        return ', '.join(str(error) for error in self.service_errors)


@dataclass(frozen=True)
class ServiceKeyBody:
    """Body of the service-key provisioning endpoint."""
    auth_service_key: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceKeyBody':
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        return cls(auth_service_key=_require_str(data, 'authServiceKey'))


# Classified sign-in responses

@dataclass(frozen=True)
class SignInAccepted:
    """HTTP 200: credentials accepted without a second factor."""


@dataclass(frozen=True)
class SignInRejected:
    """HTTP 401: wrong account name or password."""
    account_name: str


@dataclass(frozen=True)
class SecondFactorRequired:
    """HTTP 409: a two-step or two-factor challenge follows."""
    context: SessionContext
    raw_body: bytes = b''


@dataclass(frozen=True)
class AcknowledgementRequiredResponse:
    """HTTP 412 with a recognized authType."""
    auth_type: str


@dataclass(frozen=True)
class UnrecognizedSignInResponse:
    """Any other sign-in outcome."""
    status_code: int
    message: Optional[str] = None


SignInResponse = Union[
    SignInAccepted,
    SignInRejected,
    SecondFactorRequired,
    AcknowledgementRequiredResponse,
    UnrecognizedSignInResponse,
]


class LoginStatus(Enum):
    """How a login attempt ended."""
    AUTHENTICATED = 'authenticated'
    INCOMPLETE = 'incomplete'


@dataclass(frozen=True)
class LoginResult:
    """
    Result of a login attempt that did not raise.

    ``INCOMPLETE`` means the account uses a second-factor flavour this
    client does not drive (legacy two-step or an unrecognized shape) and
    no session was established. ``account_name`` is None when a stored
    session was reused without knowing which account it belongs to.
    """
    status: LoginStatus
    account_name: Optional[str]
    auth_kind: Optional[AuthKind] = None

    @property
    def authenticated(self) -> bool:
        return self.status is LoginStatus.AUTHENTICATED


# Field helpers

def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Missing string field '{key}'")
    return value


def _require_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Missing integer field '{key}'")
    return value


def _require_bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValueError(f"Missing boolean field '{key}'")
    return value


def _optional_list(data: Dict[str, Any], key: str) -> Optional[List[Any]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"Field '{key}' must be a list")
    return value
