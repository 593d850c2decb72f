"""
Custom exceptions for Apple ID authentication.

This module defines the error taxonomy of the sign-in flow. Every error
carries a one-line human readable message and a qualified tag that can
be quoted in support requests.
"""
from typing import Optional


class AppleAuthError(Exception):
    """Base exception for all appleauth errors."""
    
    tag_prefix = 'AppleAuthError'
    
    def __init__(self, message: str) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Human readable error message
        """
        self.message = message
        super().__init__(message)
    
    @property
    def tag(self) -> str:
        """Qualified diagnostic tag, e.g. ``AppleAuthError.InvalidSession``."""
        return f"{self.tag_prefix}.{type(self).__name__}"
    
    def legible_message(self, include_tag: bool = False) -> str:
        """One-line message, optionally followed by the diagnostic tag."""
        if include_tag:
            return f"{self.message} ({self.tag})"
        return self.message


class InvalidSession(AppleAuthError):
    """Raised when the session status check does not report a provider."""
    
    def __init__(self) -> None:
        super().__init__("Invalid session.")


class InvalidCredentials(AppleAuthError):
    """Raised when sign-in is rejected with HTTP 401."""
    
    def __init__(self, account_name: str) -> None:
        self.account_name = account_name
        super().__init__(
            "Invalid username and password combination. "
            f"Attempted to sign in with username {account_name}."
        )


class InvalidPhoneNumberIndex(AppleAuthError):
    """Raised when the trusted phone number selection is not usable."""
    
    def __init__(self, min: int, max: int, given: Optional[str]) -> None:
        self.min = min
        self.max = max
        self.given = given
        super().__init__(
            "Not a valid phone number index. "
            f"Expecting a whole number between {min}-{max}, "
            f"but was given {given if given is not None else 'nothing'}."
        )


class IncorrectSecurityCode(AppleAuthError):
    """Raised when a submitted security code is rejected with HTTP 401."""
    
    def __init__(self) -> None:
        super().__init__("Incorrect security code.")


class UnexpectedSignInResponse(AppleAuthError):
    """Raised for any sign-in outcome that is not classified otherwise."""
    
    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.service_message = message
        super().__init__(
            "Received an unexpected sign-in response. "
            f"Status code: {status_code}. Message: {message or ''}."
        )


class AcknowledgementRequired(AppleAuthError):
    """Raised when the account must accept the Apple ID & Privacy agreement."""
    
    def __init__(self) -> None:
        super().__init__(
            "You must sign in to https://appstoreconnect.apple.com and "
            "acknowledge the Apple ID & Privacy agreement."
        )


def legible_description(error: BaseException, include_tag: bool = False) -> str:
    """
    Render any exception as a single line for the user.
    
    Library errors use their own message. Foreign exceptions fall back to
    ``str(error)`` followed by the qualified type name, or the type name
    alone when the exception has no message.
    
    Args:
        error: Exception to describe
        include_tag: Append the diagnostic tag for library errors
        
    Returns:
        Human readable description
    """
    if isinstance(error, AppleAuthError):
        return error.legible_message(include_tag)
    
    error_type = type(error)
    qualified = f"{error_type.__module__}.{error_type.__qualname__}"
    if error_type.__module__ == 'builtins':
        qualified = error_type.__qualname__
    
    text = str(error)
    if not text:
        return qualified
    return f"{text} ({qualified})"
