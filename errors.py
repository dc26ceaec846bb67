"""
Yubikey error hierarchy.

YubikeyError is the base for all typed errors raised by the library. Every
failure a caller can observe is one distinct subclass with a stable
``error_code``; transport internals never surface as the top-level reason.

Two families:
- InvalidOTPError: raised synchronously by the normalizer, before any
  network activity.
- ValidationError: derived from the single winning server response, or from
  the absence of one.
"""

from __future__ import annotations

from typing import Any, Optional


class YubikeyError(Exception):
    """Base library error. All typed errors inherit from this."""

    error_code: str = "yubikey_error"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidOTPError(YubikeyError):
    error_code = "invalid_otp"


class InvalidLengthError(InvalidOTPError):
    error_code = "invalid_length"


class InvalidFormatError(InvalidOTPError):
    error_code = "invalid_format"


class ValidationError(YubikeyError):
    error_code = "validation_error"


class MismatchedOTPError(ValidationError):
    error_code = "mismatched_otp"


class MismatchedNonceError(ValidationError):
    error_code = "mismatched_nonce"


class RejectedStatusError(ValidationError):
    """The winning server answered with a status other than ``OK``."""

    error_code = "rejected_status"

    def __init__(self, status: str, *, details: Optional[Any] = None) -> None:
        super().__init__(f"validate: non-OK status received: {status}", details=details)
        self.status = status

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["status"] = self.status
        return payload


class NoResponseError(ValidationError):
    """No server produced a usable response (all failed or were replayed)."""

    error_code = "no_response"


class ValidationTimeoutError(NoResponseError):
    """The deadline elapsed before any server produced a usable response."""

    error_code = "validation_timeout"
