"""OTPVerifier protocol — callers depend on this, not the concrete implementation."""

from typing import Protocol


class OTPVerifier(Protocol):
    def normalize_and_validate(self, otp: str) -> str: ...

    def identity_of(self, otp: str) -> str: ...

    async def validate(self, otp: str) -> dict[str, str]: ...
