"""Yubico cloud implementation of OTPVerifier.

Every validation fans out one ``wsapi/2.0/verify`` request per configured
server and accepts the first usable answer:

- transport failures drop that server out of the race silently
- ``REPLAYED_REQUEST`` means a sibling server already consumed the OTP, so
  that answer is dropped and the others keep racing
- the first remaining answer fills a single-slot future; later answers are
  no-ops and in-flight requests are cancelled

The winner is then reconciled against the request (otp, nonce, status).
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Optional
from urllib.parse import urlencode

import httpx

from config import DEFAULT_SERVERS, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from errors import (
    MismatchedNonceError,
    MismatchedOTPError,
    NoResponseError,
    RejectedStatusError,
    ValidationError,
    ValidationTimeoutError,
)
from infrastructure.http_client import HttpClient
from infrastructure.yubico.response import parse_response
from shared.generators import NonceGenerator
from shared.logging import get_logger
from shared.validators import normalize_otp, otp_identity

log = get_logger(__name__)

_VERIFY_PATH = "/wsapi/2.0/verify"

STATUS_OK = "OK"
STATUS_REPLAYED_REQUEST = "REPLAYED_REQUEST"

# Default for validate(timeout=...): fall back to the client's deadline
_CLIENT_TIMEOUT: Any = object()

# Added to the winning response by the client, never sent by servers
SERVER_FIELD = "_server"


class YubicoClient:
    def __init__(
        self,
        client_id: str,
        servers: Optional[Iterable[str]] = None,
        *,
        http_client: Optional[HttpClient] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        nonce_generator: Optional[NonceGenerator] = None,
    ) -> None:
        self.client_id = client_id
        self.servers = (
            tuple(servers) if servers is not None else tuple(DEFAULT_SERVERS)
        )
        if not self.servers:
            raise ValueError("at least one verification server is required")
        self.timeout = timeout
        self.user_agent = user_agent
        self._owns_http = http_client is None
        self._http = http_client or HttpClient(
            timeout=timeout, headers={"User-Agent": user_agent}
        )
        self._nonce = nonce_generator or NonceGenerator()

    def normalize_and_validate(self, otp: str) -> str:
        return normalize_otp(otp)

    def identity_of(self, otp: str) -> str:
        return otp_identity(otp)

    def verify_url(self, server: str, otp: str, nonce: str) -> str:
        query = urlencode(
            {"id": self.client_id, "otp": otp, "nonce": nonce, "sl": "secure"}
        )
        return f"https://{server}{_VERIFY_PATH}?{query}"

    async def validate(
        self, otp: str, *, timeout: Optional[float] = _CLIENT_TIMEOUT
    ) -> dict[str, str]:
        """Validate an already-normalized *otp* against every configured server.

        Args:
            otp: Canonical OTP, as returned by normalize_and_validate().
            timeout: Overrides the client's deadline for this call; ``None``
                waits for as long as requests are in flight.

        Returns:
            The winning server response, tagged with the server that sent it.

        Raises:
            MismatchedOTPError / MismatchedNonceError: the winner answered
                for a different request.
            RejectedStatusError: the winner's status is not ``OK``.
            NoResponseError: every server failed or answered REPLAYED_REQUEST.
            ValidationTimeoutError: the deadline passed with no winner.
        """
        nonce = self._nonce()
        deadline = self.timeout if timeout is _CLIENT_TIMEOUT else timeout
        bound = log.bind(identity=otp_identity(otp))

        winner: asyncio.Future[dict[str, str]] = (
            asyncio.get_running_loop().create_future()
        )
        tasks = [
            asyncio.create_task(self._query(server, otp, nonce, winner))
            for server in self.servers
        ]
        finished = asyncio.gather(*tasks, return_exceptions=True)
        try:
            done, _ = await asyncio.wait(
                {winner, finished},
                timeout=deadline,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if not winner.done():
            if finished in done:
                bound.warning("yubico_no_response", servers=len(self.servers))
                raise NoResponseError(
                    "validate: no usable response from any server",
                    details={"servers": list(self.servers)},
                )
            bound.warning("yubico_validation_timeout", timeout=deadline)
            raise ValidationTimeoutError(
                "validate: timed out waiting for a verification server",
                details={"timeout": deadline},
            )

        response = winner.result()
        bound.info(
            "yubico_race_won",
            server=response[SERVER_FIELD],
            status=response.get("status"),
        )
        try:
            self._reconcile(response, otp, nonce)
        except ValidationError as e:
            bound.warning(
                "yubico_validation_failed",
                server=response[SERVER_FIELD],
                code=e.error_code,
            )
            raise
        return response

    async def _query(
        self,
        server: str,
        otp: str,
        nonce: str,
        winner: asyncio.Future[dict[str, str]],
    ) -> None:
        try:
            response = await self._http.get(
                self.verify_url(server, otp, nonce),
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            body = response.text
        except httpx.HTTPError as e:
            # The exception text embeds the request URL, which carries the OTP
            log.warning(
                "yubico_request_failed",
                server=server,
                error_type=type(e).__name__,
                status_code=(
                    e.response.status_code
                    if isinstance(e, httpx.HTTPStatusError)
                    else None
                ),
            )
            return

        data = parse_response(body)
        if data.get("status") == STATUS_REPLAYED_REQUEST:
            log.debug("yubico_response_replayed", server=server)
            return

        data[SERVER_FIELD] = server
        if not winner.done():
            winner.set_result(data)

    @staticmethod
    def _reconcile(response: dict[str, str], otp: str, nonce: str) -> None:
        if response.get("otp", "") != otp:
            raise MismatchedOTPError("validate: mismatched otp")
        if response.get("nonce", "") != nonce:
            raise MismatchedNonceError("validate: mismatched nonce")
        status = response.get("status", "")
        if status != STATUS_OK:
            raise RejectedStatusError(status)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "YubicoClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
