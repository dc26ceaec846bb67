#!/usr/bin/env python3
"""
Interactive Yubikey OTP checker.

Reads OTPs from stdin (touch the key, or paste), normalizes them and
validates each one against the Yubico cloud. The client id comes from
``--client-id`` or the YUBICO_CLIENT_ID environment variable.
"""

import argparse
import asyncio
import sys

from dependencies import build_yubico_client, get_settings
from errors import InvalidOTPError, ValidationError
from infrastructure.yubico.client import SERVER_FIELD, YubicoClient
from infrastructure.yubico.protocol import OTPVerifier
from shared.logging import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--client-id",
        dest="client_id",
        default=None,
        help="Yubico API client id (defaults to YUBICO_CLIENT_ID)",
    )
    return parser.parse_args(argv)


async def check_otp(client: OTPVerifier, text: str) -> str:
    """Validate one line of input and return the message to show the user."""
    try:
        otp = client.normalize_and_validate(text)
    except InvalidOTPError as e:
        return f"Invalid OTP: {e.message}"

    try:
        response = await client.validate(otp)
    except ValidationError as e:
        return f"Validation Error: {e.message}"

    return f"Validated! ({response[SERVER_FIELD]}, identity {client.identity_of(otp)})"


async def run(client: YubicoClient) -> None:
    print("Ready!")
    async with client:
        while True:
            print("\nEnter OTP: ", end="", flush=True)
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            text = line.strip()
            if not text:
                continue
            print(await check_otp(client, text))


def main(argv=None):
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.logging)

    client = build_yubico_client(settings.yubico, client_id=args.client_id)
    try:
        asyncio.run(run(client))
    except KeyboardInterrupt:
        print("\nBye")


if __name__ == "__main__":
    main()
