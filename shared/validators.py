"""
OTP validators — framework-agnostic, pure functions.

A Yubikey types its OTP as keystrokes in "modhex", a 16-letter alphabet
chosen to be stable across most keyboard layouts. Dvorak is the notable
exception: the same keys produce a different set of characters, so a
string made up entirely of Dvorak modhex is mapped back before validation.
"""

from __future__ import annotations

import re

from errors import InvalidFormatError, InvalidLengthError

OTP_MIN_LENGTH = 32
OTP_MAX_LENGTH = 48

# Encrypted payload length; everything before it is the device identity
OTP_PAYLOAD_LENGTH = 32

_DVORAK = "jxe.uidchtnbpygk"
_MODHEX = "cbdefghijklnrtuv"

_DVORAK_TO_MODHEX = str.maketrans(
    _DVORAK + _DVORAK.upper().replace(".", ""),
    _MODHEX + _MODHEX.upper().replace("E", ""),
)

_MATCH_DVORAK = re.compile(r"[jxe.uidchtnbpygkJXEUIDCHTNBPYGK]{32,48}")
_MATCH_MODHEX = re.compile(r"[cbdefghijklnrtuvCBDEFGHIJKLNRTUV]{32,48}")


def normalize_otp(otp: str) -> str:
    """Return *otp* in canonical modhex, or raise.

    Canonical input is returned unchanged. Otherwise a string made up
    entirely of Dvorak modhex is translated character by character; mixed
    strings are rejected, never partially translated.

    Raises:
        InvalidLengthError: length outside [32, 48].
        InvalidFormatError: not modhex after the optional translation.
    """
    if not OTP_MIN_LENGTH <= len(otp) <= OTP_MAX_LENGTH:
        raise InvalidLengthError("otp: invalid length", details={"length": len(otp)})

    if _MATCH_MODHEX.fullmatch(otp):
        return otp

    # Twelve letters are shared by both alphabets, so canonical wins above
    if _MATCH_DVORAK.fullmatch(otp):
        return otp.translate(_DVORAK_TO_MODHEX)

    raise InvalidFormatError("otp: invalid format or contains invalid characters")


def otp_identity(otp: str) -> str:
    """Return the static device-identity prefix of *otp*.

    Best effort: anything too short to hold a prefix yields ``""``.
    """
    if len(otp) <= OTP_PAYLOAD_LENGTH:
        return ""
    return otp[:-OTP_PAYLOAD_LENGTH]
