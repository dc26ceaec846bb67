"""Decoder for the verification service's ``key=value`` reply bodies."""

from __future__ import annotations


def parse_response(body: str) -> dict[str, str]:
    """Decode a line-oriented ``key=value`` body into a dict.

    The protocol terminates lines with ``\\r\\n``; bare ``\\n`` is accepted too.
    Lines without ``=`` are skipped and later duplicates overwrite earlier ones.

    >>> parse_response("otp=abc\\r\\nstatus=OK\\r\\n\\r\\n")
    {'otp': 'abc', 'status': 'OK'}
    """
    data: dict[str, str] = {}
    for line in body.split("\n"):
        key, sep, value = line.partition("=")
        if not sep:
            continue
        data[key] = value.rstrip("\r\n")
    return data
