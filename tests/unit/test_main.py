"""Unit tests for the interactive CLI."""

import io

import httpx

from conftest import OTP, echo_body
from main import check_otp, parse_args, run


def _ok(request):
    return httpx.Response(200, text=echo_body(request))


class TestParseArgs:
    def test_client_id_flag(self):
        assert parse_args(["--client-id", "123"]).client_id == "123"

    def test_client_id_defaults_to_none(self):
        assert parse_args([]).client_id is None


class TestCheckOtp:
    async def test_invalid_length(self, make_client):
        client = make_client({"a.test": _ok})
        assert await check_otp(client, "short") == "Invalid OTP: otp: invalid length"
        assert make_client.requests == []

    async def test_invalid_format(self, make_client):
        client = make_client({"a.test": _ok})
        message = await check_otp(client, "this string is definitely not an otp")
        assert message.startswith("Invalid OTP: otp: invalid format")

    async def test_validated(self, make_client):
        client = make_client({"a.test": _ok})
        assert (
            await check_otp(client, OTP)
            == "Validated! (a.test, identity ccccccidlfvv)"
        )

    async def test_rejected(self, make_client):
        client = make_client(
            {"a.test": lambda r: httpx.Response(200, text=echo_body(r, status="BAD_OTP"))}
        )
        assert await check_otp(client, OTP) == (
            "Validation Error: validate: non-OK status received: BAD_OTP"
        )


class TestRun:
    async def test_reads_until_eof(self, make_client, monkeypatch, capsys):
        client = make_client({"a.test": _ok})
        monkeypatch.setattr("sys.stdin", io.StringIO(f"\n{OTP}\nnope\n"))
        await run(client)
        out = capsys.readouterr().out
        assert out.startswith("Ready!")
        assert "Validated! (a.test" in out
        assert "Invalid OTP: otp: invalid length" in out
