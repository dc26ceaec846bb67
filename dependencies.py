"""
Dependency providers.

Bridges AppSettings to the library objects so entry points never wire
YubicoClient by hand.
"""

from __future__ import annotations

from typing import Optional

from config import AppSettings, YubicoSettings
from infrastructure.yubico.client import YubicoClient


def get_settings() -> AppSettings:
    """Load AppSettings from the environment (and .env file)."""
    return AppSettings()


def build_yubico_client(
    settings: YubicoSettings, client_id: Optional[str] = None
) -> YubicoClient:
    """Build a YubicoClient that owns its HTTP transport.

    Args:
        settings: Yubico sub-config.
        client_id: Overrides ``settings.client_id`` (e.g. from a CLI flag).
    """
    return YubicoClient(
        client_id if client_id is not None else settings.client_id,
        settings.servers,
        timeout=settings.timeout_seconds,
        user_agent=settings.user_agent,
    )
