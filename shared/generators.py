"""
Random token generators.

Nonces only bind one verification response to one request within a single
round trip, so the system PRNG is sufficient. Each NonceGenerator owns its
``random.Random``, seeded once from OS entropy, rather than reseeding a
process-wide generator per call.
"""

from __future__ import annotations

import random
import secrets
import string
from typing import Optional

NONCE_LENGTH = 40
NONCE_ALPHABET = string.digits + string.ascii_lowercase


class NonceGenerator:
    """Produces 40-character ``[0-9a-z]`` nonces from an owned random source."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random(secrets.randbits(128))

    def __call__(self) -> str:
        return generate_nonce(self._rng)


def generate_nonce(rng: Optional[random.Random] = None) -> str:
    """Generate a nonce of NONCE_LENGTH characters drawn uniformly from ``[0-9a-z]``.

    Args:
        rng: Random source to draw from. Defaults to the module-level PRNG.
    """
    rng = rng or random
    return "".join(rng.choice(NONCE_ALPHABET) for _ in range(NONCE_LENGTH))
