"""Sources of scalars for key generation and proof nonces."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Protocol

from .constants import SEED_TAG


class RandomSource(Protocol):
    """Supplies scalars in ``[1, upper - 1]``."""

    def uniform_scalar(self, upper: int) -> int: ...

    def derive_scalar(self, seed: bytes, upper: int) -> int: ...


def _prf_stream(seed: bytes, length: int) -> bytes:
    # HMAC-SHA256 in counter mode, keyed on the seed.
    blocks = []
    counter = 0
    while sum(len(block) for block in blocks) < length:
        message = SEED_TAG + counter.to_bytes(4, "big")
        blocks.append(hmac.new(seed, message, hashlib.sha256).digest())
        counter += 1
    return b"".join(blocks)[:length]


class SystemRandomSource:
    """Operating system randomness via :mod:`secrets`."""

    def uniform_scalar(self, upper: int) -> int:
        if upper < 2:
            raise ValueError("Upper bound must be at least 2")
        return secrets.randbelow(upper - 1) + 1

    def derive_scalar(self, seed: bytes, upper: int) -> int:
        """Deterministically map ``seed`` into ``[1, upper - 1]``.

        Sixty-four surplus bits are drawn before reduction so the bias of the
        modular reduction is negligible.
        """

        if upper < 2:
            raise ValueError("Upper bound must be at least 2")
        length = (upper.bit_length() + 64 + 7) // 8
        material = int.from_bytes(_prf_stream(bytes(seed), length), "big")
        return material % (upper - 1) + 1


__all__ = ["RandomSource", "SystemRandomSource"]
