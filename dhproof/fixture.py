"""Insecure stand-in key agreement for exercising callers without key material.

FixtureKeyAgreement offers the same operations as
:class:`~dhproof.keyagreement.DiffieHellman` but has no cryptographic
hardness at all: a key is a random byte string that serves as both the
private and the public component, and its "proof" is the shared secret
itself. Use it only in tests and local fixtures.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Dict, Optional

from .constants import FIXTURE_KEY_SIZE, SEED_TAG
from .errors import InvalidPublicKey, VerificationFailed

logger = logging.getLogger(__name__)


class FixtureKeyAgreement:
    name = "fixture"

    def __init__(self, key_size: int = FIXTURE_KEY_SIZE) -> None:
        self.key_size = key_size
        logger.warning("Using the fixture key agreement; it provides no security")

    def generate(self, seed: Optional[bytes] = None) -> bytes:
        if seed is None:
            return secrets.token_bytes(self.key_size)
        return hashlib.shake_256(SEED_TAG + bytes(seed)).digest(self.key_size)

    def public_key(self, private_key: bytes) -> bytes:
        return self._key(private_key)

    def shared_secret(self, private_key: bytes, remote_public: bytes) -> bytes:
        first, second = sorted((self._key(private_key), self._key(remote_public)))
        return hashlib.sha256(first + second).digest()

    def prove_shared_secret(self, private_key: bytes, remote_public: bytes) -> bytes:
        return self.shared_secret(private_key, remote_public)

    def verify_shared_secret(
        self, prover_public: bytes, remote_public: bytes, shared_secret: bytes, proof: bytes
    ) -> bytes:
        expected = self.shared_secret(prover_public, remote_public)
        secret_ok = hmac.compare_digest(expected, bytes(shared_secret))
        proof_ok = hmac.compare_digest(expected, bytes(proof))
        if not (secret_ok and proof_ok):
            raise VerificationFailed()
        return expected

    def describe(self) -> Dict[str, str]:
        return {"implementation": self.name, "key_size": str(self.key_size)}

    def _key(self, value: bytes) -> bytes:
        if not isinstance(value, (bytes, bytearray)) or len(value) != self.key_size:
            raise InvalidPublicKey(f"Fixture keys are {self.key_size} bytes long")
        return bytes(value)

    def dump_private_key(self, private_key: bytes) -> bytes:
        return self._key(private_key)

    def load_private_key(self, data: bytes) -> bytes:
        return self._key(data)

    def dump_public_key(self, public_key: bytes) -> bytes:
        return self._key(public_key)

    def load_public_key(self, data: bytes) -> bytes:
        return self._key(data)

    def dump_shared_secret(self, shared_secret: bytes) -> bytes:
        return bytes(shared_secret)

    def load_shared_secret(self, data: bytes) -> bytes:
        return self._digest(data)

    def dump_proof(self, proof: bytes) -> bytes:
        return bytes(proof)

    def load_proof(self, data: bytes) -> bytes:
        return self._digest(data)

    @staticmethod
    def _digest(data: bytes) -> bytes:
        if len(data) != hashlib.sha256().digest_size:
            raise VerificationFailed()
        return bytes(data)


__all__ = ["FixtureKeyAgreement"]
