"""Diffie-Hellman key agreement with non-interactive shared secret proofs.

A holder of private key ``x`` (public ``y = g^x``) who derived
``s = y_remote^x`` can convince a third party that ``s`` is correct without
revealing ``x``: the proof shows that ``log_g(y) == log_{y_remote}(s)``
(Chaum-Pedersen, made non-interactive with the Fiat-Shamir transform).
"""

from __future__ import annotations

import hmac
import logging
from typing import Any, Dict, Optional, Protocol

from .errors import InvalidPublicKey, VerificationFailed
from .group import Group
from .hashing import ChallengeHash
from .keys import PrivateKey, Proof, PublicKey, SharedSecret
from .randomness import RandomSource, SystemRandomSource

logger = logging.getLogger(__name__)


class KeyAgreement(Protocol):
    """Capability shared by every key agreement implementation.

    Values are opaque to callers; the ``dump_*`` and ``load_*`` methods give
    their canonical byte encodings.
    """

    name: str

    def generate(self, seed: Optional[bytes] = None) -> Any: ...

    def public_key(self, private_key: Any) -> Any: ...

    def shared_secret(self, private_key: Any, remote_public: Any) -> Any: ...

    def prove_shared_secret(self, private_key: Any, remote_public: Any) -> Any: ...

    def verify_shared_secret(
        self, prover_public: Any, remote_public: Any, shared_secret: Any, proof: Any
    ) -> Any: ...

    def describe(self) -> Dict[str, str]: ...

    def dump_private_key(self, private_key: Any) -> bytes: ...

    def load_private_key(self, data: bytes) -> Any: ...

    def dump_public_key(self, public_key: Any) -> bytes: ...

    def load_public_key(self, data: bytes) -> Any: ...

    def dump_shared_secret(self, shared_secret: Any) -> bytes: ...

    def load_shared_secret(self, data: bytes) -> Any: ...

    def dump_proof(self, proof: Any) -> bytes: ...

    def load_proof(self, data: bytes) -> Any: ...


class DiffieHellman:
    """Key agreement over a prime-order :class:`~dhproof.group.Group`."""

    name = "diffie-hellman"

    def __init__(
        self,
        group: Group,
        random: Optional[RandomSource] = None,
        challenge_hash: Optional[ChallengeHash] = None,
    ) -> None:
        self.group = group
        self.random = random or SystemRandomSource()
        self.challenge_hash = challenge_hash or ChallengeHash()

    def generate(self, seed: Optional[bytes] = None) -> PrivateKey:
        """Draw a private key, or derive it from ``seed`` when one is given."""

        order = self.group.order()
        if seed is None:
            scalar = self.random.uniform_scalar(order)
        else:
            scalar = self.random.derive_scalar(seed, order)
        logger.debug("Generated %s private key", "seeded" if seed is not None else "random")
        return PrivateKey(scalar)

    def public_key(self, private_key: PrivateKey) -> PublicKey:
        x = self._private_scalar(private_key)
        return PublicKey(self.group.exponentiate(self.group.generator(), x, secret=True))

    def shared_secret(self, private_key: PrivateKey, remote_public: PublicKey) -> SharedSecret:
        x = self._private_scalar(private_key)
        y_remote = self._public_element(remote_public)
        return SharedSecret(self.group.exponentiate(y_remote, x, secret=True))

    def prove_shared_secret(self, private_key: PrivateKey, remote_public: PublicKey) -> Proof:
        """Prove that ``shared_secret(private_key, remote_public)`` is correct.

        The challenge covers the generator, both public keys, the shared
        secret and both commitments, so the proof cannot be replayed against
        another counterpart. A fresh nonce is drawn on every call.
        """

        group = self.group
        g = group.generator()
        q = group.order()
        x = self._private_scalar(private_key)
        y_remote = self._public_element(remote_public)

        y = group.exponentiate(g, x, secret=True)
        s = group.exponentiate(y_remote, x, secret=True)

        k = self.random.uniform_scalar(q)
        t1 = group.exponentiate(g, k, secret=True)
        t2 = group.exponentiate(y_remote, k, secret=True)

        c = self.challenge_hash.challenge(group, (g, y, y_remote, s, t1, t2))
        r = (k - c * x) % q
        logger.debug("Produced shared secret proof")
        return Proof(t1=t1, t2=t2, challenge=c, response=r)

    def verify_shared_secret(
        self,
        prover_public: PublicKey,
        remote_public: PublicKey,
        shared_secret: SharedSecret,
        proof: Proof,
    ) -> SharedSecret:
        """Return ``shared_secret`` if ``proof`` shows it was derived correctly.

        Raises :class:`InvalidPublicKey` for a bad public key and
        :class:`VerificationFailed`, always with the same message, for any
        other defect.
        """

        y = self._public_element(prover_public)
        y_remote = self._public_element(remote_public)
        if not self._check_proof(y, y_remote, shared_secret, proof):
            logger.debug("Rejected shared secret proof")
            raise VerificationFailed()
        return shared_secret

    def _check_proof(self, y: int, y_remote: int, shared_secret: SharedSecret, proof: Proof) -> bool:
        group = self.group
        g = group.generator()
        q = group.order()

        if not isinstance(shared_secret, SharedSecret) or not isinstance(proof, Proof):
            return False
        s = shared_secret.element
        if not all(group.is_valid_element(value) for value in (s, proof.t1, proof.t2)):
            return False
        if not all(
            isinstance(value, int) and 0 <= value < q for value in (proof.challenge, proof.response)
        ):
            return False

        expected = self.challenge_hash.challenge(group, (g, y, y_remote, s, proof.t1, proof.t2))
        challenge_ok = hmac.compare_digest(
            group.encode_scalar(expected), group.encode_scalar(proof.challenge)
        )
        c, r = proof.challenge, proof.response
        first_ok = group.multiply(group.exponentiate(g, r), group.exponentiate(y, c)) == proof.t1
        second_ok = (
            group.multiply(group.exponentiate(y_remote, r), group.exponentiate(s, c)) == proof.t2
        )
        return challenge_ok & first_ok & second_ok

    def _private_scalar(self, private_key: PrivateKey) -> int:
        if not isinstance(private_key, PrivateKey) or not 0 < private_key.scalar < self.group.order():
            raise ValueError("Private key must lie in [1, q - 1]")
        return private_key.scalar

    def _public_element(self, public_key: PublicKey) -> int:
        if not isinstance(public_key, PublicKey) or not self.group.is_valid_element(public_key.element):
            raise InvalidPublicKey("Public key is not a member of the group")
        return public_key.element

    def describe(self) -> Dict[str, str]:
        params = getattr(self.group, "params", None)
        payload = {"implementation": self.name, "hash": self.challenge_hash.name}
        if params is not None:
            payload.update(params.to_dict())
        return payload

    def dump_private_key(self, private_key: PrivateKey) -> bytes:
        return PrivateKey(self._private_scalar(private_key)).to_bytes(self.group)

    def load_private_key(self, data: bytes) -> PrivateKey:
        return PrivateKey.from_bytes(self.group, data)

    def dump_public_key(self, public_key: PublicKey) -> bytes:
        return PublicKey(self._public_element(public_key)).to_bytes(self.group)

    def load_public_key(self, data: bytes) -> PublicKey:
        return PublicKey.from_bytes(self.group, data)

    def dump_shared_secret(self, shared_secret: SharedSecret) -> bytes:
        if not (
            isinstance(shared_secret, SharedSecret)
            and self.group.is_valid_element(shared_secret.element)
        ):
            raise ValueError("Shared secret is not a member of the group")
        return shared_secret.to_bytes(self.group)

    def load_shared_secret(self, data: bytes) -> SharedSecret:
        return SharedSecret.from_bytes(self.group, data)

    def dump_proof(self, proof: Proof) -> bytes:
        return proof.to_bytes(self.group)

    def load_proof(self, data: bytes) -> Proof:
        return Proof.from_bytes(self.group, data)


__all__ = ["DiffieHellman", "KeyAgreement"]
