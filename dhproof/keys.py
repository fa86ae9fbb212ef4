"""Key, shared secret and proof values with their canonical encodings.

Elements are written big-endian at the fixed width of the modulus and
scalars at the fixed width of the group order. A proof is laid out as
``t1 || t2 || challenge || response``. Decoding checks length, range and
group membership before a value is handed to any arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .errors import InvalidPublicKey, VerificationFailed
from .group import Group


@dataclass(frozen=True)
class PrivateKey:
    """Secret exponent held by a single party. Never sent to a peer."""

    scalar: int = field(repr=False)

    def to_bytes(self, group: Group) -> bytes:
        return group.encode_scalar(self.scalar)

    @staticmethod
    def from_bytes(group: Group, data: bytes) -> "PrivateKey":
        scalar = group.decode_scalar(data)
        if scalar == 0:
            raise ValueError("Private key must lie in [1, q - 1]")
        return PrivateKey(scalar)


@dataclass(frozen=True)
class PublicKey:
    element: int

    def to_bytes(self, group: Group) -> bytes:
        return group.encode_element(self.element)

    @staticmethod
    def from_bytes(group: Group, data: bytes) -> "PublicKey":
        try:
            return PublicKey(group.decode_element(data))
        except ValueError as exc:
            raise InvalidPublicKey(str(exc)) from exc

    def to_dict(self) -> Dict[str, str]:
        return {"public_key": hex(self.element)}


@dataclass(frozen=True)
class SharedSecret:
    element: int = field(repr=False)

    def to_bytes(self, group: Group) -> bytes:
        return group.encode_element(self.element)

    @staticmethod
    def from_bytes(group: Group, data: bytes) -> "SharedSecret":
        try:
            return SharedSecret(group.decode_element(data))
        except ValueError:
            raise VerificationFailed() from None


@dataclass(frozen=True)
class Proof:
    """Chaum-Pedersen transcript ``(t1, t2, c, r)``."""

    t1: int
    t2: int
    challenge: int
    response: int

    def to_bytes(self, group: Group) -> bytes:
        return b"".join(
            (
                group.encode_element(self.t1),
                group.encode_element(self.t2),
                group.encode_scalar(self.challenge),
                group.encode_scalar(self.response),
            )
        )

    @staticmethod
    def from_bytes(group: Group, data: bytes) -> "Proof":
        element, scalar = group.element_size, group.scalar_size
        if len(data) != 2 * element + 2 * scalar:
            raise VerificationFailed()
        try:
            return Proof(
                t1=group.decode_element(data[:element]),
                t2=group.decode_element(data[element : 2 * element]),
                challenge=group.decode_scalar(data[2 * element : 2 * element + scalar]),
                response=group.decode_scalar(data[2 * element + scalar :]),
            )
        except ValueError:
            raise VerificationFailed() from None

    def to_dict(self) -> Dict[str, str]:
        return {
            "t1": hex(self.t1),
            "t2": hex(self.t2),
            "challenge": hex(self.challenge),
            "response": hex(self.response),
        }

    @staticmethod
    def from_dict(data: Dict[str, str]) -> "Proof":
        try:
            return Proof(
                t1=int(data["t1"], 16),
                t2=int(data["t2"], 16),
                challenge=int(data["challenge"], 16),
                response=int(data["response"], 16),
            )
        except (KeyError, TypeError, ValueError):
            raise VerificationFailed() from None


__all__ = ["PrivateKey", "Proof", "PublicKey", "SharedSecret"]
