"""Prime-order group abstraction and the multiplicative mod-p backend."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Dict, Protocol

from .constants import BLINDING_BITS, PRIMALITY_ROUNDS
from .errors import InvalidParameters

logger = logging.getLogger(__name__)

_SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)


def is_probable_prime(n: int, rounds: int = PRIMALITY_ROUNDS) -> bool:
    """Miller-Rabin test with random bases."""

    if n < 2:
        return False
    for prime in _SMALL_PRIMES:
        if n % prime == 0:
            return n == prime

    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(rounds):
        a = secrets.randbelow(n - 3) + 2
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


@dataclass(frozen=True)
class GroupParameters:
    """Modulus ``p``, prime subgroup order ``q`` and generator ``g``."""

    p: int
    q: int
    g: int

    def to_dict(self) -> Dict[str, str]:
        return {"p": hex(self.p), "q": hex(self.q), "g": hex(self.g)}

    @staticmethod
    def from_dict(data: Dict[str, str]) -> "GroupParameters":
        try:
            return GroupParameters(
                p=int(data["p"], 16),
                q=int(data["q"], 16),
                g=int(data["g"], 16),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidParameters("Group parameters must be hex encoded p, q and g") from exc


class Group(Protocol):
    """Cyclic group of known prime order used by the key agreement."""

    element_size: int
    scalar_size: int

    def order(self) -> int: ...

    def generator(self) -> int: ...

    def exponentiate(self, base: int, exponent: int, *, secret: bool = False) -> int: ...

    def multiply(self, left: int, right: int) -> int: ...

    def is_valid_element(self, element: int) -> bool: ...

    def encode_element(self, element: int) -> bytes: ...

    def decode_element(self, data: bytes) -> int: ...

    def encode_scalar(self, scalar: int) -> bytes: ...

    def decode_scalar(self, data: bytes) -> int: ...


class ModPGroup:
    """Order-``q`` subgroup of the multiplicative group modulo ``p``.

    The parameters are checked once here; a malformed setup raises
    :class:`InvalidParameters` and no group object is produced.
    """

    def __init__(self, params: GroupParameters, *, blinding_bits: int = BLINDING_BITS) -> None:
        _check_parameters(params)
        self.params = params
        self.blinding_bits = blinding_bits
        self.element_size = (params.p.bit_length() + 7) // 8
        self.scalar_size = (params.q.bit_length() + 7) // 8
        logger.info(
            "Initialised mod-p group (%d-bit modulus, %d-bit order)",
            params.p.bit_length(),
            params.q.bit_length(),
        )

    def order(self) -> int:
        return self.params.q

    def generator(self) -> int:
        return self.params.g

    def exponentiate(self, base: int, exponent: int, *, secret: bool = False) -> int:
        """Return ``base ** exponent mod p``.

        With ``secret`` set, a fresh random multiple of ``q`` is added to the
        exponent so the bits fed to ``pow`` change on every call. The base
        must then be a group member, which every caller validates first.
        """

        exponent %= self.params.q
        if secret:
            exponent += self.params.q * (secrets.randbits(self.blinding_bits) | 1)
        return pow(base, exponent, self.params.p)

    def multiply(self, left: int, right: int) -> int:
        return (left * right) % self.params.p

    def is_valid_element(self, element: int) -> bool:
        if not isinstance(element, int) or isinstance(element, bool):
            return False
        if not 1 < element < self.params.p:
            return False
        return pow(element, self.params.q, self.params.p) == 1

    def encode_element(self, element: int) -> bytes:
        return element.to_bytes(self.element_size, "big")

    def decode_element(self, data: bytes) -> int:
        if len(data) != self.element_size:
            raise ValueError("Element has the wrong length")
        element = int.from_bytes(data, "big")
        if not self.is_valid_element(element):
            raise ValueError("Element is not a member of the group")
        return element

    def encode_scalar(self, scalar: int) -> bytes:
        return scalar.to_bytes(self.scalar_size, "big")

    def decode_scalar(self, data: bytes) -> int:
        if len(data) != self.scalar_size:
            raise ValueError("Scalar has the wrong length")
        scalar = int.from_bytes(data, "big")
        if scalar >= self.params.q:
            raise ValueError("Scalar is not reduced modulo the group order")
        return scalar

    def __repr__(self) -> str:
        return f"ModPGroup(p_bits={self.params.p.bit_length()}, q_bits={self.params.q.bit_length()})"


def _check_parameters(params: GroupParameters) -> None:
    p, q, g = params.p, params.q, params.g
    if not is_probable_prime(p):
        raise InvalidParameters("Modulus p is not prime")
    if not is_probable_prime(q):
        raise InvalidParameters("Order q is not prime")
    if (p - 1) % q != 0:
        raise InvalidParameters("Order q does not divide p - 1")
    if not 1 < g < p:
        raise InvalidParameters("Generator lies outside of (1, p)")
    if pow(g, q, p) != 1:
        raise InvalidParameters("Generator does not have order q")


__all__ = ["Group", "GroupParameters", "ModPGroup", "is_probable_prime"]
