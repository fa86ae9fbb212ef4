"""Exceptions raised by the key agreement layer."""

from __future__ import annotations


class DHProofError(Exception):
    """Base class for every error raised by :mod:`dhproof`."""


class InvalidParameters(DHProofError):
    """The group parameters are malformed."""


class InvalidPublicKey(DHProofError, ValueError):
    """A public value is out of range or not a member of the group."""


class VerificationFailed(DHProofError):
    """A shared secret proof was rejected."""

    def __init__(self) -> None:
        super().__init__("Shared secret proof rejected")


__all__ = ["DHProofError", "InvalidParameters", "InvalidPublicKey", "VerificationFailed"]
