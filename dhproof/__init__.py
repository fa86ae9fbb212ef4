"""Diffie-Hellman key agreement with zero-knowledge shared secret proofs."""

from .errors import DHProofError, InvalidParameters, InvalidPublicKey, VerificationFailed
from .fixture import FixtureKeyAgreement
from .group import Group, GroupParameters, ModPGroup
from .hashing import ChallengeHash
from .keyagreement import DiffieHellman, KeyAgreement
from .keys import PrivateKey, Proof, PublicKey, SharedSecret
from .randomness import RandomSource, SystemRandomSource

__all__ = [
    "ChallengeHash",
    "DHProofError",
    "DiffieHellman",
    "FixtureKeyAgreement",
    "Group",
    "GroupParameters",
    "InvalidParameters",
    "InvalidPublicKey",
    "KeyAgreement",
    "ModPGroup",
    "PrivateKey",
    "Proof",
    "PublicKey",
    "RandomSource",
    "SharedSecret",
    "SystemRandomSource",
    "VerificationFailed",
]
