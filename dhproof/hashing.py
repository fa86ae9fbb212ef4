"""Fiat-Shamir challenge derivation."""

from __future__ import annotations

import hashlib
from typing import Iterable

from .constants import CHALLENGE_TAG, DEFAULT_HASH
from .group import Group


class ChallengeHash:
    """Hash an ordered sequence of group elements into a challenge scalar."""

    def __init__(self, name: str = DEFAULT_HASH, *, tag: bytes = CHALLENGE_TAG) -> None:
        hashlib.new(name)  # fail early on unknown digests
        self.name = name
        self.tag = tag

    def challenge(self, group: Group, elements: Iterable[int]) -> int:
        hasher = hashlib.new(self.name)
        hasher.update(len(self.tag).to_bytes(2, "big"))
        hasher.update(self.tag)
        for element in elements:
            hasher.update(group.encode_element(element))
        return int.from_bytes(hasher.digest(), "big") % group.order()


__all__ = ["ChallengeHash"]
