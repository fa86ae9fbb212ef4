"""JSON-backed directory of party public keys."""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .keyagreement import KeyAgreement


def party_id_for(encoded_public_key: bytes) -> str:
    """Derive a stable party identifier from the encoded public key."""

    return hashlib.sha256(encoded_public_key).hexdigest()


@dataclass
class PartyRecord:
    """Stored public key metadata."""

    party_id: str
    public_key: str
    alias: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        payload: Dict[str, str] = {
            "party_id": self.party_id,
            "public_key": self.public_key,
        }
        if self.alias is not None:
            payload["alias"] = self.alias
        return payload

    @staticmethod
    def from_dict(data: Dict[str, str]) -> "PartyRecord":
        public_key = data["public_key"]
        party_id = data.get("party_id") or party_id_for(bytes.fromhex(public_key))
        return PartyRecord(party_id=party_id, public_key=public_key, alias=data.get("alias"))


class PublicKeyDirectory:
    """Persist public keys under their party id and optional alias."""

    def __init__(self, path: str, key_agreement: KeyAgreement) -> None:
        self.path = path
        self.key_agreement = key_agreement
        self._ensure_file()

    def _ensure_file(self) -> None:
        if not os.path.exists(self.path):
            self._save({"parties": []})

    def _load(self) -> Dict[str, list]:
        with open(self.path, "r", encoding="utf-8") as handle:
            return json.load(handle)

    def _save(self, payload: Dict[str, list]) -> None:
        with open(self.path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)

    def get_by_alias(self, alias: str) -> Optional[PartyRecord]:
        for raw_party in self._load().get("parties", []):
            if raw_party.get("alias") == alias:
                return PartyRecord.from_dict(raw_party)
        return None

    def get_by_party_id(self, party_id: str) -> Optional[PartyRecord]:
        for raw_party in self._load().get("parties", []):
            record = PartyRecord.from_dict(raw_party)
            if record.party_id == party_id:
                return record
        return None

    def resolve(self, identifier: str) -> Optional[PartyRecord]:
        """Look a party up by party id first, then by alias."""

        return self.get_by_party_id(identifier) or self.get_by_alias(identifier)

    def public_key(self, record: PartyRecord) -> Any:
        return self.key_agreement.load_public_key(bytes.fromhex(record.public_key))

    def add_party(self, encoded_public_key: bytes, alias: Optional[str] = None) -> PartyRecord:
        # Raises InvalidPublicKey before anything is written.
        public_key = self.key_agreement.load_public_key(encoded_public_key)
        encoded = self.key_agreement.dump_public_key(public_key)

        payload = self._load()
        parties = payload.setdefault("parties", [])
        if alias is not None and any(raw_party.get("alias") == alias for raw_party in parties):
            raise ValueError(f"Alias '{alias}' already exists")

        party_id = party_id_for(encoded)
        if any(PartyRecord.from_dict(raw_party).party_id == party_id for raw_party in parties):
            raise ValueError("Public key already registered")

        record = PartyRecord(party_id=party_id, public_key=encoded.hex(), alias=alias)
        parties.append(record.to_dict())
        self._save(payload)
        return record


__all__ = ["PartyRecord", "PublicKeyDirectory", "party_id_for"]
