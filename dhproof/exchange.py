"""High level helpers tying the key agreement to the public-key directory."""

from __future__ import annotations

from typing import Dict, Optional

from .directory import PartyRecord, PublicKeyDirectory, party_id_for
from .errors import VerificationFailed


def register_party(
    directory: PublicKeyDirectory,
    alias: Optional[str] = None,
    seed: Optional[bytes] = None,
) -> Dict[str, Optional[str]]:
    """Generate a key pair and publish its public half.

    The private key is returned to the caller only and never stored.
    """

    key_agreement = directory.key_agreement
    private_key = key_agreement.generate(seed)
    public_key = key_agreement.public_key(private_key)
    record = directory.add_party(key_agreement.dump_public_key(public_key), alias)
    return {
        "party_id": record.party_id,
        "alias": record.alias,
        "public_key": record.public_key,
        "private_key": key_agreement.dump_private_key(private_key).hex(),
    }


def _resolve_record(directory: PublicKeyDirectory, identifier: str) -> PartyRecord:
    record = directory.resolve(identifier)
    if record is None:
        raise ValueError(f"Unknown party '{identifier}'")
    return record


def derive_shared_secret(directory: PublicKeyDirectory, private_key_hex: str, remote: str) -> Dict[str, str]:
    key_agreement = directory.key_agreement
    private_key = key_agreement.load_private_key(bytes.fromhex(private_key_hex))
    remote_record = _resolve_record(directory, remote)
    shared_secret = key_agreement.shared_secret(private_key, directory.public_key(remote_record))
    return {
        "remote": remote_record.party_id,
        "shared_secret": key_agreement.dump_shared_secret(shared_secret).hex(),
    }


def attest_shared_secret(
    directory: PublicKeyDirectory,
    private_key_hex: str,
    remote: str,
) -> Dict[str, str]:
    """Derive the shared secret with ``remote`` and prove it to a third party."""

    key_agreement = directory.key_agreement
    private_key = key_agreement.load_private_key(bytes.fromhex(private_key_hex))
    encoded_public = key_agreement.dump_public_key(key_agreement.public_key(private_key))
    prover = _resolve_record(directory, party_id_for(encoded_public))
    remote_record = _resolve_record(directory, remote)
    remote_public = directory.public_key(remote_record)

    shared_secret = key_agreement.shared_secret(private_key, remote_public)
    proof = key_agreement.prove_shared_secret(private_key, remote_public)
    return {
        "prover": prover.party_id,
        "remote": remote_record.party_id,
        "shared_secret": key_agreement.dump_shared_secret(shared_secret).hex(),
        "proof": key_agreement.dump_proof(proof).hex(),
    }


def check_attestation(directory: PublicKeyDirectory, attestation: Dict[str, str]) -> Dict[str, object]:
    """Verify an attestation produced by :func:`attest_shared_secret`."""

    key_agreement = directory.key_agreement
    prover = _resolve_record(directory, attestation["prover"])
    remote_record = _resolve_record(directory, attestation["remote"])
    # Bad stored keys raise InvalidPublicKey to the caller.
    prover_public = directory.public_key(prover)
    remote_public = directory.public_key(remote_record)

    result: Dict[str, object] = {
        "prover": prover.party_id,
        "remote": remote_record.party_id,
        "verified": False,
        "shared_secret": None,
    }
    try:
        shared_secret = key_agreement.load_shared_secret(bytes.fromhex(attestation["shared_secret"]))
        proof = key_agreement.load_proof(bytes.fromhex(attestation["proof"]))
        verified = key_agreement.verify_shared_secret(
            prover_public,
            remote_public,
            shared_secret,
            proof,
        )
    except (VerificationFailed, ValueError):
        return result

    result["verified"] = True
    result["shared_secret"] = key_agreement.dump_shared_secret(verified).hex()
    return result


__all__ = ["attest_shared_secret", "check_attestation", "derive_shared_secret", "register_party"]
