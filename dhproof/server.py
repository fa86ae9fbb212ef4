"""FastAPI service that checks shared secret proofs for third parties.

Run with ``uvicorn dhproof.server:create_app --factory`` (``serve`` extra).
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import build_key_agreement, configure_logging, directory_path
from .directory import PartyRecord, PublicKeyDirectory
from .errors import InvalidPublicKey
from .exchange import check_attestation

logger = logging.getLogger(__name__)


class GroupResponse(BaseModel):
    parameters: Dict[str, str]


class RegisterPartyRequest(BaseModel):
    public_key: str
    alias: str | None = None


class PartyResponse(BaseModel):
    party_id: str
    alias: str | None
    public_key: str


class VerifyRequest(BaseModel):
    prover: str
    remote: str
    shared_secret: str
    proof: str


class VerifyResponse(BaseModel):
    prover: str
    remote: str
    verified: bool
    shared_secret: str | None = None


def _party_response(record: PartyRecord) -> PartyResponse:
    return PartyResponse(party_id=record.party_id, alias=record.alias, public_key=record.public_key)


def create_app(directory: PublicKeyDirectory | None = None) -> FastAPI:
    if directory is None:
        configure_logging()
        directory = PublicKeyDirectory(directory_path(), build_key_agreement())

    app = FastAPI(title="dhproof", description="Diffie-Hellman shared secret verification service")

    @app.get("/group", response_model=GroupResponse)
    def group() -> GroupResponse:
        return GroupResponse(parameters=directory.key_agreement.describe())

    @app.post("/parties", response_model=PartyResponse)
    def register_party(request: RegisterPartyRequest) -> PartyResponse:
        try:
            encoded = bytes.fromhex(request.public_key)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Public key must be hex encoded") from exc
        try:
            record = directory.add_party(encoded, request.alias)
        except InvalidPublicKey as exc:
            raise HTTPException(status_code=400, detail="Invalid public key") from exc
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        logger.info("Registered party %s", record.party_id)
        return _party_response(record)

    @app.get("/parties/{identifier}", response_model=PartyResponse)
    def get_party(identifier: str) -> PartyResponse:
        record = directory.resolve(identifier)
        if record is None:
            raise HTTPException(status_code=404, detail="Unknown party")
        return _party_response(record)

    @app.post("/verify", response_model=VerifyResponse)
    def verify(request: VerifyRequest) -> VerifyResponse:
        if directory.resolve(request.prover) is None or directory.resolve(request.remote) is None:
            raise HTTPException(status_code=404, detail="Unknown party")
        try:
            result = check_attestation(directory, request.model_dump())
        except InvalidPublicKey as exc:
            raise HTTPException(status_code=400, detail="Invalid public key") from exc
        logger.info("Verification for prover %s: %s", result["prover"], result["verified"])
        return VerifyResponse(**result)

    return app


__all__ = ["create_app"]
