"""Group selection, environment settings and logging setup."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, ValidationError

from .constants import (
    DEFAULT_GROUP,
    RFC3526_2048_G,
    RFC3526_2048_P,
    RFC3526_2048_Q,
    TOY_G,
    TOY_P,
    TOY_Q,
)
from .errors import InvalidParameters
from .fixture import FixtureKeyAgreement
from .group import GroupParameters, ModPGroup
from .keyagreement import DiffieHellman, KeyAgreement

GROUP_ENV = "DHPROOF_GROUP"
DIRECTORY_ENV = "DHPROOF_DIRECTORY"
LOG_LEVEL_ENV = "DHPROOF_LOG_LEVEL"

DEFAULT_DIRECTORY = "directory.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

PRESETS: Dict[str, GroupParameters] = {
    "rfc3526-2048": GroupParameters(p=RFC3526_2048_P, q=RFC3526_2048_Q, g=RFC3526_2048_G),
    "toy-23": GroupParameters(p=TOY_P, q=TOY_Q, g=TOY_G),
}


class GroupFile(BaseModel):
    """JSON group parameter file with hex encoded ``p``, ``q`` and ``g``."""

    p: str
    q: str
    g: str

    def to_parameters(self) -> GroupParameters:
        return GroupParameters.from_dict(self.model_dump())


def load_parameters(source: str | None = None) -> GroupParameters:
    """Resolve a preset name or a parameter file path.

    Falls back to ``$DHPROOF_GROUP`` and then to the RFC 3526 group.
    """

    source = source or os.environ.get(GROUP_ENV) or DEFAULT_GROUP
    if source in PRESETS:
        return PRESETS[source]

    path = Path(source)
    if not path.is_file():
        raise InvalidParameters(f"Unknown group '{source}'")
    try:
        group_file = GroupFile.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise InvalidParameters(f"Malformed group file '{source}'") from exc
    return group_file.to_parameters()


@lru_cache(maxsize=None)
def build_group(params: GroupParameters) -> ModPGroup:
    return ModPGroup(params)


def build_key_agreement(source: str | None = None, *, fixture: bool = False) -> KeyAgreement:
    if fixture:
        return FixtureKeyAgreement()
    return DiffieHellman(build_group(load_parameters(source)))


def directory_path() -> str:
    return os.environ.get(DIRECTORY_ENV) or DEFAULT_DIRECTORY


def configure_logging(level: str | None = None) -> None:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, name, logging.WARNING), format=LOG_FORMAT)


__all__ = [
    "GroupFile",
    "PRESETS",
    "build_group",
    "build_key_agreement",
    "configure_logging",
    "directory_path",
    "load_parameters",
]
